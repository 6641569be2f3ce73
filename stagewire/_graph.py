"""Persistent directed acyclic graph.

Every mutating operation returns a new graph; existing values are never
touched, so intermediate graphs can be kept, compared and branched from.
Nodes are any hashable objects (stages hash by identity). Insertion order of
nodes and edges is retained for deterministic iteration but plays no part in
equality.
"""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Hashable, Iterable, Iterator
from typing import Generic, TypeVar

from stagewire.errors import CycleError, InvalidArgumentError

N = TypeVar("N", bound=Hashable)


class DirectedAcyclicGraph(Generic[N]):
    """Immutable DAG with copy-on-write mutation."""

    __slots__ = ("_nodes", "_edges", "_node_set", "_edge_set")

    _nodes: tuple[N, ...]
    _edges: tuple[tuple[N, N], ...]
    _node_set: frozenset[N]
    _edge_set: frozenset[tuple[N, N]]

    def __init__(
        self,
        nodes: Iterable[N] = (),
        edges: Iterable[tuple[N, N]] = (),
    ) -> None:
        """Build a graph from explicit nodes and edges.

        Raises:
            InvalidArgumentError: If an edge references a node not in *nodes*.
            CycleError: If the edges contain a cycle.
        """
        node_list = tuple(dict.fromkeys(nodes))
        edge_list = tuple(dict.fromkeys(edges))
        node_set = frozenset(node_list)
        for a, b in edge_list:
            if a not in node_set or b not in node_set:
                raise InvalidArgumentError(f"Edge ({a!r}, {b!r}) references an unknown node")
        _check_acyclic(node_list, edge_list)
        self._assign(node_list, edge_list)

    @classmethod
    def _trusted(
        cls, nodes: tuple[N, ...], edges: tuple[tuple[N, N], ...]
    ) -> DirectedAcyclicGraph[N]:
        # Callers have already validated endpoints and acyclicity.
        graph = cls.__new__(cls)
        graph._assign(nodes, edges)
        return graph

    def _assign(self, nodes: tuple[N, ...], edges: tuple[tuple[N, N], ...]) -> None:
        self._nodes = nodes
        self._node_set = frozenset(nodes)
        self._edges = edges
        self._edge_set = frozenset(edges)

    # -- queries -----------------------------------------------------------

    @property
    def nodes(self) -> frozenset[N]:
        return self._node_set

    @property
    def edges(self) -> frozenset[tuple[N, N]]:
        return self._edge_set

    @property
    def ordered_nodes(self) -> tuple[N, ...]:
        """Nodes in insertion order."""
        return self._nodes

    @property
    def ordered_edges(self) -> tuple[tuple[N, N], ...]:
        """Edges in insertion order."""
        return self._edges

    @property
    def is_empty(self) -> bool:
        return not self._nodes

    def has_node(self, node: N) -> bool:
        return node in self._node_set

    def has_edge(self, a: N, b: N) -> bool:
        return (a, b) in self._edge_set

    def get_parents(self, node: N) -> frozenset[N]:
        return frozenset(a for a, b in self._edges if b == node)

    def get_children(self, node: N) -> frozenset[N]:
        return frozenset(b for a, b in self._edges if a == node)

    def ordered_parents(self, node: N) -> tuple[N, ...]:
        """Parents of *node* in the order their edges were added."""
        return tuple(a for a, b in self._edges if b == node)

    @property
    def is_sequential(self) -> bool:
        """True when the graph is one simple chain.

        No node has more than one parent or child, and exactly one node is
        childless, which rules out disjoint chains and stray nodes. The empty
        graph counts as sequential.
        """
        has_child: set[N] = set()
        has_parent: set[N] = set()
        for a, b in self._edges:
            if a in has_child or b in has_parent:
                return False
            has_child.add(a)
            has_parent.add(b)
        return len(self._node_set - has_child) <= 1

    @property
    def last_in_sequence(self) -> N | None:
        """The childless end of a sequential graph, else ``None``."""
        if not self._nodes or not self.is_sequential:
            return None
        sources = {a for a, _ in self._edges}
        return next(n for n in self._nodes if n not in sources)

    @property
    def without_orphans(self) -> DirectedAcyclicGraph[N]:
        """Drop nodes with neither parents nor children.

        A graph holding a single node is returned unchanged.
        """
        if len(self._nodes) <= 1:
            return self
        connected = {n for edge in self._edges for n in edge}
        return self._trusted(tuple(n for n in self._nodes if n in connected), self._edges)

    # -- mutation ----------------------------------------------------------

    def add_node(self, node: N) -> DirectedAcyclicGraph[N]:
        if node in self._node_set:
            return self
        return self._trusted((*self._nodes, node), self._edges)

    def add_edge(self, a: N, b: N) -> DirectedAcyclicGraph[N]:
        """Return a graph with the edge ``a -> b``.

        Raises:
            InvalidArgumentError: If either endpoint is not a node.
            CycleError: If ``a`` is already reachable from ``b``.
        """
        if a not in self._node_set or b not in self._node_set:
            raise InvalidArgumentError(
                f"Cannot add edge ({a!r}, {b!r}): both endpoints must be nodes of the graph"
            )
        if (a, b) in self._edge_set:
            return self
        if self._reachable(b, a):
            raise CycleError(f"Adding edge ({a!r}, {b!r}) would create a cycle")
        return self._trusted(self._nodes, (*self._edges, (a, b)))

    def _reachable(self, start: N, target: N) -> bool:
        """Depth-first search from *start* along edges, looking for *target*."""
        children: dict[N, list[N]] = {}
        for a, b in self._edges:
            children.setdefault(a, []).append(b)

        stack = [start]
        seen: set[N] = set()
        while stack:
            node = stack.pop()
            if node == target:
                return True
            if node in seen:
                continue
            seen.add(node)
            stack.extend(children.get(node, ()))
        return False

    # -- value semantics ---------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DirectedAcyclicGraph):
            return NotImplemented
        return self._node_set == other._node_set and self._edge_set == other._edge_set

    def __hash__(self) -> int:
        return hash((self._node_set, self._edge_set))

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[N]:
        return iter(self._nodes)

    def __contains__(self, node: object) -> bool:
        return node in self._node_set

    def __repr__(self) -> str:
        return f"DirectedAcyclicGraph(nodes={len(self._nodes)}, edges={len(self._edges)})"


def _check_acyclic(nodes: tuple[N, ...], edges: tuple[tuple[N, N], ...]) -> None:
    """Raise ``CycleError`` unless Kahn's algorithm can order every node."""
    in_degree: dict[N, int] = dict.fromkeys(nodes, 0)
    children: dict[N, list[N]] = defaultdict(list)
    for a, b in edges:
        in_degree[b] += 1
        children[a].append(b)

    queue: deque[N] = deque(n for n, d in in_degree.items() if d == 0)
    while queue:
        node = queue.popleft()
        for child in children[node]:
            in_degree[child] -= 1
            if in_degree[child] == 0:
                queue.append(child)

    stuck = [n for n, d in in_degree.items() if d > 0]
    if stuck:
        raise CycleError(f"Edges contain a cycle through {stuck!r}")
