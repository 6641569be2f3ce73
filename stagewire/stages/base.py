"""The stage abstraction shared by every pipeline node.

A stage is one parameterized shape: an ordered tuple of zero to four input
type tokens and an optional output token. Arity-specific behaviour (how many
parents must be bound, which input slot an edge feeds) is a function of the
tuple's length.
"""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from stagewire.errors import GraphVerificationError
from stagewire.types import TypeToken

if TYPE_CHECKING:
    from stagewire._graph import DirectedAcyclicGraph

MAX_INPUTS = 4


class Stage:
    """A named unit of computation with declared input and output types.

    Types can be declared on the class (``input_types`` / ``output_type``) or
    passed to the constructor. Stages compare and hash by identity, so the
    same instance is the same graph node.
    """

    input_types: tuple[TypeToken, ...] = ()
    output_type: TypeToken | None = None
    payload_model: type[BaseModel] | None = None
    deployable: bool = True

    def __init__(
        self,
        stage_id: str | None = None,
        *,
        input_types: Sequence[TypeToken] | None = None,
        output_type: TypeToken | None = None,
        payload_model: type[BaseModel] | None = None,
    ) -> None:
        if stage_id is not None and not stage_id.strip():
            raise ValueError("stage_id must be a non-empty string")
        self._id = stage_id or type(self).__name__
        if input_types is not None:
            self.input_types = tuple(input_types)
        else:
            self.input_types = tuple(type(self).input_types)
        if output_type is not None:
            self.output_type = output_type
        if payload_model is not None:
            self.payload_model = payload_model

        if len(self.input_types) > MAX_INPUTS:
            raise ValueError(
                f"Stage '{self._id}' declares {len(self.input_types)} inputs; "
                f"at most {MAX_INPUTS} are supported"
            )
        for token in (*self.input_types, self.output_type):
            if token is not None and not isinstance(token, TypeToken):
                raise TypeError(f"Stage '{self._id}' declares {token!r}, expected a TypeToken")

    @property
    def id(self) -> str:
        return self._id

    @property
    def arity(self) -> int:
        return len(self.input_types)

    @property
    def has_output(self) -> bool:
        return self.output_type is not None

    def self_check(self, graph: DirectedAcyclicGraph[Hashable]) -> None:
        """Assert the stage has the expected number of parents bound in *graph*.

        Multi-input stages need exactly one parent per input; stages without
        inputs must have none. Single-input stages accept any fan-in.

        Raises:
            GraphVerificationError: If the bound parent count is wrong.
        """
        if self.arity == 1:
            return
        actual = len(graph.ordered_parents(self))
        if actual != self.arity:
            raise GraphVerificationError(
                [
                    f"Stage '{self.id}' expects {self.arity} input(s) "
                    f"but {actual} are bound in the graph"
                ]
            )

    def input_slot(self, graph: DirectedAcyclicGraph[Hashable], parent: Stage) -> int:
        """Return the input slot fed by the edge ``parent -> self``.

        Single-input stages always use slot 0. Higher-arity stages bind parents
        positionally, in the order their edges were declared.
        """
        if self.arity <= 1:
            return 0
        return graph.ordered_parents(self).index(parent)

    def get_schema(self) -> dict[str, Any] | None:
        """Return the schema a buffer uses to encode this stage's output.

        Stages without output have no schema. Stages with a ``payload_model``
        derive it from the model; anything else must override this method.
        """
        if self.output_type is None:
            return None
        if self.payload_model is not None:
            return self.payload_model.model_json_schema()
        raise NotImplementedError(f"Stage '{self.id}' does not define an output schema")

    def __repr__(self) -> str:
        inputs = ", ".join(str(t) for t in self.input_types)
        output = self.output_type if self.output_type is not None else "-"
        return f"<{type(self).__name__} '{self.id}' ({inputs}) -> {output}>"
