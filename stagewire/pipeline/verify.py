"""Structural and type verification of a pipeline graph."""

from __future__ import annotations

from stagewire._graph import DirectedAcyclicGraph
from stagewire.errors import (
    GraphVerificationError,
    TypeMismatch,
    TypeMismatchError,
)
from stagewire.stages.base import Stage


def check_stages(graph: DirectedAcyclicGraph[Stage]) -> None:
    """Run every stage's self-check, collecting all failures.

    Stage ids name buffers and property sections, so two distinct stages
    sharing an id are reported as well.

    Raises:
        GraphVerificationError: Listing each failing stage in node order.
    """
    failures: list[str] = []
    seen: set[str] = set()
    for stage in graph.ordered_nodes:
        if stage.id in seen:
            failures.append(f"Stage id '{stage.id}' is used by more than one stage")
        seen.add(stage.id)
    for stage in graph.ordered_nodes:
        try:
            stage.self_check(graph)
        except GraphVerificationError as e:
            failures.extend(e.failures)
    if failures:
        raise GraphVerificationError(failures)


def find_type_mismatches(graph: DirectedAcyclicGraph[Stage]) -> list[TypeMismatch]:
    """Compare every edge's produced token with the consumer slot it feeds.

    Edges are visited in insertion order. Edges into stages without inputs are
    left to the self-check.
    """
    mismatches: list[TypeMismatch] = []
    for producer, consumer in graph.ordered_edges:
        if consumer.arity == 0:
            continue
        slot = consumer.input_slot(graph, producer)
        if slot >= consumer.arity:
            continue
        expected = consumer.input_types[slot]
        if producer.output_type != expected:
            mismatches.append(
                TypeMismatch(
                    producer=producer.id,
                    consumer=consumer.id,
                    slot=slot,
                    produced=producer.output_type,
                    expected=expected,
                )
            )
    return mismatches


def verify_types(graph: DirectedAcyclicGraph[Stage]) -> None:
    """Raise ``TypeMismatchError`` reporting every mismatched edge at once."""
    mismatches = find_type_mismatches(graph)
    if mismatches:
        raise TypeMismatchError(mismatches)
