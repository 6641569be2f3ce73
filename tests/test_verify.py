"""Tests for structural and type verification."""

from __future__ import annotations

import pytest

from stagewire import PipelineBuilder
from stagewire.errors import GraphVerificationError, TypeMismatch, TypeMismatchError
from stagewire.pipeline.verify import check_stages, find_type_mismatches, verify_types
from stagewire.stages import SinkStage, SourceStage, TransformStage
from stagewire.types import TypeToken
from tests.conftest import NUMBER, STRING


class TestTypeMismatches:
    def test_matching_chain_passes(self, source, transform, sink):
        graph = PipelineBuilder().append(source).append(transform).append(sink).graph
        assert find_type_mismatches(graph) == []
        verify_types(graph)

    def test_single_mismatch(self, source):
        numbers = SinkStage("numbers", input_types=[NUMBER])
        builder = PipelineBuilder().append(source).append(numbers)
        with pytest.raises(TypeMismatchError) as exc_info:
            builder.build()
        assert exc_info.value.mismatches == [
            TypeMismatch(
                producer="source", consumer="numbers", slot=0, produced=STRING, expected=NUMBER
            )
        ]
        assert str(exc_info.value) == (
            "Stage 'source' produces String but input 0 of stage 'numbers' expects Number"
        )

    def test_all_mismatches_reported_in_edge_order(self):
        a = SourceStage("a", output_type=NUMBER)
        b = SourceStage("b", output_type=STRING)
        x = SinkStage("x", input_types=[STRING])
        y = SinkStage("y", input_types=[NUMBER])
        builder = PipelineBuilder().edge(a, x).edge(b, y).edge(b, x)
        with pytest.raises(TypeMismatchError, match="2 type mismatches") as exc_info:
            builder.build()
        assert [(m.producer, m.consumer) for m in exc_info.value.mismatches] == [
            ("a", "x"),
            ("b", "y"),
        ]

    def test_generic_params_must_match(self):
        list_of_str = TypeToken("List", (STRING,))
        list_of_num = TypeToken("List", (NUMBER,))
        src = SourceStage("src", output_type=list_of_str)
        dst = SinkStage("dst", input_types=[list_of_num])
        with pytest.raises(TypeMismatchError, match=r"List\[String\]"):
            PipelineBuilder().append(src).append(dst).build()

    def test_producer_without_output(self, source):
        first = SinkStage("first", input_types=[STRING])
        second = SinkStage("second", input_types=[STRING])
        graph = PipelineBuilder().append(source).append(first).append(second).graph
        (mismatch,) = find_type_mismatches(graph)
        assert mismatch.produced is None
        assert "produces nothing" in str(mismatch)

    def test_multi_input_slots_follow_edge_order(self):
        strings = SourceStage("strings", output_type=STRING)
        numbers = SourceStage("numbers", output_type=NUMBER)
        join = TransformStage("join", input_types=[NUMBER, STRING], output_type=STRING)

        ok = PipelineBuilder().add_parents(join, [numbers, strings]).build()
        assert len(ok.stages) == 3

        with pytest.raises(TypeMismatchError) as exc_info:
            PipelineBuilder().add_parents(join, [strings, numbers]).build()
        assert [m.slot for m in exc_info.value.mismatches] == [0, 1]

    def test_disabled_verification_warns(self, source, caplog_stagewire):
        numbers = SinkStage("numbers", input_types=[NUMBER])
        pipeline = (
            PipelineBuilder()
            .append(source)
            .append(numbers)
            .disable_pipeline_verification()
            .build()
        )
        assert len(pipeline.stages) == 2
        assert "Pipeline verification has been disabled manually" in caplog_stagewire.text

    def test_disabled_verification_keeps_self_check(self, source):
        join = SinkStage("join", input_types=[STRING, STRING])
        builder = PipelineBuilder().edge(source, join).disable_pipeline_verification()
        with pytest.raises(GraphVerificationError):
            builder.build()


class TestCheckStages:
    def test_all_failures_collected(self):
        a = SourceStage("a", output_type=STRING)
        j1 = SinkStage("j1", input_types=[STRING, STRING])
        j2 = SinkStage("j2", input_types=[STRING, STRING, STRING])
        graph = PipelineBuilder().edge(a, [j1, j2]).graph
        with pytest.raises(GraphVerificationError, match="2 stages failed verification") as exc_info:
            check_stages(graph)
        failures = exc_info.value.failures
        assert len(failures) == 2
        assert "'j1'" in failures[0]
        assert "'j2'" in failures[1]

    def test_duplicate_ids(self):
        first = SourceStage("dup", output_type=STRING)
        second = SinkStage("dup", input_types=[STRING])
        graph = PipelineBuilder().append(first).append(second).graph
        with pytest.raises(GraphVerificationError, match="used by more than one stage"):
            check_stages(graph)

    def test_valid_graph_passes(self, source, sink):
        check_stages(PipelineBuilder().append(source).append(sink).graph)
