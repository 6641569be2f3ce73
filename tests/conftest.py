"""Shared test fixtures."""

from __future__ import annotations

import logging

import pytest

from stagewire import PipelineBuilder, SinkStage, SourceStage, TransformStage, TypeToken

STRING = TypeToken("String")
NUMBER = TypeToken("Number")


@pytest.fixture()
def builder() -> PipelineBuilder:
    return PipelineBuilder()


@pytest.fixture()
def source() -> SourceStage:
    return SourceStage("source", output_type=STRING)


@pytest.fixture()
def transform() -> TransformStage:
    return TransformStage("transform", input_types=[STRING], output_type=STRING)


@pytest.fixture()
def sink() -> SinkStage:
    return SinkStage("sink", input_types=[STRING])


@pytest.fixture()
def caplog_stagewire(caplog):
    """Attach caplog's handler to the ``stagewire`` logger, which doesn't propagate."""
    root = logging.getLogger("stagewire")
    root.addHandler(caplog.handler)
    yield caplog
    root.removeHandler(caplog.handler)
