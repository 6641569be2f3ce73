"""Pipeline module: builder, verification and the immutable pipeline artifact."""

from stagewire.pipeline.builder import PipelineBuilder
from stagewire.pipeline.display import pipeline_table, render_pipeline
from stagewire.pipeline.loader import load_pipeline_config
from stagewire.pipeline.pipeline import Pipeline
from stagewire.pipeline.schema import (
    CheckpointingMode,
    PipelineConfig,
    PipelineProperties,
    PipelineType,
    RestartStrategy,
    StateBackend,
    TimeCharacteristic,
)
from stagewire.pipeline.verify import check_stages, find_type_mismatches, verify_types

__all__ = [
    "CheckpointingMode",
    "Pipeline",
    "PipelineBuilder",
    "PipelineConfig",
    "PipelineProperties",
    "PipelineType",
    "RestartStrategy",
    "StateBackend",
    "TimeCharacteristic",
    "check_stages",
    "find_type_mismatches",
    "load_pipeline_config",
    "pipeline_table",
    "render_pipeline",
    "verify_types",
]
