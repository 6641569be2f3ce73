"""Stages module: the nodes of a pipeline graph."""

from stagewire.stages.base import MAX_INPUTS, Stage
from stagewire.stages.context import StageContext
from stagewire.stages.kinds import SinkStage, SourceStage, TransformStage
from stagewire.stages.placeholder import PlaceholderStage

__all__ = [
    "MAX_INPUTS",
    "PlaceholderStage",
    "SinkStage",
    "SourceStage",
    "Stage",
    "StageContext",
    "TransformStage",
]
