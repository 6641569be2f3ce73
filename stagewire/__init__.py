"""stagewire: declare stages, wire them into a DAG, verify before deploying."""

from stagewire._graph import DirectedAcyclicGraph
from stagewire.buffer import BufferType, Semantic, Serializer
from stagewire.errors import (
    CycleError,
    EmptyPipelineError,
    GraphVerificationError,
    InvalidArgumentError,
    InvalidStateError,
    PipelineConfigError,
    StagewireError,
    TypeMismatch,
    TypeMismatchError,
)
from stagewire.keymanager import KeyManager, ManagedKey, StaticKeyManager
from stagewire.pipeline import (
    CheckpointingMode,
    Pipeline,
    PipelineBuilder,
    PipelineProperties,
    PipelineType,
    RestartStrategy,
    StateBackend,
    TimeCharacteristic,
    load_pipeline_config,
    render_pipeline,
)
from stagewire.properties import Properties
from stagewire.stages import (
    PlaceholderStage,
    SinkStage,
    SourceStage,
    Stage,
    StageContext,
    TransformStage,
)
from stagewire.types import TypeToken

__version__ = "0.3.0"

__all__ = [
    "BufferType",
    "CheckpointingMode",
    "CycleError",
    "DirectedAcyclicGraph",
    "EmptyPipelineError",
    "GraphVerificationError",
    "InvalidArgumentError",
    "InvalidStateError",
    "KeyManager",
    "ManagedKey",
    "Pipeline",
    "PipelineBuilder",
    "PipelineConfigError",
    "PipelineProperties",
    "PipelineType",
    "PlaceholderStage",
    "Properties",
    "RestartStrategy",
    "Semantic",
    "Serializer",
    "SinkStage",
    "SourceStage",
    "Stage",
    "StageContext",
    "StagewireError",
    "StateBackend",
    "StaticKeyManager",
    "TimeCharacteristic",
    "TransformStage",
    "TypeMismatch",
    "TypeMismatchError",
    "TypeToken",
    "__version__",
    "load_pipeline_config",
    "render_pipeline",
]
