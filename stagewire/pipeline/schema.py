"""Pydantic models for pipeline properties and YAML pipeline configuration."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from stagewire.buffer import BufferType, Semantic, Serializer
from stagewire.properties import Properties

DEFAULT_PIPELINE_NAME = "stagewire pipeline"


class ApiVersion(StrEnum):
    V1 = "stagewire/v1"


class PipelineType(StrEnum):
    SEQUENTIAL = "sequential"
    DAG = "dag"


class CheckpointingMode(StrEnum):
    EXACTLY_ONCE = "exactly-once"
    AT_LEAST_ONCE = "at-least-once"


class TimeCharacteristic(StrEnum):
    EVENT_TIME = "event-time"
    PROCESSING_TIME = "processing-time"
    INGESTION_TIME = "ingestion-time"


class StateBackend(StrEnum):
    MEMORY = "memory"
    FILESYSTEM = "filesystem"
    ROCKSDB = "rocksdb"


class RestartStrategy(BaseModel):
    model_config = ConfigDict(frozen=True)

    strategy: Literal["no-restart", "fixed-delay", "failure-rate"] = "no-restart"
    attempts: Annotated[int, Field(ge=0)] = 0
    delay_seconds: Annotated[int, Field(ge=0)] = 0
    failure_interval_seconds: Annotated[int, Field(ge=1)] | None = None

    @model_validator(mode="after")
    def _validate_strategy(self) -> RestartStrategy:
        if self.strategy == "no-restart" and self.attempts:
            raise ValueError("'no-restart' strategy cannot declare attempts")
        if self.strategy != "no-restart" and self.attempts < 1:
            raise ValueError(f"'{self.strategy}' strategy needs at least one attempt")
        if self.strategy == "failure-rate" and self.failure_interval_seconds is None:
            raise ValueError("'failure-rate' strategy requires 'failure_interval_seconds'")
        return self

    @classmethod
    def no_restart(cls) -> RestartStrategy:
        return cls()

    @classmethod
    def fixed_delay(cls, attempts: int, delay_seconds: int) -> RestartStrategy:
        return cls(strategy="fixed-delay", attempts=attempts, delay_seconds=delay_seconds)

    def summary(self) -> str:
        if self.strategy == "no-restart":
            return self.strategy
        return f"{self.strategy}: {self.attempts} attempt(s), {self.delay_seconds}s delay"


class PipelineProperties(BaseModel):
    """Pipeline-wide settings forwarded verbatim to the deployer."""

    model_config = ConfigDict(frozen=True)

    buffer_type: BufferType = BufferType.KAFKA
    buffer_properties: Properties = Field(default_factory=Properties)
    key_manager: Any = None
    time_characteristic: TimeCharacteristic = TimeCharacteristic.EVENT_TIME
    restart_strategy: RestartStrategy = RestartStrategy()
    checkpointing: Annotated[int, Field(gt=0)] | None = None
    checkpointing_mode: CheckpointingMode = CheckpointingMode.EXACTLY_ONCE
    state_backend: StateBackend = StateBackend.MEMORY

    @property
    def checkpointing_enabled(self) -> bool:
        return self.checkpointing is not None


# -- YAML configuration ------------------------------------------------------


class BufferConfig(BaseModel):
    type: BufferType = BufferType.KAFKA
    serializer: Serializer | None = None
    semantic: Semantic | None = None
    properties: dict[str, str] = {}


class CheckpointingConfig(BaseModel):
    interval_ms: Annotated[int, Field(gt=0)]
    mode: CheckpointingMode = CheckpointingMode.EXACTLY_ONCE


class PipelineMetadata(BaseModel):
    name: str = DEFAULT_PIPELINE_NAME
    description: str = ""


class PipelineConfigSpec(BaseModel):
    buffer: BufferConfig = BufferConfig()
    checkpointing: CheckpointingConfig | None = None
    time_characteristic: TimeCharacteristic = TimeCharacteristic.EVENT_TIME
    state_backend: StateBackend = StateBackend.MEMORY
    restart: RestartStrategy = RestartStrategy()
    verification: bool = True
    stages: dict[str, dict[str, str]] = {}

    @model_validator(mode="after")
    def _validate_stage_ids(self) -> PipelineConfigSpec:
        for stage_id in self.stages:
            if not stage_id.strip():
                raise ValueError("Stage property sections need a non-empty stage id")
        return self


class PipelineConfig(BaseModel):
    apiVersion: ApiVersion
    kind: Literal["Pipeline"]
    metadata: PipelineMetadata = PipelineMetadata()
    spec: PipelineConfigSpec = PipelineConfigSpec()
