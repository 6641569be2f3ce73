"""Fluent builder that turns stage declarations into a verified Pipeline.

Two construction modes exist. In sequential mode stages are ``append``-ed
into a single chain. The first ``edge`` call on an empty builder switches to
DAG mode, where arbitrary acyclic wiring is allowed. Mixing the two on a
populated graph is an error.

Graph construction state is held in a frozen ``_GraphState`` value. Every
call computes a complete new state before it is committed, so a call that
raises leaves the builder exactly as it was.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from stagewire._graph import DirectedAcyclicGraph
from stagewire._log import get_logger
from stagewire.buffer import SEMANTIC, SERIALIZER, BufferType, Semantic, Serializer
from stagewire.errors import EmptyPipelineError, InvalidArgumentError, InvalidStateError
from stagewire.pipeline.loader import load_pipeline_config
from stagewire.pipeline.pipeline import Pipeline
from stagewire.pipeline.schema import (
    DEFAULT_PIPELINE_NAME,
    CheckpointingMode,
    PipelineConfig,
    PipelineProperties,
    PipelineType,
    RestartStrategy,
    StateBackend,
    TimeCharacteristic,
)
from stagewire.pipeline.verify import check_stages, verify_types
from stagewire.properties import Properties
from stagewire.stages.base import Stage
from stagewire.stages.kinds import SinkStage, SourceStage, TransformStage
from stagewire.types import TypeToken

logger = get_logger("pipeline.builder")

StageOrList = Stage | Sequence[Stage]


@dataclass(frozen=True)
class _GraphState:
    graph: DirectedAcyclicGraph[Stage] = field(default_factory=DirectedAcyclicGraph)
    mode: PipelineType = PipelineType.SEQUENTIAL
    last: Stage | None = None


def _append(state: _GraphState, stage: Stage) -> _GraphState:
    if state.mode != PipelineType.SEQUENTIAL:
        raise InvalidStateError("Cannot append a stage to a DAG pipeline; use edge() instead")
    if state.graph.has_node(stage):
        raise InvalidArgumentError(f"Stage '{stage.id}' is already in the sequence")

    graph = state.graph.add_node(stage)
    if state.last is not None:
        graph = graph.add_edge(state.last, stage)
    return replace(state, graph=graph, last=stage)


def _connect(state: _GraphState, source: Stage, target: Stage, *, check_edge: bool) -> _GraphState:
    if state.mode != PipelineType.DAG:
        if not state.graph.is_empty:
            raise InvalidStateError(
                "Cannot add edges to a sequential pipeline that already has stages"
            )
        state = replace(state, mode=PipelineType.DAG, last=None)

    graph = state.graph.add_node(source).add_node(target)
    if check_edge and graph.has_edge(source, target):
        raise InvalidArgumentError(f"Edge '{source.id}' -> '{target.id}' already exists")
    return replace(state, graph=graph.add_edge(source, target))


def _as_list(stages: StageOrList) -> list[Stage]:
    if isinstance(stages, Stage):
        return [stages]
    return list(stages)


class PipelineBuilder:
    """Accumulates stages and settings, then builds an immutable Pipeline.

    Not thread-safe: drive a builder from a single definition-time caller.
    Every setter returns the builder so calls can be chained.
    """

    def __init__(self) -> None:
        self._state = _GraphState()
        self._name = DEFAULT_PIPELINE_NAME
        self._properties = PipelineProperties()
        self._stage_properties: dict[str, Properties] = {}
        self._verification = True

    # -- introspection -------------------------------------------------------

    @property
    def graph(self) -> DirectedAcyclicGraph[Stage]:
        return self._state.graph

    @property
    def pipeline_type(self) -> PipelineType:
        return self._state.mode

    @property
    def buffer_type(self) -> BufferType:
        return self._properties.buffer_type

    @property
    def name(self) -> str:
        return self._name

    @property
    def verification_enabled(self) -> bool:
        return self._verification

    # -- graph construction --------------------------------------------------

    def append(self, stage: Stage) -> PipelineBuilder:
        """Add *stage* to the end of the sequential chain."""
        self._state = _append(self._state, stage)
        return self

    def append_source(
        self,
        fn: Callable[..., Any],
        output_type: TypeToken,
        *,
        stage_id: str | None = None,
    ) -> PipelineBuilder:
        return self.append(SourceStage(stage_id, output_type=output_type, fn=fn))

    def append_transform(
        self,
        fn: Callable[..., Any],
        input_type: TypeToken,
        output_type: TypeToken,
        *,
        stage_id: str | None = None,
    ) -> PipelineBuilder:
        return self.append(
            TransformStage(stage_id, input_types=[input_type], output_type=output_type, fn=fn)
        )

    def append_sink(
        self,
        fn: Callable[..., Any],
        input_type: TypeToken,
        *,
        stage_id: str | None = None,
    ) -> PipelineBuilder:
        return self.append(SinkStage(stage_id, input_types=[input_type], fn=fn))

    def edge(self, source: StageOrList, target: StageOrList) -> PipelineBuilder:
        """Connect stages, switching an empty builder to DAG mode.

        Either side may be a single stage or a list of stages; lists connect
        every source to every target. A single pair raises if the edge exists
        already, list forms skip existing edges.
        """
        sources = _as_list(source)
        targets = _as_list(target)
        single = isinstance(source, Stage) and isinstance(target, Stage)

        state = self._state
        for s in sources:
            for t in targets:
                state = _connect(state, s, t, check_edge=single)
        self._state = state
        return self

    def add_parents(self, stage: Stage, parents: StageOrList) -> PipelineBuilder:
        """Attach *parents* to *stage* in order, ignoring edges that already exist.

        The order of *parents* fixes which input slot each parent feeds.
        """
        state = self._state
        for parent in _as_list(parents):
            state = _connect(state, parent, stage, check_edge=False)
        self._state = state
        return self

    def set_pipeline_type(self, pipeline_type: PipelineType | str) -> PipelineBuilder:
        """Switch construction mode.

        Going from DAG back to sequential is only allowed while the graph is a
        single chain; appending then continues after its last stage.
        """
        pipeline_type = PipelineType(pipeline_type)
        state = self._state
        if pipeline_type == PipelineType.SEQUENTIAL and state.mode == PipelineType.DAG:
            if not state.graph.is_sequential:
                raise InvalidStateError(
                    "The current non-sequential pipeline cannot be turned into a sequential one"
                )
            state = replace(state, last=state.graph.last_in_sequence)
        self._state = replace(state, mode=pipeline_type)
        return self

    # -- configuration -------------------------------------------------------

    def _update_properties(self, **changes: Any) -> None:
        self._properties = PipelineProperties.model_validate({**dict(self._properties), **changes})

    def set_pipeline_name(self, name: str) -> PipelineBuilder:
        if not name.strip():
            raise ValueError("Pipeline name must be a non-empty string")
        self._name = name
        return self

    def set_buffer_type(self, buffer_type: BufferType | str) -> PipelineBuilder:
        self._update_properties(buffer_type=buffer_type)
        return self

    def set_buffer_property(self, key: str, value: str) -> PipelineBuilder:
        self._update_properties(buffer_properties=self._properties.buffer_properties.set(key, value))
        return self

    def set_serializer(self, serializer: Serializer | str) -> PipelineBuilder:
        return self.set_buffer_property(SERIALIZER, str(Serializer(serializer)))

    def set_semantic(self, semantic: Semantic | str) -> PipelineBuilder:
        return self.set_buffer_property(SEMANTIC, str(Semantic(semantic)))

    def set_stage_property(self, stage: Stage | str, key: str, value: str) -> PipelineBuilder:
        stage_id = stage if isinstance(stage, str) else stage.id
        current = self._stage_properties.get(stage_id, Properties())
        self._stage_properties = {**self._stage_properties, stage_id: current.set(key, value)}
        return self

    def set_key_manager(self, key_manager: Any) -> PipelineBuilder:
        self._update_properties(key_manager=key_manager)
        return self

    def set_stream_time_characteristic(
        self, characteristic: TimeCharacteristic | str
    ) -> PipelineBuilder:
        self._update_properties(time_characteristic=characteristic)
        return self

    def set_restart_strategy(self, strategy: RestartStrategy) -> PipelineBuilder:
        self._update_properties(restart_strategy=strategy)
        return self

    def set_state_backend(self, backend: StateBackend | str) -> PipelineBuilder:
        self._update_properties(state_backend=backend)
        return self

    def enable_checkpointing(
        self,
        interval_ms: int,
        mode: CheckpointingMode | str = CheckpointingMode.EXACTLY_ONCE,
    ) -> PipelineBuilder:
        self._update_properties(checkpointing=interval_ms, checkpointing_mode=mode)
        return self

    def set_checkpointing_mode(self, mode: CheckpointingMode | str) -> PipelineBuilder:
        """Set the checkpointing mode without enabling checkpointing."""
        self._update_properties(checkpointing_mode=mode)
        return self

    def disable_pipeline_verification(self) -> PipelineBuilder:
        """Skip type verification at build time. Not recommended."""
        self._verification = False
        return self

    def configure(self, config: PipelineConfig) -> PipelineBuilder:
        """Apply a validated configuration file on top of the current settings."""
        spec = config.spec
        self.set_pipeline_name(config.metadata.name)
        self.set_buffer_type(spec.buffer.type)
        for key, value in spec.buffer.properties.items():
            self.set_buffer_property(key, value)
        if spec.buffer.serializer is not None:
            self.set_serializer(spec.buffer.serializer)
        if spec.buffer.semantic is not None:
            self.set_semantic(spec.buffer.semantic)
        if spec.checkpointing is not None:
            self.enable_checkpointing(spec.checkpointing.interval_ms, spec.checkpointing.mode)
        self.set_stream_time_characteristic(spec.time_characteristic)
        self.set_state_backend(spec.state_backend)
        self.set_restart_strategy(spec.restart)
        if not spec.verification:
            self.disable_pipeline_verification()
        for stage_id, props in spec.stages.items():
            for key, value in props.items():
                self.set_stage_property(stage_id, key, value)
        return self

    @classmethod
    def from_config(cls, path: str | Path) -> PipelineBuilder:
        """Create a builder preconfigured from a pipeline YAML file."""
        return cls().configure(load_pipeline_config(path))

    # -- build ---------------------------------------------------------------

    def build(self) -> Pipeline:
        """Verify the accumulated graph and return an immutable Pipeline.

        Raises:
            EmptyPipelineError: If no stage was added.
            GraphVerificationError: If any stage fails its self-check.
            TypeMismatchError: If verification is enabled and any edge joins
                incompatible type tokens.
        """
        graph = self._state.graph
        if graph.is_empty:
            raise EmptyPipelineError()

        check_stages(graph)

        if self._verification:
            verify_types(graph)
        else:
            logger.warning(
                "Pipeline verification has been disabled manually. No type guarantee "
                "between stages can be given. Consider enabling it again."
            )

        known_ids = {stage.id for stage in graph}
        for stage_id in self._stage_properties:
            if stage_id not in known_ids:
                logger.warning("Properties set for unknown stage '%s' are ignored", stage_id)

        key_manager = self._properties.key_manager
        logger.info(
            "Created pipeline '%s' with %d stages and %d edges",
            self._name,
            len(graph.nodes),
            len(graph.edges),
        )
        logger.info(
            "Buffer type: %s, key manager: %s",
            self._properties.buffer_type,
            type(key_manager).__name__ if key_manager is not None else "none",
        )

        return Pipeline(
            name=self._name,
            properties=self._properties,
            graph=graph,
            stage_properties=dict(self._stage_properties),
        )
