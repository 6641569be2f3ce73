"""The immutable, validated artifact handed to a deployer."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from stagewire._graph import DirectedAcyclicGraph
from stagewire.pipeline.schema import PipelineProperties
from stagewire.properties import Properties
from stagewire.stages.base import Stage
from stagewire.stages.context import StageContext


@dataclass(frozen=True)
class Pipeline:
    """A named, verified stage graph plus its global and per-stage settings.

    Created once by ``PipelineBuilder.build()``; every field is immutable so a
    pipeline can be read by any number of deployer threads.
    """

    name: str
    properties: PipelineProperties
    graph: DirectedAcyclicGraph[Stage]
    stage_properties: Mapping[str, Properties] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "stage_properties", MappingProxyType(dict(self.stage_properties))
        )

    def __hash__(self) -> int:
        # The mapping proxy is unhashable; its Properties values are not.
        return hash(
            (self.name, self.properties, self.graph, frozenset(self.stage_properties.items()))
        )

    @property
    def stages(self) -> tuple[Stage, ...]:
        return self.graph.ordered_nodes

    @property
    def deployable_stages(self) -> tuple[Stage, ...]:
        """Stages with compute logic; placeholders are excluded."""
        return tuple(s for s in self.graph.ordered_nodes if s.deployable)

    @property
    def buffer_properties(self) -> Properties:
        return self.properties.buffer_properties

    @property
    def key_manager(self) -> Any:
        return self.properties.key_manager

    def get_stage(self, stage_id: str) -> Stage:
        for stage in self.graph.ordered_nodes:
            if stage.id == stage_id:
                return stage
        raise KeyError(f"No stage with id '{stage_id}' in pipeline '{self.name}'")

    def properties_for(self, stage: Stage | str) -> Properties:
        """Per-stage properties only, empty when none were set."""
        stage_id = stage if isinstance(stage, str) else stage.id
        return self.stage_properties.get(stage_id, Properties())

    def buffer_properties_for(self, stage: Stage | str) -> Properties:
        """Global buffer properties overridden by the stage's own properties."""
        return self.buffer_properties.merged(self.properties_for(stage))

    def create_context(self, stage: Stage | str, env: Any = None) -> StageContext:
        """Build the context a deployer passes to the stage's compute callback."""
        stage_id = stage if isinstance(stage, str) else stage.id
        return StageContext(
            stage_id=stage_id,
            env=env,
            properties=self.properties_for(stage_id),
            key_manager=self.key_manager,
        )
