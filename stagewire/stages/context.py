"""Execution context handed to a stage's compute callback by a deployer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from stagewire.keymanager import KeyManager
from stagewire.properties import Properties


@dataclass(frozen=True)
class StageContext:
    """Run-time view a deployed stage gets of its pipeline.

    Attributes:
        stage_id: Id of the stage being run.
        env: Handle to the stream-processing environment (opaque to stagewire).
        properties: Per-stage properties set on the builder.
        key_manager: The pipeline's key manager, if any.
    """

    stage_id: str
    env: Any = None
    properties: Properties = field(default_factory=Properties)
    key_manager: KeyManager | None = None

    def get_property(self, key: str) -> str | None:
        return self.properties.get(key)
