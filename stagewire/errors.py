"""Exceptions raised while defining and building a pipeline.

Every error here is a construction-time error: it is raised synchronously,
never retried, and aborts ``PipelineBuilder.build()`` without producing a
partial pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stagewire.types import TypeToken


class StagewireError(Exception):
    """Base class for all stagewire errors."""


class EmptyPipelineError(StagewireError):
    """Raised when ``build()`` is called on a builder without stages."""

    def __init__(self, message: str = "Cannot build a pipeline without stages") -> None:
        super().__init__(message)


class InvalidArgumentError(StagewireError, ValueError):
    """Raised when an operation references a missing node or duplicates one."""


class InvalidStateError(StagewireError, RuntimeError):
    """Raised when an operation is illegal in the current graph or builder state."""


class CycleError(InvalidStateError):
    """Raised when adding an edge would create a cycle."""


class GraphVerificationError(StagewireError):
    """Raised when one or more stages fail their structural self-check.

    ``failures`` holds one message per failing stage, in node insertion order.
    """

    def __init__(self, failures: list[str]) -> None:
        self.failures = list(failures)
        if len(self.failures) == 1:
            message = self.failures[0]
        else:
            lines = "\n".join(f"  - {f}" for f in self.failures)
            message = f"{len(self.failures)} stages failed verification:\n{lines}"
        super().__init__(message)


@dataclass(frozen=True)
class TypeMismatch:
    """A single producer/consumer disagreement found by the verifier."""

    producer: str
    consumer: str
    slot: int
    produced: TypeToken | None
    expected: TypeToken

    def __str__(self) -> str:
        produced = self.produced if self.produced is not None else "nothing"
        return (
            f"Stage '{self.producer}' produces {produced} but input {self.slot} "
            f"of stage '{self.consumer}' expects {self.expected}"
        )


class TypeMismatchError(StagewireError, TypeError):
    """Raised when edges connect stages with incompatible type tokens.

    ``mismatches`` lists every offending edge in edge insertion order.
    """

    def __init__(self, mismatches: list[TypeMismatch]) -> None:
        self.mismatches = list(mismatches)
        if len(self.mismatches) == 1:
            message = str(self.mismatches[0])
        else:
            lines = "\n".join(f"  - {m}" for m in self.mismatches)
            message = f"{len(self.mismatches)} type mismatches between stages:\n{lines}"
        super().__init__(message)


class PipelineConfigError(StagewireError):
    """Raised when a pipeline configuration file cannot be loaded or validated."""
