"""Source, transform and sink stages.

Each variant checks its shape at construction and exposes the compute
callback a deployer invokes. Subclass and override the callback, or pass
``fn`` to wrap a plain function.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from pydantic import BaseModel

from stagewire.stages.base import MAX_INPUTS, Stage
from stagewire.stages.context import StageContext
from stagewire.types import TypeToken


class SourceStage(Stage):
    """Supplies data into the pipeline: no inputs, one output."""

    def __init__(
        self,
        stage_id: str | None = None,
        *,
        output_type: TypeToken | None = None,
        fn: Callable[[StageContext], Any] | None = None,
        payload_model: type[BaseModel] | None = None,
    ) -> None:
        super().__init__(stage_id, output_type=output_type, payload_model=payload_model)
        self._fn = fn
        if self.input_types:
            raise ValueError(f"Source stage '{self.id}' cannot declare inputs")
        if self.output_type is None:
            raise ValueError(f"Source stage '{self.id}' must declare an output type")

    def main(self, context: StageContext) -> Any:
        if self._fn is None:
            raise NotImplementedError(f"Source stage '{self.id}' has no main()")
        return self._fn(context)


class TransformStage(Stage):
    """Combines one to four upstream streams into one typed output."""

    def __init__(
        self,
        stage_id: str | None = None,
        *,
        input_types: Sequence[TypeToken] | None = None,
        output_type: TypeToken | None = None,
        fn: Callable[..., Any] | None = None,
        payload_model: type[BaseModel] | None = None,
    ) -> None:
        super().__init__(
            stage_id,
            input_types=input_types,
            output_type=output_type,
            payload_model=payload_model,
        )
        self._fn = fn
        if not 1 <= self.arity <= MAX_INPUTS:
            raise ValueError(
                f"Transform stage '{self.id}' needs 1 to {MAX_INPUTS} inputs, got {self.arity}"
            )
        if self.output_type is None:
            raise ValueError(f"Transform stage '{self.id}' must declare an output type")

    def transform(self, context: StageContext, *streams: Any) -> Any:
        if self._fn is None:
            raise NotImplementedError(f"Transform stage '{self.id}' has no transform()")
        return self._fn(context, *streams)


class SinkStage(Stage):
    """Terminal consumer of one to four streams; produces no output."""

    def __init__(
        self,
        stage_id: str | None = None,
        *,
        input_types: Sequence[TypeToken] | None = None,
        fn: Callable[..., Any] | None = None,
    ) -> None:
        super().__init__(stage_id, input_types=input_types)
        self._fn = fn
        if not 1 <= self.arity <= MAX_INPUTS:
            raise ValueError(
                f"Sink stage '{self.id}' needs 1 to {MAX_INPUTS} inputs, got {self.arity}"
            )
        if self.output_type is not None:
            raise ValueError(f"Sink stage '{self.id}' cannot declare an output type")

    def main(self, context: StageContext, *streams: Any) -> None:
        if self._fn is None:
            raise NotImplementedError(f"Sink stage '{self.id}' has no main()")
        self._fn(context, *streams)
