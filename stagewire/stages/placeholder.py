"""Stage standing in for a buffer that already exists outside the pipeline."""

from __future__ import annotations

from pydantic import BaseModel

from stagewire.stages.context import StageContext
from stagewire.stages.kinds import SourceStage
from stagewire.types import TypeToken


class PlaceholderStage(SourceStage):
    """Asserts that a buffer named *stage_id* already holds *output_type* data.

    It takes part in edges and type verification like any source, but has no
    compute body and is skipped when deploying.
    """

    deployable = False

    def __init__(
        self,
        stage_id: str,
        output_type: TypeToken,
        *,
        payload_model: type[BaseModel] | None = None,
    ) -> None:
        if not stage_id:
            raise ValueError("A placeholder stage needs the id of the existing buffer")
        super().__init__(stage_id, output_type=output_type, payload_model=payload_model)

    def main(self, context: StageContext) -> None:
        raise NotImplementedError(
            f"Placeholder stage '{self.id}' reads an existing buffer and has nothing to run"
        )
