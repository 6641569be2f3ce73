"""Load and validate pipeline configuration YAML files."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from stagewire.errors import PipelineConfigError
from stagewire.pipeline.schema import PipelineConfig


def load_pipeline_config(path: str | Path) -> PipelineConfig:
    """Read a pipeline definition and validate it as a PipelineConfig.

    Raises:
        PipelineConfigError: If the file cannot be read, is not YAML, is empty,
            is not a mapping, or fails validation. The message names *path*.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise PipelineConfigError(f"Cannot read pipeline config {path}: {e}") from e

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise PipelineConfigError(f"Invalid YAML in pipeline config {path}: {e}") from e

    if document is None:
        raise PipelineConfigError(
            f"Pipeline config {path} is empty; expected 'apiVersion', 'kind' and 'spec'"
        )
    if not isinstance(document, dict):
        raise PipelineConfigError(
            f"Expected a YAML mapping in pipeline config {path}, got {type(document).__name__}"
        )

    try:
        return PipelineConfig.model_validate(document)
    except ValidationError as e:
        raise PipelineConfigError(f"Invalid pipeline config {path}:\n{e}") from e
