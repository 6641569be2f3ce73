"""Tests for pipeline configuration files."""

from __future__ import annotations

import textwrap

import pytest
from pydantic import ValidationError

from stagewire import (
    BufferType,
    CheckpointingMode,
    PipelineBuilder,
    StateBackend,
    TimeCharacteristic,
)
from stagewire.errors import PipelineConfigError
from stagewire.pipeline.loader import load_pipeline_config
from stagewire.pipeline.schema import PipelineConfig

FULL_CONFIG = textwrap.dedent("""\
    apiVersion: stagewire/v1
    kind: Pipeline
    metadata:
      name: tweet-pipeline
      description: Reads tweets and stores them
    spec:
      buffer:
        type: rabbitmq
        serializer: bson
        semantic: at-least-once
        properties:
          host: localhost
      checkpointing:
        interval_ms: 2000
        mode: at-least-once
      time_characteristic: ingestion-time
      state_backend: filesystem
      restart:
        strategy: fixed-delay
        attempts: 3
        delay_seconds: 10
      verification: false
      stages:
        source:
          topic: tweets
""")


def _write(tmp_path, content: str):
    path = tmp_path / "pipeline.yaml"
    path.write_text(content)
    return path


class TestPipelineConfigSchema:
    def test_minimal(self):
        config = PipelineConfig.model_validate({"apiVersion": "stagewire/v1", "kind": "Pipeline"})
        assert config.metadata.name == "stagewire pipeline"
        assert config.spec.buffer.type == BufferType.KAFKA
        assert config.spec.checkpointing is None
        assert config.spec.verification is True

    def test_wrong_kind(self):
        with pytest.raises(ValidationError):
            PipelineConfig.model_validate({"apiVersion": "stagewire/v1", "kind": "Compose"})

    def test_unknown_api_version(self):
        with pytest.raises(ValidationError):
            PipelineConfig.model_validate({"apiVersion": "stagewire/v2", "kind": "Pipeline"})

    def test_blank_stage_id(self):
        with pytest.raises(ValidationError, match="non-empty stage id"):
            PipelineConfig.model_validate(
                {
                    "apiVersion": "stagewire/v1",
                    "kind": "Pipeline",
                    "spec": {"stages": {" ": {"k": "v"}}},
                }
            )


class TestPipelineLoader:
    def test_load_valid(self, tmp_path):
        config = load_pipeline_config(_write(tmp_path, FULL_CONFIG))
        assert config.metadata.name == "tweet-pipeline"
        assert config.spec.checkpointing.interval_ms == 2000
        assert config.spec.restart.attempts == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(PipelineConfigError, match="Cannot read"):
            load_pipeline_config(tmp_path / "nonexistent.yaml")

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(PipelineConfigError, match="Invalid YAML"):
            load_pipeline_config(_write(tmp_path, "spec: [unclosed"))

    def test_empty_document(self, tmp_path):
        with pytest.raises(PipelineConfigError, match="is empty"):
            load_pipeline_config(_write(tmp_path, "# nothing here\n"))

    def test_not_a_mapping(self, tmp_path):
        with pytest.raises(PipelineConfigError, match="Expected a YAML mapping"):
            load_pipeline_config(_write(tmp_path, "- a\n- b\n"))

    def test_validation_error(self, tmp_path):
        content = textwrap.dedent("""\
            apiVersion: stagewire/v1
            kind: Pipeline
            spec:
              checkpointing:
                interval_ms: 0
        """)
        with pytest.raises(PipelineConfigError, match="Invalid pipeline config"):
            load_pipeline_config(_write(tmp_path, content))


class TestFromConfig:
    def test_settings_applied(self, tmp_path, source, caplog_stagewire):
        builder = PipelineBuilder.from_config(_write(tmp_path, FULL_CONFIG))
        assert builder.name == "tweet-pipeline"
        assert builder.buffer_type == BufferType.RABBITMQ
        assert not builder.verification_enabled

        pipeline = builder.append(source).build()
        props = pipeline.properties
        assert props.checkpointing == 2000
        assert props.checkpointing_mode == CheckpointingMode.AT_LEAST_ONCE
        assert props.time_characteristic == TimeCharacteristic.INGESTION_TIME
        assert props.state_backend == StateBackend.FILESYSTEM
        assert props.restart_strategy.strategy == "fixed-delay"
        assert pipeline.buffer_properties.to_dict() == {
            "host": "localhost",
            "serializer": "bson",
            "semantic": "at-least-once",
        }
        assert pipeline.properties_for(source)["topic"] == "tweets"

    def test_configure_keeps_unset_defaults(self, source):
        config = PipelineConfig.model_validate({"apiVersion": "stagewire/v1", "kind": "Pipeline"})
        pipeline = PipelineBuilder().configure(config).append(source).build()
        assert pipeline.name == "stagewire pipeline"
        assert not pipeline.properties.checkpointing_enabled
        assert len(pipeline.buffer_properties) == 0

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(PipelineConfigError):
            PipelineBuilder.from_config(tmp_path / "missing.yaml")
