"""Selectors and property keys for the buffers that connect stages.

The transport itself lives outside stagewire; a deployer resolves one buffer
per producing stage, named after the stage id, and configures it with
``Pipeline.buffer_properties_for(stage)``.
"""

from __future__ import annotations

from enum import StrEnum

SERIALIZER = "serializer"
SEMANTIC = "semantic"


class BufferType(StrEnum):
    KAFKA = "kafka"
    RABBITMQ = "rabbitmq"


class Serializer(StrEnum):
    JSON = "json"
    BSON = "bson"
    KRYO = "kryo"
    AVRO = "avro"


class Semantic(StrEnum):
    """Delivery guarantee requested from a Kafka buffer."""

    NONE = "none"
    AT_LEAST_ONCE = "at-least-once"
    EXACTLY_ONCE = "exactly-once"
