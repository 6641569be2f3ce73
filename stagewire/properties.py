"""Immutable string property maps used for buffer and stage configuration."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema


class Properties(Mapping[str, str]):
    """Read-only mapping of string keys to string values.

    ``set`` and ``merged`` return new instances; an existing instance never
    changes after creation.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, str] | None = None, **kwargs: str) -> None:
        merged = dict(data or {})
        merged.update(kwargs)
        for key, value in merged.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise TypeError(f"Property {key!r} must map a string to a string, got {value!r}")
        self._data: dict[str, str] = merged

    def set(self, key: str, value: str) -> Properties:
        return Properties({**self._data, key: value})

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        return self._data.get(key, default)

    def merged(self, overrides: Mapping[str, str]) -> Properties:
        """Return a copy where keys from *overrides* win."""
        return Properties({**self._data, **overrides})

    def to_dict(self) -> dict[str, str]:
        return dict(self._data)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __hash__(self) -> int:
        return hash(frozenset(self._data.items()))

    def __repr__(self) -> str:
        return f"Properties({self._data!r})"

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: GetCoreSchemaHandler) -> CoreSchema:
        # Validate as dict[str, str], then freeze.
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.dict_schema(core_schema.str_schema(), core_schema.str_schema()),
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value: value.to_dict()
            ),
        )
