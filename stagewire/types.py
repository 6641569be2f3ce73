"""Nominal type descriptors used to verify stage wiring."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TypeToken:
    """Stable, comparable descriptor of a stage's input or output payload type.

    Two tokens are equal iff their names and generic parameters match exactly.
    Tokens are only used for verification, never for serialization.
    """

    name: str
    params: tuple[TypeToken, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("TypeToken name must be a non-empty string")
        # Accept lists for convenience; store a tuple so the token stays hashable.
        object.__setattr__(self, "params", tuple(self.params))

    @classmethod
    def of(cls, tp: type, *params: TypeToken | type) -> TypeToken:
        """Build a token from an explicitly supplied class.

        The token name is the module-qualified class name; *params* may be
        tokens or further classes.
        """
        name = tp.__qualname__
        if tp.__module__ != "builtins":
            name = f"{tp.__module__}.{name}"
        return cls(
            name,
            tuple(p if isinstance(p, TypeToken) else cls.of(p) for p in params),
        )

    def __str__(self) -> str:
        if not self.params:
            return self.name
        return f"{self.name}[{', '.join(str(p) for p in self.params)}]"
