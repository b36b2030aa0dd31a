"""Dialect-neutral type expressions.

The type resolver produces these trees; each dialect renderer spells
them in its own syntax.
"""

from dataclasses import dataclass
from typing import Union

# Kinds of named references
MODEL = "model"
SCALAR = "scalar"
ENUM = "enum"
INPUT = "input"
FALLBACK = "fallback"


@dataclass(frozen=True)
class NamedType:
    """A reference to a single named type.

    ``owner`` is set for input references: input declarations are scoped to
    the object type that owns them. ``declared_as`` is set when the input is
    declared under a name other than its schema name.
    """
    name: str
    kind: str
    owner: str | None = None
    declared_as: str | None = None

    @property
    def decl_name(self) -> str:
        return self.declared_as or self.name


@dataclass(frozen=True)
class ListType:
    item: "TypeExpr"


@dataclass(frozen=True)
class NullableType:
    inner: "TypeExpr"


@dataclass(frozen=True)
class UnionType:
    """A sum of named types, e.g. the models implementing an interface."""
    members: tuple["TypeExpr", ...]


TypeExpr = Union[NamedType, ListType, NullableType, UnionType]
