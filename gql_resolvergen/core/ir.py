"""Intermediate Representation (IR) for GraphQL schemas.

This module defines dataclasses that represent the schema type graph
in a language-agnostic way, suitable for resolver contract projection.
"""

from dataclasses import dataclass, field
from typing import Any

BUILTIN_SCALARS = ("ID", "String", "Int", "Float", "Boolean")


@dataclass
class IRTypeRef:
    """A reference to a named type, possibly wrapped in lists.

    ``name`` is always the innermost named type. When ``of_type`` is set the
    reference is a list whose elements are described by ``of_type``.
    """
    name: str
    is_optional: bool = True  # True if nullable (no ! in GraphQL)
    of_type: "IRTypeRef | None" = None

    @property
    def is_list(self) -> bool:
        return self.of_type is not None

    @property
    def list_depth(self) -> int:
        depth = 0
        ref = self
        while ref.of_type is not None:
            depth += 1
            ref = ref.of_type
        return depth

    @classmethod
    def list_of(cls, item: "IRTypeRef", is_optional: bool = True) -> "IRTypeRef":
        """Wrap an element reference in a list."""
        return cls(name=item.name, is_optional=is_optional, of_type=item)


@dataclass
class IRArgument:
    """Represents an argument to a field."""
    name: str
    type: IRTypeRef
    default_value: Any = None
    description: str | None = None


@dataclass
class IRField:
    """Represents a field in an object, interface or input type."""
    name: str
    type: IRTypeRef
    arguments: list[IRArgument] = field(default_factory=list)
    description: str | None = None


@dataclass
class IREnumValue:
    """Represents a single value in a GraphQL enum."""
    name: str
    description: str | None = None


@dataclass
class IREnum:
    """Represents a GraphQL enum type."""
    name: str
    values: list[IREnumValue]
    description: str | None = None


@dataclass
class IRObjectType:
    """Represents a GraphQL object type."""
    name: str
    fields: list[IRField]
    interfaces: list[str] = field(default_factory=list)
    description: str | None = None


@dataclass
class IRInputType:
    """Represents a GraphQL input object type."""
    name: str
    fields: list[IRField]
    description: str | None = None


@dataclass
class IRInterface:
    """Represents a GraphQL interface type."""
    name: str
    fields: list[IRField]
    # Implementing object type names, in declaration order
    implementations: list[str] = field(default_factory=list)
    description: str | None = None


@dataclass
class IRUnion:
    """Represents a GraphQL union type."""
    name: str
    members: list[str]
    description: str | None = None


@dataclass
class IRScalar:
    """Represents a GraphQL scalar type."""
    name: str
    description: str | None = None


@dataclass
class IRSchema:
    """Complete intermediate representation of a GraphQL schema."""
    scalars: dict[str, IRScalar] = field(default_factory=dict)
    enums: dict[str, IREnum] = field(default_factory=dict)
    types: dict[str, IRObjectType] = field(default_factory=dict)
    inputs: dict[str, IRInputType] = field(default_factory=dict)
    interfaces: dict[str, IRInterface] = field(default_factory=dict)
    unions: dict[str, IRUnion] = field(default_factory=dict)

    # Root operation type names, overridable by a `schema { ... }` block
    query_type: str = "Query"
    mutation_type: str = "Mutation"
    subscription_type: str = "Subscription"

    def kind_of(self, name: str) -> str | None:
        """Return the kind of a named type, or None if it is not defined."""
        if name in self.scalars or name in BUILTIN_SCALARS:
            return "scalar"
        if name in self.enums:
            return "enum"
        if name in self.types:
            return "object"
        if name in self.interfaces:
            return "interface"
        if name in self.unions:
            return "union"
        if name in self.inputs:
            return "input"
        return None

    def is_root_type(self, name: str) -> bool:
        """Check if a type is one of the root operation types."""
        return name in (self.query_type, self.mutation_type, self.subscription_type)
