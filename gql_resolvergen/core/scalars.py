"""Scalar type mapping for resolver contract generation.

Maps GraphQL scalars to the type spelled in the generated declarations.
The built-in scalars have fixed spellings; custom scalars default to
``any`` unless registered or bound in the model map.

Example usage:
    from gql_resolvergen.core.scalars import ScalarRegistry

    registry = ScalarRegistry()
    registry.register("DateTime", "string")

    registry.target_type("DateTime")  # "string"
    registry.target_type("JSON")      # "any"
"""

BUILTIN_SCALAR_TYPES = {
    "ID": "string",
    "String": "string",
    "Int": "number",
    "Float": "number",
    "Boolean": "boolean",
}

UNKNOWN_SCALAR_TYPE = "any"


class ScalarRegistry:
    """Registry of GraphQL scalar to target type spellings.

    TypeScript and Flow spell primitives identically, so one registry
    serves every dialect.

    Example:
        registry = ScalarRegistry({"DateTime": "string"})
        registry.target_type("Int")  # "number"
    """

    def __init__(self, mapping: dict[str, str] | None = None):
        self._types: dict[str, str] = dict(BUILTIN_SCALAR_TYPES)
        for name, target in (mapping or {}).items():
            self.register(name, target)

    def register(self, name: str, target_type: str):
        """Register the target spelling for a scalar."""
        self._types[name] = target_type

    def unregister(self, name: str):
        """Remove a custom scalar mapping. Built-ins fall back to their defaults."""
        self._types.pop(name, None)
        if name in BUILTIN_SCALAR_TYPES:
            self._types[name] = BUILTIN_SCALAR_TYPES[name]

    def has(self, name: str) -> bool:
        """Check if a scalar has an explicit mapping."""
        return name in self._types

    def target_type(self, name: str) -> str:
        """Return the target spelling for a scalar."""
        return self._types.get(name, UNKNOWN_SCALAR_TYPE)

    def list_scalars(self) -> list[str]:
        """List all mapped scalar names."""
        return list(self._types.keys())
