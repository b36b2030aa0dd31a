"""Resolution of schema type references to target type expressions."""

import logging

from .errors import SchemaInvariantError
from .indices import SchemaIndices
from .ir import IRSchema, IRTypeRef
from .model_map import ModelDescriptor, ModelMap
from .type_expr import (
    ENUM,
    FALLBACK,
    INPUT,
    MODEL,
    SCALAR,
    ListType,
    NamedType,
    NullableType,
    TypeExpr,
    UnionType,
)

logger = logging.getLogger(__name__)


class ImportRegistry:
    """Collects the models referenced during projection, grouped by path."""

    def __init__(self):
        self._by_path: dict[str, set[str]] = {}

    def add(self, model: ModelDescriptor):
        self._by_path.setdefault(model.import_path, set()).add(model.name)

    def grouped(self) -> dict[str, list[str]]:
        """Return ``{import_path: [model names]}`` sorted for determinism."""
        return {
            path: sorted(self._by_path[path])
            for path in sorted(self._by_path)
        }


class TypeReferenceResolver:
    """Resolves schema type references against the model map.

    Bound types resolve to their model name. Unbound types fall back to a
    conventional name the renderer declares, so the projected signatures
    still compile without an explicit binding.
    """

    def __init__(
        self,
        schema: IRSchema,
        indices: SchemaIndices,
        model_map: ModelMap,
        imports: ImportRegistry | None = None,
    ):
        self.schema = schema
        self.indices = indices
        self.model_map = model_map
        self.imports = imports if imports is not None else ImportRegistry()
        self.unbound: list[str] = []
        # {owner: {input name: declared name}} for renamed input declarations
        self.input_names: dict[str, dict[str, str]] = {}

    def declare_inputs(self, owner: str, names: dict[str, str]):
        """Record the declared names of the inputs scoped to ``owner``."""
        self.input_names[owner] = {
            name: declared for name, declared in names.items() if declared != name
        }

    def resolve(self, ref: IRTypeRef, owner: str | None = None) -> TypeExpr:
        """Resolve a possibly list-wrapped reference, keeping every nullability level."""
        if ref.of_type is not None:
            expr: TypeExpr = ListType(self.resolve(ref.of_type, owner))
        else:
            expr = self.resolve_named(ref.name, owner)
        if ref.is_optional:
            return NullableType(expr)
        return expr

    def resolve_named(self, name: str, owner: str | None = None) -> TypeExpr:
        """Resolve a bare type name."""
        kind = self.schema.kind_of(name)
        if kind is None:
            raise SchemaInvariantError(f"Reference to unknown type {name}", name)

        model = self.model_map.get(name)
        if kind == ENUM:
            return NamedType(name, ENUM)
        if model is not None and not model.is_enum_alias and kind != INPUT:
            self.imports.add(model)
            return NamedType(model.name, MODEL)
        if kind == SCALAR:
            return NamedType(name, SCALAR)
        if kind == INPUT:
            declared = self.input_names.get(owner, {}).get(name)
            return NamedType(name, INPUT, owner=owner, declared_as=declared)
        if kind == "interface":
            return self._union_of(self.indices.interfaces.get(name, []))
        if kind == "union":
            return self._union_of(self.indices.unions.get(name, []))
        return self._fallback(name)

    def resolve_parent(self, type_name: str) -> TypeExpr:
        """Resolve the parent value type of a resolver declared on ``type_name``.

        The parent of an interface field resolver is always a concrete
        implementing instance, so it resolves to the union of the
        implementing models rather than the interface's own model.
        """
        if type_name in self.schema.interfaces:
            return self._union_of(self.indices.interfaces.get(type_name, []))
        return self.resolve_named(type_name)

    def resolve_union(self, type_names: list[str]) -> TypeExpr:
        """Resolve the sum of several object types' models."""
        return self._union_of(type_names)

    def _union_of(self, type_names: list[str]) -> TypeExpr:
        members = tuple(self.resolve_named(name) for name in type_names)
        if len(members) == 1:
            return members[0]
        return UnionType(members)

    def _fallback(self, name: str) -> TypeExpr:
        if name not in self.unbound:
            self.unbound.append(name)
            if not self.schema.is_root_type(name):
                logger.warning("No model bound for type %s, using fallback declaration", name)
        return NamedType(name, FALLBACK)
