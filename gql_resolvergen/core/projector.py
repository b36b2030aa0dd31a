"""Projection of the schema type graph into resolver declarations.

The projector walks the schema once per declaration kind (enums, object
types, interfaces, unions, then the aggregate resolver map) and produces a
dialect-neutral ``Projection``. Renderers turn it into source text without
recomputing any association or deduplication.
"""

import logging
from dataclasses import dataclass, field

from .defaults import DefaultResolver, synthesize_default_resolvers
from .indices import SchemaIndices, build_indices
from .input_types import distinct_input_types
from .ir import IRField, IRInterface, IRObjectType, IRSchema, IRUnion
from .model_map import ContextDescriptor, ModelMap
from .type_expr import TypeExpr
from .type_resolver import ImportRegistry, TypeReferenceResolver

logger = logging.getLogger(__name__)

# Fallback model declarations for object types without a bound model
FALLBACK_EMPTY = "empty"
FALLBACK_ROOT = "root"

RESOLVE_TYPE = "__resolveType"
IS_TYPE_OF = "__isTypeOf"


def upper_first(name: str) -> str:
    """Uppercase the first character, leaving the rest untouched."""
    return name[:1].upper() + name[1:]


@dataclass
class ProjectedEnum:
    name: str
    values: list[str]


@dataclass
class ProjectedField:
    """A named member of an input declaration or argument bag."""
    name: str
    type: TypeExpr


@dataclass
class ProjectedInput:
    """An input type declared under one owning type.

    ``decl_name`` is the name the declaration uses within the owner. It is
    the schema name unless that clashes with a generated per-owner name.
    """
    owner: str
    name: str
    decl_name: str
    fields: list[ProjectedField]


@dataclass
class ArgumentBag:
    """The arguments of one field, declared as a single record type."""
    owner: str
    field_name: str
    decl_name: str
    arguments: list[ProjectedField]


@dataclass
class ResolverSignature:
    """The function contract of one field resolver.

    Streaming resolvers (subscription root fields) are a pair of functions:
    ``subscribe`` producing a sequence over time, and an optional
    ``resolve`` transforming each element.
    """
    owner: str
    field_name: str
    decl_name: str
    parent: TypeExpr
    args: ArgumentBag | None
    returns: TypeExpr
    streaming: bool = False


@dataclass
class Discriminator:
    """Binding that picks the concrete type behind an abstract value."""
    name: str
    over: TypeExpr
    required: bool


@dataclass
class ProjectedObject:
    name: str
    parent: TypeExpr
    fallback_model: str | None
    default_resolvers: list[DefaultResolver] | None
    inputs: list[ProjectedInput]
    arg_bags: list[ArgumentBag]
    resolvers: list[ResolverSignature]
    interfaces: list[str]
    discriminator: Discriminator | None

    @property
    def explicit_resolvers(self) -> list[ResolverSignature]:
        """Resolvers not covered by the default bundle."""
        defaulted = {d.field_name for d in self.default_resolvers or []}
        return [sig for sig in self.resolvers if sig.field_name not in defaulted]


@dataclass
class ProjectedInterface:
    name: str
    inputs: list[ProjectedInput]
    arg_bags: list[ArgumentBag]
    resolvers: list[ResolverSignature]
    discriminator: Discriminator


@dataclass
class ProjectedUnion:
    name: str
    discriminator: Discriminator


@dataclass
class ResolverMapEntry:
    name: str
    kind: str  # 'object', 'interface' or 'union'
    optional: bool


@dataclass
class Header:
    # {import_path: [model names]}
    imports: dict[str, list[str]]
    context: ContextDescriptor | None


@dataclass
class Projection:
    """Complete projected declaration set for one generation run."""
    header: Header
    enums: list[ProjectedEnum] = field(default_factory=list)
    objects: list[ProjectedObject] = field(default_factory=list)
    interfaces: list[ProjectedInterface] = field(default_factory=list)
    unions: list[ProjectedUnion] = field(default_factory=list)
    resolver_map: list[ResolverMapEntry] = field(default_factory=list)
    # Object types that had no model binding
    unbound: list[str] = field(default_factory=list)

    def get_object(self, name: str) -> ProjectedObject | None:
        for projected in self.objects:
            if projected.name == name:
                return projected
        return None


class DeclarationProjector:
    """Projects an IRSchema and a model map into a Projection.

    Example:
        projector = DeclarationProjector(schema, model_map, context)
        projection = projector.project()
    """

    def __init__(
        self,
        schema: IRSchema,
        model_map: ModelMap | None = None,
        context: ContextDescriptor | None = None,
        default_resolvers: bool = True,
        indices: SchemaIndices | None = None,
    ):
        self.schema = schema
        self.model_map = model_map or {}
        self.context = context
        self.default_resolvers = default_resolvers
        self.indices = indices if indices is not None else build_indices(schema)

    def project(self) -> Projection:
        """Run every projection pass and return the result."""
        imports = ImportRegistry()
        resolver = TypeReferenceResolver(self.schema, self.indices, self.model_map, imports)

        enums = self._project_enums()
        objects = [
            self._project_object(ir_type, resolver)
            for ir_type in self.schema.types.values()
        ]
        interfaces = [
            self._project_interface(interface, resolver)
            for interface in self.schema.interfaces.values()
        ]
        unions = [
            self._project_union(union, resolver)
            for union in self.schema.unions.values()
        ]
        resolver_map = self._project_resolver_map()

        logger.debug(
            "Projected %d objects, %d interfaces, %d unions",
            len(objects), len(interfaces), len(unions),
        )
        return Projection(
            header=Header(imports=imports.grouped(), context=self.context),
            enums=enums,
            objects=objects,
            interfaces=interfaces,
            unions=unions,
            resolver_map=resolver_map,
            unbound=[name for name in resolver.unbound if name in self.schema.types],
        )

    def _project_enums(self) -> list[ProjectedEnum]:
        return [
            ProjectedEnum(enum.name, [value.name for value in enum.values])
            for enum in self.schema.enums.values()
        ]

    def _project_object(
        self, ir_type: IRObjectType, resolver: TypeReferenceResolver
    ) -> ProjectedObject:
        parent = resolver.resolve_parent(ir_type.name)

        fallback_model = None
        if ir_type.name not in self.model_map:
            fallback_model = (
                FALLBACK_ROOT if self.schema.is_root_type(ir_type.name) else FALLBACK_EMPTY
            )

        streaming = ir_type.name == self.schema.subscription_type
        defaults = None
        if self.default_resolvers:
            defaults = synthesize_default_resolvers(
                ir_type, self.model_map, parent, streaming=streaming
            )

        inputs = self._project_inputs(ir_type.name, ir_type.fields, resolver)
        arg_bags, resolvers = self._project_fields(
            ir_type.name, ir_type.fields, parent, resolver, streaming
        )

        discriminator = None
        possible_types = self.indices.possible_types(ir_type.name)
        if possible_types:
            discriminator = Discriminator(
                IS_TYPE_OF, resolver.resolve_union(possible_types), required=False
            )

        return ProjectedObject(
            name=ir_type.name,
            parent=parent,
            fallback_model=fallback_model,
            default_resolvers=defaults,
            inputs=inputs,
            arg_bags=arg_bags,
            resolvers=resolvers,
            interfaces=list(ir_type.interfaces),
            discriminator=discriminator,
        )

    def _project_interface(
        self, interface: IRInterface, resolver: TypeReferenceResolver
    ) -> ProjectedInterface:
        parent = resolver.resolve_parent(interface.name)
        inputs = self._project_inputs(interface.name, interface.fields, resolver)
        arg_bags, resolvers = self._project_fields(
            interface.name, interface.fields, parent, resolver, streaming=False
        )
        return ProjectedInterface(
            name=interface.name,
            inputs=inputs,
            arg_bags=arg_bags,
            resolvers=resolvers,
            discriminator=Discriminator(RESOLVE_TYPE, parent, required=True),
        )

    def _project_union(
        self, union: IRUnion, resolver: TypeReferenceResolver
    ) -> ProjectedUnion:
        members = self.indices.unions.get(union.name, [])
        return ProjectedUnion(
            name=union.name,
            discriminator=Discriminator(
                RESOLVE_TYPE, resolver.resolve_union(members), required=False
            ),
        )

    def _project_resolver_map(self) -> list[ResolverMapEntry]:
        entries = [
            ResolverMapEntry(name, "object", optional=False)
            for name in self.schema.types
        ]
        entries.extend(
            ResolverMapEntry(name, "interface", optional=True)
            for name in self.schema.interfaces
        )
        entries.extend(
            ResolverMapEntry(name, "union", optional=True)
            for name in self.schema.unions
        )
        return entries

    def _project_inputs(
        self, owner: str, fields: list[IRField], resolver: TypeReferenceResolver
    ) -> list[ProjectedInput]:
        input_names = distinct_input_types(
            owner, self.indices.type_inputs, self.indices.input_types
        )
        reserved = reserved_names(declaration_names(fields).values())
        decl_names = input_declaration_names(input_names, reserved)
        # Registered before any field is resolved so references use the same names
        resolver.declare_inputs(owner, decl_names)

        projected = []
        for input_name in input_names:
            input_type = self.indices.input_types[input_name]
            projected.append(
                ProjectedInput(
                    owner=owner,
                    name=input_name,
                    decl_name=decl_names[input_name],
                    fields=[
                        ProjectedField(f.name, resolver.resolve(f.type, owner))
                        for f in input_type.fields
                    ],
                )
            )
        return projected

    def _project_fields(
        self,
        owner: str,
        fields: list[IRField],
        parent: TypeExpr,
        resolver: TypeReferenceResolver,
        streaming: bool,
    ) -> tuple[list[ArgumentBag], list[ResolverSignature]]:
        arg_bags = []
        resolvers = []
        decl_names = declaration_names(fields)
        for ir_field in fields:
            decl_name = decl_names[ir_field.name]
            bag = None
            if ir_field.arguments:
                bag = ArgumentBag(
                    owner=owner,
                    field_name=ir_field.name,
                    decl_name=decl_name,
                    arguments=[
                        ProjectedField(arg.name, resolver.resolve(arg.type, owner))
                        for arg in ir_field.arguments
                    ],
                )
                arg_bags.append(bag)
            resolvers.append(
                ResolverSignature(
                    owner=owner,
                    field_name=ir_field.name,
                    decl_name=decl_name,
                    parent=parent,
                    args=bag,
                    returns=resolver.resolve(ir_field.type, owner),
                    streaming=streaming,
                )
            )
        return arg_bags, resolvers


def declaration_names(fields: list[IRField]) -> dict[str, str]:
    """Map field names to declaration name stems unique within one type.

    ``posts`` and ``Posts`` both upper-case to ``Posts``; the later field
    gets a numeric suffix.
    """
    names: dict[str, str] = {}
    used: set[str] = set()
    for ir_field in fields:
        candidate = upper_first(ir_field.name)
        suffix = 2
        while candidate in used:
            candidate = f"{upper_first(ir_field.name)}{suffix}"
            suffix += 1
        used.add(candidate)
        names[ir_field.name] = candidate
    return names


# Names every owner declares for itself, whatever its fields
OWNER_NAMES = (
    "Model",
    "Type",
    "InterfaceType",
    "Resolvers",
    "InterfaceResolvers",
    "defaultResolvers",
)


def reserved_names(decl_stems) -> set[str]:
    """Per-owner names generated from the owner's field declaration stems.

    Covers both dialect conventions, ``Args<Stem>``/``<Stem>Resolver`` and
    ``Args_<Stem>``/``<Stem>_Resolver``, so the result holds for either.
    """
    reserved = set(OWNER_NAMES)
    for stem in decl_stems:
        reserved.update((f"Args{stem}", f"Args_{stem}", f"{stem}Resolver", f"{stem}_Resolver"))
    return reserved


def input_declaration_names(input_names: list[str], reserved: set[str]) -> dict[str, str]:
    """Map input type names to declaration names that avoid ``reserved``.

    A clashing input ``Model`` is declared as ``ModelInput`` (then
    ``ModelInput2`` and so on). Renamed inputs never take the name of
    another input of the same owner.
    """
    taken = set(reserved) | set(input_names)
    names: dict[str, str] = {}
    for input_name in input_names:
        if input_name not in reserved:
            names[input_name] = input_name
            continue
        base = f"{input_name}Input"
        candidate = base
        suffix = 2
        while candidate in taken:
            candidate = f"{base}{suffix}"
            suffix += 1
        taken.add(candidate)
        names[input_name] = candidate
    return names
