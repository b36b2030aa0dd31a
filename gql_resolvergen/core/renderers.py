"""Dialect renderers for projected resolver declarations.

Each renderer spells a ``Projection`` in one static-type dialect using
Jinja2 templates. Renderers only decide syntax and naming; every
association, deduplication and type resolution decision has already been
made by the projector.

Supports custom templates via the template_dir parameter:
    renderer = TypeScriptRenderer(template_dir="./my_templates")

Template lookup order:
1. User's template directory (if provided)
2. Package default templates
"""

from pathlib import Path
from typing import Protocol, runtime_checkable

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from .defaults import DefaultResolver
from .model_map import context_name
from .projector import (
    FALLBACK_ROOT,
    ArgumentBag,
    Discriminator,
    ProjectedEnum,
    ProjectedInput,
    ProjectedObject,
    Projection,
    ResolverSignature,
)
from .scalars import ScalarRegistry
from .type_expr import (
    ENUM,
    FALLBACK,
    INPUT,
    SCALAR,
    ListType,
    NamedType,
    NullableType,
    TypeExpr,
    UnionType,
)

NOT_IMPLEMENTED = "throw new Error('Resolver not implemented')"


def create_environment(template_dir: str | None = None) -> Environment:
    """Build the Jinja2 environment; custom templates take precedence."""
    loaders = []
    if template_dir:
        template_path = Path(template_dir)
        if template_path.is_dir():
            loaders.append(FileSystemLoader(str(template_path)))
    loaders.append(PackageLoader("gql_resolvergen", "templates"))

    return Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


@runtime_checkable
class DialectRenderer(Protocol):
    """Protocol for target dialect renderers.

    Implement this protocol to add a target dialect. A renderer receives
    the projector's output and must not recompute any of it.

    Attributes:
        name: Dialect name used on the command line and in config
        file_extension: Extension of generated files (e.g. ".ts")
        prettier_parser: Parser name passed to prettier when formatting
    """

    name: str
    file_extension: str
    prettier_parser: str

    def render(self, projection: Projection) -> str:
        """Render the full declaration set."""
        ...

    def render_scaffold(
        self, projection: Projection, type_name: str, generated_import: str
    ) -> str:
        """Render an implementation stub for one object type."""
        ...

    def render_scaffold_index(self, projection: Projection, generated_import: str) -> str:
        """Render the module that assembles every scaffolded resolver."""
        ...

    def type_expr(self, expr: TypeExpr) -> str:
        """Spell a type expression."""
        ...


class TypeScriptRenderer:
    """Renders declarations as TypeScript namespaces.

    Every schema type gets a ``<Type>Resolvers`` namespace, which scopes
    its input types, argument bags and resolver types.
    """

    name = "typescript"
    file_extension = ".ts"
    prettier_parser = "typescript"

    template = "typescript.ts.j2"
    scaffold_template = "typescript_scaffold.ts.j2"
    scaffold_index_template = "typescript_scaffold_index.ts.j2"

    def __init__(self, scalars: ScalarRegistry | None = None, template_dir: str | None = None):
        self.scalars = scalars or ScalarRegistry()
        self.env = create_environment(template_dir)

    def render(self, projection: Projection) -> str:
        template = self.env.get_template(self.template)
        return template.render(p=projection, r=self, context=context_name(projection.header.context))

    def render_scaffold(
        self, projection: Projection, type_name: str, generated_import: str
    ) -> str:
        obj = projection.get_object(type_name)
        if obj is None:
            raise KeyError(type_name)
        template = self.env.get_template(self.scaffold_template)
        return template.render(obj=obj, r=self, generated_import=generated_import)

    def render_scaffold_index(self, projection: Projection, generated_import: str) -> str:
        template = self.env.get_template(self.scaffold_index_template)
        return template.render(p=projection, r=self, generated_import=generated_import)

    # Naming

    def namespace(self, type_name: str) -> str:
        return f"{type_name}Resolvers"

    def fallback_name(self, type_name: str) -> str:
        return f"{self.namespace(type_name)}.Model"

    def input_name(self, projected: ProjectedInput) -> str:
        return projected.decl_name

    def arg_bag_name(self, bag: ArgumentBag) -> str:
        return f"Args{bag.decl_name}"

    def resolver_name(self, sig: ResolverSignature) -> str:
        return f"{sig.decl_name}Resolver"

    def shape_name(self, type_name: str) -> str:
        return f"{self.namespace(type_name)}.Type"

    def interface_fields_name(self, type_name: str) -> str:
        return f"{self.namespace(type_name)}.InterfaceType"

    # Types

    def type_expr(self, expr: TypeExpr) -> str:
        if isinstance(expr, NullableType):
            return f"{self.type_expr(expr.inner)} | null"
        if isinstance(expr, ListType):
            return f"Array<{self.type_expr(expr.item)}>"
        if isinstance(expr, UnionType):
            if not expr.members:
                return "never"
            return " | ".join(self.type_expr(member) for member in expr.members)
        return self._named(expr)

    def _named(self, expr: NamedType) -> str:
        if expr.kind == SCALAR:
            return self.scalars.target_type(expr.name)
        if expr.kind == INPUT:
            return f"{self.namespace(expr.owner)}.{expr.decl_name}"
        if expr.kind == FALLBACK:
            return self.fallback_name(expr.name)
        # Models and enums are spelled by name
        return expr.name

    def enum_type(self, enum: ProjectedEnum) -> str:
        if not enum.values:
            return "never"
        return " | ".join(f"'{value}'" for value in enum.values)

    def fallback_body(self, obj: ProjectedObject) -> str:
        return "undefined" if obj.fallback_model == FALLBACK_ROOT else "{}"

    def args_type(self, sig: ResolverSignature) -> str:
        if sig.args is None:
            return "{}"
        return f"{self.namespace(sig.owner)}.{self.arg_bag_name(sig.args)}"

    def parameters(self, sig: ResolverSignature, context: str) -> str:
        return (
            f"(parent: {self.type_expr(sig.parent)}, args: {self.args_type(sig)}, "
            f"ctx: {context}, info: GraphQLResolveInfo)"
        )

    def resolver_type(self, sig: ResolverSignature, context: str) -> str:
        returns = self.type_expr(sig.returns)
        params = self.parameters(sig, context)
        if sig.streaming:
            return (
                "{\n"
                f"    subscribe: {params} => AsyncIterator<{returns}> | Promise<AsyncIterator<{returns}>>\n"
                f"    resolve?: {params} => {returns} | Promise<{returns}>\n"
                "  }"
            )
        return f"{params} => {returns} | Promise<{returns}>"

    def interface_method(self, sig: ResolverSignature, context: str) -> str:
        # Method syntax keeps parameters bivariant so implementers can extend it
        returns = self.type_expr(sig.returns)
        return f"{sig.field_name}{self.parameters(sig, context)}: {returns} | Promise<{returns}>"

    def discriminator(self, discriminator: Discriminator, context: str) -> str:
        optional = "" if discriminator.required else "?"
        if discriminator.name == "__resolveType":
            fn = "GraphQLTypeResolver"
        else:
            fn = "GraphQLIsTypeOfFn"
        return f"{discriminator.name}{optional}: {fn}<{self.type_expr(discriminator.over)}, {context}>"

    def extends_clause(self, obj: ProjectedObject) -> str:
        if not obj.interfaces:
            return ""
        return " extends " + ", ".join(self.interface_fields_name(name) for name in obj.interfaces)

    def default_resolver(self, default: DefaultResolver) -> str:
        parent = self.type_expr(default.parent)
        name = default.field_name
        if default.optional:
            return f"(parent: {parent}) => (parent.{name} === undefined ? null : parent.{name})"
        return f"(parent: {parent}) => parent.{name}"

    def stub(self, sig: ResolverSignature) -> str:
        body = f"(parent, args, ctx, info) => {{\n    {NOT_IMPLEMENTED}\n  }}"
        if sig.streaming:
            return f"{{\n    subscribe: {body},\n  }}"
        return body


class FlowRenderer:
    """Renders declarations as Flow types.

    Flow has no namespaces, so every declaration name is prefixed with its
    owning type, e.g. ``User_Args_Posts`` or ``A_Filter``.

    Object shapes do not extend ``<Interface>_InterfaceResolvers``. Flow
    properties are invariant, and an implementer's resolver takes a
    narrower parent than the interface's, so each shape stands alone with
    its own field declarations.
    """

    name = "flow"
    file_extension = ".js"
    prettier_parser = "flow"

    template = "flow.js.j2"
    scaffold_template = "flow_scaffold.js.j2"
    scaffold_index_template = "flow_scaffold_index.js.j2"

    def __init__(self, scalars: ScalarRegistry | None = None, template_dir: str | None = None):
        self.scalars = scalars or ScalarRegistry()
        self.env = create_environment(template_dir)

    def render(self, projection: Projection) -> str:
        template = self.env.get_template(self.template)
        return template.render(p=projection, r=self, context=context_name(projection.header.context))

    def render_scaffold(
        self, projection: Projection, type_name: str, generated_import: str
    ) -> str:
        obj = projection.get_object(type_name)
        if obj is None:
            raise KeyError(type_name)
        template = self.env.get_template(self.scaffold_template)
        return template.render(obj=obj, r=self, generated_import=generated_import)

    def render_scaffold_index(self, projection: Projection, generated_import: str) -> str:
        template = self.env.get_template(self.scaffold_index_template)
        return template.render(p=projection, r=self, generated_import=generated_import)

    # Naming

    def fallback_name(self, type_name: str) -> str:
        return f"{type_name}_Model"

    def defaults_name(self, type_name: str) -> str:
        return f"{type_name}_defaultResolvers"

    def input_name(self, projected: ProjectedInput) -> str:
        return f"{projected.owner}_{projected.decl_name}"

    def arg_bag_name(self, bag: ArgumentBag) -> str:
        return f"{bag.owner}_Args_{bag.decl_name}"

    def resolver_name(self, sig: ResolverSignature) -> str:
        return f"{sig.owner}_{sig.decl_name}_Resolver"

    def shape_name(self, type_name: str) -> str:
        return f"{type_name}_Resolvers"

    def interface_fields_name(self, type_name: str) -> str:
        return f"{type_name}_InterfaceResolvers"

    # Types

    def type_expr(self, expr: TypeExpr) -> str:
        if isinstance(expr, NullableType):
            inner = self.type_expr(expr.inner)
            if isinstance(expr.inner, UnionType) and len(expr.inner.members) > 1:
                inner = f"({inner})"
            return f"?{inner}"
        if isinstance(expr, ListType):
            return f"Array<{self.type_expr(expr.item)}>"
        if isinstance(expr, UnionType):
            if not expr.members:
                return "empty"
            return " | ".join(self.type_expr(member) for member in expr.members)
        if expr.kind == SCALAR:
            return self.scalars.target_type(expr.name)
        if expr.kind == INPUT:
            return f"{expr.owner}_{expr.decl_name}"
        if expr.kind == FALLBACK:
            return self.fallback_name(expr.name)
        return expr.name

    def _operand(self, expr: TypeExpr) -> str:
        """Spell an expression so it can be a member of a larger union."""
        spelled = self.type_expr(expr)
        if isinstance(expr, NullableType):
            return f"({spelled})"
        return spelled

    def enum_type(self, enum: ProjectedEnum) -> str:
        if not enum.values:
            return "empty"
        return " | ".join(f"'{value}'" for value in enum.values)

    def fallback_body(self, obj: ProjectedObject) -> str:
        return "void" if obj.fallback_model == FALLBACK_ROOT else "{}"

    def args_type(self, sig: ResolverSignature) -> str:
        if sig.args is None:
            return "{}"
        return self.arg_bag_name(sig.args)

    def parameters(self, sig: ResolverSignature, context: str) -> str:
        return (
            f"(parent: {self.type_expr(sig.parent)}, args: {self.args_type(sig)}, "
            f"ctx: {context}, info: GraphQLResolveInfo)"
        )

    def returns(self, expr: TypeExpr) -> str:
        return f"{self._operand(expr)} | Promise<{self.type_expr(expr)}>"

    def resolver_type(self, sig: ResolverSignature, context: str) -> str:
        params = self.parameters(sig, context)
        if sig.streaming:
            returns = self.type_expr(sig.returns)
            return (
                "{|\n"
                f"  subscribe: {params} => AsyncIterator<{returns}> | Promise<AsyncIterator<{returns}>>,\n"
                f"  resolve?: {params} => {self.returns(sig.returns)},\n"
                "|}"
            )
        return f"{params} => {self.returns(sig.returns)}"

    def discriminator(self, discriminator: Discriminator, context: str) -> str:
        optional = "" if discriminator.required else "?"
        params = f"(value: {self.type_expr(discriminator.over)}, context: {context}, info: GraphQLResolveInfo)"
        if discriminator.name == "__resolveType":
            returns = "?string | Promise<?string>"
        else:
            returns = "boolean | Promise<boolean>"
        return f"{discriminator.name}{optional}: {params} => {returns}"

    def default_resolver(self, default: DefaultResolver) -> str:
        parent = self.type_expr(default.parent)
        name = default.field_name
        if default.optional:
            return f"(parent: {parent}) => (parent.{name} === undefined ? null : parent.{name})"
        return f"(parent: {parent}) => parent.{name}"

    def stub(self, sig: ResolverSignature) -> str:
        body = f"(parent, args, ctx, info) => {{\n    {NOT_IMPLEMENTED}\n  }}"
        if sig.streaming:
            return f"{{\n    subscribe: {body},\n  }}"
        return body


RENDERERS: dict[str, type] = {
    TypeScriptRenderer.name: TypeScriptRenderer,
    FlowRenderer.name: FlowRenderer,
}


def get_renderer(
    language: str,
    scalars: ScalarRegistry | None = None,
    template_dir: str | None = None,
) -> DialectRenderer:
    """Return the renderer registered for a dialect name."""
    try:
        renderer_cls = RENDERERS[language]
    except KeyError:
        raise ValueError(
            f"Unsupported language {language!r}, expected one of: {', '.join(RENDERERS)}"
        ) from None
    return renderer_cls(scalars=scalars, template_dir=template_dir)
