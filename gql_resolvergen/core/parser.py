"""GraphQL schema parser using graphql-core.

Parses .graphql/.graphqls files and produces an IRSchema.
"""

import logging
import os

from graphql import (
    EnumTypeDefinitionNode,
    GraphQLError,
    InputObjectTypeDefinitionNode,
    InterfaceTypeDefinitionNode,
    ListTypeNode,
    NamedTypeNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    ScalarTypeDefinitionNode,
    SchemaDefinitionNode,
    TypeNode,
    UnionTypeDefinitionNode,
    parse,
    print_ast,
)

from .errors import GeneratorError, SchemaInvariantError
from .ir import (
    IRArgument,
    IREnum,
    IREnumValue,
    IRField,
    IRInputType,
    IRInterface,
    IRObjectType,
    IRScalar,
    IRSchema,
    IRTypeRef,
    IRUnion,
)

logger = logging.getLogger(__name__)

SCHEMA_EXTENSIONS = (".graphql", ".graphqls")


class SchemaParser:
    """Parses GraphQL schema files into IR."""

    def __init__(self, schema_path: str):
        """Initialize a parser with a path to a schema file or directory."""
        self.schema_path = schema_path
        self.ir = IRSchema()
        self.current_file = ""
        self._defined: set[str] = set()

    @classmethod
    def from_string(cls, sdl: str, source_name: str = "<string>") -> IRSchema:
        """Parse SDL text directly and return the complete IR."""
        parser = cls(source_name)
        parser.current_file = source_name
        try:
            ast = parse(sdl)
        except GraphQLError as e:
            raise GeneratorError(f"Invalid schema in {source_name}: {e.message}") from e
        parser._process_ast(ast)
        parser._resolve_implementations()
        return parser.ir

    def parse_all(self) -> IRSchema:
        """Parse all schema files and return the complete IR."""
        schema_files = self._collect_schema_files()

        for file_path in schema_files:
            self.current_file = os.path.basename(file_path)
            with open(file_path) as f:
                content = f.read()
            try:
                ast = parse(content)
            except GraphQLError as e:
                logger.error("Error parsing %s", self.current_file)
                raise GeneratorError(f"Invalid schema in {self.current_file}: {e.message}") from e
            self._process_ast(ast)

        self._resolve_implementations()
        return self.ir

    def _collect_schema_files(self) -> list[str]:
        """Collect all schema files from path."""
        files = []
        if os.path.isfile(self.schema_path):
            if self.schema_path.endswith(SCHEMA_EXTENSIONS):
                files.append(self.schema_path)
        else:
            for root, _, filenames in os.walk(self.schema_path):
                for filename in filenames:
                    if filename.endswith(SCHEMA_EXTENSIONS):
                        files.append(os.path.join(root, filename))
        return sorted(files)

    def _resolve_implementations(self):
        """Record each interface's implementing types in declaration order."""
        for type_name, ir_type in self.ir.types.items():
            for interface_name in ir_type.interfaces:
                interface = self.ir.interfaces.get(interface_name)
                if interface is None:
                    raise SchemaInvariantError(
                        f"Type {type_name} implements unknown interface {interface_name}",
                        type_name,
                    )
                if type_name not in interface.implementations:
                    interface.implementations.append(type_name)

    def _process_ast(self, ast):
        """Process GraphQL AST and populate IR."""
        for definition in ast.definitions:
            if isinstance(definition, SchemaDefinitionNode):
                self._process_schema_definition(definition)
            elif isinstance(definition, ScalarTypeDefinitionNode):
                self._process_scalar(definition)
            elif isinstance(definition, EnumTypeDefinitionNode):
                self._process_enum(definition)
            elif isinstance(definition, InterfaceTypeDefinitionNode):
                self._process_interface(definition)
            elif isinstance(definition, UnionTypeDefinitionNode):
                self._process_union(definition)
            elif isinstance(definition, ObjectTypeDefinitionNode):
                self._process_object_type(definition)
            elif isinstance(definition, ObjectTypeExtensionNode):
                self._merge_extension_fields(definition)
            elif isinstance(definition, InputObjectTypeDefinitionNode):
                self._process_input_type(definition)

    def _check_unique(self, name: str):
        if name in self._defined:
            raise SchemaInvariantError(
                f"Type {name} is defined more than once ({self.current_file})", name
            )
        self._defined.add(name)

    def _process_schema_definition(self, node: SchemaDefinitionNode):
        for operation_type in node.operation_types:
            type_name = operation_type.type.name.value
            operation = operation_type.operation.value
            if operation == "query":
                self.ir.query_type = type_name
            elif operation == "mutation":
                self.ir.mutation_type = type_name
            elif operation == "subscription":
                self.ir.subscription_type = type_name

    def _process_scalar(self, node: ScalarTypeDefinitionNode):
        name = node.name.value
        self._check_unique(name)
        self.ir.scalars[name] = IRScalar(
            name=name,
            description=node.description.value if node.description else None,
        )

    def _process_enum(self, node: EnumTypeDefinitionNode):
        name = node.name.value
        self._check_unique(name)
        values = [
            IREnumValue(
                name=v.name.value,
                description=v.description.value if v.description else None,
            )
            for v in node.values or []
        ]
        self.ir.enums[name] = IREnum(
            name=name,
            values=values,
            description=node.description.value if node.description else None,
        )

    def _process_interface(self, node: InterfaceTypeDefinitionNode):
        name = node.name.value
        self._check_unique(name)
        self.ir.interfaces[name] = IRInterface(
            name=name,
            fields=self._process_fields(node.fields),
            description=node.description.value if node.description else None,
        )

    def _process_union(self, node: UnionTypeDefinitionNode):
        name = node.name.value
        self._check_unique(name)
        self.ir.unions[name] = IRUnion(
            name=name,
            members=[member.name.value for member in node.types or []],
            description=node.description.value if node.description else None,
        )

    def _process_object_type(self, node: ObjectTypeDefinitionNode):
        name = node.name.value
        self._check_unique(name)
        fields = self._process_fields(node.fields)
        interfaces = [i.name.value for i in node.interfaces or []]

        # The type may already exist from an earlier `extend type`
        if name in self.ir.types:
            existing = self.ir.types[name]
            existing_names = {f.name for f in existing.fields}
            # Base fields come first, extension fields keep their order after them
            existing.fields = [
                f for f in fields if f.name not in existing_names
            ] + existing.fields
            existing.interfaces = interfaces + [
                i for i in existing.interfaces if i not in interfaces
            ]
            if node.description:
                existing.description = node.description.value
        else:
            self.ir.types[name] = IRObjectType(
                name=name,
                fields=fields,
                interfaces=interfaces,
                description=node.description.value if node.description else None,
            )

    def _process_input_type(self, node: InputObjectTypeDefinitionNode):
        name = node.name.value
        self._check_unique(name)
        self.ir.inputs[name] = IRInputType(
            name=name,
            fields=self._process_fields(node.fields),
            description=node.description.value if node.description else None,
        )

    def _merge_extension_fields(self, node: ObjectTypeExtensionNode):
        """Merge `extend type X { ... }` fields into the existing type."""
        type_name = node.name.value
        extension_fields = self._process_fields(node.fields)
        extension_interfaces = [i.name.value for i in node.interfaces or []]

        if type_name in self.ir.types:
            existing_type = self.ir.types[type_name]
            existing_names = {f.name for f in existing_type.fields}
            for field in extension_fields:
                if field.name not in existing_names:
                    existing_type.fields.append(field)
                    existing_names.add(field.name)
            for interface in extension_interfaces:
                if interface not in existing_type.interfaces:
                    existing_type.interfaces.append(interface)
        else:
            # Type doesn't exist yet, create it
            self.ir.types[type_name] = IRObjectType(
                name=type_name,
                fields=extension_fields,
                interfaces=extension_interfaces,
            )

    def _process_fields(self, field_nodes) -> list[IRField]:
        """Process field or input value definitions into an IRField list."""
        fields = []
        for node in field_nodes or []:
            args = [
                IRArgument(
                    name=arg_node.name.value,
                    type=self._get_type_ref(arg_node.type),
                    default_value=print_ast(arg_node.default_value)
                    if arg_node.default_value
                    else None,
                    description=arg_node.description.value
                    if arg_node.description
                    else None,
                )
                for arg_node in getattr(node, "arguments", None) or []
            ]
            fields.append(
                IRField(
                    name=node.name.value,
                    type=self._get_type_ref(node.type),
                    arguments=args,
                    description=node.description.value if node.description else None,
                )
            )
        return fields

    @classmethod
    def _get_type_ref(cls, type_node: TypeNode) -> IRTypeRef:
        """Convert a type node into an IRTypeRef, keeping every list level."""
        is_optional = True

        # NonNull wrapper means not optional
        if isinstance(type_node, NonNullTypeNode):
            is_optional = False
            type_node = type_node.type

        if isinstance(type_node, ListTypeNode):
            return IRTypeRef.list_of(cls._get_type_ref(type_node.type), is_optional)

        assert isinstance(type_node, NamedTypeNode), f"Expected NamedTypeNode, got {type(type_node)}"
        return IRTypeRef(name=type_node.name.value, is_optional=is_optional)
