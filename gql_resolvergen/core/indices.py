"""Cross-reference indices over the schema type graph.

All registries are flat mappings keyed by type name. Traversal always goes
through a name lookup, so the many-to-many relation between object types
and input types never needs nested references.
"""

from dataclasses import dataclass, field

from .ir import IRInputType, IRSchema


@dataclass
class SchemaIndices:
    """Registries derived from an IRSchema, built once per generation run."""
    # Input type name -> definition
    input_types: dict[str, IRInputType] = field(default_factory=dict)
    # Object/interface name -> input type names referenced by its field
    # arguments, in first-seen order. Duplicates are kept on purpose.
    type_inputs: dict[str, list[str]] = field(default_factory=dict)
    # Interface name -> implementing object type names
    interfaces: dict[str, list[str]] = field(default_factory=dict)
    # Union name -> member object type names
    unions: dict[str, list[str]] = field(default_factory=dict)

    def possible_types(self, type_name: str) -> list[str]:
        """Return every object type the given object may be resolved as.

        Covers the implementers of all interfaces and members of all unions
        the type takes part in, in first-seen order.
        """
        possible: list[str] = []
        groups = list(self.interfaces.values()) + list(self.unions.values())
        for members in groups:
            if type_name in members:
                for member in members:
                    if member not in possible:
                        possible.append(member)
        return possible


def build_indices(schema: IRSchema) -> SchemaIndices:
    """Build the input, association, interface and union registries."""
    indices = SchemaIndices(input_types=dict(schema.inputs))

    object_like = list(schema.types.values()) + list(schema.interfaces.values())
    for ir_type in object_like:
        referenced = [
            arg.type.name
            for ir_field in ir_type.fields
            for arg in ir_field.arguments
            if arg.type.name in schema.inputs
        ]
        if referenced:
            indices.type_inputs[ir_type.name] = referenced

    for interface in schema.interfaces.values():
        if interface.implementations:
            indices.interfaces[interface.name] = list(interface.implementations)
        else:
            indices.interfaces[interface.name] = [
                ir_type.name
                for ir_type in schema.types.values()
                if interface.name in ir_type.interfaces
            ]

    for union in schema.unions.values():
        indices.unions[union.name] = list(union.members)

    return indices
