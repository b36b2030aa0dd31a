"""Default (pass-through) resolver synthesis.

A default resolver reads a same-named property off the parent model, which
lets an implementation spread a ``defaultResolvers`` bundle and override
only the fields with real logic. The match is a plain name heuristic: the
generator never inspects the model beyond the fields declared for it.
"""

from dataclasses import dataclass

from .ir import IRField, IRObjectType
from .model_map import ModelMap
from .type_expr import TypeExpr


@dataclass(frozen=True)
class DefaultResolver:
    """A pass-through binding for one field."""
    field_name: str
    parent: TypeExpr
    # The model property may be undefined, which is returned as null
    optional: bool = False


def should_default(ir_field: IRField) -> bool:
    """Fields with arguments always need explicit logic."""
    return not ir_field.arguments


def synthesize_default_resolvers(
    ir_type: IRObjectType,
    model_map: ModelMap,
    parent: TypeExpr,
    streaming: bool = False,
) -> list[DefaultResolver]:
    """Return the default resolvers for an object type.

    Args:
        ir_type: The object type whose fields are considered
        model_map: Model bindings; unbound types get no defaults
        parent: The resolved parent expression used in the signatures
        streaming: The fields are streaming (subscription root) fields, which
            always need an explicit subscribe function
    """
    model = model_map.get(ir_type.name)
    if model is None or streaming:
        return []

    defaults = []
    for ir_field in ir_type.fields:
        if not should_default(ir_field):
            continue
        if model.fields is None:
            # Unknown shape: the model is assumed to mirror the schema type
            defaults.append(DefaultResolver(ir_field.name, parent))
            continue
        model_field = model.get_field(ir_field.name)
        if model_field is not None:
            defaults.append(
                DefaultResolver(ir_field.name, parent, optional=model_field.optional)
            )
    return defaults
