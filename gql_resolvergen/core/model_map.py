"""Bindings from schema type names to implementation models.

The model map tells the generator which concrete type implements each
schema type and where to import it from. Types without an entry are
resolved through the renderer's fallback naming convention.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelField:
    """A property known to exist on a model."""
    name: str
    optional: bool = False


@dataclass(frozen=True)
class ModelDescriptor:
    """Describes the implementation model bound to a schema type.

    Attributes:
        name: The model's type name in the target language
        import_path: Module path the model is imported from
        is_enum_alias: True if the model is an alias of a schema enum
        fields: Known model properties, or None if the shape is unknown
    """
    name: str
    import_path: str
    is_enum_alias: bool = False
    fields: tuple[ModelField, ...] | None = None

    def get_field(self, name: str) -> ModelField | None:
        if self.fields is None:
            return None
        for model_field in self.fields:
            if model_field.name == name:
                return model_field
        return None


@dataclass(frozen=True)
class ContextDescriptor:
    """The resolver context type and where it is imported from."""
    name: str
    import_path: str


ModelMap = dict[str, ModelDescriptor]

DEFAULT_CONTEXT_NAME = "Context"


def context_name(context: ContextDescriptor | None) -> str:
    """Return the context type name, falling back to ``Context``."""
    return context.name if context else DEFAULT_CONTEXT_NAME


def parse_model_reference(reference: str) -> tuple[str, str]:
    """Split a ``path:Name`` reference into ``(path, name)``.

    The separator is the last colon so Windows drive letters survive.
    """
    path, sep, name = reference.rpartition(":")
    if not sep or not path or not name:
        raise ValueError(f"Expected a 'path:Name' reference, got {reference!r}")
    return path, name
