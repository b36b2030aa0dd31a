"""Exceptions raised during resolver contract generation."""


class GeneratorError(Exception):
    """Base class for all gql-resolvergen errors."""


class SchemaInvariantError(GeneratorError):
    """Raised when the schema type graph violates one of its invariants.

    Examples are a type defined twice or a field referencing a type that
    does not exist. These are expected to be rejected upstream, so they are
    fatal here.
    """

    def __init__(self, message: str, type_name: str | None = None):
        self.message = message
        self.type_name = type_name
        super().__init__(message)


class ConfigError(GeneratorError):
    """Raised when the generator configuration cannot be loaded."""

    def __init__(self, message: str, path: str | None = None):
        self.message = message
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class FormattingError(GeneratorError):
    """Raised when the external source formatter fails."""

    def __init__(self, message: str, output: str = ""):
        self.message = message
        self.output = output
        super().__init__(message)
