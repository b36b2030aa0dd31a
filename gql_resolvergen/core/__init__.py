"""Core modules for GraphQL resolver type generation."""

from .config import GeneratorConfig, load_config
from .errors import ConfigError, FormattingError, GeneratorError, SchemaInvariantError
from .generator import CodeGenerator
from .hooks import (
    AddHeaderHook,
    FilterTypesHook,
    HookRunner,
    PostGenerateHook,
    PrettierHook,
    PreGenerateHook,
)
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
from .model_map import ContextDescriptor, ModelDescriptor, ModelField, ModelMap
from .parser import SchemaParser
from .projector import DeclarationProjector, Projection
from .renderers import DialectRenderer, FlowRenderer, TypeScriptRenderer, get_renderer
from .scalars import ScalarRegistry

__all__ = [
    # Config
    "GeneratorConfig",
    "load_config",
    # Errors
    "GeneratorError",
    "SchemaInvariantError",
    "ConfigError",
    "FormattingError",
    # Scalars
    "ScalarRegistry",
    # Hooks
    "PreGenerateHook",
    "PostGenerateHook",
    "AddHeaderHook",
    "FilterTypesHook",
    "PrettierHook",
    "HookRunner",
    # IR types
    "IRArgument",
    "IREnum",
    "IREnumValue",
    "IRField",
    "IRInputType",
    "IRInterface",
    "IRObjectType",
    "IRScalar",
    "IRSchema",
    "IRTypeRef",
    "IRUnion",
    # Model bindings
    "ContextDescriptor",
    "ModelDescriptor",
    "ModelField",
    "ModelMap",
    # Parser
    "SchemaParser",
    # Projection
    "DeclarationProjector",
    "Projection",
    # Renderers
    "DialectRenderer",
    "TypeScriptRenderer",
    "FlowRenderer",
    "get_renderer",
    # Generator
    "CodeGenerator",
]
