"""Generator configuration loaded from YAML.

Example ``gql-resolvergen.yml``:

    language: typescript
    schema: ./schema.graphql
    context: ./src/context.ts:Context
    models:
      User: ./src/models.ts:UserModel
      Post:
        name: PostModel
        path: ./src/models.ts
        fields: [id, title, {name: body, optional: true}]
    scalars:
      DateTime: string
    output: ./src/generated/resolvers.ts
    default-resolvers: true
    header: "/* eslint-disable */"
    resolver-scaffolding:
      output: ./src/tmp-resolvers/

Relative paths are resolved against the directory of the config file. Model
and context modules are then imported relative to the generated output file.
"""

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .model_map import (
    ContextDescriptor,
    ModelDescriptor,
    ModelField,
    ModelMap,
    parse_model_reference,
)

DEFAULT_CONFIG_FILE = "gql-resolvergen.yml"


class ModelFieldConfig(BaseModel):
    name: str
    optional: bool = False


class ModelConfig(BaseModel):
    """A model binding written out in full."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    path: str
    is_enum_alias: bool = Field(default=False, alias="enum")
    fields: list[ModelFieldConfig] | None = None

    @field_validator("fields", mode="before")
    @classmethod
    def _expand_field_names(cls, value: Any) -> Any:
        # Plain strings are shorthand for required properties
        if isinstance(value, list):
            return [{"name": item} if isinstance(item, str) else item for item in value]
        return value


class ScaffoldingConfig(BaseModel):
    output: str
    force: bool = False


class GeneratorConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    language: Literal["typescript", "flow"] = "typescript"
    schema_path: str = Field(alias="schema")
    output: str
    context: str | None = None
    models: dict[str, str | ModelConfig] = Field(default_factory=dict)
    scalars: dict[str, str] = Field(default_factory=dict)
    default_resolvers: bool = Field(default=True, alias="default-resolvers")
    scaffolding: ScaffoldingConfig | None = Field(default=None, alias="resolver-scaffolding")
    format: bool = True
    # Prepended to every generated file, e.g. a license banner
    header: str | None = None
    template_dir: str | None = Field(default=None, alias="templates")

    def resolve_paths(self, base_dir: Path) -> "GeneratorConfig":
        """Return a copy with file system paths made absolute."""

        def absolute(path: str | None) -> str | None:
            if path is None:
                return None
            return str((base_dir / path).resolve())

        def module(path: str) -> str:
            # Package imports stay untouched, relative module paths become absolute
            return absolute(path) if path.startswith(".") else path

        def reference(value: str, key: str) -> str:
            try:
                path, name = parse_model_reference(value)
            except ValueError as e:
                raise ConfigError(f"{key}: {e}") from e
            return f"{module(path)}:{name}"

        models: dict[str, str | ModelConfig] = {}
        for type_name, binding in self.models.items():
            if isinstance(binding, str):
                models[type_name] = reference(binding, f"models.{type_name}")
            else:
                models[type_name] = binding.model_copy(update={"path": module(binding.path)})

        update: dict[str, Any] = {
            "schema_path": absolute(self.schema_path),
            "output": absolute(self.output),
            "template_dir": absolute(self.template_dir),
            "models": models,
        }
        if self.context is not None:
            update["context"] = reference(self.context, "context")
        if self.scaffolding is not None:
            update["scaffolding"] = self.scaffolding.model_copy(
                update={"output": absolute(self.scaffolding.output)}
            )
        return self.model_copy(update=update)

    def import_path(self, path: str) -> str:
        """Return the module specifier the generated file uses to import ``path``.

        Absolute file paths become relative to the output file's directory,
        without their extension. Anything else is a package specifier.
        """
        if not os.path.isabs(path):
            return path
        output_dir = os.path.dirname(os.path.abspath(self.output))
        relative = os.path.relpath(os.path.splitext(path)[0], output_dir).replace(os.sep, "/")
        return relative if relative.startswith(".") else f"./{relative}"

    def build_model_map(self) -> ModelMap:
        """Convert the configured bindings to a ModelMap."""
        model_map: ModelMap = {}
        for type_name, binding in self.models.items():
            if isinstance(binding, str):
                try:
                    path, name = parse_model_reference(binding)
                except ValueError as e:
                    raise ConfigError(f"models.{type_name}: {e}") from e
                model_map[type_name] = ModelDescriptor(
                    name=name, import_path=self.import_path(path)
                )
            else:
                fields = None
                if binding.fields is not None:
                    fields = tuple(ModelField(f.name, f.optional) for f in binding.fields)
                model_map[type_name] = ModelDescriptor(
                    name=binding.name,
                    import_path=self.import_path(binding.path),
                    is_enum_alias=binding.is_enum_alias,
                    fields=fields,
                )
        return model_map

    def context_descriptor(self) -> ContextDescriptor | None:
        """Convert the configured context reference, if any."""
        if self.context is None:
            return None
        try:
            path, name = parse_model_reference(self.context)
        except ValueError as e:
            raise ConfigError(f"context: {e}") from e
        return ContextDescriptor(name=name, import_path=self.import_path(path))


def load_config(path: str | Path) -> GeneratorConfig:
    """Load and validate a configuration file.

    Raises:
        ConfigError: If the file is missing, is not valid YAML, or fails validation
    """
    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigError("Config file not found", str(config_path))

    try:
        with config_path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", str(config_path)) from e

    if not isinstance(data, dict):
        raise ConfigError("Expected a mapping at the top level", str(config_path))

    try:
        config = GeneratorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(str(e), str(config_path)) from e

    return config.resolve_paths(config_path.parent)
