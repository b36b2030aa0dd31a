"""Tests for YAML configuration loading."""

import pytest

from gql_resolvergen.core.config import GeneratorConfig, load_config
from gql_resolvergen.core.errors import ConfigError
from gql_resolvergen.core.model_map import (
    ContextDescriptor,
    ModelDescriptor,
    ModelField,
    parse_model_reference,
)

CONFIG = """
language: flow
schema: ./schema.graphql
context: ./src/context.js:Context
models:
  User: ./src/models.js:UserModel
  Post:
    name: PostModel
    path: ./src/models.js
    fields: [id, {name: body, optional: true}]
  Color: {name: Color, path: ./src/enums.js, enum: true}
  Moment: moment:Moment
scalars:
  DateTime: string
output: ./src/generated/resolvers.js
default-resolvers: false
resolver-scaffolding:
  output: ./src/tmp-resolvers/
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "gql-resolvergen.yml"
    path.write_text(CONFIG)
    return path


class TestLoadConfig:
    """Tests for load_config."""

    def test_values(self, config_file):
        config = load_config(config_file)

        assert config.language == "flow"
        assert config.default_resolvers is False
        assert config.scalars == {"DateTime": "string"}
        assert config.format is True

    def test_paths_resolved_against_config_dir(self, config_file, tmp_path):
        config = load_config(config_file)

        assert config.schema_path == str((tmp_path / "schema.graphql").resolve())
        assert config.output == str((tmp_path / "src/generated/resolvers.js").resolve())
        assert config.scaffolding.output == str((tmp_path / "src/tmp-resolvers").resolve())

    def test_defaults(self, tmp_path):
        path = tmp_path / "minimal.yml"
        path.write_text("schema: schema.graphql\noutput: resolvers.ts\n")
        config = load_config(path)

        assert config.language == "typescript"
        assert config.default_resolvers is True
        assert config.context is None
        assert config.scaffolding is None
        assert config.template_dir is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.yml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yml"
        path.write_text("models: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- schema.graphql\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "extra.yml"
        path.write_text("schema: s.graphql\noutput: r.ts\ngenerate-clients: true\n")
        with pytest.raises(ConfigError) as exc:
            load_config(path)
        assert exc.value.path == str(path)

    def test_unknown_language(self, tmp_path):
        path = tmp_path / "lang.yml"
        path.write_text("schema: s.graphql\noutput: r.ts\nlanguage: reason\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_bad_model_reference(self, tmp_path):
        path = tmp_path / "models.yml"
        path.write_text("schema: s.graphql\noutput: r.ts\nmodels:\n  User: ./models.ts\n")
        with pytest.raises(ConfigError, match="models.User"):
            load_config(path)


class TestModelMap:
    """Tests for converting config to model bindings."""

    def test_short_form(self, config_file):
        model_map = load_config(config_file).build_model_map()
        assert model_map["User"] == ModelDescriptor("UserModel", "../models")

    def test_long_form_with_fields(self, config_file):
        model_map = load_config(config_file).build_model_map()
        assert model_map["Post"] == ModelDescriptor(
            "PostModel",
            "../models",
            fields=(ModelField("id"), ModelField("body", optional=True)),
        )

    def test_enum_alias(self, config_file):
        model_map = load_config(config_file).build_model_map()
        assert model_map["Color"].is_enum_alias
        assert model_map["Color"].import_path == "../enums"

    def test_package_import_is_untouched(self, config_file):
        model_map = load_config(config_file).build_model_map()
        assert model_map["Moment"] == ModelDescriptor("Moment", "moment")

    def test_context(self, config_file):
        context = load_config(config_file).context_descriptor()
        assert context == ContextDescriptor("Context", "../context")

    def test_no_context(self):
        config = GeneratorConfig(schema="s.graphql", output="r.ts")
        assert config.context_descriptor() is None

    def test_import_next_to_output(self, tmp_path):
        config = GeneratorConfig(
            schema="s.graphql",
            output="resolvers.ts",
            models={"User": "./models.ts:User"},
        ).resolve_paths(tmp_path)

        assert config.build_model_map()["User"].import_path == "./models"


class TestParseModelReference:
    """Tests for parse_model_reference."""

    def test_split(self):
        assert parse_model_reference("./src/models.ts:User") == ("./src/models.ts", "User")

    def test_last_colon(self):
        assert parse_model_reference("C:/src/models.ts:User") == ("C:/src/models.ts", "User")

    @pytest.mark.parametrize("reference", ["User", ":User", "./models.ts:"])
    def test_invalid(self, reference):
        with pytest.raises(ValueError):
            parse_model_reference(reference)
