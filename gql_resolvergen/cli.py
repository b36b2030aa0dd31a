"""Command-line interface for gql-resolvergen."""

import click
from pathlib import Path

from .core.config import DEFAULT_CONFIG_FILE, GeneratorConfig, load_config
from .core.errors import ConfigError, GeneratorError
from .core.generator import CodeGenerator
from .core.hooks import AddHeaderHook, HookRunner, PrettierHook
from .core.logger import configure_logging
from .core.parser import SchemaParser
from .core.scalars import ScalarRegistry


def resolve_config(config_file: str | None, schema: str | None, output: str | None) -> GeneratorConfig:
    """Load the config file, or build a config from command-line options alone."""
    if config_file is None and Path(DEFAULT_CONFIG_FILE).is_file():
        config_file = DEFAULT_CONFIG_FILE

    if config_file is not None:
        config = load_config(config_file)
    else:
        if schema is None or output is None:
            raise ConfigError(
                f"No {DEFAULT_CONFIG_FILE} found; --schema and --output are required"
            )
        config = GeneratorConfig(schema=schema, output=output).resolve_paths(Path.cwd())

    update = {}
    if schema is not None:
        update["schema_path"] = str(Path(schema).resolve())
    if output is not None:
        update["output"] = str(Path(output).resolve())
    return config.model_copy(update=update) if update else config


def build_generator(config: GeneratorConfig, verbose: bool = False) -> tuple[CodeGenerator, PrettierHook | None]:
    """Parse the schema and set up a generator for the given config."""
    parser = SchemaParser(config.schema_path)
    ir = parser.parse_all()

    if verbose:
        click.echo(f"  Scalars: {len(ir.scalars)}")
        click.echo(f"  Enums: {len(ir.enums)}")
        click.echo(f"  Types: {len(ir.types)}")
        click.echo(f"  Inputs: {len(ir.inputs)}")
        click.echo(f"  Interfaces: {len(ir.interfaces)}")
        click.echo(f"  Unions: {len(ir.unions)}")

    hooks = HookRunner()
    generator = CodeGenerator(
        ir,
        language=config.language,
        model_map=config.build_model_map(),
        context=config.context_descriptor(),
        default_resolvers=config.default_resolvers,
        scalars=ScalarRegistry(config.scalars),
        template_dir=config.template_dir,
        hooks=hooks,
    )

    if config.header:
        hooks.add_post_hook(AddHeaderHook(config.header))

    prettier = None
    if config.format:
        prettier = PrettierHook(generator.renderer.prettier_parser)
        hooks.add_post_hook(prettier)
    return generator, prettier


@click.group()
@click.version_option()
def main():
    """Resolver type generator for GraphQL servers.

    Generate TypeScript or Flow resolver declarations from GraphQL schemas.
    """
    pass


@main.command()
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    help=f"Path to the config file (default: ./{DEFAULT_CONFIG_FILE} if present).",
)
@click.option(
    "--schema",
    "-s",
    type=click.Path(exists=True),
    help="Path to GraphQL schema file or directory.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Output file for the generated declarations.",
)
@click.option(
    "--language",
    "-l",
    type=click.Choice(["typescript", "flow"]),
    help="Target language.",
)
@click.option(
    "--no-default-resolvers",
    is_flag=True,
    help="Do not generate default resolvers.",
)
@click.option(
    "--no-format",
    is_flag=True,
    help="Do not format the output with prettier.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(
    config_file: str | None,
    schema: str | None,
    output: str | None,
    language: str | None,
    no_default_resolvers: bool,
    no_format: bool,
    verbose: bool,
):
    """Generate resolver declarations from a GraphQL schema.

    Examples:

        gql-resolvergen generate

        gql-resolvergen generate -c ./gql-resolvergen.yml

        gql-resolvergen generate -s ./schema.graphql -o ./src/generated/resolvers.ts

        gql-resolvergen generate -s ./schema -o ./resolvers.js --language flow
    """
    configure_logging(verbose)

    try:
        config = resolve_config(config_file, schema, output)
        update = {}
        if language is not None:
            update["language"] = language
        if no_default_resolvers:
            update["default_resolvers"] = False
        if no_format:
            update["format"] = False
        if update:
            config = config.model_copy(update=update)

        if verbose:
            click.echo(f"Schema: {config.schema_path}")
            click.echo(f"Output: {config.output}")
            click.echo(f"Language: {config.language}")

        click.echo("Parsing schema...")
        generator, prettier = build_generator(config, verbose)

        click.echo("Generating code...")
        generator.write(config.output)
    except (ConfigError, GeneratorError) as e:
        raise click.ClickException(str(e)) from e

    if prettier is not None and prettier.errors:
        click.echo("Wrote unformatted code, see warnings above.")
    click.echo(f"Done! Generated code in {config.output}")


@main.command()
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    help=f"Path to the config file (default: ./{DEFAULT_CONFIG_FILE}).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False),
    help="Output directory for the resolver scaffolding.",
)
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Overwrite existing scaffold files.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def scaffold(config_file: str | None, output: str | None, force: bool, verbose: bool):
    """Generate resolver implementation stubs.

    Writes one file per object type that spreads the default resolvers
    and throws for every other field. Existing files are kept unless
    --force is given.

    Examples:

        gql-resolvergen scaffold

        gql-resolvergen scaffold -o ./src/tmp-resolvers --force
    """
    configure_logging(verbose)

    try:
        config = load_config(config_file or DEFAULT_CONFIG_FILE)
        output_dir = output
        if output_dir is None and config.scaffolding is not None:
            output_dir = config.scaffolding.output
        if output_dir is None:
            raise ConfigError("No scaffolding output; set resolver-scaffolding.output or --output")
        force = force or (config.scaffolding is not None and config.scaffolding.force)

        click.echo("Parsing schema...")
        generator, _ = build_generator(config, verbose)

        click.echo("Generating scaffolding...")
        written = generator.write_scaffolds(output_dir, config.output, force=force)
    except (ConfigError, GeneratorError) as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        for path in written:
            click.echo(f"  {path}")
    click.echo(f"Done! Wrote {len(written)} files to {output_dir}")


if __name__ == "__main__":
    main()
