"""Command-line interface for gql-typegen."""

import logging
from pathlib import Path

import click

from . import __version__
from .core.config import CodegenConfiguration, configuration_from_mapping, load_configuration
from .core.errors import CodegenError
from .core.generator import CodeGenerator


def parse_scalar_options(values: tuple[str, ...]) -> dict[str, str]:
    """Turn repeated ``NAME=TYPE`` options into a mapping."""
    scalars = {}
    for value in values:
        name, sep, target = value.partition("=")
        if not sep or not name.strip() or not target.strip():
            raise click.BadParameter(f"expected NAME=TYPE, got '{value}'", param_hint="--scalar")
        scalars[name.strip()] = target.strip()
    return scalars


@click.group()
@click.version_option(__version__)
def main():
    """Typed Python code generation for GraphQL schemas.

    Generate value types, inputs, enums, operations and projections from an
    introspection result or SDL file.
    """
    pass


@main.command()
@click.option(
    "--schema",
    "-s",
    type=click.Path(),
    help="Path to an introspection JSON file or an SDL (.graphql) file.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False),
    help="Output root directory for generated code.",
)
@click.option(
    "--package",
    "-p",
    help="Dotted package name of the generated code (e.g. example.graphql).",
)
@click.option(
    "--scalar",
    "scalars",
    multiple=True,
    metavar="NAME=TYPE",
    help="Map a custom scalar to a Python type, e.g. Money=decimal.Decimal. Repeatable.",
)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    help="gql-typegen.yaml or pyproject.toml with a [tool.gql-typegen] table.",
)
@click.option(
    "--force",
    is_flag=True,
    help="Regenerate even if the schema is unchanged since the last run.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(schema, output, package, scalars, config_file, force, verbose):
    """Generate Python code from a GraphQL schema.

    Examples:

        gql-typegen generate -s schema.json -o src -p example.graphql

        gql-typegen generate -s schema.graphql -o src -p api --scalar DateTime=datetime.datetime

        gql-typegen generate --config pyproject.toml --force
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(name)s: %(message)s")

    custom_scalars = parse_scalar_options(scalars)
    try:
        config = _build_configuration(schema, output, package, custom_scalars, config_file, force)

        if verbose:
            click.echo(f"Schema: {config.schema_file}")
            click.echo(f"Output: {config.output_directory}")
            click.echo(f"Package: {config.package_name}")

        click.echo("Generating code...")
        result = CodeGenerator(config).generate()
    except CodegenError as e:
        raise click.ClickException(e.message) from e

    if result.was_skipped:
        click.echo("Schema unchanged, nothing to do (use --force to regenerate).")
        return

    if verbose:
        counts: dict[str, int] = {}
        for artifact in result.artifacts:
            counts[artifact.group] = counts.get(artifact.group, 0) + 1
        for group, count in counts.items():
            click.echo(f"  {group}: {count}")

    click.echo(f"Done! Generated {result.files_generated} files in {config.package_directory}")


def _build_configuration(schema, output, package, custom_scalars, config_file, force) -> CodegenConfiguration:
    overrides = {
        "schema_file": Path(schema).resolve() if schema else None,
        "output_directory": Path(output).resolve() if output else None,
        "package_name": package,
    }
    if config_file:
        config = load_configuration(config_file, **overrides)
    else:
        config = configuration_from_mapping({}, **overrides)

    updates = {}
    if custom_scalars:
        updates["custom_scalars"] = {**config.custom_scalars, **custom_scalars}
    if force:
        updates["skip_if_up_to_date"] = False
    if not updates:
        return config
    values = {name: getattr(config, name) for name in CodegenConfiguration.model_fields}
    return CodegenConfiguration.create(**{**values, **updates})


if __name__ == "__main__":
    main()
