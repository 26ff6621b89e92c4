import json
import logging
import sys
from pathlib import Path

import rich_click as click
import yaml
from pydantic import ValidationError
from rich.traceback import install

from tsgql import __version__, log
from tsgql.codegen import generate_schema
from tsgql.config import load_project_config
from tsgql.errors import TsgqlError, TsSyntaxError
from tsgql.manifest import Manifest, infer_manifest, load_manifest
from tsgql.parser import parse_module

schema_option = click.option(
    "--schema",
    "-s",
    "schema",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="TypeScript file declaring the schema types.",
)


optional_output_option = click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    required=False,
    help="Output file, printed to stdout when omitted",
)


def read_schema_source(schema: Path) -> str:
    try:
        return schema.read_text(encoding="utf-8")
    except OSError as e:
        log.error(f"File I/O error: {e}")
        sys.exit(1)


def write_output(text: str, output: Path | None) -> None:
    if output is None:
        click.echo(text, nl=False)
        return

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        _ = output.write_text(text, encoding="utf-8")
    except OSError as e:
        log.error(f"File I/O error: {e}")
        sys.exit(1)


def resolve_project(
    schema: Path | None,
    manifest: Path | None,
    output: Path | None,
    config: Path | None,
) -> tuple[Path, Path | None, Path | None]:
    """Merge the config file, if any, with the options given on the command line.

    Returns:
        The schema source, the manifest (None to infer it) and the output file (None for stdout)
    """
    if config is None:
        if schema is None:
            raise click.UsageError("Either --schema or --config is required")
        return schema, manifest, output

    try:
        project = load_project_config(config)
    except (OSError, yaml.YAMLError, TypeError, ValidationError) as e:
        log.error(f"Invalid config {config}: {e}")
        sys.exit(1)

    return schema or project.schema_path, manifest or project.manifest, output or project.out


@click.group(context_settings={"auto_envvar_prefix": "tsgql"})
@click.option(
    "-l",
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default="INFO",
    help="Log level",
    show_default=True,
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Log file",
)
@click.version_option(__version__)
def cli(log_level: str, log_file: Path | None) -> None:
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setFormatter(logging.Formatter("%(asctime)s:%(levelname)s:%(message)s"))
        log.addHandler(file_handler)

    log.setLevel(log_level.upper())
    if log_level.upper() == "DEBUG":
        _ = install(show_locals=True)


@cli.command
@schema_option
@click.option(
    "--manifest",
    "-m",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON or YAML file mapping type names to kinds (0 = Object, 1 = Input, 2 = Enum). "
    "Inferred from the schema when omitted.",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML project config with 'schema', 'manifest' and 'out' keys",
)
@optional_output_option
def generate(schema: Path | None, manifest: Path | None, config: Path | None, output: Path | None) -> None:
    """Generate a GraphQL schema from TypeScript type declarations."""
    schema_path, manifest_path, out = resolve_project(schema, manifest, output, config)

    source = read_schema_source(schema_path)
    try:
        module = parse_module(source)
        kinds: Manifest = load_manifest(manifest_path) if manifest_path else infer_manifest(module)
        log.debug(f"Translating {len(module)} declaration(s) from {schema_path}")
        sdl = generate_schema(module, kinds)
    except TsSyntaxError as e:
        log.error(f"Syntax error in {schema_path}: {e}")
        log.source_excerpt(source, e.line, e.column)
        sys.exit(1)
    except TsgqlError as e:
        log.error(f"Schema generation failed: {e}")
        log.hint("Use --log-level DEBUG to see each generated type")
        sys.exit(1)
    except OSError as e:
        log.error(f"File I/O error: {e}")
        sys.exit(1)

    write_output(sdl, out)
    if out is not None:
        log.success(f"Generated GraphQL schema to {out}")


@cli.command(name="manifest")
@schema_option
@optional_output_option
def manifest_cmd(schema: Path | None, output: Path | None) -> None:
    """Print the manifest inferred from a TypeScript schema file."""
    if schema is None:
        raise click.UsageError("Missing option '--schema' / '-s'")

    source = read_schema_source(schema)
    try:
        module = parse_module(source)
    except TsSyntaxError as e:
        log.error(f"Syntax error in {schema}: {e}")
        log.source_excerpt(source, e.line, e.column)
        sys.exit(1)

    inferred = infer_manifest(module)
    write_output(json.dumps(inferred.to_raw(), indent=2) + "\n", output)
    if output is not None:
        for name, kind in inferred.items():
            log.key_value(name, kind.name.title())
        log.success(f"Wrote manifest with {len(inferred)} type(s) to {output}")


if __name__ == "__main__":
    cli()
