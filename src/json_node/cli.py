"""Command-line interface for inspecting JSON documents through JsonNode."""

import logging
import click
from pathlib import Path
from typing import Optional
from .json_node import JsonNode
from .serialization.text import JsonTextWriter
from .settings import DEFAULT_SETTINGS
from .types import JsonNodeError
from .utils.validation import ValidationUtils


_VALUE_TYPES = {
    "json": None,
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
}

_MISSING = object()


def _load(input_file: Path) -> JsonNode:
    with input_file.open("rb") as stream:
        return JsonNode.deserialize_from(stream)


@click.group()
@click.version_option(version="1.0.0")
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def main(verbose: bool):
    """JsonNode - inspect and reformat JSON object documents."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@main.command(name="format")
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--indent', '-i', type=int, default=None, help='Indentation width (default: compact)')
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Output JSON file path')
def format_command(input_file: Path, indent: Optional[int], output: Optional[Path]):
    """Parse a JSON object document and write it back out."""
    try:
        node = _load(input_file)
        text = JsonTextWriter(DEFAULT_SETTINGS.with_indent(indent)).dumps(node.raw)
    except JsonNodeError as e:
        click.echo(f"❌ Error: {e}", err=True)
        raise SystemExit(1)

    if output:
        output.write_text(text, encoding='utf-8')
        click.echo(f"✅ Successfully wrote JSON to {output}")
    else:
        click.echo(text)


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('prop_name')
@click.option('--type', '-t', 'value_type', type=click.Choice(sorted(_VALUE_TYPES)),
              default='json', help='Type to read the property as (default: json)')
def get(input_file: Path, prop_name: str, value_type: str):
    """Print a single top-level property."""
    try:
        node = _load(input_file)
        value = node.get(prop_name, _VALUE_TYPES[value_type], _MISSING)
        if value is _MISSING:
            click.echo(f"❌ Property '{prop_name}' not found", err=True)
            raise SystemExit(1)
        if value_type == "json":
            value = JsonTextWriter().dumps(value)
    except JsonNodeError as e:
        click.echo(f"❌ Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(value)


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
def info(input_file: Path):
    """Show the properties and nesting depth of a JSON object document."""
    try:
        node = _load(input_file)
    except JsonNodeError as e:
        click.echo(f"❌ Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"📊 Properties: {len(node.raw)}")
    click.echo(f"📊 Max depth: {ValidationUtils.calculate_max_depth(node.raw)}")
    for name in node.raw:
        marker = "•" if node.has_values(name) else "◦"
        click.echo(f"   {marker} {name}")


if __name__ == '__main__':
    main()
