"""CLI for datadict-sync (render, parse, position)."""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger

from datadict_sync.config import PARSE_MODE_TEXT
from datadict_sync.core.importer.html_reader import map_html_to_data_dictionary
from datadict_sync.core.tree.html import map_data_dictionary_to_html
from datadict_sync.core.tree.position import find_position_by_dictionary_id
from datadict_sync.errors import IdNotFoundError, ParseError
from datadict_sync.logging_config import configure_logging
from datadict_sync.models.node import DataDictionary, Schema, schema_dictionary_from_dict

app = typer.Typer(help="Convert data dictionaries to text and back.")

SchemasOption = Annotated[
    Path | None,
    typer.Option("--schemas", "-s", help="JSON file mapping schema ids to shapes"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _read_json(path: Path) -> Any:
    if not path.exists():
        logger.error("File not found: {}", path)
        raise typer.Exit(1)
    return json.loads(path.read_text(encoding="utf-8"))


def _load_dictionary(path: Path) -> DataDictionary:
    try:
        return DataDictionary.from_dict(_read_json(path))
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.error("Invalid data dictionary {}: {}", path, e)
        raise typer.Exit(1) from e


def _load_schemas(path: Path | None) -> dict[str, Schema]:
    if path is None:
        return {}
    try:
        return schema_dictionary_from_dict(_read_json(path))
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.error("Invalid schema dictionary {}: {}", path, e)
        raise typer.Exit(1) from e


@app.command()
def render(
    dictionary: Path = typer.Argument(..., help="Data dictionary JSON file"),
    schemas: SchemasOption = None,
) -> None:
    """Print the text form of a data dictionary."""
    lines = map_data_dictionary_to_html(_load_dictionary(dictionary), _load_schemas(schemas))
    typer.echo("\n".join(lines))


@app.command()
def parse(
    text_file: Path = typer.Argument(..., help="File with the text to parse"),
    previous: Annotated[
        Path | None,
        typer.Option("--previous", "-p", help="Data dictionary the text was edited from"),
    ] = None,
    schemas: SchemasOption = None,
) -> None:
    """Parse text into a data dictionary and print it as JSON."""
    if not text_file.exists():
        logger.error("File not found: {}", text_file)
        raise typer.Exit(1)

    lines = text_file.read_text(encoding="utf-8").split("\n")
    value = "".join(line.lstrip() for line in lines).replace("\r", "")
    previous_dictionary = _load_dictionary(previous) if previous else None

    try:
        data_dictionary = map_html_to_data_dictionary(
            value, PARSE_MODE_TEXT, previous_dictionary, _load_schemas(schemas)
        )
    except ParseError as e:
        typer.echo(f"Parse error: {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(json.dumps(data_dictionary.to_dict(), indent=2))


@app.command()
def position(
    dictionary_id: str = typer.Argument(..., help="Node id to locate"),
    dictionary: Path = typer.Argument(..., help="Data dictionary JSON file"),
    schemas: SchemasOption = None,
) -> None:
    """Print line:column of a node in the rendered text."""
    data_dictionary = _load_dictionary(dictionary)
    schema_dictionary = _load_schemas(schemas)
    lines = map_data_dictionary_to_html(data_dictionary, schema_dictionary)

    try:
        pos = find_position_by_dictionary_id(
            dictionary_id, data_dictionary, schema_dictionary, lines
        )
    except IdNotFoundError as e:
        typer.echo(f"Node '{dictionary_id}' not found.", err=True)
        raise typer.Exit(1) from e

    typer.echo(f"{pos.line_number}:{pos.column}")
