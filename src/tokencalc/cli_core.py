"""Command-line interface for tokencalc."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from tokencalc import __version__


@click.group()
@click.version_option(version=__version__, prog_name="tokencalc")
def main() -> None:
    """tokencalc -- build formulas from tokens and evaluate them."""


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _parse_bindings(items: tuple[str, ...]) -> dict[str, float]:
    bindings: dict[str, float] = {}
    for item in items:
        if "=" not in item:
            raise click.ClickException(f"Invalid --bind format: {item!r}. Use name=value.")
        name, raw = item.split("=", 1)
        try:
            bindings[name.strip()] = float(raw)
        except ValueError:
            raise click.ClickException(f"Invalid --bind value for {name!r}: {raw!r}")
    return bindings


def _setup(project: str | None) -> dict:
    from tokencalc.config import load_config
    from tokencalc.logging import set_project_dir

    project_dir = Path(project) if project else Path.cwd()
    try:
        config = load_config(project_dir)
    except ValueError as e:
        raise click.ClickException(str(e))
    if project:
        set_project_dir(project_dir)
    return config


def _tokenize(expression: str, placeholder: float = 0.0):
    from tokencalc.formulas import FormulaParseError, tokenize

    try:
        return tokenize(expression, placeholder=placeholder)
    except FormulaParseError as e:
        raise click.ClickException(str(e))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@main.command()
@click.argument("directory", type=click.Path())
def init(directory: str) -> None:
    """Write an example tokencalc.yaml into DIRECTORY."""
    from tokencalc.config import write_example_config

    try:
        path = write_example_config(Path(directory))
    except FileExistsError as e:
        raise click.ClickException(str(e))
    click.echo(f"Created {path}")


@main.command("eval")
@click.argument("expression")
@click.option("--bind", "binds", multiple=True, help="Variable value as name=value.")
@click.option("--project", default=None, type=click.Path(), help="Project directory (config + logs).")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def eval_cmd(expression: str, binds: tuple[str, ...], project: str | None, as_json: bool) -> None:
    """Evaluate EXPRESSION, e.g. "revenue * (1 - tax)"."""
    from tokencalc.editor import FormulaEditor

    config = _setup(project)
    bindings = _parse_bindings(binds)
    editor = FormulaEditor.from_config(config)
    for token in _tokenize(expression, editor.placeholder):
        editor.sequence.append(token)
    result = editor.evaluate(bindings)

    if as_json:
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
    elif result.ok:
        click.echo(f"{result.value:g}")
    else:
        click.echo(f"Error [{result.error_kind.value}]: {result.message}", err=True)

    if not result.ok:
        sys.exit(1)


@main.command()
@click.argument("expression")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def tokens(expression: str, as_json: bool) -> None:
    """Show the tokens EXPRESSION splits into."""
    sequence = _tokenize(expression)
    if as_json:
        click.echo(json.dumps(sequence.snapshot(), indent=2))
        return
    if len(sequence) == 0:
        click.echo("No tokens.")
        return
    click.echo(sequence.to_frame().drop("id"))


@main.command()
@click.argument("query")
@click.option("--catalog", required=True, type=click.Path(exists=True), help="Candidate file (.json or .csv).")
@click.option("--limit", default=None, type=click.IntRange(min=0), help="Maximum suggestions to show.")
@click.option("--project", default=None, type=click.Path(), help="Project directory (config + logs).")
def suggest(query: str, catalog: str, limit: int | None, project: str | None) -> None:
    """List catalog variables whose name contains QUERY."""
    from pydantic import ValidationError

    from tokencalc.logging import EventType, emit_error
    from tokencalc.suggestions import load_catalog, match

    config = _setup(project)
    try:
        candidates = load_catalog(Path(catalog))
    except (ValueError, ValidationError) as e:
        emit_error(
            EventType.catalog_load_failed,
            f"Could not load catalog {catalog}",
            {"catalog": catalog, "error": type(e).__name__},
            error_code="catalog_invalid",
        )
        raise click.ClickException(str(e))

    if limit is None:
        limit = config.get("suggestion_limit")
    found = match(candidates, query)
    if limit is not None:
        found = found[:limit]

    if not found:
        click.echo("No matches.")
        return
    for variable in found:
        click.echo(f"  {variable.name}  ({variable.category}, {variable.value})")


@main.command()
@click.option("--project", default=".", type=click.Path(exists=True), help="Project directory.")
@click.option("--level", default=None, type=click.Choice(["info", "warning", "error"]))
@click.option("--limit", default=20, type=int)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def logs(project: str, level: str | None, limit: int, as_json: bool) -> None:
    """Show recent events, newest first."""
    from tokencalc.logging.sink import EventSink

    sink = EventSink(Path(project))
    events = sink.read_global(level=level, limit=limit)
    if as_json:
        click.echo(json.dumps(events, indent=2))
        return
    if not events:
        click.echo("No events.")
        return
    for e in events:
        click.echo(f"  {e.get('ts', '')}  {e.get('level', ''):<7}  {e.get('event_type', '')}  {e.get('message', '')}")
