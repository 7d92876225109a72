#!/usr/bin/env python
"""
Typer front-end for richcontent.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import List, Literal, Optional

import typer
from dotenv import load_dotenv

from RichContent.errors import RichContentError
from RichContent.grid_table import MAX_COLS, MAX_ROWS, MIN_COLS, MIN_ROWS, GridTableModel
from RichContent.renderer import render
from RichContent.sanitizer import sanitize
from RichContent.symbols import convert

app = typer.Typer(
  add_completion=True,
  no_args_is_help=True,
  help="Rich-content authoring tools: math conversion, rendering, sanitizing and tables.",
)


def _get_cli_version() -> str:
  try:
    return version("richcontent")
  except PackageNotFoundError:
    return "unknown"


def _version_callback(value: bool) -> None:
  if not value:
    return
  typer.echo(f"richcontent {_get_cli_version()}")
  raise typer.Exit()


@app.callback()
def _app_callback(
    version: bool = typer.Option(
      False,
      "--version",
      is_eager=True,
      callback=_version_callback,
      help="Show version and exit.",
    ),
) -> None:
  del version


def _enable_debug_logging() -> None:
  logging.getLogger().setLevel(logging.DEBUG)
  for handler in logging.getLogger().handlers:
    handler.setLevel(logging.DEBUG)
  logger = logging.getLogger("RichContent")
  logger.setLevel(logging.DEBUG)
  for handler in logger.handlers:
    handler.setLevel(logging.DEBUG)


@contextmanager
def _richcontent_error_boundary():
  try:
    yield
  except RichContentError as exc:
    typer.secho(str(exc), fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def _configure_runtime(*, env: str, debug: bool) -> None:
  load_dotenv(env)
  if debug:
    _enable_debug_logging()


def _read_content(path: Path) -> str:
  try:
    return path.read_text(encoding="utf-8")
  except OSError as e:
    raise RichContentError(f"Cannot read {path}: {e}") from e


@app.command("convert")
def convert_command(
    notation: str = typer.Argument(..., help="Math notation, e.g. '\\frac{1}{2} + x^{2}'."),
    env: str = typer.Option(str(Path.home() / ".env"), "--env", help="Path to .env file."),
    debug: bool = typer.Option(False, "--debug", help="Set logging level to debug."),
) -> None:
  with _richcontent_error_boundary():
    _configure_runtime(env=env, debug=debug)
    typer.echo(convert(notation))


@app.command("render")
def render_command(
    path: Path = typer.Argument(..., help="File holding stored answer content."),
    output_format: Literal["html", "markdown", "text"] = typer.Option(
      "html", "--format", help="Output format: html|markdown|text."
    ),
    env: str = typer.Option(str(Path.home() / ".env"), "--env", help="Path to .env file."),
    debug: bool = typer.Option(False, "--debug", help="Set logging level to debug."),
) -> None:
  with _richcontent_error_boundary():
    _configure_runtime(env=env, debug=debug)
    typer.echo(render(_read_content(path)).render(output_format))


@app.command("sanitize")
def sanitize_command(
    path: Path = typer.Argument(..., help="File holding a markup fragment."),
    env: str = typer.Option(str(Path.home() / ".env"), "--env", help="Path to .env file."),
    debug: bool = typer.Option(False, "--debug", help="Set logging level to debug."),
) -> None:
  with _richcontent_error_boundary():
    _configure_runtime(env=env, debug=debug)
    typer.echo(sanitize(_read_content(path)))


@app.command("table")
def table_command(
    rows: int = typer.Option(3, "--rows", min=MIN_ROWS, max=MAX_ROWS, help="Number of rows."),
    cols: int = typer.Option(3, "--cols", min=MIN_COLS, max=MAX_COLS, help="Number of columns."),
    header: bool = typer.Option(True, "--header/--no-header", help="Treat the first row as a header row."),
    cells: Optional[List[str]] = typer.Option(
      None,
      "--cell",
      help="Cell content in row-major order. Use multiple times.",
    ),
    plain: bool = typer.Option(False, "--plain", help="Print the plain-text preview instead of markup."),
    env: str = typer.Option(str(Path.home() / ".env"), "--env", help="Path to .env file."),
    debug: bool = typer.Option(False, "--debug", help="Set logging level to debug."),
) -> None:
  with _richcontent_error_boundary():
    _configure_runtime(env=env, debug=debug)
    cells = cells or []
    if len(cells) > rows * cols:
      raise RichContentError(f"{len(cells)} cells given for a {rows}x{cols} table.")
    model = GridTableModel(rows=rows, cols=cols, has_header_row=header)
    for index, content in enumerate(cells):
      model.set_cell(index // cols, index % cols, content)
    if plain:
      typer.echo(model.to_plain_text_preview())
    else:
      typer.echo(sanitize(model.escaped().to_markup()))


def main() -> None:
  app()


if __name__ == "__main__":
  main()
