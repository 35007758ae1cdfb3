"""Main CLI application."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .config import PickerConfig, load_config
from .errors import ConfigError, LinearizationError, NoEnclosingClassError
from .models import SourcePosition
from .queries import HierarchyBuilder, SuperTypesQuery
from .output import (
    build_picker_entries,
    picker_to_dict,
    print_class_tree,
    print_json,
    print_picker,
)

app = typer.Typer(
    name="py-super-types",
    help="Show the method resolution order of the Python class under the cursor",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def _setup_logging(verbose: bool):
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=err_console, show_time=False)],
    )


def _fail(message: str, json_output: bool, style: str = "red"):
    if json_output:
        print_json({"error": message})
    else:
        console.print(f"[{style}]{escape(message)}[/{style}]")
    raise typer.Exit(1)


def _resolve_config(
    config_path: Optional[Path],
    style: Optional[str],
    roots: Optional[list[Path]],
    json_output: bool,
) -> PickerConfig:
    """Defaults, then the config file, then command line options."""
    try:
        config = load_config(config_path)
        return config.merged(
            style=style,
            roots=[str(r) for r in roots] if roots else None,
        )
    except ConfigError as e:
        _fail(str(e), json_output)


def _check_file(file: Path, json_output: bool):
    if not file.exists():
        _fail(f"Error: file not found: {file}", json_output)


@app.command()
def mro(
    file: Path = typer.Argument(..., help="Python file containing the cursor"),
    line: int = typer.Option(..., "--line", "-l", min=1, help="Cursor line (1-based)"),
    column: int = typer.Option(1, "--column", "-c", min=1, help="Cursor column (1-based)"),
    style: Optional[str] = typer.Option(None, "--style", "-s", help="Display style: tree | flatten | relpath"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to JSON config file"),
    roots: Optional[list[Path]] = typer.Option(None, "--root", "-r", help="Workspace root for imports (repeatable)"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log resolution details to stderr"),
):
    """Show the linearized super types (MRO) of the class at a position."""
    _setup_logging(verbose)
    config = _resolve_config(config_path, style, roots, json_output)
    _check_file(file, json_output)

    query = SuperTypesQuery.for_workspace(config.roots or None)
    try:
        result = query.execute(file, line - 1, column - 1)
    except NoEnclosingClassError:
        _fail("No enclosing class found", json_output, style="yellow")
    except LinearizationError as e:
        _fail(str(e), json_output)

    entries = build_picker_entries(result, config)
    if json_output:
        print_json(picker_to_dict(result, entries, config))
    else:
        print_picker(result, entries, config, console)


@app.command()
def hierarchy(
    file: Path = typer.Argument(..., help="Python file containing the cursor"),
    line: int = typer.Option(..., "--line", "-l", min=1, help="Cursor line (1-based)"),
    column: int = typer.Option(1, "--column", "-c", min=1, help="Cursor column (1-based)"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to JSON config file"),
    roots: Optional[list[Path]] = typer.Option(None, "--root", "-r", help="Workspace root for imports (repeatable)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log resolution details to stderr"),
):
    """Show the resolved inheritance tree of the class at a position."""
    _setup_logging(verbose)
    config = _resolve_config(config_path, None, roots, False)
    _check_file(file, False)

    query = SuperTypesQuery.for_workspace(config.roots or None)
    builder = HierarchyBuilder(query.syntax, query.resolver)
    position = SourcePosition(line - 1, column - 1)
    root = asyncio.run(builder.build_at(str(file.resolve()), position))
    if root is None:
        _fail("No enclosing class found", False, style="yellow")

    print_class_tree(root, console)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
