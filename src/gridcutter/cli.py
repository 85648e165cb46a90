"""Typer-based CLI entry point."""

from __future__ import annotations

import json
import logging
from functools import wraps
from pathlib import Path
from typing import List, Optional

import typer
from rich import print

from .config import DEFAULT_EXPORT_FORMAT, DEFAULT_EXPORT_PREFIX
from .errors import CellIndexError, GridCutterError, ImageProbeError, SettingsError
from .layout.state import LayoutState
from .layout.types import GridMode, ImageExtent, LineAxis, LineRef
from .layout.preview import export_plan
from .settings import SettingsManager
from .utils.image_probe import parse_size, probe_extent
from .workspace import clamp_dimension

app = typer.Typer(help="Slice an image into a grid of cells and plan the crops")
settings_app = typer.Typer(help="Inspect and change the stored grid settings")
app.add_typer(settings_app, name="settings")


def _handle_errors(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (CellIndexError, ImageProbeError, SettingsError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except GridCutterError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output")) -> None:
    """Grid cutter command line."""

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def _resolve_extent(source: str) -> ImageExtent:
    path = Path(source)
    if path.exists():
        return probe_extent(path)
    try:
        return parse_size(source)
    except ValueError as exc:
        raise ImageProbeError(f"{source} is neither an image file nor a WIDTHxHEIGHT size") from exc


def _parse_line(text: str) -> tuple[LineRef, float]:
    """Parse ``x0=120`` into a line reference and a source position."""
    target, sep, value = text.partition("=")
    target = target.strip().lower()
    if not sep or len(target) < 2 or target[0] not in ("x", "y"):
        raise typer.BadParameter(f"expected AXIS INDEX=POSITION such as x0=120, got {text!r}")
    try:
        index = int(target[1:])
        position = float(value)
    except ValueError as exc:
        raise typer.BadParameter(f"expected AXIS INDEX=POSITION such as x0=120, got {text!r}") from exc
    return LineRef(LineAxis(target[0]), index), position


def _build_state(
    source: str,
    mode: str,
    rows: int,
    cols: int,
    cell_width: Optional[int],
    cell_height: Optional[int],
    auto_size: bool,
    lines: List[str],
    disable: List[int],
) -> LayoutState:
    state = LayoutState(mode=mode, rows=clamp_dimension(rows), cols=clamp_dimension(cols))
    state.load_image(_resolve_extent(source))
    for entry in lines:
        line, position = _parse_line(entry)
        line_count = state.cols if line.axis is LineAxis.X else state.rows
        if not 0 <= line.index < line_count:
            raise typer.BadParameter(f"no {line.axis.value} line with index {line.index}")
        state.set_center_line(line, position)
    if auto_size:
        state.auto_calculate_cell_size()
    if cell_width is not None or cell_height is not None:
        state.set_cell_size(cell_width, cell_height)
    for index in disable:
        state.set_disabled(index, True)
    return state


_MODE_OPTION = typer.Option(GridMode.UNIFORM.value, "--mode", "-m", help="uniform or centerline")
_ROWS_OPTION = typer.Option(6, "--rows", "-r", help="Number of rows (1-20)")
_COLS_OPTION = typer.Option(4, "--cols", "-c", help="Number of columns (1-20)")
_WIDTH_OPTION = typer.Option(None, "--cell-width", help="Center-line cell width")
_HEIGHT_OPTION = typer.Option(None, "--cell-height", help="Center-line cell height")
_AUTO_OPTION = typer.Option(False, "--auto-size", help="Derive the cell size from line spacing")
_LINE_OPTION = typer.Option([], "--line", "-l", help="Move a center line, e.g. x0=120")
_DISABLE_OPTION = typer.Option([], "--disable", "-d", help="Cell index to disable (repeatable)")


@app.command()
@_handle_errors
def layout(
    source: str = typer.Argument(..., help="Image file or WIDTHxHEIGHT"),
    mode: str = _MODE_OPTION,
    rows: int = _ROWS_OPTION,
    cols: int = _COLS_OPTION,
    cell_width: Optional[int] = _WIDTH_OPTION,
    cell_height: Optional[int] = _HEIGHT_OPTION,
    auto_size: bool = _AUTO_OPTION,
    line: List[str] = _LINE_OPTION,
    disable: List[int] = _DISABLE_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Emit JSON instead of text"),
) -> None:
    """Print the crop rectangle of every cell."""

    state = _build_state(
        source, mode, rows, cols, cell_width, cell_height, auto_size, line, disable
    )
    disabled = state.disabled_indices()
    areas = state.effective_areas()
    if as_json:
        payload = {
            "mode": state.mode.value,
            "rows": state.rows,
            "cols": state.cols,
            "cells": [
                dict(area.as_mapping(), index=index, disabled=index in disabled)
                for index, area in enumerate(areas)
            ],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    summary = state.summary()
    print(
        f"[bold]{state.mode.value}[/bold] {state.rows}x{state.cols}, "
        f"cell {summary.cell_width} x {summary.cell_height}, "
        f"{summary.enabled}/{summary.total} enabled"
    )
    for index, area in enumerate(areas):
        status = "[red]disabled[/red]" if index in disabled else "[green]enabled[/green]"
        print(
            f"#{index + 1:<3} x={area.x:.1f} y={area.y:.1f} "
            f"w={area.width:.1f} h={area.height:.1f} {status}"
        )


@app.command()
@_handle_errors
def plan(
    source: str = typer.Argument(..., help="Image file or WIDTHxHEIGHT"),
    mode: str = _MODE_OPTION,
    rows: int = _ROWS_OPTION,
    cols: int = _COLS_OPTION,
    cell_width: Optional[int] = _WIDTH_OPTION,
    cell_height: Optional[int] = _HEIGHT_OPTION,
    auto_size: bool = _AUTO_OPTION,
    line: List[str] = _LINE_OPTION,
    disable: List[int] = _DISABLE_OPTION,
    prefix: str = typer.Option(DEFAULT_EXPORT_PREFIX, "--prefix", help="File name prefix"),
    fmt: str = typer.Option(DEFAULT_EXPORT_FORMAT, "--format", "-f", help="png, jpeg or webp"),
) -> None:
    """Print the file names and crop boxes an export would produce."""

    state = _build_state(
        source, mode, rows, cols, cell_width, cell_height, auto_size, line, disable
    )
    try:
        items = export_plan(state, prefix, fmt)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--format") from exc
    for item in items:
        left, top, right, bottom = item.box
        print(f"{item.filename}  {left},{top},{right},{bottom}")
    print(f"[green]{len(items)} files")


_SETTINGS_PATH_OPTION = typer.Option(None, "--path", help="Settings file to use")


@settings_app.command("show")
@_handle_errors
def settings_show(path: Optional[Path] = _SETTINGS_PATH_OPTION) -> None:
    """Print the stored settings."""

    manager = SettingsManager(path=path)
    manager.load()
    typer.echo(json.dumps(manager.as_dict(), indent=2))


@settings_app.command("set")
@_handle_errors
def settings_set(
    key: str = typer.Argument(..., help="Setting name, e.g. rows"),
    value: str = typer.Argument(..., help="New value; JSON literals are decoded"),
    path: Optional[Path] = _SETTINGS_PATH_OPTION,
) -> None:
    """Change one stored setting."""

    try:
        decoded = json.loads(value)
    except json.JSONDecodeError:
        decoded = value
    manager = SettingsManager(path=path)
    manager.load()
    manager.set(key, decoded)
    print(f"[green]{key} = {decoded!r}")


if __name__ == "__main__":  # pragma: no cover
    app()
