"""Typer-based CLI for rendering serialized type-declaration ASTs to JSON Schema."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import toml
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__, config
from .ast_loader import load_root_file
from .config_manager import load_config, renderer_options_from_config, save_config
from .errors import RenderError
from .json_schema import JsonSchemaSpec, json_schema_renderer
from .renderer import render_file

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    help="📐 typeschema — render type declaration ASTs to JSON Schema.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"typeschema v{__version__}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config_or_exit(config_file: Optional[Path]) -> dict:
    try:
        return load_config(config_file)
    except toml.TomlDecodeError as exc:
        console.print(f"[red]Invalid config file:[/red] {exc}")
        raise typer.Exit(code=1)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    )
):
    """typeschema: JSON Schema documents from parsed type declarations."""
    pass


@app.command("render")
def render(
    ast_files: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Serialized AST files (JSON)."),
    out_dir: Optional[Path] = typer.Option(None, "--out", "-o", help="Output directory (default from config)."),
    spec: Optional[JsonSchemaSpec] = typer.Option(None, "--spec", "-s", help="JSON Schema dialect."),
    allow_additional_properties: Optional[bool] = typer.Option(
        None,
        "--allow-additional-properties/--no-additional-properties",
        help="Allow keys not declared in object definitions.",
    ),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to typeschema.toml."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
):
    """Render each AST file to a .schema.json document."""
    _setup_logging(verbose)
    cfg = _load_config_or_exit(config_file)

    try:
        options = renderer_options_from_config(
            cfg,
            spec=spec.value if spec is not None else None,
            allow_additional_properties=allow_additional_properties,
        )
    except RenderError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    renderer = json_schema_renderer(options.spec, options.allow_additional_properties)
    target_dir = out_dir or Path(cfg["output"]["directory"])

    table = Table(title=f"JSON Schema ({options.spec.value})")
    table.add_column("AST file", style="cyan")
    table.add_column("Output", style="green")

    # Render everything before writing so a failure leaves no partial output.
    resolved_target = target_dir.resolve()
    rendered = []
    for ast_file in ast_files:
        try:
            root = load_root_file(ast_file)
            relative_path, text = render_file(renderer, root)
        except RenderError as exc:
            console.print(f"[red]Render failed for {ast_file}:[/red] {exc}")
            raise typer.Exit(code=1)
        destination = target_dir / relative_path
        try:
            destination.resolve().relative_to(resolved_target)
        except ValueError:
            console.print(f"[red]Render failed for {ast_file}:[/red] {relative_path} is outside {target_dir}")
            raise typer.Exit(code=1)
        rendered.append((ast_file, destination, text))

    for ast_file, destination, text in rendered:
        destination.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps the platform line endings already in the text.
        with open(destination, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        logger.debug("Wrote %s", destination)
        table.add_row(str(ast_file), str(destination))

    console.print(table)
    console.print(f"[bold green]✅ Rendered {len(rendered)} file(s).[/bold green]")


@app.command("show-config")
def show_config(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to typeschema.toml."),
):
    """Print the effective configuration."""
    path = config_file or config.config_path()
    cfg = _load_config_or_exit(config_file)

    table = Table(title=f"Configuration ({path if path.exists() else 'defaults'})")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for section, values in cfg.items():
        for key, value in values.items():
            table.add_row(f"{section}.{key}", str(value))
    console.print(table)


@app.command("init-config")
def init_config(
    spec: JsonSchemaSpec = typer.Option(JsonSchemaSpec.DRAFT_2020_12, "--spec", "-s", help="JSON Schema dialect."),
    allow_additional_properties: bool = typer.Option(
        False,
        "--allow-additional-properties/--no-additional-properties",
        help="Allow keys not declared in object definitions.",
    ),
    out_dir: Optional[str] = typer.Option(None, "--out", "-o", help="Default output directory."),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to typeschema.toml."),
):
    """Write JSON Schema settings to typeschema.toml."""
    path = save_config(spec.value, allow_additional_properties, out_dir, path=config_file)
    console.print(f"[green]Saved configuration to[/green] [cyan]{path}[/cyan]")


if __name__ == "__main__":
    app()
