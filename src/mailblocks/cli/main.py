"""CLI entry point for mailblocks.

Invoked as::

    mailblocks [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m mailblocks.cli.main

Commands
--------
compile     Compile semantic blocks into a document tree or markup
render      Render a document tree to email markup
parse       Parse email markup back into a document tree
validate    Check a tree (or markup) against the structural rules
diff        Compare two trees by node id
stats       Show component statistics for a tree
contrast    Check a text color against a background
version     Show version information

Tree files are read by suffix: ``.json``, ``.yaml``/``.yml`` or, where a
command accepts markup, ``.html``/``.htm``.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, NoReturn

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from mailblocks.errors import StructuralError

if TYPE_CHECKING:
    from mailblocks.nodes.nodes import DocumentNode
    from mailblocks.settings import GlobalEmailSettings

console = Console()
err_console = Console(stderr=True)

_MARKUP_SUFFIXES = (".html", ".htm")
_YAML_SUFFIXES = (".yaml", ".yml")


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {message}")
    sys.exit(1)


def _read_source(path: str) -> str:
    """Read a source file, exiting on error."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        _fail(f"File not found: {path}")
    except OSError as exc:
        _fail(f"Cannot read {path}: {exc}")


def _load_data(path: str) -> Any:
    """Load a JSON or YAML document, exiting on syntax errors."""
    source = _read_source(path)
    try:
        if Path(path).suffix.lower() in _YAML_SUFFIXES:
            return yaml.safe_load(source)
        return json.loads(source)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        _fail(f"Cannot decode {path}: {exc}")


def _load_tree(path: str, allow_markup: bool = True) -> "DocumentNode":
    """Load a tree from a JSON/YAML dump or, if allowed, from markup."""
    from mailblocks.nodes.serializer import NodeSerializer
    from mailblocks.parser import parse

    suffix = Path(path).suffix.lower()
    try:
        if suffix in _MARKUP_SUFFIXES and allow_markup:
            return parse(_read_source(path))
        data = _load_data(path)
        if not isinstance(data, dict):
            _fail(f"{path} must contain a tree mapping")
        return NodeSerializer().from_dict(data)
    except StructuralError as exc:
        _fail(f"{path}: {exc}")


def _load_settings(path: str | None) -> "GlobalEmailSettings":
    from mailblocks.settings import GlobalEmailSettings, load_settings

    if path is None:
        return GlobalEmailSettings()
    try:
        return load_settings(path)
    except FileNotFoundError:
        _fail(f"File not found: {path}")
    except (OSError, ValueError, yaml.YAMLError) as exc:
        _fail(f"Invalid settings in {path}: {exc}")


def _dump_tree(tree: "DocumentNode", output_format: str) -> tuple[str, str]:
    from mailblocks.nodes.serializer import NodeSerializer

    serializer = NodeSerializer(allow_inline_markup=True)
    if output_format == "yaml":
        return serializer.to_yaml(tree), "yaml"
    return serializer.to_json(tree, indent=2), "json"


def _emit(text: str, lang: str, output: str | None, label: str) -> None:
    """Write ``text`` to ``output`` or pretty-print it on the console."""
    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]{label} written to[/green] {output}")
    else:
        console.print(Syntax(text, lang, line_numbers=True))


def _severity_color(severity_name: str) -> str:
    """Map a DiagnosticSeverity name to a Rich color string."""
    colors = {
        "ERROR": "red",
        "WARNING": "yellow",
        "INFORMATION": "blue",
        "HINT": "dim",
    }
    return colors.get(severity_name, "white")


def _diagnostics_table(title: str, diagnostics: list[Any]) -> Table:
    table = Table(title=title, show_lines=True)
    table.add_column("Severity", style="bold", min_width=10)
    table.add_column("Code", min_width=6)
    table.add_column("Location", min_width=10)
    table.add_column("Message")
    for d in diagnostics:
        color = _severity_color(d.severity.name)
        table.add_row(
            f"[{color}]{d.severity.name}[/{color}]",
            d.code,
            d.path,
            d.message + (f"\n[dim]hint: {d.suggestion}[/dim]" if d.suggestion else ""),
        )
    return table


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="mailblocks")
def cli() -> None:
    """Bidirectional email transform engine: blocks, trees and markup."""


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from mailblocks import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]mailblocks[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# compile command
# ---------------------------------------------------------------------------


@cli.command(name="compile")
@click.argument("file", type=click.Path(exists=False))
@click.option("--settings", "settings_path", default=None, help="JSON or YAML settings file")
@click.option("--preview", "preview_text", default=None, help="Inbox preview text")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml", "markup"], case_sensitive=False),
    default="json",
    help="Output format (default: json)",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def compile_command(
    file: str,
    settings_path: str | None,
    preview_text: str | None,
    output_format: str,
    output: str | None,
) -> None:
    """Compile semantic blocks into an email tree.

    FILE holds a list of blocks, or a mapping with ``blocks`` and optional
    ``settings`` and ``previewText`` keys, as JSON or YAML.

    Examples:

    \b
        mailblocks compile newsletter.yaml --format markup -o newsletter.html
        mailblocks compile blocks.json --settings brand.yaml
    """
    from mailblocks.compiler import BlockCompiler
    from mailblocks.renderer import render
    from mailblocks.settings import GlobalEmailSettings

    data = _load_data(file)
    settings = _load_settings(settings_path)
    if isinstance(data, dict):
        blocks = data.get("blocks", [])
        if settings_path is None and isinstance(data.get("settings"), dict):
            try:
                settings = GlobalEmailSettings.from_dict(data["settings"])
            except ValueError as exc:
                _fail(f"Invalid settings in {file}: {exc}")
        preview_text = preview_text or data.get("previewText")
    else:
        blocks = data
    if not isinstance(blocks, list):
        _fail(f"{file} must contain a list of blocks")

    compiler = BlockCompiler(settings)
    try:
        tree = compiler.compile_email(blocks, preview_text)
    except StructuralError as exc:
        _fail(str(exc))
    except ValueError as exc:
        _fail(f"{file}: {exc}")

    for diagnostic in compiler.diagnostics:
        color = _severity_color(diagnostic.severity.name)
        err_console.print(f"[{color}]{diagnostic}[/{color}]")

    if output_format == "markup":
        try:
            text, lang = render(tree, settings, pretty=True).markup, "html"
        except StructuralError as exc:
            _fail(str(exc))
    else:
        text, lang = _dump_tree(tree, output_format)
    _emit(text, lang, output, "Output")


# ---------------------------------------------------------------------------
# render command
# ---------------------------------------------------------------------------


@cli.command(name="render")
@click.argument("file", type=click.Path(exists=False))
@click.option("--settings", "settings_path", default=None, help="JSON or YAML settings file")
@click.option("--pretty/--compact", default=True, help="Indent the markup (default: pretty)")
@click.option("--plain-text", "plain_path", default=None, help="Also write a plain-text version here")
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def render_command(
    file: str,
    settings_path: str | None,
    pretty: bool,
    plain_path: str | None,
    output: str | None,
) -> None:
    """Render a JSON or YAML document tree to email markup.

    FILE is the path to the tree dump.
    """
    from mailblocks.renderer import render

    tree = _load_tree(file, allow_markup=False)
    settings = _load_settings(settings_path)
    try:
        result = render(tree, settings, pretty=pretty, plain_text=plain_path is not None)
    except StructuralError as exc:
        _fail(f"{file}: {exc}")

    if plain_path and result.plain_text is not None:
        Path(plain_path).write_text(result.plain_text, encoding="utf-8")
        console.print(f"[green]Plain text written to[/green] {plain_path}")
    _emit(result.markup, "html", output, "Markup")


# ---------------------------------------------------------------------------
# parse command
# ---------------------------------------------------------------------------


@cli.command(name="parse")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Tree output format",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def parse_command(file: str, output_format: str, output: str | None) -> None:
    """Parse email markup and dump the document tree.

    FILE is the path to the markup file.
    """
    from mailblocks.parser import parse

    source = _read_source(file)
    try:
        tree = parse(source)
    except StructuralError as exc:
        _fail(f"Parse error in {file} at {exc.path}: {exc.message}")

    text, lang = _dump_tree(tree, output_format)
    _emit(text, lang, output, "Tree")


# ---------------------------------------------------------------------------
# validate command
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("file", type=click.Path(exists=False))
@click.option("--strict", is_flag=True, default=False, help="Treat warnings as errors")
def validate_command(file: str, strict: bool) -> None:
    """Validate a document tree.

    FILE is a JSON/YAML tree dump or a markup file.
    """
    from mailblocks.validator import TreeValidator

    tree = _load_tree(file)
    diagnostics = TreeValidator(strict=strict).validate(tree)

    if not diagnostics:
        console.print(f"[green]OK[/green] {file}: no issues found")
        sys.exit(0)

    errors = [d for d in diagnostics if d.is_error]
    warnings = [d for d in diagnostics if not d.is_error]

    console.print(_diagnostics_table(f"Validation: {file}", diagnostics))
    console.print(
        f"\n[bold]Summary:[/bold] {len(errors)} error(s), {len(warnings)} warning(s)"
    )

    if errors:
        sys.exit(1)


# ---------------------------------------------------------------------------
# diff command
# ---------------------------------------------------------------------------


@cli.command(name="diff")
@click.argument("old", type=click.Path(exists=False))
@click.argument("new", type=click.Path(exists=False))
def diff_command(old: str, new: str) -> None:
    """Compare two document trees node by node.

    OLD and NEW are tree dumps or markup files.
    """
    from mailblocks.differ import diff

    changes = diff(_load_tree(old), _load_tree(new))

    if not changes:
        console.print("[green]No structural changes between the two trees.[/green]")
        sys.exit(0)

    console.print(f"[bold]Tree diff:[/bold] {old} → {new}\n")
    for change in changes:
        line = str(change)
        if line.startswith("[+]"):
            style = "green"
        elif line.startswith("[-]"):
            style = "red"
        else:
            style = "yellow"
        console.print(line, markup=False, style=style)

    console.print(f"\n[bold]{len(changes)}[/bold] change(s) total")


# ---------------------------------------------------------------------------
# stats command
# ---------------------------------------------------------------------------


@cli.command(name="stats")
@click.argument("file", type=click.Path(exists=False))
def stats_command(file: str) -> None:
    """Show component counts and depth for a tree.

    FILE is a JSON/YAML tree dump or a markup file.
    """
    from mailblocks.tree import get_tree_stats

    stats = get_tree_stats(_load_tree(file))

    table = Table(title=f"Components: {file}")
    table.add_column("Type", style="bold")
    table.add_column("Count", justify="right")
    for component_type, count in sorted(stats.component_types.items()):
        table.add_row(component_type, str(count))
    console.print(table)
    console.print(
        f"\n[bold]{stats.total_components}[/bold] component(s), "
        f"{stats.editable_components} editable, max depth {stats.max_depth}"
    )


# ---------------------------------------------------------------------------
# contrast command
# ---------------------------------------------------------------------------


@cli.command(name="contrast")
@click.argument("text_color")
@click.argument("background_color")
@click.option("--fallback", default="#111111", show_default=True, help="Color used when rejected")
@click.option("--body", is_flag=True, default=False, help="Apply the body text rules")
def contrast_command(text_color: str, background_color: str, fallback: str, body: bool) -> None:
    """Check TEXT_COLOR on BACKGROUND_COLOR and print the safe color.

    Exits 1 when the requested color is replaced by the fallback.

    Examples:

    \b
        mailblocks contrast "#ffff00" "#ffffff"
        mailblocks contrast "#333333" "#ffffff" --body
    """
    from mailblocks.colors import contrast_ratio, get_safe_body_color, get_safe_headline_color, is_valid_hex

    if not is_valid_hex(background_color):
        _fail(f"Background {background_color!r} is not a 6-digit hex color")

    diagnostics: list[Any] = []
    check = get_safe_body_color if body else get_safe_headline_color
    safe = check(text_color, background_color, fallback, diagnostics)

    table = Table(show_header=False, box=None)
    table.add_row("Requested", text_color)
    if is_valid_hex(text_color):
        table.add_row("Contrast", f"{contrast_ratio(text_color, background_color):.2f}:1")
    table.add_row("Safe color", f"[bold]{safe}[/bold]")
    console.print(table)

    if diagnostics:
        for diagnostic in diagnostics:
            console.print(f"[yellow]{diagnostic.message}[/yellow]", highlight=False)
        sys.exit(1)


if __name__ == "__main__":
    cli()
