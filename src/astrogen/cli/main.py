"""Main CLI entry point."""

import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

import rich_click as click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from astrogen import __version__
from astrogen.compiler.config import CLIENT_DIRECTIVES, CompileOptions
from astrogen.compiler.exceptions import AstrogenError

console = Console(soft_wrap=True)

# Astro-like styling configuration (Cyan Theme)
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.STYLE_HELPTEXT_FIRST = True
click.rich_click.STYLE_COMMANDS_TABLE_SHOW_LINES = False
click.rich_click.STYLE_COMMANDS_TABLE_BOX = None
click.rich_click.STYLE_OPTIONS_TABLE_BOX = None
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try running 'astrogen --help' for more information."

click.rich_click.STYLE_HEADER_TEXT = "bold cyan"
click.rich_click.STYLE_OPTION = "cyan"
click.rich_click.STYLE_SWITCH = "cyan"
click.rich_click.STYLE_METAVAR = "dim white"
click.rich_click.STYLE_USAGE_COMMAND = "cyan"
click.rich_click.STYLE_USAGE = "dim"

click.rich_click.OPTION_GROUPS = {
    "astrogen": [
        {
            "name": "Global Flags",
            "options": ["--verbose", "--help", "--version"],
        }
    ],
    "astrogen compile": [
        {
            "name": "Output",
            "options": ["--output", "--no-format"],
        },
        {
            "name": "Code generation",
            "options": ["--client-directive", "--no-typescript", "--explicit-extensions"],
        },
    ],
}

click.rich_click.COMMAND_GROUPS = {
    "astrogen": [
        {
            "name": "Commands",
            "commands": ["compile", "analyze", "build"],
        }
    ]
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
    )


def _fail(error: AstrogenError) -> NoReturn:
    console.print(f"[bold red]Error:[/] {escape(str(error))}")
    sys.exit(1)


@click.group(
    help=f"""
[bold white on cyan] astrogen [/] [bold cyan]v{__version__}[/] Compile component IR into Astro components.

Run [bold cyan]astrogen compile FILE[/] to print the .astro source of one component.
Run [bold cyan]astrogen build SRC[/] to compile a whole directory.
"""
)
@click.version_option(__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool) -> None:
    _configure_logging(verbose)


@cli.command(name="compile")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the component here instead of stdout.",
)
@click.option(
    "--client-directive",
    type=click.Choice(CLIENT_DIRECTIVES),
    default=None,
    help="Hydration directive (default: chosen by analysis).",
)
@click.option("--no-typescript", is_flag=True, help="Emit untyped props.")
@click.option("--no-format", is_flag=True, help="Skip the formatting pass.")
@click.option(
    "--explicit-extensions",
    is_flag=True,
    help="Append .js to extensionless relative imports.",
)
def compile_command(
    file: Path,
    output: Optional[Path],
    client_directive: Optional[str],
    no_typescript: bool,
    no_format: bool,
    explicit_extensions: bool,
) -> None:
    """Compile one component document."""
    from astrogen.compiler.codegen.generator import compile_file

    options = CompileOptions(
        client_directive=client_directive,
        typescript=not no_typescript,
        prettier=not no_format,
        explicit_import_file_extension=explicit_extensions,
    )
    try:
        result = compile_file(file, options)
    except AstrogenError as e:
        _fail(e)

    if output is None:
        click.echo(result.code, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.code, encoding="utf-8")
    console.print(f"✅ Wrote [cyan]{escape(str(output))}[/]")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def analyze(file: Path) -> None:
    """Show why a component needs hydration."""
    from astrogen.compiler.codegen.hydration import analyze_hydration
    from astrogen.compiler.loader import ComponentLoader

    try:
        component = ComponentLoader().load_file(file)
    except AstrogenError as e:
        _fail(e)

    analysis = analyze_hydration(component)

    table = Table(title=f"{component.name} hydration", title_style="bold cyan")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Reason")
    for index, reason in enumerate(analysis.reasons, start=1):
        table.add_row(str(index), escape(reason))
    console.print(table)

    if analysis.needs_hydration:
        console.print(f"Suggested directive: [bold cyan]{analysis.suggested_directive}[/]")
    else:
        console.print("No hydration needed")


@cli.command()
@click.argument("src", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "--out-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (default: SRC/dist).",
)
def build(src: Path, out_dir: Optional[Path]) -> None:
    """Compile every component document in a directory."""
    from astrogen.compiler.build import build_components

    console.print(f"🔨 Building [cyan]{escape(str(src))}[/]...")
    summary = build_components(src, out_dir)

    console.print(
        "✅ Build complete "
        f"(components={summary.components}, hydrated={summary.hydrated}, "
        f"failed={summary.failed}, out={escape(str(summary.out_dir))})"
    )
    if summary.failed:
        for error in summary.errors:
            console.print(f"[red]✗[/] {escape(error)}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
