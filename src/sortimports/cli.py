# src/sortimports/cli.py

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from typing_extensions import Annotated

from .core.config import (
    SETTINGS_FILE_NAMES,
    Settings,
    find_settings_file,
    get_default_settings,
    load_settings,
    save_settings,
)
from .core.logging import get_debug_logger, setup_logging
from .core.processor import SortResult, build_config, iter_source_files, process_file, process_text, render_diff

# CLI argument/option definitions
SOURCE_PATHS = typer.Argument(..., help="Files or directories to process")
SOURCE_FILE = typer.Argument(..., help="File to process")
FORMAT_SOURCE = typer.Argument(..., help="File to format, or - to read from stdin")
CHECK = typer.Option(False, "--check", help="Do not write, exit with 1 if any file would change")
SHOW_DIFF = typer.Option(False, "--diff", help="Print a diff of every change")
CONFIG_PATH = typer.Option(None, "--config", "-c", help="Settings file to use")
SORT_MODE = typer.Option(None, "--sort-mode", "-m", help="Sort mode: length or alphabetical")
MAX_LINE_LENGTH = typer.Option(None, "--max-line-length", "-l", help="Wrap imports longer than this")
NO_DETECT_ALIASES = typer.Option(
    False, "--no-detect-aliases", help="Do not read tsconfig/vite/webpack aliases"
)
DEBUG = typer.Option(False, "--debug", "-d", help="Show debug information")

app = typer.Typer(name="sortimports", help="Sort and group JavaScript/TypeScript imports")
console = Console()
debug_log = get_debug_logger()


def resolve_settings(
    path: Optional[Path],
    config_path: Optional[Path] = None,
    sort_mode: Optional[str] = None,
    max_line_length: Optional[int] = None,
    no_detect_aliases: bool = False,
) -> Settings:
    """Settings for ``path``: explicit file, nearest settings file, or defaults."""
    settings_file = config_path or find_settings_file(path or Path.cwd())
    settings = load_settings(settings_file) if settings_file else get_default_settings()

    overrides = {}
    if sort_mode is not None:
        overrides["sort_mode"] = sort_mode
    if max_line_length is not None:
        overrides["max_line_length"] = max_line_length
    if no_detect_aliases:
        overrides["detect_aliases"] = False

    if not overrides:
        return settings
    return Settings(**{**settings.model_dump(), **overrides})


def print_diff(result: SortResult, path: Optional[Path] = None) -> None:
    diff_text = render_diff(result, path)
    if diff_text:
        console.print(Syntax(diff_text, "diff", theme="ansi_dark", background_color="default"))


@app.command("sort")
def sort_command(
    paths: List[Path] = SOURCE_PATHS,
    check: bool = CHECK,
    show_diff: bool = SHOW_DIFF,
    config_path: Optional[Path] = CONFIG_PATH,
    sort_mode: Optional[str] = SORT_MODE,
    max_line_length: Optional[int] = MAX_LINE_LENGTH,
    no_detect_aliases: bool = NO_DETECT_ALIASES,
    debug: bool = DEBUG,
):
    """Sort imports in place."""
    setup_logging(debug=debug)

    files = list(iter_source_files(paths))
    if not files:
        console.print("[yellow]No JavaScript or TypeScript files found[/yellow]")
        return

    changed: List[Path] = []
    failed: List[Path] = []

    for file_path in files:
        try:
            settings = resolve_settings(file_path, config_path, sort_mode, max_line_length, no_detect_aliases)
            if settings.log_dir:
                setup_logging(Path(settings.log_dir), debug=debug)
            result = process_file(file_path, settings, write=not check)
        except Exception as e:
            debug_log.error(f"Failed to process {file_path}: {e}")
            console.print(f"[red]Error processing {file_path}: {e}[/red]")
            failed.append(file_path)
            continue

        if result.changed:
            changed.append(file_path)
            verb = "Would reorganize" if check else "Reorganized"
            console.print(f"{verb} [bold]{file_path}[/bold]")
            if show_diff:
                print_diff(result, file_path)

    unchanged = len(files) - len(changed) - len(failed)
    console.print(
        f"[green]{len(changed)} changed[/green], {unchanged} unchanged"
        + (f", [red]{len(failed)} failed[/red]" if failed else "")
    )

    if failed or (check and changed):
        raise typer.Exit(1)


@app.command()
def preview(
    file_path: Path = SOURCE_FILE,
    config_path: Optional[Path] = CONFIG_PATH,
    sort_mode: Optional[str] = SORT_MODE,
    max_line_length: Optional[int] = MAX_LINE_LENGTH,
    no_detect_aliases: bool = NO_DETECT_ALIASES,
    debug: bool = DEBUG,
):
    """Show the changes sort would make, without writing them."""
    setup_logging(debug=debug)
    try:
        if not file_path.is_file():
            console.print(f"[red]Error: File {file_path} not found")
            raise typer.Exit(1)

        settings = resolve_settings(file_path, config_path, sort_mode, max_line_length, no_detect_aliases)
        result = process_file(file_path, settings, write=False)

        if result.changed:
            print_diff(result, file_path)
        else:
            console.print("[green]No import changes were needed.[/green]")

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error sorting imports: {e}[/red]")
        raise typer.Exit(1) from e


@app.command("format")
def format_command(
    source: str = FORMAT_SOURCE,
    config_path: Optional[Path] = CONFIG_PATH,
    sort_mode: Optional[str] = SORT_MODE,
    max_line_length: Optional[int] = MAX_LINE_LENGTH,
    no_detect_aliases: bool = NO_DETECT_ALIASES,
):
    """Print the reorganized text to stdout."""
    try:
        if source == "-":
            path = None
            text = typer.get_text_stream("stdin").read()
        else:
            path = Path(source)
            text = path.read_text(encoding="utf-8")

        settings = resolve_settings(path, config_path, sort_mode, max_line_length, no_detect_aliases)
        result = process_text(text, build_config(settings, path), path)
        typer.echo(result.updated, nl=False)

    except Exception as e:
        console.print(f"[red]Error sorting imports: {e}[/red]")
        raise typer.Exit(1) from e


config_app = typer.Typer(name="config", help="Manage sortimports settings")
app.add_typer(config_app)


@config_app.command("show")
def config_show(
    path: Annotated[Optional[Path], typer.Argument(help="File or directory to resolve settings for")] = None,
    config_path: Optional[Path] = CONFIG_PATH,
):
    """Show the settings that apply to a path."""
    try:
        target = path or Path.cwd()
        settings_file = config_path or find_settings_file(target)
        settings = resolve_settings(target, config_path)
        core_config = build_config(settings, target if target.is_file() else None)

        table = Table(title=f"Settings ({settings_file or 'defaults'})")
        table.add_column("Setting")
        table.add_column("Value")
        for name, value in settings.model_dump().items():
            table.add_row(name, repr(value))
        table.add_row("resolved alias prefixes", ", ".join(core_config.alias_prefixes))
        console.print(table)

    except Exception as e:
        console.print(f"[red]Error reading settings: {e}[/red]")
        raise typer.Exit(1) from e


@config_app.command("init")
def config_init(
    directory: Annotated[Path, typer.Option("--path", "-p", help="Directory to write the settings file to")] = Path("."),
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite an existing file")] = False,
):
    """Write a settings file with the default values."""
    settings_path = directory / SETTINGS_FILE_NAMES[0]
    if settings_path.exists() and not force:
        console.print(f"[red]Error: {settings_path} already exists (use --force to overwrite)[/red]")
        raise typer.Exit(1)

    try:
        directory.mkdir(parents=True, exist_ok=True)
        save_settings(get_default_settings(), settings_path)
        console.print(f"[green]Wrote {settings_path}[/green]")
    except Exception as e:
        console.print(f"[red]Error writing settings: {e}[/red]")
        raise typer.Exit(1) from e


if __name__ == "__main__":
    app()
