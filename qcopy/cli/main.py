"""
Command line interface for q-copy.
Manage a list of files and copy their contents to the clipboard in one go.
"""

import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .. import __version__
from ..application.copy_files import CopyFilesUseCase
from ..application.manage_paths import ManagePathsUseCase
from ..domain.entities import DEFAULT_MAX_FILE_SIZE, Config, CopyResult, OutputFormat
from ..domain.errors import ConfigurationError, QCopyError
from ..domain.humanize import format_bytes, format_duration
from ..infrastructure.config_store import ConfigStore
from ..infrastructure.file_reader import FileAggregator
from ..infrastructure.logging_setup import configure_logging
from ..infrastructure.path_resolver import PathResolver

# Global consoles for rich output
console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

_STATUS_STYLES = {
    "file": "green",
    "directory": "cyan",
    "pattern": "magenta",
    "missing": "red",
}


def _fail(message: str, code: int = 1) -> NoReturn:
    """Print a single-line error and exit."""
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    sys.exit(code)


def _store(ctx: click.Context) -> ConfigStore:
    return ctx.obj["store"]


def _logger(ctx: click.Context) -> logging.Logger:
    return ctx.obj["logger"]


def safe_load_or_exit(ctx: click.Context) -> Config:
    """Load configuration or exit with a clean error."""
    try:
        return _store(ctx).load()
    except ConfigurationError as e:
        _fail(f"Configuration error: {e}")


@click.group(invoke_without_command=True)
@click.option('--config', '-c', 'config_path',
              type=click.Path(dir_okay=False, path_type=Path),
              help='Path to configuration file (default: per-user config directory)')
@click.option('--verbose', '-v', is_flag=True,
              help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True,
              help='Only report errors')
@click.version_option(__version__, prog_name="q-copy")
@click.pass_context
def cli(ctx, config_path: Optional[Path], verbose: bool, quiet: bool):
    """
    q-copy - copy the contents of a saved list of files to the clipboard.

    Run without a command to copy. Use `add`, `ls` and `rm` to manage the list.
    """
    ctx.ensure_object(dict)

    logger = configure_logging(verbose=verbose, quiet=quiet)
    ctx.obj['logger'] = logger
    ctx.obj['store'] = ConfigStore(config_path, logger=logger)
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet

    # No subcommand means copy with the stored settings
    if ctx.invoked_subcommand is None:
        ctx.invoke(copy_files)


@cli.command('copy')
@click.option('--format', '-f', 'output_format',
              type=click.Choice(OutputFormat.choices(), case_sensitive=False),
              help='Output format for this run (default: stored setting)')
@click.option('--headers/--no-headers', default=None,
              help='Include per-file metadata headers (default: stored setting)')
@click.option('--stdout', 'to_stdout', is_flag=True,
              help='Print the output instead of copying it')
@click.option('--max-size', type=click.IntRange(min=1), default=DEFAULT_MAX_FILE_SIZE,
              show_default=True, help='Maximum file size in bytes')
@click.option('--encoding', default='utf-8', show_default=True,
              help='Text encoding used to decode files')
@click.option('--workers', type=click.IntRange(min=1), default=4, show_default=True,
              help='Number of files read in parallel')
@click.pass_context
def copy_files(
    ctx,
    output_format: Optional[str] = None,
    headers: Optional[bool] = None,
    to_stdout: bool = False,
    max_size: int = DEFAULT_MAX_FILE_SIZE,
    encoding: str = 'utf-8',
    workers: int = 4,
):
    """Copy the contents of every configured file to the clipboard."""
    config = safe_load_or_exit(ctx)
    logger = _logger(ctx)

    if not config.file_paths:
        _fail("No file paths configured. Add some with: q-copy add <path>...")

    try:
        aggregator = FileAggregator(
            max_file_size=max_size, encoding=encoding, max_workers=workers, logger=logger
        )
    except LookupError:
        _fail(f"Unknown encoding: {encoding}")

    use_case = CopyFilesUseCase(
        config,
        resolver=PathResolver(logger=logger),
        aggregator=aggregator,
        logger=logger,
    )

    try:
        result = use_case.execute(
            output_format=OutputFormat(output_format.lower()) if output_format else None,
            include_headers=headers,
            deliver=not to_stdout,
        )
    except QCopyError as e:
        _fail(str(e))

    if to_stdout and result.output:
        click.echo(result.output)

    _report_copy(result, quiet=ctx.obj.get('quiet', False), to_stdout=to_stdout)

    if not result.success:
        sys.exit(1)


@cli.command('ls')
@click.pass_context
def list_paths(ctx):
    """List configured file paths."""
    use_case = ManagePathsUseCase(_store(ctx), logger=_logger(ctx))
    try:
        entries = use_case.list_entries()
    except ConfigurationError as e:
        _fail(f"Configuration error: {e}")

    if not entries:
        console.print("No file paths configured.")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="cyan", no_wrap=True)
    table.add_column("Path", overflow="fold")
    table.add_column("Status")

    for entry in entries:
        style = _STATUS_STYLES.get(entry.status, "yellow")
        table.add_row(str(entry.index), escape(entry.path), f"[{style}]{entry.status}[/{style}]")

    console.print(table)


@cli.command('add')
@click.argument('inputs', nargs=-1, required=True)
@click.pass_context
def add_paths(ctx, inputs: tuple):
    """Add files, directories or glob patterns to the list."""
    use_case = ManagePathsUseCase(_store(ctx), logger=_logger(ctx))
    try:
        result = use_case.add(list(inputs))
    except QCopyError as e:
        _fail(str(e))

    for path in result.added:
        console.print(f"[green]+[/green] {escape(path)}")
    for path in result.duplicates:
        console.print(f"[yellow]=[/yellow] {escape(path)} (already listed)")
    for raw, message in result.invalid:
        err_console.print(f"[red]![/red] {escape(raw)}: {escape(message)}")

    console.print(f"Added {len(result.added)} path(s).")
    if result.invalid and not result.added:
        sys.exit(1)


@cli.command('rm')
@click.argument('identifiers', nargs=-1, required=True)
@click.pass_context
def remove_paths(ctx, identifiers: tuple):
    """
    Remove paths by index, range or path.

    Examples: q-copy rm 2, q-copy rm 1-3 5, q-copy rm ~/notes.md
    """
    use_case = ManagePathsUseCase(_store(ctx), logger=_logger(ctx))
    try:
        result = use_case.remove(list(identifiers))
    except QCopyError as e:
        _fail(str(e))

    for path in result.removed:
        console.print(f"[red]-[/red] {escape(path)}")
    for token in result.invalid_inputs:
        err_console.print(f"[yellow]Invalid index or range:[/yellow] {escape(token)}")
    for token in result.unmatched_paths:
        err_console.print(f"[yellow]Not in list:[/yellow] {escape(token)}")

    console.print(f"Removed {len(result.removed)} path(s).")
    if not result.removed:
        sys.exit(1)


@cli.command('clear')
@click.option('--yes', '-y', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def clear_paths(ctx, yes: bool):
    """Remove every configured path."""
    if not yes:
        click.confirm("Remove all configured paths?", abort=True)

    use_case = ManagePathsUseCase(_store(ctx), logger=_logger(ctx))
    try:
        count = use_case.clear()
    except QCopyError as e:
        _fail(str(e))
    console.print(f"Removed {count} path(s).")


@cli.command('set-format')
@click.argument('output_format', type=click.Choice(OutputFormat.choices(), case_sensitive=False))
@click.pass_context
def set_format(ctx, output_format: str):
    """Set the default output format."""
    use_case = ManagePathsUseCase(_store(ctx), logger=_logger(ctx))
    try:
        config = use_case.set_format(OutputFormat(output_format.lower()))
    except QCopyError as e:
        _fail(str(e))
    console.print(f"Output format set to [cyan]{config.output_format.value}[/cyan].")


@cli.command('headers')
@click.argument('state', type=click.Choice(['on', 'off'], case_sensitive=False))
@click.pass_context
def set_headers(ctx, state: str):
    """Turn per-file metadata headers on or off."""
    use_case = ManagePathsUseCase(_store(ctx), logger=_logger(ctx))
    try:
        config = use_case.set_headers(state.lower() == 'on')
    except QCopyError as e:
        _fail(str(e))
    console.print(f"Headers {'enabled' if config.include_headers else 'disabled'}.")


@cli.command('prompt')
@click.argument('text', required=False, default='')
@click.pass_context
def set_prompt(ctx, text: str):
    """Set text placed before the copied files (omit to clear)."""
    use_case = ManagePathsUseCase(_store(ctx), logger=_logger(ctx))
    try:
        use_case.set_prompt(text)
    except QCopyError as e:
        _fail(str(e))
    console.print("Prompt set." if text else "Prompt cleared.")


@cli.command('show')
@click.pass_context
def show_resolved(ctx):
    """Show the files the configured entries currently resolve to."""
    config = safe_load_or_exit(ctx)
    resolution = PathResolver(logger=_logger(ctx)).resolve_detailed(config.file_paths)

    for index, path in enumerate(resolution.paths, start=1):
        console.print(f"{index}: {escape(path)}")
    skipped = len(resolution.unresolved) + len(resolution.rejected)
    console.print(
        f"{len(resolution.paths)} file(s) from {len(config.file_paths)} configured entries"
        + (f", {skipped} skipped." if skipped else ".")
    )


@cli.command('validate')
@click.pass_context
def validate_config(ctx):
    """Validate the configuration file and the stored paths."""
    use_case = ManagePathsUseCase(_store(ctx), logger=_logger(ctx))
    try:
        issues = use_case.validate()
    except ConfigurationError as e:
        _fail(f"Configuration error: {e}")

    if issues:
        console.print("[yellow]Configuration has issues:[/yellow]")
        for issue in issues:
            console.print(f"  - {escape(issue)}")
        sys.exit(1)

    console.print("[green]✓[/green] Configuration is valid!")
    console.print(f"Config file: {escape(str(_store(ctx).config_path))}")


def _report_copy(result: CopyResult, quiet: bool, to_stdout: bool) -> None:
    """Summarize a copy run on stderr."""
    aggregation = result.aggregation

    if aggregation.errors:
        table = Table(title=f"{len(aggregation.errors)} file(s) could not be read",
                      show_header=True, header_style="bold red")
        table.add_column("Path", overflow="fold")
        table.add_column("Code", style="yellow", no_wrap=True)
        table.add_column("Reason")
        for error in aggregation.errors:
            table.add_row(escape(error.path), error.code.value, escape(error.message))
        err_console.print(table)

    if not result.success:
        err_console.print("[red]Error:[/red] No files could be read.")
        return

    if quiet:
        return

    target = "output" if to_stdout else "clipboard"
    err_console.print(
        f"[green]✓[/green] Copied {aggregation.records_processed} file(s) "
        f"({format_bytes(aggregation.total_size)}) to {target} "
        f"in {format_duration(result.execution_time_seconds)}"
    )


# Entry point for the CLI
def main(argv: Optional[List[str]] = None):
    """Main entry point for the CLI application."""
    try:
        cli(args=argv, prog_name="q-copy")
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
