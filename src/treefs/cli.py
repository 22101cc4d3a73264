"""Command-line interface for treefs."""

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from treefs import __version__
from treefs.config import Settings, get_settings
from treefs.filesystem import create_filesystem, destroy_filesystem
from treefs.shell import CommandInterpreter

app = typer.Typer(
    name="treefs",
    help="In-memory hierarchical filesystem shell",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

ConfigOption = Annotated[
    str | None,
    typer.Option(
        "--config",
        "-f",
        help="Path to a YAML config file (overrides default config locations).",
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"treefs version {__version__}")
        raise typer.Exit()


def _load_settings(config_file: str | None) -> Settings:
    try:
        return get_settings(config_file=config_file)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _setup_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level_number(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=settings.log_show_time, show_path=False)],
    )


def _run_session(settings: Settings, session) -> int:
    """Run a shell session against a fresh filesystem and tear it down afterwards."""
    filesystem = create_filesystem(remove_policy=settings.remove_policy)
    interpreter = CommandInterpreter(filesystem, console=console, settings=settings)
    try:
        return session(interpreter)
    except MemoryError:
        console.print("[red]Error:[/red] out of memory")
        logging.exception("Session aborted")
        raise typer.Exit(1)
    finally:
        destroy_filesystem(filesystem)


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """treefs - In-memory hierarchical filesystem shell."""
    pass


@app.command()
def shell(
    config_file: ConfigOption = None,
    prompt: Annotated[
        str | None,
        typer.Option(
            "--prompt",
            "-p",
            help="Prompt text (overrides config)",
        ),
    ] = None,
) -> None:
    """Start an interactive shell on an empty filesystem.

    Commands: touch, mkdir, cd, ls, pwd, rm, tree, help, exit.
    """
    settings = _load_settings(config_file)
    _setup_logging(settings)

    if prompt is not None:
        settings = settings.model_copy(update={"prompt": prompt})

    console.print(Panel("Type [bold]help[/bold] for commands, [bold]exit[/bold] to leave.", title="treefs"))
    _run_session(settings, lambda interpreter: interpreter.repl())


@app.command()
def run(
    script: Annotated[
        str,
        typer.Argument(
            help="File of shell commands, one per line ('-' for stdin)",
        ),
    ],
    config_file: ConfigOption = None,
    stop_on_error: Annotated[
        bool | None,
        typer.Option(
            "--stop-on-error/--keep-going",
            help="Stop at the first failed command (overrides config)",
        ),
    ] = None,
    echo: Annotated[
        bool | None,
        typer.Option(
            "--echo/--no-echo",
            help="Echo each command before running it (overrides config)",
        ),
    ] = None,
) -> None:
    """Run a script of shell commands against an empty filesystem.

    Exits with status 1 if any command failed.

    Examples:
        treefs run commands.txt
        treefs run - < commands.txt
        treefs run commands.txt --stop-on-error --echo
    """
    settings = _load_settings(config_file)
    _setup_logging(settings)

    # Override settings if provided via CLI (CLI > env > yaml > defaults)
    overrides: dict[str, bool] = {}
    if stop_on_error is not None:
        overrides["stop_on_error"] = stop_on_error
    if echo is not None:
        overrides["echo_commands"] = echo
    settings = settings.model_copy(update=overrides)

    if script == "-":
        lines = sys.stdin.read().splitlines()
    else:
        path = Path(script)
        if not path.is_file():
            console.print(f"[red]Error:[/red] Script not found: {script}")
            raise typer.Exit(1)
        lines = path.read_text(encoding="utf-8").splitlines()

    failures = _run_session(settings, lambda interpreter: interpreter.run_lines(lines))
    if failures:
        logging.info(f"{failures} command(s) failed")
        raise typer.Exit(1)


@app.command()
def config(config_file: ConfigOption = None) -> None:
    """Show current configuration."""
    settings = _load_settings(config_file)

    console.print(Panel("[bold]Current Configuration[/bold]", title="treefs"))

    console.print(f"[bold]Prompt:[/bold] {settings.prompt!r}")
    console.print(f"[bold]Echo Commands:[/bold] {settings.echo_commands}")
    console.print(f"[bold]Stop On Error:[/bold] {settings.stop_on_error}")
    console.print(f"[bold]Remove Policy:[/bold] {settings.remove_policy}")
    max_depth = settings.tree_max_depth if settings.tree_max_depth is not None else "unlimited"
    console.print(f"[bold]Tree Max Depth:[/bold] {max_depth}")
    console.print(f"[bold]Log Level:[/bold] {settings.log_level}")


if __name__ == "__main__":
    app()
