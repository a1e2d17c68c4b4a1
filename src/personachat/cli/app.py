"""Main CLI application using Typer."""
import logging
from enum import Enum

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..personality import PERSONALITIES, get_personality
from ..prompts import compile_system_prompt
from .loop import ChatLoop
from .providers import get_client, get_settings

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="personachat",
    help="Streaming terminal chat with selectable personalities",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


class LogLevel(str, Enum):
    """Log levels accepted by --log-level."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _configure_logging(level: LogLevel) -> None:
    logging.basicConfig(
        level=level.value.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


@app.command()
def chat(
    personality: str | None = typer.Option(
        None,
        "--personality",
        "-p",
        help="Personality preset (see 'personalities')"
    ),
    user: str | None = typer.Option(
        None,
        "--user",
        "-u",
        help="Your name, used by personalities that address you by name"
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        help="Model identifier"
    ),
    transport: str | None = typer.Option(
        None,
        "--transport",
        "-t",
        help="Streaming transport: sse (raw event stream) or openai (SDK)"
    ),
    base_url: str | None = typer.Option(
        None,
        "--base-url",
        help="API base URL"
    ),
    log_level: LogLevel = typer.Option(
        LogLevel.WARNING,
        "--log-level",
        "-l",
        case_sensitive=False,
        help="Log level"
    ),
):
    """Interactive streaming chat."""
    settings = get_settings(
        console,
        personality=personality,
        user_name=user,
        model=model,
        transport=transport,
        base_url=base_url,
    )
    _configure_logging(log_level)
    client = get_client(settings, console)

    loop = ChatLoop(
        client,
        personality=settings.personality,
        user_name=settings.user_name,
        console=console,
    )
    loop.run()


@app.command()
def personalities():
    """List the registered personality presets."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Key", style="yellow")
    table.add_column("Name")
    table.add_column("First person")
    table.add_column("Calls you")

    for key, preset in PERSONALITIES.items():
        calling = preset.user_calling
        if preset.is_user_overridable:
            calling += f" (or <name>{preset.user_calling_out})"
        table.add_row(key, preset.name, preset.first_person, calling)

    console.print(table)


@app.command()
def prompt(
    personality: str | None = typer.Argument(None, help="Personality preset"),
    user: str = typer.Option("", "--user", "-u", help="Your name"),
):
    """Print the compiled system prompt for a personality."""
    preset = get_personality(personality)
    console.out(compile_system_prompt(preset, user), highlight=False)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
