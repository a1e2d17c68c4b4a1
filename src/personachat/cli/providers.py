"""Provider factory functions for CLI.

Centralizes creation of settings, transport, and client instances from
environment variables. Hides configuration details from command
implementations.
"""

from typing import Any

import typer
from rich.console import Console

from ..config import ChatSettings, load_settings
from ..errors import ConfigError, MissingCredentialError
from ..llm import StreamingCompletionClient, create_transport

# Default console for output
_console = Console()


def get_settings(console: Console | None = None, **overrides: Any) -> ChatSettings:
    """Resolve settings, exiting with status 1 on configuration errors.

    Args:
        console: Optional Rich console for output
        **overrides: Values from CLI options (None means "not given")

    Raises:
        SystemExit: If API_KEY is not set or the configuration is invalid
    """
    con = console or _console
    try:
        return load_settings(**overrides)
    except MissingCredentialError as e:
        con.print(f"[red]Error: {e} in environment[/red]")
        raise typer.Exit(code=1)
    except ConfigError as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


def get_client(settings: ChatSettings, console: Console | None = None) -> StreamingCompletionClient:
    """Create the streaming client for the configured transport.

    Args:
        settings: Resolved chat settings
        console: Console the reply is streamed to
    """
    transport = create_transport(
        settings.transport,
        api_key=settings.api_key,
        base_url=settings.base_url,
    )
    return StreamingCompletionClient(
        transport,
        console=console or _console,
        model=settings.model,
    )
