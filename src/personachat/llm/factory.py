from typing import Any

from .base import CompletionTransport
from .providers import OpenAITransport, SSETransport

SUPPORTED_TRANSPORTS = ("sse", "openai")


def create_transport(kind: str, **config: Any) -> CompletionTransport:
    """Create a streaming completion transport.

    This factory function hides the instantiation logic for the two
    streaming strategies. Pick one per deployment.

    Args:
        kind: Transport type ('sse' or 'openai')
        **config: Transport-specific configuration
            For SSE (raw event-stream over httpx):
                - api_key: str (required)
                - base_url: str (default: 'https://api.openai.com/v1')
                - timeout: float | None (default: None)
            For OpenAI (SDK stream object):
                - api_key: str (required)
                - base_url: str | None
                - timeout: float | None (default: None)

    Returns:
        Initialized transport instance

    Raises:
        ValueError: If transport type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> transport = create_transport("sse", api_key="sk-...")

        >>> transport = create_transport(
        ...     "openai",
        ...     api_key="sk-...",
        ...     base_url="https://api.openai.com/v1"
        ... )
    """
    kind_lower = kind.lower()

    if kind_lower == "sse":
        if "api_key" not in config:
            raise TypeError("SSE transport requires 'api_key' in config")
        return SSETransport(**config)

    if kind_lower == "openai":
        if "api_key" not in config:
            raise TypeError("OpenAI transport requires 'api_key' in config")
        return OpenAITransport(**config)

    raise ValueError(
        f"Unsupported transport: {kind}. "
        f"Supported transports: 'sse', 'openai'"
    )
