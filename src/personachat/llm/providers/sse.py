import logging
from collections.abc import Generator
from typing import Any

import httpx
from pydantic import ValidationError

from ...errors import DecodeError, EndOfStream, StreamError, TransportError
from ..base import ChunkStream, CompletionTransport, DecodeErrorHandler
from ..models import ChatCompletionChunk, CompletionRequest, StreamEvent

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"

# Sentinel payload OpenAI-compatible servers send after the last chunk
DONE_SENTINEL = "[DONE]"


def _log_decode_error(error: DecodeError) -> None:
    logger.warning("Skipping malformed stream event: %s", error)


class BearerAuth(httpx.Auth):
    """Attach the bearer token and JSON content type to every request.

    Installed as the client's auth flow so no call site has to set
    headers itself.
    """

    def __init__(self, token: str):
        self._token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self._token}"
        request.headers["Content-Type"] = "application/json"
        yield request


class SSEChunkStream(ChunkStream):
    """Chunk stream over a raw text/event-stream response body.

    Hidden design decisions:
    - SSE line framing (data fields, comments, event dispatch on blank line)
    - JSON payload decoding
    - Skipping events that fail to decode
    - Failing the stream on an in-stream error event
    """

    def __init__(
        self,
        response: httpx.Response,
        on_decode_error: DecodeErrorHandler | None = None,
    ):
        self._response = response
        self._lines = response.aiter_lines()
        self._on_decode_error = on_decode_error or _log_decode_error
        self._finished = False

    async def receive_next(self) -> StreamEvent:
        while True:
            if self._finished:
                raise EndOfStream

            data = await self._next_event_data()
            if data is None or data.strip() == DONE_SENTINEL:
                self._finished = True
                raise EndOfStream

            try:
                chunk = ChatCompletionChunk.model_validate_json(data)
            except ValidationError as e:
                self._on_decode_error(
                    DecodeError(f"invalid event payload: {e.error_count()} error(s)", payload=data)
                )
                continue

            error = chunk.error_message()
            if error is not None:
                self._finished = True
                raise StreamError(f"API error in stream: {error}")

            return chunk.to_event()

    async def _next_event_data(self) -> str | None:
        """Read lines until one event is complete.

        Returns:
            The event's data field (multiple data lines joined with newlines),
            or None when the body ended without another event
        """
        data_lines: list[str] = []

        while True:
            try:
                line = await anext(self._lines)
            except StopAsyncIteration:
                return "\n".join(data_lines) if data_lines else None
            except httpx.HTTPError as e:
                raise StreamError(f"Stream interrupted: {e}") from e

            if not line:
                if data_lines:
                    return "\n".join(data_lines)
                continue

            # Comment line, used by some servers as keep-alive
            if line.startswith(":"):
                continue

            field, _, value = line.partition(":")
            if value.startswith(" "):
                value = value[1:]

            # event, id and retry carry nothing the completion stream needs
            if field == "data":
                data_lines.append(value)

    async def aclose(self) -> None:
        await self._response.aclose()
        logger.debug("SSE response closed")


class SSETransport(CompletionTransport):
    """Streaming transport that parses the Server-Sent Events body itself.

    Hidden design decisions:
    - httpx client initialization
    - Authentication via the BearerAuth middleware
    - Request serialization
    - Mapping HTTP failures onto TransportError
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = None,
        **client_kwargs: Any
    ):
        """Initialize SSE transport.

        Args:
            api_key: Bearer token for the completion API
            base_url: API base URL; requests go to {base_url}/chat/completions
            timeout: Request timeout in seconds (None waits indefinitely)
            **client_kwargs: Additional kwargs for httpx.AsyncClient
        """
        self._endpoint = f"{base_url.rstrip('/')}/chat/completions"
        self._client = httpx.AsyncClient(
            auth=BearerAuth(api_key),
            timeout=timeout,
            **client_kwargs
        )

    @property
    def endpoint(self) -> str:
        """Get the chat-completions endpoint URL."""
        return self._endpoint

    async def open_stream(
        self,
        request: CompletionRequest,
        on_decode_error: DecodeErrorHandler | None = None,
    ) -> ChunkStream:
        http_request = self._client.build_request(
            "POST",
            self._endpoint,
            content=request.model_dump_json(),
            headers={"Accept": "text/event-stream"},
        )

        try:
            response = await self._client.send(http_request, stream=True)
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {self._endpoint} failed: {e}") from e

        if response.is_error:
            try:
                body = (await response.aread()).decode("utf-8", errors="replace")
            except httpx.HTTPError:
                body = ""
            finally:
                await response.aclose()
            raise TransportError(
                f"API returned HTTP {response.status_code}: {body.strip()[:500]}"
            )

        logger.debug("SSE stream opened: %s", self._endpoint)
        return SSEChunkStream(response, on_decode_error=on_decode_error)

    async def close(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()
