"""Streaming completion client.

Turns one conversation turn into a streaming request, renders increments
as they arrive, and returns the assembled assistant message.
"""

import logging
from collections.abc import Iterable
from enum import Enum

from rich.console import Console

from ..errors import DecodeError, EndOfStream
from ..personality import Personality
from ..prompts import compile_system_prompt
from .base import CompletionTransport, DecodeErrorHandler
from .formatting import WRAP_WIDTH, SoftWrapFormatter
from .models import CompletionRequest, Message, Role

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-3.5-turbo"


class StreamState(str, Enum):
    """Lifecycle of a single completion."""

    IDLE = "idle"
    CONNECTING = "connecting"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


def build_system_message(personality: Personality, user_name: str) -> Message:
    """Compile the personality into a system-role message with no speaker."""
    return Message(role=Role.SYSTEM, text=compile_system_prompt(personality, user_name))


def build_request(
    history: Iterable[Message],
    personality: Personality,
    user_name: str,
    model: str = DEFAULT_MODEL,
) -> CompletionRequest:
    """Build the outbound request for one turn.

    The system message is compiled fresh and placed first; the history
    follows in its original order.
    """
    system_message = build_system_message(personality, user_name)
    messages = [system_message, *history]
    return CompletionRequest(
        model=model,
        stream=True,
        messages=[msg.to_wire() for msg in messages],
    )


class StreamingCompletionClient:
    """Consumes a streaming completion and renders it incrementally.

    The client is strategy-agnostic: it only talks to a CompletionTransport
    and the ChunkStream it opens. History is read, never mutated.

    Usage:
        client = StreamingCompletionClient(transport, console)
        reply = await client.complete(history, personality, "太郎")
    """

    def __init__(
        self,
        transport: CompletionTransport,
        console: Console | None = None,
        model: str = DEFAULT_MODEL,
        on_decode_error: DecodeErrorHandler | None = None,
        wrap_width: int = WRAP_WIDTH,
    ):
        self._transport = transport
        self._console = console or Console()
        self._model = model
        self._on_decode_error = on_decode_error
        self._wrap_width = wrap_width
        self._state = StreamState.IDLE

    @property
    def model(self) -> str:
        """Get the model identifier sent with each request."""
        return self._model

    @property
    def state(self) -> StreamState:
        """State of the most recent completion."""
        return self._state

    def set_decode_error_callback(self, callback: DecodeErrorHandler | None) -> None:
        """Set the callback invoked for each skipped malformed event."""
        self._on_decode_error = callback

    def _report_decode_error(self, error: DecodeError) -> None:
        if self._on_decode_error is not None:
            self._on_decode_error(error)
        else:
            logger.warning("Skipping malformed stream event: %s", error)

    async def complete(
        self,
        history: Iterable[Message],
        personality: Personality,
        user_name: str,
    ) -> Message:
        """Run one streaming completion.

        Args:
            history: Conversation so far, oldest first (without system message)
            personality: Active personality; compiled into the system message
            user_name: Name the personality may use to address the user

        Returns:
            Assistant message with the full reply, spoken by the personality

        Raises:
            TransportError: The request could not be sent
            StreamError: The stream failed mid-flight; no message is produced
        """
        request = build_request(history, personality, user_name, model=self._model)
        formatter = SoftWrapFormatter(self._console, width=self._wrap_width)

        self._state = StreamState.CONNECTING
        try:
            stream = await self._transport.open_stream(
                request, on_decode_error=self._report_decode_error
            )
        except BaseException:
            self._state = StreamState.FAILED
            raise

        self._state = StreamState.STREAMING
        try:
            async with stream:
                while True:
                    try:
                        event = await stream.receive_next()
                    except EndOfStream:
                        break
                    formatter.feed(event.delta_text)
                    if event.is_terminal:
                        logger.debug("Stream finished: %s", event.finish_reason)
        except BaseException:
            # Covers cancellation too; the stream is already closed here
            self._state = StreamState.FAILED
            raise

        formatter.finish()
        self._state = StreamState.COMPLETED

        return Message(
            role=Role.ASSISTANT,
            speaker_name=personality.name,
            text=formatter.text,
        )

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._transport.close()
