import logging
from typing import Any

import httpx
from openai import AsyncOpenAI, AsyncStream, OpenAIError
from openai.types.chat import ChatCompletionChunk

from ...errors import EndOfStream, StreamError, TransportError
from ..base import ChunkStream, CompletionTransport, DecodeErrorHandler
from ..models import CompletionRequest, StreamEvent

logger = logging.getLogger(__name__)


class OpenAIChunkStream(ChunkStream):
    """Chunk stream over the OpenAI SDK's AsyncStream object.

    The SDK decodes events itself, so there is no per-event skip here:
    anything other than a normal end of iteration is fatal for the turn.
    """

    def __init__(self, stream: AsyncStream[ChatCompletionChunk]):
        self._stream = stream
        self._iterator = stream.__aiter__()

    async def receive_next(self) -> StreamEvent:
        try:
            chunk = await self._iterator.__anext__()
        except StopAsyncIteration:
            raise EndOfStream from None
        except (OpenAIError, httpx.HTTPError, ValueError) as e:
            raise StreamError(f"Stream interrupted: {e}") from e

        if not chunk.choices:
            return StreamEvent()

        choice = chunk.choices[0]
        return StreamEvent(
            delta_text=choice.delta.content or "",
            is_terminal=choice.finish_reason is not None,
            finish_reason=choice.finish_reason,
        )

    async def aclose(self) -> None:
        await self._stream.close()
        logger.debug("SDK stream closed")


class OpenAITransport(CompletionTransport):
    """Streaming transport backed by the OpenAI SDK.

    Hidden design decisions:
    - OpenAI API client initialization
    - Authentication mechanism (handled by the SDK)
    - Mapping SDK errors onto TransportError / StreamError
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float | None = None,
        **client_kwargs: Any
    ):
        """Initialize OpenAI transport.

        Args:
            api_key: OpenAI API key
            base_url: Optional custom API base URL
            timeout: Request timeout in seconds (None waits indefinitely)
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        # No retry policy: a failed turn is reported and the loop moves on
        client_kwargs.setdefault("max_retries", 0)
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            **client_kwargs
        )

    async def open_stream(
        self,
        request: CompletionRequest,
        on_decode_error: DecodeErrorHandler | None = None,
    ) -> ChunkStream:
        try:
            stream = await self._client.chat.completions.create(
                model=request.model,
                messages=[msg.model_dump() for msg in request.messages],
                stream=True,
            )
        except OpenAIError as e:
            raise TransportError(f"Completion request failed: {e}") from e

        logger.debug("SDK stream opened for model %s", request.model)
        return OpenAIChunkStream(stream)

    async def close(self) -> None:
        """Close the OpenAI client.

        Note: Uses the OpenAI SDK's async context manager for proper cleanup.
        See: https://github.com/openai/openai-python#async-usage
        """
        await self._client.close()
