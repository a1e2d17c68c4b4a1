from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from ..errors import DecodeError
from .models import CompletionRequest, StreamEvent

DecodeErrorHandler = Callable[[DecodeError], None]


class ChunkStream(ABC):
    """An open streaming response.

    This module hides the design decision of how increments arrive on the
    wire (raw Server-Sent Events or an SDK stream object). Callers only see
    one operation:

        event = await stream.receive_next()

    which returns the next StreamEvent, raises EndOfStream when the stream
    finished normally, or raises StreamError on a fatal receive error.

    Supports async context manager protocol so the connection is released
    on every exit path:
        async with stream:
            while True:
                event = await stream.receive_next()
    """

    @abstractmethod
    async def receive_next(self) -> StreamEvent:
        """Receive the next increment.

        Returns:
            The next decoded StreamEvent

        Raises:
            EndOfStream: The stream ended gracefully
            StreamError: The stream failed mid-flight
        """
        pass

    @abstractmethod
    async def aclose(self) -> None:
        """Release the underlying connection."""
        pass

    async def __aenter__(self) -> "ChunkStream":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()


class CompletionTransport(ABC):
    """Abstract base class for streaming completion transports.

    Implementations must handle:
    - HTTP client setup and authentication
    - Request serialization
    - Mapping transport failures onto TransportError / StreamError

    Supports async context manager protocol for proper resource cleanup:
        async with transport:
            stream = await transport.open_stream(request)
        # Automatically cleaned up
    """

    @abstractmethod
    async def open_stream(
        self,
        request: CompletionRequest,
        on_decode_error: DecodeErrorHandler | None = None,
    ) -> ChunkStream:
        """Send a streaming completion request.

        Args:
            request: The request to send
            on_decode_error: Called for each event that fails to decode.
                Transports that cannot skip bad events may ignore it.

        Returns:
            An open ChunkStream positioned before the first event

        Raises:
            TransportError: The connection failed or the API rejected the request
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "CompletionTransport":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
