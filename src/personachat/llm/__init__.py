from .base import ChunkStream, CompletionTransport
from .client import (
    StreamingCompletionClient,
    StreamState,
    build_request,
    build_system_message,
)
from .factory import create_transport
from .formatting import SoftWrapFormatter
from .models import (
    ChatCompletionChunk,
    CompletionRequest,
    Message,
    Role,
    StreamEvent,
    WireMessage,
)
from .providers import OpenAITransport, SSETransport

__all__ = [
    "ChunkStream",
    "CompletionTransport",
    "StreamingCompletionClient",
    "StreamState",
    "build_request",
    "build_system_message",
    "create_transport",
    "SoftWrapFormatter",
    "ChatCompletionChunk",
    "CompletionRequest",
    "Message",
    "Role",
    "StreamEvent",
    "WireMessage",
    "OpenAITransport",
    "SSETransport",
]
