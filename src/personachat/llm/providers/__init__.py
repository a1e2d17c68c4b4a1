from .openai import OpenAIChunkStream, OpenAITransport
from .sse import BearerAuth, SSEChunkStream, SSETransport

__all__ = [
    "BearerAuth",
    "OpenAIChunkStream",
    "OpenAITransport",
    "SSEChunkStream",
    "SSETransport",
]
