"""Pytest configuration and shared fixtures."""
import io
import json
import os

import pytest
from rich.console import Console

from personachat.errors import EndOfStream
from personachat.llm import ChunkStream, CompletionTransport, StreamEvent
from personachat.personality import Personality


class FakeChunkStream(ChunkStream):
    """Replays scripted increments; an Exception item is raised in place."""

    def __init__(self, items):
        self._items = list(items)
        self.close_count = 0

    async def receive_next(self):
        if not self._items:
            raise EndOfStream
        item = self._items.pop(0)
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, StreamEvent):
            return item
        return StreamEvent(delta_text=item)

    async def aclose(self):
        self.close_count += 1


class FakeTransport(CompletionTransport):
    """Hands out pre-built streams and records the requests it was given."""

    def __init__(self, *streams, open_error=None):
        self._streams = list(streams)
        self._open_error = open_error
        self.requests = []
        self.closed = False

    async def open_stream(self, request, on_decode_error=None):
        self.requests.append(request)
        if self._open_error is not None:
            raise self._open_error
        return self._streams.pop(0)

    async def close(self):
        self.closed = True


def sse_chunk(content, finish_reason=None, **extra):
    """Encode one chat.completion.chunk payload as an SSE event."""
    payload = {
        "id": "chatcmpl-1",
        "object": "chat.completion.chunk",
        "created": 1700000000,
        "model": "gpt-3.5-turbo",
        "choices": [
            {"delta": {"content": content}, "index": 0, "finish_reason": finish_reason}
        ],
        **extra,
    }
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


@pytest.fixture(scope="session")
def api_key():
    """Return the API key from environment."""
    return os.getenv("API_KEY")


@pytest.fixture
def output():
    """Buffer that captures everything written to the console."""
    return io.StringIO()


@pytest.fixture
def console(output):
    """Plain, non-terminal console writing to the output buffer."""
    return Console(file=output, force_terminal=False, color_system=None, width=200)


@pytest.fixture
def personality():
    """Personality that addresses the user by name with an honorific."""
    return Personality(
        name="ひより",
        first_person="ひより",
        user_calling="お兄ちゃん",
        is_user_overridable=True,
        user_calling_out="ちゃん",
        constraints=("タメ口で話す", "敬語は使わない"),
        tone_examples=("ねえねえ、聞いて！",),
        behavior_examples=("落ち込んでいたら励ます", "褒められると喜ぶ", "よく笑う"),
    )
