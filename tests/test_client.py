"""Unit tests for the streaming completion client."""
import asyncio
import json

import pytest
from conftest import FakeChunkStream, FakeTransport

from personachat.errors import DecodeError, StreamError, TransportError
from personachat.llm import (
    Message,
    Role,
    StreamEvent,
    StreamingCompletionClient,
    StreamState,
    build_request,
)
from personachat.prompts import compile_system_prompt


def _history():
    return (
        Message(role=Role.USER, speaker_name="太郎", text="こんにちは"),
        Message(role=Role.ASSISTANT, speaker_name="ひより", text="やっほー"),
        Message(role=Role.USER, speaker_name="太郎", text="元気？"),
    )


class TestBuildRequest:
    """Tests for outbound request construction."""

    def test_system_message_first_then_history(self, personality):
        request = build_request(_history(), personality, "太郎", model="test-model")

        assert request.model == "test-model"
        assert request.stream is True
        assert [m.role for m in request.messages] == ["system", "user", "assistant", "user"]
        assert request.messages[0].content == compile_system_prompt(personality, "太郎")
        assert [m.content for m in request.messages[1:]] == ["こんにちは", "やっほー", "元気？"]

    def test_exactly_one_system_message(self, personality):
        request = build_request(_history(), personality, "太郎")

        assert sum(1 for m in request.messages if m.role == "system") == 1

    def test_wire_format(self, personality):
        request = build_request(_history()[:1], personality, "")

        body = json.loads(request.model_dump_json())

        assert set(body) == {"model", "stream", "messages"}
        assert body["stream"] is True
        assert body["messages"][1] == {"role": "user", "content": "こんにちは"}


class TestStreamingCompletionClient:
    """Tests for StreamingCompletionClient.complete."""

    @pytest.mark.asyncio
    async def test_graceful_end_returns_assistant_message(self, console, output, personality):
        stream = FakeChunkStream(["hel", "lo"])
        client = StreamingCompletionClient(FakeTransport(stream), console=console)

        reply = await client.complete((), personality, "太郎")

        assert reply.role is Role.ASSISTANT
        assert reply.text == "hello"
        assert reply.speaker_name == "ひより"
        assert output.getvalue() == "hello\n"
        assert stream.close_count == 1
        assert client.state is StreamState.COMPLETED

    @pytest.mark.asyncio
    async def test_empty_reply(self, console, output, personality):
        stream = FakeChunkStream([])
        client = StreamingCompletionClient(FakeTransport(stream), console=console)

        reply = await client.complete((), personality, "")

        assert reply.text == ""
        assert output.getvalue() == "\n"

    @pytest.mark.asyncio
    async def test_soft_wraps_long_reply(self, console, output, personality):
        stream = FakeChunkStream(["a" * 49, "b"])
        client = StreamingCompletionClient(FakeTransport(stream), console=console)

        reply = await client.complete((), personality, "")

        assert reply.text == "a" * 49 + "b"
        assert output.getvalue() == "a" * 49 + "\nb\n"

    @pytest.mark.asyncio
    async def test_terminal_event_does_not_stop_early(self, console, personality):
        stream = FakeChunkStream([
            "hi",
            StreamEvent(delta_text="!", is_terminal=True, finish_reason="stop"),
            "?",
        ])
        client = StreamingCompletionClient(FakeTransport(stream), console=console)

        reply = await client.complete((), personality, "")

        assert reply.text == "hi!?"

    @pytest.mark.asyncio
    async def test_fatal_stream_error_releases_connection(self, console, personality):
        stream = FakeChunkStream(["partial", StreamError("connection reset"), "never"])
        client = StreamingCompletionClient(FakeTransport(stream), console=console)

        with pytest.raises(StreamError, match="connection reset"):
            await client.complete((), personality, "")

        assert stream.close_count == 1
        assert client.state is StreamState.FAILED

    @pytest.mark.asyncio
    async def test_transport_error_on_open(self, console, output, personality):
        transport = FakeTransport(open_error=TransportError("refused"))
        client = StreamingCompletionClient(transport, console=console)

        with pytest.raises(TransportError):
            await client.complete((), personality, "")

        assert client.state is StreamState.FAILED
        assert output.getvalue() == ""

    @pytest.mark.asyncio
    async def test_cancellation_releases_connection(self, console, personality):
        stream = FakeChunkStream(["partial", asyncio.CancelledError()])
        client = StreamingCompletionClient(FakeTransport(stream), console=console)

        with pytest.raises(asyncio.CancelledError):
            await client.complete((), personality, "")

        assert stream.close_count == 1
        assert client.state is StreamState.FAILED

    @pytest.mark.asyncio
    async def test_history_is_not_mutated(self, console, personality):
        history = list(_history())
        client = StreamingCompletionClient(FakeTransport(FakeChunkStream(["ok"])), console=console)

        await client.complete(history, personality, "太郎")

        assert history == list(_history())

    @pytest.mark.asyncio
    async def test_request_uses_client_model(self, console, personality):
        transport = FakeTransport(FakeChunkStream(["ok"]))
        client = StreamingCompletionClient(transport, console=console, model="my-model")

        await client.complete(_history(), personality, "太郎")

        assert transport.requests[0].model == "my-model"
        assert len(transport.requests[0].messages) == 4

    def test_initial_state_is_idle(self, console):
        client = StreamingCompletionClient(FakeTransport(), console=console)
        assert client.state is StreamState.IDLE

    @pytest.mark.asyncio
    async def test_decode_errors_go_to_callback(self, console, personality):
        received = []

        class ReportingTransport(FakeTransport):
            async def open_stream(self, request, on_decode_error=None):
                on_decode_error(DecodeError("bad frame", payload="{"))
                return await super().open_stream(request, on_decode_error)

        client = StreamingCompletionClient(
            ReportingTransport(FakeChunkStream(["ok"])),
            console=console,
            on_decode_error=received.append,
        )

        reply = await client.complete((), personality, "")

        assert reply.text == "ok"
        assert [e.payload for e in received] == ["{"]

    @pytest.mark.asyncio
    async def test_close_closes_transport(self, console):
        transport = FakeTransport()
        client = StreamingCompletionClient(transport, console=console)

        await client.close()

        assert transport.closed
