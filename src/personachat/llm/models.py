from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Role of a message in the conversation transcript."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single role-tagged message in the conversation."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Role of the message sender")
    speaker_name: str = Field(default="", description="Display name of the speaker")
    text: str = Field(description="Content of the message")

    def to_wire(self) -> "WireMessage":
        """Convert to the {role, content} pair sent to the remote API."""
        return WireMessage(role=self.role.value, content=self.text)


class WireMessage(BaseModel):
    """A message as serialized in the outbound request body."""

    model_config = ConfigDict(frozen=True)

    role: str
    content: str


class CompletionRequest(BaseModel):
    """Outbound streaming chat-completions request. Built fresh per turn."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(description="Model identifier")
    stream: bool = Field(default=True, description="Always true for this client")
    messages: list[WireMessage] = Field(description="System message followed by history")


class StreamEvent(BaseModel):
    """One decoded unit of the remote stream. Consumed immediately."""

    model_config = ConfigDict(frozen=True)

    delta_text: str = ""
    is_terminal: bool = False
    finish_reason: str | None = None


class Delta(BaseModel):
    content: str | None = None
    role: str | None = None


class Choice(BaseModel):
    delta: Delta = Field(default_factory=Delta)
    index: int = 0
    finish_reason: str | None = None


class ChatCompletionChunk(BaseModel):
    """Payload of a single streamed event.

    Only choices[0].delta.content is consumed. Unknown fields are ignored and
    missing ones default, so provider extensions still parse. A server that
    fails mid-stream sends an event carrying only an ``error`` object.
    """

    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: list[Choice] = Field(default_factory=list)
    error: Any = None

    def error_message(self) -> str | None:
        """Message of an in-stream error event, or None for a normal chunk."""
        if self.error is None:
            return None
        if isinstance(self.error, dict):
            return str(self.error.get("message") or self.error)
        return str(self.error)

    def to_event(self) -> StreamEvent:
        """Extract the display increment from the first choice."""
        if not self.choices:
            return StreamEvent()
        choice = self.choices[0]
        return StreamEvent(
            delta_text=choice.delta.content or "",
            is_terminal=choice.finish_reason is not None,
            finish_reason=choice.finish_reason,
        )
