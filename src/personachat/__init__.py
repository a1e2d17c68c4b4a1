"""
Personachat: a streaming terminal chat client with selectable personalities.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .errors import (
    ChatError,
    ConfigError,
    DecodeError,
    EndOfStream,
    MissingCredentialError,
    StreamError,
    TransportError,
)
from .llm import Message, Role, StreamingCompletionClient, create_transport
from .memory import ConversationHistory
from .personality import Personality, get_personality
from .prompts import compile_system_prompt

__all__ = [
    "ChatError",
    "ConfigError",
    "DecodeError",
    "EndOfStream",
    "MissingCredentialError",
    "StreamError",
    "TransportError",
    "Message",
    "Role",
    "StreamingCompletionClient",
    "create_transport",
    "ConversationHistory",
    "Personality",
    "get_personality",
    "compile_system_prompt",
]
