"""In-memory conversation history.

Session-only: the transcript lives for the process lifetime and is never
persisted.
"""

from collections.abc import Iterator

from ..llm.models import Message, Role


class ConversationHistory:
    """Append-only transcript of user and assistant messages.

    The system message is recomputed on every turn, so it is never stored
    here.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []

    def append(self, message: Message) -> None:
        """Add a message to the end of the transcript.

        Raises:
            ValueError: If the message is a system message
        """
        if message.role is Role.SYSTEM:
            raise ValueError("System messages are not stored in history")
        self._messages.append(message)

    @property
    def messages(self) -> tuple[Message, ...]:
        """Read-only snapshot of the transcript, oldest first."""
        return tuple(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __len__(self) -> int:
        return len(self._messages)
