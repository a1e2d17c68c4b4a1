"""Conversation memory module for personachat.

Holds the transcript sent to the remote model on every turn.
"""

from .history import ConversationHistory

__all__ = ["ConversationHistory"]
