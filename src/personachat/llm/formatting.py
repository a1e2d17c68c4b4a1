"""Incremental display of streamed text.

Hides how partial text is laid out on the terminal: increments are written
as they arrive, with a soft line break roughly every WRAP_WIDTH characters.
"""

from rich.console import Console

WRAP_WIDTH = 50


class SoftWrapFormatter:
    """Accumulates increments and writes them with soft line wraps.

    Before an increment is written, a line break is emitted if the number
    of characters written so far modulo the wrap width equals width - 1.
    Characters are counted as code points, so multi-byte scripts wrap at
    the same visible length as ASCII. The inserted breaks are display only
    and never part of the accumulated text.
    """

    def __init__(self, console: Console, width: int = WRAP_WIDTH):
        self._console = console
        self._width = width
        self._parts: list[str] = []
        self._length = 0

    @property
    def text(self) -> str:
        """Full text accumulated so far."""
        return "".join(self._parts)

    def feed(self, increment: str) -> None:
        """Display one increment and add it to the running buffer."""
        if not increment:
            return

        if self._length % self._width == self._width - 1:
            self._console.out("", end="\n", highlight=False)

        self._console.out(increment, end="", highlight=False)
        self._parts.append(increment)
        self._length += len(increment)

    def finish(self) -> None:
        """Terminate the displayed reply with a single line break."""
        self._console.out("", end="\n", highlight=False)
