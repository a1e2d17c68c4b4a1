"""Unit tests for the soft-wrap stream formatter."""
import io

from hypothesis import given
from hypothesis import strategies as st
from rich.console import Console

from personachat.llm import SoftWrapFormatter


def _console(buffer):
    return Console(file=buffer, force_terminal=False, color_system=None, width=200)


class TestSoftWrapFormatter:
    """Tests for incremental display and accumulation."""

    def test_wraps_before_increment_at_boundary(self, console, output):
        """A line break is written before 'b' once 49 characters are shown."""
        formatter = SoftWrapFormatter(console)

        formatter.feed("a" * 49)
        assert output.getvalue() == "a" * 49

        formatter.feed("b")
        assert output.getvalue() == "a" * 49 + "\nb"
        assert formatter.text == "a" * 49 + "b"

    def test_no_wrap_within_first_49_characters(self, console, output):
        formatter = SoftWrapFormatter(console)

        for _ in range(49):
            formatter.feed("x")

        assert "\n" not in output.getvalue()

    def test_multibyte_characters_counted_as_one(self, console, output):
        """Fifty 3-byte characters trigger exactly one wrap."""
        formatter = SoftWrapFormatter(console)

        for _ in range(50):
            formatter.feed("あ")

        displayed = output.getvalue()
        assert displayed.count("\n") == 1
        assert displayed == "あ" * 49 + "\n" + "あ"
        assert len(formatter.text) == 50

    def test_finish_writes_single_trailing_newline(self, console, output):
        formatter = SoftWrapFormatter(console)

        formatter.feed("hel")
        formatter.feed("lo")
        formatter.finish()

        assert output.getvalue() == "hello\n"
        assert formatter.text == "hello"

    def test_empty_increments_are_ignored(self, console, output):
        formatter = SoftWrapFormatter(console)

        formatter.feed("a" * 49)
        formatter.feed("")
        formatter.feed("")

        assert output.getvalue() == "a" * 49
        assert formatter.text == "a" * 49

    def test_custom_width(self, console, output):
        formatter = SoftWrapFormatter(console, width=5)

        formatter.feed("abcd")
        formatter.feed("e")

        assert output.getvalue() == "abcd\ne"

    @given(st.lists(st.text(alphabet="abcあいう漢字", min_size=1, max_size=30), max_size=20))
    def test_display_is_text_plus_inserted_breaks(self, increments):
        """Property test: removing the soft breaks restores the exact text."""
        buffer = io.StringIO()
        formatter = SoftWrapFormatter(_console(buffer))

        for increment in increments:
            formatter.feed(increment)

        assert formatter.text == "".join(increments)
        assert buffer.getvalue().replace("\n", "") == formatter.text

    @given(st.integers(min_value=0, max_value=300))
    def test_single_character_feed_wraps_every_fifty(self, count):
        """Property test: one-character increments wrap once per 50 characters."""
        buffer = io.StringIO()
        formatter = SoftWrapFormatter(_console(buffer))

        for _ in range(count):
            formatter.feed("字")

        assert buffer.getvalue().count("\n") == count // 50
