"""Interactive read-eval loop.

Reads one line per turn, streams the reply, and keeps the transcript.
Turns run one at a time on a single event loop; input is read outside of
it, so no stream is ever open while waiting for the user.
"""

import asyncio
from collections.abc import Callable

from rich.console import Console
from rich.markup import escape

from ..errors import ChatError, DecodeError
from ..llm import Message, Role, StreamingCompletionClient
from ..memory import ConversationHistory
from ..personality import PERSONALITIES, Personality, available_personalities, get_personality

EXIT_COMMANDS = ("exit", "quit", "q")
PERSONA_COMMAND = "/persona"

# Consecutive OSErrors from input before it is treated as gone (e.g. hung-up tty)
MAX_READ_FAILURES = 3


class ChatLoop:
    """Drives the conversation between the user and one completion client."""

    def __init__(
        self,
        client: StreamingCompletionClient,
        personality: str | None = None,
        user_name: str = "",
        console: Console | None = None,
        read_line: Callable[[str], str] | None = None,
    ):
        self._client = client
        self._personality = get_personality(personality)
        self._user_name = user_name
        self._console = console or Console()
        self._read_line = read_line or (lambda prompt: self._console.input(prompt))
        self.history = ConversationHistory()

        self._client.set_decode_error_callback(self._warn_decode_error)

    @property
    def personality(self) -> Personality:
        """Currently active personality."""
        return self._personality

    @property
    def user_label(self) -> str:
        return self._user_name or "You"

    def _warn_decode_error(self, error: DecodeError) -> None:
        self._console.print(f"\n[yellow]Warning: skipped malformed event ({escape(str(error))})[/yellow]")

    def switch_personality(self, key: str) -> bool:
        """Activate another preset for the following turns.

        Returns:
            False if the key is not registered (the active preset is kept)
        """
        if key.lower() not in PERSONALITIES:
            return False
        self._personality = get_personality(key)
        return True

    def handle_command(self, text: str) -> bool:
        """Handle an in-chat command.

        Returns:
            True if the text was a command and must not be sent to the model
        """
        if text != PERSONA_COMMAND and not text.startswith(f"{PERSONA_COMMAND} "):
            return False

        key = text[len(PERSONA_COMMAND):].strip()
        if not key:
            keys = ", ".join(available_personalities())
            self._console.print(f"[dim]Available personalities: {keys}[/dim]")
        elif self.switch_personality(key):
            self._console.print(f"[dim]Switched to {escape(self._personality.name)}[/dim]")
        else:
            self._console.print(f"[yellow]Unknown personality: {escape(key)}[/yellow]")
        return True

    async def run_turn(self, text: str) -> Message | None:
        """Send one user utterance and stream the reply.

        The user message is recorded before the request. The reply is
        recorded only if the completion succeeds.

        Returns:
            The assistant message, or None if the turn failed
        """
        self.history.append(Message(role=Role.USER, speaker_name=self.user_label, text=text))

        self._console.print(
            f"[bold green]{escape(self._personality.name)}:[/bold green] ", end=""
        )
        try:
            reply = await self._client.complete(
                self.history.messages, self._personality, self._user_name
            )
        except ChatError as e:
            self._console.print()
            self._console.print(f"[red]Error: {escape(str(e))}[/red]")
            return None

        self.history.append(reply)
        return reply

    def run(self) -> None:
        """Run until end of input or an exit command.

        Ctrl-C during a reply cancels that turn and releases its connection.
        The cancelled turn's user message stays in history with no reply, so
        the next request carries two user messages in a row. Ctrl-C at the
        prompt leaves the loop.

        An undecodable line is reported and the user is prompted again. A
        closed input stream, or MAX_READ_FAILURES consecutive OSErrors, is
        treated as end of input.
        """
        self._console.print(f"[bold cyan]Chatting with {escape(self._personality.name)}[/bold cyan]")
        self._console.print("[dim]Type 'exit', 'quit', or 'q' to leave; '/persona <name>' to switch[/dim]\n")

        with asyncio.Runner() as runner:
            read_failures = 0
            try:
                while True:
                    try:
                        line = self._read_line(f"[bold yellow]{escape(self.user_label)}:[/bold yellow] ")
                    except (EOFError, KeyboardInterrupt):
                        self._console.print("\n[dim]Goodbye![/dim]")
                        break
                    except UnicodeDecodeError as e:
                        self._console.print(f"[red]Error reading input: {escape(str(e))}[/red]")
                        continue
                    except ValueError:
                        # Raised by reads from a closed stdin
                        self._console.print("\n[dim]Goodbye![/dim]")
                        break
                    except OSError as e:
                        read_failures += 1
                        self._console.print(f"[red]Error reading input: {escape(str(e))}[/red]")
                        if read_failures >= MAX_READ_FAILURES:
                            self._console.print("[dim]Goodbye![/dim]")
                            break
                        continue
                    read_failures = 0

                    text = line.strip()
                    if not text:
                        continue

                    if text.lower() in EXIT_COMMANDS:
                        self._console.print("[dim]Goodbye![/dim]")
                        break

                    if self.handle_command(text):
                        continue

                    try:
                        runner.run(self.run_turn(text))
                    except KeyboardInterrupt:
                        self._console.print("\n[yellow]Interrupted[/yellow]")
            finally:
                runner.run(self._client.close())
