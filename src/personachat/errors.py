"""Error taxonomy for personachat.

Every error surfaced at the turn level derives from ChatError so the
interactive loop can report it and keep going. EndOfStream is the graceful
end-of-stream signal and intentionally sits outside that hierarchy.
"""


class ChatError(Exception):
    """Base class for errors reported to the user."""


class ConfigError(ChatError):
    """Invalid or missing configuration. Fatal at startup."""


class MissingCredentialError(ConfigError):
    """The bearer token environment variable is unset or empty."""

    def __init__(self, env_var: str):
        self.env_var = env_var
        super().__init__(f"{env_var} is not set")


class TransportError(ChatError):
    """The request could not be sent or was rejected by the remote API."""


class DecodeError(ChatError):
    """A single stream event could not be decoded.

    Non-fatal: the offending event is skipped and the stream continues.
    """

    def __init__(self, message: str, payload: str = ""):
        self.payload = payload
        super().__init__(message)


class StreamError(ChatError):
    """A fatal receive error in the middle of a stream."""


class EndOfStream(Exception):
    """Raised by ChunkStream.receive_next when the stream ended normally."""
