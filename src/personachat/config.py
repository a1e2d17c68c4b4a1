"""Runtime configuration.

Centralizes reading of credentials and settings from environment variables.
Hides configuration details from the CLI and the streaming client.
"""

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigError, MissingCredentialError
from .llm.client import DEFAULT_MODEL
from .llm.factory import SUPPORTED_TRANSPORTS
from .llm.providers.sse import DEFAULT_BASE_URL
from .personality import DEFAULT_PERSONALITY_KEY

API_KEY_ENV = "API_KEY"


def get_token(env_var: str = API_KEY_ENV) -> str:
    """Read the bearer token from the environment.

    Args:
        env_var: Name of the environment variable holding the token

    Returns:
        The token, stripped of surrounding whitespace

    Raises:
        MissingCredentialError: If the variable is unset or empty
    """
    token = os.getenv(env_var, "").strip()
    if not token:
        raise MissingCredentialError(env_var)
    return token


class ChatSettings(BaseModel):
    """Resolved settings for one chat session."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    transport: str = "sse"
    personality: str = DEFAULT_PERSONALITY_KEY
    user_name: str = ""


def load_settings(**overrides: Any) -> ChatSettings:
    """Build settings from environment variables and explicit overrides.

    Overrides that are None are ignored, so CLI options can be passed
    through unconditionally.

    Environment variables:
        API_KEY: Bearer token (required)
        CHAT_BASE_URL: API base URL (default: https://api.openai.com/v1)
        CHAT_MODEL: Model identifier (default: gpt-3.5-turbo)
        CHAT_TRANSPORT: 'sse' or 'openai' (default: sse)
        CHAT_PERSONALITY: Personality key (default: default)
        CHAT_USER_NAME: Name used to address the user (default: empty)

    Raises:
        MissingCredentialError: If API_KEY is not set
        ConfigError: If the transport is not supported
    """
    values: dict[str, Any] = {
        "api_key": get_token(),
        "base_url": os.getenv("CHAT_BASE_URL", DEFAULT_BASE_URL),
        "model": os.getenv("CHAT_MODEL", DEFAULT_MODEL),
        "transport": os.getenv("CHAT_TRANSPORT", "sse"),
        "personality": os.getenv("CHAT_PERSONALITY", DEFAULT_PERSONALITY_KEY),
        "user_name": os.getenv("CHAT_USER_NAME", ""),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    transport = str(values["transport"]).lower()
    if transport not in SUPPORTED_TRANSPORTS:
        raise ConfigError(
            f"Unsupported transport: {values['transport']}. "
            f"Supported transports: {', '.join(SUPPORTED_TRANSPORTS)}"
        )
    values["transport"] = transport

    return ChatSettings(**values)
