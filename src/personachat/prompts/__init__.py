"""Prompt management module.

Externalizes the system prompt template to a text file for easy customization.
The template can be overridden by placing a file in the working directory.
"""

from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path

from ..personality import Personality

# Default prompts directory (package location)
_PROMPTS_DIR = Path(__file__).parent


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Load a prompt template from file.

    Search order:
    1. Current working directory: ./prompts/{name}.txt
    2. Package prompts directory: personachat/prompts/{name}.txt

    Args:
        name: Prompt name (without .txt extension)

    Returns:
        Prompt text content

    Raises:
        FileNotFoundError: If prompt file not found in any location
    """
    filename = f"{name}.txt"

    # Check working directory first (allows user overrides)
    local_path = Path.cwd() / "prompts" / filename
    if local_path.exists():
        return local_path.read_text(encoding="utf-8")

    package_path = _PROMPTS_DIR / filename
    if package_path.exists():
        return package_path.read_text(encoding="utf-8")

    raise FileNotFoundError(
        f"Prompt '{name}' not found. Searched:\n"
        f"  - {local_path}\n"
        f"  - {package_path}"
    )


def render_bullets(items: Iterable[str]) -> str:
    """Render one '- item' line per entry; empty input renders as ''."""
    return "\n".join(f"- {item}" for item in items)


def compile_system_prompt(personality: Personality, user_name: str) -> str:
    """Render a personality into the system instruction for one turn.

    Args:
        personality: Persona preset to render
        user_name: Runtime user name; replaces the default address term
            when the persona allows it

    Returns:
        The complete system prompt text
    """
    template = load_prompt("system")
    return template.format(
        name=personality.name,
        first_person=personality.first_person,
        user_calling=personality.address_term(user_name),
        constraints=render_bullets(personality.constraints),
        tone_examples=render_bullets(personality.tone_examples),
        behavior_examples=render_bullets(personality.behavior_examples),
    )


def clear_cache() -> None:
    """Clear the prompt cache (useful after modifying prompt files)."""
    load_prompt.cache_clear()


__all__ = [
    "load_prompt",
    "render_bullets",
    "compile_system_prompt",
    "clear_cache",
]
