from .models import Personality
from .registry import (
    DEFAULT_PERSONALITY_KEY,
    PERSONALITIES,
    available_personalities,
    get_personality,
)

__all__ = [
    "Personality",
    "DEFAULT_PERSONALITY_KEY",
    "PERSONALITIES",
    "available_personalities",
    "get_personality",
]
