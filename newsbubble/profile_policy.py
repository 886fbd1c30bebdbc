# newsbubble/profile_policy.py
from __future__ import annotations

from enum import Enum
from typing import Optional

from .config import PROFILE_OVERRIDE_MIN_CHARS
from .models import PROFILE_SOURCE_AI, PROFILE_SOURCE_USER


class ProfileMode(str, Enum):
    USER_CUSTOMIZED = "user_customized"  # obey the text, never overwrite it
    AI_DEFAULT = "ai_default"            # refine from clicks, overwrite freely


def classify_profile(
    text: Optional[str],
    source: Optional[str] = None,
    min_chars: int = PROFILE_OVERRIDE_MIN_CHARS,
) -> ProfileMode:
    """
    Decide who owns the stored profile text.

    The provenance tag written alongside the text wins when present. Rows that
    predate it fall back to a length check: long text is assumed to be a user edit.
    """
    stripped = (text or "").strip()
    if not stripped:
        return ProfileMode.AI_DEFAULT
    if source == PROFILE_SOURCE_USER:
        return ProfileMode.USER_CUSTOMIZED
    if source == PROFILE_SOURCE_AI:
        return ProfileMode.AI_DEFAULT
    return ProfileMode.USER_CUSTOMIZED if len(stripped) > min_chars else ProfileMode.AI_DEFAULT
