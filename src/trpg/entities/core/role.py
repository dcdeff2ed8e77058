"""Authorization levels of an account."""

from __future__ import annotations

import enum


class Role(str, enum.Enum):
    """Closed set of authorization levels, stored by value."""

    PLAYER = "player"
    MODERATOR = "moderator"
    ADMIN = "admin"
