"""User domain entity."""

from typing import Any

from pydantic import AnyUrl, Field

from src.trpg.entities.core._base import Entity
from src.trpg.entities.core.role import Role


def url_text(value: Any) -> str | None:
    """Text form of an optional URL field."""
    return None if value is None else str(value)


class User(Entity):
    """Game account of one player.

    Holds the Steam identity, currency balance, authorization role, avatar
    links and the ids of the equipment instances and characters the account
    owns. The record does no validation and no persistence of its own;
    repositories assign ``id`` and refresh ``audit``, and the account service
    enforces money, role and ownership rules.
    """

    steam_id: int = Field(description="64-bit Steam account id")
    user_name: str = Field(description="Display name")
    money: int = Field(default=0, description="In-game currency balance")
    role: Role = Field(default=Role.PLAYER, description="Authorization level")
    avatar_small: AnyUrl | None = Field(default=None, description="32x32 avatar")
    avatar_medium: AnyUrl | None = Field(default=None, description="64x64 avatar")
    avatar_full: AnyUrl | None = Field(default=None, description="184x184 avatar")
    user_equipment_ids: list[int] = Field(
        default_factory=list, description="Owned equipment instance ids"
    )
    character_ids: list[int] = Field(
        default_factory=list, description="Owned character ids"
    )

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring audit and collection order."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.steam_id == other.steam_id
            and self.user_name == other.user_name
            and self.money == other.money
            and self.role == other.role
            and url_text(self.avatar_small) == url_text(other.avatar_small)
            and url_text(self.avatar_medium) == url_text(other.avatar_medium)
            and url_text(self.avatar_full) == url_text(other.avatar_full)
            and set(self.user_equipment_ids) == set(other.user_equipment_ids)
            and set(self.character_ids) == set(other.character_ids)
        )

    def __hash__(self) -> int:
        return hash((
            self.id,
            self.steam_id,
            self.user_name,
            self.money,
            self.role,
            url_text(self.avatar_small),
            url_text(self.avatar_medium),
            url_text(self.avatar_full),
            frozenset(self.user_equipment_ids),
            frozenset(self.character_ids),
        ))
