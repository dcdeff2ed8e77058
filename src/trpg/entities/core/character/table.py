"""Character database table model."""

from sqlmodel import Field

from src.trpg.entities.core._base import EntityTable


class CharacterTable(EntityTable, table=True):
    """Database persistence model for characters."""

    __tablename__ = "characters"

    user_id: int | None = Field(default=None, foreign_key="users.id", index=True)
    name: str = Field(max_length=255)
