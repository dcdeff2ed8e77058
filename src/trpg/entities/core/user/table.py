"""User database table model."""

from sqlalchemy import BigInteger, Column, Integer
from sqlmodel import Field

from src.trpg.entities.core._base import EntityTable
from src.trpg.entities.core.role import Role

# Bumped on every UPDATE; the mapper adds it to the WHERE clause.
_version_column = Column("version", Integer, nullable=False)


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    Ownership collections are not columns here: each character and
    equipment row points back at its owner through ``user_id``.
    """

    __tablename__ = "users"
    __mapper_args__ = {"version_id_col": _version_column}

    steam_id: int = Field(sa_type=BigInteger, unique=True, index=True, nullable=False)
    user_name: str = Field(max_length=255)
    money: int = Field(default=0)
    role: Role = Field(default=Role.PLAYER)
    avatar_small: str | None = Field(default=None, max_length=2048)
    avatar_medium: str | None = Field(default=None, max_length=2048)
    avatar_full: str | None = Field(default=None, max_length=2048)
    version: int = Field(default=1, sa_column=_version_column)
