"""Character domain entity."""

from pydantic import Field

from src.trpg.entities.core._base import Entity


class Character(Entity):
    """Player character owned by an account.

    Only identity and ownership are modelled here; game attributes live
    elsewhere.
    """

    user_id: int | None = Field(
        default=None, description="Owning user id; None while detached"
    )
    name: str = Field(description="Character name")
