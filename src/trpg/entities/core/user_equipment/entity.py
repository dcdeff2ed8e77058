"""UserEquipment domain entity."""

from pydantic import Field

from src.trpg.entities.core._base import Entity


class UserEquipment(Entity):
    """One equipment instance held by an account."""

    user_id: int | None = Field(
        default=None, description="Owning user id; None while detached"
    )
    equipment_key: str = Field(description="Catalog reference of the equipment type")
