"""UserEquipment database table model."""

from sqlmodel import Field

from src.trpg.entities.core._base import EntityTable


class UserEquipmentTable(EntityTable, table=True):
    """Database persistence model for equipment instances."""

    __tablename__ = "user_equipments"

    user_id: int | None = Field(default=None, foreign_key="users.id", index=True)
    equipment_key: str = Field(max_length=255, index=True)
