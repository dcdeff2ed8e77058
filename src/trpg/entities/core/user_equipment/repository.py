"""UserEquipment data access."""

from src.trpg.entities.core._owned import OwnedRepository
from src.trpg.entities.core.user_equipment.entity import UserEquipment
from src.trpg.entities.core.user_equipment.table import UserEquipmentTable


class UserEquipmentRepository(OwnedRepository[UserEquipment, UserEquipmentTable]):
    """Data-access layer for equipment instances."""

    entity_class = UserEquipment
    table_class = UserEquipmentTable
    kind = "UserEquipment"
