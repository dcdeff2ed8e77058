"""Entity package: UserEquipment."""

from .entity import UserEquipment
from .repository import UserEquipmentRepository
from .table import UserEquipmentTable

__all__ = ["UserEquipment", "UserEquipmentRepository", "UserEquipmentTable"]
