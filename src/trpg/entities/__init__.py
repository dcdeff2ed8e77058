"""Entities module with an entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model
- table.py: Database persistence model
- repository.py: Data access layer

Audit metadata is shared through composition (``AuditInfo``) rather than a
common base record.
"""

from .core._base import Auditable, AuditInfo
from .core.character import Character, CharacterRepository, CharacterTable
from .core.role import Role
from .core.user import User, UserRepository, UserTable
from .core.user_equipment import UserEquipment, UserEquipmentRepository, UserEquipmentTable

__all__ = [
    "AuditInfo",
    "Auditable",
    "Role",
    "User",
    "UserTable",
    "UserRepository",
    "Character",
    "CharacterTable",
    "CharacterRepository",
    "UserEquipment",
    "UserEquipmentTable",
    "UserEquipmentRepository",
]
