"""Character data access."""

from src.trpg.entities.core._owned import OwnedRepository
from src.trpg.entities.core.character.entity import Character
from src.trpg.entities.core.character.table import CharacterTable


class CharacterRepository(OwnedRepository[Character, CharacterTable]):
    """Data-access layer for characters."""

    entity_class = Character
    table_class = CharacterTable
    kind = "Character"
