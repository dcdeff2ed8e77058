"""Entity package: Character."""

from .entity import Character
from .repository import CharacterRepository
from .table import CharacterTable

__all__ = ["Character", "CharacterRepository", "CharacterTable"]
