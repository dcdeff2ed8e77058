"""User entity module.

This module contains all User-related classes organized by responsibility:
- User: Domain entity
- UserTable: Database persistence model
- UserRepository: Data access layer, including ownership of characters
  and equipment instances
"""

from .entity import User, url_text
from .repository import UserRepository
from .table import UserTable

__all__ = ["User", "UserTable", "UserRepository", "url_text"]
