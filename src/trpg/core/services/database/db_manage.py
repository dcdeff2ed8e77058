"""Schema management for the account tables."""

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from src.trpg.core.services.database.db_session import build_engine
from src.trpg.runtime.context import get_config


def register_tables() -> None:
    """Import every table model so it is registered on ``SQLModel.metadata``."""
    from src.trpg.entities.core.character import CharacterTable  # noqa: F401
    from src.trpg.entities.core.user import UserTable  # noqa: F401
    from src.trpg.entities.core.user_equipment import UserEquipmentTable  # noqa: F401


class DbManageService:
    def __init__(self, engine: Engine | None = None):
        self._engine = engine or build_engine(get_config())

    def create_all(self) -> None:
        """Create all database tables."""
        register_tables()
        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def drop_all(self) -> None:
        register_tables()
        SQLModel.metadata.drop_all(self._engine)
        logger.warning("All account tables dropped.")
