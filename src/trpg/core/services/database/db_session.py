"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlmodel import Session, create_engine

from src.trpg.runtime.config.config_data import ConfigData
from src.trpg.runtime.context import get_config


def build_engine(config: ConfigData) -> Engine:
    """Create an engine for ``config.database`` with backend-specific options."""
    db_config = config.database
    engine_kwargs = {
        "echo": db_config.echo,
        "connect_args": _get_connect_args(config),
    }

    if not db_config.is_sqlite:
        engine_kwargs.update(
            {
                "pool_size": db_config.pool_size,
                "max_overflow": db_config.max_overflow,
                "pool_timeout": db_config.pool_timeout,
                "pool_recycle": db_config.pool_recycle,
                "pool_pre_ping": True,
            }
        )

    logger.info("Initializing database engine for environment: {}", config.app.environment)
    return create_engine(db_config.connection_string, **engine_kwargs)


def _get_connect_args(config: ConfigData) -> dict:
    """Get database-specific connection arguments."""
    connect_args = {}

    if "postgresql" in config.database.url:
        connect_args.update(
            {
                "application_name": f"{config.app.name}_{config.app.environment}",
                "connect_timeout": 30,
            }
        )

    elif config.database.is_sqlite:
        connect_args.update(
            {
                "check_same_thread": False,
                "timeout": 20,  # lock timeout
            }
        )

        if config.app.environment == "production":
            logger.warning(
                "SQLite is not recommended for production use. "
                "Consider PostgreSQL for better performance and reliability."
            )

    return connect_args


class DbSessionService:
    def __init__(self, engine: Engine | None = None):
        """Initialize the shared database engine and session factory."""
        self._engine = engine or build_engine(get_config())

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Commit on success, roll back and re-raise on failure."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(
                "Database transaction failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error(
                "Database health check failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False
