"""User data access."""

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from sqlmodel import Session, select

from src.trpg.core.exceptions import ConflictError, NotFoundError
from src.trpg.entities.core._base import AuditInfo, as_utc
from src.trpg.entities.core.character.repository import CharacterRepository
from src.trpg.entities.core.user.entity import User, url_text
from src.trpg.entities.core.user.table import UserTable
from src.trpg.entities.core.user_equipment.repository import UserEquipmentRepository
from src.trpg.runtime.config.config_data import OrphanPolicy
from src.trpg.runtime.context import get_config


class UserRepository:
    """Data-access layer for users.

    Assigns ids, keeps ``steam_id`` unique, refreshes audit fields and
    rejects stale updates by comparing ``audit.modified_at``. The ownership
    collections of a user are hydrated from the ``user_id`` column of the
    owned rows and written back the same way.
    """

    def __init__(self, session: Session, orphan_policy: OrphanPolicy | None = None) -> None:
        self._session = session
        self._orphan_policy = orphan_policy or get_config().persistence.orphan_policy
        self._characters = CharacterRepository(session)
        self._equipment = UserEquipmentRepository(session)

    @property
    def orphan_policy(self) -> OrphanPolicy:
        return self._orphan_policy

    def get(self, user_id: int) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return self._to_entity(row)

    def get_by_steam_id(self, steam_id: int) -> User | None:
        row = self._find_by_steam_id(steam_id)
        if row is None:
            return None
        return self._to_entity(row)

    def list_all(self, offset: int = 0, limit: int = 100) -> list[User]:
        statement = select(UserTable).order_by(UserTable.id).offset(offset).limit(limit)
        return [self._to_entity(row) for row in self._session.exec(statement).all()]

    def create(self, user: User, actor: str | None = None) -> User:
        """Persist a new user and return the stored copy with its id."""
        if self._find_by_steam_id(user.steam_id) is not None:
            raise ConflictError(
                f"Steam id {user.steam_id} is already registered",
                {"steam_id": user.steam_id},
            )

        row = UserTable(steam_id=user.steam_id, user_name=user.user_name)
        self._copy_fields(user, row)
        row.stamp(AuditInfo.new(actor))
        self._session.add(row)
        self._flush_user(user)

        self._sync_ownership(row.id, user, actor)
        self._session.flush()
        logger.info("Created user {} for steam id {}", row.id, row.steam_id)
        return self._to_entity(row)

    def update(self, user: User, actor: str | None = None) -> User:
        """Write ``user`` back, failing if someone else changed it in between."""
        if user.id is None:
            raise NotFoundError("User has not been persisted yet")

        row = self._session.get(UserTable, user.id)
        if row is None:
            raise NotFoundError(f"User {user.id} not found", {"id": user.id})

        if as_utc(row.modified_at) != as_utc(user.audit.modified_at):
            raise ConflictError(
                f"User {user.id} was modified concurrently",
                {
                    "id": user.id,
                    "expected_modified_at": as_utc(user.audit.modified_at).isoformat(),
                    "stored_modified_at": as_utc(row.modified_at).isoformat(),
                },
            )

        if user.steam_id != row.steam_id:
            other = self._find_by_steam_id(user.steam_id)
            if other is not None and other.id != row.id:
                raise ConflictError(
                    f"Steam id {user.steam_id} is already registered",
                    {"steam_id": user.steam_id, "owner_id": other.id},
                )

        self._copy_fields(user, row)
        row.stamp(row.audit_info().touched(actor))
        self._session.add(row)
        self._flush_user(user)
        self._sync_ownership(row.id, user, actor)
        self._session.flush()
        logger.debug("Updated user {}", row.id)
        return self._to_entity(row)

    def delete(self, user_id: int, actor: str | None = None) -> None:
        """Delete an account, releasing its owned rows per the orphan policy."""
        row = self._session.get(UserTable, user_id)
        if row is None:
            raise NotFoundError(f"User {user_id} not found", {"id": user_id})

        self._characters.release_all(user_id, self._orphan_policy, actor)
        self._equipment.release_all(user_id, self._orphan_policy, actor)
        self._session.flush()
        self._session.delete(row)
        try:
            self._session.flush()
        except StaleDataError as e:
            raise ConflictError(f"User {user_id} was modified concurrently", {"id": user_id}) from e
        logger.info("Deleted user {} ({} policy for owned rows)", user_id, self._orphan_policy)

    def _flush_user(self, user: User) -> None:
        """Flush the user row, turning constraint and version failures into conflicts."""
        try:
            self._session.flush()
        except StaleDataError as e:
            raise ConflictError(
                f"User {user.id} was modified concurrently", {"id": user.id}
            ) from e
        except IntegrityError as e:
            raise ConflictError(
                f"Steam id {user.steam_id} is already registered",
                {"steam_id": user.steam_id},
            ) from e

    def _find_by_steam_id(self, steam_id: int) -> UserTable | None:
        statement = select(UserTable).where(UserTable.steam_id == steam_id)
        return self._session.exec(statement).first()

    def _sync_ownership(self, user_id: int, user: User, actor: str | None) -> None:
        self._characters.sync_owner(user_id, user.character_ids, self._orphan_policy, actor)
        self._equipment.sync_owner(user_id, user.user_equipment_ids, self._orphan_policy, actor)

    @staticmethod
    def _copy_fields(user: User, row: UserTable) -> None:
        row.steam_id = user.steam_id
        row.user_name = user.user_name
        row.money = user.money
        row.role = user.role
        row.avatar_small = url_text(user.avatar_small)
        row.avatar_medium = url_text(user.avatar_medium)
        row.avatar_full = url_text(user.avatar_full)

    def _to_entity(self, row: UserTable) -> User:
        return User(
            id=row.id,
            steam_id=row.steam_id,
            user_name=row.user_name,
            money=row.money,
            role=row.role,
            avatar_small=row.avatar_small,
            avatar_medium=row.avatar_medium,
            avatar_full=row.avatar_full,
            user_equipment_ids=self._equipment.owned_ids(row.id),
            character_ids=self._characters.owned_ids(row.id),
            audit=row.audit_info(),
        )
