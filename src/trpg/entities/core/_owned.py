"""Shared data access for rows owned by a user.

Characters and equipment instances have the same persistence shape: an
autoincrement id, audit columns and a nullable ``user_id`` pointing at the
owning account. The repositories for both are thin subclasses of
:class:`OwnedRepository`.
"""

from typing import ClassVar, Generic, TypeVar

from loguru import logger
from sqlmodel import Session, select

from src.trpg.core.exceptions import NotFoundError, OwnershipError, ValidationError
from src.trpg.entities.core._base import AuditInfo, Entity, EntityTable
from src.trpg.runtime.config.config_data import OrphanPolicy

EntityT = TypeVar("EntityT", bound=Entity)
TableT = TypeVar("TableT", bound=EntityTable)


class OwnedRepository(Generic[EntityT, TableT]):
    """Data-access layer for one kind of user-owned row.

    Repositories flush but never commit; the caller owns the transaction.
    """

    entity_class: ClassVar[type[Entity]]
    table_class: ClassVar[type[EntityTable]]
    kind: ClassVar[str]

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, item_id: int) -> EntityT | None:
        row = self._session.get(self.table_class, item_id)
        if row is None:
            return None
        return self._to_entity(row)

    def list_by_owner(self, user_id: int) -> list[EntityT]:
        return [self._to_entity(row) for row in self._owned_rows(user_id)]

    def owned_ids(self, user_id: int) -> list[int]:
        return [row.id for row in self._owned_rows(user_id)]

    def create(self, item: EntityT, actor: str | None = None) -> EntityT:
        """Persist a new row and return it with its assigned id."""
        values = {name: getattr(item, name) for name in self._data_fields()}
        row = self.table_class(**values)
        row.stamp(AuditInfo.new(actor))
        self._session.add(row)
        self._session.flush()
        logger.debug("Created {} {} owned by {}", self.kind, row.id, row.user_id)
        return self._to_entity(row)

    def delete(self, item_id: int) -> None:
        row = self._session.get(self.table_class, item_id)
        if row is None:
            raise NotFoundError(f"{self.kind} {item_id} not found", {"id": item_id})
        self._session.delete(row)
        self._session.flush()

    def sync_owner(
        self,
        user_id: int,
        wanted_ids: list[int],
        policy: OrphanPolicy,
        actor: str | None = None,
    ) -> None:
        """Make ``wanted_ids`` exactly the set of rows owned by ``user_id``.

        Newly listed rows must exist and be detached or already owned by
        this user. Rows no longer listed are released according to
        ``policy``.
        """
        if len(set(wanted_ids)) != len(wanted_ids):
            raise ValidationError(
                f"Duplicate {self.kind} ids for user {user_id}",
                {"user_id": user_id, "ids": list(wanted_ids)},
            )

        current = {row.id: row for row in self._owned_rows(user_id)}
        wanted = set(wanted_ids)

        for item_id in wanted_ids:
            if item_id in current:
                continue
            row = self._session.get(self.table_class, item_id)
            if row is None:
                raise NotFoundError(f"{self.kind} {item_id} not found", {"id": item_id})
            if row.user_id is not None and row.user_id != user_id:
                raise OwnershipError(
                    f"{self.kind} {item_id} is owned by user {row.user_id}",
                    {"id": item_id, "owner_id": row.user_id, "user_id": user_id},
                )
            row.user_id = user_id
            row.stamp(row.audit_info().touched(actor))
            self._session.add(row)
            logger.debug("Attached {} {} to user {}", self.kind, item_id, user_id)

        for item_id, row in current.items():
            if item_id not in wanted:
                self.release(row, policy, actor)

    def release_all(self, user_id: int, policy: OrphanPolicy, actor: str | None = None) -> None:
        for row in self._owned_rows(user_id):
            self.release(row, policy, actor)

    def release(self, row: TableT, policy: OrphanPolicy, actor: str | None = None) -> None:
        if policy == "delete":
            logger.debug("Deleting released {} {}", self.kind, row.id)
            self._session.delete(row)
            return

        logger.debug("Detaching {} {} from user {}", self.kind, row.id, row.user_id)
        row.user_id = None
        row.stamp(row.audit_info().touched(actor))
        self._session.add(row)

    def _owned_rows(self, user_id: int) -> list[TableT]:
        statement = (
            select(self.table_class)
            .where(self.table_class.user_id == user_id)
            .order_by(self.table_class.id)
        )
        return list(self._session.exec(statement).all())

    def _data_fields(self) -> list[str]:
        return [name for name in self.entity_class.model_fields if name not in ("id", "audit")]

    def _to_entity(self, row: TableT) -> EntityT:
        values = {name: getattr(row, name) for name in self._data_fields()}
        return self.entity_class(id=row.id, audit=row.audit_info(), **values)
