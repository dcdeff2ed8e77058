from datetime import UTC, datetime, timedelta
from typing import Any, Protocol, runtime_checkable

import sqlalchemy as sa
from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from backends that drop the offset."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class AuditInfo(BaseModel):
    """Creation and last-modification provenance of a record.

    Creation fields are set once. Only the persistence layer produces new
    values, through :meth:`new` and :meth:`touched`.
    """

    model_config = ConfigDict(frozen=True)

    created_at: datetime = PydanticField(default_factory=utc_now)
    created_by: str | None = PydanticField(default=None)
    modified_at: datetime = PydanticField(default_factory=utc_now)
    modified_by: str | None = PydanticField(default=None)

    @classmethod
    def new(cls, actor: str | None = None) -> "AuditInfo":
        now = utc_now()
        return cls(created_at=now, created_by=actor, modified_at=now, modified_by=actor)

    def touched(self, actor: str | None = None) -> "AuditInfo":
        """Return a copy with the modification stamp moved strictly forward."""
        modified_at = max(utc_now(), as_utc(self.modified_at) + timedelta(microseconds=1))
        return self.model_copy(update={"modified_at": modified_at, "modified_by": actor})


@runtime_checkable
class Auditable(Protocol):
    """Anything that carries audit provenance."""

    audit: AuditInfo


class Entity(BaseModel):
    """Base entity with a persistence-assigned integer id and audit metadata."""

    model_config = ConfigDict(validate_assignment=True)

    id: int | None = PydanticField(
        default=None,
        description="Unique identifier, assigned by the persistence layer",
    )
    audit: AuditInfo = PydanticField(default_factory=AuditInfo)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "id" and self.id is not None and value != self.id:
            raise ValueError(f"{type(self).__name__}.id is immutable once assigned")
        super().__setattr__(name, value)


class EntityTable(SQLModel, table=False):
    """Base table with an autoincrement id and flattened audit columns."""

    id: int | None = Field(default=None, primary_key=True)

    created_at: datetime = Field(
        default_factory=utc_now, sa_type=sa.DateTime(timezone=True), nullable=False
    )
    created_by: str | None = Field(default=None, max_length=255)
    modified_at: datetime = Field(
        default_factory=utc_now, sa_type=sa.DateTime(timezone=True), nullable=False
    )
    modified_by: str | None = Field(default=None, max_length=255)

    def audit_info(self) -> AuditInfo:
        return AuditInfo(
            created_at=as_utc(self.created_at),
            created_by=self.created_by,
            modified_at=as_utc(self.modified_at),
            modified_by=self.modified_by,
        )

    def stamp(self, audit: AuditInfo) -> None:
        """Copy ``audit`` onto the audit columns."""
        self.created_at = audit.created_at
        self.created_by = audit.created_by
        self.modified_at = audit.modified_at
        self.modified_by = audit.modified_by
