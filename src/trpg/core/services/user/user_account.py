"""Account service: the money, role, avatar and ownership rules around ``User``."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session

from src.trpg.core.exceptions import NotFoundError, TrpgError, ValidationError
from src.trpg.entities.core.character import Character, CharacterRepository
from src.trpg.entities.core.role import Role
from src.trpg.entities.core.user import User, UserRepository, url_text
from src.trpg.entities.core.user_equipment import UserEquipment, UserEquipmentRepository
from src.trpg.runtime.config.config_data import OrphanPolicy
from src.trpg.runtime.context import get_config

_http_url = TypeAdapter(HttpUrl)


def parse_avatar(value: str | None, field_name: str) -> str | None:
    """Normalize an avatar link, rejecting anything but an absolute http(s) URL."""
    if value is None:
        return None
    try:
        return str(_http_url.validate_python(value))
    except PydanticValidationError as e:
        raise ValidationError(
            f"{field_name} is not a valid URL",
            {"field": field_name, "value": value, "errors": e.errors(include_url=False)},
        ) from e


def parse_role(value: Role | str) -> Role:
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError as e:
        raise ValidationError(
            f"Unknown role {value!r}",
            {"value": value, "allowed": [role.value for role in Role]},
        ) from e


class UserAccountService:
    """Account operations with the rules the ``User`` record leaves out.

    Every public method runs as one transaction on the given session:
    committed on success, rolled back and re-raised on failure.
    """

    def __init__(self, db_session: Session, orphan_policy: OrphanPolicy | None = None):
        persistence = get_config().persistence
        self._db_session = db_session
        self._user_repo = UserRepository(db_session, orphan_policy or persistence.orphan_policy)
        self._character_repo = CharacterRepository(db_session)
        self._equipment_repo = UserEquipmentRepository(db_session)
        self._default_actor = persistence.default_actor

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        try:
            yield
            self._db_session.commit()
        except Exception as e:
            self._db_session.rollback()
            details = e.to_dict() if isinstance(e, TrpgError) else {"error_type": type(e).__name__}
            logger.bind(error=details).error("{} failed: {}", operation, e)
            raise

    def _actor(self, actor: str | None) -> str | None:
        return actor or self._default_actor

    def _require_user(self, user_id: int) -> User:
        user = self._user_repo.get(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found", {"id": user_id})
        return user

    def get_user(self, user_id: int) -> User:
        return self._require_user(user_id)

    def find_by_steam_id(self, steam_id: int) -> User | None:
        return self._user_repo.get_by_steam_id(steam_id)

    def list_users(self, offset: int = 0, limit: int = 100) -> list[User]:
        return self._user_repo.list_all(offset=offset, limit=limit)

    def provision_from_steam(
        self,
        steam_id: int,
        user_name: str,
        avatar_small: str | None = None,
        avatar_medium: str | None = None,
        avatar_full: str | None = None,
        actor: str | None = None,
    ) -> User:
        """Get or create the account for a Steam login.

        An existing account gets its display name and avatars refreshed
        from the latest profile data.
        """
        with self._transaction("provision_from_steam"):
            avatars = {
                "avatar_small": parse_avatar(avatar_small, "avatar_small"),
                "avatar_medium": parse_avatar(avatar_medium, "avatar_medium"),
                "avatar_full": parse_avatar(avatar_full, "avatar_full"),
            }
            user = self._user_repo.get_by_steam_id(steam_id)
            if user is None:
                user = self._user_repo.create(
                    User(steam_id=steam_id, user_name=user_name, **avatars),
                    actor=self._actor(actor),
                )
                logger.info("Provisioned user {} for steam id {}", user.id, steam_id)
                return user

            unchanged = user.user_name == user_name and all(
                url_text(getattr(user, name)) == value for name, value in avatars.items()
            )
            if unchanged:
                return user

            user.user_name = user_name
            for name, value in avatars.items():
                setattr(user, name, value)
            return self._user_repo.update(user, actor=self._actor(actor))

    def set_money(self, user_id: int, amount: int, actor: str | None = None) -> User:
        with self._transaction("set_money"):
            if amount < 0:
                raise ValidationError("Money cannot be negative", {"id": user_id, "amount": amount})
            user = self._require_user(user_id)
            user.money = amount
            return self._user_repo.update(user, actor=self._actor(actor))

    def adjust_money(self, user_id: int, delta: int, actor: str | None = None) -> User:
        with self._transaction("adjust_money"):
            user = self._require_user(user_id)
            new_balance = user.money + delta
            if new_balance < 0:
                raise ValidationError(
                    "Insufficient funds",
                    {"id": user_id, "balance": user.money, "delta": delta},
                )
            user.money = new_balance
            return self._user_repo.update(user, actor=self._actor(actor))

    def change_role(self, user_id: int, role: Role | str, actor: str | None = None) -> User:
        with self._transaction("change_role"):
            new_role = parse_role(role)
            user = self._require_user(user_id)
            if user.role == new_role:
                return user
            user.role = new_role
            logger.info("User {} role changed to {}", user_id, new_role.value)
            return self._user_repo.update(user, actor=self._actor(actor))

    def update_avatars(
        self,
        user_id: int,
        small: str | None = None,
        medium: str | None = None,
        full: str | None = None,
        actor: str | None = None,
    ) -> User:
        """Replace all three avatar links; ``None`` clears a size."""
        with self._transaction("update_avatars"):
            avatar_small = parse_avatar(small, "avatar_small")
            avatar_medium = parse_avatar(medium, "avatar_medium")
            avatar_full = parse_avatar(full, "avatar_full")
            user = self._require_user(user_id)
            user.avatar_small = avatar_small
            user.avatar_medium = avatar_medium
            user.avatar_full = avatar_full
            return self._user_repo.update(user, actor=self._actor(actor))

    def create_character(self, user_id: int, name: str, actor: str | None = None) -> Character:
        with self._transaction("create_character"):
            user = self._require_user(user_id)
            character = self._character_repo.create(Character(name=name), actor=self._actor(actor))
            user.character_ids.append(character.id)
            self._user_repo.update(user, actor=self._actor(actor))
            return self._character_repo.get(character.id)

    def grant_equipment(
        self, user_id: int, equipment_key: str, actor: str | None = None
    ) -> UserEquipment:
        with self._transaction("grant_equipment"):
            user = self._require_user(user_id)
            equipment = self._equipment_repo.create(
                UserEquipment(equipment_key=equipment_key), actor=self._actor(actor)
            )
            user.user_equipment_ids.append(equipment.id)
            self._user_repo.update(user, actor=self._actor(actor))
            return self._equipment_repo.get(equipment.id)

    def attach_character(self, user_id: int, character_id: int, actor: str | None = None) -> User:
        """Transfer a detached character to ``user_id``."""
        with self._transaction("attach_character"):
            user = self._require_user(user_id)
            if character_id in user.character_ids:
                return user
            user.character_ids.append(character_id)
            return self._user_repo.update(user, actor=self._actor(actor))

    def attach_equipment(self, user_id: int, equipment_id: int, actor: str | None = None) -> User:
        """Transfer a detached equipment instance to ``user_id``."""
        with self._transaction("attach_equipment"):
            user = self._require_user(user_id)
            if equipment_id in user.user_equipment_ids:
                return user
            user.user_equipment_ids.append(equipment_id)
            return self._user_repo.update(user, actor=self._actor(actor))

    def release_character(self, user_id: int, character_id: int, actor: str | None = None) -> User:
        with self._transaction("release_character"):
            user = self._require_user(user_id)
            if character_id not in user.character_ids:
                raise NotFoundError(
                    f"User {user_id} does not own character {character_id}",
                    {"id": user_id, "character_id": character_id},
                )
            user.character_ids.remove(character_id)
            return self._user_repo.update(user, actor=self._actor(actor))

    def release_equipment(self, user_id: int, equipment_id: int, actor: str | None = None) -> User:
        with self._transaction("release_equipment"):
            user = self._require_user(user_id)
            if equipment_id not in user.user_equipment_ids:
                raise NotFoundError(
                    f"User {user_id} does not own equipment {equipment_id}",
                    {"id": user_id, "equipment_id": equipment_id},
                )
            user.user_equipment_ids.remove(equipment_id)
            return self._user_repo.update(user, actor=self._actor(actor))

    def delete_account(self, user_id: int, actor: str | None = None) -> None:
        with self._transaction("delete_account"):
            self._user_repo.delete(user_id, actor=self._actor(actor))
            logger.info("Account {} deleted", user_id)
