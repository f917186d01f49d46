import logging
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from language_platform.core.exceptions import NotFoundError, StorageError, ValidationError
from language_platform.core.roles import Role
from language_platform.crud import crud_user
from language_platform.db.session import session_scope
from language_platform.schemas.user import UserPublic

logger = logging.getLogger(__name__)


class UserService:
    """Gestión de usuarios para el panel de administración."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def list_users(self) -> List[UserPublic]:
        try:
            with session_scope(self._session_factory) as db:
                return [UserPublic.model_validate(u) for u in crud_user.get_users(db, limit=1000)]
        except SQLAlchemyError as e:
            raise StorageError(f"Could not load users: {e}") from e

    def create_user(self, name: str, email: str, password: str, role: Role) -> UserPublic:
        try:
            with session_scope(self._session_factory) as db:
                if crud_user.get_user_by_email(db, email) is not None:
                    raise ValidationError(f"Email {email} is already registered")
                user = UserPublic.model_validate(
                    crud_user.create_user(db, name=name, email=email, role=role, password=password)
                )
        except IntegrityError as e:
            # Alta concurrente con el mismo email
            raise ValidationError(f"Email {email} is already registered") from e
        except SQLAlchemyError as e:
            raise StorageError(f"Could not create user: {e}") from e

        logger.info(f"Usuario creado: id={user.id}, role={user.role.value}")
        return user

    def delete_user(self, user_id: int) -> None:
        try:
            with session_scope(self._session_factory) as db:
                user = crud_user.get_user(db, user_id)
                if user is None:
                    raise NotFoundError("User", user_id)
                crud_user.delete_user(db, user)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not delete user {user_id}: {e}") from e
        logger.info(f"Usuario eliminado: id={user_id}")
