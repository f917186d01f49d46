import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from language_platform.core.exceptions import AuthError, StorageError
from language_platform.crud import crud_user
from language_platform.db.session import session_scope
from language_platform.schemas.user import AuthenticatedUser

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def login(self, email: str, password: str) -> AuthenticatedUser:
        """
        Autentica por email y contraseña.

        Raises:
            AuthError: email o contraseña incorrectos
            StorageError: fallo de la base de datos
        """
        try:
            with session_scope(self._session_factory) as db:
                user = crud_user.authenticate_user(db, email.strip(), password)
                authenticated = AuthenticatedUser.model_validate(user) if user else None
        except SQLAlchemyError as e:
            raise StorageError(f"Could not verify credentials: {e}") from e

        if authenticated is None:
            logger.warning(f"Login fallido para {email}")
            raise AuthError("Invalid email or password")

        logger.info(f"Login correcto: user={authenticated.id}, role={authenticated.role.value}")
        return authenticated
