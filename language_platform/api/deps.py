from typing import Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from language_platform.api.errors import http_error
from language_platform.core import security
from language_platform.core.exceptions import PermissionDeniedError
from language_platform.core.config import Settings
from language_platform.core.roles import Capability, has_capability
from language_platform.crud.crud_user import get_user
from language_platform.db.session import session_scope
from language_platform.schemas.token import TokenPayload
from language_platform.schemas.user import UserPublic
from language_platform.services.auth_service import AuthService
from language_platform.services.autosave import AutoSaveManager
from language_platform.services.lesson_service import LessonService
from language_platform.services.progress_service import ProgressService
from language_platform.services.user_service import UserService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request):
    """
    Función de dependencia para obtener una sesión de base de datos.
    Asegura que la sesión se cierre siempre después de la petición.
    """
    db: Session = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_lesson_service(request: Request) -> LessonService:
    return request.app.state.lesson_service


def get_progress_service(request: Request) -> ProgressService:
    return request.app.state.progress_service


def get_autosave_manager(request: Request) -> AutoSaveManager:
    return request.app.state.autosave_manager


def get_current_user(
    request: Request,
    settings: Settings = Depends(get_settings),
    token: str = Depends(oauth2_scheme),
) -> UserPublic:
    """
    Dependencia para obtener el usuario actual desde el token JWT.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = security.decode_access_token(settings, token)
        token_data = TokenPayload(**payload)
        if token_data.sub is None:
            raise credentials_exception
        user_id = int(token_data.sub)
    except (JWTError, ValueError):
        raise credentials_exception

    try:
        with session_scope(request.app.state.session_factory) as db:
            user = get_user(db, user_id)
            current = UserPublic.model_validate(user) if user else None
    except SQLAlchemyError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )

    if current is None:
        raise credentials_exception
    request.state.user_id = current.id
    return current


def require_capability(capability: Capability) -> Callable[..., UserPublic]:
    """
    Crea una dependencia que exige que el rol del usuario tenga la capacidad.
    """
    def dependency(current_user: UserPublic = Depends(get_current_user)) -> UserPublic:
        if not has_capability(current_user.role, capability):
            raise http_error(
                PermissionDeniedError(f"Role {current_user.role.value} cannot {capability.value}")
            )
        return current_user

    return dependency
