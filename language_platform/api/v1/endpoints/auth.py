# language_platform/api/v1/endpoints/auth.py
from datetime import timedelta

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from language_platform.api.deps import get_auth_service, get_settings
from language_platform.api.errors import http_error
from language_platform.core import security
from language_platform.core.config import Settings
from language_platform.core.exceptions import PlatformError
from language_platform.schemas.token import Token
from language_platform.schemas.user import AuthenticatedUser, UserLogin
from language_platform.services.auth_service import AuthService

router = APIRouter()


@router.post("/auth/token", response_model=Token, summary="Autenticación con Email y Contraseña")
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    try:
        user = auth_service.login(form_data.username, form_data.password)
    except PlatformError as e:
        raise http_error(e)

    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = security.create_access_token(
        settings,
        subject=user.id,
        expires_delta=access_token_expires,
        claims={"role": user.role.value},
    )
    return {"access_token": access_token, "token_type": "bearer"}


@router.post("/auth/login", response_model=AuthenticatedUser, summary="Login con JSON")
def login(
    credentials: UserLogin,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Verifica las credenciales y devuelve el usuario con su rol.
    """
    try:
        return auth_service.login(credentials.email, credentials.password)
    except PlatformError as e:
        raise http_error(e)
