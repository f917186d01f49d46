from typing import List

from fastapi import APIRouter, Depends, status

from language_platform.api.deps import get_user_service, require_capability
from language_platform.api.errors import http_error
from language_platform.core.exceptions import PlatformError
from language_platform.core.roles import Capability
from language_platform.schemas.user import UserCreate, UserPublic
from language_platform.services.user_service import UserService

router = APIRouter()

admin_only = require_capability(Capability.MANAGE_USERS)


@router.get("/", response_model=List[UserPublic], summary="Listar usuarios")
def list_users(
    user_service: UserService = Depends(get_user_service),
    current_user: UserPublic = Depends(admin_only),
):
    try:
        return user_service.list_users()
    except PlatformError as e:
        raise http_error(e)


@router.post("/", response_model=UserPublic, status_code=status.HTTP_201_CREATED, summary="Crear usuario")
def create_user(
    user_in: UserCreate,
    user_service: UserService = Depends(get_user_service),
    current_user: UserPublic = Depends(admin_only),
):
    try:
        return user_service.create_user(
            name=user_in.name,
            email=user_in.email,
            password=user_in.password,
            role=user_in.role,
        )
    except PlatformError as e:
        raise http_error(e)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Eliminar usuario")
def delete_user(
    user_id: int,
    user_service: UserService = Depends(get_user_service),
    current_user: UserPublic = Depends(admin_only),
):
    try:
        user_service.delete_user(user_id)
    except PlatformError as e:
        raise http_error(e)
