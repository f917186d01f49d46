# language_platform/api/v1/endpoints/lessons.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from language_platform.api.deps import get_current_user, get_lesson_service, require_capability
from language_platform.api.errors import http_error
from language_platform.core.exceptions import PermissionDeniedError, PlatformError
from language_platform.core.roles import Capability, has_capability
from language_platform.schemas.lesson import LessonCreate, LessonInDB, LessonUpdate
from language_platform.schemas.user import UserPublic
from language_platform.services.lesson_service import LessonService

router = APIRouter()


def _ensure_can_edit(lesson: LessonInDB, current_user: UserPublic) -> None:
    """
    El administrador gestiona cualquier lección; el instructor solo las suyas.
    """
    if has_capability(current_user.role, Capability.MANAGE_LESSONS):
        return
    if (
        has_capability(current_user.role, Capability.CREATE_LESSONS)
        and lesson.instructor_id == current_user.id
    ):
        return
    raise http_error(
        PermissionDeniedError("Solo el instructor de la lección o un administrador pueden modificarla")
    )


def _get_or_404(lesson_service: LessonService, lesson_id: int) -> LessonInDB:
    try:
        lesson = lesson_service.get_lesson_by_id(lesson_id)
    except PlatformError as e:
        raise http_error(e)
    if lesson is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Lección no encontrada",
        )
    return lesson


@router.get("/", response_model=List[LessonInDB], summary="Listar lecciones")
def list_lessons(
    lesson_service: LessonService = Depends(get_lesson_service),
    current_user: UserPublic = Depends(require_capability(Capability.VIEW_LESSONS)),
):
    try:
        return lesson_service.get_all_lessons()
    except PlatformError as e:
        raise http_error(e)


@router.get("/{lesson_id}", response_model=LessonInDB, summary="Obtener lección")
def get_lesson(
    lesson_id: int,
    lesson_service: LessonService = Depends(get_lesson_service),
    current_user: UserPublic = Depends(require_capability(Capability.VIEW_LESSONS)),
):
    return _get_or_404(lesson_service, lesson_id)


@router.post("/", response_model=LessonInDB, status_code=status.HTTP_201_CREATED, summary="Crear lección")
def create_lesson(
    lesson_in: LessonCreate,
    lesson_service: LessonService = Depends(get_lesson_service),
    current_user: UserPublic = Depends(require_capability(Capability.CREATE_LESSONS)),
):
    try:
        return lesson_service.create_lesson(lesson_in.title, lesson_in.content, current_user.id)
    except PlatformError as e:
        raise http_error(e)


@router.patch("/{lesson_id}", response_model=LessonInDB, summary="Actualizar lección")
def update_lesson(
    lesson_id: int,
    lesson_in: LessonUpdate,
    lesson_service: LessonService = Depends(get_lesson_service),
    current_user: UserPublic = Depends(get_current_user),
):
    _ensure_can_edit(_get_or_404(lesson_service, lesson_id), current_user)
    try:
        return lesson_service.update_lesson(lesson_id, title=lesson_in.title, content=lesson_in.content)
    except PlatformError as e:
        raise http_error(e)


@router.delete("/{lesson_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Eliminar lección")
def delete_lesson(
    lesson_id: int,
    lesson_service: LessonService = Depends(get_lesson_service),
    current_user: UserPublic = Depends(get_current_user),
):
    _ensure_can_edit(_get_or_404(lesson_service, lesson_id), current_user)
    try:
        lesson_service.delete_lesson(lesson_id)
    except PlatformError as e:
        raise http_error(e)
