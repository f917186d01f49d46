# language_platform/api/v1/endpoints/progress.py
"""
Endpoints de progreso y auto-guardado.

El cliente de escritorio inicia el auto-guardado al elegir una lección,
envía cada cambio del deslizador y lo detiene al salir; el hilo de
auto-guardado persiste el último valor cada `AUTOSAVE_INTERVAL_SECONDS`.
"""
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from language_platform.api.deps import (
    get_autosave_manager,
    get_lesson_service,
    get_progress_service,
    require_capability,
)
from language_platform.api.errors import http_error
from language_platform.core.exceptions import PlatformError
from language_platform.core.roles import Capability
from language_platform.schemas.progress import (
    AutoSavePercentRequest,
    AutoSaveStartRequest,
    AutoSaveStatus,
    ProgressRecord,
    ProgressUpdateRequest,
)
from language_platform.schemas.user import UserPublic
from language_platform.services.autosave import AutoSaveManager
from language_platform.services.lesson_service import LessonService
from language_platform.services.progress_service import ProgressService

router = APIRouter()
logger = logging.getLogger('language_platform.api.progress')

learner_only = require_capability(Capability.TRACK_PROGRESS)


def _ensure_lesson_exists(lesson_service: LessonService, lesson_id: int) -> None:
    if lesson_service.get_lesson_by_id(lesson_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Lección no encontrada",
        )


@router.get("/me", response_model=List[ProgressRecord], summary="Progreso del estudiante actual")
def get_my_progress(
    progress_service: ProgressService = Depends(get_progress_service),
    current_user: UserPublic = Depends(learner_only),
):
    try:
        return progress_service.get_progress_for_learner(current_user.id)
    except PlatformError as e:
        raise http_error(e)


@router.get(
    "/learners/{learner_id}",
    response_model=List[ProgressRecord],
    summary="Progreso de un estudiante (administración)",
)
def get_learner_progress(
    learner_id: int,
    progress_service: ProgressService = Depends(get_progress_service),
    current_user: UserPublic = Depends(require_capability(Capability.MANAGE_USERS)),
):
    try:
        return progress_service.get_progress_for_learner(learner_id)
    except PlatformError as e:
        raise http_error(e)


@router.delete(
    "/learners/{learner_id}/{lesson_id}",
    summary="Resetear progreso",
    description="Elimina el progreso de un estudiante para una lección (uso administrativo).",
)
def reset_progress(
    learner_id: int,
    lesson_id: int,
    progress_service: ProgressService = Depends(get_progress_service),
    current_user: UserPublic = Depends(require_capability(Capability.MANAGE_USERS)),
):
    try:
        deleted = progress_service.reset_progress(learner_id, lesson_id)
    except PlatformError as e:
        raise http_error(e)

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No se encontró progreso para eliminar"
        )
    return {"message": "Progreso eliminado correctamente", "learner_id": learner_id, "lesson_id": lesson_id}


@router.put("/lessons/{lesson_id}", response_model=ProgressRecord, summary="Guardar progreso")
def update_progress(
    lesson_id: int,
    request: ProgressUpdateRequest,
    progress_service: ProgressService = Depends(get_progress_service),
    lesson_service: LessonService = Depends(get_lesson_service),
    current_user: UserPublic = Depends(learner_only),
):
    try:
        _ensure_lesson_exists(lesson_service, lesson_id)
        return progress_service.update_progress(current_user.id, lesson_id, request.completion_percent)
    except PlatformError as e:
        raise http_error(e)


@router.post(
    "/autosave",
    response_model=AutoSaveStatus,
    status_code=status.HTTP_201_CREATED,
    summary="Iniciar auto-guardado",
    description="Detiene cualquier auto-guardado previo del estudiante e inicia uno nuevo.",
)
def start_autosave(
    request: AutoSaveStartRequest,
    manager: AutoSaveManager = Depends(get_autosave_manager),
    lesson_service: LessonService = Depends(get_lesson_service),
    current_user: UserPublic = Depends(learner_only),
):
    try:
        _ensure_lesson_exists(lesson_service, request.lesson_id)
        task = manager.start(current_user.id, request.lesson_id, request.initial_percent)
    except PlatformError as e:
        raise http_error(e)

    logger.info(f"Auto-save started for lesson {request.lesson_id}", extra={"user_id": current_user.id})
    return task.snapshot()


@router.put("/autosave", response_model=AutoSaveStatus, summary="Actualizar porcentaje")
def update_autosave_percent(
    request: AutoSavePercentRequest,
    manager: AutoSaveManager = Depends(get_autosave_manager),
    current_user: UserPublic = Depends(learner_only),
):
    try:
        manager.update_percent(current_user.id, request.percent)
    except PlatformError as e:
        raise http_error(e)

    task = manager.active_task(current_user.id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Auto-save stopped")
    return task.snapshot()


@router.get("/autosave", response_model=AutoSaveStatus, summary="Estado del auto-guardado")
def get_autosave_status(
    manager: AutoSaveManager = Depends(get_autosave_manager),
    current_user: UserPublic = Depends(learner_only),
):
    task = manager.active_task(current_user.id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active auto-save")
    return task.snapshot()


@router.delete("/autosave", summary="Detener auto-guardado")
def stop_autosave(
    manager: AutoSaveManager = Depends(get_autosave_manager),
    current_user: UserPublic = Depends(learner_only),
):
    if not manager.stop(current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active auto-save")
    return {"message": "Auto-save stopped"}
