# language_platform/schemas/progress.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class ProgressRecord(BaseModel):
    """Progreso de un estudiante en una lección."""
    id: int
    learner_id: int
    lesson_id: int
    completion_percent: int = Field(..., ge=0, le=100)
    last_updated: Optional[datetime]

    class Config:
        from_attributes = True


class ProgressUpdateRequest(BaseModel):
    """Schema para la actualización directa del progreso."""
    completion_percent: int = Field(..., description="Porcentaje completado (0-100)")

    class Config:
        json_schema_extra = {
            "example": {
                "completion_percent": 40
            }
        }


class AutoSaveStartRequest(BaseModel):
    """Schema para iniciar el auto-guardado de una lección."""
    lesson_id: int = Field(..., description="ID de la lección seleccionada")
    initial_percent: int = Field(0, description="Porcentaje inicial del deslizador")

    class Config:
        json_schema_extra = {
            "example": {
                "lesson_id": 2,
                "initial_percent": 0
            }
        }


class AutoSavePercentRequest(BaseModel):
    """Schema para enviar el nuevo valor del deslizador."""
    percent: int


class AutoSaveStatus(BaseModel):
    """Estado de la tarea de auto-guardado de un estudiante."""
    learner_id: Optional[int]
    lesson_id: Optional[int]
    state: str
    current_percent: Optional[int]
    interval_seconds: float
    saves: int
    failures: int
