# language_platform/db/models_registry.py
# Este archivo importa todos los modelos para que Alembic pueda detectarlos
# Se importa en alembic/env.py y antes de `Base.metadata.create_all`

from language_platform.db.base import Base
from language_platform.models.user import User
from language_platform.models.lesson import Lesson
from language_platform.models.progress import LearnerProgress

# Exportar Base para uso en Alembic
__all__ = ["Base", "User", "Lesson", "LearnerProgress"]
