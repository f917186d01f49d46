"""
Persistencia del progreso de los estudiantes.

Cada llamada obtiene su propia sesión de la fábrica inyectada y la libera al
terminar. Cualquier error de SQLAlchemy se traduce a `StorageError`.
"""
import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from language_platform.core.exceptions import StorageError
from language_platform.crud import crud_progress
from language_platform.db.session import session_scope
from language_platform.schemas.progress import ProgressRecord

logger = logging.getLogger(__name__)


class ProgressStore:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def upsert(self, learner_id: int, lesson_id: int, percent: int) -> ProgressRecord:
        try:
            with session_scope(self._session_factory) as db:
                progress = crud_progress.upsert_progress(db, learner_id, lesson_id, percent)
                record = ProgressRecord.model_validate(progress)
        except SQLAlchemyError as e:
            logger.error(f"Error guardando progreso: learner={learner_id}, lesson={lesson_id}: {e}")
            raise StorageError(f"Could not save progress: {e}") from e
        return record

    def query_by_learner(self, learner_id: int) -> List[ProgressRecord]:
        try:
            with session_scope(self._session_factory) as db:
                rows = crud_progress.get_progress_by_learner(db, learner_id)
                records = [ProgressRecord.model_validate(row) for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Error consultando progreso: learner={learner_id}: {e}")
            raise StorageError(f"Could not load progress: {e}") from e
        return records

    def delete(self, learner_id: int, lesson_id: int) -> bool:
        try:
            with session_scope(self._session_factory) as db:
                deleted = crud_progress.delete_progress(db, learner_id, lesson_id)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not delete progress: {e}") from e
        return deleted
