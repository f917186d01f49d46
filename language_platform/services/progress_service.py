"""
Servicio de progreso: valida el porcentaje y serializa las escrituras por
par (learner_id, lesson_id) antes de delegar en `ProgressStore`.
"""
import logging
import threading
import time
from typing import Dict, List, Tuple

from language_platform.core.exceptions import ValidationError
from language_platform.core.logging_config import log_progress_write
from language_platform.schemas.progress import ProgressRecord
from language_platform.services.progress_store import ProgressStore

logger = logging.getLogger(__name__)

MIN_PERCENT = 0
MAX_PERCENT = 100


def validate_percent(percent) -> int:
    """
    Comprueba que el porcentaje sea un entero en [0, 100].

    Raises:
        ValidationError: si no es entero (los bool no cuentan) o está fuera de rango
    """
    if isinstance(percent, bool) or not isinstance(percent, int):
        raise ValidationError(f"Percent must be an integer, got {percent!r}")
    if not MIN_PERCENT <= percent <= MAX_PERCENT:
        raise ValidationError(
            f"Percent must be between {MIN_PERCENT} and {MAX_PERCENT}, got {percent}"
        )
    return percent


class ProgressService:
    def __init__(self, store: ProgressStore):
        self._store = store
        self._locks: Dict[Tuple[int, int], threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, learner_id: int, lesson_id: int) -> threading.Lock:
        key = (learner_id, lesson_id)
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def update_progress(self, learner_id: int, lesson_id: int, percent: int) -> ProgressRecord:
        """
        Guarda el porcentaje del par (learner_id, lesson_id).

        Las escrituras al mismo par son mutuamente excluyentes; pares
        distintos avanzan en paralelo.

        Raises:
            ValidationError: porcentaje fuera de [0, 100]; no se toca la base de datos
            StorageError: fallo de la base de datos
        """
        validate_percent(percent)

        with self._lock_for(learner_id, lesson_id):
            started = time.monotonic()
            try:
                record = self._store.upsert(learner_id, lesson_id, percent)
            except Exception:
                log_progress_write(
                    logger, learner_id, lesson_id, percent, success=False,
                    response_time_ms=int((time.monotonic() - started) * 1000),
                )
                raise

        log_progress_write(
            logger, learner_id, lesson_id, percent,
            response_time_ms=int((time.monotonic() - started) * 1000),
        )
        return record

    def get_progress_for_learner(self, learner_id: int) -> List[ProgressRecord]:
        return self._store.query_by_learner(learner_id)

    def reset_progress(self, learner_id: int, lesson_id: int) -> bool:
        """
        Elimina el progreso del par (uso administrativo).
        """
        with self._lock_for(learner_id, lesson_id):
            deleted = self._store.delete(learner_id, lesson_id)
        if deleted:
            logger.info(f"Progreso eliminado: learner={learner_id}, lesson={lesson_id}")
        return deleted
