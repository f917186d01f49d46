"""
Servicio de lecciones con un mapa id -> lección en memoria.

`get_all_lessons` recarga el mapa completo; `get_lesson_by_id` lo consulta
primero y solo va a la base de datos si la lección no está.
"""
import logging
import threading
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from language_platform.core.exceptions import NotFoundError, StorageError, ValidationError
from language_platform.crud import crud_lesson
from language_platform.db.session import session_scope
from language_platform.schemas.lesson import LessonInDB

logger = logging.getLogger(__name__)


def _clean_title(title: Optional[str]) -> str:
    if title is None or not title.strip():
        raise ValidationError("Lesson title is required")
    return title.strip()


class LessonService:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self._cache: Dict[int, LessonInDB] = {}
        self._cache_lock = threading.Lock()

    def get_all_lessons(self) -> List[LessonInDB]:
        try:
            with session_scope(self._session_factory) as db:
                lessons = [LessonInDB.model_validate(row) for row in crud_lesson.get_lessons(db)]
        except SQLAlchemyError as e:
            raise StorageError(f"Could not load lessons: {e}") from e

        with self._cache_lock:
            self._cache = {lesson.id: lesson for lesson in lessons}
        return lessons

    def get_lesson_by_id(self, lesson_id: int) -> Optional[LessonInDB]:
        with self._cache_lock:
            cached = self._cache.get(lesson_id)
        if cached is not None:
            return cached

        try:
            with session_scope(self._session_factory) as db:
                row = crud_lesson.get_lesson(db, lesson_id)
                lesson = LessonInDB.model_validate(row) if row else None
        except SQLAlchemyError as e:
            raise StorageError(f"Could not load lesson {lesson_id}: {e}") from e

        if lesson is not None:
            with self._cache_lock:
                self._cache[lesson.id] = lesson
        return lesson

    def create_lesson(self, title: str, content: Optional[str], instructor_id: int) -> LessonInDB:
        title = _clean_title(title)
        try:
            with session_scope(self._session_factory) as db:
                row = crud_lesson.create_lesson(db, title, content, instructor_id)
                lesson = LessonInDB.model_validate(row)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not create lesson: {e}") from e

        with self._cache_lock:
            self._cache[lesson.id] = lesson
        logger.info(f"Lección creada: id={lesson.id}, instructor={instructor_id}")
        return lesson

    def update_lesson(self, lesson_id: int, title: Optional[str] = None,
                      content: Optional[str] = None) -> LessonInDB:
        fields = {}
        if title is not None:
            fields["title"] = _clean_title(title)
        if content is not None:
            fields["content"] = content

        try:
            with session_scope(self._session_factory) as db:
                row = crud_lesson.get_lesson(db, lesson_id)
                if row is None:
                    raise NotFoundError("Lesson", lesson_id)
                lesson = LessonInDB.model_validate(crud_lesson.update_lesson(db, row, **fields))
        except SQLAlchemyError as e:
            raise StorageError(f"Could not update lesson {lesson_id}: {e}") from e

        with self._cache_lock:
            self._cache[lesson.id] = lesson
        return lesson

    def delete_lesson(self, lesson_id: int) -> None:
        try:
            with session_scope(self._session_factory) as db:
                row = crud_lesson.get_lesson(db, lesson_id)
                if row is None:
                    raise NotFoundError("Lesson", lesson_id)
                crud_lesson.delete_lesson(db, row)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not delete lesson {lesson_id}: {e}") from e

        with self._cache_lock:
            self._cache.pop(lesson_id, None)
        logger.info(f"Lección eliminada: id={lesson_id}")
