from typing import List, Optional

from sqlalchemy import and_, func
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.orm import Session

from language_platform.core.exceptions import StorageError
from language_platform.models.progress import LearnerProgress


def _upsert_statement(dialect_name: str, learner_id: int, lesson_id: int, percent: int):
    """
    Sentencia INSERT que resuelve el conflicto sobre (learner_id, lesson_id)
    en el propio motor, sin leer antes el registro.
    """
    values = {
        "learner_id": learner_id,
        "lesson_id": lesson_id,
        "completion_percent": percent,
    }

    if dialect_name == "mysql":
        stmt = mysql.insert(LearnerProgress).values(**values)
        return stmt.on_duplicate_key_update(
            completion_percent=stmt.inserted.completion_percent,
            last_updated=func.now(),
        )

    if dialect_name == "postgresql":
        insert = postgresql.insert
    elif dialect_name == "sqlite":
        insert = sqlite.insert
    else:
        raise StorageError(f"Unsupported database dialect for progress upsert: {dialect_name}")

    stmt = insert(LearnerProgress).values(**values)
    return stmt.on_conflict_do_update(
        index_elements=["learner_id", "lesson_id"],
        set_={
            "completion_percent": stmt.excluded.completion_percent,
            "last_updated": func.now(),
        },
    )


def get_progress(db: Session, learner_id: int, lesson_id: int) -> Optional[LearnerProgress]:
    """
    Obtiene el progreso de un estudiante en una lección.
    """
    return db.query(LearnerProgress).filter(
        and_(
            LearnerProgress.learner_id == learner_id,
            LearnerProgress.lesson_id == lesson_id
        )
    ).first()


def upsert_progress(db: Session, learner_id: int, lesson_id: int, percent: int) -> LearnerProgress:
    """
    Inserta o actualiza el progreso del par (learner_id, lesson_id).
    No hace commit: la transacción la gestiona quien llama.
    """
    dialect_name = db.get_bind().dialect.name
    db.execute(_upsert_statement(dialect_name, learner_id, lesson_id, percent))
    # populate_existing: la sesión puede tener una copia anterior del registro
    return db.query(LearnerProgress).populate_existing().filter(
        and_(
            LearnerProgress.learner_id == learner_id,
            LearnerProgress.lesson_id == lesson_id
        )
    ).one()


def get_progress_by_learner(db: Session, learner_id: int) -> List[LearnerProgress]:
    """
    Obtiene todos los registros de progreso de un estudiante, ordenados por lección.
    """
    return (
        db.query(LearnerProgress)
        .filter(LearnerProgress.learner_id == learner_id)
        .order_by(LearnerProgress.lesson_id)
        .all()
    )


def delete_progress(db: Session, learner_id: int, lesson_id: int) -> bool:
    """
    Elimina el progreso de un estudiante en una lección (uso administrativo).
    """
    progress = get_progress(db, learner_id, lesson_id)
    if not progress:
        return False
    db.delete(progress)
    return True
