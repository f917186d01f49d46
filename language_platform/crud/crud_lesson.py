from typing import List, Optional

from sqlalchemy.orm import Session

from language_platform.models.lesson import Lesson


def get_lesson(db: Session, lesson_id: int) -> Optional[Lesson]:
    """
    Obtiene una lección por su ID.
    """
    return db.query(Lesson).filter(Lesson.id == lesson_id).first()


def get_lessons(db: Session) -> List[Lesson]:
    """
    Obtiene todas las lecciones ordenadas por ID.
    """
    return db.query(Lesson).order_by(Lesson.id).all()


def create_lesson(db: Session, title: str, content: Optional[str], instructor_id: int) -> Lesson:
    db_lesson = Lesson(
        title=title,
        content=content,
        instructor_id=instructor_id
    )
    db.add(db_lesson)
    db.flush()
    db.refresh(db_lesson)
    return db_lesson


def update_lesson(db: Session, db_lesson: Lesson, **fields) -> Lesson:
    """
    Actualiza los campos indicados de una lección existente.
    """
    for field, value in fields.items():
        setattr(db_lesson, field, value)

    db.add(db_lesson)
    db.flush()
    db.refresh(db_lesson)
    return db_lesson


def delete_lesson(db: Session, db_lesson: Lesson) -> Lesson:
    db.delete(db_lesson)
    db.flush()
    return db_lesson
