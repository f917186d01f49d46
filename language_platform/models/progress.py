# language_platform/models/progress.py
from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.sql import func

from language_platform.db.base import Base


class LearnerProgress(Base):
    """
    Porcentaje de avance de un estudiante en una lección.
    Un único registro por par (learner_id, lesson_id).
    """
    __tablename__ = "progress"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    learner_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    lesson_id = Column(Integer, ForeignKey('lessons.id', ondelete='CASCADE'), nullable=False, index=True)
    completion_percent = Column(Integer, default=0, nullable=False)
    last_updated = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint('learner_id', 'lesson_id', name='uq_learner_lesson'),
        CheckConstraint('completion_percent >= 0 AND completion_percent <= 100', name='ck_completion_percent_range'),
    )

    def __repr__(self):
        return (
            f"<LearnerProgress(learner_id={self.learner_id}, lesson_id={self.lesson_id}, "
            f"percent={self.completion_percent})>"
        )
