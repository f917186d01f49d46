# language_platform/schemas/lesson.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class LessonBase(BaseModel):
    title: str = Field(..., max_length=200)
    content: Optional[str] = None


class LessonCreate(LessonBase):
    pass


class LessonUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    content: Optional[str] = None


class LessonInDB(LessonBase):
    id: int
    instructor_id: Optional[int]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
