# language_platform/models/user.py
from sqlalchemy import Column, Integer, String, TIMESTAMP, Enum as SAEnum, func
from sqlalchemy.orm import relationship

from language_platform.core.roles import Role
from language_platform.db.base import Base


class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(SAEnum(Role, name='user_role_enum'), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    lessons = relationship("Lesson", back_populates="instructor")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role.value})>"
