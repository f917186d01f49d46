# language_platform/schemas/user.py
from typing import List

from pydantic import BaseModel, EmailStr, Field

from language_platform.core.roles import Role


class UserCreate(BaseModel):
    """Schema para el alta de usuarios desde el panel de administración."""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: Role


class UserPublic(BaseModel):
    id: int
    name: str
    email: str
    role: Role

    class Config:
        from_attributes = True


class AuthenticatedUser(UserPublic):
    """Usuario devuelto por un login correcto."""
    pass


class UserLogin(BaseModel):
    """
    Schema para el login del usuario.
    """
    email: str
    password: str


class Dashboard(BaseModel):
    title: str
    role: Role
    sections: List[str]
