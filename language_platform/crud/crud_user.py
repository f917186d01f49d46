from typing import List, Optional

from sqlalchemy.orm import Session

from language_platform.core.roles import Role
from language_platform.core.security import get_password_hash, verify_password
from language_platform.models.user import User


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """
    Obtiene un usuario por su email.
    """
    return db.query(User).filter(User.email == email).first()


def get_users(db: Session, skip: int = 0, limit: int = 100) -> List[User]:
    return db.query(User).order_by(User.id).offset(skip).limit(limit).all()


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """
    Autentica un usuario verificando email y contraseña.
    """
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def create_user(
    db: Session,
    name: str,
    email: str,
    role: Role,
    password: str = None,
    hashed_password: str = None,
) -> User:
    """
    Crea un nuevo usuario.
    Puede aceptar password plano O hashed_password (no ambos).
    """
    if hashed_password is None:
        if password is None:
            raise ValueError("Debe proporcionar password o hashed_password")
        hashed_password = get_password_hash(password)

    db_user = User(
        name=name,
        email=email,
        hashed_password=hashed_password,
        role=role,
    )
    db.add(db_user)
    db.flush()
    db.refresh(db_user)
    return db_user


def delete_user(db: Session, db_user: User) -> User:
    """
    Elimina un usuario.
    """
    db.delete(db_user)
    db.flush()
    return db_user
