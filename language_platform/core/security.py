from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Union
import bcrypt

from jose import jwt

from language_platform.core.config import Settings


def create_access_token(
    settings: Settings,
    subject: Union[str, Any],
    expires_delta: timedelta = None,
    claims: Dict[str, Any] = None,
) -> str:
    """
    Crea un token de acceso JWT.
    """
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
    to_encode = {"exp": expire, "sub": str(subject)}
    if claims:
        to_encode.update(claims)
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def decode_access_token(settings: Settings, token: str) -> Dict[str, Any]:
    """
    Decodifica y verifica un token JWT. Lanza `JWTError` si no es válido.
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifica una contraseña contra su hash usando bcrypt directamente.
    Trunca la contraseña a 72 bytes (límite de bcrypt).
    """
    password_bytes = plain_password.encode('utf-8')[:72]
    hashed_bytes = hashed_password.encode('utf-8')

    try:
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except ValueError:
        # Hash con formato inválido
        return False


def get_password_hash(password: str) -> str:
    """
    Genera el hash de una contraseña usando bcrypt directamente.
    Trunca la contraseña a 72 bytes (límite de bcrypt).
    """
    password_bytes = password.encode('utf-8')[:72]

    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)

    return hashed.decode('utf-8')
