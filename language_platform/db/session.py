# language_platform/db/session.py
import math
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from language_platform.core.config import Settings


def _timeout_connect_args(backend: str, timeout: float) -> Dict[str, Any]:
    """
    Argumentos del driver que acotan cada operación contra la base de datos.
    """
    seconds = max(1, math.ceil(timeout))
    if backend == "sqlite":
        return {"check_same_thread": False, "timeout": timeout}
    if backend == "postgresql":
        return {
            "connect_timeout": seconds,
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        }
    if backend == "mysql":
        return {
            "connect_timeout": seconds,
            "read_timeout": seconds,
            "write_timeout": seconds,
        }
    return {}


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite solo aplica las claves foráneas (y ON DELETE CASCADE) si se activan en cada conexión
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(settings: Settings) -> Engine:
    """
    Crea el motor (engine) de SQLAlchemy usando la URI de la configuración.
    """
    uri = settings.DATABASE_URI
    backend = make_url(uri).get_backend_name()
    kwargs: Dict[str, Any] = {
        "connect_args": _timeout_connect_args(backend, settings.DB_WRITE_TIMEOUT_SECONDS),
    }
    if backend != "sqlite":
        kwargs["pool_pre_ping"] = True
        kwargs["pool_timeout"] = settings.DB_WRITE_TIMEOUT_SECONDS
    engine = create_engine(uri, **kwargs)
    if backend == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    """
    Crea una fábrica de sesiones que se usará para crear sesiones individuales.
    """
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    """
    Abre una sesión, hace commit si el bloque termina bien y rollback si falla.
    La sesión se cierra siempre.
    """
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
