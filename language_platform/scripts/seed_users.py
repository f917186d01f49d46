# language_platform/scripts/seed_users.py
"""
Crea las tablas (si no existen) e inserta un usuario por rol y una lección de
ejemplo para probar la aplicación en local.
"""
import logging

from sqlalchemy.orm import sessionmaker

from language_platform.core.config import get_settings
from language_platform.core.roles import Role
from language_platform.crud import crud_lesson
from language_platform.crud.crud_user import create_user, get_user_by_email
from language_platform.db.models_registry import Base
from language_platform.db.session import build_session_factory, create_db_engine, session_scope

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_USERS = [
    ("Admin", "admin@example.com", "admin123", Role.ADMIN),
    ("Instructor", "instructor@example.com", "instructor123", Role.INSTRUCTOR),
    ("Learner", "learner@example.com", "learner123", Role.LEARNER),
]


def seed(session_factory: sessionmaker) -> None:
    with session_scope(session_factory) as db:
        for name, email, password, role in DEMO_USERS:
            if get_user_by_email(db, email=email):
                logger.info(f"El usuario '{email}' ya existe.")
                continue
            create_user(db, name=name, email=email, role=role, password=password)
            logger.info(f"Usuario '{email}' ({role.value}) creado exitosamente.")

        instructor = get_user_by_email(db, email="instructor@example.com")
        if not crud_lesson.get_lessons(db):
            crud_lesson.create_lesson(
                db,
                title="Saludos básicos",
                content="Hola, buenos días, buenas tardes, buenas noches.",
                instructor_id=instructor.id,
            )
            logger.info("Lección de ejemplo creada.")


def main():
    logger.info("Iniciando carga de datos de ejemplo...")
    engine = create_db_engine(get_settings())
    Base.metadata.create_all(bind=engine)
    seed(build_session_factory(engine))
    engine.dispose()


if __name__ == "__main__":
    main()
