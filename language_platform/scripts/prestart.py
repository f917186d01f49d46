# language_platform/scripts/prestart.py
import logging
import sys
import time

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from language_platform.core.config import Settings, get_settings
from language_platform.db.session import create_db_engine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

max_tries = 60
wait_seconds = 2


def wait_for_database(settings: Settings, tries: int = max_tries, wait: float = wait_seconds) -> bool:
    """
    Intenta conectar hasta que la base de datos responde o se agotan los intentos.
    """
    db_uri_censored = str(settings.DATABASE_URI).replace(settings.POSTGRES_PASSWORD, "******")
    logger.info(f"Esperando a la base de datos en: {db_uri_censored}")

    engine = create_db_engine(settings)
    try:
        for i in range(1, tries + 1):
            try:
                with engine.connect() as connection:
                    connection.execute(text("SELECT 1"))
                logger.info("Conexión a la base de datos establecida")
                return True
            except SQLAlchemyError as e:
                logger.warning(f"Intento {i}/{tries}: Base de datos no está lista. Reintentando...")
                logger.debug(f"Error de conexión: {e}")
                time.sleep(wait)
    finally:
        engine.dispose()

    logger.error("No se pudo conectar a la base de datos después de varios intentos.")
    return False


def main() -> None:
    sys.exit(0 if wait_for_database(get_settings()) else 1)


if __name__ == "__main__":
    main()
