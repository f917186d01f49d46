# language_platform/core/config.py
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import PostgresDsn, computed_field


class Settings(BaseSettings):
    """
    Gestiona la configuración de la aplicación cargando variables de entorno.
    Utiliza Pydantic para la validación de tipos.
    """
    model_config = SettingsConfigDict(
        env_file=".env", env_ignore_case=True, extra="ignore"
    )

    # Variables de la base de datos leídas desde el archivo .env
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_DB: str = "language_platform"
    POSTGRES_PORT: int = 5432

    # Si se define, se usa tal cual (p. ej. sqlite:///./language_platform.db)
    DATABASE_URL: Optional[str] = None

    # Tiempo máximo por escritura/consulta en la base de datos
    DB_WRITE_TIMEOUT_SECONDS: float = 10.0

    # --- JWT Settings ---
    SECRET_KEY: str = "dev-secret-key-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # --- Auto-save ---
    AUTOSAVE_INTERVAL_SECONDS: float = 5.0

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True

    @computed_field
    @property
    def DATABASE_URI(self) -> str:
        """
        Genera la URI de conexión a la base de datos en formato SQLAlchemy.
        Pydantic validará que la URI construida sea correcta.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        dsn = PostgresDsn.build(
            scheme="postgresql+psycopg2",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_SERVER,
            port=self.POSTGRES_PORT,
            path=self.POSTGRES_DB,
        )
        return str(dsn)


def get_settings() -> Settings:
    """
    Construye la configuración a partir del entorno actual.
    """
    return Settings()
