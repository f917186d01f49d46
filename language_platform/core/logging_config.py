import logging
import logging.config
import json
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path

from language_platform.core.config import Settings


AUTOSAVE_LOGGER_NAME = "language_platform.services.autosave"
API_LOGGER_NAME = "language_platform.api"

# Campos de contexto que se copian al JSON si vienen en `extra`
_CONTEXT_FIELDS = (
    "service",
    "endpoint",
    "method",
    "status_code",
    "response_time_ms",
    "request_id",
    "user_id",
    "learner_id",
    "lesson_id",
    "percent",
    "operation",
    "success",
)


class StructuredFormatter(logging.Formatter):
    """
    Formatter que genera logs en formato JSON estructurado
    para facilitar la integración con sistemas de monitoreo
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "process": record.process,
            "thread": record.threadName,
        }

        for field in _CONTEXT_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        # Agregar información de excepción si existe
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def build_logging_config(settings: Settings) -> Dict[str, Any]:
    """
    Construye el diccionario para `logging.config.dictConfig`.

    Si `LOG_TO_FILE` está desactivado solo se registra en consola.
    """
    level = settings.LOG_LEVEL.upper()
    log_dir = Path(settings.LOG_DIR)

    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
            "level": level,
            "stream": "ext://sys.stdout"
        }
    }
    app_handlers = ["console"]
    autosave_handlers = ["console"]
    api_handlers = ["console"]

    if settings.LOG_TO_FILE:
        def rotating(filename: str, file_level: str, backups: int = 10) -> Dict[str, Any]:
            return {
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "structured",
                "filename": str(log_dir / filename),
                "maxBytes": 10485760,  # 10MB
                "backupCount": backups,
                "level": file_level,
                "encoding": "utf-8",
            }

        handlers["file_all"] = rotating("app.log", level)
        handlers["file_errors"] = rotating("errors.log", "ERROR")
        handlers["file_autosave"] = rotating("autosave.log", level, backups=5)
        handlers["file_api"] = rotating("api.log", level)

        app_handlers += ["file_all", "file_errors"]
        autosave_handlers += ["file_autosave", "file_errors"]
        api_handlers += ["file_api", "file_errors"]

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "()": StructuredFormatter,
            },
            "simple": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            }
        },
        "handlers": handlers,
        "loggers": {
            "language_platform": {
                "level": level,
                "handlers": app_handlers,
                "propagate": False
            },
            AUTOSAVE_LOGGER_NAME: {
                "level": level,
                "handlers": autosave_handlers,
                "propagate": False
            },
            API_LOGGER_NAME: {
                "level": level,
                "handlers": api_handlers,
                "propagate": False
            },
            "uvicorn": {
                "level": "INFO",
                "handlers": api_handlers,
                "propagate": False
            },
        },
        "root": {
            "level": "WARNING",
            "handlers": ["console"]
        }
    }


def setup_logging(settings: Settings) -> None:
    """
    Configura el sistema de logging con rotación y formato estructurado
    para integración con sistemas de monitoreo
    """
    if settings.LOG_TO_FILE:
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(build_logging_config(settings))

    logger = logging.getLogger("language_platform")
    logger.info("Logging system initialized successfully")
    if settings.LOG_TO_FILE:
        logger.info(f"Log files will be stored in: {Path(settings.LOG_DIR).absolute()}")


class LoggerAdapter(logging.LoggerAdapter):
    """
    Adapter personalizado para agregar contexto adicional a los logs
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        # El contexto del adapter no pisa el `extra` propio de cada llamada
        if self.extra:
            merged = dict(self.extra)
            merged.update(kwargs.get("extra", {}))
            kwargs["extra"] = merged

        return msg, kwargs


def get_autosave_logger(**context: Any) -> LoggerAdapter:
    """
    Obtiene un logger específico para las tareas de auto-guardado
    """
    base_logger = logging.getLogger(AUTOSAVE_LOGGER_NAME)
    return LoggerAdapter(base_logger, {"service": "autosave", **context})


def get_api_logger() -> LoggerAdapter:
    """
    Obtiene un logger específico para operaciones de API
    """
    base_logger = logging.getLogger(API_LOGGER_NAME)
    return LoggerAdapter(base_logger, {"service": "api"})


def log_api_request(logger: logging.Logger, method: str, endpoint: str,
                    status_code: int = None, response_time_ms: int = None,
                    user_id: str = None, **kwargs):
    """
    Registra información de una petición API con contexto estructurado

    Args:
        logger: Logger a usar
        method: Método HTTP
        endpoint: Endpoint accedido
        status_code: Código de respuesta HTTP
        response_time_ms: Tiempo de respuesta en millisegundos
        user_id: ID del usuario (si está autenticado)
        **kwargs: Información adicional
    """
    extra = {
        "method": method,
        "endpoint": endpoint,
        "service": "api"
    }

    if status_code:
        extra["status_code"] = status_code
    if response_time_ms is not None:
        extra["response_time_ms"] = response_time_ms
    if user_id:
        extra["user_id"] = user_id

    extra.update(kwargs)

    if status_code and status_code >= 500:
        logger.error(f"API request failed: {method} {endpoint}", extra=extra)
    elif status_code and status_code >= 400:
        logger.warning(f"API request rejected: {method} {endpoint}", extra=extra)
    else:
        logger.info(f"API request: {method} {endpoint}", extra=extra)


def log_progress_write(logger: logging.Logger, learner_id: int, lesson_id: int,
                       percent: int, success: bool = True,
                       response_time_ms: int = None, **kwargs):
    """
    Registra una escritura de progreso (manual o de auto-guardado)

    Args:
        logger: Logger a usar
        learner_id: ID del estudiante
        lesson_id: ID de la lección
        percent: Porcentaje que se intentó guardar
        success: Si la escritura fue exitosa
        response_time_ms: Tiempo de la escritura
        **kwargs: Información adicional
    """
    extra = {
        "operation": "progress_upsert",
        "learner_id": learner_id,
        "lesson_id": lesson_id,
        "percent": percent,
        "success": success
    }

    if response_time_ms is not None:
        extra["response_time_ms"] = response_time_ms

    extra.update(kwargs)

    if success:
        logger.debug(f"Progress saved: learner={learner_id} lesson={lesson_id} percent={percent}", extra=extra)
    else:
        logger.error(f"Progress save failed: learner={learner_id} lesson={lesson_id} percent={percent}", extra=extra)
