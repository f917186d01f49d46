"""
Excepciones de dominio de la plataforma.

Los servicios lanzan estas excepciones; los endpoints las traducen a
respuestas HTTP.
"""


class PlatformError(Exception):
    """Base de todas las excepciones de la plataforma."""


class ValidationError(PlatformError):
    """Datos de entrada inválidos (p. ej. porcentaje fuera de [0, 100])."""


class StorageError(PlatformError):
    """Fallo de conectividad o de escritura en la base de datos."""


class AuthError(PlatformError):
    """Credenciales inválidas."""


class PermissionDeniedError(PlatformError):
    """El rol del usuario no tiene la capacidad requerida."""


class NotFoundError(PlatformError):
    """El recurso solicitado no existe."""

    def __init__(self, resource: str, resource_id) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} {resource_id} not found")


class AutoSaveStateError(PlatformError):
    """Operación inválida para el estado actual de la tarea de auto-guardado."""
