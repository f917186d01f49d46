"""Roles y capacidades de la plataforma.

Cada usuario tiene exactamente un rol:
- ADMIN: gestiona usuarios y lecciones
- INSTRUCTOR: crea lecciones y gestiona las propias
- LEARNER: consulta lecciones y registra su progreso
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Union


class Role(str, Enum):
    """Rol del usuario, persistido con su valor en mayúsculas."""

    ADMIN = "ADMIN"
    INSTRUCTOR = "INSTRUCTOR"
    LEARNER = "LEARNER"


class Capability(str, Enum):
    MANAGE_USERS = "manage_users"
    VIEW_LESSONS = "view_lessons"
    MANAGE_LESSONS = "manage_lessons"
    CREATE_LESSONS = "create_lessons"
    TRACK_PROGRESS = "track_progress"


ROLE_CAPABILITIES: Dict[Role, FrozenSet[Capability]] = {
    Role.ADMIN: frozenset({
        Capability.MANAGE_USERS,
        Capability.VIEW_LESSONS,
        Capability.MANAGE_LESSONS,
    }),
    Role.INSTRUCTOR: frozenset({
        Capability.VIEW_LESSONS,
        Capability.CREATE_LESSONS,
    }),
    Role.LEARNER: frozenset({
        Capability.VIEW_LESSONS,
        Capability.TRACK_PROGRESS,
    }),
}

# Pestañas que muestra cada panel
DASHBOARD_SECTIONS: Dict[Role, List[str]] = {
    Role.ADMIN: ["User Management", "Lesson Management", "System Settings", "Activity Monitoring"],
    Role.INSTRUCTOR: ["Lesson Creation", "Feedback", "Learner Progress"],
    Role.LEARNER: ["Lessons", "Progress Tracking", "Interactions", "Profile"],
}


def to_role(role: Union[Role, str]) -> Role:
    """Normaliza un rol recibido como string (sin distinguir mayúsculas).

    Raises:
        ValueError: si el rol no existe
    """
    if isinstance(role, Role):
        return role
    return Role(role.upper())


def capabilities_for(role: Union[Role, str]) -> FrozenSet[Capability]:
    return ROLE_CAPABILITIES[to_role(role)]


def has_capability(role: Union[Role, str], capability: Capability) -> bool:
    """Indica si el rol dispone de la capacidad.

    Examples:
        >>> has_capability(Role.LEARNER, Capability.TRACK_PROGRESS)
        True
        >>> has_capability("instructor", Capability.MANAGE_USERS)
        False
    """
    return capability in capabilities_for(role)


def dashboard_title(role: Union[Role, str], name: str) -> str:
    """Título del panel para el rol indicado."""
    role = to_role(role)
    if role == Role.ADMIN:
        return f"Admin Dashboard - {name}"
    if role == Role.INSTRUCTOR:
        return f"Instructor Dashboard - {name}"
    return f"Learner Dashboard - {name}"


def dashboard_sections(role: Union[Role, str]) -> List[str]:
    return list(DASHBOARD_SECTIONS[to_role(role)])
