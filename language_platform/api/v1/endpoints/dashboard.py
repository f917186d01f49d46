from fastapi import APIRouter, Depends

from language_platform.api.deps import get_current_user
from language_platform.core.roles import dashboard_sections, dashboard_title
from language_platform.schemas.user import Dashboard, UserPublic

router = APIRouter()


@router.get("/dashboard", response_model=Dashboard, summary="Panel del usuario actual")
def get_dashboard(current_user: UserPublic = Depends(get_current_user)):
    return Dashboard(
        title=dashboard_title(current_user.role, current_user.name),
        role=current_user.role,
        sections=dashboard_sections(current_user.role),
    )
