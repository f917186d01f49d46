# language_platform/api/v1/endpoints/health.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from language_platform.api.deps import get_db

router = APIRouter()


@router.get("/health", summary="Verifica el estado del servicio")
def check_health(request: Request, db: Session = Depends(get_db)):
    """
    Verifica que la API está activa y la conexión a base de datos.
    """
    health_status = {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "database": {"status": "unknown"},
            "autosave": {"active_tasks": request.app.state.autosave_manager.active_count()},
        }
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["services"]["database"] = {"status": "healthy"}
    except SQLAlchemyError as e:
        health_status["services"]["database"] = {"status": "unhealthy", "error": str(e)}
        health_status["status"] = "unhealthy"
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
