"""Health check endpoint with database and email configuration status."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from accounts.core.config import Settings, get_settings
from accounts.core.database import check_db_connected, get_db
from accounts.schemas.health import HealthResponse
from accounts.services.notifier import is_smtp_configured

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """
    Return service health status, database connectivity and whether reset emails can be sent.
    Used by load balancers and monitoring.
    """
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
        email="configured" if is_smtp_configured(settings) else "not_configured",
    )
