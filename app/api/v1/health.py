"""Health check endpoint with database connectivity and the active read policy."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """
    Return service health, database connectivity and whether journals are publicly readable.
    Used by load balancers and monitoring.
    """
    settings = get_settings()
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
        journal_public_read=settings.JOURNAL_PUBLIC_READ,
    )
