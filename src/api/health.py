"""Health check endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.logging import get_logger
from src.db.database import get_db
from src.db.models import PetModel

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
def health_check(db: Session = Depends(get_db)) -> dict[str, str | int]:
    """Return application and database health status with the pet count."""
    try:
        pets = db.execute(select(func.count()).select_from(PetModel)).scalar_one()
        return {"status": "ok", "database": "connected", "pets": pets}
    except SQLAlchemyError:
        logger.exception("Health check failed")
        return {"status": "error", "database": "disconnected"}
