"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from src.api.health import router as health_router
from src.api.middleware import log_requests
from src.api.pets import router as pets_router
from src.config import settings
from src.core.logging import get_logger, setup_logging
from src.db.database import SessionLocal, engine as db_engine
from src.db.models import Base
from src.services.decay_scheduler import DecayScheduler

setup_logging(settings.LOG_LEVEL, sql_echo=settings.DEBUG)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    # DB 테이블 생성
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=db_engine)
    logger.info("Database tables created.")

    # 감쇠 스케줄러
    scheduler = None
    if settings.DECAY_ENABLED:
        scheduler = DecayScheduler(SessionLocal, settings.DECAY_INTERVAL_SECONDS)
        scheduler.start()
    app.state.decay_scheduler = scheduler

    yield

    # 종료 시 정리
    logger.info("Shutting down...")
    if scheduler is not None:
        await scheduler.stop()


app = FastAPI(title="Virtual Pet Simulator", lifespan=lifespan)

app.middleware("http")(log_requests)
app.include_router(health_router)
app.include_router(pets_router)
