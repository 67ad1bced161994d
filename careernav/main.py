# careernav/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from careernav.api import admin, enrollments, sessions
from careernav.config import settings
from careernav.database import Base, engine
from careernav import models  # noqa: F401 - register tables on Base.metadata
from careernav.utils.log_config import setup_logging

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Production schemas are managed by Alembic.
    if not settings.is_production:
        Base.metadata.create_all(bind=engine)
    logger.info("CareerNav API started (env=%s)", settings.APP_ENV)
    yield


# Initialize FastAPI app
app = FastAPI(title="CareerNav Course Status API", lifespan=lifespan)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routers
app.include_router(enrollments.router)  # /enrollments/*
app.include_router(sessions.router)     # /sessions/*
app.include_router(admin.router)        # /admin/*


@app.exception_handler(OperationalError)
async def database_unavailable_handler(request: Request, exc: OperationalError):
    logger.error("Database unavailable on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Database temporarily unavailable, please retry"},
    )


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "message": "CareerNav API is running",
        "version": "0.1",
    }
