from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from partstock.api.api_v1.api import api_router
from partstock.core.config import settings
from partstock.core.exceptions import register_exception_handlers
from partstock.core.logging_config import setup_logging, get_logger
from partstock.db.init_db import ensure_tables_exist

setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    logger.info("🚀 Starting up...")

    await ensure_tables_exist()
    logger.info("📊 Database tables ready")

    yield
    logger.info("🛑 Shutting down...")

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    description="Parts inventory - monthly stock reconciliation",
    lifespan=lifespan
)

register_exception_handlers(app)

if settings.BACKEND_CORS_ORIGINS:
    logger.info(f"CORS origins: {settings.BACKEND_CORS_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

logger.info(f"Registering API routes under {settings.API_PREFIX}")
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    return {"message": settings.PROJECT_NAME}


@app.get("/health")
async def health():
    return {"status": "ok"}


def run():
    import uvicorn
    uvicorn.run("partstock.main:app", host="127.0.0.1", port=8000, log_level="info")


if __name__ == "__main__":
    run()
