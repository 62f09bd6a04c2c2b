"""
Aggie Report API — FastAPI Main Application
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aggie.api import dependencies as deps
from aggie.api.router import api_router
from aggie.core.config import settings
from aggie.core.logging import setup_logging

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the report tables on startup."""
    logger.info("%s v%s starting, store=%s", settings.app_name, settings.version, deps.store.db_path)
    deps.store.init_db()
    yield
    deps.store.close()
    logger.info("Shutting down...")


app = FastAPI(
    title=settings.app_name,
    description="CRUD, bulk triage and batch review over collected reports",
    version=settings.version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": settings.version}


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": settings.version,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("aggie.main:app", host="0.0.0.0", port=8001)
