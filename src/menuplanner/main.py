"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from menuplanner.config import get_settings
from menuplanner.logging_config import configure_logging, get_logger
from menuplanner.routers import conversions_router, shopping_lists_router

settings = get_settings()

# Configure logging on module load
configure_logging(settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info(
        f"Starting Menuplanner API (environment={settings.environment}, "
        f"conversion table: {settings.conversion_table_path})"
    )
    yield
    logger.info("Shutting down Menuplanner API")


app = FastAPI(
    title="Menuplanner API",
    description="Shopping lists for menus of linked, portion-scaled recipes",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(shopping_lists_router)
app.include_router(conversions_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "menuplanner-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Menuplanner API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
