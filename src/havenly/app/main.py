"""FastAPI application entry point for the Havenly marketplace API."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from havenly.app.config import get_settings
from havenly.infra.database import dispose_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: create a fresh store with demo data, discard it on exit."""
    await init_db()
    logger.info("Havenly API ready")
    yield
    await dispose_db()


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.debug else logging.WARNING,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)

app = FastAPI(
    title="Havenly API",
    lifespan=lifespan,
    debug=settings.debug,
)

# CORS middleware; "*" in debug mode
_cors_origins = settings.cors_origins_list
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=("*" not in _cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Route includes
# ---------------------------------------------------------------------------
from havenly.app.routes.auth import router as auth_router
from havenly.app.routes.properties import router as properties_router, watchlist_router
from havenly.app.routes.verifications import router as verifications_router, property_verification_router
from havenly.app.routes.bookings import router as bookings_router, quote_router
from havenly.app.routes.dashboard import router as dashboard_router

app.include_router(auth_router)
app.include_router(properties_router)
app.include_router(watchlist_router)
app.include_router(property_verification_router)
app.include_router(quote_router)
app.include_router(verifications_router)
app.include_router(bookings_router)
app.include_router(dashboard_router)


@app.get("/health", tags=["health"])
async def health_check():
    """Return service health status."""
    return {"status": "ok", "service": "havenly"}


def run() -> None:
    """Run the application with uvicorn (used by project.scripts entry point)."""
    uvicorn.run(
        "havenly.app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
