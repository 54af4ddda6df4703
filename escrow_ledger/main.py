"""
Escrow ledger backend - FastAPI application entry‑point.
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from escrow_ledger.config import settings
from escrow_ledger.database import Base, engine

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(name)-30s  %(levelname)-5s  %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: ensure data dir + tables exist
    os.makedirs(settings.DATA_DIR, exist_ok=True)
    # Import models so Base.metadata knows about them
    import escrow_ledger.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready (%s)", settings.DATABASE_URL)
    logger.info("IPFS gateways: %s", ", ".join(settings.IPFS_GATEWAYS))
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="Escrow Ledger",
    description="Contract receipts → project lookup → donation records, with IPFS metadata",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    return {"service": "Escrow Ledger", "version": "0.1.0", "status": "running"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# ── Register API routers ─────────────────────────────────────────────────
from escrow_ledger.routers.donations import router as donations_router  # noqa: E402
from escrow_ledger.routers.projects import router as projects_router  # noqa: E402

app.include_router(donations_router, prefix="/api", tags=["Donations"])
app.include_router(projects_router, prefix="/api", tags=["Projects"])
