"""
FastAPI Application

Main entry point for the Market Oracle API.
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Add project root to path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from api.endpoints import router, get_predictions_path

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    logger.info("Market Oracle API starting up...")

    path = get_predictions_path()
    if path.exists():
        logger.info(f"Serving timeline from {path}")
    else:
        logger.warning(f"No timeline at {path}; POST /timeline/refresh to build one")

    yield

    # Shutdown
    logger.info("API shutting down...")


# Create FastAPI application
app = FastAPI(
    title="Market Oracle API",
    description="""
    Year-bucketed prediction timeline built from Polymarket markets.

    ## Key Endpoints

    - `GET /timeline` - Full year -> events timeline
    - `GET /timeline/{year}` - Events for one year, highest probability first
    - `POST /timeline/refresh` - Rebuild the timeline from Polymarket
    - `GET /health` - Health check
    """,
    version="1.0.0",
    lifespan=lifespan
)

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router, prefix="/api/v1")

# Also mount at root for convenience
app.include_router(router)


@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "name": "Market Oracle API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


# For running directly with uvicorn
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8001,
        reload=True
    )
