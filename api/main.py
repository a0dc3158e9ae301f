"""
FastAPI backend for the Intervention Optimizer.

Exposes intervention selection, outcome recording, user profiles and
optimizer state over REST.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from api.dependencies import get_optimizer
from api.routes import health, interventions, optimizer
from src.utils.logging import setup_logging

load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    # Startup
    setup_logging()
    get_optimizer()
    logger.info("Intervention Optimizer API starting...")
    yield
    # Shutdown
    logger.info("API shutting down...")


app = FastAPI(
    title="Intervention Optimizer API",
    description="Contextual bandit selection of therapeutic micro-interventions",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:3001",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(interventions.router, prefix="/api", tags=["Interventions"])
app.include_router(optimizer.router, prefix="/api", tags=["Optimizer"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
