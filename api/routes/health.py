"""Health check endpoints."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {"status": "healthy", "service": "intervention-optimizer"}


@router.get("/")
async def root():
    """API root."""
    return {
        "name": "Intervention Optimizer API",
        "version": "1.0.0",
        "docs": "/docs",
    }
