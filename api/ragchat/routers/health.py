"""
Health router: GET /health endpoint for liveness/readiness probes.
"""

from fastapi import APIRouter

from ragchat.core.telemetry import SERVICE_NAME

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Return a simple health status for probes."""
    return {"status": "healthy", "service": SERVICE_NAME}
