import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text

from ....container import Container
from ....infrastructure.logging import Timer
from ..dependencies import get_container

router = APIRouter(tags=["health"])
logger = structlog.get_logger()


@router.get("/health", summary="Health check")
async def health() -> dict:
    """Liveness check for the load balancer."""
    return {"status": "healthy"}


@router.get("/health/ready", summary="Readiness check")
async def readiness(container: Container = Depends(get_container)) -> dict:
    """Readiness check - verifies the database is reachable."""
    checks = {}

    try:
        with Timer() as t:
            async with container.database.session() as session:
                await session.execute(text("SELECT 1"))
        checks["database"] = {"status": "healthy", "latency_ms": t.duration_ms}
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        checks["database"] = {"status": "unhealthy", "error": type(e).__name__}

    all_healthy = all(c.get("status") == "healthy" for c in checks.values())
    return {
        "status": "ready" if all_healthy else "degraded",
        "checks": checks,
        "listeners": len(container.listeners),
    }
