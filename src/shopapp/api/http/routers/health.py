"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from src.shopapp.api.http.app_data import ApplicationDependencies
from src.shopapp.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health() -> dict[str, str]:
    """Liveness check: 200 as long as the process serves requests."""
    return {"status": "healthy", "service": "shopapp"}


@router.get("/ready", response_model=None)
def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness check for the database, Redis and the listing cache.

    Returns 503 only when the database is unreachable. Redis is reported but
    not required, the cache and event publisher fall back to in-process
    implementations without it.
    """
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    config = get_config()

    checks: dict[str, Any] = {}
    all_healthy = True

    try:
        db_healthy = app_deps.database_service.health_check()
        checks["database"] = {
            "status": "healthy" if db_healthy else "unhealthy",
            "type": "postgresql" if "postgresql" in config.database.url else "sqlite",
        }
        if not db_healthy:
            all_healthy = False
    except Exception as e:
        checks["database"] = {"status": "unhealthy", "error": str(e)}
        all_healthy = False

    if app_deps.redis_service.is_enabled:
        redis_healthy = app_deps.redis_service.health_check()
        checks["redis"] = {
            "status": "healthy" if redis_healthy else "degraded",
            "type": "redis",
        }
    else:
        checks["redis"] = {
            "status": "disabled",
            "note": "Listing cache and events run in-process",
        }

    checks["product_cache"] = {
        "type": type(app_deps.product_cache).__name__,
        "status": "healthy" if app_deps.product_cache.is_available() else "degraded",
    }

    response = {
        "status": "ready" if all_healthy else "not_ready",
        "environment": config.app.environment,
        "checks": checks,
    }

    if not all_healthy:
        return JSONResponse(status_code=503, content=response)

    return response
