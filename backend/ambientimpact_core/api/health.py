"""
Health check endpoints
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ambientimpact_core.config.settings import get_settings
from ambientimpact_core.services.component_service import ComponentService, get_component_service

router = APIRouter()
settings = get_settings()


@router.get("/")
async def health_check() -> Dict[str, str]:
    """Basic health check."""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/ready")
def readiness_check(
    service: ComponentService = Depends(get_component_service),
) -> Dict[str, Any]:
    """Readiness check including component discovery."""
    try:
        components = len(service.create_registry().get_definitions())
        discovery_status = "ok"
    except Exception as e:
        components = 0
        discovery_status = f"error: {str(e)}"

    return {
        "status": "ready" if discovery_status == "ok" else "not ready",
        "discovery": discovery_status,
        "components": components,
        "load_errors": service.discovery.get_load_errors(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
