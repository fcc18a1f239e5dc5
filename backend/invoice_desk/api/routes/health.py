"""Health & Readiness Probes - liveness and persistence-backend readiness.

Invariants:
    - GET /health/ always returns 200 if the process is up (liveness)
    - GET /health/ready returns 503 if the persistence backend is unreachable
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from invoice_desk.api.dependencies import get_sync
from invoice_desk.services.entity_sync import EntitySync

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {
        "status": "healthy",
        "service": "invoice-desk-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(sync: EntitySync = Depends(get_sync)):
    backend = sync.backend.name
    if not await sync.backend.health.health_check():
        logger.warning("Readiness check failed", extra={"backend": backend})
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": f"{backend}_unavailable"},
        )
    return {"status": "ready", "checks": {backend: "healthy"}}
