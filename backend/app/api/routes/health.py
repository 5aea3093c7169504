"""Health Probe: liveness endpoint for container orchestration.

Invariants:
    - GET /api/v1/health/ always returns 200 if the process is up
    - Reports whether outbound email is configured, without contacting SMTP
"""

from fastapi import APIRouter, Request, status

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Basic liveness probe. Returns 200 if the process is up."""
    email_service = getattr(request.app.state, "email_service", None)
    return {
        "status": "healthy",
        "service": "graphql-error-gateway",
        "version": "1.0.0",
        "email": "configured" if email_service is not None else "disabled",
    }
