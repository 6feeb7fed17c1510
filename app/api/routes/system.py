from fastapi import APIRouter, Request

from api.dependencies.rate_limits import get_limiter
from infrastructure.services import (
    NotificationServiceDep,
    ResilienceServiceDep,
    SettingsDep,
)

router = APIRouter(tags=["System"])
limiter = get_limiter()

# Probes from the load balancer and uptime monitors share this allowance.
PROBE_LIMIT = "50/minute"


@router.get("/version")
@limiter.limit(PROBE_LIMIT)
def get_version(request: Request, settings: SettingsDep):  # pylint: disable=unused-argument
    """Deployed commit SHA."""
    return {"version": settings.GIT_SHA}


@router.get("/health")
@limiter.limit(PROBE_LIMIT)
def get_health(
    request: Request,  # pylint: disable=unused-argument
    notifications: NotificationServiceDep,
    resilience: ResilienceServiceDep,
):
    """Liveness plus per-channel health and open circuit breakers.

    The endpoint answers 200 even when degraded so that a failing push
    gateway does not take the relay out of the load balancer.
    """
    channels = notifications.health_check()
    open_circuits = resilience.get_open_circuit_breakers()
    degraded = open_circuits or not all(channels.values())
    return {
        "status": "degraded" if degraded else "ok",
        "channels": channels,
        "openCircuits": open_circuits,
    }
