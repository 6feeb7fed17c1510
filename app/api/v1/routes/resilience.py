from fastapi import APIRouter

from infrastructure.logging import get_module_logger
from infrastructure.operations import NotFoundError
from infrastructure.services import ResilienceServiceDep

logger = get_module_logger()
router = APIRouter(prefix="/resilience", tags=["Resilience"])


@router.get("/circuit-breakers")
def list_circuit_breakers(resilience: ResilienceServiceDep):
    """Current state and counters of every registered circuit breaker."""
    return {
        "circuitBreakers": resilience.get_all_circuit_breaker_stats(),
        "open": resilience.get_open_circuit_breakers(),
    }


@router.post("/circuit-breakers/{name}/reset")
def reset_circuit_breaker(name: str, resilience: ResilienceServiceDep):
    try:
        resilience.reset_circuit_breaker(name)
    except KeyError as e:
        raise NotFoundError(
            f"Unknown circuit breaker {name}", error_code="CIRCUIT_BREAKER_NOT_FOUND"
        ) from e
    logger.warning("circuit_breaker_reset_requested", name=name)
    return resilience.get_circuit_breaker(name).get_stats()
