"""Circuit breaker settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class CircuitBreakerSettings(InfrastructureSettings):
    """Defaults for circuit breakers created by the resilience service.

    Environment Variables:
        CIRCUIT_BREAKER_FAILURE_THRESHOLD: Consecutive failures before opening
        CIRCUIT_BREAKER_RESET_TIMEOUT_SECONDS: Cooldown before a trial call
    """

    failure_threshold: int = Field(
        default=5,
        alias="CIRCUIT_BREAKER_FAILURE_THRESHOLD",
        ge=1,
        description="Consecutive failures before the circuit opens",
    )
    reset_timeout_seconds: float = Field(
        default=30.0,
        alias="CIRCUIT_BREAKER_RESET_TIMEOUT_SECONDS",
        ge=0,
        description="Seconds an open circuit waits before allowing a trial call",
    )
