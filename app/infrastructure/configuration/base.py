"""Base classes for the settings sections.

Every section reads the process environment and ``.env`` with
case-sensitive, aliased variable names and ignores variables it does not
declare, so sections can share one environment without clashing.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=True,
    extra="ignore",
)


class FeatureSettings(BaseSettings):
    """Section owned by a feature (message ingress, notification dispatch)."""

    model_config = ENV_CONFIG


class InfrastructureSettings(BaseSettings):
    """Section owned by a cross-cutting component (limiter, retry, breaker, server)."""

    model_config = ENV_CONFIG
