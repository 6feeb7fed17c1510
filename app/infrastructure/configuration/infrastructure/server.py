"""Server infrastructure settings."""

from typing import List

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class ServerSettings(InfrastructureSettings):
    """Server and application runtime configuration.

    Environment Variables:
        BACKEND_URL: Backend API base URL (default: http://127.0.0.1:8000)
        CORS_ALLOWED_ORIGINS: Comma separated list of allowed origins
        SERVER_HOST: Bind address for uvicorn
        SERVER_PORT: Bind port for uvicorn

    Example:
        ```python
        from infrastructure.services import get_settings

        origins = get_settings().server.allowed_origins
        ```
    """

    BACKEND_URL: str = Field(default="http://127.0.0.1:8000", alias="BACKEND_URL")
    CORS_ALLOWED_ORIGINS: str = Field(
        default="http://localhost:3000,http://127.0.0.1:8000",
        alias="CORS_ALLOWED_ORIGINS",
    )
    HOST: str = Field(default="0.0.0.0", alias="SERVER_HOST")
    PORT: int = Field(default=8000, alias="SERVER_PORT")

    @property
    def allowed_origins(self) -> List[str]:
        return [
            origin.strip()
            for origin in self.CORS_ALLOWED_ORIGINS.split(",")
            if origin.strip()
        ]
