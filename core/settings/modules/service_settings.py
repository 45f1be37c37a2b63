from __future__ import annotations

from typing import List

from pydantic import Field

from core.settings.base_settings import MakelineBaseSettings


class ServiceSettings(MakelineBaseSettings):
    """HTTP service settings."""

    app_version: str = Field("", alias="APP_VERSION")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    request_timeout_seconds: float = Field(30.0, gt=0, alias="REQUEST_TIMEOUT_SECONDS")
    port: int = Field(3001, alias="PORT")
    cors_allow_origins: str = Field("*", alias="CORS_ALLOW_ORIGINS")

    @property
    def cors_origins(self) -> List[str]:
        """CORS_ALLOW_ORIGINS split on commas."""
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]
