"""
Settings for the registry server and the registry clients.

Read from the environment and `.env`; nested groups use `__`, e.g. `GRPC__PORT=6000`.
"""
import json
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_ANONYMOUS_METHODS = [
    "/grpc.health.v1.Health/Check",
    "/grpc.health.v1.Health/Watch",
]


def _split_list(v):
    """Accept a JSON list or a comma separated string."""
    if isinstance(v, str):
        s = v.strip()
        if not s:
            return []
        if s.startswith("[") and s.endswith("]"):
            arr = json.loads(s)
            if isinstance(arr, list):
                return arr
        return [item.strip() for item in s.split(",") if item.strip()]
    return v


class TlsSettings(BaseModel):
    enabled: bool = False
    cert: Optional[str] = None
    key: Optional[str] = None
    ca: Optional[str] = None


class GrpcSettings(BaseModel):
    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 50051
    # This maps to GRPC option grpc.max_concurrent_streams
    max_concurrent_streams: int = 100
    # Seconds in-flight calls get to finish on SIGINT/SIGTERM
    shutdown_grace: float = 5.0
    # Full method names that skip authentication, e.g. "/grpc.health.v1.Health/Check"
    anonymous_methods: list[str] = Field(default_factory=lambda: list(DEFAULT_ANONYMOUS_METHODS))
    tls: TlsSettings = Field(default_factory=TlsSettings)

    @field_validator("anonymous_methods", mode="before")
    @classmethod
    def _parse_anonymous_methods(cls, v):
        return _split_list(v)

    @model_validator(mode="after")
    def _validate_tls(self):
        if self.tls.enabled and not (self.tls.cert and self.tls.key):
            raise ValueError("GRPC TLS enabled but cert/key not provided")
        return self


class RegistryClientSettings(BaseModel):
    """Outbound settings used by the typed registry clients."""

    address: str = "localhost:50051"
    token: Optional[str] = None
    # Per-call deadline in seconds; None disables the deadline
    timeout: Optional[float] = 30.0
    tls: TlsSettings = Field(default_factory=TlsSettings)


class Settings(BaseSettings):
    """Application settings."""

    PROJECT_NAME: str = "Buf Registry API"
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # gRPC server settings
    grpc: GrpcSettings = Field(default_factory=GrpcSettings)

    # Registry client settings
    registry: RegistryClientSettings = Field(default_factory=RegistryClientSettings)

    # pydantic-settings v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


settings = Settings()
