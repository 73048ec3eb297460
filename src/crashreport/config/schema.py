"""Pydantic models for configuration schema."""

from typing import Literal

import httpx
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENDPOINT = "https://api.raygun.io"


class RaygunConfig(BaseModel):
    """Submission endpoint configuration."""

    api_key: str = ""
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = Field(5.0, gt=0.0, le=120.0, description="Request timeout in seconds")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Validate the endpoint scheme and host and drop trailing slashes."""
        try:
            url = httpx.URL(v)
        except httpx.InvalidURL as e:
            raise ValueError(f"Endpoint is not a valid URL: {v}") from e
        if url.scheme not in ("http", "https"):
            raise ValueError(f"Endpoint must be an http(s) URL: {v}")
        if not url.host:
            raise ValueError(f"Endpoint has no host: {v}")
        return v.rstrip("/")


class ClientConfig(BaseModel):
    """Identification of the reporting application."""

    name: str = "crashreport"
    version: str = ""
    url: str = ""


class IntrospectionConfig(BaseModel):
    """Error introspection limits."""

    max_cause_depth: int = Field(100, ge=1, le=10_000)
    stack_capture_limit: int = Field(1 << 16, ge=1024, description="Bytes of stack text")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"


class CrashReportConfig(BaseSettings):
    """Root configuration for crashreport."""

    raygun: RaygunConfig = RaygunConfig()
    client: ClientConfig = ClientConfig()
    introspection: IntrospectionConfig = IntrospectionConfig()
    logging: LoggingConfig = LoggingConfig()
    version: str = ""
    tags: list[str] = []

    model_config = SettingsConfigDict(
        env_prefix="CRASHREPORT_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )
