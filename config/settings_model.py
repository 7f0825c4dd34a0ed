from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Exporter settings using Pydantic Settings.
    Reads from environment variables (and .env) with type safety and validation.
    """

    # ─────────────────────────────────────────────────────────────────────────────
    # Version
    # ─────────────────────────────────────────────────────────────────────────────
    VERSION: str = "0.1.0"
    # Also update pyproject.toml (version)

    # ─────────────────────────────────────────────────────────────────────────────
    # Endpoints
    # ─────────────────────────────────────────────────────────────────────────────
    CONFIG_FILE: str = Field(default="config.yaml", description="YAML file listing endpoints to probe")

    # ─────────────────────────────────────────────────────────────────────────────
    # Probing
    # ─────────────────────────────────────────────────────────────────────────────
    PROBE_INTERVAL: float = Field(default=5.0, ge=0.1, description="Seconds between probes of one endpoint")
    PROBE_JITTER_SECONDS: float = Field(default=0.0, ge=0.0, description="Random extra delay added per cycle")
    PING_TIMEOUT_SECONDS: float = Field(default=2.0, gt=0)
    MAX_CONCURRENT_PINGS: int = Field(default=50, ge=1)

    # ─────────────────────────────────────────────────────────────────────────────
    # Host Sampling
    # ─────────────────────────────────────────────────────────────────────────────
    HOST_SAMPLE_INTERVAL: float = Field(default=5.0, ge=0.1)

    # ─────────────────────────────────────────────────────────────────────────────
    # Resource Limits
    # ─────────────────────────────────────────────────────────────────────────────
    MAX_WORKER_THREADS: int = Field(default=4, ge=1)
    SHUTDOWN_TIMEOUT_SECONDS: float = Field(default=5.0, ge=0)

    # ─────────────────────────────────────────────────────────────────────────────
    # Metrics Endpoint
    # ─────────────────────────────────────────────────────────────────────────────
    METRICS_ADDR: str = "127.0.0.1"
    METRICS_PORT: int = Field(default=9898, ge=0, le=65535)

    # ─────────────────────────────────────────────────────────────────────────────
    # Logging
    # ─────────────────────────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = Field(default="", description="Log file path; empty logs to stderr")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level
