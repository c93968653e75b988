"""Application configuration management."""

from enum import Enum
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CoveragePolicy(str, Enum):
    """What the validator does when some benefits lack complete evidence."""

    WARN = "warn"
    ABORT = "abort"


class EngineSettings(BaseSettings):
    """Engine settings loaded from environment variables."""

    # Application Settings
    app_name: str = "Rights Engine - Evidence-grounded benefit extraction"
    app_version: str = "0.1.0"
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # API Settings
    api_v1_prefix: str = "/api/v1"
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = ["*"]

    # Harvesting
    min_chunk_length: int = Field(
        default=30,
        description="Chunks shorter than this are not considered benefit candidates"
    )
    max_chunk_length: int = Field(
        default=2000,
        description="Chunks longer than this are treated as unsegmented noise"
    )
    base_confidence: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Confidence assigned to harvested evidence spans"
    )
    context_window: int = Field(
        default=150,
        description="Characters of surrounding context captured on each side of a quote"
    )

    # Normalization
    max_evidence_spans: int = Field(
        default=5,
        description="Maximum evidence spans kept per benefit"
    )
    max_benefits: int = Field(
        default=500,
        description="Benefit count above which the external merge service is consulted"
    )
    merge_service_url: str = Field(
        default="",
        description="Similarity-merge service endpoint (empty disables the service)"
    )
    merge_service_api_key: str = Field(
        default="",
        description="Bearer token for the merge service"
    )
    merge_service_timeout: int = 60

    # Rate Limiting
    max_retries: int = 3
    retry_delay: int = 2

    # Validation policy
    coverage_policy: CoveragePolicy = Field(
        default=CoveragePolicy.WARN,
        description="'warn' exports the valid subset, 'abort' fails the run on any rejected benefit"
    )
    require_policy_document: bool = Field(
        default=False,
        description="Treat a run without a policy document as a blocker instead of a warning"
    )

    # Export
    export_batch_size: int = Field(
        default=100,
        description="Number of benefits per persistence batch"
    )

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parent.parent / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def get_settings() -> EngineSettings:
    """Get engine settings instance.

    Returns:
        EngineSettings: Settings loaded from environment
    """
    return EngineSettings()


# Global settings instance
settings = get_settings()
