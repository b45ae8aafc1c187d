"""Centralized configuration for booksearch-index using Pydantic Settings."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``BOOKSEARCH_*`` environment variables.

    The search options end up verbatim in the generated bundle, where the
    client-side runtime reads them at query time.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOOKSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    search_enabled: bool = Field(default=True, description="Generate the search index at all")

    # Results options
    limit_results: int = Field(default=30, ge=1, description="Maximum number of results shown by the client")
    teaser_word_count: int = Field(default=30, ge=1, description="Words of context shown per result teaser")

    # Search options
    bool_mode: Literal["OR", "AND"] = Field(default="OR", description="How the client combines query terms")
    expand: bool = Field(default=True, description="Let the client expand query terms by prefix")
    title_boost: int = Field(default=2, ge=0, description="Query-time boost for the title field")
    body_boost: int = Field(default=1, ge=0, description="Query-time boost for the body field")
    breadcrumbs_boost: int = Field(default=1, ge=0, description="Query-time boost for the breadcrumbs field")

    # Output
    output_filename: str = Field(default="searchindex.js", min_length=1, description="Name of the emitted script")
    write_json: bool = Field(default=False, description="Also write the raw bundle as searchindex.json")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    # Tracing
    trace_exporter: Literal["none", "console", "otlp"] = Field(
        default="none",
        description="Where finished build spans go: nowhere, stdout, or an OTLP/HTTP collector",
    )
    otlp_endpoint: str | None = Field(
        default=None,
        description="OTLP/HTTP traces endpoint; unset falls back to OTEL_EXPORTER_OTLP_* variables",
        examples=["http://localhost:4318/v1/traces"],
    )
    otlp_timeout_seconds: int = Field(default=10, ge=1, description="OTLP export timeout in seconds")

    def search_fields_boost(self) -> dict[str, dict[str, int]]:
        """Per-field boost table in the shape the client expects."""
        return {
            "title": {"boost": self.title_boost},
            "body": {"boost": self.body_boost},
            "breadcrumbs": {"boost": self.breadcrumbs_boost},
        }
