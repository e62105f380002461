"""
Configuration management for SeoLens using Pydantic.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

DEFAULT_LAZY_IMAGE_ATTRIBUTES = [
    "data-src",
    "data-original",
    "data-img-url",
    "data-lazy",
    "data-url",
    "data-image",
]

# --- Nested Configuration Models ---


class ExtractionSettings(BaseModel):
    """Configuration for the page-data extraction engine."""

    parser: Literal["html.parser", "lxml", "html5lib"] = Field(
        default="html.parser", description="BeautifulSoup tree builder used when parsing raw HTML."
    )
    tiny_image_threshold: int = Field(
        default=10, ge=0, description="Standard <img> elements smaller than this on both axes are dropped."
    )
    lazy_image_attributes: List[str] = Field(
        default_factory=lambda: list(DEFAULT_LAZY_IMAGE_ATTRIBUTES),
        description="Lazy-loading attributes checked in priority order.",
    )
    heading_max_length: int = Field(default=100, ge=1, description="Maximum stored heading text length.")
    max_phone_results: int = Field(default=50, ge=0, description="Cap on returned phone numbers.")
    microdata_max_depth: int = Field(default=16, ge=1, description="Maximum nesting depth for Microdata items.")
    snippet_length: int = Field(
        default=200, ge=1, description="Length of raw snippets kept for broken JSON-LD and RDFa records."
    )

    @field_validator("lazy_image_attributes")
    @classmethod
    def validate_lazy_attributes(cls, v: List[str]) -> List[str]:
        """Ensure the lazy attribute list is not empty."""
        if not v:
            raise ValueError("lazy_image_attributes must contain at least one attribute")
        return [attr.strip().lower() for attr in v]


class MonitoringConfig(BaseModel):
    """Configuration for logging."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(
        default=None,
        description="Path to log file. If None, logs to console.",
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "SeoLens"
    version: str = "0.1.0"
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="SEOLENS_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    paths_to_check = [
        current_dir / "seolens.yaml",
        current_dir / "seolens.yml",
    ]
    for path in paths_to_check:
        if path.exists():
            return path
    return None
