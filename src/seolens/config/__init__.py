"""Configuration models and loaders."""

from .config import Config, ExtractionSettings, MonitoringConfig, find_config_file

__all__ = ["Config", "ExtractionSettings", "MonitoringConfig", "find_config_file"]
