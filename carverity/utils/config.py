"""Configuration management for the inspection service."""

import os
import yaml
from dataclasses import dataclass
from typing import Any, Dict

from .errors import ConfigError


PAGE_SIZES = ("A4", "letter")


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str
    format: str
    file: str


@dataclass
class ServerConfig:
    """HTTP surface configuration."""
    max_payload_kb: int


@dataclass
class ReportConfig:
    """PDF report export configuration."""
    title: str
    page_size: str  # "A4" | "letter"


@dataclass
class Config:
    """Main configuration class."""
    app_name: str
    logging: LoggingConfig
    server: ServerConfig
    report: ReportConfig
    
    @classmethod
    def load(cls, config_path: str = "config.yaml") -> "Config":
        """
        Load configuration from file and environment variables.
        
        Environment variables override config file values:
        - LOG_LEVEL
        - CARVERITY_REPORT_TITLE
        - MAX_PAYLOAD_KB
        
        Args:
            config_path: Path to YAML configuration file
            
        Returns:
            Config instance with loaded settings
            
        Raises:
            ConfigError: If the file is missing or malformed
        """
        if not os.path.exists(config_path):
            raise ConfigError.missing(config_path)
        
        try:
            with open(config_path, 'r') as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError.invalid(config_path, "not valid YAML", e) from e
        
        if not isinstance(config_data, dict):
            raise ConfigError.invalid(config_path, "top level must be a mapping")
        
        app_section = _section(config_data, "app", config_path)
        logging_section = _section(config_data, "logging", config_path)
        server_section = _section(config_data, "server", config_path)
        report_section = _section(config_data, "report", config_path)
        
        logging_config = LoggingConfig(
            level=os.getenv("LOG_LEVEL", logging_section.get("level", "INFO")),
            format=logging_section.get(
                "format",
                "%(asctime)s - %(name)s - %(levelname)s - [%(scan_id)s] %(message)s"
            ),
            file=logging_section.get("file") or ""
        )
        
        try:
            max_payload_kb = int(os.getenv("MAX_PAYLOAD_KB", server_section.get("max_payload_kb", 512)))
        except (TypeError, ValueError) as e:
            raise ConfigError.invalid(config_path, "server.max_payload_kb must be an integer", e) from e
        
        server_config = ServerConfig(max_payload_kb=max_payload_kb)
        
        page_size = report_section.get("page_size", "A4")
        if page_size not in PAGE_SIZES:
            raise ConfigError.invalid(
                config_path,
                f"report.page_size must be one of {', '.join(PAGE_SIZES)}"
            )
        
        report_config = ReportConfig(
            title=os.getenv("CARVERITY_REPORT_TITLE", report_section.get("title", "In-person inspection report")),
            page_size=page_size
        )
        
        return cls(
            app_name=app_section.get("name", "CarVerity"),
            logging=logging_config,
            server=server_config,
            report=report_config,
        )


def _section(config_data: Dict[str, Any], name: str, config_path: str) -> Dict[str, Any]:
    section = config_data.get(name, {}) or {}
    if not isinstance(section, dict):
        raise ConfigError.invalid(config_path, f"'{name}' section must be a mapping")
    return section


def default_config() -> Config:
    """
    Configuration used when no config file is present.
    
    Raises:
        ConfigError: If MAX_PAYLOAD_KB is not an integer
    """
    try:
        max_payload_kb = int(os.getenv("MAX_PAYLOAD_KB", "512"))
    except ValueError as e:
        raise ConfigError.invalid("environment", "MAX_PAYLOAD_KB must be an integer", e) from e
    
    return Config(
        app_name="CarVerity",
        logging=LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format="%(asctime)s - %(name)s - %(levelname)s - [%(scan_id)s] %(message)s",
            file=""
        ),
        server=ServerConfig(max_payload_kb=max_payload_kb),
        report=ReportConfig(
            title=os.getenv("CARVERITY_REPORT_TITLE", "In-person inspection report"),
            page_size="A4"
        ),
    )
