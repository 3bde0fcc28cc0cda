"""Structured logging setup for the inspection service."""

import logging
from typing import Optional, Dict, Any
from pathlib import Path


DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(scan_id)s] %(message)s"


class ContextFilter(logging.Filter):
    """Add context information (scan id, component) to log records."""
    
    # Fields the default format string relies on
    DEFAULTS: Dict[str, Any] = {"scan_id": "-"}
    
    def __init__(self):
        super().__init__()
        self.context: Dict[str, Any] = {}
    
    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.DEFAULTS.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        for key, value in self.context.items():
            setattr(record, key, value)
        return True
    
    def set_context(self, **kwargs):
        self.context.update(kwargs)
    
    def clear_context(self):
        self.context.clear()


# Global context filter instance
_context_filter = ContextFilter()


def setup_logging(
    level: str = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up structured logging with optional file output.
    
    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format string for log messages
        log_file: Optional path to log file
        
    Returns:
        Configured root logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    
    formatter = logging.Formatter(log_format)
    
    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(_context_filter)
    root_logger.addHandler(console_handler)
    
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(_context_filter)
        root_logger.addHandler(file_handler)
    
    return root_logger


def get_context() -> Dict[str, Any]:
    """Return a copy of the current logging context."""
    return dict(_context_filter.context)


def set_context(**kwargs):
    """
    Set context fields for all subsequent log messages.
    
    Example:
        set_context(scan_id="scan-123", component="orchestrator")
        logger.info("Analysing inspection")  # Will include scan_id
    
    Args:
        **kwargs: Context key-value pairs
    """
    _context_filter.set_context(**kwargs)


def clear_context():
    """Clear all context fields."""
    _context_filter.clear_context()

