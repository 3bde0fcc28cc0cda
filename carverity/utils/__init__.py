"""Utility modules for configuration, logging, and error handling."""

from .config import Config
from .errors import InspectionError, ErrorContext, ErrorType

__all__ = [
    'Config',
    'InspectionError',
    'ErrorContext',
    'ErrorType'
]
