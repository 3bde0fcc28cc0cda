"""Error handling utilities for the inspection service edges."""

from dataclasses import dataclass
from typing import Optional, Dict, Any
from enum import Enum


class ErrorType(Enum):
    """Enumeration of error types raised around the analysis engine."""
    
    # Configuration Errors
    CONFIG_MISSING = "CONFIG_MISSING"
    CONFIG_INVALID = "CONFIG_INVALID"
    
    # Request Payload Errors
    PAYLOAD_NOT_OBJECT = "PAYLOAD_NOT_OBJECT"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    
    # Report Errors
    REPORT_RENDERING_FAILED = "REPORT_RENDERING_FAILED"
    
    # System Errors
    INITIALIZATION_FAILED = "INITIALIZATION_FAILED"
    ANALYSIS_FAILED = "ANALYSIS_FAILED"


@dataclass
class ErrorContext:
    """
    Context information for errors raised around the analysis engine.
    
    Attributes:
        error_type: Type of error from ErrorType enum
        message: Human-readable error message
        recoverable: Whether the caller can retry or fall back
        fallback_action: Optional description of fallback action taken
        details: Optional additional error details
        original_exception: Optional original exception that caused this error
    """
    
    error_type: ErrorType
    message: str
    recoverable: bool
    fallback_action: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    original_exception: Optional[Exception] = None
    
    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error context to dictionary for logging/serialization.
        
        Returns:
            Dictionary representation of error context
        """
        return {
            "error_type": self.error_type.value,
            "message": self.message,
            "recoverable": self.recoverable,
            "fallback_action": self.fallback_action,
            "details": self.details or {},
            "original_exception": str(self.original_exception) if self.original_exception else None
        }


class InspectionError(Exception):
    """
    Base exception for errors around the inspection analysis.
    
    The engine itself never raises. These exceptions belong to the
    configuration, HTTP payload and report export layers.
    
    Attributes:
        context: ErrorContext with detailed error information
    """
    
    def __init__(self, context: ErrorContext):
        self.context = context
        super().__init__(context.message)
    
    def __str__(self) -> str:
        base = f"{self.context.error_type.value}: {self.context.message}"
        if self.context.fallback_action:
            base += f" (Fallback: {self.context.fallback_action})"
        return base
    
    def to_dict(self) -> Dict[str, Any]:
        return self.context.to_dict()


class ConfigError(InspectionError):
    """Exception for configuration loading errors."""
    
    @classmethod
    def missing(cls, config_path: str) -> "ConfigError":
        """
        Create error for a configuration file that does not exist.
        
        Args:
            config_path: Path that was looked up
            
        Returns:
            ConfigError instance
        """
        context = ErrorContext(
            error_type=ErrorType.CONFIG_MISSING,
            message=f"Configuration file not found at '{config_path}'",
            recoverable=False,
            details={"config_path": config_path}
        )
        return cls(context)
    
    @classmethod
    def invalid(
        cls,
        config_path: str,
        reason: str,
        error: Optional[Exception] = None
    ) -> "ConfigError":
        """
        Create error for a configuration file that cannot be used.
        
        Args:
            config_path: Path of the offending file
            reason: What is wrong with it
            error: Optional original exception
            
        Returns:
            ConfigError instance
        """
        context = ErrorContext(
            error_type=ErrorType.CONFIG_INVALID,
            message=f"Invalid configuration in '{config_path}': {reason}",
            recoverable=False,
            details={"config_path": config_path},
            original_exception=error
        )
        return cls(context)


class PayloadError(InspectionError):
    """Exception for request bodies the service cannot accept."""
    
    @classmethod
    def not_an_object(cls, received: str) -> "PayloadError":
        context = ErrorContext(
            error_type=ErrorType.PAYLOAD_NOT_OBJECT,
            message=f"Expected a JSON object, received {received}",
            recoverable=True,
            fallback_action="Resend the scan progress record as a JSON object",
            details={"received": received}
        )
        return cls(context)
    
    @classmethod
    def too_large(cls, size_bytes: int, limit_kb: int) -> "PayloadError":
        context = ErrorContext(
            error_type=ErrorType.PAYLOAD_TOO_LARGE,
            message=(
                f"Request body of {size_bytes} bytes exceeds the limit "
                f"of {limit_kb} KB"
            ),
            recoverable=True,
            fallback_action="Strip photo data URLs before submitting",
            details={"size_bytes": size_bytes, "limit_kb": limit_kb}
        )
        return cls(context)


class ReportRenderingError(InspectionError):
    """Exception for PDF report export failures."""
    
    @classmethod
    def from_exception(cls, error: Exception, scan_id: Optional[str] = None) -> "ReportRenderingError":
        """
        Wrap a ReportLab failure.
        
        Args:
            error: Original exception raised while building the document
            scan_id: Optional scan identifier for the report
            
        Returns:
            ReportRenderingError instance
        """
        context = ErrorContext(
            error_type=ErrorType.REPORT_RENDERING_FAILED,
            message=f"Failed to render inspection report: {str(error)}",
            recoverable=True,
            fallback_action="Return the JSON analysis instead",
            details={"scan_id": scan_id},
            original_exception=error
        )
        return cls(context)


class AnalysisError(InspectionError):
    """Exception for unexpected failures escaping the service wrapper."""
    
    @classmethod
    def unexpected(cls, error: Exception, scan_id: Optional[str] = None) -> "AnalysisError":
        context = ErrorContext(
            error_type=ErrorType.ANALYSIS_FAILED,
            message=f"Inspection analysis failed unexpectedly: {str(error)}",
            recoverable=False,
            details={"scan_id": scan_id},
            original_exception=error
        )
        return cls(context)


def handle_report_error(
    error: Exception,
    logger,
    scan_id: Optional[str] = None
) -> None:
    """
    Log a report export failure and raise it with context.
    
    Args:
        error: Original exception from ReportLab
        logger: Logger instance for error logging
        scan_id: Optional scan identifier
        
    Raises:
        ReportRenderingError: Wrapped error with context
    """
    report_error = ReportRenderingError.from_exception(error, scan_id=scan_id)
    logger.warning(f"Report rendering error: {report_error}")
    raise report_error from error
