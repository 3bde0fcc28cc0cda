"""
Service entry points for the inspection analysis.

Wraps the pure engine with configuration, logging context and error
handling for the HTTP server and the agent plugin.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .engine import (
    analyse_in_person_inspection,
    build_in_person_explanation,
    build_negotiation_guidance_from_text,
)
from .models.inspection import ScanProgress
from .reports.pdf_report import build_report_pdf
from .utils.config import Config, default_config
from .utils.errors import (
    AnalysisError,
    ConfigError,
    ErrorContext,
    ErrorType,
    InspectionError,
)
from .utils.logging import clear_context, set_context, setup_logging

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

# Initialised on first use
_config: Optional[Config] = None


def _initialize_system() -> Config:
    """
    Load configuration and set up logging once.
    
    A missing config file falls back to defaults; a malformed one is fatal.
    """
    global _config
    
    if _config is not None:
        return _config
    
    config_path = os.getenv("CARVERITY_CONFIG", "config.yaml")
    
    try:
        config = Config.load(config_path)
    except ConfigError as e:
        if e.context.error_type != ErrorType.CONFIG_MISSING:
            raise
        config = default_config()
        logger.warning(f"{e}; using default configuration")
    
    try:
        setup_logging(
            level=config.logging.level,
            log_format=config.logging.format,
            log_file=config.logging.file or None,
        )
    except OSError as e:
        raise InspectionError(
            ErrorContext(
                error_type=ErrorType.INITIALIZATION_FAILED,
                message=f"Failed to set up logging: {str(e)}",
                recoverable=False,
                original_exception=e,
            )
        ) from e
    
    logger.info(f"{config.app_name} analysis service initialised")
    _config = config
    return config


def get_config() -> Config:
    return _initialize_system()


def _scan_id_of(payload: Any) -> Optional[str]:
    if isinstance(payload, dict) and payload.get("scanId") is not None:
        return str(payload["scanId"])
    return None


def run_analysis(payload: Any) -> Dict[str, Any]:
    """
    Analyse a scan progress record.
    
    Args:
        payload: Decoded JSON scan progress record (camelCase)
        
    Returns:
        The analysis result in its camelCase dict form
        
    Raises:
        AnalysisError: If something unexpected escapes the engine
    """
    _initialize_system()
    scan_id = _scan_id_of(payload)
    set_context(scan_id=scan_id or "-")
    
    try:
        progress = ScanProgress.from_dict(payload)
        return analyse_in_person_inspection(progress).to_dict()
    except InspectionError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in run_analysis: {str(e)}", exc_info=True)
        raise AnalysisError.unexpected(e, scan_id=scan_id) from e
    finally:
        clear_context()


def run_explanation(payload: Any) -> Dict[str, Any]:
    """
    Analyse a record and explain the result.
    
    Returns:
        Dictionary with keys ``analysis`` and ``explanation``
    """
    analysis = run_analysis(payload)
    explanation = build_in_person_explanation(analysis)
    return {"analysis": analysis, "explanation": explanation.to_dict()}


def render_report(payload: Any) -> bytes:
    """
    Analyse a record and render the printable PDF report.
    
    Raises:
        ReportRenderingError: If ReportLab fails
    """
    config = _initialize_system()
    scan_id = _scan_id_of(payload)
    
    progress = ScanProgress.from_dict(payload)
    result = analyse_in_person_inspection(progress)
    explanation = build_in_person_explanation(result)
    
    return build_report_pdf(
        result,
        explanation=explanation,
        title=config.report.title,
        page_size=config.report.page_size,
        scan_id=scan_id,
    )


def service_history_guidance(text: Optional[str]) -> Optional[Dict[str, Any]]:
    block = build_negotiation_guidance_from_text(text)
    return block.to_dict() if block is not None else None
