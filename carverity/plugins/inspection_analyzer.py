"""Semantic Kernel plugin exposing the inspection analysis to agents."""

import logging
from typing import Any, Dict, Optional

from semantic_kernel.functions import kernel_function

from ..engine import (
    analyse_in_person_inspection,
    build_in_person_explanation,
    build_negotiation_guidance_from_text,
)

logger = logging.getLogger(__name__)


class InspectionAnalysisPlugin:
    """
    Semantic Kernel plugin for in-person inspection analysis.
    
    Provides functions for:
    - Scoring an inspection record into a verdict, risks and negotiation bands
    - Explaining a result in plain language
    - Reading service-history text for negotiation leverage
    
    Every function takes and returns plain dicts, so an agent can rewrite the
    wording without touching the scoring.
    """
    
    def __init__(self):
        logger.info("Initialized InspectionAnalysisPlugin")
    
    @kernel_function(
        name="analyse_inspection",
        description=(
            "Analyse an in-person used-car inspection record (checks, photos, "
            "imperfections). Returns the verdict, confidence and completeness "
            "scores, risks, and negotiation price bands in AUD."
        )
    )
    def analyse_inspection(self, scan_progress: Dict[str, Any]) -> Dict[str, Any]:
        """
        Analyse an inspection record.
        
        Args:
            scan_progress: camelCase scan progress record
            
        Returns:
            camelCase analysis result
        """
        result = analyse_in_person_inspection(scan_progress)
        logger.info(f"Plugin analysis complete: verdict={result.verdict}")
        return result.to_dict()
    
    @kernel_function(
        name="explain_inspection",
        description=(
            "Explain an inspection analysis result in buyer-safe language: a "
            "headline, what influenced it, how to read the score, and the next "
            "best action."
        )
    )
    def explain_inspection(self, analysis: Dict[str, Any]) -> Dict[str, Any]:
        return build_in_person_explanation(analysis).to_dict()
    
    @kernel_function(
        name="service_history_guidance",
        description=(
            "Read text describing a car's service history and return negotiation "
            "guidance when it shows scheduled entries or questionable completed "
            "service claims. Returns null when nothing applies."
        )
    )
    def service_history_guidance(self, text: str) -> Optional[Dict[str, Any]]:
        block = build_negotiation_guidance_from_text(text)
        return block.to_dict() if block is not None else None
