"""Negotiation guidance from free text describing a car's service history."""

import logging
from typing import Optional

from ..models.analysis import CostImpact, NegotiationGuidanceBlock

logger = logging.getLogger(__name__)

COMPLETED_SERVICE_PHRASES = (
    "serviced on",
    "service completed",
    "recently serviced",
    "full service history verified",
    "maintenance completed",
    "last service was",
    "has been serviced",
)

# Logbook interval wording describes future work and is not a risk
SCHEDULED_SERVICE_PHRASES = (
    "next service due",
    "scheduled service",
    "service interval",
    "logbook schedule",
    "maintenance schedule",
    "service at",
    "due at",
    "upcoming service",
)

CONTRADICTION_PHRASES = (
    "inconsistent",
    "does not match",
    "cannot be verified",
    "discrepancy",
    "questionable",
)


def looks_like_completed_service_claim(text: str) -> bool:
    lowered = text.lower()
    return any(phrase in lowered for phrase in COMPLETED_SERVICE_PHRASES)


def looks_like_scheduled_service_entry(text: str) -> bool:
    lowered = text.lower()
    return any(phrase in lowered for phrase in SCHEDULED_SERVICE_PHRASES)


def build_negotiation_guidance_from_text(body: Optional[str]) -> Optional[NegotiationGuidanceBlock]:
    """
    Classify service-history text into negotiation guidance.
    
    Scheduled-service wording is checked first and always yields a neutral
    block. A completed-service claim is only treated as leverage when the
    text also says it contradicts something.
    
    Args:
        body: Free text, e.g. a listing description or logbook transcript
        
    Returns:
        NegotiationGuidanceBlock, or None when nothing applies
    """
    if not body:
        return None
    
    lowered = body.lower()
    
    if looks_like_scheduled_service_entry(lowered):
        logger.debug("Service text reads as scheduled maintenance")
        return NegotiationGuidanceBlock(
            title="Service schedule information",
            talking_points=[
                "These entries appear to describe upcoming or scheduled services rather than past maintenance",
                "Confirm whether the logbook also includes records of previous completed services",
            ],
            cost_impact=CostImpact(
                level="low",
                range_hint="No immediate concern — this is normal logbook behaviour",
            ),
            buyer_action=(
                "Use scheduled entries as context only — focus discussion on the "
                "most recent completed service."
            ),
        )
    
    if looks_like_completed_service_claim(lowered) and any(
        phrase in lowered for phrase in CONTRADICTION_PHRASES
    ):
        logger.debug("Service text claims completed work that does not line up")
        return NegotiationGuidanceBlock(
            title="Negotiation leverage — clarify service documentation",
            talking_points=[
                "Ask the seller to provide photos of the full service logbook pages",
                "Request invoices or dealer receipts for the most recent completed service",
                "Confirm whether any entries were pre-stamped or future-dated by a dealer",
            ],
            cost_impact=CostImpact(
                level="moderate",
                range_hint="$300 – $1,200 if missing work needs to be completed",
            ),
            buyer_action=(
                "Proceed only once records are confirmed — or negotiate to "
                "reflect uncertainty in the history."
            ),
        )
    
    return None
