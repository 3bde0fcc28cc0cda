"""In-person inspection analysis engine."""

from .orchestrator import analyse_in_person_inspection
from .explanation import build_in_person_explanation
from .service_history import build_negotiation_guidance_from_text

__all__ = [
    "analyse_in_person_inspection",
    "build_in_person_explanation",
    "build_negotiation_guidance_from_text",
]
