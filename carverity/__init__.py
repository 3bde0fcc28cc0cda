"""Used-car in-person inspection analysis."""

from .engine import analyse_in_person_inspection, build_in_person_explanation
from .models import AnalysisResult, ScanProgress

__version__ = "0.1.0"

__all__ = [
    "analyse_in_person_inspection",
    "build_in_person_explanation",
    "AnalysisResult",
    "ScanProgress",
]
