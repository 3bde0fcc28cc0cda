"""Semantic Kernel plugins exposing the analysis engine."""

from .inspection_analyzer import InspectionAnalysisPlugin

__all__ = [
    'InspectionAnalysisPlugin'
]
