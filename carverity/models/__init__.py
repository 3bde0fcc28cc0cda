"""Input and output data models for the inspection analysis."""

from .inspection import CheckAnswer, Photo, FollowUpPhoto, Imperfection, ScanProgress
from .analysis import (
    RiskItem,
    NegotiationLeverageGroup,
    NegotiationBand,
    NegotiationPositioning,
    EvidenceSummary,
    UncertaintyFactor,
    BuyerContextInterpretation,
    PriceGuidance,
    InferredSignals,
    VerdictPack,
    AnalysisResult,
    ExplanationSection,
    DeterministicExplanation,
    CostImpact,
    NegotiationGuidanceBlock,
)

__all__ = [
    "CheckAnswer",
    "Photo",
    "FollowUpPhoto",
    "Imperfection",
    "ScanProgress",
    "RiskItem",
    "NegotiationLeverageGroup",
    "NegotiationBand",
    "NegotiationPositioning",
    "EvidenceSummary",
    "UncertaintyFactor",
    "BuyerContextInterpretation",
    "PriceGuidance",
    "InferredSignals",
    "VerdictPack",
    "AnalysisResult",
    "ExplanationSection",
    "DeterministicExplanation",
    "CostImpact",
    "NegotiationGuidanceBlock",
]
