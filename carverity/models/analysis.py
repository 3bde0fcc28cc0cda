"""Analysis output data models.

Every record here is derived fresh on each run and never fed back into the
input. ``to_dict`` produces the camelCase shape the report screens render.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class RiskItem:
    """
    A single risk finding.
    
    Attributes:
        id: Stable identifier (e.g. "check-aircon", "imp-12")
        label: Short buyer-facing title
        explanation: Buyer-facing explanation
        severity: Severity level (info, moderate, critical)
    """
    id: str
    label: str
    explanation: str
    severity: str  # "info" | "moderate" | "critical"
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "explanation": self.explanation,
            "severity": self.severity,
        }


@dataclass
class NegotiationLeverageGroup:
    """A category of negotiation talking points."""
    category: str
    points: List[str] = field(default_factory=list)
    
    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "points": list(self.points)}


@dataclass
class NegotiationBand:
    """
    A suggested AUD price-adjustment range at one stance.
    
    Attributes:
        aud_low: Lower end of the adjustment in AUD
        aud_high: Upper end of the adjustment in AUD (never below aud_low)
        label: Band label (e.g. "Light positioning")
        rationale: Why this range was suggested
    """
    aud_low: int
    aud_high: int
    label: str
    rationale: str
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "audLow": self.aud_low,
            "audHigh": self.aud_high,
            "label": self.label,
            "rationale": self.rationale,
        }


@dataclass
class NegotiationPositioning:
    """Three negotiation bands, from least to most assertive."""
    conservative: NegotiationBand
    balanced: NegotiationBand
    aggressive: NegotiationBand
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "conservative": self.conservative.to_dict(),
            "balanced": self.balanced.to_dict(),
            "aggressive": self.aggressive.to_dict(),
        }


@dataclass
class EvidenceSummary:
    """
    Compact summary of what the buyer captured.
    
    Attributes:
        summary: Narrative sentence(s)
        bullets: Buyer-facing evidence bullets (at most 14)
        photos_captured: Number of guided photos
        photos_expected: Number of required baseline photos
        checks_completed: Answered checks across the whole record
        key_checks_expected: Length of the key-check list
        imperfections_noted: Imperfections after deduplication
        follow_up_photos_captured: Number of follow-up photos
        explicitly_uncertain_items: One entry per check marked unsure
    """
    summary: str
    bullets: List[str]
    photos_captured: int
    photos_expected: int
    checks_completed: int
    key_checks_expected: int
    imperfections_noted: int
    follow_up_photos_captured: int
    explicitly_uncertain_items: List[str] = field(default_factory=list)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "bullets": list(self.bullets),
            "photosCaptured": self.photos_captured,
            "photosExpected": self.photos_expected,
            "checksCompleted": self.checks_completed,
            "keyChecksExpected": self.key_checks_expected,
            "imperfectionsNoted": self.imperfections_noted,
            "followUpPhotosCaptured": self.follow_up_photos_captured,
            "explicitlyUncertainItems": list(self.explicitly_uncertain_items),
        }


@dataclass
class UncertaintyFactor:
    """A source of uncertainty in the verdict."""
    label: str
    impact: str  # "low" | "moderate"
    source: str  # "user_marked_unsure"
    
    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "impact": self.impact, "source": self.source}


@dataclass
class BuyerContextInterpretation:
    """Verdict guidance for one kind of buyer."""
    buyer_type: str  # "risk-averse" | "practical" | "short-term"
    guidance: str
    
    def to_dict(self) -> Dict[str, Any]:
        return {"buyerType": self.buyer_type, "guidance": self.guidance}


@dataclass
class PriceGuidance:
    """
    Price guidance block. Currently always inert: every amount is None.
    
    Attributes:
        asking_price_aud: Advertised price
        adjusted_price_low_aud: Low end of an adjusted price window
        adjusted_price_high_aud: High end of an adjusted price window
        suggested_reduction_low_aud: Low end of a suggested reduction
        suggested_reduction_high_aud: High end of a suggested reduction
        disclaimer: Fixed disclaimer text
        rationale: Explanatory lines
    """
    asking_price_aud: Optional[float] = None
    adjusted_price_low_aud: Optional[float] = None
    adjusted_price_high_aud: Optional[float] = None
    suggested_reduction_low_aud: Optional[float] = None
    suggested_reduction_high_aud: Optional[float] = None
    disclaimer: str = ""
    rationale: List[str] = field(default_factory=list)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "askingPriceAud": self.asking_price_aud,
            "adjustedPriceLowAud": self.adjusted_price_low_aud,
            "adjustedPriceHighAud": self.adjusted_price_high_aud,
            "suggestedReductionLowAud": self.suggested_reduction_low_aud,
            "suggestedReductionHighAud": self.suggested_reduction_high_aud,
            "disclaimer": self.disclaimer,
            "rationale": list(self.rationale),
        }


@dataclass
class InferredSignals:
    """Heuristic flags that sit outside the main confidence score."""
    adas_present_but_disabled: bool
    confidence: int
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "adasPresentButDisabled": self.adas_present_but_disabled,
            "confidence": self.confidence,
        }


@dataclass
class VerdictPack:
    """Verdict plus the explanatory text derived alongside it."""
    verdict: str  # "proceed" | "caution" | "walk-away"
    verdict_reason: str
    why_this_verdict: str
    why_this_verdict_bullets: List[str]
    risk_weighting_explanation: str
    risk_weighting_bullets: List[str]
    uncertainty_factors: List[UncertaintyFactor]
    counterfactuals: List[str]
    buyer_context_interpretation: List[BuyerContextInterpretation]


@dataclass
class AnalysisResult:
    """
    Complete output of one in-person inspection analysis.
    
    Attributes:
        verdict: Final recommendation (proceed, caution, walk-away)
        verdict_reason: One-sentence reason for the verdict
        confidence_score: 0-100 reliability of the verdict
        completeness_score: 0-100 share of expected evidence captured
        risks: Risk findings
        negotiation_leverage: Talking points grouped by category
        negotiation_positioning: Conservative/balanced/aggressive AUD bands
        why_this_verdict: Why-bullets joined into one paragraph
        why_this_verdict_bullets: Why-bullets
        evidence_summary: What was captured
        risk_weighting_explanation: Weighting bullets joined into one paragraph
        risk_weighting_bullets: Weighting bullets
        uncertainty_factors: Sources of uncertainty
        counterfactuals: What would change the outcome
        buyer_context_interpretation: Guidance per buyer type
        inferred_signals: Heuristic flags
        price_guidance: Inert price guidance placeholder
    """
    verdict: str
    verdict_reason: str
    confidence_score: int
    completeness_score: int
    risks: List[RiskItem]
    negotiation_leverage: List[NegotiationLeverageGroup]
    negotiation_positioning: NegotiationPositioning
    why_this_verdict: str
    why_this_verdict_bullets: List[str]
    evidence_summary: EvidenceSummary
    risk_weighting_explanation: str
    risk_weighting_bullets: List[str]
    uncertainty_factors: List[UncertaintyFactor]
    counterfactuals: List[str]
    buyer_context_interpretation: List[BuyerContextInterpretation]
    inferred_signals: InferredSignals
    price_guidance: PriceGuidance
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "verdict": self.verdict,
            "verdictReason": self.verdict_reason,
            "confidenceScore": self.confidence_score,
            "completenessScore": self.completeness_score,
            "risks": [r.to_dict() for r in self.risks],
            "negotiationLeverage": [g.to_dict() for g in self.negotiation_leverage],
            "negotiationPositioning": self.negotiation_positioning.to_dict(),
            "whyThisVerdict": self.why_this_verdict,
            "whyThisVerdictBullets": list(self.why_this_verdict_bullets),
            "evidenceSummary": self.evidence_summary.to_dict(),
            "riskWeightingExplanation": self.risk_weighting_explanation,
            "riskWeightingBullets": list(self.risk_weighting_bullets),
            "uncertaintyFactors": [u.to_dict() for u in self.uncertainty_factors],
            "counterfactuals": list(self.counterfactuals),
            "buyerContextInterpretation": [b.to_dict() for b in self.buyer_context_interpretation],
            "inferredSignals": self.inferred_signals.to_dict(),
            "priceGuidance": self.price_guidance.to_dict(),
        }


@dataclass
class ExplanationSection:
    """A titled paragraph of the deterministic explanation."""
    title: str
    body: str
    
    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "body": self.body}


@dataclass
class DeterministicExplanation:
    """
    Plain-language explanation of an analysis result.
    
    Attributes:
        headline: One-line headline
        verdict_key: Verdict the explanation was written for
        sections: Titled paragraphs
        next_best_action: The single most useful next step
    """
    headline: str
    verdict_key: str
    sections: List[ExplanationSection]
    next_best_action: str
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "headline": self.headline,
            "verdictKey": self.verdict_key,
            "sections": [s.to_dict() for s in self.sections],
            "nextBestAction": self.next_best_action,
        }


@dataclass
class CostImpact:
    """Rough cost framing for a negotiation point."""
    level: str  # "low" | "moderate" | "high"
    range_hint: str
    notes: Optional[str] = None
    
    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"level": self.level, "rangeHint": self.range_hint}
        if self.notes:
            data["notes"] = self.notes
        return data


@dataclass
class NegotiationGuidanceBlock:
    """Negotiation guidance derived from service-history text."""
    title: str
    talking_points: List[str]
    buyer_action: str
    cost_impact: Optional[CostImpact] = None
    
    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "title": self.title,
            "talkingPoints": list(self.talking_points),
            "buyerAction": self.buyer_action,
        }
        if self.cost_impact is not None:
            data["costImpact"] = self.cost_impact.to_dict()
        return data
