"""Verdict builder: classifies the risk picture and explains the outcome."""

from types import MappingProxyType
from typing import List, Mapping, Tuple

from ..models.analysis import (
    BuyerContextInterpretation,
    RiskItem,
    UncertaintyFactor,
    VerdictPack,
)

# Below this confidence the verdict is walk-away whatever else was recorded
CONFIDENCE_FLOOR = 35

VERDICT_REASONS: Mapping[str, str] = MappingProxyType({
    "proceed": "No major red flags were recorded in the inspection you captured.",
    "caution": (
        "One or more meaningful concerns (or uncertainties) were recorded — "
        "clarifying them would materially improve confidence."
    ),
    "walk-away": (
        "Multiple high-impact concerns were recorded — walking away is a "
        "reasonable option unless evidence strongly improves the picture."
    ),
})

BUYER_GUIDANCE: Mapping[str, Tuple[Tuple[str, str], ...]] = MappingProxyType({
    "proceed": (
        ("risk-averse",
         "This profile looks acceptable based on what you recorded, but still "
         "request service records and a final confirmation drive."),
        ("practical",
         "Based on recorded observations, this looks like a reasonable "
         "candidate to proceed with at the right price."),
        ("short-term",
         "If you plan to keep the car briefly, ensure no recorded items would "
         "affect immediate usability or resale."),
    ),
    "caution": (
        ("risk-averse",
         "Clarify the recorded concerns (and any items marked ‘unsure’) before "
         "committing. Avoid rushing."),
        ("practical",
         "Proceed only if the recorded concerns are explainable and priced in. "
         "Use the report to frame clarifying questions."),
        ("short-term",
         "Be cautious of anything that could impact resale or immediate "
         "reliability unless you’re getting a strong price adjustment."),
    ),
    "walk-away": (
        ("risk-averse",
         "Walking away is reasonable. The recorded profile carries meaningful "
         "downside risk."),
        ("practical",
         "Only proceed if the seller provides strong evidence addressing the "
         "recorded high-impact items and the price reflects the remaining risk."),
        ("short-term",
         "High-risk profiles are rarely worth it short-term unless the purchase "
         "price is exceptionally low and evidence is strong."),
    ),
})


def classify_verdict(critical_count: int, moderate_count: int, confidence_score: float) -> str:
    """
    Classify one snapshot into proceed, caution or walk-away.
    
    The confidence floor is checked first and overrides everything else.
    """
    if critical_count >= 2 or confidence_score < CONFIDENCE_FLOOR:
        return "walk-away"
    if critical_count >= 1 or moderate_count >= 2:
        return "caution"
    return "proceed"


def build_verdict(
    risks: List[RiskItem],
    concern_count: int,
    unsure_count: int,
    completeness_score: int,
    confidence_score: int,
) -> VerdictPack:
    """
    Build the verdict and all text explaining it.
    
    Args:
        risks: Risk findings
        concern_count: Raw checks answered "concern"
        unsure_count: Raw checks answered "unsure"
        completeness_score: 0-100 completeness
        confidence_score: 0-100 confidence
        
    Returns:
        VerdictPack
    """
    critical_count = sum(1 for r in risks if r.severity == "critical")
    moderate_count = sum(1 for r in risks if r.severity == "moderate")
    
    verdict = classify_verdict(critical_count, moderate_count, confidence_score)
    
    why_bullets = _why_this_verdict_bullets(verdict, concern_count, unsure_count, completeness_score)
    weighting_bullets = _risk_weighting_bullets(
        verdict, critical_count, moderate_count, unsure_count, completeness_score, confidence_score
    )
    
    uncertainty_factors: List[UncertaintyFactor] = []
    if unsure_count > 0:
        uncertainty_factors.append(UncertaintyFactor(
            label=(
                "One inspection item was marked ‘unsure’"
                if unsure_count == 1
                else f"{unsure_count} inspection items were marked ‘unsure’"
            ),
            impact="moderate",
            source="user_marked_unsure",
        ))
    
    return VerdictPack(
        verdict=verdict,
        verdict_reason=VERDICT_REASONS[verdict],
        why_this_verdict=" ".join(why_bullets),
        why_this_verdict_bullets=why_bullets,
        risk_weighting_explanation=" ".join(weighting_bullets),
        risk_weighting_bullets=weighting_bullets,
        uncertainty_factors=uncertainty_factors,
        counterfactuals=_counterfactuals(verdict, unsure_count),
        buyer_context_interpretation=[
            BuyerContextInterpretation(buyer_type=buyer_type, guidance=guidance)
            for buyer_type, guidance in BUYER_GUIDANCE[verdict]
        ],
    )


def _why_this_verdict_bullets(
    verdict: str,
    concern_count: int,
    unsure_count: int,
    completeness_score: int,
) -> List[str]:
    if verdict == "proceed":
        impact = "No recorded findings were assessed as high impact."
    elif verdict == "caution":
        impact = "Recorded findings included at least one meaningful concern or uncertainty."
    else:
        impact = "Multiple high-impact concerns were recorded, increasing downside risk."
    
    if unsure_count > 0:
        uncertainty = "Uncertainty here comes only from items you marked as ‘unsure’."
    else:
        uncertainty = "No items were marked as ‘unsure’, so certainty is based on recorded observations."
    
    if completeness_score >= 75:
        coverage = "You captured strong coverage, which supports the confidence score."
    elif completeness_score >= 55:
        coverage = "Coverage was moderate; confidence reflects that."
    else:
        coverage = "Coverage was limited; confidence reflects that."
    
    if concern_count > 0:
        concerns = "Your recorded ‘something off’ items contribute to negotiation pressure."
    else:
        concerns = "No check items were marked ‘something off’ in what you recorded."
    
    return [impact, uncertainty, coverage, concerns]


def _risk_weighting_bullets(
    verdict: str,
    critical_count: int,
    moderate_count: int,
    unsure_count: int,
    completeness_score: int,
    confidence_score: int,
) -> List[str]:
    bullets: List[str] = []
    
    if critical_count > 0:
        bullets.append(
            "A high-impact concern was recorded and weighted heavily."
            if critical_count == 1
            else f"{critical_count} high-impact concerns were recorded and weighted heavily."
        )
    elif moderate_count > 0:
        bullets.append(
            "A meaningful concern was recorded and weighted moderately."
            if moderate_count == 1
            else f"{moderate_count} meaningful concerns were recorded and weighted moderately."
        )
    else:
        bullets.append("No major concerns were recorded in the inspection you captured.")
    
    if unsure_count > 0:
        bullets.append(
            "One item was explicitly marked ‘unsure’, which lowers certainty."
            if unsure_count == 1
            else f"{unsure_count} items were explicitly marked ‘unsure’, which lowers certainty."
        )
    else:
        bullets.append("No items were marked ‘unsure’, so certainty is based on recorded observations.")
    
    if completeness_score >= 80:
        bullets.append(
            "Coverage is strong — you captured most of the key checks and baseline photos."
        )
    elif completeness_score >= 60:
        bullets.append(
            "Coverage is moderate — enough to guide a decision posture, but not enough to be definitive."
        )
    elif completeness_score >= 40:
        bullets.append(
            "Coverage is limited — the result is still useful, but it should be "
            "treated as provisional until more is recorded."
        )
    else:
        bullets.append(
            "Coverage is very limited — capture a few more checks/photos to make "
            "the report meaningfully stronger."
        )
    
    if confidence_score >= 80:
        bullets.append(
            "High confidence means you captured strong coverage and recorded "
            "enough evidence for the posture to be reliable."
        )
    elif confidence_score >= 60:
        bullets.append(
            "Moderate confidence means the posture is reasonable, but there are "
            "a few unknowns or gaps worth verifying."
        )
    elif confidence_score >= 40:
        bullets.append(
            "Lower confidence means there are gaps or unknowns that reduce "
            "certainty. Clarifying key items will improve the outcome."
        )
    else:
        bullets.append(
            "Very low confidence means too much is unknown. Treat this as a "
            "prompt to verify key items before deciding."
        )
    
    if verdict == "walk-away":
        bullets.append(
            "This posture is intentionally buyer-safe: unresolved high-impact "
            "items can create expensive regret."
        )
    elif verdict == "caution":
        bullets.append(
            "This posture is buyer-safe: clarify the recorded items first, then "
            "decide with confidence."
        )
    else:
        bullets.append(
            "This posture is buyer-safe: proceed normally, but still confirm "
            "paperwork and service history."
        )
    
    return bullets


def _counterfactuals(verdict: str, unsure_count: int) -> List[str]:
    counterfactuals: List[str] = []
    
    if unsure_count > 0:
        counterfactuals.append(
            "Clarifying the items marked ‘unsure’ would increase confidence "
            "without changing what was observed."
        )
    
    if verdict == "caution":
        counterfactuals.append(
            "Clear evidence that the recorded concerns are resolved (e.g., "
            "documented repairs) would likely improve the outcome."
        )
    elif verdict == "walk-away":
        counterfactuals.append(
            "Only strong, independent evidence resolving the recorded high-impact "
            "concerns would justify reassessing this verdict."
        )
    
    counterfactuals.append(
        "A longer test drive (where safe and permitted) can help confirm whether "
        "any recorded behaviour is repeatable."
    )
    return counterfactuals
