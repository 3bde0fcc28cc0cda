"""
Deterministic, plain-language explanation of an analysis result.

Never returns None and never invents facts: everything is derived from the
verdict, the risk severities, the uncertainty factors and the confidence
score already present in the result.
"""

from typing import Any, Dict, List, Union

from ..models.analysis import AnalysisResult, DeterministicExplanation, ExplanationSection

VERDICTS = ("proceed", "caution", "walk-away")

HEADLINES = {
    "proceed": "Overall, nothing you recorded strongly contradicts moving forward",
    "caution": "Your inspection shows some meaningful points that deserve caution",
    "walk-away": "Based on what you recorded, this vehicle carries significant risk",
}

BUYER_SAFE_TEXT = (
    "This report does not assume anything you did not record. Items left "
    "unchecked or marked as unsure are treated as questions to resolve, not "
    "automatic faults."
)


def _safe_number(value: Any, fallback: float = 0) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return fallback
    return value


def _plural(n: int, word: str) -> str:
    return word if n == 1 else f"{word}s"


def build_in_person_explanation(
    analysis: Union[AnalysisResult, Dict[str, Any], None],
) -> DeterministicExplanation:
    """
    Explain an analysis result in buyer-facing language.
    
    Args:
        analysis: AnalysisResult, or its camelCase dict form
        
    Returns:
        DeterministicExplanation
    """
    data = analysis.to_dict() if isinstance(analysis, AnalysisResult) else analysis
    if not isinstance(data, dict):
        data = {}
    
    verdict = data.get("verdict")
    if verdict not in VERDICTS:
        verdict = "caution"
    
    risks = data.get("risks") if isinstance(data.get("risks"), list) else []
    severities = [r.get("severity") for r in risks if isinstance(r, dict)]
    critical_count = severities.count("critical")
    moderate_count = severities.count("moderate")
    
    uncertainty_factors = data.get("uncertaintyFactors")
    uncertainty_count = len(uncertainty_factors) if isinstance(uncertainty_factors, list) else 0
    
    confidence_score = _safe_number(data.get("confidenceScore"), 0)
    
    influence_lines: List[str] = []
    
    if critical_count > 0:
        influence_lines.append(
            f"You recorded {critical_count} {_plural(critical_count, 'issue')} assessed as "
            f"high impact. Items in this category materially affect risk."
        )
    
    if moderate_count > 0:
        influence_lines.append(
            f"You recorded {moderate_count} {_plural(moderate_count, 'issue')} that may "
            f"indicate wear, developing faults, or future cost."
        )
    
    if uncertainty_count > 0:
        influence_lines.append(
            f"There {'is' if uncertainty_count == 1 else 'are'} {uncertainty_count} "
            f"{_plural(uncertainty_count, 'item')} you marked as unsure. These are treated "
            f"as unknowns, not positives or negatives."
        )
    
    if not influence_lines:
        influence_lines.append(
            "You did not record any significant concerns or unresolved "
            "uncertainties during the inspection."
        )
    
    if confidence_score >= 85:
        score_interpretation = (
            "Your recorded answers suggest relatively low observed risk based on what was checked."
        )
    elif confidence_score >= 70:
        score_interpretation = (
            "Your inspection contains a mix of reassuring signs and items worth clarifying."
        )
    elif confidence_score >= 55:
        score_interpretation = (
            "Several recorded items reduce confidence and should be considered carefully."
        )
    else:
        score_interpretation = (
            "Your inspection highlights multiple risk signals that significantly reduce confidence."
        )
    
    if critical_count > 0:
        next_best_action = (
            "Resolve the highest-impact issue you recorded with written evidence "
            "or professional inspection."
        )
    elif uncertainty_count > 0:
        next_best_action = (
            "Focus on confirming the most important item you marked as unsure "
            "before committing."
        )
    elif verdict == "proceed":
        next_best_action = (
            "Confirm service history and ownership details to finalise your "
            "decision with confidence."
        )
    else:
        next_best_action = (
            "Clarify the most important unresolved item before deciding how to proceed."
        )
    
    return DeterministicExplanation(
        headline=HEADLINES[verdict],
        verdict_key=verdict,
        sections=[
            ExplanationSection(title="What influenced this assessment", body=" ".join(influence_lines)),
            ExplanationSection(title="How to interpret your inspection score", body=score_interpretation),
            ExplanationSection(title="Buyer-safe logic", body=BUYER_SAFE_TEXT),
        ],
        next_best_action=next_best_action,
    )
