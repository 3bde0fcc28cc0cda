"""
Main entry point of the in-person inspection analysis.

Keeps two views of the check answers apart:

- ``raw_checks``: exactly what the buyer recorded. Coverage, completeness and
  confidence are computed from this view only.
- ``effective_checks``: the raw answers with every unanswered key check
  filled in as "ok". Risks and the verdict are computed from this view.

Default-filling therefore never inflates completeness or confidence.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from ..models.analysis import (
    AnalysisResult,
    InferredSignals,
    NegotiationBand,
    NegotiationLeverageGroup,
    NegotiationPositioning,
    PriceGuidance,
    RiskItem,
)
from ..models.inspection import CheckAnswer, FollowUpPhoto, Imperfection, Photo, ScanProgress
from .evidence import build_evidence_summary
from .helpers import clamp, dedupe_imperfections, has_note, round_half_up
from .risks import build_risks
from .verdict import build_verdict

logger = logging.getLogger(__name__)

REQUIRED_PHOTO_STEP_IDS: Tuple[str, ...] = (
    "exterior-front",
    "exterior-side-left",
    "exterior-rear",
    "exterior-side-right",
)

KEY_CHECK_IDS: Tuple[str, ...] = (
    # Around the car
    "body-panels-paint",
    "headlights-condition",
    "windscreen-damage",
    "tyre-wear",
    "brakes-visible",
    
    # Cabin
    "interior-smell",
    "interior-condition",
    "seatbelts-trim",
    "aircon",
    
    # Drive
    "steering",
    "noise-hesitation",
    "adas-systems",
    
    # Ids from older versions of the checklist
    "body-panels",
    "paint",
    "glass-lights",
    "tyres",
    "underbody-leaks",
)

DEFAULT_FILL_CHECK_IDS: Tuple[str, ...] = tuple(dict.fromkeys(KEY_CHECK_IDS))

# Upper bound for band amounts; bands have floors but no real ceiling
BAND_CEILING = 999999

# stance -> (multiplier, low floor, high floor)
BAND_STANCES: Dict[str, Tuple[float, int, int]] = {
    "conservative": (0.7, 100, 250),
    "balanced": (1.0, 120, 380),
    "aggressive": (1.35, 150, 520),
}

LEVERAGE_FALLBACK = "• Confirm service history, ownership, and any recent repairs."

PRICE_GUIDANCE_DISCLAIMER = "Price guidance not yet enabled in the parallel analysis."


def with_default_filled_checks(raw_checks: Optional[Dict[str, CheckAnswer]]) -> Dict[str, CheckAnswer]:
    """Return a copy of the answers with unanswered key checks set to "ok"."""
    base = raw_checks if isinstance(raw_checks, dict) else {}
    filled = dict(base)
    
    for check_id in DEFAULT_FILL_CHECK_IDS:
        existing = filled.get(check_id)
        if existing is None or not existing.value:
            filled[check_id] = CheckAnswer(value="ok", note=existing.note if existing else None)
    
    return filled


def range_from_score(score: float) -> Tuple[int, int]:
    """Map a pressure score to a base (low, high) AUD adjustment range."""
    s = clamp(score, 0, 25)
    low = round_half_up(clamp(120 + s * 90, 120, 2600))
    high = round_half_up(clamp(380 + s * 170, 380, 6200))
    return low, max(high, low + 150)


def band_label(score: float) -> str:
    if score < 3:
        return "Very light"
    if score < 7:
        return "Light"
    if score < 12:
        return "Moderate"
    if score < 18:
        return "Strong"
    return "Very strong"


def band_rationale(
    stance: str,
    critical_count: int,
    moderate_count: int,
    unsure_count: int,
    completeness_score: int,
) -> str:
    parts: List[str] = []
    
    if critical_count > 0:
        parts.append(
            "A high-impact concern was recorded."
            if critical_count == 1
            else f"{critical_count} high-impact concerns were recorded."
        )
    elif moderate_count > 0:
        parts.append(
            "A meaningful concern was recorded."
            if moderate_count == 1
            else f"{moderate_count} meaningful concerns were recorded."
        )
    else:
        parts.append("No major concerns were recorded.")
    
    if unsure_count > 0:
        parts.append(
            "One item was marked unsure."
            if unsure_count == 1
            else f"{unsure_count} items were marked unsure."
        )
    
    if completeness_score < 55:
        parts.append("Overall evidence coverage is limited.")
    elif completeness_score < 75:
        parts.append("Evidence coverage is moderate.")
    else:
        parts.append("Evidence coverage is strong.")
    
    if stance == "conservative":
        parts.append("Use this range if you want minimal friction.")
    elif stance == "aggressive":
        parts.append("Use this range only if you’re prepared to walk away.")
    else:
        parts.append("This is a reasonable middle-ground position.")
    
    return " ".join(parts)


def pressure_score(
    critical_count: int,
    moderate_count: int,
    concern_count: int,
    unsure_count: int,
    confidence_score: int,
) -> float:
    uncertainty_penalty = clamp(100 - confidence_score, 0, 100)
    return (
        critical_count * 4.8
        + moderate_count * 2.2
        + concern_count * 1.2
        + unsure_count * 2.0
        + (uncertainty_penalty / 100) * 6
    )


def build_negotiation_positioning(
    score: float,
    critical_count: int,
    moderate_count: int,
    unsure_count: int,
    completeness_score: int,
) -> NegotiationPositioning:
    base_low, base_high = range_from_score(score)
    label = f"{band_label(score)} positioning"
    
    bands = {}
    for stance, (multiplier, low_floor, high_floor) in BAND_STANCES.items():
        bands[stance] = NegotiationBand(
            aud_low=int(clamp(round_half_up(base_low * multiplier), low_floor, BAND_CEILING)),
            aud_high=int(clamp(round_half_up(base_high * multiplier), high_floor, BAND_CEILING)),
            label=label,
            rationale=band_rationale(
                stance,
                critical_count=critical_count,
                moderate_count=moderate_count,
                unsure_count=unsure_count,
                completeness_score=completeness_score,
            ),
        )
    
    return NegotiationPositioning(**bands)


def build_negotiation_leverage(risks: List[RiskItem]) -> List[NegotiationLeverageGroup]:
    points = [f"• {r.label}: {r.explanation}" for r in risks if r.severity != "info"]
    return [NegotiationLeverageGroup(
        category="Evidence-based leverage",
        points=points or [LEVERAGE_FALLBACK],
    )]


def _mapping(value: Any) -> Dict[Any, Any]:
    return value if isinstance(value, dict) else {}


def _entries(value: Any, kind: type) -> List[Any]:
    if not isinstance(value, list):
        return []
    kept = [item for item in value if isinstance(item, kind)]
    if len(kept) != len(value):
        logger.debug(f"Ignored {len(value) - len(kept)} entries that are not {kind.__name__}")
    return kept


def analyse_in_person_inspection(
    progress: Union[ScanProgress, Dict[str, Any], None],
) -> AnalysisResult:
    """
    Analyse one in-person inspection record.
    
    Pure and deterministic: no I/O, no clock, no randomness. Never raises on
    missing or malformed input; an empty record simply yields a low-evidence
    result.
    
    Args:
        progress: The inspection record, or its decoded JSON form
        
    Returns:
        AnalysisResult
    """
    if not isinstance(progress, ScanProgress):
        progress = ScanProgress.from_dict(progress)
    
    # Instances built in code skip from_dict; drop entries of the wrong type
    raw_checks: Dict[str, CheckAnswer] = {
        str(check_id): answer
        for check_id, answer in _mapping(progress.checks).items()
        if isinstance(answer, CheckAnswer)
    }
    effective_checks = with_default_filled_checks(raw_checks)
    
    photos = _entries(progress.photos, Photo)
    follow_ups = _entries(progress.follow_up_photos, FollowUpPhoto)
    imperfections = dedupe_imperfections(_entries(progress.imperfections, Imperfection))
    
    # Photo coverage
    photo_steps = {p.step_id for p in photos}
    photos_captured_baseline = sum(1 for step_id in REQUIRED_PHOTO_STEP_IDS if step_id in photo_steps)
    photo_coverage = photos_captured_baseline / len(REQUIRED_PHOTO_STEP_IDS)
    
    # Check coverage, against the literal key-check list
    answered_key_checks = sum(
        1 for check_id in KEY_CHECK_IDS
        if raw_checks.get(check_id) is not None and raw_checks[check_id].value
    )
    check_coverage = answered_key_checks / len(KEY_CHECK_IDS)
    
    completeness_score = round_half_up(clamp(
        photo_coverage * 55 + check_coverage * 40 + (5 if follow_ups else 0),
        0,
        100,
    ))
    
    answers = [a for a in raw_checks.values() if a is not None]
    concern_count = sum(1 for a in answers if a.value == "concern")
    unsure_count = sum(1 for a in answers if a.value == "unsure")
    concern_with_notes = sum(1 for a in answers if a.value == "concern" and has_note(a.note))
    
    confidence_score = round_half_up(clamp(
        32 + completeness_score * 0.68 - unsure_count * 5 + concern_with_notes * 1.5,
        0,
        100,
    ))
    
    risks = build_risks(
        raw_checks=raw_checks,
        effective_checks=effective_checks,
        imperfections=imperfections,
        photos_captured_baseline=photos_captured_baseline,
        required_photo_count=len(REQUIRED_PHOTO_STEP_IDS),
    )
    
    evidence_summary = build_evidence_summary(
        raw_checks=raw_checks,
        imperfections=imperfections,
        photos=photos,
        follow_ups=follow_ups,
        key_checks_expected=len(KEY_CHECK_IDS),
        photos_expected=len(REQUIRED_PHOTO_STEP_IDS),
    )
    
    verdict_pack = build_verdict(
        risks=risks,
        concern_count=concern_count,
        unsure_count=unsure_count,
        completeness_score=completeness_score,
        confidence_score=confidence_score,
    )
    
    critical_count = sum(1 for r in risks if r.severity == "critical")
    moderate_count = sum(1 for r in risks if r.severity == "moderate")
    
    score = pressure_score(
        critical_count=critical_count,
        moderate_count=moderate_count,
        concern_count=concern_count,
        unsure_count=unsure_count,
        confidence_score=confidence_score,
    )
    
    negotiation_positioning = build_negotiation_positioning(
        score,
        critical_count=critical_count,
        moderate_count=moderate_count,
        unsure_count=unsure_count,
        completeness_score=completeness_score,
    )
    
    adas = raw_checks.get("adas-systems")
    adas_present_but_disabled = adas is not None and adas.value is not None and adas.value != "ok"
    
    logger.debug(
        f"Coverage: photos={photos_captured_baseline}/{len(REQUIRED_PHOTO_STEP_IDS)}, "
        f"key_checks={answered_key_checks}/{len(KEY_CHECK_IDS)}, pressure={score:.2f}"
    )
    logger.info(
        f"Inspection analysed: verdict={verdict_pack.verdict}, "
        f"confidence={confidence_score}, completeness={completeness_score}, "
        f"risks={len(risks)} (critical={critical_count}, moderate={moderate_count})"
    )
    
    return AnalysisResult(
        verdict=verdict_pack.verdict,
        verdict_reason=verdict_pack.verdict_reason,
        confidence_score=confidence_score,
        completeness_score=completeness_score,
        risks=risks,
        negotiation_leverage=build_negotiation_leverage(risks),
        negotiation_positioning=negotiation_positioning,
        why_this_verdict=verdict_pack.why_this_verdict,
        why_this_verdict_bullets=verdict_pack.why_this_verdict_bullets,
        evidence_summary=evidence_summary,
        risk_weighting_explanation=verdict_pack.risk_weighting_explanation,
        risk_weighting_bullets=verdict_pack.risk_weighting_bullets,
        uncertainty_factors=verdict_pack.uncertainty_factors,
        counterfactuals=verdict_pack.counterfactuals,
        buyer_context_interpretation=verdict_pack.buyer_context_interpretation,
        inferred_signals=InferredSignals(
            adas_present_but_disabled=adas_present_but_disabled,
            confidence=50 if adas_present_but_disabled else 10,
        ),
        price_guidance=PriceGuidance(disclaimer=PRICE_GUIDANCE_DISCLAIMER),
    )
