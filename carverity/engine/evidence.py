"""Evidence summary builder: what the buyer captured, in plain language."""

from typing import Dict, List

from ..models.analysis import EvidenceSummary
from ..models.inspection import CheckAnswer, FollowUpPhoto, Imperfection, Photo
from .helpers import as_one_line, label_for_check_id, severity_weight

MAX_EVIDENCE_BULLETS = 14

_ANSWER_RANK = {"concern": 0, "unsure": 1}
_SEVERITY_WORDS = {"major": "Major", "moderate": "Moderate"}


def build_evidence_bullets(
    raw_checks: Dict[str, CheckAnswer],
    imperfections: List[Imperfection],
    photos: List[Photo],
    follow_ups: List[FollowUpPhoto],
) -> List[str]:
    """
    Build buyer-facing evidence bullets.
    
    Only checks the buyer actually answered are considered. Items that stood
    out come first, then items that could not be confirmed. Imperfections
    follow, most severe first, then photo counts. A quiet scan falls back to
    naming up to three checks marked normal.
    
    Args:
        raw_checks: Check answers exactly as recorded
        imperfections: Deduplicated imperfections
        photos: Guided photos
        follow_ups: Follow-up photos
        
    Returns:
        At most 14 bullets
    """
    bullets: List[str] = []
    
    answered = [(check_id, answer) for check_id, answer in raw_checks.items() if answer and answer.value]
    answered.sort(key=lambda item: _ANSWER_RANK.get(item[1].value, 2))
    
    for check_id, answer in answered:
        label = label_for_check_id(check_id)
        note = (answer.note or "").strip()
        
        if answer.value == "concern":
            bullets.append(
                f"{label}: something stood out — {as_one_line(note)}."
                if note else f"{label}: something stood out."
            )
        elif answer.value == "unsure":
            bullets.append(
                f"{label}: couldn’t confirm — {as_one_line(note)}."
                if note else f"{label}: couldn’t confirm."
            )
    
    for imp in sorted(imperfections, key=lambda i: -severity_weight(i.severity)):
        severity_word = _SEVERITY_WORDS.get(imp.severity, "Minor")
        label = (imp.label or "Imperfection").strip()
        location = (imp.location or "").strip()
        note = (imp.note or "").strip()
        
        location_part = f" ({location})" if location else ""
        bullets.append(
            f"{severity_word} note: {label}{location_part} — {as_one_line(note)}."
            if note else f"{severity_word} note: {label}{location_part}."
        )
    
    if photos:
        bullets.append(f"Photos captured: {len(photos)}.")
    
    if follow_ups:
        bullets.append(f"Follow-up notes/photos: {len(follow_ups)}.")
    
    if not bullets:
        ok_items = [
            label_for_check_id(check_id)
            for check_id, answer in raw_checks.items()
            if answer and answer.value == "ok"
        ][:3]
        
        if ok_items:
            bullets.append(f"Checks marked normal: {', '.join(ok_items)}.")
        
        if photos:
            bullets.append(f"Photos captured: {len(photos)}.")
    
    return bullets[:MAX_EVIDENCE_BULLETS]


def build_evidence_summary_text(
    concern_count: int,
    unsure_count: int,
    imperfections_count: int,
    photos_count: int,
    follow_ups_count: int,
) -> str:
    parts: List[str] = []
    
    if concern_count > 0:
        parts.append(
            "You recorded 1 item that stood out."
            if concern_count == 1
            else f"You recorded {concern_count} items that stood out."
        )
    else:
        parts.append("You didn’t mark any items as ‘stood out’ in the checks you completed.")
    
    if unsure_count > 0:
        parts.append(
            "1 item couldn’t be confirmed."
            if unsure_count == 1
            else f"{unsure_count} items couldn’t be confirmed."
        )
    
    if imperfections_count > 0:
        parts.append(
            "You recorded 1 imperfection."
            if imperfections_count == 1
            else f"You recorded {imperfections_count} imperfections."
        )
    
    if photos_count > 0:
        parts.append(f"You captured {photos_count} photo{'' if photos_count == 1 else 's'}.")
    
    if follow_ups_count > 0:
        parts.append(f"You added {follow_ups_count} follow-up note{'' if follow_ups_count == 1 else 's'}.")
    
    return " ".join(parts)


def build_evidence_summary(
    raw_checks: Dict[str, CheckAnswer],
    imperfections: List[Imperfection],
    photos: List[Photo],
    follow_ups: List[FollowUpPhoto],
    key_checks_expected: int,
    photos_expected: int,
) -> EvidenceSummary:
    """
    Build the evidence summary shown at the top of the report.
    
    Counts come from the raw record. ``checks_completed`` counts every
    answered check, not only the key checks.
    """
    answers = list(raw_checks.values())
    
    concern_count = sum(1 for a in answers if a and a.value == "concern")
    unsure_count = sum(1 for a in answers if a and a.value == "unsure")
    
    explicitly_uncertain_items = [
        f"{label_for_check_id(check_id)} — {answer.note}" if answer.note else label_for_check_id(check_id)
        for check_id, answer in raw_checks.items()
        if answer and answer.value == "unsure"
    ]
    
    bullets = build_evidence_bullets(raw_checks, imperfections, photos, follow_ups)
    
    summary = build_evidence_summary_text(
        concern_count=concern_count,
        unsure_count=unsure_count,
        imperfections_count=len(imperfections),
        photos_count=len(photos),
        follow_ups_count=len(follow_ups),
    )
    
    return EvidenceSummary(
        summary=summary,
        bullets=bullets,
        photos_captured=len(photos),
        photos_expected=photos_expected,
        checks_completed=sum(1 for a in answers if a and a.value),
        key_checks_expected=key_checks_expected,
        imperfections_noted=len(imperfections),
        follow_up_photos_captured=len(follow_ups),
        explicitly_uncertain_items=explicitly_uncertain_items,
    )
