"""End-to-end tests for analyse_in_person_inspection."""

import copy

import pytest

from carverity import analyse_in_person_inspection
from carverity.engine.orchestrator import (
    KEY_CHECK_IDS,
    PRICE_GUIDANCE_DISCLAIMER,
    band_label,
    range_from_score,
    with_default_filled_checks,
)
from carverity.models.inspection import CheckAnswer, Imperfection, ScanProgress


def _assert_band_invariants(result):
    positioning = result.negotiation_positioning
    for band in (positioning.conservative, positioning.balanced, positioning.aggressive):
        assert band.aud_low <= band.aud_high
    assert positioning.conservative.aud_low <= positioning.balanced.aud_low <= positioning.aggressive.aud_low
    assert positioning.conservative.aud_high <= positioning.balanced.aud_high <= positioning.aggressive.aud_high
    assert 0 <= result.confidence_score <= 100
    assert 0 <= result.completeness_score <= 100


def test_empty_record_walks_away(empty_progress):
    """Nothing recorded: low evidence, and the confidence floor forces walk-away."""
    result = analyse_in_person_inspection(empty_progress)
    
    assert result.completeness_score == 0
    assert result.confidence_score == 32
    assert result.verdict == "walk-away"
    assert [r.id for r in result.risks] == ["missing-photos"]
    assert result.evidence_summary.checks_completed == 0
    _assert_band_invariants(result)


def test_none_and_garbage_input_never_raise():
    for payload in (None, [], "scan", 42, {"checks": "nope", "photos": {"a": 1}}):
        result = analyse_in_person_inspection(payload)
        assert result.verdict == "walk-away"


def test_malformed_entries_in_scan_progress_are_ignored(full_progress):
    """Instances built in code may hold entries of the wrong type."""
    progress = ScanProgress.from_dict(full_progress)
    progress.checks["aircon"] = {"value": "concern"}
    progress.checks["steering"] = None
    progress.photos.append(None)
    progress.follow_up_photos = [{"id": "f1"}]
    progress.imperfections = [None, Imperfection(id="a", label="Dent", severity="major"), "scratch"]
    
    result = analyse_in_person_inspection(progress)
    
    assert result.verdict == "caution"
    assert [r.id for r in result.risks] == ["imp-a"]
    assert result.evidence_summary.photos_captured == 4
    assert result.evidence_summary.follow_up_photos_captured == 0
    assert result.evidence_summary.checks_completed == 15


def test_scan_progress_with_only_bad_entries_never_raises():
    progress = ScanProgress(
        checks={"aircon": {"value": "concern"}},
        photos=[None],
        imperfections=[None],
    )
    result = analyse_in_person_inspection(progress)
    
    assert result.verdict == "walk-away"
    assert result.completeness_score == 0


def test_full_positive_record_proceeds(full_progress):
    result = analyse_in_person_inspection(full_progress)
    
    assert result.completeness_score == 95
    assert result.confidence_score == 97
    assert result.verdict == "proceed"
    assert result.risks == []
    assert result.negotiation_leverage[0].points == [
        "• Confirm service history, ownership, and any recent repairs."
    ]
    
    balanced = result.negotiation_positioning.balanced
    assert (balanced.aud_low, balanced.aud_high) == (136, 411)
    assert balanced.label == "Very light positioning"
    conservative = result.negotiation_positioning.conservative
    assert (conservative.aud_low, conservative.aud_high) == (100, 288)
    assert conservative.rationale == (
        "No major concerns were recorded. Evidence coverage is strong. "
        "Use this range if you want minimal friction."
    )
    _assert_band_invariants(result)


def test_follow_up_photo_adds_completeness(full_progress):
    full_progress["followUpPhotos"] = [{"id": "f1", "stepId": "aircon"}]
    result = analyse_in_person_inspection(full_progress)
    
    assert result.completeness_score == 100
    assert result.confidence_score == 100


def test_single_major_imperfection_is_caution(full_progress):
    full_progress["imperfections"] = [
        {"id": "i1", "label": "Deep dent", "severity": "major", "location": "Rear door"},
    ]
    result = analyse_in_person_inspection(full_progress)
    
    assert result.verdict == "caution"
    assert result.confidence_score == 97
    assert result.risks[0].id == "imp-i1"
    assert result.risks[0].severity == "critical"


def test_two_critical_concerns_walk_away(full_progress):
    full_progress["checks"]["steering"] = {"value": "concern", "note": "pulls hard to the left"}
    full_progress["checks"]["underbody-leaks"] = {"value": "concern"}
    result = analyse_in_person_inspection(full_progress)
    
    assert result.verdict == "walk-away"
    assert result.evidence_summary.summary.startswith("You recorded 2 items that stood out.")


def test_default_fill_does_not_inflate_coverage():
    """A single answered key check counts as 1 of 17, not as full coverage."""
    progress = {
        "checks": {"aircon": {"value": "ok"}},
        "photos": [
            {"id": f"p{i}", "stepId": step}
            for i, step in enumerate(
                ["exterior-front", "exterior-side-left", "exterior-rear", "exterior-side-right"]
            )
        ],
    }
    result = analyse_in_person_inspection(progress)
    
    assert result.completeness_score == 57
    assert result.confidence_score == 71
    assert result.verdict == "proceed"


def test_many_unsure_answers_clamp_scores():
    progress = {"checks": {f"custom-{i}": {"value": "unsure"} for i in range(40)}}
    result = analyse_in_person_inspection(progress)
    
    assert result.confidence_score == 0
    assert result.verdict == "walk-away"
    balanced = result.negotiation_positioning.balanced
    assert (balanced.aud_low, balanced.aud_high) == (2370, 4630)
    assert balanced.label == "Very strong positioning"
    _assert_band_invariants(result)


def test_duplicate_imperfections_are_merged(full_progress):
    full_progress["imperfections"] = [
        {"id": "a", "label": "Scratch", "severity": "minor", "location": "Front bumper"},
        {"id": "b", "label": "Scratch", "severity": "minor", "location": "Rear door"},
    ]
    result = analyse_in_person_inspection(full_progress)
    
    assert result.evidence_summary.imperfections_noted == 1
    assert "Minor note: Scratch (Front bumper • Rear door)." in result.evidence_summary.bullets


@pytest.mark.parametrize("answer, flagged, confidence", [
    ({"value": "concern"}, True, 50),
    ({"value": "unsure"}, True, 50),
    ({"value": "ok"}, False, 10),
    (None, False, 10),
])
def test_adas_signal(full_progress, answer, flagged, confidence):
    if answer is None:
        del full_progress["checks"]["adas-systems"]
    else:
        full_progress["checks"]["adas-systems"] = answer
    result = analyse_in_person_inspection(full_progress)
    
    assert result.inferred_signals.adas_present_but_disabled is flagged
    assert result.inferred_signals.confidence == confidence


def test_price_guidance_is_inert(full_progress):
    full_progress["askingPrice"] = 18500
    guidance = analyse_in_person_inspection(full_progress).price_guidance
    
    assert guidance.asking_price_aud is None
    assert guidance.adjusted_price_low_aud is None
    assert guidance.suggested_reduction_high_aud is None
    assert guidance.disclaimer == PRICE_GUIDANCE_DISCLAIMER


def test_analysis_is_deterministic_and_leaves_input_alone(full_progress):
    full_progress["checks"]["aircon"] = {"value": "concern", "note": "not cooling at all"}
    before = copy.deepcopy(full_progress)
    
    first = analyse_in_person_inspection(full_progress).to_dict()
    second = analyse_in_person_inspection(full_progress).to_dict()
    
    assert first == second
    assert full_progress == before


def test_accepts_scan_progress_instances():
    progress = ScanProgress(checks={"steering": CheckAnswer(value="concern")})
    result = analyse_in_person_inspection(progress)
    
    assert "check-steering" in [r.id for r in result.risks]
    assert "steering" in progress.checks
    assert "aircon" not in progress.checks


def test_with_default_filled_checks_keeps_raw_untouched():
    raw = {"aircon": CheckAnswer(note="only a note")}
    filled = with_default_filled_checks(raw)
    
    assert filled["aircon"] == CheckAnswer(value="ok", note="only a note")
    assert set(KEY_CHECK_IDS) <= set(filled)
    assert raw == {"aircon": CheckAnswer(note="only a note")}


def test_range_from_score_clamps_score():
    assert range_from_score(-5) == range_from_score(0) == (120, 380)
    assert range_from_score(40) == range_from_score(25)


def test_band_labels():
    assert band_label(0) == "Very light"
    assert band_label(3) == "Light"
    assert band_label(7) == "Moderate"
    assert band_label(12) == "Strong"
    assert band_label(18) == "Very strong"
