"""Tests for the evidence summary."""

from carverity.engine.evidence import (
    MAX_EVIDENCE_BULLETS,
    build_evidence_bullets,
    build_evidence_summary,
    build_evidence_summary_text,
)
from carverity.models.inspection import CheckAnswer, FollowUpPhoto, Imperfection, Photo


def test_summary_text_counts_and_plurals():
    text = build_evidence_summary_text(
        concern_count=1,
        unsure_count=2,
        imperfections_count=0,
        photos_count=1,
        follow_ups_count=2,
    )
    assert text == (
        "You recorded 1 item that stood out. 2 items couldn’t be confirmed. "
        "You captured 1 photo. You added 2 follow-up notes."
    )


def test_summary_text_when_nothing_stood_out():
    text = build_evidence_summary_text(0, 0, 0, 0, 0)
    assert text == "You didn’t mark any items as ‘stood out’ in the checks you completed."


def test_bullets_order_concerns_before_unsure():
    checks = {
        "steering": CheckAnswer(value="unsure"),
        "aircon": CheckAnswer(value="concern", note="blows  warm"),
        "tyre-wear": CheckAnswer(value="ok"),
    }
    bullets = build_evidence_bullets(checks, [], [], [])
    
    assert bullets == [
        "Air-conditioning: something stood out — blows warm.",
        "Steering & handling feel: couldn’t confirm.",
    ]


def test_bullets_include_imperfections_and_counts():
    imps = [
        Imperfection(id="a", label="Stone chip", severity="minor"),
        Imperfection(id="b", label="Dent", severity="major", location="Rear door", note="deep"),
    ]
    photos = [Photo(id="p1", step_id="exterior-front")]
    follow_ups = [FollowUpPhoto(id="f1")]
    bullets = build_evidence_bullets({}, imps, photos, follow_ups)
    
    assert bullets == [
        "Major note: Dent (Rear door) — deep.",
        "Minor note: Stone chip.",
        "Photos captured: 1.",
        "Follow-up notes/photos: 1.",
    ]


def test_quiet_scan_names_normal_checks():
    checks = {check_id: CheckAnswer(value="ok") for check_id in ("aircon", "steering", "tyre-wear", "paint")}
    bullets = build_evidence_bullets(checks, [], [], [])
    
    assert bullets == ["Checks marked normal: Air-conditioning, Steering & handling feel, Tyre wear & tread."]


def test_bullets_are_capped():
    checks = {f"custom-{i}": CheckAnswer(value="concern") for i in range(20)}
    bullets = build_evidence_bullets(checks, [], [], [])
    
    assert len(bullets) == MAX_EVIDENCE_BULLETS


def test_summary_uses_raw_answers():
    checks = {
        "aircon": CheckAnswer(value="unsure", note="hard to tell"),
        "sunroof": CheckAnswer(value="ok"),
        "steering": CheckAnswer(),
    }
    summary = build_evidence_summary(checks, [], [], [], key_checks_expected=17, photos_expected=4)
    
    assert summary.checks_completed == 2
    assert summary.key_checks_expected == 17
    assert summary.photos_expected == 4
    assert summary.explicitly_uncertain_items == ["Air-conditioning — hard to tell"]
