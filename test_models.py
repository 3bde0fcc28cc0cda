"""Tests for decoding inspection records and encoding analysis results."""

from carverity import analyse_in_person_inspection
from carverity.models.inspection import ScanProgress


def test_from_dict_reads_camel_case_keys():
    progress = ScanProgress.from_dict({
        "type": "in-person",
        "scanId": "scan-42",
        "step": "/scan/in-person/summary",
        "askingPrice": 18500,
        "checks": {"aircon": {"value": "concern", "note": "weak"}},
        "photos": [{"id": "p1", "stepId": "exterior-front", "dataUrl": "data:,"}],
        "followUpPhotos": [{"id": "f1", "stepId": "aircon", "note": "vent"}],
        "imperfections": [{"id": "i1", "label": "Scratch", "severity": "minor"}],
    })
    
    assert progress.scan_id == "scan-42"
    assert progress.asking_price == 18500
    assert progress.checks["aircon"].value == "concern"
    assert progress.photos[0].step_id == "exterior-front"
    assert progress.follow_up_photos[0].note == "vent"
    assert progress.imperfections[0].label == "Scratch"


def test_from_dict_drops_malformed_entries():
    progress = ScanProgress.from_dict({
        "checks": {"aircon": "ok", "steering": {"value": "ok"}},
        "photos": ["not-a-photo", {"id": "p1", "stepId": "exterior-rear"}],
        "imperfections": "none",
    })
    
    assert list(progress.checks) == ["steering"]
    assert len(progress.photos) == 1
    assert progress.imperfections == []


def test_from_dict_rejects_bad_prices():
    for price in ("18500", True, float("inf"), float("nan"), None):
        assert ScanProgress.from_dict({"askingPrice": price}).asking_price is None


def test_from_dict_non_object_is_empty_record():
    progress = ScanProgress.from_dict(["checks"])
    
    assert progress.checks == {}
    assert progress.photos == []


def test_result_to_dict_uses_camel_case(full_progress):
    data = analyse_in_person_inspection(full_progress).to_dict()
    
    assert set(data) == {
        "verdict",
        "verdictReason",
        "confidenceScore",
        "completenessScore",
        "risks",
        "negotiationLeverage",
        "negotiationPositioning",
        "whyThisVerdict",
        "whyThisVerdictBullets",
        "evidenceSummary",
        "riskWeightingExplanation",
        "riskWeightingBullets",
        "uncertaintyFactors",
        "counterfactuals",
        "buyerContextInterpretation",
        "inferredSignals",
        "priceGuidance",
    }
    assert set(data["negotiationPositioning"]["balanced"]) == {"audLow", "audHigh", "label", "rationale"}
    assert data["evidenceSummary"]["keyChecksExpected"] == 17
    assert data["inferredSignals"] == {"adasPresentButDisabled": False, "confidence": 10}
    assert data["priceGuidance"]["askingPriceAud"] is None
