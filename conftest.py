"""Shared fixtures for the inspection analysis tests."""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from carverity.engine.orchestrator import KEY_CHECK_IDS, REQUIRED_PHOTO_STEP_IDS


def all_photos():
    return [
        {"id": f"p{i}", "stepId": step_id, "dataUrl": "data:image/jpeg;base64,AAAA"}
        for i, step_id in enumerate(REQUIRED_PHOTO_STEP_IDS)
    ]


def all_checks_ok():
    return {check_id: {"value": "ok"} for check_id in KEY_CHECK_IDS}


@pytest.fixture
def empty_progress():
    return {"checks": {}, "photos": [], "followUpPhotos": [], "imperfections": []}


@pytest.fixture
def full_progress():
    """Every key check answered ok and every baseline photo captured."""
    return {
        "type": "in-person",
        "scanId": "scan-full",
        "checks": all_checks_ok(),
        "photos": all_photos(),
        "followUpPhotos": [],
        "imperfections": [],
    }
