"""Inspection input data models."""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class CheckAnswer:
    """
    Result of one inspection checklist item.
    
    Attributes:
        value: Answer given by the buyer (ok, concern, unsure). May be empty
            when the buyer only typed a note.
        note: Optional free-text note
    """
    value: Optional[str] = None  # "ok" | "concern" | "unsure"
    note: Optional[str] = None


@dataclass
class Photo:
    """
    A captured photo tagged with the guided step it satisfies.
    
    Attributes:
        id: Photo identifier
        step_id: Guided capture step (e.g. "exterior-front")
        data_url: Opaque image reference, never inspected by the engine
    """
    id: str
    step_id: str
    data_url: str = ""


@dataclass
class FollowUpPhoto:
    """
    A follow-up photo taken to document something specific.
    
    Attributes:
        id: Photo identifier
        step_id: Step the follow-up belongs to
        data_url: Opaque image reference
        note: Optional note attached by the buyer
    """
    id: str
    step_id: str = ""
    data_url: str = ""
    note: Optional[str] = None


@dataclass
class Imperfection:
    """
    A free-form defect noted during the inspection.
    
    Attributes:
        id: Imperfection identifier
        label: Optional short description (e.g. "Scratch")
        severity: Severity level (minor, moderate, major)
        location: Optional location on the vehicle
        note: Optional free-text note
    """
    id: str
    label: Optional[str] = None
    severity: Optional[str] = None  # "minor" | "moderate" | "major"
    location: Optional[str] = None
    note: Optional[str] = None


@dataclass
class ScanProgress:
    """
    The in-person inspection record, as persisted by the front end.
    
    Attributes:
        type: Scan type (e.g. "in-person")
        scan_id: Scan identifier
        step: Last route the buyer visited
        asking_price: Advertised price in AUD, if entered
        checks: Mapping of check id to answer
        photos: Guided photos
        follow_up_photos: Follow-up photos
        imperfections: Noted imperfections
    """
    type: Optional[str] = None
    scan_id: Optional[str] = None
    step: Optional[str] = None
    asking_price: Optional[float] = None
    checks: Dict[str, CheckAnswer] = field(default_factory=dict)
    photos: List[Photo] = field(default_factory=list)
    follow_up_photos: List[FollowUpPhoto] = field(default_factory=list)
    imperfections: List[Imperfection] = field(default_factory=list)
    
    @classmethod
    def from_dict(cls, payload: Any) -> "ScanProgress":
        """
        Decode the camelCase record the front end stores.
        
        Never raises. Anything that does not have the expected shape is
        dropped or replaced by an empty default.
        
        Args:
            payload: Decoded JSON object
            
        Returns:
            ScanProgress instance
        """
        if not isinstance(payload, dict):
            logger.debug(f"Scan progress payload is {type(payload).__name__}, using empty record")
            return cls()
        
        checks: Dict[str, CheckAnswer] = {}
        raw_checks = payload.get("checks")
        if isinstance(raw_checks, dict):
            for check_id, answer in raw_checks.items():
                if not isinstance(answer, dict):
                    logger.debug(f"Dropping check '{check_id}': answer is not an object")
                    continue
                checks[str(check_id)] = CheckAnswer(
                    value=_opt_str(answer.get("value")),
                    note=_opt_str(answer.get("note")),
                )
        elif raw_checks is not None:
            logger.debug("Ignoring 'checks': not an object")
        
        photos = [
            Photo(
                id=_str(item.get("id")),
                step_id=_str(item.get("stepId")),
                data_url=_str(item.get("dataUrl")),
            )
            for item in _records(payload, "photos")
        ]
        
        follow_ups = [
            FollowUpPhoto(
                id=_str(item.get("id")),
                step_id=_str(item.get("stepId")),
                data_url=_str(item.get("dataUrl")),
                note=_opt_str(item.get("note")),
            )
            for item in _records(payload, "followUpPhotos")
        ]
        
        imperfections = [
            Imperfection(
                id=_str(item.get("id")),
                label=_opt_str(item.get("label")),
                severity=_opt_str(item.get("severity")),
                location=_opt_str(item.get("location")),
                note=_opt_str(item.get("note")),
            )
            for item in _records(payload, "imperfections")
        ]
        
        return cls(
            type=_opt_str(payload.get("type")),
            scan_id=_opt_str(payload.get("scanId")),
            step=_opt_str(payload.get("step")),
            asking_price=_opt_price(payload.get("askingPrice")),
            checks=checks,
            photos=photos,
            follow_up_photos=follow_ups,
            imperfections=imperfections,
        )


def _records(payload: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    items = payload.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        logger.debug(f"Ignoring '{key}': not a list")
        return []
    records = [item for item in items if isinstance(item, dict)]
    if len(records) != len(items):
        logger.debug(f"Dropped {len(items) - len(records)} malformed entries from '{key}'")
    return records


def _str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _opt_price(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return value
