"""Generic helpers shared by the analysis engine components."""

import math
import re
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from ..models.inspection import Imperfection

LOCATION_SEPARATOR = " • "


def clamp(n: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, n))


def round_half_up(n: float) -> int:
    """Round to the nearest integer, with .5 always rounding up."""
    return int(math.floor(n + 0.5))


def has_note(note: Optional[str]) -> bool:
    """A note counts as evidence once it has at least 5 non-blank characters."""
    return len((note or "").strip()) >= 5


def severity_weight(severity: Optional[str]) -> int:
    if severity == "major":
        return 3
    if severity == "moderate":
        return 2
    return 1


def title_from_id(check_id: str) -> str:
    spaced = re.sub(r"[-_]", " ", check_id)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)


def as_one_line(s: str) -> str:
    return re.sub(r"\s+", " ", s).strip()


def norm_key(s: Optional[str]) -> str:
    """
    Canonical form used for identity and keyword matching.
    
    Lowercases, drops punctuation other than spaces and hyphens, and
    collapses whitespace.
    """
    text = as_one_line("" if s is None else str(s)).lower()
    text = re.sub(r"[^\w\s-]", "", text)
    return re.sub(r"\s+", " ", text).strip()


CHECK_LABELS: Mapping[str, str] = MappingProxyType({
    # Cabin
    "interior-smell": "Smell or moisture",
    "interior-condition": "General interior condition",
    "seat-adjustment": "Seat adjustment & stability",
    "windows-mirrors": "Windows & mirrors",
    "windows-operation": "Windows operation",
    "mirrors-operation": "Mirrors operation",
    "seatbelts-trim": "Seatbelts & airbag trim",
    "aircon": "Air-conditioning",
    
    # Drive
    "steering": "Steering & handling feel",
    "noise-hesitation": "Noise / hesitation under power",
    "adas-systems": "Driver-assist systems (if fitted)",
    
    # Exterior, including ids from older versions of the checklist
    "body-panels-paint": "Body panels & paint",
    "headlights-condition": "Headlights condition",
    "windscreen-damage": "Windscreen damage",
    "tyre-wear": "Tyre wear & tread",
    "brakes-visible": "Brake discs (if visible)",
    "body-panels": "Body panels & alignment",
    "paint": "Paint condition",
    "glass-lights": "Glass & lights",
    "tyres": "Tyres condition",
    "underbody-leaks": "Visible fluid leaks (if noticed)",
})


def label_for_check_id(check_id: str) -> str:
    return CHECK_LABELS.get(check_id) or title_from_id(check_id)


def dedupe_imperfections(imperfections: List[Imperfection]) -> List[Imperfection]:
    """
    Merge imperfections that describe the same defect.
    
    Two entries are the same defect when their normalised label (or id),
    severity and normalised note all match. Their locations are unioned and
    joined with " • ". The merged list is sorted by severity (major first),
    then by normalised label.
    
    Args:
        imperfections: Imperfections as recorded
        
    Returns:
        Deduplicated imperfections. Lists of zero or one entry are returned
        as they are.
    """
    items = imperfections if isinstance(imperfections, list) else []
    if len(items) <= 1:
        return items
    
    groups: Dict[str, dict] = {}
    
    for index, imp in enumerate(items):
        label = (imp.label or "").strip()
        note = (imp.note or "").strip()
        severity = imp.severity or "minor"
        
        base_id = (imp.id or "").strip()
        identity = norm_key(label or base_id or "imperfection")
        
        # Severity is part of the key so a minor and a major never merge
        key = f"{identity}__{severity}__{norm_key(note)}"
        
        location = as_one_line(imp.location or "")
        
        existing = groups.get(key)
        if existing is None:
            groups[key] = {
                "id": base_id or identity or f"imp-{index}",
                "label": label or None,
                "severity": severity,
                "note": note or None,
                "locations": [location] if location else [],
            }
        elif location and location not in existing["locations"]:
            existing["locations"].append(location)
    
    merged = []
    for agg in groups.values():
        locations = agg["locations"]
        merged.append(Imperfection(
            id=agg["id"],
            label=agg["label"],
            severity=agg["severity"],
            note=agg["note"],
            location=LOCATION_SEPARATOR.join(locations) if locations else None,
        ))
    
    # Plain code-point order on the normalised label, not locale collation
    merged.sort(key=lambda imp: (-severity_weight(imp.severity), norm_key(imp.label or imp.id)))
    return merged
