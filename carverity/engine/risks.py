"""Risk builder: turns check answers and imperfections into risk findings."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..models.analysis import RiskItem
from ..models.inspection import CheckAnswer, Imperfection
from .helpers import as_one_line, has_note, norm_key, severity_weight

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckRiskRule:
    """
    How a "concern" answer on one check becomes a risk.
    
    Attributes:
        check_id: Check identifier
        label: Risk label
        moderate_text: Explanation used when no note was written
        critical_text: Explanation used for critical findings without a note
        keywords: Normalised phrases in the buyer's note that escalate the
            risk to critical
        default_severity: Severity when no keyword matches
    """
    check_id: str
    label: str
    moderate_text: str
    critical_text: Optional[str] = None
    keywords: Tuple[str, ...] = ()
    default_severity: str = "moderate"
    
    def severity_for(self, raw_note: str) -> str:
        if self.keywords and has_note(raw_note):
            note_key = norm_key(raw_note)
            if any(keyword in note_key for keyword in self.keywords):
                return "critical"
        return self.default_severity
    
    def explanation_for(self, raw_note: str, severity: str) -> str:
        if raw_note:
            return as_one_line(raw_note)
        if severity == "critical" and self.critical_text:
            return self.critical_text
        return self.moderate_text


# Evaluated in order; the order is the order risks appear in the report.
CHECK_RISK_RULES: Tuple[CheckRiskRule, ...] = (
    CheckRiskRule(
        check_id="body-panels-paint",
        label="Body panels or paint stood out",
        moderate_text=(
            "Uneven panel gaps, mismatched paint, or overspray can point to "
            "previous repairs. Ask about accident history."
        ),
        critical_text=(
            "Signs of structural repair or significant accident damage should "
            "be independently inspected before proceeding."
        ),
        keywords=("structural", "accident damage", "rust through", "hail damage", "major dent"),
    ),
    CheckRiskRule(
        check_id="headlights-condition",
        label="Headlights condition stood out",
        moderate_text=(
            "Cloudy/yellow headlights, cracks, or moisture inside can reduce "
            "night visibility and may require restoration or replacement."
        ),
        critical_text=(
            "A headlight that is broken or not working is a roadworthiness "
            "issue and needs fixing before the car is driven at night."
        ),
        keywords=("not working", "broken", "smashed", "water inside"),
    ),
    CheckRiskRule(
        check_id="windscreen-damage",
        label="Windscreen damage recorded",
        moderate_text="Windscreen chips can spread and become more expensive to fix.",
        critical_text=(
            "A crack or damage in the driver’s view can be a safety issue and "
            "may require replacement."
        ),
        keywords=("crack", "driver", "line crack", "long crack"),
    ),
    CheckRiskRule(
        check_id="tyre-wear",
        label="Tyre wear stood out",
        moderate_text=(
            "Uneven wear can hint at alignment or suspension issues, and worn "
            "tyres will need replacing soon."
        ),
        critical_text=(
            "Very low tread or damaged tyres are a safety issue and should be "
            "replaced before regular use."
        ),
        keywords=("very low tread", "bald", "cord showing", "bulge", "dry rot"),
    ),
    CheckRiskRule(
        check_id="brakes-visible",
        label="Brake condition stood out",
        moderate_text=(
            "Scoring or grooves on the visible brake discs can mean a brake "
            "service is due soon."
        ),
        critical_text=(
            "Brakes that look worn thin or heavily damaged are a safety item "
            "and should be inspected before driving further."
        ),
        keywords=("worn thin", "deep grooves", "grinding", "metal on metal"),
    ),
    CheckRiskRule(
        check_id="interior-smell",
        label="Smell or moisture noticed in the cabin",
        moderate_text=(
            "Damp or musty smells can point to water leaks or past water "
            "exposure."
        ),
        critical_text=(
            "Signs of flood exposure or ongoing water entry can lead to "
            "electrical faults and corrosion."
        ),
        keywords=("flood", "water damage", "wet carpet", "mould", "mold"),
    ),
    CheckRiskRule(
        check_id="interior-condition",
        label="Interior condition stood out",
        moderate_text=(
            "Wear beyond what the age and kilometres suggest is worth raising "
            "when discussing price."
        ),
    ),
    CheckRiskRule(
        check_id="seat-adjustment",
        label="Seat adjustment or stability concern",
        moderate_text=(
            "Seat movement or adjustment stood out. A loose or unstable seat "
            "can affect driving comfort and control."
        ),
    ),
    CheckRiskRule(
        check_id="windows-operation",
        label="Windows not operating normally",
        moderate_text=(
            "Windows didn’t behave as expected. Electrical or mechanical "
            "issues here can affect daily usability."
        ),
    ),
    CheckRiskRule(
        check_id="mirrors-operation",
        label="Mirrors not operating normally",
        moderate_text=(
            "Mirrors didn’t adjust or fold as expected. This is usually a "
            "motor or switch fault."
        ),
    ),
    CheckRiskRule(
        check_id="seatbelts-trim",
        label="Seatbelt or airbag trim concern",
        moderate_text=(
            "Fraying belts or loose trim should be checked. Seatbelts and "
            "airbags are safety items."
        ),
        critical_text=(
            "Damaged seatbelts or airbag trim that looks tampered with can "
            "indicate a past airbag deployment or a safety defect."
        ),
        keywords=("frayed", "tampered", "airbag light", "wont retract"),
    ),
    CheckRiskRule(
        check_id="aircon",
        label="Air-conditioning concern recorded",
        moderate_text="Air-conditioning behaviour stood out during use.",
        critical_text=(
            "Air-conditioning that doesn’t cool can mean a compressor or "
            "system fault, which can be costly to repair."
        ),
        keywords=("not cooling", "no cooling", "no cold", "blowing hot", "compressor", "failed", "not working"),
    ),
    CheckRiskRule(
        check_id="noise-hesitation",
        label="Engine or drivetrain behaviour stood out",
        moderate_text=(
            "Unusual hesitation or noises during driving may indicate "
            "underlying mechanical issues."
        ),
        default_severity="critical",
    ),
    CheckRiskRule(
        check_id="steering",
        label="Steering or handling concern",
        moderate_text=(
            "If steering feel or handling stood out, alignment or suspension "
            "issues may be present."
        ),
        default_severity="critical",
    ),
    CheckRiskRule(
        check_id="adas-systems",
        label="Driver-assist systems may not be behaving predictably",
        moderate_text="Driver-assist systems should operate consistently with no warnings.",
    ),
    CheckRiskRule(
        check_id="underbody-leaks",
        label="Possible fluid leak was noticed",
        moderate_text="Any visible fluid leak should be clarified before proceeding.",
        default_severity="critical",
    ),
)


def build_risks(
    raw_checks: Dict[str, CheckAnswer],
    effective_checks: Dict[str, CheckAnswer],
    imperfections: List[Imperfection],
    photos_captured_baseline: int,
    required_photo_count: int,
) -> List[RiskItem]:
    """
    Build the flat list of risk findings.
    
    Args:
        raw_checks: Check answers exactly as recorded (used for notes)
        effective_checks: Check answers after default-fill (used for values)
        imperfections: Deduplicated imperfections
        photos_captured_baseline: Required photo steps that were captured
        required_photo_count: Number of required photo steps
        
    Returns:
        Risk findings in report order
    """
    risks: List[RiskItem] = []
    
    if photos_captured_baseline < required_photo_count:
        risks.append(RiskItem(
            id="missing-photos",
            label="Some baseline exterior photos are missing",
            explanation=(
                "Not all exterior angles were captured. This reduces how "
                "confidently the report can reflect what was observed."
            ),
            severity="moderate",
        ))
    
    for imp in imperfections:
        risk = _imperfection_risk(imp)
        if risk is not None:
            risks.append(risk)
    
    for rule in CHECK_RISK_RULES:
        answer = effective_checks.get(rule.check_id)
        if answer is None or answer.value != "concern":
            continue
        
        raw_answer = raw_checks.get(rule.check_id)
        raw_note = ((raw_answer.note if raw_answer else None) or "").strip()
        severity = rule.severity_for(raw_note)
        
        if severity != rule.default_severity:
            logger.debug(f"Escalated '{rule.check_id}' to {severity} from note keywords")
        
        risks.append(RiskItem(
            id=f"check-{rule.check_id}",
            label=rule.label,
            explanation=rule.explanation_for(raw_note, severity),
            severity=severity,
        ))
    
    return risks


def _imperfection_risk(imp: Imperfection) -> Optional[RiskItem]:
    weight = severity_weight(imp.severity)
    
    if weight >= 3:
        return RiskItem(
            id=f"imp-{imp.id}",
            label=f"Major observation: {imp.label}" if imp.label else "Major observation recorded",
            explanation=imp.note or (
                "A major observation was recorded. Clarify details and "
                "pricing impact before proceeding."
            ),
            severity="critical",
        )
    
    if weight == 2:
        return RiskItem(
            id=f"imp-{imp.id}",
            label=f"Observation: {imp.label}" if imp.label else "Moderate observation recorded",
            explanation=imp.note or (
                "A moderate observation was recorded. It may influence "
                "negotiation depending on severity and buyer preference."
            ),
            severity="moderate",
        )
    
    # Minor imperfections only feed the evidence bullets
    return None
