"""Fixed classification taxonomies for USOAP CMA and CANSO SoE questionnaires.

Closed code sets with constant lookup tables (code -> label/order/metadata):
- AuditArea: 9 USOAP CMA audit areas (851 Protocol Questions)
- CriticalElement: 8 ICAO critical elements (CE-1 to CE-8)
- SMSComponent: 4 CANSO SoE components
- StudyArea: 12 CANSO SoE study areas nested under the components
- MaturityLevel: 5 CANSO SoE maturity levels (A-E)
- ResponseValue: 4 USOAP CMA protocol question answers

Tables are verified at import time. An incomplete or inconsistent table raises
ScoringConfigError so the engine never runs against a drifted catalog.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final


class ScoringConfigError(Exception):
    """Raised when a fixed lookup table or scoring constant is inconsistent.

    Fail-closed: configuration errors surface at import, never at scoring time.
    """


class QuestionnaireType(StrEnum):
    """Questionnaire methodology an assessment is answered against."""

    ANS_USOAP_CMA = "ANS_USOAP_CMA"
    SMS_CANSO_SOE = "SMS_CANSO_SOE"


class AuditArea(StrEnum):
    """USOAP CMA audit areas."""

    LEG = "LEG"
    ORG = "ORG"
    PEL = "PEL"
    OPS = "OPS"
    AIR = "AIR"
    AIG = "AIG"
    ANS = "ANS"
    AGA = "AGA"
    SSP = "SSP"


class CriticalElement(StrEnum):
    """ICAO critical elements of a State safety oversight system."""

    CE_1 = "CE_1"
    CE_2 = "CE_2"
    CE_3 = "CE_3"
    CE_4 = "CE_4"
    CE_5 = "CE_5"
    CE_6 = "CE_6"
    CE_7 = "CE_7"
    CE_8 = "CE_8"


class SMSComponent(StrEnum):
    """CANSO SoE SMS components."""

    SAFETY_POLICY_OBJECTIVES = "SAFETY_POLICY_OBJECTIVES"
    SAFETY_RISK_MANAGEMENT = "SAFETY_RISK_MANAGEMENT"
    SAFETY_ASSURANCE = "SAFETY_ASSURANCE"
    SAFETY_PROMOTION = "SAFETY_PROMOTION"


class StudyArea(StrEnum):
    """CANSO SoE study areas (component number, area number)."""

    SA_1_1 = "SA_1_1"
    SA_1_2 = "SA_1_2"
    SA_1_3 = "SA_1_3"
    SA_1_4 = "SA_1_4"
    SA_1_5 = "SA_1_5"
    SA_2_1 = "SA_2_1"
    SA_2_2 = "SA_2_2"
    SA_3_1 = "SA_3_1"
    SA_3_2 = "SA_3_2"
    SA_3_3 = "SA_3_3"
    SA_4_1 = "SA_4_1"
    SA_4_2 = "SA_4_2"


class MaturityLevel(StrEnum):
    """CANSO SoE maturity levels, A (lowest) to E (highest)."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"


class ResponseValue(StrEnum):
    """USOAP CMA protocol question answers."""

    SATISFACTORY = "SATISFACTORY"
    NOT_SATISFACTORY = "NOT_SATISFACTORY"
    NOT_APPLICABLE = "NOT_APPLICABLE"
    NOT_REVIEWED = "NOT_REVIEWED"


@dataclass(frozen=True)
class BilingualLabel:
    """English/French label pair."""

    en: str
    fr: str

    def get(self, locale: str = "en") -> str:
        """Return the label for a locale, falling back to English."""
        return self.fr if locale == "fr" else self.en


@dataclass(frozen=True)
class AuditAreaMeta:
    code: AuditArea
    name: BilingualLabel
    pq_count: int
    sort_order: int


@dataclass(frozen=True)
class CriticalElementMeta:
    code: CriticalElement
    number: int
    name: BilingualLabel
    sort_order: int


@dataclass(frozen=True)
class SMSComponentMeta:
    code: SMSComponent
    number: int
    name: BilingualLabel
    sort_order: int


@dataclass(frozen=True)
class StudyAreaMeta:
    code: StudyArea
    component: SMSComponent
    area_number: int
    name: BilingualLabel
    sort_order: int


@dataclass(frozen=True)
class MaturityLevelMeta:
    code: MaturityLevel
    name: BilingualLabel
    score_value: int


AUDIT_AREAS: Final[dict[AuditArea, AuditAreaMeta]] = {
    AuditArea.LEG: AuditAreaMeta(
        AuditArea.LEG,
        BilingualLabel("Primary Aviation Legislation", "Legislation Aeronautique Primaire"),
        pq_count=23,
        sort_order=1,
    ),
    AuditArea.ORG: AuditAreaMeta(
        AuditArea.ORG,
        BilingualLabel("Civil Aviation Organization", "Organisation de l'Aviation Civile"),
        pq_count=13,
        sort_order=2,
    ),
    AuditArea.PEL: AuditAreaMeta(
        AuditArea.PEL,
        BilingualLabel("Personnel Licensing and Training", "Licences du Personnel et Formation"),
        pq_count=100,
        sort_order=3,
    ),
    AuditArea.OPS: AuditAreaMeta(
        AuditArea.OPS,
        BilingualLabel("Aircraft Operations", "Operations Aeriennes"),
        pq_count=136,
        sort_order=4,
    ),
    AuditArea.AIR: AuditAreaMeta(
        AuditArea.AIR,
        BilingualLabel("Airworthiness of Aircraft", "Navigabilite des Aeronefs"),
        pq_count=198,
        sort_order=5,
    ),
    AuditArea.AIG: AuditAreaMeta(
        AuditArea.AIG,
        BilingualLabel(
            "Aircraft Accident and Incident Investigation",
            "Enquetes sur les Accidents et Incidents d'Aviation",
        ),
        pq_count=84,
        sort_order=6,
    ),
    AuditArea.ANS: AuditAreaMeta(
        AuditArea.ANS,
        BilingualLabel("Air Navigation Services", "Services de Navigation Aerienne"),
        pq_count=128,
        sort_order=7,
    ),
    AuditArea.AGA: AuditAreaMeta(
        AuditArea.AGA,
        BilingualLabel("Aerodromes and Ground Aids", "Aerodromes et Aides au Sol"),
        pq_count=153,
        sort_order=8,
    ),
    AuditArea.SSP: AuditAreaMeta(
        AuditArea.SSP,
        BilingualLabel("State Safety Programme", "Programme National de Securite"),
        pq_count=16,
        sort_order=9,
    ),
}

TOTAL_USOAP_PQ_COUNT: Final[int] = 851

CRITICAL_ELEMENTS: Final[dict[CriticalElement, CriticalElementMeta]] = {
    CriticalElement.CE_1: CriticalElementMeta(
        CriticalElement.CE_1,
        1,
        BilingualLabel("Primary Aviation Legislation", "Legislation Aeronautique Primaire"),
        sort_order=1,
    ),
    CriticalElement.CE_2: CriticalElementMeta(
        CriticalElement.CE_2,
        2,
        BilingualLabel("Specific Operating Regulations", "Reglements d'Exploitation Specifiques"),
        sort_order=2,
    ),
    CriticalElement.CE_3: CriticalElementMeta(
        CriticalElement.CE_3,
        3,
        BilingualLabel("State System and Functions", "Systeme et Fonctions de l'Etat"),
        sort_order=3,
    ),
    CriticalElement.CE_4: CriticalElementMeta(
        CriticalElement.CE_4,
        4,
        BilingualLabel("Qualified Technical Personnel", "Personnel Technique Qualifie"),
        sort_order=4,
    ),
    CriticalElement.CE_5: CriticalElementMeta(
        CriticalElement.CE_5,
        5,
        BilingualLabel(
            "Technical Guidance, Tools and Safety-Critical Information",
            "Orientations Techniques, Outils et Information Critique pour la Securite",
        ),
        sort_order=5,
    ),
    CriticalElement.CE_6: CriticalElementMeta(
        CriticalElement.CE_6,
        6,
        BilingualLabel(
            "Licensing, Certification, Authorization and Approval",
            "Licences, Certification, Autorisation et Approbation",
        ),
        sort_order=6,
    ),
    CriticalElement.CE_7: CriticalElementMeta(
        CriticalElement.CE_7,
        7,
        BilingualLabel("Surveillance Obligations", "Obligations de Surveillance"),
        sort_order=7,
    ),
    CriticalElement.CE_8: CriticalElementMeta(
        CriticalElement.CE_8,
        8,
        BilingualLabel("Resolution of Safety Issues", "Resolution des Problemes de Securite"),
        sort_order=8,
    ),
}

SMS_COMPONENTS: Final[dict[SMSComponent, SMSComponentMeta]] = {
    SMSComponent.SAFETY_POLICY_OBJECTIVES: SMSComponentMeta(
        SMSComponent.SAFETY_POLICY_OBJECTIVES,
        1,
        BilingualLabel("Safety Policy and Objectives", "Politique et Objectifs de Securite"),
        sort_order=1,
    ),
    SMSComponent.SAFETY_RISK_MANAGEMENT: SMSComponentMeta(
        SMSComponent.SAFETY_RISK_MANAGEMENT,
        2,
        BilingualLabel("Safety Risk Management", "Gestion des Risques de Securite"),
        sort_order=2,
    ),
    SMSComponent.SAFETY_ASSURANCE: SMSComponentMeta(
        SMSComponent.SAFETY_ASSURANCE,
        3,
        BilingualLabel("Safety Assurance", "Assurance de la Securite"),
        sort_order=3,
    ),
    SMSComponent.SAFETY_PROMOTION: SMSComponentMeta(
        SMSComponent.SAFETY_PROMOTION,
        4,
        BilingualLabel("Safety Promotion", "Promotion de la Securite"),
        sort_order=4,
    ),
}

_POLICY = SMSComponent.SAFETY_POLICY_OBJECTIVES
_RISK = SMSComponent.SAFETY_RISK_MANAGEMENT
_ASSURANCE = SMSComponent.SAFETY_ASSURANCE
_PROMOTION = SMSComponent.SAFETY_PROMOTION

STUDY_AREAS: Final[dict[StudyArea, StudyAreaMeta]] = {
    StudyArea.SA_1_1: StudyAreaMeta(
        StudyArea.SA_1_1,
        _POLICY,
        1,
        BilingualLabel(
            "Management Commitment and Responsibility",
            "Engagement et Responsabilite de la Direction",
        ),
        sort_order=1,
    ),
    StudyArea.SA_1_2: StudyAreaMeta(
        StudyArea.SA_1_2,
        _POLICY,
        2,
        BilingualLabel("Safety Accountabilities", "Responsabilites en Matiere de Securite"),
        sort_order=2,
    ),
    StudyArea.SA_1_3: StudyAreaMeta(
        StudyArea.SA_1_3,
        _POLICY,
        3,
        BilingualLabel(
            "Appointment of Key Safety Personnel", "Designation du Personnel Cle de Securite"
        ),
        sort_order=3,
    ),
    StudyArea.SA_1_4: StudyAreaMeta(
        StudyArea.SA_1_4,
        _POLICY,
        4,
        BilingualLabel(
            "Coordination of Emergency Response Planning",
            "Coordination de la Planification des Interventions d'Urgence",
        ),
        sort_order=4,
    ),
    StudyArea.SA_1_5: StudyAreaMeta(
        StudyArea.SA_1_5,
        _POLICY,
        5,
        BilingualLabel("SMS Documentation", "Documentation SMS"),
        sort_order=5,
    ),
    StudyArea.SA_2_1: StudyAreaMeta(
        StudyArea.SA_2_1,
        _RISK,
        1,
        BilingualLabel("Hazard Identification", "Identification des Dangers"),
        sort_order=6,
    ),
    StudyArea.SA_2_2: StudyAreaMeta(
        StudyArea.SA_2_2,
        _RISK,
        2,
        BilingualLabel(
            "Safety Risk Assessment and Mitigation",
            "Evaluation et Attenuation des Risques de Securite",
        ),
        sort_order=7,
    ),
    StudyArea.SA_3_1: StudyAreaMeta(
        StudyArea.SA_3_1,
        _ASSURANCE,
        1,
        BilingualLabel(
            "Safety Performance Monitoring and Measurement",
            "Surveillance et Mesure des Performances de Securite",
        ),
        sort_order=8,
    ),
    StudyArea.SA_3_2: StudyAreaMeta(
        StudyArea.SA_3_2,
        _ASSURANCE,
        2,
        BilingualLabel("Management of Change", "Gestion du Changement"),
        sort_order=9,
    ),
    StudyArea.SA_3_3: StudyAreaMeta(
        StudyArea.SA_3_3,
        _ASSURANCE,
        3,
        BilingualLabel("Continuous Improvement of the SMS", "Amelioration Continue du SMS"),
        sort_order=10,
    ),
    StudyArea.SA_4_1: StudyAreaMeta(
        StudyArea.SA_4_1,
        _PROMOTION,
        1,
        BilingualLabel("Training and Education", "Formation et Education"),
        sort_order=11,
    ),
    StudyArea.SA_4_2: StudyAreaMeta(
        StudyArea.SA_4_2,
        _PROMOTION,
        2,
        BilingualLabel("Safety Communication", "Communication sur la Securite"),
        sort_order=12,
    ),
}

MATURITY_LEVELS: Final[dict[MaturityLevel, MaturityLevelMeta]] = {
    MaturityLevel.A: MaturityLevelMeta(
        MaturityLevel.A, BilingualLabel("Informal", "Informel"), score_value=1
    ),
    MaturityLevel.B: MaturityLevelMeta(
        MaturityLevel.B, BilingualLabel("Defined", "Defini"), score_value=2
    ),
    MaturityLevel.C: MaturityLevelMeta(
        MaturityLevel.C, BilingualLabel("Managed", "Gere"), score_value=3
    ),
    MaturityLevel.D: MaturityLevelMeta(
        MaturityLevel.D, BilingualLabel("Resilient", "Resilient"), score_value=4
    ),
    MaturityLevel.E: MaturityLevelMeta(
        MaturityLevel.E, BilingualLabel("Excellence", "Excellence"), score_value=5
    ),
}

# Canonical (sort_order) orderings used wherever results are listed.
AUDIT_AREA_ORDER: Final[tuple[AuditArea, ...]] = tuple(
    sorted(AUDIT_AREAS, key=lambda code: AUDIT_AREAS[code].sort_order)
)
CRITICAL_ELEMENT_ORDER: Final[tuple[CriticalElement, ...]] = tuple(
    sorted(CRITICAL_ELEMENTS, key=lambda code: CRITICAL_ELEMENTS[code].sort_order)
)
SMS_COMPONENT_ORDER: Final[tuple[SMSComponent, ...]] = tuple(
    sorted(SMS_COMPONENTS, key=lambda code: SMS_COMPONENTS[code].sort_order)
)
STUDY_AREA_ORDER: Final[tuple[StudyArea, ...]] = tuple(
    sorted(STUDY_AREAS, key=lambda code: STUDY_AREAS[code].sort_order)
)
MATURITY_LEVEL_ORDER: Final[tuple[MaturityLevel, ...]] = tuple(
    sorted(MATURITY_LEVELS, key=lambda code: MATURITY_LEVELS[code].score_value)
)


def _check_table(name: str, table: dict, members: type[StrEnum]) -> list[str]:
    """Check a lookup table covers exactly the enum and is keyed by its own codes."""
    problems: list[str] = []
    missing = sorted(str(m) for m in members if m not in table)
    if missing:
        problems.append(f"{name} missing codes: {missing}")
    for key, meta in table.items():
        if meta.code != key:
            problems.append(f"{name} entry {key} carries mismatched code {meta.code}")
    orders = [getattr(meta, "sort_order", None) for meta in table.values()]
    if None not in orders and len(set(orders)) != len(orders):
        problems.append(f"{name} has duplicate sort_order values")
    return problems


def verify_taxonomy_tables() -> list[str]:
    """Verify every lookup table against its code set.

    Returns:
        List of problems found (empty when the tables are consistent).
    """
    problems: list[str] = []
    problems.extend(_check_table("AUDIT_AREAS", AUDIT_AREAS, AuditArea))
    problems.extend(_check_table("CRITICAL_ELEMENTS", CRITICAL_ELEMENTS, CriticalElement))
    problems.extend(_check_table("SMS_COMPONENTS", SMS_COMPONENTS, SMSComponent))
    problems.extend(_check_table("STUDY_AREAS", STUDY_AREAS, StudyArea))
    problems.extend(_check_table("MATURITY_LEVELS", MATURITY_LEVELS, MaturityLevel))

    pq_total = sum(meta.pq_count for meta in AUDIT_AREAS.values())
    if pq_total != TOTAL_USOAP_PQ_COUNT:
        problems.append(f"AUDIT_AREAS pq_count sums to {pq_total}, expected {TOTAL_USOAP_PQ_COUNT}")

    for code, meta in STUDY_AREAS.items():
        expected_prefix = f"SA_{SMS_COMPONENTS[meta.component].number}_"
        if not code.value.startswith(expected_prefix):
            problems.append(f"STUDY_AREAS {code} is not nested under {meta.component}")

    scores = [MATURITY_LEVELS[level].score_value for level in MaturityLevel]
    if scores != list(range(1, len(MaturityLevel) + 1)):
        problems.append(f"MATURITY_LEVELS score values must be 1..5 in A..E order, got {scores}")

    return problems


_problems = verify_taxonomy_tables()
if _problems:
    raise ScoringConfigError(f"Classification tables are inconsistent: {_problems}")
