from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable


class Duration(str, Enum):
    JUST_NOW = "just_now"
    FEW_HOURS = "few_hours"
    TODAY = "today"
    ONE_TO_TWO_DAYS = "1_2_days"
    THREE_TO_SEVEN_DAYS = "3_7_days"
    ONE_TO_TWO_WEEKS = "1_2_weeks"
    MORE_THAN_TWO_WEEKS = "more_than_2_weeks"
    CHRONIC = "chronic"


class Frequency(str, Enum):
    CONSTANT = "constant"
    INTERMITTENT = "intermittent"
    OCCASIONAL = "occasional"
    FIRST_TIME = "first_time"


class AgeGroup(str, Enum):
    INFANT = "infant"
    CHILD = "child"
    TEEN = "teen"
    ADULT = "adult"
    SENIOR = "senior"


PEDIATRIC_AGE_GROUPS = frozenset({AgeGroup.INFANT, AgeGroup.CHILD})


class SymptomCategory(str, Enum):
    HEADACHE = "headache"
    GI = "gi"
    FEVER = "fever"
    RESPIRATORY = "respiratory"
    SKIN = "skin"
    MUSCULOSKELETAL = "musculoskeletal"
    NEUROLOGICAL = "neurological"
    PAIN = "pain"
    GENERAL = "general"


class PainQuestion(str, Enum):
    ONSET = "onset"
    PROVOCATION = "provocation"
    PALLIATION = "palliation"
    QUALITY = "quality"
    RADIATION = "radiation"
    SEVERITY = "severity"
    TIMING = "timing"


class GeneralQuestion(str, Enum):
    DURATION = "duration"
    SEVERITY = "severity"
    FREQUENCY = "frequency"
    ASSOCIATED_SYMPTOMS = "associated_symptoms"
    RISK_FACTORS = "risk_factors"
    AGE = "age"
    CHRONIC_CONDITIONS = "chronic_conditions"
    RECENT_EVENTS = "recent_events"
    MEDICATIONS = "medications"
    LOCATION = "location"
    TRIGGERS = "triggers"
    RELIEF_ATTEMPTS = "relief_attempts"


class FlowType(str, Enum):
    OPQRST = "opqrst"
    SYMPTOM = "symptom"
    GENERAL = "general"


class ContextField(str, Enum):
    """HealthContext field an answer is written into."""

    DURATION = "duration"
    SEVERITY = "severity"
    FREQUENCY = "frequency"
    ASSOCIATED_SYMPTOMS = "associated_symptoms"
    AGE_GROUP = "age_group"
    CHRONIC_CONDITIONS = "chronic_conditions"
    RISK_FACTORS = "risk_factors"
    RECENT_EVENTS = "recent_events"
    MEDICATIONS = "medications"
    ADDITIONAL_NOTES = "additional_notes"


class Urgency(str, Enum):
    EMERGENCY = "emergency"
    URGENT = "urgent"
    SOON = "soon"
    SELF_CARE = "self_care"


class TriageLevel(str, Enum):
    EMERGENCY = "emergency"
    URGENT = "urgent"
    SOON = "soon"
    NON_URGENT = "non_urgent"
    MONITOR = "monitor"
    SELF_CARE = "self_care"


class Likelihood(str, Enum):
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class Effectiveness(str, Enum):
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class RiskLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class ActionType(str, Enum):
    CALL_EMERGENCY = "call_emergency"
    BOOK_DOCTOR = "book_doctor"
    VIDEO_CONSULT = "video_consult"
    MONITOR_AT_HOME = "monitor_at_home"
    NO_ACTION_NEEDED = "no_action_needed"


class ForWhom(str, Enum):
    ME = "me"
    FAMILY = "family"


class CrisisType(str, Enum):
    SUICIDE = "suicide"
    SELF_HARM = "self_harm"
    OVERDOSE = "overdose"


class TurnKind(str, Enum):
    QUESTION = "question"
    GUIDANCE = "guidance"
    EMERGENCY = "emergency"


def ordered_union(existing: Iterable[str], incoming: Iterable[str]) -> tuple[str, ...]:
    merged: list[str] = []
    seen: set[str] = set()
    for item in [*existing, *incoming]:
        cleaned = (item or "").strip()
        key = cleaned.lower()
        if not cleaned or key in seen:
            continue
        seen.add(key)
        merged.append(cleaned)
    return tuple(merged)


@dataclass(frozen=True)
class ContextUpdate:
    duration: Duration | None = None
    severity: int | None = None
    frequency: Frequency | None = None
    age_group: AgeGroup | None = None
    associated_symptoms: tuple[str, ...] = ()
    chronic_conditions: tuple[str, ...] = ()
    risk_factors: tuple[str, ...] = ()
    recent_events: tuple[str, ...] = ()
    medications: tuple[str, ...] = ()
    note: str | None = None


@dataclass(frozen=True)
class HealthContext:
    primary_symptom: str = ""
    duration: Duration | None = None
    severity: int | None = None
    frequency: Frequency | None = None
    associated_symptoms: tuple[str, ...] = ()
    age_group: AgeGroup | None = None
    chronic_conditions: tuple[str, ...] = ()
    risk_factors: tuple[str, ...] = ()
    recent_events: tuple[str, ...] = ()
    medications: tuple[str, ...] = ()
    additional_notes: str = ""

    def __post_init__(self) -> None:
        if self.severity is not None and not 0 <= self.severity <= 10:
            raise ValueError(f"severity must be within 0..10, got {self.severity}")

    def merge(self, update: ContextUpdate) -> HealthContext:
        notes = self.additional_notes
        if update.note and update.note.strip():
            notes = f"{notes}; {update.note.strip()}" if notes else update.note.strip()
        return replace(
            self,
            duration=update.duration if update.duration is not None else self.duration,
            severity=update.severity if update.severity is not None else self.severity,
            frequency=update.frequency if update.frequency is not None else self.frequency,
            age_group=update.age_group if update.age_group is not None else self.age_group,
            associated_symptoms=ordered_union(self.associated_symptoms, update.associated_symptoms),
            chronic_conditions=ordered_union(self.chronic_conditions, update.chronic_conditions),
            risk_factors=ordered_union(self.risk_factors, update.risk_factors),
            recent_events=ordered_union(self.recent_events, update.recent_events),
            medications=ordered_union(self.medications, update.medications),
            additional_notes=notes,
        )

    @property
    def is_pediatric(self) -> bool:
        return self.age_group in PEDIATRIC_AGE_GROUPS

    def symptom_text(self, include_notes: bool = False) -> str:
        parts = [self.primary_symptom, *self.associated_symptoms]
        if include_notes:
            parts.append(self.additional_notes)
        return " ".join(part for part in parts if part).lower()


@dataclass(frozen=True)
class QuestionFlowState:
    symptom_category: SymptomCategory
    use_structured_pain_flow: bool
    pain_questions_asked: tuple[PainQuestion, ...] = ()
    symptom_questions_asked: tuple[str, ...] = ()
    general_questions_asked: tuple[GeneralQuestion, ...] = ()

    @property
    def total_questions_asked(self) -> int:
        return (
            len(self.pain_questions_asked)
            + len(self.symptom_questions_asked)
            + len(self.general_questions_asked)
        )


@dataclass(frozen=True)
class QuickOption:
    id: str
    label: str
    value: str


@dataclass(frozen=True)
class NextQuestion:
    question: str
    question_id: str
    flow_type: FlowType
    explanation: str | None = None
    quick_options: tuple[QuickOption, ...] = ()


@dataclass(frozen=True)
class SafetyAssessment:
    urgency: Urgency
    red_flags_detected: tuple[str, ...] = ()


@dataclass(frozen=True)
class DifferentialPossibility:
    name: str
    description: str
    likelihood: Likelihood
    supporting_factors: tuple[str, ...] = ()
    typical_presentation: str = ""


@dataclass(frozen=True)
class RequestContext:
    for_whom: ForWhom = ForWhom.ME
    age_group: AgeGroup | None = None
    relationship: str | None = None
    member_id: str | None = None


@dataclass(frozen=True)
class PrefilledBooking:
    member_id: str
    notes: str
    suggested_date: str | None = None


@dataclass(frozen=True)
class SuggestedAction:
    type: ActionType
    label: str
    description: str
    urgency: TriageLevel
    service_id: str | None = None
    prefilled_data: PrefilledBooking | None = None


@dataclass(frozen=True)
class ServiceRecommendation:
    service_id: str
    service_title: str
    reason: str
    urgency: TriageLevel
    prefilled_notes: str


@dataclass(frozen=True)
class OTCSuggestion:
    id: str
    generic: str
    use: str
    adult_dose: str
    cautions: tuple[str, ...] = ()
    for_children: str | None = None


@dataclass(frozen=True)
class HomeRemedy:
    id: str
    name: str
    how_to: str
    effectiveness: Effectiveness
    contraindications: tuple[str, ...] = ()
    suitable_for: tuple[str, ...] = ("all_ages",)


@dataclass(frozen=True)
class HomeRemedyPlan:
    condition: str
    remedies: tuple[HomeRemedy, ...]
    warning_signs: tuple[str, ...]


@dataclass(frozen=True)
class UrgencyMessage:
    title: str
    message: str
    action_label: str


@dataclass(frozen=True)
class GuidanceResponse:
    understanding: str
    possible_causes: tuple[str, ...]
    immediate_actions: tuple[str, ...]
    when_to_seek_help: tuple[str, ...]
    suggested_actions: tuple[SuggestedAction, ...]
    recommended_services: tuple[ServiceRecommendation, ...]
    risk_level: RiskLevel
    detected_symptoms: tuple[str, ...]
    urgency_message: UrgencyMessage
    disclaimer: str
    otc_suggestions: tuple[OTCSuggestion, ...] = field(default_factory=tuple)
    differentials: tuple[DifferentialPossibility, ...] = field(default_factory=tuple)
    home_remedies: HomeRemedyPlan | None = None
