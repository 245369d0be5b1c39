from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable

from .models import (
    PEDIATRIC_AGE_GROUPS,
    AgeGroup,
    CrisisType,
    Duration,
    Frequency,
    HealthContext,
    SafetyAssessment,
    TriageLevel,
    Urgency,
)

logger = logging.getLogger(__name__)

EMERGENCY_KEYWORDS = (
    "chest pain",
    "can't breathe",
    "unconscious",
    "severe bleeding",
    "stroke",
    "seizure",
    "not breathing",
)
FEVER_KEYWORDS = ("fever", "temperature", "102", "103", "104")
PEDIATRIC_URGENT_KEYWORDS = (
    "not eating",
    "won't eat",
    "not drinking",
    "won't drink",
    "lethargic",
    "limp",
    "floppy",
    "won't wake",
    "rash",
    "vomiting",
)
SENIOR_URGENT_KEYWORDS = ("fall", "fell", "confusion", "confused")
URGENT_KEYWORDS = ("high fever", "severe pain", "vomiting blood", "sudden weakness", "blood in stool")
SOON_KEYWORDS = ("persistent", "getting worse", "several days", "spreading")


@dataclass(frozen=True)
class TriageRule:
    name: str
    keywords: tuple[str, ...]
    urgency: Urgency
    applies: Callable[[AgeGroup | None], bool]


def _any_age(_: AgeGroup | None) -> bool:
    return True


def _infant(age_group: AgeGroup | None) -> bool:
    return age_group == AgeGroup.INFANT


def _pediatric(age_group: AgeGroup | None) -> bool:
    return age_group in PEDIATRIC_AGE_GROUPS


def _senior(age_group: AgeGroup | None) -> bool:
    return age_group == AgeGroup.SENIOR


# Order is policy: age overrides sit above the generic keyword tiers.
TRIAGE_RULES: tuple[TriageRule, ...] = (
    TriageRule("emergency_keywords", EMERGENCY_KEYWORDS, Urgency.EMERGENCY, _any_age),
    TriageRule("infant_fever", FEVER_KEYWORDS, Urgency.EMERGENCY, _infant),
    TriageRule("pediatric_fever", FEVER_KEYWORDS, Urgency.URGENT, _pediatric),
    TriageRule("pediatric_warning_signs", PEDIATRIC_URGENT_KEYWORDS, Urgency.URGENT, _pediatric),
    TriageRule("senior_fall_or_confusion", SENIOR_URGENT_KEYWORDS, Urgency.URGENT, _senior),
    TriageRule("urgent_keywords", URGENT_KEYWORDS, Urgency.URGENT, _any_age),
    TriageRule("soon_keywords", SOON_KEYWORDS, Urgency.SOON, _any_age),
)


def _normalize(text: str) -> str:
    return (text or "").replace("’", "'").lower()


def classify(text: str, age_group: AgeGroup | None = None) -> SafetyAssessment:
    """Run the ordered triage cascade; the first matching rule decides."""
    lowered = _normalize(text)
    red_flags: list[str] = []
    for rule in TRIAGE_RULES:
        if not rule.applies(age_group):
            continue
        matched = [keyword for keyword in rule.keywords if keyword in lowered]
        for keyword in matched:
            if keyword not in red_flags:
                red_flags.append(keyword)
        if matched:
            logger.debug("triage rule %s fired -> %s", rule.name, rule.urgency.value)
            return SafetyAssessment(urgency=rule.urgency, red_flags_detected=tuple(red_flags))
    return SafetyAssessment(urgency=Urgency.SELF_CARE, red_flags_detected=tuple(red_flags))


_EXTERNAL_BY_LEVEL: dict[TriageLevel, Urgency] = {
    TriageLevel.EMERGENCY: Urgency.EMERGENCY,
    TriageLevel.URGENT: Urgency.URGENT,
    TriageLevel.SOON: Urgency.SOON,
    TriageLevel.NON_URGENT: Urgency.SELF_CARE,
    TriageLevel.MONITOR: Urgency.SELF_CARE,
    TriageLevel.SELF_CARE: Urgency.SELF_CARE,
}


def to_external_urgency(level: TriageLevel) -> Urgency:
    return _EXTERNAL_BY_LEVEL[level]


HIGH_RISK_CONDITIONS = (
    "diabetes",
    "heart disease",
    "heart condition",
    "high blood pressure",
    "hypertension",
    "asthma",
    "copd",
    "cancer",
    "immunocompromised",
    "kidney disease",
    "pregnan",
)


def grade_self_care(context: HealthContext) -> TriageLevel:
    """Split the self-care tier into self_care, monitor and non_urgent.

    Only the display-side action table reads this; the external urgency of the
    episode stays self_care whatever the grade.
    """
    score = 0
    severity = context.severity
    if severity is not None:
        if severity >= 9:
            score += 25
        elif severity >= 7:
            score += 15
        elif severity >= 5:
            score += 8
    if context.duration in (Duration.JUST_NOW, Duration.FEW_HOURS):
        score += 15 if severity is not None and severity >= 7 else 5
    elif context.duration in (Duration.ONE_TO_TWO_WEEKS, Duration.MORE_THAN_TWO_WEEKS):
        score += 8
    elif context.duration == Duration.CHRONIC and severity is not None and severity >= 7:
        score += 12
    if context.frequency == Frequency.CONSTANT:
        score += 10
    for condition in context.chronic_conditions:
        if any(marker in condition.lower() for marker in HIGH_RISK_CONDITIONS):
            score += 10

    if score >= 20:
        return TriageLevel.NON_URGENT
    if score >= 10:
        return TriageLevel.MONITOR
    return TriageLevel.SELF_CARE


def internal_level(context: HealthContext, assessment: SafetyAssessment) -> TriageLevel:
    if assessment.urgency != Urgency.SELF_CARE:
        return TriageLevel(assessment.urgency.value)
    return grade_self_care(context)


_CRISIS_PATTERNS: list[tuple[CrisisType, re.Pattern[str]]] = [
    (
        CrisisType.SUICIDE,
        re.compile(
            r"(want|going|plan(ning)?)\s*to\s*(kill|hurt|end)\s*(myself|my\s*life|self)|suicid(e|al)|end\s+it\s+all",
            re.IGNORECASE,
        ),
    ),
    (CrisisType.SELF_HARM, re.compile(r"self[- ]?harm|cutting\s*(myself|self)|hurt(ing)?\s*myself", re.IGNORECASE)),
    (
        CrisisType.OVERDOSE,
        re.compile(r"overdos(e|ed|ing)|took\s*too\s*many\s*(pills|medication|tablets)", re.IGNORECASE),
    ),
]

CRISIS_RESOURCES: dict[str, str] = {
    "suicide": (
        "If you're in the U.S., call or text 988 (Suicide & Crisis Lifeline). "
        "You are not alone, and trained counselors are available 24/7."
    ),
    "self_harm": (
        "If you're in the U.S., call or text 988 (Suicide & Crisis Lifeline). "
        "You deserve support, and help is available."
    ),
    "overdose": (
        "Call 911 immediately. If in the U.S., you can also call Poison Control at 1-800-222-1222. "
        "If this was intentional, also call or text 988 (Suicide & Crisis Lifeline)."
    ),
    "immediate_danger": "If you or someone else is in immediate danger, please call 911 now.",
}

CRISIS_RED_FLAGS: dict[CrisisType, str] = {
    CrisisType.SUICIDE: "suicidal thoughts",
    CrisisType.SELF_HARM: "self-harm",
    CrisisType.OVERDOSE: "possible overdose",
}


def detect_crisis_type(text: str) -> CrisisType | None:
    cleaned = _normalize(text)
    for crisis_type, pattern in _CRISIS_PATTERNS:
        if pattern.search(cleaned):
            return crisis_type
    return None


def format_crisis_resources(crisis_type: CrisisType, include_immediate_danger: bool = False) -> str:
    parts: list[str] = []
    if include_immediate_danger:
        parts.append(CRISIS_RESOURCES["immediate_danger"])
    parts.append(CRISIS_RESOURCES[crisis_type.value])
    return "\n\n".join(parts)


def assess_message(text: str, age_group: AgeGroup | None = None) -> tuple[SafetyAssessment, CrisisType | None]:
    """Crisis language escalates to emergency ahead of the keyword cascade."""
    crisis_type = detect_crisis_type(text)
    assessment = classify(text, age_group)
    if crisis_type is None:
        return assessment, None
    logger.info("crisis language detected (%s); escalating to emergency", crisis_type.value)
    flags = (CRISIS_RED_FLAGS[crisis_type], *assessment.red_flags_detected)
    return SafetyAssessment(urgency=Urgency.EMERGENCY, red_flags_detected=flags), crisis_type
