from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from memory import MemorySnapshot

from .knowledge import (
    CATCH_ALL_WARNINGS,
    DISCLAIMER,
    GENERIC_ACTIONS,
    GENERIC_CAUSES,
    HYDRATION_ACTION,
    NOT_A_DIAGNOSIS_NOTE,
    RED_FLAG_WARNING,
    REST_ACTION,
    SEEK_CARE_NOW_ACTION,
    UNDERSTANDING_OPENER,
    URGENCY_MESSAGES,
    GuidanceEntry,
    duration_phrase,
    find_matching_guidance,
)
from .models import (
    ActionType,
    DifferentialPossibility,
    Duration,
    GuidanceResponse,
    HealthContext,
    PrefilledBooking,
    RequestContext,
    RiskLevel,
    SafetyAssessment,
    SuggestedAction,
    TriageLevel,
    ordered_union,
)
from .otc import suggest_otc
from .remedies import suggest_home_remedies
from .safety import internal_level
from .services import recommend_services

logger = logging.getLogger(__name__)

MAX_CAUSES_PER_ENTRY = 3
MAX_ACTIONS_PER_ENTRY = 3
MAX_WARNINGS_PER_ENTRY = 2
MAX_IMMEDIATE_ACTIONS = 5
MAX_WARNINGS = 5

DOCTOR_VISIT_SERVICE_ID = "doctor-home-visit"
VIDEO_CONSULT_SERVICE_ID = "video-consultation"

_SELF_CARE_LEVELS = frozenset({TriageLevel.SELF_CARE, TriageLevel.MONITOR})

_RISK_BY_LEVEL: dict[TriageLevel, RiskLevel] = {
    TriageLevel.EMERGENCY: RiskLevel.CRITICAL,
    TriageLevel.URGENT: RiskLevel.HIGH,
    TriageLevel.SOON: RiskLevel.MODERATE,
    TriageLevel.NON_URGENT: RiskLevel.MODERATE,
    TriageLevel.MONITOR: RiskLevel.LOW,
    TriageLevel.SELF_CARE: RiskLevel.LOW,
}


def _unique(items: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
    return tuple(result)


def build_understanding(context: HealthContext) -> str:
    parts = [UNDERSTANDING_OPENER]
    symptom = (context.primary_symptom or "").strip().lower()
    if symptom:
        parts.append(f"you're experiencing {symptom}")
    phrase = duration_phrase(context.duration)
    parts.append(phrase if context.duration == Duration.TODAY else f"for {phrase}")
    if context.severity is not None and context.severity >= 7:
        parts.append("with significant discomfort")
    return ", ".join(parts) + "."


def build_possible_causes(entries: tuple[GuidanceEntry, ...]) -> tuple[str, ...]:
    causes = [cause for entry in entries for cause in entry.possible_causes[:MAX_CAUSES_PER_ENTRY]]
    if not causes:
        causes.extend(GENERIC_CAUSES)
    causes.append(NOT_A_DIAGNOSIS_NOTE)
    return _unique(causes)


def build_immediate_actions(entries: tuple[GuidanceEntry, ...], level: TriageLevel) -> tuple[str, ...]:
    actions: list[str] = []
    if level in (TriageLevel.EMERGENCY, TriageLevel.URGENT):
        actions.append(SEEK_CARE_NOW_ACTION)
    actions.extend(action for entry in entries for action in entry.immediate_actions[:MAX_ACTIONS_PER_ENTRY])
    if level in _SELF_CARE_LEVELS:
        if not any("rest" in action.lower() for action in actions):
            actions.append(REST_ACTION)
        if not any("hydrat" in action.lower() for action in actions):
            actions.append(HYDRATION_ACTION)
    if not actions:
        actions.extend(GENERIC_ACTIONS)
    return _unique(actions)[:MAX_IMMEDIATE_ACTIONS]


def build_when_to_seek_help(
    entries: tuple[GuidanceEntry, ...],
    assessment: SafetyAssessment,
    remedy_warnings: tuple[str, ...] = (),
) -> tuple[str, ...]:
    warnings: list[str] = []
    if assessment.red_flags_detected:
        warnings.append(RED_FLAG_WARNING)
    warnings.extend(item for entry in entries for item in entry.when_to_seek_help[:MAX_WARNINGS_PER_ENTRY])
    warnings.extend(CATCH_ALL_WARNINGS)
    # Remedy warning signs only fill whatever room the cap leaves.
    warnings.extend(remedy_warnings)
    return _unique(warnings)[:MAX_WARNINGS]


def build_booking_notes(context: HealthContext) -> str:
    lines: list[str] = []
    if context.primary_symptom:
        lines.append(f"Chief complaint: {context.primary_symptom}")
    if context.duration is not None:
        lines.append(f"Duration: {duration_phrase(context.duration)}")
    if context.severity is not None:
        lines.append(f"Severity: {context.severity}/10")
    if context.associated_symptoms:
        lines.append(f"Associated symptoms: {', '.join(context.associated_symptoms)}")
    return "\n".join(lines)


def build_suggested_actions(
    level: TriageLevel,
    notes: str,
    member_id: str,
    today: date,
) -> tuple[SuggestedAction, ...]:
    booking = PrefilledBooking(member_id=member_id, notes=notes)

    if level == TriageLevel.EMERGENCY:
        return (
            SuggestedAction(
                type=ActionType.CALL_EMERGENCY,
                label="Call Emergency Services",
                description="Call 911 for immediate medical attention",
                urgency=level,
            ),
        )
    if level == TriageLevel.URGENT:
        return (
            SuggestedAction(
                type=ActionType.BOOK_DOCTOR,
                label="See Doctor Today",
                description="Book an urgent doctor visit",
                urgency=level,
                service_id=DOCTOR_VISIT_SERVICE_ID,
                prefilled_data=PrefilledBooking(member_id=member_id, notes=notes, suggested_date=today.isoformat()),
            ),
            SuggestedAction(
                type=ActionType.VIDEO_CONSULT,
                label="Video Consultation",
                description="Speak with a doctor online now",
                urgency=level,
                service_id=VIDEO_CONSULT_SERVICE_ID,
                prefilled_data=booking,
            ),
        )
    if level == TriageLevel.SOON:
        return (
            SuggestedAction(
                type=ActionType.BOOK_DOCTOR,
                label="Book Doctor Visit",
                description="Schedule within 1-2 days",
                urgency=level,
                service_id=DOCTOR_VISIT_SERVICE_ID,
                prefilled_data=booking,
            ),
            SuggestedAction(
                type=ActionType.VIDEO_CONSULT,
                label="Video Consultation",
                description="Talk to a doctor online",
                urgency=level,
                service_id=VIDEO_CONSULT_SERVICE_ID,
                prefilled_data=booking,
            ),
        )
    if level == TriageLevel.NON_URGENT:
        return (
            SuggestedAction(
                type=ActionType.VIDEO_CONSULT,
                label="Consult a Doctor",
                description="Get professional advice",
                urgency=level,
                service_id=VIDEO_CONSULT_SERVICE_ID,
                prefilled_data=booking,
            ),
            SuggestedAction(
                type=ActionType.MONITOR_AT_HOME,
                label="Monitor at Home",
                description="Track the symptoms",
                urgency=level,
            ),
        )
    return (
        SuggestedAction(
            type=ActionType.MONITOR_AT_HOME,
            label="Monitor at Home",
            description="Continue self-care and track symptoms",
            urgency=TriageLevel.SELF_CARE,
        ),
        SuggestedAction(
            type=ActionType.NO_ACTION_NEEDED,
            label="No Action Needed Now",
            description="Revisit if symptoms change",
            urgency=TriageLevel.SELF_CARE,
        ),
    )


def risk_level_for(level: TriageLevel) -> RiskLevel:
    return _RISK_BY_LEVEL[level]


def collect_detected_symptoms(context: HealthContext, assessment: SafetyAssessment) -> tuple[str, ...]:
    primary = (context.primary_symptom,) if context.primary_symptom else ()
    return ordered_union(ordered_union(primary, context.associated_symptoms), assessment.red_flags_detected)


def compose_guidance(
    context: HealthContext,
    assessment: SafetyAssessment,
    differentials: tuple[DifferentialPossibility, ...] = (),
    member: RequestContext | None = None,
    level: TriageLevel | None = None,
    memory: MemorySnapshot | None = None,
    today: date | None = None,
) -> GuidanceResponse:
    """Assemble the structured guidance payload.

    ``level`` is the internal triage level; when omitted it is derived from the
    assessment (self-care refined by ``grade_self_care``). It only selects the
    action table, services and OTC or home-remedy eligibility. The
    assessment's external urgency is never changed here.
    """
    if level is None:
        level = internal_level(context, assessment)
    entries = find_matching_guidance(context.symptom_text())
    notes = build_booking_notes(context)
    remedies = suggest_home_remedies(context, level, memory)
    member_id = (member.member_id if member else None) or ""

    response = GuidanceResponse(
        understanding=build_understanding(context),
        possible_causes=build_possible_causes(entries),
        immediate_actions=build_immediate_actions(entries, level),
        when_to_seek_help=build_when_to_seek_help(
            entries, assessment, remedies.warning_signs if remedies is not None else ()
        ),
        suggested_actions=build_suggested_actions(level, notes, member_id, today or date.today()),
        recommended_services=recommend_services(context, level, notes),
        risk_level=risk_level_for(level),
        detected_symptoms=collect_detected_symptoms(context, assessment),
        urgency_message=URGENCY_MESSAGES[level],
        disclaimer=DISCLAIMER,
        otc_suggestions=suggest_otc(context, level, memory),
        differentials=tuple(differentials),
        home_remedies=remedies,
    )
    logger.debug(
        "composed guidance level=%s entries=%s services=%d",
        level.value,
        [entry.name for entry in entries],
        len(response.recommended_services),
    )
    return response
