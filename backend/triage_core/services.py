from __future__ import annotations

from dataclasses import dataclass

from .models import HealthContext, ServiceRecommendation, TriageLevel

MAX_RECOMMENDATIONS = 3
KEYWORD_BONUS = 5


@dataclass(frozen=True)
class CareService:
    id: str
    title: str
    description: str
    levels: frozenset[TriageLevel]
    keywords: tuple[str, ...]
    priority: int
    reason: str

    def score(self, text: str) -> int:
        return (10 - self.priority) + KEYWORD_BONUS * sum(1 for keyword in self.keywords if keyword in text)


SERVICE_CATALOG: tuple[CareService, ...] = (
    CareService(
        id="emergency",
        title="Emergency Services",
        description="Call 911 or go to nearest emergency room",
        levels=frozenset({TriageLevel.EMERGENCY}),
        keywords=("chest pain", "stroke", "unconscious", "severe bleeding"),
        priority=1,
        reason="These symptoms need immediate medical attention. Please seek emergency care.",
    ),
    CareService(
        id="urgent_care",
        title="Urgent Care Visit",
        description="Same-day care for urgent but non-emergency conditions",
        levels=frozenset({TriageLevel.URGENT, TriageLevel.SOON}),
        keywords=("high fever", "severe pain", "infection", "breathing difficulty"),
        priority=2,
        reason=(
            "Based on the {symptom} and the urgency level, an urgent care visit "
            "would be appropriate for prompt evaluation."
        ),
    ),
    CareService(
        id="video_consult",
        title="Video Consultation",
        description="Speak with a healthcare provider from home",
        levels=frozenset({TriageLevel.SOON, TriageLevel.NON_URGENT, TriageLevel.MONITOR}),
        keywords=("cold", "flu", "rash", "minor pain", "questions"),
        priority=3,
        reason=(
            "A video consultation can help evaluate the {symptom} and provide guidance "
            "without needing to leave home."
        ),
    ),
    CareService(
        id="in_person_visit",
        title="In-Person Doctor Visit",
        description="Schedule a visit with a healthcare provider",
        levels=frozenset({TriageLevel.SOON, TriageLevel.NON_URGENT}),
        keywords=("ongoing", "chronic", "checkup", "followup"),
        priority=4,
        reason="An in-person visit would allow thorough examination of the {symptom}.",
    ),
    CareService(
        id="specialist_referral",
        title="Specialist Consultation",
        description="Get referred to a specialist for the condition",
        levels=frozenset({TriageLevel.NON_URGENT, TriageLevel.SOON}),
        keywords=("chronic", "recurring", "specialist", "ongoing"),
        priority=5,
        reason="Given the nature of the symptoms, a specialist may be able to provide more targeted care.",
    ),
    CareService(
        id="mental_health",
        title="Mental Health Support",
        description="Speak with a mental health professional",
        levels=frozenset({TriageLevel.URGENT, TriageLevel.SOON, TriageLevel.NON_URGENT}),
        keywords=("anxiety", "depression", "stress", "sleep", "mood"),
        priority=3,
        reason="Speaking with a mental health professional can help address these concerns.",
    ),
    CareService(
        id="pharmacy_consult",
        title="Pharmacy Consultation",
        description="Speak with a pharmacist about medications",
        levels=frozenset({TriageLevel.NON_URGENT, TriageLevel.MONITOR, TriageLevel.SELF_CARE}),
        keywords=("medication", "prescription", "drug interaction", "refill"),
        priority=6,
        reason="A pharmacist can advise on over-the-counter options for the {symptom}.",
    ),
    CareService(
        id="lab_test",
        title="Lab Tests",
        description="Get diagnostic tests at a nearby lab",
        levels=frozenset({TriageLevel.NON_URGENT, TriageLevel.SOON}),
        keywords=("test", "blood work", "screening", "diagnostic"),
        priority=7,
        reason="Lab tests can give a healthcare provider more information about the {symptom}.",
    ),
    CareService(
        id="self_care_guidance",
        title="Self-Care Resources",
        description="Tips and guidance for managing symptoms at home",
        levels=frozenset({TriageLevel.SELF_CARE, TriageLevel.MONITOR}),
        keywords=("mild", "minor", "common", "home remedy"),
        priority=8,
        reason="Self-care resources can help manage the {symptom} comfortably at home.",
    ),
)


def recommend_services(
    context: HealthContext,
    level: TriageLevel,
    notes: str,
) -> tuple[ServiceRecommendation, ...]:
    text = context.symptom_text()
    symptom = (context.primary_symptom or "").strip().lower() or "symptoms"
    eligible = [service for service in SERVICE_CATALOG if level in service.levels]
    # sorted() is stable, so catalogue order breaks score ties.
    ranked = sorted(eligible, key=lambda service: service.score(text), reverse=True)[:MAX_RECOMMENDATIONS]
    return tuple(
        ServiceRecommendation(
            service_id=service.id,
            service_title=service.title,
            reason=service.reason.format(symptom=symptom),
            urgency=level,
            prefilled_notes=notes,
        )
        for service in ranked
    )
