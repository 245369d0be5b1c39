from __future__ import annotations

from datetime import date

from memory import MemorySnapshot
from triage_core import (
    Duration,
    HealthContext,
    RequestContext,
    SafetyAssessment,
    TriageLevel,
    Urgency,
    compose_guidance,
    generate_differentials,
)
from triage_core.knowledge import DISCLAIMER, NOT_A_DIAGNOSIS_NOTE, RED_FLAG_WARNING, SEEK_CARE_NOW_ACTION
from triage_core.models import ActionType, AgeGroup, RiskLevel
from triage_core.otc import suggest_otc
from triage_core.remedies import suggest_home_remedies
from triage_core.services import recommend_services

TODAY = date(2026, 3, 14)
SELF_CARE = SafetyAssessment(urgency=Urgency.SELF_CARE)


def _headache(**overrides) -> HealthContext:
    values = {"primary_symptom": "headache", "duration": Duration.ONE_TO_TWO_DAYS, "severity": 4}
    values.update(overrides)
    return HealthContext(**values)


def test_self_care_guidance_sections():
    guidance = compose_guidance(_headache(), SELF_CARE, today=TODAY)

    assert guidance.understanding == "Based on what you've shared, you're experiencing headache, for 1-2 days."
    assert guidance.possible_causes == ("Tension or stress", "Dehydration", "Eye strain", NOT_A_DIAGNOSIS_NOTE)
    assert guidance.immediate_actions[0] == "Rest in a quiet, dark room"
    assert len(guidance.when_to_seek_help) == 5
    assert guidance.when_to_seek_help[-1] == '"Worst headache of my life" - sudden, severe onset'
    assert guidance.home_remedies.condition == "Headache"
    assert guidance.risk_level == RiskLevel.LOW
    assert guidance.urgency_message.title == "Self-Care Recommended"
    assert guidance.disclaimer == DISCLAIMER
    assert [action.type for action in guidance.suggested_actions] == [
        ActionType.MONITOR_AT_HOME,
        ActionType.NO_ACTION_NEEDED,
    ]
    assert [item.service_id for item in guidance.recommended_services] == ["pharmacy_consult", "self_care_guidance"]
    assert [item.id for item in guidance.otc_suggestions] == ["paracetamol", "ibuprofen"]


def test_understanding_wording_for_today_and_unknown_duration():
    today = compose_guidance(_headache(duration=Duration.TODAY), SELF_CARE, today=TODAY)
    assert today.understanding.endswith("headache, since earlier today.")
    unknown = compose_guidance(_headache(duration=None, severity=8), SELF_CARE, today=TODAY)
    assert unknown.understanding.endswith("for some time, with significant discomfort.")


def test_self_care_adds_rest_and_hydration_when_missing():
    guidance = compose_guidance(HealthContext(primary_symptom="sore elbow"), SELF_CARE, today=TODAY)
    assert "Get adequate rest and sleep" in guidance.immediate_actions
    assert "Stay hydrated" in guidance.immediate_actions


def test_red_flags_lead_the_warning_list():
    assessment = SafetyAssessment(urgency=Urgency.SOON, red_flags_detected=("persistent",))
    guidance = compose_guidance(_headache(), assessment, today=TODAY)
    assert guidance.when_to_seek_help[0] == RED_FLAG_WARNING
    assert "persistent" in guidance.detected_symptoms


def test_urgent_guidance_books_today_for_the_member():
    assessment = SafetyAssessment(urgency=Urgency.URGENT, red_flags_detected=("severe pain",))
    context = HealthContext(primary_symptom="severe pain in my knee", severity=8)
    guidance = compose_guidance(context, assessment, member=RequestContext(member_id="member-7"), today=TODAY)

    assert guidance.immediate_actions[0] == SEEK_CARE_NOW_ACTION
    book, video = guidance.suggested_actions
    assert book.type == ActionType.BOOK_DOCTOR
    assert book.service_id == "doctor-home-visit"
    assert book.prefilled_data.member_id == "member-7"
    assert book.prefilled_data.suggested_date == "2026-03-14"
    assert "Chief complaint: severe pain in my knee" in book.prefilled_data.notes
    assert video.type == ActionType.VIDEO_CONSULT
    assert guidance.recommended_services[0].service_id == "urgent_care"
    assert guidance.otc_suggestions == ()
    assert guidance.home_remedies is None
    assert guidance.risk_level == RiskLevel.HIGH


def test_emergency_guidance_only_offers_emergency_services():
    assessment = SafetyAssessment(urgency=Urgency.EMERGENCY, red_flags_detected=("chest pain",))
    guidance = compose_guidance(HealthContext(primary_symptom="chest pain"), assessment, today=TODAY)
    assert [action.type for action in guidance.suggested_actions] == [ActionType.CALL_EMERGENCY]
    assert [item.service_id for item in guidance.recommended_services] == ["emergency"]
    assert guidance.risk_level == RiskLevel.CRITICAL


def test_graded_level_does_not_change_the_assessment():
    context = _headache(severity=9, duration=Duration.FEW_HOURS)
    guidance = compose_guidance(context, SELF_CARE, today=TODAY)
    assert guidance.urgency_message.title == "Consider a Check-up"
    assert guidance.suggested_actions[0].urgency == TriageLevel.NON_URGENT
    assert SELF_CARE.urgency == Urgency.SELF_CARE


def test_differentials_are_carried_on_the_response():
    context = _headache()
    differentials = generate_differentials(context)
    guidance = compose_guidance(context, SELF_CARE, differentials, today=TODAY)
    assert guidance.differentials == differentials


def test_guidance_text_never_asserts_a_diagnosis():
    guidance = compose_guidance(_headache(), SELF_CARE, today=TODAY)
    sections = [
        guidance.understanding,
        *guidance.possible_causes,
        *guidance.immediate_actions,
        *guidance.when_to_seek_help,
        guidance.urgency_message.message,
    ]
    assert not any("you have" in section.lower() for section in sections)


def test_otc_skips_medications_with_matching_cautions():
    context = _headache(chronic_conditions=("kidney disease",))
    assert [item.id for item in suggest_otc(context, TriageLevel.SELF_CARE)] == ["paracetamol"]


def test_otc_respects_remembered_allergies_and_conditions():
    memory = MemorySnapshot(allergies=("Ibuprofen",))
    assert [item.id for item in suggest_otc(_headache(), TriageLevel.MONITOR, memory)] == ["paracetamol"]
    memory = MemorySnapshot(conditions=("liver disease",))
    assert [item.id for item in suggest_otc(_headache(), TriageLevel.MONITOR, memory)] == ["ibuprofen"]


def test_otc_needs_an_eligible_level_and_a_known_symptom():
    assert suggest_otc(_headache(), TriageLevel.URGENT) == ()
    assert suggest_otc(HealthContext(primary_symptom="tired"), TriageLevel.SELF_CARE) == ()


def test_otc_is_capped_across_groups():
    context = HealthContext(primary_symptom="fever with cough", associated_symptoms=("diarrhea",))
    suggestions = suggest_otc(context, TriageLevel.SOON)
    assert len(suggestions) == 4
    assert [item.id for item in suggestions[:2]] == ["paracetamol", "ibuprofen"]


def test_service_keywords_reorder_recommendations():
    context = HealthContext(primary_symptom="anxiety and stress")
    services = recommend_services(context, TriageLevel.NON_URGENT, "")
    assert services[0].service_id == "mental_health"
    assert len(services) == 3
    assert all(service.urgency == TriageLevel.NON_URGENT for service in services)


def test_service_reason_names_the_symptom():
    services = recommend_services(HealthContext(primary_symptom="Cough"), TriageLevel.SOON, "notes")
    urgent_care = next(service for service in services if service.service_id == "urgent_care")
    assert "the cough" in urgent_care.reason
    assert urgent_care.prefilled_notes == "notes"


def _remedy_ids(context: HealthContext, level: TriageLevel = TriageLevel.SELF_CARE, memory=None) -> list[str]:
    plan = suggest_home_remedies(context, level, memory)
    return [remedy.id for remedy in plan.remedies]


def test_home_remedies_sorted_by_effectiveness():
    plan = suggest_home_remedies(_headache(), TriageLevel.SELF_CARE)
    assert plan.condition == "Headache"
    assert [remedy.id for remedy in plan.remedies] == [
        "cold_compress",
        "peppermint_oil",
        "ginger_tea_headache",
        "warm_compress_tension",
    ]
    assert len(plan.warning_signs) == 5


def test_home_remedies_need_an_eligible_level_and_a_known_symptom():
    assert suggest_home_remedies(_headache(), TriageLevel.URGENT) is None
    assert suggest_home_remedies(_headache(), TriageLevel.EMERGENCY) is None
    assert suggest_home_remedies(HealthContext(primary_symptom="tired"), TriageLevel.SELF_CARE) is None


def test_home_remedies_filtered_for_age_and_conditions():
    assert "peppermint_oil" not in _remedy_ids(_headache(age_group=AgeGroup.CHILD))
    assert "ginger_tea_headache" not in _remedy_ids(_headache(medications=("warfarin",)))

    diabetic_cough = HealthContext(primary_symptom="dry cough", chronic_conditions=("diabetes",))
    assert _remedy_ids(diabetic_cough) == ["mulethi_tea", "salt_water_gargle", "ginger_tulsi_honey"]
    assert "banana" in _remedy_ids(HealthContext(primary_symptom="heartburn", chronic_conditions=("diabetes",)))


def test_home_remedies_respect_remembered_allergies():
    memory = MemorySnapshot(allergies=("milk",))
    assert _remedy_ids(HealthContext(primary_symptom="heartburn"), memory=memory) == [
        "jeera_water",
        "fennel_seeds",
        "banana",
    ]


def test_remedy_warnings_merge_across_matched_conditions():
    plan = suggest_home_remedies(HealthContext(primary_symptom="heartburn and a rash"), TriageLevel.MONITOR)
    assert plan.condition == "Acidity / Heartburn"
    assert plan.warning_signs[0] == "Pain spreading to arm, neck, or jaw"
    assert plan.warning_signs[-1] == "Rash spreading rapidly"
    assert len(plan.warning_signs) == 5
