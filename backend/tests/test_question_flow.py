from __future__ import annotations

import pytest

from memory import MemorySnapshot
from triage_core import (
    AgeGroup,
    Duration,
    FlowType,
    GeneralQuestion,
    HealthContext,
    PainQuestion,
    SymptomCategory,
    UnknownQuestionError,
    answer_question,
    has_enough_information,
    initialize_question_flow,
    next_question,
    record_question_asked,
)
from triage_core.question_flow import MAX_PAIN_QUESTIONS, resolve_question


def _walk(context, state, answers, memory=None):
    """Answer whatever is asked next with the given answers, in order."""
    asked: list[str] = []
    for answer in answers:
        question = next_question(context, state, memory)
        if question is None:
            break
        asked.append(question.question_id)
        context, state = answer_question(context, state, question.question_id, answer)
    return context, state, asked


def test_headache_flow_asks_required_questions_then_has_enough():
    context = HealthContext(primary_symptom="headache")
    state = initialize_question_flow("headache")
    assert state.symptom_category == SymptomCategory.HEADACHE
    assert not state.use_structured_pain_flow

    context, state, asked = _walk(context, state, ["no", "no", "neither"])
    assert asked == ["headache_worst", "headache_neuro", "headache_neck"]
    assert "not the worst of life" in context.additional_notes
    assert has_enough_information(context, state)


def test_pain_flow_starts_with_priority_questions():
    context = HealthContext(primary_symptom="sharp pain in my side")
    state = initialize_question_flow(context.primary_symptom)
    assert state.use_structured_pain_flow

    context, state, asked = _walk(context, state, ["sudden", "sharp", "8"])
    assert asked == ["opqrst_onset", "opqrst_quality", "opqrst_severity"]
    assert state.pain_questions_asked == (PainQuestion.ONSET, PainQuestion.QUALITY, PainQuestion.SEVERITY)
    assert context.severity == 8
    assert "Onset: sudden onset" in context.additional_notes
    assert "Quality: sharp stabbing pain" in context.additional_notes
    assert has_enough_information(context, state)


def test_pain_questions_are_capped():
    state = initialize_question_flow("muscle pain")
    context = HealthContext(primary_symptom="muscle pain")
    for tag in list(PainQuestion)[:MAX_PAIN_QUESTIONS]:
        state = record_question_asked(state, f"opqrst_{tag.value}")
    question = next_question(context, state)
    assert question is not None
    assert question.flow_type != FlowType.OPQRST


def test_optional_symptom_questions_are_limited_to_two():
    context = HealthContext(primary_symptom="fever", duration=Duration.ONE_TO_TWO_DAYS, severity=4)
    state = initialize_question_flow("fever")
    for question_id in ("fever_temp", "fever_chills", "fever_cough"):
        state = record_question_asked(state, question_id)
    question = next_question(context, state)
    assert question is not None
    assert question.flow_type == FlowType.GENERAL


def test_pediatric_questions_come_first_for_infants():
    context = HealthContext(primary_symptom="fussy", age_group=AgeGroup.INFANT)
    state = initialize_question_flow("fussy")
    question = next_question(context, state)
    assert question.question_id == "peds_feeding"
    state = record_question_asked(state, "peds_feeding")
    assert next_question(context, state).question_id == "peds_wet_diapers"


def test_wet_diaper_question_is_infant_only():
    context = HealthContext(primary_symptom="fussy", age_group=AgeGroup.CHILD)
    state = record_question_asked(initialize_question_flow("fussy"), "peds_feeding")
    assert next_question(context, state).question_id == "peds_activity"


def test_general_flow_skips_what_is_already_known():
    context = HealthContext(primary_symptom="tired", duration=Duration.TODAY)
    state = initialize_question_flow("tired")
    question = next_question(context, state)
    assert question.question_id == "general_severity"


def test_general_flow_uses_memory_to_skip_conditions_and_medications():
    context = HealthContext(primary_symptom="tired", duration=Duration.TODAY, severity=3)
    state = record_question_asked(initialize_question_flow("tired"), "general_associated_symptoms")
    memory = MemorySnapshot(conditions=("asthma",), medications=("albuterol",))
    assert next_question(context, state, memory) is None
    assert next_question(context, state).question_id == "general_chronic_conditions"


def test_general_questions_are_capped_at_three():
    context = HealthContext(primary_symptom="tired")
    state = initialize_question_flow("tired")
    for tag in (GeneralQuestion.DURATION, GeneralQuestion.SEVERITY, GeneralQuestion.ASSOCIATED_SYMPTOMS):
        state = record_question_asked(state, f"general_{tag.value}")
    assert next_question(context, state) is None


def test_general_question_text_mentions_the_symptom():
    context = HealthContext(primary_symptom="Tiredness")
    question = next_question(context, initialize_question_flow("tiredness"))
    assert question.question == "How long have you been experiencing tiredness?"


def test_record_question_asked_is_idempotent():
    state = initialize_question_flow("headache")
    once = record_question_asked(state, "headache_worst")
    assert record_question_asked(once, "headache_worst") == once
    assert once.total_questions_asked == 1


def test_next_question_does_not_mutate_state():
    state = initialize_question_flow("headache")
    next_question(HealthContext(primary_symptom="headache"), state)
    assert state.total_questions_asked == 0


@pytest.mark.parametrize("question_id", ["opqrst_nonsense", "general_nonsense", "made_up", ""])
def test_unknown_question_ids_raise(question_id):
    with pytest.raises(UnknownQuestionError):
        resolve_question(question_id)


def test_answering_unknown_question_raises():
    state = initialize_question_flow("headache")
    with pytest.raises(UnknownQuestionError):
        answer_question(HealthContext(primary_symptom="headache"), state, "nope", "yes")


def test_general_duration_answer_sets_duration():
    context = HealthContext(primary_symptom="tired")
    state = initialize_question_flow("tired")
    context, state = answer_question(context, state, "general_duration", "3-7 days")
    assert context.duration == Duration.THREE_TO_SEVEN_DAYS
    assert state.general_questions_asked == (GeneralQuestion.DURATION,)


def test_six_questions_are_always_enough():
    state = initialize_question_flow("tired")
    for question_id in (
        "general_duration",
        "general_severity",
        "general_associated_symptoms",
        "general_chronic_conditions",
        "general_medications",
        "general_triggers",
    ):
        state = record_question_asked(state, question_id)
    assert has_enough_information(HealthContext(primary_symptom="tired"), state)


def test_high_severity_shortens_the_flow():
    state = initialize_question_flow("tired")
    state = record_question_asked(state, "general_duration")
    state = record_question_asked(state, "general_severity")
    assert has_enough_information(HealthContext(primary_symptom="tired", severity=9), state)
    assert not has_enough_information(HealthContext(primary_symptom="tired", severity=5), state)
