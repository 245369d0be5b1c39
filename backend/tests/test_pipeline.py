from __future__ import annotations

from datetime import date

from memory import MemorySnapshot, MemoryType
from triage_core import (
    AgeGroup,
    CrisisType,
    Duration,
    HealthContext,
    HookRunner,
    IntakePipeline,
    TurnKind,
    Urgency,
)
from triage_core.models import ActionType
from triage_core.question_flow import initialize_question_flow
from triage_core.pipeline import FIRST_RESPONSE_OPENER, FOLLOW_UP_OPENER, summary_points

TODAY = date(2026, 3, 14)


def _answer(pipeline, turn, message):
    return pipeline.continue_episode(message, turn.question.question_id, turn.context, turn.state, today=TODAY)


def test_first_turn_acknowledges_summarizes_and_asks(pipeline):
    turn = pipeline.start_episode("I have a headache", today=TODAY)

    assert turn.kind == TurnKind.QUESTION
    assert turn.is_first_response
    assert turn.question.question_id == "headache_worst"
    assert turn.text.startswith(FIRST_RESPONSE_OPENER)
    assert 1 <= turn.text.count("•") <= 2
    assert turn.text.rstrip().endswith("?")
    assert turn.assessment.urgency == Urgency.SELF_CARE


def test_follow_up_turn_thanks_and_explains(pipeline):
    first = pipeline.start_episode("I have a headache", today=TODAY)
    second = _answer(pipeline, first, "no")

    assert second.kind == TurnKind.QUESTION
    assert not second.is_first_response
    assert second.text.startswith(FOLLOW_UP_OPENER)
    assert second.question.question_id == "headache_neuro"
    assert "(Neurological symptoms need urgent evaluation)" in second.text


def test_headache_conversation_ends_in_guidance(pipeline):
    turn = pipeline.start_episode("I have a headache", today=TODAY)
    for answer in ("no", "no", "neither"):
        turn = _answer(pipeline, turn, answer)

    assert turn.kind == TurnKind.GUIDANCE
    assert turn.guidance is not None
    assert turn.differentials[0].name == "Migraine"
    assert turn.text.startswith("I understand.")
    assert "Migraine" in turn.text
    assert "you have" not in turn.text.lower()
    assert turn.guidance.disclaimer in turn.text
    assert "Home care you can try:" in turn.text
    assert turn.guidance.home_remedies.condition == "Headache"


def test_pain_conversation_uses_structured_questions(pipeline):
    turn = pipeline.start_episode("I have sharp pain in my side", today=TODAY)
    asked = [turn.question.question_id]
    for answer in ("sudden", "sharp", "5"):
        turn = _answer(pipeline, turn, answer)
        if turn.question is not None:
            asked.append(turn.question.question_id)

    assert asked == ["opqrst_onset", "opqrst_quality", "opqrst_severity"]
    assert turn.kind == TurnKind.GUIDANCE
    assert turn.context.severity == 5


def test_emergency_keywords_short_circuit_questions(pipeline):
    turn = pipeline.start_episode("I have chest pain and my left arm is numb", today=TODAY)

    assert turn.kind == TurnKind.EMERGENCY
    assert turn.question is None
    assert turn.assessment.urgency == Urgency.EMERGENCY
    assert "911" in turn.text
    assert [action.type for action in turn.guidance.suggested_actions] == [ActionType.CALL_EMERGENCY]


def test_crisis_message_returns_crisis_resources(pipeline):
    turn = pipeline.start_episode("I want to kill myself", today=TODAY)

    assert turn.kind == TurnKind.EMERGENCY
    assert turn.crisis_type == CrisisType.SUICIDE
    assert "988" in turn.text
    assert "hear you" in turn.text


def test_answer_can_escalate_to_emergency(pipeline):
    first = pipeline.start_episode("my baby is fussy", today=TODAY)
    assert first.context.age_group == AgeGroup.INFANT
    assert first.question.question_id == "peds_feeding"

    turn = _answer(pipeline, first, "she has a fever of 102")
    assert turn.kind == TurnKind.EMERGENCY
    assert "fever" in turn.assessment.red_flags_detected


def test_memory_candidates_are_offered_once(pipeline):
    turn = pipeline.start_episode("I have a cough and I'm allergic to penicillin", today=TODAY)
    assert [(item.type, item.value) for item in turn.memory_candidates] == [(MemoryType.ALLERGY, "penicillin")]

    remembered = MemorySnapshot(allergies=("penicillin",))
    turn = pipeline.start_episode("I have a cough and I'm allergic to penicillin", memory=remembered, today=TODAY)
    assert turn.memory_candidates == ()


def test_observers_see_every_turn():
    seen: list[tuple[str, TurnKind]] = []
    hooks = HookRunner()
    hooks.add_after(lambda message, turn: seen.append((message, turn.kind)))
    pipeline = IntakePipeline(hooks=hooks)

    first = pipeline.start_episode("I have a headache", today=TODAY)
    _answer(pipeline, first, "no")

    assert seen == [("I have a headache", TurnKind.QUESTION), ("no", TurnKind.QUESTION)]


def test_summary_points_are_capped_at_two():
    context = HealthContext(
        primary_symptom="Cough",
        duration=Duration.TODAY,
        severity=6,
        chronic_conditions=("asthma",),
    )
    assert summary_points(context) == ["You're dealing with cough", "It started earlier today"]


def test_summary_points_fall_back_when_nothing_is_known():
    assert summary_points(HealthContext()) == ["You're not feeling your best right now"]


def test_negative_quick_option_is_not_screened_as_the_symptom(pipeline):
    context = HealthContext(primary_symptom="stomach ache", age_group=AgeGroup.CHILD)
    state = initialize_question_flow("stomach ache")

    denied = pipeline.continue_episode("No vomiting", "gi_vomiting", context, state, today=TODAY)
    assert denied.assessment.urgency == Urgency.SELF_CARE
    assert denied.assessment.red_flags_detected == ()

    repeated = pipeline.continue_episode("Multiple times", "gi_vomiting", context, state, today=TODAY)
    assert repeated.assessment.urgency == Urgency.URGENT
    assert repeated.assessment.red_flags_detected == ("vomiting",)
