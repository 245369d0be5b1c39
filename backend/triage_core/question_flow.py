from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from memory import MemorySnapshot

from .answers import is_negative_option, parse_answer
from .categories import detect_symptom_category, uses_structured_pain_flow
from .models import (
    ContextField,
    FlowType,
    GeneralQuestion,
    HealthContext,
    NextQuestion,
    PainQuestion,
    QuestionFlowState,
    QuickOption,
)
from .question_bank import (
    GENERAL_QUESTION_ORDER,
    GENERAL_TEMPLATES,
    PAIN_PROMPTS,
    PAIN_QUESTION_ORDER,
    PRIORITY_PAIN_QUESTIONS,
    SYMPTOM_QUESTIONS_BY_ID,
    render_general_question,
    symptom_questions_for,
)

logger = logging.getLogger(__name__)

MAX_PAIN_QUESTIONS = 4
MAX_OPTIONAL_SYMPTOM_QUESTIONS = 2
MAX_GENERAL_QUESTIONS = 3

_PAIN_PREFIX = "opqrst_"
_GENERAL_PREFIX = "general_"


class UnknownQuestionError(KeyError):
    pass


@dataclass(frozen=True)
class QuestionSpec:
    """Where a question id lives and how its answer is written into the context."""

    question_id: str
    flow_type: FlowType
    context_field: ContextField
    quick_options: tuple[QuickOption, ...] = ()
    note_label: str | None = None


def resolve_question(question_id: str) -> QuestionSpec:
    cleaned = (question_id or "").strip()
    if cleaned.startswith(_PAIN_PREFIX):
        try:
            prompt = PAIN_PROMPTS[PainQuestion(cleaned[len(_PAIN_PREFIX):])]
        except ValueError:
            raise UnknownQuestionError(f"Question not found: {question_id}") from None
        return QuestionSpec(
            question_id=cleaned,
            flow_type=FlowType.OPQRST,
            context_field=prompt.context_field,
            quick_options=prompt.quick_options,
            note_label=prompt.note_label,
        )
    if cleaned.startswith(_GENERAL_PREFIX):
        try:
            template = GENERAL_TEMPLATES[GeneralQuestion(cleaned[len(_GENERAL_PREFIX):])]
        except ValueError:
            raise UnknownQuestionError(f"Question not found: {question_id}") from None
        note_label = template.tag.value.replace("_", " ").capitalize()
        return QuestionSpec(
            question_id=cleaned,
            flow_type=FlowType.GENERAL,
            context_field=template.context_field,
            quick_options=template.quick_options,
            note_label=note_label if template.context_field == ContextField.ADDITIONAL_NOTES else None,
        )
    question = SYMPTOM_QUESTIONS_BY_ID.get(cleaned)
    if question is None:
        raise UnknownQuestionError(f"Question not found: {question_id}")
    return QuestionSpec(
        question_id=cleaned,
        flow_type=FlowType.SYMPTOM,
        context_field=question.context_field,
        quick_options=question.quick_options,
    )


def initialize_question_flow(primary_symptom: str) -> QuestionFlowState:
    category = detect_symptom_category(primary_symptom)
    return QuestionFlowState(
        symptom_category=category,
        use_structured_pain_flow=uses_structured_pain_flow(category),
    )


def _next_pain_question(state: QuestionFlowState) -> NextQuestion | None:
    if not state.use_structured_pain_flow or len(state.pain_questions_asked) >= MAX_PAIN_QUESTIONS:
        return None
    remaining = [tag for tag in PAIN_QUESTION_ORDER if tag not in state.pain_questions_asked]
    if not remaining:
        return None
    priority = [tag for tag in remaining if tag in PRIORITY_PAIN_QUESTIONS]
    tag = (priority or remaining)[0]
    prompt = PAIN_PROMPTS[tag]
    return NextQuestion(
        question=prompt.question,
        question_id=f"{_PAIN_PREFIX}{tag.value}",
        flow_type=FlowType.OPQRST,
        explanation=prompt.explanation,
        quick_options=prompt.quick_options,
    )


def _next_symptom_question(context: HealthContext, state: QuestionFlowState) -> NextQuestion | None:
    questions = symptom_questions_for(state.symptom_category, context)
    unanswered = [question for question in questions if question.id not in state.symptom_questions_asked]
    required = [question for question in unanswered if question.required]
    chosen = required[0] if required else None

    if chosen is None:
        required_ids = {question.id for question in questions if question.required}
        optional_asked = sum(1 for asked in state.symptom_questions_asked if asked not in required_ids)
        if optional_asked < MAX_OPTIONAL_SYMPTOM_QUESTIONS and unanswered:
            chosen = unanswered[0]

    if chosen is None:
        return None
    return NextQuestion(
        question=chosen.question,
        question_id=chosen.id,
        flow_type=FlowType.SYMPTOM,
        explanation=chosen.explanation,
        quick_options=chosen.quick_options,
    )


def _general_question_needed(
    tag: GeneralQuestion,
    context: HealthContext,
    state: QuestionFlowState,
    memory: MemorySnapshot | None,
) -> bool:
    if tag in state.general_questions_asked:
        return False
    if tag == GeneralQuestion.SEVERITY and PainQuestion.SEVERITY in state.pain_questions_asked:
        return False
    if tag == GeneralQuestion.DURATION and context.duration is not None:
        return False
    if tag == GeneralQuestion.SEVERITY and context.severity is not None:
        return False
    if tag == GeneralQuestion.CHRONIC_CONDITIONS and (context.chronic_conditions or (memory and memory.conditions)):
        return False
    if tag == GeneralQuestion.MEDICATIONS and (context.medications or (memory and memory.medications)):
        return False
    return True


def next_question(
    context: HealthContext,
    state: QuestionFlowState,
    memory: MemorySnapshot | None = None,
) -> NextQuestion | None:
    """Pick the next clarifying question, or None when nothing useful is left to ask.

    Pure: the caller records the question with ``record_question_asked`` once
    it has actually been shown.
    """
    question = _next_pain_question(state) or _next_symptom_question(context, state)
    if question is None and len(state.general_questions_asked) < MAX_GENERAL_QUESTIONS:
        needed = [tag for tag in GENERAL_QUESTION_ORDER if _general_question_needed(tag, context, state, memory)]
        if needed:
            tag = needed[0]
            template = GENERAL_TEMPLATES[tag]
            question = NextQuestion(
                question=render_general_question(tag, context),
                question_id=f"{_GENERAL_PREFIX}{tag.value}",
                flow_type=FlowType.GENERAL,
                quick_options=template.quick_options,
            )
    if question is not None:
        logger.debug("next question %s (%s)", question.question_id, question.flow_type.value)
    return question


def record_question_asked(state: QuestionFlowState, question_id: str) -> QuestionFlowState:
    template = resolve_question(question_id)
    if template.flow_type == FlowType.OPQRST:
        tag = PainQuestion(template.question_id[len(_PAIN_PREFIX):])
        if tag in state.pain_questions_asked:
            return state
        return replace(state, pain_questions_asked=(*state.pain_questions_asked, tag))
    if template.flow_type == FlowType.GENERAL:
        general = GeneralQuestion(template.question_id[len(_GENERAL_PREFIX):])
        if general in state.general_questions_asked:
            return state
        return replace(state, general_questions_asked=(*state.general_questions_asked, general))
    if template.question_id in state.symptom_questions_asked:
        return state
    return replace(state, symptom_questions_asked=(*state.symptom_questions_asked, template.question_id))


def answer_question(
    context: HealthContext,
    state: QuestionFlowState,
    question_id: str,
    answer: str,
) -> tuple[HealthContext, QuestionFlowState]:
    template = resolve_question(question_id)
    update = parse_answer(template.context_field, answer, template.quick_options, template.note_label)
    return context.merge(update), record_question_asked(state, question_id)


def answered_with_negative_option(question_id: str, answer: str) -> bool:
    """True when the answer picked a quick option that denies the symptom asked about."""
    return is_negative_option(answer, resolve_question(question_id).quick_options)


def has_enough_information(context: HealthContext, state: QuestionFlowState) -> bool:
    total = state.total_questions_asked

    if state.use_structured_pain_flow and PRIORITY_PAIN_QUESTIONS.issubset(state.pain_questions_asked) and total >= 3:
        return True

    required = [question for question in symptom_questions_for(state.symptom_category, context) if question.required]
    if all(question.id in state.symptom_questions_asked for question in required) and total >= 3:
        return True

    if total >= 6:
        return True

    return context.severity is not None and context.severity >= 8 and total >= 2
