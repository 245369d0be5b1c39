from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from memory import MemoryCandidate, MemoryPolicyGuard, MemorySnapshot, extract_memory_candidates

from .answers import infer_initial_context
from .differentials import generate_differentials, summarize_differentials
from .guidance import compose_guidance
from .hooks import HookRunner
from .knowledge import duration_phrase
from .models import (
    CrisisType,
    DifferentialPossibility,
    Duration,
    GuidanceResponse,
    HealthContext,
    NextQuestion,
    QuestionFlowState,
    RequestContext,
    SafetyAssessment,
    TurnKind,
    Urgency,
)
from .question_flow import (
    answer_question,
    answered_with_negative_option,
    has_enough_information,
    initialize_question_flow,
    next_question,
)
from .safety import assess_message, format_crisis_resources, internal_level

logger = logging.getLogger(__name__)

FIRST_RESPONSE_OPENER = "I hear you, and I'm glad you reached out."
FOLLOW_UP_OPENER = "Thank you, that helps."
MAX_SUMMARY_BULLETS = 2
BULLET = "•"


@dataclass(frozen=True)
class IntakeTurn:
    kind: TurnKind
    text: str
    context: HealthContext
    state: QuestionFlowState
    assessment: SafetyAssessment
    question: NextQuestion | None = None
    guidance: GuidanceResponse | None = None
    differentials: tuple[DifferentialPossibility, ...] = ()
    memory_candidates: tuple[MemoryCandidate, ...] = ()
    crisis_type: CrisisType | None = None
    is_first_response: bool = False


def _bullets(lines: tuple[str, ...] | list[str]) -> str:
    return "\n".join(f"{BULLET} {line}" for line in lines)


def summary_points(context: HealthContext) -> list[str]:
    points: list[str] = []
    symptom = (context.primary_symptom or "").strip()
    if symptom:
        points.append(f"You're dealing with {symptom.lower()}")
    if context.duration == Duration.TODAY:
        points.append("It started earlier today")
    elif context.duration is not None:
        points.append(f"It's been going on for {duration_phrase(context.duration)}")
    if context.severity is not None:
        points.append(f"You'd rate it around {context.severity}/10")
    if context.chronic_conditions:
        points.append(f"You mentioned {', '.join(context.chronic_conditions)}")
    if not points:
        points.append("You're not feeling your best right now")
    return points[:MAX_SUMMARY_BULLETS]


def render_question(context: HealthContext, question: NextQuestion, first: bool) -> str:
    if first:
        return "\n\n".join(
            [
                FIRST_RESPONSE_OPENER,
                f"From what you shared:\n{_bullets(summary_points(context))}",
                question.question,
            ]
        )
    parts = [FOLLOW_UP_OPENER, question.question]
    if question.explanation:
        parts.append(f"({question.explanation})")
    return "\n\n".join(parts)


def render_guidance(guidance: GuidanceResponse) -> str:
    sections = [
        f"I understand. {guidance.understanding}",
        f"What might be going on:\n{_bullets(guidance.possible_causes)}",
    ]
    if guidance.differentials:
        summary = summarize_differentials(guidance.differentials)
        names = [summary["primary"], *[item["name"] for item in summary["secondary"]]]
        sections.append(
            "Possibilities a clinician may want to consider include "
            f"{', '.join(names)}. Only a healthcare provider can confirm what is going on."
        )
    sections.append(f"What can help right now:\n{_bullets(guidance.immediate_actions)}")
    if guidance.home_remedies is not None and guidance.home_remedies.remedies:
        remedies = [f"{remedy.name}: {remedy.how_to}" for remedy in guidance.home_remedies.remedies]
        sections.append(f"Home care you can try:\n{_bullets(remedies)}")
    sections.append(f"Please get medical help if:\n{_bullets(guidance.when_to_seek_help)}")
    sections.append(f"{guidance.urgency_message.title}: {guidance.urgency_message.message}")
    sections.append(guidance.disclaimer)
    return "\n\n".join(sections)


def render_emergency(guidance: GuidanceResponse, crisis_type: CrisisType | None) -> str:
    if crisis_type is not None:
        return "\n\n".join(
            [
                "I hear you, and I'm really glad you told me. Your safety matters most right now.",
                format_crisis_resources(crisis_type, include_immediate_danger=True),
                "If you can, reach out to someone you trust and stay with them while you get support.",
            ]
        )
    return "\n\n".join(
        [
            "I hear you, and I'm concerned about what you're describing.",
            f"{guidance.urgency_message.title}: {guidance.urgency_message.message}",
            "Please call 911 or your local emergency services now. Do not drive yourself if you feel unwell.",
            f"While help is on the way:\n{_bullets(guidance.immediate_actions)}",
        ]
    )


class IntakePipeline:
    """Runs one user message through safety, question flow and guidance.

    Stateless between calls: the caller keeps the returned context and flow
    state and sends them back with the next message.
    """

    def __init__(self, hooks: HookRunner | None = None, guard: MemoryPolicyGuard | None = None) -> None:
        self.hooks = hooks or HookRunner()
        self.guard = guard or MemoryPolicyGuard()

    def start_episode(
        self,
        message: str,
        request_context: RequestContext | None = None,
        memory: MemorySnapshot | None = None,
        today: date | None = None,
    ) -> IntakeTurn:
        request_context = request_context or RequestContext()
        context = infer_initial_context(message, request_context)
        state = initialize_question_flow(context.primary_symptom or message)
        logger.info(
            "intake episode started category=%s for_whom=%s",
            state.symptom_category.value,
            request_context.for_whom.value,
        )
        return self._advance(message, context, state, request_context, memory, today, first=True)

    def continue_episode(
        self,
        message: str,
        question_id: str,
        context: HealthContext,
        state: QuestionFlowState,
        request_context: RequestContext | None = None,
        memory: MemorySnapshot | None = None,
        today: date | None = None,
    ) -> IntakeTurn:
        context, state = answer_question(context, state, question_id, message)
        # "No vomiting" must not be screened as vomiting.
        screened = "" if answered_with_negative_option(question_id, message) else message
        return self._advance(
            message, context, state, request_context or RequestContext(), memory, today, first=False, screened=screened
        )

    def _advance(
        self,
        message: str,
        context: HealthContext,
        state: QuestionFlowState,
        request_context: RequestContext,
        memory: MemorySnapshot | None,
        today: date | None,
        first: bool,
        screened: str | None = None,
    ) -> IntakeTurn:
        candidates = self.guard.filter_new_candidates(extract_memory_candidates(message), memory)
        screened = message if screened is None else screened
        safety_text = f"{context.symptom_text(include_notes=True)} {screened}"
        assessment, crisis_type = assess_message(safety_text, context.age_group)

        if assessment.urgency == Urgency.EMERGENCY:
            logger.info("emergency turn (crisis=%s)", crisis_type.value if crisis_type else "none")
            differentials = generate_differentials(context, assessment)
            guidance = compose_guidance(context, assessment, differentials, request_context, memory=memory, today=today)
            turn = IntakeTurn(
                kind=TurnKind.EMERGENCY,
                text=render_emergency(guidance, crisis_type),
                context=context,
                state=state,
                assessment=assessment,
                guidance=guidance,
                differentials=differentials,
                memory_candidates=candidates,
                crisis_type=crisis_type,
                is_first_response=first,
            )
            self.hooks.run_after(message, turn)
            return turn

        question = None if has_enough_information(context, state) else next_question(context, state, memory)
        if question is not None:
            turn = IntakeTurn(
                kind=TurnKind.QUESTION,
                text=render_question(context, question, first),
                context=context,
                state=state,
                assessment=assessment,
                question=question,
                memory_candidates=candidates,
                is_first_response=first,
            )
            self.hooks.run_after(message, turn)
            return turn

        differentials = generate_differentials(context, assessment)
        level = internal_level(context, assessment)
        guidance = compose_guidance(
            context, assessment, differentials, request_context, level=level, memory=memory, today=today
        )
        turn = IntakeTurn(
            kind=TurnKind.GUIDANCE,
            text=render_guidance(guidance),
            context=context,
            state=state,
            assessment=assessment,
            guidance=guidance,
            differentials=differentials,
            memory_candidates=candidates,
            is_first_response=first,
        )
        self.hooks.run_after(message, turn)
        return turn
