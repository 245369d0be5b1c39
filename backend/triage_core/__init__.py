from .answers import infer_initial_context, parse_answer
from .categories import detect_symptom_category, uses_structured_pain_flow
from .differentials import generate_differentials, summarize_differentials
from .guidance import compose_guidance
from .hooks import HookRunner
from .models import (
    AgeGroup,
    CrisisType,
    DifferentialPossibility,
    Duration,
    Effectiveness,
    FlowType,
    ForWhom,
    Frequency,
    GeneralQuestion,
    GuidanceResponse,
    HealthContext,
    HomeRemedy,
    HomeRemedyPlan,
    NextQuestion,
    PainQuestion,
    QuestionFlowState,
    RequestContext,
    SafetyAssessment,
    SymptomCategory,
    TriageLevel,
    TurnKind,
    Urgency,
)
from .pipeline import IntakePipeline, IntakeTurn
from .remedies import suggest_home_remedies
from .question_flow import (
    UnknownQuestionError,
    answer_question,
    has_enough_information,
    initialize_question_flow,
    next_question,
    record_question_asked,
)
from .safety import (
    assess_message,
    classify,
    detect_crisis_type,
    format_crisis_resources,
    grade_self_care,
    to_external_urgency,
)

__all__ = [
    "AgeGroup",
    "CrisisType",
    "DifferentialPossibility",
    "Duration",
    "Effectiveness",
    "FlowType",
    "ForWhom",
    "Frequency",
    "GeneralQuestion",
    "GuidanceResponse",
    "HealthContext",
    "HomeRemedy",
    "HomeRemedyPlan",
    "HookRunner",
    "IntakePipeline",
    "IntakeTurn",
    "NextQuestion",
    "PainQuestion",
    "QuestionFlowState",
    "RequestContext",
    "SafetyAssessment",
    "SymptomCategory",
    "TriageLevel",
    "TurnKind",
    "UnknownQuestionError",
    "Urgency",
    "answer_question",
    "assess_message",
    "classify",
    "compose_guidance",
    "detect_crisis_type",
    "detect_symptom_category",
    "format_crisis_resources",
    "generate_differentials",
    "grade_self_care",
    "has_enough_information",
    "infer_initial_context",
    "initialize_question_flow",
    "next_question",
    "parse_answer",
    "record_question_asked",
    "suggest_home_remedies",
    "summarize_differentials",
    "to_external_urgency",
    "uses_structured_pain_flow",
]
