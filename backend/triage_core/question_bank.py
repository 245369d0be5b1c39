from __future__ import annotations

from dataclasses import dataclass

from .models import (
    AgeGroup,
    ContextField,
    GeneralQuestion,
    HealthContext,
    PainQuestion,
    QuickOption,
    SymptomCategory,
)


def _options(*entries: tuple[str, str, str]) -> tuple[QuickOption, ...]:
    return tuple(QuickOption(id=option_id, label=label, value=value) for option_id, label, value in entries)


@dataclass(frozen=True)
class PainPrompt:
    tag: PainQuestion
    question: str
    explanation: str
    context_field: ContextField
    note_label: str
    quick_options: tuple[QuickOption, ...] = ()


@dataclass(frozen=True)
class SymptomQuestion:
    id: str
    question: str
    context_field: ContextField
    required: bool = False
    explanation: str | None = None
    quick_options: tuple[QuickOption, ...] = ()
    infant_only: bool = False


@dataclass(frozen=True)
class GeneralTemplate:
    tag: GeneralQuestion
    question: str
    context_field: ContextField
    quick_options: tuple[QuickOption, ...] = ()


PAIN_QUESTION_ORDER: tuple[PainQuestion, ...] = (
    PainQuestion.ONSET,
    PainQuestion.QUALITY,
    PainQuestion.SEVERITY,
    PainQuestion.RADIATION,
    PainQuestion.PROVOCATION,
    PainQuestion.PALLIATION,
    PainQuestion.TIMING,
)
PRIORITY_PAIN_QUESTIONS = frozenset({PainQuestion.ONSET, PainQuestion.QUALITY, PainQuestion.SEVERITY})

PAIN_PROMPTS: dict[PainQuestion, PainPrompt] = {
    PainQuestion.ONSET: PainPrompt(
        tag=PainQuestion.ONSET,
        question="When did this pain start? Was it sudden or did it come on gradually?",
        explanation="Understanding the onset helps identify the cause",
        context_field=ContextField.ADDITIONAL_NOTES,
        note_label="Onset",
        quick_options=_options(
            ("sudden", "Sudden", "sudden onset"),
            ("gradual", "Gradual", "gradual onset"),
            ("woke_up", "Woke up with it", "woke up with pain"),
            ("after_activity", "After activity", "started after activity"),
        ),
    ),
    PainQuestion.PROVOCATION: PainPrompt(
        tag=PainQuestion.PROVOCATION,
        question="What makes the pain worse?",
        explanation="Knowing triggers helps narrow down the cause",
        context_field=ContextField.ADDITIONAL_NOTES,
        note_label="Worse with",
        quick_options=_options(
            ("movement", "Movement", "worse with movement"),
            ("pressure", "Pressure/touch", "worse with pressure"),
            ("breathing", "Deep breathing", "worse with breathing"),
            ("eating", "Eating", "worse after eating"),
            ("nothing", "Nothing specific", "no specific trigger"),
        ),
    ),
    PainQuestion.PALLIATION: PainPrompt(
        tag=PainQuestion.PALLIATION,
        question="What makes the pain better, if anything?",
        explanation="Relief patterns help with recommendations",
        context_field=ContextField.ADDITIONAL_NOTES,
        note_label="Better with",
        quick_options=_options(
            ("rest", "Rest", "better with rest"),
            ("medication", "Medication", "better with medication"),
            ("position", "Certain position", "better in certain position"),
            ("heat_cold", "Heat/cold", "better with heat or cold"),
            ("nothing", "Nothing helps", "nothing provides relief"),
        ),
    ),
    PainQuestion.QUALITY: PainPrompt(
        tag=PainQuestion.QUALITY,
        question="How would you describe the pain?",
        explanation="The type of pain gives important clues",
        context_field=ContextField.ADDITIONAL_NOTES,
        note_label="Quality",
        quick_options=_options(
            ("sharp", "Sharp/stabbing", "sharp stabbing pain"),
            ("dull", "Dull/aching", "dull aching pain"),
            ("burning", "Burning", "burning pain"),
            ("throbbing", "Throbbing/pulsing", "throbbing pain"),
            ("cramping", "Cramping", "cramping pain"),
            ("pressure", "Pressure/squeezing", "pressure or squeezing"),
        ),
    ),
    PainQuestion.RADIATION: PainPrompt(
        tag=PainQuestion.RADIATION,
        question="Does the pain spread or radiate to other areas?",
        explanation="Radiation patterns are diagnostically important",
        context_field=ContextField.ADDITIONAL_NOTES,
        note_label="Radiation",
        quick_options=_options(
            ("no", "Stays in one place", "localized pain"),
            ("nearby", "Spreads nearby", "radiates to nearby area"),
            ("down_limb", "Down arm/leg", "radiates down limb"),
            ("back", "To the back", "radiates to back"),
        ),
    ),
    PainQuestion.SEVERITY: PainPrompt(
        tag=PainQuestion.SEVERITY,
        question="On a scale of 0-10, how severe is the pain right now? (0 = no pain, 10 = worst imaginable)",
        explanation="This helps assess urgency",
        context_field=ContextField.SEVERITY,
        note_label="Severity",
        quick_options=_options(
            ("mild", "1-3 (Mild)", "3"),
            ("moderate", "4-6 (Moderate)", "5"),
            ("severe", "7-8 (Severe)", "8"),
            ("very_severe", "9-10 (Very severe)", "10"),
        ),
    ),
    PainQuestion.TIMING: PainPrompt(
        tag=PainQuestion.TIMING,
        question="Is the pain constant, or does it come and go?",
        explanation="Pain pattern helps identify the cause",
        context_field=ContextField.FREQUENCY,
        note_label="Timing",
        quick_options=_options(
            ("constant", "Constant", "constant pain"),
            ("comes_goes", "Comes and goes", "intermittent pain"),
            ("worse_time", "Worse at certain times", "worse at certain times"),
            ("worsening", "Getting worse", "progressively worsening"),
        ),
    ),
}


GI_QUESTIONS: tuple[SymptomQuestion, ...] = (
    SymptomQuestion(
        id="gi_vomiting",
        question="Are you experiencing any vomiting?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        required=True,
        quick_options=_options(
            ("no", "No vomiting", "no vomiting"),
            ("once", "Once or twice", "vomited once or twice"),
            ("multiple", "Multiple times", "vomiting multiple times"),
            ("blood", "Vomiting blood", "vomiting blood"),
        ),
    ),
    SymptomQuestion(
        id="gi_diarrhea",
        question="Any diarrhea or changes in bowel movements?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        required=True,
        quick_options=_options(
            ("no", "No changes", "normal bowel movements"),
            ("diarrhea", "Diarrhea", "diarrhea"),
            ("constipation", "Constipation", "constipation"),
            ("blood", "Blood in stool", "blood in stool"),
        ),
    ),
    SymptomQuestion(
        id="gi_last_bm",
        question="When was your last bowel movement?",
        context_field=ContextField.ADDITIONAL_NOTES,
        quick_options=_options(
            ("today", "Today", "bowel movement today"),
            ("yesterday", "Yesterday", "bowel movement yesterday"),
            ("2_3_days", "2-3 days ago", "no bowel movement 2-3 days"),
            ("longer", "More than 3 days", "no bowel movement 3+ days"),
        ),
    ),
    SymptomQuestion(
        id="gi_food_exposure",
        question="Have you eaten anything unusual or possibly spoiled recently?",
        context_field=ContextField.RECENT_EVENTS,
        quick_options=_options(
            ("no", "No", "no unusual food"),
            ("restaurant", "Restaurant food", "ate at restaurant"),
            ("questionable", "Possibly spoiled food", "possibly spoiled food"),
            ("new_food", "New food", "tried new food"),
        ),
    ),
    SymptomQuestion(
        id="gi_hydration",
        question="Are you able to keep fluids down?",
        context_field=ContextField.ADDITIONAL_NOTES,
        required=True,
        explanation="Dehydration is a concern with GI symptoms",
        quick_options=_options(
            ("yes", "Yes, drinking okay", "keeping fluids down"),
            ("some", "Some fluids", "keeping some fluids down"),
            ("no", "No, can't keep anything down", "cannot keep fluids down"),
        ),
    ),
)

HEADACHE_QUESTIONS: tuple[SymptomQuestion, ...] = (
    SymptomQuestion(
        id="headache_worst",
        question="Is this the worst headache of your life?",
        context_field=ContextField.ADDITIONAL_NOTES,
        required=True,
        explanation='A "thunderclap" headache requires immediate attention',
        quick_options=_options(
            ("no", "No", "not the worst of life"),
            ("severe_but_not_worst", "Severe, but not the worst", "severe but not the worst of life"),
            ("yes", "Yes, worst ever", "worst headache of life"),
        ),
    ),
    SymptomQuestion(
        id="headache_neuro",
        question="Are you noticing any vision changes, weakness, or difficulty speaking?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        required=True,
        explanation="Neurological symptoms need urgent evaluation",
        quick_options=_options(
            ("no", "No", "no neurological symptoms"),
            ("vision", "Vision changes", "vision changes"),
            ("weakness", "Weakness", "weakness"),
            ("speech", "Speech difficulty", "speech difficulty"),
        ),
    ),
    SymptomQuestion(
        id="headache_neck",
        question="Is there a stiff neck or fever along with the headache?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        required=True,
        explanation="This combination can indicate serious infection",
        quick_options=_options(
            ("neither", "Neither", "no stiff neck or fever"),
            ("fever", "Fever only", "fever with headache"),
            ("neck", "Stiff neck", "stiff neck with headache"),
            ("both", "Both", "stiff neck and fever with headache"),
        ),
    ),
    SymptomQuestion(
        id="headache_injury",
        question="Any recent head injury or trauma?",
        context_field=ContextField.RECENT_EVENTS,
        quick_options=_options(
            ("no", "No", "no head injury"),
            ("minor", "Minor bump", "minor head bump"),
            ("fall", "Fall", "fell and hit head"),
            ("accident", "Accident/significant injury", "significant head injury"),
        ),
    ),
    SymptomQuestion(
        id="headache_history",
        question="Is there a history of migraines or frequent headaches?",
        context_field=ContextField.CHRONIC_CONDITIONS,
        quick_options=_options(
            ("no", "No", "no headache history"),
            ("occasional", "Occasional headaches", "occasional headaches"),
            ("migraines", "Known migraines", "history of migraines"),
            ("frequent", "Frequent headaches", "frequent headaches"),
        ),
    ),
    SymptomQuestion(
        id="headache_light_sound",
        question="Is the headache sensitive to light or sound?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        quick_options=_options(
            ("no", "No", "no light or sound sensitivity"),
            ("light", "Light bothers me", "light sensitivity"),
            ("sound", "Sound bothers me", "sound sensitivity"),
            ("both", "Both", "light and sound sensitivity"),
        ),
    ),
)

FEVER_QUESTIONS: tuple[SymptomQuestion, ...] = (
    SymptomQuestion(
        id="fever_temp",
        question="Do you know your temperature? If so, what is it?",
        context_field=ContextField.ADDITIONAL_NOTES,
        required=True,
        quick_options=_options(
            ("unknown", "Haven't checked", "temperature not measured"),
            ("low", "Under 100.4°F (38°C)", "low-grade fever under 100.4"),
            ("moderate", "100.4-102°F (38-39°C)", "fever 100.4-102"),
            ("high", "Over 102°F (39°C)", "high fever over 102"),
            ("very_high", "Over 104°F (40°C)", "very high fever over 104"),
        ),
    ),
    SymptomQuestion(
        id="fever_chills",
        question="Are you experiencing chills or sweating?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        quick_options=_options(
            ("no", "No", "no chills or sweats"),
            ("chills", "Chills", "chills"),
            ("sweats", "Sweating", "sweating"),
            ("both", "Both", "chills and sweating"),
        ),
    ),
    SymptomQuestion(
        id="fever_cough",
        question="Is there a cough as well?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        quick_options=_options(
            ("no", "No cough", "no cough"),
            ("dry", "Dry cough", "dry cough"),
            ("productive", "Cough with mucus", "productive cough"),
            ("blood", "Coughing blood", "coughing blood"),
        ),
    ),
    SymptomQuestion(
        id="fever_throat",
        question="Is your throat sore?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        quick_options=_options(
            ("no", "No", "no sore throat"),
            ("mild", "Mild irritation", "mild sore throat"),
            ("moderate", "Painful to swallow", "painful sore throat"),
            ("severe", "Very painful", "severe sore throat"),
        ),
    ),
    SymptomQuestion(
        id="fever_body_aches",
        question="Are you experiencing body aches?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        quick_options=_options(
            ("no", "No", "no body aches"),
            ("mild", "Mild aches", "mild body aches"),
            ("moderate", "Moderate aches", "moderate body aches"),
            ("severe", "Severe aches", "severe body aches"),
        ),
    ),
    SymptomQuestion(
        id="fever_exposure",
        question="Have you been around anyone who is sick?",
        context_field=ContextField.RECENT_EVENTS,
        quick_options=_options(
            ("no", "No", "no sick contacts"),
            ("family", "Family member", "sick family member"),
            ("work", "Coworker", "sick coworker"),
            ("unknown", "Not sure", "possible sick exposure"),
        ),
    ),
)

RESPIRATORY_QUESTIONS: tuple[SymptomQuestion, ...] = (
    SymptomQuestion(
        id="resp_breathing",
        question="Is breathing harder than usual, even at rest or with light activity?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        required=True,
        explanation="Breathing difficulty changes how quickly care is needed",
        quick_options=_options(
            ("no", "Breathing normally", "no breathing difficulty"),
            ("exertion", "Only with activity", "short of breath with activity"),
            ("rest", "Even at rest", "short of breath at rest"),
            ("struggling", "Struggling to breathe", "can't breathe properly"),
        ),
    ),
    SymptomQuestion(
        id="resp_cough_type",
        question="What is the cough like?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        quick_options=_options(
            ("none", "No cough", "no cough"),
            ("dry", "Dry cough", "dry cough"),
            ("productive", "Cough with mucus", "productive cough"),
            ("blood", "Coughing blood", "coughing blood"),
        ),
    ),
    SymptomQuestion(
        id="resp_exposure",
        question="Have you been around anyone with a cold, flu, or other illness?",
        context_field=ContextField.RECENT_EVENTS,
        quick_options=_options(
            ("no", "No", "no sick contacts"),
            ("family", "Family member", "sick family member"),
            ("work", "Coworker", "sick coworker"),
            ("unknown", "Not sure", "possible sick exposure"),
        ),
    ),
)

SKIN_QUESTIONS: tuple[SymptomQuestion, ...] = (
    SymptomQuestion(
        id="skin_spread",
        question="Is the affected area changing in size or moving to other areas?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        required=True,
        explanation="A fast-changing rash needs a closer look",
        quick_options=_options(
            ("no", "Staying the same", "not changing"),
            ("slow", "Slowly growing", "slowly spreading rash"),
            ("fast", "Changing quickly", "rash spreading quickly"),
        ),
    ),
    SymptomQuestion(
        id="skin_trigger",
        question="Did anything new touch your skin recently, like a product, plant, or insect?",
        context_field=ContextField.RECENT_EVENTS,
        quick_options=_options(
            ("no", "Nothing new", "no new exposure"),
            ("product", "New soap/lotion", "new skin product"),
            ("plant", "Plant or outdoors", "outdoor plant exposure"),
            ("insect", "Insect bite", "insect bite"),
        ),
    ),
    SymptomQuestion(
        id="skin_itch",
        question="Is it itchy or painful?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        quick_options=_options(
            ("neither", "Neither", "no itching or pain"),
            ("itchy", "Itchy", "itching"),
            ("painful", "Painful", "painful skin"),
            ("both", "Both", "itching and painful skin"),
        ),
    ),
)

NEUROLOGICAL_QUESTIONS: tuple[SymptomQuestion, ...] = (
    SymptomQuestion(
        id="neuro_sudden",
        question="Did this come on suddenly, with any weakness on one side or trouble speaking?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        required=True,
        explanation="Sudden one-sided weakness needs emergency care",
        quick_options=_options(
            ("no", "No", "no sudden weakness"),
            ("sudden", "Came on suddenly", "sudden dizziness"),
            ("weakness", "One-sided weakness", "sudden weakness"),
            ("speech", "Trouble speaking", "speech difficulty"),
        ),
    ),
    SymptomQuestion(
        id="neuro_fainting",
        question="Did you faint or come close to fainting?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        quick_options=_options(
            ("no", "No", "no fainting"),
            ("near", "Almost fainted", "near fainting"),
            ("yes", "Fainted", "fainted"),
        ),
    ),
    SymptomQuestion(
        id="neuro_position",
        question="Does it get worse when you stand up or turn your head?",
        context_field=ContextField.ADDITIONAL_NOTES,
        quick_options=_options(
            ("no", "No difference", "no positional change"),
            ("standing", "When standing up", "worse when standing up"),
            ("head", "When turning head", "worse when turning head"),
        ),
    ),
)

PEDIATRIC_QUESTIONS: tuple[SymptomQuestion, ...] = (
    SymptomQuestion(
        id="peds_feeding",
        question="Is the child eating and drinking normally?",
        context_field=ContextField.ADDITIONAL_NOTES,
        required=True,
        quick_options=_options(
            ("yes", "Yes, normal", "eating and drinking normally"),
            ("less", "Less than usual", "eating less than usual"),
            ("refusing", "Refusing to eat/drink", "not eating or drinking"),
        ),
    ),
    SymptomQuestion(
        id="peds_wet_diapers",
        question="How many wet diapers in the last 24 hours?",
        context_field=ContextField.ADDITIONAL_NOTES,
        required=True,
        infant_only=True,
        quick_options=_options(
            ("normal", "6+ (normal)", "6+ wet diapers normal"),
            ("less", "3-5 (fewer than usual)", "3-5 wet diapers"),
            ("very_few", "Less than 3", "less than 3 wet diapers"),
        ),
    ),
    SymptomQuestion(
        id="peds_activity",
        question="How is the child's activity level?",
        context_field=ContextField.ADDITIONAL_NOTES,
        required=True,
        quick_options=_options(
            ("normal", "Normal/playful", "normal activity level"),
            ("less", "Less active than usual", "less active than usual"),
            ("lethargic", "Very tired/hard to wake", "lethargic hard to wake"),
        ),
    ),
    SymptomQuestion(
        id="peds_crying",
        question="Is the child's crying different than usual?",
        context_field=ContextField.ADDITIONAL_NOTES,
        quick_options=_options(
            ("normal", "Normal crying", "normal crying"),
            ("more", "Crying more than usual", "crying more than usual"),
            ("inconsolable", "Won't stop crying", "inconsolable crying"),
            ("high_pitched", "High-pitched cry", "high-pitched cry"),
        ),
    ),
    SymptomQuestion(
        id="peds_rash",
        question="Does the child have any rash?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        quick_options=_options(
            ("no", "No rash", "no rash"),
            ("minor", "Minor rash", "minor rash"),
            ("spreading", "Spreading rash", "spreading rash"),
            ("purple", "Purple/red spots", "purple or red spots"),
        ),
    ),
)

CATEGORY_QUESTIONS: dict[SymptomCategory, tuple[SymptomQuestion, ...]] = {
    SymptomCategory.GI: GI_QUESTIONS,
    SymptomCategory.HEADACHE: HEADACHE_QUESTIONS,
    SymptomCategory.FEVER: FEVER_QUESTIONS,
    SymptomCategory.RESPIRATORY: RESPIRATORY_QUESTIONS,
    SymptomCategory.SKIN: SKIN_QUESTIONS,
    SymptomCategory.NEUROLOGICAL: NEUROLOGICAL_QUESTIONS,
}

SYMPTOM_QUESTIONS_BY_ID: dict[str, SymptomQuestion] = {
    question.id: question
    for question in (*PEDIATRIC_QUESTIONS, *[q for group in CATEGORY_QUESTIONS.values() for q in group])
}


GENERAL_TEMPLATES: dict[GeneralQuestion, GeneralTemplate] = {
    GeneralQuestion.DURATION: GeneralTemplate(
        tag=GeneralQuestion.DURATION,
        question="How long have you been experiencing {symptom}?",
        context_field=ContextField.DURATION,
        quick_options=_options(
            ("just_now", "Just started", "just_now"),
            ("today", "Today", "today"),
            ("1_2_days", "1-2 days", "1_2_days"),
            ("3_7_days", "3-7 days", "3_7_days"),
            ("1_2_weeks", "1-2 weeks", "1_2_weeks"),
            ("more", "Longer", "more_than_2_weeks"),
        ),
    ),
    GeneralQuestion.SEVERITY: GeneralTemplate(
        tag=GeneralQuestion.SEVERITY,
        question=(
            "On a scale of 1 to 10, how would you rate the severity? "
            "(1 being very mild, 10 being the worst you can imagine)"
        ),
        context_field=ContextField.SEVERITY,
        quick_options=_options(
            ("mild", "1-3 (Mild)", "3"),
            ("moderate", "4-6 (Moderate)", "5"),
            ("severe", "7-8 (Severe)", "8"),
            ("very_severe", "9-10 (Very severe)", "10"),
        ),
    ),
    GeneralQuestion.FREQUENCY: GeneralTemplate(
        tag=GeneralQuestion.FREQUENCY,
        question="Is {symptom} constant, or does it come and go?",
        context_field=ContextField.FREQUENCY,
        quick_options=_options(
            ("constant", "Constant", "constant"),
            ("intermittent", "Comes and goes", "intermittent"),
            ("occasional", "Occasional", "occasional"),
            ("first_time", "First time", "first_time"),
        ),
    ),
    GeneralQuestion.ASSOCIATED_SYMPTOMS: GeneralTemplate(
        tag=GeneralQuestion.ASSOCIATED_SYMPTOMS,
        question="Are you experiencing any other symptoms along with {symptom}?",
        context_field=ContextField.ASSOCIATED_SYMPTOMS,
        quick_options=_options(
            ("none", "No other symptoms", "none"),
            ("fever", "Fever", "fever"),
            ("fatigue", "Fatigue", "fatigue"),
            ("nausea", "Nausea", "nausea"),
        ),
    ),
    GeneralQuestion.RISK_FACTORS: GeneralTemplate(
        tag=GeneralQuestion.RISK_FACTORS,
        question="Are there any known health conditions or regular medications I should know about?",
        context_field=ContextField.RISK_FACTORS,
        quick_options=_options(
            ("none", "None", "none"),
            ("diabetes", "Diabetes", "diabetes"),
            ("heart", "Heart condition", "heart condition"),
            ("bp", "High blood pressure", "hypertension"),
        ),
    ),
    GeneralQuestion.AGE: GeneralTemplate(
        tag=GeneralQuestion.AGE,
        question="What age group does this concern?",
        context_field=ContextField.AGE_GROUP,
        quick_options=_options(
            ("child", "Child (under 12)", "child"),
            ("teen", "Teen (13-17)", "teen"),
            ("adult", "Adult (18-64)", "adult"),
            ("senior", "Senior (65+)", "senior"),
        ),
    ),
    GeneralQuestion.CHRONIC_CONDITIONS: GeneralTemplate(
        tag=GeneralQuestion.CHRONIC_CONDITIONS,
        question="Are there any chronic health conditions I should be aware of?",
        context_field=ContextField.CHRONIC_CONDITIONS,
        quick_options=_options(
            ("none", "None", "none"),
            ("diabetes", "Diabetes", "diabetes"),
            ("hypertension", "Hypertension", "hypertension"),
            ("asthma", "Asthma", "asthma"),
        ),
    ),
    GeneralQuestion.RECENT_EVENTS: GeneralTemplate(
        tag=GeneralQuestion.RECENT_EVENTS,
        question=(
            "Has anything happened recently that might be related? "
            "Such as an injury, travel, new food, or unusual activity?"
        ),
        context_field=ContextField.RECENT_EVENTS,
        quick_options=_options(
            ("nothing", "Nothing specific", "nothing"),
            ("injury", "Recent injury", "injury"),
            ("travel", "Recent travel", "travel"),
            ("food", "New food", "food"),
        ),
    ),
    GeneralQuestion.MEDICATIONS: GeneralTemplate(
        tag=GeneralQuestion.MEDICATIONS,
        question="Are you currently taking any medications?",
        context_field=ContextField.MEDICATIONS,
        quick_options=_options(
            ("none", "None", "none"),
            ("otc", "Over-the-counter only", "over-the-counter medication"),
            ("prescription", "Prescription meds", "prescription medication"),
        ),
    ),
    GeneralQuestion.LOCATION: GeneralTemplate(
        tag=GeneralQuestion.LOCATION,
        question="Where exactly are you feeling {symptom}?",
        context_field=ContextField.ADDITIONAL_NOTES,
    ),
    GeneralQuestion.TRIGGERS: GeneralTemplate(
        tag=GeneralQuestion.TRIGGERS,
        question="Have you noticed anything that makes {symptom} better or worse?",
        context_field=ContextField.ADDITIONAL_NOTES,
        quick_options=_options(
            ("movement", "Movement", "movement"),
            ("rest", "Rest", "rest"),
            ("food", "Eating", "food"),
            ("unknown", "Not sure", "unknown"),
        ),
    ),
    GeneralQuestion.RELIEF_ATTEMPTS: GeneralTemplate(
        tag=GeneralQuestion.RELIEF_ATTEMPTS,
        question="Have you tried anything to relieve the symptoms? If so, did it help?",
        context_field=ContextField.ADDITIONAL_NOTES,
        quick_options=_options(
            ("none", "Haven't tried anything", "none"),
            ("rest", "Rest", "rest"),
            ("medication", "Over-the-counter meds", "medication"),
            ("other", "Other remedies", "other"),
        ),
    ),
}

GENERAL_QUESTION_ORDER: tuple[GeneralQuestion, ...] = (
    GeneralQuestion.DURATION,
    GeneralQuestion.SEVERITY,
    GeneralQuestion.ASSOCIATED_SYMPTOMS,
    GeneralQuestion.CHRONIC_CONDITIONS,
    GeneralQuestion.MEDICATIONS,
)

_ASSOCIATED_SUGGESTIONS: list[tuple[tuple[str, ...], tuple[str, ...]]] = [
    (("headache", "head"), ("nausea", "sensitivity to light", "neck stiffness")),
    (("stomach", "abdominal"), ("nausea", "vomiting", "fever", "diarrhea")),
    (("chest",), ("shortness of breath", "arm pain", "sweating")),
    (("fever", "cold", "flu"), ("body aches", "fatigue", "sore throat", "cough")),
    (("cough",), ("fever", "sore throat", "congestion", "fatigue")),
    (("back", "muscle"), ("stiffness", "weakness", "numbness", "tingling")),
]
_DEFAULT_SUGGESTIONS = ("fever", "fatigue", "nausea")


def symptom_questions_for(category: SymptomCategory, context: HealthContext) -> tuple[SymptomQuestion, ...]:
    """Pediatric questions first (for infants and children), then the category's own set."""
    questions: list[SymptomQuestion] = []
    if context.is_pediatric:
        questions.extend(
            question
            for question in PEDIATRIC_QUESTIONS
            if not question.infant_only or context.age_group == AgeGroup.INFANT
        )
    questions.extend(CATEGORY_QUESTIONS.get(category, ()))
    return tuple(questions)


def associated_symptom_suggestions(primary_symptom: str) -> tuple[str, ...]:
    symptom = (primary_symptom or "").lower()
    for keywords, suggestions in _ASSOCIATED_SUGGESTIONS:
        if any(keyword in symptom for keyword in keywords):
            return suggestions
    return _DEFAULT_SUGGESTIONS


def render_general_question(tag: GeneralQuestion, context: HealthContext) -> str:
    template = GENERAL_TEMPLATES[tag]
    symptom = (context.primary_symptom or "").strip().lower() or "this"
    text = template.question.format(symptom=symptom)
    if tag == GeneralQuestion.ASSOCIATED_SYMPTOMS:
        suggestions = associated_symptom_suggestions(context.primary_symptom)
        text = f"{text} For example: {', '.join(suggestions)}?"
    return text
