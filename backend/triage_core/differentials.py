from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from .models import (
    AgeGroup,
    DifferentialPossibility,
    HealthContext,
    Likelihood,
    SafetyAssessment,
    Urgency,
)

logger = logging.getLogger(__name__)

MAX_DIFFERENTIALS = 3

_LIKELIHOOD_RANK = {Likelihood.HIGH: 0, Likelihood.MODERATE: 1, Likelihood.LOW: 2}
_UPGRADE = {Likelihood.LOW: Likelihood.MODERATE, Likelihood.MODERATE: Likelihood.HIGH, Likelihood.HIGH: Likelihood.HIGH}


@dataclass(frozen=True)
class DifferentialPattern:
    name: str
    required_symptoms: tuple[str, ...]
    optional_symptoms: tuple[str, ...]
    excluding_symptoms: tuple[str, ...]
    possibilities: tuple[DifferentialPossibility, ...]
    pediatric: tuple[DifferentialPossibility, ...] = ()
    senior: tuple[DifferentialPossibility, ...] = ()


def _possibility(
    name: str,
    description: str,
    likelihood: Likelihood,
    supporting_factors: tuple[str, ...],
    typical_presentation: str,
) -> DifferentialPossibility:
    return DifferentialPossibility(
        name=name,
        description=description,
        likelihood=likelihood,
        supporting_factors=supporting_factors,
        typical_presentation=typical_presentation,
    )


DIFFERENTIAL_PATTERNS: tuple[DifferentialPattern, ...] = (
    DifferentialPattern(
        name="headache",
        required_symptoms=("headache",),
        optional_symptoms=("nausea", "light", "sound", "aura", "throbbing"),
        excluding_symptoms=("worst headache", "sudden severe", "stiff neck"),
        possibilities=(
            _possibility(
                "Migraine",
                "A neurological condition with moderate to severe headache",
                Likelihood.HIGH,
                ("Throbbing quality", "Light/sound sensitivity", "Nausea", "History of similar"),
                "One-sided pulsating headache with nausea and light sensitivity",
            ),
            _possibility(
                "Tension-type headache",
                "Most common type of headache caused by muscle tension",
                Likelihood.MODERATE,
                ("Band-like pressure", "Both sides affected", "No nausea", "Stress related"),
                "Mild to moderate pressing/tightening sensation on both sides",
            ),
            _possibility(
                "Sinus headache",
                "Pain caused by sinus congestion or infection",
                Likelihood.LOW,
                ("Facial pressure", "Congestion", "Worse when bending", "Recent cold"),
                "Facial pain and pressure with nasal symptoms",
            ),
        ),
    ),
    DifferentialPattern(
        name="abdominal",
        required_symptoms=("stomach", "abdominal", "belly"),
        optional_symptoms=("nausea", "vomit", "diarrhea", "cramp", "bloat"),
        excluding_symptoms=("blood in stool", "severe", "chest pain"),
        possibilities=(
            _possibility(
                "Gastroenteritis (Stomach flu)",
                "Viral or bacterial infection of the digestive tract",
                Likelihood.HIGH,
                ("Diarrhea", "Vomiting", "Low-grade fever", "Recent exposure"),
                "Nausea, vomiting, diarrhea, and abdominal cramps",
            ),
            _possibility(
                "Indigestion / Dyspepsia",
                "Discomfort in the upper abdomen related to eating",
                Likelihood.MODERATE,
                ("After eating", "Bloating", "Burning sensation", "No fever"),
                "Upper abdominal discomfort, bloating, or burning after meals",
            ),
            _possibility(
                "Food intolerance",
                "Digestive difficulty with certain foods",
                Likelihood.LOW,
                ("Specific food trigger", "Bloating", "Gas", "Pattern with foods"),
                "Symptoms appearing after consuming specific foods",
            ),
        ),
        pediatric=(
            _possibility(
                "Viral gastroenteritis",
                "Common stomach bug in children",
                Likelihood.HIGH,
                ("Daycare/school exposure", "Other sick children", "Sudden onset"),
                "Vomiting and diarrhea with possible low fever",
            ),
        ),
    ),
    DifferentialPattern(
        name="fever",
        required_symptoms=("fever", "temperature", "chills"),
        optional_symptoms=("cough", "throat", "ache", "fatigue", "congestion"),
        excluding_symptoms=("stiff neck", "rash", "confusion"),
        possibilities=(
            _possibility(
                "Viral upper respiratory infection",
                "Common cold or similar viral infection",
                Likelihood.HIGH,
                ("Cough", "Congestion", "Sore throat", "Recent exposure"),
                "Low-grade fever with cold symptoms",
            ),
            _possibility(
                "Influenza (Flu)",
                "Viral respiratory illness",
                Likelihood.MODERATE,
                ("High fever", "Body aches", "Sudden onset", "Flu season"),
                "High fever, severe body aches, fatigue with respiratory symptoms",
            ),
            _possibility(
                "Bacterial infection",
                "Infection requiring possible antibiotic treatment",
                Likelihood.LOW,
                ("Prolonged fever", "Getting worse", "Localized symptoms"),
                "Fever not improving with symptoms localizing to one area",
            ),
        ),
        pediatric=(
            _possibility(
                "Ear infection (Otitis media)",
                "Common childhood ear infection",
                Likelihood.MODERATE,
                ("Ear pulling", "Irritability", "Recent cold", "Night crying"),
                "Fever with ear pain or tugging, often after a cold",
            ),
        ),
        senior=(
            _possibility(
                "Urinary tract infection",
                "UTI can present atypically in elderly",
                Likelihood.MODERATE,
                ("Confusion", "Urinary symptoms", "Low-grade fever"),
                "May present with confusion or falls without typical UTI symptoms",
            ),
        ),
    ),
    DifferentialPattern(
        name="cough",
        required_symptoms=("cough",),
        optional_symptoms=("congestion", "throat", "wheeze", "phlegm", "fever"),
        excluding_symptoms=("blood", "chest pain", "shortness of breath"),
        possibilities=(
            _possibility(
                "Common cold",
                "Viral upper respiratory infection",
                Likelihood.HIGH,
                ("Runny nose", "Mild symptoms", "Gradual onset", "No high fever"),
                "Nasal congestion, runny nose, sore throat, and mild cough",
            ),
            _possibility(
                "Acute bronchitis",
                "Inflammation of the bronchial tubes",
                Likelihood.MODERATE,
                ("Productive cough", "Chest congestion", "Following cold", "Cough worsening"),
                "Persistent cough with mucus production after a cold",
            ),
            _possibility(
                "Allergic rhinitis",
                "Allergic response affecting the upper airway",
                Likelihood.LOW,
                ("Seasonal pattern", "Itchy eyes", "No fever", "Clear discharge"),
                "Sneezing, itchy eyes, clear runny nose without fever",
            ),
        ),
    ),
    DifferentialPattern(
        name="back",
        required_symptoms=("back", "spine"),
        optional_symptoms=("stiff", "muscle", "ache", "sharp"),
        excluding_symptoms=("numbness", "weakness", "bladder", "bowel"),
        possibilities=(
            _possibility(
                "Muscle strain",
                "Overuse or injury to back muscles",
                Likelihood.HIGH,
                ("Recent activity", "Lifting", "Localized pain", "Improves with rest"),
                "Localized pain that worsens with movement and improves with rest",
            ),
            _possibility(
                "Postural back pain",
                "Pain related to posture and positioning",
                Likelihood.MODERATE,
                ("Desk work", "Prolonged sitting", "End of day worse", "Improves with stretching"),
                "Dull ache that develops through the day with sedentary work",
            ),
            _possibility(
                "Degenerative changes",
                "Age-related changes in the spine",
                Likelihood.LOW,
                ("Age over 40", "Chronic pattern", "Morning stiffness", "Gradual onset"),
                "Chronic intermittent pain with morning stiffness",
            ),
        ),
    ),
)

FURTHER_EVALUATION_PLACEHOLDER = _possibility(
    "Further evaluation needed",
    "Multiple factors could be contributing to these symptoms",
    Likelihood.MODERATE,
    ("Symptom pattern requires professional evaluation",),
    "Symptoms may have multiple possible explanations",
)


def _age_modifiers(pattern: DifferentialPattern, age_group: AgeGroup | None) -> tuple[DifferentialPossibility, ...]:
    if age_group in (AgeGroup.INFANT, AgeGroup.CHILD):
        return pattern.pediatric
    if age_group == AgeGroup.SENIOR:
        return pattern.senior
    return ()


def generate_differentials(
    context: HealthContext,
    assessment: SafetyAssessment | None = None,
) -> tuple[DifferentialPossibility, ...]:
    """Ranked, name-unique possibilities (at most three), never empty.

    Low-likelihood explanations are left out at emergency urgency.
    """
    emergency = assessment is not None and assessment.urgency == Urgency.EMERGENCY
    text = context.symptom_text(include_notes=True)
    candidates: list[DifferentialPossibility] = []

    for pattern in DIFFERENTIAL_PATTERNS:
        if not any(symptom in text for symptom in pattern.required_symptoms):
            continue
        if any(symptom in text for symptom in pattern.excluding_symptoms):
            logger.debug("differential pattern %s excluded", pattern.name)
            continue
        optional_hits = sum(1 for symptom in pattern.optional_symptoms if symptom in text)
        for possibility in pattern.possibilities:
            if optional_hits >= 2:
                possibility = replace(possibility, likelihood=_UPGRADE[possibility.likelihood])
            candidates.append(possibility)
        candidates.extend(_age_modifiers(pattern, context.age_group))

    candidates.sort(key=lambda item: _LIKELIHOOD_RANK[item.likelihood])

    ranked: list[DifferentialPossibility] = []
    seen: set[str] = set()
    for possibility in candidates:
        if possibility.name in seen:
            continue
        if emergency and possibility.likelihood == Likelihood.LOW:
            continue
        seen.add(possibility.name)
        ranked.append(possibility)
        if len(ranked) == MAX_DIFFERENTIALS:
            break

    if not ranked:
        return (FURTHER_EVALUATION_PLACEHOLDER,)
    return tuple(ranked)


def summarize_differentials(possibilities: tuple[DifferentialPossibility, ...]) -> dict[str, object]:
    if not possibilities:
        possibilities = (FURTHER_EVALUATION_PLACEHOLDER,)
    primary, *secondary = possibilities
    return {
        "primary": primary.name,
        "description": primary.description,
        "secondary": [{"name": item.name, "description": item.description} for item in secondary],
    }
