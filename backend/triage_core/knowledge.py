from __future__ import annotations

from dataclasses import dataclass

from .models import Duration, TriageLevel, UrgencyMessage


@dataclass(frozen=True)
class GuidanceEntry:
    name: str
    keywords: tuple[str, ...]
    possible_causes: tuple[str, ...]
    immediate_actions: tuple[str, ...]
    when_to_seek_help: tuple[str, ...]

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


GUIDANCE_DATABASE: tuple[GuidanceEntry, ...] = (
    GuidanceEntry(
        name="headache",
        keywords=("headache", "head pain", "migraine"),
        possible_causes=(
            "Tension or stress",
            "Dehydration",
            "Eye strain",
            "Sinus congestion",
            "Lack of sleep",
        ),
        immediate_actions=(
            "Rest in a quiet, dark room",
            "Stay hydrated - drink water",
            "Apply a cold or warm compress",
            "Take over-the-counter pain relief if appropriate",
            "Reduce screen time",
        ),
        when_to_seek_help=(
            "Headache is sudden and severe (worst of your life)",
            "Accompanied by fever, stiff neck, or confusion",
            "Following a head injury",
            "Getting progressively worse over days",
            "Accompanied by vision changes or numbness",
        ),
    ),
    GuidanceEntry(
        name="stomach",
        keywords=("stomach", "abdominal", "belly", "nausea", "vomit", "diarrhea"),
        possible_causes=(
            "Food-related issues (spoiled food, overeating)",
            "Viral gastroenteritis (stomach flu)",
            "Stress or anxiety",
            "Indigestion or acid reflux",
            "Food intolerance",
        ),
        immediate_actions=(
            "Stay hydrated with clear fluids (water, broth)",
            "Rest and avoid solid foods temporarily",
            "Eat bland foods when ready (BRAT diet: bananas, rice, applesauce, toast)",
            "Avoid dairy, caffeine, and fatty foods",
            "Try ginger tea for nausea",
        ),
        when_to_seek_help=(
            "Blood in vomit or stool",
            "Severe abdominal pain that doesn't improve",
            "Signs of dehydration (dark urine, dizziness)",
            "Fever above 101.3F (38.5C)",
            "Symptoms lasting more than 3 days",
        ),
    ),
    GuidanceEntry(
        name="cold_cough",
        keywords=("cough", "cold", "flu", "sore throat", "congestion", "runny nose"),
        possible_causes=(
            "Common cold (viral infection)",
            "Seasonal allergies",
            "Flu (influenza)",
            "Sinus infection",
            "Post-nasal drip",
        ),
        immediate_actions=(
            "Rest and get plenty of sleep",
            "Stay hydrated with warm fluids",
            "Use a humidifier to ease congestion",
            "Gargle with warm salt water for sore throat",
            "Take over-the-counter cold medicine if appropriate",
        ),
        when_to_seek_help=(
            "Difficulty breathing or shortness of breath",
            "High fever lasting more than 3 days",
            "Severe sore throat with difficulty swallowing",
            "Symptoms worsening after initial improvement",
            "Colored mucus (green/yellow) with facial pain",
        ),
    ),
    GuidanceEntry(
        name="back_pain",
        keywords=("back pain", "lower back", "spine", "backache"),
        possible_causes=(
            "Muscle strain or overuse",
            "Poor posture",
            "Prolonged sitting or standing",
            "Lifting heavy objects incorrectly",
            "Stress and tension",
        ),
        immediate_actions=(
            "Apply ice for first 48-72 hours, then switch to heat",
            "Take gentle walks to prevent stiffness",
            "Practice gentle stretching exercises",
            "Maintain good posture when sitting",
            "Use proper lifting techniques",
        ),
        when_to_seek_help=(
            "Pain radiating down the leg (sciatica)",
            "Numbness or tingling in legs",
            "Loss of bladder or bowel control",
            "Pain after a fall or injury",
            "Pain not improving after 2 weeks of self-care",
        ),
    ),
    GuidanceEntry(
        name="rash",
        keywords=("rash", "skin", "itch", "hives", "bumps"),
        possible_causes=(
            "Allergic reaction (contact dermatitis)",
            "Eczema or dry skin",
            "Insect bites",
            "Heat rash",
            "Viral infection",
        ),
        immediate_actions=(
            "Avoid scratching the affected area",
            "Apply cool compresses",
            "Use mild, fragrance-free moisturizer",
            "Take an antihistamine for itching if appropriate",
            "Identify and avoid potential triggers",
        ),
        when_to_seek_help=(
            "Rash spreading rapidly",
            "Accompanied by fever or difficulty breathing",
            "Signs of infection (warmth, pus, red streaks)",
            "Blisters or open sores",
            "Rash not improving after a week",
        ),
    ),
    GuidanceEntry(
        name="fever",
        keywords=("fever", "temperature", "chills", "hot"),
        possible_causes=(
            "Viral infection (cold, flu)",
            "Bacterial infection",
            "Body's immune response",
            "Recent vaccination",
            "Heat exhaustion",
        ),
        immediate_actions=(
            "Rest and stay home",
            "Stay hydrated with plenty of fluids",
            "Dress in light clothing",
            "Take fever-reducing medication if appropriate",
            "Monitor temperature regularly",
        ),
        when_to_seek_help=(
            "Temperature above 103F (39.4C)",
            "Fever lasting more than 3 days",
            "Accompanied by severe headache or stiff neck",
            "Difficulty breathing",
            "Confusion or unusual behavior",
        ),
    ),
    GuidanceEntry(
        name="fatigue",
        keywords=("fatigue", "tired", "exhausted", "weak", "no energy"),
        possible_causes=(
            "Lack of sleep or poor sleep quality",
            "Stress or overwork",
            "Dehydration",
            "Poor nutrition",
            "Fighting off an infection",
        ),
        immediate_actions=(
            "Prioritize getting 7-9 hours of sleep",
            "Stay hydrated throughout the day",
            "Eat balanced meals with protein and complex carbs",
            "Take short breaks during work",
            "Limit caffeine, especially after noon",
        ),
        when_to_seek_help=(
            "Fatigue lasting more than 2 weeks",
            "Accompanied by unexplained weight loss",
            "With shortness of breath or chest pain",
            "Affecting daily activities significantly",
            "With depression or mood changes",
        ),
    ),
    GuidanceEntry(
        name="anxiety",
        keywords=("anxiety", "anxious", "stress", "worry", "worried", "panic", "nervous"),
        possible_causes=(
            "Work or life stress",
            "Major life changes",
            "Caffeine or stimulant use",
            "Lack of sleep",
            "Underlying health concerns",
        ),
        immediate_actions=(
            "Practice deep breathing exercises",
            "Try the 5-4-3-2-1 grounding technique",
            "Take a short walk outside",
            "Limit caffeine and alcohol",
            "Talk to someone you trust",
        ),
        when_to_seek_help=(
            "Symptoms interfering with daily life",
            "Panic attacks or severe anxiety episodes",
            "Thoughts of self-harm",
            "Avoiding situations due to anxiety",
            "Physical symptoms like rapid heartbeat persisting",
        ),
    ),
)

MAX_MATCHED_ENTRIES = 2


def find_matching_guidance(text: str) -> tuple[GuidanceEntry, ...]:
    lowered = (text or "").lower()
    return tuple(entry for entry in GUIDANCE_DATABASE if entry.matches(lowered))[:MAX_MATCHED_ENTRIES]


UNDERSTANDING_OPENER = "Based on what you've shared"

DURATION_PHRASES: dict[Duration, str] = {
    Duration.JUST_NOW: "a very short time",
    Duration.FEW_HOURS: "a few hours",
    Duration.TODAY: "since earlier today",
    Duration.ONE_TO_TWO_DAYS: "1-2 days",
    Duration.THREE_TO_SEVEN_DAYS: "about a week",
    Duration.ONE_TO_TWO_WEEKS: "1-2 weeks",
    Duration.MORE_THAN_TWO_WEEKS: "more than 2 weeks",
    Duration.CHRONIC: "an extended period",
}
UNKNOWN_DURATION_PHRASE = "some time"


def duration_phrase(duration: Duration | None) -> str:
    if duration is None:
        return UNKNOWN_DURATION_PHRASE
    return DURATION_PHRASES.get(duration, UNKNOWN_DURATION_PHRASE)


GENERIC_CAUSES = (
    "Various factors could be contributing to these symptoms",
    "The body may be responding to stress or environmental factors",
    "This could be related to recent changes in routine or diet",
)
NOT_A_DIAGNOSIS_NOTE = "Note: These are general possibilities and not a diagnosis"

SEEK_CARE_NOW_ACTION = "Seek medical attention as soon as possible"
REST_ACTION = "Get adequate rest and sleep"
HYDRATION_ACTION = "Stay hydrated"
GENERIC_ACTIONS = (
    "Rest and monitor the symptoms",
    "Stay hydrated",
    "Note any changes or new symptoms",
)

RED_FLAG_WARNING = "Some concerning signs were mentioned - please monitor closely"
CATCH_ALL_WARNINGS = (
    "Symptoms significantly worsen or don't improve",
    "New concerning symptoms develop",
)

URGENCY_MESSAGES: dict[TriageLevel, UrgencyMessage] = {
    TriageLevel.EMERGENCY: UrgencyMessage(
        title="Seek Emergency Care",
        message=(
            "These symptoms need immediate medical attention. "
            "Please call 911 or go to the nearest emergency room."
        ),
        action_label="Call Emergency Services",
    ),
    TriageLevel.URGENT: UrgencyMessage(
        title="See a Doctor Today",
        message="These symptoms should be evaluated by a healthcare provider today.",
        action_label="Find Urgent Care",
    ),
    TriageLevel.SOON: UrgencyMessage(
        title="Schedule an Appointment",
        message="We recommend seeing a healthcare provider within the next 1-2 days.",
        action_label="Book Appointment",
    ),
    TriageLevel.NON_URGENT: UrgencyMessage(
        title="Consider a Check-up",
        message="While not urgent, a healthcare visit may be helpful when convenient.",
        action_label="Schedule When Ready",
    ),
    TriageLevel.MONITOR: UrgencyMessage(
        title="Monitor Your Symptoms",
        message="Keep track of the symptoms and watch for any changes.",
        action_label="Track Symptoms",
    ),
    TriageLevel.SELF_CARE: UrgencyMessage(
        title="Self-Care Recommended",
        message="These symptoms can likely be managed at home with proper care.",
        action_label="View Self-Care Tips",
    ),
}

DISCLAIMER = (
    "This is general guidance only, not a diagnosis. "
    "Please consult a healthcare provider for medical advice."
)
