from __future__ import annotations

import re

from .models import (
    AgeGroup,
    ContextField,
    ContextUpdate,
    Duration,
    Frequency,
    HealthContext,
    QuickOption,
    RequestContext,
)

DEFAULT_DURATION = Duration.ONE_TO_TWO_DAYS
DEFAULT_SEVERITY = 5
DEFAULT_FREQUENCY = Frequency.INTERMITTENT
DEFAULT_AGE_GROUP = AgeGroup.ADULT

_DURATION_PHRASE_RULES: list[tuple[tuple[str, ...], Duration]] = [
    (("just", "right now", "few minutes", "minutes ago"), Duration.JUST_NOW),
    (("hour",), Duration.FEW_HOURS),
    (("today", "this morning", "this afternoon", "this evening", "tonight"), Duration.TODAY),
    (("month", "long time", "longer", "more than", "year"), Duration.MORE_THAN_TWO_WEEKS),
]

# Checked after any explicit day or week count.
_DURATION_RULES: list[tuple[tuple[str, ...], Duration]] = [
    (("1-2 week", "couple week", "couple of week", "two week", "2 week"), Duration.ONE_TO_TWO_WEEKS),
    (("chronic", "always", "ongoing"), Duration.CHRONIC),
    (("yesterday", "1 day", "2 day", "1-2", "a day", "couple of days", "couple days"), Duration.ONE_TO_TWO_DAYS),
    (("few days", "several days", "3", "4", "5", "6", "7", "week"), Duration.THREE_TO_SEVEN_DAYS),
]

_COUNTED_DURATION_RE = re.compile(r"(\d+)\s*(day|week)")

_SEVERITY_WORDS: list[tuple[tuple[str, ...], int]] = [
    (("very severe", "worst", "unbearable", "excruciating", "9-10"), 10),
    (("severe", "bad", "7-8"), 8),
    (("moderate", "4-6"), 5),
    (("mild", "slight", "1-3"), 3),
]

_FREQUENCY_RULES: list[tuple[tuple[str, ...], Frequency]] = [
    (("constant", "all the time", "continuous", "nonstop"), Frequency.CONSTANT),
    (("intermittent", "come and go", "comes and goes", "on and off", "off and on"), Frequency.INTERMITTENT),
    (("occasional", "sometimes", "once in a while"), Frequency.OCCASIONAL),
    (("first", "never before", "new"), Frequency.FIRST_TIME),
]

ASSOCIATED_SYMPTOM_KEYWORDS: tuple[str, ...] = (
    "fever",
    "headache",
    "nausea",
    "vomiting",
    "dizziness",
    "fatigue",
    "weakness",
    "pain",
    "swelling",
    "rash",
    "cough",
    "sore throat",
    "congestion",
    "runny nose",
    "chills",
    "sweating",
    "loss of appetite",
    "diarrhea",
    "constipation",
    "bloating",
)

_RECENT_EVENT_RULES: list[tuple[tuple[str, ...], str]] = [
    (("injur", "fall", "fell", "accident"), "recent injury"),
    (("travel", "trip", "flight"), "recent travel"),
    (("food", "ate ", "eaten", "restaurant"), "dietary change"),
    (("stress", "anxiety"), "stress"),
    (("surgery", "operation"), "recent surgery"),
    (("exercise", "workout", "gym"), "physical activity"),
]

_CHRONIC_CONDITION_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"diabet", re.IGNORECASE), "diabetes"),
    (re.compile(r"hypertension|blood pressure|\bbp\b", re.IGNORECASE), "hypertension"),
    (re.compile(r"asthma", re.IGNORECASE), "asthma"),
    (re.compile(r"heart|cardiac", re.IGNORECASE), "heart condition"),
    (re.compile(r"thyroid", re.IGNORECASE), "thyroid condition"),
    (re.compile(r"arthritis", re.IGNORECASE), "arthritis"),
    (re.compile(r"kidney|renal", re.IGNORECASE), "kidney disease"),
    (re.compile(r"copd", re.IGNORECASE), "copd"),
    (re.compile(r"pregnan", re.IGNORECASE), "pregnancy"),
]

_AGE_KEYWORDS: list[tuple[tuple[str, ...], AgeGroup]] = [
    (("infant", "baby", "newborn"), AgeGroup.INFANT),
    (("child", "kid", "toddler", "under 12"), AgeGroup.CHILD),
    (("teen", "adolescent"), AgeGroup.TEEN),
    (("senior", "elderly", "65+", "older adult", "grandparent", "grandmother", "grandfather"), AgeGroup.SENIOR),
]
_AGE_NUMBER_RE = re.compile(r"(\d{1,3})\s*(?:years?|yrs?|y/o)", re.IGNORECASE)
_AGE_MONTHS_RE = re.compile(r"(\d{1,2})\s*months?\s*old", re.IGNORECASE)

_NEGATIVE_PREFIXES = ("no ", "not ", "none", "normal ", "neither", "nothing", "nope")

_MEDICATION_PREFIX_RE = re.compile(r"^(?:i(?:'m| am)\s+taking|i\s+take|taking|on)\s+", re.IGNORECASE)
_LIST_SPLIT_RE = re.compile(r",|;|\band\b|\+", re.IGNORECASE)

_PRIMARY_PREFIX_RE = re.compile(
    r"^(?:(?:hi|hello|hey)[,!.\s]+)?"
    r"(?:i(?:'m|\s+am)\s+(?:having|experiencing|feeling|suffering\s+from|dealing\s+with)"
    r"|i(?:'ve|\s+have)\s+been(?:\s+(?:having|experiencing|feeling|getting))?"
    r"|i(?:'ve|\s+have)\s+(?:got|had)"
    r"|i\s+have|i\s+feel|i\s+got"
    r"|my\s+\w+\s+(?:has|is\s+having|is)"
    r"|there(?:'s|\s+is))\s+",
    re.IGNORECASE,
)

_INITIAL_DURATION_PATTERNS: list[tuple[re.Pattern[str], Duration]] = [
    (re.compile(r"\bfor\s+(?:years|a\s+long\s+time)\b|\bchronic\b|\balways\s+had\b", re.IGNORECASE), Duration.CHRONIC),
    (re.compile(r"\bfor\s+(?:months|a\s+month|\d+\s+months)\b", re.IGNORECASE), Duration.MORE_THAN_TWO_WEEKS),
    (
        re.compile(r"\bfor\s+(?:weeks|a\s+couple\s+(?:of\s+)?weeks|two\s+weeks|2\s+weeks)\b", re.IGNORECASE),
        Duration.ONE_TO_TWO_WEEKS,
    ),
    (
        re.compile(r"\bfor\s+(?:a\s+few|few|several|[3-7]|three|four|five|six)\s+days\b|\bfor\s+a\s+week\b|\ball\s+week\b", re.IGNORECASE),
        Duration.THREE_TO_SEVEN_DAYS,
    ),
    (
        re.compile(r"\bsince\s+yesterday\b|\byesterday\b|\bfor\s+(?:a\s+day|a\s+couple\s+(?:of\s+)?days|two\s+days|2\s+days)\b", re.IGNORECASE),
        Duration.ONE_TO_TWO_DAYS,
    ),
    (re.compile(r"\bfor\s+(?:an?|a\s+few|few|\d+)\s+hours?\b", re.IGNORECASE), Duration.FEW_HOURS),
    (
        re.compile(r"\bjust\s+started\b|\bstarted\s+today\b|\bthis\s+(?:morning|afternoon|evening)\b|\btonight\b|\btoday\b", re.IGNORECASE),
        Duration.TODAY,
    ),
]
_INITIAL_SEVERITY_RE = re.compile(r"\b(\d{1,2})\s*(?:/|out\s+of)\s*10\b", re.IGNORECASE)
_INITIAL_SEVERITY_WORDS: list[tuple[re.Pattern[str], int]] = [
    (re.compile(r"\b(?:unbearable|excruciating|worst)\b", re.IGNORECASE), 10),
    (re.compile(r"\bsevere\b", re.IGNORECASE), 8),
    (re.compile(r"\bmoderate\b", re.IGNORECASE), 5),
    (re.compile(r"\b(?:mild|slight|slightly|minor)\b", re.IGNORECASE), 3),
]
_INITIAL_AGE_PATTERNS: list[tuple[re.Pattern[str], AgeGroup]] = [
    (re.compile(r"\b(?:infant|baby|newborn)\b", re.IGNORECASE), AgeGroup.INFANT),
    (re.compile(r"\bmy\s+(?:son|daughter|child|kid|toddler|little\s+one)\b", re.IGNORECASE), AgeGroup.CHILD),
    (re.compile(r"\bmy\s+(?:teen|teenager)\b", re.IGNORECASE), AgeGroup.TEEN),
    (
        re.compile(r"\b(?:elderly|my\s+(?:grandmother|grandfather|grandma|grandpa))\b", re.IGNORECASE),
        AgeGroup.SENIOR,
    ),
]


def _normalize(text: str) -> str:
    return (text or "").replace("’", "'").strip().lower()


def is_negative_answer(text: str) -> bool:
    cleaned = _normalize(text)
    return cleaned == "no" or cleaned.startswith(_NEGATIVE_PREFIXES)


def _counted_duration(cleaned: str) -> Duration | None:
    match = _COUNTED_DURATION_RE.search(cleaned)
    if match is None:
        return None
    days = int(match.group(1)) * (7 if match.group(2) == "week" else 1)
    if days <= 2:
        return Duration.ONE_TO_TWO_DAYS
    if days <= 7:
        return Duration.THREE_TO_SEVEN_DAYS
    if days <= 14:
        return Duration.ONE_TO_TWO_WEEKS
    return Duration.MORE_THAN_TWO_WEEKS


def parse_duration(text: str) -> Duration:
    cleaned = _normalize(text)
    try:
        return Duration(cleaned)
    except ValueError:
        pass
    for needles, duration in _DURATION_PHRASE_RULES:
        if any(needle in cleaned for needle in needles):
            return duration
    counted = _counted_duration(cleaned)
    if counted is not None:
        return counted
    for needles, duration in _DURATION_RULES:
        if any(needle in cleaned for needle in needles):
            return duration
    return DEFAULT_DURATION


def parse_severity(text: str) -> int:
    cleaned = _normalize(text)
    numeric = re.search(r"\d+", cleaned)
    if numeric:
        value = int(numeric.group(0))
        if 0 <= value <= 10:
            return value
    for needles, score in _SEVERITY_WORDS:
        if any(needle in cleaned for needle in needles):
            return score
    return DEFAULT_SEVERITY


def parse_frequency(text: str) -> Frequency:
    cleaned = _normalize(text)
    try:
        return Frequency(cleaned)
    except ValueError:
        pass
    for needles, frequency in _FREQUENCY_RULES:
        if any(needle in cleaned for needle in needles):
            return frequency
    return DEFAULT_FREQUENCY


def parse_associated_symptoms(text: str) -> tuple[str, ...]:
    cleaned = _normalize(text)
    if "none" in cleaned or "no other" in cleaned or "just" in cleaned:
        return ()
    return tuple(keyword for keyword in ASSOCIATED_SYMPTOM_KEYWORDS if keyword in cleaned)


def parse_recent_events(text: str) -> tuple[str, ...]:
    cleaned = _normalize(text)
    return tuple(label for needles, label in _RECENT_EVENT_RULES if any(needle in cleaned for needle in needles))


def parse_chronic_conditions(text: str) -> tuple[str, ...]:
    cleaned = _normalize(text)
    return tuple(label for pattern, label in _CHRONIC_CONDITION_RULES if pattern.search(cleaned))


def parse_medications(text: str) -> tuple[str, ...]:
    cleaned = _normalize(text)
    if not cleaned or is_negative_answer(cleaned):
        return ()
    cleaned = _MEDICATION_PREFIX_RE.sub("", cleaned)
    items = []
    for chunk in _LIST_SPLIT_RE.split(cleaned):
        item = chunk.strip(" .!")
        if item and len(item.split()) <= 4:
            items.append(item)
    return tuple(items)


def parse_age_group(text: str) -> AgeGroup:
    cleaned = _normalize(text)
    try:
        return AgeGroup(cleaned)
    except ValueError:
        pass
    if _AGE_MONTHS_RE.search(cleaned):
        return AgeGroup.INFANT
    years = _AGE_NUMBER_RE.search(cleaned)
    if years:
        age = int(years.group(1))
        if age < 1:
            return AgeGroup.INFANT
        if age < 13:
            return AgeGroup.CHILD
        if age < 18:
            return AgeGroup.TEEN
        if age < 65:
            return AgeGroup.ADULT
        return AgeGroup.SENIOR
    for needles, group in _AGE_KEYWORDS:
        if any(needle in cleaned for needle in needles):
            return group
    return DEFAULT_AGE_GROUP


_SET_FIELD_PARSERS = {
    ContextField.ASSOCIATED_SYMPTOMS: parse_associated_symptoms,
    ContextField.RECENT_EVENTS: parse_recent_events,
    ContextField.CHRONIC_CONDITIONS: parse_chronic_conditions,
    ContextField.RISK_FACTORS: parse_chronic_conditions,
    ContextField.MEDICATIONS: parse_medications,
}


def _match_quick_option(answer: str, options: tuple[QuickOption, ...]) -> QuickOption | None:
    cleaned = _normalize(answer)
    for option in options:
        if cleaned in {option.value.lower(), option.id.lower(), option.label.lower()}:
            return option
    return None


def is_negative_option(answer: str, quick_options: tuple[QuickOption, ...]) -> bool:
    option = _match_quick_option((answer or "").strip(), quick_options)
    return option is not None and is_negative_answer(option.value)


def parse_answer(
    field: ContextField,
    answer: str,
    quick_options: tuple[QuickOption, ...] = (),
    note_label: str | None = None,
) -> ContextUpdate:
    """Turn one answer into a ContextUpdate for the field the question writes to.

    Quick-option ids, labels and values are all accepted and resolved to the
    option's value. Nothing here raises; unparseable input falls back to the
    field default or is kept as a note.
    """
    raw = (answer or "").strip()
    option = _match_quick_option(raw, quick_options)
    value = option.value if option else raw
    if not value:
        return ContextUpdate()

    if field == ContextField.DURATION:
        return ContextUpdate(duration=parse_duration(value))
    if field == ContextField.SEVERITY:
        return ContextUpdate(severity=parse_severity(value))
    if field == ContextField.FREQUENCY:
        note = f"{note_label}: {value}" if note_label else None
        return ContextUpdate(frequency=parse_frequency(value), note=note)
    if field == ContextField.AGE_GROUP:
        return ContextUpdate(age_group=parse_age_group(value))
    if field == ContextField.ADDITIONAL_NOTES:
        return ContextUpdate(note=f"{note_label}: {value}" if note_label else value)

    parser = _SET_FIELD_PARSERS[field]
    if option is not None:
        items: tuple[str, ...] = () if is_negative_answer(value) else (value,)
        return _set_field_update(field, items)
    items = parser(value)
    if items:
        return _set_field_update(field, items)
    if is_negative_answer(value):
        return ContextUpdate()
    return ContextUpdate(note=value)


def _set_field_update(field: ContextField, items: tuple[str, ...]) -> ContextUpdate:
    if field == ContextField.ASSOCIATED_SYMPTOMS:
        return ContextUpdate(associated_symptoms=items)
    if field == ContextField.RECENT_EVENTS:
        return ContextUpdate(recent_events=items)
    if field == ContextField.CHRONIC_CONDITIONS:
        return ContextUpdate(chronic_conditions=items)
    if field == ContextField.RISK_FACTORS:
        return ContextUpdate(risk_factors=items)
    return ContextUpdate(medications=items)


def extract_primary_symptom(message: str) -> str:
    cleaned = (message or "").replace("’", "'").strip()
    stripped = _PRIMARY_PREFIX_RE.sub("", cleaned, count=1).strip(" .!?")
    return stripped or cleaned.strip(" .!?")


def infer_initial_context(message: str, request: RequestContext | None = None) -> HealthContext:
    text = (message or "").replace("’", "'")
    duration = next((value for pattern, value in _INITIAL_DURATION_PATTERNS if pattern.search(text)), None)

    severity = None
    explicit = _INITIAL_SEVERITY_RE.search(text)
    if explicit and 0 <= int(explicit.group(1)) <= 10:
        severity = int(explicit.group(1))
    else:
        severity = next((score for pattern, score in _INITIAL_SEVERITY_WORDS if pattern.search(text)), None)

    frequency = None
    lowered = text.lower()
    if "all the time" in lowered or "constant" in lowered:
        frequency = Frequency.CONSTANT
    elif "comes and goes" in lowered or "on and off" in lowered:
        frequency = Frequency.INTERMITTENT

    age_group = request.age_group if request and request.age_group else None
    if age_group is None:
        age_group = next((group for pattern, group in _INITIAL_AGE_PATTERNS if pattern.search(text)), None)

    return HealthContext(
        primary_symptom=extract_primary_symptom(text),
        duration=duration,
        severity=severity,
        frequency=frequency,
        age_group=age_group,
        chronic_conditions=parse_chronic_conditions(text),
    )
