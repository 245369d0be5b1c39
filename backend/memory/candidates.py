from __future__ import annotations

import hashlib
import json
import logging
import re
from dataclasses import dataclass
from typing import Callable

from .models import Confidence, MemoryCandidate, MemoryType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateRule:
    pattern: re.Pattern[str]
    type: MemoryType
    label: str
    confidence: Confidence
    value: Callable[[re.Match[str]], str]
    reason: str


def _captured(match: re.Match[str]) -> str:
    return next(group for group in match.groups() if group)


def _fixed(value: str) -> Callable[[re.Match[str]], str]:
    return lambda _match: value


# Words that follow "taking" or "on" without naming a drug.
_NOT_A_MEDICATION = (
    "the", "any", "some", "this", "that", "these", "those", "them", "his", "her", "their", "your",
    "care", "time", "break", "off", "out", "over", "part", "place", "turns",
)
_NOT_A_MEDICATION_RE = "(?!(?:" + "|".join(_NOT_A_MEDICATION) + r")\b)"


_CANDIDATE_RULES: tuple[CandidateRule, ...] = (
    CandidateRule(
        pattern=re.compile(r"allergic\s+to\s+(\w+)", re.IGNORECASE),
        type=MemoryType.ALLERGY,
        label="Allergy",
        confidence=Confidence.HIGH,
        value=_captured,
        reason="Mentioned an allergy",
    ),
    CandidateRule(
        pattern=re.compile(
            rf"\btaking\s+{_NOT_A_MEDICATION_RE}([a-z]{{3,}})\b|\bon\s+{_NOT_A_MEDICATION_RE}([a-z]{{3,}})\s+medication",
            re.IGNORECASE,
        ),
        type=MemoryType.MEDICATION,
        label="Medication",
        confidence=Confidence.MEDIUM,
        value=_captured,
        reason="Mentioned a current medication",
    ),
    CandidateRule(
        pattern=re.compile(r"\bdiabet(es|ic)\b", re.IGNORECASE),
        type=MemoryType.CONDITION,
        label="Condition",
        confidence=Confidence.HIGH,
        value=_fixed("Diabetes"),
        reason="Mentioned a chronic condition",
    ),
    CandidateRule(
        pattern=re.compile(r"\basthma(tic)?\b", re.IGNORECASE),
        type=MemoryType.CONDITION,
        label="Condition",
        confidence=Confidence.HIGH,
        value=_fixed("Asthma"),
        reason="Mentioned a chronic condition",
    ),
    CandidateRule(
        pattern=re.compile(r"\bprefer\b.*\b(home|natural)\b", re.IGNORECASE),
        type=MemoryType.PREFERENCE,
        label="Care preference",
        confidence=Confidence.MEDIUM,
        value=_fixed("Prefers home remedies"),
        reason="Mentioned a care preference",
    ),
    CandidateRule(
        pattern=re.compile(r"\b(stress|food|weather|exercise|sleep)\s+(?:trigger|causes|makes)", re.IGNORECASE),
        type=MemoryType.TRIGGER,
        label="Trigger",
        confidence=Confidence.MEDIUM,
        value=_captured,
        reason="Mentioned a symptom trigger",
    ),
)


def candidate_id(memory_type: MemoryType, value: str) -> str:
    encoded = json.dumps({"type": memory_type.value, "value": value.strip().lower()}, sort_keys=True)
    return "mem_" + hashlib.sha256(encoded.encode("utf-8")).hexdigest()[:16]


def extract_memory_candidates(text: str) -> tuple[MemoryCandidate, ...]:
    """Offer long-term facts found in a message; type+value duplicates collapse."""
    cleaned = (text or "").strip()
    candidates: list[MemoryCandidate] = []
    seen: set[str] = set()
    for rule in _CANDIDATE_RULES:
        match = rule.pattern.search(cleaned)
        if not match:
            continue
        value = rule.value(match).strip()
        if rule.type in (MemoryType.ALLERGY, MemoryType.MEDICATION, MemoryType.TRIGGER):
            value = value.lower()
        identifier = candidate_id(rule.type, value)
        if identifier in seen:
            continue
        seen.add(identifier)
        candidates.append(
            MemoryCandidate(
                id=identifier,
                type=rule.type,
                label=rule.label,
                value=value,
                confidence=rule.confidence,
                reason=rule.reason,
            )
        )
    if candidates:
        logger.debug("extracted %d memory candidate(s)", len(candidates))
    return tuple(candidates)
