from __future__ import annotations

import logging
import re

from .models import SymptomCategory

logger = logging.getLogger(__name__)

# Evaluated top-down; headache must precede the generic pain bucket.
_CATEGORY_PATTERNS: list[tuple[SymptomCategory, re.Pattern[str]]] = [
    (SymptomCategory.HEADACHE, re.compile(r"headache|head\s*(pain|ache)|migraine", re.IGNORECASE)),
    (
        SymptomCategory.GI,
        re.compile(
            r"stomach|abdominal|abdomen|belly|nausea|vomit|diarrh|constipat|indigestion|heartburn|bloat",
            re.IGNORECASE,
        ),
    ),
    (SymptomCategory.FEVER, re.compile(r"fever|temperature|chills|flu|cold|infection", re.IGNORECASE)),
    (
        SymptomCategory.RESPIRATORY,
        re.compile(r"cough|breath|wheez|congest|sinus|throat|chest\s*(tight|congest)", re.IGNORECASE),
    ),
    (SymptomCategory.SKIN, re.compile(r"rash|itch|hive|skin|bump|swelling|bite", re.IGNORECASE)),
    (
        SymptomCategory.MUSCULOSKELETAL,
        re.compile(r"back|neck|joint|muscle|knee|shoulder|hip|ankle|wrist|sprain|strain", re.IGNORECASE),
    ),
    (SymptomCategory.NEUROLOGICAL, re.compile(r"dizz|vertigo|numb|tingl|weak|faint|balance", re.IGNORECASE)),
    (SymptomCategory.PAIN, re.compile(r"pain|ache|hurt|sore|throb|sharp|stab|cramp", re.IGNORECASE)),
]

_STRUCTURED_PAIN_CATEGORIES = frozenset({SymptomCategory.PAIN, SymptomCategory.MUSCULOSKELETAL})


def detect_symptom_category(text: str) -> SymptomCategory:
    cleaned = (text or "").strip().lower()
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(cleaned):
            logger.debug("symptom category resolved to %s", category.value)
            return category
    return SymptomCategory.GENERAL


def uses_structured_pain_flow(category: SymptomCategory) -> bool:
    return category in _STRUCTURED_PAIN_CATEGORIES
