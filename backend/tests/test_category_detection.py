from __future__ import annotations

import pytest

from triage_core import SymptomCategory, detect_symptom_category, uses_structured_pain_flow


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("bad headache since this morning", SymptomCategory.HEADACHE),
        ("migraine again", SymptomCategory.HEADACHE),
        ("stomach cramps after dinner", SymptomCategory.GI),
        ("running a fever", SymptomCategory.FEVER),
        ("dry cough that won't stop", SymptomCategory.RESPIRATORY),
        ("itchy rash on my arm", SymptomCategory.SKIN),
        ("lower back is killing me", SymptomCategory.MUSCULOSKELETAL),
        ("feeling dizzy when I stand", SymptomCategory.NEUROLOGICAL),
        ("sharp pain in my side", SymptomCategory.PAIN),
        ("just tired lately", SymptomCategory.GENERAL),
        ("", SymptomCategory.GENERAL),
    ],
)
def test_detects_category_from_free_text(text, expected):
    assert detect_symptom_category(text) == expected


def test_headache_wins_over_generic_pain():
    assert detect_symptom_category("head pain that aches") == SymptomCategory.HEADACHE


def test_detection_is_case_insensitive():
    assert detect_symptom_category("HEADACHE") == SymptomCategory.HEADACHE


def test_structured_pain_flow_only_for_pain_and_musculoskeletal():
    assert uses_structured_pain_flow(SymptomCategory.PAIN)
    assert uses_structured_pain_flow(SymptomCategory.MUSCULOSKELETAL)
    assert not uses_structured_pain_flow(SymptomCategory.HEADACHE)
    assert not uses_structured_pain_flow(SymptomCategory.GENERAL)
