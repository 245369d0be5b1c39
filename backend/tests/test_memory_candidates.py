from __future__ import annotations

import pytest

from memory import (
    Confidence,
    MemoryCandidate,
    MemoryPolicyError,
    MemoryPolicyGuard,
    MemorySnapshot,
    MemoryType,
    candidate_id,
    extract_memory_candidates,
)


def test_extracts_allergy_medication_and_condition():
    candidates = extract_memory_candidates("I'm allergic to Penicillin and I'm taking metformin for my diabetes")
    assert [(item.type, item.value) for item in candidates] == [
        (MemoryType.ALLERGY, "penicillin"),
        (MemoryType.MEDICATION, "metformin"),
        (MemoryType.CONDITION, "Diabetes"),
    ]
    assert candidates[0].confidence == Confidence.HIGH
    assert candidates[1].confidence == Confidence.MEDIUM


def test_extracts_preferences_and_triggers():
    candidates = extract_memory_candidates("Stress triggers these, and I prefer natural remedies")
    assert {(item.type, item.value) for item in candidates} == {
        (MemoryType.PREFERENCE, "Prefers home remedies"),
        (MemoryType.TRIGGER, "stress"),
    }


def test_plain_symptom_message_offers_nothing():
    assert extract_memory_candidates("I have had a headache since this morning") == ()


def test_candidate_ids_are_stable_and_case_insensitive():
    assert candidate_id(MemoryType.ALLERGY, "Latex") == candidate_id(MemoryType.ALLERGY, " latex ")
    assert candidate_id(MemoryType.ALLERGY, "latex") != candidate_id(MemoryType.TRIGGER, "latex")
    assert candidate_id(MemoryType.ALLERGY, "latex").startswith("mem_")


def test_candidate_rejects_types_outside_the_vocabulary():
    with pytest.raises(ValueError):
        MemoryCandidate(id="x", type="past_episode", label="x", value="x", confidence="high", reason="")


def test_guard_drops_candidates_already_remembered():
    guard = MemoryPolicyGuard()
    candidates = extract_memory_candidates("I'm allergic to penicillin and have asthma")
    snapshot = MemorySnapshot(allergies=("Penicillin",))
    fresh = guard.filter_new_candidates(candidates, snapshot)
    assert [(item.type, item.value) for item in fresh] == [(MemoryType.CONDITION, "Asthma")]


def test_guard_without_snapshot_keeps_everything():
    candidates = extract_memory_candidates("I'm allergic to latex")
    assert MemoryPolicyGuard().filter_new_candidates(candidates, None) == candidates


def test_guard_validates_and_fills_defaults():
    candidate = MemoryPolicyGuard().validate_candidate({"type": "Allergy", "value": " latex "})
    assert candidate.type == MemoryType.ALLERGY
    assert candidate.value == "latex"
    assert candidate.label == "Allergy"
    assert candidate.confidence == Confidence.MEDIUM
    assert candidate.id == candidate_id(MemoryType.ALLERGY, "latex")


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "past_episode", "value": "flu last winter"},
        {"type": "emotional_state", "value": "sad"},
        {"type": "allergy", "value": "   "},
        {"type": "allergy", "value": "latex", "confidence": "certain"},
    ],
)
def test_guard_rejects_invalid_payloads(payload):
    with pytest.raises(MemoryPolicyError):
        MemoryPolicyGuard().validate_candidate(payload)


def test_normalize_snapshot_dedupes_case_insensitively():
    snapshot = MemoryPolicyGuard().normalize_snapshot(MemorySnapshot(conditions=("Asthma", "asthma", " ", "COPD")))
    assert snapshot.conditions == ("Asthma", "COPD")


def test_taking_without_a_drug_name_offers_no_medication():
    assert extract_memory_candidates("I'm taking a break from work") == ()
    assert extract_memory_candidates("I've been taking care of my kids") == ()
    assert extract_memory_candidates("I'm not on any medication") == ()
    candidates = extract_memory_candidates("I started taking Lisinopril last week")
    assert [(item.type, item.value) for item in candidates] == [(MemoryType.MEDICATION, "lisinopril")]
