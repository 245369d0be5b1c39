from __future__ import annotations

import pytest

from triage_core import (
    AgeGroup,
    CrisisType,
    Duration,
    Frequency,
    HealthContext,
    TriageLevel,
    Urgency,
    assess_message,
    classify,
    detect_crisis_type,
    format_crisis_resources,
    grade_self_care,
    to_external_urgency,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("I have crushing chest pain", Urgency.EMERGENCY),
        ("he had a seizure an hour ago", Urgency.EMERGENCY),
        ("vomiting blood this morning", Urgency.URGENT),
        ("severe pain in my knee", Urgency.URGENT),
        ("the rash is spreading", Urgency.SOON),
        ("mild runny nose", Urgency.SELF_CARE),
    ],
)
def test_keyword_cascade(text, expected):
    assert classify(text).urgency == expected


def test_first_matching_tier_wins_and_records_its_flags():
    assessment = classify("chest pain and a persistent cough")
    assert assessment.urgency == Urgency.EMERGENCY
    assert assessment.red_flags_detected == ("chest pain",)


def test_self_care_has_no_red_flags():
    assert classify("a little tired").red_flags_detected == ()


def test_infant_fever_is_an_emergency():
    assert classify("fever of 101", AgeGroup.INFANT).urgency == Urgency.EMERGENCY


def test_child_fever_is_urgent():
    assert classify("fever since last night", AgeGroup.CHILD).urgency == Urgency.URGENT


def test_adult_fever_alone_is_self_care():
    assert classify("fever since last night", AgeGroup.ADULT).urgency == Urgency.SELF_CARE


def test_pediatric_warning_signs_are_urgent():
    assessment = classify("he is floppy and won't drink", AgeGroup.CHILD)
    assert assessment.urgency == Urgency.URGENT
    assert set(assessment.red_flags_detected) == {"won't drink", "floppy"}


def test_senior_fall_is_urgent():
    assert classify("she fell in the kitchen", AgeGroup.SENIOR).urgency == Urgency.URGENT
    assert classify("she fell in the kitchen", AgeGroup.ADULT).urgency == Urgency.SELF_CARE


def test_curly_apostrophes_are_normalized():
    assert classify("I can’t breathe").urgency == Urgency.EMERGENCY


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("I want to kill myself", CrisisType.SUICIDE),
        ("I've been feeling suicidal", CrisisType.SUICIDE),
        ("I keep cutting myself", CrisisType.SELF_HARM),
        ("I think I overdosed on my pills", CrisisType.OVERDOSE),
        ("took too many pills", CrisisType.OVERDOSE),
        ("my head hurts", None),
    ],
)
def test_crisis_detection(text, expected):
    assert detect_crisis_type(text) == expected


def test_crisis_language_escalates_to_emergency():
    assessment, crisis_type = assess_message("I want to end my life")
    assert crisis_type == CrisisType.SUICIDE
    assert assessment.urgency == Urgency.EMERGENCY
    assert assessment.red_flags_detected[0] == "suicidal thoughts"


def test_assess_without_crisis_matches_classify():
    assert assess_message("severe pain") == (classify("severe pain"), None)


def test_crisis_resources_text():
    overdose = format_crisis_resources(CrisisType.OVERDOSE)
    assert "1-800-222-1222" in overdose
    assert "911" in overdose
    suicide = format_crisis_resources(CrisisType.SUICIDE, include_immediate_danger=True)
    assert suicide.startswith("If you or someone else is in immediate danger")
    assert "988" in suicide


@pytest.mark.parametrize(
    ("level", "external"),
    [
        (TriageLevel.EMERGENCY, Urgency.EMERGENCY),
        (TriageLevel.URGENT, Urgency.URGENT),
        (TriageLevel.SOON, Urgency.SOON),
        (TriageLevel.NON_URGENT, Urgency.SELF_CARE),
        (TriageLevel.MONITOR, Urgency.SELF_CARE),
        (TriageLevel.SELF_CARE, Urgency.SELF_CARE),
    ],
)
def test_internal_levels_map_to_four_external_levels(level, external):
    assert to_external_urgency(level) == external


def test_grade_self_care_tiers():
    assert grade_self_care(HealthContext(primary_symptom="cough", severity=2)) == TriageLevel.SELF_CARE
    assert grade_self_care(HealthContext(primary_symptom="cough", severity=7)) == TriageLevel.MONITOR
    heavy = HealthContext(
        primary_symptom="cough",
        severity=9,
        duration=Duration.FEW_HOURS,
        frequency=Frequency.CONSTANT,
        chronic_conditions=("asthma",),
    )
    assert grade_self_care(heavy) == TriageLevel.NON_URGENT
