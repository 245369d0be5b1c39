from __future__ import annotations

from triage_core import AgeGroup, Duration, ForWhom, Frequency, RequestContext, infer_initial_context, parse_answer
from triage_core.answers import (
    extract_primary_symptom,
    parse_age_group,
    parse_duration,
    parse_medications,
    parse_severity,
)
from triage_core.models import ContextField, HealthContext, QuickOption


def test_duration_accepts_enum_values_and_free_text():
    assert parse_duration("3_7_days") == Duration.THREE_TO_SEVEN_DAYS
    assert parse_duration("a few hours") == Duration.FEW_HOURS
    assert parse_duration("since yesterday") == Duration.ONE_TO_TWO_DAYS
    assert parse_duration("about a month now") == Duration.MORE_THAN_TWO_WEEKS
    assert parse_duration("no idea") == Duration.ONE_TO_TWO_DAYS


def test_duration_counts_days_and_weeks():
    assert parse_duration("about 3 weeks") == Duration.MORE_THAN_TWO_WEEKS
    assert parse_duration("12 days") == Duration.ONE_TO_TWO_WEEKS
    assert parse_duration("2 weeks") == Duration.ONE_TO_TWO_WEEKS
    assert parse_duration("5 days") == Duration.THREE_TO_SEVEN_DAYS
    assert parse_duration("1-2 days") == Duration.ONE_TO_TWO_DAYS
    assert parse_duration("more than 2 weeks") == Duration.MORE_THAN_TWO_WEEKS


def test_severity_prefers_numbers_then_words():
    assert parse_severity("maybe a 7") == 7
    assert parse_severity("it's unbearable") == 10
    assert parse_severity("pretty mild") == 3
    assert parse_severity("42") == 5
    assert parse_severity("hard to say") == 5


def test_age_group_from_years_months_and_keywords():
    assert parse_age_group("8 months old") == AgeGroup.INFANT
    assert parse_age_group("she is 7 years") == AgeGroup.CHILD
    assert parse_age_group("15 yrs") == AgeGroup.TEEN
    assert parse_age_group("70 years") == AgeGroup.SENIOR
    assert parse_age_group("my grandmother") == AgeGroup.SENIOR
    assert parse_age_group("unknown") == AgeGroup.ADULT


def test_medications_split_lists_and_ignore_negatives():
    assert parse_medications("I'm taking metformin and lisinopril") == ("metformin", "lisinopril")
    assert parse_medications("none") == ()
    assert parse_medications("no meds") == ()


def test_quick_option_id_label_and_value_resolve_to_value():
    options = (QuickOption(id="severe", label="7-8 (Severe)", value="8"),)
    for answer in ("severe", "7-8 (Severe)", "8"):
        update = parse_answer(ContextField.SEVERITY, answer, options)
        assert update.severity == 8


def test_negative_quick_option_on_set_field_adds_nothing():
    options = (QuickOption(id="none", label="None", value="none"),)
    update = parse_answer(ContextField.CHRONIC_CONDITIONS, "none", options)
    assert update.chronic_conditions == ()
    assert update.note is None


def test_unparsed_set_field_answer_is_kept_as_note():
    update = parse_answer(ContextField.RECENT_EVENTS, "moved into a new apartment")
    assert update.recent_events == ()
    assert update.note == "moved into a new apartment"


def test_note_label_prefixes_free_text_answers():
    update = parse_answer(ContextField.ADDITIONAL_NOTES, "sudden onset", note_label="Onset")
    assert update.note == "Onset: sudden onset"


def test_blank_answer_changes_nothing():
    context = HealthContext(primary_symptom="cough", severity=4)
    assert context.merge(parse_answer(ContextField.SEVERITY, "   ")) == context


def test_merge_unions_lists_and_appends_notes():
    context = HealthContext(primary_symptom="cough", associated_symptoms=("fever",), additional_notes="Onset: gradual")
    update = parse_answer(ContextField.ASSOCIATED_SYMPTOMS, "Fever, chills and fatigue")
    merged = context.merge(update)
    assert merged.associated_symptoms == ("fever", "fatigue", "chills")
    merged = merged.merge(parse_answer(ContextField.ADDITIONAL_NOTES, "worse at night", note_label="Timing"))
    assert merged.additional_notes == "Onset: gradual; Timing: worse at night"


def test_primary_symptom_strips_conversational_prefix():
    assert extract_primary_symptom("I've been having a headache.") == "a headache"
    assert extract_primary_symptom("Hi, I have a sore throat!") == "a sore throat"
    assert extract_primary_symptom("rash on my leg") == "rash on my leg"


def test_initial_context_reads_duration_severity_and_age():
    context = infer_initial_context("My son has had a fever for 3 days, about 6/10")
    assert context.duration == Duration.THREE_TO_SEVEN_DAYS
    assert context.severity == 6
    assert context.age_group == AgeGroup.CHILD


def test_request_age_group_overrides_message_cues():
    request = RequestContext(for_whom=ForWhom.FAMILY, age_group=AgeGroup.SENIOR)
    context = infer_initial_context("my baby has a cough", request)
    assert context.age_group == AgeGroup.SENIOR


def test_initial_context_frequency_and_conditions():
    context = infer_initial_context("I have a headache that comes and goes, and I'm diabetic")
    assert context.frequency == Frequency.INTERMITTENT
    assert context.chronic_conditions == ("diabetes",)
