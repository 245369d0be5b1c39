from __future__ import annotations

from triage_core import (
    AgeGroup,
    HealthContext,
    SafetyAssessment,
    Urgency,
    generate_differentials,
    summarize_differentials,
)
from triage_core.differentials import FURTHER_EVALUATION_PLACEHOLDER, MAX_DIFFERENTIALS
from triage_core.models import Likelihood


def _names(possibilities):
    return [item.name for item in possibilities]


def test_headache_pattern_ranks_by_likelihood():
    result = generate_differentials(HealthContext(primary_symptom="headache"))
    assert _names(result) == ["Migraine", "Tension-type headache", "Sinus headache"]
    assert [item.likelihood for item in result] == [Likelihood.HIGH, Likelihood.MODERATE, Likelihood.LOW]


def test_two_optional_symptoms_upgrade_likelihood():
    context = HealthContext(primary_symptom="headache", associated_symptoms=("nausea", "light sensitivity"))
    result = generate_differentials(context)
    assert [item.likelihood for item in result] == [Likelihood.HIGH, Likelihood.HIGH, Likelihood.MODERATE]


def test_excluding_symptom_drops_the_pattern():
    context = HealthContext(primary_symptom="headache", associated_symptoms=("stiff neck",))
    assert generate_differentials(context) == (FURTHER_EVALUATION_PLACEHOLDER,)


def test_notes_count_toward_exclusions():
    context = HealthContext(primary_symptom="headache", additional_notes="worst headache of life")
    assert generate_differentials(context) == (FURTHER_EVALUATION_PLACEHOLDER,)


def test_negative_worst_headache_answer_keeps_the_pattern():
    context = HealthContext(primary_symptom="headache", additional_notes="not the worst of life")
    assert _names(generate_differentials(context))[0] == "Migraine"


def test_pediatric_modifier_joins_the_ranking():
    context = HealthContext(primary_symptom="stomach ache", age_group=AgeGroup.CHILD)
    result = generate_differentials(context)
    assert _names(result) == ["Gastroenteritis (Stomach flu)", "Viral gastroenteritis", "Indigestion / Dyspepsia"]


def test_senior_modifier_applies_to_fever():
    context = HealthContext(primary_symptom="fever", age_group=AgeGroup.SENIOR)
    assert "Urinary tract infection" in _names(generate_differentials(context))


def test_results_are_capped_and_unique():
    context = HealthContext(primary_symptom="fever and cough", associated_symptoms=("congestion",))
    result = generate_differentials(context)
    assert len(result) == MAX_DIFFERENTIALS
    assert len(set(_names(result))) == len(result)


def test_unmatched_text_returns_placeholder():
    assert generate_differentials(HealthContext(primary_symptom="tired")) == (FURTHER_EVALUATION_PLACEHOLDER,)


def test_summary_shape():
    summary = summarize_differentials(generate_differentials(HealthContext(primary_symptom="back pain")))
    assert summary["primary"] == "Muscle strain"
    assert summary["description"] == "Overuse or injury to back muscles"
    assert [item["name"] for item in summary["secondary"]] == ["Postural back pain", "Degenerative changes"]


def test_summary_of_nothing_uses_placeholder():
    summary = summarize_differentials(())
    assert summary["primary"] == FURTHER_EVALUATION_PLACEHOLDER.name
    assert summary["secondary"] == []


def test_emergency_assessment_drops_low_likelihood_entries():
    context = HealthContext(primary_symptom="headache")
    emergency = SafetyAssessment(urgency=Urgency.EMERGENCY, red_flags_detected=("seizure",))
    assert _names(generate_differentials(context, emergency)) == ["Migraine", "Tension-type headache"]
    soon = SafetyAssessment(urgency=Urgency.SOON)
    assert _names(generate_differentials(context, soon))[-1] == "Sinus headache"
