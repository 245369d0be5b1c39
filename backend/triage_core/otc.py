from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from memory import MemorySnapshot

from .models import HealthContext, OTCSuggestion, TriageLevel

logger = logging.getLogger(__name__)

MEDICATIONS_PER_GROUP = 2
MAX_OTC_SUGGESTIONS = 4

OTC_ELIGIBLE_LEVELS = frozenset({TriageLevel.SOON, TriageLevel.NON_URGENT, TriageLevel.MONITOR, TriageLevel.SELF_CARE})


@dataclass(frozen=True)
class OTCGroup:
    id: str
    name: str
    medications: tuple[OTCSuggestion, ...]


OTC_GROUPS: dict[str, OTCGroup] = {
    "fever_pain": OTCGroup(
        id="fever_pain",
        name="Fever & Pain Relief",
        medications=(
            OTCSuggestion(
                id="paracetamol",
                generic="Paracetamol (Acetaminophen)",
                use="Fever, mild to moderate pain, headache, body ache",
                adult_dose="500mg-650mg every 4-6 hours as needed",
                cautions=(
                    "Do NOT exceed recommended dose - liver damage risk",
                    "Avoid alcohol when taking paracetamol",
                    "Check with doctor if liver disease present",
                    "Many cold medicines contain paracetamol - don't double up",
                ),
                for_children="Use age-appropriate formulation (syrup) with weight-based dosing.",
            ),
            OTCSuggestion(
                id="ibuprofen",
                generic="Ibuprofen",
                use="Pain, inflammation, fever, headache, menstrual cramps, joint pain",
                adult_dose="200-400mg every 6-8 hours as needed",
                cautions=(
                    "Take with food - can cause stomach irritation",
                    "Avoid if history of stomach ulcers or GI bleeding",
                    "Avoid if kidney problems or heart disease",
                    "Not recommended in pregnancy (especially 3rd trimester)",
                    "May interact with blood thinners and blood pressure medications",
                ),
                for_children="Use pediatric formulation only. Not for children under 6 months.",
            ),
        ),
    ),
    "acidity": OTCGroup(
        id="acidity",
        name="Acidity & Digestive Issues",
        medications=(
            OTCSuggestion(
                id="antacid",
                generic="Antacids (Aluminum/Magnesium hydroxide)",
                use="Quick relief from acidity, heartburn, indigestion",
                adult_dose="Follow package directions. Typically 1-2 tablets or 10-20ml",
                cautions=(
                    "Don't use for more than 2 weeks without consulting doctor",
                    "Can interfere with absorption of other medications (take 2 hours apart)",
                    "Avoid if kidney problems",
                ),
            ),
            OTCSuggestion(
                id="famotidine",
                generic="Famotidine (H2 Blocker)",
                use="Acid reduction for longer relief, prevents heartburn",
                adult_dose="10-20mg once or twice daily",
                cautions=(
                    "Consult doctor if symptoms persist more than 2 weeks",
                    "Inform doctor if kidney disease",
                ),
            ),
        ),
    ),
    "cold_cough": OTCGroup(
        id="cold_cough",
        name="Cold & Cough",
        medications=(
            OTCSuggestion(
                id="antihistamine",
                generic="Cetirizine / Loratadine (Antihistamine)",
                use="Runny nose, sneezing, watery eyes, allergies",
                adult_dose="Cetirizine: 10mg once daily. Loratadine: 10mg once daily",
                cautions=(
                    "Cetirizine may cause drowsiness - avoid driving",
                    "Avoid alcohol",
                    "Use caution if liver or kidney disease",
                ),
                for_children="Use pediatric syrup. Cetirizine: 2.5-5mg based on age.",
            ),
            OTCSuggestion(
                id="decongestant",
                generic="Phenylephrine / Pseudoephedrine",
                use="Nasal congestion, stuffy nose, sinus pressure",
                adult_dose="Follow package directions. Nasal drops: max 3 days use",
                cautions=(
                    "Do NOT use if high blood pressure or heart disease",
                    "Do NOT use nasal sprays for more than 3 days (rebound congestion)",
                    "Not safe in pregnancy",
                ),
            ),
            OTCSuggestion(
                id="cough_suppressant",
                generic="Dextromethorphan (DXM)",
                use="Dry, non-productive cough",
                adult_dose="10-20mg every 4-6 hours (max 120mg/day)",
                cautions=(
                    "Not for productive (wet) cough",
                    "Do not use with MAO inhibitors",
                    "May cause drowsiness",
                ),
                for_children="Not recommended under 4 years.",
            ),
            OTCSuggestion(
                id="expectorant",
                generic="Guaifenesin (Expectorant)",
                use="Productive cough with mucus - helps thin and expel mucus",
                adult_dose="200-400mg every 4 hours (max 2400mg/day)",
                cautions=("Drink plenty of fluids when taking",),
                for_children="Use pediatric formulation.",
            ),
            OTCSuggestion(
                id="throat_lozenge",
                generic="Throat Lozenges",
                use="Sore throat relief, minor throat irritation",
                adult_dose="1 lozenge every 2-3 hours as needed",
                cautions=(
                    "Not for children under 5 (choking risk)",
                    "Check sugar content if diabetic",
                ),
            ),
        ),
    ),
    "diarrhea": OTCGroup(
        id="diarrhea",
        name="Diarrhea & Vomiting",
        medications=(
            OTCSuggestion(
                id="ors",
                generic="Oral Rehydration Salts (ORS)",
                use="Dehydration from diarrhea, vomiting, fever, heat",
                adult_dose="Drink as much as needed to replace fluid loss",
                cautions=(
                    "Dissolve in correct amount of water",
                    "Use within 24 hours after mixing",
                ),
                for_children="Critical for children with diarrhea. Give frequently in small sips.",
            ),
            OTCSuggestion(
                id="loperamide",
                generic="Loperamide",
                use="Diarrhea (non-infectious)",
                adult_dose="4mg initially, then 2mg after each loose stool (max 16mg/day)",
                cautions=(
                    "Do NOT use if fever or blood in stool - may be infectious diarrhea",
                    "Do NOT use in children under 2 years",
                    "Do NOT use for more than 2 days without medical advice",
                ),
                for_children="Not recommended under 6 years without medical advice.",
            ),
            OTCSuggestion(
                id="antiemetic",
                generic="Ondansetron (for nausea/vomiting)",
                use="Nausea and vomiting",
                adult_dose="4-8mg as needed (max 24mg/day)",
                cautions=(
                    "Often requires a prescription",
                    "See doctor if vomiting persists",
                ),
            ),
        ),
    ),
    "allergy": OTCGroup(
        id="allergy",
        name="Allergy Relief",
        medications=(
            OTCSuggestion(
                id="cetirizine",
                generic="Cetirizine",
                use="Allergic rhinitis, hay fever, urticaria (hives), itching",
                adult_dose="10mg once daily",
                cautions=("May cause drowsiness - avoid driving", "Avoid alcohol"),
                for_children="Syrup available. 2.5-5mg based on age.",
            ),
            OTCSuggestion(
                id="loratadine",
                generic="Loratadine",
                use="Allergic rhinitis, hay fever, hives - non-drowsy option",
                adult_dose="10mg once daily",
                cautions=("Non-drowsy - preferred for daytime use",),
                for_children="Syrup available for children over 2 years.",
            ),
            OTCSuggestion(
                id="calamine",
                generic="Calamine Lotion",
                use="Skin itching, rashes, insect bites, sunburn, chickenpox",
                adult_dose="Apply as needed throughout the day",
                cautions=("For external use only",),
                for_children="Safe for children and infants.",
            ),
        ),
    ),
}

# Substring in the symptom text -> OTC group; first-seen order decides group order.
SYMPTOM_GROUPS: tuple[tuple[str, str], ...] = (
    ("fever", "fever_pain"),
    ("headache", "fever_pain"),
    ("pain", "fever_pain"),
    ("ache", "fever_pain"),
    ("acidity", "acidity"),
    ("heartburn", "acidity"),
    ("indigestion", "acidity"),
    ("cold", "cold_cough"),
    ("cough", "cold_cough"),
    ("congestion", "cold_cough"),
    ("sore throat", "cold_cough"),
    ("diarrhea", "diarrhea"),
    ("vomit", "diarrhea"),
    ("nausea", "diarrhea"),
    ("allergy", "allergy"),
    ("rash", "allergy"),
    ("itch", "allergy"),
    ("hives", "allergy"),
)

# Known condition marker -> caution wording that rules a medication out.
CONDITION_CAUTIONS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("heart",), "heart"),
    (("kidney", "renal"), "kidney"),
    (("liver", "hepat"), "liver"),
    (("blood pressure", "hypertension"), "blood pressure"),
    (("pregnan",), "pregnancy"),
    (("ulcer",), "ulcer"),
    (("warfarin", "blood thinner", "anticoagulant"), "blood thin"),
)


def excluded_cautions(conditions: Iterable[str]) -> set[str]:
    excluded: set[str] = set()
    for condition in conditions:
        lowered = condition.lower()
        for markers, caution in CONDITION_CAUTIONS:
            if any(marker in lowered for marker in markers):
                excluded.add(caution)
    return excluded


def known_profile_terms(context: HealthContext, memory: MemorySnapshot | None) -> list[str]:
    terms = [*context.chronic_conditions, *context.risk_factors, *context.medications]
    if memory is not None:
        terms.extend(memory.conditions)
        terms.extend(memory.medications)
    return terms


def _is_allergic(medication: OTCSuggestion, allergies: Iterable[str]) -> bool:
    names = f"{medication.id} {medication.generic}".lower()
    return any(allergy.strip() and allergy.strip().lower() in names for allergy in allergies)


def suggest_otc(
    context: HealthContext,
    level: TriageLevel,
    memory: MemorySnapshot | None = None,
) -> tuple[OTCSuggestion, ...]:
    if level not in OTC_ELIGIBLE_LEVELS:
        return ()

    text = context.symptom_text()
    group_ids: list[str] = []
    for keyword, group_id in SYMPTOM_GROUPS:
        if keyword in text and group_id not in group_ids:
            group_ids.append(group_id)
    if not group_ids:
        return ()

    allergies = memory.allergies if memory is not None else ()
    excluded = excluded_cautions(known_profile_terms(context, memory))

    suggestions: list[OTCSuggestion] = []
    for group_id in group_ids:
        kept = [
            medication
            for medication in OTC_GROUPS[group_id].medications
            if not any(caution in " ".join(medication.cautions).lower() for caution in excluded)
            and not _is_allergic(medication, allergies)
        ]
        suggestions.extend(item for item in kept[:MEDICATIONS_PER_GROUP] if item not in suggestions)
    if excluded:
        logger.debug("otc suggestions filtered for cautions: %s", ", ".join(sorted(excluded)))
    return tuple(suggestions[:MAX_OTC_SUGGESTIONS])
