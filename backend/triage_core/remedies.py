from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from memory import MemorySnapshot

from .models import AgeGroup, Effectiveness, HealthContext, HomeRemedy, HomeRemedyPlan, TriageLevel
from .otc import OTC_ELIGIBLE_LEVELS, excluded_cautions, known_profile_terms

logger = logging.getLogger(__name__)

MAX_REMEDIES = 4
MAX_REMEDY_WARNINGS = 5

_EFFECTIVENESS_ORDER = {Effectiveness.HIGH: 0, Effectiveness.MODERATE: 1, Effectiveness.LOW: 2}
_CHILDREN_UNDER_RE = re.compile(r"children under (\d+)")
_SENIOR_SUITABILITY = ("all_ages", "adults")


@dataclass(frozen=True)
class RemedyCondition:
    id: str
    name: str
    remedies: tuple[HomeRemedy, ...]
    warning_signs: tuple[str, ...]


HOME_REMEDY_CONDITIONS: dict[str, RemedyCondition] = {
    "acidity": RemedyCondition(
        id="acidity",
        name="Acidity / Heartburn",
        remedies=(
            HomeRemedy(
                id="cold_milk",
                name="Cold Milk",
                how_to="Drink a glass of cold milk without sugar. Sip slowly.",
                effectiveness=Effectiveness.HIGH,
                contraindications=("lactose intolerance", "milk allergy"),
            ),
            HomeRemedy(
                id="jeera_water",
                name="Jeera (Cumin) Water",
                how_to="Boil 1 tsp cumin seeds in a glass of water for 5 minutes. Strain and drink warm.",
                effectiveness=Effectiveness.MODERATE,
                suitable_for=("all_ages", "elderly_friendly"),
            ),
            HomeRemedy(
                id="fennel_seeds",
                name="Fennel Seeds (Saunf)",
                how_to="Chew 1/2 teaspoon of fennel seeds slowly after meals.",
                effectiveness=Effectiveness.MODERATE,
                contraindications=("pregnancy in high amounts",),
                suitable_for=("all_ages", "elderly_friendly"),
            ),
            HomeRemedy(
                id="banana",
                name="Banana",
                how_to="Eat a ripe banana when the burning starts.",
                effectiveness=Effectiveness.MODERATE,
                contraindications=("diabetes, monitor sugar",),
            ),
        ),
        warning_signs=(
            "Pain spreading to arm, neck, or jaw",
            "Difficulty swallowing that persists",
            "Vomiting blood or dark material",
            "Black, tarry stools",
        ),
    ),
    "common_cold": RemedyCondition(
        id="common_cold",
        name="Common Cold",
        remedies=(
            HomeRemedy(
                id="steam_inhalation",
                name="Steam Inhalation",
                how_to="Lean over a bowl of hot water with a towel over your head and breathe the steam for 5-10 minutes.",
                effectiveness=Effectiveness.HIGH,
                contraindications=("asthma caution", "children need supervision"),
                suitable_for=("adults", "elderly_with_care"),
            ),
            HomeRemedy(
                id="haldi_doodh",
                name="Golden Milk (Haldi Doodh)",
                how_to="Warm a cup of milk with 1/2 tsp turmeric and a pinch of black pepper. Drink warm.",
                effectiveness=Effectiveness.MODERATE,
                contraindications=("lactose intolerance", "gallbladder issues"),
                suitable_for=("all_ages", "elderly_friendly"),
            ),
            HomeRemedy(
                id="honey_ginger",
                name="Honey Ginger",
                how_to="Mix 1 tsp honey with 1/2 tsp fresh ginger juice. Take directly or stir into warm water.",
                effectiveness=Effectiveness.MODERATE,
                contraindications=("diabetes, monitor sugar", "infants under 1, no honey"),
                suitable_for=("adults", "children_over_1"),
            ),
            HomeRemedy(
                id="tulsi_tea",
                name="Tulsi Tea",
                how_to="Boil 5-6 fresh tulsi leaves in water for 5 minutes. Strain and drink.",
                effectiveness=Effectiveness.MODERATE,
                contraindications=("pregnancy in high amounts", "blood thinners"),
                suitable_for=("all_ages", "elderly_friendly"),
            ),
        ),
        warning_signs=(
            "Fever lasting more than 3 days",
            "Difficulty breathing or shortness of breath",
            "Chest pain when breathing or coughing",
            "Symptoms worsening instead of improving after a week",
            "Confusion or extreme weakness (especially in elderly)",
        ),
    ),
    "cough": RemedyCondition(
        id="cough",
        name="Cough",
        remedies=(
            HomeRemedy(
                id="honey_black_pepper",
                name="Honey with Black Pepper",
                how_to="Mix 1 tbsp honey with a pinch of crushed black pepper and let it coat your throat slowly.",
                effectiveness=Effectiveness.HIGH,
                contraindications=("infants under 1", "diabetes"),
                suitable_for=("adults", "children_over_1"),
            ),
            HomeRemedy(
                id="mulethi_tea",
                name="Mulethi (Licorice) Tea",
                how_to="Boil a small piece of mulethi in water for 10 minutes. Strain and drink warm.",
                effectiveness=Effectiveness.MODERATE,
                contraindications=("high blood pressure", "heart disease", "pregnancy", "kidney disease"),
                suitable_for=("adults",),
            ),
            HomeRemedy(
                id="salt_water_gargle",
                name="Warm Salt Water Gargle",
                how_to="Dissolve 1/2 tsp salt in a cup of warm water. Gargle for 30 seconds, then spit it out.",
                effectiveness=Effectiveness.MODERATE,
            ),
            HomeRemedy(
                id="ginger_tulsi_honey",
                name="Ginger-Tulsi-Honey Mix",
                how_to="Mix about 1/2 tsp each of ginger and tulsi juice with 1 tsp honey. Take directly.",
                effectiveness=Effectiveness.MODERATE,
                contraindications=("infants under 1", "bleeding disorders"),
                suitable_for=("adults", "children_over_2"),
            ),
        ),
        warning_signs=(
            "Coughing blood or blood-streaked mucus",
            "Shortness of breath or wheezing",
            "Cough lasting more than 3 weeks",
            "High fever (above 102°F) with cough",
            "Chest pain when coughing",
        ),
    ),
    "headache": RemedyCondition(
        id="headache",
        name="Headache",
        remedies=(
            HomeRemedy(
                id="peppermint_oil",
                name="Peppermint Oil",
                how_to="Dilute 1-2 drops in a teaspoon of coconut oil and rub gently on the temples, away from the eyes.",
                effectiveness=Effectiveness.MODERATE,
                contraindications=("children under 6", "not near eyes", "sensitive skin"),
                suitable_for=("adults", "older_children"),
            ),
            HomeRemedy(
                id="ginger_tea_headache",
                name="Ginger Tea",
                how_to="Sip fresh ginger tea with a little honey while warm.",
                effectiveness=Effectiveness.MODERATE,
                contraindications=("bleeding disorders", "blood thinners"),
            ),
            HomeRemedy(
                id="cold_compress",
                name="Cold Compress",
                how_to="Hold an ice pack wrapped in cloth against your forehead for 15-20 minutes.",
                effectiveness=Effectiveness.HIGH,
            ),
            HomeRemedy(
                id="warm_compress_tension",
                name="Warm Compress (for Tension)",
                how_to="Place a warm towel on the back of your neck and shoulders for 15-20 minutes.",
                effectiveness=Effectiveness.MODERATE,
            ),
        ),
        warning_signs=(
            '"Worst headache of my life" - sudden, severe onset',
            "Headache with fever, stiff neck, or confusion",
            "Headache after head injury",
            "Headache with vision changes, double vision, or numbness",
            "Headache that wakes you from sleep",
        ),
    ),
    "body_ache": RemedyCondition(
        id="body_ache",
        name="Body Ache / Muscle Pain",
        remedies=(
            HomeRemedy(
                id="warm_oil_massage",
                name="Warm Oil Massage",
                how_to="Warm a little mustard or sesame oil and massage sore areas in slow circles for 10-15 minutes.",
                effectiveness=Effectiveness.HIGH,
                contraindications=("skin wounds", "acute inflammation", "skin allergy"),
                suitable_for=("all_ages", "elderly_friendly"),
            ),
            HomeRemedy(
                id="epsom_salt_bath",
                name="Epsom Salt Bath",
                how_to="Add 2 cups Epsom salt to a warm bath and soak for 15-20 minutes.",
                effectiveness=Effectiveness.MODERATE,
                contraindications=("diabetes foot soak caution", "heart disease with hot baths", "open wounds"),
                suitable_for=("adults",),
            ),
            HomeRemedy(
                id="hot_water_bag",
                name="Hot Water Bag",
                how_to="Wrap a hot water bag in cloth and hold it on the sore area for 15-20 minutes.",
                effectiveness=Effectiveness.MODERATE,
                contraindications=("acute injury in the first 48 hours", "burns risk"),
            ),
            HomeRemedy(
                id="rest_hydration",
                name="Rest and Hydration",
                how_to="Rest and drink warm fluids such as herbal teas and soups.",
                effectiveness=Effectiveness.MODERATE,
            ),
        ),
        warning_signs=(
            "Body ache with high fever",
            "Muscle weakness or difficulty moving",
            "Dark urine with muscle pain",
            "Pain in a specific joint with swelling and redness",
            "Body ache lasting more than a week without improvement",
        ),
    ),
    "fever": RemedyCondition(
        id="fever",
        name="Fever",
        remedies=(
            HomeRemedy(
                id="tulsi_ginger_kadha",
                name="Tulsi-Ginger Kadha",
                how_to="Boil tulsi leaves, grated ginger and a pinch of black pepper in 2 cups of water down to 1 cup. Strain and sip.",
                effectiveness=Effectiveness.MODERATE,
                contraindications=("infants under 1",),
                suitable_for=("adults", "children_over_5_modified", "elderly_friendly"),
            ),
            HomeRemedy(
                id="cool_sponging",
                name="Cool Sponging",
                how_to="Sponge the forehead, armpits and back of the neck with room-temperature water.",
                effectiveness=Effectiveness.HIGH,
                contraindications=("stop if shivering",),
            ),
            HomeRemedy(
                id="coriander_tea",
                name="Coriander Tea",
                how_to="Boil 1 tbsp coriander seeds in 2 cups of water until reduced by half. Strain and drink warm.",
                effectiveness=Effectiveness.MODERATE,
                suitable_for=("all_ages", "elderly_friendly"),
            ),
            HomeRemedy(
                id="hydration_fever",
                name="Stay Hydrated",
                how_to="Drink water, oral rehydration solution, coconut water and clear soups often.",
                effectiveness=Effectiveness.HIGH,
            ),
        ),
        warning_signs=(
            "Fever above 103°F (39.4°C) not responding to treatment",
            "Fever lasting more than 3 days",
            "Fever with severe headache and stiff neck",
            "Fever with rash (especially non-blanching rash)",
            "Fever with difficulty breathing",
        ),
    ),
    "skin_rash": RemedyCondition(
        id="skin_rash",
        name="Minor Skin Rash / Itching",
        remedies=(
            HomeRemedy(
                id="neem_paste",
                name="Neem Paste",
                how_to="Grind fresh neem leaves with a little water and apply the paste to the itchy area.",
                effectiveness=Effectiveness.MODERATE,
                suitable_for=("all_ages", "elderly_friendly"),
            ),
            HomeRemedy(
                id="aloe_vera",
                name="Aloe Vera Gel",
                how_to="Apply pure aloe vera gel directly to the affected skin.",
                effectiveness=Effectiveness.MODERATE,
            ),
            HomeRemedy(
                id="coconut_oil_skin",
                name="Coconut Oil",
                how_to="Massage a little virgin coconut oil into dry or itchy skin.",
                effectiveness=Effectiveness.MODERATE,
                contraindications=("fungal infections", "acne-prone skin"),
            ),
            HomeRemedy(
                id="oatmeal_bath",
                name="Oatmeal Bath",
                how_to="Add a cup of finely ground oats to a lukewarm bath and soak for 15-20 minutes.",
                effectiveness=Effectiveness.MODERATE,
            ),
        ),
        warning_signs=(
            "Rash spreading rapidly",
            "Rash with fever",
            "Rash with difficulty breathing or swelling",
            "Signs of infection (warmth, pus, red streaks, increasing pain)",
            "Rash that looks like bleeding under the skin",
        ),
    ),
}

# Substring in the primary symptom -> remedy conditions, in match order.
SYMPTOM_CONDITIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("acidity", ("acidity",)),
    ("heartburn", ("acidity",)),
    ("acid reflux", ("acidity",)),
    ("indigestion", ("acidity",)),
    ("cold", ("common_cold",)),
    ("cough", ("cough", "common_cold")),
    ("sore throat", ("common_cold", "cough")),
    ("fever", ("fever",)),
    ("headache", ("headache",)),
    ("body ache", ("body_ache",)),
    ("muscle pain", ("body_ache",)),
    ("rash", ("skin_rash",)),
    ("itch", ("skin_rash",)),
)


def match_remedy_conditions(symptom: str) -> tuple[RemedyCondition, ...]:
    lowered = symptom.lower()
    matched: list[RemedyCondition] = []
    for keyword, condition_ids in SYMPTOM_CONDITIONS:
        if keyword not in lowered:
            continue
        for condition_id in condition_ids:
            condition = HOME_REMEDY_CONDITIONS[condition_id]
            if condition not in matched:
                matched.append(condition)
    return tuple(matched)


def _is_unsuitable(
    remedy: HomeRemedy,
    age_group: AgeGroup | None,
    cautions: set[str],
    diabetic: bool,
    allergies: tuple[str, ...],
) -> bool:
    for contraindication in remedy.contraindications:
        if any(caution in contraindication for caution in cautions):
            return True
        if diabetic and "diabetes" in contraindication and "monitor" not in contraindication:
            return True
        if age_group == AgeGroup.INFANT and "infant" in contraindication:
            return True
        if age_group in (AgeGroup.INFANT, AgeGroup.CHILD) and _CHILDREN_UNDER_RE.search(contraindication):
            return True

    if age_group == AgeGroup.SENIOR and not any(
        "elderly" in group or group in _SENIOR_SUITABILITY for group in remedy.suitable_for
    ):
        return True

    described = f"{remedy.name} {' '.join(remedy.contraindications)}".lower()
    return any(allergy.strip() and allergy.strip().lower() in described for allergy in allergies)


def suggest_home_remedies(
    context: HealthContext,
    level: TriageLevel,
    memory: MemorySnapshot | None = None,
) -> HomeRemedyPlan | None:
    """Home-care remedies for the primary symptom, filtered for the member's profile.

    Only offered where OTC suggestions are. Warning signs come from every
    matched condition even when the profile rules out all of the remedies.
    """
    if level not in OTC_ELIGIBLE_LEVELS:
        return None
    conditions = match_remedy_conditions(context.primary_symptom or "")
    if not conditions:
        return None

    terms = known_profile_terms(context, memory)
    cautions = excluded_cautions(terms)
    diabetic = any("diabet" in term.lower() for term in terms)
    allergies = memory.allergies if memory is not None else ()

    primary = conditions[0]
    kept = [
        remedy
        for remedy in primary.remedies
        if not _is_unsuitable(remedy, context.age_group, cautions, diabetic, allergies)
    ]
    kept.sort(key=lambda remedy: _EFFECTIVENESS_ORDER[remedy.effectiveness])

    warnings: list[str] = []
    for condition in conditions:
        warnings.extend(sign for sign in condition.warning_signs if sign not in warnings)

    logger.debug("home remedies for %s: %d of %d kept", primary.id, len(kept), len(primary.remedies))
    return HomeRemedyPlan(
        condition=primary.name,
        remedies=tuple(kept[:MAX_REMEDIES]),
        warning_signs=tuple(warnings[:MAX_REMEDY_WARNINGS]),
    )
