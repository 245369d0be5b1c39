from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MemoryType(str, Enum):
    ALLERGY = "allergy"
    CONDITION = "condition"
    MEDICATION = "medication"
    PREFERENCE = "preference"
    TRIGGER = "trigger"


class Confidence(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class MemoryCandidate:
    """A long-term fact offered to the user for saving. Never stored here."""

    id: str
    type: MemoryType
    label: str
    value: str
    confidence: Confidence
    reason: str

    def __post_init__(self) -> None:
        # Raises ValueError for anything outside the closed vocabularies.
        object.__setattr__(self, "type", MemoryType(self.type))
        object.__setattr__(self, "confidence", Confidence(self.confidence))


@dataclass(frozen=True)
class MemorySnapshot:
    allergies: tuple[str, ...] = ()
    conditions: tuple[str, ...] = ()
    medications: tuple[str, ...] = ()
    triggers: tuple[str, ...] = ()
    preferences: tuple[str, ...] = ()

    def values_for(self, memory_type: MemoryType) -> tuple[str, ...]:
        return {
            MemoryType.ALLERGY: self.allergies,
            MemoryType.CONDITION: self.conditions,
            MemoryType.MEDICATION: self.medications,
            MemoryType.TRIGGER: self.triggers,
            MemoryType.PREFERENCE: self.preferences,
        }[memory_type]
