from __future__ import annotations

from typing import Any, Iterable

from .candidates import candidate_id
from .models import Confidence, MemoryCandidate, MemorySnapshot, MemoryType


class MemoryPolicyError(Exception):
    pass


class MemoryPolicyGuard:
    _ALLOWED_TYPES = {member.value for member in MemoryType}

    def ensure_allowed_type(self, memory_type: str) -> MemoryType:
        cleaned = (memory_type or "").strip().lower()
        if cleaned not in self._ALLOWED_TYPES:
            raise MemoryPolicyError(
                f"Memory type '{memory_type}' is not allowed; expected one of: "
                f"{', '.join(sorted(self._ALLOWED_TYPES))}"
            )
        return MemoryType(cleaned)

    def validate_candidate(self, payload: dict[str, Any]) -> MemoryCandidate:
        memory_type = self.ensure_allowed_type(str(payload.get("type", "")))
        value = str(payload.get("value") or "").strip()
        if not value:
            raise MemoryPolicyError("Memory candidate value is required.")
        confidence = str(payload.get("confidence") or Confidence.MEDIUM.value).strip().lower()
        if confidence not in {member.value for member in Confidence}:
            raise MemoryPolicyError(f"Unsupported confidence: {confidence}")
        return MemoryCandidate(
            id=str(payload.get("id") or candidate_id(memory_type, value)),
            type=memory_type,
            label=str(payload.get("label") or memory_type.value.title()),
            value=value,
            confidence=Confidence(confidence),
            reason=str(payload.get("reason") or ""),
        )

    def normalize_snapshot(self, snapshot: MemorySnapshot | None) -> MemorySnapshot:
        if snapshot is None:
            return MemorySnapshot()
        return MemorySnapshot(
            allergies=_dedupe(snapshot.allergies),
            conditions=_dedupe(snapshot.conditions),
            medications=_dedupe(snapshot.medications),
            triggers=_dedupe(snapshot.triggers),
            preferences=_dedupe(snapshot.preferences),
        )

    def filter_new_candidates(
        self,
        candidates: Iterable[MemoryCandidate],
        snapshot: MemorySnapshot | None,
    ) -> tuple[MemoryCandidate, ...]:
        known = self.normalize_snapshot(snapshot)
        fresh: list[MemoryCandidate] = []
        for candidate in candidates:
            self.ensure_allowed_type(candidate.type.value)
            existing = {value.lower() for value in known.values_for(candidate.type)}
            if candidate.value.strip().lower() in existing:
                continue
            fresh.append(candidate)
        return tuple(fresh)


def _dedupe(values: Iterable[str]) -> tuple[str, ...]:
    result: list[str] = []
    seen: set[str] = set()
    for value in values:
        cleaned = (value or "").strip()
        if not cleaned or cleaned.lower() in seen:
            continue
        seen.add(cleaned.lower())
        result.append(cleaned)
    return tuple(result)
