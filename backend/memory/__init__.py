from .candidates import candidate_id, extract_memory_candidates
from .memory_policy_guard import MemoryPolicyError, MemoryPolicyGuard
from .models import Confidence, MemoryCandidate, MemorySnapshot, MemoryType

__all__ = [
    "Confidence",
    "MemoryCandidate",
    "MemoryPolicyError",
    "MemoryPolicyGuard",
    "MemorySnapshot",
    "MemoryType",
    "candidate_id",
    "extract_memory_candidates",
]
