from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from memory import (
    MemoryPolicyError,
    MemoryPolicyGuard,
    MemorySnapshot,
    extract_memory_candidates,
)
from safety_audit import AuditUnavailableError, format_report, run_safety_audit
from triage_core import (
    AgeGroup,
    ForWhom,
    HealthContext,
    IntakePipeline,
    IntakeTurn,
    QuestionFlowState,
    RequestContext,
    UnknownQuestionError,
    assess_message,
)

_ENV_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _load_local_env_file(path: Path) -> None:
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError:
        return
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if not _ENV_KEY_RE.fullmatch(key):
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        os.environ.setdefault(key, value)


def _bootstrap_local_env() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    for candidate in (repo_root / ".env", repo_root / "backend/.env"):
        if candidate.exists():
            _load_local_env_file(candidate)


_bootstrap_local_env()

logging.basicConfig(
    level=os.getenv("INTAKE_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("intake")


def _intake_env() -> str:
    return os.getenv("INTAKE_ENV", "development").strip().lower()


def _default_member_id() -> str | None:
    return os.getenv("INTAKE_DEFAULT_MEMBER_ID") or None


class RequestContextPayload(BaseModel):
    for_whom: ForWhom = ForWhom.ME
    age_group: AgeGroup | None = None
    relationship: str | None = None
    member_id: str | None = None

    def to_core(self) -> RequestContext:
        return RequestContext(
            for_whom=self.for_whom,
            age_group=self.age_group,
            relationship=self.relationship,
            member_id=self.member_id or _default_member_id(),
        )


class MemorySnapshotPayload(BaseModel):
    allergies: list[str] = Field(default_factory=list)
    conditions: list[str] = Field(default_factory=list)
    medications: list[str] = Field(default_factory=list)
    triggers: list[str] = Field(default_factory=list)
    preferences: list[str] = Field(default_factory=list)

    def to_core(self) -> MemorySnapshot:
        return MemorySnapshot(
            allergies=tuple(self.allergies),
            conditions=tuple(self.conditions),
            medications=tuple(self.medications),
            triggers=tuple(self.triggers),
            preferences=tuple(self.preferences),
        )


class IntakeStartRequest(BaseModel):
    message: str = Field(min_length=1)
    context: RequestContextPayload = Field(default_factory=RequestContextPayload)
    memory: MemorySnapshotPayload | None = None


class IntakeAnswerRequest(BaseModel):
    message: str = Field(min_length=1)
    question_id: str
    health_context: HealthContext
    flow_state: QuestionFlowState
    context: RequestContextPayload = Field(default_factory=RequestContextPayload)
    memory: MemorySnapshotPayload | None = None


class ClassifyRequest(BaseModel):
    text: str
    age_group: AgeGroup | None = None


class MemoryCandidatesRequest(BaseModel):
    text: str
    memory: MemorySnapshotPayload | None = None


class MemoryValidateRequest(BaseModel):
    type: str
    value: str
    label: str | None = None
    confidence: str | None = None
    reason: str | None = None
    id: str | None = None


class IntakeApp:
    def __init__(self) -> None:
        self.pipeline = IntakePipeline()
        self.guard = MemoryPolicyGuard()


def _snapshot(payload: MemorySnapshotPayload | None) -> MemorySnapshot | None:
    return payload.to_core() if payload is not None else None


def _turn_payload(turn: IntakeTurn) -> dict[str, Any]:
    return {
        "kind": turn.kind.value,
        "text": turn.text,
        "question": turn.question,
        "guidance": turn.guidance,
        "assessment": turn.assessment,
        "differentials": list(turn.differentials),
        "memory_candidates": list(turn.memory_candidates),
        "crisis_type": turn.crisis_type.value if turn.crisis_type else None,
        "health_context": turn.context,
        "flow_state": turn.state,
    }


container = IntakeApp()
app = FastAPI(title="Symptom Intake Backend")

allowed_origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in allowed_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict[str, Any]:
    return {"ok": True, "env": _intake_env()}


@app.post("/intake/start")
def intake_start(payload: IntakeStartRequest):
    turn = container.pipeline.start_episode(
        payload.message,
        payload.context.to_core(),
        memory=_snapshot(payload.memory),
    )
    return _turn_payload(turn)


@app.post("/intake/answer")
def intake_answer(payload: IntakeAnswerRequest):
    try:
        turn = container.pipeline.continue_episode(
            payload.message,
            payload.question_id,
            payload.health_context,
            payload.flow_state,
            payload.context.to_core(),
            memory=_snapshot(payload.memory),
        )
    except UnknownQuestionError as exc:
        raise HTTPException(status_code=400, detail=exc.args[0] if exc.args else "Unknown question") from exc
    return _turn_payload(turn)


@app.post("/triage/classify")
def triage_classify(payload: ClassifyRequest):
    assessment, crisis_type = assess_message(payload.text, payload.age_group)
    return {
        "urgency": assessment.urgency.value,
        "red_flags_detected": list(assessment.red_flags_detected),
        "crisis_type": crisis_type.value if crisis_type else None,
    }


@app.post("/memory/candidates")
def memory_candidates(payload: MemoryCandidatesRequest):
    candidates = container.guard.filter_new_candidates(
        extract_memory_candidates(payload.text),
        _snapshot(payload.memory),
    )
    return {"candidates": list(candidates)}


@app.post("/memory/validate")
def memory_validate(payload: MemoryValidateRequest):
    try:
        candidate = container.guard.validate_candidate(payload.model_dump())
    except MemoryPolicyError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return {"ok": True, "candidate": candidate}


@app.get("/audit/run")
def audit_run():
    try:
        report = run_safety_audit(IntakePipeline())
    except AuditUnavailableError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    logger.info("safety audit finished: %s", report.summary)
    return {"report": report, "text": format_report(report)}
