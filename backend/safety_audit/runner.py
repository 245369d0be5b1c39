from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone

from triage_core import IntakePipeline, IntakeTurn, RequestContext

from .cases import AUDIT_CASES, AuditCase, get_audit_case
from .checks import AuditObservation, CheckRegistry, CheckResult, build_default_registry

logger = logging.getLogger(__name__)

RULE = "=" * 80


class AuditUnavailableError(Exception):
    pass


@dataclass(frozen=True)
class AuditCaseResult:
    case_id: str
    name: str
    passed: bool
    checks: tuple[CheckResult, ...]
    raw_output: str | None = None


@dataclass(frozen=True)
class AuditReport:
    run_at: str
    results: tuple[AuditCaseResult, ...]
    passed_count: int
    failed_count: int
    summary: str


def audit_available() -> bool:
    return os.getenv("INTAKE_ENV", "development").strip().lower() != "production"


def _ensure_available() -> None:
    if not audit_available():
        raise AuditUnavailableError("The safety audit is disabled in production.")


def _observe(turn: IntakeTurn) -> AuditObservation:
    return AuditObservation(
        text=turn.text,
        urgency=turn.assessment.urgency.value,
        memory_types=tuple(candidate.type.value for candidate in turn.memory_candidates),
    )


def _run_case(pipeline: IntakePipeline, registry: CheckRegistry, case: AuditCase) -> AuditCaseResult:
    # Grade the turn this call returned; hooks on a shared pipeline also see other callers' turns.
    try:
        turn = pipeline.start_episode(case.message, RequestContext(age_group=case.age_group))
    except Exception as exc:  # recorded as a failed case; the audit keeps going
        logger.exception("audit case %s raised", case.id)
        return AuditCaseResult(
            case_id=case.id,
            name=case.name,
            passed=False,
            checks=(
                CheckResult(name="Test execution", passed=False, violated_rule=f"Test threw error: {exc}"),
            ),
        )

    observation = _observe(turn)
    checks = tuple(registry.run(name, observation) for name in case.checks)
    return AuditCaseResult(
        case_id=case.id,
        name=case.name,
        passed=all(check.passed for check in checks),
        checks=checks,
        raw_output=observation.text,
    )


def run_safety_audit(
    pipeline: IntakePipeline | None = None,
    cases: tuple[AuditCase, ...] = AUDIT_CASES,
    registry: CheckRegistry | None = None,
) -> AuditReport:
    _ensure_available()
    pipeline = pipeline or IntakePipeline()
    registry = registry or build_default_registry()
    run_at = datetime.now(timezone.utc).isoformat()

    results: list[AuditCaseResult] = []
    for case in cases:
        result = _run_case(pipeline, registry, case)
        logger.info("audit %s %s", case.id, "PASS" if result.passed else "FAIL")
        results.append(result)

    passed_count = sum(1 for result in results if result.passed)
    failed_count = len(results) - passed_count
    return AuditReport(
        run_at=run_at,
        results=tuple(results),
        passed_count=passed_count,
        failed_count=failed_count,
        summary=f"{passed_count}/{len(results)} PASSED, {failed_count} FAILED",
    )


def run_single_audit_case(case_id: str, pipeline: IntakePipeline | None = None) -> AuditCaseResult:
    _ensure_available()
    return _run_case(pipeline or IntakePipeline(), build_default_registry(), get_audit_case(case_id))


def format_report(report: AuditReport) -> str:
    lines = [RULE, "SAFETY AUDIT REPORT", f"Run at: {report.run_at}", RULE, ""]
    for result in report.results:
        lines.append(f"{result.case_id}: {result.name}")
        lines.append(f"Status: {'PASS' if result.passed else 'FAIL'}")
        lines.append("Checks:")
        for check in result.checks:
            lines.append(f"  [{'PASS' if check.passed else 'FAIL'}] {check.name}")
            if not check.passed and check.evidence:
                lines.append(f"         Evidence: {check.evidence}")
            if not check.passed and check.violated_rule:
                lines.append(f"         Rule: {check.violated_rule}")
        lines.append("")
    lines.extend([RULE, f"SUMMARY: {report.summary}", RULE])
    return "\n".join(lines)
