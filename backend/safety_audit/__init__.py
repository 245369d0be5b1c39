from .cases import AUDIT_CASES, AuditCase, get_audit_case
from .checks import AuditObservation, CheckRegistry, CheckResult, build_default_registry
from .runner import (
    AuditCaseResult,
    AuditReport,
    AuditUnavailableError,
    audit_available,
    format_report,
    run_safety_audit,
    run_single_audit_case,
)

__all__ = [
    "AUDIT_CASES",
    "AuditCase",
    "AuditCaseResult",
    "AuditObservation",
    "AuditReport",
    "AuditUnavailableError",
    "CheckRegistry",
    "CheckResult",
    "audit_available",
    "build_default_registry",
    "format_report",
    "get_audit_case",
    "run_safety_audit",
    "run_single_audit_case",
]
