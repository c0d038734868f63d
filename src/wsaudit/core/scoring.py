"""Pass/fail status and severity assignment for findings.

Status is a conservative "any known bad signal" heuristic: a check fails if
any recognized signal field is present and indicates a problem. A payload
with none of these fields passes, including manual-verification checks that
report no numeric signal at all.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel

from ..models.finding import Finding, RawFinding, Severity, Status


def _is_false(value: Any) -> bool:
    return value is False


def _is_positive(value: Any) -> bool:
    """True for numbers (or numeric text) greater than zero."""
    if isinstance(value, (bool, int, float)):
        return value > 0
    if isinstance(value, str):
        try:
            return float(value) > 0
        except ValueError:
            return False
    return False


# (field, predicate) pairs; any match marks the finding FAIL
BAD_SIGNAL_RULES: list[tuple[str, Callable[[Any], bool]]] = [
    ("mfa_enforced", _is_false),
    ("users_without_mfa", _is_positive),
    ("inactive_accounts", _is_positive),
    ("groups_with_external_members", _is_positive),
    ("drives_with_external_access", _is_positive),
    ("unencrypted_devices", _is_positive),
    ("suspicious_events_found", _is_positive),
]

# Evaluated in order against the check id; first match wins
SEVERITY_RULES: list[tuple[tuple[str, ...], Severity]] = [
    (("2fa", "admin"), Severity.CRITICAL),
    (("inactive", "external"), Severity.HIGH),
]

DEFAULT_SEVERITY = Severity.MEDIUM


def bad_signals(raw: RawFinding) -> list[str]:
    """Names of the signal fields that indicate a problem."""
    return [
        field
        for field, predicate in BAD_SIGNAL_RULES
        if raw.has(field) and predicate(getattr(raw, field))
    ]


def evaluate_status(raw: RawFinding) -> Status:
    return Status.FAIL if bad_signals(raw) else Status.PASS


def assign_severity(check_id: str, status: Status) -> Optional[Severity]:
    """Severity bucket for a failing check; None when it passed."""
    if status != Status.FAIL:
        return None
    for needles, severity in SEVERITY_RULES:
        if any(needle in check_id for needle in needles):
            return severity
    return DEFAULT_SEVERITY


class RiskSummary(BaseModel):
    critical_issues: int = 0
    high_issues: int = 0
    medium_issues: int = 0
    total_checks: int = 0

    @property
    def total_issues(self) -> int:
        return self.critical_issues + self.high_issues + self.medium_issues

    @property
    def passed_checks(self) -> int:
        return self.total_checks - self.total_issues


def tally_risk(findings: Iterable[Finding]) -> RiskSummary:
    """Count failing findings per severity across one batch."""
    summary = RiskSummary()
    for finding in findings:
        summary.total_checks += 1
        if finding.severity == Severity.CRITICAL:
            summary.critical_issues += 1
        elif finding.severity == Severity.HIGH:
            summary.high_issues += 1
        elif finding.severity == Severity.MEDIUM:
            summary.medium_issues += 1
    return summary
