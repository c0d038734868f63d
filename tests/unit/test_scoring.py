"""Tests for core/scoring.py."""

from __future__ import annotations

import pytest

from wsaudit.core.scoring import assign_severity, bad_signals, evaluate_status, tally_risk
from wsaudit.models.finding import ControlFamily, Finding, RawFinding, Severity, Status


def _raw(**fields) -> RawFinding:
    return RawFinding.model_validate(fields)


class TestEvaluateStatus:
    def test_mfa_not_enforced_fails(self):
        assert evaluate_status(_raw(mfa_enforced=False)) == Status.FAIL

    def test_mfa_enforced_passes(self):
        assert evaluate_status(_raw(mfa_enforced=True)) == Status.PASS

    @pytest.mark.parametrize("field", [
        "users_without_mfa",
        "inactive_accounts",
        "groups_with_external_members",
        "drives_with_external_access",
        "unencrypted_devices",
        "suspicious_events_found",
    ])
    def test_positive_count_fails(self, field):
        assert evaluate_status(_raw(**{field: 2})) == Status.FAIL

    @pytest.mark.parametrize("value", [0, False, "", None])
    def test_no_signal_values_pass(self, value):
        assert evaluate_status(_raw(users_without_mfa=value)) == Status.PASS

    def test_missing_mfa_flag_is_not_a_signal(self):
        # Only an explicit False counts; absent or None does not
        assert evaluate_status(_raw(mfa_enforced=None)) == Status.PASS
        assert evaluate_status(_raw()) == Status.PASS

    def test_numeric_text_counts(self):
        assert evaluate_status(_raw(inactive_accounts="4")) == Status.FAIL
        assert evaluate_status(_raw(inactive_accounts="none")) == Status.PASS

    def test_manual_verification_passes(self):
        raw = _raw(status="Manual verification required")
        assert evaluate_status(raw) == Status.PASS

    def test_bad_signals_lists_all_matches(self):
        raw = _raw(mfa_enforced=False, users_without_mfa=3, inactive_accounts=0)
        assert bad_signals(raw) == ["mfa_enforced", "users_without_mfa"]


class TestAssignSeverity:
    def test_pass_has_no_severity(self):
        assert assign_severity("check_2fa_status", Status.PASS) is None

    def test_2fa_is_critical(self):
        assert assign_severity("check_2fa_status", Status.FAIL) == Severity.CRITICAL

    def test_admin_is_critical(self):
        assert assign_severity("check_admin_roles", Status.FAIL) == Severity.CRITICAL

    def test_inactive_is_high(self):
        assert assign_severity("check_inactive_accounts", Status.FAIL) == Severity.HIGH

    def test_external_is_high(self):
        assert assign_severity("check_groups_external_members", Status.FAIL) == Severity.HIGH

    def test_critical_rule_wins_over_high(self):
        assert assign_severity("check_external_admin", Status.FAIL) == Severity.CRITICAL

    def test_other_is_medium(self):
        assert assign_severity("check_mobile_devices", Status.FAIL) == Severity.MEDIUM

    def test_match_is_case_sensitive(self):
        assert assign_severity("check_2FA_status", Status.FAIL) == Severity.MEDIUM


class TestTallyRisk:
    def _finding(self, check_id: str, severity: Severity | None) -> Finding:
        return Finding(
            check_id=check_id,
            status=Status.FAIL if severity else Status.PASS,
            severity=severity,
            recommendation="",
            family=ControlFamily.UNCLASSIFIED,
        )

    def test_counts(self):
        summary = tally_risk([
            self._finding("a", Severity.CRITICAL),
            self._finding("b", Severity.HIGH),
            self._finding("c", Severity.HIGH),
            self._finding("d", Severity.MEDIUM),
            self._finding("e", None),
        ])
        assert summary.critical_issues == 1
        assert summary.high_issues == 2
        assert summary.medium_issues == 1
        assert summary.total_checks == 5
        assert summary.passed_checks == 1

    def test_empty(self):
        summary = tally_risk([])
        assert summary.total_checks == 0
        assert summary.passed_checks == 0
