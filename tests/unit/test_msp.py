"""Tests for core/msp.py."""

from __future__ import annotations

from wsaudit.core.msp import extract_cost_optimizations, extract_licensing_impacts
from wsaudit.models.finding import ControlFamily, Finding, Status


def _finding(check_id: str, payload: dict) -> Finding:
    return Finding(
        check_id=check_id,
        status=Status.PASS,
        recommendation="",
        family=ControlFamily.UNCLASSIFIED,
        payload=payload,
    )


class TestCostOptimizations:
    def test_recommendation_preferred_over_value(self):
        records = extract_cost_optimizations([
            _finding("a", {"msp_recommendation": "Reclaim licenses", "msp_value": "ignored"}),
        ])
        assert records[0].value == "Reclaim licenses"
        assert records[0].savings == ""

    def test_value_used_when_no_recommendation(self):
        records = extract_cost_optimizations([_finding("a", {"msp_value": "Managed backups"})])
        assert records[0].value == "Managed backups"

    def test_savings_only(self):
        records = extract_cost_optimizations([_finding("a", {"potential_savings": "$100/month"})])
        assert records[0].check == "a"
        assert records[0].value == ""
        assert records[0].savings == "$100/month"

    def test_no_fields_no_record(self):
        assert extract_cost_optimizations([_finding("a", {"msp_value": ""})]) == []

    def test_no_deduplication(self):
        payload = {"msp_value": "same"}
        records = extract_cost_optimizations([_finding("a", payload), _finding("b", payload)])
        assert [r.check for r in records] == ["a", "b"]


class TestLicensingImpacts:
    def test_collects_impacts(self):
        impacts = extract_licensing_impacts([
            _finding("check_baa_status", {"licensing_impact": "Enterprise required"}),
            _finding("check_2fa_status", {}),
        ])
        assert len(impacts) == 1
        assert impacts[0].check == "check_baa_status"
        assert impacts[0].impact == "Enterprise required"
