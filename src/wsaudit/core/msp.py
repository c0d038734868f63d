"""Cost-optimization and licensing-impact extraction."""

from __future__ import annotations

from collections.abc import Sequence

from ..models.report import CostOptimization, LicensingImpact
from ..models.finding import Finding


def extract_cost_optimizations(findings: Sequence[Finding]) -> list[CostOptimization]:
    """One record per finding that reports MSP value or potential savings."""
    records: list[CostOptimization] = []
    for finding in findings:
        data = finding.payload
        recommendation = data.get("msp_recommendation")
        value = data.get("msp_value")
        savings = data.get("potential_savings")
        if not (recommendation or value or savings):
            continue
        records.append(CostOptimization(
            check=finding.check_id,
            value=recommendation or value or "",
            savings=savings or "",
        ))
    return records


def extract_licensing_impacts(findings: Sequence[Finding]) -> list[LicensingImpact]:
    return [
        LicensingImpact(check=f.check_id, impact=f.payload["licensing_impact"])
        for f in findings
        if f.payload.get("licensing_impact")
    ]
