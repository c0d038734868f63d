"""Report synthesis: scores, status label, recommendations and rendering."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Optional

from ..models.finding import ControlFamily, Finding, FindingWarning, Status
from ..models.report import (
    ControlAreaFindings,
    CostOptimization,
    ExecutiveSummary,
    FrameworkFinding,
    FrameworkScore,
    LicensingImpact,
    MspValueSummary,
    Report,
    ReportFinding,
    ReportMetadata,
)
from .classifier import FAMILY_LABELS
from .scoring import RiskSummary

DEFAULT_AUDIT_SCOPE = "Multi-Framework Compliance - Google Workspace"
NO_CONTEXT = "No additional context provided"
NOT_APPLICABLE = "N/A"

STATUS_ACCEPTABLE = "ACCEPTABLE"
STATUS_NEEDS_ATTENTION = "NEEDS ATTENTION"

NEXT_STEPS: list[str] = [
    "Review all FAIL findings and prioritize remediation by risk level",
    "Address critical issues (2FA, admin access) within 24-48 hours",
    "Develop remediation plan for high-priority issues",
    "Schedule manual verification checks for items requiring admin console review",
    "Consider licensing upgrades if Enterprise features are needed for compliance",
    "Implement continuous monitoring for ongoing compliance",
]


def percent(part: int, whole: int) -> int:
    """Integer percentage, rounding halves up. 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def framework_score(entries: Sequence[tuple[Finding, str]]) -> FrameworkScore:
    total = len(entries)
    passed = sum(1 for finding, _ in entries if finding.status == Status.PASS)
    return FrameworkScore(
        total_controls=total,
        passed=passed,
        failed=total - passed,
        score=f"{percent(passed, total)}%" if total > 0 else NOT_APPLICABLE,
    )


def overall_status(risk: RiskSummary) -> str:
    if risk.critical_issues == 0 and risk.high_issues == 0:
        return STATUS_ACCEPTABLE
    return STATUS_NEEDS_ATTENTION


def key_findings(risk: RiskSummary, cost_optimizations: Sequence[CostOptimization]) -> list[str]:
    lines: list[str] = []
    if risk.critical_issues > 0:
        lines.append(f"{risk.critical_issues} critical security issues require immediate attention")
    if risk.high_issues > 0:
        lines.append(f"{risk.high_issues} high-priority issues identified")
    if cost_optimizations:
        lines.append(f"{len(cost_optimizations)} opportunities for cost optimization identified")
    return lines


def priority_recommendations(
    risk: RiskSummary,
    licensing_impacts: Sequence[LicensingImpact],
) -> list[str]:
    """Fixed-order recommendations; never reordered by magnitude."""
    lines: list[str] = []
    if risk.critical_issues > 0:
        lines.append("CRITICAL: Address 2FA and admin access issues immediately")
    if risk.high_issues > 0:
        lines.append("HIGH: Review external sharing and inactive accounts")
    if licensing_impacts:
        lines.append("LICENSING: Enterprise features may be required for full compliance")
    return lines


def to_report_finding(finding: Finding) -> ReportFinding:
    return ReportFinding(
        check=finding.check_id,
        compliance_mappings=finding.control_mapping,
        status=finding.status.value,
        severity=finding.severity.value if finding.severity else None,
        recommendation=finding.recommendation,
        data=finding.payload,
    )


def _control_area(family: ControlFamily, findings: Sequence[Finding]) -> ControlAreaFindings:
    passed = sum(1 for f in findings if f.status == Status.PASS)
    return ControlAreaFindings(
        control_family=FAMILY_LABELS[family],
        total_checks=len(findings),
        passed=passed,
        failed=len(findings) - passed,
        findings=[to_report_finding(f) for f in findings],
    )


def build_report(
    findings: Sequence[Finding],
    family_buckets: dict[ControlFamily, list[Finding]],
    framework_buckets: dict[str, list[tuple[Finding, str]]],
    risk: RiskSummary,
    cost_optimizations: Sequence[CostOptimization],
    licensing_impacts: Sequence[LicensingImpact],
    domain: str,
    active_frameworks: Sequence[str],
    context_notes: str = "",
    warnings: Optional[Sequence[FindingWarning]] = None,
    audit_scope: str = DEFAULT_AUDIT_SCOPE,
    generated_at: Optional[datetime] = None,
) -> Report:
    """Assemble the consolidated report document."""
    if generated_at is None:
        generated_at = datetime.now(timezone.utc)

    findings_by_framework: dict[str, list[FrameworkFinding]] = {}
    framework_scores: dict[str, FrameworkScore] = {}
    for framework, entries in framework_buckets.items():
        findings_by_framework[framework] = [
            FrameworkFinding(**to_report_finding(f).model_dump(), control_code=code)
            for f, code in entries
        ]
        framework_scores[framework] = framework_score(entries)

    return Report(
        report_metadata=ReportMetadata(
            domain=domain or "",
            generated_at=generated_at.isoformat(),
            audit_scope=audit_scope,
            frameworks_assessed=[str(fw) for fw in active_frameworks],
            total_checks=risk.total_checks,
            passed=risk.passed_checks,
            failed=risk.total_issues,
        ),
        executive_summary=ExecutiveSummary(
            overall_status=overall_status(risk),
            critical_issues=risk.critical_issues,
            high_priority_issues=risk.high_issues,
            medium_priority_issues=risk.medium_issues,
            overall_compliance_score=f"{percent(risk.passed_checks, risk.total_checks)}%",
            framework_scores=framework_scores,
            key_findings=key_findings(risk, cost_optimizations),
        ),
        findings_by_framework=findings_by_framework,
        findings_by_control_area={
            family.value: _control_area(family, bucket)
            for family, bucket in family_buckets.items()
        },
        unclassified_findings=[
            to_report_finding(f) for f in findings if f.family == ControlFamily.UNCLASSIFIED
        ],
        priority_recommendations=priority_recommendations(risk, licensing_impacts),
        msp_value_summary=MspValueSummary(
            total_opportunities=len(cost_optimizations),
            cost_optimization=list(cost_optimizations),
            licensing_recommendations=list(licensing_impacts),
        ),
        additional_context=context_notes or NO_CONTEXT,
        next_steps=list(NEXT_STEPS),
        processing_warnings=list(warnings or []),
    )


def get_exit_code(status: str) -> int:
    """Map the overall status label to a CI exit code."""
    return {
        STATUS_ACCEPTABLE: 0,
        STATUS_NEEDS_ATTENTION: 1,
    }.get(status, 0)


def render_markdown_report(report: Report) -> str:
    """Render a report as a Markdown document."""
    meta = report.report_metadata
    summary = report.executive_summary

    lines: list[str] = []
    lines.append("# Compliance Audit Report")
    lines.append("")
    lines.append(f"**Domain:** {meta.domain}")
    lines.append(f"**Date:** {meta.generated_at}")
    lines.append(f"**Scope:** {meta.audit_scope}")
    lines.append(f"**Frameworks:** {', '.join(meta.frameworks_assessed) or 'none'}")
    lines.append(f"**Status:** {summary.overall_status}")
    lines.append("")

    lines.append("## Executive Summary")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| Checks | {meta.total_checks} |")
    lines.append(f"| Passed | {meta.passed} |")
    lines.append(f"| Failed | {meta.failed} |")
    lines.append(f"| Critical | {summary.critical_issues} |")
    lines.append(f"| High | {summary.high_priority_issues} |")
    lines.append(f"| Medium | {summary.medium_priority_issues} |")
    lines.append(f"| **Overall score** | **{summary.overall_compliance_score}** |")
    lines.append("")
    for item in summary.key_findings:
        lines.append(f"- {item}")
    if summary.key_findings:
        lines.append("")

    if summary.framework_scores:
        lines.append("## Framework Scores")
        lines.append("")
        lines.append("| Framework | Controls | Passed | Failed | Score |")
        lines.append("|-----------|----------|--------|--------|-------|")
        for framework, score in summary.framework_scores.items():
            lines.append(
                f"| {framework} | {score.total_controls} | {score.passed} "
                f"| {score.failed} | {score.score} |"
            )
        lines.append("")

    lines.append("## Findings by Control Area")
    lines.append("")
    for area in report.findings_by_control_area.values():
        lines.append(f"### {area.control_family} ({area.passed}/{area.total_checks} passed)")
        lines.append("")
        if not area.findings:
            lines.append("_No checks in this area._")
            lines.append("")
            continue
        for f in area.findings:
            label = f"{f.status} [{f.severity}]" if f.severity else f.status
            lines.append(f"- **{f.check}**: {label}")
            if f.status == Status.FAIL.value:
                lines.append(f"  - {f.recommendation}")
        lines.append("")

    if report.unclassified_findings:
        lines.append("### Unclassified")
        lines.append("")
        for f in report.unclassified_findings:
            lines.append(f"- **{f.check}**: {f.status}")
        lines.append("")

    if report.priority_recommendations:
        lines.append("## Priority Recommendations")
        lines.append("")
        for i, rec in enumerate(report.priority_recommendations, 1):
            lines.append(f"{i}. {rec}")
        lines.append("")

    msp = report.msp_value_summary
    if msp.cost_optimization or msp.licensing_recommendations:
        lines.append("## Cost and Licensing")
        lines.append("")
        for item in msp.cost_optimization:
            savings = f" (savings: {item.savings})" if item.savings else ""
            lines.append(f"- **{item.check}**: {item.value}{savings}")
        for item in msp.licensing_recommendations:
            lines.append(f"- **{item.check}** licensing: {item.impact}")
        lines.append("")

    lines.append("## Additional Context")
    lines.append("")
    lines.append(report.additional_context)
    lines.append("")

    lines.append("## Next Steps")
    lines.append("")
    for i, step in enumerate(report.next_steps, 1):
        lines.append(f"{i}. {step}")
    lines.append("")

    if report.processing_warnings:
        lines.append("## Processing Warnings")
        lines.append("")
        for w in report.processing_warnings:
            where = f"{w.check_id}: " if w.check_id else ""
            lines.append(f"- {w.kind.value}: {where}{w.message}")
        lines.append("")

    lines.append("---")
    lines.append(f"*Generated at {meta.generated_at}*")

    return "\n".join(lines)
