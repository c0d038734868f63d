"""Report document data models."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel

from .finding import FindingWarning


class ReportMetadata(BaseModel):
    domain: str = ""
    generated_at: str
    audit_scope: str
    frameworks_assessed: list[str] = []
    total_checks: int = 0
    passed: int = 0
    failed: int = 0


class FrameworkScore(BaseModel):
    total_controls: int = 0
    passed: int = 0
    failed: int = 0
    score: str = "N/A"


class ExecutiveSummary(BaseModel):
    overall_status: str
    critical_issues: int = 0
    high_priority_issues: int = 0
    medium_priority_issues: int = 0
    overall_compliance_score: str
    framework_scores: dict[str, FrameworkScore] = {}
    key_findings: list[str] = []


class ReportFinding(BaseModel):
    """A finding as it appears inside the report."""

    check: str
    compliance_mappings: dict[str, str] = {}
    status: str
    severity: Optional[str] = None
    recommendation: str
    data: dict[str, Any] = {}


class FrameworkFinding(ReportFinding):
    control_code: str


class ControlAreaFindings(BaseModel):
    control_family: str
    total_checks: int = 0
    passed: int = 0
    failed: int = 0
    findings: list[ReportFinding] = []


class CostOptimization(BaseModel):
    check: str
    value: Any = ""
    savings: Any = ""


class LicensingImpact(BaseModel):
    check: str
    impact: Any


class MspValueSummary(BaseModel):
    total_opportunities: int = 0
    cost_optimization: list[CostOptimization] = []
    licensing_recommendations: list[LicensingImpact] = []


class Report(BaseModel):
    """Consolidated multi-framework audit report."""

    report_metadata: ReportMetadata
    executive_summary: ExecutiveSummary
    findings_by_framework: dict[str, list[FrameworkFinding]] = {}
    findings_by_control_area: dict[str, ControlAreaFindings] = {}
    unclassified_findings: list[ReportFinding] = []
    priority_recommendations: list[str] = []
    msp_value_summary: MspValueSummary = MspValueSummary()
    additional_context: str = ""
    next_steps: list[str] = []
    processing_warnings: list[FindingWarning] = []


class ErrorDocument(BaseModel):
    """Returned in place of a Report when the input cannot be processed."""

    error: str
    help: str
    received_type: str
