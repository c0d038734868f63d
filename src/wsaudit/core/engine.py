"""Findings aggregation engine.

Entry point that takes the raw results of every check and produces one
consolidated multi-framework report. Pure and stateless: no I/O, nothing
kept between calls.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any, Optional, Union

from ..compliance.control_map import ControlMap
from ..models.finding import Framework
from ..models.report import ErrorDocument, Report
from .classifier import bucket_by_family, bucket_by_framework, resolve_frameworks
from .errors import MalformedInputError
from .msp import extract_cost_optimizations, extract_licensing_impacts
from .normalizer import FINDINGS_HELP, FindingNormalizer, parse_findings_input
from .scoring import tally_risk
from .synthesis import DEFAULT_AUDIT_SCOPE, build_report

logger = logging.getLogger(__name__)

DEFAULT_FRAMEWORKS: list[str] = [Framework.CMMC.value]


def generate_comprehensive_report(
    domain: str,
    active_frameworks: Optional[Sequence[str]],
    findings: Any,
    context_notes: str = "",
    control_map: Optional[ControlMap] = None,
    audit_scope: str = DEFAULT_AUDIT_SCOPE,
    generated_at: Optional[datetime] = None,
) -> Union[Report, ErrorDocument]:
    """Build the report, or an error document if ``findings`` is malformed."""
    try:
        raw_findings = parse_findings_input(findings)
    except MalformedInputError as exc:
        logger.warning("Rejected findings input: %s (received %s)", exc.message, exc.received_type)
        return ErrorDocument(error=exc.message, help=FINDINGS_HELP, received_type=exc.received_type)

    if isinstance(active_frameworks, str):
        active_frameworks = [active_frameworks]
    requested = list(active_frameworks or DEFAULT_FRAMEWORKS)

    normalizer = FindingNormalizer(control_map if control_map is not None else ControlMap.default())
    normalized = normalizer.normalize(raw_findings)
    frameworks, framework_warnings = resolve_frameworks(requested)

    result = normalized.findings
    risk = tally_risk(result)
    logger.info(
        "Scored %d checks for %s: %d critical, %d high, %d medium",
        risk.total_checks, domain, risk.critical_issues, risk.high_issues, risk.medium_issues,
    )

    return build_report(
        findings=result,
        family_buckets=bucket_by_family(result),
        framework_buckets=bucket_by_framework(result, frameworks),
        risk=risk,
        cost_optimizations=extract_cost_optimizations(result),
        licensing_impacts=extract_licensing_impacts(result),
        domain=domain,
        active_frameworks=requested,
        context_notes=context_notes,
        warnings=[*normalized.warnings, *framework_warnings],
        audit_scope=audit_scope,
        generated_at=generated_at,
    )


def serialize_document(document: Union[Report, ErrorDocument], indent: int = 2) -> str:
    """Pretty-printed JSON text for a report or error document."""
    return json.dumps(document.model_dump(mode="json"), indent=indent, ensure_ascii=False)


def generate_report_json(
    domain: str,
    active_frameworks: Optional[Sequence[str]],
    findings: Any,
    context_notes: str = "",
    control_map: Optional[ControlMap] = None,
    generated_at: Optional[datetime] = None,
    indent: int = 2,
) -> str:
    document = generate_comprehensive_report(
        domain,
        active_frameworks,
        findings,
        context_notes=context_notes,
        control_map=control_map,
        generated_at=generated_at,
    )
    return serialize_document(document, indent=indent)
