"""Control family and per-framework classification.

Families always come from the CMMC control code, whichever frameworks are
being assessed, so every report shares the same structure. Framework
buckets are filled independently for each active framework.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

from ..compliance.frameworks import is_known_framework
from ..models.finding import ControlFamily, Finding, FindingWarning, WarningKind

logger = logging.getLogger(__name__)

# (prefix, family) evaluated in order
FAMILY_RULES: list[tuple[str, ControlFamily]] = [
    ("AC.", ControlFamily.ACCESS_CONTROL),
    ("IA.", ControlFamily.AUTHENTICATION),
    ("AU.", ControlFamily.AUDIT_ACCOUNTABILITY),
    ("SC.", ControlFamily.SYSTEM_PROTECTION),
]

FAMILY_LABELS: dict[ControlFamily, str] = {
    ControlFamily.ACCESS_CONTROL: "AC - Access Control",
    ControlFamily.AUTHENTICATION: "IA - Identification and Authentication",
    ControlFamily.AUDIT_ACCOUNTABILITY: "AU - Audit and Accountability",
    ControlFamily.SYSTEM_PROTECTION: "SC - System and Communications Protection",
}

REPORTED_FAMILIES: list[ControlFamily] = [family for _, family in FAMILY_RULES]


def classify_family(cmmc_control: Optional[str]) -> ControlFamily:
    if not cmmc_control:
        return ControlFamily.UNCLASSIFIED
    for prefix, family in FAMILY_RULES:
        if cmmc_control.startswith(prefix):
            return family
    return ControlFamily.UNCLASSIFIED


def bucket_by_family(findings: Sequence[Finding]) -> dict[ControlFamily, list[Finding]]:
    """Group findings into the four reported families, in input order.

    Unclassified findings are left out.
    """
    buckets: dict[ControlFamily, list[Finding]] = {f: [] for f in REPORTED_FAMILIES}
    for finding in findings:
        if finding.family in buckets:
            buckets[finding.family].append(finding)
    return buckets


def resolve_frameworks(
    active_frameworks: Sequence[str],
) -> tuple[list[str], list[FindingWarning]]:
    """Split requested frameworks into known ids (deduplicated) and warnings."""
    known: list[str] = []
    warnings: list[FindingWarning] = []
    for framework in active_frameworks:
        framework = str(framework)
        if not is_known_framework(framework):
            logger.warning("Unknown framework %r requested; no score will be produced", framework)
            warnings.append(FindingWarning(
                kind=WarningKind.UNKNOWN_FRAMEWORK,
                check_id="",
                message=f"Unknown framework '{framework}' has no control namespace",
            ))
            continue
        if framework not in known:
            known.append(framework)
    return known, warnings


def bucket_by_framework(
    findings: Sequence[Finding],
    frameworks: Sequence[str],
) -> dict[str, list[tuple[Finding, str]]]:
    """For each framework, the findings mapped to it with that framework's code."""
    buckets: dict[str, list[tuple[Finding, str]]] = {fw: [] for fw in frameworks}
    for finding in findings:
        for framework in frameworks:
            code = finding.control_mapping.get(framework)
            if code:
                buckets[framework].append((finding, code))
    return buckets
