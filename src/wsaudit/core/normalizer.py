"""Finding normalizer: raw check results to canonical findings.

Turns the findings mapping handed over by the checks into an ordered list of
``Finding`` records. Bad entries are skipped with a warning rather than
failing the batch, since checks may legitimately report partial results.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from ..compliance.control_map import ControlMap, clean_mapping
from ..models.finding import Finding, FindingWarning, Framework, RawFinding, WarningKind
from .classifier import classify_family
from .errors import MalformedInputError, json_type_name
from .scoring import assign_severity, evaluate_status

logger = logging.getLogger(__name__)

DEFAULT_RECOMMENDATION = "No recommendation available"

PARSE_ERROR = "Failed to parse findings. Findings must be a valid JSON object."
FORMAT_ERROR = "Invalid findings format. Expected an object with check results."
FINDINGS_HELP = 'Pass findings as: {"check_2fa_status": {...}, "check_admin_roles": {...}, ...}'


def parse_findings_input(findings: Any) -> dict[str, Any]:
    """Accept a findings mapping or JSON text encoding one.

    Raises:
        MalformedInputError: if the value is not a mapping and does not
            parse (once) into one.
    """
    if isinstance(findings, Mapping):
        return dict(findings)

    if isinstance(findings, (str, bytes)):
        try:
            parsed = json.loads(findings)
        except json.JSONDecodeError as exc:
            raise MalformedInputError(PARSE_ERROR, json_type_name(findings)) from exc
        if isinstance(parsed, dict):
            return parsed
        raise MalformedInputError(FORMAT_ERROR, json_type_name(parsed))

    raise MalformedInputError(FORMAT_ERROR, json_type_name(findings))


class NormalizationResult(BaseModel):
    findings: list[Finding] = []
    warnings: list[FindingWarning] = []


class FindingNormalizer:
    """Builds findings using an explicitly supplied control map."""

    def __init__(self, control_map: ControlMap) -> None:
        self.control_map = control_map

    def normalize(self, findings: Mapping[str, Any]) -> NormalizationResult:
        """Normalize every entry, preserving input order."""
        result = NormalizationResult()
        for check_id, value in findings.items():
            finding, warnings = self.normalize_entry(str(check_id), value)
            result.warnings.extend(warnings)
            if finding is not None:
                result.findings.append(finding)

        logger.debug(
            "Normalized %d of %d entries (%d warnings)",
            len(result.findings), len(findings), len(result.warnings),
        )
        return result

    def normalize_entry(
        self, check_id: str, value: Any,
    ) -> tuple[Optional[Finding], list[FindingWarning]]:
        if not isinstance(value, Mapping):
            return None, [self._degraded(check_id, f"result is {json_type_name(value)}, not an object")]

        payload = {str(key): item for key, item in value.items()}
        try:
            raw = RawFinding.model_validate(payload)
        except ValidationError as exc:
            return None, [self._degraded(check_id, f"result could not be read: {exc.error_count()} errors")]

        warnings: list[FindingWarning] = []
        mapping = self.resolve_mapping(check_id, raw)
        if not mapping:
            logger.warning("No control mapping for %s; finding is unclassified", check_id)
            warnings.append(FindingWarning(
                kind=WarningKind.UNMAPPED_CONTROL,
                check_id=check_id,
                message="No control mapping in the result or the control map",
            ))

        cmmc_control = mapping.get(Framework.CMMC.value)
        if not cmmc_control and isinstance(raw.cmmc_control, str):
            cmmc_control = raw.cmmc_control

        status = evaluate_status(raw)
        finding = Finding(
            check_id=check_id,
            control_mapping=mapping,
            status=status,
            severity=assign_severity(check_id, status),
            recommendation=_recommendation(raw),
            family=classify_family(cmmc_control),
            payload=payload,
        )
        return finding, warnings

    def resolve_mapping(self, check_id: str, raw: RawFinding) -> dict[str, str]:
        """Embedded mapping, else control map entry, else legacy CMMC field."""
        embedded = clean_mapping(raw.compliance_mappings)
        if embedded:
            return embedded

        mapped = self.control_map.get(check_id)
        if mapped:
            return mapped

        if isinstance(raw.cmmc_control, str) and raw.cmmc_control:
            return {Framework.CMMC.value: raw.cmmc_control}

        return {}

    @staticmethod
    def _degraded(check_id: str, reason: str) -> FindingWarning:
        logger.warning("Skipping invalid finding for %s: %s", check_id, reason)
        return FindingWarning(
            kind=WarningKind.DEGRADED_ENTRY,
            check_id=check_id,
            message=f"Skipped: {reason}",
        )


def _recommendation(raw: RawFinding) -> str:
    value = raw.recommendation
    if not value:
        return DEFAULT_RECOMMENDATION
    return value if isinstance(value, str) else str(value)
