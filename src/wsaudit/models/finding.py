"""Finding data models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class Framework(str, Enum):
    CMMC = "CMMC"
    NIST_800_171 = "NIST_800_171"
    NIST_CSF = "NIST_CSF"
    ISO_27001 = "ISO_27001"
    HIPAA = "HIPAA"
    FTC = "FTC"


class Status(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"


class Severity(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"


class ControlFamily(str, Enum):
    ACCESS_CONTROL = "access_control"
    AUTHENTICATION = "authentication"
    AUDIT_ACCOUNTABILITY = "audit_accountability"
    SYSTEM_PROTECTION = "system_protection"
    UNCLASSIFIED = "unclassified"


class WarningKind(str, Enum):
    DEGRADED_ENTRY = "DEGRADED_ENTRY"
    UNMAPPED_CONTROL = "UNMAPPED_CONTROL"
    UNKNOWN_FRAMEWORK = "UNKNOWN_FRAMEWORK"


class RawFinding(BaseModel):
    """Partial view over one check's result.

    Every field is optional and loosely typed: checks report whatever they
    could collect. Unknown keys are kept as extras. Use ``has()`` for
    presence, never truthiness of the attribute.
    """

    model_config = ConfigDict(extra="allow")

    mfa_enforced: Any = None
    users_without_mfa: Any = None
    inactive_accounts: Any = None
    groups_with_external_members: Any = None
    drives_with_external_access: Any = None
    unencrypted_devices: Any = None
    suspicious_events_found: Any = None
    compliance_mappings: Any = None
    cmmc_control: Any = None
    recommendation: Any = None
    msp_recommendation: Any = None
    msp_value: Any = None
    potential_savings: Any = None
    licensing_impact: Any = None

    def has(self, name: str) -> bool:
        return name in self.model_fields_set


class Finding(BaseModel):
    """Normalized, classified result of one check."""

    model_config = ConfigDict(frozen=True)

    check_id: str
    control_mapping: dict[str, str] = {}
    status: Status
    severity: Optional[Severity] = None
    recommendation: str
    family: ControlFamily
    payload: dict[str, Any] = {}


class FindingWarning(BaseModel):
    """A non-fatal problem noticed while processing a batch."""

    kind: WarningKind
    check_id: str
    message: str
