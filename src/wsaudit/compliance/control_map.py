"""Check-to-control mapping table.

Each audit check maps to zero or more frameworks, each with its own control
code. The table is wrapped in an immutable ``ControlMap`` that is handed to
the normalizer explicitly, so tests and deployments can swap it.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, Optional

DEFAULT_CONTROL_MAPPINGS: dict[str, dict[str, str]] = {
    "check_2fa_status": {
        "CMMC": "IA.L2-3.5.3",
        "NIST_800_171": "3.5.3",
        "NIST_CSF": "PR.AA-01",
        "ISO_27001": "A.5.17",
        "HIPAA": "164.312(d)",
        "FTC": "314.4(c)(5)",
    },
    "check_admin_roles": {
        "CMMC": "AC.L2-3.1.1",
        "NIST_800_171": "3.1.1",
        "NIST_CSF": "PR.AA-05",
        "ISO_27001": "A.9.2.3",
        "HIPAA": "164.308(a)(4)",
        "FTC": "314.4(c)(1)",
    },
    "check_session_settings": {
        "CMMC": "AC.L2-3.1.11",
        "NIST_800_171": "3.1.11",
        "NIST_CSF": "PR.AC-01",
        "ISO_27001": "A.8.2",
        "HIPAA": "164.312(a)(2)(iii)",
        "FTC": "314.4(c)(1)",
    },
    "check_external_sharing": {
        "CMMC": "AC.L2-3.1.20",
        "NIST_800_171": "3.1.20",
        "NIST_CSF": "PR.DS-05",
        "ISO_27001": "A.8.12",
        "HIPAA": "164.312(e)(1)",
        "FTC": "314.4(c)(3)",
    },
    "check_api_access": {
        "CMMC": "AC.L2-3.1.2",
        "NIST_800_171": "3.1.2",
        "NIST_CSF": "PR.AA-05",
        "ISO_27001": "A.9.4.1",
        "HIPAA": "164.312(a)(1)",
        "FTC": "314.4(c)(1)",
    },
    "check_groups_external_members": {
        "CMMC": "AC.L2-3.1.20",
        "NIST_800_171": "3.1.20",
        "NIST_CSF": "PR.AC-04",
        "ISO_27001": "A.9.2.5",
        "HIPAA": "164.312(a)(1)",
        "FTC": "314.4(c)(3)",
    },
    "check_password_policy": {
        "CMMC": "IA.L2-3.5.7",
        "NIST_800_171": "3.5.7",
        "NIST_CSF": "PR.AA-01",
        "ISO_27001": "A.5.17",
        "HIPAA": "164.308(a)(5)(ii)(D)",
        "FTC": "314.4(c)(5)",
    },
    "check_inactive_accounts": {
        "CMMC": "AC.L2-3.1.1",
        "NIST_800_171": "3.1.1",
        "NIST_CSF": "PR.AA-05",
        "ISO_27001": "A.9.2.6",
        "HIPAA": "164.308(a)(4)(ii)(C)",
        "FTC": "314.4(c)(1)",
    },
    "check_audit_log_settings": {
        "CMMC": "AU.L2-3.3.1",
        "NIST_800_171": "3.3.1",
        "NIST_CSF": "DE.AE-01",
        "ISO_27001": "A.8.15",
        "HIPAA": "164.312(b)",
        "FTC": "314.4(c)(2)",
    },
    "check_suspicious_activity": {
        "CMMC": "AU.L2-3.3.4",
        "NIST_800_171": "3.3.4",
        "NIST_CSF": "DE.AE-03",
        "ISO_27001": "A.8.16",
        "HIPAA": "164.308(a)(1)(ii)(D)",
        "FTC": "314.4(c)(2)",
    },
    "check_mobile_devices": {
        "CMMC": "SC.L2-3.13.11",
        "NIST_800_171": "3.13.11",
        "NIST_CSF": "PR.DS-01",
        "ISO_27001": "A.8.24",
        "HIPAA": "164.312(a)(2)(iv)",
        "FTC": "314.4(c)(4)",
    },
    "check_email_authentication": {
        "CMMC": "SC.L2-3.13.8",
        "NIST_800_171": "3.13.8",
        "NIST_CSF": "PR.DS-02",
        "ISO_27001": "A.8.21",
        "HIPAA": "164.312(e)(2)(ii)",
        "FTC": "314.4(c)(4)",
    },
    "check_email_forwarding": {
        "CMMC": "AC.L2-3.1.20",
        "NIST_800_171": "3.1.20",
        "NIST_CSF": "PR.DS-05",
        "ISO_27001": "A.8.12",
        "HIPAA": "164.312(e)(1)",
        "FTC": "314.4(c)(3)",
    },
    "check_calendar_sharing": {
        "CMMC": "AC.L2-3.1.20",
        "NIST_800_171": "3.1.20",
        "NIST_CSF": "PR.DS-05",
        "ISO_27001": "A.8.12",
        "HIPAA": "164.312(e)(1)",
        "FTC": "314.4(c)(3)",
    },
    # No FTC control covers data residency
    "check_data_regions": {
        "CMMC": "SC.L2-3.13.16",
        "NIST_800_171": "3.13.16",
        "NIST_CSF": "PR.DS-01",
        "ISO_27001": "A.8.10",
        "HIPAA": "164.312(a)(2)(iv)",
    },
    "check_shared_drives": {
        "CMMC": "AC.L2-3.1.20",
        "NIST_800_171": "3.1.20",
        "NIST_CSF": "PR.DS-05",
        "ISO_27001": "A.8.12",
        "HIPAA": "164.312(e)(1)",
        "FTC": "314.4(c)(3)",
    },
    # Operational checks, partial mapping only
    "check_license_utilization": {
        "CMMC": "CM.L2-3.4.1",
        "NIST_800_171": "3.4.1",
        "NIST_CSF": "ID.AM-01",
    },
    "check_storage_usage": {
        "CMMC": "CM.L2-3.4.1",
        "NIST_800_171": "3.4.1",
        "NIST_CSF": "ID.AM-01",
    },
    "check_baa_status": {
        "HIPAA": "164.308(b)(1)",
    },
}


def clean_mapping(raw: Any) -> dict[str, str]:
    """Coerce one framework -> code mapping, dropping empty or non-string codes."""
    if not isinstance(raw, Mapping):
        return {}
    cleaned: dict[str, str] = {}
    for framework, code in raw.items():
        if isinstance(code, str) and code:
            cleaned[str(framework)] = code
    return cleaned


class ControlMap:
    """Immutable check id -> framework id -> control code table."""

    def __init__(self, mappings: Optional[Mapping[str, Any]] = None) -> None:
        self._mappings: dict[str, dict[str, str]] = {}
        for check_id, raw in (mappings or {}).items():
            self._mappings[str(check_id)] = clean_mapping(raw)

    @classmethod
    def default(cls) -> "ControlMap":
        return cls(DEFAULT_CONTROL_MAPPINGS)

    def get(self, check_id: str) -> dict[str, str]:
        """Mapping for a check (a copy); empty if the check is unknown."""
        return dict(self._mappings.get(check_id, {}))

    def merged(self, overrides: Optional[Mapping[str, Any]]) -> "ControlMap":
        """New map with per-check overrides merged framework by framework."""
        combined = self.to_dict()
        for check_id, raw in (overrides or {}).items():
            entry = combined.setdefault(str(check_id), {})
            entry.update(clean_mapping(raw))
        return ControlMap(combined)

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {check_id: dict(m) for check_id, m in self._mappings.items()}

    def __contains__(self, check_id: object) -> bool:
        return check_id in self._mappings

    def __iter__(self) -> Iterator[str]:
        return iter(self._mappings)

    def __len__(self) -> int:
        return len(self._mappings)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ControlMap):
            return NotImplemented
        return self._mappings == other._mappings

    def __repr__(self) -> str:
        return f"ControlMap({len(self._mappings)} checks)"
