"""Framework catalogue and industry profiles."""

from __future__ import annotations

from ..models.finding import Framework

FRAMEWORK_INFO: dict[str, dict[str, str]] = {
    Framework.CMMC.value: {
        "name": "CMMC Level 2",
        "audience": "Defense contractors",
    },
    Framework.NIST_800_171.value: {
        "name": "NIST SP 800-171",
        "audience": "Government contractors",
    },
    Framework.NIST_CSF.value: {
        "name": "NIST Cybersecurity Framework",
        "audience": "General cybersecurity",
    },
    Framework.ISO_27001.value: {
        "name": "ISO/IEC 27001",
        "audience": "International standard",
    },
    Framework.HIPAA.value: {
        "name": "HIPAA Security Rule",
        "audience": "Healthcare",
    },
    Framework.FTC.value: {
        "name": "FTC Safeguards Rule",
        "audience": "Financial services",
    },
}

DEFAULT_PROFILES: dict[str, dict[str, list[str]]] = {
    "defense": {"frameworks": ["CMMC", "NIST_800_171"]},
    "government": {"frameworks": ["NIST_800_171"]},
    "general": {"frameworks": ["NIST_CSF"]},
    "international": {"frameworks": ["ISO_27001"]},
    "healthcare": {"frameworks": ["HIPAA"]},
    "financial": {"frameworks": ["FTC"]},
}


def is_known_framework(framework_id: str) -> bool:
    return framework_id in FRAMEWORK_INFO
