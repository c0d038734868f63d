"""Shared fixtures for workspace audit tests."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from wsaudit.compliance.control_map import ControlMap


@pytest.fixture
def fixed_time() -> datetime:
    return datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def control_map() -> ControlMap:
    return ControlMap.default()


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Create an empty project directory."""
    project = tmp_path / "audit-project"
    project.mkdir()
    return project


@pytest.fixture
def initialized_project(tmp_project: Path) -> Path:
    """Create a project with .wsaudit/config.yaml."""
    cfg_dir = tmp_project / ".wsaudit"
    cfg_dir.mkdir()
    (cfg_dir / "config.yaml").write_text(
        'audit:\n  domain: "example.com"\n\nframeworks:\n  default:\n    - CMMC\n    - HIPAA\n',
        encoding="utf-8",
    )
    return tmp_project


@pytest.fixture
def sample_findings() -> dict:
    """Check results in the shape the workspace checks produce."""
    return {
        "check_2fa_status": {
            "total_users": 40,
            "users_with_2fa": 37,
            "users_without_mfa": 3,
            "recommendation": "Enforce 2-Step Verification for all users.",
        },
        "check_admin_roles": {
            "super_admins": 2,
            "recommendation": "Keep super admin count between 2 and 4.",
        },
        "check_inactive_accounts": {
            "inactive_accounts": 5,
            "recommendation": "Suspend accounts inactive for 90+ days.",
            "msp_recommendation": "Reclaim 5 licenses from inactive accounts.",
            "potential_savings": "$60/month",
        },
        "check_audit_log_settings": {
            "status": "Manual verification required",
            "recommendation": "Export audit logs for long-term retention.",
        },
        "check_mobile_devices": {
            "total_devices": 12,
            "unencrypted_devices": 1,
        },
        "check_baa_status": {
            "status": "Manual verification required",
            "licensing_impact": "Enterprise Standard or Enterprise Plus required.",
        },
    }
