"""Tests for core/config.py."""

from __future__ import annotations

from pathlib import Path

from wsaudit.core.config import (
    deep_merge,
    get_control_map,
    get_effective_config,
    get_effective_frameworks,
    load_project_config,
)


class TestDeepMerge:
    def test_simple_merge(self):
        base = {"a": 1, "b": 2}
        override = {"b": 3, "c": 4}
        assert deep_merge(base, override) == {"a": 1, "b": 3, "c": 4}

    def test_nested_merge(self):
        base = {"output": {"format": "json", "indent": 2}}
        override = {"output": {"format": "markdown"}}
        result = deep_merge(base, override)
        assert result["output"]["format"] == "markdown"
        assert result["output"]["indent"] == 2

    def test_arrays_replaced(self):
        base = {"frameworks": ["CMMC", "HIPAA"]}
        override = {"frameworks": ["FTC"]}
        assert deep_merge(base, override)["frameworks"] == ["FTC"]

    def test_base_not_mutated(self):
        base = {"a": {"b": 1}}
        deep_merge(base, {"a": {"b": 2}})
        assert base["a"]["b"] == 1


class TestLoadProjectConfig:
    def test_loads_yaml(self, initialized_project: Path):
        config = load_project_config(initialized_project)
        assert config["audit"]["domain"] == "example.com"

    def test_missing_config_returns_empty(self, tmp_project: Path):
        assert load_project_config(tmp_project) == {}

    def test_empty_config_returns_empty(self, tmp_project: Path):
        (tmp_project / ".wsaudit").mkdir()
        (tmp_project / ".wsaudit" / "config.yaml").write_text("", encoding="utf-8")
        assert load_project_config(tmp_project) == {}

    def test_invalid_yaml_returns_empty(self, tmp_project: Path):
        (tmp_project / ".wsaudit").mkdir()
        (tmp_project / ".wsaudit" / "config.yaml").write_text("audit: [oops\n", encoding="utf-8")
        assert load_project_config(tmp_project) == {}


class TestGetEffectiveFrameworks:
    def test_empty_config(self):
        assert get_effective_frameworks({}) == []

    def test_defaults(self, tmp_project: Path):
        config = get_effective_config(tmp_project)
        assert config["_effective_frameworks"] == ["CMMC"]

    def test_required_then_profile(self):
        config = {
            "frameworks": {
                "required": ["NIST_CSF"],
                "default": ["CMMC"],
                "profiles": {"healthcare": {"frameworks": ["HIPAA"]}},
            }
        }
        assert get_effective_frameworks(config, profile="healthcare") == ["NIST_CSF", "HIPAA"]

    def test_skip_and_add(self):
        config = {"frameworks": {"default": ["CMMC", "NIST_800_171"]}}
        result = get_effective_frameworks(config, add_frameworks=["FTC", "CMMC"], skip_frameworks=["NIST_800_171"])
        assert result == ["CMMC", "FTC"]

    def test_builtin_profile(self, tmp_project: Path):
        config = get_effective_config(tmp_project, profile="defense")
        assert config["_effective_frameworks"] == ["CMMC", "NIST_800_171"]


class TestGetEffectiveConfig:
    def test_project_overrides_defaults(self, initialized_project: Path):
        config = get_effective_config(initialized_project)
        assert config["audit"]["domain"] == "example.com"
        assert config["_effective_frameworks"] == ["CMMC", "HIPAA"]
        assert config["output"]["format"] == "json"

    def test_cli_overrides_project(self, initialized_project: Path):
        config = get_effective_config(initialized_project, cli_overrides={"audit": {"domain": "other.org"}})
        assert config["audit"]["domain"] == "other.org"


class TestGetControlMap:
    def test_default(self, tmp_project: Path):
        control_map = get_control_map(get_effective_config(tmp_project))
        assert len(control_map) == 19

    def test_relative_map_file_and_overrides(self, tmp_project: Path):
        (tmp_project / "controls.yaml").write_text("check_probe:\n  CMMC: AU.L2-3.3.1\n", encoding="utf-8")
        config = get_effective_config(
            tmp_project,
            cli_overrides={"controls": {
                "map_file": "controls.yaml",
                "overrides": {"check_probe": {"HIPAA": "164.312(b)"}},
            }},
        )
        assert get_control_map(config).get("check_probe") == {"CMMC": "AU.L2-3.3.1", "HIPAA": "164.312(b)"}
