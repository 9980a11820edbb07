"""
Tests for startup validation of operational rules.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from src.app_shell.config import OpsValidationError, validate_ops_rules
from src.rules.models import Rules


def test_valid_rules_pass(rules: Rules, tmp_path: Path) -> None:
    data_dir = tmp_path / "data"

    validate_ops_rules(rules, data_dir)

    assert data_dir.is_dir()


def test_unknown_active_editor_config(rules: Rules, tmp_path: Path) -> None:
    broken = rules.model_copy(deep=True)
    broken.editor.active_config = "missing"

    with pytest.raises(OpsValidationError, match="missing"):
        validate_ops_rules(broken, tmp_path)


def test_missing_required_env(rules: Rules, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("EDITOR_TEST_SECRET", raising=False)
    strict = rules.model_copy(deep=True)
    strict.ops.required_env = ["EDITOR_TEST_SECRET"]

    with pytest.raises(OpsValidationError, match="EDITOR_TEST_SECRET"):
        validate_ops_rules(strict, tmp_path)
