# tests/test_config.py
"""Tests for YAML configuration."""

import tempfile
from pathlib import Path

import pytest

from assetledger.config import LedgerConfig


class TestLedgerConfig:
    def test_defaults(self):
        config = LedgerConfig()
        assert config.administrator == "admin"
        assert config.log_level == "WARNING"
        assert config.state_dir == Path("~/.assetledger").expanduser()

    def test_from_yaml(self):
        config = LedgerConfig.from_yaml(
            "state_dir: /tmp/ledger\nadministrator: root\nlog_level: debug\nextra: ignored\n"
        )
        assert config.state_dir == Path("/tmp/ledger")
        assert config.administrator == "root"
        assert config.log_level == "DEBUG"

    def test_empty_yaml_uses_defaults(self):
        assert LedgerConfig.from_yaml("") == LedgerConfig()

    def test_non_mapping_rejected(self):
        with pytest.raises(ValueError):
            LedgerConfig.from_yaml("- a\n- b\n")

    def test_from_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "assetledger.yaml"
            path.write_text("administrator: ops\n")
            assert LedgerConfig.from_file(path).administrator == "ops"
