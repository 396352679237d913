# assetledger/config.py
"""
Ledger configuration.

Example config file:

    state_dir: ~/.assetledger
    administrator: admin
    log_level: INFO
"""

from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

DEFAULT_STATE_DIR = Path("~/.assetledger")


@dataclass
class LedgerConfig:
    """
    Settings for a local ledger.

    Attributes:
        state_dir: Directory holding registry, ledger and identity state
        administrator: Identity name recorded as system administrator on init
        log_level: Logging level name
    """
    state_dir: Path = field(default_factory=lambda: DEFAULT_STATE_DIR.expanduser())
    administrator: str = "admin"
    log_level: str = "WARNING"

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "LedgerConfig":
        """Parse config from YAML string."""
        data = yaml.safe_load(yaml_content) or {}
        if not isinstance(data, dict):
            raise ValueError("Config must be a YAML mapping")

        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        if "state_dir" in values:
            values["state_dir"] = Path(str(values["state_dir"])).expanduser()
        if "log_level" in values:
            values["log_level"] = str(values["log_level"]).upper()
        return cls(**values)

    @classmethod
    def from_file(cls, path: Path | str) -> "LedgerConfig":
        """Load config from YAML file."""
        with open(path, "r") as f:
            return cls.from_yaml(f.read())
