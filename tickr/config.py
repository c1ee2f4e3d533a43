import configparser
import os
from dataclasses import dataclass, field
from typing import List

from tickr.constants import CONFIG_PATH, COLUMNS, DEFAULT_COLUMNS, DEFAULT_INDICES, DISPLAY_NAMES


@dataclass
class Config:
    columns: List[str] = field(default_factory=lambda: list(DEFAULT_COLUMNS))
    indices: List[str] = field(default_factory=lambda: list(DEFAULT_INDICES))


def _parse_list(value: str, available, default: List[str], lower: bool = True) -> List[str]:
    """Parse a comma-separated list, keeping only entries found in ``available``."""
    items = [c.strip() for c in value.split(",") if c.strip()]
    items = [c.lower() if lower else c.upper() for c in items]
    valid = [c for c in items if c in available]
    if len(valid) != len(items):
        unknown = ", ".join(c for c in items if c not in available)
        print(f"[warning] Ignoring unknown entries: {unknown}")
    return valid if valid else default


def load_env(path: str):
    """Load KEY=value lines from a .env file without overriding the environment."""
    if not os.path.exists(path):
        return
    with open(path) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, _, val = line.partition("=")
                os.environ.setdefault(key.strip(), val.strip())


def parse_config(path: str = CONFIG_PATH) -> Config:
    """Read config.ini and return a Config object."""
    cfg_obj = Config()
    if not os.path.exists(path):
        print("[notice] config.ini not found, using defaults")
        return cfg_obj

    cfg = configparser.RawConfigParser()
    cfg.read(path)
    sect = cfg["dashboard"] if "dashboard" in cfg else {}

    if "columns" in sect:
        cfg_obj.columns = _parse_list(sect["columns"], COLUMNS, DEFAULT_COLUMNS)
        if "ticker" not in cfg_obj.columns:
            cfg_obj.columns.insert(0, "ticker")
    if "indices" in sect:
        cfg_obj.indices = _parse_list(sect["indices"], DISPLAY_NAMES, DEFAULT_INDICES, lower=False)

    return cfg_obj
