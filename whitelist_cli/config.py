"""
CLI Configuration

Configuration management for the whitelist-merkle CLI.
Supports environment variables (and a .env file) and JSON or YAML
configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

from core.merkle.leaf import WHITELIST_LEAF_ENCODING
from core.whitelist.io import PROOFS_FILE, WHITELIST_FILE


# Environment variable prefix
ENV_PREFIX = "WHITELIST_MERKLE_"

DEFAULT_CONFIG_FILE = "whitelist-merkle.json"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Input
    input_path: str = WHITELIST_FILE
    amount: int = 0
    leaf_encoding: list[str] = field(default_factory=lambda: list(WHITELIST_LEAF_ENCODING))
    unique: bool = False

    # Tree
    sort_leaves: bool = True

    # Output
    proofs_out: str = PROOFS_FILE
    tree_out: str | None = None
    workers: int = 1

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config_from_env(config: CLIConfig | None = None) -> CLIConfig:
    """
    Apply environment variables on top of a configuration.

    Only variables that are set override existing values.
    """
    config = config or CLIConfig()

    # Input
    if os.getenv(f"{ENV_PREFIX}INPUT"):
        config.input_path = os.getenv(f"{ENV_PREFIX}INPUT", config.input_path)
    if os.getenv(f"{ENV_PREFIX}AMOUNT"):
        config.amount = int(os.getenv(f"{ENV_PREFIX}AMOUNT", "0"), 0)
    if os.getenv(f"{ENV_PREFIX}LEAF_ENCODING"):
        raw = os.getenv(f"{ENV_PREFIX}LEAF_ENCODING", "")
        config.leaf_encoding = [t.strip() for t in raw.split(",") if t.strip()]
    if os.getenv(f"{ENV_PREFIX}UNIQUE"):
        config.unique = _env_bool(os.getenv(f"{ENV_PREFIX}UNIQUE", "false"))

    # Tree
    if os.getenv(f"{ENV_PREFIX}SORT_LEAVES"):
        config.sort_leaves = _env_bool(os.getenv(f"{ENV_PREFIX}SORT_LEAVES", "true"))

    # Output
    if os.getenv(f"{ENV_PREFIX}PROOFS_OUT"):
        config.proofs_out = os.getenv(f"{ENV_PREFIX}PROOFS_OUT", config.proofs_out)
    if os.getenv(f"{ENV_PREFIX}TREE_OUT"):
        config.tree_out = os.getenv(f"{ENV_PREFIX}TREE_OUT")
    if os.getenv(f"{ENV_PREFIX}WORKERS"):
        config.workers = int(os.getenv(f"{ENV_PREFIX}WORKERS", "1"))

    # Logging
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO")
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")

    return config


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON (or .yaml/.yml) file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            import yaml
            data = yaml.safe_load(f) or {}
        else:
            data = json.load(f)

    config = CLIConfig()

    config.input_path = data.get("input_path", config.input_path)
    config.amount = data.get("amount", config.amount)
    config.leaf_encoding = list(data.get("leaf_encoding", config.leaf_encoding))
    config.unique = data.get("unique", config.unique)
    config.sort_leaves = data.get("sort_leaves", config.sort_leaves)

    config.proofs_out = data.get("proofs_out", config.proofs_out)
    config.tree_out = data.get("tree_out", config.tree_out)
    config.workers = data.get("workers", config.workers)

    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)

    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings. A .env file in the
    working directory is read first.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    load_dotenv(find_dotenv(usecwd=True))

    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / DEFAULT_CONFIG_FILE,
            Path.cwd() / f".{DEFAULT_CONFIG_FILE}",
            Path.cwd() / "whitelist-merkle.yaml",
            Path.home() / ".config" / "whitelist-merkle" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    return load_config_from_env(config)


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(CLIConfig().to_dict(), indent=2) + "\n"
