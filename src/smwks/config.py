from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

DEFAULT_FORMAT_VERSION = "2.0.0"


@dataclass
class AppConfig:
    """Top-level configuration for the application.

    - `root_dir`: Repository root (where `.env` is looked up).
    - `format_version`: Version triple stamped on newly created diagrams.
    - `log_level`: Name of the logging level used by the CLI and server.
    - `env`: Dictionary of environment-derived toggles.
    """

    root_dir: Path
    format_version: Tuple[int, int, int]
    log_level: str
    env: dict


def detect_repo_root() -> Path:
    """Detect repository root by walking upwards until `src` or `pyproject.toml` exists.

    Falls back to current working directory.
    """
    cwd = Path.cwd().resolve()
    for p in [cwd] + list(cwd.parents):
        if (p / "pyproject.toml").exists() or (p / "src").exists():
            return p
    return cwd


def parse_version(text: str) -> Tuple[int, int, int]:
    """Parse a dotted `major.minor.patch` string into a version triple."""
    parts = text.strip().split(".")
    if len(parts) != 3:
        raise ValueError(f"Version must look like major.minor.patch, got {text!r}")
    try:
        major, minor, patch = (int(p) for p in parts)
    except ValueError as e:
        raise ValueError(f"Version parts must be integers, got {text!r}") from e
    return major, minor, patch


def load_config() -> AppConfig:
    # Load .env file from repository root
    root = detect_repo_root()
    load_dotenv(root / ".env")

    env = {
        "SERVER_HOST": os.getenv("SMWKS_SERVER_HOST", "127.0.0.1"),
        "SERVER_PORT": int(os.getenv("SMWKS_SERVER_PORT", "5000")),
    }
    return AppConfig(
        root_dir=root,
        format_version=parse_version(os.getenv("SMWKS_FORMAT_VERSION", DEFAULT_FORMAT_VERSION)),
        log_level=os.getenv("SMWKS_LOG_LEVEL", "INFO").upper(),
        env=env,
    )
