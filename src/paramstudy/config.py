# Copyright (c) Syntropy Systems
"""Configuration management for paramstudy."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import cast

import yaml

CONFIG_DIR_NAME = ".paramstudy"
SEED_ENV = "PARAMSTUDY_SEED"
WORKERS_ENV = "PARAMSTUDY_WORKERS"


@dataclass
class EngineConfig:
    """Configuration for paramstudy."""

    # Seed for sampled ensembles whose specification sets none
    default_seed: int = 0

    # Worker threads used by Ensemble.process()
    workers: int = 1

    # Suffix of result files named after their specification
    result_suffix: str = ".py"


def find_config_dir(start_path: Path | None = None) -> Path | None:
    """Find the nearest .paramstudy directory by walking up from start_path.

    Returns None if no .paramstudy directory is found.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while current != current.parent:
        config_dir = current / CONFIG_DIR_NAME
        if config_dir.is_dir():
            return config_dir
        current = current.parent

    # Check root
    config_dir = current / CONFIG_DIR_NAME
    if config_dir.is_dir():
        return config_dir

    return None


def get_global_config_dir() -> Path:
    """Get the global paramstudy config directory (~/.paramstudy)."""
    return Path.home() / CONFIG_DIR_NAME


def _env_int(name: str) -> int | None:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        msg = f"{name} must be an integer, got {raw!r}"
        raise ValueError(msg) from None


def load_config(config_dir: Path | None = None) -> EngineConfig:
    """Load configuration from .paramstudy/config.yaml or defaults.

    Looks for config in:
    1. Provided config_dir
    2. Nearest .paramstudy directory walking up
    3. ~/.paramstudy/config.yaml
    4. Defaults

    PARAMSTUDY_SEED and PARAMSTUDY_WORKERS override the file.
    """
    config = EngineConfig()

    # Find config file
    config_path = None

    if config_dir is not None:
        config_path = config_dir / "config.yaml"
    else:
        found_dir = find_config_dir()
        if found_dir is not None:
            config_path = found_dir / "config.yaml"
        else:
            global_config = get_global_config_dir() / "config.yaml"
            if global_config.exists():
                config_path = global_config

    if config_path is not None and config_path.exists():
        with config_path.open() as f:
            data = cast("dict[str, object]", yaml.safe_load(f) or {})

        default_seed = data.get("default_seed")
        if isinstance(default_seed, int) and not isinstance(default_seed, bool):
            config.default_seed = default_seed
        workers = data.get("workers")
        if isinstance(workers, int) and not isinstance(workers, bool) and workers >= 1:
            config.workers = workers
        result_suffix = data.get("result_suffix")
        if isinstance(result_suffix, str) and result_suffix.startswith("."):
            config.result_suffix = result_suffix

    env_seed = _env_int(SEED_ENV)
    if env_seed is not None:
        config.default_seed = env_seed
    env_workers = _env_int(WORKERS_ENV)
    if env_workers is not None:
        if env_workers < 1:
            msg = f"{WORKERS_ENV} must be at least 1, got {env_workers}"
            raise ValueError(msg)
        config.workers = env_workers

    return config
