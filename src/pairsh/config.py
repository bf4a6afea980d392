"""Configuration loading and persistence for pairsh."""

import json
import logging
import os
import time
from pathlib import Path

from pydantic import ValidationError

from pairsh.models import PairshConfig

log = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".pairsh"
CONFIG_FILE = CONFIG_DIR / "config.json"

ENV_OVERRIDES = {
    "PAIRSH_PROGRAM": "program",
    "PAIRSH_VENV": "venv_path",
}


def _read_config_file(path: Path) -> dict:
    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, json.JSONDecodeError) as e:
        log.warning("ignoring unreadable config %s: %s", path, e)
        return {}
    if not isinstance(payload, dict):
        log.warning("ignoring config %s: expected a JSON object", path)
        return {}
    return payload


def _apply_env_overrides(data: dict) -> dict:
    merged = dict(data)
    for env_key, field in ENV_OVERRIDES.items():
        value = os.environ.get(env_key, "").strip()
        if value:
            log.debug("%s overrides %s=%r", env_key, field, value)
            merged[field] = value
    return merged


def load_config(path: Path | None = None, apply_env: bool = True) -> PairshConfig:
    """Load config from disk, apply environment overrides, fall back to defaults."""
    config_path = path if path is not None else CONFIG_FILE
    data = _read_config_file(config_path)
    if apply_env:
        data = _apply_env_overrides(data)
    try:
        return PairshConfig.model_validate(data)
    except ValidationError as e:
        log.warning("invalid config %s, using defaults: %s", config_path, e)
        return PairshConfig.model_validate(_apply_env_overrides({}) if apply_env else {})


def save_config(config: PairshConfig, path: Path | None = None) -> Path:
    """Atomically write config as JSON with owner-only permissions."""
    config_path = path if path is not None else CONFIG_FILE
    os.makedirs(config_path.parent, mode=0o700, exist_ok=True)
    temp_file = config_path.with_name(
        f".{config_path.name}.{os.getpid()}.{time.time_ns()}.tmp"
    )
    fd = os.open(temp_file, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(config.model_dump_json(indent=2))
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_file, config_path)
    except OSError:
        try:
            os.unlink(temp_file)
        except OSError:
            pass
        raise
    log.debug("saved config to %s", config_path)
    return config_path
