"""Config loader: YAML with environment variable interpolation, or a legacy env.json."""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from bragi_probe.config.models import ProbeConfig

CONFIG_FILENAME = ".bragi-probe.yaml"

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def _interpolate_env(value: str) -> str:
    """Replace ${VAR} and ${VAR:-default} patterns with environment values."""

    def _replace(match: re.Match[str]) -> str:
        expr = match.group(1)
        if ":-" in expr:
            var_name, default = expr.split(":-", 1)
            return os.environ.get(var_name.strip(), default)
        return os.environ.get(expr.strip(), match.group(0))

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _interpolate_recursive(data: Any) -> Any:
    """Walk a nested data structure and interpolate env vars in strings."""
    if isinstance(data, str):
        return _interpolate_env(data)
    if isinstance(data, dict):
        return {k: _interpolate_recursive(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_interpolate_recursive(item) for item in data]
    return data


def find_config_file(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default cwd) looking for .bragi-probe.yaml."""
    current = (start or Path.cwd()).resolve()
    for ancestor in [current, *current.parents]:
        candidate = ancestor / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def _read_raw(config_path: Path) -> dict[str, Any]:
    with config_path.open("r", encoding="utf-8") as fh:
        if config_path.suffix == ".json":
            # Legacy registry: a bare list of {"env": ..., "url": ...}
            try:
                envs = json.load(fh)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Could not decode {config_path}: {exc}") from exc
            if not isinstance(envs, list):
                raise ValueError(f"Invalid configuration in {config_path}: expected a list of environments")
            return {"environments": envs}
        return yaml.safe_load(fh) or {}


def load_config(path: Path | None = None) -> ProbeConfig:
    """Load and validate the environment registry, applying env-var interpolation."""
    config_path = path or find_config_file()
    if not config_path or not config_path.exists():
        raise FileNotFoundError(
            f"Could not find {CONFIG_FILENAME}. Create one from .bragi-probe.yaml.example or specify a path."
        )
    data = _interpolate_recursive(_read_raw(config_path))
    try:
        return ProbeConfig(**data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration in {config_path}: {exc}") from exc
