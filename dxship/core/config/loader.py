"""
Configuration loader — builds the ShipConfig for a run.

Precedence, lowest first:
    built-in defaults  <  dxship.yml  <  DXSHIP_* env vars  <  CLI flags

dxship.yml is optional; when present it is found by walking up from the
working directory, like git finds .git.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from dxship.core.errors import ShipError
from dxship.core.models.config import ShipConfig, validate_base_path

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "dxship.yml"

ENV_PREFIX = "DXSHIP_"
_ENV_KEYS = (
    "project_name",
    "base_path",
    "app_title",
    "dioxus_version",
    "wasm_bindgen_version",
    "archive_name",
    "archiver",
    "strict_base_path",
)


class ConfigError(ShipError):
    """Raised when configuration is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for dxship.yml starting from the given directory, walking up.

    Returns:
        Path to dxship.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse dxship.yml into a plain mapping.

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Allow the settings to sit under a top-level "dxship" key
    if isinstance(data.get("dxship"), dict):
        data = data["dxship"]
    return data


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Collect DXSHIP_<FIELD> variables (e.g. DXSHIP_BASE_PATH=/app)."""
    environ = os.environ if environ is None else environ
    found: dict[str, Any] = {}
    for key in _ENV_KEYS:
        value = environ.get(ENV_PREFIX + key.upper())
        if value is not None and value != "":
            found[key] = value
    return found


def load_config(
    path: Path | None = None,
    *,
    start_dir: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ShipConfig:
    """Build and validate the run configuration.

    Args:
        path: Explicit dxship.yml. If None, searches upward from start_dir.
        start_dir: Where the upward search begins (default: cwd).
        overrides: Values from CLI flags; None entries are ignored.
        environ: Environment mapping (default: os.environ).

    Raises:
        ConfigError: If any layer is invalid.
    """
    data: dict[str, Any] = {}

    if path is None:
        path = find_config_file(start_dir)
    if path is not None:
        data.update(read_config_file(path))

    data.update(env_overrides(environ))
    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        config = ShipConfig.model_validate(data)
    except ValidationError as e:
        source = f" ({path})" if path else ""
        raise ConfigError(f"Invalid configuration{source}: {e}") from e

    logger.info(
        "Config: project=%s base_path=%s archiver=%s",
        config.project_name, config.base_path, config.archiver,
    )
    return config


def check_base_path(config: ShipConfig) -> list[str]:
    """Return base-path problems for the caller to report, or raise when strict.

    Raises:
        ConfigError: ``strict_base_path`` is set and the base path has problems.
    """
    problems = validate_base_path(config.base_path)
    if problems and config.strict_base_path:
        raise ConfigError("Invalid base_path: " + "; ".join(problems))
    for problem in problems:
        logger.debug("base_path: %s", problem)
    return problems
