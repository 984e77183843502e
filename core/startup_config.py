"""Startup configuration validation helpers.

Provides strict/non-strict parsing of the YAML harvest configuration used by
the ``run_harvest.py`` entry point, with environment overrides.

Example ``harvest.yml``::

    harvest:
      source_dir: ./internal/api
      filename_regex: '^[a-z].*\\.go$'
      output_file: output/harvest.json
      max_workers: 4
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Optional

import yaml

from extraction.config import DEFAULT_FILENAME_REGEX, DEFAULT_MAX_WORKERS

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILE = "output/harvest.json"
DEFAULT_REPORT_DIR = "output/run_reports"


class ConfigValidationError(RuntimeError):
    """Raised when strict startup validation fails."""


@dataclass(frozen=True)
class HarvestSettings:
    """Resolved settings for one harvest run."""

    source_dir: Optional[str]
    filename_regex: str = DEFAULT_FILENAME_REGEX
    output_file: str = DEFAULT_OUTPUT_FILE
    max_workers: int = DEFAULT_MAX_WORKERS
    report_dir: str = DEFAULT_REPORT_DIR


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``STRICT_CONFIG_VALIDATION`` env."""
    return _env_flag("STRICT_CONFIG_VALIDATION", default=default)


def _fail(msg: str, strict: bool, fallback: str) -> None:
    if strict:
        raise ConfigValidationError(msg)
    logger.warning("%s; %s", msg, fallback)


def load_harvest_config(config_path: str, strict: bool = False) -> dict[str, Any]:
    """Load and parse the ``harvest`` section of a YAML config file.

    In non-strict mode this returns an empty dict on parse/read failures.
    In strict mode this raises ``ConfigValidationError``.
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        msg = f"Harvest config file not found: {config_path}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}
    except yaml.YAMLError as exc:
        msg = f"Failed to parse harvest config YAML at {config_path}: {exc}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}

    if payload is None:
        _fail(f"Harvest config file is empty: {config_path}", strict, "continuing with defaults")
        return {}

    if not isinstance(payload, dict):
        _fail(
            f"Unexpected harvest config payload type: {type(payload).__name__}",
            strict,
            "continuing with defaults",
        )
        return {}

    section = payload.get("harvest", {})
    if not isinstance(section, dict):
        _fail("Harvest config 'harvest' section must be a mapping", strict, "continuing with defaults")
        return {}
    return section


def _resolve_filename_regex(raw: Any, strict: bool) -> str:
    if raw is None:
        return DEFAULT_FILENAME_REGEX
    text = str(raw)
    try:
        re.compile(text)
    except re.error as exc:
        _fail(f"Invalid filename_regex {text!r}: {exc}", strict, f"using {DEFAULT_FILENAME_REGEX!r}")
        return DEFAULT_FILENAME_REGEX
    return text


def _resolve_max_workers(raw: Any, strict: bool) -> int:
    if raw is None:
        return DEFAULT_MAX_WORKERS
    try:
        value = int(raw)
    except (TypeError, ValueError):
        value = 0
    if value < 1:
        _fail(f"max_workers must be a positive integer, got {raw!r}", strict, f"using {DEFAULT_MAX_WORKERS}")
        return DEFAULT_MAX_WORKERS
    return value


def resolve_harvest_settings(
    config: Optional[dict[str, Any]] = None,
    strict: bool = False,
) -> HarvestSettings:
    """Resolve harvest settings from a config section and the environment.

    ``GOHARVEST_SOURCE_DIR``, ``GOHARVEST_FILENAME_REGEX`` and
    ``GOHARVEST_MAX_WORKERS`` take precedence over the config file.
    """
    config = dict(config or {})

    source_dir = os.getenv("GOHARVEST_SOURCE_DIR", config.get("source_dir"))
    filename_regex = _resolve_filename_regex(
        os.getenv("GOHARVEST_FILENAME_REGEX", config.get("filename_regex")), strict
    )
    max_workers = _resolve_max_workers(
        os.getenv("GOHARVEST_MAX_WORKERS", config.get("max_workers")), strict
    )

    settings = HarvestSettings(
        source_dir=str(source_dir) if source_dir is not None else None,
        filename_regex=filename_regex,
        output_file=str(config.get("output_file") or DEFAULT_OUTPUT_FILE),
        max_workers=max_workers,
        report_dir=str(config.get("report_dir") or DEFAULT_REPORT_DIR),
    )
    logger.debug("Resolved harvest settings: %s", settings)
    return settings
