"""Core shared utilities: logging context, startup config, run artifacts."""

from core.structured_logging import (
    configure_structured_logging,
    file_scope,
    get_scan_id,
    get_source_file,
    set_scan_id,
)
from core.startup_config import (
    ConfigValidationError,
    HarvestSettings,
    load_harvest_config,
    resolve_harvest_settings,
    resolve_strict_config_validation,
)
from core.run_artifacts import write_harvest, write_run_report

__all__ = [
    "configure_structured_logging",
    "file_scope",
    "get_scan_id",
    "get_source_file",
    "set_scan_id",
    "ConfigValidationError",
    "HarvestSettings",
    "load_harvest_config",
    "resolve_harvest_settings",
    "resolve_strict_config_validation",
    "write_harvest",
    "write_run_report",
]
