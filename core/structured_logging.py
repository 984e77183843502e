"""Structured logging helpers with scan and source-file context."""

from __future__ import annotations

import contextvars
import logging
import uuid
from contextlib import contextmanager
from typing import Iterator

_SCAN_ID_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "scan_id", default="-"
)
_SOURCE_FILE_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "source_file", default="-"
)


class _ScanContextFilter(logging.Filter):
    """Inject scan correlation fields into all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.scan_id = _SCAN_ID_VAR.get("-")
        record.source_file = _SOURCE_FILE_VAR.get("-")
        return True


def _ensure_filter_on_root_handlers() -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        has_filter = any(isinstance(f, _ScanContextFilter) for f in handler.filters)
        if not has_filter:
            handler.addFilter(_ScanContextFilter())


def configure_structured_logging(level: int = logging.INFO) -> None:
    """Configure root logging format with scan/file context."""
    fmt = (
        "%(asctime)s | %(levelname)s | scan_id=%(scan_id)s | file=%(source_file)s | "
        "%(name)s | %(message)s"
    )
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=fmt)
    else:
        root_logger.setLevel(level)
        formatter = logging.Formatter(fmt)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)
    _ensure_filter_on_root_handlers()


def set_scan_id(scan_id: str | None = None) -> str:
    """Set or generate the correlation ID of the current directory scan."""
    value = scan_id or uuid.uuid4().hex[:12]
    _SCAN_ID_VAR.set(value)
    return value


def get_scan_id() -> str:
    """Get current scan correlation ID."""
    return _SCAN_ID_VAR.get("-")


def get_source_file() -> str:
    """Get the file currently being harvested."""
    return _SOURCE_FILE_VAR.get("-")


@contextmanager
def file_scope(file_path: str) -> Iterator[None]:
    """Tag logs emitted while harvesting ``file_path``."""
    token = _SOURCE_FILE_VAR.set(file_path)
    try:
        yield
    finally:
        _SOURCE_FILE_VAR.reset(token)
