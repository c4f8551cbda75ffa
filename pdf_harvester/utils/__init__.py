"""
Utility modules for the PDF harvester.

Contains logging, path and URL handling utilities, and constants.
"""

from .log import setup_logger, get_logger, configure_logging
from .paths import (
    dedupe_urls,
    ensure_dir,
    get_file_extension,
    is_valid_url,
    resolve_link,
    sanitize_filename,
)
from .constants import (
    DEFAULT_SEED_URLS,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_DOCUMENT_MARKER,
    DEFAULT_SETTLE_SECONDS,
    DEFAULT_SESSION_TIMEOUT,
    DEFAULT_DOWNLOAD_TIMEOUT,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "configure_logging",
    "dedupe_urls",
    "ensure_dir",
    "get_file_extension",
    "is_valid_url",
    "resolve_link",
    "sanitize_filename",
    "DEFAULT_SEED_URLS",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_DOCUMENT_MARKER",
    "DEFAULT_SETTLE_SECONDS",
    "DEFAULT_SESSION_TIMEOUT",
    "DEFAULT_DOWNLOAD_TIMEOUT",
]
