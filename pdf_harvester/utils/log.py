"""
Logging utilities for the PDF harvester.

Provides colorful CLI logging using the rich library.
"""

import logging
from typing import Iterable, Optional

from rich.console import Console
from rich.logging import RichHandler


# Global console instance
console = Console()

# Component loggers configured by the CLI
COMPONENT_LOGGERS = ("pdf_harvester", "pipeline", "renderer", "extractor", "downloader")

# Logger instances cache
_loggers: dict = {}


def setup_logger(
    name: str = "pdf_harvester",
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up and configure a logger with rich formatting.

    Args:
        name: Logger name
        level: Logging level (default: INFO)
        log_file: Optional file path to write logs

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Clear existing handlers
    logger.handlers.clear()

    console_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    # File handler if specified
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    _loggers[name] = logger
    return logger


def get_logger(name: str = "pdf_harvester") -> logging.Logger:
    """
    Get or create a logger instance.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    if name not in _loggers:
        return setup_logger(name)
    return _loggers[name]


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    names: Iterable[str] = COMPONENT_LOGGERS
) -> None:
    """Apply one level and log file to every component logger."""
    for name in names:
        setup_logger(name, level=level, log_file=log_file)


def print_status(message: str, style: str = "bold blue") -> None:
    """
    Print a styled status message.

    Args:
        message: Message to print
        style: Rich style string
    """
    console.print(message, style=style, markup=False, highlight=False)


def print_error(message: str) -> None:
    """Print an error message."""
    print_status(f"❌ {message}", "bold red")


def print_success(message: str) -> None:
    """Print a success message."""
    print_status(f"✅ {message}", "bold green")


def print_info(message: str) -> None:
    """Print an info message."""
    print_status(f"ℹ️ {message}", "bold cyan")
