"""
File Logger Utility

Configures logging for the chat service: console output plus an optional
rotating log file. Module loggers under the ``agents``, ``orchestrator`` and
``api`` packages propagate to the loggers configured here.
"""

import logging
import sys
from pathlib import Path
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional


def setup_file_logger(
    service_name: str,
    log_level: str = "INFO",
    output_dir: Optional[str] = None,
    console_output: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5
) -> logging.Logger:
    """
    Set up logging to write to console and, when output_dir is given, a file.

    Args:
        service_name: Logger name (e.g., "api", "orchestrator")
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        output_dir: Directory to write log files, or None for console only
        console_output: Whether to also output to console
        max_bytes: Maximum size of each log file before rotation
        backup_count: Number of backup files to keep

    Returns:
        Configured logger instance
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(service_name)
    logger.setLevel(level)

    # Remove any existing handlers
    logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_formatter = logging.Formatter(
        fmt='[%(name)s] %(levelname)s: %(message)s'
    )

    if output_dir:
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = output_path / f"{service_name}_{timestamp}.log"

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)  # Capture all levels in file
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)

        logger.info(f"File logging initialized: {log_file}")

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

    return logger


def configure_service_logging(
    log_level: str = "INFO",
    output_dir: Optional[str] = None
) -> logging.Logger:
    """
    Configure the package loggers used by the chat service.

    Returns:
        The "api" logger
    """
    for package in ("agents", "orchestrator"):
        setup_file_logger(package, log_level=log_level, output_dir=output_dir)
    return setup_file_logger("api", log_level=log_level, output_dir=output_dir)
