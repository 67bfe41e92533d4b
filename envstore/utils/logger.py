"""
Logging Utilities
=================

Centralized logging configuration, driven by the ``logging`` section of the
configuration tree.
"""

import logging
import logging.handlers
import os
import sys
from typing import Optional, Dict, Any, TextIO

def setup_logging(
    config: Optional[Dict[str, Any]] = None,
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    max_file_size: str = "10MB",
    backup_count: int = 5,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Set up centralized logging configuration.

    Args:
        config: Configuration tree; its default logging channel takes precedence
        log_level: Logging level
        log_file: Log file path
        max_file_size: Maximum log file size
        backup_count: Number of backup files to keep
        stream: Console stream, stdout if omitted

    Returns:
        Configured logger
    """
    # Parse configuration
    if config:
        channel = _default_channel(config)
        log_level = channel.get('level', log_level)
        log_file = channel.get('path', log_file)
        max_file_size = channel.get('max_file_size', max_file_size)
        backup_count = channel.get('backup_count', backup_count)

    # Convert log level string to logging constant
    numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)

    # Create logs directory if it doesn't exist
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Console handler
    console_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler (if specified)
    if log_file:
        size_bytes = _parse_size(str(max_file_size))

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=size_bytes,
            backupCount=int(backup_count),
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    app_logger = logging.getLogger('envstore')
    app_logger.info(f"Logging initialized - Level: {log_level}, File: {log_file}")

    return app_logger

def _default_channel(config: Dict[str, Any]) -> Dict[str, Any]:
    """Pick ``logging.channels[logging.default]`` out of a config tree."""
    logging_config = config.get('logging', {})
    if not isinstance(logging_config, dict):
        return {}

    channels = logging_config.get('channels', {})
    channel = channels.get(logging_config.get('default')) if isinstance(channels, dict) else None
    return channel if isinstance(channel, dict) else {}

def _parse_size(size_str: str) -> int:
    """
    Parse size string to bytes.

    Args:
        size_str: Size string (e.g., '10MB', '1GB')

    Returns:
        Size in bytes
    """
    size_str = size_str.upper().strip()

    if size_str.endswith('KB'):
        return int(float(size_str[:-2]) * 1024)
    elif size_str.endswith('MB'):
        return int(float(size_str[:-2]) * 1024 * 1024)
    elif size_str.endswith('GB'):
        return int(float(size_str[:-2]) * 1024 * 1024 * 1024)
    else:
        # Assume bytes
        return int(size_str)

def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name."""
    return logging.getLogger(name)

class LoggingContext:
    """
    Context manager for temporary logging configuration.
    """

    def __init__(self, logger: logging.Logger, level: int):
        self.logger = logger
        self.new_level = level
        self.old_level = logger.level

    def __enter__(self):
        self.logger.setLevel(self.new_level)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.setLevel(self.old_level)

def with_debug_logging(logger: logging.Logger):
    """Temporarily log at DEBUG."""
    return LoggingContext(logger, logging.DEBUG)

def with_quiet_logging(logger: logging.Logger):
    """Temporarily log at WARNING and above only."""
    return LoggingContext(logger, logging.WARNING)
