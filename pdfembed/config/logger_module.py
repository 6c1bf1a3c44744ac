"""
Logging utilities for PDFEmbed.

Provides centralized logging configuration and convenience methods
for consistent logging across the tag handler, wiki client and CLI.
"""

import logging
from pathlib import Path
from typing import Optional


# Set once initialize_logger has attached handlers
_logger_initialized = False

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def initialize_logger(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Initialize the root logger with a console handler and an optional file handler.

    Repeated calls are no-ops until the module flag is reset.
    
    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file, or None to log to the console only
    """
    global _logger_initialized
    
    if _logger_initialized:
        return
    
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    
    # Drop handlers installed by anything else (basicConfig, earlier runs)
    root_logger.handlers.clear()
    
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)
    
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)
    
    _logger_initialized = True
    
    root_logger.info(f"Logger initialized with level {log_level}, file: {log_file or 'none'}")


def log_debug(message: str) -> None:
    """Log a debug message."""
    logging.getLogger().debug(message)


def log_info(message: str) -> None:
    """
    Log an info message.
    
    Args:
        message: Message to log
    """
    logger = logging.getLogger()
    logger.info(message)


def log_warning(message: str) -> None:
    """
    Log a warning message.
    
    Args:
        message: Message to log
    """
    logger = logging.getLogger()
    logger.warning(message)


def log_error(message: str) -> None:
    """
    Log an error message.
    
    Args:
        message: Message to log
    """
    logger = logging.getLogger()
    logger.error(message)
