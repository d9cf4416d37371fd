"""
Logging configuration for hits-search.

This module provides utilities for configuring logging throughout the application.
"""

import logging
import logging.config
import os
import sys
from typing import Any, Dict, Optional

import yaml


def configure_logging(
    config_path: Optional[str] = None,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure logging for the application.

    Console logging is always set up. A rotating file handler is only added
    when ``log_file`` is given or the YAML config declares one.

    Args:
        config_path: Path to logging configuration YAML file
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path of a log file to write to in addition to the console
    """
    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "detailed": {
                "format": (
                    "%(asctime)s - %(name)s - %(levelname)s - "
                    "%(filename)s:%(lineno)d - %(message)s"
                )
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": "INFO",
                "formatter": "standard",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "": {  # root logger
                "handlers": ["console"],
                "level": "INFO",
                "propagate": True,
            }
        },
    }

    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, "r") as file:
                file_config = yaml.safe_load(file)
                if file_config:
                    config = file_config
        except (OSError, yaml.YAMLError) as e:
            print(f"Error loading logging config from {config_path}: {e}")
            print("Using default logging configuration")

    if log_file:
        config.setdefault("handlers", {})["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "detailed",
            "filename": log_file,
            "maxBytes": 10485760,  # 10 MB
            "backupCount": 5,
            "encoding": "utf8",
        }
        root = config.setdefault("loggers", {}).setdefault("", {"handlers": []})
        if "file" not in root.setdefault("handlers", []):
            root["handlers"].append("file")

    # Create the directory of any configured file handler
    file_handler = config.get("handlers", {}).get("file")
    if file_handler and file_handler.get("filename"):
        log_directory = os.path.dirname(file_handler["filename"])
        if log_directory:
            os.makedirs(log_directory, exist_ok=True)

    if log_level:
        numeric_level = getattr(logging, log_level.upper(), None)
        if isinstance(numeric_level, int):
            if "" in config.get("loggers", {}):
                config["loggers"][""]["level"] = log_level.upper()
            if "console" in config.get("handlers", {}):
                config["handlers"]["console"]["level"] = log_level.upper()

    try:
        logging.config.dictConfig(config)
    except (ValueError, TypeError, AttributeError, ImportError) as e:
        print(f"Error configuring logging: {e}")
        print("Falling back to basic configuration")
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[logging.StreamHandler(sys.stdout)],
        )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def null_logger(name: str = "hits_search.null") -> logging.Logger:
    """
    Get a logger that discards every record.

    Args:
        name: Logger name

    Returns:
        Logger with a single ``NullHandler`` that does not propagate
    """
    logger = logging.getLogger(name)
    if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
        logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger
