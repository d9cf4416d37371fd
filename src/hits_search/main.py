#!/usr/bin/env python3
"""
hits-search - Main Entry Point

This module serves as the entry point for the hits-search server,
initializing and starting the server with the configured settings.
"""

import argparse
import sys
from pathlib import Path

from hits_search.config.config import load_config, load_config_from_env
from hits_search.server.server import create_server
from hits_search.utils.environment import load_env_file
from hits_search.utils.logging import configure_logging, get_logger


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="hits-search server")
    parser.add_argument(
        "--config", "-c",
        help="Path to configuration file; environment variables are used when omitted",
        default=None,
    )
    parser.add_argument(
        "--log-level", "-l",
        help="Logging level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
    )
    parser.add_argument(
        "--env-file", "-e",
        help="Path to .env file",
        default=None,
    )
    return parser.parse_args(argv)


def main(argv=None):
    """Application entry point."""
    args = parse_arguments(argv)

    load_env_file(args.env_file)

    try:
        if args.config:
            config_path = Path(args.config)
            config = load_config(config_path)
        else:
            config = load_config_from_env()
    except (FileNotFoundError, ValueError) as e:
        configure_logging(log_level=args.log_level or "INFO")
        get_logger(__name__).error(f"Error loading configuration: {e}")
        sys.exit(1)

    configure_logging(
        config_path=config.logging.config_file,
        log_level=args.log_level or config.logging.level,
        log_file=config.logging.log_file,
    )
    logger = get_logger(__name__)
    logger.info("Starting hits-search server")

    server = create_server(config)
    logger.info(f"Server created, listening on {config.server.host}:{config.server.port}")
    server.run()

    logger.info("hits-search server stopped")


if __name__ == "__main__":
    main()
