"""
Tests for the command line entry point.
"""

from unittest.mock import patch

import pytest

from hits_search.main import main, parse_arguments


def test_parse_arguments_defaults():
    args = parse_arguments([])
    assert args.config is None
    assert args.log_level is None
    assert args.env_file is None


def test_parse_arguments():
    args = parse_arguments(["-c", "config/config.yaml", "--log-level", "DEBUG", "-e", ".env.test"])
    assert args.config == "config/config.yaml"
    assert args.log_level == "DEBUG"
    assert args.env_file == ".env.test"


def test_main_missing_config_exits():
    """Test that an unreadable configuration stops the process."""
    with patch("hits_search.main.load_env_file"):
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", "does/not/exist.yaml"])
    assert exc_info.value.code == 1


def test_main_starts_server_from_env(test_env_vars):
    """Test that the server is built from environment configuration and run."""
    with patch("hits_search.main.load_env_file"), patch(
        "hits_search.main.create_server"
    ) as create_server:
        main([])

    (config,) = create_server.call_args.args
    assert config.backend.application_id == "ENVAPP"
    assert config.search.disjunctive_faceting is False
    create_server.return_value.run.assert_called_once()
