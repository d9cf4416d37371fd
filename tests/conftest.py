"""
Test configuration and fixtures for hits-search.

This module provides pytest fixtures and configuration for testing.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

import pytest

# Add the src directory to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from hits_search.config.config import (
    BackendConfig,
    Config,
    LoggingConfig,
    SearchConfig,
    ServerConfig,
)
from hits_search.search.filter import FilterBuilder
from hits_search.search.state import SearchState


def raw_result(
    hits: Optional[List[Dict[str, Any]]] = None,
    nb_hits: int = 0,
    hits_per_page: int = 20,
    facets: Optional[Dict[str, Dict[str, int]]] = None,
    processing_time_ms: int = 1,
    page: int = 0,
) -> Dict[str, Any]:
    """Build a raw backend result the way the backend returns it."""
    hits = hits or []
    return {
        "hits": hits,
        "nbHits": nb_hits,
        "page": page,
        "nbPages": (nb_hits + hits_per_page - 1) // hits_per_page if hits_per_page else 0,
        "hitsPerPage": hits_per_page,
        "processingTimeMS": processing_time_ms,
        "facets": facets or {},
        "exhaustiveFacetsCount": True,
        "query": "shirt",
        "params": "query=shirt",
        "index": "products",
    }


@pytest.fixture
def test_config() -> Config:
    """Provide a test configuration."""
    return Config(
        backend=BackendConfig(
            application_id="TESTAPP",
            api_key="test_api_key",
            api_url="http://127.0.0.1:9999",
            timeout=5,
        ),
        search=SearchConfig(disjunctive_faceting=True),
        server=ServerConfig(
            host="127.0.0.1",
            port=8000,
            workers=1,
            reload=False,
            cors_origins=["*"],
            request_timeout=10,
        ),
        logging=LoggingConfig(
            level="DEBUG",
            config_file=None,
            log_file=None,
        ),
        debug=True,
        environment="test",
    )


@pytest.fixture
def test_env_vars(monkeypatch: pytest.MonkeyPatch) -> Generator[Dict[str, str], None, None]:
    """Set up test environment variables."""
    env_vars = {
        "HITS_SEARCH_BACKEND_APPLICATION_ID": "ENVAPP",
        "HITS_SEARCH_BACKEND_API_KEY": "test_env_api_key",
        "HITS_SEARCH_BACKEND_TIMEOUT": "2.5",
        "HITS_SEARCH_SEARCH_DISJUNCTIVE_FACETING": "false",
        "HITS_SEARCH_SERVER_PORT": "9000",
        "HITS_SEARCH_LOGGING_LEVEL": "DEBUG",
        "HITS_SEARCH_DEBUG": "true",
        "HITS_SEARCH_ENVIRONMENT": "test",
    }

    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)

    yield env_vars


@pytest.fixture
def color_group():
    """OR selection of two colors."""
    return FilterBuilder.disjunctive_facet("color", ["red", "blue"])


@pytest.fixture
def size_group():
    """AND selection of one size."""
    return FilterBuilder.and_group(FilterBuilder.facet("size", "M"), name="size")


@pytest.fixture
def faceted_state(color_group, size_group) -> SearchState:
    """State with a disjunctive color facet and a conjunctive size facet."""
    return SearchState(
        index_name="products",
        query="shirt",
        hits_per_page=20,
        facets=("color", "size"),
        filter_groups=frozenset({color_group, size_group}),
    )
