"""
Search backend client.
"""

from hits_search.backend.client import BackendAPIError, SearchClient, SearchClientConfig

__all__ = ["BackendAPIError", "SearchClient", "SearchClientConfig"]
