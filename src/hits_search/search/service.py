"""
Search service.

This module runs a search state against the backend: it builds the query
batch, sends it in one round trip, and merges the results.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from hits_search.backend.client import BackendAPIError, SearchClient
from hits_search.search.merge import ResponseMerger
from hits_search.search.query import PhysicalQuery, QueryBuilder
from hits_search.search.response import SearchResponse
from hits_search.search.state import SearchState
from hits_search.utils.errors import SearchError
from hits_search.utils.logging import get_logger


def queries_of(queries: Sequence[PhysicalQuery]) -> List[Dict[str, Any]]:
    """
    Map physical queries to batch request entries, keeping their order.

    Args:
        queries: Physical queries

    Returns:
        Request entries with ``indexName`` and ``params``
    """
    return [
        {"indexName": query.index_name, "params": query.to_params()}
        for query in queries
    ]


class HitsSearchService:
    """
    Service handling search requests.

    Each call to `search` issues exactly one network request, whatever the
    number of disjunctive facets. The service holds no per-search state, so
    independent searches may run concurrently.
    """

    def __init__(
        self,
        client: SearchClient,
        disjunctive_faceting_enabled: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the search service.

        Args:
            client: Backend client
            disjunctive_faceting_enabled: Correct counts of OR-selected facets
            logger: Logger to report to, defaults to this module's logger
        """
        self.client = client
        self.disjunctive_faceting_enabled = disjunctive_faceting_enabled
        self._log = logger or get_logger(__name__)

    async def search(self, state: SearchState) -> SearchResponse:
        """
        Run a search.

        Args:
            state: Search state

        Returns:
            Search response, merged when several queries were needed

        Raises:
            SearchError: If the backend reports an error
            TransportError: If the backend cannot be reached
            PreconditionViolation: If the backend results do not match the batch
        """
        queries = QueryBuilder(state, self.disjunctive_faceting_enabled).build()
        if len(queries) == 1:
            return await self._single_query_search(queries[0])
        return await self._disjunctive_search(state, queries)

    async def _single_query_search(self, query: PhysicalQuery) -> SearchResponse:
        self._log.debug("Run search with state: %s", query.state)
        try:
            result = await self.client.search(query.index_name, query.to_params())
        except BackendAPIError as e:
            self._log.error("Search exception: %s", e)
            raise self._launder(e) from e

        self._log.debug("Search response: %s", result)
        return SearchResponse.from_raw(result)

    async def _disjunctive_search(
        self, state: SearchState, queries: List[PhysicalQuery]
    ) -> SearchResponse:
        self._log.debug(
            "Start disjunctive search for facets %s: %s",
            [query.facet for query in queries[1:]],
            state,
        )
        try:
            results = await self.client.multiple_queries(queries_of(queries))
        except BackendAPIError as e:
            self._log.error("Search exception: %s", e)
            raise self._launder(e) from e

        self._log.debug("Search responses: %s", results)
        responses = [SearchResponse.from_raw(result) for result in results]
        return ResponseMerger(state, self.disjunctive_faceting_enabled).merge(responses)

    @staticmethod
    def _launder(error: BackendAPIError) -> SearchError:
        """Coerce a backend error to a `SearchError`."""
        return SearchError(error.message, error.status_code)
