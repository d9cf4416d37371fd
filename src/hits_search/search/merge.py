"""
Merging of the responses of a disjunctive faceting batch.

The responses must be given in the order `QueryBuilder.build` produced the
queries. Hits, counts and pagination come from the hits response; the
counts of every disjunctive facet come from that facet's own response, and
the hits response's counts for it are dropped.
"""

from typing import Dict, List, Sequence

from hits_search.search.query import QueryBuilder
from hits_search.search.response import FacetCounts, SearchResponse
from hits_search.search.state import SearchState
from hits_search.utils.errors import PreconditionViolation
from hits_search.utils.logging import get_logger

logger = get_logger(__name__)


class ResponseMerger:
    """Recombines the responses of a query batch into one response."""

    def __init__(self, state: SearchState, disjunctive_faceting_enabled: bool = True):
        """
        Initialize the merger.

        Args:
            state: Search state the batch was built from
            disjunctive_faceting_enabled: Must match the setting used to build the batch
        """
        self.state = state
        self.builder = QueryBuilder(state, disjunctive_faceting_enabled)

    def merge(self, responses: Sequence[SearchResponse]) -> SearchResponse:
        """
        Merge batch responses.

        Args:
            responses: Responses in batch order

        Returns:
            The single response unchanged when the batch had one query,
            otherwise a new merged response

        Raises:
            PreconditionViolation: If the responses do not line up with the batch
        """
        responses = list(responses)
        disjunctive_facets = self.builder.disjunctive_facets()

        expected = len(disjunctive_facets) + 1
        if len(responses) != expected:
            raise PreconditionViolation(
                f"Expected {expected} responses for disjunctive facets "
                f"{disjunctive_facets}, got {len(responses)}"
            )

        if not disjunctive_facets:
            return responses[0]

        self._check_alignment(responses, disjunctive_facets)

        hits_response = responses[0]
        corrected = {
            facet: response.facet_values(facet)
            for facet, response in zip(disjunctive_facets, responses[1:])
        }
        merged = hits_response.model_copy(
            update={
                "facets": self._merge_facets(hits_response.facets, corrected),
                "disjunctive_facets": tuple(disjunctive_facets),
                "processing_time_ms": sum(r.processing_time_ms for r in responses),
            }
        )
        logger.debug(
            "Merged %d responses, corrected facets: %s", len(responses), disjunctive_facets
        )
        return merged

    def _merge_facets(self, facets: FacetCounts, corrected: FacetCounts) -> FacetCounts:
        """Order facets as requested, then any others the hits response returned."""
        merged: Dict[str, Dict[str, int]] = {}
        for facet in self.state.facets or ():
            if facet in merged:
                continue
            if facet in corrected:
                merged[facet] = dict(corrected[facet])
            elif facet in facets:
                merged[facet] = dict(facets[facet])

        for facet, values in facets.items():
            if facet not in merged and facet not in corrected:
                merged[facet] = dict(values)
        return merged

    def _check_alignment(self, responses: List[SearchResponse], disjunctive_facets: List[str]) -> None:
        """
        Reject responses that cannot belong to their batch position.

        Count queries ask for zero hits and a single facet, so a response at
        position i >= 1 must carry no hits and no facet but its own, and the
        hits response must not look like a count response.
        """
        hits_response = responses[0]
        if hits_response.hits_per_page == 0 and self.state.hits_per_page != 0:
            raise PreconditionViolation(
                "Response 0 is a facet count response, expected the hits response"
            )

        for position, (facet, response) in enumerate(zip(disjunctive_facets, responses[1:]), start=1):
            unexpected = sorted(set(response.facets) - {facet})
            if unexpected:
                raise PreconditionViolation(
                    f"Response {position} should only count facet '{facet}', "
                    f"found {unexpected}"
                )
            if response.hits or response.hits_per_page not in (None, 0):
                raise PreconditionViolation(
                    f"Response {position} carries hits, expected the count response for '{facet}'"
                )
