"""
Normalized search responses.

This module reads the raw JSON payload returned by the backend for a single
query into a `SearchResponse`.
"""

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

FacetCounts = Dict[str, Dict[str, int]]


class SearchResponse(BaseModel):
    """
    Result of one search.

    Instances are frozen; merging builds a new response instead of
    updating one in place.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    hits: Tuple[Dict[str, Any], ...] = ()
    nb_hits: int = 0
    page: int = 0
    nb_pages: int = 0
    hits_per_page: Optional[int] = None
    processing_time_ms: int = Field(0, alias="processingTimeMS")
    facets: FacetCounts = Field(default_factory=dict)
    facets_stats: Dict[str, Dict[str, Any]] = Field(default_factory=dict, alias="facets_stats")
    exhaustive_facets_count: Optional[bool] = None
    query: Optional[str] = None
    params: Optional[str] = None
    index: Optional[str] = None
    disjunctive_facets: Tuple[str, ...] = ()

    @classmethod
    def from_raw(cls, payload: Dict[str, Any]) -> "SearchResponse":
        """
        Read a raw backend result.

        Args:
            payload: Decoded JSON result of one query

        Returns:
            Search response; keys the model does not know are ignored
        """
        return cls.model_validate(payload)

    def facet_values(self, facet: str) -> Dict[str, int]:
        """Get the value counts of one facet, empty when it is absent."""
        return dict(self.facets.get(facet, {}))
