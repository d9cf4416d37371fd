"""
Search functionality with disjunctive faceting.

This package provides the filter model, the search state, the query batch
builder, the response merger and the search service built on them.
"""

from hits_search.search.converter import FilterGroupConverter
from hits_search.search.filter import (
    FacetFilter,
    FilterBuilder,
    FilterGroup,
    GroupOperator,
    NumericComparison,
    NumericFilter,
    NumericOperator,
    NumericRange,
    TagFilter,
)
from hits_search.search.merge import ResponseMerger
from hits_search.search.query import PhysicalQuery, QueryBuilder
from hits_search.search.response import SearchResponse
from hits_search.search.service import HitsSearchService
from hits_search.search.state import SearchState

__all__ = [
    "FacetFilter",
    "NumericFilter",
    "NumericComparison",
    "NumericRange",
    "NumericOperator",
    "TagFilter",
    "FilterGroup",
    "GroupOperator",
    "FilterBuilder",
    "FilterGroupConverter",
    "SearchState",
    "PhysicalQuery",
    "QueryBuilder",
    "SearchResponse",
    "ResponseMerger",
    "HitsSearchService",
]
