"""
Search state: the declarative description of one logical search request.
"""

from typing import Any, Dict, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from hits_search.search.converter import FilterGroupConverter
from hits_search.search.filter import FilterGroup


class SearchState(BaseModel):
    """
    Immutable search request.

    Only ``index_name`` is required. Every other option is optional and is
    sent to the backend only when set. Field names are snake_case in Python
    and camelCase on the wire; both spellings are accepted on input.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    index_name: str
    query: Optional[str] = None
    page: Optional[int] = None
    hits_per_page: Optional[int] = None
    facets: Optional[Tuple[str, ...]] = None
    filter_groups: Optional[FrozenSet[FilterGroup]] = None
    facet_filters: Optional[Tuple[str, ...]] = None
    numeric_filters: Optional[Tuple[str, ...]] = None
    optional_filters: Optional[Tuple[str, ...]] = None
    tag_filters: Optional[Tuple[str, ...]] = None
    attributes_to_retrieve: Optional[Tuple[str, ...]] = None
    attributes_to_highlight: Optional[Tuple[str, ...]] = None
    attributes_to_snippet: Optional[Tuple[str, ...]] = None
    highlight_pre_tag: Optional[str] = None
    highlight_post_tag: Optional[str] = None
    max_facet_hits: Optional[int] = None
    max_values_per_facet: Optional[int] = None
    analytics: Optional[bool] = None
    click_analytics: Optional[bool] = None
    rule_contexts: Optional[Tuple[str, ...]] = None
    sum_or_filters_score: Optional[bool] = None
    user_token: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        """
        Build the backend request parameters for this state.

        Filter groups are rendered into ``filters``; an empty or absent set
        leaves ``filters`` out entirely.

        Returns:
            Parameter dictionary keyed by backend parameter name
        """
        params = self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude={"index_name", "filter_groups"},
        )
        filters = FilterGroupConverter().sql(self.filter_groups)
        if filters is not None:
            params["filters"] = filters
        return params

    def copy_with(self, **changes: Any) -> "SearchState":
        """
        Copy this state with some fields replaced.

        Args:
            **changes: Field values keyed by snake_case field name

        Returns:
            New search state
        """
        return self.model_copy(update=changes)
