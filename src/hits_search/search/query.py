"""
Query batch builder for disjunctive faceting.

Selecting several values of one facet with OR (``color:red OR color:blue``)
hides the facet's other values from the counts of a single query, because
the query is filtered by the facet's own selection. The builder therefore
turns one search state into a batch:

* entry 0, the hits query: the full state, every filter applied;
* entry i, one per disjunctive facet: the same state with that facet's own
  OR filters removed and the facet list narrowed to that facet, so the
  backend reports counts for all of its sibling values.

Disjunctive facets are taken in the order they appear in ``state.facets``.
That order is also the order of the batch and of the responses.
"""

from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict

from hits_search.search.filter import FilterGroup
from hits_search.search.state import SearchState
from hits_search.utils.logging import get_logger

logger = get_logger(__name__)


class PhysicalQuery(BaseModel):
    """One concrete request of a batch."""

    model_config = ConfigDict(frozen=True)

    state: SearchState
    facet: Optional[str] = None

    @property
    def is_hits_query(self) -> bool:
        return self.facet is None

    @property
    def index_name(self) -> str:
        return self.state.index_name

    def to_params(self) -> Dict[str, Any]:
        return self.state.to_params()


class QueryBuilder:
    """
    Builds the physical queries for a search state.

    The builder is pure: it never mutates the state and never performs I/O.
    Unknown facet names are passed through untouched.
    """

    def __init__(self, state: SearchState, disjunctive_faceting_enabled: bool = True):
        """
        Initialize the query builder.

        Args:
            state: Search state to build queries for
            disjunctive_faceting_enabled: When False, always build a single query
        """
        self.state = state
        self.disjunctive_faceting_enabled = disjunctive_faceting_enabled

    def disjunctive_facets(self) -> List[str]:
        """
        Get the requested facets whose selection is combined with OR.

        A facet is disjunctive when it is listed in ``state.facets`` and an
        OR group of ``state.filter_groups`` holds a facet filter on it.

        Returns:
            Facet names in ``state.facets`` order, without duplicates
        """
        if not self.disjunctive_faceting_enabled:
            return []

        facets = self.state.facets or ()
        groups = self.state.filter_groups or frozenset()
        if not facets or not groups:
            return []

        or_attributes = set()
        for group in groups:
            if group.is_disjunctive:
                or_attributes.update(group.facet_attributes())

        disjunctive = []
        for facet in facets:
            if facet in or_attributes and facet not in disjunctive:
                disjunctive.append(facet)
        return disjunctive

    def build(self) -> List[PhysicalQuery]:
        """
        Build the ordered batch of physical queries.

        Returns:
            A single query equal to the state when no facet is disjunctive,
            otherwise the hits query followed by one query per disjunctive facet
        """
        disjunctive_facets = self.disjunctive_facets()
        queries = [PhysicalQuery(state=self.state)]
        queries.extend(self._facet_query(facet) for facet in disjunctive_facets)

        logger.debug(
            "Built %d queries for index %s (disjunctive facets: %s)",
            len(queries),
            self.state.index_name,
            disjunctive_facets,
        )
        return queries

    def _facet_query(self, facet: str) -> PhysicalQuery:
        """
        Build the count query for one disjunctive facet.

        Only the facet's own filters are lifted; every other group stays
        applied, including the OR groups of other disjunctive facets. The
        query asks for no hits and is kept out of analytics.
        """
        state = self.state.copy_with(
            facets=(facet,),
            filter_groups=self._groups_without(facet),
            page=0,
            hits_per_page=0,
            attributes_to_retrieve=(),
            attributes_to_highlight=(),
            attributes_to_snippet=(),
            analytics=False,
            click_analytics=False,
        )
        return PhysicalQuery(state=state, facet=facet)

    def _groups_without(self, facet: str) -> FrozenSet[FilterGroup]:
        groups = set()
        for group in self.state.filter_groups or frozenset():
            if group.is_disjunctive and facet in group.facet_attributes():
                group = group.without_attribute(facet)
                if group.is_empty:
                    continue
            groups.add(group)
        return frozenset(groups)
