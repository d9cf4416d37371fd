"""
Tests for the search state.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from hits_search.search.filter import FilterBuilder
from hits_search.search.state import SearchState


def test_only_index_name_is_required():
    state = SearchState(index_name="products")
    assert state.to_params() == {}

    with pytest.raises(PydanticValidationError):
        SearchState()


def test_present_options_become_params():
    """Each option that is set maps to exactly one backend parameter."""
    state = SearchState(
        index_name="products",
        query="shirt",
        page=2,
        hits_per_page=10,
        facets=["color", "size"],
        attributes_to_highlight=["name"],
        max_values_per_facet=50,
        analytics=False,
        rule_contexts=["mobile"],
        sum_or_filters_score=True,
        user_token="user-1",
    )

    assert state.to_params() == {
        "query": "shirt",
        "page": 2,
        "hitsPerPage": 10,
        "facets": ["color", "size"],
        "attributesToHighlight": ["name"],
        "maxValuesPerFacet": 50,
        "analytics": False,
        "ruleContexts": ["mobile"],
        "sumOrFiltersScore": True,
        "userToken": "user-1",
    }


def test_filter_groups_render_into_filters(faceted_state):
    params = faceted_state.to_params()
    assert params["filters"] == '("color":"blue" OR "color":"red") AND ("size":"M")'
    assert "filterGroups" not in params


def test_empty_filter_groups_send_no_filters():
    state = SearchState(index_name="products", filter_groups=frozenset())
    assert "filters" not in state.to_params()


def test_state_is_immutable(faceted_state):
    with pytest.raises(PydanticValidationError):
        faceted_state.query = "dress"
    assert isinstance(faceted_state.facets, tuple)


def test_copy_with_leaves_original_untouched(faceted_state):
    copy = faceted_state.copy_with(query="dress", facets=("color",))

    assert copy.query == "dress"
    assert copy.facets == ("color",)
    assert faceted_state.query == "shirt"
    assert faceted_state.facets == ("color", "size")


def test_camel_case_input_is_accepted():
    """States posted as JSON may use backend parameter names."""
    state = SearchState.model_validate(
        {
            "indexName": "products",
            "hitsPerPage": 5,
            "facets": ["color"],
            "filterGroups": [
                {
                    "operator": "or",
                    "filters": [
                        {"attribute": "color", "value": "red"},
                        {"attribute": "color", "value": "blue"},
                    ],
                }
            ],
        }
    )

    assert state.index_name == "products"
    assert state.hits_per_page == 5
    assert state.filter_groups == frozenset({FilterBuilder.disjunctive_facet("color", ["red", "blue"])})
