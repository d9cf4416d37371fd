"""
hits-search: faceted search against Algolia-compatible backends with
correct counts for disjunctive (OR-selected) facets.
"""

__version__ = "0.1.0"
