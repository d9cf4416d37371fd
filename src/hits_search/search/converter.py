"""
Conversion of filter groups to the backend's textual filter syntax.

The output follows the SQL-like ``filters`` parameter of Algolia-compatible
backends, e.g. ``("color":"blue" OR "color":"red") AND ("size":"M")``.
"""

from typing import Iterable, Optional, Union

from hits_search.search.filter import (
    FacetFilter,
    FilterGroup,
    NumericComparison,
    NumericFilter,
    TagFilter,
)


TAGS_ATTRIBUTE = "_tags"


def _quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _number(number: float) -> str:
    if float(number).is_integer():
        return str(int(number))
    return repr(float(number))


def _scalar(value: Union[bool, int, float, str]) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return _number(value)
    return _quote(value)


class FilterGroupConverter:
    """
    Render filter groups to a filter expression.

    Members of a group and groups themselves are sorted by their rendered
    text, so the same set of groups always renders to the same string no
    matter how the set is iterated.
    """

    def sql(self, groups: Optional[Iterable[FilterGroup]]) -> Optional[str]:
        """
        Render a set of filter groups, combined with AND.

        Args:
            groups: Filter groups, may be None or empty

        Returns:
            Filter expression, or None when there is nothing to filter on
        """
        if not groups:
            return None

        rendered = sorted({
            expression
            for expression in (self.group(group) for group in groups)
            if expression is not None
        })
        if not rendered:
            return None

        return " AND ".join(rendered)

    render = sql

    def group(self, group: FilterGroup) -> Optional[str]:
        """
        Render one group in parentheses.

        Args:
            group: Filter group

        Returns:
            Parenthesised expression, or None for an empty group
        """
        members = sorted({
            expression
            for expression in (self.member(member) for member in group.filters)
            if expression is not None
        })
        if not members:
            return None

        separator = f" {group.operator.value.upper()} "
        return f"({separator.join(members)})"

    def member(self, member: Union[FacetFilter, NumericFilter, TagFilter, FilterGroup]) -> Optional[str]:
        """Render a single group member."""
        if isinstance(member, FilterGroup):
            return self.group(member)
        if isinstance(member, FacetFilter):
            return self.facet(member)
        if isinstance(member, NumericFilter):
            return self.numeric(member)
        if isinstance(member, TagFilter):
            return self.tag(member)
        raise TypeError(f"Unsupported filter type: {type(member).__name__}")

    def facet(self, facet: FacetFilter) -> str:
        expression = f"{_quote(facet.attribute)}:{_scalar(facet.value)}"
        if facet.score is not None:
            expression += f"<score={facet.score}>"
        return f"NOT {expression}" if facet.negated else expression

    def numeric(self, numeric: NumericFilter) -> str:
        value = numeric.value
        if isinstance(value, NumericComparison):
            expression = f"{_quote(numeric.attribute)} {value.operator.value} {_number(value.number)}"
        else:
            expression = f"{_quote(numeric.attribute)}:{_number(value.lower)} TO {_number(value.upper)}"
        return f"NOT {expression}" if numeric.negated else expression

    def tag(self, tag: TagFilter) -> str:
        expression = f"{TAGS_ATTRIBUTE}:{_quote(tag.value)}"
        return f"NOT {expression}" if tag.negated else expression
