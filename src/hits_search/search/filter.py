"""
Filter predicates and filter groups for search queries.

Filters are immutable and compared by value, so a set of filter groups
collapses duplicates structurally: two groups with the same operator and
filters are one group, whatever their names. Groups are combined with AND;
the filters inside a group combine according to the group's own operator.
"""

from enum import Enum
from typing import Annotated, Any, FrozenSet, Iterable, Literal, Optional, Set, Tuple, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, model_validator


class GroupOperator(str, Enum):
    """How the filters of a group are combined."""

    AND = "and"
    OR = "or"


class NumericOperator(str, Enum):
    """Comparison operators for numeric filters."""

    LESS = "<"
    LESS_OR_EQUALS = "<="
    EQUALS = "="
    NOT_EQUALS = "!="
    GREATER_OR_EQUALS = ">="
    GREATER = ">"


class FilterNode(BaseModel):
    """Base class for all filter nodes."""

    model_config = ConfigDict(frozen=True)


class FacetFilter(FilterNode):
    """Match records whose facet ``attribute`` has ``value``."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    type: Literal["facet"] = "facet"
    attribute: str
    value: Union[bool, int, float, str]
    negated: bool = False
    score: Optional[int] = None

    def _content_key(self) -> Tuple[Any, ...]:
        # True == 1 and hash(True) == hash(1), so the value type is part of the key
        return self.attribute, type(self.value), self.value, self.negated, self.score

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, FacetFilter):
            return NotImplemented
        return self._content_key() == other._content_key()

    def __hash__(self) -> int:
        return hash(self._content_key())


class NumericComparison(FilterNode):
    """Numeric value compared with an operator, e.g. ``> 10``."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    operator: NumericOperator
    number: float


class NumericRange(FilterNode):
    """Inclusive numeric range, e.g. ``10 TO 20``."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    lower: float
    upper: float

    @model_validator(mode="after")
    def validate_bounds(self) -> "NumericRange":
        """Validate that the range is not inverted."""
        if self.lower > self.upper:
            raise ValueError(f"Range lower bound {self.lower} exceeds upper bound {self.upper}")
        return self


class NumericFilter(FilterNode):
    """Match records on a numeric attribute; the value form picks the operator."""

    type: Literal["numeric"] = "numeric"
    attribute: str
    value: Union[NumericComparison, NumericRange]
    negated: bool = False


class TagFilter(FilterNode):
    """Match records carrying the tag ``value``."""

    type: Literal["tag"] = "tag"
    value: str
    negated: bool = False


def _member_kind(value: Any) -> Optional[str]:
    """Pick the filter kind of a raw or validated group member."""
    if isinstance(value, dict):
        if "type" in value:
            return value["type"]
        if "filters" in value:
            return "group"
        if "attribute" not in value:
            return "tag"
        return "numeric" if isinstance(value.get("value"), dict) else "facet"
    return getattr(value, "type", None)


class FilterGroup(FilterNode):
    """A set of filters combined with a single operator."""

    type: Literal["group"] = "group"
    filters: FrozenSet["GroupMember"] = Field(default_factory=frozenset)
    operator: GroupOperator = GroupOperator.AND
    name: Optional[str] = None

    def _content_key(self) -> Tuple[GroupOperator, FrozenSet[Any]]:
        return self.operator, self.filters

    def __eq__(self, other: Any) -> bool:
        # Groups are equal by operator and filters; the name is only a label
        if not isinstance(other, FilterGroup):
            return NotImplemented
        return self._content_key() == other._content_key()

    def __hash__(self) -> int:
        return hash(self._content_key())

    @property
    def is_disjunctive(self) -> bool:
        return self.operator == GroupOperator.OR

    @property
    def is_empty(self) -> bool:
        return not self.filters

    def facet_attributes(self) -> Set[str]:
        """
        Get the attributes of the group's own facet filters.

        Nested groups are not searched.

        Returns:
            Set of facet attribute names
        """
        return {f.attribute for f in self.filters if isinstance(f, FacetFilter)}

    def without_attribute(self, attribute: str) -> "FilterGroup":
        """
        Copy this group without its facet filters on ``attribute``.

        Args:
            attribute: Facet attribute whose filters are dropped

        Returns:
            New filter group
        """
        kept = frozenset(
            f for f in self.filters
            if not (isinstance(f, FacetFilter) and f.attribute == attribute)
        )
        return self.model_copy(update={"filters": kept})


GroupMember = Annotated[
    Union[
        Annotated[FacetFilter, Tag("facet")],
        Annotated[NumericFilter, Tag("numeric")],
        Annotated[TagFilter, Tag("tag")],
        Annotated[FilterGroup, Tag("group")],
    ],
    Discriminator(_member_kind),
]

FilterGroup.model_rebuild()

Filter = Union[FacetFilter, NumericFilter, TagFilter]
FilterGroups = FrozenSet[FilterGroup]


class FilterBuilder:
    """Builder for filters and filter groups."""

    @staticmethod
    def facet(
        attribute: str,
        value: Union[bool, int, float, str],
        negated: bool = False,
        score: Optional[int] = None,
    ) -> FacetFilter:
        """Create a facet filter."""
        return FacetFilter(attribute=attribute, value=value, negated=negated, score=score)

    @staticmethod
    def numeric(
        attribute: str,
        operator: Union[NumericOperator, str],
        number: float,
        negated: bool = False,
    ) -> NumericFilter:
        """Create a numeric comparison filter."""
        return NumericFilter(
            attribute=attribute,
            value=NumericComparison(operator=NumericOperator(operator), number=number),
            negated=negated,
        )

    @staticmethod
    def range(attribute: str, lower: float, upper: float, negated: bool = False) -> NumericFilter:
        """Create a numeric range filter."""
        return NumericFilter(
            attribute=attribute,
            value=NumericRange(lower=lower, upper=upper),
            negated=negated,
        )

    @staticmethod
    def tag(value: str, negated: bool = False) -> TagFilter:
        """Create a tag filter."""
        return TagFilter(value=value, negated=negated)

    @staticmethod
    def and_group(*filters: Union[Filter, FilterGroup], name: Optional[str] = None) -> FilterGroup:
        """
        Combine filters with AND.

        Args:
            *filters: Filters or nested groups
            name: Optional group name

        Returns:
            Filter group
        """
        return FilterGroup(filters=frozenset(filters), operator=GroupOperator.AND, name=name)

    @staticmethod
    def or_group(*filters: Union[Filter, FilterGroup], name: Optional[str] = None) -> FilterGroup:
        """
        Combine filters with OR.

        Args:
            *filters: Filters or nested groups
            name: Optional group name

        Returns:
            Filter group
        """
        return FilterGroup(filters=frozenset(filters), operator=GroupOperator.OR, name=name)

    @staticmethod
    def disjunctive_facet(
        attribute: str,
        values: Iterable[Union[bool, int, float, str]],
        name: Optional[str] = None,
    ) -> FilterGroup:
        """
        Select several values of one facet with OR semantics.

        Args:
            attribute: Facet attribute
            values: Selected facet values
            name: Optional group name, defaults to the attribute

        Returns:
            Filter group with one facet filter per value
        """
        return FilterBuilder.or_group(
            *(FacetFilter(attribute=attribute, value=value) for value in values),
            name=name or attribute,
        )
