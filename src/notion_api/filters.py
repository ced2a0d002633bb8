"""Request-only types for database queries and search.

ref: https://developers.notion.com/reference/post-database-query-filter
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import Field

from .times import Timestamp
from .types import NotionModel

Number = Union[int, float]
Direction = Literal["ascending", "descending"]
TimestampType = Literal["created_time", "last_edited_time"]


class RichTextFilter(NotionModel):
    contains: Optional[str] = None
    does_not_contain: Optional[str] = None
    does_not_equal: Optional[str] = None
    ends_with: Optional[str] = None
    equals: Optional[str] = None
    is_empty: Optional[bool] = None
    is_not_empty: Optional[bool] = None
    starts_with: Optional[str] = None


class NumberFilter(NotionModel):
    does_not_equal: Optional[Number] = None
    equals: Optional[Number] = None
    greater_than: Optional[Number] = None
    greater_than_or_equal_to: Optional[Number] = None
    is_empty: Optional[bool] = None
    is_not_empty: Optional[bool] = None
    less_than: Optional[Number] = None
    less_than_or_equal_to: Optional[Number] = None


class CheckboxFilter(NotionModel):
    equals: Optional[bool] = None
    does_not_equal: Optional[bool] = None


class SelectFilter(NotionModel):
    equals: Optional[str] = None
    does_not_equal: Optional[str] = None
    is_empty: Optional[bool] = None
    is_not_empty: Optional[bool] = None


class MultiSelectFilter(NotionModel):
    contains: Optional[str] = None
    does_not_contain: Optional[str] = None
    is_empty: Optional[bool] = None
    is_not_empty: Optional[bool] = None


class StatusFilter(SelectFilter):
    pass


class DateFilter(NotionModel):
    after: Optional[Timestamp] = None
    before: Optional[Timestamp] = None
    equals: Optional[Timestamp] = None
    on_or_after: Optional[Timestamp] = None
    on_or_before: Optional[Timestamp] = None
    is_empty: Optional[bool] = None
    is_not_empty: Optional[bool] = None
    # Relative ranges take an empty object.
    next_month: Optional[Dict[str, Any]] = None
    next_week: Optional[Dict[str, Any]] = None
    next_year: Optional[Dict[str, Any]] = None
    past_month: Optional[Dict[str, Any]] = None
    past_week: Optional[Dict[str, Any]] = None
    past_year: Optional[Dict[str, Any]] = None
    this_week: Optional[Dict[str, Any]] = None


class PeopleFilter(MultiSelectFilter):
    pass


class RelationFilter(MultiSelectFilter):
    pass


class FilesFilter(NotionModel):
    is_empty: Optional[bool] = None
    is_not_empty: Optional[bool] = None


class PhoneNumberFilter(RichTextFilter):
    pass


class FormulaFilter(NotionModel):
    checkbox: Optional[CheckboxFilter] = None
    date: Optional[DateFilter] = None
    number: Optional[NumberFilter] = None
    string: Optional[RichTextFilter] = None


class Filter(NotionModel):
    """A database query filter.

    Either a compound (``or_`` / ``and_``) of nested filters, a property
    filter (``property`` plus one comparator), or a timestamp filter
    (``timestamp`` plus ``created_time`` / ``last_edited_time``).
    """

    or_: Optional[List["Filter"]] = Field(default=None, alias="or")
    and_: Optional[List["Filter"]] = Field(default=None, alias="and")

    property: Optional[str] = None
    rich_text: Optional[RichTextFilter] = None
    number: Optional[NumberFilter] = None
    checkbox: Optional[CheckboxFilter] = None
    select: Optional[SelectFilter] = None
    multi_select: Optional[MultiSelectFilter] = None
    status: Optional[StatusFilter] = None
    date: Optional[DateFilter] = None
    people: Optional[PeopleFilter] = None
    files: Optional[FilesFilter] = None
    relation: Optional[RelationFilter] = None
    formula: Optional[FormulaFilter] = None
    phone_number: Optional[PhoneNumberFilter] = None

    timestamp: Optional[TimestampType] = None
    created_time: Optional[DateFilter] = None
    last_edited_time: Optional[DateFilter] = None


Filter.model_rebuild()


class Sort(NotionModel):
    """Sort by a property or by a timestamp; set exactly one of the two."""

    property: Optional[str] = None
    timestamp: Optional[TimestampType] = None
    direction: Direction = "ascending"

    always_set = ("direction",)


class SearchFilter(NotionModel):
    value: Literal["page", "database"]
    property: Literal["object"] = "object"

    always_set = ("property",)


class SearchSort(NotionModel):
    direction: Direction = "descending"
    timestamp: Literal["last_edited_time"] = "last_edited_time"

    always_set = ("direction", "timestamp")
