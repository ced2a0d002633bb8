"""Database property schema (PropertyMetadata) and page property values (PropertyData).

Both are unions discriminated by ``type``; each variant holds only the payload
its type allows.
"""

from typing import Any, Dict, Iterable, List, Literal, Optional, Union
from urllib.parse import unquote

from pydantic import ConfigDict, Field, field_validator

from .times import Timestamp, rfc3339
from .types import (
    DateValue,
    File,
    NotionModel,
    ObjectRef,
    Option,
    RichTextObject,
    User,
    plain_text,
    tagged_union,
)

PropertyType = Literal[
    "title",
    "text",
    "rich_text",
    "number",
    "select",
    "multi_select",
    "status",
    "date",
    "people",
    "files",
    "checkbox",
    "url",
    "email",
    "phone_number",
    "formula",
    "relation",
    "rollup",
    "created_time",
    "created_by",
    "last_edited_time",
    "last_edited_by",
    "unique_id",
]

# Computed by the server; rejected or ignored on create.
SERVER_COMPUTED_TYPES = frozenset(
    {"created_time", "created_by", "last_edited_time", "last_edited_by"}
)


class _PropertyBase(NotionModel):
    id: Optional[str] = None

    @field_validator("id")
    @classmethod
    def _unescape_id(cls, value: Optional[str]) -> Optional[str]:
        # Property ids arrive percent-encoded, e.g. "%3AUPp".
        return unquote(value) if value else value


# Schema


class NumberConfig(NotionModel):
    format: Optional[str] = None


class SelectConfig(NotionModel):
    options: List[Option] = Field(default_factory=list)


class StatusConfig(NotionModel):
    options: List[Option] = Field(default_factory=list)
    groups: List[Dict[str, Any]] = Field(default_factory=list)


class FormulaConfig(NotionModel):
    expression: Optional[str] = None


class RelationConfig(NotionModel):
    database_id: Optional[str] = None
    type: Optional[str] = None
    single_property: Optional[Dict[str, Any]] = None
    dual_property: Optional[Dict[str, Any]] = None


class RollupConfig(NotionModel):
    rollup_property_name: Optional[str] = None
    relation_property_name: Optional[str] = None
    rollup_property_id: Optional[str] = None
    relation_property_id: Optional[str] = None
    function: Optional[str] = None


class UniqueIDConfig(NotionModel):
    prefix: Optional[str] = None


class PropertyMetadataBase(_PropertyBase):
    """A column of a database schema."""

    name: Optional[str] = None

    def _always_set(self) -> Iterable[str]:
        return ("type", self.type)

    def __str__(self) -> str:
        return f"{self.type}: {getattr(self, self.type, None)}"


class TitlePropertyMetadata(PropertyMetadataBase):
    type: Literal["title"] = "title"
    title: Dict[str, Any] = Field(default_factory=dict)


class RichTextPropertyMetadata(PropertyMetadataBase):
    type: Literal["rich_text"] = "rich_text"
    rich_text: Dict[str, Any] = Field(default_factory=dict)


class NumberPropertyMetadata(PropertyMetadataBase):
    type: Literal["number"] = "number"
    number: NumberConfig = Field(default_factory=NumberConfig)


class SelectPropertyMetadata(PropertyMetadataBase):
    type: Literal["select"] = "select"
    select: SelectConfig = Field(default_factory=SelectConfig)


class MultiSelectPropertyMetadata(PropertyMetadataBase):
    type: Literal["multi_select"] = "multi_select"
    multi_select: SelectConfig = Field(default_factory=SelectConfig)


class StatusPropertyMetadata(PropertyMetadataBase):
    type: Literal["status"] = "status"
    status: StatusConfig = Field(default_factory=StatusConfig)


class DatePropertyMetadata(PropertyMetadataBase):
    type: Literal["date"] = "date"
    date: Dict[str, Any] = Field(default_factory=dict)


class PeoplePropertyMetadata(PropertyMetadataBase):
    type: Literal["people"] = "people"
    people: Dict[str, Any] = Field(default_factory=dict)


class FilesPropertyMetadata(PropertyMetadataBase):
    type: Literal["files"] = "files"
    files: Dict[str, Any] = Field(default_factory=dict)


class CheckboxPropertyMetadata(PropertyMetadataBase):
    type: Literal["checkbox"] = "checkbox"
    checkbox: Dict[str, Any] = Field(default_factory=dict)


class URLPropertyMetadata(PropertyMetadataBase):
    type: Literal["url"] = "url"
    url: Dict[str, Any] = Field(default_factory=dict)


class EmailPropertyMetadata(PropertyMetadataBase):
    type: Literal["email"] = "email"
    email: Dict[str, Any] = Field(default_factory=dict)


class PhoneNumberPropertyMetadata(PropertyMetadataBase):
    type: Literal["phone_number"] = "phone_number"
    phone_number: Dict[str, Any] = Field(default_factory=dict)


class FormulaPropertyMetadata(PropertyMetadataBase):
    type: Literal["formula"] = "formula"
    formula: FormulaConfig = Field(default_factory=FormulaConfig)


class RelationPropertyMetadata(PropertyMetadataBase):
    type: Literal["relation"] = "relation"
    relation: RelationConfig = Field(default_factory=RelationConfig)


class RollupPropertyMetadata(PropertyMetadataBase):
    type: Literal["rollup"] = "rollup"
    rollup: RollupConfig = Field(default_factory=RollupConfig)


class CreatedTimePropertyMetadata(PropertyMetadataBase):
    type: Literal["created_time"] = "created_time"
    created_time: Dict[str, Any] = Field(default_factory=dict)


class CreatedByPropertyMetadata(PropertyMetadataBase):
    type: Literal["created_by"] = "created_by"
    created_by: Dict[str, Any] = Field(default_factory=dict)


class LastEditedTimePropertyMetadata(PropertyMetadataBase):
    type: Literal["last_edited_time"] = "last_edited_time"
    last_edited_time: Dict[str, Any] = Field(default_factory=dict)


class LastEditedByPropertyMetadata(PropertyMetadataBase):
    type: Literal["last_edited_by"] = "last_edited_by"
    last_edited_by: Dict[str, Any] = Field(default_factory=dict)


class UniqueIDPropertyMetadata(PropertyMetadataBase):
    type: Literal["unique_id"] = "unique_id"
    unique_id: UniqueIDConfig = Field(default_factory=UniqueIDConfig)


class UnsupportedPropertyMetadata(PropertyMetadataBase):
    """A schema column of a type this library does not model."""

    model_config = ConfigDict(extra="allow")

    type: str


PropertyMetadata = tagged_union(
    TitlePropertyMetadata,
    RichTextPropertyMetadata,
    NumberPropertyMetadata,
    SelectPropertyMetadata,
    MultiSelectPropertyMetadata,
    StatusPropertyMetadata,
    DatePropertyMetadata,
    PeoplePropertyMetadata,
    FilesPropertyMetadata,
    CheckboxPropertyMetadata,
    URLPropertyMetadata,
    EmailPropertyMetadata,
    PhoneNumberPropertyMetadata,
    FormulaPropertyMetadata,
    RelationPropertyMetadata,
    RollupPropertyMetadata,
    CreatedTimePropertyMetadata,
    CreatedByPropertyMetadata,
    LastEditedTimePropertyMetadata,
    LastEditedByPropertyMetadata,
    UniqueIDPropertyMetadata,
    fallback=UnsupportedPropertyMetadata,
)


# Values


class Formula(NotionModel):
    """Computed value of a formula property."""

    type: Literal["string", "number", "boolean", "date"]
    string: Optional[str] = None
    number: Optional[Union[int, float]] = None
    boolean: Optional[bool] = None
    date: Optional[DateValue] = None

    def __str__(self) -> str:
        value = getattr(self, self.type)
        if value is None:
            return ""
        if self.type == "date":
            return _format_date_value(value)
        if self.type == "boolean":
            return "true" if value else "false"
        return str(value)


class Rollup(NotionModel):
    """Computed value of a rollup property."""

    type: str
    function: Optional[str] = None
    number: Optional[Union[int, float]] = None
    date: Optional[DateValue] = None
    array: Optional[List["PropertyData"]] = None

    def __str__(self) -> str:
        if self.type == "number":
            return "" if self.number is None else str(self.number)
        if self.type == "date":
            return _format_date_value(self.date)
        if self.type == "array":
            return ", ".join(str(v) for v in self.array or [])
        return ""


class UniqueID(NotionModel):
    prefix: Optional[str] = None
    number: int

    def __str__(self) -> str:
        return f"{self.prefix}-{self.number}" if self.prefix else str(self.number)


def _format_date_value(value: Optional[DateValue]) -> str:
    if value is None or value.start is None:
        return ""
    out = value.start.isoformat()
    if value.end is not None:
        out += f" -> {value.end.isoformat()}"
    return out


class PropertyDataBase(_PropertyBase):
    """A single property value of a page."""

    always_set = ("type",)

    def __str__(self) -> str:
        return ""


class TitlePropertyData(PropertyDataBase):
    type: Literal["title"] = "title"
    title: List[RichTextObject] = Field(default_factory=list)

    def __str__(self) -> str:
        return plain_text(self.title)


class TextPropertyData(PropertyDataBase):
    """Legacy ``text`` property; newer API versions use ``rich_text``."""

    type: Literal["text"] = "text"
    text: List[RichTextObject] = Field(default_factory=list)

    def __str__(self) -> str:
        return plain_text(self.text)


class RichTextPropertyData(PropertyDataBase):
    type: Literal["rich_text"] = "rich_text"
    rich_text: List[RichTextObject] = Field(default_factory=list)

    def __str__(self) -> str:
        return plain_text(self.rich_text)


class NumberPropertyData(PropertyDataBase):
    type: Literal["number"] = "number"
    number: Optional[Union[int, float]] = None

    def __str__(self) -> str:
        return "" if self.number is None else str(self.number)


class SelectPropertyData(PropertyDataBase):
    type: Literal["select"] = "select"
    select: Optional[Option] = None

    def __str__(self) -> str:
        return (self.select.name or "") if self.select else ""


class MultiSelectPropertyData(PropertyDataBase):
    type: Literal["multi_select"] = "multi_select"
    multi_select: List[Option] = Field(default_factory=list)

    def __str__(self) -> str:
        return ", ".join(o.name or "" for o in self.multi_select)


class StatusPropertyData(PropertyDataBase):
    type: Literal["status"] = "status"
    status: Optional[Option] = None

    def __str__(self) -> str:
        return (self.status.name or "") if self.status else ""


class DatePropertyData(PropertyDataBase):
    type: Literal["date"] = "date"
    date: Optional[DateValue] = None

    def __str__(self) -> str:
        return _format_date_value(self.date)


class PeoplePropertyData(PropertyDataBase):
    type: Literal["people"] = "people"
    people: List[User] = Field(default_factory=list)

    def __str__(self) -> str:
        return ", ".join(str(p) for p in self.people)


class FilesPropertyData(PropertyDataBase):
    type: Literal["files"] = "files"
    files: List[File] = Field(default_factory=list)

    def __str__(self) -> str:
        return ", ".join(f.name or "" for f in self.files)


class CheckboxPropertyData(PropertyDataBase):
    type: Literal["checkbox"] = "checkbox"
    checkbox: bool = False

    def __str__(self) -> str:
        return "checked" if self.checkbox else "not checked"


class URLPropertyData(PropertyDataBase):
    type: Literal["url"] = "url"
    url: Optional[str] = None

    def __str__(self) -> str:
        return self.url or ""


class EmailPropertyData(PropertyDataBase):
    type: Literal["email"] = "email"
    email: Optional[str] = None

    def __str__(self) -> str:
        return self.email or ""


class PhoneNumberPropertyData(PropertyDataBase):
    type: Literal["phone_number"] = "phone_number"
    phone_number: Optional[str] = None

    def __str__(self) -> str:
        return self.phone_number or ""


class FormulaPropertyData(PropertyDataBase):
    type: Literal["formula"] = "formula"
    formula: Optional[Formula] = None

    def __str__(self) -> str:
        return str(self.formula) if self.formula else ""


class RelationPropertyData(PropertyDataBase):
    type: Literal["relation"] = "relation"
    relation: List[ObjectRef] = Field(default_factory=list)
    has_more: Optional[bool] = None

    def __str__(self) -> str:
        return ", ".join(r.id or "" for r in self.relation)


class RollupPropertyData(PropertyDataBase):
    type: Literal["rollup"] = "rollup"
    rollup: Optional[Rollup] = None

    def __str__(self) -> str:
        return str(self.rollup) if self.rollup else ""


class CreatedTimePropertyData(PropertyDataBase):
    type: Literal["created_time"] = "created_time"
    created_time: Optional[Timestamp] = None

    def __str__(self) -> str:
        return rfc3339(self.created_time) if self.created_time else ""


class CreatedByPropertyData(PropertyDataBase):
    type: Literal["created_by"] = "created_by"
    created_by: Optional[User] = None

    def __str__(self) -> str:
        return str(self.created_by) if self.created_by else ""


class LastEditedTimePropertyData(PropertyDataBase):
    type: Literal["last_edited_time"] = "last_edited_time"
    last_edited_time: Optional[Timestamp] = None

    def __str__(self) -> str:
        return rfc3339(self.last_edited_time) if self.last_edited_time else ""


class LastEditedByPropertyData(PropertyDataBase):
    type: Literal["last_edited_by"] = "last_edited_by"
    last_edited_by: Optional[User] = None

    def __str__(self) -> str:
        return str(self.last_edited_by) if self.last_edited_by else ""


class UniqueIDPropertyData(PropertyDataBase):
    type: Literal["unique_id"] = "unique_id"
    unique_id: Optional[UniqueID] = None

    def __str__(self) -> str:
        return str(self.unique_id) if self.unique_id else ""


class UnsupportedPropertyData(PropertyDataBase):
    """A property value of a type this library does not model."""

    model_config = ConfigDict(extra="allow")

    type: str


PropertyData = tagged_union(
    TitlePropertyData,
    TextPropertyData,
    RichTextPropertyData,
    NumberPropertyData,
    SelectPropertyData,
    MultiSelectPropertyData,
    StatusPropertyData,
    DatePropertyData,
    PeoplePropertyData,
    FilesPropertyData,
    CheckboxPropertyData,
    URLPropertyData,
    EmailPropertyData,
    PhoneNumberPropertyData,
    FormulaPropertyData,
    RelationPropertyData,
    RollupPropertyData,
    CreatedTimePropertyData,
    CreatedByPropertyData,
    LastEditedTimePropertyData,
    LastEditedByPropertyData,
    UniqueIDPropertyData,
    fallback=UnsupportedPropertyData,
)

Rollup.model_rebuild()
RollupPropertyData.model_rebuild()
