"""Type definitions shared across the Notion object model."""

from typing import (
    Annotated,
    Any,
    ClassVar,
    Dict,
    Generic,
    Iterable,
    List,
    Literal,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    PrivateAttr,
    Tag,
    model_validator,
)

from .times import Date

ObjectType = Literal["user", "page", "database", "block", "list", "error"]

# Tag used for variants the model does not know about.
UNSUPPORTED = "unsupported"


class NotionModel(BaseModel):
    """Base for every object exchanged with the API.

    Fields the caller never set are left off the wire, so "absent" and
    "explicitly null" stay distinct.
    """

    model_config = ConfigDict(populate_by_name=True)

    # Fields emitted even when left at their defaults.
    always_set: ClassVar[Tuple[str, ...]] = ()

    def model_post_init(self, __context: Any) -> None:
        fields = type(self).model_fields
        for name in self._always_set():
            if name in fields:
                self.__pydantic_fields_set__.add(name)

    def _always_set(self) -> Iterable[str]:
        return self.always_set

    def to_wire(self) -> Dict[str, Any]:
        """Encode to a JSON-ready dict."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    @classmethod
    def from_wire(cls, data: Dict[str, Any]):
        """Decode from a JSON-ready dict."""
        return cls.model_validate(data)


def _tag_of(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        return value.get("type")
    return getattr(value, "type", None)


def tagged_union(*variants: type, fallback: Optional[type] = None) -> Any:
    """Build a union discriminated by each variant's ``type`` default.

    With ``fallback`` set, unknown tags decode to that variant instead of
    failing.
    """
    tags = {cls.model_fields["type"].default: cls for cls in variants}

    def discriminate(value: Any) -> Optional[str]:
        tag = _tag_of(value)
        if tag in tags:
            return tag
        return UNSUPPORTED if fallback is not None else tag

    members = [Annotated[cls, Tag(tag)] for tag, cls in tags.items()]
    if fallback is not None:
        members.append(Annotated[fallback, Tag(UNSUPPORTED)])
    return Annotated[Union[tuple(members)], Discriminator(discriminate)]


class ObjectRef(NotionModel):
    """The ``{object, id}`` header every top-level object carries."""

    object: Optional[str] = None
    id: Optional[str] = None


T = TypeVar("T")


class ObjectList(NotionModel, Generic[T]):
    """One page of a paginated list response."""

    object: str = "list"
    results: List[T] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[str] = None

    @model_validator(mode="after")
    def _check_cursor(self) -> "ObjectList":
        if self.has_more and not self.next_cursor:
            raise ValueError("has_more is set but next_cursor is empty")
        return self


# Users


class Person(NotionModel):
    email: Optional[str] = None


class Owner(NotionModel):
    type: Optional[str] = None
    workspace: Optional[bool] = None
    user: Optional[Dict[str, Any]] = None


class Bot(NotionModel):
    owner: Optional[Owner] = None
    workspace_name: Optional[str] = None


class PartialUser(NotionModel):
    """A user reference without a kind, e.g. ``created_by`` on a database."""

    object: str = "user"
    id: Optional[str] = None

    def __str__(self) -> str:
        return self.id or ""


class _UserBase(NotionModel):
    always_set = ("type",)

    object: str = "user"
    id: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None

    def __str__(self) -> str:
        return self.name or ""


class PersonUser(_UserBase):
    type: Literal["person"] = "person"
    person: Optional[Person] = None

    def __str__(self) -> str:
        out = self.name or ""
        if self.person is not None and self.person.email:
            out += f" <{self.person.email}>"
        return out


class BotUser(_UserBase):
    type: Literal["bot"] = "bot"
    bot: Optional[Bot] = None


User = tagged_union(PersonUser, BotUser, fallback=PartialUser)


# Rich text


class Annotations(NotionModel):
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"


class Link(NotionModel):
    type: Optional[str] = None
    url: str


class Text(NotionModel):
    content: str
    link: Optional[Link] = None


class DateValue(NotionModel):
    """A date or date range as used by date properties and date mentions."""

    start: Optional[Date] = None
    end: Optional[Date] = None
    time_zone: Optional[str] = None


class Mention(NotionModel):
    type: str
    user: Optional[User] = None
    page: Optional[ObjectRef] = None
    database: Optional[ObjectRef] = None
    date: Optional[DateValue] = None
    link_preview: Optional[Dict[str, Any]] = None


class Equation(NotionModel):
    expression: str


class _RichTextBase(NotionModel):
    always_set = ("type",)

    plain_text: Optional[str] = None
    href: Optional[str] = None
    annotations: Optional[Annotations] = None

    @property
    def content(self) -> str:
        """Plain text if the API rendered it, else the raw source."""
        return self.plain_text or ""


class TextRichText(_RichTextBase):
    type: Literal["text"] = "text"
    text: Text

    @property
    def content(self) -> str:
        return self.plain_text or self.text.content


class MentionRichText(_RichTextBase):
    type: Literal["mention"] = "mention"
    mention: Mention


class EquationRichText(_RichTextBase):
    type: Literal["equation"] = "equation"
    equation: Equation

    @property
    def content(self) -> str:
        return self.plain_text or self.equation.expression


RichTextObject = tagged_union(TextRichText, MentionRichText, EquationRichText)


def rich_text(content: str, link: Optional[str] = None) -> TextRichText:
    """Build a single unformatted text run."""
    text = Text(content=content)
    if link:
        text.link = Link(url=link)
    return TextRichText(text=text)


def plain_text(runs: Optional[List[Any]]) -> str:
    """Concatenate the plain text of a list of rich-text runs."""
    return "".join(run.content for run in runs or [])


# Misc values


class Option(NotionModel):
    """A select / multi_select / status option."""

    id: Optional[str] = None
    name: Optional[str] = None
    color: Optional[str] = None


class File(NotionModel):
    name: Optional[str] = None
    type: Optional[str] = None
    file: Optional[Dict[str, Any]] = None
    external: Optional[Dict[str, Any]] = None


class ErrorObject(NotionModel):
    """Error body returned by the API for non-200 responses."""

    object: str = "object"
    status: int
    code: str
    message: str


class PageParent(NotionModel):
    """Where a page (or database) lives.

    ``database`` is a lookup-only reference to the parent Database when the
    caller already holds it; it is never sent to the API.
    """

    type: Optional[str] = None
    database_id: Optional[str] = None
    page_id: Optional[str] = None
    block_id: Optional[str] = None
    workspace: Optional[bool] = None

    _database: Any = PrivateAttr(default=None)

    @property
    def database(self) -> Any:
        return self._database

    def resolve(self, database: Any) -> None:
        """Attach the in-memory parent database."""
        self._database = database
