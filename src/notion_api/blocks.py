"""Block objects.

ref: https://developers.notion.com/reference/block
"""

from typing import Any, Dict, Iterable, List, Literal, Optional

from pydantic import ConfigDict, Field

from .times import Timestamp
from .types import (
    NotionModel,
    PartialUser,
    RichTextObject,
    plain_text,
    rich_text,
    tagged_union,
)

BlockType = Literal[
    "paragraph",
    "heading_1",
    "heading_2",
    "heading_3",
    "callout",
    "quote",
    "bulleted_list_item",
    "numbered_list_item",
    "to_do",
    "toggle",
    "code",
    "child_page",
    "child_database",
    "embed",
    "bookmark",
    "equation",
    "divider",
    "table_of_contents",
    "breadcrumb",
    "column_list",
    "column",
    "link_to_page",
]


# Payloads


class Paragraph(NotionModel):
    """Payload of paragraph-like blocks (paragraph, list items, toggle, quote)."""

    rich_text: List[RichTextObject] = Field(default_factory=list)
    color: Optional[str] = None
    children: Optional[List["Block"]] = None


class Heading(NotionModel):
    rich_text: List[RichTextObject] = Field(default_factory=list)
    color: Optional[str] = None
    is_toggleable: Optional[bool] = None


class ToDo(NotionModel):
    rich_text: List[RichTextObject] = Field(default_factory=list)
    checked: bool = False
    color: Optional[str] = None
    children: Optional[List["Block"]] = None


class Callout(NotionModel):
    rich_text: List[RichTextObject] = Field(default_factory=list)
    icon: Optional[Dict[str, Any]] = None
    color: Optional[str] = None
    children: Optional[List["Block"]] = None


class Code(NotionModel):
    rich_text: List[RichTextObject] = Field(default_factory=list)
    caption: Optional[List[RichTextObject]] = None
    language: Optional[str] = None


class ChildPage(NotionModel):
    title: str = ""


class ChildDatabase(NotionModel):
    title: str = ""


class LinkedURL(NotionModel):
    """Payload of embed and bookmark blocks."""

    url: str = ""
    caption: Optional[List[RichTextObject]] = None


class BlockEquation(NotionModel):
    expression: str = ""


class TableOfContents(NotionModel):
    color: Optional[str] = None


class LinkToPage(NotionModel):
    type: str
    page_id: Optional[str] = None
    database_id: Optional[str] = None


class Empty(NotionModel):
    """Payload of blocks without content (divider, breadcrumb, columns)."""

    model_config = ConfigDict(extra="allow")


# Blocks


class BlockBase(NotionModel):
    object: Literal["block"] = "block"
    id: Optional[str] = None
    parent: Optional[Dict[str, Any]] = None
    created_time: Optional[Timestamp] = None
    created_by: Optional[PartialUser] = None
    last_edited_time: Optional[Timestamp] = None
    last_edited_by: Optional[PartialUser] = None
    has_children: bool = False
    archived: bool = False

    def _always_set(self) -> Iterable[str]:
        return ("type", self.type)

    @property
    def payload(self) -> Any:
        """The variant payload named by ``type``."""
        return getattr(self, self.type, None)

    def plain_text(self) -> str:
        """Plain text of the block's rich text, if it has any."""
        return plain_text(getattr(self.payload, "rich_text", None))


class ParagraphBlock(BlockBase):
    type: Literal["paragraph"] = "paragraph"
    paragraph: Paragraph = Field(default_factory=Paragraph)


class Heading1Block(BlockBase):
    type: Literal["heading_1"] = "heading_1"
    heading_1: Heading = Field(default_factory=Heading)


class Heading2Block(BlockBase):
    type: Literal["heading_2"] = "heading_2"
    heading_2: Heading = Field(default_factory=Heading)


class Heading3Block(BlockBase):
    type: Literal["heading_3"] = "heading_3"
    heading_3: Heading = Field(default_factory=Heading)


class CalloutBlock(BlockBase):
    type: Literal["callout"] = "callout"
    callout: Callout = Field(default_factory=Callout)


class QuoteBlock(BlockBase):
    type: Literal["quote"] = "quote"
    quote: Paragraph = Field(default_factory=Paragraph)


class BulletedListItemBlock(BlockBase):
    type: Literal["bulleted_list_item"] = "bulleted_list_item"
    bulleted_list_item: Paragraph = Field(default_factory=Paragraph)


class NumberedListItemBlock(BlockBase):
    type: Literal["numbered_list_item"] = "numbered_list_item"
    numbered_list_item: Paragraph = Field(default_factory=Paragraph)


class ToDoBlock(BlockBase):
    type: Literal["to_do"] = "to_do"
    to_do: ToDo = Field(default_factory=ToDo)


class ToggleBlock(BlockBase):
    type: Literal["toggle"] = "toggle"
    toggle: Paragraph = Field(default_factory=Paragraph)


class CodeBlock(BlockBase):
    type: Literal["code"] = "code"
    code: Code = Field(default_factory=Code)


class ChildPageBlock(BlockBase):
    type: Literal["child_page"] = "child_page"
    child_page: ChildPage = Field(default_factory=ChildPage)


class ChildDatabaseBlock(BlockBase):
    type: Literal["child_database"] = "child_database"
    child_database: ChildDatabase = Field(default_factory=ChildDatabase)


class EmbedBlock(BlockBase):
    type: Literal["embed"] = "embed"
    embed: LinkedURL = Field(default_factory=LinkedURL)


class BookmarkBlock(BlockBase):
    type: Literal["bookmark"] = "bookmark"
    bookmark: LinkedURL = Field(default_factory=LinkedURL)


class EquationBlock(BlockBase):
    type: Literal["equation"] = "equation"
    equation: BlockEquation = Field(default_factory=BlockEquation)


class DividerBlock(BlockBase):
    type: Literal["divider"] = "divider"
    divider: Empty = Field(default_factory=Empty)


class TableOfContentsBlock(BlockBase):
    type: Literal["table_of_contents"] = "table_of_contents"
    table_of_contents: TableOfContents = Field(default_factory=TableOfContents)


class BreadcrumbBlock(BlockBase):
    type: Literal["breadcrumb"] = "breadcrumb"
    breadcrumb: Empty = Field(default_factory=Empty)


class ColumnListBlock(BlockBase):
    type: Literal["column_list"] = "column_list"
    column_list: Empty = Field(default_factory=Empty)


class ColumnBlock(BlockBase):
    type: Literal["column"] = "column"
    column: Empty = Field(default_factory=Empty)


class LinkToPageBlock(BlockBase):
    type: Literal["link_to_page"] = "link_to_page"
    link_to_page: LinkToPage


class UnsupportedBlock(BlockBase):
    """A block whose type this library does not model.

    The original ``type`` and its payload are kept and written back as-is.
    """

    model_config = ConfigDict(extra="allow")

    type: str

    @property
    def payload(self) -> Any:
        return (self.model_extra or {}).get(self.type)


_VARIANTS = (
    ParagraphBlock,
    Heading1Block,
    Heading2Block,
    Heading3Block,
    CalloutBlock,
    QuoteBlock,
    BulletedListItemBlock,
    NumberedListItemBlock,
    ToDoBlock,
    ToggleBlock,
    CodeBlock,
    ChildPageBlock,
    ChildDatabaseBlock,
    EmbedBlock,
    BookmarkBlock,
    EquationBlock,
    DividerBlock,
    TableOfContentsBlock,
    BreadcrumbBlock,
    ColumnListBlock,
    ColumnBlock,
    LinkToPageBlock,
)

Block = tagged_union(*_VARIANTS, fallback=UnsupportedBlock)

for _model in (Paragraph, ToDo, Callout) + _VARIANTS + (UnsupportedBlock,):
    _model.model_rebuild()


def paragraph(text: str) -> ParagraphBlock:
    return ParagraphBlock(paragraph=Paragraph(rich_text=[rich_text(text)]))


def heading(text: str, level: int = 1) -> BlockBase:
    classes = {1: Heading1Block, 2: Heading2Block, 3: Heading3Block}
    if level not in classes:
        raise ValueError("heading level must be 1-3")
    cls = classes[level]
    return cls(**{f"heading_{level}": Heading(rich_text=[rich_text(text)])})


def bulleted_list_item(text: str) -> BulletedListItemBlock:
    return BulletedListItemBlock(bulleted_list_item=Paragraph(rich_text=[rich_text(text)]))


def numbered_list_item(text: str) -> NumberedListItemBlock:
    return NumberedListItemBlock(numbered_list_item=Paragraph(rich_text=[rich_text(text)]))


def to_do(text: str, checked: bool = False) -> ToDoBlock:
    return ToDoBlock(to_do=ToDo(rich_text=[rich_text(text)], checked=checked))


def code(source: str, language: str = "plain text") -> CodeBlock:
    return CodeBlock(code=Code(rich_text=[rich_text(source)], language=language))


def divider() -> DividerBlock:
    return DividerBlock()
