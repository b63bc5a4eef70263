"""Atlassian Document Format (ADF) tree models.

Known node and mark types get their own models with typed attribute records.
Anything else validates into :class:`GenericNode` / :class:`GenericMark`, whose
``attrs`` stay an open mapping. Attribute records keep unknown keys so that a
round trip through the models does not drop data the renderer may need.

All models are frozen. Transforms build new nodes with ``model_copy``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

_ADF_CONFIG = ConfigDict(extra="allow", frozen=True, populate_by_name=True)


class AdfAttrs(BaseModel):
    """Base for typed attribute records."""

    model_config = _ADF_CONFIG


class HeadingAttrs(AdfAttrs):
    """Attributes of a ``heading`` node."""

    level: int | None = 1
    generated_id: str | None = Field(default=None, alias="generatedId")


class MediaAttrs(AdfAttrs):
    """Attributes of a ``media`` node, plus the resolved attachment fields."""

    id: str | None = None
    type: str | None = None
    collection: str | None = None
    processed_url: str | None = Field(default=None, alias="processedUrl")
    processed_type: str | None = Field(default=None, alias="processedType")
    processed_file_name: str | None = Field(default=None, alias="processedFileName")


class InlineCardAttrs(AdfAttrs):
    """Attributes of an ``inlineCard`` node."""

    url: str | None = None
    title: str | None = None
    page_id: str | None = Field(default=None, alias="pageId")


class LinkAttrs(AdfAttrs):
    """Attributes of a ``link`` mark."""

    href: str | None = None
    title: str | None = None
    page_id: str | None = Field(default=None, alias="pageId")


class LinkMark(BaseModel):
    """Inline hyperlink annotation."""

    model_config = _ADF_CONFIG

    type: Literal["link"] = "link"
    attrs: LinkAttrs = Field(default_factory=LinkAttrs)


class GenericMark(BaseModel):
    """Any mark type without a dedicated model (strong, em, code, ...)."""

    model_config = _ADF_CONFIG

    type: str
    attrs: dict[str, Any] | None = None


def _mark_tag(value: Any) -> str:
    if isinstance(value, BaseModel):
        return "link" if isinstance(value, LinkMark) else "generic"
    if isinstance(value, dict) and value.get("type") == "link":
        return "link"
    return "generic"


AnyMark = Annotated[
    Union[
        Annotated[LinkMark, Tag("link")],
        Annotated[GenericMark, Tag("generic")],
    ],
    Discriminator(_mark_tag),
]


class AdfNode(BaseModel):
    """Shared shape of every node in the tree."""

    model_config = _ADF_CONFIG

    type: str
    content: list[AnyNode] | None = None
    marks: list[AnyMark] | None = None


class TextNode(AdfNode):
    type: Literal["text"] = "text"
    text: str = ""


class HeadingNode(AdfNode):
    type: Literal["heading"] = "heading"
    attrs: HeadingAttrs = Field(default_factory=HeadingAttrs)


class MediaNode(AdfNode):
    type: Literal["media"] = "media"
    attrs: MediaAttrs = Field(default_factory=MediaAttrs)


class InlineCardNode(AdfNode):
    type: Literal["inlineCard"] = "inlineCard"
    attrs: InlineCardAttrs = Field(default_factory=InlineCardAttrs)


class GenericNode(AdfNode):
    """Catch-all for node types without a dedicated model."""

    attrs: dict[str, Any] | None = None


class Document(AdfNode):
    """Root of an ADF tree."""

    type: Literal["doc"] = "doc"
    version: int = 1
    content: list[AnyNode] = Field(default_factory=list)


_NODE_TAGS: dict[type[AdfNode], str] = {
    TextNode: "text",
    HeadingNode: "heading",
    MediaNode: "media",
    InlineCardNode: "inlineCard",
}
_TYPED_NODE_TYPES = frozenset(_NODE_TAGS.values())


def _node_tag(value: Any) -> str:
    if isinstance(value, BaseModel):
        return _NODE_TAGS.get(type(value), "generic")
    node_type = value.get("type") if isinstance(value, dict) else None
    return node_type if node_type in _TYPED_NODE_TYPES else "generic"


AnyNode = Annotated[
    Union[
        Annotated[TextNode, Tag("text")],
        Annotated[HeadingNode, Tag("heading")],
        Annotated[MediaNode, Tag("media")],
        Annotated[InlineCardNode, Tag("inlineCard")],
        Annotated[GenericNode, Tag("generic")],
    ],
    Discriminator(_node_tag),
]

for _model in (AdfNode, TextNode, HeadingNode, MediaNode, InlineCardNode, GenericNode, Document):
    _model.model_rebuild()
