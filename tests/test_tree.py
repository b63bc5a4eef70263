"""Tests for ADF models and tree traversal."""

from __future__ import annotations

import pytest

from confluence_mirror.exceptions import ParseError
from confluence_mirror.schemas import (
    GenericMark,
    GenericNode,
    HeadingNode,
    InlineCardNode,
    LinkMark,
    MediaNode,
    TextNode,
)
from confluence_mirror.tree import dump_document, iter_nodes, map_tree, node_text, parse_document

SAMPLE_ADF = {
    "type": "doc",
    "version": 1,
    "content": [
        {
            "type": "heading",
            "attrs": {"level": 2},
            "content": [{"type": "text", "text": "Intro"}],
        },
        {
            "type": "paragraph",
            "content": [
                {"type": "text", "text": "hello "},
                {
                    "type": "text",
                    "text": "world",
                    "marks": [{"type": "strong"}, {"type": "link", "attrs": {"href": "https://example.com"}}],
                },
                {"type": "inlineCard", "attrs": {"url": "https://example.com/card"}},
            ],
        },
        {
            "type": "mediaSingle",
            "attrs": {"layout": "center"},
            "content": [
                {"type": "media", "attrs": {"id": "abc", "type": "file", "collection": "", "width": 640}}
            ],
        },
    ],
}


class TestParseDocument:
    """Tests for parse_document and dump_document."""

    def test_known_types_get_typed_models(self) -> None:
        """Known node and mark types validate into their own models."""
        doc = parse_document(SAMPLE_ADF)

        heading, paragraph, media_single = doc.content
        assert isinstance(heading, HeadingNode)
        assert heading.attrs.level == 2
        assert isinstance(paragraph, GenericNode)
        assert isinstance(paragraph.content[1], TextNode)
        assert isinstance(paragraph.content[2], InlineCardNode)
        assert isinstance(media_single.content[0], MediaNode)

        marks = paragraph.content[1].marks
        assert isinstance(marks[0], GenericMark)
        assert isinstance(marks[1], LinkMark)
        assert marks[1].attrs.href == "https://example.com"

    def test_accepts_json_text(self) -> None:
        """A JSON string body parses the same as a mapping."""
        doc = parse_document(
            '{"type": "doc", "version": 1, "content": [{"type": "rule"}]}'
        )
        assert isinstance(doc.content[0], GenericNode)
        assert doc.content[0].type == "rule"

    def test_round_trip_keeps_unknown_attributes(self) -> None:
        """Serializing preserves attributes the models do not declare."""
        doc = parse_document(SAMPLE_ADF)
        assert dump_document(doc) == SAMPLE_ADF

    def test_invalid_json_raises_parse_error(self) -> None:
        with pytest.raises(ParseError):
            parse_document("{not json")

    def test_non_document_raises_parse_error(self) -> None:
        with pytest.raises(ParseError):
            parse_document({"type": "paragraph", "content": []})

    def test_nodes_are_frozen(self) -> None:
        doc = parse_document(SAMPLE_ADF)
        with pytest.raises(Exception):
            doc.content[0].attrs.level = 3  # type: ignore[misc]


class TestIterNodes:
    """Tests for iter_nodes."""

    def test_pre_order(self) -> None:
        """Visits a node before its children, children left to right."""
        doc = parse_document(SAMPLE_ADF)
        types = [node.type for node in iter_nodes(doc)]
        assert types == [
            "doc",
            "heading",
            "text",
            "paragraph",
            "text",
            "text",
            "inlineCard",
            "mediaSingle",
            "media",
        ]

    def test_restartable(self) -> None:
        doc = parse_document(SAMPLE_ADF)
        first = [node.type for node in iter_nodes(doc)]
        second = [node.type for node in iter_nodes(doc)]
        assert first == second

    def test_node_text_concatenates_descendants(self) -> None:
        doc = parse_document(SAMPLE_ADF)
        assert node_text(doc.content[1]) == "hello world"


class TestMapTree:
    """Tests for clone-on-write map_tree."""

    def test_identity_returns_same_object(self) -> None:
        doc = parse_document(SAMPLE_ADF)
        assert map_tree(doc, lambda node: node) is doc

    def test_only_changed_path_is_copied(self) -> None:
        """Untouched siblings stay reference-identical to the input."""
        doc = parse_document(SAMPLE_ADF)

        def shout(node):
            if isinstance(node, TextNode) and node.text == "hello ":
                return node.model_copy(update={"text": "HELLO "})
            return node

        result = map_tree(doc, shout)

        assert result is not doc
        assert result.content[0] is doc.content[0]
        assert result.content[2] is doc.content[2]
        assert result.content[1] is not doc.content[1]
        assert result.content[1].content[1] is doc.content[1].content[1]
        assert result.content[1].content[0].text == "HELLO "
        assert doc.content[1].content[0].text == "hello "
