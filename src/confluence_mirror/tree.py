"""Traversal and clone-on-write helpers for ADF trees."""

from __future__ import annotations

import json
from typing import Any, Callable, Iterator, Mapping, TypeVar

from pydantic import ValidationError

from confluence_mirror.exceptions import ParseError
from confluence_mirror.schemas import AdfNode, Document, TextNode

NodeT = TypeVar("NodeT", bound=AdfNode)


def iter_nodes(node: AdfNode) -> Iterator[AdfNode]:
    """Yield ``node`` and its descendants depth-first, pre-order.

    The generator holds no state outside its own frame, so it can be
    restarted freely and abandoned early.
    """
    yield node
    for child in node.content or ():
        yield from iter_nodes(child)


def map_tree(node: NodeT, fn: Callable[[AdfNode], AdfNode]) -> NodeT:
    """Apply ``fn`` to every node pre-order and rebuild only what changed.

    ``fn`` returns the node it was given when there is nothing to change, or a
    replacement node. A parent is copied only when its replacement differs or
    one of its children changed; every untouched subtree in the result is the
    same object as in the input.
    """
    replacement = fn(node)
    children = replacement.content
    if not children:
        return replacement  # type: ignore[return-value]

    mapped = [map_tree(child, fn) for child in children]
    if all(new is old for new, old in zip(mapped, children)):
        return replacement  # type: ignore[return-value]
    return replacement.model_copy(update={"content": mapped})  # type: ignore[return-value]


def node_text(node: AdfNode) -> str:
    """Concatenate the text of every text node below ``node``."""
    return "".join(
        descendant.text for descendant in iter_nodes(node) if isinstance(descendant, TextNode)
    )


def parse_document(data: str | bytes | Mapping[str, Any]) -> Document:
    """Validate an ADF body (JSON text or decoded mapping) into a Document.

    Raises:
        ParseError: If the payload is not valid JSON or not an ADF document.
    """
    try:
        if isinstance(data, (str, bytes)):
            return Document.model_validate_json(data)
        return Document.model_validate(dict(data))
    except (ValidationError, json.JSONDecodeError) as exc:
        raise ParseError(f"Invalid ADF document: {exc}") from exc


def dump_document(document: Document) -> dict[str, Any]:
    """Serialize a Document back to its ADF wire shape."""
    return document.model_dump(by_alias=True, exclude_none=True)
