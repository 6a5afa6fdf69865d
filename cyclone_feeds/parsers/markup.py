"""Immutable markup tree built from a KML document.

The document is parsed with lxml and copied into ``MarkupElement`` nodes
whose children are always grouped as ``tag -> tuple[MarkupElement, ...]``.
A single child and a repeated child therefore have the same shape (a
tuple of length one versus several), and extractors never have to ask
whether a child is "one object or a list".

Namespaces are stripped from tag and attribute names: NHC products mix
the KML 2.2 namespace, the Google ``gx`` extension and un-namespaced
documents, and the extractors match on local names only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from cyclone_feeds.core.exceptions import MalformedMarkupError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from lxml.etree import _Element

logger = logging.getLogger("cyclone_feeds.parsers.markup")

_EMPTY_MAPPING: Mapping[str, object] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class MarkupElement:
    """A read-only element of a parsed markup document.

    Attributes:
        tag: Local tag name (namespace removed).
        attributes: Attribute name -> value.
        children: Child tag -> child elements, in document order.
        text: Stripped text content, ``None`` when empty.
        order: Child elements in document order across all tags.
    """

    tag: str
    attributes: Mapping[str, str] = field(default_factory=lambda: _EMPTY_MAPPING)
    children: Mapping[str, tuple[MarkupElement, ...]] = field(
        default_factory=lambda: _EMPTY_MAPPING
    )
    text: str | None = None
    order: tuple[MarkupElement, ...] = ()

    def child(self, tag: str) -> MarkupElement | None:
        """First child with ``tag``, or ``None``."""
        found = self.children.get(tag, ())
        return found[0] if found else None

    def children_named(self, tag: str) -> tuple[MarkupElement, ...]:
        """All children with ``tag`` (empty tuple when none)."""
        return self.children.get(tag, ())

    def has_child(self, tag: str) -> bool:
        return tag in self.children

    def child_text(self, tag: str, default: str = "") -> str:
        """Text of the first child with ``tag``, or ``default``."""
        node = self.child(tag)
        if node is None or node.text is None:
            return default
        return node.text

    def find_path(self, path: str) -> MarkupElement | None:
        """Follow a ``/``-separated chain of first children.

        ``polygon.find_path("outerBoundaryIs/LinearRing/coordinates")``
        """
        node: MarkupElement | None = self
        for part in path.split("/"):
            if node is None:
                return None
            node = node.child(part)
        return node

    def iter_descendants(self, tag: str | None = None) -> Iterator[MarkupElement]:
        """Depth-first, document-order walk of all descendants."""
        for node in self.order:
            if tag is None or node.tag == tag:
                yield node
            yield from node.iter_descendants(tag)


def parse_markup(content: str | bytes) -> MarkupElement:
    """Parse a markup document into a ``MarkupElement`` tree.

    Raises:
        MalformedMarkupError: If the content is empty or not well-formed
            XML. No partial tree is ever returned.
    """
    from lxml import etree  # type: ignore[attr-defined]

    if isinstance(content, str):
        # lxml refuses str input that carries an encoding declaration.
        content = content.encode("utf-8")

    if not content or not content.strip():
        msg = "Markup document is empty"
        raise MalformedMarkupError(msg)

    parser = etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        huge_tree=False,
        remove_comments=True,
        remove_pis=True,
    )
    try:
        root: _Element = etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError as exc:
        msg = f"Not valid XML: {exc}"
        raise MalformedMarkupError(msg) from exc

    tree = _convert(root)
    logger.debug("Parsed markup document with root <%s>", tree.tag)
    return tree


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def local_name(name: str) -> str:
    """Strip a ``{namespace}`` or ``prefix:`` qualifier from a name."""
    if name.startswith("{"):
        name = name.split("}", 1)[1]
    return name.rsplit(":", 1)[-1]


def _convert(element: _Element) -> MarkupElement:
    grouped: dict[str, list[MarkupElement]] = {}
    ordered: list[MarkupElement] = []
    for sub in element:
        if not isinstance(sub.tag, str):
            # Entities and other non-element nodes that survive parsing.
            continue
        node = _convert(sub)
        grouped.setdefault(node.tag, []).append(node)
        ordered.append(node)

    text = (element.text or "").strip() or None
    attributes = {local_name(str(k)): str(v) for k, v in element.attrib.items()}

    return MarkupElement(
        tag=local_name(element.tag),
        attributes=MappingProxyType(attributes),
        children=MappingProxyType({k: tuple(v) for k, v in grouped.items()}),
        text=text,
        order=tuple(ordered),
    )
