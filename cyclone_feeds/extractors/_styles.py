"""StyleMap construction.

Wind-arrival products draw their time labels as icons: each ``Style``
references a PNG whose file name is the label text (``Wed.png``,
``eight.png``, ``am.png``). The map from style id to that label is built
in one full pass over the document before any Placemark is read, because
styles may be declared after the Placemarks that use them.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from cyclone_feeds.extractors._traversal import iter_styles

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cyclone_feeds.parsers.markup import MarkupElement

ICON_HREF_PATH = "IconStyle/Icon/href"


def icon_label(href: str) -> str:
    """``"http://host/icons/Wed.png"`` -> ``"Wed"``."""
    filename = href.strip().replace("\\", "/").rsplit("/", 1)[-1]
    stem, dot, _extension = filename.rpartition(".")
    return stem if dot and stem else filename


def build_style_map(root: MarkupElement) -> Mapping[str, str]:
    """Map every icon ``Style`` id in the document to its icon label.

    Styles without an ``id`` or without ``IconStyle/Icon/href`` are
    ignored. When an id is declared twice the first declaration wins.
    """
    styles: dict[str, str] = {}
    for style in iter_styles(root):
        sid = style.attributes.get("id")
        href = style.find_path(ICON_HREF_PATH)
        if not sid or href is None or not href.text:
            continue
        styles.setdefault(sid, icon_label(href.text))
    return MappingProxyType(styles)
