"""Input decoders.

- archive: KMZ (zip) container -> markup text
- markup: markup text -> immutable MarkupElement tree
- adeck: ATCF A-deck text -> ranked model tracks
"""

from cyclone_feeds.parsers.adeck import (
    DEFAULT_MODEL_PATTERN,
    MODEL_PRIORITY,
    adeck_filename,
    model_rank,
    parse_adeck,
    parse_latitude,
    parse_longitude,
    sort_models,
)
from cyclone_feeds.parsers.archive import list_markup_entries, read_markup_from_archive
from cyclone_feeds.parsers.markup import MarkupElement, local_name, parse_markup

__all__ = [
    "DEFAULT_MODEL_PATTERN",
    "MODEL_PRIORITY",
    "MarkupElement",
    "adeck_filename",
    "list_markup_entries",
    "local_name",
    "model_rank",
    "parse_adeck",
    "parse_latitude",
    "parse_longitude",
    "parse_markup",
    "read_markup_from_archive",
    "sort_models",
]
