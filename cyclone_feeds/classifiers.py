"""Pure classification helpers shared by the product extractors.

- Saffir-Simpson category from wind speed (knots)
- Coarse category from NHC track marker style names
- Probability from wind-speed-probability band labels
- Surge height from inundation band labels
- Arrival-time label reconstruction from split icon styles

Every free-text lookup goes through ``RuleList``: an ordered list of
``(pattern, mapper)`` rules where the first matching rule wins and a
final default is returned when nothing matches. Unresolvable text is
never an error.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Generic, TypeVar

from cyclone_feeds.core.constants import KNOT_TO_MPH

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Ordered rule evaluation
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Rule(Generic[T]):
    """One ``pattern -> mapper`` rule."""

    pattern: re.Pattern[str]
    mapper: Callable[[re.Match[str]], T]

    def apply(self, text: str) -> re.Match[str] | None:
        return self.pattern.search(text)


class RuleList(Generic[T]):
    """Ordered rules; the first rule whose pattern matches produces the value."""

    def __init__(
        self,
        rules: list[tuple[str | re.Pattern[str], Callable[[re.Match[str]], T]]],
        *,
        flags: int = 0,
    ) -> None:
        self.rules: tuple[Rule[T], ...] = tuple(
            Rule(re.compile(p, flags) if isinstance(p, str) else p, m) for p, m in rules
        )

    def evaluate(self, text: str | None, default: T | None = None) -> T | None:
        if not text:
            return default
        for rule in self.rules:
            match = rule.apply(text)
            if match is not None:
                return rule.mapper(match)
        return default

    def __len__(self) -> int:
        return len(self.rules)


def whole_match(match: re.Match[str]) -> str:
    return match.group(0)


def first_group(match: re.Match[str]) -> str:
    return match.group(1).strip()


def first_group_int(match: re.Match[str]) -> int:
    return int(match.group(1))


# ---------------------------------------------------------------------------
# Wind speed
# ---------------------------------------------------------------------------

# (upper bound exclusive in knots, category)
SAFFIR_SIMPSON_KNOTS: tuple[tuple[int, str], ...] = (
    (34, "TD"),
    (64, "TS"),
    (83, "1"),
    (96, "2"),
    (113, "3"),
    (137, "4"),
)
MAX_CATEGORY = "5"


def wind_to_category(knots: float) -> str:
    """Saffir-Simpson category (``TD``, ``TS``, ``1``..``5``) for a wind in knots."""
    for upper, category in SAFFIR_SIMPSON_KNOTS:
        if knots < upper:
            return category
    return MAX_CATEGORY


def knots_to_mph(knots: float) -> int:
    return round(knots * KNOT_TO_MPH)


def format_wind_speed(knots: int) -> str:
    """``"100 knots (115 mph)"``."""
    return f"{knots} knots ({knots_to_mph(knots)} mph)"


# ---------------------------------------------------------------------------
# Track marker styles
# ---------------------------------------------------------------------------

STYLE_CATEGORIES: Mapping[str, str] = {
    "initial_point": "NOW",
    "xd_point": "TD",
    "d_point": "TD",
    "xs_point": "TS",
    "s_point": "TS",
    "xh_point": "1-2",
    "h_point": "1-2",
    "xm_point": "3-5",
    "m_point": "3-5",
    "td": "TD",
    "ts": "TS",
    "cat1": "1",
    "cat2": "2",
    "cat3": "3",
    "cat4": "4",
    "cat5": "5",
    "ex": "EX",
}


def strip_style_ref(style_url: str | None) -> str | None:
    """``"#cat3"`` -> ``"cat3"``; empty references become ``None``."""
    if not style_url:
        return None
    style = style_url.strip().lstrip("#")
    return style or None


def style_to_category(style: str) -> str:
    """Coarse category for a track marker style; unknown styles are upper-cased."""
    return STYLE_CATEGORIES.get(style, style.upper())


# ---------------------------------------------------------------------------
# Wind speed probability
# ---------------------------------------------------------------------------


def _range_midpoint(match: re.Match[str]) -> float:
    return (float(match.group(1)) + float(match.group(2))) / 2


PROBABILITY_RULES: RuleList[float] = RuleList(
    [
        (r"<5%|&lt;5%", lambda _m: 2.5),
        (r">90%|&gt;90%", lambda _m: 95.0),
        (r"(\d+)-(\d+)", _range_midpoint),
        (r"(\d+(?:\.\d+)?)\s*%?", lambda m: float(m.group(1))),
    ]
)


def probability_from_label(name: str | None) -> float:
    """Representative probability (percent) for a band label.

    ``"<5%"`` -> 2.5, ``">90%"`` -> 95, ``"80-90"`` -> 85, ``"40%"`` -> 40,
    anything else -> 0.
    """
    return PROBABILITY_RULES.evaluate(name, 0.0) or 0.0


# ---------------------------------------------------------------------------
# Storm surge
# ---------------------------------------------------------------------------

SURGE_RULES: RuleList[int] = RuleList(
    [(r"(\d+)-(\d+)\s*ft", lambda m: int(m.group(2)))],
    flags=re.IGNORECASE,
)


def surge_height_from_text(*texts: str | None) -> int:
    """Upper bound of the first ``"<lo>-<hi> ft"`` band found, else 0."""
    for text in texts:
        height = SURGE_RULES.evaluate(text)
        if height is not None:
            return height
    return 0


# ---------------------------------------------------------------------------
# Arrival-time labels
# ---------------------------------------------------------------------------

WEEKDAYS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

HOUR_WORDS: Mapping[str, str] = {
    "one": "1",
    "two": "2",
    "three": "3",
    "four": "4",
    "five": "5",
    "six": "6",
    "seven": "7",
    "eight": "8",
    "nine": "9",
    "ten": "10",
    "eleven": "11",
    "twelve": "12",
}

LABEL_PART_ORDER: tuple[str, ...] = ("day", "hour", "period")
COMPONENT_SUFFIX_PARTS: Mapping[str, str] = {"a": "day", "b": "hour", "c": "period"}

LABEL_STYLE_PATTERN = re.compile(r"^style(\d+)([abc]?)$")


def hour_word_to_number(text: str) -> str:
    """``"eight"`` -> ``"8"``; other text is returned unchanged."""
    return HOUR_WORDS.get(text.lower(), text)


def classify_label_token(text: str | None) -> tuple[str, str] | None:
    """Classify one icon label as a day, hour or period token.

    Returns ``(part, normalized_text)`` or ``None`` when unrecognised.
    """
    if not text:
        return None
    token = text.strip()
    if token in WEEKDAYS:
        return ("day", token)
    lowered = token.lower()
    if lowered in ("am", "pm"):
        return ("period", token.upper())
    if lowered in HOUR_WORDS:
        return ("hour", HOUR_WORDS[lowered])
    if token.isdigit():
        return ("hour", token)
    return None


def label_style_group(style_id: str | None) -> tuple[str, str] | None:
    """``"style12b"`` -> ``("12", "b")``; ``"style4"`` -> ``("4", "")``."""
    if not style_id:
        return None
    match = LABEL_STYLE_PATTERN.match(style_id)
    if match is None:
        return None
    return (match.group(1), match.group(2))


def reconstruct_label(style_id: str | None, style_map: Mapping[str, str]) -> str | None:
    """Rebuild a split arrival-time label (``"Wed 8 AM"``) from sibling styles.

    All styles that share the numeric group of ``style_id`` are classified
    as day, hour or period and joined in that order. When none of them
    classifies, the style map's raw label for ``style_id`` is returned
    (``None`` if it has none).
    """
    if not style_id:
        return None

    group = label_style_group(style_id)
    if group is not None:
        number = group[0]
        parts: dict[str, str] = {}
        for sibling_id in sorted(style_map):
            sibling = label_style_group(sibling_id)
            if sibling is None or sibling[0] != number:
                continue
            classified = classify_label_token(style_map[sibling_id])
            if classified is not None:
                parts.setdefault(classified[0], classified[1])
        if parts:
            return " ".join(parts[p] for p in LABEL_PART_ORDER if p in parts)

    return style_map.get(style_id) or None


ARRIVAL_TIME_RULES: RuleList[str] = RuleList(
    [
        (r"(\w{3})\s+(\d{1,2})\s*(AM|PM)", whole_match),
        (r"(\d{1,2})\s*(AM|PM)\s*(\w{3})", whole_match),
        (r"(\d{1,2}):(\d{2})\s*(AM|PM)", whole_match),
        (r"(\d{4})\s*(UTC|GMT)", whole_match),
    ],
    flags=re.IGNORECASE,
)


def arrival_time_from_text(name: str, description: str) -> str | None:
    """First arrival-time phrase found in ``name + " " + description``."""
    return ARRIVAL_TIME_RULES.evaluate(f"{name} {description}".strip())
