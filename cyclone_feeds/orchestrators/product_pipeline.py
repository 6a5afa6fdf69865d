"""Product extraction facade.

Single entry point for a dispatcher: take a product selector and its raw
payload (KMZ bytes, or A-deck text for ``adeck``) and return the
normalized result.

Flow for archive products::

    bytes -> read_markup_from_archive -> parse_markup -> extractor -> FeatureCollection

Failure semantics:
- Input errors (corrupt archive, no markup entry, malformed markup,
  bad storm id) abort that product only and surface as
  ``ExtractionFailedError`` chained to the cause.
- ``extract_products`` runs independent products on a bounded thread
  pool and always returns one outcome per request, in request order.
"""

from __future__ import annotations

import enum
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING

from cyclone_feeds.core.config import PipelineConfig
from cyclone_feeds.core.exceptions import (
    ContractError,
    CorruptArchiveError,
    ExtractionFailedError,
    InvalidStormIdError,
    MalformedMarkupError,
    NoMarkupEntryError,
    PermanentError,
    PipelineError,
    UnknownProductError,
)
from cyclone_feeds.extractors import (
    extract_cone,
    extract_surge,
    extract_track,
    extract_wind_arrival,
    extract_wind_probability,
)
from cyclone_feeds.models.envelope import ProductResponse
from cyclone_feeds.models.feature import FeatureCollection
from cyclone_feeds.parsers.adeck import adeck_filename, parse_adeck
from cyclone_feeds.parsers.archive import read_markup_from_archive
from cyclone_feeds.parsers.markup import parse_markup

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from cyclone_feeds.models.feature import Feature
    from cyclone_feeds.models.tracks import ModelTrackSet
    from cyclone_feeds.parsers.markup import MarkupElement

logger = logging.getLogger("cyclone_feeds.orchestrators.product_pipeline")

#: Errors that mean "this product's input is unusable".
INPUT_ERRORS: tuple[type[PipelineError], ...] = (
    CorruptArchiveError,
    NoMarkupEntryError,
    MalformedMarkupError,
    InvalidStormIdError,
)


class ProductType(str, enum.Enum):
    """Supported product selectors."""

    TRACK = "track"
    FORECAST_TRACK = "forecast-track"
    FORECAST_CONE = "forecast-cone"
    STORM_SURGE = "storm-surge"
    WIND_SPEED_PROBABILITY = "wind-speed-probability"
    WIND_SPEED_PROBABILITY_50KT = "wind-speed-probability-50kt"
    WIND_SPEED_PROBABILITY_64KT = "wind-speed-probability-64kt"
    WIND_ARRIVAL_MOST_LIKELY = "wind-arrival-most-likely"
    WIND_ARRIVAL_EARLIEST = "wind-arrival-earliest"
    ADECK = "adeck"

    @classmethod
    def _missing_(cls, value: object) -> ProductType | None:
        if isinstance(value, str):
            normalized = value.strip().lower()
            normalized = PRODUCT_ALIASES.get(normalized, normalized)
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @classmethod
    def parse(cls, selector: str | ProductType) -> ProductType:
        """Resolve a selector string (aliases included).

        Raises:
            UnknownProductError: If the selector names no supported product.
        """
        try:
            return cls(selector)
        except ValueError as exc:
            msg = f"Unknown product {selector!r}; expected one of {[m.value for m in cls]}"
            raise UnknownProductError(msg) from exc

    @property
    def is_archive(self) -> bool:
        return self is not ProductType.ADECK


PRODUCT_ALIASES: dict[str, str] = {"gefs-adeck": ProductType.ADECK.value}

FEATURE_EXTRACTORS: dict[ProductType, Callable[[MarkupElement], list[Feature]]] = {
    ProductType.TRACK: extract_track,
    ProductType.FORECAST_TRACK: extract_track,
    ProductType.FORECAST_CONE: extract_cone,
    ProductType.STORM_SURGE: extract_surge,
    ProductType.WIND_SPEED_PROBABILITY: partial(extract_wind_probability, wind_speed="34kt"),
    ProductType.WIND_SPEED_PROBABILITY_50KT: partial(extract_wind_probability, wind_speed="50kt"),
    ProductType.WIND_SPEED_PROBABILITY_64KT: partial(extract_wind_probability, wind_speed="64kt"),
    ProductType.WIND_ARRIVAL_MOST_LIKELY: partial(extract_wind_arrival, product="most_likely"),
    ProductType.WIND_ARRIVAL_EARLIEST: partial(extract_wind_arrival, product="earliest"),
}


# ---------------------------------------------------------------------------
# Single product
# ---------------------------------------------------------------------------


def extract_product(
    product: str | ProductType,
    payload: bytes | str,
    *,
    storm_id: str = "",
    config: PipelineConfig | None = None,
) -> FeatureCollection | ModelTrackSet:
    """Extract one product from its raw payload.

    Args:
        product: Product selector (e.g. ``"storm-surge"``, ``"adeck"``).
        payload: KMZ bytes for archive products; A-deck text for ``adeck``.
        storm_id: Storm identifier, used for error context and to name
            the A-deck file.
        config: Pipeline settings (defaults to ``PipelineConfig()``).

    Returns:
        FeatureCollection for archive products, ModelTrackSet for ``adeck``.

    Raises:
        UnknownProductError: If ``product`` is not a supported selector.
        ExtractionFailedError: If the payload is unusable; ``__cause__``
            is the underlying input error.
    """
    kind = ProductType.parse(product)
    cfg = config or PipelineConfig()

    try:
        if not kind.is_archive:
            result: FeatureCollection | ModelTrackSet = _extract_adeck(payload, storm_id, cfg)
            count = len(result.tracks)
        else:
            result = _extract_features(kind, payload, cfg)
            count = len(result.features)
    except INPUT_ERRORS as exc:
        logger.warning(
            "Extraction failed: product=%s storm=%s code=%s error=%s",
            kind.value,
            storm_id or "-",
            exc.code,
            exc.message,
        )
        raise ExtractionFailedError(kind.value, exc, storm_id=storm_id) from exc

    logger.info(
        "Extracted product=%s storm=%s features=%d",
        kind.value,
        storm_id or "-",
        count,
    )
    return result


def _extract_features(
    kind: ProductType, payload: bytes | str, cfg: PipelineConfig
) -> FeatureCollection:
    text = read_markup_from_archive(
        payload,  # type: ignore[arg-type]
        extension=cfg.markup_extension,
        max_entry_bytes=cfg.max_markup_bytes,
    )
    root = parse_markup(text)
    features = FEATURE_EXTRACTORS[kind](root)
    return FeatureCollection(features=tuple(features), product=kind.value)


def _extract_adeck(payload: bytes | str, storm_id: str, cfg: PipelineConfig) -> ModelTrackSet:
    filename = adeck_filename(storm_id) if storm_id else None
    text = payload.decode("utf-8", errors="replace") if isinstance(payload, bytes) else payload
    return parse_adeck(text, filename=filename, max_tau=cfg.adeck_max_tau)


# ---------------------------------------------------------------------------
# Many products
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProductRequest:
    """One product to extract: selector, raw payload and storm id."""

    product: str
    payload: bytes | str
    storm_id: str = ""


@dataclass(frozen=True, slots=True)
class ProductOutcome:
    """Settled result of one request: either ``result`` or ``error`` is set."""

    product: str
    storm_id: str = ""
    result: FeatureCollection | ModelTrackSet | None = None
    error: PipelineError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def extract_products(
    requests: Iterable[ProductRequest],
    *,
    max_workers: int | None = None,
    config: PipelineConfig | None = None,
) -> list[ProductOutcome]:
    """Extract several products concurrently.

    Each request runs on its own worker and fails independently; an
    unexpected exception settles as an ``ExtractionFailedError`` too. The
    pool is bounded by ``min(max_workers, len(requests))``, with
    ``max_workers`` defaulting to ``config.max_workers``.

    Returns:
        One ProductOutcome per request, in request order.
    """
    pending = list(requests)
    if not pending:
        return []

    cfg = config or PipelineConfig()
    workers = min(max_workers or cfg.max_workers, len(pending))

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="cyclone-feeds") as pool:
        futures = [pool.submit(_settle, request, cfg) for request in pending]
        outcomes = [future.result() for future in futures]

    failed = sum(1 for o in outcomes if not o.ok)
    logger.info(
        "Extracted %d products: succeeded=%d failed=%d workers=%d",
        len(outcomes),
        len(outcomes) - failed,
        failed,
        workers,
    )
    return outcomes


def _settle(request: ProductRequest, cfg: PipelineConfig) -> ProductOutcome:
    try:
        result = extract_product(
            request.product, request.payload, storm_id=request.storm_id, config=cfg
        )
    except PipelineError as exc:
        return ProductOutcome(product=request.product, storm_id=request.storm_id, error=exc)
    except Exception as exc:
        logger.exception(
            "Unexpected extraction error: product=%s storm=%s error=%s",
            request.product,
            request.storm_id or "-",
            exc,
        )
        cause = PermanentError(
            str(exc) or type(exc).__name__, stage="extract", code="UNEXPECTED_ERROR"
        )
        cause.__cause__ = exc
        error = ExtractionFailedError(request.product, cause, storm_id=request.storm_id)
        return ProductOutcome(product=request.product, storm_id=request.storm_id, error=error)
    return ProductOutcome(product=request.product, storm_id=request.storm_id, result=result)


def build_response(outcome: ProductOutcome) -> ProductResponse:
    """Wrap an outcome in the uniform response envelope."""
    if outcome.error is not None:
        return ProductResponse.failed(outcome.product, outcome.error, storm_id=outcome.storm_id)
    if outcome.result is None:
        msg = f"ProductOutcome for {outcome.product!r} has neither result nor error"
        raise ContractError(msg, stage="dispatch", code="OUTCOME_EMPTY")
    return ProductResponse.ok(outcome.product, outcome.result, storm_id=outcome.storm_id)
