"""Product extraction entry points.

- extract_product: one selector + payload -> FeatureCollection / ModelTrackSet
- extract_products: many requests on a bounded thread pool, all settled
- build_response: outcome -> ProductResponse envelope
"""

from cyclone_feeds.orchestrators.product_pipeline import (
    FEATURE_EXTRACTORS,
    ProductOutcome,
    ProductRequest,
    ProductType,
    build_response,
    extract_product,
    extract_products,
)

__all__ = [
    "FEATURE_EXTRACTORS",
    "ProductOutcome",
    "ProductRequest",
    "ProductType",
    "build_response",
    "extract_product",
    "extract_products",
]
