"""Tropical Cyclone Feed Normalization.

Turns National Hurricane Center style products (KMZ archives for track,
cone, storm surge, wind probability and wind arrival, plus ATCF A-deck
model-track text) into uniform GeoJSON-shaped feature collections and
ranked model tracks with classified, query-ready properties.
"""

__version__ = "0.1.0"
