"""Shared pipeline constants."""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Rendering limits
# ---------------------------------------------------------------------------

DEFAULT_MAX_RENDER_POINTS: int = 1000
"""Point count above which a line or ring is decimated for rendering."""

MIN_MAX_RENDER_POINTS: int = 4
"""Smallest render limit that still leaves a decimated ring with 3 positions."""

DEFAULT_MAX_UPLOAD_BYTES: int = 50 * 1024 * 1024
"""Largest request body the HTTP layer will hand to the pipeline."""

# ---------------------------------------------------------------------------
# Geodesy
# ---------------------------------------------------------------------------

EARTH_RADIUS_M: float = 6_371_000.0
"""Mean Earth radius used by the haversine length calculation."""

METRES_PER_KILOMETRE: float = 1000.0

# ---------------------------------------------------------------------------
# Report defaults
# ---------------------------------------------------------------------------

DETAIL_NAME_TEMPLATE = "Element {index}"
DETAIL_NO_DESCRIPTION = "No description"
PLACEMARK_NAME_TEMPLATE = "Placemark {index}"
