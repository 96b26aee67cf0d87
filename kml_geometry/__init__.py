"""KML Geometry Pipeline.

Converts KML documents into render-ready GeoJSON feature collections
and derives summary/detail reports (feature counts, path lengths).
"""

__version__ = "0.1.0"
