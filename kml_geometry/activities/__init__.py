"""Pipeline stages.

Each stage is a pure function from one immutable structure to another:
- parse_kml: Parse KML text and extract features (fiona, lxml fallback)
- optimize_geometry: Decimate oversized coordinate sequences
- reports: Summary counts, detail rows and popup text
"""
