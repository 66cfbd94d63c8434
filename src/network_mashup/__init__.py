"""iTunes top-apps feed client."""

__version__ = "0.1.0"
