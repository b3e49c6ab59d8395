from providers.catalog import GenreCatalog
from providers.tracks import TrackSearchProvider, extract_items

__all__ = ["GenreCatalog", "TrackSearchProvider", "extract_items"]
