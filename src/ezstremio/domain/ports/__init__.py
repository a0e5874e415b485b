from .cache import CachePort
from .catalog_source import DetailsSourcePort, SearchSourcePort
from .metadata import MetadataClientPort

__all__ = [
    "CachePort",
    "DetailsSourcePort",
    "MetadataClientPort",
    "SearchSourcePort",
]
