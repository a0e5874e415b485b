from .stremio_catalog import StremioCatalogUseCase
from .stremio_stream import StremioStreamUseCase

__all__ = ["StremioCatalogUseCase", "StremioStreamUseCase"]
