from .media import Candidate, RankedResult, StreamDescriptor, TitleContext
from .stremio import (
    ID_PREFIX,
    StremioContentType,
    StremioMeta,
    StremioMetaPreview,
    StremioStreamRequest,
    StremioVideo,
)

__all__ = [
    "Candidate",
    "ID_PREFIX",
    "RankedResult",
    "StreamDescriptor",
    "StremioContentType",
    "StremioMeta",
    "StremioMetaPreview",
    "StremioStreamRequest",
    "StremioVideo",
    "TitleContext",
]
