# Schemas package
from liquidcast.schemas.station import (
    BackendConfig,
    CommandResponse,
    ConfigWriteResponse,
    FrontendConfig,
    LiveStatusUpdate,
    TrackRequest,
)

__all__ = [
    "BackendConfig",
    "FrontendConfig",
    "ConfigWriteResponse",
    "TrackRequest",
    "LiveStatusUpdate",
    "CommandResponse",
]
