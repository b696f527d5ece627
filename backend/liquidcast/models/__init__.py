from liquidcast.models.station import Station, FrontendType
from liquidcast.models.station_media import StationMedia
from liquidcast.models.station_playlist import (
    StationPlaylist,
    StationPlaylistMedia,
    PlaylistOrder,
    PlaylistSource,
    PlaylistType,
)
from liquidcast.models.station_mount import StationMount
from liquidcast.models.station_remote import StationRemote, RemoteType
from liquidcast.models.station_streamer import StationStreamer

__all__ = [
    "Station", "FrontendType",
    "StationMedia",
    "StationPlaylist", "StationPlaylistMedia", "PlaylistOrder", "PlaylistSource", "PlaylistType",
    "StationMount",
    "StationRemote", "RemoteType",
    "StationStreamer",
]
