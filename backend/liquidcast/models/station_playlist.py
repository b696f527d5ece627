"""
StationPlaylist model: a source of tracks for the AutoDJ.

A playlist either lists media files (exported to a track list on disk when the
Liquidsoap configuration is written) or points at a remote stream URL. Its type
decides how it is mixed into the station's rotation.
"""
import enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import ENUM
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liquidcast.db.base import Base, IntegerPrimaryKeyMixin, TimestampMixin
from liquidcast.models.station import get_short_name

if TYPE_CHECKING:
    from liquidcast.models.station import Station
    from liquidcast.models.station_media import StationMedia


class PlaylistSource(str, enum.Enum):
    SONGS = "songs"
    REMOTE_URL = "remote_url"


class PlaylistOrder(str, enum.Enum):
    SEQUENTIAL = "sequential"
    SHUFFLE = "shuffle"


class PlaylistType(str, enum.Enum):
    DEFAULT = "default"  # Weighted random mix of all default playlists
    ONCE_PER_X_SONGS = "once_per_x_songs"
    ONCE_PER_X_MINUTES = "once_per_x_minutes"
    SCHEDULED = "scheduled"  # Plays between schedule_start_time and schedule_end_time
    ONCE_PER_DAY = "once_per_day"  # Plays at play_once_time
    ADVANCED = "custom"  # Declared but left for custom config to wire up


class StationPlaylist(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "station_playlists"

    station_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    source: Mapped[PlaylistSource] = mapped_column(
        ENUM(PlaylistSource, name="playlist_source", create_type=True),
        default=PlaylistSource.SONGS,
        nullable=False,
    )
    order: Mapped[PlaylistOrder] = mapped_column(
        "playback_order",
        ENUM(PlaylistOrder, name="playlist_order", create_type=True),
        default=PlaylistOrder.SHUFFLE,
        nullable=False,
    )
    type: Mapped[PlaylistType] = mapped_column(
        ENUM(PlaylistType, name="playlist_type", create_type=True),
        default=PlaylistType.DEFAULT,
        nullable=False,
    )
    remote_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relative frequency among default playlists
    weight: Mapped[int] = mapped_column(Integer, default=3, nullable=False)

    play_per_songs: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    play_per_minutes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Times of day encoded as HHMM integers (e.g. 2330)
    schedule_start_time: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    schedule_end_time: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    play_once_time: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    station: Mapped["Station"] = relationship("Station", back_populates="playlists")
    media_items: Mapped[list["StationPlaylistMedia"]] = relationship(
        "StationPlaylistMedia",
        back_populates="playlist",
        order_by="StationPlaylistMedia.position",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    @property
    def short_name(self) -> str:
        return get_short_name(self.name)


class StationPlaylistMedia(Base):
    __tablename__ = "station_playlist_media"

    playlist_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("station_playlists.id", ondelete="CASCADE"), primary_key=True
    )
    media_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("station_media.id", ondelete="CASCADE"), primary_key=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    playlist: Mapped["StationPlaylist"] = relationship("StationPlaylist", back_populates="media_items")
    media: Mapped["StationMedia"] = relationship("StationMedia", lazy="selectin")
