import enum
import re

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import ENUM, JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from liquidcast.db.base import Base, IntegerPrimaryKeyMixin, TimestampMixin


def get_short_name(name: str) -> str:
    """Reduce a display name to a lowercase [a-z0-9_] identifier."""
    name = name.strip().replace(" ", "_")
    return re.sub(r"[^A-Za-z0-9_]", "", name).lower()


_FALLBACK_NAME = re.compile(r"station_\d+")


class FrontendType(str, enum.Enum):
    ICECAST = "icecast"
    SHOUTCAST = "shoutcast2"
    REMOTE = "remote"


class Station(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "stations"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Stored sanitized; names the station directory and prefixes engine identifiers
    short_name: Mapped[str | None] = mapped_column(String(100), unique=True, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    frontend_type: Mapped[FrontendType] = mapped_column(
        ENUM(FrontendType, name="frontend_type", create_type=True),
        default=FrontendType.ICECAST,
        nullable=False,
    )
    frontend_config: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    backend_config: Mapped[dict | None] = mapped_column(JSONB, nullable=True)

    # Overrides <STATIONS_BASE_DIR>/<short name> when set
    radio_base_dir: Mapped[str | None] = mapped_column(Text, nullable=True)
    adapter_api_key: Mapped[str | None] = mapped_column(String(150), nullable=True)

    is_streamer_live: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    disconnect_deactivate_streamer: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    current_streamer_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey(
            "station_streamers.id",
            ondelete="SET NULL",
            use_alter=True,
            name="fk_stations_current_streamer",
        ),
        nullable=True,
    )

    playlists = relationship(
        "StationPlaylist",
        back_populates="station",
        order_by="StationPlaylist.id",
        lazy="selectin",
        cascade="all, delete-orphan",
    )
    mounts = relationship(
        "StationMount",
        back_populates="station",
        order_by="StationMount.id",
        lazy="selectin",
        cascade="all, delete-orphan",
    )
    remotes = relationship(
        "StationRemote",
        back_populates="station",
        order_by="StationRemote.id",
        lazy="selectin",
        cascade="all, delete-orphan",
    )
    current_streamer = relationship(
        "StationStreamer",
        foreign_keys=[current_streamer_id],
        lazy="selectin",
        post_update=True,
    )

    @validates("short_name")
    def validate_short_name(self, key: str, value: str | None) -> str | None:
        short_name = get_short_name(value or "")
        if not short_name:
            # Falls back to station_<id>
            return None
        if _FALLBACK_NAME.fullmatch(short_name):
            raise ValueError(f"Short name '{short_name}' is reserved for stations without one")
        return short_name
