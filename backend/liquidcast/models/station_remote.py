import enum

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import ENUM
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liquidcast.db.base import Base, IntegerPrimaryKeyMixin, TimestampMixin


class RemoteType(str, enum.Enum):
    SHOUTCAST1 = "shoutcast1"  # Single stream, no mount points
    SHOUTCAST2 = "shoutcast2"  # Stream id selected through the password
    ICECAST = "icecast"


class StationRemote(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    """A third-party server the AutoDJ relays the station's stream to."""

    __tablename__ = "station_remotes"

    station_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[RemoteType] = mapped_column(
        ENUM(RemoteType, name="remote_type", create_type=True),
        default=RemoteType.ICECAST,
        nullable=False,
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    mount: Mapped[str | None] = mapped_column(String(150), nullable=True)

    enable_autodj: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    autodj_format: Mapped[str | None] = mapped_column(String(10), nullable=True)
    autodj_bitrate: Mapped[int | None] = mapped_column(Integer, nullable=True)

    source_port: Mapped[int | None] = mapped_column(Integer, nullable=True)
    source_mount: Mapped[str | None] = mapped_column(String(150), nullable=True)
    source_username: Mapped[str | None] = mapped_column(String(100), nullable=True)
    source_password: Mapped[str | None] = mapped_column(String(100), nullable=True)

    station = relationship("Station", back_populates="remotes")
