from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liquidcast.db.base import Base, IntegerPrimaryKeyMixin, TimestampMixin


class StationMount(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    """A mount point on the station's own Icecast/SHOUTcast frontend."""

    __tablename__ = "station_mounts"

    station_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    enable_autodj: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    autodj_format: Mapped[str | None] = mapped_column(String(10), default="mp3", nullable=True)
    autodj_bitrate: Mapped[int | None] = mapped_column(Integer, default=128, nullable=True)

    station = relationship("Station", back_populates="mounts")
