from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from liquidcast.db.base import Base, IntegerPrimaryKeyMixin, TimestampMixin


class StationMedia(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "station_media"

    station_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Relative to the station's media directory
    path: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    artist: Mapped[str | None] = mapped_column(String(500), nullable=True)
