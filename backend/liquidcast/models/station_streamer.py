from datetime import datetime, timedelta, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from liquidcast.db.base import Base, IntegerPrimaryKeyMixin, TimestampMixin


class StationStreamer(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    """A DJ account allowed to broadcast live through the harbor input."""

    __tablename__ = "station_streamers"

    station_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    streamer_username: Mapped[str] = mapped_column(String(50), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    reactivate_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def deactivate_for(self, seconds: int) -> None:
        self.is_active = False
        self.reactivate_at = datetime.now(timezone.utc) + timedelta(seconds=seconds)
