import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from liquidcast.core.exceptions import NotFoundError
from liquidcast.models.station import Station
from liquidcast.schemas.station import BackendConfig, FrontendConfig

logger = logging.getLogger(__name__)


async def get_station(db: AsyncSession, station_id: int) -> Station:
    result = await db.execute(select(Station).where(Station.id == station_id))
    station = result.scalar_one_or_none()
    if not station:
        raise NotFoundError(f"Station {station_id} not found")
    return station


async def list_stations(db: AsyncSession, enabled_only: bool = True) -> list[Station]:
    query = select(Station).order_by(Station.id)
    if enabled_only:
        query = query.where(Station.is_enabled == True)  # noqa: E712
    result = await db.execute(query)
    return list(result.scalars().all())


def get_backend_config(station: Station) -> BackendConfig:
    return BackendConfig.model_validate(station.backend_config or {})


def get_frontend_config(station: Station) -> FrontendConfig:
    return FrontendConfig.model_validate(station.frontend_config or {})


def get_frontend_port(station: Station) -> int:
    """Frontend listen port; stations are spaced 10 ports apart from 8000 by default."""
    port = get_frontend_config(station).port
    if port:
        return port
    return 8000 + (station.id - 1) * 10


def get_stream_port(station: Station) -> int:
    """Port DJs connect to for live broadcasting (harbor input)."""
    dj_port = get_backend_config(station).dj_port
    if dj_port:
        return dj_port
    return get_frontend_port(station) + 5


def get_telnet_port(station: Station) -> int:
    """Port of Liquidsoap's telnet control server."""
    telnet_port = get_backend_config(station).telnet_port
    if telnet_port:
        return telnet_port
    return get_stream_port(station) - 1


async def toggle_live_status(db: AsyncSession, station: Station, is_streamer_live: bool = True) -> Station:
    station.is_streamer_live = is_streamer_live
    await db.flush()
    logger.info("Station %s live status set to %s", station.id, is_streamer_live)
    return station
