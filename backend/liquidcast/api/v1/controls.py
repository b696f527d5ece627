import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from liquidcast.core.exceptions import AppException, BadGatewayError
from liquidcast.db.session import get_db
from liquidcast.schemas.station import (
    CommandResponse,
    ConfigWriteResponse,
    LiveStatusUpdate,
    TrackRequest,
)
from liquidcast.services import liquidsoap_client
from liquidcast.services.liquidsoap.generator import ConfigurationWriteError, write_configuration
from liquidcast.services.station_service import get_station, toggle_live_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stations", tags=["controls"])


@router.post("/{station_id}/liquidsoap/config", response_model=ConfigWriteResponse)
async def write_config(station_id: int, db: AsyncSession = Depends(get_db)):
    station = await get_station(db, station_id)
    try:
        path = await write_configuration(db, station)
    except ConfigurationWriteError as e:
        raise AppException(str(e))
    with open(path, encoding="utf-8") as f:
        line_count = sum(1 for _ in f)
    return ConfigWriteResponse(station_id=station.id, path=str(path), lines=line_count)


@router.post("/{station_id}/backend/request", response_model=CommandResponse)
async def enqueue(station_id: int, body: TrackRequest, db: AsyncSession = Depends(get_db)):
    station = await get_station(db, station_id)
    try:
        response = await liquidsoap_client.request(station, body.uri)
    except liquidsoap_client.LiquidsoapConnectionError as e:
        raise BadGatewayError(str(e))
    return CommandResponse(status="queued", response=response)


@router.post("/{station_id}/backend/skip", response_model=CommandResponse)
async def skip(station_id: int, db: AsyncSession = Depends(get_db)):
    station = await get_station(db, station_id)
    try:
        response = await liquidsoap_client.skip(station)
    except liquidsoap_client.LiquidsoapConnectionError as e:
        raise BadGatewayError(str(e))
    return CommandResponse(status="skipped", response=response)


@router.post("/{station_id}/backend/disconnect", response_model=CommandResponse)
async def disconnect(station_id: int, db: AsyncSession = Depends(get_db)):
    station = await get_station(db, station_id)
    try:
        response = await liquidsoap_client.disconnect_streamer(db, station)
    except liquidsoap_client.LiquidsoapConnectionError as e:
        raise BadGatewayError(str(e))
    return CommandResponse(status="disconnected", response=response)


@router.post("/{station_id}/backend/live")
async def set_live(station_id: int, body: LiveStatusUpdate, db: AsyncSession = Depends(get_db)):
    station = await get_station(db, station_id)
    await toggle_live_status(db, station, body.is_live)
    return {"station_id": station.id, "is_streamer_live": station.is_streamer_live}
