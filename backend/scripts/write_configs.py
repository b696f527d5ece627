"""Write Liquidsoap configuration for one station or every enabled station."""
import argparse
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from liquidcast.db.engine import async_session_factory
from liquidcast.services.liquidsoap.generator import ConfigurationWriteError, write_configuration
from liquidcast.services.station_service import get_station, list_stations

logger = logging.getLogger(__name__)


async def write_configs(
    station_id: int | None = None,
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
) -> int:
    failures = 0
    async with session_factory() as db:
        if station_id is not None:
            station_ids = [station_id]
        else:
            station_ids = [station.id for station in await list_stations(db)]

        # Each station commits on its own so a failed pass leaves nothing behind
        for sid in station_ids:
            station = await get_station(db, sid)
            label = f"Station {station.id} ({station.name})"
            try:
                path = await write_configuration(db, station)
            except ConfigurationWriteError as e:
                await db.rollback()
                failures += 1
                print(f"{label}: FAILED - {e}")
                continue

            await db.commit()
            print(f"{label}: {path}")
    return failures


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--station", type=int, default=None, help="Only write this station id")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    failures = asyncio.run(write_configs(args.station))
    raise SystemExit(1 if failures else 0)


if __name__ == "__main__":
    main()
