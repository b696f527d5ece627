"""
Client for a station's running Liquidsoap instance over its telnet server.

Each call opens a TCP connection, sends one command followed by ``quit`` and
reads response lines until Liquidsoap closes the connection.
"""
import asyncio
import logging
from urllib.parse import unquote

from sqlalchemy.ext.asyncio import AsyncSession

from liquidcast.core.exceptions import ConflictError
from liquidcast.models.station import Station
from liquidcast.services.liquidsoap.options import GeneratorOptions
from liquidcast.services.liquidsoap.script import get_var_name
from liquidcast.services.station_service import get_telnet_port

logger = logging.getLogger(__name__)


class LiquidsoapConnectionError(ConnectionError):
    """The telnet server could not be reached or stopped answering."""


class QueueNotEmptyError(ConflictError):
    default_detail = "Song(s) still pending in request queue."


def _prepare_command(command: str) -> str:
    return unquote(command).replace("\\'", "'").replace("&amp;", "&")


async def send_command(station: Station, command: str, options: GeneratorOptions | None = None) -> list[str]:
    """Send a single command to the station's Liquidsoap and return the response lines."""
    options = options or GeneratorOptions.from_settings()
    host = options.telnet_host
    port = get_telnet_port(station)

    try:
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port), timeout=options.telnet_timeout
        )
    except asyncio.TimeoutError as e:
        logger.warning("Liquidsoap telnet connect to %s:%s timed out", host, port)
        raise LiquidsoapConnectionError(f"Telnet failure: connection timed out ({host}:{port})") from e
    except OSError as e:
        logger.warning("Liquidsoap telnet connect to %s:%s failed: %s", host, port, e)
        raise LiquidsoapConnectionError(f"Telnet failure: {e.strerror or e} ({e.errno})") from e

    try:
        writer.write((_prepare_command(command) + "\nquit\n").encode())
        await writer.drain()

        response = []
        while True:
            line = await asyncio.wait_for(reader.readline(), timeout=options.telnet_timeout)
            if not line:
                break
            response.append(line.decode(errors="replace").strip())
    except asyncio.TimeoutError as e:
        logger.warning("Liquidsoap command timed out: %s", command)
        raise LiquidsoapConnectionError(f"Telnet failure: no response to '{command}'") from e
    except OSError as e:
        raise LiquidsoapConnectionError(f"Telnet failure: {e.strerror or e} ({e.errno})") from e
    finally:
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass

    logger.debug("Liquidsoap command '%s' -> %s", command, response[:5])
    return response


async def request(station: Station, music_file: str, options: GeneratorOptions | None = None) -> list[str]:
    """Push a track onto the manual AutoDJ request queue, which holds one pending track at most."""
    requests_var = get_var_name("requests", station)

    queue = await send_command(station, f"{requests_var}.queue", options)
    if queue and queue[0]:
        logger.info("Request rejected for station %s: queue holds %s", station.id, queue[0])
        raise QueueNotEmptyError()

    return await send_command(station, f"{requests_var}.push {music_file}", options)


async def skip(station: Station, options: GeneratorOptions | None = None) -> list[str]:
    """Skip the currently playing track."""
    return await send_command(station, f"{get_var_name('local_1', station)}.skip", options)


async def disconnect_streamer(
    db: AsyncSession, station: Station, options: GeneratorOptions | None = None
) -> list[str]:
    """Kick the connected live DJ, locking their account for the station's configured timeout."""
    current_streamer = station.current_streamer
    disconnect_timeout = int(station.disconnect_deactivate_streamer or 0)

    if current_streamer is not None and disconnect_timeout > 0:
        current_streamer.deactivate_for(disconnect_timeout)
        await db.flush()
        logger.info(
            "Streamer %s deactivated for %d seconds on station %s",
            current_streamer.streamer_username, disconnect_timeout, station.id,
        )

    return await send_command(station, f"{get_var_name('input_streamer', station)}.stop", options)
