"""
Liquidsoap configuration writer.

A station's configuration is assembled by a fixed sequence of stages, each
appending to the same script:

    header -> playlists -> harbor (live DJ) -> custom filters
           -> local broadcasts -> remote relays

The finished script replaces <config dir>/liquidsoap.liq atomically. Playlist
track lists are written to a staging directory that only replaces the live
playlists directory once the whole script has been generated.
"""
import asyncio
import logging
import os
from collections import defaultdict
from collections.abc import Awaitable, Callable
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession

from liquidcast.models.station import Station
from liquidcast.models.station_playlist import (
    PlaylistOrder,
    PlaylistSource,
    PlaylistType,
    StationPlaylist,
)
from liquidcast.services.liquidsoap.commands import RuntimeValue, get_api_command
from liquidcast.services.liquidsoap.filesystem import atomic_write, staged_directory
from liquidcast.services.liquidsoap.options import GeneratorOptions
from liquidcast.services.liquidsoap.outputs import (
    get_local_broadcast_lines,
    get_remote_broadcast_lines,
)
from liquidcast.services.liquidsoap.playlists import PlaylistCompiler
from liquidcast.services.liquidsoap.script import LiquidsoapScript, get_var_name, to_float
from liquidcast.services.station_service import get_backend_config, get_stream_port, get_telnet_port

logger = logging.getLogger(__name__)

# One writer per station at a time
_station_locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)

Stage = Callable[[LiquidsoapScript], Awaitable[None]]


class ConfigurationWriteError(RuntimeError):
    """A generation stage failed; the previously written configuration is left in place."""


class LiquidsoapConfigurator:
    def __init__(
        self,
        db: AsyncSession,
        options: GeneratorOptions | None = None,
        utc_offset: int | None = None,
    ):
        self.db = db
        self.options = options or GeneratorOptions.from_settings()
        # None means "use the host's current offset"
        self.utc_offset = utc_offset

        self.stages: list[Stage] = [
            self.write_header_functions,
            self.write_playlist_configuration,
            self.write_harbor_configuration,
            self.write_custom_configuration,
            self.write_local_broadcast_configuration,
            self.write_remote_broadcast_configuration,
        ]

    async def generate(self, station: Station, workdir: Path) -> str:
        """Run every stage in order and return the script text."""
        script = LiquidsoapScript(station, workdir=workdir)
        for stage in self.stages:
            await stage(script)
        return script.build()

    async def write(self, station: Station) -> Path:
        """Generate and install the station's configuration. Returns the script path."""
        config_path = self.options.config_path(station)
        playlists_dir = self.options.playlists_dir(station)

        async with _station_locks[station.id]:
            try:
                with staged_directory(playlists_dir) as staging_dir:
                    contents = await self.generate(station, staging_dir)
                    atomic_write(config_path, contents)
            except Exception as e:
                logger.error("Liquidsoap configuration failed for station %s: %s", station.id, e, exc_info=True)
                raise ConfigurationWriteError(
                    f"Could not write configuration for station {station.id}: {e}"
                ) from e

        logger.info(
            "Wrote Liquidsoap configuration for station %s to %s (%d lines)",
            station.id, config_path, contents.count("\n"),
        )
        return config_path

    async def write_header_functions(self, script: LiquidsoapScript) -> None:
        script.prepend_lines([
            "# WARNING! This file is automatically generated by Liquidcast.",
            "# Do not update it directly!",
        ])

        station = script.station
        options = self.options
        config_dir = options.config_dir(station)

        lines = [
            'set("init.daemon", false)',
            f'set("init.daemon.pidfile.path","{config_dir}/liquidsoap.pid")',
            f'set("log.file.path","{config_dir}/liquidsoap.log")',
        ]
        if options.inside_docker:
            lines.append('set("log.stdout", true)')

        bind_addr = "0.0.0.0" if options.inside_docker else "127.0.0.1"
        lines += [
            'set("server.telnet",true)',
            f'set("server.telnet.bind_addr","{bind_addr}")',
            f'set("server.telnet.port", {get_telnet_port(station)})',
            'set("harbor.bind_addrs",["0.0.0.0"])',
            "",
            'set("tag.encodings",["UTF-8","ISO-8859-1"])',
            'set("encoder.encoder.export",["artist","title","album","song"])',
            "",
            "# AutoDJ Next Song Script",
            "def autodj_next_song() =",
            f"  uri = get_process_lines({get_api_command(station, 'nextsong', options)})",
            '  uri = list.hd(uri, default="")',
            '  log("AutoDJ Raw Response: #{uri}")',
            "  ",
            '  if uri == "" or string.match(pattern="Error", uri) then',
            '    log("AutoDJ Error: Delaying subsequent requests...")',
            '    system("sleep 2")',
            '    request.create("")',
            "  else",
            "    request.create(uri)",
            "  end",
            "end",
            "",
            "# DJ Authentication",
            "def dj_auth(user,password) =",
            '  log("Authenticating DJ: #{user}")',
            "  ret = get_process_lines({})".format(get_api_command(
                station, "auth", options, {"dj_user": RuntimeValue("user"), "dj_password": RuntimeValue("password")}
            )),
            '  ret = list.hd(ret, default="")',
            '  log("DJ Auth Response: #{ret}")',
            "  bool_of_string(ret)",
            "end",
            "",
            "live_enabled = ref false",
            "",
            "def live_connected(header) =",
            '  log("DJ Source connected! #{header}")',
            "  live_enabled := true",
            f"  ret = get_process_lines({get_api_command(station, 'djon', options)})",
            '  log("Live Connected Response: #{ret}")',
            "end",
            "",
            "def live_disconnected() =",
            '  log("DJ Source disconnected!")',
            "  live_enabled := false",
            f"  ret = get_process_lines({get_api_command(station, 'djoff', options)})",
            '  log("Live Disconnected Response: #{ret}")',
            "end",
        ]
        script.append_lines(lines)

    async def ensure_default_playlist(self, station: Station) -> list[StationPlaylist]:
        """Enabled playlists in order, creating an empty default playlist if none exists."""
        playlists = [p for p in station.playlists if p.is_enabled]
        if any(p.type == PlaylistType.DEFAULT for p in playlists):
            return playlists

        logger.info(
            "No default playlist existed for station %s (%s); new one was automatically created.",
            station.id, station.name,
        )
        default_playlist = StationPlaylist(
            name="default",
            is_enabled=True,
            type=PlaylistType.DEFAULT,
            source=PlaylistSource.SONGS,
            order=PlaylistOrder.SHUFFLE,
            weight=3,
            media_items=[],
        )
        station.playlists.append(default_playlist)
        await self.db.flush()

        playlists.append(default_playlist)
        return playlists

    async def write_playlist_configuration(self, script: LiquidsoapScript) -> None:
        station = script.station
        playlists = await self.ensure_default_playlist(station)

        if script.workdir is None:
            raise ConfigurationWriteError("Playlist stage needs a working directory for track lists")

        compiler = PlaylistCompiler(
            station,
            playlists_dir=self.options.playlists_dir(station),
            staging_dir=script.workdir,
            media_dir=self.options.media_dir(station),
            use_manual_autodj=get_backend_config(station).use_manual_autodj,
            utc_offset=self.utc_offset,
        )
        script.append_lines(compiler.compile(playlists))

    async def write_harbor_configuration(self, script: LiquidsoapScript) -> None:
        station = script.station
        settings = get_backend_config(station)
        charset = settings.charset

        harbor_params = [
            '"/"',
            f'id="{get_var_name("input_streamer", station)}"',
            f"port={get_stream_port(station)}",
            'user="shoutcast"',
            "auth=dj_auth",
            "icy=true",
            "max=30.",
            f"buffer={int(settings.dj_buffer)}.",
            f'icy_metadata_charset="{charset}"',
            f'metadata_charset="{charset}"',
            "on_connect=live_connected",
            "on_disconnect=live_disconnected",
        ]

        live_fallback_id = get_var_name("live_fallback", station)
        live_switch_id = get_var_name("live_switch", station)
        script.append_lines([
            "# Live Broadcasting",
            f"live = audio_to_stereo(input.harbor({', '.join(harbor_params)}))",
            "ignore(output.dummy(live, fallible=true))",
            f'live = fallback(id="{live_fallback_id}", track_sensitive=false, [live, blank(duration=2.)])',
            "",
            f'radio = switch(id="{live_switch_id}", track_sensitive=false, [({{!live_enabled}}, live), ({{true}}, radio)])',
        ])

    async def write_custom_configuration(self, script: LiquidsoapScript) -> None:
        settings = get_backend_config(script.station)

        crossfade = round(settings.crossfade, 1)
        if crossfade > 0:
            start_next = round(crossfade * 1.5, 2)
            script.append_lines([
                "# Crossfading",
                f"radio = crossfade(start_next={to_float(start_next)},fade_out={to_float(crossfade)},"
                f"fade_in={to_float(crossfade)},radio)",
            ])

        script.append_lines([
            "# Apply amplification metadata (if supplied)",
            "radio = amplify(1., radio)",
        ])

        # Passed through verbatim; the station owner is responsible for its syntax.
        if settings.custom_config:
            script.append_lines([
                "# Custom Configuration (Specified in Station Profile)",
                settings.custom_config,
            ])

    async def write_local_broadcast_configuration(self, script: LiquidsoapScript) -> None:
        script.append_lines(get_local_broadcast_lines(script.station))

    async def write_remote_broadcast_configuration(self, script: LiquidsoapScript) -> None:
        script.append_lines(get_remote_broadcast_lines(script.station))


async def write_configuration(
    db: AsyncSession, station: Station, options: GeneratorOptions | None = None
) -> Path:
    return await LiquidsoapConfigurator(db, options).write(station)


def get_binary(options: GeneratorOptions) -> str | None:
    """Locate the Liquidsoap executable, preferring an opam install next to the app."""
    if options.liquidsoap_binary:
        return options.liquidsoap_binary

    opam_path = os.path.join(os.path.dirname(options.include_root), ".opam/system/bin/liquidsoap")
    if options.inside_docker or os.path.exists(opam_path):
        return opam_path

    legacy_path = "/usr/bin/liquidsoap"
    if os.path.exists(legacy_path):
        return legacy_path
    return None


def get_command(station: Station, options: GeneratorOptions) -> str:
    """Command line a process supervisor runs to start the station's engine."""
    binary = get_binary(options)
    if binary:
        return f"{binary} {options.config_path(station)}"
    return "/bin/false"
