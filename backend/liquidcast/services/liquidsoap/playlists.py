"""
Playlist stage of the Liquidsoap configuration.

Every enabled playlist becomes a source variable; its type decides which
combinator it is folded into:

    default             -> random(weights=[...], [...])   (the base stream)
    once_per_x_songs    -> rotate(weights=[1, N], [playlist, radio])
    once_per_x_minutes  -> fallback([delay(N*60., playlist), radio])
    scheduled/once/day  -> switch([({ predicate }, playlist), ..., ({ true }, radio)])

The switch is then placed behind the request source (manual queue or AutoDJ
lookup) and in front of a short silence.
"""
import logging
from pathlib import Path

from liquidcast.models.station import Station
from liquidcast.models.station_playlist import (
    PlaylistOrder,
    PlaylistSource,
    PlaylistType,
    StationPlaylist,
)
from liquidcast.services.liquidsoap.script import clean_up_string, get_time, get_var_name, to_float

logger = logging.getLogger(__name__)


def export_playlist(playlist: StationPlaylist, media_dir: Path) -> str:
    """Plain M3U: one absolute track path per line."""
    paths = [str(media_dir / item.media.path) for item in playlist.media_items]
    return "\n".join(paths)


class PlaylistCompiler:
    def __init__(
        self,
        station: Station,
        playlists_dir: Path,
        staging_dir: Path,
        media_dir: Path,
        use_manual_autodj: bool = False,
        utc_offset: int | None = None,
    ):
        self.station = station
        # Track lists are written to staging_dir but referenced by their final location.
        self.playlists_dir = playlists_dir
        self.staging_dir = staging_dir
        self.media_dir = media_dir
        self.use_manual_autodj = use_manual_autodj
        self.utc_offset = utc_offset
        self._var_names: set[str] = set()

    def _playlist_var_name(self, playlist: StationPlaylist) -> str:
        base = "playlist_" + (playlist.short_name or str(playlist.id))
        var_name = base
        suffix = 2
        while var_name in self._var_names:
            var_name = f"{base}_{suffix}"
            suffix += 1
        self._var_names.add(var_name)
        return var_name

    def _source_line(self, playlist: StationPlaylist, var_name: str) -> str:
        if playlist.source == PlaylistSource.REMOTE_URL:
            url = clean_up_string(playlist.remote_url)
            return f'{var_name} = audio_to_stereo(mksafe(input.http("{url}")))'

        file_name = f"{var_name}.m3u"
        (self.staging_dir / file_name).write_text(export_playlist(playlist, self.media_dir), encoding="utf-8")

        mode = "normal" if playlist.order == PlaylistOrder.SEQUENTIAL else "randomize"
        params = [
            'reload_mode="watch"',
            f'mode="{mode}"',
            f'"{self.playlists_dir / file_name}"',
        ]
        return f"{var_name} = audio_to_stereo(playlist({','.join(params)}))"

    def compile(self, playlists: list[StationPlaylist]) -> list[str]:
        lines = ["# Fallback Playlists"]

        weights: list[str] = []
        default_vars: list[str] = []
        once_per_songs = ["# Once per x Songs Playlists"]
        once_per_minutes = ["# Once per x Minutes Playlists"]
        schedule_switches: list[str] = []

        for playlist in playlists:
            var_name = self._playlist_var_name(playlist)
            lines.append(self._source_line(playlist, var_name))

            if playlist.type == PlaylistType.ADVANCED:
                lines.append(f"ignore({var_name})")

            elif playlist.type == PlaylistType.DEFAULT:
                weights.append(str(playlist.weight))
                default_vars.append(var_name)

            elif playlist.type == PlaylistType.ONCE_PER_X_SONGS:
                once_per_songs.append(
                    f"radio = rotate(weights=[1,{playlist.play_per_songs}], [{var_name}, radio])"
                )

            elif playlist.type == PlaylistType.ONCE_PER_X_MINUTES:
                delay_seconds = to_float(playlist.play_per_minutes * 60)
                once_per_minutes.append(f"delay_{var_name} = delay({delay_seconds}, {var_name})")
                once_per_minutes.append(f"radio = fallback([delay_{var_name}, radio])")

            elif playlist.type == PlaylistType.SCHEDULED:
                play_time = (
                    get_time(playlist.schedule_start_time, self.utc_offset)
                    + "-"
                    + get_time(playlist.schedule_end_time, self.utc_offset)
                )
                schedule_switches.append(f"({{ {play_time} }}, {var_name})")

            elif playlist.type == PlaylistType.ONCE_PER_DAY:
                play_time = get_time(playlist.play_once_time, self.utc_offset)
                schedule_switches.append(f"({{ {play_time} }}, {var_name})")

        if not default_vars:
            logger.warning("Station %s has no enabled default playlist in this pass", self.station.id)

        lines.append("")
        lines.append("# Standard Playlists")
        lines.append(f"radio = random(weights=[{', '.join(weights)}], [{', '.join(default_vars)}])")
        lines.append("")

        for special in (once_per_songs, once_per_minutes):
            if len(special) > 1:
                lines.extend(special)
                lines.append("")

        schedule_switches.append("({ true }, radio)")
        lines.append("# Assemble final playback order")
        lines.extend(self._final_fallback(schedule_switches))
        return lines

    def _final_fallback(self, schedule_switches: list[str]) -> list[str]:
        lines = []
        fallbacks = []

        if self.use_manual_autodj:
            requests_id = get_var_name("requests", self.station)
            lines.append(f'requests = audio_to_stereo(request.queue(id="{requests_id}"))')
            fallbacks.append("requests")
        else:
            next_song_id = get_var_name("next_song", self.station)
            cue_cut_id = get_var_name("cue_cut", self.station)
            lines.append(
                f'dynamic = audio_to_stereo(request.dynamic(id="{next_song_id}", timeout=20., autodj_next_song))'
            )
            lines.append(f'dynamic = cue_cut(id="{cue_cut_id}", dynamic)')
            fallbacks.append("dynamic")

        fallbacks.append(f"switch([ {', '.join(schedule_switches)} ])")
        fallbacks.append("blank(duration=2.)")

        fallback_id = get_var_name("playlist_fallback", self.station)
        track_sensitive = "true" if self.use_manual_autodj else "false"
        lines.append(
            f'radio = fallback(id="{fallback_id}", track_sensitive = {track_sensitive}, [{", ".join(fallbacks)}])'
        )
        return lines
