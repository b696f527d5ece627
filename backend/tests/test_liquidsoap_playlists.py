import re
from pathlib import Path

import pytest

from liquidcast.models import (
    PlaylistOrder,
    PlaylistSource,
    PlaylistType,
    StationMedia,
    StationPlaylistMedia,
)
from liquidcast.services.liquidsoap.playlists import PlaylistCompiler

from conftest import make_playlist, make_station


@pytest.fixture
def dirs(tmp_path: Path):
    staging = tmp_path / ".playlists.staging"
    staging.mkdir()
    return {
        "playlists_dir": tmp_path / "playlists",
        "staging_dir": staging,
        "media_dir": tmp_path / "media",
    }


def compile_lines(playlists, dirs, **kwargs):
    station = make_station(id=1)
    compiler = PlaylistCompiler(station, utc_offset=0, **dirs, **kwargs)
    return compiler.compile(playlists)


def test_single_default_playlist(dirs):
    playlist = make_playlist(
        "Rock Hits",
        weight=1,
        media_items=[
            StationPlaylistMedia(position=0, media=StationMedia(path="rock/one.mp3")),
            StationPlaylistMedia(position=1, media=StationMedia(path="rock/two.mp3")),
        ],
    )
    lines = compile_lines([playlist], dirs)

    assert lines[0] == "# Fallback Playlists"
    assert lines[1] == (
        'playlist_rock_hits = audio_to_stereo(playlist(reload_mode="watch",mode="randomize",'
        f'"{dirs["playlists_dir"] / "playlist_rock_hits.m3u"}"))'
    )
    assert "radio = random(weights=[1], [playlist_rock_hits])" in lines
    assert sum("request.dynamic(" in line for line in lines) == 1
    assert lines[-1] == (
        'radio = fallback(id="test_radio_playlist_fallback", track_sensitive = false, '
        "[dynamic, switch([ ({ true }, radio) ]), blank(duration=2.)])"
    )

    m3u = dirs["staging_dir"] / "playlist_rock_hits.m3u"
    assert m3u.read_text().splitlines() == [
        str(dirs["media_dir"] / "rock/one.mp3"),
        str(dirs["media_dir"] / "rock/two.mp3"),
    ]
    # Nothing is written to the live directory directly
    assert not dirs["playlists_dir"].exists()


def test_sequential_playlist_mode(dirs):
    lines = compile_lines([make_playlist("Ordered", order=PlaylistOrder.SEQUENTIAL)], dirs)
    assert 'mode="normal"' in lines[1]


def test_manual_autodj_uses_request_queue(dirs):
    lines = compile_lines([make_playlist("default")], dirs, use_manual_autodj=True)

    assert 'requests = audio_to_stereo(request.queue(id="test_radio_requests"))' in lines
    assert not any("request.dynamic" in line for line in lines)
    assert "track_sensitive = true" in lines[-1]
    assert "[requests, switch(" in lines[-1]


def test_weights_follow_playlist_order(dirs):
    playlists = [
        make_playlist("Pop", weight=5),
        make_playlist("Jazz", weight=2),
        make_playlist("Jingles", type=PlaylistType.ONCE_PER_X_SONGS, play_per_songs=4),
        make_playlist("Talk", weight=1),
    ]
    lines = compile_lines(playlists, dirs)

    random_line = next(line for line in lines if line.startswith("radio = random("))
    assert random_line == "radio = random(weights=[5, 2, 1], [playlist_pop, playlist_jazz, playlist_talk])"

    weights, sources = re.match(r"radio = random\(weights=\[(.*)\], \[(.*)\]\)", random_line).groups()
    assert len(weights.split(", ")) == len(sources.split(", "))


def test_once_per_songs_nests_in_playlist_order(dirs):
    playlists = [
        make_playlist("default"),
        make_playlist("Promo A", type=PlaylistType.ONCE_PER_X_SONGS, play_per_songs=5),
        make_playlist("Promo B", type=PlaylistType.ONCE_PER_X_SONGS, play_per_songs=10),
    ]
    lines = compile_lines(playlists, dirs)

    first = lines.index("radio = rotate(weights=[1,5], [playlist_promo_a, radio])")
    second = lines.index("radio = rotate(weights=[1,10], [playlist_promo_b, radio])")
    assert lines.index("# Once per x Songs Playlists") < first < second
    assert lines.index("radio = random(weights=[3], [playlist_default])") < first


def test_once_per_minutes_uses_delay(dirs):
    playlists = [
        make_playlist("default"),
        make_playlist("Station ID", type=PlaylistType.ONCE_PER_X_MINUTES, play_per_minutes=30),
    ]
    lines = compile_lines(playlists, dirs)

    delay_line = lines.index("delay_playlist_station_id = delay(1800., playlist_station_id)")
    assert lines[delay_line + 1] == "radio = fallback([delay_playlist_station_id, radio])"


def test_scheduled_playlists_build_switch(dirs):
    playlists = [
        make_playlist("default"),
        make_playlist(
            "Work Day", type=PlaylistType.SCHEDULED, schedule_start_time=900, schedule_end_time=1700
        ),
        make_playlist("Evening Show", type=PlaylistType.ONCE_PER_DAY, play_once_time=2030),
    ]
    lines = compile_lines(playlists, dirs)

    assert (
        "switch([ ({ 9h0m-17h0m }, playlist_work_day), ({ 20h30m }, playlist_evening_show), "
        "({ true }, radio) ])"
    ) in lines[-1]


def test_remote_url_playlist(dirs):
    playlist = make_playlist(
        "Relay", source=PlaylistSource.REMOTE_URL, remote_url="http://example.com/stream"
    )
    lines = compile_lines([make_playlist("default"), playlist], dirs)

    assert 'playlist_relay = audio_to_stereo(mksafe(input.http("http://example.com/stream")))' in lines
    assert not (dirs["staging_dir"] / "playlist_relay.m3u").exists()


def test_advanced_playlist_is_ignored(dirs):
    playlists = [make_playlist("default"), make_playlist("Scripted", type=PlaylistType.ADVANCED)]
    lines = compile_lines(playlists, dirs)

    assert "ignore(playlist_scripted)" in lines
    assert "radio = random(weights=[3], [playlist_default])" in lines


def test_duplicate_short_names_get_suffix(dirs):
    playlists = [make_playlist("Rock"), make_playlist("rock")]
    lines = compile_lines(playlists, dirs)

    assert "radio = random(weights=[3, 3], [playlist_rock, playlist_rock_2])" in lines
    assert (dirs["staging_dir"] / "playlist_rock_2.m3u").exists()


def test_no_default_playlist_logs_warning(dirs, caplog):
    lines = compile_lines([make_playlist("Promo", type=PlaylistType.ONCE_PER_X_SONGS, play_per_songs=3)], dirs)

    assert "radio = random(weights=[], [])" in lines
    assert "no enabled default playlist" in caplog.text
