"""
Output stages: one output.icecast() per local mount and per remote relay.
"""
import logging
from urllib.parse import urlparse

from liquidcast.models.station import FrontendType, Station
from liquidcast.models.station_remote import RemoteType
from liquidcast.services.liquidsoap.script import clean_up_string, get_var_name
from liquidcast.services.station_service import get_backend_config, get_frontend_config, get_frontend_port

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "mp3"
DEFAULT_BITRATE = 128


def _strip_quotes(value: str) -> str:
    return value.replace('"', "")


def get_encoder(fmt: str, bitrate: int) -> str:
    bitrate = int(bitrate)
    if fmt == "aac":
        return (
            f"%fdkaac(channels=2, samplerate=44100, bitrate={bitrate}, afterburner=true, "
            f'aot="mpeg4_he_aac_v2", transmux="adts", sbr_mode=true)'
        )
    if fmt == "ogg":
        return f"%vorbis.cbr(samplerate=44100, channels=2, bitrate={bitrate})"
    if fmt == "opus":
        return f'%opus(bitrate={bitrate}, vbr="none", application="audio", channels=2, signal="music")'
    return f"%mp3(samplerate=44100,stereo=true,bitrate={bitrate}, id3v2=true)"


def get_output_string(
    station: Station,
    stream_id: str,
    host: str,
    port: int,
    mount: str | None,
    username: str | None,
    password: str,
    fmt: str,
    bitrate: int,
    encoding: str = "UTF-8",
    is_public: bool = False,
    shoutcast_mode: bool = False,
) -> str:
    params = [
        get_encoder(fmt, bitrate),
        f'id="{stream_id}"',
        f'host = "{_strip_quotes(host)}"',
        f"port = {int(port)}",
    ]
    if username:
        params.append(f'user = "{_strip_quotes(username)}"')
    params.append(f'password = "{_strip_quotes(password)}"')
    if mount:
        params.append(f'mount = "{_strip_quotes(mount)}"')

    params.append(f'name = "{clean_up_string(station.name)}"')
    params.append(f'description = "{clean_up_string(station.description)}"')
    if station.url:
        params.append(f'url = "{clean_up_string(station.url)}"')

    params.append(f"public = {'true' if is_public else 'false'}")
    params.append(f'encoding = "{encoding}"')
    if shoutcast_mode:
        params.append('protocol="icy"')
    params.append("radio")

    return f"output.icecast({', '.join(params)})"


def get_local_broadcast_lines(station: Station) -> list[str]:
    lines = ["# Local Broadcasts"]
    if station.frontend_type == FrontendType.REMOTE:
        return lines

    charset = get_backend_config(station).charset
    frontend = get_frontend_config(station)
    port = get_frontend_port(station)
    shoutcast_mode = station.frontend_type == FrontendType.SHOUTCAST

    for i, mount in enumerate(station.mounts, start=1):
        if not mount.enable_autodj:
            continue

        if shoutcast_mode:
            # SHOUTcast 2 picks the stream id from a password suffix.
            mount_name = None
            password = f"{frontend.source_pw}:#{i}"
        else:
            mount_name = mount.name
            password = frontend.source_pw

        lines.append(get_output_string(
            station,
            get_var_name(f"local_{i}", station),
            "127.0.0.1",
            port,
            mount_name,
            "",
            password,
            (mount.autodj_format or DEFAULT_FORMAT).lower(),
            mount.autodj_bitrate or DEFAULT_BITRATE,
            charset,
            mount.is_public,
            shoutcast_mode,
        ))
    return lines


def _default_port(scheme: str) -> int:
    return 443 if scheme == "https" else 80


def get_remote_broadcast_lines(station: Station) -> list[str]:
    lines = ["# Remote Relays"]
    charset = get_backend_config(station).charset

    for i, remote in enumerate(station.remotes, start=1):
        if not remote.enable_autodj:
            continue

        username = remote.source_username
        password = remote.source_password or ""
        mount = remote.source_mount or remote.mount

        if remote.type == RemoteType.SHOUTCAST1:
            mount = None
        elif remote.type == RemoteType.SHOUTCAST2:
            password += f":#{mount or ''}"
            mount = None

        url_parts = urlparse(remote.url)
        port = remote.source_port
        if port is None:
            port = url_parts.port or _default_port(url_parts.scheme)
            logger.debug("Relay %s has no source port, using %s from its URL", remote.id, port)

        lines.append(get_output_string(
            station,
            get_var_name(f"relay_{i}", station),
            url_parts.hostname or "",
            port,
            mount,
            username,
            password,
            (remote.autodj_format or DEFAULT_FORMAT).lower(),
            remote.autodj_bitrate or DEFAULT_BITRATE,
            charset,
            False,
            remote.type != RemoteType.ICECAST,
        ))
    return lines
