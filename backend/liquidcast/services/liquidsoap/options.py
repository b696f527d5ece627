from dataclasses import dataclass
from pathlib import Path

from liquidcast.config import Settings, settings as app_settings
from liquidcast.models.station import Station, get_short_name


@dataclass(frozen=True)
class GeneratorOptions:
    """Installation-wide values the generator and control client depend on."""

    stations_base_dir: Path
    include_root: str
    inside_docker: bool
    internal_api_url: str
    internal_cli_command: str
    telnet_host: str
    telnet_timeout: float = 20.0
    liquidsoap_binary: str = ""

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "GeneratorOptions":
        settings = settings or app_settings
        return cls(
            stations_base_dir=Path(settings.STATIONS_BASE_DIR),
            include_root=settings.INCLUDE_ROOT,
            inside_docker=settings.INSIDE_DOCKER,
            internal_api_url=settings.INTERNAL_API_URL.rstrip("/"),
            internal_cli_command=settings.internal_cli_command,
            telnet_host=settings.liquidsoap_telnet_host,
            telnet_timeout=settings.LIQUIDSOAP_TELNET_TIMEOUT,
            liquidsoap_binary=settings.LIQUIDSOAP_BINARY,
        )

    def station_base_dir(self, station: Station) -> Path:
        if station.radio_base_dir:
            return Path(station.radio_base_dir)
        return self.stations_base_dir / (get_short_name(station.short_name or "") or f"station_{station.id}")

    def config_dir(self, station: Station) -> Path:
        return self.station_base_dir(station) / "config"

    def playlists_dir(self, station: Station) -> Path:
        return self.station_base_dir(station) / "playlists"

    def media_dir(self, station: Station) -> Path:
        return self.station_base_dir(station) / "media"

    def config_path(self, station: Station) -> Path:
        return self.config_dir(station) / "liquidsoap.liq"
