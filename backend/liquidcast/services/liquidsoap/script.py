"""
Line buffer for a Liquidsoap script plus the formatting helpers shared by the
generation stages.
"""
import math
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from liquidcast.models.station import Station, get_short_name


class LiquidsoapScript:
    """Ordered lines of one configuration pass. Stages only ever add to it."""

    def __init__(self, station: Station, workdir: Path | None = None):
        self.station = station
        # Receives files generated alongside the script (playlist track lists)
        self.workdir = workdir
        self._lines: list[str] = []

    def append_lines(self, lines: Iterable[str]) -> None:
        self._lines.extend(lines)

    def prepend_lines(self, lines: Iterable[str]) -> None:
        self._lines[:0] = list(lines)

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def build(self) -> str:
        return "\n".join(self._lines) + "\n"


def to_float(number: float, decimals: int = 2) -> str:
    """Render a number the way Liquidsoap expects floats: ``2.`` or ``2.50``."""
    if int(number) == number:
        return f"{int(number)}."
    return f"{number:.{decimals}f}"


def clean_up_string(value: str | None) -> str:
    """Make a user-supplied value safe inside a double-quoted Liquidsoap string."""
    if not value:
        return ""
    return value.replace('"', "'").replace("\n", "").replace("\r", "")


def get_var_name(name: str, station: Station) -> str:
    """Station-prefixed identifier used for ids the control client addresses later."""
    short_name = get_short_name(station.short_name or "")
    if short_name:
        return f"{short_name}_{name}"
    return f"station_{station.id}_{name}"


def get_system_utc_offset() -> int:
    """Seconds the host's local time is ahead of UTC right now."""
    offset = datetime.now(timezone.utc).astimezone().utcoffset()
    return int(offset.total_seconds()) if offset else 0


def get_time(time_code: int, utc_offset: int | None = None) -> str:
    """
    Convert an HHMM time code into a Liquidsoap time predicate such as ``23h30m``.

    Liquidsoap evaluates predicates in the host's local time while schedules are
    stored in UTC, so the hour is shifted by the host's offset in whole hours.
    """
    hours = time_code // 100
    mins = time_code % 100

    if utc_offset is None:
        utc_offset = get_system_utc_offset()
    if utc_offset:
        hours += math.floor(utc_offset / 3600)

    hours %= 24
    return f"{hours}h{mins}m"
