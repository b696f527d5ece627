"""
Shell commands the generated script runs to reach back into the platform
(next song lookup, DJ authentication, live connect/disconnect notifications).
"""
import shlex
from dataclasses import dataclass, field

from liquidcast.models.station import Station
from liquidcast.services.liquidsoap.options import GeneratorOptions


@dataclass(frozen=True)
class RuntimeValue:
    """A Liquidsoap variable filled in when the callout runs, such as the connecting DJ's user name."""

    variable: str

    def render(self) -> str:
        # string.quote shell-escapes the value inside the engine
        return f"#{{string.quote({self.variable})}}"


ParamValue = str | RuntimeValue


def quote_argument(key: str, value: ParamValue) -> str:
    """One ``key=value`` shell word. Static values are quoted now, runtime values by the engine."""
    if isinstance(value, RuntimeValue):
        return f"{key}={value.render()}"
    return shlex.quote(f"{key}={value}")


def to_liquidsoap_string(value: str) -> str:
    """Wrap a value in a double-quoted Liquidsoap string literal."""
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


@dataclass(frozen=True)
class ApiCommand:
    endpoint: str
    station_id: int
    params: dict[str, ParamValue] = field(default_factory=dict)
    api_key: str | None = None

    def render(self, options: GeneratorOptions) -> str:
        if options.inside_docker:
            return self._render_curl(options)
        return self._render_cli(options)

    def _render_curl(self, options: GeneratorOptions) -> str:
        params = dict(self.params)
        params["api_auth"] = self.api_key or ""

        api_url = f"{options.internal_api_url}/{self.station_id}/{self.endpoint}"
        parts = ["curl", "-s", "--request", "POST", "--url", shlex.quote(api_url)]
        for key, value in params.items():
            parts += ["--form", quote_argument(key, value)]
        return " ".join(parts)

    def _render_cli(self, options: GeneratorOptions) -> str:
        parts = [
            options.internal_cli_command,
            shlex.quote(f"liquidcast:internal:{self.endpoint}"),
            str(self.station_id),
        ]
        for key, value in self.params.items():
            parts.append(quote_argument(f"--{key}", value))
        return " ".join(parts)


def get_api_command(
    station: Station,
    endpoint: str,
    options: GeneratorOptions,
    params: dict[str, ParamValue] | None = None,
) -> str:
    """Rendered callout, ready to embed in the script as a string literal."""
    command = ApiCommand(
        endpoint=endpoint,
        station_id=station.id,
        params=params or {},
        api_key=station.adapter_api_key,
    )
    return to_liquidsoap_string(command.render(options))
