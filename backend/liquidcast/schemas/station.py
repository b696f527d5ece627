from pydantic import BaseModel


class BackendConfig(BaseModel):
    """Liquidsoap settings stored in Station.backend_config."""

    model_config = {"extra": "ignore"}

    crossfade: float = 2
    dj_buffer: int = 5
    charset: str = "UTF-8"
    custom_config: str | None = None
    use_manual_autodj: bool = False
    dj_port: int | None = None
    telnet_port: int | None = None


class FrontendConfig(BaseModel):
    """Icecast/SHOUTcast settings stored in Station.frontend_config."""

    model_config = {"extra": "ignore"}

    port: int | None = None
    source_pw: str = ""
    admin_pw: str | None = None


class ConfigWriteResponse(BaseModel):
    station_id: int
    path: str
    lines: int


class TrackRequest(BaseModel):
    uri: str


class LiveStatusUpdate(BaseModel):
    is_live: bool


class CommandResponse(BaseModel):
    status: str
    response: list[str]
