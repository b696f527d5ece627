import pytest
from httpx import AsyncClient

from liquidcast.config import settings


@pytest.fixture(autouse=True)
def local_settings(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "STATIONS_BASE_DIR", str(tmp_path / "stations"))
    monkeypatch.setattr(settings, "INSIDE_DOCKER", False)
    monkeypatch.setattr(settings, "LIQUIDSOAP_TELNET_HOST", "127.0.0.1")
    monkeypatch.setattr(settings, "LIQUIDSOAP_TELNET_TIMEOUT", 2.0)


@pytest.mark.asyncio
async def test_write_config(client: AsyncClient, create_station, tmp_path):
    station = await create_station()

    response = await client.post(f"/api/v1/stations/{station.id}/liquidsoap/config")
    assert response.status_code == 200
    data = response.json()
    assert data["station_id"] == station.id
    assert data["path"] == str(tmp_path / "stations" / "test_radio" / "config" / "liquidsoap.liq")
    assert data["lines"] > 20

    with open(data["path"], encoding="utf-8") as f:
        assert f.readline() == "# WARNING! This file is automatically generated by Liquidcast.\n"


@pytest.mark.asyncio
async def test_write_config_unknown_station(client: AsyncClient):
    response = await client.post("/api/v1/stations/999/liquidsoap/config")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_request_track(client: AsyncClient, create_station, telnet_server):
    station = await create_station(backend_config={"telnet_port": telnet_server.port})
    telnet_server.responses["test_radio_requests.queue"] = [""]
    telnet_server.responses["test_radio_requests.push /music/a.mp3"] = ["7"]

    response = await client.post(
        f"/api/v1/stations/{station.id}/backend/request", json={"uri": "/music/a.mp3"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "queued"
    assert data["response"][0] == "7"


@pytest.mark.asyncio
async def test_request_track_queue_busy(client: AsyncClient, create_station, telnet_server):
    station = await create_station(backend_config={"telnet_port": telnet_server.port})
    telnet_server.responses["test_radio_requests.queue"] = ["3"]

    response = await client.post(
        f"/api/v1/stations/{station.id}/backend/request", json={"uri": "/music/a.mp3"}
    )
    assert response.status_code == 409
    assert response.json()["detail"] == "Song(s) still pending in request queue."


@pytest.mark.asyncio
async def test_skip(client: AsyncClient, create_station, telnet_server):
    station = await create_station(backend_config={"telnet_port": telnet_server.port})

    response = await client.post(f"/api/v1/stations/{station.id}/backend/skip")
    assert response.status_code == 200
    assert telnet_server.commands == ["test_radio_local_1.skip"]


@pytest.mark.asyncio
async def test_skip_engine_unreachable(client: AsyncClient, create_station, telnet_server):
    station = await create_station(backend_config={"telnet_port": telnet_server.port})
    await telnet_server.stop()

    response = await client.post(f"/api/v1/stations/{station.id}/backend/skip")
    assert response.status_code == 502
    assert "Telnet failure" in response.json()["detail"]


@pytest.mark.asyncio
async def test_disconnect(client: AsyncClient, create_station, telnet_server):
    station = await create_station(backend_config={"telnet_port": telnet_server.port})

    response = await client.post(f"/api/v1/stations/{station.id}/backend/disconnect")
    assert response.status_code == 200
    assert telnet_server.commands == ["test_radio_input_streamer.stop"]


@pytest.mark.asyncio
async def test_set_live(client: AsyncClient, create_station):
    station = await create_station()

    response = await client.post(f"/api/v1/stations/{station.id}/backend/live", json={"is_live": True})
    assert response.status_code == 200
    assert response.json() == {"station_id": station.id, "is_streamer_live": True}


@pytest.mark.asyncio
async def test_write_config_failure(client: AsyncClient, create_station, monkeypatch):
    from liquidcast.services.liquidsoap.generator import LiquidsoapConfigurator

    async def broken_stage(self, script):
        raise OSError("disk full")

    monkeypatch.setattr(LiquidsoapConfigurator, "write_custom_configuration", broken_stage)
    station = await create_station()

    response = await client.post(f"/api/v1/stations/{station.id}/liquidsoap/config")
    assert response.status_code == 500
    assert "disk full" in response.json()["detail"]
