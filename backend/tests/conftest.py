import asyncio
import os
from collections.abc import AsyncIterator
from pathlib import Path

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# SQLite compatibility: compile PostgreSQL types to SQLite equivalents
from sqlalchemy.dialects.postgresql import JSONB, ENUM as PG_ENUM
from sqlalchemy.ext.compiler import compiles

from liquidcast.db.base import Base
from liquidcast.db.session import get_db
from liquidcast.main import create_app
from liquidcast.models import (
    FrontendType,
    Station,
    StationMount,
    StationPlaylist,
    PlaylistOrder,
    PlaylistSource,
    PlaylistType,
)
from liquidcast.services.liquidsoap.options import GeneratorOptions
from liquidcast.services.station_service import get_station


@compiles(JSONB, "sqlite")
def compile_jsonb(type_, compiler, **kw):
    return "TEXT"


@compiles(PG_ENUM, "sqlite")
def compile_enum(type_, compiler, **kw):
    return "VARCHAR(50)"


def _set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest_asyncio.fixture
async def db_engine(tmp_path: Path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    event.listen(engine.sync_engine, "connect", _set_sqlite_pragma)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncIterator[AsyncSession]:
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    app = create_app()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def options(tmp_path: Path) -> GeneratorOptions:
    return GeneratorOptions(
        stations_base_dir=tmp_path / "stations",
        include_root="/var/liquidcast/www",
        inside_docker=False,
        internal_api_url="http://nginx/api/internal",
        internal_cli_command="/usr/bin/python3 /var/liquidcast/www/util/cli.py",
        telnet_host="127.0.0.1",
        telnet_timeout=2.0,
    )


def make_playlist(name: str, **kwargs) -> StationPlaylist:
    """Playlist with every column filled, usable without a database."""
    values = {
        "is_enabled": True,
        "type": PlaylistType.DEFAULT,
        "source": PlaylistSource.SONGS,
        "order": PlaylistOrder.SHUFFLE,
        "weight": 3,
        "play_per_songs": 0,
        "play_per_minutes": 0,
        "schedule_start_time": 0,
        "schedule_end_time": 0,
        "play_once_time": 0,
        "media_items": [],
    }
    values.update(kwargs)
    return StationPlaylist(name=name, **values)


def make_station(**kwargs) -> Station:
    values = {
        "name": "Test Radio",
        "short_name": "test_radio",
        "description": "All tests, all day",
        "url": "https://radio.example.com",
        "is_enabled": True,
        "frontend_type": FrontendType.ICECAST,
        "frontend_config": {"port": 8000, "source_pw": "hackme"},
        "backend_config": {},
        "is_streamer_live": False,
        "disconnect_deactivate_streamer": 0,
        "playlists": [],
        "mounts": [],
        "remotes": [],
    }
    values.update(kwargs)
    return Station(**values)


@pytest_asyncio.fixture
async def create_station(db_session: AsyncSession):
    """Persist a station (with children) and reload it the way the app would."""

    async def _create(**kwargs) -> Station:
        kwargs.setdefault("mounts", [StationMount(name="/radio.mp3", enable_autodj=True, is_public=True)])
        station = make_station(**kwargs)
        db_session.add(station)
        await db_session.commit()
        station_id = station.id
        db_session.expunge_all()
        return await get_station(db_session, station_id)

    return _create


class FakeTelnetServer:
    """Stands in for Liquidsoap's telnet server on a random local port."""

    def __init__(self, responses: dict[str, list[str]] | None = None):
        self.responses = responses or {}
        self.commands: list[str] = []
        self.port: int | None = None
        self._server: asyncio.AbstractServer | None = None

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        while True:
            line = await reader.readline()
            if not line:
                break
            command = line.decode().strip()
            if command == "quit":
                writer.write(b"Bye!\n")
                break
            self.commands.append(command)
            for response_line in self.responses.get(command, []):
                writer.write(response_line.encode() + b"\n")
            writer.write(b"END\n")
        await writer.drain()
        writer.close()

    async def start(self) -> "FakeTelnetServer":
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        self.port = self._server.sockets[0].getsockname()[1]
        return self

    async def stop(self) -> None:
        if self._server:
            self._server.close()
            await self._server.wait_closed()


@pytest_asyncio.fixture
async def telnet_server() -> AsyncIterator[FakeTelnetServer]:
    server = await FakeTelnetServer().start()
    yield server
    await server.stop()
