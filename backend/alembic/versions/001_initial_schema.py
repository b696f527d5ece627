"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # Enums (stored by member name)
    frontend_type = postgresql.ENUM("ICECAST", "SHOUTCAST", "REMOTE", name="frontend_type", create_type=False)
    frontend_type.create(op.get_bind(), checkfirst=True)

    playlist_source = postgresql.ENUM("SONGS", "REMOTE_URL", name="playlist_source", create_type=False)
    playlist_source.create(op.get_bind(), checkfirst=True)

    playlist_order = postgresql.ENUM("SEQUENTIAL", "SHUFFLE", name="playlist_order", create_type=False)
    playlist_order.create(op.get_bind(), checkfirst=True)

    playlist_type = postgresql.ENUM(
        "DEFAULT", "ONCE_PER_X_SONGS", "ONCE_PER_X_MINUTES", "SCHEDULED", "ONCE_PER_DAY", "ADVANCED",
        name="playlist_type", create_type=False,
    )
    playlist_type.create(op.get_bind(), checkfirst=True)

    remote_type = postgresql.ENUM("SHOUTCAST1", "SHOUTCAST2", "ICECAST", name="remote_type", create_type=False)
    remote_type.create(op.get_bind(), checkfirst=True)

    # Stations
    op.create_table(
        "stations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("short_name", sa.String(100), nullable=True, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("frontend_type", frontend_type, nullable=False, server_default="ICECAST"),
        sa.Column("frontend_config", postgresql.JSONB(), nullable=True),
        sa.Column("backend_config", postgresql.JSONB(), nullable=True),
        sa.Column("radio_base_dir", sa.Text(), nullable=True),
        sa.Column("adapter_api_key", sa.String(150), nullable=True),
        sa.Column("is_streamer_live", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("disconnect_deactivate_streamer", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_streamer_id", sa.Integer(), nullable=True),
        *_timestamps(),
    )

    # Streamers (DJ accounts)
    op.create_table(
        "station_streamers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("station_id", sa.Integer(), sa.ForeignKey("stations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("streamer_username", sa.String(50), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("reactivate_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_station_streamers_station_id", "station_streamers", ["station_id"])
    op.create_foreign_key(
        "fk_stations_current_streamer", "stations", "station_streamers",
        ["current_streamer_id"], ["id"], ondelete="SET NULL",
    )

    # Media
    op.create_table(
        "station_media",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("station_id", sa.Integer(), sa.ForeignKey("stations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("path", sa.Text(), nullable=False),
        sa.Column("title", sa.String(500), nullable=True),
        sa.Column("artist", sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_station_media_station_id", "station_media", ["station_id"])

    # Playlists
    op.create_table(
        "station_playlists",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("station_id", sa.Integer(), sa.ForeignKey("stations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("source", playlist_source, nullable=False, server_default="SONGS"),
        sa.Column("playback_order", playlist_order, nullable=False, server_default="SHUFFLE"),
        sa.Column("type", playlist_type, nullable=False, server_default="DEFAULT"),
        sa.Column("remote_url", sa.Text(), nullable=True),
        sa.Column("weight", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("play_per_songs", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("play_per_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("schedule_start_time", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("schedule_end_time", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("play_once_time", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_station_playlists_station_id", "station_playlists", ["station_id"])

    op.create_table(
        "station_playlist_media",
        sa.Column(
            "playlist_id", sa.Integer(),
            sa.ForeignKey("station_playlists.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column("media_id", sa.Integer(), sa.ForeignKey("station_media.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
    )

    # Local mounts
    op.create_table(
        "station_mounts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("station_id", sa.Integer(), sa.ForeignKey("stations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("enable_autodj", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("autodj_format", sa.String(10), nullable=True, server_default="mp3"),
        sa.Column("autodj_bitrate", sa.Integer(), nullable=True, server_default="128"),
        *_timestamps(),
    )
    op.create_index("ix_station_mounts_station_id", "station_mounts", ["station_id"])

    # Remote relays
    op.create_table(
        "station_remotes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("station_id", sa.Integer(), sa.ForeignKey("stations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", remote_type, nullable=False, server_default="ICECAST"),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("mount", sa.String(150), nullable=True),
        sa.Column("enable_autodj", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("autodj_format", sa.String(10), nullable=True),
        sa.Column("autodj_bitrate", sa.Integer(), nullable=True),
        sa.Column("source_port", sa.Integer(), nullable=True),
        sa.Column("source_mount", sa.String(150), nullable=True),
        sa.Column("source_username", sa.String(100), nullable=True),
        sa.Column("source_password", sa.String(100), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_station_remotes_station_id", "station_remotes", ["station_id"])


def downgrade() -> None:
    op.drop_table("station_remotes")
    op.drop_table("station_mounts")
    op.drop_table("station_playlist_media")
    op.drop_table("station_playlists")
    op.drop_table("station_media")
    op.drop_constraint("fk_stations_current_streamer", "stations", type_="foreignkey")
    op.drop_table("station_streamers")
    op.drop_table("stations")

    op.execute("DROP TYPE IF EXISTS remote_type")
    op.execute("DROP TYPE IF EXISTS playlist_type")
    op.execute("DROP TYPE IF EXISTS playlist_order")
    op.execute("DROP TYPE IF EXISTS playlist_source")
    op.execute("DROP TYPE IF EXISTS frontend_type")
