"""Database engine setup and initialization."""

from pathlib import Path

import aiosqlite

from ..config import get_config


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path, creating its directory."""
    storage = get_config().storage
    if data_dir is None:
        data_dir = storage.data_dir
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / storage.db_filename


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    if db_path is None:
        db_path = get_db_path()

    async with aiosqlite.connect(db_path) as db:
        # One JSON document per (namespace, key). The local device uses a
        # single namespace; the sync server uses one per user.
        await db.execute("""
            CREATE TABLE IF NOT EXISTS documents (
                namespace TEXT NOT NULL,
                key TEXT NOT NULL,
                payload TEXT NOT NULL,
                updated_at TIMESTAMP NOT NULL,
                PRIMARY KEY (namespace, key)
            )
        """)

        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_documents_namespace
            ON documents(namespace)
        """)

        await db.commit()
