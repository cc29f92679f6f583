"""Data access layer for JSON documents."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from .engine import get_db_path

LOCAL_NAMESPACE = "local"


class DocumentRepository:
    """Repository for JSON documents keyed by name within a namespace."""

    def __init__(self, db_path: Path | None = None, namespace: str = LOCAL_NAMESPACE):
        self.db_path = db_path or get_db_path()
        self.namespace = namespace

    async def get(self, key: str) -> Any | None:
        """Get a decoded document, or None if the key is missing.

        Raises:
            json.JSONDecodeError: If the stored payload is not valid JSON
        """
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT payload FROM documents WHERE namespace = ? AND key = ?",
                (self.namespace, key),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return json.loads(row["payload"])

    async def put(self, key: str, value: Any) -> None:
        """Create or replace a document."""
        await self.put_many({key: value})

    async def put_many(self, documents: dict[str, Any]) -> None:
        """Create or replace several documents in one transaction."""
        now = datetime.now().isoformat()
        rows = [
            (self.namespace, key, json.dumps(value), now)
            for key, value in documents.items()
        ]
        async with aiosqlite.connect(self.db_path) as db:
            await db.executemany(
                """
                INSERT INTO documents (namespace, key, payload, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(namespace, key) DO UPDATE SET
                    payload = excluded.payload,
                    updated_at = excluded.updated_at
                """,
                rows,
            )
            await db.commit()

    async def delete(self, key: str) -> bool:
        """Delete a document. Returns False if it did not exist."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "DELETE FROM documents WHERE namespace = ? AND key = ?",
                (self.namespace, key),
            )
            await db.commit()
            return cursor.rowcount > 0
