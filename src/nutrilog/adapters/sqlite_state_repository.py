"""SQLite repository for serialized application state."""

import json
from dataclasses import dataclass
from datetime import UTC, datetime

from nutrilog.adapters.sqlite_database import SqliteDatabase
from nutrilog.services.app_state import StateRepository


@dataclass
class SqliteStateRepository(StateRepository):
    """Stores each state partition as one JSON document."""

    database: SqliteDatabase

    async def load(self, partition: str) -> dict[str, object] | None:
        row = await self.database.run(
            lambda connection: connection.execute(
                "SELECT payload FROM app_state WHERE partition = ?", (partition,)
            ).fetchone()
        )
        if row is None:
            return None
        return json.loads(row["payload"])

    async def save(self, partition: str, payload: dict[str, object]) -> None:
        await self.database.run(
            lambda connection: connection.execute(
                """
                INSERT INTO app_state (partition, payload, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT (partition) DO UPDATE SET
                    payload = excluded.payload, updated_at = excluded.updated_at
                """,
                (partition, json.dumps(payload), datetime.now(tz=UTC).isoformat()),
            )
        )

    async def clear(self) -> None:
        await self.database.run(
            lambda connection: connection.execute("DELETE FROM app_state")
        )
