"""SQLite repository for weight entries."""

import sqlite3
from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

from nutrilog.adapters.sqlite_database import SqliteDatabase
from nutrilog.domain.weight import WeightEntry
from nutrilog.services.weight import WeightRepository


@dataclass
class SqliteWeightRepository(WeightRepository):
    """SQLite-backed repository for weight history."""

    database: SqliteDatabase

    async def add_entry(
        self, user_id: UUID, weight: float, day: date, notes: str | None
    ) -> WeightEntry:
        entry = WeightEntry(
            id=uuid4(), user_id=user_id, weight=weight, date=day, notes=notes
        )
        await self.database.run(
            lambda connection: connection.execute(
                """
                INSERT INTO weight_entries (id, user_id, weight, date, notes, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    str(entry.id),
                    str(user_id),
                    weight,
                    day.isoformat(),
                    notes,
                    datetime.now(tz=UTC).isoformat(),
                ),
            )
        )
        return entry

    async def list_entries(
        self, user_id: UUID, since: date | None = None
    ) -> list[WeightEntry]:
        query = "SELECT * FROM weight_entries WHERE user_id = ?"
        params: list[object] = [str(user_id)]
        if since is not None:
            query += " AND date >= ?"
            params.append(since.isoformat())
        query += " ORDER BY date DESC, created_at DESC"
        rows = await self.database.run(
            lambda connection: connection.execute(query, params).fetchall()
        )
        return [_parse_entry(row) for row in rows]

    async def get_latest(self, user_id: UUID) -> WeightEntry | None:
        return await self._first_by(user_id, "DESC")

    async def get_first(self, user_id: UUID) -> WeightEntry | None:
        return await self._first_by(user_id, "ASC")

    async def _first_by(self, user_id: UUID, direction: str) -> WeightEntry | None:
        row = await self.database.run(
            lambda connection: connection.execute(
                "SELECT * FROM weight_entries WHERE user_id = ? "  # noqa: S608
                f"ORDER BY date {direction}, created_at {direction} LIMIT 1",
                (str(user_id),),
            ).fetchone()
        )
        return _parse_entry(row) if row else None


def _parse_entry(row: sqlite3.Row) -> WeightEntry:
    return WeightEntry(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        weight=float(row["weight"]),
        date=date.fromisoformat(row["date"]),
        notes=row["notes"],
    )
