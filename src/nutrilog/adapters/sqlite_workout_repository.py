"""SQLite repository for exercises and workout sessions."""

import json
import sqlite3
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

from nutrilog.adapters.sqlite_database import SqliteDatabase
from nutrilog.domain.workouts import (
    Exercise,
    ExerciseCategory,
    ExerciseSet,
    Intensity,
    MuscleGroup,
    StrengthSet,
    WorkoutSession,
)
from nutrilog.services.workouts import WorkoutRepository


@dataclass
class SqliteWorkoutRepository(WorkoutRepository):
    """SQLite-backed repository for the exercise catalog and workouts."""

    database: SqliteDatabase

    async def list_exercises(self) -> list[Exercise]:
        rows = await self.database.run(
            lambda connection: connection.execute(
                "SELECT * FROM exercises ORDER BY name COLLATE NOCASE"
            ).fetchall()
        )
        return [_parse_exercise(row) for row in rows]

    async def get_exercise(self, exercise_id: UUID) -> Exercise | None:
        row = await self.database.run(
            lambda connection: connection.execute(
                "SELECT * FROM exercises WHERE id = ?", (str(exercise_id),)
            ).fetchone()
        )
        return _parse_exercise(row) if row else None

    async def create_session(self, session: WorkoutSession) -> WorkoutSession:
        """Insert the session, its exercise sets and strength sets together."""

        def insert(connection: sqlite3.Connection) -> None:
            connection.execute(
                """
                INSERT INTO workout_sessions (
                    id, user_id, date, total_duration, calories_burned, notes,
                    created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(session.id),
                    str(session.user_id),
                    session.date.isoformat(),
                    session.total_duration,
                    session.calories_burned,
                    session.notes,
                    datetime.now(tz=UTC).isoformat(),
                ),
            )
            for position, exercise_set in enumerate(session.exercises):
                connection.execute(
                    """
                    INSERT INTO exercise_sets (
                        id, workout_session_id, exercise_id, position, duration,
                        distance, intensity, calories_burned
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        str(exercise_set.id),
                        str(session.id),
                        str(exercise_set.exercise_id),
                        position,
                        exercise_set.duration,
                        exercise_set.distance,
                        (
                            exercise_set.intensity.value
                            if exercise_set.intensity
                            else None
                        ),
                        exercise_set.calories_burned,
                    ),
                )
                connection.executemany(
                    """
                    INSERT INTO strength_sets (
                        id, exercise_set_id, position, reps, weight, rest_time
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            str(uuid4()),
                            str(exercise_set.id),
                            set_position,
                            strength.reps,
                            strength.weight,
                            strength.rest_time,
                        )
                        for set_position, strength in enumerate(exercise_set.sets)
                    ],
                )

        await self.database.run(insert)
        return session

    async def get_session(self, session_id: UUID) -> WorkoutSession | None:
        def select(connection: sqlite3.Connection) -> WorkoutSession | None:
            row = connection.execute(
                "SELECT * FROM workout_sessions WHERE id = ?", (str(session_id),)
            ).fetchone()
            if row is None:
                return None
            return _hydrate_sessions(connection, [row])[0]

        return await self.database.run(select)

    async def delete_session(self, session_id: UUID) -> None:
        await self.database.run(
            lambda connection: connection.execute(
                "DELETE FROM workout_sessions WHERE id = ?", (str(session_id),)
            )
        )

    async def list_sessions(
        self, user_id: UUID, start: date, end: date
    ) -> list[WorkoutSession]:
        def select(connection: sqlite3.Connection) -> list[WorkoutSession]:
            rows = connection.execute(
                """
                SELECT * FROM workout_sessions
                WHERE user_id = ? AND date BETWEEN ? AND ?
                ORDER BY date DESC, created_at DESC
                """,
                (str(user_id), start.isoformat(), end.isoformat()),
            ).fetchall()
            return _hydrate_sessions(connection, rows)

        return await self.database.run(select)


def _hydrate_sessions(
    connection: sqlite3.Connection, rows: Sequence[sqlite3.Row]
) -> list[WorkoutSession]:
    if not rows:
        return []
    session_ids = [row["id"] for row in rows]
    set_rows = connection.execute(
        "SELECT * FROM exercise_sets WHERE workout_session_id IN "  # noqa: S608
        f"({', '.join('?' for _ in session_ids)}) ORDER BY position",
        session_ids,
    ).fetchall()
    set_ids = [row["id"] for row in set_rows]
    strength_rows = (
        connection.execute(
            "SELECT * FROM strength_sets WHERE exercise_set_id IN "  # noqa: S608
            f"({', '.join('?' for _ in set_ids)}) ORDER BY position",
            set_ids,
        ).fetchall()
        if set_ids
        else []
    )
    strength_by_set: dict[str, list[StrengthSet]] = {}
    for row in strength_rows:
        strength_by_set.setdefault(row["exercise_set_id"], []).append(
            StrengthSet(
                reps=int(row["reps"]),
                weight=float(row["weight"]),
                rest_time=row["rest_time"],
            )
        )
    sets_by_session: dict[str, list[ExerciseSet]] = {}
    for row in set_rows:
        sets_by_session.setdefault(row["workout_session_id"], []).append(
            ExerciseSet(
                id=UUID(row["id"]),
                exercise_id=UUID(row["exercise_id"]),
                calories_burned=int(row["calories_burned"]),
                duration=row["duration"],
                distance=row["distance"],
                intensity=Intensity(row["intensity"]) if row["intensity"] else None,
                sets=strength_by_set.get(row["id"], []),
            )
        )
    return [
        WorkoutSession(
            id=UUID(row["id"]),
            user_id=UUID(row["user_id"]),
            date=date.fromisoformat(row["date"]),
            exercises=sets_by_session.get(row["id"], []),
            total_duration=int(row["total_duration"]),
            calories_burned=int(row["calories_burned"]),
            notes=row["notes"],
        )
        for row in rows
    ]


def _parse_exercise(row: sqlite3.Row) -> Exercise:
    return Exercise(
        id=UUID(row["id"]),
        name=row["name"],
        category=ExerciseCategory(row["category"]),
        muscle_groups=[
            MuscleGroup(value) for value in json.loads(row["muscle_groups"])
        ],
        met_value=row["met_value"],
        instructions=row["instructions"],
    )
