"""SQLite session store: one row per player session, state kept as JSON."""

import sqlite3
from datetime import datetime
from pathlib import Path

from pydantic import TypeAdapter

from careersim.core.schemas import (
    DecisionRecord,
    GameSession,
    JobHuntProgress,
    SeedStats,
    SelectorState,
)
from careersim.profile.schema import PlayerProfile

_DECISIONS = TypeAdapter(list[DecisionRecord])

_SESSIONS_TABLE = """
CREATE TABLE IF NOT EXISTS sessions (
    session_id      TEXT PRIMARY KEY,
    created_at      TEXT NOT NULL,
    updated_at      TEXT NOT NULL,
    track           TEXT NOT NULL,
    current_state   TEXT NOT NULL,
    ending          TEXT,
    profile_json    TEXT NOT NULL,
    stats_json      TEXT NOT NULL,
    progress_json   TEXT NOT NULL,
    selector_json   TEXT NOT NULL,
    decisions_json  TEXT NOT NULL DEFAULT '[]'
);
"""


def init_db(path: str | Path) -> sqlite3.Connection:
    """Create the database and tables, returning a connection."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(_SESSIONS_TABLE)
    conn.commit()
    return conn


def save_session(conn: sqlite3.Connection, session: GameSession) -> None:
    """Insert or update a session by session_id."""
    session.updated_at = datetime.now()
    decisions = _DECISIONS.dump_json(session.decisions).decode()
    conn.execute(
        """
        INSERT INTO sessions
            (session_id, created_at, updated_at, track, current_state, ending,
             profile_json, stats_json, progress_json, selector_json, decisions_json)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(session_id)
        DO UPDATE SET
            updated_at = excluded.updated_at,
            current_state = excluded.current_state,
            ending = excluded.ending,
            stats_json = excluded.stats_json,
            progress_json = excluded.progress_json,
            selector_json = excluded.selector_json,
            decisions_json = excluded.decisions_json
        """,
        (
            session.session_id,
            session.created_at.isoformat(),
            session.updated_at.isoformat(),
            session.profile.track,
            session.progress.phase.state,
            session.progress.ending.type if session.progress.ending else None,
            session.profile.model_dump_json(),
            session.stats.model_dump_json(),
            session.progress.model_dump_json(),
            session.selector.model_dump_json(),
            decisions,
        ),
    )
    conn.commit()


def load_session(conn: sqlite3.Connection, session_id: str) -> GameSession | None:
    """Return the stored session, or None if it does not exist."""
    row = conn.execute(
        "SELECT * FROM sessions WHERE session_id = ?",
        (session_id,),
    ).fetchone()
    if row is None:
        return None
    return GameSession(
        session_id=row["session_id"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
        profile=PlayerProfile.model_validate_json(row["profile_json"]),
        stats=SeedStats.model_validate_json(row["stats_json"]),
        progress=JobHuntProgress.model_validate_json(row["progress_json"]),
        selector=SelectorState.model_validate_json(row["selector_json"]),
        decisions=_DECISIONS.validate_json(row["decisions_json"]),
    )


def list_sessions(conn: sqlite3.Connection) -> list[tuple[str, str, str | None]]:
    """Return (session_id, current_state, ending) for every stored session, newest first."""
    rows = conn.execute(
        "SELECT session_id, current_state, ending FROM sessions ORDER BY updated_at DESC"
    ).fetchall()
    return [(r["session_id"], r["current_state"], r["ending"]) for r in rows]


def delete_session(conn: sqlite3.Connection, session_id: str) -> bool:
    """Delete a session. Returns True if a row was removed."""
    cursor = conn.execute("DELETE FROM sessions WHERE session_id = ?", (session_id,))
    conn.commit()
    return cursor.rowcount > 0
