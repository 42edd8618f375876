import sqlite3 as sql
from datetime import datetime
from typing import Iterable

from squad_maker.models import Participant, Tier

def truncate_participants(conn: sql.Connection) -> None:
  """Truncate the participants table."""
  conn.execute("DROP TABLE IF EXISTS participants")
  conn.execute("""CREATE TABLE participants (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    tier TEXT NOT NULL CHECK (tier IN ('S', 'A', 'B', 'C', 'D')),
    created_at TEXT NOT NULL
  )""")
  conn.commit()

def ensure_schema(conn: sql.Connection) -> None:
  """Create the participants table if it is missing."""
  exists = conn.execute(
    "SELECT COUNT(*) FROM sqlite_master WHERE type = 'table' AND name = 'participants'"
  ).fetchone()[0]
  if not exists:
    truncate_participants(conn)

def _to_row(participant: Participant) -> tuple[str, str, str, str]:
  return (
    participant.id,
    participant.name,
    participant.tier.value,
    participant.created_at.isoformat(),
  )

def _from_row(row: tuple[str, str, str, str]) -> Participant:
  participant_id, name, tier, created_at = row
  return Participant(
    id=participant_id,
    name=name,
    tier=Tier(tier),
    created_at=datetime.fromisoformat(created_at),
  )

def num_participants(conn: sql.Connection) -> int:
  """Get the number of participants in the database."""
  return conn.execute("SELECT COUNT(*) FROM participants").fetchone()[0]

def fetch_participants(conn: sql.Connection) -> list[Participant]:
  """Fetch every participant, oldest first."""
  rows = conn.execute(
    "SELECT id, name, tier, created_at FROM participants ORDER BY created_at, rowid"
  ).fetchall()
  return [_from_row(row) for row in rows]

def insert_participant(conn: sql.Connection, participant: Participant) -> None:
  conn.execute(
    "INSERT INTO participants (id, name, tier, created_at) VALUES (?, ?, ?, ?)",
    _to_row(participant),
  )
  conn.commit()

def update_participant(conn: sql.Connection, participant: Participant) -> None:
  cursor = conn.execute(
    "UPDATE participants SET name = ?, tier = ? WHERE id = ?",
    (participant.name, participant.tier.value, participant.id),
  )
  if cursor.rowcount == 0:
    raise KeyError(participant.id)
  conn.commit()

def delete_participant(conn: sql.Connection, participant_id: str) -> None:
  conn.execute("DELETE FROM participants WHERE id = ?", (participant_id,))
  conn.commit()

def delete_all_participants(conn: sql.Connection) -> None:
  conn.execute("DELETE FROM participants")
  conn.commit()

def replace_participants(conn: sql.Connection, participants: Iterable[Participant]) -> None:
  """Replace the whole roster in a single transaction."""
  conn.execute("DELETE FROM participants")
  conn.executemany(
    "INSERT INTO participants (id, name, tier, created_at) VALUES (?, ?, ?, ?)",
    [_to_row(participant) for participant in participants],
  )
  conn.commit()
