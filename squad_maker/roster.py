"""In-memory roster backed by the SQLite participant store."""

import sqlite3 as sql
from typing import Callable, List, Sequence, Tuple

from . import db
from .models import Participant, Tier
from .validators import validate_unique_ids


class RosterError(Exception):
    """Raised when the participant store rejects a roster change."""


class Roster:
    """Roster of participants mirrored in memory and in the database.

    Every mutation is written to the store first; if the store fails, the
    database transaction is rolled back, the in-memory list is restored to
    its previous snapshot and a ``RosterError`` is raised.
    """

    def __init__(self, conn: sql.Connection):
        """Initialize the roster.

        Args:
            conn: Open SQLite connection holding the participants table
        """
        self.conn = conn
        self._participants: List[Participant] = []

    @property
    def participants(self) -> Tuple[Participant, ...]:
        """Read-only snapshot of the current roster."""
        return tuple(self._participants)

    def __len__(self) -> int:
        return len(self._participants)

    def load(self) -> Tuple[Participant, ...]:
        """Load the roster from the store, creating the table if needed."""
        try:
            db.ensure_schema(self.conn)
            self._participants = db.fetch_participants(self.conn)
        except sql.Error as e:
            raise RosterError(f"Failed to load participants: {e}") from e
        return self.participants

    def get(self, participant_id: str) -> Participant:
        """Look up a participant by id.

        Raises:
            KeyError: If no participant has this id
        """
        for participant in self._participants:
            if participant.id == participant_id:
                return participant
        raise KeyError(participant_id)

    def _apply(self, action: str, store_change: Callable[[], None], new_state: List[Participant]) -> None:
        snapshot = list(self._participants)
        self._participants = new_state
        try:
            store_change()
        except (sql.Error, KeyError) as e:
            self.conn.rollback()
            self._participants = snapshot
            raise RosterError(f"Failed to {action}: {e}") from e

    def add(self, name: str, tier) -> Participant:
        """Register a new participant.

        Args:
            name: Display name, trimmed and limited to 20 characters
            tier: Tier or tier letter

        Returns:
            The created participant

        Raises:
            ValueError: If the name or tier is invalid
            RosterError: If the store fails
        """
        participant = Participant.create(name, tier)
        self._apply(
            f"add {participant.name}",
            lambda: db.insert_participant(self.conn, participant),
            self._participants + [participant],
        )
        return participant

    def remove(self, participant_id: str) -> Participant:
        participant = self.get(participant_id)
        self._apply(
            f"remove {participant.name}",
            lambda: db.delete_participant(self.conn, participant_id),
            [p for p in self._participants if p.id != participant_id],
        )
        return participant

    def _replace_one(self, action: str, updated: Participant) -> Participant:
        self._apply(
            action,
            lambda: db.update_participant(self.conn, updated),
            [updated if p.id == updated.id else p for p in self._participants],
        )
        return updated

    def update_tier(self, participant_id: str, tier) -> Participant:
        updated = self.get(participant_id).with_tier(tier)
        return self._replace_one(f"update tier of {updated.name}", updated)

    def update_name(self, participant_id: str, name: str) -> Participant:
        updated = self.get(participant_id).with_name(name)
        return self._replace_one(f"rename {participant_id}", updated)

    def clear(self) -> None:
        self._apply("delete all participants", lambda: db.delete_all_participants(self.conn), [])

    def import_participants(self, participants: Sequence[Participant]) -> None:
        """Replace the whole roster.

        Raises:
            InvalidConfigError: If two participants share an id
            RosterError: If the store fails
        """
        validate_unique_ids(participants)
        self._apply(
            "import participants",
            lambda: db.replace_participants(self.conn, participants),
            list(participants),
        )

    def filter_by_tier(self, tier) -> List[Participant]:
        tier = Tier.parse(tier)
        return [p for p in self._participants if p.tier == tier]
