"""
Roster Store

Holds the participant roster as immutable snapshots and keeps a durable
JSON copy of it. Every edit builds a new tuple; earlier snapshots handed to
the engine or to a caller never change.
Edits are serialized so concurrent requests cannot lose each other's changes.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Optional, Sequence, Tuple

from .models import Participant
from .processor import SettlementProcessor
from .validators import ROSTER_FIELDS, RosterValidator

logger = logging.getLogger(__name__)

DEFAULT_ROSTER_PATH = "party_roster.json"
EXPORT_FILENAME = "partyPeople.json"

Roster = Tuple[Participant, ...]


def default_roster() -> Roster:
    """A fresh roster starts with one blank, enabled row."""
    return (Participant(),)


class RosterStore:
    """Roster holder with file persistence. path=None keeps it in memory."""

    def __init__(self, path: Optional[str | Path] = DEFAULT_ROSTER_PATH):
        self.path = Path(path) if path is not None else None
        self.validator = RosterValidator()
        # Re-entrant: toggle goes through update, every edit through _commit
        self._lock = threading.RLock()
        self._roster: Roster = self._load()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def snapshot(self) -> Roster:
        return self._roster

    def export_document(self) -> str:
        """Serialize the roster as a pretty-printed JSON array."""
        return json.dumps([p.to_dict() for p in self._roster], indent=2)

    def settle(self, processor: Optional[SettlementProcessor] = None) -> dict:
        """Run the engine over the current snapshot."""
        processor = processor or SettlementProcessor()
        return processor.process_to_dict(self._roster)

    # -------------------------------------------------------------------------
    # Edits (each one commits a new snapshot)
    # -------------------------------------------------------------------------

    def add_participant(self, name: str = "", spent=0, alias: str = "", enabled: bool = True) -> Roster:
        record = {"name": name, "spent": spent, "alias": alias, "enabled": enabled}
        with self._lock:
            self.validator.validate_record(record, len(self._roster))
            return self._commit(self._roster + (Participant.from_dict(record),))

    def update_participant(self, index: int, **fields) -> Roster:
        """Change name, alias, spent and/or enabled on one participant."""
        unknown = set(fields) - set(ROSTER_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update unknown fields: {sorted(unknown)}")

        with self._lock:
            current = self._get(index)
            self.validator.validate_record(fields, index)
            updated = current.with_changes(**fields)
            return self._commit(self._roster[:index] + (updated,) + self._roster[index + 1:])

    def toggle_participant(self, index: int) -> Roster:
        with self._lock:
            current = self._get(index)
            return self.update_participant(index, enabled=not current.enabled)

    def delete_participant(self, index: int) -> Roster:
        with self._lock:
            self._get(index)
            return self._commit(self._roster[:index] + self._roster[index + 1:])

    def clear_spent(self) -> Roster:
        """Zero every participant's spending; names, aliases and flags stay."""
        with self._lock:
            return self._commit(tuple(p.with_changes(spent=0) for p in self._roster))

    def replace(self, participants: Sequence[Participant]) -> Roster:
        return self._commit(tuple(participants))

    def import_document(self, text: str) -> Roster:
        """
        Replace the roster with the contents of a JSON document.

        Raises ValueError with a readable message when the document is not
        valid JSON or not an array of participant records. The current
        roster is left untouched in that case.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Could not import roster: invalid JSON ({e.msg})") from e

        return self.import_records(data)

    def import_records(self, data) -> Roster:
        """Replace the roster with already-parsed records, validating first."""
        try:
            self.validator.validate(data)
        except ValueError as e:
            raise ValueError(f"Could not import roster: {e}") from e

        logger.info(f"Importing roster with {len(data)} participants")
        return self.replace([Participant.from_dict(record) for record in data])

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _get(self, index: int) -> Participant:
        if not 0 <= index < len(self._roster):
            raise ValueError(f"No participant at index {index}")
        return self._roster[index]

    def _commit(self, roster: Roster) -> Roster:
        with self._lock:
            self._roster = roster
            self._save()
        return roster

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.write_text(self.export_document())

    def _load(self) -> Roster:
        if self.path is None or not self.path.exists():
            return default_roster()

        try:
            data = json.loads(self.path.read_text())
            self.validator.validate(data)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable roster file {self.path}: {e}")
            return default_roster()

        logger.info(f"Loaded roster from {self.path} ({len(data)} participants)")
        return tuple(Participant.from_dict(record) for record in data)
