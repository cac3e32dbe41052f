"""Completed session history with JSON file storage."""

from __future__ import annotations

import csv
import json
import logging
import os
import tempfile
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from .filters import DateRangeFilter, local_now

logger = logging.getLogger(__name__)

HISTORY_KEY = "sessionHistory"


class SessionKind(Enum):
    """Kind of a recorded session, using the persisted spelling."""

    FOCUS = "focus"
    SHORT_BREAK = "shortBreak"


def _parse_timestamp(value: Any) -> datetime:
    """Accept ISO 8601 strings or epoch seconds."""
    if isinstance(value, bool):
        raise TypeError("timestamp must be a string or number")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc).astimezone()
    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.astimezone()
    raise TypeError(f"unsupported timestamp value: {value!r}")


@dataclass(frozen=True)
class SessionRecord:
    """A completed session. Never mutated after creation."""

    duration_seconds: float
    kind: SessionKind = SessionKind.FOCUS
    timestamp: datetime = field(default_factory=local_now)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def local_day(self):
        """Calendar day of the record in the local zone."""
        return self.timestamp.astimezone().date()

    def to_dict(self) -> dict:
        """Convert to the persisted layout."""
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "durationSeconds": self.duration_seconds,
            "kind": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> SessionRecord:
        """Create from the persisted layout. Unknown keys are ignored.

        Raises:
            KeyError: ``timestamp`` or ``durationSeconds`` is missing
            ValueError, TypeError: a field cannot be decoded
        """
        duration = float(data["durationSeconds"])
        return cls(
            id=str(data.get("id") or uuid.uuid4()),
            timestamp=_parse_timestamp(data["timestamp"]),
            duration_seconds=duration,
            kind=SessionKind(data.get("kind", SessionKind.FOCUS.value)),
        )


class HistoryStore:
    """Append-only collection of completed sessions.

    The whole collection is rewritten on every mutation. Storage errors are
    logged and never raised: the in-memory list stays authoritative and the
    next mutation retries the write.
    """

    def __init__(
        self,
        path: Path | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the store and load existing history."""
        if path is None:
            from platformdirs import user_data_dir

            path = Path(user_data_dir("pomo_cli")) / "history.json"

        self.path = path
        self.clock = clock or local_now
        self._records: list[SessionRecord] = []
        self._dirty = False
        self._load()

    @property
    def records(self) -> tuple[SessionRecord, ...]:
        """Snapshot of all records in insertion order."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def append(
        self,
        duration_seconds: float,
        kind: SessionKind = SessionKind.FOCUS,
        timestamp: datetime | None = None,
    ) -> SessionRecord:
        """
        Record a completed session and persist the collection.

        Args:
            duration_seconds: Length of the session
            kind: Focus or short break
            timestamp: Completion time, defaults to the store clock

        Returns:
            The stored record
        """
        record = SessionRecord(
            duration_seconds=float(duration_seconds),
            kind=kind,
            timestamp=timestamp if timestamp is not None else self.clock(),
        )
        self._records.append(record)
        logger.info(
            "Recorded %s session of %.0fs (%s)", kind.value, duration_seconds, record.id
        )
        self._save()
        return record

    def clear(self) -> None:
        """Remove every record. Irreversible."""
        count = len(self._records)
        self._records.clear()
        logger.info("Cleared %d session records", count)
        self._save()

    def query(self, option: DateRangeFilter) -> list[SessionRecord]:
        """Records whose timestamp falls inside the resolved range."""
        date_range = option.resolve(self.clock())
        return [r for r in self._records if date_range.contains(r.timestamp)]

    def focus_sessions(self, option: DateRangeFilter) -> list[SessionRecord]:
        """Focus records inside the resolved range."""
        return [r for r in self.query(option) if r.kind is SessionKind.FOCUS]

    def export_csv(self, path: Path) -> Path:
        """Write all records to a CSV file."""
        path = Path(path)
        with path.open("w", newline="", encoding="utf-8") as fh:
            writer = csv.DictWriter(
                fh, fieldnames=["id", "timestamp", "duration_seconds", "kind"]
            )
            writer.writeheader()
            for record in self._records:
                writer.writerow(
                    {
                        "id": record.id,
                        "timestamp": record.timestamp.isoformat(),
                        "duration_seconds": record.duration_seconds,
                        "kind": record.kind.value,
                    }
                )
        logger.info("Exported %d records to %s", len(self._records), path)
        return path

    @property
    def has_unsaved_changes(self) -> bool:
        """True when the last write failed."""
        return self._dirty

    def _load(self) -> None:
        """Read the persisted blob. Any decode failure yields empty history."""
        if not self.path.exists():
            return

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            raw_records = data[HISTORY_KEY] if isinstance(data, dict) else data
            if not isinstance(raw_records, list):
                raise TypeError(f"expected a list under {HISTORY_KEY!r}")
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Failed to decode session history at %s: %s", self.path, e)
            self._records = []
            return

        records = []
        for raw in raw_records:
            try:
                records.append(SessionRecord.from_dict(raw))
            except (KeyError, ValueError, TypeError, OverflowError, OSError) as e:
                logger.warning("Skipping unreadable session record %r: %s", raw, e)
        self._records = records
        logger.debug("Loaded %d session records from %s", len(records), self.path)

    def _save(self) -> None:
        """Replace the persisted blob with the current collection."""
        payload = {HISTORY_KEY: [r.to_dict() for r in self._records]}
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=".history-", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, self.path)
            tmp_name = None
            self.path.chmod(0o600)
            self._dirty = False
        except (OSError, TypeError, ValueError):
            self._dirty = True
            logger.exception("Failed to save session history to %s", self.path)
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
