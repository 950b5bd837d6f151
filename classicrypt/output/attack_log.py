"""
Attack Log
===========

Append-only CSV record of every simulated attack, one row per run::

    timestamp,username,attack_type,target,attempts,elapsed_seconds,success,recovered_plaintext

Elapsed time is written with three decimals and success as lowercase
``true``/``false``. Fields are quoted by :mod:`csv` when needed.
"""

from __future__ import annotations

import csv
import datetime as _dt
from pathlib import Path
from typing import Optional

from classicrypt.core.models import AttackLogEntry, AttackOutcome

HEADER: tuple[str, ...] = tuple(AttackLogEntry.model_fields)


class AttackLog:
    """CSV attack log at *path*; the header is written on first use."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_header(self) -> None:
        if self._path.exists() and self._path.stat().st_size > 0:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", newline="", encoding="utf-8") as fh:
            csv.writer(fh).writerow(HEADER)

    def append(self, entry: AttackLogEntry) -> None:
        self._ensure_header()
        with open(self._path, "a", newline="", encoding="utf-8") as fh:
            csv.writer(fh).writerow(
                [
                    entry.timestamp,
                    entry.username,
                    entry.attack_type,
                    entry.target,
                    entry.attempts,
                    f"{entry.elapsed_seconds:.3f}",
                    "true" if entry.success else "false",
                    entry.recovered_plaintext,
                ]
            )

    def record(
        self,
        username: str,
        outcome: AttackOutcome,
        timestamp: Optional[_dt.datetime] = None,
    ) -> AttackLogEntry:
        """Append one row for *outcome* and return it."""
        stamp = timestamp or _dt.datetime.now(_dt.timezone.utc)
        entry = AttackLogEntry(
            timestamp=stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            username=username,
            attack_type=outcome.attack_type.value,
            target=outcome.target,
            attempts=outcome.attempts,
            elapsed_seconds=outcome.elapsed_seconds,
            success=outcome.success,
            recovered_plaintext=outcome.recovered,
        )
        self.append(entry)
        return entry

    def read(self) -> list[AttackLogEntry]:
        """All logged rows, oldest first; empty when the log does not exist."""
        if not self._path.exists():
            return []
        with open(self._path, newline="", encoding="utf-8") as fh:
            return [AttackLogEntry.model_validate(row) for row in csv.DictReader(fh)]
