"""
Credential Store
=================

JSON-file persistence for credential records::

    {"users": [{"username": "alice", "mode": "weak", ...}, ...]}

Each record is validated on its own into :class:`WeakCredential` or
:class:`SecureCredential` (discriminated by ``mode``). Field names
written by the earlier JavaScript lab (``storedPassword``, ``key``,
``keyMatrix``, cipher names such as ``caesar``) are accepted on load.

A record that fails validation is skipped with a warning but kept
verbatim in the file on the next write. A file that is not a JSON
credential document reads as empty and is never written over.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from shared.logger import LabLogger

from classicrypt.core.errors import MalformedInput, UserExistsError
from classicrypt.core.models import CredentialFile, CredentialRecord

_RECORD = TypeAdapter(CredentialRecord)


class CredentialStore:
    """Username-keyed credential records backed by one JSON file.

    The file is re-read on every access so that several CLI invocations
    see each other's writes. A missing file is created empty.
    """

    def __init__(self, path: str | Path, logger: Optional[LabLogger] = None) -> None:
        self._path = Path(path)
        self._log = logger or LabLogger("credentials")

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> tuple[list[CredentialRecord], list[Any]]:
        """Valid records, and the raw entries that failed validation.

        Raises:
            MalformedInput: If the file is not JSON or has no ``users`` list.
        """
        if not self._path.exists():
            self._log.debug("Creating empty credential store at %s", self._path)
            self.save(CredentialFile())
            return [], []

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as exc:
            raise MalformedInput(
                f"Credential store {self._path} is not valid JSON: {exc}"
            ) from exc
        entries = raw.get("users", []) if isinstance(raw, dict) else None
        if not isinstance(entries, list):
            raise MalformedInput(
                f"Credential store {self._path} has no \"users\" list"
            )

        records: list[CredentialRecord] = []
        rejected: list[Any] = []
        for entry in entries:
            try:
                records.append(_RECORD.validate_python(entry))
            except ValidationError as exc:
                name = entry.get("username") if isinstance(entry, dict) else None
                self._log.warning(
                    "Skipping invalid credential record %r in %s: %s",
                    name,
                    self._path,
                    exc,
                )
                rejected.append(entry)
        return records, rejected

    def load(self) -> CredentialFile:
        """Every valid record; an unreadable file is reported and yields none."""
        try:
            records, _ = self._read()
        except MalformedInput as exc:
            self._log.warning("%s, treating it as empty", exc)
            return CredentialFile()
        return CredentialFile(users=records)

    def save(self, data: CredentialFile, keep: Sequence[Any] = ()) -> None:
        """Write *data*, followed by the raw entries in *keep* unchanged."""
        payload = data.model_dump(mode="json")
        payload["users"].extend(keep)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")

    def all(self) -> list[CredentialRecord]:
        return list(self.load().users)

    def get(self, username: str) -> Optional[CredentialRecord]:
        """Record for *username*, or ``None``."""
        for record in self.load().users:
            if record.username == username:
                return record
        return None

    def add(self, record: CredentialRecord) -> None:
        """Append *record*.

        Raises:
            UserExistsError: If the username is already taken, including
                by a stored entry that failed validation.
            MalformedInput: If the file is unreadable; it is left untouched.
        """
        records, rejected = self._read()
        taken = {r.username for r in records}
        taken.update(e.get("username") for e in rejected if isinstance(e, dict))
        if record.username in taken:
            raise UserExistsError(f"User already exists: {record.username}")
        records.append(record)
        self.save(CredentialFile(users=records), keep=rejected)
        self._log.info("Stored %s record for %s", record.mode, record.username)
