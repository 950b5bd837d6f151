"""
Key Parser
===========

Turns command-line key material into :class:`KeyParams`.

Supported matrix formats:
    - Rows separated by ``;``, entries by ``,`` or whitespace:
      ``6,24,1;13,16,10;20,17,15``
    - Nine entries in row-major order: ``6 24 1 13 16 10 20 17 15``
    - JSON nested list: ``[[6,24,1],[13,16,10],[20,17,15]]``
"""

from __future__ import annotations

import json
import re
from typing import Any, Optional

from classicrypt.core.errors import MalformedInput
from classicrypt.core.models import KeyParams

_ENTRY_SPLIT = re.compile(r"[,\s]+")
_SIZE = 3


def _to_int(token: str) -> int:
    try:
        return int(token)
    except ValueError as exc:
        raise MalformedInput(f"Matrix entry {token!r} is not an integer") from exc


def parse_matrix(text: str) -> list[list[int]]:
    """Parse a 3x3 integer matrix from *text*.

    Raises:
        MalformedInput: If *text* does not describe exactly nine integers
            laid out as three rows of three.
    """
    raw = text.strip()
    if not raw:
        raise MalformedInput("Empty matrix")

    if raw.startswith("["):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise MalformedInput(f"Invalid JSON matrix: {exc.msg}") from exc
        if not isinstance(data, list) or not all(isinstance(r, list) for r in data):
            raise MalformedInput("JSON matrix must be a list of rows")
        rows = [[_to_int(str(v)) for v in row] for row in data]
    elif ";" in raw:
        rows = [
            [_to_int(tok) for tok in _ENTRY_SPLIT.split(part.strip()) if tok]
            for part in raw.split(";")
            if part.strip()
        ]
    else:
        flat = [_to_int(tok) for tok in _ENTRY_SPLIT.split(raw) if tok]
        if len(flat) != _SIZE * _SIZE:
            raise MalformedInput(
                f"Expected {_SIZE * _SIZE} matrix entries, got {len(flat)}"
            )
        rows = [flat[i : i + _SIZE] for i in range(0, len(flat), _SIZE)]

    if len(rows) != _SIZE or any(len(r) != _SIZE for r in rows):
        raise MalformedInput(
            f"Matrix must be 3x3, got rows of sizes {[len(r) for r in rows]}"
        )
    return rows


def build_key_params(
    shift: Optional[int] = None,
    a: Optional[int] = None,
    b: Optional[int] = None,
    keyword: Optional[str] = None,
    matrix: Optional[str] = None,
) -> KeyParams:
    """Build :class:`KeyParams` from optional CLI values.

    Anything left as ``None`` keeps the lab default.
    """
    overrides: dict[str, Any] = {}
    if shift is not None:
        overrides["shift"] = shift
    if a is not None:
        overrides["a"] = a
    if b is not None:
        overrides["b"] = b
    if keyword is not None:
        overrides["keyword"] = keyword
    if matrix is not None:
        overrides["matrix"] = parse_matrix(matrix)
    return KeyParams(**overrides)
