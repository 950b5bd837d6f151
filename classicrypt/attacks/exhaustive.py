"""
Exhaustive Key Search
======================

Breaks the shift and affine ciphers by decoding under every key. Both key
spaces are tiny (26 and 12 x 26 = 312 keys), so the search always runs to
completion and returns every candidate in ascending key order; choosing
among them is left to the caller.

The affine key space is enumerated from the valid multipliers directly,
so no candidate key is ever probed and discarded.

Also provides the bounded password-space enumerator used to illustrate
combinatorial explosion.

References:
    - Sinkov, A. (1966). Elementary Cryptanalysis, Chapters 2-3.
    - Kerckhoffs, A. (1883). La cryptographie militaire.
"""

from __future__ import annotations

import itertools
import re
from typing import Iterable, Optional, Sequence

from classicrypt.ciphers import affine, shift
from classicrypt.ciphers.alphabet import MODULUS
from classicrypt.core.models import (
    AffineCandidate,
    Candidate,
    PasswordSpace,
    ShiftCandidate,
)

_VOWEL_RE = re.compile(r"[aeiouyAEIOUY]")


def brute_force_shift(ciphertext: str) -> list[ShiftCandidate]:
    """Decode *ciphertext* under all 26 shifts, ``shift=0`` first."""
    return [
        ShiftCandidate(shift=s, text=shift.decode(ciphertext, s))
        for s in range(MODULUS)
    ]


def brute_force_affine(ciphertext: str) -> list[AffineCandidate]:
    """Decode *ciphertext* under all 312 valid affine keys.

    Ordered by ascending ``a`` then ascending ``b``.
    """
    return [
        AffineCandidate(a=a, b=b, text=affine.decode(ciphertext, a, b))
        for a in affine.VALID_MULTIPLIERS
        for b in range(MODULUS)
    ]


def is_success(text: str, oracle: Optional[str]) -> bool:
    """Demo oracle check: case-insensitive equality with the known answer.

    A real attacker has no oracle; without one nothing counts as success.
    """
    if oracle is None:
        return False
    return text.lower() == oracle.lower()


def find_match(
    candidates: Iterable[Candidate], oracle: Optional[str]
) -> Optional[Candidate]:
    """First candidate the demo oracle confirms, in enumeration order."""
    for candidate in candidates:
        if is_success(candidate.text, oracle):
            return candidate
    return None


def first_readable(candidates: Sequence[Candidate]) -> Optional[Candidate]:
    """First candidate containing a vowel (crude readability heuristic)."""
    for candidate in candidates:
        if _VOWEL_RE.search(candidate.text):
            return candidate
    return None


def brute_force_password(
    charset: str, length: int, max_attempts: int = 10_000
) -> PasswordSpace:
    """Enumerate every password of *length* symbols drawn from *charset*.

    When ``len(charset) ** length`` exceeds *max_attempts* nothing is
    generated and the result is flagged as exceeded.

    Raises:
        ValueError: If *length* is negative or *charset* is empty.
    """
    if length < 0:
        raise ValueError("Password length must be >= 0")
    if not charset:
        raise ValueError("Charset must not be empty")

    # Duplicate symbols would only repeat candidates
    symbols = "".join(dict.fromkeys(charset))
    total = len(symbols) ** length
    if total > max_attempts:
        return PasswordSpace(
            charset=symbols,
            length=length,
            total=total,
            max_attempts=max_attempts,
            exceeded=True,
        )

    passwords = [
        "".join(combo) for combo in itertools.product(symbols, repeat=length)
    ]
    return PasswordSpace(
        charset=symbols,
        length=length,
        total=total,
        max_attempts=max_attempts,
        passwords=passwords,
    )
