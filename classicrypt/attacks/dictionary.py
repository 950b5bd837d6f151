"""
Dictionary Search
==================

Two ways of matching a wordlist against an intercepted ciphertext:

* **Candidate filtering** -- keep the exhaustive-search candidates whose
  decoded text, lowercased, is a wordlist entry.
* **Direct attack** -- the key is known but the plaintext is not: encode
  every wordlist entry under that key and keep the entries whose
  encoding equals the ciphertext (case-insensitive).

The wordlist is read-only input; nothing here caches or mutates it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence, TypeVar

from classicrypt import ciphers
from classicrypt.core.errors import InvalidKey, MalformedInput
from classicrypt.core.models import Candidate, CipherId, KeyParams

C = TypeVar("C", bound=Candidate)


def load_wordlist(path: str | Path) -> list[str]:
    """Read one word per line, stripped and lowercased; blanks dropped.

    Raises:
        FileNotFoundError: If *path* does not exist.
    """
    text = Path(path).read_text(encoding="utf-8")
    return [line.strip().lower() for line in text.splitlines() if line.strip()]


def filter_candidates(candidates: Iterable[C], wordlist: Iterable[str]) -> list[C]:
    """Candidates whose lowercased text exactly matches a wordlist entry.

    Candidate order is preserved.
    """
    words = {w.strip().lower() for w in wordlist}
    return [c for c in candidates if c.text.lower() in words]


def direct_dictionary_attack(
    ciphertext: str,
    wordlist: Sequence[str],
    cipher: CipherId,
    params: KeyParams | None = None,
) -> list[str]:
    """Wordlist entries whose encoding under *cipher*/*params* is *ciphertext*.

    Never raises for a bad key or a bad entry: whatever cannot be encoded
    is skipped and the scan continues, so an unusable key matches nothing.
    Callers that need to report the key call
    :func:`classicrypt.ciphers.check_key` first.
    """
    params = params or KeyParams()
    cipher = CipherId(cipher)

    target = ciphertext.lower()
    matches: list[str] = []
    for word in wordlist:
        if not isinstance(word, str):
            continue
        try:
            encoded = ciphers.encode(cipher, word, params)
        except (InvalidKey, MalformedInput):
            continue
        if encoded.lower() == target:
            matches.append(word)
    return matches
