"""Alphabet helpers shared by the classical ciphers (A=0 .. Z=25)."""

from __future__ import annotations

import string

ALPHABET: str = string.ascii_uppercase
MODULUS: int = len(ALPHABET)

# Padding symbol for the digraph and block ciphers
FILLER: str = "X"


def to_code(letter: str) -> int:
    """Index of an uppercase ASCII letter (``"A"`` -> 0)."""
    return ord(letter) - ord("A")


def from_code(code: int) -> str:
    return ALPHABET[code % MODULUS]


def letters_only(text: str) -> str:
    """Uppercase *text* and keep only the ASCII letters A-Z."""
    return "".join(ch for ch in text.upper() if "A" <= ch <= "Z")
