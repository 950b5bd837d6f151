"""
Shift Cipher
=============

Circular rotation of the 26-letter alphabet by a single integer key.
Case is preserved and every non-letter is copied verbatim, so the
transform never fails.

Reference:
    Suetonius, De Vita Caesarum (c. 121 AD); Sinkov, A. (1966).
    Elementary Cryptanalysis, Chapter 2.
"""

from __future__ import annotations

from shared.math_utils import floor_mod

from classicrypt.ciphers.alphabet import MODULUS

KEY_SPACE: range = range(MODULUS)


def _rotate(text: str, shift: int) -> str:
    out: list[str] = []
    for ch in text:
        if "a" <= ch <= "z":
            out.append(chr(floor_mod(ord(ch) - ord("a") + shift, MODULUS) + ord("a")))
        elif "A" <= ch <= "Z":
            out.append(chr(floor_mod(ord(ch) - ord("A") + shift, MODULUS) + ord("A")))
        else:
            out.append(ch)
    return "".join(out)


def encode(text: str, shift: int) -> str:
    """Replace each letter by the one *shift* positions later."""
    return _rotate(text, shift)


def decode(text: str, shift: int) -> str:
    """Inverse of :func:`encode` for the same *shift*."""
    return _rotate(text, -shift)
