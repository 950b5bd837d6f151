"""
Affine Cipher
==============

Letter-wise linear map over Z/26:

    encode:  y = (a * x + b) mod 26
    decode:  x = a^-1 * (y - b) mod 26

The multiplier *a* must be coprime to 26, otherwise the map is not a
bijection and :class:`~classicrypt.core.errors.InvalidKey` is raised
before any letter is touched. Case and non-letters behave exactly as in
the shift cipher.

Reference:
    Sinkov, A. (1966). Elementary Cryptanalysis, Chapter 3.
"""

from __future__ import annotations

from shared.math_utils import floor_mod, gcd, is_coprime, mod_inverse

from classicrypt.ciphers.alphabet import MODULUS
from classicrypt.core.errors import InvalidKey

# The 12 multipliers with gcd(a, 26) == 1, ascending
VALID_MULTIPLIERS: tuple[int, ...] = tuple(
    a for a in range(1, MODULUS) if is_coprime(a, MODULUS)
)


def check_multiplier(a: int) -> int:
    """Return ``a^-1 mod 26`` or raise :class:`InvalidKey`."""
    inverse = mod_inverse(a, MODULUS)
    if inverse is None:
        raise InvalidKey(
            f"Affine multiplier a={a} must be coprime with 26 "
            f"(gcd({a}, 26) = {gcd(a, MODULUS)})"
        )
    return inverse


def _map_letters(text: str, fn) -> str:
    out: list[str] = []
    for ch in text:
        if "a" <= ch <= "z":
            out.append(chr(fn(ord(ch) - ord("a")) + ord("a")))
        elif "A" <= ch <= "Z":
            out.append(chr(fn(ord(ch) - ord("A")) + ord("A")))
        else:
            out.append(ch)
    return "".join(out)


def encode(text: str, a: int, b: int) -> str:
    """Encrypt *text* with the key pair ``(a, b)``.

    Raises:
        InvalidKey: If ``gcd(a, 26) != 1``.
    """
    check_multiplier(a)
    return _map_letters(text, lambda x: floor_mod(a * x + b, MODULUS))


def decode(text: str, a: int, b: int) -> str:
    """Decrypt *text* encrypted with ``(a, b)``.

    Raises:
        InvalidKey: If *a* has no inverse modulo 26.
    """
    a_inv = check_multiplier(a)
    return _map_letters(text, lambda y: floor_mod(a_inv * (y - b), MODULUS))
