"""
Linear Block Cipher (3x3 over Z/26)
=====================================

Hill-style cipher: letters are grouped into 3-vectors of codes (A=0)
and each block is multiplied by a key matrix modulo 26.

    encode:  c = K . p   (mod 26)
    decode:  p = K^-1 . c (mod 26),  K^-1 = adj(K) * det(K)^-1

Decoding needs ``gcd(det(K) mod 26, 26) == 1``; the check runs before
any block is processed and fails with
:class:`~classicrypt.core.errors.InvalidKey`.

Known limitation: input is right-padded with ``X`` to a multiple of 3,
and the decoder cannot tell padding from a genuine trailing ``X``.

Reference:
    Hill, L. S. (1929). Cryptography in an Algebraic Alphabet.
    The American Mathematical Monthly, 36(6), 306-312.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from shared.math_utils import determinant_3x3, gcd, matrix_inverse_mod

from classicrypt.ciphers.alphabet import ALPHABET, FILLER, MODULUS, letters_only, to_code
from classicrypt.core.errors import InvalidKey

BLOCK_SIZE: int = 3


def validate_matrix(matrix: Sequence[Sequence[int]]) -> list[list[int]]:
    """Return *matrix* as a 3x3 list of ints reduced mod 26.

    Raises:
        InvalidKey: If *matrix* is not a 3x3 integer matrix.
    """
    try:
        rows = [list(row) for row in matrix]
    except TypeError as exc:
        raise InvalidKey("Block cipher key must be a 3x3 integer matrix") from exc

    if len(rows) != BLOCK_SIZE or any(len(row) != BLOCK_SIZE for row in rows):
        raise InvalidKey(
            f"Block cipher key must be 3x3, got {len(rows)} row(s) "
            f"of sizes {[len(row) for row in rows]}"
        )
    for row in rows:
        for value in row:
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidKey(f"Matrix entry {value!r} is not an integer")
    return [[int(v) % MODULUS for v in row] for row in rows]


def inverse_matrix(matrix: Sequence[Sequence[int]]) -> list[list[int]]:
    """``K^-1 mod 26`` as nested lists.

    Raises:
        InvalidKey: If the matrix is malformed or singular mod 26.
    """
    key = validate_matrix(matrix)
    inverse = matrix_inverse_mod(key, MODULUS)
    if inverse is None:
        det = determinant_3x3(key) % MODULUS
        raise InvalidKey(
            f"Key matrix is not invertible mod 26: det = {det} "
            f"(gcd({det}, 26) = {gcd(det, MODULUS)})"
        )
    return inverse.tolist()


def _blocks(text: str) -> np.ndarray:
    letters = letters_only(text)
    if len(letters) % BLOCK_SIZE:
        letters += FILLER * (BLOCK_SIZE - len(letters) % BLOCK_SIZE)
    codes = np.array([to_code(ch) for ch in letters], dtype=np.int64)
    # one column per block
    return codes.reshape(-1, BLOCK_SIZE).T


def _apply(key: Sequence[Sequence[int]], text: str) -> str:
    vectors = _blocks(text)
    if vectors.size == 0:
        return ""
    product = np.mod(np.asarray(key, dtype=np.int64) @ vectors, MODULUS)
    return "".join(ALPHABET[int(code)] for code in product.T.ravel())


def encode(text: str, matrix: Sequence[Sequence[int]]) -> str:
    """Encrypt *text* (letters only, uppercased, X-padded) with *matrix*."""
    return _apply(validate_matrix(matrix), text)


def decode(text: str, matrix: Sequence[Sequence[int]]) -> str:
    """Decrypt *text* with the inverse of *matrix*.

    Raises:
        InvalidKey: If *matrix* is not invertible mod 26. Nothing is
            decoded in that case.
    """
    return _apply(inverse_matrix(matrix), text)
