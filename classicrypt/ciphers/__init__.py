"""
Classicrypt Ciphers
====================

Pure, synchronous classical cipher transforms and a small dispatch layer
that selects the right key fields from :class:`KeyParams` for a given
:class:`CipherId`. Nothing in this package logs or performs I/O.
"""

from __future__ import annotations

from classicrypt.ciphers import affine, block, digraph, shift
from classicrypt.core.models import CipherId, KeyParams


def check_key(cipher: CipherId, params: KeyParams, *, decoding: bool = False) -> None:
    """Validate the key fields *cipher* uses without transforming any text.

    Raises:
        InvalidKey: If the key violates the cipher's precondition.
        MalformedInput: If the digraph keyword is unusable.
    """
    if cipher is CipherId.AFFINE:
        affine.check_multiplier(params.a)
    elif cipher is CipherId.BLOCK:
        if decoding:
            block.inverse_matrix(params.matrix)
        else:
            block.validate_matrix(params.matrix)
    elif cipher is CipherId.DIGRAPH:
        digraph.build_grid(params.keyword)


def encode(cipher: CipherId, text: str, params: KeyParams | None = None) -> str:
    """Encrypt *text* with *cipher* using the matching fields of *params*."""
    params = params or KeyParams()
    cipher = CipherId(cipher)
    if cipher is CipherId.SHIFT:
        return shift.encode(text, params.shift)
    if cipher is CipherId.AFFINE:
        return affine.encode(text, params.a, params.b)
    if cipher is CipherId.DIGRAPH:
        return digraph.encode(text, params.keyword)
    if cipher is CipherId.BLOCK:
        return block.encode(text, params.matrix)
    return text


def decode(cipher: CipherId, text: str, params: KeyParams | None = None) -> str:
    """Decrypt *text* with *cipher* using the matching fields of *params*."""
    params = params or KeyParams()
    cipher = CipherId(cipher)
    if cipher is CipherId.SHIFT:
        return shift.decode(text, params.shift)
    if cipher is CipherId.AFFINE:
        return affine.decode(text, params.a, params.b)
    if cipher is CipherId.DIGRAPH:
        return digraph.decode(text, params.keyword)
    if cipher is CipherId.BLOCK:
        return block.decode(text, params.matrix)
    return text


__all__ = [
    "affine",
    "block",
    "check_key",
    "decode",
    "digraph",
    "encode",
    "shift",
]
