"""
Classicrypt Exceptions
=======================

A deliberately narrow error taxonomy. Cipher preconditions fail with
:class:`InvalidKey` at the point of use; unparseable key material fails
with :class:`MalformedInput`. Credential-store errors cover the
orchestration layer only.
"""

from __future__ import annotations


class ClassicryptError(Exception):
    """Base class for every error raised by the classicrypt package."""


class InvalidKey(ClassicryptError, ValueError):
    """A key fails a cipher's algebraic precondition.

    Raised for an affine multiplier that is not coprime to 26, and for a
    block-cipher matrix that is not a 3x3 integer matrix or is not
    invertible modulo 26.
    """


class MalformedInput(ClassicryptError, ValueError):
    """Key material that cannot be interpreted at all.

    Examples: a matrix string with the wrong number of entries, or a
    non-string keyword for the digraph grid. An *empty* keyword is not
    malformed; it yields the bare-alphabet grid.
    """


class UserExistsError(ClassicryptError):
    """A credential record with the same username is already stored."""


class UserNotFoundError(ClassicryptError, LookupError):
    """No credential record exists for the requested username."""
