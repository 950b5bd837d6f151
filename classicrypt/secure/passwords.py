"""
Password Hashing and Message Authentication
============================================

The secure counterpart to cipher-based password storage: a salted,
deliberately slow PBKDF2 derivation that cannot be reversed, verified in
constant time. HMAC and nonce helpers support challenge-response
demonstrations.

The salt is a random hex string and is fed to PBKDF2 as its UTF-8 text,
so stored records stay verifiable by any implementation that treats the
salt the same way.

References:
    - NIST SP 800-132 (2010). Recommendation for Password-Based Key
      Derivation, Part 1: Storage Applications.
    - RFC 8018 (2017). PKCS #5: Password-Based Cryptography
      Specification Version 2.1.
    - RFC 2104 (1997). HMAC: Keyed-Hashing for Message Authentication.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from typing import Optional

from classicrypt.core.models import DerivedKey

DEFAULT_ITERATIONS: int = 200_000
DEFAULT_KEYLEN: int = 64
DEFAULT_DIGEST: str = "sha512"
DEFAULT_SALT_BYTES: int = 16


def _derive(password: str, salt: str, iterations: int, keylen: int, digest: str) -> str:
    return hashlib.pbkdf2_hmac(
        digest,
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations,
        dklen=keylen,
    ).hex()


def timing_safe_equal(a: str, b: str) -> bool:
    """Constant-time comparison of two hex strings."""
    if len(a) != len(b):
        return False
    return hmac.compare_digest(a.encode("ascii"), b.encode("ascii"))


def hash_password(
    password: str,
    salt: Optional[str] = None,
    iterations: int = DEFAULT_ITERATIONS,
    keylen: int = DEFAULT_KEYLEN,
    digest: str = DEFAULT_DIGEST,
    salt_bytes: int = DEFAULT_SALT_BYTES,
) -> DerivedKey:
    """Derive a storable key from *password*.

    Args:
        password: Plaintext password.
        salt: Hex salt to reuse; a fresh random one when omitted.
        iterations: PBKDF2 iteration count.
        keylen: Derived key length in bytes.
        digest: :mod:`hashlib` hash name.
        salt_bytes: Random bytes in a generated salt.

    Raises:
        ValueError: If *digest* is not supported by :mod:`hashlib`.
    """
    salt = salt or secrets.token_hex(salt_bytes)
    return DerivedKey(
        salt=salt,
        derived=_derive(password, salt, iterations, keylen, digest),
        iterations=iterations,
        keylen=keylen,
        digest=digest,
    )


def verify_password(password: str, record: DerivedKey) -> bool:
    """Recompute the derivation with *record*'s parameters and compare."""
    candidate = _derive(
        password, record.salt, record.iterations, record.keylen, record.digest
    )
    return timing_safe_equal(candidate, record.derived)


def compute_hmac(key: str, message: str, algorithm: str = "sha256") -> str:
    """Hex HMAC of *message* under *key*."""
    return hmac.new(
        key.encode("utf-8"), message.encode("utf-8"), algorithm
    ).hexdigest()


def verify_hmac(
    key: str, message: str, received: str, algorithm: str = "sha256"
) -> bool:
    return timing_safe_equal(compute_hmac(key, message, algorithm), received.lower())


def generate_nonce(num_bytes: int = 16) -> str:
    """Random hex nonce for challenge-response."""
    return secrets.token_hex(num_bytes)
