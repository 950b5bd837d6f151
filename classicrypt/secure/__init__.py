"""
Classicrypt Secure Primitives
==============================

Modern counterparts to the classical ciphers: PBKDF2 password storage,
HMAC, nonces and an (intentionally unauthenticated) Diffie-Hellman
exchange. Built on :mod:`hashlib`, :mod:`hmac` and :mod:`secrets`.
"""

from classicrypt.secure.key_exchange import (
    compute_public,
    compute_shared,
    generate_private,
    server_respond,
    simulate_exchange,
)
from classicrypt.secure.passwords import (
    compute_hmac,
    generate_nonce,
    hash_password,
    verify_hmac,
    verify_password,
)

__all__ = [
    "compute_hmac",
    "compute_public",
    "compute_shared",
    "generate_nonce",
    "generate_private",
    "hash_password",
    "server_respond",
    "simulate_exchange",
    "verify_hmac",
    "verify_password",
]
