"""
Toy Diffie-Hellman Key Exchange
================================

Finite-field Diffie-Hellman over the RFC 3526 2048-bit MODP group
(group 14, generator 2). Neither side is authenticated, which is what
makes the exchange open to a man-in-the-middle; the lab keeps it that
way on purpose.

Private exponents are 128 bits, well short of what the group warrants,
and the simulated exchange exposes every private and shared value for
inspection. Never reuse any of this outside the lab.

References:
    - Diffie, W. & Hellman, M. (1976). New Directions in Cryptography.
      IEEE Transactions on Information Theory, 22(6), 644-654.
    - RFC 3526 (2003). More Modular Exponential (MODP) Diffie-Hellman
      groups for Internet Key Exchange (IKE), Section 3.
"""

from __future__ import annotations

import secrets
from typing import Optional

from classicrypt.core.models import DHExchange, DHKeyPair, DHResponse

MODP_2048_PRIME: int = int(
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD129024E088A67CC74"
    "020BBEA63B139B22514A08798E3404DDEF9519B3CD3A431B302B0A6DF25F1437"
    "4FE1356D6D51C245E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE45B3DC2007CB8A163BF05"
    "98DA48361C55D39A69163FA8FD24CF5F83655D23DCA3AD961C62F356208552BB"
    "9ED529077096966D670C354E4ABC9804F1746C08CA18217C32905E462E36CE3B"
    "E39E772C180E86039B2783A2EC07A28FB5C55DF06F4C52C9DE2BCBF695581718"
    "3995497CEA956AE515D2261898FA051015728E5A8AACAA68FFFFFFFFFFFFFFFF",
    16,
)
GENERATOR: int = 2

DEFAULT_PRIVATE_BITS: int = 128


def generate_private(bits: int = DEFAULT_PRIVATE_BITS) -> int:
    """Random private exponent of at most *bits* bits (never zero)."""
    while True:
        value = secrets.randbits(bits)
        if value > 1:
            return value


def compute_public(
    private: int, generator: int = GENERATOR, prime: int = MODP_2048_PRIME
) -> int:
    """``g^private mod p``."""
    return pow(generator, private, prime)


def compute_shared(
    other_public: int, private: int, prime: int = MODP_2048_PRIME
) -> int:
    """``other_public^private mod p``.

    Raises:
        ValueError: If *other_public* lies outside ``[2, p - 2]``.
    """
    if not 2 <= other_public <= prime - 2:
        raise ValueError("Public value out of range for the group")
    return pow(other_public, private, prime)


def simulate_exchange(bits: int = DEFAULT_PRIVATE_BITS) -> DHExchange:
    """Run both sides locally and report every value, hex-encoded."""
    client_private = generate_private(bits)
    server_private = generate_private(bits)
    client_public = compute_public(client_private)
    server_public = compute_public(server_private)
    client_shared = compute_shared(server_public, client_private)
    server_shared = compute_shared(client_public, server_private)
    return DHExchange(
        client=DHKeyPair(
            private=format(client_private, "x"),
            public=format(client_public, "x"),
            shared=format(client_shared, "x"),
        ),
        server=DHKeyPair(
            private=format(server_private, "x"),
            public=format(server_public, "x"),
            shared=format(server_shared, "x"),
        ),
        keys_match=client_shared == server_shared,
        note="Private and shared values are shown for study only; never log them.",
    )


def server_respond(
    client_public: int,
    prime: Optional[int] = None,
    generator: Optional[int] = None,
) -> DHResponse:
    """Answer a client public value as the lab server does (decimal output).

    The shared key is returned to the caller, which a real server must
    never do.
    """
    prime = prime or MODP_2048_PRIME
    generator = generator or GENERATOR
    server_private = generate_private()
    server_public = compute_public(server_private, generator, prime)
    shared = compute_shared(client_public, server_private, prime)
    return DHResponse(
        server_public=str(server_public),
        shared_key=str(shared),
        note="Shared key disclosed for educational purposes only.",
    )
