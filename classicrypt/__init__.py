"""
Classicrypt -- Classical Cipher Attack Lab
===========================================

Educational toolkit showing why classical ciphers must never protect
stored passwords. Implements four classical transforms (shift, affine,
5x5 digraph and 3x3 linear block), the cryptanalysis that breaks them by
exhaustive and dictionary search, and a PBKDF2-based credential scheme
for contrast.

Modules:
    - classicrypt.ciphers: Pure cipher transforms and key dispatch
    - classicrypt.attacks: Exhaustive, dictionary and frequency attacks
    - classicrypt.secure: PBKDF2, HMAC and toy Diffie-Hellman primitives
    - classicrypt.core: Engine, credential store, models and errors
    - classicrypt.parsers: Key material parsing
    - classicrypt.output: Console output, JSON reports and the CSV attack log
    - classicrypt.cli: Click-based command-line interface

References:
    - Sinkov, A. (1966). Elementary Cryptanalysis: A Mathematical
      Approach. Mathematical Association of America.
    - NIST SP 800-132 (2010). Recommendation for Password-Based Key
      Derivation.
"""

__version__ = "1.0.0"
__tool_name__ = "classicrypt"
