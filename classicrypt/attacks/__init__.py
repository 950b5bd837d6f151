"""
Classicrypt Attacks
====================

Cryptanalysis of the classical ciphers: exhaustive key search, dictionary
search and letter-frequency ranking. Every function returns fresh data
and keeps no state between calls.
"""

from classicrypt.attacks.dictionary import (
    direct_dictionary_attack,
    filter_candidates,
    load_wordlist,
)
from classicrypt.attacks.exhaustive import (
    brute_force_affine,
    brute_force_password,
    brute_force_shift,
    find_match,
    is_success,
)
from classicrypt.attacks.frequency import LetterFrequencyAnalyzer

__all__ = [
    "LetterFrequencyAnalyzer",
    "brute_force_affine",
    "brute_force_password",
    "brute_force_shift",
    "direct_dictionary_attack",
    "filter_candidates",
    "find_match",
    "is_success",
    "load_wordlist",
]
