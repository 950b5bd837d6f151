"""
Letter Frequency Analyzer
==========================

Measures how English-like a text is, from its A-Z letter histogram:

1. Per-letter counts and percentages (non-letters ignored)
2. Index of Coincidence
3. Pearson chi-squared against English letter frequencies

Monoalphabetic ciphers (shift, affine) preserve the IC of the plaintext,
so ciphertext from them still reads near 0.0667; the chi-squared
statistic only drops once the right key restores the letter identities.
That makes it a ranking key for exhaustive-search candidates.

References:
    - Friedman, W. F. (1922). The Index of Coincidence and Its
      Applications in Cryptanalysis. Riverbank Publication No. 22.
    - Lewand, R. E. (2000). Cryptological Mathematics. MAA, p. 36.
    - Pearson, K. (1900). Philosophical Magazine, 50(302), 157-175.
"""

from __future__ import annotations

import math
from typing import Sequence, TypeVar

import numpy as np

from shared.math_utils import chi_squared_test, index_of_coincidence, letter_histogram

from classicrypt.ciphers.alphabet import ALPHABET
from classicrypt.core.models import Candidate, LetterCount, LetterFrequency

C = TypeVar("C", bound=Candidate)

# Relative frequency of A-Z in English prose, in percent (Lewand, 2000)
ENGLISH_FREQUENCIES: tuple[float, ...] = (
    8.167, 1.492, 2.782, 4.253, 12.702, 2.228, 2.015, 6.094, 6.966,
    0.153, 0.772, 4.025, 2.406, 6.749, 7.507, 1.929, 0.095, 5.987,
    6.327, 9.056, 2.758, 0.978, 2.360, 0.150, 1.974, 0.074,
)


class LetterFrequencyAnalyzer:
    """Letter-level frequency statistics and English-likeness ranking.

    Usage::

        analyzer = LetterFrequencyAnalyzer()
        result = analyzer.analyze("Khoor Zruog")
        ranked = analyzer.rank_candidates(brute_force_shift("KHOOR"))
    """

    IC_ENGLISH: float = 0.0667
    IC_RANDOM_26: float = 1.0 / 26.0

    def __init__(self) -> None:
        probs = np.asarray(ENGLISH_FREQUENCIES, dtype=np.float64)
        self._english = probs / probs.sum()

    def analyze(self, text: str) -> LetterFrequency:
        """Full letter statistics of *text*."""
        counts = letter_histogram(text)
        total = int(counts.sum())
        if total == 0:
            return LetterFrequency()

        chi2, p_value = chi_squared_test(counts, self._english * total)
        order = sorted(range(26), key=lambda i: (-counts[i], i))
        distribution = [
            LetterCount(
                letter=ALPHABET[i],
                count=int(counts[i]),
                percentage=round(100.0 * counts[i] / total, 2),
            )
            for i in order
            if counts[i] > 0
        ]
        return LetterFrequency(
            total=total,
            distribution=distribution,
            ic=index_of_coincidence(counts),
            chi_squared=chi2,
            p_value=p_value,
        )

    def score(self, text: str) -> float:
        """Chi-squared distance from English; lower is more English-like.

        Texts without letters score ``inf``.
        """
        counts = letter_histogram(text)
        total = counts.sum()
        if total == 0:
            return math.inf
        chi2, _ = chi_squared_test(counts, self._english * total)
        return chi2

    def rank_candidates(self, candidates: Sequence[C]) -> list[C]:
        """Candidates ordered most English-like first.

        The sort is stable, so ties keep enumeration order.
        """
        return sorted(candidates, key=lambda c: self.score(c.text))
