"""
Classicrypt Mathematical Utilities
===================================

Modular arithmetic over Z/m and the small statistical toolkit used by the
cryptanalysis layer: letter histograms, Pearson's chi-squared test and the
Index of Coincidence.

Every cipher in :mod:`classicrypt.ciphers` depends on the modular helpers
below; the statistical helpers back candidate ranking and frequency
analysis.

References (master list):
    [1] Knuth, D. E. (1997). The Art of Computer Programming, Vol. 2:
        Seminumerical Algorithms (3rd ed.). Section 4.5.2.
    [2] Hill, L. S. (1929). Cryptography in an Algebraic Alphabet.
        The American Mathematical Monthly, 36(6), 306-312.
    [3] Pearson, K. (1900). On the Criterion that a Given System of
        Deviations ... Philosophical Magazine, 50(302), 157-175.
    [4] Friedman, W. F. (1922). The Index of Coincidence and Its
        Applications in Cryptanalysis. Riverbank Publication No. 22.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np
from numpy.typing import NDArray


# ---------------------------------------------------------------------------
#  Type aliases for readability
# ---------------------------------------------------------------------------
FloatArray = NDArray[np.floating]
IntArray = NDArray[np.integer]


# ========================== Modular Arithmetic =============================


def gcd(a: int, b: int) -> int:
    """Compute the Greatest Common Divisor using Euclid's algorithm.

    The result is always non-negative, so ``gcd(-4, 26) == 2``.
    """
    a, b = abs(a), abs(b)
    while b:
        a, b = b, a % b
    return a


def floor_mod(n: int, m: int) -> int:
    """Return *n* reduced into ``[0, m)`` for a positive modulus *m*.

    Python's ``%`` already floors towards negative infinity; this helper
    names the intent at call sites that mirror textbook formulas.
    """
    return n % m


def mod_inverse(a: int, m: int) -> Optional[int]:
    """Return the modular inverse of *a* modulo *m*, or ``None``.

    Uses the extended Euclidean algorithm [1]. The inverse exists exactly
    when ``gcd(a, m) == 1``.

    Args:
        a: Value to invert (any integer, reduced modulo *m* first).
        m: Positive modulus.

    Returns:
        ``x`` in ``[0, m)`` with ``(a * x) % m == 1``, or ``None`` when
        *a* and *m* are not coprime.
    """
    a = floor_mod(a, m)
    old_r, r = a, m
    old_s, s = 1, 0
    while r:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_s, s = s, old_s - q * s
    if old_r != 1:
        return None
    return floor_mod(old_s, m)


def is_coprime(a: int, m: int) -> bool:
    """``True`` when ``gcd(a, m) == 1``."""
    return gcd(a, m) == 1


# ============================ 3x3 Matrices ==================================


def determinant_3x3(m: Sequence[Sequence[int]]) -> int:
    """Exact integer determinant of a 3x3 matrix (cofactor expansion)."""
    return (
        m[0][0] * (m[1][1] * m[2][2] - m[1][2] * m[2][1])
        - m[0][1] * (m[1][0] * m[2][2] - m[1][2] * m[2][0])
        + m[0][2] * (m[1][0] * m[2][1] - m[1][1] * m[2][0])
    )


def adjugate_3x3(m: Sequence[Sequence[int]]) -> list[list[int]]:
    """Adjugate (transposed cofactor matrix) of a 3x3 integer matrix.

    Computed exactly in integers so that no floating point determinant
    ever touches the modular inverse below.
    """
    cof = [
        [
            (m[1][1] * m[2][2] - m[1][2] * m[2][1]),
            -(m[1][0] * m[2][2] - m[1][2] * m[2][0]),
            (m[1][0] * m[2][1] - m[1][1] * m[2][0]),
        ],
        [
            -(m[0][1] * m[2][2] - m[0][2] * m[2][1]),
            (m[0][0] * m[2][2] - m[0][2] * m[2][0]),
            -(m[0][0] * m[2][1] - m[0][1] * m[2][0]),
        ],
        [
            (m[0][1] * m[1][2] - m[0][2] * m[1][1]),
            -(m[0][0] * m[1][2] - m[0][2] * m[1][0]),
            (m[0][0] * m[1][1] - m[0][1] * m[1][0]),
        ],
    ]
    return [[cof[col][row] for col in range(3)] for row in range(3)]


def matrix_inverse_mod(
    m: Sequence[Sequence[int]], modulus: int
) -> Optional[IntArray]:
    """Inverse of a 3x3 integer matrix over Z/modulus.

    .. math::

        K^{-1} = \\operatorname{adj}(K) \\cdot (\\det K)^{-1} \\bmod m

    Reference:
        Hill, L. S. (1929). Cryptography in an Algebraic Alphabet.

    Returns:
        A 3x3 ``int64`` array, or ``None`` when ``det(K) mod m`` has no
        inverse (the matrix is singular over the ring).
    """
    det_inv = mod_inverse(determinant_3x3(m), modulus)
    if det_inv is None:
        return None
    adj = np.array(adjugate_3x3(m), dtype=np.int64)
    return np.mod(adj * det_inv, modulus)


# ======================== Letter Statistics ================================


def letter_histogram(text: str) -> FloatArray:
    """Counts of A-Z in *text* as a length-26 float array (case-insensitive)."""
    codes = np.frombuffer(text.upper().encode("ascii", "ignore"), dtype=np.uint8)
    codes = codes[(codes >= 65) & (codes <= 90)].astype(np.int64) - 65
    return np.bincount(codes, minlength=26).astype(np.float64)


def chi_squared_test(
    observed: FloatArray, expected: FloatArray
) -> tuple[float, float]:
    """Pearson's goodness-of-fit statistic and its p-value.

    ``chi2 = sum((O - E)^2 / E)`` with ``k - 1`` degrees of freedom. The
    p-value is the chi-squared survival function, evaluated through the
    regularised incomplete gamma function ``Q(dof/2, chi2/2)``.

    Reference:
        Pearson, K. (1900). Philosophical Magazine, 50(302), 157-175.

    Raises:
        ValueError: If the arrays differ in shape or *expected* has a
            non-positive cell.
    """
    obs = np.asarray(observed, dtype=np.float64)
    exp = np.asarray(expected, dtype=np.float64)
    if obs.shape != exp.shape:
        raise ValueError(f"Shape mismatch: {obs.shape} vs {exp.shape}")
    if (exp <= 0).any():
        raise ValueError("Expected counts must all be positive")

    statistic = float(((obs - exp) ** 2 / exp).sum())
    dof = obs.size - 1
    if dof < 1:
        return statistic, 1.0
    return statistic, chi2_survival(statistic, dof)


def index_of_coincidence(counts: FloatArray) -> float:
    """Friedman's IC, ``sum(f(f-1)) / (N(N-1))``; 0.0 below two symbols.

    English text sits near 0.0667, uniform random letters near 1/26.

    Reference:
        Friedman, W. F. (1922). Riverbank Publication No. 22.
    """
    f = np.asarray(counts, dtype=np.float64)
    total = f.sum()
    if total < 2:
        return 0.0
    return float((f * (f - 1)).sum() / (total * (total - 1)))


# ============ Chi-squared survival (Numerical Recipes, 3rd ed., 6.2) =========

_EPS = 1e-15
_FPMIN = 1e-300
_MAX_TERMS = 500


def chi2_survival(statistic: float, dof: int) -> float:
    """``P(X >= statistic)`` for ``X ~ chi2(dof)``."""
    a, x = dof / 2.0, statistic / 2.0
    if x <= 0.0:
        return 1.0
    # log of x^a e^-x / Gamma(a), shared by both expansions
    log_prefix = a * math.log(x) - x - math.lgamma(a)
    if x < a + 1.0:
        return max(0.0, 1.0 - math.exp(log_prefix) * _lower_series(a, x))
    return math.exp(log_prefix) * _upper_fraction(a, x)


def _lower_series(a: float, x: float) -> float:
    term = total = 1.0 / a
    denom = a
    for _ in range(_MAX_TERMS):
        denom += 1.0
        term *= x / denom
        total += term
        if abs(term) < abs(total) * _EPS:
            break
    return total


def _upper_fraction(a: float, x: float) -> float:
    # modified Lentz
    b = x + 1.0 - a
    c = 1.0 / _FPMIN
    d = 1.0 / b
    result = d
    for n in range(1, _MAX_TERMS):
        coeff = -n * (n - a)
        b += 2.0
        d = coeff * d + b
        d = 1.0 / (d if abs(d) >= _FPMIN else _FPMIN)
        c = b + coeff / c
        if abs(c) < _FPMIN:
            c = _FPMIN
        step = d * c
        result *= step
        if abs(step - 1.0) < _EPS:
            break
    return result
