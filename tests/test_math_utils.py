import math

import numpy as np
import pytest

from shared.math_utils import (
    adjugate_3x3,
    chi2_survival,
    chi_squared_test,
    determinant_3x3,
    floor_mod,
    gcd,
    index_of_coincidence,
    is_coprime,
    letter_histogram,
    matrix_inverse_mod,
    mod_inverse,
)

KEY = [[6, 24, 1], [13, 16, 10], [20, 17, 15]]


class TestModular:
    def test_gcd(self):
        assert gcd(12, 26) == 2
        assert gcd(-4, 26) == 2
        assert gcd(5, 26) == 1
        assert gcd(0, 7) == 7

    def test_floor_mod_is_non_negative(self):
        assert floor_mod(-3, 26) == 23
        assert floor_mod(29, 26) == 3

    @pytest.mark.parametrize("a, inverse", [(1, 1), (3, 9), (5, 21), (7, 15), (25, 25)])
    def test_mod_inverse(self, a, inverse):
        assert mod_inverse(a, 26) == inverse
        assert (a * inverse) % 26 == 1

    def test_mod_inverse_missing(self):
        assert mod_inverse(2, 26) is None
        assert mod_inverse(13, 26) is None
        assert mod_inverse(0, 26) is None

    def test_mod_inverse_of_negative(self):
        assert mod_inverse(-1, 26) == 25

    def test_is_coprime(self):
        assert is_coprime(9, 26)
        assert not is_coprime(4, 26)


class TestMatrices:
    def test_determinant(self):
        assert determinant_3x3([[1, 0, 0], [0, 1, 0], [0, 0, 1]]) == 1
        assert determinant_3x3(KEY) == 441

    def test_adjugate_times_matrix_is_det_identity(self):
        adj = np.array(adjugate_3x3(KEY))
        product = adj @ np.array(KEY)
        assert (product == determinant_3x3(KEY) * np.eye(3, dtype=int)).all()

    def test_inverse_mod_26(self):
        inverse = matrix_inverse_mod(KEY, 26)
        assert inverse is not None
        identity = (np.array(KEY) @ inverse) % 26
        assert (identity == np.eye(3, dtype=int)).all()

    def test_singular_matrix(self):
        assert matrix_inverse_mod([[2, 0, 0], [0, 1, 0], [0, 0, 1]], 26) is None


class TestStatistics:
    def test_letter_histogram_ignores_non_letters(self):
        counts = letter_histogram("Aa b!")
        assert counts[0] == 2
        assert counts[1] == 1
        assert counts.sum() == 3

    def test_letter_histogram_empty(self):
        assert letter_histogram("123").sum() == 0
        assert len(letter_histogram("")) == 26

    def test_index_of_coincidence(self):
        assert index_of_coincidence(letter_histogram("aab")) == pytest.approx(1 / 3)
        assert index_of_coincidence(letter_histogram("a")) == 0.0

    def test_chi_squared_perfect_fit(self):
        chi2, p = chi_squared_test(np.array([10.0, 10.0]), np.array([10.0, 10.0]))
        assert chi2 == 0.0
        assert p == pytest.approx(1.0)

    def test_chi_squared_rejects_bad_input(self):
        with pytest.raises(ValueError):
            chi_squared_test(np.array([1.0, 2.0]), np.array([1.0]))
        with pytest.raises(ValueError):
            chi_squared_test(np.array([1.0, 2.0]), np.array([0.0, 3.0]))

    def test_chi2_survival_known_values(self):
        # dof 2 has the closed form exp(-x / 2)
        assert chi2_survival(2.0, 2) == pytest.approx(math.exp(-1.0))
        assert chi2_survival(30.0, 2) == pytest.approx(math.exp(-15.0))
        assert chi2_survival(3.841459, 1) == pytest.approx(0.05, abs=1e-6)
        assert chi2_survival(0.0, 5) == 1.0
