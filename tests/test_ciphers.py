import pytest
from hypothesis import given, strategies as st

from classicrypt import ciphers
from classicrypt.ciphers import affine, block, digraph, shift
from classicrypt.ciphers.alphabet import ALPHABET
from classicrypt.core.errors import InvalidKey, MalformedInput
from classicrypt.core.models import CipherId, KeyParams
from shared.math_utils import determinant_3x3, gcd

KEY = [[6, 24, 1], [13, 16, 10], [20, 17, 15]]
SINGULAR = [[2, 0, 0], [0, 1, 0], [0, 0, 1]]

printable = st.text(alphabet=st.characters(min_codepoint=32, max_codepoint=126))
letters = st.text(alphabet=ALPHABET, min_size=1)


# ===================================================================== #
#  Shift
# ===================================================================== #


class TestShift:
    def test_encode(self):
        assert shift.encode("Hello, World!", 3) == "Khoor, Zruog!"

    def test_decode(self):
        assert shift.decode("KHOOR", 3) == "HELLO"

    def test_wraps_around(self):
        assert shift.encode("xyz", 3) == "abc"
        assert shift.encode("abc", -1) == "zab"
        assert shift.encode("abc", 29) == "def"

    def test_non_letters_pass_through(self):
        assert shift.encode("123 ?! é", 5) == "123 ?! é"

    @given(printable, st.integers(min_value=0, max_value=25))
    def test_round_trip(self, text, key):
        assert shift.decode(shift.encode(text, key), key) == text


# ===================================================================== #
#  Affine
# ===================================================================== #


class TestAffine:
    def test_valid_multipliers(self):
        assert affine.VALID_MULTIPLIERS == (1, 3, 5, 7, 9, 11, 15, 17, 19, 21, 23, 25)

    def test_encode(self):
        assert affine.encode("HELLO", 5, 8) == "RCLLA"
        assert affine.encode("hello", 5, 8) == "rclla"

    def test_decode(self):
        assert affine.decode("RCLLA", 5, 8) == "HELLO"

    def test_preserves_case_and_symbols(self):
        assert affine.decode(affine.encode("Hi, Bob!", 7, 3), 7, 3) == "Hi, Bob!"

    @pytest.mark.parametrize("a", [a for a in range(26) if a not in affine.VALID_MULTIPLIERS])
    def test_invalid_multiplier(self, a):
        with pytest.raises(InvalidKey):
            affine.encode("hello", a, 1)
        with pytest.raises(InvalidKey):
            affine.decode("hello", a, 1)

    def test_invalid_key_is_value_error(self):
        with pytest.raises(ValueError):
            affine.encode("x", 13, 0)

    @given(printable, st.sampled_from(affine.VALID_MULTIPLIERS), st.integers(0, 25))
    def test_round_trip(self, text, a, b):
        assert affine.decode(affine.encode(text, a, b), a, b) == text


# ===================================================================== #
#  Digraph
# ===================================================================== #


class TestDigraphGrid:
    def test_keyword_first_then_alphabet(self):
        grid = digraph.build_grid("PLAYFAIR EXAMPLE")
        assert grid.rows == ["PLAYF", "IREXM", "BCDGH", "KNOQS", "TUVWZ"]

    def test_empty_keyword_gives_bare_alphabet(self):
        grid = digraph.build_grid("")
        assert "".join(grid.cells) == "ABCDEFGHIKLMNOPQRSTUVWXYZ"

    def test_j_is_merged(self):
        grid = digraph.build_grid("JAM")
        assert "J" not in grid.cells
        assert grid.cells[:2] == ("I", "A")

    def test_non_string_keyword(self):
        with pytest.raises(MalformedInput):
            digraph.build_grid(123)

    def test_grid_is_immutable(self):
        grid = digraph.build_grid("SECRET")
        with pytest.raises(AttributeError):
            grid.cells = ()

    @given(st.text())
    def test_grid_holds_25_distinct_letters(self, keyword):
        cells = digraph.build_grid(keyword).cells
        assert len(cells) == 25
        assert len(set(cells)) == 25


class TestDigraph:
    def test_prepare_text_splits_doubles(self):
        assert digraph.prepare_text("balloon") == [
            ("B", "A"), ("L", "X"), ("L", "O"), ("O", "N"),
        ]

    def test_prepare_text_pads_odd_length(self):
        assert digraph.prepare_text("abc") == [("A", "B"), ("C", "X")]

    def test_known_vector(self):
        ciphertext = digraph.encode("Hide the gold in the tree stump", "playfair example")
        assert ciphertext == "BMODZBXDNABEKUDMUIXMMOUVIF"

    def test_decode_keeps_filler(self):
        plain = digraph.decode("BMODZBXDNABEKUDMUIXMMOUVIF", "playfair example")
        assert plain == "HIDETHEGOLDINTHETREXESTUMP"

    def test_same_row_and_column_rules(self):
        # Row PLAYF: P,L -> L,A ; column P,I,B,K,T: P,I -> I,B
        assert digraph.encode("PL", "playfair example") == "LA"
        assert digraph.encode("PI", "playfair example") == "IB"
        assert digraph.decode("LA", "playfair example") == "PL"
        assert digraph.decode("IB", "playfair example") == "PI"

    def test_wraps_at_grid_edge(self):
        assert digraph.encode("YF", "playfair example") == "FP"
        assert digraph.encode("TP", "playfair example") == "PI"

    @given(st.text(alphabet="ABCDEFGHIKLMNOPQRSTUVWYZ", min_size=2), st.text(max_size=12))
    def test_round_trip(self, text, keyword):
        # Build text with no doubled pairs and even length
        pairs = [text[i : i + 2] for i in range(0, len(text) - 1, 2)]
        clean = "".join(p for p in pairs if p[0] != p[1])
        assert digraph.decode(digraph.encode(clean, keyword), keyword) == clean


# ===================================================================== #
#  Block
# ===================================================================== #


invertible = (
    st.lists(st.integers(0, 25), min_size=9, max_size=9)
    .map(lambda v: [v[0:3], v[3:6], v[6:9]])
    .filter(lambda m: gcd(determinant_3x3(m) % 26, 26) == 1)
)


class TestBlock:
    def test_known_vector(self):
        assert block.encode("ACT", KEY) == "POH"
        assert block.encode("cat", KEY) == "FIN"

    def test_decode(self):
        assert block.decode("POH", KEY) == "ACT"
        assert block.decode("FIN", KEY) == "CAT"

    def test_strips_and_pads(self):
        encoded = block.encode("a-b", KEY)
        assert len(encoded) == 3
        assert block.decode(encoded, KEY) == "ABX"

    def test_empty_text(self):
        assert block.encode("", KEY) == ""
        assert block.decode("", KEY) == ""

    def test_singular_matrix_refuses_to_decode(self):
        with pytest.raises(InvalidKey, match="not invertible"):
            block.decode("POH", SINGULAR)

    def test_singular_matrix_still_encodes(self):
        assert len(block.encode("ACT", SINGULAR)) == 3

    @pytest.mark.parametrize(
        "matrix",
        [[[1, 2], [3, 4]], [[1, 2, 3]] * 2, [[1, 2, 3], [4, 5, 6], [7, 8]], 5, [[1.5, 0, 0]] * 3],
    )
    def test_malformed_matrix(self, matrix):
        with pytest.raises(InvalidKey):
            block.encode("ACT", matrix)

    def test_large_and_negative_entries_reduce_mod_26(self):
        shifted = [[v + 26 for v in row] for row in KEY]
        negative = [[v - 52 for v in row] for row in KEY]
        assert block.encode("ACT", shifted) == "POH"
        assert block.encode("ACT", negative) == "POH"

    def test_inverse_matrix(self):
        assert block.inverse_matrix(KEY) == [[8, 5, 10], [21, 8, 21], [21, 12, 8]]

    @given(invertible, st.lists(st.text(alphabet=ALPHABET, min_size=3, max_size=3), min_size=1))
    def test_round_trip(self, matrix, blocks):
        text = "".join(blocks)
        assert block.decode(block.encode(text, matrix), matrix) == text


# ===================================================================== #
#  Dispatch
# ===================================================================== #


class TestDispatch:
    @pytest.mark.parametrize(
        "cipher, expected",
        [
            (CipherId.SHIFT, "khoor"),
            (CipherId.AFFINE, "rclla"),
            (CipherId.PLAINTEXT, "hello"),
        ],
    )
    def test_encode_with_default_keys(self, cipher, expected):
        assert ciphers.encode(cipher, "hello", KeyParams()) == expected

    def test_aliases(self):
        assert ciphers.encode("caesar", "abc") == "def"
        assert ciphers.encode("hill", "act") == "POH"

    @pytest.mark.parametrize("cipher", list(CipherId))
    def test_round_trip_on_canonical_input(self, cipher):
        params = KeyParams(keyword="MONARCHY")
        text = "WEAREDISCOVEREDSAVEYOURSELF"[:24]
        assert ciphers.decode(cipher, ciphers.encode(cipher, text, params), params) == text

    def test_check_key(self):
        ciphers.check_key(CipherId.BLOCK, KeyParams(matrix=SINGULAR))
        with pytest.raises(InvalidKey):
            ciphers.check_key(CipherId.BLOCK, KeyParams(matrix=SINGULAR), decoding=True)
        with pytest.raises(InvalidKey):
            ciphers.check_key(CipherId.AFFINE, KeyParams(a=4))
