import pytest

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
    first_readable,
    is_success,
)
from classicrypt.attacks.frequency import LetterFrequencyAnalyzer
from classicrypt.ciphers import affine, shift
from classicrypt.core.models import AffineCandidate, CipherId, KeyParams, ShiftCandidate

ENGLISH = (
    "Cryptography is the practice and study of techniques for secure "
    "communication in the presence of adversarial behavior"
)


class TestExhaustiveSearch:
    def test_shift_enumerates_all_keys_in_order(self):
        candidates = brute_force_shift("KHOOR")
        assert len(candidates) == 26
        assert [c.shift for c in candidates] == list(range(26))
        assert candidates[3] == ShiftCandidate(shift=3, text="HELLO")
        assert candidates[0].text == "KHOOR"

    def test_affine_enumerates_312_keys_in_order(self):
        candidates = brute_force_affine("RCLLA")
        assert len(candidates) == 312
        keys = [c.key for c in candidates]
        assert keys == sorted(keys)
        assert AffineCandidate(a=5, b=8, text="HELLO") in candidates
        assert {c.a for c in candidates} == set(affine.VALID_MULTIPLIERS)

    def test_candidate_keys(self):
        assert ShiftCandidate(shift=4, text="x").key == (4,)
        assert AffineCandidate(a=3, b=1, text="x").key == (3, 1)

    def test_is_success_is_case_insensitive(self):
        assert is_success("HELLO", "hello")
        assert not is_success("HELLO", "help")
        assert not is_success("HELLO", None)

    def test_find_match(self):
        match = find_match(brute_force_shift("khoor"), "HELLO")
        assert match == ShiftCandidate(shift=3, text="hello")
        assert find_match(brute_force_shift("khoor"), None) is None

    def test_first_readable(self):
        assert first_readable([ShiftCandidate(shift=0, text="xzq"),
                               ShiftCandidate(shift=1, text="abc")]).shift == 1
        assert first_readable([ShiftCandidate(shift=0, text="xzq")]) is None


class TestPasswordSpace:
    def test_small_space_is_enumerated(self):
        space = brute_force_password("01", 3)
        assert space.total == 8
        assert space.generated == 8
        assert space.passwords[:3] == ["000", "001", "010"]
        assert not space.exceeded

    def test_large_space_is_refused(self):
        space = brute_force_password("0123456789", 5, max_attempts=10_000)
        assert space.exceeded
        assert space.total == 100_000
        assert space.passwords == []

    def test_limit_is_inclusive(self):
        space = brute_force_password("0123456789", 4, max_attempts=10_000)
        assert not space.exceeded
        assert space.generated == 10_000

    def test_duplicate_symbols_are_collapsed(self):
        assert brute_force_password("aab", 2).total == 4

    def test_empty_charset(self):
        with pytest.raises(ValueError):
            brute_force_password("", 2)


class TestDictionary:
    def test_direct_attack(self):
        matches = direct_dictionary_attack(
            "khoor", ["hello", "world"], CipherId.SHIFT, KeyParams(shift=3)
        )
        assert matches == ["hello"]

    def test_direct_attack_is_case_insensitive(self):
        matches = direct_dictionary_attack(
            "RCLLA", ["hello", "Hello", "world"], CipherId.AFFINE, KeyParams(a=5, b=8)
        )
        assert matches == ["hello", "Hello"]

    def test_direct_attack_block_cipher(self):
        assert direct_dictionary_attack("POH", ["cat", "act"], CipherId.BLOCK) == ["act"]

    def test_direct_attack_with_unusable_key_matches_nothing(self):
        assert direct_dictionary_attack("rclla", ["hello"], CipherId.AFFINE, KeyParams(a=2)) == []

    def test_direct_attack_skips_entries_it_cannot_encode(self):
        words = ["world", None, 42, "hello", ["x"]]
        assert direct_dictionary_attack("khoor", words, CipherId.SHIFT, KeyParams(shift=3)) == ["hello"]

    def test_direct_attack_empty_wordlist(self):
        assert direct_dictionary_attack("khoor", [], CipherId.SHIFT) == []

    def test_filter_candidates(self):
        hits = filter_candidates(brute_force_shift("khoor"), ["world", "HELLO "])
        assert hits == [ShiftCandidate(shift=3, text="hello")]

    def test_load_wordlist(self, tmp_path):
        path = tmp_path / "words.txt"
        path.write_text("Hello\n\n  world  \n", encoding="utf-8")
        assert load_wordlist(path) == ["hello", "world"]

    def test_load_missing_wordlist(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_wordlist(tmp_path / "missing.txt")


class TestFrequency:
    def test_empty_text(self):
        result = LetterFrequencyAnalyzer().analyze("1234")
        assert result.total == 0
        assert result.distribution == []

    def test_distribution(self):
        result = LetterFrequencyAnalyzer().analyze("aab!")
        assert result.total == 3
        assert result.distribution[0].letter == "A"
        assert result.distribution[0].count == 2
        assert result.distribution[0].percentage == pytest.approx(66.67)
        assert result.ic == pytest.approx(1 / 3)

    def test_english_scores_better_than_ciphertext(self):
        analyzer = LetterFrequencyAnalyzer()
        assert analyzer.score(ENGLISH) < analyzer.score(shift.encode(ENGLISH, 11))
        assert analyzer.score("") == float("inf")

    def test_shift_preserves_index_of_coincidence(self):
        analyzer = LetterFrequencyAnalyzer()
        plain = analyzer.analyze(ENGLISH)
        cipher = analyzer.analyze(shift.encode(ENGLISH, 7))
        assert plain.ic == pytest.approx(cipher.ic)

    def test_rank_puts_true_key_first(self):
        analyzer = LetterFrequencyAnalyzer()
        ranked = analyzer.rank_candidates(brute_force_shift(shift.encode(ENGLISH, 7)))
        assert ranked[0].shift == 7
        assert len(ranked) == 26

    def test_rank_affine(self):
        analyzer = LetterFrequencyAnalyzer()
        ranked = analyzer.rank_candidates(brute_force_affine(affine.encode(ENGLISH, 5, 8)))
        assert ranked[0].key == (5, 8)

    def test_rank_is_stable(self):
        analyzer = LetterFrequencyAnalyzer()
        same = [ShiftCandidate(shift=i, text="123") for i in range(3)]
        assert analyzer.rank_candidates(same) == same
