import json

import pytest

from shared.models import Severity

from classicrypt.core.errors import (
    InvalidKey,
    MalformedInput,
    UserExistsError,
    UserNotFoundError,
)
from classicrypt.core.models import (
    AttackType,
    CipherId,
    CredentialMode,
    KeyParams,
    PayloadType,
)

SINGULAR = [[2, 0, 0], [0, 1, 0], [0, 0, 1]]


class TestRegistration:
    def test_weak_shift(self, engine):
        result = engine.register("alice", "hello", CredentialMode.WEAK, CipherId.SHIFT)
        assert result.stored == "khoor"
        assert "shift 3" in result.note
        assert engine.store.get("alice").stored_password == "khoor"

    def test_weak_plaintext(self, engine):
        result = engine.register("bob", "hunter2", CredentialMode.WEAK)
        assert result.stored == "hunter2"
        assert "plaintext" in result.note

    def test_secure(self, engine):
        result = engine.register("carol", "s3cret", CredentialMode.SECURE)
        assert result.stored == "[hashed]"
        record = engine.store.get("carol")
        assert record.mode == "secure"
        assert record.iterations == 1_000

    def test_duplicate(self, engine):
        engine.register("alice", "hello", CredentialMode.WEAK)
        with pytest.raises(UserExistsError):
            engine.register("alice", "other", CredentialMode.SECURE)

    def test_missing_fields(self, engine):
        with pytest.raises(MalformedInput):
            engine.register("", "pw", CredentialMode.WEAK)
        with pytest.raises(MalformedInput):
            engine.register("dave", "", CredentialMode.WEAK)

    def test_invalid_key_stores_nothing(self, engine):
        with pytest.raises(InvalidKey):
            engine.register("erin", "hello", CredentialMode.WEAK, CipherId.AFFINE, KeyParams(a=2))
        assert engine.store.get("erin") is None


class TestLogin:
    def test_weak_plaintext_login(self, engine):
        engine.register("alice", "hello", CredentialMode.WEAK, CipherId.AFFINE)
        assert engine.login("alice", "hello").success
        assert not engine.login("alice", "world").success

    def test_ciphertext_replay_is_accepted(self, engine):
        engine.register("alice", "hello", CredentialMode.WEAK, CipherId.SHIFT)
        result = engine.login("alice", "khoor", PayloadType.CIPHERTEXT)
        assert result.success
        assert result.message == "Authentication successful"

    def test_secure_login(self, engine):
        engine.register("carol", "s3cret", CredentialMode.SECURE)
        assert engine.login("carol", "s3cret").success
        assert not engine.login("carol", "guess").success

    def test_unknown_user(self, engine):
        with pytest.raises(UserNotFoundError):
            engine.login("nobody", "pw")


class TestReveal:
    def test_shift_recovered_by_brute_force(self, engine):
        password = "meetmeatthelibraryaftertheseminarontuesday"
        engine.register("alice", password, CredentialMode.WEAK, CipherId.SHIFT, KeyParams(shift=11))
        result = engine.reveal("alice")
        assert result.success
        assert result.recovered == password
        assert result.method.startswith("Shift Brute-Force")

    def test_affine_recovered(self, engine):
        engine.register("bob", "hello", CredentialMode.WEAK, CipherId.AFFINE)
        result = engine.reveal("bob")
        assert result.success
        assert result.method.startswith("Affine Brute-Force")

    def test_block_decoded_with_stored_key(self, engine):
        engine.register("carol", "act", CredentialMode.WEAK, CipherId.BLOCK)
        result = engine.reveal("carol")
        assert result.recovered == "ACT"
        assert result.method == "block with stored key"

    def test_digraph_decoded_with_stored_key(self, engine):
        engine.register("dave", "attack", CredentialMode.WEAK, CipherId.DIGRAPH)
        assert engine.reveal("dave").recovered == "ATTACK"

    def test_singular_block_key_fails(self, engine):
        engine.register("erin", "act", CredentialMode.WEAK, CipherId.BLOCK, KeyParams(matrix=SINGULAR))
        result = engine.reveal("erin")
        assert not result.success
        assert "not invertible" in result.reason

    def test_secure_cannot_be_revealed(self, engine):
        engine.register("frank", "pw", CredentialMode.SECURE)
        result = engine.reveal("frank")
        assert not result.success
        assert "cannot be reversed" in result.reason


class TestAttacks:
    def test_brute_force_with_oracle(self, engine):
        outcome = engine.brute_force("KHOOR", CipherId.SHIFT, demo_oracle="hello")
        assert outcome.success
        assert outcome.recovered == "HELLO"
        assert outcome.attempts == 26

    def test_dictionary_attack_reports_bad_key(self, engine):
        with pytest.raises(InvalidKey, match="coprime"):
            engine.dictionary_attack("rclla", CipherId.AFFINE, KeyParams(a=2), ["hello"])
        assert "HELLO" in outcome.matches
        assert len(outcome.candidates) == 10

    def test_brute_force_without_oracle(self, engine):
        outcome = engine.brute_force("RCLLA", CipherId.AFFINE, wordlist=["hello"])
        assert outcome.attempts == 312
        assert not outcome.success
        assert outcome.matches == ["HELLO"]

    def test_brute_force_unsupported_cipher(self, engine):
        with pytest.raises(MalformedInput):
            engine.brute_force("POH", CipherId.BLOCK)

    def test_dictionary_attack(self, engine):
        outcome = engine.dictionary_attack("khoor", CipherId.SHIFT, KeyParams(), ["hello", "world"])
        assert outcome.success
        assert outcome.matches == ["hello"]
        assert outcome.attempts == 2

    def test_keyspace(self, engine):
        assert engine.keyspace("01", 2).passwords == ["00", "01", "10", "11"]
        assert engine.keyspace("0123456789", 6).exceeded

    def test_wordlist_missing(self, lab_config, tmp_path):
        from classicrypt.core.engine import ClassicryptEngine

        lab_config.classicrypt.wordlist = str(tmp_path / "missing.txt")
        assert ClassicryptEngine(lab_config).wordlist() == []


class TestSimulateMitm:
    def test_shift_interception(self, engine):
        engine.register("alice", "hello", CredentialMode.WEAK, CipherId.SHIFT)
        report = engine.simulate_mitm("alice", "khoor", demo_oracle="hello")

        assert report.cipher is CipherId.SHIFT
        types = [a.attack_type for a in report.attacks]
        assert types == [AttackType.SHIFT_BRUTE_FORCE, AttackType.DICTIONARY]
        assert report.attacks[0].success
        assert report.attacks[1].matches == ["hello"]
        assert report.recovered == "hello"

        titles = [f.title for f in report.findings]
        assert "Replay attack" in titles
        assert any(f.severity is Severity.CRITICAL for f in report.findings)

        logged = engine.results()
        assert [e.attack_type for e in logged] == ["Shift Brute-Force", "Dictionary Attack"]
        assert logged[0].attempts == 26
        assert logged[0].recovered_plaintext == "hello"

    def test_without_oracle_brute_force_never_succeeds(self, engine):
        engine.register("alice", "hello", CredentialMode.WEAK, CipherId.SHIFT)
        report = engine.simulate_mitm("alice", "khoor")
        assert not report.attacks[0].success
        assert "hello" in report.attacks[0].matches

    def test_affine_interception(self, engine):
        engine.register("bob", "hello", CredentialMode.WEAK, CipherId.AFFINE)
        report = engine.simulate_mitm("bob", "rclla", demo_oracle="hello")
        assert report.attacks[0].attack_type is AttackType.AFFINE_BRUTE_FORCE
        assert report.attacks[0].attempts == 312
        assert report.attacks[0].recovered == "hello"

    def test_block_only_dictionary(self, engine):
        engine.register("carol", "secret", CredentialMode.WEAK, CipherId.BLOCK)
        stored = engine.store.get("carol").stored_password
        report = engine.simulate_mitm("carol", stored)
        assert [a.attack_type for a in report.attacks] == [AttackType.DICTIONARY]
        assert report.attacks[0].matches == ["secret"]

    def test_dh_finding(self, engine):
        engine.register("alice", "hello", CredentialMode.WEAK)
        report = engine.simulate_mitm("alice", "hello", dh_public="1234")
        assert "Man-in-the-middle on Diffie-Hellman" in [f.title for f in report.findings]

    def test_invalid_stored_key(self, engine):
        engine.store.path.parent.mkdir(parents=True, exist_ok=True)
        engine.store.path.write_text(json.dumps({"users": [
            {"username": "mallory", "mode": "weak", "cipher": "affine",
             "params": {"a": 2, "b": 1}, "storedPassword": "xyz"},
        ]}))
        report = engine.simulate_mitm("mallory", "xyz")
        dictionary = report.attacks[-1]
        assert dictionary.attack_type is AttackType.DICTIONARY
        assert "coprime" in dictionary.error
        assert "Stored key fails cipher precondition" in [f.title for f in report.findings]

    def test_secure_user_only_gets_findings(self, engine):
        engine.register("carol", "pw", CredentialMode.SECURE)
        report = engine.simulate_mitm("carol", "pw")
        assert report.attacks == []
        assert [f.title for f in report.findings] == ["Replay attack"]

    def test_unknown_user(self, engine):
        with pytest.raises(UserNotFoundError):
            engine.simulate_mitm("ghost", "x")


class TestKeyExchange:
    def test_exchange(self, engine):
        assert engine.dh_exchange().keys_match

    def test_respond_rejects_degenerate_value(self, engine):
        with pytest.raises(MalformedInput):
            engine.dh_respond(1)
