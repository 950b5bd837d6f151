"""
Classicrypt Engine
===================

Central orchestrator for the classical cipher attack lab. The
ClassicryptEngine wraps the pure cipher and attack layers with the
stateful parts of the lab: the credential store, the CSV attack log,
configuration and logging.

Architecture follows the Facade pattern (Gamma et al., 1994). Every
method is synchronous; the attack key spaces are small enough that each
call runs to completion well under a second.

References:
    - Gamma, E., Helm, R., Johnson, R., & Vlissides, J. (1994).
      Design Patterns: Elements of Reusable Object-Oriented Software.
      Addison-Wesley.
    - Sinkov, A. (1966). Elementary Cryptanalysis.
    - NIST SP 800-132 (2010). Recommendation for Password-Based Key
      Derivation.
"""

from __future__ import annotations

from typing import Optional, Sequence

from shared.config import LabConfig
from shared.logger import LabLogger
from shared.models import Finding, Severity

from classicrypt import ciphers
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
)
from classicrypt.attacks.frequency import LetterFrequencyAnalyzer
from classicrypt.core.credentials import CredentialStore
from classicrypt.core.errors import (
    InvalidKey,
    MalformedInput,
    UserExistsError,
    UserNotFoundError,
)
from classicrypt.core.models import (
    AttackLogEntry,
    AttackOutcome,
    AttackReport,
    AttackType,
    Candidate,
    CipherId,
    CredentialMode,
    CredentialRecord,
    DHExchange,
    DHResponse,
    KeyParams,
    LetterFrequency,
    LoginResult,
    PasswordSpace,
    PayloadType,
    RegistrationResult,
    RevealResult,
    SecureCredential,
    WeakCredential,
)
from classicrypt.output.attack_log import AttackLog
from classicrypt.secure import key_exchange
from classicrypt.secure.passwords import hash_password, verify_password

_BRUTE_FORCE = {
    CipherId.SHIFT: (AttackType.SHIFT_BRUTE_FORCE, brute_force_shift),
    CipherId.AFFINE: (AttackType.AFFINE_BRUTE_FORCE, brute_force_affine),
}


class ClassicryptEngine:
    """Orchestrates cipher operations, credential handling and attacks.

    Usage::

        engine = ClassicryptEngine()
        engine.register("alice", "hello", CredentialMode.WEAK, CipherId.SHIFT)
        report = engine.simulate_mitm("alice", "khoor", demo_oracle="hello")
        print(report.recovered)

    Attributes:
        config: Lab configuration.
        logger: Logger for the engine.
        store: Credential store.
        attack_log: CSV attack log.
    """

    def __init__(self, config: Optional[LabConfig] = None) -> None:
        self.config = config or LabConfig()
        self.settings = self.config.classicrypt
        self.logger = LabLogger.from_config("engine", self.config)
        self.store = CredentialStore(
            self.settings.users_path,
            LabLogger.from_config("credentials", self.config),
        )
        self.attack_log = AttackLog(self.settings.results_path)
        self._analyzer = LetterFrequencyAnalyzer()

    # ------------------------------------------------------------------ #
    #  Cipher Operations
    # ------------------------------------------------------------------ #

    def encode(
        self, cipher: CipherId, text: str, params: Optional[KeyParams] = None
    ) -> str:
        return ciphers.encode(cipher, text, params)

    def decode(
        self, cipher: CipherId, text: str, params: Optional[KeyParams] = None
    ) -> str:
        return ciphers.decode(cipher, text, params)

    def wordlist(self) -> list[str]:
        """Configured wordlist, or an empty list when the file is missing."""
        path = self.settings.wordlist_path
        try:
            return load_wordlist(path)
        except FileNotFoundError:
            self.logger.warning("Wordlist not found: %s", path)
            return []

    def frequency(self, text: str) -> LetterFrequency:
        return self._analyzer.analyze(text)

    def keyspace(
        self, charset: str, length: int, max_attempts: Optional[int] = None
    ) -> PasswordSpace:
        """Enumerate a password space, bounded by the configured limit."""
        limit = max_attempts or self.settings.password_space_limit
        space = brute_force_password(charset, length, limit)
        if space.exceeded:
            self.logger.info(
                "Password space of %d exceeds limit %d", space.total, limit
            )
        return space

    # ------------------------------------------------------------------ #
    #  Attacks
    # ------------------------------------------------------------------ #

    def brute_force(
        self,
        ciphertext: str,
        cipher: CipherId,
        demo_oracle: Optional[str] = None,
        wordlist: Optional[Sequence[str]] = None,
    ) -> AttackOutcome:
        """Exhaustive key search against a shift or affine ciphertext.

        Candidates are ranked by English-likeness for display; dictionary
        matches and oracle confirmation use enumeration order.

        Raises:
            MalformedInput: If *cipher* has no exhaustive search.
        """
        cipher = CipherId(cipher)
        if cipher not in _BRUTE_FORCE:
            raise MalformedInput(
                f"Exhaustive search supports shift and affine, not {cipher.value}"
            )
        attack_type, search = _BRUTE_FORCE[cipher]
        words = self.wordlist() if wordlist is None else list(wordlist)

        with self.logger.timed(attack_type.value) as timer:
            candidates: list[Candidate] = search(ciphertext)
            dictionary_hits = filter_candidates(candidates, words)
            confirmed = find_match(candidates, demo_oracle)

        ranked = self._analyzer.rank_candidates(candidates)
        return AttackOutcome(
            attack_type=attack_type,
            target=ciphertext,
            attempts=len(candidates),
            elapsed_seconds=timer.elapsed,
            success=confirmed is not None,
            recovered=confirmed.text if confirmed is not None else "",
            candidates=ranked[: self.settings.candidate_preview],
            matches=[c.text for c in dictionary_hits],
        )

    def dictionary_attack(
        self,
        ciphertext: str,
        cipher: CipherId,
        params: Optional[KeyParams] = None,
        wordlist: Optional[Sequence[str]] = None,
    ) -> AttackOutcome:
        """Re-encode every wordlist entry under a known key.

        The key is checked before the scan so that a bad key is reported
        instead of showing up as an empty match list.

        Raises:
            InvalidKey: If the key fails the cipher's precondition.
            MalformedInput: If the digraph keyword is unusable.
        """
        cipher = CipherId(cipher)
        ciphers.check_key(cipher, params or KeyParams())
        words = self.wordlist() if wordlist is None else list(wordlist)
        with self.logger.timed(AttackType.DICTIONARY.value) as timer:
            matches = direct_dictionary_attack(ciphertext, words, cipher, params)
        return AttackOutcome(
            attack_type=AttackType.DICTIONARY,
            target=ciphertext,
            attempts=len(words),
            elapsed_seconds=timer.elapsed,
            success=bool(matches),
            recovered=matches[0] if matches else "",
            matches=matches,
        )

    def simulate_mitm(
        self,
        username: str,
        intercepted: str,
        cipher: Optional[CipherId] = None,
        demo_oracle: Optional[str] = None,
        dh_public: Optional[str] = None,
    ) -> AttackReport:
        """Play the attacker who intercepted *username*'s login payload.

        Runs an exhaustive search when the cipher is shift or affine, a
        direct dictionary attack under the record's stored key, and
        reports the replay and (when *dh_public* is given) key-exchange
        weaknesses. Every attack run is appended to the attack log.

        Args:
            username: Target account.
            intercepted: Captured payload (usually the stored ciphertext).
            cipher: Cipher to brute-force; defaults to the record's.
            demo_oracle: Known plaintext that confirms a candidate. Real
                attackers have no such oracle; without it exhaustive
                search reports candidates but never success.
            dh_public: Intercepted client Diffie-Hellman public value.

        Raises:
            UserNotFoundError: If *username* has no record.
        """
        record = self._require(username)
        weak = isinstance(record, WeakCredential)
        if cipher is None and weak:
            cipher = record.cipher
        cipher = CipherId(cipher) if cipher is not None else None

        report = AttackReport(username=username, intercepted=intercepted, cipher=cipher)
        words = self.wordlist()

        with self.logger.operation("simulate_mitm"):
            self.logger.info("Simulating interception for %s", username)

            if cipher in _BRUTE_FORCE:
                outcome = self.brute_force(intercepted, cipher, demo_oracle, words)
                self._log_outcome(username, outcome, report)

            if weak and words:
                try:
                    outcome = self.dictionary_attack(
                        intercepted, record.cipher, record.params, words
                    )
                except (InvalidKey, MalformedInput) as exc:
                    self.logger.warning("Dictionary attack aborted: %s", exc)
                    outcome = AttackOutcome(
                        attack_type=AttackType.DICTIONARY,
                        target=intercepted,
                        error=str(exc),
                    )
                    report.findings.append(
                        Finding(
                            severity=Severity.MEDIUM,
                            title="Stored key fails cipher precondition",
                            description=(
                                f"The {record.cipher.value} key stored for "
                                f"{username} is unusable: {exc}"
                            ),
                            evidence=record.params.model_dump(),
                            recommendation="Re-register the account with a valid key.",
                        )
                    )
                self._log_outcome(username, outcome, report)

            report.findings.append(self._replay_finding(intercepted))
            if dh_public:
                report.findings.append(self._dh_finding(dh_public))

        return report

    def _log_outcome(
        self, username: str, outcome: AttackOutcome, report: AttackReport
    ) -> None:
        report.attacks.append(outcome)
        self.attack_log.record(username, outcome)
        if outcome.success:
            report.findings.append(
                Finding(
                    severity=Severity.CRITICAL,
                    title=f"Password recovered by {outcome.attack_type.value}",
                    description=(
                        f"{outcome.attempts} attempts in "
                        f"{outcome.elapsed_seconds:.3f}s recovered the stored "
                        "password from the intercepted ciphertext."
                    ),
                    evidence={"recovered": outcome.recovered},
                    recommendation=(
                        "Store passwords with a salted, slow key derivation "
                        "function (PBKDF2, scrypt, Argon2), never a reversible cipher."
                    ),
                    references=["NIST SP 800-132"],
                )
            )

    @staticmethod
    def _replay_finding(intercepted: str) -> Finding:
        return Finding(
            severity=Severity.HIGH,
            title="Replay attack",
            description=(
                "The server accepts the same login payload every time; "
                "replaying the intercepted value impersonates the user."
            ),
            evidence={"payload": intercepted},
            recommendation="Use challenge-response with a fresh random nonce.",
        )

    @staticmethod
    def _dh_finding(client_public: str) -> Finding:
        return Finding(
            severity=Severity.HIGH,
            title="Man-in-the-middle on Diffie-Hellman",
            description=(
                "Neither party is authenticated. An attacker intercepts A, "
                "sends their own A' to the server, intercepts B, sends B' to "
                "the client, and then reads all traffic."
            ),
            evidence={"client_public": client_public},
            recommendation=(
                "Authenticate the exchange (RSA/ECDSA signatures) or use TLS 1.3."
            ),
            references=["RFC 3526", "RFC 8446"],
        )

    # ------------------------------------------------------------------ #
    #  Credentials
    # ------------------------------------------------------------------ #

    def _require(self, username: str) -> CredentialRecord:
        record = self.store.get(username)
        if record is None:
            raise UserNotFoundError(f"User not found: {username}")
        return record

    def register(
        self,
        username: str,
        password: str,
        mode: CredentialMode,
        cipher: CipherId = CipherId.PLAINTEXT,
        params: Optional[KeyParams] = None,
    ) -> RegistrationResult:
        """Store a new credential record.

        Raises:
            MalformedInput: If *username* or *password* is empty.
            UserExistsError: If *username* is taken.
            InvalidKey: If a weak record's key fails its precondition.
        """
        if not username or not password:
            raise MalformedInput("Username and password are required")
        if self.store.get(username) is not None:
            raise UserExistsError(f"User already exists: {username}")

        mode = CredentialMode(mode)
        params = params or KeyParams()

        if mode is CredentialMode.WEAK:
            cipher = CipherId(cipher)
            stored = ciphers.encode(cipher, password, params)
            self.store.add(
                WeakCredential(
                    username=username,
                    cipher=cipher,
                    params=params,
                    stored_password=stored,
                )
            )
            if cipher is CipherId.PLAINTEXT:
                note = "Stored in plaintext (very weak!)"
            else:
                note = f"Stored with {cipher.value} cipher ({params.describe(cipher)})"
            return RegistrationResult(
                username=username, mode=mode, stored=stored, note=note
            )

        derived = hash_password(
            password,
            iterations=self.settings.pbkdf2_iterations,
            keylen=self.settings.pbkdf2_keylen,
            digest=self.settings.pbkdf2_digest,
            salt_bytes=self.settings.salt_bytes,
        )
        self.store.add(SecureCredential(username=username, **derived.model_dump()))
        return RegistrationResult(
            username=username,
            mode=mode,
            stored="[hashed]",
            note=f"Stored with PBKDF2-{derived.digest.upper()} + salt",
        )

    def login(
        self,
        username: str,
        payload: str,
        payload_type: PayloadType = PayloadType.PLAINTEXT,
    ) -> LoginResult:
        """Authenticate *payload* against the stored record.

        A weak record accepts its raw ciphertext as well, which is exactly
        what makes replay possible.

        Raises:
            UserNotFoundError: If *username* has no record.
        """
        record = self._require(username)
        payload_type = PayloadType(payload_type)

        if isinstance(record, WeakCredential):
            if payload_type is PayloadType.CIPHERTEXT:
                success = payload == record.stored_password
            else:
                encoded = ciphers.encode(record.cipher, payload, record.params)
                success = encoded == record.stored_password
        else:
            success = verify_password(payload, record)

        self.logger.info(
            "Login %s for %s", "succeeded" if success else "failed", username
        )
        return LoginResult(
            username=username,
            success=success,
            message="Authentication successful" if success else "Authentication failed",
        )

    def reveal(self, username: str) -> RevealResult:
        """Try to recover the plaintext behind a stored record.

        Shift and affine records are broken by exhaustive search, taking
        the most English-like candidate that contains a vowel. Digraph and
        block records are decoded with their stored key. Secure records
        cannot be reversed.

        Raises:
            UserNotFoundError: If *username* has no record.
        """
        record = self._require(username)
        if isinstance(record, SecureCredential):
            return RevealResult(
                username=username,
                mode=CredentialMode.SECURE,
                success=False,
                reason=(
                    f"PBKDF2-{record.digest} hash cannot be reversed; only "
                    "verification or guessing is possible"
                ),
            )

        stored = record.stored_password
        if record.cipher in _BRUTE_FORCE:
            attack_type, search = _BRUTE_FORCE[record.cipher]
            best = first_readable(self._analyzer.rank_candidates(search(stored)))
            if best is not None:
                key = ", ".join(str(k) for k in best.key)
                return RevealResult(
                    username=username,
                    mode=CredentialMode.WEAK,
                    success=True,
                    recovered=best.text,
                    method=f"{attack_type.value} (key {key})",
                )

        try:
            recovered = ciphers.decode(record.cipher, stored, record.params)
        except (InvalidKey, MalformedInput) as exc:
            return RevealResult(
                username=username,
                mode=CredentialMode.WEAK,
                success=False,
                reason=f"{record.cipher.value} decryption failed: {exc}",
            )
        return RevealResult(
            username=username,
            mode=CredentialMode.WEAK,
            success=True,
            recovered=recovered,
            method=f"{record.cipher.value} with stored key",
        )

    def users(self) -> list[CredentialRecord]:
        return self.store.all()

    # ------------------------------------------------------------------ #
    #  Key Exchange
    # ------------------------------------------------------------------ #

    def dh_exchange(self) -> DHExchange:
        exchange = key_exchange.simulate_exchange()
        self.logger.debug("Simulated DH exchange, keys match: %s", exchange.keys_match)
        return exchange

    def dh_respond(self, client_public: int) -> DHResponse:
        """Server side of the toy exchange.

        Raises:
            MalformedInput: If *client_public* is outside the group.
        """
        try:
            return key_exchange.server_respond(client_public)
        except ValueError as exc:
            raise MalformedInput(str(exc)) from exc

    # ------------------------------------------------------------------ #
    #  Attack Log
    # ------------------------------------------------------------------ #

    def results(self) -> list[AttackLogEntry]:
        return self.attack_log.read()
