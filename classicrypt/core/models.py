"""
Classicrypt Core Data Models
=============================

Pydantic models for the classical cipher attack lab: cipher identifiers
and key parameters, exhaustive-search candidates, attack outcomes and
reports, credential records (weak cipher-based and secure PBKDF2-based),
frequency analysis results and the toy Diffie-Hellman exchange.

All models are serialisable to JSON and are consumed by the CLI output
layer, the credential store and the attack log.

References:
    - Sinkov, A. (1966). Elementary Cryptanalysis: A Mathematical
      Approach. Mathematical Association of America.
    - NIST SP 800-132 (2010). Recommendation for Password-Based Key
      Derivation.
    - RFC 3526 (2003). More Modular Exponential (MODP) Diffie-Hellman
      groups for Internet Key Exchange (IKE).
"""

from __future__ import annotations

import datetime as _dt
import enum
from typing import Annotated, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from shared.models import Finding


# ===================================================================== #
#  Enumerations
# ===================================================================== #


class CipherId(str, enum.Enum):
    """Cipher used to protect a weak credential record.

    Accepts the classical names as aliases, so ``CipherId("caesar")`` is
    :attr:`SHIFT`, ``"playfair"`` is :attr:`DIGRAPH` and ``"hill"`` is
    :attr:`BLOCK`.
    """

    SHIFT = "shift"
    AFFINE = "affine"
    DIGRAPH = "digraph"
    BLOCK = "block"
    PLAINTEXT = "plaintext"

    @classmethod
    def _missing_(cls, value: object) -> Optional[CipherId]:
        if not isinstance(value, str):
            return None
        name = value.strip().lower()
        aliases = {
            "caesar": cls.SHIFT,
            "playfair": cls.DIGRAPH,
            "hill": cls.BLOCK,
            "none": cls.PLAINTEXT,
        }
        if name in aliases:
            return aliases[name]
        for member in cls:
            if member.value == name:
                return member
        return None


class CredentialMode(str, enum.Enum):
    """How a password is stored: reversible cipher or one-way KDF."""

    WEAK = "weak"
    SECURE = "secure"


class PayloadType(str, enum.Enum):
    """What a login payload contains for a weak record."""

    PLAINTEXT = "plaintext"
    CIPHERTEXT = "ciphertext"


class AttackType(str, enum.Enum):
    """Labels written to the attack log."""

    SHIFT_BRUTE_FORCE = "Shift Brute-Force"
    AFFINE_BRUTE_FORCE = "Affine Brute-Force"
    DICTIONARY = "Dictionary Attack"


# ===================================================================== #
#  Keys
# ===================================================================== #

DEFAULT_MATRIX: tuple[tuple[int, int, int], ...] = (
    (6, 24, 1),
    (13, 16, 10),
    (20, 17, 15),
)


class KeyParams(BaseModel):
    """Key material for every cipher, with the lab's default keys.

    Each cipher reads only the fields it needs: ``shift`` for the shift
    cipher, ``a``/``b`` for the affine cipher, ``keyword`` for the
    digraph grid and ``matrix`` for the block cipher.

    Attributes:
        shift: Shift cipher offset.
        a: Affine multiplier (must be coprime to 26 at use).
        b: Affine offset.
        keyword: Digraph grid keyword.
        matrix: 3x3 block cipher key matrix, row-major.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    shift: int = 3
    a: int = 5
    b: int = 8
    keyword: str = Field(
        default="SECRET", validation_alias=AliasChoices("keyword", "key")
    )
    matrix: list[list[int]] = Field(
        default_factory=lambda: [list(row) for row in DEFAULT_MATRIX],
        validation_alias=AliasChoices("matrix", "keyMatrix", "key_matrix"),
    )

    def describe(self, cipher: CipherId) -> str:
        """Short human-readable description of the key used by *cipher*."""
        if cipher is CipherId.SHIFT:
            return f"shift {self.shift}"
        if cipher is CipherId.AFFINE:
            return f"a={self.a}, b={self.b}"
        if cipher is CipherId.DIGRAPH:
            return f"keyword {self.keyword!r}"
        if cipher is CipherId.BLOCK:
            return "matrix " + ";".join(",".join(map(str, r)) for r in self.matrix)
        return "no key"


# ===================================================================== #
#  Exhaustive-search candidates
# ===================================================================== #


class ShiftCandidate(BaseModel):
    """One shift-cipher key and the text it decodes to."""

    model_config = ConfigDict(frozen=True)

    shift: int
    text: str

    @property
    def key(self) -> tuple[int, ...]:
        return (self.shift,)


class AffineCandidate(BaseModel):
    """One affine key pair and the text it decodes to."""

    model_config = ConfigDict(frozen=True)

    a: int
    b: int
    text: str

    @property
    def key(self) -> tuple[int, ...]:
        return (self.a, self.b)


Candidate = Union[ShiftCandidate, AffineCandidate]


class PasswordSpace(BaseModel):
    """Enumeration of every password of a given length over a charset.

    When the space exceeds *max_attempts* nothing is generated and
    *exceeded* is set.
    """

    charset: str
    length: int
    total: int
    max_attempts: int
    exceeded: bool = False
    passwords: list[str] = Field(default_factory=list)

    @property
    def generated(self) -> int:
        return len(self.passwords)


# ===================================================================== #
#  Frequency Analysis
# ===================================================================== #


class LetterCount(BaseModel):
    """Occurrences of one letter.

    Attributes:
        letter: Uppercase letter A-Z.
        count: Number of occurrences.
        percentage: Share of all letters, in percent.
    """

    letter: str
    count: int
    percentage: float


class LetterFrequency(BaseModel):
    """Letter frequency analysis of a text.

    Attributes:
        total: Number of letters analysed (non-letters ignored).
        distribution: Letters seen, most frequent first.
        ic: Index of Coincidence of the letter histogram.
        chi_squared: Pearson statistic against English letter frequencies.
        p_value: Goodness-of-fit p-value for *chi_squared*.
    """

    total: int = 0
    distribution: list[LetterCount] = Field(default_factory=list)
    ic: float = 0.0
    chi_squared: float = 0.0
    p_value: float = 1.0


# ===================================================================== #
#  Credentials
# ===================================================================== #


class DerivedKey(BaseModel):
    """PBKDF2 output plus every parameter needed to recompute it.

    Attributes:
        salt: Hex-encoded random salt.
        derived: Hex-encoded derived key.
        iterations: PBKDF2 iteration count.
        keylen: Derived key length in bytes.
        digest: Hash name understood by :mod:`hashlib` (e.g. ``sha512``).
    """

    salt: str
    derived: str
    iterations: int = Field(..., gt=0)
    keylen: int = Field(..., gt=0)
    digest: str


class WeakCredential(BaseModel):
    """A password stored as classical-cipher ciphertext (reversible)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    username: str = Field(..., min_length=1)
    mode: Literal["weak"] = "weak"
    cipher: CipherId = CipherId.PLAINTEXT
    params: KeyParams = Field(default_factory=KeyParams)
    stored_password: str = Field(
        default="",
        validation_alias=AliasChoices("stored_password", "storedPassword"),
    )

    @field_validator("cipher", mode="before")
    @classmethod
    def _resolve_alias(cls, v: object) -> object:
        """Map classical cipher names (caesar, playfair, hill) to identifiers."""
        if isinstance(v, str):
            return CipherId(v)
        return v


class SecureCredential(DerivedKey):
    """A password stored as a salted PBKDF2 derived key (one-way)."""

    model_config = ConfigDict(extra="ignore")

    username: str = Field(..., min_length=1)
    mode: Literal["secure"] = "secure"


CredentialRecord = Annotated[
    Union[WeakCredential, SecureCredential], Field(discriminator="mode")
]


class CredentialFile(BaseModel):
    """On-disk layout of the credential store: ``{"users": [...]}``."""

    users: list[CredentialRecord] = Field(default_factory=list)


class RegistrationResult(BaseModel):
    username: str
    mode: CredentialMode
    stored: str
    note: str = ""


class LoginResult(BaseModel):
    username: str
    success: bool
    message: str


class RevealResult(BaseModel):
    """Outcome of trying to recover a stored password.

    Attributes:
        username: Target record.
        mode: Storage mode of the record.
        success: Whether a plaintext was recovered.
        recovered: Recovered plaintext, or empty.
        method: How it was recovered (cipher name or brute force).
        reason: Why recovery failed, when it did.
    """

    username: str
    mode: CredentialMode
    success: bool
    recovered: str = ""
    method: str = ""
    reason: str = ""


# ===================================================================== #
#  Attacks
# ===================================================================== #


class AttackOutcome(BaseModel):
    """Result of one attack run against an intercepted ciphertext.

    Attributes:
        attack_type: Label of the attack (see :class:`AttackType`).
        target: The intercepted ciphertext.
        attempts: Keys or wordlist entries tried.
        elapsed_seconds: Wall-clock time of the run.
        success: Whether the demo oracle confirmed a candidate.
        recovered: Confirmed plaintext, or empty.
        candidates: Best-ranked candidates, for display.
        matches: Dictionary hits (decoded candidates or wordlist entries).
        error: Precondition failure that stopped the attack, if any.
    """

    attack_type: AttackType
    target: str
    attempts: int = 0
    elapsed_seconds: float = 0.0
    success: bool = False
    recovered: str = ""
    candidates: list[Union[ShiftCandidate, AffineCandidate]] = Field(
        default_factory=list
    )
    matches: list[str] = Field(default_factory=list)
    error: str = ""


class AttackReport(BaseModel):
    """Everything an interception of one login payload yields."""

    username: str
    intercepted: str
    cipher: Optional[CipherId] = None
    timestamp: _dt.datetime = Field(
        default_factory=lambda: _dt.datetime.now(_dt.timezone.utc)
    )
    attacks: list[AttackOutcome] = Field(default_factory=list)
    findings: list[Finding] = Field(default_factory=list)

    @property
    def recovered(self) -> str:
        """First plaintext recovered by any attack, or empty."""
        for outcome in self.attacks:
            if outcome.success:
                return outcome.recovered
        return ""


class AttackLogEntry(BaseModel):
    """One row of the CSV attack log, in file column order."""

    timestamp: str
    username: str
    attack_type: str
    target: str
    attempts: int
    elapsed_seconds: float
    success: bool
    recovered_plaintext: str = ""


# ===================================================================== #
#  Key Exchange
# ===================================================================== #


class DHKeyPair(BaseModel):
    """One party's view of a Diffie-Hellman run, hex-encoded."""

    private: str
    public: str
    shared: str


class DHExchange(BaseModel):
    """Both parties of a simulated unauthenticated exchange."""

    client: DHKeyPair
    server: DHKeyPair
    keys_match: bool
    note: str = ""


class DHResponse(BaseModel):
    """Server answer to a client public value (toy endpoint)."""

    server_public: str
    shared_key: str
    note: str = ""
