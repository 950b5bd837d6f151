"""
Classicrypt Core Module
========================

Data models and the error taxonomy shared by every layer. The engine
lives in :mod:`classicrypt.core.engine` and the credential store in
:mod:`classicrypt.core.credentials`.
"""

from classicrypt.core.errors import (
    ClassicryptError,
    InvalidKey,
    MalformedInput,
    UserExistsError,
    UserNotFoundError,
)
from classicrypt.core.models import (
    AffineCandidate,
    AttackOutcome,
    AttackReport,
    AttackType,
    CipherId,
    CredentialMode,
    KeyParams,
    PayloadType,
    SecureCredential,
    ShiftCandidate,
    WeakCredential,
)

__all__ = [
    "AffineCandidate",
    "AttackOutcome",
    "AttackReport",
    "AttackType",
    "CipherId",
    "ClassicryptError",
    "CredentialMode",
    "InvalidKey",
    "KeyParams",
    "MalformedInput",
    "PayloadType",
    "SecureCredential",
    "ShiftCandidate",
    "UserExistsError",
    "UserNotFoundError",
    "WeakCredential",
]
