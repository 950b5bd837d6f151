"""
Classicrypt Shared Models
==========================

Pydantic models used by every command: :class:`Severity`, the
:class:`Finding` that records one demonstrated weakness, and the
:class:`RunResult` envelope written out by ``--output json``.

References:
    - FIRST (2019). CVSS v3.1 Specification, qualitative severity scale.
    - Pydantic v2 documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

import json
from collections import Counter
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Severity(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"


class Finding(BaseModel):
    """One weakness an attack simulation demonstrated.

    Attributes:
        severity:       CVSS-style qualitative rating.
        title:          Short name of the weakness.
        description:    What the attacker can do and how.
        evidence:       Supporting data; dicts and lists are stored as JSON.
        recommendation: Mitigation the demo deliberately does not apply.
        references:     Standards or papers backing the recommendation.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    severity: Severity
    title: str = Field(min_length=1, max_length=256)
    description: str = Field(min_length=1)
    evidence: str = ""
    recommendation: str = ""
    references: list[str] = Field(default_factory=list)

    @field_validator("evidence", mode="before")
    @classmethod
    def _evidence_as_text(cls, value: Any) -> str:
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False, default=str)
        return value if isinstance(value, str) else str(value)


class RunResult(BaseModel):
    """What one CLI operation did, for the JSON report.

    ``payload`` holds the operation's own result model dumped to a dict.
    """

    model_config = ConfigDict(extra="ignore")

    tool_name: str = "classicrypt"
    operation: str = Field(min_length=1)
    target: str = ""
    start_time: datetime = Field(default_factory=_now)
    end_time: Optional[datetime] = None
    findings: list[Finding] = Field(default_factory=list)
    summary: str = ""
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    @property
    def severity_counts(self) -> dict[str, int]:
        tally = Counter(f.severity.value for f in self.findings)
        return {s.value: tally[s.value] for s in Severity}

    def finalize(self, summary: Optional[str] = None) -> RunResult:
        """Set ``end_time`` and a default summary; returns ``self``."""
        self.end_time = _now()
        if summary is not None:
            self.summary = summary
        elif not self.summary:
            listed = ", ".join(
                f"{sev} {n}" for sev, n in self.severity_counts.items() if n
            )
            self.summary = f"{self.operation}: {len(self.findings)} finding(s)" + (
                f" ({listed})" if listed else ""
            )
        return self
