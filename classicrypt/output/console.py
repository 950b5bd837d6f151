"""
Classicrypt Console Output
===========================

Rich-based formatters for cipher results, exhaustive-search candidates,
attack reports, credential records, letter frequencies and the
Diffie-Hellman exchange.

Uses the shared console infrastructure for consistent styling.

References:
    - Rich Library Documentation. https://rich.readthedocs.io/
"""

from __future__ import annotations

from typing import Optional, Sequence

from rich.bar import Bar
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shared.console import LabConsole

from classicrypt.core.models import (
    AttackLogEntry,
    AttackOutcome,
    AttackReport,
    Candidate,
    DHExchange,
    DHResponse,
    LetterFrequency,
    LoginResult,
    PasswordSpace,
    RegistrationResult,
    RevealResult,
    ShiftCandidate,
    WeakCredential,
)

_PREVIEW_WORDS = 20


def _key_label(candidate: Candidate) -> str:
    if isinstance(candidate, ShiftCandidate):
        return f"shift={candidate.shift}"
    return f"a={candidate.a}, b={candidate.b}"


def _truncate(value: str, width: int = 24) -> str:
    return value if len(value) <= width else value[: width - 3] + "..."


class ClassicryptConsoleOutput:
    """Console output formatters for Classicrypt results.

    Usage::

        output = ClassicryptConsoleOutput(LabConsole())
        output.display_candidates(candidates, "Shift brute force")
        output.display_report(report)
    """

    def __init__(self, console: Optional[LabConsole] = None) -> None:
        self.console = console or LabConsole()
        self._rich = self.console.rich

    # ------------------------------------------------------------------ #
    #  Ciphers
    # ------------------------------------------------------------------ #

    def display_transform(
        self, operation: str, cipher: str, key: str, source: str, result: str
    ) -> None:
        body = Text()
        body.append("Cipher: ", style="bold")
        body.append(f"{cipher}\n")
        body.append("Key:    ", style="bold")
        body.append(f"{key}\n")
        body.append("Input:  ", style="bold")
        body.append(f"{source}\n")
        body.append("Output: ", style="bold")
        body.append(result, style="bold bright_green")
        self._rich.print(
            Panel(body, title=operation.title(), border_style="bright_cyan")
        )

    # ------------------------------------------------------------------ #
    #  Attacks
    # ------------------------------------------------------------------ #

    def display_candidates(
        self, candidates: Sequence[Candidate], title: str, limit: Optional[int] = None
    ) -> None:
        shown = candidates[:limit] if limit else candidates
        self.console.table(
            title,
            ["#", "Key", "Candidate"],
            [(i, _key_label(c), c.text) for i, c in enumerate(shown, start=1)],
            caption=f"{len(shown)} of {len(candidates)} candidates",
            styles=["dim", "cyan", "bright_white"],
        )

    def display_matches(self, matches: Sequence[str], title: str = "Dictionary Matches") -> None:
        if not matches:
            self.console.warning("No dictionary match")
            return
        self.console.table(title, ["#", "Match"], list(enumerate(matches, start=1)))

    def display_outcome(self, outcome: AttackOutcome) -> None:
        self.console.section(outcome.attack_type.value)
        if outcome.error:
            self.console.error(outcome.error)
            return
        self.console.info(
            f"{outcome.attempts} attempts in {outcome.elapsed_seconds:.3f}s"
        )
        if outcome.candidates:
            self.display_candidates(outcome.candidates, "Most English-like candidates")
        if outcome.matches:
            self.display_matches(outcome.matches)
        if outcome.success:
            self.console.success(f"Recovered: {outcome.recovered}")

    def display_report(self, report: AttackReport) -> None:
        cipher = report.cipher.value if report.cipher else "unknown"
        self.console.section(f"Interception of {report.username}")
        self.console.info(f"Payload: {report.intercepted}  (cipher: {cipher})")
        for outcome in report.attacks:
            self.display_outcome(outcome)
        self.console.blank()
        self.console.findings_table(report.findings)
        if report.recovered:
            self.console.success(f"Password recovered: {report.recovered}")
        else:
            self.console.warning("No password confirmed")

    def display_password_space(self, space: PasswordSpace) -> None:
        self.console.section("Password Space")
        self.console.info(
            f"{len(space.charset)} symbols ^ {space.length} = {space.total:,} passwords"
        )
        if space.exceeded:
            self.console.warning(
                f"Too many combinations ({space.total:,}); limit is {space.max_attempts:,}"
            )
            return
        preview = ", ".join(space.passwords[:_PREVIEW_WORDS])
        more = " ..." if space.generated > _PREVIEW_WORDS else ""
        self.console.success(f"Generated {space.generated:,}: {preview}{more}")

    def display_frequency(self, result: LetterFrequency) -> None:
        self.console.section("Letter Frequency")
        if result.total == 0:
            self.console.warning("No letters to analyse")
            return

        tbl = Table(
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        tbl.add_column("Letter", justify="center")
        tbl.add_column("Count", justify="right")
        tbl.add_column("%", justify="right")
        tbl.add_column("", width=30)
        top = max(c.percentage for c in result.distribution)
        for entry in result.distribution:
            tbl.add_row(
                entry.letter,
                str(entry.count),
                f"{entry.percentage:.2f}",
                Bar(size=top, begin=0, end=entry.percentage, color="bright_cyan"),
            )
        self._rich.print(tbl)
        self.console.info(
            f"Letters: {result.total}  IC: {result.ic:.4f}  "
            f"chi2 vs English: {result.chi_squared:.2f} (p={result.p_value:.4f})"
        )

    # ------------------------------------------------------------------ #
    #  Credentials
    # ------------------------------------------------------------------ #

    def display_registration(self, result: RegistrationResult) -> None:
        self.console.success(f"Registered {result.username} ({result.mode.value})")
        self.console.info(f"Stored: {result.stored}")
        if result.note:
            self.console.info(result.note)

    def display_login(self, result: LoginResult) -> None:
        if result.success:
            self.console.success(f"{result.username}: {result.message}")
        else:
            self.console.error(f"{result.username}: {result.message}")

    def display_reveal(self, result: RevealResult) -> None:
        if result.success:
            self.console.success(
                f"{result.username}: recovered {result.recovered!r} via {result.method}"
            )
        else:
            self.console.warning(f"{result.username}: cannot recover ({result.reason})")

    def display_users(self, records: Sequence[object]) -> None:
        rows = []
        for record in records:
            if isinstance(record, WeakCredential):
                rows.append(
                    (
                        record.username,
                        "weak",
                        record.cipher.value,
                        record.params.describe(record.cipher),
                        record.stored_password,
                    )
                )
            else:
                rows.append(
                    (
                        record.username,
                        "secure",
                        f"pbkdf2-{record.digest}",
                        f"{record.iterations} iterations",
                        _truncate(record.derived),
                    )
                )
        self.console.table(
            "Credential Records",
            ["User", "Mode", "Scheme", "Key", "Stored"],
            rows,
        )

    # ------------------------------------------------------------------ #
    #  Key Exchange
    # ------------------------------------------------------------------ #

    def display_exchange(self, exchange: DHExchange) -> None:
        self.console.section("Diffie-Hellman Exchange")
        self.console.table(
            "Key Material (hex)",
            ["Party", "Private", "Public", "Shared"],
            [
                ("client", exchange.client.private, _truncate(exchange.client.public),
                 _truncate(exchange.client.shared)),
                ("server", exchange.server.private, _truncate(exchange.server.public),
                 _truncate(exchange.server.shared)),
            ],
        )
        if exchange.keys_match:
            self.console.success("Shared keys match")
        else:
            self.console.error("Shared keys differ")
        self.console.warning(exchange.note)

    def display_dh_response(self, response: DHResponse) -> None:
        self.console.info(f"Server public: {response.server_public}")
        self.console.info(f"Shared key:    {response.shared_key}")
        self.console.warning(response.note)

    # ------------------------------------------------------------------ #
    #  Attack Log
    # ------------------------------------------------------------------ #

    def display_results(self, entries: Sequence[AttackLogEntry]) -> None:
        if not entries:
            self.console.warning("Attack log is empty")
            return
        self.console.table(
            "Attack Log",
            ["Time", "User", "Attack", "Target", "Attempts", "Elapsed", "Success", "Recovered"],
            [
                (
                    e.timestamp,
                    e.username,
                    e.attack_type,
                    e.target,
                    e.attempts,
                    f"{e.elapsed_seconds:.3f}s",
                    "yes" if e.success else "no",
                    e.recovered_plaintext,
                )
                for e in entries
            ],
        )
