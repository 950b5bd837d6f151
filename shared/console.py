"""
Classicrypt Console Interface
==============================

Thin layer over a Rich console so every command renders the same way:
a banner, section rules, tagged status lines and tables. A quiet console
swallows everything, which the CLI uses for ``--output json``.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

_THEME = Theme(
    {
        "lab.accent": "bright_cyan",
        "lab.heading": "bold magenta",
        "lab.muted": "dim",
        "lab.ok": "bold green",
        "lab.warn": "bold yellow",
        "lab.fail": "bold red",
        "lab.note": "bold blue",
    }
)

_SEVERITY_STYLES: dict[str, str] = {
    "CRITICAL": "bold white on red",
    "HIGH": "bold red",
    "MEDIUM": "yellow",
    "LOW": "cyan",
    "INFO": "blue",
}

# (style, tag) per message kind
_TAGS: dict[str, tuple[str, str]] = {
    "success": ("lab.ok", "[+]"),
    "warning": ("lab.warn", "[!]"),
    "error": ("lab.fail", "[x]"),
    "info": ("lab.note", "[*]"),
}


def _new_table(title: str, caption: Optional[str] = None, *, lines: bool = False) -> Table:
    return Table(
        title=title,
        caption=caption,
        border_style="lab.accent",
        header_style="lab.heading",
        show_lines=lines,
    )


class LabConsole:
    """Shared Rich console for the lab commands.

    Usage::

        con = LabConsole()
        con.section("Brute force")
        con.table("Candidates", ["Key", "Text"], [(3, "HELLO")])
        con.success("Password recovered")
    """

    def __init__(self, *, quiet: bool = False, record: bool = False) -> None:
        self._console = Console(theme=_THEME, quiet=quiet, record=record, highlight=False)

    @property
    def rich(self) -> Console:
        return self._console

    @property
    def quiet(self) -> bool:
        return self._console.quiet

    def banner(self, version: str) -> None:
        body = Text.assemble(
            ("CLASSICRYPT", "bold bright_cyan"),
            "  classical cipher attack lab\n",
            (f"v{version}  {datetime.now():%Y-%m-%d %H:%M}", "lab.muted"),
        )
        self._console.print(Panel(body, border_style="lab.accent", expand=False))

    def section(self, title: str) -> None:
        self._console.print()
        self._console.rule(title, style="lab.heading")

    def blank(self) -> None:
        self._console.print()

    def _say(self, kind: str, message: str) -> None:
        style, tag = _TAGS[kind]
        line = Text(f"{tag} ", style=style)
        line.append(message)
        self._console.print(line)

    def success(self, message: str) -> None:
        self._say("success", message)

    def warning(self, message: str) -> None:
        self._say("warning", message)

    def error(self, message: str) -> None:
        self._say("error", message)

    def info(self, message: str) -> None:
        self._say("info", message)

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: Optional[str] = None,
        styles: Optional[Sequence[str]] = None,
    ) -> None:
        """Print *rows* under *columns*; cells are stringified.

        *styles* gives a Rich style per column, positionally.
        """
        tbl = _new_table(title, caption)
        styles = list(styles or [])
        for idx, name in enumerate(columns):
            tbl.add_column(name, style=styles[idx] if idx < len(styles) else None)
        for row in rows:
            tbl.add_row(*(str(cell) for cell in row))
        self._console.print(tbl)

    def findings_table(self, findings: Sequence[Any]) -> None:
        """Print :class:`shared.models.Finding` objects coloured by severity."""
        if not findings:
            return
        tbl = _new_table("Findings", lines=True)
        tbl.add_column("Severity", no_wrap=True)
        tbl.add_column("Finding")
        tbl.add_column("Mitigation")
        for finding in findings:
            severity = getattr(finding.severity, "value", str(finding.severity))
            tbl.add_row(
                Text(severity, style=_SEVERITY_STYLES.get(severity, "")),
                Text.assemble((finding.title, "bold"), "\n", finding.description),
                finding.recommendation,
            )
        self._console.print(tbl)
