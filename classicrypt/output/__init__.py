"""
Classicrypt Output Module
==========================

Console display, JSON reports and the CSV attack log.
"""

from classicrypt.output.attack_log import AttackLog
from classicrypt.output.console import ClassicryptConsoleOutput
from classicrypt.output.report import ClassicryptReportGenerator

__all__ = [
    "AttackLog",
    "ClassicryptConsoleOutput",
    "ClassicryptReportGenerator",
]
