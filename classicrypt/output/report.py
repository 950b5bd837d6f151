"""
Classicrypt Report Generator
=============================

Machine-readable JSON reports built from a :class:`shared.models.RunResult`.
Used by ``--output json`` and by ``mitm --report``.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from shared.models import RunResult

from classicrypt import __version__


class ClassicryptReportGenerator:
    """Serialises run results to JSON.

    Usage::

        generator = ClassicryptReportGenerator()
        print(generator.to_json(result))
        generator.generate_json(result, Path("mitm.json"))
    """

    def build(self, result: RunResult) -> dict[str, Any]:
        return {
            "report_metadata": {
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "tool": result.tool_name,
                "operation": result.operation,
                "target": result.target,
                "version": __version__,
            },
            "summary": {
                "total_findings": len(result.findings),
                "severity_counts": result.severity_counts,
                "duration_seconds": result.duration_seconds,
                "description": result.summary,
            },
            "findings": [f.model_dump(mode="json") for f in result.findings],
            "result": result.payload,
        }

    def to_json(self, result: RunResult) -> str:
        return json.dumps(self.build(result), indent=2, ensure_ascii=False, default=str)

    def generate_json(self, result: RunResult, output_path: Path) -> Path:
        """Write the JSON report for *result* to *output_path*."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.to_json(result), encoding="utf-8")
        return output_path
