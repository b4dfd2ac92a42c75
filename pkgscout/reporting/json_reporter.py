"""
PkgScout JSON Reporter

Generates machine-readable JSON output format:
{
    "version": "1.0",
    "summary": {
        "total_findings": N,
        "by_kind": {"blocklist": n, "ioc": n},
        ...
    },
    "findings": [...]
}
"""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Optional

from pkgscout import __version__
from pkgscout.core.engine import ScanResult
from pkgscout.core.finding import FindingKind


class JSONReporter:
    """Generates JSON-formatted scan reports."""

    def __init__(self, target: str) -> None:
        self.target = target

    def report(
        self,
        result: ScanResult,
        output_file: Optional[str] = None,
    ) -> str:
        """
        Generate JSON report.

        Args:
            result: Combined result of the scan engine.
            output_file: Optional file path to write the report to.

        Returns:
            The JSON string.
        """
        counter = Counter(f.kind.value for f in result.findings)

        report_data = {
            "version": "1.0",
            "tool": {
                "name": "PkgScout",
                "version": __version__,
            },
            "target": self.target,
            "summary": {
                "total_findings": len(result.findings),
                "by_kind": {kind.value: counter.get(kind.value, 0) for kind in FindingKind},
                "targets_scanned": len(result.targets),
                "packages_scanned": result.packages_scanned,
                "skipped_entries": result.skipped,
            },
            "errors": [{"path": path, "message": message} for path, message in result.errors],
            "findings": [f.to_dict() for f in result.findings],
        }

        json_str = json.dumps(report_data, indent=2)

        if output_file:
            Path(output_file).write_text(json_str, encoding="utf-8")

        return json_str
