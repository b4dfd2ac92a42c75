"""
PkgScout SARIF Reporter

Generates SARIF 2.1.0 (Static Analysis Results Interchange Format) output
for integration with:
- GitHub Code Scanning / Security tab
- Azure DevOps
- Visual Studio / VSCode
"""

from __future__ import annotations

import json
import posixpath
from pathlib import Path
from typing import Any, Optional

from pkgscout import __version__
from pkgscout.core.engine import ScanResult
from pkgscout.core.finding import Finding, FindingKind
from pkgscout.core.scanner import MANIFEST_FILENAME


RULES: dict[FindingKind, dict[str, Any]] = {
    FindingKind.BLOCKLIST: {
        "id": "PKGSCOUT-BLOCKLIST",
        "name": "BlocklistedPackage",
        "shortDescription": {"text": "Known-malicious package installed"},
        "fullDescription": {
            "text": "An installed package matches a blocklist entry by name and version."
        },
        "defaultConfiguration": {"level": "error"},
        "help": {
            "text": "Remove the package, rotate any credentials exposed to the install, and pin a safe version.",
        },
        "properties": {"security-severity": "9.5", "tags": ["supply-chain", "blocklist"]},
    },
    FindingKind.IOC: {
        "id": "PKGSCOUT-IOC",
        "name": "SuspiciousCodePattern",
        "shortDescription": {"text": "Indicator of compromise in package file"},
        "fullDescription": {
            "text": "A package manifest, entry point, install hook or bundle matches an IoC pattern."
        },
        "defaultConfiguration": {"level": "warning"},
        "help": {
            "text": "Review the matched code and confirm it is expected for this package.",
        },
        "properties": {"security-severity": "5.0", "tags": ["supply-chain", "ioc"]},
    },
}

RULE_ORDER = [FindingKind.BLOCKLIST, FindingKind.IOC]


class SARIFReporter:
    """Generates SARIF 2.1.0-formatted scan reports."""

    def __init__(self, target: str) -> None:
        self.target = target

    def report(
        self,
        result: ScanResult,
        output_file: Optional[str] = None,
    ) -> str:
        """
        Generate SARIF report.

        Args:
            result: Combined result of the scan engine.
            output_file: Optional file path to write the report to.

        Returns:
            The SARIF JSON string.
        """
        results = [self._result(finding) for finding in result.findings]

        sarif = {
            "$schema": "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/main/sarif-2.1/schema/sarif-schema-2.1.0.json",
            "version": "2.1.0",
            "runs": [
                {
                    "tool": {
                        "driver": {
                            "name": "PkgScout",
                            "version": __version__,
                            "rules": [RULES[kind] for kind in RULE_ORDER],
                        }
                    },
                    "results": results,
                    "columnKind": "utf16CodeUnits",
                }
            ],
        }

        sarif_str = json.dumps(sarif, indent=2)

        if output_file:
            Path(output_file).write_text(sarif_str, encoding="utf-8")

        return sarif_str

    @staticmethod
    def _result(finding: Finding) -> dict[str, Any]:
        rule = RULES[finding.kind]
        if finding.kind is FindingKind.BLOCKLIST:
            uri = posixpath.join(finding.path.replace("\\", "/"), MANIFEST_FILENAME)
            message = f"{finding.reason}: {finding.name}@{finding.version}"
        else:
            uri = finding.file.replace("\\", "/")
            message = f"{finding.reason}: {finding.evidence}"

        return {
            "ruleId": rule["id"],
            "ruleIndex": RULE_ORDER.index(finding.kind),
            "level": rule["defaultConfiguration"]["level"],
            "message": {"text": message},
            "locations": [
                {
                    "physicalLocation": {
                        "artifactLocation": {
                            "uri": uri,
                            "uriBaseId": "%SRCROOT%",
                        },
                    }
                }
            ],
        }
