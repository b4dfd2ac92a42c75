"""
PkgScout Finding Model

A Finding represents one detection made during a scan. Both detectors
share the record: the blocklist fills name/version/path, the IoC scanner
fills file/evidence. Fields that do not apply to a finding's kind are
empty strings, so every finding serializes with the same keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable


BLOCKLIST_REASON = "Matched blocklist"
IOC_REASON = "Matched pattern"


class FindingKind(Enum):
    BLOCKLIST = "blocklist"
    IOC = "ioc"


@dataclass(frozen=True)
class PackageRef:
    """An installed package as declared by its package.json."""

    name: str
    version: str
    path: str


@dataclass(frozen=True)
class Finding:
    kind: FindingKind
    name: str = ""
    version: str = ""
    path: str = ""
    file: str = ""
    reason: str = ""
    evidence: str = ""

    @classmethod
    def from_package(cls, pkg: PackageRef) -> "Finding":
        """Blocklist finding carrying the package's own identity."""
        return cls(
            kind=FindingKind.BLOCKLIST,
            name=pkg.name,
            version=pkg.version,
            path=pkg.path,
            reason=BLOCKLIST_REASON,
        )

    @classmethod
    def from_match(cls, file: str, evidence: str) -> "Finding":
        """IoC finding for the first match of one pattern in one file."""
        return cls(
            kind=FindingKind.IOC,
            file=file,
            evidence=evidence,
            reason=IOC_REASON,
        )

    def display(self) -> str:
        """Human-readable output for console printing."""
        if self.kind is FindingKind.BLOCKLIST:
            parts = [
                f"[{self.kind.value}] {self.name}@{self.version}",
                f"  Path: {self.path}",
            ]
        else:
            parts = [
                f"[{self.kind.value}] {self.file}",
                f"  Pattern: {self.evidence}",
            ]
        parts.append(f"  Reason: {self.reason}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert finding to a dictionary for JSON serialization."""
        return {
            "kind": self.kind.value,
            "name": self.name,
            "version": self.version,
            "path": self.path,
            "file": self.file,
            "reason": self.reason,
            "evidence": self.evidence,
        }


def partition_findings(
    findings: Iterable[Finding],
) -> tuple[list[Finding], list[Finding]]:
    """Split findings into (blocklist, ioc), keeping emission order."""
    blocklist: list[Finding] = []
    ioc: list[Finding] = []
    for finding in findings:
        if finding.kind is FindingKind.BLOCKLIST:
            blocklist.append(finding)
        else:
            ioc.append(finding)
    return blocklist, ioc
