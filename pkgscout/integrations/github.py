"""
PkgScout GitHub Actions Integration

Provides helpers for running PkgScout in GitHub Actions:
- GitHub Actions annotations (errors for blocklisted packages,
  warnings for IoC matches)
- Step summary output
- Environment detection
"""

from __future__ import annotations

import logging
import os
import posixpath

from pkgscout.core.finding import Finding, FindingKind, partition_findings
from pkgscout.core.scanner import MANIFEST_FILENAME

logger = logging.getLogger(__name__)

SUMMARY_LIMIT = 20


def is_github_actions() -> bool:
    """Check if currently running inside GitHub Actions."""
    return os.environ.get("GITHUB_ACTIONS") == "true"


def format_annotation(finding: Finding) -> str:
    """
    Render one finding as a workflow command:
    ::error file={name},title={title}::{message}
    """
    if finding.kind is FindingKind.BLOCKLIST:
        level = "error"
        file_path = posixpath.join(finding.path, MANIFEST_FILENAME)
        title = "Blocklisted package"
        msg = f"{finding.name}@{finding.version}: {finding.reason}"
    else:
        level = "warning"
        file_path = finding.file
        title = "Suspicious code pattern"
        msg = f"{finding.reason}: {finding.evidence}"

    return f"::{level} file={_escape_property(file_path)},title={_escape_property(title)}::{_escape_data(msg)}"


def _escape_data(value: str) -> str:
    # Workflow command messages are single-line
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


def emit_annotations(findings: list[Finding]) -> None:
    """Emit a GitHub Actions workflow annotation for each finding."""
    if not is_github_actions():
        return

    for finding in findings:
        print(format_annotation(finding))


def write_step_summary(findings: list[Finding], target: str) -> None:
    """
    Write a summary to the GitHub Actions step summary.
    This appears on the workflow run page.
    """
    if not is_github_actions():
        return

    summary_file = os.environ.get("GITHUB_STEP_SUMMARY")
    if not summary_file:
        return

    blocklisted, suspicious = partition_findings(findings)
    lines = [
        "## PkgScout Supply-Chain Scan Results\n",
        f"**Target:** `{target}`\n",
        "| Detector | Count |",
        "|----------|-------|",
        f"| Blocklisted packages | {len(blocklisted)} |",
        f"| Suspicious code patterns | {len(suspicious)} |",
        "",
    ]

    if findings:
        lines.append("### Pipeline Status: FAILED")
        lines.append("Malicious packages or IoCs must be investigated before merging.")
        lines.append("")
        lines.append("<details><summary>Top Findings (click to expand)</summary>\n")
        for i, f in enumerate(findings[:SUMMARY_LIMIT], start=1):
            if f.kind is FindingKind.BLOCKLIST:
                lines.append(f"{i}. **blocklist** - `{f.name}@{f.version}` in `{f.path}`")
            else:
                lines.append(f"{i}. **ioc** - `{f.evidence}` in `{f.file}`")
        lines.append("\n</details>")
    else:
        lines.append("### Pipeline Status: PASSED")
        lines.append("No malicious packages or IoCs detected.")

    try:
        with open(summary_file, "a", encoding="utf-8") as fh:
            fh.write("\n".join(lines) + "\n")
    except OSError as exc:
        logger.warning("Cannot write step summary to %s: %s", summary_file, exc)
