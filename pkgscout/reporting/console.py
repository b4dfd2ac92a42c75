"""
PkgScout Console Reporter

Generates human-readable colored console output: a scan summary, then
blocklisted packages and suspicious code patterns in separate sections.
"""

from __future__ import annotations

import sys

import click

from pkgscout import __version__
from pkgscout.core.engine import ScanResult
from pkgscout.core.finding import partition_findings


def _safe_echo(text: str = "", **kwargs) -> None:
    """Echo text, handling Unicode issues on Windows consoles."""
    try:
        click.echo(text, **kwargs)
    except UnicodeEncodeError:
        safe = text.encode(sys.stdout.encoding or "utf-8", errors="replace").decode(
            sys.stdout.encoding or "utf-8", errors="replace"
        )
        click.echo(safe, **kwargs)


class ConsoleReporter:
    """Prints a formatted scan report to the console."""

    def __init__(self, target: str, ci_mode: bool = False) -> None:
        self.target = target
        self.ci_mode = ci_mode

    def report(self, result: ScanResult, elapsed: float = 0.0) -> None:
        """
        Print the full scan report.

        Args:
            result: Combined result of the scan engine.
            elapsed: Wall-clock duration of the scan in seconds.
        """
        self._print_header()
        self._print_summary(result, elapsed)

        blocklisted, suspicious = partition_findings(result.findings)
        if blocklisted:
            self._print_blocklisted(blocklisted)
        if suspicious:
            self._print_suspicious(suspicious)

        self._print_footer(result)

    def _print_header(self) -> None:
        _safe_echo("")
        _safe_echo(click.style("=" * 55, fg="bright_blue"))
        _safe_echo(click.style("  PkgScout Supply-Chain Scan Report", fg="bright_white", bold=True))
        _safe_echo(click.style(f"  Version: {__version__}", fg="white"))
        _safe_echo(click.style(f"  Target: {self.target}", fg="white"))
        _safe_echo(click.style("=" * 55, fg="bright_blue"))

    def _print_summary(self, result: ScanResult, elapsed: float) -> None:
        _safe_echo("")
        _safe_echo(click.style("  Scan Results:", fg="bright_white", bold=True))
        rows = [
            ("Targets scanned", len(result.targets)),
            ("Packages scanned", result.packages_scanned),
            ("Security findings", len(result.findings)),
        ]
        for label, value in rows:
            _safe_echo(click.style(f"     {label:18s}: ", fg="white") + click.style(str(value), fg="bright_white"))
        if result.skipped:
            _safe_echo(click.style(f"     {'Skipped entries':18s}: {result.skipped}", fg="bright_black"))
        for path, message in result.errors:
            _safe_echo(click.style(f"    [!] {path}: {message}", fg="yellow"))
        if elapsed:
            _safe_echo(click.style(f"     Completed in {elapsed:.2f}s", fg="bright_black"))

    def _print_blocklisted(self, findings) -> None:
        _safe_echo("")
        _safe_echo(click.style(f"  BLOCKLISTED PACKAGES ({len(findings)}):", fg="bright_red", bold=True))
        _safe_echo(click.style("-" * 55, fg="bright_black"))
        for idx, finding in enumerate(findings, start=1):
            _safe_echo("")
            _safe_echo(
                click.style(f"  {idx}. ", fg="white")
                + click.style(f"Package: {finding.name}@{finding.version}", fg="bright_white")
            )
            _safe_echo(click.style(f"      Path: {finding.path}", fg="bright_black"))
            _safe_echo(click.style(f"      Reason: {finding.reason}", fg="white"))

    def _print_suspicious(self, findings) -> None:
        _safe_echo("")
        _safe_echo(click.style(f"  SUSPICIOUS CODE PATTERNS ({len(findings)}):", fg="yellow", bold=True))
        _safe_echo(click.style("-" * 55, fg="bright_black"))
        for idx, finding in enumerate(findings, start=1):
            _safe_echo("")
            _safe_echo(
                click.style(f"  {idx}. ", fg="white")
                + click.style(f"File: {finding.file}", fg="bright_white")
            )
            _safe_echo(click.style(f"      Pattern: {finding.evidence}", fg="bright_black"))
            _safe_echo(click.style(f"      Reason: {finding.reason}", fg="white"))

    def _print_footer(self, result: ScanResult) -> None:
        _safe_echo("")
        _safe_echo(click.style("=" * 55, fg="bright_blue"))

        if result.findings:
            _safe_echo(
                click.style(
                    "  [X] FAILED - Malicious packages or IoCs detected",
                    fg="bright_red",
                    bold=True,
                )
            )
        else:
            _safe_echo(
                click.style("  [OK] PASSED - No malicious packages or IoCs detected", fg="green", bold=True)
            )

        _safe_echo(click.style("=" * 55, fg="bright_blue"))
        _safe_echo("")
