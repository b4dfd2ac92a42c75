"""
PkgScout CLI

Command-line interface for auditing installed npm package trees.

Commands:
    pkgscout scan [PATHS...]   - Discover package roots and scan them
    pkgscout init              - Create default config & example blocklist
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Optional

import click


def _safe_echo(text: str = "", **kwargs) -> None:
    """Echo text, handling Unicode issues on Windows consoles."""
    try:
        click.echo(text, **kwargs)
    except UnicodeEncodeError:
        safe = text.encode(sys.stdout.encoding or "utf-8", errors="replace").decode(
            sys.stdout.encoding or "utf-8", errors="replace"
        )
        click.echo(safe, **kwargs)

from pkgscout import __version__
from pkgscout.core.config import (
    BLOCKLIST_FILENAME,
    CONFIG_FILENAME,
    OUTPUT_FORMATS,
    PkgScoutConfig,
    generate_default_blocklist,
    generate_default_config,
)
from pkgscout.core.engine import ScanEngine, SkipCounter
from pkgscout.core.errors import BlocklistParseError, ConfigError
from pkgscout.core.logging import setup_logging
from pkgscout.integrations.github import (
    emit_annotations,
    is_github_actions,
    write_step_summary,
)
from pkgscout.reporting.console import ConsoleReporter
from pkgscout.reporting.json_reporter import JSONReporter
from pkgscout.reporting.sarif import SARIFReporter
from pkgscout.scanners.blocklist import Blocklist
from pkgscout.scanners.dependencies import DependencyReader
from pkgscout.scanners.discover import Discoverer
from pkgscout.scanners.ioc import IoCScanner

logger = logging.getLogger("pkgscout.cli")

EXIT_FINDINGS = 1
EXIT_CONFIG_ERROR = 2


@click.group()
@click.version_option(version=__version__, prog_name="PkgScout")
def cli() -> None:
    """
    PkgScout - npm Supply-Chain Scanner

    Detect known-malicious packages and indicators of compromise in
    installed node_modules trees.
    """
    pass


# ═══════════════════════════════════════════════════════
#  pkgscout scan
# ═══════════════════════════════════════════════════════
@cli.command()
@click.argument("paths", nargs=-1, type=click.Path())
@click.option("--exclude", "-e", multiple=True,
              help="Regex matched against full paths; matching directories are skipped.")
@click.option("--blocklist", "-b", "blocklist_path", type=click.Path(), default=None,
              help="Blocklist file (JSON or YAML list of {name, versions}).")
@click.option("--pattern", "-p", "patterns", multiple=True,
              help="IoC regex to match; replaces the built-in pattern set.")
@click.option("--max-depth", type=click.IntRange(min=0), default=None,
              help="Maximum path depth (separator count) for IoC scanning.")
@click.option("--no-ioc", is_flag=True, help="Disable IoC pattern scanning.")
@click.option("--format", "-f", "output_format", type=click.Choice(list(OUTPUT_FORMATS)),
              default=None, help="Output format (default: console).")
@click.option("--output", "-o", "output_file", type=click.Path(), default=None,
              help="Write report to a file.")
@click.option("--workers", "-w", type=click.IntRange(min=1), default=None,
              help="Number of targets scanned in parallel.")
@click.option("--ci", is_flag=True, help="Enable CI mode (GitHub Actions annotations, etc.).")
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="Path to .pkgscout.yaml configuration file.")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"],
              case_sensitive=False), default=None, help="Log level for stderr diagnostics.")
def scan(
    paths: tuple,
    exclude: tuple,
    blocklist_path: Optional[str],
    patterns: tuple,
    max_depth: Optional[int],
    no_ioc: bool,
    output_format: Optional[str],
    output_file: Optional[str],
    workers: Optional[int],
    ci: bool,
    config_path: Optional[str],
    log_level: Optional[str],
) -> None:
    """Scan package trees for blocklisted packages and IoCs.

    Examples:

        pkgscout scan

        pkgscout scan ./app --blocklist blocklist.json --format json --output results.json

        pkgscout scan . --exclude '/test/' --max-depth 12 --workers 4 --ci
    """
    roots = list(paths) or ["."]

    # ── Load configuration ──
    cfg_path = Path(config_path) if config_path else Path.cwd() / CONFIG_FILENAME
    try:
        config = PkgScoutConfig.load(cfg_path)
    except ConfigError as exc:
        _fail_config(str(exc))

    setup_logging(log_level or config.log_level, fmt="text")

    # CLI flags override config
    fmt = output_format or config.output.format
    out_file = output_file or config.output.file
    exclusions = list(exclude) + config.exclude_patterns
    ioc_patterns = list(patterns) or config.ioc.patterns
    depth = max_depth if max_depth is not None else config.ioc.max_depth
    n_workers = workers or config.workers

    # ── Build detectors ──
    skips = SkipCounter()
    try:
        discoverer = Discoverer(exclusions, on_skip=skips)
        ioc_scanner = None
        if not no_ioc and config.ioc.enabled:
            ioc_scanner = IoCScanner(ioc_patterns, depth, on_skip=skips)
    except ConfigError as exc:
        _fail_config(str(exc))

    blocklist = _load_blocklist(blocklist_path or config.blocklist)

    # ── Discover & scan ──
    t0 = time.time()
    try:
        targets = discoverer.discover(roots)
    except OSError as exc:
        _safe_echo(click.style(f"  [X] Failed to discover targets: {exc}", fg="red"), err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    logger.info("Discovered %d target(s) to scan", len(targets))

    engine = ScanEngine(
        DependencyReader(on_skip=skips),
        blocklist=blocklist,
        ioc_scanner=ioc_scanner,
        workers=n_workers,
        skip_counter=skips,
    )
    result = engine.run(targets)
    elapsed = time.time() - t0

    # ── Report ──
    target_label = ", ".join(roots)
    if fmt == "json":
        reporter = JSONReporter(target=target_label)
        json_str = reporter.report(result, output_file=out_file)
        if not out_file:
            _safe_echo(json_str)
    elif fmt == "sarif":
        reporter = SARIFReporter(target=target_label)
        sarif_str = reporter.report(result, output_file=out_file)
        if not out_file:
            _safe_echo(sarif_str)
    else:
        console = ConsoleReporter(target=target_label, ci_mode=ci)
        console.report(result, elapsed)
        if out_file:
            # Also write JSON when console + output file
            JSONReporter(target=target_label).report(result, output_file=out_file)

    # ── CI integrations ──
    if ci or is_github_actions():
        emit_annotations(result.findings)
        write_step_summary(result.findings, target_label)

    # ── Exit code ──
    if result.findings:
        sys.exit(EXIT_FINDINGS)


# ═══════════════════════════════════════════════════════
#  pkgscout init
# ═══════════════════════════════════════════════════════
@cli.command()
@click.option("--path", "-p", "target_path", type=click.Path(), default=".",
              help="Directory to create config files in.")
def init(target_path: str) -> None:
    """Create default .pkgscout.yaml and an example blocklist."""
    target = Path(target_path).resolve()
    target.mkdir(parents=True, exist_ok=True)

    files = [
        (target / CONFIG_FILENAME, generate_default_config()),
        (target / BLOCKLIST_FILENAME, generate_default_blocklist()),
    ]
    for path, content in files:
        if path.exists():
            _safe_echo(click.style(f"  [!] {path} already exists, skipping.", fg="yellow"))
        else:
            path.write_text(content, encoding="utf-8")
            _safe_echo(click.style(f"  [+] Created {path}", fg="green"))

    _safe_echo("")
    _safe_echo("  Add known-malicious packages to the blocklist file.")
    _safe_echo("  Run 'pkgscout scan' to start scanning.")


# ── Helpers ──

def _load_blocklist(path: Optional[str]) -> Optional[Blocklist]:
    """Load the blocklist, warning and continuing without one on failure."""
    if not path:
        return None
    try:
        blocklist = Blocklist.load(Path(path))
    except (OSError, BlocklistParseError) as exc:
        logger.warning("Failed to load blocklist from %s: %s", path, exc)
        _safe_echo(click.style(f"  [!] Blocklist not loaded: {exc}", fg="yellow"), err=True)
        return None
    logger.info("Loaded blocklist with %d entries", len(blocklist))
    return blocklist


def _fail_config(message: str) -> None:
    _safe_echo(click.style(f"  [X] Configuration error: {message}", fg="red"), err=True)
    sys.exit(EXIT_CONFIG_ERROR)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
