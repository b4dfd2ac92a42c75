"""
PkgScout Scan Engine

Drives the detectors over discovered targets. For each target the
installed packages are read and checked against the blocklist, then the
target is scanned for IoC patterns. Findings keep that order per target,
and targets keep discovery order.

Blocklist and IoC scanner hold only immutable state after construction,
so targets can be scanned concurrently. Each target builds its own
result and the engine merges them afterwards in target order.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from pkgscout.core.finding import Finding
from pkgscout.scanners.blocklist import Blocklist
from pkgscout.scanners.dependencies import DependencyReader
from pkgscout.scanners.discover import Target
from pkgscout.scanners.ioc import IoCScanner

logger = logging.getLogger(__name__)


class SkipCounter:
    """Counts entries skipped during walks and logs them at DEBUG."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.count = 0

    def __call__(self, path: str, error: Exception) -> None:
        with self._lock:
            self.count += 1
        logger.debug("Skipped %s: %s", path, error)


@dataclass
class ScanResult:
    findings: List[Finding] = field(default_factory=list)
    targets: List[Target] = field(default_factory=list)
    packages_scanned: int = 0
    skipped: int = 0
    errors: List[tuple[str, str]] = field(default_factory=list)


@dataclass
class _TargetResult:
    findings: List[Finding] = field(default_factory=list)
    packages: int = 0
    errors: List[tuple[str, str]] = field(default_factory=list)


class ScanEngine:
    """Runs the dependency reader, blocklist and IoC scanner per target."""

    def __init__(
        self,
        reader: DependencyReader,
        blocklist: Optional[Blocklist] = None,
        ioc_scanner: Optional[IoCScanner] = None,
        workers: int = 1,
        skip_counter: Optional[SkipCounter] = None,
    ) -> None:
        self.reader = reader
        self.blocklist = blocklist
        self.ioc_scanner = ioc_scanner
        self.workers = max(1, workers)
        self.skip_counter = skip_counter

    def run(self, targets: Sequence[Target]) -> ScanResult:
        if self.workers > 1 and len(targets) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                per_target = list(pool.map(self.scan_target, targets))
        else:
            per_target = [self.scan_target(t) for t in targets]

        result = ScanResult(targets=list(targets))
        for partial in per_target:
            result.findings.extend(partial.findings)
            result.packages_scanned += partial.packages
            result.errors.extend(partial.errors)
        if self.skip_counter is not None:
            result.skipped = self.skip_counter.count

        logger.info(
            "Scanned %d target(s), %d package(s), %d finding(s)",
            len(result.targets), result.packages_scanned, len(result.findings),
        )
        return result

    def scan_target(self, target: Target) -> _TargetResult:
        partial = _TargetResult()

        try:
            packages = self.reader.read_dependencies(target.path)
        except OSError as exc:
            logger.warning("Failed to read dependencies from %s: %s", target.path, exc)
            partial.errors.append((target.path, str(exc)))
            return partial

        partial.packages = len(packages)
        if self.blocklist is not None:
            for pkg in packages:
                partial.findings.extend(self.blocklist.match(pkg))

        if self.ioc_scanner is not None:
            try:
                partial.findings.extend(self.ioc_scanner.scan(target.path))
            except OSError as exc:
                logger.warning("IoC scan failed for %s: %s", target.path, exc)
                partial.errors.append((target.path, str(exc)))

        logger.debug("%s: %d package(s), %d finding(s)",
                     target.path, partial.packages, len(partial.findings))
        return partial
