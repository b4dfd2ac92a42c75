"""
Pytest Configuration and Fixtures

Shared fixtures for PkgScout tests.
"""

import json
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from pkgscout.core.engine import ScanResult
from pkgscout.core.finding import Finding, PackageRef
from pkgscout.scanners.discover import Target


def write_manifest(directory: Path, name: str = "pkg", version: str = "1.0.0") -> Path:
    """Create ``directory/package.json`` with the given identity."""
    directory.mkdir(parents=True, exist_ok=True)
    manifest = directory / "package.json"
    manifest.write_text(json.dumps({"name": name, "version": version}))
    return manifest


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def project(temp_dir: Path) -> Path:
    """
    A small installed project:

        app/package.json                      (my-app 1.0.0)
        app/node_modules/left-pad/package.json
        app/node_modules/evil-pkg/package.json
        app/node_modules/evil-pkg/postinstall.js
        app/node_modules/evil-pkg/node_modules/dep/package.json
    """
    app = temp_dir / "app"
    write_manifest(app, "my-app", "1.0.0")
    write_manifest(app / "node_modules" / "left-pad", "left-pad", "1.3.0")
    evil = app / "node_modules" / "evil-pkg"
    write_manifest(evil, "evil-pkg", "9.9.9")
    (evil / "postinstall.js").write_text(
        'const cp = require("child_process");\neval("x");\n'
    )
    write_manifest(evil / "node_modules" / "dep", "dep", "0.1.0")
    return app


@pytest.fixture
def sample_findings() -> list:
    """One finding of each kind."""
    return [
        Finding.from_package(PackageRef("evil-pkg", "9.9.9", "/x/node_modules/evil-pkg")),
        Finding.from_match("/x/node_modules/evil-pkg/postinstall.js", "eval("),
    ]


@pytest.fixture
def sample_result(sample_findings: list) -> ScanResult:
    return ScanResult(
        findings=sample_findings,
        targets=[Target("/x"), Target("/x/node_modules")],
        packages_scanned=3,
    )
