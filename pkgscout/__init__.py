"""
PkgScout - Supply-chain compromise scanner for installed npm package trees

Audits a dependency tree (locally or in CI) before it is trusted:
- Known-malicious package identities (name + version blocklist)
- Suspicious code patterns (IoC) in package manifests, entry points,
  install hooks and bundles

Copyright (c) 2026 PkgScout Contributors
Licensed under the Apache License 2.0
"""

__version__ = "1.0.0"
__author__ = "PkgScout Contributors"


__all__ = [
    "__version__",
]
