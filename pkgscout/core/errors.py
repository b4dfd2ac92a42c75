"""
PkgScout Errors

Configuration problems are fatal and raised at construction time.
Unreadable roots surface as the built-in OSError. Per-entry failures
during a walk are never raised; see ``pkgscout.core.scanner.SkipHandler``.
"""


class PkgScoutError(Exception):
    """Base class for PkgScout errors."""


class ConfigError(PkgScoutError):
    """Invalid scanner configuration (bad regex, bad depth, bad config file)."""


class BlocklistParseError(PkgScoutError):
    """The blocklist source was readable but its content is malformed."""
