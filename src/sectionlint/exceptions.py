"""Exception types for sectionlint."""

from __future__ import annotations


class SectionLintError(Exception):
    """Base class for errors raised at sectionlint's boundaries."""


class SyntaxTreeError(SectionLintError):
    """A syntax-tree document could not be turned into a unit.

    Raised by the loader only. Once a unit exists, linting reports problems as
    violations and diagnostics instead of raising.
    """

    def __init__(self, message: str, *, source: str = "") -> None:
        super().__init__(f"{source}: {message}" if source else message)
        self.source = source


class ConfigError(SectionLintError):
    """Invalid lint options (unknown section, severity or malformed table)."""


class NeverRaise(RuntimeError):
    """Sentinel exception for code paths that must be unreachable."""

    def __init__(self, message: str, *, env: dict[str, object] | None = None):
        super().__init__(message)
        self.env = dict(env or {})


class NeverThrown(NeverRaise):
    """Alias for NeverRaise used by the explicit never() marker."""
