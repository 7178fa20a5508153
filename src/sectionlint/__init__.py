"""sectionlint package root."""

from sectionlint.engine import fix, lint, lint_many
from sectionlint.exceptions import ConfigError, SectionLintError, SyntaxTreeError
from sectionlint.model import LintOptions, LintResult, Severity, Violation, ViolationKind
from sectionlint.taxonomy import Section

__all__ = [
    "__version__",
    "ConfigError",
    "LintOptions",
    "LintResult",
    "Section",
    "SectionLintError",
    "Severity",
    "SyntaxTreeError",
    "Violation",
    "ViolationKind",
    "fix",
    "lint",
    "lint_many",
]

__version__ = "0.1.0"
