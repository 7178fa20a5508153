"""Invariant markers for sectionlint."""

from __future__ import annotations

from typing import NoReturn

from sectionlint.exceptions import NeverThrown


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path as intentionally unreachable.

    The env payload is attached to the raised exception for diagnostics only.
    """
    details = ", ".join(f"{key}={env[key]!r}" for key in sorted(env))
    message = reason or "never() marker reached"
    if details:
        message = f"{message} ({details})"
    raise NeverThrown(message, env=env)
