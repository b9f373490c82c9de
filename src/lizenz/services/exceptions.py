# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Domain exception hierarchy for the header checking services.

Purpose: Provide CLI-agnostic domain exceptions that carry enough context for
the command line layer to report them and pick a process exit code. Service
code raises these and chains the underlying cause with ``raise ... from``, so
the CLI can print the whole diagnostic chain.
"""

from __future__ import annotations


class LizenzError(Exception):
    """Base domain exception that carries a process exit code.

    All error conditions of the verify/fix run are expressed as subclasses
    of this class. ``lizenz.main`` turns them into a diagnostic on stderr and
    a non-zero exit status.
    """

    default_exit_code: int = 1

    def __init__(self, detail: str, exit_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        self.exit_code = exit_code if exit_code is not None else self.default_exit_code


class ConfigLoadError(LizenzError):
    """Raised when the configuration file is missing, unreadable or invalid."""

    default_exit_code = 2


class GrammarLoadError(LizenzError):
    """Raised when a grammar module in the grammar directory cannot be loaded."""


class UnresolvedLanguageError(LizenzError):
    """Raised when no configured glob matches a file name."""


class MissingGrammarError(LizenzError):
    """Raised when a language is known but no grammar was loaded for it."""


class ParseFailureError(LizenzError):
    """Raised when the parser yields no tree or undecodable node text."""


class NoCommentSyntaxError(LizenzError):
    """Raised when a fix is requested for a language without comment rules."""


class FileAccessError(LizenzError):
    """Raised when reading or writing a checked file fails."""


def iter_error_chain(exc: BaseException):
    """Yield ``exc`` followed by its chained causes (``__cause__`` or context)."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or (
            None if current.__suppress_context__ else current.__context__
        )
