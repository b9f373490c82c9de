# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Builds the comment block that carries the license text for a language.

The output of ``synthesize_header`` always ends with a newline; it is
prepended to the original file content as-is.
"""

from __future__ import annotations

from lizenz.models.languages import (
    CommentRule,
    LanguageDescriptor,
    License,
    MultiLineComment,
    SingleLineComment,
)
from lizenz.services.exceptions import NoCommentSyntaxError


def select_comment_rule(language: LanguageDescriptor) -> CommentRule:
    """Pick the first preferred rule, falling back to the first rule."""
    for rule in language.comments:
        if rule.preferred:
            return rule
    if language.comments:
        return language.comments[0]
    raise NoCommentSyntaxError(
        f"No comment configuration exists for language {language.name}"
    )


def _single_line_header(kind: SingleLineComment, lines: list[str]) -> str:
    return "".join(
        f"{kind.prefix}\n" if not line else f"{kind.prefix} {line}\n"
        for line in lines
    )


def _multi_line_header(kind: MultiLineComment, lines: list[str]) -> str:
    if len(lines) <= 1:
        text = lines[0] if lines else ""
        return f"{kind.start} {text} {kind.end}\n"

    between = kind.between or ""
    first, *interior, last = lines
    header = [f"{kind.start} {first}\n"]
    header.extend(f"{between} {line}\n" for line in interior)
    header.append(f" {last} {kind.end}\n")
    return "".join(header)


def synthesize_header(rule: CommentRule, license_: License) -> str:
    kind = rule.comment_kind
    if isinstance(kind, SingleLineComment):
        return _single_line_header(kind, license_.lines)
    return _multi_line_header(kind, license_.lines)
