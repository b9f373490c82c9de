# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Verify and fix operations over single files and file lists.

Files are handled strictly one after another; the first error aborts the
remaining files.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping

from lizenz.models.languages import LanguageDescriptor, License
from lizenz.services.exceptions import FileAccessError
from lizenz.services.grammars.grammar_registry import GrammarRegistry
from lizenz.services.headers.comment_extractor import extract_comment
from lizenz.services.headers.file_rewriter import prepend_header
from lizenz.services.headers.header_synthesizer import (
    select_comment_rule,
    synthesize_header,
)
from lizenz.services.headers.license_matcher import license_matches
from lizenz.services.languages.language_resolver import (
    resolve_grammar,
    resolve_language,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeaderContext:
    """Everything needed to check files; built once, shared read-only."""

    license: License
    languages: Mapping[str, LanguageDescriptor]
    grammars: GrammarRegistry


@dataclass(frozen=True)
class FileResult:
    path: Path
    conforming: bool
    fixed: bool = False


def _read_text(path: Path) -> str:
    try:
        return path.read_bytes().decode("utf-8")
    except OSError as exc:
        raise FileAccessError(f"While reading the file {path}") from exc
    except UnicodeDecodeError as exc:
        raise FileAccessError(f"The file {path} is not valid UTF-8") from exc


def verify_file(path: os.PathLike[str] | str, context: HeaderContext) -> bool:
    """Return whether ``path`` starts with the configured license header."""
    p = Path(path)
    language, grammar = resolve_grammar(p, context.languages, context.grammars)
    text = _read_text(p)
    comment = extract_comment(
        grammar, text, language.comments, context.license.line_count
    )
    return license_matches(comment, context.license)


def fix_file(path: os.PathLike[str] | str, context: HeaderContext) -> bool:
    """Prepend the license header when missing. Returns True if ``path`` changed."""
    p = Path(path)
    if verify_file(p, context):
        return False

    language = resolve_language(p, context.languages)
    rule = select_comment_rule(language)
    prepend_header(p, synthesize_header(rule, context.license))
    return True


def verify_files(
    paths: Iterable[os.PathLike[str] | str], context: HeaderContext
) -> list[FileResult]:
    results = []
    for path in paths:
        logger.debug("Checking %s", path)
        results.append(FileResult(Path(path), verify_file(path, context)))
    return results


def fix_files(
    paths: Iterable[os.PathLike[str] | str], context: HeaderContext
) -> list[FileResult]:
    results = []
    for path in paths:
        logger.debug("Checking %s", path)
        fixed = fix_file(path, context)
        results.append(FileResult(Path(path), conforming=True, fixed=fixed))
    return results
