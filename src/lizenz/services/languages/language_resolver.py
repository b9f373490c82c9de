# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Maps file names to configured languages and their loaded grammars."""

from __future__ import annotations

import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Mapping

from lizenz.models.languages import LanguageDescriptor
from lizenz.services.exceptions import UnresolvedLanguageError
from lizenz.services.grammars.grammar_registry import GrammarHandle, GrammarRegistry

logger = logging.getLogger(__name__)


def matches_language(file_name: str, language: LanguageDescriptor) -> bool:
    return any(fnmatchcase(file_name, pattern) for pattern in language.file_endings)


def resolve_language(
    file_path: os.PathLike[str] | str,
    languages: Mapping[str, LanguageDescriptor],
) -> LanguageDescriptor:
    """Return the first language (in map order) with a glob matching the file name.

    Globs are matched against the base name only, case-sensitively.
    """
    file_name = Path(file_path).name
    for language in languages.values():
        if matches_language(file_name, language):
            logger.debug("Resolved %s as %s", file_path, language.name)
            return language
    raise UnresolvedLanguageError(f"Could not determine language for {file_path}")


def resolve_grammar(
    file_path: os.PathLike[str] | str,
    languages: Mapping[str, LanguageDescriptor],
    grammars: GrammarRegistry,
) -> tuple[LanguageDescriptor, GrammarHandle]:
    language = resolve_language(file_path, languages)
    return language, grammars.grammar_for(language.name)
