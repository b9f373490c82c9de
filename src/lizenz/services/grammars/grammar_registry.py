# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Discovery and loading of native tree-sitter grammar libraries.

A grammar directory holds one shared library per language. The file stem is
the language name and the library must export the constructor
``tree_sitter_<language name>`` returning a ``TSLanguage *``. Loading is
all-or-nothing: a single broken entry aborts the whole registry build, since a
silently missing grammar would make later files fail in confusing ways.

The unsafe part (dlopen + calling into native code) lives behind the
``GrammarProvider`` protocol so tests and alternative loaders can substitute
their own implementation.
"""

from __future__ import annotations

import ctypes
import logging
import os
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Protocol

import tree_sitter

from lizenz.services.exceptions import GrammarLoadError, MissingGrammarError

logger = logging.getLogger(__name__)

SYMBOL_PREFIX = "tree_sitter"
CAPSULE_NAME = b"tree_sitter.Language"


@dataclass(frozen=True)
class GrammarHandle:
    """A loaded grammar. ``library`` must outlive every use of ``language``."""

    name: str
    language: tree_sitter.Language
    path: Optional[Path] = None
    library: Any = None


class GrammarProvider(Protocol):
    def load(self, path: Path, language_name: str) -> GrammarHandle: ...


def constructor_symbol(language_name: str) -> str:
    return f"{SYMBOL_PREFIX}_{language_name}"


def _language_capsule(pointer: int) -> Any:
    py_capsule_new = ctypes.pythonapi.PyCapsule_New
    py_capsule_new.restype = ctypes.py_object
    py_capsule_new.argtypes = [ctypes.c_void_p, ctypes.c_char_p, ctypes.c_void_p]
    return py_capsule_new(pointer, CAPSULE_NAME, None)


class SharedLibraryGrammarProvider:
    """Loads grammars from shared objects with ``ctypes``."""

    def load(self, path: Path, language_name: str) -> GrammarHandle:
        symbol = constructor_symbol(language_name)
        try:
            library = ctypes.CDLL(os.fspath(path))
        except OSError as exc:
            raise GrammarLoadError(f"Could not link grammar library {path}") from exc

        try:
            constructor = getattr(library, symbol)
        except AttributeError as exc:
            raise GrammarLoadError(
                f"Grammar library {path} does not export {symbol}"
            ) from exc
        constructor.restype = ctypes.c_void_p
        constructor.argtypes = []

        pointer = constructor()
        if not pointer:
            raise GrammarLoadError(f"{symbol} in {path} returned a null language")

        try:
            language = tree_sitter.Language(_language_capsule(pointer))
        except (TypeError, ValueError) as exc:
            # incompatible ABI version or a bogus pointer type
            raise GrammarLoadError(
                f"Grammar {path} is not usable with this tree-sitter"
            ) from exc

        return GrammarHandle(
            name=language_name, language=language, path=path, library=library
        )


class GrammarRegistry(Mapping[str, GrammarHandle]):
    """Read-only name -> grammar mapping, built once per run."""

    def __init__(self, grammars: Mapping[str, GrammarHandle] | None = None):
        self._grammars: dict[str, GrammarHandle] = dict(grammars or {})

    def __getitem__(self, name: str) -> GrammarHandle:
        return self._grammars[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._grammars)

    def __len__(self) -> int:
        return len(self._grammars)

    def grammar_for(self, language_name: str) -> GrammarHandle:
        try:
            return self._grammars[language_name]
        except KeyError:
            raise MissingGrammarError(
                f"Found language {language_name} but no tree-sitter grammar exists for it"
            ) from None


def _grammar_entries(directory: Path) -> list[Path]:
    try:
        return sorted(directory.iterdir())
    except OSError as exc:
        raise GrammarLoadError(
            f"Could not read grammar directory {directory}"
        ) from exc


def load_grammars(
    directory: os.PathLike[str] | str,
    provider: GrammarProvider | None = None,
) -> GrammarRegistry:
    """Load every grammar library found directly inside ``directory``.

    Sub-directories are skipped. Any failure raises GrammarLoadError naming
    the offending path with the original error chained as its cause.
    """
    provider = provider or SharedLibraryGrammarProvider()
    root = Path(directory)
    grammars: dict[str, GrammarHandle] = {}

    for entry in _grammar_entries(root):
        try:
            if entry.is_dir():
                logger.debug("Skipping %s, as it is a directory", entry)
                continue
            if not entry.is_file():
                raise GrammarLoadError(f"{entry} is not a regular file")
        except OSError as exc:
            raise GrammarLoadError(f"Could not get entry type at {entry}") from exc

        language_name = entry.stem
        try:
            grammars[language_name] = provider.load(entry, language_name)
        except Exception as exc:
            raise GrammarLoadError(f"While trying to load {entry}") from exc
        logger.debug("Loaded grammar %s from %s", language_name, entry)

    return GrammarRegistry(grammars)
