# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the conftest unit so this responsibility stays isolated, testable, and easy to evolve."""

import os

import pytest

from lizenz.services.grammars.grammar_registry import GrammarHandle, GrammarRegistry

_ISOLATED_ENV = ("TREE_SITTER_GRAMMARS", "LIZENZ_LOG")


@pytest.fixture(scope="session", autouse=True)
def session_clean_env():
    # The CLI reads defaults from these; a developer shell must not leak into tests.
    originals = {name: os.environ.pop(name, None) for name in _ISOLATED_ENV}

    yield

    for name, value in originals.items():
        if value is not None:
            os.environ[name] = value
        else:
            os.environ.pop(name, None)


def _wheel_grammar(name: str, module_name: str) -> GrammarHandle:
    import tree_sitter

    module = pytest.importorskip(module_name)
    return GrammarHandle(name=name, language=tree_sitter.Language(module.language()))


@pytest.fixture(scope="class")
def wheel_grammars(request):
    """Attach a registry built from the tree-sitter grammar wheels to the test class."""
    request.cls.grammars = GrammarRegistry(
        {
            "rust": _wheel_grammar("rust", "tree_sitter_rust"),
            "toml": _wheel_grammar("toml", "tree_sitter_toml"),
        }
    )
