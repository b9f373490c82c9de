# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Rebuilds the comment text found at the top level of a parsed file.

Only direct named children of the syntax tree root are inspected. Every child
whose grammar node name belongs to a configured comment rule contributes its
decoration-free lines, in document order, to one running comment body. That
way a header written as several adjacent ``//`` comments (or a block comment
followed by line comments) is compared as a single text.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

import tree_sitter

from lizenz.models.languages import (
    CommentRule,
    MultiLineComment,
    SingleLineComment,
    split_lines,
)
from lizenz.services.exceptions import ParseFailureError
from lizenz.services.grammars.grammar_registry import GrammarHandle

logger = logging.getLogger(__name__)


def _strip_single(text: str, kind: SingleLineComment) -> list[str]:
    return [text.strip().removeprefix(kind.prefix).strip()]


def _strip_multi(text: str, kind: MultiLineComment) -> list[str]:
    body = text.strip().removeprefix(kind.start).removesuffix(kind.end)
    between = kind.between or ""
    # between is only removed at the very start of a raw line
    return [line.removeprefix(between).strip() for line in split_lines(body)]


def comment_lines(text: str, rule: CommentRule) -> list[str]:
    """Strip the delimiters of ``rule`` from one comment node's source text."""
    kind = rule.comment_kind
    if isinstance(kind, SingleLineComment):
        return _strip_single(text, kind)
    return _strip_multi(text, kind)


def _rule_for(node_name: str, rules: Sequence[CommentRule]) -> Optional[CommentRule]:
    for rule in rules:
        if rule.tree_sitter_name == node_name:
            return rule
    return None


def top_level_comment_lines(
    tree: tree_sitter.Tree, source: bytes, rules: Sequence[CommentRule]
) -> Iterable[str]:
    for child in tree.root_node.named_children:
        rule = _rule_for(child.grammar_name, rules)
        if rule is None:
            continue
        try:
            text = source[child.start_byte : child.end_byte].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseFailureError(
                f"Comment at line {child.start_point[0] + 1} is not valid UTF-8"
            ) from exc
        yield from comment_lines(text, rule)


def extract_comment(
    grammar: GrammarHandle,
    text: str,
    rules: Sequence[CommentRule],
    line_count: int,
) -> str:
    """Return the top-level comment body truncated to ``line_count`` lines."""
    parser = tree_sitter.Parser(grammar.language)
    source = text.encode("utf-8")
    tree = parser.parse(source)
    if tree is None:
        raise ParseFailureError(f"Could not parse file as {grammar.name}")

    lines = []
    for line in top_level_comment_lines(tree, source, rules):
        if len(lines) == line_count:
            break
        lines.append(line)
    return "\n".join(lines)
