# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from unittest import TestCase

from lizenz.models.languages import (
    CommentRule,
    LanguageDescriptor,
    License,
    MultiLineComment,
    SingleLineComment,
)
from lizenz.services.exceptions import NoCommentSyntaxError
from lizenz.services.headers.header_synthesizer import (
    select_comment_rule,
    synthesize_header,
)

LINE = CommentRule(
    tree_sitter_name="line_comment", comment_kind=SingleLineComment(prefix="//")
)
BLOCK = CommentRule(
    tree_sitter_name="block_comment",
    comment_kind=MultiLineComment(start="/*", end="*/", between="*"),
)
BARE_BLOCK = CommentRule(
    tree_sitter_name="comment",
    comment_kind=MultiLineComment(start="{-", end="-}"),
)


class SelectCommentRuleTest(TestCase):
    def test_preferred_rule_wins(self):
        preferred_line = LINE.model_copy(update={"preferred": True})
        language = LanguageDescriptor(name="rust", comments=(BLOCK, preferred_line))
        self.assertEqual(select_comment_rule(language), preferred_line)

    def test_first_preferred_rule_wins(self):
        first = BLOCK.model_copy(update={"preferred": True})
        second = LINE.model_copy(update={"preferred": True})
        language = LanguageDescriptor(name="rust", comments=(first, second))
        self.assertEqual(select_comment_rule(language), first)

    def test_falls_back_to_first_rule(self):
        language = LanguageDescriptor(name="rust", comments=(BLOCK, LINE))
        self.assertEqual(select_comment_rule(language), BLOCK)

    def test_no_rules(self):
        with self.assertRaises(NoCommentSyntaxError) as ctx:
            select_comment_rule(LanguageDescriptor(name="bash", file_endings=("*.sh",)))
        self.assertIn("bash", str(ctx.exception))


class SingleLineHeaderTest(TestCase):
    def test_two_lines(self):
        header = synthesize_header(
            LINE, License(text="Copyright 2025\nAll rights reserved")
        )
        self.assertEqual(header, "// Copyright 2025\n// All rights reserved\n")

    def test_empty_lines_have_no_trailing_space(self):
        header = synthesize_header(LINE, License(text="A\n\nB\n"))
        self.assertEqual(header, "// A\n//\n// B\n")

    def test_empty_license(self):
        self.assertEqual(synthesize_header(LINE, License(text="")), "")


class MultiLineHeaderTest(TestCase):
    def test_empty_license_keeps_delimiters(self):
        self.assertEqual(synthesize_header(BLOCK, License(text="")), "/*  */\n")

    def test_single_line(self):
        self.assertEqual(
            synthesize_header(BLOCK, License(text="SPDX: MIT")), "/* SPDX: MIT */\n"
        )

    def test_two_lines(self):
        self.assertEqual(
            synthesize_header(BLOCK, License(text="Copyright 2025\nAll rights reserved")),
            "/* Copyright 2025\n All rights reserved */\n",
        )

    def test_interior_lines_use_between(self):
        header = synthesize_header(BLOCK, License(text="one\ntwo\nthree\nfour"))
        self.assertEqual(header, "/* one\n* two\n* three\n four */\n")
        self.assertEqual(len(header.splitlines()), 4)

    def test_interior_lines_without_between(self):
        header = synthesize_header(BARE_BLOCK, License(text="one\ntwo\nthree"))
        self.assertEqual(header, "{- one\n two\n three -}\n")


class LicenseLinesTest(TestCase):
    def test_only_line_feeds_split(self):
        license_ = License(text="Form\x0cfeed and\x1cseparators")
        self.assertEqual(license_.line_count, 1)
        self.assertEqual(
            synthesize_header(LINE, license_), "// Form\x0cfeed and\x1cseparators\n"
        )

    def test_crlf_and_trailing_newline(self):
        self.assertEqual(License(text="a\r\nb\r\n").lines, ["a", "b"])
        self.assertEqual(License(text="a\n\n").lines, ["a", ""])
        self.assertEqual(License(text="\n").lines, [""])
        self.assertEqual(License(text="").lines, [])
