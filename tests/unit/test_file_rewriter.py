# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import os
import stat
import tempfile
from pathlib import Path
from unittest import TestCase
from unittest.mock import patch

from lizenz.services.exceptions import FileAccessError
from lizenz.services.headers.file_rewriter import prepend_header


class PrependHeaderTest(TestCase):
    def setUp(self):
        self.td = tempfile.TemporaryDirectory()
        self.addCleanup(self.td.cleanup)
        self.root = Path(self.td.name)

    def test_header_goes_before_original_bytes(self):
        target = self.root / "main.rs"
        target.write_bytes(b"fn main() {}\r\n\xc3\xa4")

        prepend_header(target, "// SPDX: MIT\n")

        self.assertEqual(target.read_bytes(), b"// SPDX: MIT\nfn main() {}\r\n\xc3\xa4")
        self.assertEqual([p.name for p in self.root.iterdir()], ["main.rs"])

    def test_file_mode_is_kept(self):
        target = self.root / "run.sh"
        target.write_text("echo hi\n", encoding="utf-8")
        target.chmod(0o755)

        prepend_header(target, "# SPDX: MIT\n")

        self.assertEqual(stat.S_IMODE(target.stat().st_mode), 0o755)

    def test_missing_file(self):
        with self.assertRaises(FileAccessError) as ctx:
            prepend_header(self.root / "gone.rs", "// x\n")
        self.assertIn("gone.rs", str(ctx.exception))

    def test_failed_replace_leaves_original_untouched(self):
        target = self.root / "main.rs"
        target.write_text("fn main() {}\n", encoding="utf-8")

        with patch(
            "lizenz.services.headers.file_rewriter.os.replace",
            side_effect=OSError("disk full"),
        ):
            with self.assertRaises(FileAccessError):
                prepend_header(target, "// SPDX: MIT\n")

        self.assertEqual(target.read_text(encoding="utf-8"), "fn main() {}\n")
        self.assertEqual(os.listdir(self.root), ["main.rs"])
