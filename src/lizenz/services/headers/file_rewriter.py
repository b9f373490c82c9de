# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from lizenz.services.exceptions import FileAccessError

logger = logging.getLogger(__name__)


def prepend_header(path: os.PathLike[str] | str, header: str) -> None:
    """Rewrite ``path`` as ``header`` followed by its original bytes.

    The new content is written to a sibling temporary file which then replaces
    the original, so an interrupted write leaves the file untouched.
    """
    p = Path(path)
    try:
        original = p.read_bytes()
    except OSError as exc:
        raise FileAccessError(f"While reading the file {p}") from exc

    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{p.name}.", suffix=".lizenz", dir=p.parent
        )
    except OSError as exc:
        raise FileAccessError(f"Could not open file to write to it at {p}") from exc

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(header.encode("utf-8"))
            f.write(original)
        shutil.copymode(p, tmp_name)
        os.replace(tmp_name, p)
    except OSError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise FileAccessError(f"Could not write new header at {p}") from exc

    logger.info("Added license header to %s", p)
