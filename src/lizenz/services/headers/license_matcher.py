# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from __future__ import annotations

import logging

from lizenz.models.languages import License

logger = logging.getLogger(__name__)


def license_matches(comment: str, license_: License) -> bool:
    """Exact comparison of an extracted comment with the license text.

    Only surrounding whitespace is ignored; license text is legal text, so
    there is no fuzzy matching.
    """
    if comment.strip() == license_.text.strip():
        return True
    logger.debug("Expected: %s\nGot: %s", license_.text, comment)
    return False
