# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Defines the config unit so this responsibility stays isolated, testable, and easy to evolve.

"""
Configuration loading utilities for lizenz.

Conventions:
- Project config: ./lizenz.toml (TOML), or any path ending in .json (JSON).
- String values can reference environment variables using ${VAR_NAME} placeholders,
  except the license text which is used verbatim.
- Languages defined by the user take precedence over the built-in defaults;
  built-ins only fill language names the user did not define.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping

import jsonschema
from pydantic import ValidationError

from lizenz.models.languages import (
    CommentRule,
    LanguageDescriptor,
    License,
    LizenzConfig,
    MultiLineComment,
    SingleLineComment,
)
from lizenz.services.exceptions import ConfigLoadError

logger = logging.getLogger(__name__)

RESOURCES_DIR = Path(__file__).resolve().parent.parent / "resources"
CONFIG_SCHEMA_PATH = RESOURCES_DIR / "config.schema.json"

DEFAULT_CONFIG_PATH = Path("lizenz.toml")


def _get_config_schema() -> Dict[str, Any]:
    with open(CONFIG_SCHEMA_PATH, "r", encoding="utf-8") as f:
        return json.load(f)


_ENV_PATTERN = re.compile(r"\$\{([A-Z0-9_]+)\}")


def _interpolate_env(value: Any) -> Any:
    """Interpolate ${VAR} placeholders within strings using environment variables.

    Non-string types are returned unchanged.
    """
    if isinstance(value, str):

        def replace(match: re.Match[str]) -> str:
            var = match.group(1)
            return os.getenv(var, match.group(0))  # leave placeholder if unset

        return _ENV_PATTERN.sub(replace, value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(v) for v in value]
    return value


def default_languages() -> Dict[str, LanguageDescriptor]:
    """Built-in language table used for names absent from the user config."""
    return {
        "bash": LanguageDescriptor(name="bash", file_endings=("*.sh",), comments=()),
        "rust": LanguageDescriptor(
            name="rust",
            file_endings=("*.rs",),
            comments=(
                CommentRule(
                    tree_sitter_name="block_comment",
                    comment_kind=MultiLineComment(start="/*", between="*", end="*/"),
                    preferred=False,
                ),
                CommentRule(
                    tree_sitter_name="line_comment",
                    comment_kind=SingleLineComment(prefix="//"),
                    preferred=True,
                ),
            ),
        ),
        "toml": LanguageDescriptor(
            name="toml",
            file_endings=("*.toml",),
            comments=(
                CommentRule(
                    tree_sitter_name="comment",
                    comment_kind=SingleLineComment(prefix="#"),
                    preferred=True,
                ),
            ),
        ),
    }


def merge_languages(
    user: Mapping[str, LanguageDescriptor],
    defaults: Mapping[str, LanguageDescriptor],
) -> Dict[str, LanguageDescriptor]:
    """Merge built-ins under user languages. Returns a new dict.

    User entries keep their order and are never replaced; defaults are
    appended for the remaining names.
    """
    result: Dict[str, LanguageDescriptor] = dict(user)
    for name, language in defaults.items():
        result.setdefault(name, language)
    return result


def _read_document(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".json":
        data = json.loads(text)
    else:
        data = tomllib.loads(text)
    if not isinstance(data, dict):
        raise ValueError("configuration root must be a table/object")
    return data


def parse_config(raw: Mapping[str, Any], path_label: str = "<memory>") -> LizenzConfig:
    """Validate a raw configuration document and build the merged config."""
    merged = dict(raw)
    license_section = merged.pop("license", None)
    merged = _interpolate_env(merged)
    if license_section is not None:
        merged["license"] = license_section
    try:
        jsonschema.validate(merged, _get_config_schema())
    except jsonschema.ValidationError as exc:
        location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise ConfigLoadError(
            f"Invalid config at {path_label} ({location}): {exc.message}"
        ) from exc

    try:
        license_ = License.model_validate(merged["license"])
        user_languages = {
            name: LanguageDescriptor.model_validate({**entry, "name": name})
            for name, entry in (merged.get("languages") or {}).items()
        }
    except ValidationError as exc:
        raise ConfigLoadError(f"Invalid config at {path_label}: {exc}") from exc

    return LizenzConfig(
        license=license_,
        languages=merge_languages(user_languages, default_languages()),
    )


def load_config(path: os.PathLike[str] | str | None = None) -> LizenzConfig:
    """Load the lizenz configuration from ``path`` (default ./lizenz.toml).

    Raises ConfigLoadError for missing, unreadable or malformed files, naming
    the resolved path and the current working directory.
    """
    p = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    context = f"{p.resolve()} (current working directory is {Path.cwd()})"
    if not p.is_file():
        raise ConfigLoadError(
            f"Could not find configuration at {context}, nothing to be done"
        )
    try:
        raw = _read_document(p)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigLoadError(f"Could not read configuration at {context}") from exc
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, ValueError) as exc:
        raise ConfigLoadError(f"Malformed configuration at {context}: {exc}") from exc

    config = parse_config(raw, path_label=str(p))
    logger.debug(
        "Loaded config from %s with languages %s", p, ", ".join(config.languages)
    )
    return config
