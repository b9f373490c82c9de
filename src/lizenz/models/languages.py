# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Defines the languages unit so this responsibility stays isolated, testable, and easy to evolve.

"""
Pydantic models for the license and per-language comment configuration.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def split_lines(text: str) -> list[str]:
    """Split on line feeds only; drop one trailing empty line and any CR line endings."""
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


class SingleLineComment(BaseModel):
    """Comment made of lines that each start with ``prefix`` (``//``, ``#``)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["single"] = "single"
    prefix: str


class MultiLineComment(BaseModel):
    """Block comment delimited by ``start``/``end``, optional ``between`` per line."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["multi"] = "multi"
    start: str
    end: str
    between: Optional[str] = None


CommentKind = Annotated[
    Union[SingleLineComment, MultiLineComment], Field(discriminator="kind")
]


def _normalize_comment_kind(value: Any) -> Any:
    # { Single = "//" } and { Multi = { start, end, between } } are the tagged
    # spellings used by existing lizenz.toml files.
    if isinstance(value, dict) and len(value) == 1:
        (tag, payload), = value.items()
        if tag == "Single" and isinstance(payload, str):
            return {"kind": "single", "prefix": payload}
        if tag == "Multi" and isinstance(payload, dict):
            return {"kind": "multi", **payload}
    return value


class CommentRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    tree_sitter_name: str
    comment_kind: CommentKind
    preferred: bool = False

    @field_validator("comment_kind", mode="before")
    @classmethod
    def _accept_tagged_kind(cls, value: Any) -> Any:
        return _normalize_comment_kind(value)


class LanguageDescriptor(BaseModel):
    """A language: file globs plus the comment rules of its grammar."""

    model_config = ConfigDict(frozen=True)

    name: str
    file_endings: tuple[str, ...] = ()
    comments: tuple[CommentRule, ...] = ()


class License(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str

    @property
    def lines(self) -> list[str]:
        return split_lines(self.text)

    @property
    def line_count(self) -> int:
        return len(self.lines)


class LizenzConfig(BaseModel):
    """Fully merged configuration: license plus the ordered language map."""

    model_config = ConfigDict(frozen=True)

    license: License
    languages: dict[str, LanguageDescriptor] = Field(default_factory=dict)
