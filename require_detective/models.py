"""Pydantic models for detection options and results.

This module defines the configuration record threaded through a traversal
and the result record a traversal produces.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .constants import DEFAULT_WORD


class Options(BaseModel):
    """Configuration for one detection run.

    Attributes:
        word: Bare identifier whose calls are treated as dependency
            declarations (``require`` by default). Matching is exact and
            case-sensitive.
    """

    model_config = ConfigDict(frozen=True)

    word: str = Field(default=DEFAULT_WORD, min_length=1)


class Found(BaseModel):
    """Dependencies discovered in one source text.

    Both lists are in depth-first, left-to-right encounter order and are
    never deduplicated.

    Attributes:
        strings: Decoded values of static first arguments, e.g. ``"fs"`` for
            ``require('fs')`` or ``require(`fs`)``.
        expressions: Source text of first arguments that are not static
            literals, e.g. ``"'./locale/' + lang"``.
    """

    model_config = ConfigDict(frozen=True)

    strings: list[str] = Field(default_factory=list)
    expressions: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when no matched call contributed anything."""
        return not self.strings and not self.expressions
