"""Static discovery of ``require()`` calls in JavaScript source.

The package parses JavaScript with tree-sitter and walks the resulting tree
once, collecting every call of the configured identifier.

Quick start::

    from require_detective import Options, detective, find

    detective("var fs = require('fs');")            # ['fs']
    find("load(name)", Options(word="load")).expressions  # ['name']
"""

from .detective import Detective, detective, find
from .exceptions import DetectiveError, SourceSyntaxError
from .models import Found, Options
from .syntax import JavaScriptParser, ParsedSource, get_default_parser

__all__ = [
    "Detective",
    "DetectiveError",
    "Found",
    "JavaScriptParser",
    "Options",
    "ParsedSource",
    "SourceSyntaxError",
    "detective",
    "find",
    "get_default_parser",
]
