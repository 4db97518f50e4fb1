"""JavaScript syntax provider backed by tree-sitter.

This module turns source text into a tree-sitter parse tree and rejects
trees that contain error recovery nodes, so that the dependency visitor only
ever walks well-formed programs. It also owns the decoding of string and
template literal contents.

Usage::

    parser = JavaScriptParser()
    parsed = parser.parse("const x = require('child_process');")
    for node in parsed.root_node.named_children:
        print(node.type)
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache

import tree_sitter as ts
import tree_sitter_javascript as ts_js

from .exceptions import SourceSyntaxError

logger = logging.getLogger(__name__)

# Node types tree-sitter inserts anywhere in the tree
EXTRA_NODE_TYPES = frozenset({"comment", "html_comment"})

# Longest source excerpt quoted in a syntax error message
_MAX_ERROR_EXCERPT = 40

_ESCAPE_RE = re.compile(
    r"\\(?:"
    r"u\{(?P<code_point>[0-9a-fA-F]+)\}"
    r"|u(?P<unicode>[0-9a-fA-F]{4})"
    r"|x(?P<hex>[0-9a-fA-F]{2})"
    r"|(?P<octal>[0-3][0-7]{0,2}|[4-7][0-7]?)"
    r"|(?P<newline>\r\n|[\r\n\u2028\u2029])"
    r"|(?P<char>[\s\S])"
    r")"
)

_SINGLE_CHAR_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}


# ---------------------------------------------------------------------------
# ParsedSource wrapper
# ---------------------------------------------------------------------------


class ParsedSource:
    """A well-formed tree-sitter parse tree together with its source.

    Attributes:
        tree: The underlying ``tree_sitter.Tree``.
        source_code: Original source string that was parsed.
    """

    __slots__ = ("tree", "source_code", "_source_bytes")

    def __init__(self, tree: ts.Tree, source_code: str) -> None:
        self.tree = tree
        self.source_code = source_code
        self._source_bytes: bytes = source_code.encode("utf-8")

    @property
    def root_node(self) -> ts.Node:
        """Return the ``program`` node of the parse tree."""
        return self.tree.root_node

    def get_text(self, node: ts.Node) -> str:
        """Extract the source text spanned by *node*."""
        return self._source_bytes[node.start_byte:node.end_byte].decode(
            "utf-8", errors="replace"
        )


# ---------------------------------------------------------------------------
# JavaScriptParser
# ---------------------------------------------------------------------------


class JavaScriptParser:
    """Parse JavaScript source into ``ParsedSource`` trees.

    The tree-sitter ``Language`` and ``Parser`` are created lazily on first
    use and reused for the lifetime of the instance. Instances are not safe
    to share between threads.
    """

    def __init__(self) -> None:
        self._language: ts.Language | None = None
        self._parser: ts.Parser | None = None

    def _get_parser(self) -> ts.Parser:
        if self._parser is None:
            self._language = ts.Language(ts_js.language())
            self._parser = ts.Parser(language=self._language)
        return self._parser

    def parse(self, source_code: str) -> ParsedSource:
        """Parse *source_code* into a ``ParsedSource``.

        Args:
            source_code: The full file contents to parse. A leading
                ``#!`` line is accepted.

        Returns:
            A ``ParsedSource`` wrapping an error-free parse tree.

        Raises:
            SourceSyntaxError: If tree-sitter had to recover from a syntax
                error anywhere in the source.
        """
        tree = self._get_parser().parse(source_code.encode("utf-8"))
        parsed = ParsedSource(tree=tree, source_code=source_code)
        if tree.root_node.has_error:
            error = _syntax_error_for(parsed)
            logger.debug("Rejecting source: %s", error)
            raise error
        return parsed


@lru_cache(maxsize=1)
def get_default_parser() -> JavaScriptParser:
    """Return the process-wide parser used when callers do not supply one."""
    return JavaScriptParser()


def _first_error_node(node: ts.Node) -> ts.Node | None:
    """Return the first ``ERROR`` or missing node below *node*, in source order."""
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error_node(child)
            if found is not None:
                return found
    return None


def _syntax_error_for(parsed: ParsedSource) -> SourceSyntaxError:
    node = _first_error_node(parsed.root_node)
    if node is None:
        return SourceSyntaxError("Invalid JavaScript source")

    line = node.start_point.row + 1
    column = node.start_point.column
    if node.is_missing:
        return SourceSyntaxError(f"Missing {node.type!r}", line, column)

    excerpt = parsed.get_text(node).strip()
    if not excerpt:
        return SourceSyntaxError("Unexpected end of input", line, column)
    if len(excerpt) > _MAX_ERROR_EXCERPT:
        excerpt = excerpt[:_MAX_ERROR_EXCERPT] + "..."
    return SourceSyntaxError(f"Unexpected token near {excerpt!r}", line, column)


# ---------------------------------------------------------------------------
# Literal decoding
# ---------------------------------------------------------------------------


def _replace_escape(match: re.Match[str]) -> str:
    if match.group("code_point") is not None:
        code_point = int(match.group("code_point"), 16)
        return chr(code_point) if code_point <= 0x10FFFF else "\ufffd"
    if match.group("unicode") is not None:
        return chr(int(match.group("unicode"), 16))
    if match.group("hex") is not None:
        return chr(int(match.group("hex"), 16))
    if match.group("octal") is not None:
        # legacy octal escape, \0 included
        return chr(int(match.group("octal"), 8))
    if match.group("newline") is not None:
        return ""
    char = match.group("char")
    return _SINGLE_CHAR_ESCAPES.get(char, char)


def unescape_js_string(raw: str) -> str:
    """Decode the escape sequences in the body of a string literal.

    ``\\uD83D\\uDE00`` style surrogate pairs are combined into a single
    character; a lone surrogate becomes U+FFFD.

    Args:
        raw: Literal contents without the surrounding quotes or backticks.

    Returns:
        The cooked string value.
    """
    if "\\" not in raw:
        return raw
    decoded = _ESCAPE_RE.sub(_replace_escape, raw)
    return decoded.encode("utf-16-le", "surrogatepass").decode(
        "utf-16-le", "replace"
    )


def string_value(parsed: ParsedSource, node: ts.Node) -> str:
    """Return the decoded value of a ``string`` node."""
    return unescape_js_string(parsed.get_text(node)[1:-1])


def template_value(parsed: ParsedSource, node: ts.Node) -> str | None:
    """Return the cooked value of a ``template_string`` node.

    Returns:
        The decoded text, or ``None`` when the template contains
        substitutions and therefore has no static value.
    """
    if any(child.type == "template_substitution" for child in node.children):
        return None
    raw = parsed.get_text(node)[1:-1]
    # Template line terminators are normalised to LF
    raw = raw.replace("\r\n", "\n").replace("\r", "\n")
    return unescape_js_string(raw)
