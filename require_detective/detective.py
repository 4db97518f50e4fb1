"""Dependency visitor: find ``require()``-style calls in JavaScript source.

The ``Detective`` walks a tree produced by ``JavaScriptParser`` once, depth
first and left to right. Every call (or ``new``) whose callee is the bare
configured identifier is claimed: its first argument is recorded as a
resolved name when it is a static string or substitution-free template, and
as an expression otherwise. The callee of a claimed call is not walked, its
arguments are, so ``require(a, require('b'))`` yields both calls.

Usage::

    found = find("var fs = require('fs'); require(dir + '/x');")
    found.strings      # ['fs']
    found.expressions  # ["dir + '/x'"]
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import tree_sitter as ts

from .models import Found, Options
from .syntax import (
    EXTRA_NODE_TYPES,
    JavaScriptParser,
    ParsedSource,
    get_default_parser,
    string_value,
    template_value,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Node kinds that are walked as nothing at all
# ---------------------------------------------------------------------------

# Statements with no child expressions.
_IGNORED_STATEMENTS = frozenset({
    "empty_statement",
    "debugger_statement",
    "break_statement",
    "continue_statement",
    "hash_bang_line",
})

# Expressions without child expressions. JSX is not ECMAScript and is left
# untraversed on purpose.
_LEAF_EXPRESSIONS = frozenset({
    "identifier",
    "this",
    "super",
    "number",
    "string",
    "regex",
    "true",
    "false",
    "null",
    "undefined",
    "import",
    "meta_property",
    "property_identifier",
    "private_property_identifier",
    "shorthand_property_identifier",
    "shorthand_property_identifier_pattern",
    "statement_identifier",
    "jsx_element",
    "jsx_self_closing_element",
    "jsx_fragment",
})

_DECLARATION_TYPES = frozenset({
    "variable_declaration",
    "lexical_declaration",
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
    "import_statement",
    "export_statement",
})


def _named(node: ts.Node) -> list[ts.Node]:
    """Return the named children of *node* without comments."""
    return [child for child in node.named_children if child.type not in EXTRA_NODE_TYPES]


def _unwrap_parens(node: ts.Node) -> ts.Node:
    while node.type == "parenthesized_expression":
        inner = _named(node)
        if len(inner) != 1:
            break
        node = inner[0]
    return node


# ---------------------------------------------------------------------------
# Detective
# ---------------------------------------------------------------------------


class Detective:
    """Single-use visitor collecting the target calls of one parse tree.

    The visitor borrows the tree for the duration of ``run`` and keeps no
    reference to it afterwards. It has one ``on_*`` entry point per node
    category (statement, declaration, expression, pattern), each of which
    dispatches on the tree-sitter node type and ends in an explicit no-op
    arm for kinds it does not walk.
    """

    def __init__(self, options: Options) -> None:
        self.options = options
        self._strings: list[str] = []
        self._expressions: list[str] = []
        self._parsed: ParsedSource | None = None

        self._statement_handlers: dict[str, Callable[[ts.Node], None]] = {
            "expression_statement": self._on_children,
            "statement_block": self._on_body,
            "labeled_statement": self._on_body_statement,
            "with_statement": self._on_with,
            "return_statement": self._on_children,
            "throw_statement": self._on_children,
            "if_statement": self._on_if,
            "else_clause": self._on_body,
            "switch_statement": self._on_switch,
            "try_statement": self._on_try,
            "while_statement": self._on_while,
            "do_statement": self._on_do_while,
            "for_statement": self._on_for,
            "for_in_statement": self._on_for_in,
        }
        self._expression_handlers: dict[str, Callable[[ts.Node], None]] = {
            "array": self._on_children,
            "arrow_function": self._on_arrow,
            "assignment_expression": self._on_assign,
            "augmented_assignment_expression": self._on_assign,
            "await_expression": self._on_children,
            "binary_expression": self._on_binary,
            "class": self._on_class,
            "call_expression": self._on_call,
            "function_expression": self._on_function,
            "generator_function": self._on_function,
            "member_expression": self._on_member,
            "subscript_expression": self._on_subscript,
            "new_expression": self._on_new,
            "object": self._on_object,
            "parenthesized_expression": self._on_children,
            "sequence_expression": self._on_children,
            "spread_element": self._on_children,
            "template_string": self._on_template,
            "ternary_expression": self._on_conditional,
            "unary_expression": self._on_unary,
            "update_expression": self._on_unary,
            "yield_expression": self._on_children,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, parsed: ParsedSource) -> Found:
        """Walk every top-level item of *parsed* and return what was found."""
        self._parsed = parsed
        try:
            self._on_body(parsed.root_node)
        finally:
            self._parsed = None
        return Found(strings=self._strings, expressions=self._expressions)

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def check(self, callee: ts.Node, arguments: list[ts.Node]) -> bool:
        """Record a target call and report whether *callee* is the target.

        Args:
            callee: The ``function`` of a call or ``constructor`` of a
                ``new`` expression.
            arguments: The call's argument nodes, comments excluded.

        Returns:
            ``True`` when *callee* is the bare target identifier, whether or
            not anything was recorded.
        """
        callee = _unwrap_parens(callee)
        if callee.type != "identifier" or self._text(callee) != self.options.word:
            return False
        if not arguments:
            return True

        first = _unwrap_parens(arguments[0])
        if first.type == "string":
            self._strings.append(string_value(self._source(), first))
            return True
        if first.type == "template_string":
            value = template_value(self._source(), first)
            if value is not None:
                self._strings.append(value)
                return True
        self._expressions.append(self._text(arguments[0]))
        return True

    def _on_call(self, call: ts.Node) -> None:
        callee = call.child_by_field_name("function")
        args_node = call.child_by_field_name("arguments")

        # tag`...` is a call_expression whose arguments are a template
        if args_node is not None and args_node.type == "template_string":
            if callee is not None:
                self.on_expression(callee)
            self._on_template(args_node)
            return

        arguments = _named(args_node) if args_node is not None else []
        if callee is not None and not self.check(callee, arguments):
            self.on_expression(callee)
        for arg in arguments:
            self.on_expression(arg)

    def _on_new(self, new: ts.Node) -> None:
        callee = new.child_by_field_name("constructor")
        args_node = new.child_by_field_name("arguments")
        arguments = _named(args_node) if args_node is not None else []
        if callee is not None and not self.check(callee, arguments):
            self.on_expression(callee)
        for arg in arguments:
            self.on_expression(arg)

    # ------------------------------------------------------------------
    # Category dispatch
    # ------------------------------------------------------------------

    def on_statement(self, node: ts.Node) -> None:
        """Walk a statement or module item."""
        if node.type in _DECLARATION_TYPES:
            self.on_declaration(node)
            return
        handler = self._statement_handlers.get(node.type)
        if handler is not None:
            handler(node)
        elif node.type not in _IGNORED_STATEMENTS and node.type not in EXTRA_NODE_TYPES:
            logger.debug("Not traversing statement of type %s", node.type)

    def on_declaration(self, node: ts.Node) -> None:
        """Walk a variable, function, class, import or export declaration."""
        kind = node.type
        if kind in ("variable_declaration", "lexical_declaration"):
            self._on_var(node)
        elif kind in ("function_declaration", "generator_function_declaration"):
            self._on_function(node)
        elif kind == "class_declaration":
            self._on_class(node)
        elif kind == "export_statement":
            self._on_export(node)
        elif kind == "import_statement":
            # import declarations never contain a call
            pass
        else:
            logger.debug("Not traversing declaration of type %s", kind)

    def on_expression(self, node: ts.Node) -> None:
        """Walk an expression, claiming any target call it contains."""
        handler = self._expression_handlers.get(node.type)
        if handler is not None:
            handler(node)
        elif (
            node.type in _DECLARATION_TYPES
            or node.type in _IGNORED_STATEMENTS
            or node.type in self._statement_handlers
        ):
            # for-loop initialisers and conditions may be statements
            self.on_statement(node)
        elif node.type not in _LEAF_EXPRESSIONS and node.type not in EXTRA_NODE_TYPES:
            logger.debug("Not traversing expression of type %s", node.type)

    def on_pattern(self, node: ts.Node) -> None:
        """Walk a binding or assignment target.

        Anything that is not a destructuring pattern (identifiers, member
        expressions, parenthesized targets) is walked as an expression.
        """
        kind = node.type
        if kind == "object_pattern":
            for part in _named(node):
                if part.type == "pair_pattern":
                    self._on_property(part)
                elif part.type == "object_assignment_pattern":
                    self._on_assign(part)
                else:
                    self.on_pattern(part)
        elif kind == "array_pattern":
            for element in _named(node):
                self.on_pattern(element)
        elif kind == "rest_pattern":
            for target in _named(node):
                self.on_pattern(target)
        elif kind == "assignment_pattern":
            self._on_assign(node)
        else:
            self.on_expression(node)

    # ------------------------------------------------------------------
    # Shared shapes
    # ------------------------------------------------------------------

    def _on_children(self, node: ts.Node) -> None:
        for child in _named(node):
            self.on_expression(child)

    def _on_body(self, node: ts.Node) -> None:
        for child in _named(node):
            self.on_statement(child)

    def _on_field(self, node: ts.Node, field: str) -> None:
        child = node.child_by_field_name(field)
        if child is not None and child.is_named:
            self.on_expression(child)

    def _on_params(self, node: ts.Node) -> None:
        params = node.child_by_field_name("parameters")
        if params is not None:
            for param in _named(params):
                self.on_pattern(param)
        param = node.child_by_field_name("parameter")
        if param is not None:
            self.on_pattern(param)

    def _on_function(self, node: ts.Node) -> None:
        self._on_params(node)
        body = node.child_by_field_name("body")
        if body is not None:
            self._on_body(body)

    def _on_property(self, node: ts.Node) -> None:
        """Walk a key/value pair of an object literal or object pattern."""
        self._on_key(node.child_by_field_name("key"))
        value = node.child_by_field_name("value")
        if value is None:
            return
        if node.type == "pair_pattern":
            self.on_pattern(value)
        else:
            self.on_expression(value)

    def _on_key(self, key: ts.Node | None) -> None:
        if key is not None and key.type == "computed_property_name":
            self._on_children(key)

    def _on_class(self, node: ts.Node) -> None:
        for child in _named(node):
            if child.type == "class_heritage":
                self._on_children(child)
            elif child.type == "decorator":
                self._on_children(child)
        body = node.child_by_field_name("body")
        if body is None:
            return
        for member in _named(body):
            if member.type == "method_definition":
                self._on_method(member)
            elif member.type == "field_definition":
                for child in _named(member):
                    if child.type == "decorator":
                        self._on_children(child)
                self._on_key(member.child_by_field_name("property"))
                self._on_field(member, "value")
            elif member.type == "class_static_block":
                self._on_field_body(member)
            else:
                self.on_expression(member)

    def _on_field_body(self, node: ts.Node) -> None:
        body = node.child_by_field_name("body")
        if body is not None:
            self._on_body(body)

    def _on_method(self, node: ts.Node) -> None:
        for child in _named(node):
            if child.type == "decorator":
                self._on_children(child)
        self._on_key(node.child_by_field_name("name"))
        self._on_function(node)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _on_arrow(self, node: ts.Node) -> None:
        self._on_params(node)
        body = node.child_by_field_name("body")
        if body is None:
            return
        if body.type == "statement_block":
            self._on_body(body)
        else:
            self.on_expression(body)

    def _on_assign(self, node: ts.Node) -> None:
        """Walk an assignment expression or pattern: target, then value."""
        left = node.child_by_field_name("left")
        if left is not None:
            self.on_pattern(left)
        self._on_field(node, "right")

    def _on_binary(self, node: ts.Node) -> None:
        self._on_field(node, "left")
        self._on_field(node, "right")

    def _on_conditional(self, node: ts.Node) -> None:
        self._on_field(node, "condition")
        self._on_field(node, "consequence")
        self._on_field(node, "alternative")

    def _on_member(self, node: ts.Node) -> None:
        self._on_field(node, "object")
        self._on_field(node, "property")

    def _on_subscript(self, node: ts.Node) -> None:
        self._on_field(node, "object")
        self._on_field(node, "index")

    def _on_object(self, node: ts.Node) -> None:
        for prop in _named(node):
            if prop.type == "pair":
                self._on_property(prop)
            elif prop.type == "method_definition":
                self._on_method(prop)
            else:
                self.on_expression(prop)

    def _on_template(self, node: ts.Node) -> None:
        # only substitutions, never the literal chunks
        for child in _named(node):
            if child.type == "template_substitution":
                self._on_children(child)

    def _on_unary(self, node: ts.Node) -> None:
        self._on_field(node, "argument")

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _on_body_statement(self, node: ts.Node) -> None:
        body = node.child_by_field_name("body")
        if body is not None:
            self.on_statement(body)

    def _on_with(self, node: ts.Node) -> None:
        self._on_field(node, "object")
        self._on_body_statement(node)

    def _on_if(self, node: ts.Node) -> None:
        self._on_field(node, "condition")
        consequence = node.child_by_field_name("consequence")
        if consequence is not None:
            self.on_statement(consequence)
        alternative = node.child_by_field_name("alternative")
        if alternative is not None:
            self.on_statement(alternative)

    def _on_switch(self, node: ts.Node) -> None:
        self._on_field(node, "value")
        body = node.child_by_field_name("body")
        if body is None:
            return
        for case in _named(body):
            statements = _named(case)
            if case.type == "switch_case" and statements:
                self.on_expression(statements[0])
                statements = statements[1:]
            for statement in statements:
                self.on_statement(statement)

    def _on_try(self, node: ts.Node) -> None:
        self._on_field_body(node)
        handler = node.child_by_field_name("handler")
        if handler is not None:
            param = handler.child_by_field_name("parameter")
            if param is not None:
                self.on_pattern(param)
            self._on_field_body(handler)
        finalizer = node.child_by_field_name("finalizer")
        if finalizer is not None:
            self._on_field_body(finalizer)

    def _on_while(self, node: ts.Node) -> None:
        self._on_field(node, "condition")
        self._on_body_statement(node)

    def _on_do_while(self, node: ts.Node) -> None:
        self._on_body_statement(node)
        self._on_field(node, "condition")

    def _on_for(self, node: ts.Node) -> None:
        self._on_field(node, "initializer")
        self._on_field(node, "condition")
        self._on_field(node, "increment")
        self._on_body_statement(node)

    def _on_for_in(self, node: ts.Node) -> None:
        # covers for-in, for-of and for await
        left = node.child_by_field_name("left")
        if left is not None:
            self.on_pattern(left)
        self._on_field(node, "value")
        self._on_field(node, "right")
        self._on_body_statement(node)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _on_var(self, node: ts.Node) -> None:
        for declarator in _named(node):
            if declarator.type != "variable_declarator":
                continue
            name = declarator.child_by_field_name("name")
            if name is not None:
                self.on_pattern(name)
            self._on_field(declarator, "value")

    def _on_export(self, node: ts.Node) -> None:
        for child in _named(node):
            if child.type == "decorator":
                self._on_children(child)
        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            self.on_declaration(declaration)
            return
        # export default <expression>; export clauses have no value
        self._on_field(node, "value")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _source(self) -> ParsedSource:
        if self._parsed is None:
            raise RuntimeError("Detective.run() is not in progress")
        return self._parsed

    def _text(self, node: ts.Node) -> str:
        return self._source().get_text(node)


# ---------------------------------------------------------------------------
# Module-level entry points
# ---------------------------------------------------------------------------


def find(
    source: str,
    options: Options | None = None,
    parser: JavaScriptParser | None = None,
) -> Found:
    """Find every target call in *source*.

    Sources that do not contain the target identifier at all are answered
    with an empty result without being parsed.

    Args:
        source: JavaScript source text.
        options: Detection options; ``Options()`` when omitted.
        parser: Syntax provider to use; the shared default when omitted.

    Returns:
        The resolved names and unresolved argument expressions, in
        encounter order.

    Raises:
        SourceSyntaxError: If *source* is not valid JavaScript.
    """
    options = options or Options()
    if options.word not in source:
        logger.debug("Source does not mention %r, skipping parse", options.word)
        return Found()

    parsed = (parser or get_default_parser()).parse(source)
    found = Detective(options).run(parsed)
    logger.debug(
        "Found %d resolved and %d unresolved %s() calls",
        len(found.strings),
        len(found.expressions),
        options.word,
    )
    return found


def detective(
    source: str,
    options: Options | None = None,
    parser: JavaScriptParser | None = None,
) -> list[str]:
    """Return only the resolved dependency names found in *source*.

    Raises:
        SourceSyntaxError: If *source* is not valid JavaScript.
    """
    return find(source, options, parser).strings
