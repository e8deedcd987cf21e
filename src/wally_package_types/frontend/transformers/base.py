"""
Luau Transformer

Converts the Lark parse tree of luau.lark into the syntax nodes of
shared/nodes.py. Statements the rewriter never looks inside (loops,
function declarations, assignments) become plain ``Statement`` nodes over
their span; expression and type rules live in expressions.py and types.py.
"""

import logging

from lark import v_args
from lark.lexer import Token

from .expressions import ExpressionTransformer
from .types import TypeTransformer
from ...shared.nodes import (
    NodeType, Chunk, Statement, LocalAssignment, TypeDeclaration, ReturnStatement,
    CallExpr, MethodCallExpr,
)
from ...shared.source_location import SourceLocation
from ...shared.errors import ParseError

logger = logging.getLogger(__name__)


@v_args(inline=True, meta=True)
class LuauTransformer(ExpressionTransformer, TypeTransformer):
    """
    Luau syntax tree transformer.

    Only top-level statements of the chunk are collected; nested blocks are
    kept for structure but a declaration inside `do ... end` never surfaces
    as a top-level statement.
    """

    def _statement(self, meta, node_type: NodeType = NodeType.STATEMENT) -> Statement:
        return Statement(node_type, self._extract_location(meta), self.source)

    # ------------------------------------------------------------------
    # Chunk and blocks
    # ------------------------------------------------------------------

    def chunk(self, meta, block):
        statements = list(block)
        last_statement = None
        if statements and isinstance(statements[-1], ReturnStatement):
            last_statement = statements.pop()
        end_line = self.source.count("\n") + 1
        end_column = len(self.source) - (self.source.rfind("\n") + 1) + 1
        location = SourceLocation(
            file=self.current_file,
            line=1,
            column=1,
            start=0,
            end=len(self.source),
            end_line=end_line,
            end_column=end_column,
        )
        return Chunk(location, self.source, tuple(statements), last_statement)

    def block(self, meta, *statements):
        return tuple(statements)

    # ------------------------------------------------------------------
    # Statements the rewriter inspects
    # ------------------------------------------------------------------

    def local_assignment(self, meta, names, expressions=()):
        return LocalAssignment(self._extract_location(meta), self.source, names, expressions)

    def binding_list(self, meta, *names):
        return tuple(names)

    def binding(self, meta, name, annotation=None):
        return str(name)

    def type_declaration(self, meta, *children):
        """`[export] type Name<Generics> = Type`"""
        exported = isinstance(children[0], Token) and children[0].type == 'EXPORT'
        name = next(str(child) for child in children if isinstance(child, Token) and child.type == 'NAME')
        generics = next((child for child in children if isinstance(child, tuple)), None)
        body = children[-1]
        return TypeDeclaration(self._extract_location(meta), self.source, exported, name, generics, body)

    def type_function(self, meta, *children):
        return self._statement(meta, NodeType.TYPE_FUNCTION)

    def return_statement(self, meta, expressions=()):
        return ReturnStatement(self._extract_location(meta), self.source, expressions)

    def call_statement(self, meta, expression):
        if not isinstance(expression, (CallExpr, MethodCallExpr)):
            raise ParseError(
                "syntax error: expression is not a statement",
                self.current_file,
                expression.location,
                source_code=self.source,
            )
        return self._statement(meta)

    # ------------------------------------------------------------------
    # Everything else is kept as an opaque statement
    # ------------------------------------------------------------------

    def assignment(self, meta, targets, values):
        return self._statement(meta)

    def assignment_targets(self, meta, *targets):
        return tuple(targets)

    def compound_assignment(self, meta, target, operator, value):
        return self._statement(meta)

    def do_statement(self, meta, block):
        return self._statement(meta)

    def while_statement(self, meta, condition, block):
        return self._statement(meta)

    def repeat_statement(self, meta, block, condition):
        return self._statement(meta)

    def if_statement(self, meta, *branches):
        return self._statement(meta)

    def numeric_for(self, meta, *parts):
        return self._statement(meta)

    def generic_for(self, meta, *parts):
        return self._statement(meta)

    def function_declaration(self, meta, *parts):
        return self._statement(meta)

    def local_function(self, meta, *parts):
        return self._statement(meta)

    def break_statement(self, meta):
        return self._statement(meta)

    def continue_statement(self, meta, keyword):
        return self._statement(meta)
