"""
Expression Transformer - Extracted from LuauTransformer
Handles expressions, call arguments and table constructors.

Only the shapes require paths are made of (names, strings, indexing, calls,
parentheses) get semantic nodes. Everything else becomes a plain
``Expression`` over its span: operator chains are kept flat, since
precedence never matters when a node is only ever spliced back verbatim.
"""

from typing import Tuple

from lark import v_args

from .located import LocatedTransformer
from .literals import string_value
from ...shared.nodes import (
    NodeType, Expression, NameExpr, StringExpr, ParenExpr, IndexExpr,
    CallExpr, MethodCallExpr,
)

CallArguments = Tuple[Tuple[Expression, ...], str]


@v_args(inline=True, meta=True)
class ExpressionTransformer(LocatedTransformer):
    """Expression rules of luau.lark"""

    def _expression(self, node_type: NodeType, meta) -> Expression:
        return Expression(node_type, self._extract_location(meta), self.source)

    def expression_list(self, meta, *expressions):
        return tuple(expressions)

    def expression(self, meta, *operands):
        return self._expression(NodeType.BINARY_OP, meta)

    def unary_operation(self, meta, operand):
        return self._expression(NodeType.UNARY_OP, meta)

    def type_assertion(self, meta, expression, *types):
        return self._expression(NodeType.TYPE_ASSERTION, meta)

    # ------------------------------------------------------------------
    # Simple expressions
    # ------------------------------------------------------------------

    def literal(self, meta, *value):
        return self._expression(NodeType.LITERAL, meta)

    def string(self, meta, token):
        return StringExpr(self._extract_location(meta), self.source, string_value(str(token)))

    def interpolated_string(self, meta, token):
        return self._expression(NodeType.INTERPOLATED_STRING, meta)

    def table_constructor(self, meta, *fields):
        return self._expression(NodeType.TABLE, meta)

    def function_expression(self, meta, *parts):
        return self._expression(NodeType.FUNCTION, meta)

    def if_expression(self, meta, *branches):
        return self._expression(NodeType.IF_EXPR, meta)

    # ------------------------------------------------------------------
    # Prefix and suffixed expressions
    # ------------------------------------------------------------------

    def name_expression(self, meta, token):
        return NameExpr(self._extract_location(meta), self.source, str(token))

    def parenthesized_expression(self, meta, inner):
        return ParenExpr(self._extract_location(meta), self.source, inner)

    def field_index(self, meta, base, name):
        return IndexExpr(self._extract_location(meta), self.source, base, name=str(name))

    def key_index(self, meta, base, key):
        return IndexExpr(self._extract_location(meta), self.source, base, key=key)

    def instantiation(self, meta, base, type_arguments):
        """`f<<T>>`, an explicit instantiation of a generic function"""
        return self._expression(NodeType.INSTANTIATION, meta)

    def type_instantiation(self, meta, *type_arguments):
        return tuple(type_arguments)

    def call(self, meta, callee, arguments: CallArguments):
        values, style = arguments
        return CallExpr(self._extract_location(meta), self.source, callee, values, style)

    def method_call(self, meta, receiver, method, *rest):
        # rest is the optional type instantiation followed by the arguments
        values, style = rest[-1]
        return MethodCallExpr(self._extract_location(meta), self.source, receiver, str(method), values, style)

    def parenthesized_arguments(self, meta, expressions=()) -> CallArguments:
        return tuple(expressions), 'parens'

    def table_arguments(self, meta, table) -> CallArguments:
        return (table,), 'table'

    def string_arguments(self, meta, string) -> CallArguments:
        return (string,), 'string'
