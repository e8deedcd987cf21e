"""
Luau Syntax Tree Definitions

Nodes are built by the Lark transformers in frontend/transformers from the
positions Lark propagates onto each rule. Every node keeps its span and the
source it was parsed from, so ``text()`` is the node's exact source text and
the whitespace and comments between nodes can be sliced back out of the
source. That is what lets link files be rewritten without cosmetic diffs.

Nodes are tagged with a NodeType; the handful of shapes the rewriter inspects
(locals, returns, type declarations, require paths, type references) get their
own subclasses with semantic fields.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from .source_location import SourceLocation


class NodeType(Enum):
    """Syntax node types"""
    CHUNK = "chunk"
    # Statements
    STATEMENT = "statement"
    LOCAL_ASSIGNMENT = "local_assignment"
    TYPE_DECLARATION = "type_declaration"
    TYPE_FUNCTION = "type_function"
    RETURN = "return"
    # Expressions
    EXPRESSION = "expression"
    LITERAL = "literal"
    STRING = "string"
    INTERPOLATED_STRING = "interpolated_string"
    NAME = "name"
    PAREN = "paren"
    INDEX = "index"
    CALL = "call"
    METHOD_CALL = "method_call"
    INSTANTIATION = "instantiation"
    TABLE = "table"
    FUNCTION = "function"
    IF_EXPR = "if_expr"
    UNARY_OP = "unary_op"
    BINARY_OP = "binary_op"
    TYPE_ASSERTION = "type_assertion"
    # Types
    TYPE_REFERENCE = "type_reference"
    SINGLETON_TYPE = "singleton_type"
    TYPEOF = "typeof"
    TABLE_TYPE = "table_type"
    FUNCTION_TYPE = "function_type"
    UNION_TYPE = "union_type"
    OPTIONAL_TYPE = "optional_type"
    PAREN_TYPE = "paren_type"
    TYPE_PACK = "type_pack"
    VARIADIC_TYPE = "variadic_type"
    GENERIC_PACK = "generic_pack"
    GENERIC_PARAMETER = "generic_parameter"


class SyntaxNode:
    """
    Base class for all syntax nodes.

    - ``location`` spans the node from its first to its last character
    - ``source`` is the text of the whole file the node was parsed from
    - ``text()`` is the node's own source text, without surrounding trivia,
      which is what you want when splicing a node into newly generated code
    """
    __slots__ = ('node_type', 'location', 'source')

    def __init__(self, node_type: NodeType, location: SourceLocation, source: str):
        self.node_type = node_type
        self.location = location
        self.source = source

    def text(self) -> str:
        return self.source[self.location.start:self.location.end]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.node_type.value}, {self.text()!r})"


# ============================================================================
# Chunk and statements
# ============================================================================

class Statement(SyntaxNode):
    """Any statement the rewriter does not need to look inside."""
    __slots__ = ()


class LocalAssignment(Statement):
    """`local a, b = x, y` (type annotations stay in the source text only)."""
    __slots__ = ('names', 'expressions')

    def __init__(self, location, source, names: Tuple[str, ...], expressions: Tuple["Expression", ...]):
        super().__init__(NodeType.LOCAL_ASSIGNMENT, location, source)
        self.names = names
        self.expressions = expressions


class GenericParameter(SyntaxNode):
    """`T`, `T...`, `T = Default` or `T... = (A, B)` in a declaration's generic list."""
    __slots__ = ('name', 'is_variadic', 'default')

    def __init__(self, location, source, name: str, is_variadic: bool, default: Optional["TypeNode"]):
        super().__init__(NodeType.GENERIC_PARAMETER, location, source)
        self.name = name
        self.is_variadic = is_variadic
        self.default = default


class TypeDeclaration(Statement):
    """`[export] type Name<Generics> = Type`"""
    __slots__ = ('exported', 'name', 'generics', 'body')

    def __init__(self, location, source, exported: bool, name: str,
                 generics: Optional[Tuple[GenericParameter, ...]], body: "TypeNode"):
        super().__init__(NodeType.TYPE_DECLARATION, location, source)
        self.exported = exported
        self.name = name
        self.generics = generics
        self.body = body


class ReturnStatement(Statement):
    __slots__ = ('expressions',)

    def __init__(self, location, source, expressions: Tuple["Expression", ...]):
        super().__init__(NodeType.RETURN, location, source)
        self.expressions = expressions


class Chunk(SyntaxNode):
    """A whole source file: top-level statements and the optional final return."""
    __slots__ = ('statements', 'last_statement')

    def __init__(self, location, source, statements: Tuple[Statement, ...],
                 last_statement: Optional[ReturnStatement]):
        super().__init__(NodeType.CHUNK, location, source)
        self.statements = statements
        self.last_statement = last_statement

    def _body(self) -> Tuple[Statement, ...]:
        if self.last_statement is None:
            return self.statements
        return self.statements + (self.last_statement,)

    def leading_trivia(self) -> str:
        """Whitespace and comments before the first statement."""
        body = self._body()
        if not body:
            return self.source
        return self.source[:body[0].location.start]

    def trailing_trivia(self) -> str:
        """Whitespace and comments after the last statement."""
        body = self._body()
        if not body:
            return ""
        return self.source[body[-1].location.end:]


# ============================================================================
# Expressions
# ============================================================================

class Expression(SyntaxNode):
    """Any expression; subclasses cover the shapes require paths are made of."""
    __slots__ = ()


class NameExpr(Expression):
    __slots__ = ('name',)

    def __init__(self, location, source, name: str):
        super().__init__(NodeType.NAME, location, source)
        self.name = name


class StringExpr(Expression):
    """A quoted or long-bracket string literal; ``value`` is its content."""
    __slots__ = ('value',)

    def __init__(self, location, source, value: str):
        super().__init__(NodeType.STRING, location, source)
        self.value = value


class ParenExpr(Expression):
    __slots__ = ('inner',)

    def __init__(self, location, source, inner: Expression):
        super().__init__(NodeType.PAREN, location, source)
        self.inner = inner


class IndexExpr(Expression):
    """`base.name` (``name`` set) or `base[key]` (``key`` set)."""
    __slots__ = ('base', 'name', 'key')

    def __init__(self, location, source, base: Expression, name: Optional[str] = None,
                 key: Optional[Expression] = None):
        super().__init__(NodeType.INDEX, location, source)
        self.base = base
        self.name = name
        self.key = key

    @property
    def is_dot(self) -> bool:
        return self.name is not None


class CallExpr(Expression):
    """`callee(args)`, `callee "str"` or `callee {table}` (``args_style`` says which)."""
    __slots__ = ('callee', 'arguments', 'args_style')

    def __init__(self, location, source, callee: Expression, arguments: Tuple[Expression, ...], args_style: str):
        super().__init__(NodeType.CALL, location, source)
        self.callee = callee
        self.arguments = arguments
        self.args_style = args_style


class MethodCallExpr(Expression):
    """`receiver:method(args)`"""
    __slots__ = ('receiver', 'method', 'arguments', 'args_style')

    def __init__(self, location, source, receiver: Expression, method: str,
                 arguments: Tuple[Expression, ...], args_style: str):
        super().__init__(NodeType.METHOD_CALL, location, source)
        self.receiver = receiver
        self.method = method
        self.arguments = arguments
        self.args_style = args_style


# ============================================================================
# Types
# ============================================================================

class TypeNode(SyntaxNode):
    """A type expression. Generic kinds keep their component types in ``parts``."""
    __slots__ = ('parts',)

    def __init__(self, node_type: NodeType, location, source, parts: Tuple["TypeNode", ...] = ()):
        super().__init__(node_type, location, source)
        self.parts = parts


class TypeReference(TypeNode):
    """`Name`, `Name<Args>`, `Module.Name` or `Module.Name<Args>`."""
    __slots__ = ('module', 'name')

    def __init__(self, location, source, module: Optional[str], name: str, arguments: Tuple[TypeNode, ...] = ()):
        super().__init__(NodeType.TYPE_REFERENCE, location, source, arguments)
        self.module = module
        self.name = name

    @property
    def arguments(self) -> Tuple[TypeNode, ...]:
        return self.parts


class GenericPackReference(TypeNode):
    """`T...` used as a type pack."""
    __slots__ = ('name',)

    def __init__(self, location, source, name: str):
        super().__init__(NodeType.GENERIC_PACK, location, source)
        self.name = name


class TypeofType(TypeNode):
    """`typeof(expression)`; the expression lives in the defining module's scope."""
    __slots__ = ('expression',)

    def __init__(self, location, source, expression: Expression):
        super().__init__(NodeType.TYPEOF, location, source)
        self.expression = expression


class FunctionType(TypeNode):
    """`<A>(params) -> returns`; ``generics`` are the names the function binds."""
    __slots__ = ('generics',)

    def __init__(self, location, source, generics: Tuple[str, ...], parameters: Tuple[TypeNode, ...], returns: TypeNode):
        super().__init__(NodeType.FUNCTION_TYPE, location, source, parameters + (returns,))
        self.generics = generics

    @property
    def parameters(self) -> Tuple[TypeNode, ...]:
        return self.parts[:-1]

    @property
    def returns(self) -> TypeNode:
        return self.parts[-1]
