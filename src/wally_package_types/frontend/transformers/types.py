"""
Type Transformer - Extracted from LuauTransformer
Handles Luau type annotations, type packs and generic parameter lists.

Type bodies are forwarded as opaque text, but the generic defaults of an
exported declaration are inspected for the names they reference, so the
shapes that bind or reference names keep semantic nodes.
"""

from lark import v_args
from lark.lexer import Token

from .located import LocatedTransformer
from ...shared.nodes import (
    NodeType, TypeNode, TypeReference, GenericPackReference, TypeofType,
    FunctionType, GenericParameter,
)

# Kinds that make a parenthesized list a type pack even with a single member
_PACK_KINDS = (NodeType.VARIADIC_TYPE, NodeType.GENERIC_PACK)


@v_args(inline=True, meta=True)
class TypeTransformer(LocatedTransformer):
    """Type rules of luau.lark"""

    def _type(self, node_type: NodeType, meta, parts=()) -> TypeNode:
        return TypeNode(node_type, self._extract_location(meta), self.source, tuple(parts))

    def union_type(self, meta, *members):
        return self._type(NodeType.UNION_TYPE, meta, members)

    def optional_type(self, meta, inner):
        return self._type(NodeType.OPTIONAL_TYPE, meta, (inner,))

    def nil_type(self, meta):
        return TypeReference(self._extract_location(meta), self.source, None, 'nil')

    def singleton_type(self, meta, *value):
        return self._type(NodeType.SINGLETON_TYPE, meta)

    def typeof_type(self, meta, expression):
        return TypeofType(self._extract_location(meta), self.source, expression)

    def table_type(self, meta, *fields):
        """`{ prop: T, [K]: V, read x: T }` or the array shorthand `{ T }`."""
        return self._type(NodeType.TABLE_TYPE, meta, [f for f in fields if isinstance(f, TypeNode)])

    def type_reference(self, meta, *children):
        names = [str(child) for child in children if isinstance(child, Token)]
        arguments = children[-1] if isinstance(children[-1], tuple) else ()
        module = names[0] if len(names) == 2 else None
        return TypeReference(self._extract_location(meta), self.source, module, names[-1], arguments)

    def type_arguments(self, meta, *arguments):
        return tuple(arguments)

    def type_list(self, meta, *items):
        # Parameter names of `(name: T) -> R` arrive as NAME tokens
        return tuple(item for item in items if isinstance(item, TypeNode))

    def variadic_type(self, meta, inner):
        return self._type(NodeType.VARIADIC_TYPE, meta, (inner,))

    def generic_pack(self, meta, name):
        return GenericPackReference(self._extract_location(meta), self.source, str(name))

    def parenthesized_type(self, meta, items=()):
        """`(T)`, or a pack `(A, B)` / `()` / `(T...)`."""
        if len(items) == 1 and items[0].node_type not in _PACK_KINDS:
            return self._type(NodeType.PAREN_TYPE, meta, items)
        return self._type(NodeType.TYPE_PACK, meta, items)

    def function_type(self, meta, *children):
        """`<A>(params) -> returns`; generics and parameters are both optional."""
        generics = ()
        parameters = ()
        *leading, returns = children
        for child in leading:
            if child and isinstance(child[0], GenericParameter):
                generics = tuple(param.name for param in child)
            else:
                parameters = child
        return FunctionType(self._extract_location(meta), self.source, generics, parameters, returns)

    # ------------------------------------------------------------------
    # Generic parameter lists
    # ------------------------------------------------------------------

    def generic_parameters(self, meta, parameters):
        return parameters

    def generic_parameter_list(self, meta, *parameters):
        return tuple(parameters)

    def generic_parameter(self, meta, name, default=None):
        return GenericParameter(self._extract_location(meta), self.source, str(name), False, default)

    def generic_pack_parameter(self, meta, name, default=None):
        return GenericParameter(self._extract_location(meta), self.source, str(name), True, default)
