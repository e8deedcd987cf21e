"""
Type grammar tests: the type shapes generic defaults and alias bodies use.
"""

import pytest

from wally_package_types.shared import (
    ParseError, TypeDeclaration, TypeReference, GenericPackReference, TypeofType, FunctionType, NodeType,
)


def declaration(parser, source: str) -> TypeDeclaration:
    chunk = parser.parse(source)
    (statement,) = chunk.statements
    assert isinstance(statement, TypeDeclaration)
    return statement


class TestTypeBodies:
    @pytest.mark.parametrize("body,node_type", [
        ("number", NodeType.TYPE_REFERENCE),
        ("Module.Thing<string>", NodeType.TYPE_REFERENCE),
        ('"literal"', NodeType.SINGLETON_TYPE),
        ("true", NodeType.SINGLETON_TYPE),
        ("number?", NodeType.OPTIONAL_TYPE),
        ("string | number", NodeType.UNION_TYPE),
        ("| 'a' | 'b'", NodeType.UNION_TYPE),
        ("A & B", NodeType.UNION_TYPE),
        ("(string)", NodeType.PAREN_TYPE),
        ("(string, number) -> boolean", NodeType.FUNCTION_TYPE),
        ("<T>(T) -> T", NodeType.FUNCTION_TYPE),
        ("{ [string]: number, read name: string, write count: number, method: (self: any) -> () }",
         NodeType.TABLE_TYPE),
        ("{ number }", NodeType.TABLE_TYPE),
        ("typeof(setmetatable({}, {}))", NodeType.TYPEOF),
        ("((number) -> ())?", NodeType.OPTIONAL_TYPE),
    ])
    def test_body_kinds(self, session_parser, body, node_type):
        source = f"export type T = {body}\n"
        node = declaration(session_parser, source)
        assert node.body.node_type == node_type
        assert node.body.text() == body

    def test_module_qualified_reference(self, session_parser):
        body = declaration(session_parser, "type T = Promise.Promise<number>").body
        assert isinstance(body, TypeReference)
        assert (body.module, body.name) == ("Promise", "Promise")
        assert [a.text() for a in body.arguments] == ["number"]

    def test_generic_function_binds_names(self, session_parser):
        body = declaration(session_parser, "type T = <A, B...>(A, B...) -> ...B").body
        assert isinstance(body, FunctionType)
        assert body.generics == ("A", "B")
        assert isinstance(body.parameters[1], GenericPackReference)
        assert body.returns.node_type == NodeType.VARIADIC_TYPE

    def test_typeof_keeps_expression(self, session_parser):
        body = declaration(session_parser, "type T = typeof(Module.new())").body
        assert isinstance(body, TypeofType)
        assert body.expression.text() == "Module.new()"


class TestGenericParameters:
    def test_defaults_and_packs(self, session_parser):
        node = declaration(session_parser, "export type F<T, U = T?, V... = ...number, W... = (string, T)> = T")
        names = [(g.name, g.is_variadic, g.default.text() if g.default else None) for g in node.generics]
        assert names == [
            ("T", False, None),
            ("U", False, "T?"),
            ("V", True, "...number"),
            ("W", True, "(string, T)"),
        ]
        assert node.generics[3].default.node_type == NodeType.TYPE_PACK

    def test_no_generics_is_none(self, session_parser):
        assert declaration(session_parser, "type T = number").generics is None

    def test_greater_equal_token_closes_generic_list(self, session_parser):
        source = "export type Map<K, V=string>= { [K]: V }"
        node = declaration(session_parser, source)
        assert [g.name for g in node.generics] == ["K", "V"]
        assert node.generics[1].default.text() == "string"
        assert node.body.text() == "{ [K]: V }"

    def test_nested_type_arguments(self, session_parser):
        node = declaration(session_parser, "type T<A = Array<Array<number>>> = A")
        assert node.generics[0].default.text() == "Array<Array<number>>"

    def test_generic_function_default(self, session_parser):
        node = declaration(session_parser, "type T<F = <U>(U) -> U> = F")
        default = node.generics[0].default
        assert isinstance(default, FunctionType)
        assert default.generics == ("U",)


class TestTypeErrors:
    @pytest.mark.parametrize("source", [
        "type T = ",
        "type T<> = number",
        "type T = { x: }",
        "type T = <U>U",
    ])
    def test_malformed_types(self, session_parser, source):
        with pytest.raises(ParseError):
            session_parser.parse(source)
