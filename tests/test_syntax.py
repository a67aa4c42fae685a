"""
Unit tests for compdetect.syntax (tree-sitter arena).
"""
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from compdetect.syntax import (
    FunctionKind,
    function_kind,
    function_params,
    is_concise_arrow,
    parse,
)


class TestArena:

    def test_root_is_program(self):
        tree = parse("const Foo = () => <div/>;")
        assert tree.root.kind == "program"
        assert tree.root.parent is None

    def test_indices_are_preorder(self):
        tree = parse("function Foo(a) { if (a) { return <div/>; } return null; }")
        assert [node.index for node in tree.walk()] == list(range(len(tree.nodes)))
        for node in tree.nodes[1:]:
            assert node.parent is not None
            assert node.parent.index < node.index

    def test_children_in_source_order(self):
        tree = parse("a; b; c;")
        starts = [child.start for child in tree.root.children]
        assert starts == sorted(starts)
        assert len(starts) == 3

    def test_fields(self):
        tree = parse("const Foo = () => <div/>;")
        declarator = tree.find_first("variable_declarator")
        assert declarator.field("name").text == "Foo"
        assert declarator.field("value").kind == "arrow_function"
        assert declarator.field("missing") is None

    def test_parentheses_are_collapsed(self):
        tree = parse("const Foo = () => (\n  <div>hi</div>\n);")
        assert tree.find_first("parenthesized_expression") is None
        arrow = tree.find_first("arrow_function")
        body = arrow.field("body")
        assert body.kind == "jsx_element"
        assert body.parent is arrow

    def test_tokens_keep_operators_and_keywords(self):
        tree = parse("a && b;\nexport default function () {}")
        assert tree.find_first("binary_expression").has_token("&&")
        assert tree.find_first("export_statement").has_token("default")

    def test_comments_collected_and_removed(self):
        tree = parse("/** @jsx h */\nconst a = 1; // trailing")
        assert tree.comments == ["/** @jsx h */", "// trailing"]
        assert tree.find_first("comment") is None

    def test_text_and_span(self):
        source = "let x = 1;"
        tree = parse(source)
        ident = tree.find_first("identifier")
        assert ident.text == "x"
        assert ident.span == (4, 5)
        assert source[ident.start:ident.end] == "x"

    def test_ancestors(self):
        tree = parse("function Foo() { return <div/>; }")
        ret = tree.find_first("return_statement")
        kinds = [node.kind for node in ret.ancestors()]
        assert kinds == ["statement_block", "function_declaration", "program"]

    def test_bytes_source(self):
        tree = parse(b"const x = 1;")
        assert tree.find_first("identifier").text == "x"

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            parse(42)

    def test_has_error_on_broken_source(self):
        assert parse("const = ;").has_error is True
        assert parse("const a = 1;").has_error is False


class TestFunctionHelpers:

    def test_function_kind(self):
        tree = parse(
            "function a() {}\n"
            "const b = function () {};\n"
            "const c = () => 1;\n"
            "const d = { e() {} };\n"
        )
        assert function_kind(tree.find_first("function_declaration")) is FunctionKind.DECLARATION
        assert function_kind(tree.find_first("arrow_function")) is FunctionKind.ARROW
        assert function_kind(tree.find_first("method_definition")) is FunctionKind.METHOD
        expression = tree.find_first("function_expression") or tree.find_first("function")
        assert function_kind(expression) is FunctionKind.EXPRESSION
        assert function_kind(tree.root) is None
        assert function_kind(None) is None

    def test_function_params(self):
        tree = parse("function a(x, { y }, ...z) {}\nconst b = q => q;")
        declaration = tree.find_first("function_declaration")
        assert len(function_params(declaration)) == 3
        arrow = tree.find_first("arrow_function")
        assert [p.text for p in function_params(arrow)] == ["q"]

    def test_is_concise_arrow(self):
        tree = parse("const a = () => <div/>;\nconst b = () => { return 1; };")
        concise, block = tree.find_all("arrow_function")
        assert is_concise_arrow(concise) is True
        assert is_concise_arrow(block) is False
        assert is_concise_arrow(tree.root) is False
