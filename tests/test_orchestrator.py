"""
End-to-end tests for compdetect.orchestrator.

Each test runs a full detection pass over a JSX snippet and asserts on
the confirmed components (and, where it matters, on the registry).
"""
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from compdetect.orchestrator import find_components, run_rule, traverse
from compdetect.registry import Confidence
from compdetect.settings import Settings
from compdetect.syntax import parse

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def confirmed_kinds(code: str, settings: Settings = None) -> list:
    return sorted(record.node.kind for record in find_components(code, settings).values())


def registry_after(code: str, settings: Settings = None):
    """Run a pass and hand back the registry (all confidences)."""
    captured = {}

    def rule(context, components, utils):
        captured["components"] = components
        captured["tree"] = context.tree
        return {}

    run_rule(code, rule, settings)
    return captured["components"], captured["tree"]


# ---------------------------------------------------------------------------
# Stateless components
# ---------------------------------------------------------------------------

class TestStatelessComponents:

    def test_capitalized_function_declaration(self):
        found = find_components("function Foo() { return <div/>; }")
        assert len(found) == 1
        record = next(iter(found.values()))
        assert record.node.kind == "function_declaration"
        assert record.confidence == Confidence.CONFIRMED

    def test_lowercase_function_declaration(self):
        assert find_components("function foo() { return <div/>; }") == {}

    def test_capitalized_arrow(self):
        assert confirmed_kinds("const Foo = () => <div/>;") == ["arrow_function"]

    def test_lowercase_arrow(self):
        components, tree = registry_after("const foo = () => <div/>;")
        assert components.get(tree.find_first("arrow_function")) is None
        assert components.count() == 0

    def test_arrow_with_block_body(self):
        assert confirmed_kinds("const Foo = () => { return <div/>; };") == ["arrow_function"]

    def test_null_only_component_is_not_confirmed(self):
        components, tree = registry_after("const Foo = () => null;")
        record = components.get(tree.find_first("arrow_function"))
        assert record.confidence == Confidence.MAYBE
        assert components.all() == {}

    def test_default_export(self):
        assert len(find_components("export default function () { return <div/>; }")) == 1
        assert len(find_components("export default () => <div/>;")) == 1

    def test_create_element(self):
        code = "function Foo() { return React.createElement('div'); }"
        assert confirmed_kinds(code) == ["function_declaration"]

    def test_helper_returning_data(self):
        assert find_components("function helper() { return { a: 1 }; }") == {}

    def test_nested_render_helper_does_not_add_component(self):
        code = (
            "function List({ items }) {\n"
            "  const renderItem = (item) => <li>{item}</li>;\n"
            "  return <ul>{items.map(renderItem)}</ul>;\n"
            "}\n"
        )
        assert confirmed_kinds(code) == ["function_declaration"]


class TestThisBan:

    def test_this_bans_function_component(self):
        code = "function Foo() { const s = this.state; return <div/>; }"
        components, tree = registry_after(code)
        record = components.get(tree.find_first("function_declaration"))
        assert record.confidence == Confidence.BANNED
        assert components.all() == {}

    def test_this_in_nested_block(self):
        code = "const Foo = () => { if (x) { this.x = 1; } return <div/>; };"
        assert find_components(code) == {}

    def test_this_in_class_component_is_fine(self):
        code = (
            "class Foo extends React.Component {\n"
            "  render() { return <div>{this.props.name}</div>; }\n"
            "}\n"
        )
        assert confirmed_kinds(code) == ["class_declaration"]


# ---------------------------------------------------------------------------
# Class components
# ---------------------------------------------------------------------------

class TestClassComponents:

    def test_es6_component_with_empty_body(self):
        assert confirmed_kinds("class Foo extends React.Component {}") == ["class_declaration"]

    def test_unrelated_class_is_never_added(self):
        code = "class Foo extends Base { state = {}; render() { return <div/>; } }"
        components, _ = registry_after(code)
        assert components.list() == {}

    def test_class_field_in_component(self):
        code = "class Foo extends Component { state = {}; }"
        assert confirmed_kinds(code) == ["class_declaration"]

    def test_es5_component(self):
        code = (
            "const Foo = createReactClass({\n"
            "  handleClick: function () { this.setState({}); },\n"
            "  render: function () { return <div onClick={this.handleClick}/>; }\n"
            "});\n"
        )
        assert confirmed_kinds(code) == ["object"]

    def test_jsx_pragma_annotation(self):
        code = "/** @jsx Preact */\nclass Foo extends Preact.Component {}"
        assert confirmed_kinds(code) == ["class_declaration"]

    def test_compact_jsx_pragma_annotation(self):
        code = "/*@jsx h*/\nclass Foo extends h.Component {}\nfunction Bar() { return <div/>; }"
        assert confirmed_kinds(code) == ["class_declaration", "function_declaration"]

    def test_configured_pragma(self):
        settings = Settings(pragma="Preact")
        assert confirmed_kinds("class Foo extends Preact.Component {}", settings) == ["class_declaration"]
        assert confirmed_kinds("class Foo extends React.Component {}", settings) == []


# ---------------------------------------------------------------------------
# Wrappers
# ---------------------------------------------------------------------------

class TestWrappedComponents:

    def test_memo_of_new_component(self):
        components, tree = registry_after("const Bar = React.memo(() => <div/>);")
        call = tree.find_first("call_expression")
        assert components.get(call).confidence == Confidence.CONFIRMED
        assert components.get(tree.find_first("arrow_function")) is None

    def test_memo_of_existing_component(self):
        code = "const Foo = () => <div/>;\nconst Bar = React.memo(() => <Foo/>);"
        components, tree = registry_after(code)
        assert components.get(tree.find_first("call_expression")) is None
        assert [r.node for r in components.all().values()] == [tree.find_first("arrow_function")]

    def test_memo_with_block_body(self):
        code = "const Bar = React.memo(function Bar() { return <div/>; });"
        assert confirmed_kinds(code) == ["call_expression"]

    def test_inner_helper_arrow_does_not_confirm_wrapper(self):
        code = "const Bar = React.memo(() => { const x = () => <span/>; return 5; });"
        components, tree = registry_after(code)
        record = components.get(tree.find_first("call_expression"))
        assert record.confidence == Confidence.MAYBE
        assert components.all() == {}

    def test_nested_wrappers_register_outermost(self):
        code = "const Input = React.memo(React.forwardRef((props, ref) => <input ref={ref}/>));"
        components, tree = registry_after(code)
        outer = tree.find_first("call_expression")
        assert list(components.all()) == [outer.span]

    def test_configured_wrapper(self):
        settings = Settings.from_mapping({"componentWrapperFunctions": ["observer"]})
        code = "const Foo = observer(() => <div/>);"
        assert confirmed_kinds(code, settings) == ["call_expression"]
        assert confirmed_kinds(code) == []


# ---------------------------------------------------------------------------
# Rule composition and traversal
# ---------------------------------------------------------------------------

class TestRuleComposition:

    def test_builtin_detection_runs_first(self):
        seen = []

        def rule(context, components, utils):
            def on_return(node):
                component = utils.get_parent_component(node)
                seen.append(components.get(component).confidence)
            return {"return_statement": on_return}

        run_rule("function Foo() { return <div/>; }", rule)
        assert seen == [Confidence.CONFIRMED]

    def test_rule_only_kinds_pass_through(self):
        seen = []

        def rule(context, components, utils):
            return {"jsx_self_closing_element": lambda node: seen.append(node.text)}

        run_rule("const Foo = () => <Bar/>;", rule)
        assert seen == ["<Bar/>"]

    def test_program_exit_sees_final_registry(self):
        counts = []

        def rule(context, components, utils):
            return {"program:exit": lambda node: counts.append(components.count())}

        run_rule("function A() { return <a/>; }\nfunction B() { return <b/>; }", rule)
        assert counts == [2]

    def test_set_from_descendant(self):
        captured = {}

        def rule(context, components, utils):
            def on_member(node):
                if node.text.startswith("props."):
                    components.set(node, {"reads_props": True})

            def on_exit(node):
                captured.update(components.all())

            return {"member_expression": on_member, "program:exit": on_exit}

        run_rule("function Foo(props) { return <div>{props.name}</div>; }", rule)
        (record,) = captured.values()
        assert record.extra == {"reads_props": True}

    def test_rule_context_scope_lookup(self):
        resolved = []

        def rule(context, components, utils):
            def on_identifier(node):
                if node.text == "label" and node.parent.kind == "jsx_expression":
                    variable = context.get_scope(node).resolve("label")
                    resolved.append(variable.defs[0].node.kind)
            return {"identifier": on_identifier}

        run_rule("function Foo({ label }) { return <div>{label}</div>; }", rule)
        assert resolved == ["function_declaration"]

    def test_utils_exposed_to_rules(self):
        results = {}

        def rule(context, components, utils):
            def on_exit(node):
                results["names"] = utils.get_detected_components()
                results["memo"] = utils.is_destructured_from_pragma_import("memo")
            return {"program:exit": on_exit}

        code = "import { memo } from 'react';\nconst Foo = () => <div/>;\nclass Bar extends React.Component {}"
        run_rule(code, rule)
        assert sorted(results["names"]) == ["Bar", "Foo"]
        assert results["memo"] is True


class TestTraversal:

    def test_each_node_entered_and_left_once(self):
        tree = parse("const Foo = () => <div><span/></div>;")
        entered, left = [], []
        handlers = {}
        for node in tree.walk():
            handlers[node.kind] = lambda n: entered.append(n.index)
            handlers[f"{node.kind}:exit"] = lambda n: left.append(n.index)
        traverse(tree, handlers)
        assert entered == list(range(len(tree.nodes)))
        assert sorted(left) == entered
        assert left[-1] == 0

    def test_idempotent(self):
        code = (
            "const Foo = () => <div/>;\n"
            "function Bar() { return <Foo/>; }\n"
            "const Baz = React.memo(() => <Foo/>);\n"
            "class Qux extends React.Component {}\n"
        )
        tree = parse(code)
        first = find_components(tree)
        second = find_components(tree)
        assert list(first) == list(second)
        assert [r.confidence for r in first.values()] == [r.confidence for r in second.values()]
        assert list(find_components(code)) == list(first)
