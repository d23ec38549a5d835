import types

import pytest

from ccode import (
    CodeSyntaxError,
    CodeUtils,
    ErrorKind,
    NamespaceResolver,
    RecursiveStructureError,
    ScriptError,
    ScriptFunction,
)
from ccode.printer.seen import SeenSet
from ccode.reader.nodes import Node


@pytest.fixture
def world():
    return types.SimpleNamespace(
        settings=types.SimpleNamespace(theme="dark"),
        symbols={},
    )


@pytest.fixture
def utils(world):
    return CodeUtils(resolver=NamespaceResolver(world))


def test_to_source_with_selectors(utils, world):
    assert utils.to_source([world.settings, "x"]) == '[$.settings, "x"]'
    assert utils.to_source(ScriptError(world.symbols, ErrorKind.RANGE)) == "RangeError($.symbols)"


def test_to_source_safe(utils):
    assert utils.to_source_safe({"unreachable": True}) == "[object with no known selector]"
    assert utils.to_source_safe(1.5) == "1.5"


def test_to_source_with_seen(utils):
    value = [1]
    with pytest.raises(RecursiveStructureError):
        utils.to_source(value, seen=SeenSet((value,)))


def test_source_retriever_is_used():
    utils = CodeUtils(source_of=lambda fn: "function native() {}")
    assert utils.to_source(len) == "function native() {}"
    assert utils.to_source(ScriptFunction("function f() {}")) == "function native() {}"


def test_parse(utils):
    program = utils.parse("var a = 1; a + 1;")
    assert [s.type for s in program.body] == ["VariableDeclaration", "ExpressionStatement"]
    assert utils.parse_expression_at("a + 1; b").end == 5
    assert utils.parse_expression_at("x = a + 1", 4).type == "BinaryExpression"


def test_rewrite_for_eval(utils):
    assert utils.rewrite_for_eval("{a: 1}") == "({a: 1}\n)"
    assert utils.rewrite_for_eval("{a: 1};", force_expression=True) == "({a: 1})"
    with pytest.raises(CodeSyntaxError):
        utils.rewrite_for_eval("1; 2", force_expression=True)


class FixedParser:
    def parse_program(self, text):
        return Node("Program", 0, len(text), body=[Node("BlockStatement", 0, len(text), body=[])])

    def parse_expression_at(self, text, offset):
        raise AssertionError("not reached")


def test_custom_parser():
    utils = CodeUtils(parser=FixedParser())
    assert utils.rewrite_for_eval("anything") == "({})"
    assert utils.parse("anything").body[0].type == "BlockStatement"


def test_value_parameters_use_the_package_alias():
    import ccode

    assert "ScriptValue" in ccode.__all__
    assert ccode.SourceSerializer.to_source.__annotations__["value"] == "ScriptValue"
    assert NamespaceResolver.get_selector.__annotations__["value"] == "ScriptValue"
    assert CodeUtils.to_source.__annotations__["value"] == "ScriptValue"
