import types

import pytest

from ccode.selector import NamespaceResolver, NullResolver, member_selector, members


@pytest.mark.parametrize(
    "base,key,expected",
    [
        ("$", "a", "$.a"),
        ("$", "$b_1", "$.$b_1"),
        ("$", 3, "$[3]"),
        ("$", "a b", '$["a b"]'),
        ("$", "1x", '$["1x"]'),
        ("$.x", 'say "hi"', '$.x["say \\"hi\\""]'),
    ]
)
def test_member_selector(base, key, expected):
    assert member_selector(base, key) == expected


def test_members():
    assert members({"a": 1, 2: "skipped"}) == [("a", 1)]
    assert members(["x", "y"]) == [(0, "x"), (1, "y")]
    ns = types.SimpleNamespace(visible=1, _hidden=2)
    assert members(ns) == [("visible", 1)]
    assert members(types) == []
    assert members(len) == []


def test_null_resolver():
    assert NullResolver().get_selector(object()) is None


def test_resolves_paths():
    ann, item = object(), object()
    root = {"users": {"ann": ann}, "list": [None, item]}
    resolver = NamespaceResolver(root)
    assert resolver.get_selector(root) == "$"
    assert resolver.get_selector(ann) == "$.users.ann"
    assert resolver.get_selector(item) == "$.list[1]"
    assert resolver.get_selector(object()) is None


def test_attributes_and_quoted_keys():
    target = object()
    root = types.SimpleNamespace(config={"odd key": target}, _private=object())
    resolver = NamespaceResolver(root, root_name="world")
    assert resolver.get_selector(target) == 'world.config["odd key"]'
    assert resolver.get_selector(root._private) is None


def test_shortest_path_wins():
    target = object()
    root = {"a": {"b": {"c": target}}, "z": target}
    assert NamespaceResolver(root).get_selector(target) == "$.z"


def test_max_depth():
    target = object()
    root = {"a": {"b": target}}
    assert NamespaceResolver(root, max_depth=1).get_selector(target) is None
    assert NamespaceResolver(root, max_depth=2).get_selector(target) == "$.a.b"


def test_cyclic_namespace_terminates():
    root = {}
    root["self"] = root
    root["list"] = [root]
    assert NamespaceResolver(root).get_selector(object()) is None


def test_bindings():
    target = object()
    resolver = NamespaceResolver({"a": target})
    resolver.bind("$.pinned", target)
    assert resolver.get_selector(target) == "$.pinned"
    resolver.unbind(target)
    assert resolver.get_selector(target) == "$.a"
    resolver.unbind(target)


def test_bindings_without_root(resolver):
    target = object()
    assert resolver.get_selector(target) is None
    resolver.bind("$.t", target)
    assert resolver.get_selector(target) == "$.t"
