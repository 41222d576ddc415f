"""Tests for the slash-path option tree."""

from __future__ import annotations

import json

import pytest

from chartbind.options.tree import ConfigNode, ConfigurationError, OptionPath


def test_path_parsing_is_purely_syntactic():
    assert OptionPath.parse("/dataLabels/style/fontWeight").segments == (
        "dataLabels",
        "style",
        "fontWeight",
    )
    assert OptionPath.parse("linearGradient").segments == ("linearGradient",)
    # empty segments are dropped; any text is a legal segment
    assert OptionPath.parse("//a//b/").segments == ("a", "b")
    assert OptionPath.parse("/not a real option/ä").segments == ("not a real option", "ä")
    assert str(OptionPath.parse("a/b")) == "/a/b"


@pytest.mark.parametrize("raw", ["", "/", "///"])
def test_path_without_segments_rejected(raw):
    with pytest.raises(ConfigurationError):
        OptionPath.parse(raw)


@pytest.mark.parametrize(
    "path, value",
    [
        ("/chart/type", "line"),
        ("/chart/animation/duration", 500),
        ("/chart/width", 12.5),
        ("/legend/enabled", False),
        ("/title/text", None),
        ("colors", ["#FF0000", "#00FF00"]),
        ("/chart/margin", [10, 20, 10, 20]),
    ],
)
def test_set_then_get_round_trip(path, value):
    node = ConfigNode()
    node.set(path, value)
    assert node.get(path) == value
    assert node.has(path)


def test_container_values_round_trip():
    node = ConfigNode().set("/plotOptions/series", {"marker": {"enabled": False}})
    assert node.get("/plotOptions/series") == {"marker": {"enabled": False}}
    assert isinstance(node.get("/plotOptions/series"), ConfigNode)
    assert node.get("/plotOptions/series/marker/enabled") is False


def test_independent_paths_do_not_interfere():
    node = ConfigNode()
    node.set("/xAxis/min", 0).set("/yAxis/max", 100)
    assert node.get("/xAxis/min") == 0
    assert node.get("/yAxis/max") == 100
    assert node.to_dict() == {"xAxis": {"min": 0}, "yAxis": {"max": 100}}


def test_sibling_writes_share_intermediate_container():
    node = ConfigNode()
    node.set("/dataLabels/style/fontWeight", "bold")
    node.set("/dataLabels/color", "#CC0000")
    data_labels = node["dataLabels"]
    assert isinstance(data_labels, ConfigNode)
    assert data_labels.to_dict() == {"style": {"fontWeight": "bold"}, "color": "#CC0000"}


def test_terminal_value_replaced_wholesale():
    node = ConfigNode()
    node.set("/tooltip/style", {"color": "#000", "fontSize": "9px"})
    node.set("/tooltip/style", {"color": "#FFF"})
    assert node.get("/tooltip/style") == {"color": "#FFF"}


def test_descending_through_scalar_raises_and_leaves_tree_unchanged():
    node = ConfigNode().set("/a", 1)
    before = node.to_dict()
    with pytest.raises(ConfigurationError):
        node.set("/a/b", 2)
    with pytest.raises(ConfigurationError):
        node.set("/a/b/c/d", 2)
    assert node.to_dict() == before


def test_descending_through_null_or_sequence_raises():
    node = ConfigNode().set("/title", None).set("/stops", [[0, "#FFF"]])
    with pytest.raises(ConfigurationError):
        node.set("/title/text", "x")
    with pytest.raises(ConfigurationError):
        node.set("/stops/0", "x")


def test_scalar_may_replace_container_at_exact_path():
    node = ConfigNode().set("/a/b", 1)
    node.set("/a", "flat")
    assert node.get("/a") == "flat"
    assert not node.has("/a/b")


def test_null_is_distinct_from_absence():
    node = ConfigNode().set("/title/text", None)
    assert node.has("/title/text")
    assert not node.has("/title/align")
    assert node.get("/title/align", "missing") == "missing"
    assert "/title/text" in node
    assert node.to_dict() == {"title": {"text": None}}


def test_getitem_raises_key_error_for_missing_path():
    node = ConfigNode().set("/a/b", 1)
    assert node["/a/b"] == 1
    with pytest.raises(KeyError):
        node["/a/c"]


def test_unsupported_value_type_rejected():
    with pytest.raises(ConfigurationError):
        ConfigNode().set("/when", object())


def test_keys_containing_delimiter_rejected():
    with pytest.raises(ConfigurationError):
        ConfigNode({"a/b": 1})


def test_insertion_order_preserved_in_serialization():
    node = ConfigNode()
    node.set("zeta", 1).set("alpha", 2).set("/mid/x", 3)
    assert list(node) == ["zeta", "alpha", "mid"]
    assert node.to_json() == '{"zeta":1,"alpha":2,"mid":{"x":3}}'
    assert json.loads(node.to_json()) == node.to_dict()


def test_copy_is_deep():
    node = ConfigNode().set("/a/b", [1, {"c": 2}])
    clone = node.copy()
    node.set("/a/b", "changed")
    assert clone.get("/a/b") == [1, {"c": 2}]
    clone.get("/a/b")[1].set("c", 3)
    assert node.get("/a/b") == "changed"


def test_equality_against_plain_mapping():
    node = ConfigNode({"a": {"b": [1, 2]}})
    assert node == {"a": {"b": [1, 2]}}
    assert node != {"a": {"b": [1]}}
    assert node == ConfigNode({"a": {"b": [1, 2]}})


def test_append_creates_then_extends_sequence():
    node = ConfigNode()
    node.append("/series/data", 1).append("/series/data", {"y": 2})
    assert node.to_dict() == {"series": {"data": [1, {"y": 2}]}}
    assert isinstance(node["/series/data"][1], ConfigNode)


def test_append_to_non_sequence_raises_and_leaves_tree_unchanged():
    node = ConfigNode().set("/a", 1).set("/b/c", 2)
    for path in ("/a", "/b"):
        with pytest.raises(ConfigurationError):
            node.append(path, 3)
    with pytest.raises(ConfigurationError):
        node.append("/a/x", 3)
    assert node.to_dict() == {"a": 1, "b": {"c": 2}}
