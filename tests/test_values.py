"""Tests for formcheck.values — value shapes and input normalization."""

from formcheck._internal.multimap import MultiValueMapping
from formcheck.values import (
    as_field_list,
    coerce_value,
    empty_like,
    is_blank,
    map_scalars,
    normalize_form,
)


class TestNormalizeForm:
    def test_plain_mapping(self) -> None:
        form = normalize_form({"a": 1, "b": None, "c": ("x", "y"), "d": "text"})
        assert form == {"a": "1", "b": "", "c": ["x", "y"], "d": "text"}

    def test_nested_lists(self) -> None:
        assert normalize_form({"grid": [[1, 2], ["3"]]}) == {"grid": [["1", "2"], ["3"]]}

    def test_unusable_input(self) -> None:
        assert normalize_form(None) == {}
        assert normalize_form("name=ann") == {}
        assert normalize_form(["a", "b"]) == {}

    def test_copy_not_alias(self) -> None:
        raw = {"tags": ["a"]}
        form = normalize_form(raw)
        form["tags"].append("b")
        assert raw == {"tags": ["a"]}

    def test_multi_value_mapping(self, multi_dict) -> None:
        data = multi_dict({"tags[]": ["a"], "name": ["ann"], "color": ["red", "blue"]})
        assert isinstance(data, MultiValueMapping)
        assert normalize_form(data) == {"tags": ["a"], "name": "ann", "color": ["red", "blue"]}

    def test_plain_dict_is_not_multi_value(self) -> None:
        assert not isinstance({}, MultiValueMapping)


class TestHelpers:
    def test_coerce_bytes(self) -> None:
        assert coerce_value("héllo".encode()) == "héllo"

    def test_is_blank(self) -> None:
        assert is_blank("")
        assert is_blank(None)
        assert not is_blank("0")
        assert not is_blank([])

    def test_empty_like(self) -> None:
        assert empty_like(["a"]) == []
        assert empty_like("a") == ""
        assert empty_like(None) == ""

    def test_map_scalars(self) -> None:
        assert map_scalars([" a", [" b "]], str.strip) == ["a", ["b"]]
        assert map_scalars(" c ", str.strip) == "c"

    def test_as_field_list(self) -> None:
        assert as_field_list("name") == ["name"]
        assert as_field_list(("a", "b")) == ["a", "b"]
