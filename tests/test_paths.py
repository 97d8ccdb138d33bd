"""Tests for path expression parsing, reading and writing."""

from dataclasses import dataclass

import pytest

from ruleknobs.exceptions import UnresolvablePathError
from ruleknobs.paths import FieldPath, read_path, write_path


@dataclass
class Address:
    city: str
    zip: str | None = None


@dataclass
class Person:
    name: str
    address: Address
    tags: list


class TestParse:
    """Test FieldPath.parse."""

    @pytest.mark.parametrize(
        "expression,segments",
        [
            ("email", ("email",)),
            ("address.city", ("address", "city")),
            ("items[0].name", ("items", 0, "name")),
            ("matrix[1][2]", ("matrix", 1, 2)),
            ("meta['content-type']", ("meta", "content-type")),
            ('meta["a b"].c', ("meta", "a b", "c")),
            ("[3]", (3,)),
            ("$scope._private", ("$scope", "_private")),
        ],
    )
    def test_valid_expressions(self, expression, segments):
        path = FieldPath.parse(expression)
        assert path.segments == segments
        assert str(path) == expression

    @pytest.mark.parametrize(
        "expression",
        ["", "a..b", "a.", ".a", "a || b", "items[-1]", "items[x]", "a.b()", "1abc", "a b"],
    )
    def test_invalid_expressions(self, expression):
        with pytest.raises(UnresolvablePathError) as exc_info:
            FieldPath.parse(expression)
        assert exc_info.value.expression == expression

    def test_non_string_expression(self):
        with pytest.raises(UnresolvablePathError):
            FieldPath.parse(None)  # type: ignore[arg-type]

    def test_flat_path(self):
        path = FieldPath.flat("a || b")
        assert path.segments == ("a || b",)
        assert path.read({"a || b": 1}) == 1


class TestRead:
    """Test reading values."""

    def test_nested_dicts_and_lists(self):
        data = {"items": [{"name": "first"}, {"name": "second"}], "a": {"b": {"c": 0}}}

        assert read_path("items[1].name", data) == "second"
        assert read_path("a.b.c", data) == 0
        assert read_path("items[0]", data) == {"name": "first"}

    def test_missing_data_reads_as_none(self):
        data = {"items": [], "a": {"b": None}, "n": 5}

        assert read_path("missing", data) is None
        assert read_path("items[3].name", data) is None
        assert read_path("a.b.c", data) is None
        assert read_path("n.value", data) is None
        assert read_path("a.b", None) is None

    def test_falsy_values_are_kept(self):
        data = {"flag": False, "count": 0, "text": ""}

        assert read_path("flag", data) is False
        assert read_path("count", data) == 0
        assert read_path("text", data) == ""

    def test_objects_by_attribute(self):
        person = Person("Ada", Address("London"), ["x", "y"])

        assert read_path("name", person) == "Ada"
        assert read_path("address.city", person) == "London"
        assert read_path("address.zip", person) is None
        assert read_path("address.country", person) is None
        assert read_path("tags[1]", person) == "y"

    def test_index_on_mapping_uses_string_key(self):
        assert read_path("rows[0]", {"rows": {"0": "zero"}}) == "zero"

    def test_index_on_string_is_missing(self):
        assert read_path("name[0]", {"name": "Ada"}) is None

    def test_key_on_sequence_is_missing(self):
        data = {"tags": ["a"], "pair": ("x", "y")}

        assert read_path("tags.count", data) is None
        assert read_path("tags.index", data) is None
        assert read_path("pair.count", data) is None

    def test_private_attributes_are_missing(self):
        person = Person("Ada", Address("London"), [])

        assert read_path("__class__", person) is None
        assert read_path("address.__dict__", person) is None
        assert read_path("name._private", person) is None

    def test_underscore_keys_read_from_mappings(self):
        assert read_path("meta._id", {"meta": {"_id": 7}}) == 7


class TestWrite:
    """Test writing values."""

    def test_creates_nested_dicts(self):
        tree = {}
        write_path("a.b.c", tree, "value")
        assert tree == {"a": {"b": {"c": "value"}}}

    def test_creates_padded_lists(self):
        tree = {}
        write_path("items[2].name", tree, "x")
        assert tree == {"items": [None, None, {"name": "x"}]}

    def test_writes_into_existing_containers(self):
        tree = {"a": {"keep": 1}, "items": [{"name": "first"}]}
        write_path("a.new", tree, 2)
        write_path("items[0].size", tree, 3)

        assert tree == {"a": {"keep": 1, "new": 2}, "items": [{"name": "first", "size": 3}]}

    def test_round_trip_returns_same_object(self):
        tree = {}
        marker = object()
        write_path("a.b.c", tree, marker)
        assert read_path("a.b.c", tree) is marker

    def test_non_container_intermediate_raises(self):
        tree = {"a": "leaf"}
        with pytest.raises(UnresolvablePathError) as exc_info:
            write_path("a.b", tree, 1)
        assert tree == {"a": "leaf"}
        assert "not a container" in exc_info.value.reason

    def test_key_into_list_raises(self):
        tree = {"items": []}
        with pytest.raises(UnresolvablePathError):
            write_path("items.name", tree, 1)

    def test_non_container_root_raises(self):
        with pytest.raises(UnresolvablePathError):
            FieldPath.parse("a").write("text", 1)
