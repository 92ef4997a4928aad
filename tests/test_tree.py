"""Tests for collection tree lookup."""

from types import SimpleNamespace

from xrayjunit.models import Collection
from xrayjunit.tree import find_item_by_id, get_children, get_field, get_members


class TestFieldAccess:
    """Tests for reading fields off mappings and objects."""

    def test_mapping_and_attribute(self) -> None:
        """Test both dict keys and attributes are read."""
        assert get_field({"id": "a"}, "id") == "a"
        assert get_field(SimpleNamespace(id="b"), "id") == "b"

    def test_none_values_use_default(self) -> None:
        """Test a present-but-None field falls back to the default."""
        assert get_field({"name": None}, "name", "x") == "x"
        assert get_field(None, "name", "y") == "y"

    def test_members_container(self) -> None:
        """Test lists and members containers both yield their entries."""
        assert get_members([1, 2]) == [1, 2]
        assert get_members({"members": [3]}) == [3]
        assert get_members(SimpleNamespace(members=(4, 5))) == [4, 5]
        assert get_members({"other": []}) == []
        assert get_members(None) == []

    def test_children_prefer_item_list(self) -> None:
        """Test a non-empty item list is used before items.members."""
        node = {"item": [{"id": "a"}], "items": {"members": [{"id": "b"}]}}
        assert get_children(node) == [{"id": "a"}]
        assert get_children({"item": [], "items": {"members": [{"id": "b"}]}}) == [{"id": "b"}]


class TestFindItemById:
    """Tests for depth-first item lookup."""

    def test_finds_nested_item_in_raw_json(self) -> None:
        """Test lookup descends into folders of a raw collection."""
        root = {
            "item": [
                {"id": "f1", "item": [{"id": "f2", "item": [{"id": "deep"}]}]},
                {"id": "top"},
            ]
        }
        assert find_item_by_id(root, "deep") == {"id": "deep"}
        assert find_item_by_id(root, "top") == {"id": "top"}

    def test_finds_item_in_members_shape(self) -> None:
        """Test lookup through items.members containers."""
        target = SimpleNamespace(id="req", items=None)
        root = SimpleNamespace(
            id="col", items=SimpleNamespace(members=[SimpleNamespace(id="f", items=[target])])
        )
        assert find_item_by_id(root, "req") is target

    def test_depth_first_order(self) -> None:
        """Test the first match in depth-first, array order wins on duplicate ids."""
        first = {"id": "dup", "name": "first"}
        second = {"id": "dup", "name": "second"}
        root = {"item": [{"id": "f", "item": [first]}, second]}
        assert find_item_by_id(root, "dup") is first

    def test_root_can_match(self) -> None:
        """Test the root node itself is a candidate."""
        root = {"id": "col", "item": []}
        assert find_item_by_id(root, "col") is root

    def test_missing_inputs(self) -> None:
        """Test empty roots, missing ids and unknown ids return None."""
        assert find_item_by_id(None, "x") is None
        assert find_item_by_id({}, "x") is None
        assert find_item_by_id({"item": [{"id": "a"}]}, None) is None
        assert find_item_by_id({"item": [{"id": "a"}]}, "b") is None

    def test_model_tree(self) -> None:
        """Test lookup over the parsed dataclass tree."""
        collection = Collection.from_dict(
            {"item": [{"id": "f", "name": "F", "item": [{"id": "r", "name": "R"}]}]}
        )
        found = find_item_by_id(collection, "r")
        assert found.name == "R"
        assert found.parent.name == "F"
