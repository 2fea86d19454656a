"""Tests for wren.extraction: binding mappings into dataclasses."""

from dataclasses import dataclass, field

import pytest

from wren.errors import HTTPError
from wren.extraction import extract_dataclass


@dataclass(frozen=True, slots=True)
class Item:
    name: str
    price: float
    quantity: int = 1
    active: bool = True
    tags: list[str] = field(default_factory=list)


class TestExtractDataclass:
    def test_converts_field_types(self) -> None:
        item = extract_dataclass(
            Item, {"name": " Widget ", "price": "9.5", "quantity": "3", "active": "no"}
        )
        assert item == Item(name="Widget", price=9.5, quantity=3, active=False)

    def test_defaults_for_missing_fields(self) -> None:
        item = extract_dataclass(Item, {"name": "x", "price": 1})
        assert item.quantity == 1
        assert item.active is True
        assert item.tags == []

    def test_unknown_keys_ignored(self) -> None:
        item = extract_dataclass(Item, {"name": "x", "price": 1, "color": "red"})
        assert not hasattr(item, "color")

    def test_missing_required_field_is_400(self) -> None:
        with pytest.raises(HTTPError) as exc_info:
            extract_dataclass(Item, {"name": "x"})
        assert exc_info.value.status == 400
        assert "price" in exc_info.value.detail

    def test_unconvertible_value_passes_through(self) -> None:
        item = extract_dataclass(Item, {"name": "x", "price": "cheap"})
        assert item.price == "cheap"

    def test_json_bool_kept(self) -> None:
        item = extract_dataclass(Item, {"name": "x", "price": 1, "active": False})
        assert item.active is False

    def test_non_str_value_for_str_field(self) -> None:
        item = extract_dataclass(Item, {"name": 12, "price": 1})
        assert item.name == "12"

    def test_other_types_pass_through(self) -> None:
        item = extract_dataclass(Item, {"name": "x", "price": 1, "tags": ["a"]})
        assert item.tags == ["a"]

    @pytest.mark.parametrize("target", [dict, "Item", Item(name="x", price=1)])
    def test_rejects_non_dataclass(self, target: object) -> None:
        with pytest.raises(TypeError, match="dataclass"):
            extract_dataclass(target, {})  # type: ignore[arg-type]
