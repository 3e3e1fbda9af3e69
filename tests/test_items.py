"""条目抽象: itemdata / setdata 与具体条目类型。"""

from __future__ import annotations

import pytest
import torch

from augkit import (
    ArrayItem,
    Image,
    Keypoints,
    UnsupportedOperationError,
    itemdata,
    setdata,
)
from conftest import PlainBox, Token


class TestItemdata:
    def test_single_item(self, token: Token) -> None:
        assert itemdata(token) == 1

    def test_tuple_preserves_order_and_arity(self) -> None:
        items = (Token("a"), Token("b"), Token("c"))
        assert itemdata(items) == ("a", "b", "c")

    def test_empty_tuple(self) -> None:
        assert itemdata(()) == ()

    def test_item_without_data_field(self) -> None:
        with pytest.raises(UnsupportedOperationError):
            itemdata(PlainBox(3))

    def test_non_item_rejected(self) -> None:
        with pytest.raises(UnsupportedOperationError):
            itemdata(3)


class TestSetdata:
    def test_round_trip(self, token: Token) -> None:
        assert itemdata(setdata(token, "new")) == "new"

    def test_other_fields_unchanged(self, token: Token) -> None:
        updated = setdata(token, 99)
        assert updated.tag == "sample-7"
        assert updated == Token(99, tag="sample-7")

    def test_original_not_mutated(self, token: Token) -> None:
        setdata(token, 99)
        assert token.data == 1

    def test_returns_same_kind(self, keypoints: Keypoints) -> None:
        updated = setdata(keypoints, torch.zeros(1, 2))
        assert type(updated) is Keypoints
        assert updated.bounds == (4, 6)

    def test_unsupported_without_data_field(self) -> None:
        with pytest.raises(UnsupportedOperationError, match="PlainBox"):
            setdata(PlainBox(3), 4)

    def test_unsupported_error_is_not_implemented(self) -> None:
        with pytest.raises(NotImplementedError):
            PlainBox(3).setdata(4)


class TestConcreteItems:
    def test_array_item_requires_tensor(self) -> None:
        with pytest.raises(AssertionError):
            ArrayItem([1, 2, 3])

    def test_image_size(self, image: Image) -> None:
        assert image.size == (4, 6)

    def test_image_requires_chw(self) -> None:
        with pytest.raises(AssertionError):
            Image(torch.zeros(4, 6))

    def test_image_requires_float(self) -> None:
        with pytest.raises(AssertionError):
            Image(torch.zeros(3, 4, 6, dtype=torch.uint8))

    def test_image_is_array_item(self, image: Image) -> None:
        assert isinstance(image, ArrayItem)

    def test_keypoints_shape_checked(self) -> None:
        with pytest.raises(AssertionError):
            Keypoints(torch.zeros(3, 3), bounds=(4, 4))

    def test_keypoints_cast_to_float(self) -> None:
        kp = Keypoints(torch.tensor([[1, 2]]), bounds=[4, 4])
        assert kp.data.is_floating_point()
        assert kp.bounds == (4, 4)

    def test_items_are_frozen(self, image: Image) -> None:
        with pytest.raises(AttributeError):
            image.data = torch.zeros(3, 2, 2)
