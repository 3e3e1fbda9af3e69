"""apply分发: 随机状态的生成、广播与确定性。"""

from __future__ import annotations

from typing import Any, Tuple

import pytest
import torch

from augkit import (
    ArityMismatchError,
    Identity,
    Transform,
    apply,
    get_random_state,
    isolate_rng,
)
from conftest import AddConst, RandomOffset, StampState, Token


class TestRandomState:
    def test_deterministic_transform_has_no_state(self) -> None:
        assert get_random_state(AddConst(1)) is None

    def test_stochastic_states_differ(self) -> None:
        tfm = StampState()
        states = {get_random_state(tfm) for _ in range(5)}
        assert len(states) > 1

    def test_seeded_transform_fixed_state(self) -> None:
        tfm = StampState(seed=123)
        assert get_random_state(tfm) == get_random_state(tfm)

    def test_seeded_sampling_leaves_global_rng(self) -> None:
        tfm = StampState(seed=123)
        torch.manual_seed(0)
        expected = torch.rand(1)
        torch.manual_seed(0)
        get_random_state(tfm)
        assert torch.equal(torch.rand(1), expected)

    def test_sampling_does_not_mutate_transform(self) -> None:
        tfm = AddConst(5)
        before = dict(vars(tfm))
        get_random_state(tfm)
        assert vars(tfm) == before


class TestApplyDispatch:
    def test_explicit_state(self, token: Token) -> None:
        assert apply(RandomOffset(), token, 10) == Token(11, tag="sample-7")

    def test_same_explicit_state_same_output(self, token: Token) -> None:
        tfm = RandomOffset()
        assert apply(tfm, token, 42) == apply(tfm, token, 42)

    def test_deterministic_transform_repeatable(self, token: Token) -> None:
        tfm = AddConst(3)
        assert apply(tfm, token) == apply(tfm, token)

    def test_omitted_state_matches_two_step_call(self, token: Token) -> None:
        tfm = RandomOffset()
        with isolate_rng():
            torch.manual_seed(7)
            implicit = apply(tfm, token)
        with isolate_rng():
            torch.manual_seed(7)
            explicit = apply(tfm, token, get_random_state(tfm))
        assert implicit == explicit

    def test_call_is_apply(self, token: Token) -> None:
        assert AddConst(2)(token) == apply(AddConst(2), token)
        assert RandomOffset()(token, 5) == Token(6, tag="sample-7")

    def test_none_is_a_valid_explicit_state(self, token: Token) -> None:
        assert apply(AddConst(1), token, None).data == 2


class TestTupleBroadcast:
    def test_shared_random_state(self) -> None:
        a, b = apply(StampState(), (Token("a"), Token("b")))
        assert a.data[0] == "a" and b.data[0] == "b"
        assert a.data[1] == b.data[1]

    def test_arity_preserved(self) -> None:
        items = tuple(Token(i) for i in range(4))
        out = apply(AddConst(1), items)
        assert isinstance(out, tuple)
        assert [t.data for t in out] == [1, 2, 3, 4]

    def test_empty_tuple(self) -> None:
        assert apply(StampState(), ()) == ()

    def test_heterogeneous_kinds(self, token: Token) -> None:
        out = apply(StampState(), (token, Token(2.5, tag="other")))
        assert out[0].tag == "sample-7" and out[1].tag == "other"
        assert out[0].data[1] == out[1].data[1]

    def test_bad_tuple_override_raises_arity_mismatch(self) -> None:
        class DropLast(Transform):
            def apply_item(self, item: Any, randstate: Any = None) -> Any:
                return item

            def apply_tuple(self, items: Tuple[Any, ...], randstate: Any) -> Tuple[Any, ...]:
                return items[:-1]

        with pytest.raises(ArityMismatchError):
            apply(DropLast(), (Token(1), Token(2)))

    def test_custom_tuple_override_allowed(self) -> None:
        class PerSlotOffset(Transform):
            def sample_random_state(self) -> int:
                return 100

            def apply_item(self, item: Any, randstate: int) -> Any:
                return item.setdata(item.data + randstate)

            def apply_tuple(self, items: Tuple[Any, ...], randstate: int) -> Tuple[Any, ...]:
                return tuple(self.apply_item(item, randstate + i) for i, item in enumerate(items))

        out = apply(PerSlotOffset(), (Token(0), Token(0)))
        assert [t.data for t in out] == [100, 101]


class TestIdentity:
    def test_returns_input_object(self, token: Token) -> None:
        assert apply(Identity(), token) is token

    def test_tuple_returned_unchanged(self) -> None:
        items = (Token(1), Token(2))
        assert apply(Identity(), items) is items

    def test_state_is_none(self) -> None:
        assert get_random_state(Identity()) is None

    def test_identities_equal(self) -> None:
        assert Identity() == Identity()
        assert hash(Identity()) == hash(Identity())


def test_transform_is_abstract() -> None:
    with pytest.raises(TypeError):
        Transform()
