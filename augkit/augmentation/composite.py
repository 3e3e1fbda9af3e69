#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Created on 2025-11-10 09:52:49
@author  : William_Trouvaille
@function: 组合类随机变换：按概率执行(RandomApply)与多选一(OneOf)
@detail:
    两者都把整个条目元组交给内部变换处理(重载apply_tuple)，
    使内部变换自身的元组语义（例如Sequence的逐步折叠）保持不变。
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

import torch
from loguru import logger

from .base import Item, Transform, validate_probability
from .errors import ArityMismatchError


def _unpack_pair(transform: Transform, randstate: Any) -> Tuple[Any, Any]:
    if not isinstance(randstate, (tuple, list)) or len(randstate) != 2:
        raise ArityMismatchError(f"{transform.__class__.__name__}的随机状态应为二元组", transform=transform)
    return randstate[0], randstate[1]


# ========================================================================
# 1. 概率封装
# ========================================================================

class RandomApply(Transform):
    """以固定概率执行内部变换。

    随机状态为 ``(applied, inner_state)``，未触发时 inner_state 为None。
    """

    def __init__(self, transform: Transform, p: float = 0.5, seed: int | None = None) -> None:
        super().__init__(seed=seed)
        validate_probability(p)
        assert isinstance(transform, Transform), "RandomApply需要包裹Transform"
        self.transform = transform
        self.p = float(p)
        self.register_config(p=p)

    def sample_random_state(self) -> Tuple[bool, Any]:
        applied = bool(torch.rand(1).item() < self.p)
        inner = self.transform.get_random_state() if applied else None
        return applied, inner

    def _delegate(self, items: Any, randstate: Any) -> Any:
        applied, inner = _unpack_pair(self, randstate)
        if not applied:
            logger.debug(f"跳过当前变换 {self.transform.__class__.__name__}")
            return items
        return self.transform.apply(items, inner)

    def apply_item(self, item: Item, randstate: Any) -> Item:
        return self._delegate(item, randstate)

    def apply_tuple(self, items: Tuple[Any, ...], randstate: Any) -> Tuple[Any, ...]:
        return self._delegate(items, randstate)

    def to_config(self) -> Dict[str, Any]:
        config = super().to_config()
        config["transform"] = self.transform.to_config()
        return config

    def extra_repr(self) -> str:
        return f"{self.transform!r}, {super().extra_repr()}"


# ========================================================================
# 2. 多选一
# ========================================================================

class OneOf(Transform):
    """按权重随机挑选一个子变换执行。

    随机状态为 ``(index, inner_state)``，只为被选中的子变换生成状态。
    """

    def __init__(
        self,
        transforms: Sequence[Transform],
        weights: Sequence[float] | None = None,
        seed: int | None = None,
    ) -> None:
        super().__init__(seed=seed)
        self.transforms: Tuple[Transform, ...] = tuple(transforms)
        assert len(self.transforms) > 0, "OneOf至少需要一个子变换"
        assert all(isinstance(t, Transform) for t in self.transforms), "OneOf只接受Transform"
        if weights is None:
            weights = [1.0] * len(self.transforms)
        assert len(weights) == len(self.transforms), "weights数量必须与子变换一致"
        assert all(w >= 0 for w in weights) and sum(weights) > 0, "weights必须非负且不全为0"
        self.weights: List[float] = [float(w) for w in weights]
        self.register_config(weights=self.weights)

    def sample_random_state(self) -> Tuple[int, Any]:
        index = int(torch.multinomial(torch.tensor(self.weights), 1).item())
        return index, self.transforms[index].get_random_state()

    def _delegate(self, items: Any, randstate: Any) -> Any:
        index, inner = _unpack_pair(self, randstate)
        if not 0 <= index < len(self.transforms):
            raise ArityMismatchError(f"OneOf随机状态中的下标越界: {index}", transform=self)
        return self.transforms[index].apply(items, inner)

    def apply_item(self, item: Item, randstate: Any) -> Item:
        return self._delegate(item, randstate)

    def apply_tuple(self, items: Tuple[Any, ...], randstate: Any) -> Tuple[Any, ...]:
        return self._delegate(items, randstate)

    def to_config(self) -> Dict[str, Any]:
        config = super().to_config()
        config["transforms"] = [t.to_config() for t in self.transforms]
        return config

    def extra_repr(self) -> str:
        children = ", ".join(repr(t) for t in self.transforms)
        return f"[{children}], {super().extra_repr()}"
