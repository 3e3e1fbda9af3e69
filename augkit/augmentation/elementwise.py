#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Created on 2025-11-15 11:12:45
@author  : William_Trouvaille
@function: 逐元素变换MapElem，以及两个MapElem组合时的融合规则
"""

from __future__ import annotations

from typing import Any, Callable, Dict

import torch
from loguru import logger

from .base import Item, Transform
from .items import ArrayItem
from .sequence import register_compose_rule

TensorFn = Callable[[torch.Tensor], torch.Tensor]


class _Composed:
    """可比较的函数复合 ``outer(inner(x))``。"""

    def __init__(self, inner: TensorFn, outer: TensorFn) -> None:
        self.inner = inner
        self.outer = outer

    def __call__(self, x: torch.Tensor) -> torch.Tensor:
        return self.outer(self.inner(x))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Composed):
            return NotImplemented
        return self.inner == other.inner and self.outer == other.outer

    def __hash__(self) -> int:
        return hash((self.inner, self.outer))

    def __repr__(self) -> str:
        return f"{self.outer!r} ∘ {self.inner!r}"


class MapElem(Transform):
    """对 ArrayItem（含Image）的载荷逐元素应用 ``fn``，确定性变换。

    ``fn`` 接收并返回 torch.Tensor，应当是逐元素运算（不改变形状）。
    ``MapElem(f) >> MapElem(g)`` 会融合为 ``MapElem(g ∘ f)``。
    """

    def __init__(self, fn: TensorFn) -> None:
        super().__init__(seed=None)
        assert callable(fn), "MapElem需要可调用对象"
        self.fn = fn
        self.register_config(fn=fn)

    def apply_item(self, item: Item, randstate: Any = None) -> Item:
        if not isinstance(item, ArrayItem):
            raise self.unsupported(item)
        return item.setdata(self.fn(item.data))

    def to_config(self) -> Dict[str, Any]:
        raise TypeError("MapElem包含任意函数，无法导出为配置")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MapElem):
            return NotImplemented
        return self.fn == other.fn

    def __hash__(self) -> int:
        return hash((MapElem, self.fn))


@register_compose_rule(MapElem, MapElem)
def _fuse_map_elems(first: MapElem, second: MapElem) -> MapElem:
    logger.debug(f"融合MapElem: {first.fn!r} -> {second.fn!r}")
    return MapElem(_Composed(first.fn, second.fn))
