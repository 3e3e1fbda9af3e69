#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Created on 2025-11-14 14:03:52
@author  : William_Trouvaille
@function: 恒等变换、顺序变换(Sequence)与compose组合代数
@detail:
    compose 化简规则:
        - compose(Identity, T) == compose(T, Identity) == T
        - compose(Sequence(a, b), c) == Sequence(a, b, c)，不产生嵌套
        - 通过 register_compose_rule 注册的同类融合规则优先于默认的 Sequence 构造
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Sequence as SequenceType, Tuple, Type

from loguru import logger

from .base import Item, Transform
from .errors import (
    ArityMismatchError,
    AugmentationError,
    ShapeMismatchError,
    TransformApplyError,
)


# ========================================================================
# 1. 恒等变换
# ========================================================================

class Identity(Transform):
    """恒等变换，原样返回输入，是compose的单位元。"""

    def __init__(self) -> None:
        super().__init__(seed=None)

    def get_random_state(self) -> None:
        return None

    def apply_item(self, item: Item, randstate: Any = None) -> Item:
        return item

    def apply_tuple(self, items: Tuple[Any, ...], randstate: Any = None) -> Tuple[Any, ...]:
        return items

    def to_config(self) -> Dict[str, Any]:
        return {"class": "Identity", "params": {}}

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Identity)

    def __hash__(self) -> int:
        return hash(Identity)


# ========================================================================
# 2. 顺序变换
# ========================================================================

class Sequence(Transform):
    """依次执行多个子变换，每个子变换消费随机状态中对应位置的一项。

    一般不直接构造，请使用 :func:`compose` 或 ``>>``。
    """

    def __init__(self, *transforms: Transform) -> None:
        super().__init__(seed=None)
        for tfm in transforms:
            if not isinstance(tfm, Transform):
                raise TypeError(f"Sequence只接受Transform，收到 {type(tfm).__name__}")
        self._transforms: Tuple[Transform, ...] = tuple(transforms)

    @property
    def transforms(self) -> Tuple[Transform, ...]:
        return self._transforms

    # --- 2.1 随机状态: 每个子变换一项 ---
    def get_random_state(self) -> Tuple[Any, ...]:
        return tuple(tfm.get_random_state() for tfm in self._transforms)

    def _check_randstate(self, randstate: Any) -> Tuple[Any, ...]:
        if not isinstance(randstate, (tuple, list)) or len(randstate) != len(self._transforms):
            got = len(randstate) if isinstance(randstate, (tuple, list)) else type(randstate).__name__
            raise ArityMismatchError(
                f"Sequence随机状态条目数不匹配: 需要{len(self._transforms)}项，收到{got}",
                transform=self,
            )
        return tuple(randstate)

    # --- 2.2 元组折叠 ---
    def apply_tuple(self, items: Tuple[Any, ...], randstate: Any) -> Tuple[Any, ...]:
        randstate = self._check_randstate(randstate)
        for position, (tfm, state) in enumerate(zip(self._transforms, randstate)):
            try:
                items = tfm.apply(items, state)
            except AugmentationError as exc:
                exc.locate(position, tfm)
                raise
            except Exception as exc:
                raise TransformApplyError(
                    f"子变换执行失败: {type(exc).__name__}: {exc}",
                    transform=tfm,
                    path=(position,),
                ) from exc
            logger.debug(f"Sequence第{position}步 {tfm.__class__.__name__} 完成")
        return items

    def apply_item(self, item: Item, randstate: Any) -> Item:
        outputs = self.apply_tuple((item,), randstate)
        if not isinstance(outputs, tuple) or len(outputs) != 1:
            raise ShapeMismatchError("单条目路径应得到恰好一个结果", transform=self)
        return outputs[0]

    # --- 2.3 容器协议 ---
    def __len__(self) -> int:
        return len(self._transforms)

    def __iter__(self) -> Iterator[Transform]:
        return iter(self._transforms)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sequence):
            return NotImplemented
        return self._transforms == other._transforms

    def __hash__(self) -> int:
        return hash((Sequence, self._transforms))

    def to_config(self) -> Dict[str, Any]:
        return {"class": "Sequence", "transforms": [tfm.to_config() for tfm in self._transforms]}

    def extra_repr(self) -> str:
        return ", ".join(repr(tfm) for tfm in self._transforms)


# ========================================================================
# 3. compose 融合规则注册表
# ========================================================================

ComposeRule = Callable[[Any, Any], Transform]

_COMPOSE_RULES: Dict[Tuple[type, type], ComposeRule] = {}


def register_compose_rule(left: Type[Transform], right: Type[Transform]) -> Callable[[ComposeRule], ComposeRule]:
    """注册 (left, right) 两类变换的专用组合规则。

    用法:
        @register_compose_rule(MapElem, MapElem)
        def _fuse(a, b):
            return MapElem(...)
    """

    def decorator(rule: ComposeRule) -> ComposeRule:
        _COMPOSE_RULES[(left, right)] = rule
        logger.debug(f"注册compose规则: ({left.__name__}, {right.__name__}) -> {rule.__name__}")
        return rule

    return decorator


def _resolve_rule(left: Transform, right: Transform) -> ComposeRule | None:
    """按MRO距离之和选出最具体的规则，距离相同时左操作数更具体者优先。"""
    best: Tuple[Tuple[int, int], ComposeRule] | None = None
    for li, left_cls in enumerate(type(left).__mro__):
        for ri, right_cls in enumerate(type(right).__mro__):
            rule = _COMPOSE_RULES.get((left_cls, right_cls))
            if rule is None:
                continue
            rank = (li + ri, li)
            if best is None or rank < best[0]:
                best = (rank, rule)
    return None if best is None else best[1]


def _compose_pair(left: Transform, right: Transform) -> Transform:
    if isinstance(left, Identity):
        return right
    if isinstance(right, Identity):
        return left
    rule = _resolve_rule(left, right)
    if rule is not None:
        return rule(left, right)
    return Sequence(left, right)


def _from_parts(parts: SequenceType[Transform]) -> Transform:
    parts = [tfm for tfm in parts if not isinstance(tfm, Identity)]
    if not parts:
        return Identity()
    if len(parts) == 1:
        return parts[0]
    return Sequence(*parts)


def _flatten(tfm: Transform) -> List[Transform]:
    return list(tfm.transforms) if isinstance(tfm, Sequence) else [tfm]


# ========================================================================
# 4. 默认的Sequence展平规则
# ========================================================================

@register_compose_rule(Sequence, Transform)
def _append_to_sequence(seq: Sequence, tfm: Transform) -> Transform:
    if not seq.transforms:
        return tfm
    *head, tail = seq.transforms
    # 尾部再组合一次，使同类融合在拼接处同样生效
    return _from_parts(head + _flatten(_compose_pair(tail, tfm)))


@register_compose_rule(Transform, Sequence)
def _prepend_to_sequence(tfm: Transform, seq: Sequence) -> Transform:
    if not seq.transforms:
        return tfm
    first, *rest = seq.transforms
    return _from_parts(_flatten(_compose_pair(tfm, first)) + rest)


@register_compose_rule(Sequence, Sequence)
def _concat_sequences(left: Sequence, right: Sequence) -> Transform:
    result: Transform = left
    for tfm in right.transforms:
        result = _compose_pair(result, tfm)
    return result


# ========================================================================
# 5. compose 入口
# ========================================================================

def compose(*transforms: Transform) -> Transform:
    """组合若干变换，``compose(a, b, c) == compose(compose(a, b), c)``。

    ``a >> b`` 是 ``compose(a, b)`` 的中缀写法。
    """
    if not transforms:
        raise TypeError("compose至少需要一个变换")
    for tfm in transforms:
        if not isinstance(tfm, Transform):
            raise TypeError(f"compose只接受Transform，收到 {type(tfm).__name__}")
    result = transforms[0]
    for tfm in transforms[1:]:
        result = _compose_pair(result, tfm)
    logger.debug(f"compose完成: {result!r}")
    return result
