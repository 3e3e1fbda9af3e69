#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Created on 2025-11-10 09:52:49
@author  : William_Trouvaille
@function: 定义条目(Item)与变换(Transform)的基础抽象、随机状态生成与apply分发逻辑
@detail:
    一次apply调用只生成一次随机状态，并把同一份状态广播给元组中的每个条目，
    保证图像与其关键点等关联数据得到完全一致的随机变换。
"""

from __future__ import annotations

import abc
import dataclasses
from contextlib import ContextDecorator
from typing import Any, Dict, Tuple, Union

import torch
from loguru import logger

from .errors import ArityMismatchError, UnsupportedOperationError


# ========================================================================
# 1. 参数验证与随机控制
# ========================================================================

# --- 1.1 概率与取值范围校验 ---

def validate_probability(p: float) -> None:
    """验证概率取值，确保后续随机逻辑稳定。"""
    assert 0.0 <= float(p) <= 1.0, "概率必须在[0, 1]范围内"


def validate_range(value: float, min_val: float, max_val: float, name: str) -> None:
    """统一的范围断言，便于排查参数配置错误。"""
    assert min_val <= float(value) <= max_val, f"{name}必须在[{min_val}, {max_val}]范围内"


# --- 1.2 Torch随机状态上下文 ---

class TorchSeedContext(ContextDecorator):
    """在局部代码块中临时设置随机种子，退出时恢复全局随机状态。"""

    def __init__(self, seed: int | None) -> None:
        self.seed = seed
        self._state: torch.Tensor | None = None

    def __enter__(self) -> None:
        if self.seed is None:
            return None
        self._state = torch.random.get_rng_state()
        torch.manual_seed(int(self.seed))
        logger.debug(f"设置局部随机种子: {self.seed}")
        return None

    def __exit__(self, exc_type, exc, exc_tb) -> None:
        if self._state is not None:
            torch.random.set_rng_state(self._state)
            self._state = None
            logger.debug("恢复进入上下文前的随机状态")
        return None


# ========================================================================
# 2. 条目抽象
# ========================================================================

class Item(abc.ABC):
    """所有条目类型的抽象基类。

    条目包裹恰好一个载荷(payload)，约定放在名为 ``data`` 的字段上。
    具体条目应实现为 ``@dataclass(frozen=True)``，这样默认的 :meth:`setdata`
    即可通过构造函数复制出新实例；没有 ``data`` 字段的类型必须自行重载
    :meth:`itemdata` 与 :meth:`setdata`。
    """

    def itemdata(self) -> Any:
        """返回包裹的载荷。"""
        try:
            return self.data
        except AttributeError:
            raise UnsupportedOperationError(
                f"条目类型 {self.__class__.__name__} 没有规范的data字段，需重载itemdata"
            ) from None

    def setdata(self, data: Any) -> "Item":
        """返回替换了载荷的新条目，其余字段原样保留。"""
        if dataclasses.is_dataclass(self) and any(f.name == "data" for f in dataclasses.fields(self)):
            return dataclasses.replace(self, data=data)
        raise UnsupportedOperationError(
            f"条目类型 {self.__class__.__name__} 没有规范的data字段，需重载setdata"
        )


Items = Union[Item, Tuple[Any, ...]]


def itemdata(items: Items) -> Any:
    """读取单个条目或条目元组的载荷，元组时保持顺序与长度。"""
    if isinstance(items, tuple):
        return tuple(itemdata(item) for item in items)
    if not isinstance(items, Item):
        raise UnsupportedOperationError(f"无法从 {type(items).__name__} 中读取载荷，需传入Item")
    return items.itemdata()


def setdata(item: Item, data: Any) -> Item:
    """复制 ``item`` 并替换载荷。"""
    if not isinstance(item, Item):
        raise UnsupportedOperationError(f"无法为 {type(item).__name__} 设置载荷，需传入Item")
    return item.setdata(data)


# ========================================================================
# 3. 统一的变换抽象
# ========================================================================

# 区分“未传入随机状态”与“随机状态为None”
_MISSING = object()


class Transform(metaclass=abc.ABCMeta):
    """所有变换的抽象基类。

    子类需要实现:
        - :meth:`apply_item`: 给定随机状态，对单个条目执行变换（纯函数）
        - :meth:`sample_random_state`: 随机变换采样本次调用的随机状态，确定性变换无需实现

    子类可以重载 :meth:`apply_tuple`，以不同于“逐个广播同一状态”的方式处理条目元组。
    """

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._config_params: Dict[str, Any] = {}

    # ====================================================================
    # 3.1 随机状态
    # ====================================================================

    def sample_random_state(self) -> Any:
        """采样一次调用所需的随机状态，默认为None（确定性变换）。"""
        return None

    def get_random_state(self) -> Any:
        """生成新的随机状态；设置了seed时结果固定且不影响全局随机状态。"""
        with TorchSeedContext(self.seed):
            randstate = self.sample_random_state()
        logger.debug(f"{self.__class__.__name__} 随机状态: {randstate}")
        return randstate

    # ====================================================================
    # 3.2 apply分发
    # ====================================================================

    @abc.abstractmethod
    def apply_item(self, item: Item, randstate: Any) -> Item:
        """使用给定随机状态变换单个条目。"""

    def apply_tuple(self, items: Tuple[Any, ...], randstate: Any) -> Tuple[Any, ...]:
        """默认把同一随机状态广播给元组中的每个条目。"""
        return tuple(self.apply(item, randstate) for item in items)

    def apply(self, items: Items, randstate: Any = _MISSING) -> Items:
        """对单个条目或条目元组执行变换。

        未传入 ``randstate`` 时先调用 :meth:`get_random_state` 生成，
        等价于显式的两步调用。
        """
        if randstate is _MISSING:
            return self._apply_fresh(items)
        if isinstance(items, tuple):
            outputs = self.apply_tuple(items, randstate)
            if not isinstance(outputs, tuple) or len(outputs) != len(items):
                raise ArityMismatchError(
                    f"元组广播结果数量与输入不一致: 输入{len(items)}个",
                    transform=self,
                )
            return outputs
        return self.apply_item(items, randstate)

    def _apply_fresh(self, items: Items) -> Items:
        randstate = self.get_random_state()
        try:
            return self.apply(items, randstate)
        except Exception as exc:
            logger.error(f"变换 {self.__class__.__name__} 执行失败: {exc}")
            raise

    def __call__(self, items: Items, randstate: Any = _MISSING) -> Items:
        return self.apply(items, randstate)

    # ====================================================================
    # 3.3 组合运算符
    # ====================================================================

    def then(self, other: "Transform") -> "Transform":
        """``a.then(b)`` 等价于 ``compose(a, b)``。"""
        from .sequence import compose

        return compose(self, other)

    def __rshift__(self, other: "Transform") -> "Transform":
        if not isinstance(other, Transform):
            return NotImplemented
        return self.then(other)

    # ====================================================================
    # 3.4 配置导出与还原
    # ====================================================================

    def register_config(self, **params: Any) -> None:
        """记录用于重建当前变换的参数集合。"""
        self._config_params = params

    def to_config(self) -> Dict[str, Any]:
        """导出可序列化配置，供增强管道记录。"""
        params = dict(self._config_params)
        if self.seed is not None:
            params["seed"] = self.seed
        return {"class": self.__class__.__name__, "params": params}

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "Transform":
        """根据配置重新构造实例，子类可按需重载。"""
        params = dict(config.get("params", {}))
        return cls(**params)

    def extra_repr(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self._config_params.items())
        if self.seed is not None:
            params = f"{params}, seed={self.seed}" if params else f"seed={self.seed}"
        return params

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.extra_repr()})"

    # ====================================================================
    # 3.5 条目类型检查
    # ====================================================================

    def unsupported(self, item: Any) -> UnsupportedOperationError:
        """构造“不支持该条目类型”的异常，由子类raise。"""
        return UnsupportedOperationError(
            f"{self.__class__.__name__} 不支持条目类型 {type(item).__name__}",
            transform=self,
        )


# ========================================================================
# 4. 函数式入口
# ========================================================================

def get_random_state(transform: Transform) -> Any:
    """为 ``transform`` 生成一次调用所需的随机状态。"""
    return transform.get_random_state()


def apply(transform: Transform, items: Items, randstate: Any = _MISSING) -> Items:
    """``apply(tfm, items)`` 自动生成随机状态；元组中的条目共享同一份状态。"""
    return transform.apply(items, randstate)
