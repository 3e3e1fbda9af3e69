#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Created on 2025-11-14 10:21:07
@author  : William_Trouvaille
@function: 数据增强异常体系，统一携带出错变换与序列位置信息
"""

from __future__ import annotations

from typing import Any, Tuple


class AugmentationError(Exception):
    """所有增强相关异常的基类。

    属性:
        transform: 抛出异常的变换实例（未知时为None）
        path: 异常在嵌套Sequence中的位置，最外层在前，例如 (2, 0)
    """

    def __init__(self, message: str, transform: Any = None, path: Tuple[int, ...] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.transform = transform
        self.path = tuple(path)

    def locate(self, position: int, transform: Any) -> None:
        """由外层Sequence调用，把当前层级的位置补到路径最前面。"""
        self.path = (position,) + self.path
        if self.transform is None:
            self.transform = transform

    def __str__(self) -> str:
        parts = [self.message]
        if self.transform is not None:
            parts.append(f"变换={self.transform.__class__.__name__}")
        if self.path:
            parts.append(f"位置={'.'.join(str(i) for i in self.path)}")
        return " | ".join(parts)


class ArityMismatchError(AugmentationError, ValueError):
    """随机状态条目数与子变换数不一致，或元组广播结果长度改变。"""


class UnsupportedOperationError(AugmentationError, NotImplementedError):
    """条目类型缺少规范的data字段，或变换不支持该条目类型。"""


class ShapeMismatchError(AugmentationError, AssertionError):
    """单条目路径从元组折叠中拿回的结果不是恰好一个（内部契约被破坏）。"""


class TransformApplyError(AugmentationError, RuntimeError):
    """包装子变换抛出的非增强类异常，原始异常保存在 __cause__ 中。"""
