#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Created on 2025-11-15 09:40:16
@author  : William_Trouvaille
@function: 常用条目类型：通用张量、图像与关键点
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import torch

from .base import Item


# ========================================================================
# 1. 通用张量条目
# ========================================================================

@dataclass(frozen=True, eq=False)
class ArrayItem(Item):
    """包裹任意张量的条目，MapElem等逐元素变换作用于它。"""

    data: torch.Tensor

    def __post_init__(self) -> None:
        assert isinstance(self.data, torch.Tensor), f"{self.__class__.__name__}的data必须是torch.Tensor"


# ========================================================================
# 2. 图像
# ========================================================================

@dataclass(frozen=True, eq=False)
class Image(ArrayItem):
    """(C, H, W) 浮点图像，像素值约定在 [0, 1]。"""

    def __post_init__(self) -> None:
        super().__post_init__()
        assert self.data.dim() == 3, "图像张量必须是(C,H,W)"
        assert self.data.is_floating_point(), "图像张量必须为浮点类型"

    @property
    def size(self) -> Tuple[int, int]:
        """图像尺寸 (H, W)。"""
        return int(self.data.shape[-2]), int(self.data.shape[-1])


# ========================================================================
# 3. 关键点
# ========================================================================

@dataclass(frozen=True, eq=False)
class Keypoints(Item):
    """(N, 2) 的 (x, y) 坐标，使用像素边缘坐标系。

    ``bounds`` 为关键点所在图像的尺寸 (H, W)，几何变换据此与图像保持一致。
    """

    data: torch.Tensor
    bounds: Tuple[int, int]

    def __post_init__(self) -> None:
        assert isinstance(self.data, torch.Tensor), "Keypoints的data必须是torch.Tensor"
        assert self.data.dim() == 2 and self.data.shape[-1] == 2, "关键点张量必须是(N,2)"
        assert len(self.bounds) == 2, "bounds必须是(H, W)"
        object.__setattr__(self, "bounds", (int(self.bounds[0]), int(self.bounds[1])))
        if not self.data.is_floating_point():
            object.__setattr__(self, "data", self.data.float())
