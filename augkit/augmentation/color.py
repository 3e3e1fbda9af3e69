#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Created on 2025-11-10 09:52:49
@author  : William_Trouvaille
@function: 颜色空间相关的数据增强操作，涵盖亮度、对比度与灰度化
"""

from __future__ import annotations

import abc
from typing import Any

import torch
from torchvision.transforms import functional as TF

from .base import Item, Transform, validate_range
from .items import Image


# ========================================================================
# 0. 光度变换基类
# ========================================================================

class PhotometricTransform(Transform):
    """只作用于Image像素值的变换，其他条目（关键点等）原样透传。"""

    def apply_item(self, item: Item, randstate: Any) -> Item:
        if not isinstance(item, Image):
            return item
        return item.setdata(self._apply_image(item.data, randstate))

    @abc.abstractmethod
    def _apply_image(self, image: torch.Tensor, randstate: Any) -> torch.Tensor:
        """子类实现具体变换，形状固定为(C,H,W)。"""


# ========================================================================
# 1. 亮度与对比度调整
# ========================================================================

class RandomBrightness(PhotometricTransform):
    """提供SimCLRv1/v2两种亮度扰动策略。

    随机状态: simclrv2为乘性因子，simclrv1为加性偏移。
    """

    def __init__(self, max_delta: float, impl: str = "simclrv2", seed: int | None = None) -> None:
        super().__init__(seed=seed)
        validate_range(max_delta, 0.0, 1.0, "亮度扰动幅度")
        assert impl in {"simclrv1", "simclrv2"}, "impl仅支持simclrv1/simclrv2"
        self.max_delta = float(max_delta)
        self.impl = impl
        self.register_config(max_delta=max_delta, impl=impl)

    def sample_random_state(self) -> float:
        if self.impl == "simclrv2":
            lower = max(1.0 - self.max_delta, 0.0)
            upper = 1.0 + self.max_delta
            return torch.empty(1).uniform_(lower, upper).item()
        return torch.empty(1).uniform_(-self.max_delta, self.max_delta).item()

    def _apply_image(self, image: torch.Tensor, randstate: float) -> torch.Tensor:
        adjusted = image * randstate if self.impl == "simclrv2" else image + randstate
        return torch.clamp(adjusted, 0.0, 1.0)


class RandomContrast(PhotometricTransform):
    """通过torchvision函数调整对比度，随机状态为对比度因子。"""

    def __init__(self, contrast_range: tuple[float, float], seed: int | None = None) -> None:
        super().__init__(seed=seed)
        validate_range(contrast_range[0], 0.0, 2.0, "对比度下限")
        validate_range(contrast_range[1], 0.0, 2.0, "对比度上限")
        assert contrast_range[0] <= contrast_range[1], "对比度范围必须合法"
        self.contrast_range = tuple(contrast_range)
        self.register_config(contrast_range=self.contrast_range)

    def sample_random_state(self) -> float:
        return torch.empty(1).uniform_(*self.contrast_range).item()

    def _apply_image(self, image: torch.Tensor, randstate: float) -> torch.Tensor:
        adjusted = TF.adjust_contrast(image, randstate)
        return torch.clamp(adjusted, 0.0, 1.0)


# ========================================================================
# 2. 灰度化
# ========================================================================

class ToGrayscale(PhotometricTransform):
    """RGB转灰度，keep_channels=True时保持3通道输出。"""

    def __init__(self, keep_channels: bool = True) -> None:
        super().__init__(seed=None)
        self.keep_channels = keep_channels
        self.register_config(keep_channels=keep_channels)

    def _apply_image(self, image: torch.Tensor, randstate: None = None) -> torch.Tensor:
        assert image.shape[-3] == 3, "灰度化需要RGB三通道输入"
        num_channels = 3 if self.keep_channels else 1
        return TF.rgb_to_grayscale(image, num_output_channels=num_channels)
