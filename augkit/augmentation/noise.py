#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Created on 2025-11-10 09:52:49
@author  : William_Trouvaille
@function: 噪声类数据增强操作
"""

from __future__ import annotations

import torch

from .base import validate_range
from .color import PhotometricTransform

_MAX_NOISE_SEED = 2**31 - 1


# ========================================================================
# 1. 高斯噪声
# ========================================================================

class GaussianNoise(PhotometricTransform):
    """向图像添加高斯噪声并裁剪到合法范围。

    随机状态是一个整数种子，噪声由独立的 ``torch.Generator`` 按该种子生成，
    所以同一次调用中尺寸相同的图像会得到完全相同的噪声。
    """

    def __init__(self, mean: float = 0.0, std: float = 0.1, seed: int | None = None) -> None:
        super().__init__(seed=seed)
        validate_range(std, 0.0, 1.0, "噪声标准差")
        self.mean = float(mean)
        self.std = float(std)
        self.register_config(mean=mean, std=std)

    def sample_random_state(self) -> int:
        return int(torch.randint(0, _MAX_NOISE_SEED, (1,)).item())

    def _apply_image(self, image: torch.Tensor, randstate: int) -> torch.Tensor:
        generator = torch.Generator().manual_seed(int(randstate))
        noise = torch.randn(image.shape, generator=generator, dtype=image.dtype).to(image.device)
        noisy = image + noise * self.std + self.mean
        return torch.clamp(noisy, 0.0, 1.0)
