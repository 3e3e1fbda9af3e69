#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Created on 2025-11-10 09:52:49
@author  : William_Trouvaille
@function: 几何类数据增强操作，包含翻转、中心裁剪与随机裁剪缩放
@detail:
    几何变换的随机状态只包含与尺寸无关的采样值（翻转与否、相对位置等），
    apply时再结合条目自身尺寸换算成像素坐标，因此同一状态作用于图像
    及其关键点时得到一致的几何结果。
"""

from __future__ import annotations

import dataclasses
import math
from typing import Optional, Tuple

import torch
from loguru import logger
from torchvision.transforms import InterpolationMode
from torchvision.transforms import functional as TF

from .base import Item, Transform, validate_probability, validate_range
from .items import Image, Keypoints


# ========================================================================
# 0. 裁剪缩放的公共实现
# ========================================================================

def _item_size(transform: Transform, item: Item) -> Tuple[int, int]:
    if isinstance(item, Image):
        return item.size
    if isinstance(item, Keypoints):
        return item.bounds
    raise transform.unsupported(item)


def _crop_resize(
    item: Item,
    top: int,
    left: int,
    crop_h: int,
    crop_w: int,
    size: Optional[Tuple[int, int]],
    interpolation: InterpolationMode,
) -> Item:
    """裁剪出 (top, left, crop_h, crop_w) 区域，可选地缩放到 size=(H, W)。"""
    out_h, out_w = size if size is not None else (crop_h, crop_w)
    if isinstance(item, Image):
        cropped = item.data[..., top : top + crop_h, left : left + crop_w]
        if size is not None:
            cropped = TF.resize(cropped, size=[out_h, out_w], interpolation=interpolation, antialias=True)
        return item.setdata(torch.clamp(cropped, 0.0, 1.0))
    points = item.data.clone()
    points[:, 0] = (points[:, 0] - left) * (out_w / crop_w)
    points[:, 1] = (points[:, 1] - top) * (out_h / crop_h)
    return dataclasses.replace(item, data=points, bounds=(out_h, out_w))


# ========================================================================
# 1. 左右翻转
# ========================================================================

class RandomHorizontalFlip(Transform):
    """以概率p执行水平翻转，随机状态为是否翻转(bool)。"""

    def __init__(self, p: float = 0.5, seed: int | None = None) -> None:
        super().__init__(seed=seed)
        validate_probability(p)
        self.p = float(p)
        self.register_config(p=p)

    def sample_random_state(self) -> bool:
        return bool(torch.rand(1).item() < self.p)

    def apply_item(self, item: Item, randstate: bool) -> Item:
        if not isinstance(item, (Image, Keypoints)):
            raise self.unsupported(item)
        if not randstate:
            return item
        if isinstance(item, Image):
            return item.setdata(torch.flip(item.data, dims=(-1,)))
        points = item.data.clone()
        points[:, 0] = item.bounds[1] - points[:, 0]
        return item.setdata(points)


# ========================================================================
# 2. 中心裁剪
# ========================================================================

class CenterCrop(Transform):
    """按比例执行中心裁剪，并可选地缩放到目标尺寸，确定性变换。"""

    def __init__(
        self,
        target_size: Optional[Tuple[int, int]] = None,
        crop_proportion: float = 0.875,
        interpolation: InterpolationMode | str = InterpolationMode.BILINEAR,
    ) -> None:
        super().__init__(seed=None)
        validate_probability(crop_proportion)
        assert crop_proportion > 0.0, "裁剪比例必须大于0"
        self.crop_proportion = float(crop_proportion)
        self.target_size = tuple(target_size) if target_size is not None else None
        self.interpolation = InterpolationMode(interpolation)
        self.register_config(
            target_size=self.target_size,
            crop_proportion=self.crop_proportion,
            interpolation=self.interpolation.value,
        )

    def apply_item(self, item: Item, randstate: None = None) -> Item:
        height, width = _item_size(self, item)
        crop_h, crop_w = self._compute_crop_size(height, width)
        top = (height - crop_h) // 2
        left = (width - crop_w) // 2
        return _crop_resize(item, top, left, crop_h, crop_w, self.target_size, self.interpolation)

    # --- 2.1 依据目标宽高比计算裁剪尺寸 ---
    def _compute_crop_size(self, height: int, width: int) -> tuple[int, int]:
        base = int(min(height, width) * self.crop_proportion)
        base = max(base, 1)
        if self.target_size is None:
            return min(base, height), min(base, width)
        target_ratio = self.target_size[0] / self.target_size[1]
        crop_h = base
        crop_w = max(int(crop_h / target_ratio), 1)
        if crop_w > width:
            crop_w = width
            crop_h = max(int(crop_w * target_ratio), 1)
        crop_h = min(crop_h, height)
        crop_w = min(crop_w, width)
        return crop_h, crop_w


# ========================================================================
# 3. Inception风格随机裁剪与缩放
# ========================================================================

class RandomResizedCrop(Transform):
    """随机裁剪并缩放至指定尺寸。

    随机状态为 ``(scale, ratio, fy, fx)``:
        - scale: 裁剪面积占原图面积的比例
        - ratio: 裁剪区域的高宽比
        - fy, fx: 裁剪区域在剩余空间中的相对位置，取值 [0, 1)
    """

    def __init__(
        self,
        output_size: Tuple[int, int],
        scale_range: Tuple[float, float] = (0.08, 1.0),
        ratio_range: Tuple[float, float] = (0.75, 1.33),
        interpolation: InterpolationMode | str = InterpolationMode.BILINEAR,
        seed: int | None = None,
    ) -> None:
        super().__init__(seed=seed)
        validate_range(scale_range[0], 0.0, 1.0, "scale范围下限")
        validate_range(scale_range[1], 0.0, 1.0, "scale范围上限")
        validate_range(ratio_range[0], 0.1, 10.0, "ratio范围下限")
        validate_range(ratio_range[1], 0.1, 10.0, "ratio范围上限")
        assert scale_range[0] <= scale_range[1], "scale范围必须满足下限<=上限"
        assert ratio_range[0] <= ratio_range[1], "ratio范围必须满足下限<=上限"
        self.output_size = tuple(output_size)
        self.scale_range = tuple(scale_range)
        self.ratio_range = tuple(ratio_range)
        self.interpolation = InterpolationMode(interpolation)
        self.register_config(
            output_size=self.output_size,
            scale_range=self.scale_range,
            ratio_range=self.ratio_range,
            interpolation=self.interpolation.value,
        )

    def sample_random_state(self) -> tuple[float, float, float, float]:
        log_ratio = (math.log(self.ratio_range[0]), math.log(self.ratio_range[1]))
        scale = torch.empty(1).uniform_(self.scale_range[0], self.scale_range[1]).item()
        ratio = math.exp(torch.empty(1).uniform_(*log_ratio).item())
        fy, fx = torch.rand(2).tolist()
        return scale, ratio, fy, fx

    def apply_item(self, item: Item, randstate: tuple[float, float, float, float]) -> Item:
        height, width = _item_size(self, item)
        top, left, crop_h, crop_w = self._crop_params(height, width, randstate)
        logger.debug(
            f"随机裁剪参数: top={top}, left={left}, crop_h={crop_h}, crop_w={crop_w}, 原始尺寸=({height},{width})"
        )
        return _crop_resize(item, top, left, crop_h, crop_w, self.output_size, self.interpolation)

    # --- 3.1 将随机状态换算为像素裁剪区域 ---
    @staticmethod
    def _crop_params(height: int, width: int, randstate: tuple[float, float, float, float]) -> tuple[int, int, int, int]:
        scale, ratio, fy, fx = randstate
        target_area = scale * height * width
        crop_w = int(round(math.sqrt(target_area / ratio)))
        crop_h = int(round(math.sqrt(target_area * ratio)))
        crop_w = min(max(crop_w, 1), width)
        crop_h = min(max(crop_h, 1), height)
        top = int(round(fy * (height - crop_h)))
        left = int(round(fx * (width - crop_w)))
        return top, left, crop_h, crop_w
