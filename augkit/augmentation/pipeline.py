#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Created on 2025-11-10 09:52:49
@author  : William_Trouvaille
@function: 变换注册表、增强管道的配置序列化与预设组合
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence, Type

from loguru import logger

from .base import Transform
from .color import RandomBrightness, RandomContrast, ToGrayscale
from .composite import OneOf, RandomApply
from .geometric import CenterCrop, RandomHorizontalFlip, RandomResizedCrop
from .noise import GaussianNoise
from .sequence import Identity, Sequence as SequenceTransform, compose


# ========================================================================
# 1. 变换注册表
# ========================================================================

TRANSFORM_REGISTRY: Dict[str, Type[Transform]] = {
    cls.__name__: cls
    for cls in [
        Identity,
        RandomBrightness,
        RandomContrast,
        ToGrayscale,
        GaussianNoise,
        RandomHorizontalFlip,
        CenterCrop,
        RandomResizedCrop,
        RandomApply,
        OneOf,
    ]
}


# ========================================================================
# 2. 配置 <-> 变换
# ========================================================================

def build_transform(config: Mapping[str, Any], registry: Dict[str, Type[Transform]] | None = None) -> Transform:
    """根据 ``{"class": ..., "params": ...}`` 形式的配置构造单个变换（支持嵌套）。"""
    registry = registry or TRANSFORM_REGISTRY
    class_name = config.get("class")
    if class_name == "Sequence":
        return build_pipeline(config.get("transforms", []), registry)
    if class_name not in registry:
        raise ValueError(f"未注册的变换: {class_name}")
    params = dict(config.get("params") or {})
    if "transform" in config:
        params["transform"] = build_transform(config["transform"], registry)
    if "transforms" in config:
        params["transforms"] = [build_transform(c, registry) for c in config["transforms"]]
    return registry[class_name].from_config({"params": params})


def build_pipeline(
    configs: Sequence[Mapping[str, Any]],
    registry: Dict[str, Type[Transform]] | None = None,
) -> Transform:
    """把配置列表依次构造并compose成一个变换，空列表得到Identity。"""
    transforms = [build_transform(c, registry) for c in configs]
    if not transforms:
        return Identity()
    return compose(*transforms)


def _to_plain(value: Any) -> Any:
    # yaml.safe_load 无法读取 tuple 标签，导出前统一转为 list
    if isinstance(value, dict):
        return {k: _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    return value


def pipeline_to_config(transform: Transform) -> List[Dict[str, Any]]:
    """导出为可写入YAML的配置列表，顶层Sequence展开为列表。"""
    if isinstance(transform, Identity):
        return []
    if isinstance(transform, SequenceTransform):
        return [_to_plain(t.to_config()) for t in transform.transforms]
    return [_to_plain(transform.to_config())]


# ========================================================================
# 3. 预设配置
# ========================================================================

def get_basic_augmentation(image_size: tuple[int, int]) -> Transform:
    """基础版增广：中心裁剪+翻转+轻微亮度扰动。"""
    return compose(
        CenterCrop(target_size=image_size, crop_proportion=0.9),
        RandomHorizontalFlip(p=0.5),
        RandomBrightness(max_delta=0.3),
    )


def get_strong_augmentation(image_size: tuple[int, int]) -> Transform:
    """强增强配置：随机裁剪缩放+翻转+颜色扰动+噪声。"""
    return compose(
        RandomResizedCrop(output_size=image_size),
        RandomHorizontalFlip(p=0.5),
        RandomApply(
            OneOf([RandomBrightness(max_delta=0.8), RandomContrast(contrast_range=(0.2, 1.8))]),
            p=0.8,
        ),
        RandomApply(ToGrayscale(keep_channels=True), p=0.2),
        GaussianNoise(std=0.05),
    )


PRESETS = {
    "basic": get_basic_augmentation,
    "strong": get_strong_augmentation,
}


def pipeline_from_config(section: Mapping[str, Any]) -> Transform:
    """根据配置中的 augmentation 段构造管道。

    优先使用显式的 ``transforms`` 列表，否则按 ``preset`` 名称与 ``image_size`` 选择预设。
    """
    transforms = section.get("transforms")
    if transforms:
        pipeline = build_pipeline(transforms)
        logger.info(f"已从配置构造增强管道，共 {len(transforms)} 个变换")
        return pipeline
    preset = section.get("preset", "basic")
    if preset not in PRESETS:
        raise ValueError(f"未知的增强预设: {preset}，可选: {sorted(PRESETS)}")
    image_size = tuple(section.get("image_size", (224, 224)))
    logger.info(f"使用增强预设 '{preset}'，输出尺寸={image_size}")
    return PRESETS[preset](image_size)
