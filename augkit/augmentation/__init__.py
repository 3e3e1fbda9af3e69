#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Created on 2025-11-10 09:52:49
@author  : William_Trouvaille
@function: 数据增强子工具箱统一导出入口
"""

from .base import (
    Item,
    Transform,
    TorchSeedContext,
    apply,
    get_random_state,
    itemdata,
    setdata,
    validate_probability,
    validate_range,
)
from .color import PhotometricTransform, RandomBrightness, RandomContrast, ToGrayscale
from .composite import OneOf, RandomApply
from .elementwise import MapElem
from .errors import (
    ArityMismatchError,
    AugmentationError,
    ShapeMismatchError,
    TransformApplyError,
    UnsupportedOperationError,
)
from .geometric import CenterCrop, RandomHorizontalFlip, RandomResizedCrop
from .items import ArrayItem, Image, Keypoints
from .noise import GaussianNoise
from .pipeline import (
    PRESETS,
    TRANSFORM_REGISTRY,
    build_pipeline,
    build_transform,
    get_basic_augmentation,
    get_strong_augmentation,
    pipeline_from_config,
    pipeline_to_config,
)
from .sequence import Identity, Sequence, compose, register_compose_rule

__all__ = [
    "Item",
    "Transform",
    "TorchSeedContext",
    "apply",
    "get_random_state",
    "itemdata",
    "setdata",
    "validate_probability",
    "validate_range",
    "ArrayItem",
    "Image",
    "Keypoints",
    "Identity",
    "Sequence",
    "compose",
    "register_compose_rule",
    "MapElem",
    "PhotometricTransform",
    "RandomBrightness",
    "RandomContrast",
    "ToGrayscale",
    "GaussianNoise",
    "RandomHorizontalFlip",
    "CenterCrop",
    "RandomResizedCrop",
    "RandomApply",
    "OneOf",
    "AugmentationError",
    "ArityMismatchError",
    "UnsupportedOperationError",
    "ShapeMismatchError",
    "TransformApplyError",
    "PRESETS",
    "TRANSFORM_REGISTRY",
    "build_transform",
    "build_pipeline",
    "pipeline_to_config",
    "pipeline_from_config",
    "get_basic_augmentation",
    "get_strong_augmentation",
]
