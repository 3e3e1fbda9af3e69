#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Created on 2025/11/1 15:16
@version : 1.0.0
@author  : William_Trouvaille
@function: augkit 工具包初始化模块
"""

from loguru import logger

# 作为库默认不输出日志，调用 setup_logging() 后启用
logger.disable("augkit")

from .config import (
    DEFAULT_CONFIG,
    setup_config,
    load_config_from_yaml,
    save_config_to_yaml,
    print_config,
    ConfigNamespace
)
from .helpers import isolate_rng, seed_everything
from .logger_config import setup_logging
from .augmentation import (
    ArityMismatchError,
    ArrayItem,
    AugmentationError,
    CenterCrop,
    GaussianNoise,
    Identity,
    Image,
    Item,
    Keypoints,
    MapElem,
    OneOf,
    PhotometricTransform,
    PRESETS,
    RandomApply,
    RandomBrightness,
    RandomContrast,
    RandomHorizontalFlip,
    RandomResizedCrop,
    Sequence,
    ShapeMismatchError,
    ToGrayscale,
    TorchSeedContext,
    Transform,
    TransformApplyError,
    TRANSFORM_REGISTRY,
    UnsupportedOperationError,
    apply,
    build_pipeline,
    build_transform,
    compose,
    get_basic_augmentation,
    get_random_state,
    get_strong_augmentation,
    itemdata,
    pipeline_from_config,
    pipeline_to_config,
    register_compose_rule,
    setdata,
    validate_probability,
    validate_range,
)

# 版本信息
__version__ = "0.1.0"
__author__ = "William_Trouvaille"

# 导出主要接口
__all__: list[str] = [
    # logger_config.py
    'setup_logging',

    # config.py
    'DEFAULT_CONFIG',
    'setup_config',
    'load_config_from_yaml',
    'save_config_to_yaml',
    'print_config',
    'ConfigNamespace',

    # helpers.py
    'isolate_rng',
    'seed_everything',

    # augmentation/ 核心协议
    'Item',
    'Transform',
    'Identity',
    'Sequence',
    'compose',
    'register_compose_rule',
    'apply',
    'get_random_state',
    'itemdata',
    'setdata',
    'TorchSeedContext',
    'validate_probability',
    'validate_range',

    # augmentation/ 异常
    'AugmentationError',
    'ArityMismatchError',
    'UnsupportedOperationError',
    'ShapeMismatchError',
    'TransformApplyError',

    # augmentation/ 条目与变换
    'ArrayItem',
    'Image',
    'Keypoints',
    'MapElem',
    'PhotometricTransform',
    'RandomBrightness',
    'RandomContrast',
    'ToGrayscale',
    'GaussianNoise',
    'RandomHorizontalFlip',
    'CenterCrop',
    'RandomResizedCrop',
    'RandomApply',
    'OneOf',

    # augmentation/ 管道
    'PRESETS',
    'TRANSFORM_REGISTRY',
    'build_transform',
    'build_pipeline',
    'pipeline_to_config',
    'pipeline_from_config',
    'get_basic_augmentation',
    'get_strong_augmentation',
]
