#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Created on 2025/11/1 15:37
@author  : William_Trouvaille
@function: 增强管道的配置管理模块
@detail: 默认配置 < YAML 文件 < 命令行点分参数 三级覆盖，结果转换为支持属性访问的 ConfigNamespace。
"""
import copy
import os
from collections.abc import Mapping
from typing import Optional

import yaml
from loguru import logger

# augmentation 段: 给出 transforms 列表时按列表构造，否则使用 preset 预设
DEFAULT_CONFIG: dict = {
    'seed': 42,
    'logging': {
        'log_dir': './logs',
        'console_level': 'INFO',
        'file_level': 'DEBUG'
    },
    'augmentation': {
        'preset': 'basic',
        'image_size': [224, 224],
        'transforms': [],
    },
    'demo': {
        'num_keypoints': 4,
        'input_size': [256, 320],
    }
}


class ConfigNamespace:
    """
    把(嵌套)字典转换为可通过属性访问的对象，例如 ``config.augmentation.preset``。
    """

    def __init__(self, config_dict: dict):
        if not isinstance(config_dict, dict):
            raise ValueError("ConfigNamespace 必须使用字典进行初始化")
        for key, value in config_dict.items():
            setattr(self, key, ConfigNamespace(value) if isinstance(value, dict) else value)

    def __repr__(self) -> str:
        return str(vars(self))

    def to_dict(self) -> dict:
        """递归转换回普通字典。"""
        return {
            key: value.to_dict() if isinstance(value, ConfigNamespace) else value
            for key, value in vars(self).items()
        }

    def get(self, key: str, default=None):
        """安全地获取配置项，不存在时返回默认值。"""
        return getattr(self, key, default)


def _deep_merge_dict(base_dict: dict, override_dict: dict) -> dict:
    """
    递归合并两个字典，`override_dict` 中的值覆盖 `base_dict`。
    """
    merged = copy.deepcopy(base_dict)
    for key, value in override_dict.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = _deep_merge_dict(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config_from_yaml(config_path: Optional[str]) -> dict:
    """
    加载 YAML 配置文件。

    参数:
        config_path (str | None): YAML 文件路径

    返回:
        dict: 配置字典。路径为空、文件不存在、内容为空或解析失败时返回空字典。
    """
    if not config_path:
        return {}

    resolved_path = os.path.abspath(config_path)
    if not os.path.exists(resolved_path):
        logger.warning(f"配置文件未找到: {resolved_path}。跳过加载。")
        return {}

    logger.debug(f"尝试从 '{resolved_path}' 加载配置...")
    try:
        with open(resolved_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"解析 YAML 文件时出错: {resolved_path}\n错误详情: {e}")
        return {}

    if config is None:
        logger.warning(f"配置文件为空: {resolved_path}")
        return {}
    if not isinstance(config, dict):
        logger.error(f"配置文件顶层必须是字典: {resolved_path}")
        return {}

    logger.success(f"成功加载配置文件: {resolved_path}")
    return config


def update_config_from_args(config_dict: dict, args_dict: Optional[dict]) -> dict:
    """
    用命令行参数覆盖配置，支持 "augmentation.preset" 这样的点分键。
    值为 None 的参数会被忽略，避免覆盖有效的默认值。
    """
    updated_config = copy.deepcopy(config_dict)
    valid_args = {k: v for k, v in (args_dict or {}).items() if v is not None}
    if not valid_args:
        return updated_config

    for key, value in valid_args.items():
        *parents, leaf = key.split('.')
        current = updated_config
        for k in parents:
            if not isinstance(current.get(k), dict):
                current[k] = {}
            current = current[k]
        current[leaf] = value

    logger.info(f"配置已从 {len(valid_args)} 个命令行参数更新: {list(valid_args)}")
    return updated_config


def save_config_to_yaml(config: (dict | ConfigNamespace), config_path: str):
    """
    保存配置到 YAML 文件，目录不存在时自动创建。
    """
    config_dict = config.to_dict() if isinstance(config, ConfigNamespace) else config
    resolved_path = os.path.abspath(config_path)
    os.makedirs(os.path.dirname(resolved_path), exist_ok=True)

    with open(resolved_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(
            config_dict,
            f,
            default_flow_style=False,
            allow_unicode=True,
            indent=2,
            sort_keys=False
        )
    logger.success(f"配置文件已保存至: {resolved_path}")


def print_config(config: (dict | ConfigNamespace), title: str = "当前配置信息"):
    """以缩进格式把配置打印到日志 (INFO 级别)，跳过以下划线开头的键。"""
    logger.info("=" * 60)
    logger.info(f"{title}".center(60))
    logger.info("=" * 60)

    def print_recursive(d: dict, indent: int = 0):
        for key, value in d.items():
            if key.startswith('_'):
                continue
            prefix = "  " * indent + f"{key}:"
            if isinstance(value, dict):
                logger.info(prefix)
                print_recursive(value, indent + 1)
            else:
                logger.info(f"{prefix} {value}")

    print_recursive(config.to_dict() if isinstance(config, ConfigNamespace) else config)
    logger.info("=" * 60)


def setup_config(
        default_config: Optional[dict] = None,
        yaml_config_path: Optional[str] = None,
        cmd_args: Optional[dict] = None
) -> ConfigNamespace:
    """
    三阶段配置编排，覆盖优先级: 命令行参数 > YAML 文件 > 默认配置。

    参数:
        default_config (dict | None): 默认配置，None 时使用 DEFAULT_CONFIG。
        yaml_config_path (str | None): 用户 YAML 配置文件路径。
        cmd_args (dict | None): argparse 解析结果 (vars(args))。

    返回:
        ConfigNamespace: 合并后的配置。
    """
    logger.info("开始配置加载程序...")
    base = DEFAULT_CONFIG if default_config is None else default_config

    merged = _deep_merge_dict(base, load_config_from_yaml(yaml_config_path))
    final_config_dict = update_config_from_args(merged, cmd_args)
    print_config(final_config_dict, "最终合并配置")

    logger.success("配置加载完成并转换为 ConfigNamespace。")
    return ConfigNamespace(final_config_dict)
