#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Created on 2025-11-04T00:00:00
@author  : William_Trouvaille
@function: 增强管道演示程序

功能说明:
    1. 配置加载 (augkit/config.py):
       - 默认配置 < YAML 文件 (-c/--config) < 命令行点分参数
       - 例如: python main.py --augmentation.preset strong

    2. 管道构造 (augkit/augmentation/pipeline.py):
       - augmentation.transforms 非空时按列表构造，否则使用 augmentation.preset 预设

    3. 同步增强:
       - 构造一张随机图像及其关键点，作为一个元组传给 apply，
         两者共享同一份随机状态，增强后的关键点仍与图像对齐
"""

import argparse
import sys

import torch
from loguru import logger

from augkit import (
    Image,
    Keypoints,
    apply,
    itemdata,
    pipeline_from_config,
    pipeline_to_config,
    seed_everything,
    setup_config,
    setup_logging,
)


def parse_arguments() -> dict:
    """定义和解析命令行参数，dest 使用点分键以覆盖嵌套配置"""
    parser = argparse.ArgumentParser(description="augkit 同步数据增强演示")
    parser.add_argument(
        '-c', '--config',
        type=str,
        default='config.yaml',
        help='配置文件的路径'
    )
    parser.add_argument(
        '--augmentation.preset',
        type=str,
        help='覆盖增强预设 (basic / strong)'
    )
    parser.add_argument(
        '--seed',
        type=int,
        help='覆盖全局随机种子'
    )
    parser.add_argument(
        '--logging.console_level',
        type=str,
        help='覆盖控制台日志级别'
    )
    return vars(parser.parse_args())


def make_sample(height: int, width: int, num_keypoints: int) -> tuple:
    """构造一张随机图像与落在图像内的随机关键点。"""
    image = Image(torch.rand(3, height, width))
    points = torch.rand(num_keypoints, 2) * torch.tensor([width, height], dtype=torch.float32)
    return image, Keypoints(points, bounds=(height, width))


def main():
    args = parse_arguments()
    config_path = args.pop('config')

    # --- 1. 配置与日志 ---
    setup_logging(log_dir=None)
    config = setup_config(yaml_config_path=config_path, cmd_args=args)
    setup_logging(
        log_dir=config.logging.log_dir,
        console_level=config.logging.console_level,
        file_level=config.logging.file_level
    )
    seed_everything(config.seed)

    # --- 2. 构造管道 ---
    pipeline = pipeline_from_config(config.augmentation.to_dict())
    logger.info(f"增强管道: {pipeline!r}")
    logger.debug(f"管道配置: {pipeline_to_config(pipeline)}")

    # --- 3. 同步增强 ---
    height, width = config.demo.input_size
    image, keypoints = make_sample(height, width, config.demo.num_keypoints)
    out_image, out_keypoints = apply(pipeline, (image, keypoints))

    image_data, point_data = itemdata((out_image, out_keypoints))
    logger.info("=" * 60)
    logger.info(f"输入图像尺寸: {tuple(image.data.shape)} -> 输出: {tuple(image_data.shape)}")
    logger.info(f"关键点边界: {keypoints.bounds} -> {out_keypoints.bounds}")
    logger.info(f"输出关键点:\n{point_data}")
    logger.info("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
