#!/usr/bin/python
# -*- coding:utf-8 -*-
"""
Created on 2025/11/1 21:45
@author  : William_Trouvaille
@function: 随机数生成器辅助函数
@detail:
    本文件部分功能源自 PyTorch Lightning 项目
    原始许可证: Apache License 2.0
    原始版权: Copyright The Lightning AI team.
    原始仓库: https://github.com/Lightning-AI/pytorch-lightning
    源文件:
        - lightning/fabric/utilities/seed.py (随机种子隔离功能)
"""

import random
from contextlib import contextmanager
from typing import Any, Dict, Generator

import numpy as np
import torch
from loguru import logger


def seed_everything(seed: int) -> int:
    """
    同时设置 Python、NumPy 与 PyTorch 的全局随机种子。

    apply 生成随机状态时读取的是 torch 全局随机数生成器，
    固定种子后同一管道在同一输入上的结果可复现。

    返回:
        int: 实际使用的种子
    """
    seed = int(seed)
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
    logger.info(f"全局随机种子已设置为: {seed}")
    return seed


def _collect_rng_states(include_cuda: bool = True) -> Dict[str, Any]:
    """(私有) 收集 torch、torch.cuda、numpy 和 Python 的全局随机状态。"""
    states = {
        "torch": torch.get_rng_state(),
        "python": random.getstate(),
        "numpy": np.random.get_state(),
    }
    if include_cuda and torch.cuda.is_available():
        states["torch.cuda"] = torch.cuda.get_rng_state_all()
    return states


def _set_rng_states(rng_state_dict: Dict[str, Any]) -> None:
    """(私有) 恢复 _collect_rng_states 收集到的全局随机状态。"""
    torch.set_rng_state(rng_state_dict["torch"])
    if "torch.cuda" in rng_state_dict and torch.cuda.is_available():
        torch.cuda.set_rng_state_all(rng_state_dict["torch.cuda"])
    np.random.set_state(rng_state_dict["numpy"])
    random.setstate(rng_state_dict["python"])


@contextmanager
def isolate_rng(include_cuda: bool = True) -> Generator[None, None, None]:
    """
    上下文管理器：退出时把全局随机状态恢复为进入前的状态。

    用于在不干扰外部随机序列的前提下生成随机状态，例如复现某一次增强:

        >>> with isolate_rng():
        ...     torch.manual_seed(0)
        ...     randstate = pipeline.get_random_state()

    参数:
        include_cuda (bool): 是否同时隔离 `torch.cuda` 随机状态。
                            在 fork 进程中禁止 CUDA 重新初始化时，应设置为 False。
    """
    states = _collect_rng_states(include_cuda)
    try:
        yield
    finally:
        _set_rng_states(states)
