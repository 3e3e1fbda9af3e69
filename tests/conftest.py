"""augkit 测试共用的条目、变换与fixture。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest
import torch

from augkit import Image, Item, Keypoints, Transform


# ========================================================================
# 1. 测试用条目
# ========================================================================

@dataclass(frozen=True)
class Token(Item):
    """载荷为任意Python值的条目，tag 用来检查元数据是否被保留。"""

    data: Any
    tag: str = "meta"


class PlainBox(Item):
    """没有规范data字段的条目。"""

    def __init__(self, value: Any) -> None:
        self.value = value


# ========================================================================
# 2. 测试用变换
# ========================================================================

class AddConst(Transform):
    """确定性变换: data + k。"""

    def __init__(self, k: Any) -> None:
        super().__init__()
        self.k = k
        self.register_config(k=k)

    def apply_item(self, item: Item, randstate: Any = None) -> Item:
        return item.setdata(item.data + self.k)


class StampState(Transform):
    """把本次使用的随机状态编码进输出: data -> (data, randstate)。"""

    def sample_random_state(self) -> int:
        return int(torch.randint(0, 2**30, (1,)).item())

    def apply_item(self, item: Item, randstate: int) -> Item:
        return item.setdata((item.data, randstate))


class RandomOffset(Transform):
    """随机变换: data + randstate。"""

    def sample_random_state(self) -> int:
        return int(torch.randint(0, 2**30, (1,)).item())

    def apply_item(self, item: Item, randstate: int) -> Item:
        return item.setdata(item.data + randstate)


class Failing(Transform):
    def apply_item(self, item: Item, randstate: Any = None) -> Item:
        raise ValueError("boom")


# ========================================================================
# 3. fixtures
# ========================================================================

@pytest.fixture
def token() -> Token:
    return Token(1, tag="sample-7")


@pytest.fixture
def image() -> Image:
    """4x6 的三通道图像，只有 (row=1, col=2) 处为1。"""
    data = torch.zeros(3, 4, 6)
    data[:, 1, 2] = 1.0
    return Image(data)


@pytest.fixture
def keypoints() -> Keypoints:
    """与 image 对齐的关键点，位于亮像素中心 (x=2.5, y=1.5)。"""
    return Keypoints(torch.tensor([[2.5, 1.5], [0.0, 0.0]]), bounds=(4, 6))
