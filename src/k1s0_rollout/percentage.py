"""パーセンテージ計算"""

from __future__ import annotations

import math
from typing import Protocol

import mmh3

# 小数点以下 4 桁のパーセント (20% = 200000)
MAX_PERCENTAGE = 1_000_000


class PercentageCalculator(Protocol):
    """バケッティングキーとフィーチャー ID からパーセンテージを決める。"""

    def determine_client_percentage(self, percentage_key: str, feature_id: str) -> int: ...


class Murmur3PercentageCalculator:
    """murmur3 (seed 0) による決定的なパーセンテージ計算。

    他言語の SDK と同じキーに対して同じ値を返す。戻り値は
    0 以上 MAX_PERCENTAGE 未満。
    """

    def __init__(self, seed: int = 0) -> None:
        self._seed = seed

    def determine_client_percentage(self, percentage_key: str, feature_id: str) -> int:
        # 孤立サロゲートを含むキーもバイト列にしてから渡す
        data = (percentage_key + feature_id).encode("utf-8", "surrogatepass")
        hashed = mmh3.hash(data, self._seed, signed=False)
        ratio = hashed / 2**32
        return math.floor(MAX_PERCENTAGE * ratio)
