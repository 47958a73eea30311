from __future__ import annotations

from typing import Protocol, TYPE_CHECKING, runtime_checkable
from .types import Tensor

if TYPE_CHECKING:
    from .fixed import IFixedShare


@runtime_checkable
class IBoolShare(Protocol):
    """ブール秘密分散テンソル(外部プリミティブ)
    - 2つの生 int64 バッファ上に構築され、比較1回の間だけ生存する
    - reveal が秘匿性を意図的に破る唯一の地点
    """
    def mul(self, rhs: "IFixedShare", out: "IFixedShare") -> None: ...
    """bool × fixed の乗算(マスク適用)"""
    def reveal(self, out: Tensor) -> None: ...
    """平文の 0/1 を out に書き込む"""
