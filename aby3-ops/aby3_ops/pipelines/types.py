from __future__ import annotations
from dataclasses import dataclass
from ..interfaces import Tensor

@dataclass(frozen=True)
class DenseForwardInputs:
    """全結合層 順伝播の入力DTO (すべて共有レイアウト)
    - x : [2, n, k] 入力
    - w : [2, k, m] 重み
    - b : [2, n, m] バイアス(z と同形)
    """
    x: Tensor
    w: Tensor
    b: Tensor

@dataclass(frozen=True)
class DenseForwardOutputs:
    """順伝播の出力DTO"""
    x: Tensor    # 逆伝播用に保持
    w: Tensor
    z: Tensor    # x @ w + b
    y: Tensor    # act(z)

@dataclass(frozen=True)
class DenseBackwardOutputs:
    """逆伝播の出力DTO"""
    dz: Tensor   # (y > 0) * dy (relu) / dy (identity)
    dw: Tensor   # x^T @ dz
    db: Tensor   # dz
    dx: Tensor   # dz @ w^T
