# 共通の型・データ構造

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import torch

PartyId = int   # 参加者番号(0, 1, 2)
Shape = Tuple[int, ...]

Tensor = torch.Tensor

# 1パーティが保持する2つの生シェア(順序付き)
SharePair = Tuple[Tensor, Tensor]

NUM_PARTIES = 3     # 複製秘密分散(replicated)のパーティ数
SHARES_PER_PARTY = 2


@dataclass(frozen=True)
class OperandInfo:
    """エラー報告・ログ用のオペランド情報
    - name : 引数名("lhs", "rhs", "out" など)
    - shape: テンソル形状(共有レイアウトなら先頭次元 2 を含む)
    """
    name: str
    shape: Shape

    def __str__(self) -> str:
        return f"{self.name}{list(self.shape)}"
