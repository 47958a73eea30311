from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union

import torch

from aby3_ops.aby3.codec import FixedPointCodec
from aby3_ops.errors import ConfigurationError
from aby3_ops.interfaces import IMpcOperators, ITensorFactory, PartyId, Shape, Tensor, NUM_PARTIES

# ------------------------------------------------------------------
# 目的
# -------------------------------------------------------------------
# - 1プロトコルインスタンスの実行文脈(パーティ番号・エンジン・コーデック・テンソル確保)を
#   明示的なオブジェクトとして束ねる。グローバル状態は持たない
# - 複数の独立したインスタンスを同一プロセス内で共存・個別にテストできる
# ---------------------------------------------------------------------


class TorchTensorFactory(ITensorFactory):
    """ホスト側のテンソル確保(torch.zeros, int64)
    - 呼び出しごとに新しいゼロ初期化バッファ(プールなし)
    """
    def __init__(self, device: Optional[Union[str, torch.device]] = None) -> None:
        self.device = torch.device(device) if device is not None else torch.device("cpu")

    def create_int64(self, shape: Shape) -> Tensor:
        return torch.zeros(tuple(shape), dtype=torch.int64, device=self.device)


@dataclass
class MpcComponents:
    """プロトコルを構成するコンポネント束

    必須:
        - codec: 共有レイアウト分解 + 固定小数点符号化(精度 F と外部エンジンを保持, codec.engine)
        - tensor_factory: 一時バッファ・出力バッファの確保
    """
    codec: FixedPointCodec
    tensor_factory: ITensorFactory


class MpcContext:
    """1パーティ分の実行文脈

    不変条件(Invariants)
    ----------------------
    - party_id ∈ {0, 1, 2}
    - operators は party_id で分岐しない(全パーティで同じ呼び出し列)
    """
    def __init__(self, *, party_id: PartyId, components: MpcComponents, operators: IMpcOperators,
                 protocol: str = "aby3") -> None:
        if not 0 <= int(party_id) < NUM_PARTIES:
            raise ConfigurationError(f"party_id must be in [0, {NUM_PARTIES}), got {party_id}")
        self.party_id = int(party_id)
        self.c = components
        self.operators = operators
        self.protocol = protocol

    @property
    def scaling_factor(self) -> int:
        return self.c.codec.scaling_factor

    def empty_shared(self, shape: Shape) -> Tensor:
        """共有レイアウト [2, *shape] の出力バッファを確保"""
        return self.c.tensor_factory.create_int64((2, *tuple(shape)))

    def empty_plain(self, shape: Shape) -> Tensor:
        """比較結果(平文 0/1)用の出力バッファを確保"""
        return self.c.tensor_factory.create_int64(tuple(shape))

    def __repr__(self) -> str:
        return f"MpcContext(protocol={self.protocol!r}, party_id={self.party_id}, F={self.scaling_factor})"


__all__ = ["TorchTensorFactory", "MpcComponents", "MpcContext"]
