"""
固定小数点コーデック: 共有レイアウト ⇄ FixedShare、平文 ⇄ 固定小数点
====================================================================

目的
----
- 外部から見える共有テンソル(先頭次元 2)を、自パーティの2シェアに分解して
  FixedShare を構築する(コピーせずスライスのビューを渡す)。
- 公開定数・公開比較値を、全パーティで同一の固定小数点整数に符号化する。

数式
----
- 符号化: `enc(v) = round(v * 2^F)` (int64、round は偶数丸め)
- 復号:   `dec(x) = x / 2^F`
- 表現範囲: `|v * 2^F| < 2^63`。超えたら EncodingOverflow(wrap しない)

注意
----
- 精度 F はコーデック構築時に一度だけ決まる(演算ごとの引数にはしない)。
  異なる F で符号化された値を混ぜないための単一設定点。
"""
from __future__ import annotations
import logging
from typing import Optional, Sequence, Tuple, Union

import torch

from ..errors import ConfigurationError, EncodingOverflow, LayoutViolation
from ..interfaces import IFixedShare, IShareEngine, OperandInfo, SharePair, Shape, Tensor, SHARES_PER_PARTY

logger = logging.getLogger(__name__)

# int64 の表現上限(float64 で正確に表せる)
_INT64_BOUND = 2.0 ** 63
MAX_SCALING_FACTOR = 62


class FixedPointCodec:
    """共有レイアウトと固定小数点の相互変換

    Parameters
    ----------
    scaling_factor : int
        小数部ビット数 F (1..62)。
    engine : IShareEngine
        FixedShare を構築する外部エンジン。
    """

    def __init__(self, *, scaling_factor: int, engine: IShareEngine) -> None:
        F = int(scaling_factor)
        if not 1 <= F <= MAX_SCALING_FACTOR:
            raise ConfigurationError(f"scaling_factor must be in [1, {MAX_SCALING_FACTOR}], got {scaling_factor}")
        self.scaling_factor = F
        self.engine = engine

    @property
    def scale(self) -> float:
        """2^F"""
        return float(2 ** self.scaling_factor)

    # ------------------------------------------------------------------
    # 共有レイアウト
    # ------------------------------------------------------------------
    def split(self, tensor: Tensor, *, op: str = "unpack", arg: str = "op") -> SharePair:
        """先頭次元 2 を検査して (share0, share1) のビューを返す"""
        shape = tuple(tensor.shape)
        if len(shape) == 0 or shape[0] != SHARES_PER_PARTY:
            logger.warning("layout violation in %s: %s has shape %s", op, arg, list(shape))
            raise LayoutViolation(op=op, arg=arg, shape=shape)
        return tensor[0], tensor[1]

    def unpack(self, tensor: Tensor, *, op: str = "unpack", arg: str = "op") -> IFixedShare:
        return self.engine.fixed(self.split(tensor, op=op, arg=arg))

    def unpack_all(self, opname: str, **tensors: Tensor) -> Tuple[IFixedShare, ...]:
        """全オペランドのレイアウトを先に検査してから、まとめて FixedShare を構築する"""
        pairs = [self.split(t, op=opname, arg=name) for name, t in tensors.items()]
        return tuple(self.engine.fixed(p) for p in pairs)

    def pack(self, share0: Tensor, share1: Tensor) -> Tensor:
        """2つの生シェアを共有レイアウト [2, ...] に詰める"""
        if share0.shape != share1.shape:
            raise LayoutViolation(op="pack", arg="share1", shape=tuple(share1.shape),
                                  operands=(OperandInfo("share0", tuple(share0.shape)),
                                            OperandInfo("share1", tuple(share1.shape))))
        return torch.stack((share0, share1)).to(torch.int64)

    # ------------------------------------------------------------------
    # 固定小数点(公開値のみ。秘匿性なし、全パーティで同一)
    # ------------------------------------------------------------------
    def _encode(self, x: Tensor, *, op: str, original: object) -> Tensor:
        scaled = torch.round(x.to(torch.float64) * self.scale)
        if not bool(torch.isfinite(scaled).all()) or bool((scaled.abs() >= _INT64_BOUND).any()):
            logger.warning("encoding overflow in %s at F=%d", op, self.scaling_factor)
            raise EncodingOverflow(original, scaling_factor=self.scaling_factor, op=op,
                                   operands=(OperandInfo("value", tuple(x.shape)),))
        return scaled.to(torch.int64)

    def encode_constant(self, value: float, shape: Union[Shape, Sequence[int]], *,
                        device: Optional[Union[str, torch.device]] = None) -> Tensor:
        """スカラー定数を round(value * 2^F) にして shape へブロードキャスト"""
        x = torch.full(tuple(shape), float(value), dtype=torch.float64, device=device)
        return self._encode(x, op="encode_constant", original=value)

    def decode_comparand(self, tensor: Tensor) -> Tensor:
        """浮動小数の公開比較値を同じ固定小数点に符号化する"""
        return self._encode(tensor, op="decode_comparand", original=f"comparand{list(tensor.shape)}")

    def decode(self, tensor: Tensor) -> Tensor:
        """固定小数点 int64 → float64"""
        return tensor.to(torch.float64) / self.scale


__all__ = ["FixedPointCodec", "MAX_SCALING_FACTOR"]
