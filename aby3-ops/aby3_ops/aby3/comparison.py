"""
比較 + reveal プロトコル
========================

目的
----
- 6つの関係述語 (gt, geq, lt, leq, eq, neq) を、秘密領域の比較プリミティブ
  3種 (gt, lt, eq) と、reveal 後の平文上のブール否定だけで実現する。

手順(基本述語)
----------------
1. lhs を FixedShare に分解(先頭次元 2 を検査)
2. rhs(浮動小数の公開値)を固定小数点に符号化
3. rhs と同形の新しい int64 バッファを2つ確保し BoolShare を構築
4. 比較プリミティブを呼び、BoolShare を out に reveal(平文 0/1)

派生述語(補数)
----------------
- `geq = 1 - lt`, `leq = 1 - gt`, `neq = 1 - eq`
- 否定は reveal 済みの平文に対するローカル演算のみ。独自の秘密領域比較は行わない。

注意
----
- 一時バッファは比較ごとに新規確保(キャッシュ・プールなし)。プリミティブは
  スクラッチ領域がゼロ初期化・非エイリアスであることを前提とする。
- eq は固定小数点表現のビット一致。2^-F 未満の差は等しいとみなされる。
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Sequence

import torch

from ..errors import NonBinaryReveal
from ..interfaces import ITensorFactory, OperandInfo, Tensor
from .codec import FixedPointCodec
from .primitive import describe, invoke

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Predicate:
    """関係述語の定義
    - primitive : 秘密領域で実行する比較 ("gt" | "lt" | "eq")
    - complement: True なら reveal 後に 1 - b をとる
    """
    name: str
    primitive: str
    complement: bool = False


PREDICATES: Dict[str, Predicate] = {
    "gt": Predicate("gt", "gt"),
    "lt": Predicate("lt", "lt"),
    "eq": Predicate("eq", "eq"),
    "geq": Predicate("geq", "lt", complement=True),
    "leq": Predicate("leq", "gt", complement=True),
    "neq": Predicate("neq", "eq", complement=True),
}


def check_binary(revealed: Tensor, *, op: str, operands: Sequence[OperandInfo] = ()) -> None:
    """reveal 結果が 0/1 のみであることを検査"""
    ok = (revealed == 0) | (revealed == 1)
    if not bool(ok.all()):
        bad = torch.unique(revealed[~ok]).tolist()
        logger.error("non-binary reveal in %s: %s", op, bad[:8])
        raise NonBinaryReveal(f"revealed predicate contains values outside {{0, 1}}: {bad[:8]}",
                              op=op, operands=operands)


def complement_(revealed: Tensor) -> Tensor:
    """平文 0/1 の否定をその場で書き込む"""
    revealed.copy_(1 - revealed)
    return revealed


class ComparisonProtocol:
    """比較述語の実行器

    Parameters
    ----------
    codec : FixedPointCodec
        lhs の分解と rhs の符号化。
    tensor_factory : ITensorFactory
        BoolShare 用の一時バッファ確保。
    check_reveal : bool
        reveal 結果が 0/1 であることを毎回検査するか。
    """

    def __init__(self, *, codec: FixedPointCodec, tensor_factory: ITensorFactory,
                 check_reveal: bool = True) -> None:
        self.codec = codec
        self.tensors = tensor_factory
        self.check_reveal = bool(check_reveal)

    def run(self, name: str, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor:
        pred = PREDICATES[name]
        operands = describe(lhs=lhs, rhs=rhs, out=out)
        logger.debug("%s -> %s%s", name, pred.primitive, " (complement)" if pred.complement else "")

        self.reveal(pred.primitive, lhs, rhs, out, op=name, operands=operands)
        if self.check_reveal:
            check_binary(out, op=name, operands=operands)
        if pred.complement:
            complement_(out)
        return out

    def reveal(self, primitive: str, lhs: Tensor, rhs: Tensor, out: Tensor, *,
               op: str, operands: Sequence[OperandInfo]) -> Tensor:
        """基本述語を1回だけ秘密領域で評価し、out に reveal する"""
        lhs_ = self.codec.unpack(lhs, op=op, arg="lhs")
        rhs_ = self.codec.decode_comparand(rhs)

        shape = tuple(rhs_.shape)
        tmp0 = self.tensors.create_int64(shape)
        tmp1 = self.tensors.create_int64(shape)
        bool_out = self.codec.engine.boolean((tmp0, tmp1))

        invoke(op, operands, getattr(lhs_, primitive), rhs_, bool_out)
        invoke(op, operands, bool_out.reveal, out)
        return out


__all__ = ["Predicate", "PREDICATES", "ComparisonProtocol", "check_binary", "complement_"]
