"""
ABY3 演算子ディスパッチ層
========================

目的
----
- 抽象テンソル演算(算術・活性化・比較)を、固定小数点の複製秘密分散
  プリミティブへ1対1で振り分ける。
- この層は数値ロジックを持たない。近似精度・通信ラウンドはすべて外部プリミティブ側。

不変条件(Invariants)
----------------------
- 全オペランド(out を含む)の先頭次元 2 を、プリミティブ呼び出し前に検査する。
- 1演算 = 1プリミティブ呼び出し(派生比較は +ローカル否定)。部分結果の再結合なし。
- 分岐はパーティ ID に依存しない。同じ演算名・同じ形状なら全パーティで
  同じ順序・同じ形状でプリミティブを呼ぶ(決定性)。
- out は呼び出し側の所有。書き込むだけで、参照を保持しない。
"""
from __future__ import annotations
import logging

from ..interfaces import IMpcOperators, ITensorFactory, Tensor
from .codec import FixedPointCodec
from .comparison import ComparisonProtocol
from .primitive import describe, invoke

logger = logging.getLogger(__name__)


class Aby3Operators(IMpcOperators):
    """ABY3 プロトコルによる IMpcOperators 実装

    Parameters
    ----------
    codec : FixedPointCodec
        共有レイアウトの分解と公開定数の符号化(精度 F を保持)。
    tensor_factory : ITensorFactory
        比較・relu_grad 用のブール一時バッファ確保。
    check_reveal : bool
        比較結果の 0/1 検査を行うか。
    """

    def __init__(self, *, codec: FixedPointCodec, tensor_factory: ITensorFactory,
                 check_reveal: bool = True) -> None:
        self.codec = codec
        self.tensors = tensor_factory
        self.compare = ComparisonProtocol(codec=codec, tensor_factory=tensor_factory,
                                          check_reveal=check_reveal)

    # ------------------------------------------------------------------
    # 二項演算
    # ------------------------------------------------------------------
    def _binary(self, op: str, method: str, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor:
        operands = describe(lhs=lhs, rhs=rhs, out=out)
        logger.debug("%s %s", op, operands)
        lhs_, rhs_, out_ = self.codec.unpack_all(op, lhs=lhs, rhs=rhs, out=out)
        invoke(op, operands, getattr(lhs_, method), rhs_, out_)
        return out

    def add(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor:
        return self._binary("add", "add", lhs, rhs, out)

    def sub(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor:
        return self._binary("sub", "sub", lhs, rhs, out)

    def mul(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor:
        return self._binary("mul", "mul", lhs, rhs, out)

    def matmul(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor:
        return self._binary("matmul", "mat_mul", lhs, rhs, out)

    # ------------------------------------------------------------------
    # 単項演算・活性化(素通し)
    # ------------------------------------------------------------------
    def _unary(self, op: str, method: str, x: Tensor, out: Tensor) -> Tensor:
        operands = describe(op=x, out=out)
        logger.debug("%s %s", op, operands)
        x_, out_ = self.codec.unpack_all(op, op=x, out=out)
        invoke(op, operands, getattr(x_, method), out_)
        return out

    def neg(self, op: Tensor, out: Tensor) -> Tensor:
        return self._unary("neg", "negative", op, out)

    def sum(self, op: Tensor, out: Tensor) -> Tensor:
        return self._unary("sum", "sum", op, out)

    def relu(self, op: Tensor, out: Tensor) -> Tensor:
        return self._unary("relu", "relu", op, out)

    def sigmoid(self, op: Tensor, out: Tensor) -> Tensor:
        return self._unary("sigmoid", "sigmoid", op, out)

    def softmax(self, op: Tensor, out: Tensor) -> Tensor:
        return self._unary("softmax", "softmax", op, out)

    def scale(self, lhs: Tensor, factor: float, out: Tensor) -> Tensor:
        """公開スカラー倍 = 秘密 × 公開定数テンソルの乗算(専用プリミティブなし)"""
        operands = describe(lhs=lhs, out=out)
        logger.debug("scale %s factor=%s", operands, factor)
        lhs_, out_ = self.codec.unpack_all("scale", lhs=lhs, out=out)
        scale_tensor = self.codec.encode_constant(factor, lhs_.shape, device=lhs.device)
        invoke("scale", operands, lhs_.mul, scale_tensor, out_)
        return out

    # ------------------------------------------------------------------
    # 逆伝播
    # ------------------------------------------------------------------
    def relu_grad(self, y: Tensor, dy: Tensor, dx: Tensor, point: float = 0.0) -> Tensor:
        """dx = (y > point) * dy
        - マスクは BoolShare のまま使い、平文に戻さない
        """
        operands = describe(y=y, dy=dy, dx=dx)
        logger.debug("relu_grad %s point=%s", operands, point)
        y_, dy_, dx_ = self.codec.unpack_all("relu_grad", y=y, dy=dy, dx=dx)

        point_ = self.codec.encode_constant(point, y_.shape, device=y.device)
        shape = tuple(y_.shape)
        tmp0 = self.tensors.create_int64(shape)
        tmp1 = self.tensors.create_int64(shape)
        mask = self.codec.engine.boolean((tmp0, tmp1))

        invoke("relu_grad", operands, y_.gt, point_, mask)
        invoke("relu_grad", operands, mask.mul, dy_, dx_)
        return dx

    # ------------------------------------------------------------------
    # 比較(平文 0/1 を out に reveal)
    # ------------------------------------------------------------------
    def gt(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor:
        return self.compare.run("gt", lhs, rhs, out)

    def geq(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor:
        return self.compare.run("geq", lhs, rhs, out)

    def lt(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor:
        return self.compare.run("lt", lhs, rhs, out)

    def leq(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor:
        return self.compare.run("leq", lhs, rhs, out)

    def eq(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor:
        return self.compare.run("eq", lhs, rhs, out)

    def neq(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor:
        return self.compare.run("neq", lhs, rhs, out)


__all__ = ["Aby3Operators"]
