from __future__ import annotations
import logging
from typing import Tuple

from ..context import MpcContext
from ..interfaces import Tensor
from .types import DenseForwardInputs, DenseForwardOutputs, DenseBackwardOutputs

logger = logging.getLogger(__name__)

FORWARD_ACTIVATIONS = ("relu", "sigmoid", "softmax", "identity")
# 逆伝播は秘密分散のまま微分できる活性のみ(relu_grad / 恒等)
TRAINABLE_ACTIVATIONS = ("relu", "identity")


def _transpose(t: Tensor) -> Tensor:
    # 共有レイアウトの先頭次元(シェア軸)は動かさない
    return t.transpose(-1, -2).contiguous()


class DenseForwardCore:
    """* 秘密分散のまま全結合層の順伝播を"実行"する(推論用)
    責務:
        - z = x @ w + b, y = act(z)  (act ∈ relu / sigmoid / softmax / identity)
    """
    activations: Tuple[str, ...] = FORWARD_ACTIVATIONS

    def __init__(self, *, ctx: MpcContext, activation: str = "relu"):
        if activation not in self.activations:
            raise ValueError(
                f"{type(self).__name__} activation must be one of {self.activations}, got {activation!r}")
        self.ctx = ctx
        self.ops = ctx.operators
        self.activation = activation

    @staticmethod
    def _dims(x: Tensor, w: Tensor) -> Tuple[int, int, int]:
        if x.dim() != 3 or w.dim() != 3:
            raise ValueError(f"dense expects share-packed 2-D operands, got x{list(x.shape)} w{list(w.shape)}")
        n, k = int(x.shape[1]), int(x.shape[2])
        if int(w.shape[1]) != k:
            raise ValueError(f"inner dimensions differ: x{list(x.shape)} w{list(w.shape)}")
        return n, k, int(w.shape[2])

    def forward(self, inp: DenseForwardInputs) -> DenseForwardOutputs:
        n, k, m = self._dims(inp.x, inp.w)
        xw = self.ctx.empty_shared((n, m))
        self.ops.matmul(inp.x, inp.w, xw)
        z = self.ctx.empty_shared((n, m))
        self.ops.add(xw, inp.b, z)

        if self.activation == "identity":
            y = z
        else:
            y = self.ctx.empty_shared((n, m))
            getattr(self.ops, self.activation)(z, y)
        logger.debug("dense forward n=%d k=%d m=%d act=%s", n, k, m, self.activation)
        return DenseForwardOutputs(x=inp.x, w=inp.w, z=z, y=y)


class DenseCore(DenseForwardCore):
    """* 学習用の全結合層(順伝播 + 逆伝播)
    責務:
        - 逆伝播: relu は relu_grad(比較 + マスク乗算)で dz を得る。勾配を平文で計算しない
        - 活性は relu / identity のみ受け付ける(sigmoid / softmax は DenseForwardCore)
    """
    activations = TRAINABLE_ACTIVATIONS

    def backward(self, fwd: DenseForwardOutputs, dy: Tensor) -> DenseBackwardOutputs:
        n, k, m = self._dims(fwd.x, fwd.w)
        if self.activation == "relu":
            dz = self.ctx.empty_shared((n, m))
            self.ops.relu_grad(fwd.y, dy, dz)
        else:
            dz = dy

        dw = self.ctx.empty_shared((k, m))
        self.ops.matmul(_transpose(fwd.x), dz, dw)
        dx = self.ctx.empty_shared((n, k))
        self.ops.matmul(dz, _transpose(fwd.w), dx)
        logger.debug("dense backward n=%d k=%d m=%d act=%s", n, k, m, self.activation)
        return DenseBackwardOutputs(dz=dz, dw=dw, db=dz, dx=dx)


__all__ = ["DenseForwardCore", "DenseCore", "FORWARD_ACTIVATIONS", "TRAINABLE_ACTIVATIONS"]
