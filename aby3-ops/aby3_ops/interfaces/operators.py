from typing import Protocol
from .types import Tensor


class IMpcOperators(Protocol):
    """MPC演算子の公開面(ホストフレームワークから呼ばれる)
    - 共有テンソル: 先頭次元 2 (slice 0/1 = 自パーティの2シェア)
    - 出力は呼び出し側が事前確保し、演算子はそこに書き込んで返す
    - 比較系の out は rhs と同形の平文 0/1 テンソル
    """
    def add(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor: ...
    def sub(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor: ...
    def neg(self, op: Tensor, out: Tensor) -> Tensor: ...
    def sum(self, op: Tensor, out: Tensor) -> Tensor: ...
    def mul(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor: ...
    def matmul(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor: ...
    def scale(self, lhs: Tensor, factor: float, out: Tensor) -> Tensor: ...
    def relu(self, op: Tensor, out: Tensor) -> Tensor: ...
    def sigmoid(self, op: Tensor, out: Tensor) -> Tensor: ...
    def softmax(self, op: Tensor, out: Tensor) -> Tensor: ...
    def relu_grad(self, y: Tensor, dy: Tensor, dx: Tensor, point: float = 0.0) -> Tensor: ...
    def gt(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor: ...
    def geq(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor: ...
    def lt(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor: ...
    def leq(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor: ...
    def eq(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor: ...
    def neq(self, lhs: Tensor, rhs: Tensor, out: Tensor) -> Tensor: ...
