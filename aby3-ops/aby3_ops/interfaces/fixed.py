from __future__ import annotations

from typing import Protocol, Union, runtime_checkable
from .types import Tensor, Shape
from .boolean import IBoolShare


@runtime_checkable
class IFixedShare(Protocol):
    """固定小数点の秘密分散テンソル(外部プリミティブ)
    - 論理値 = Σ shares を精度 F の符号付き固定小数点として解釈
    - 全演算は呼び出し側が用意した out に書き込む(1演算 = 1プリミティブ呼び出し)
    - mul の rhs は秘密値(IFixedShare)または公開の固定小数点 int64 テンソル
    """
    @property
    def shape(self) -> Shape: ...
    def add(self, rhs: "IFixedShare", out: "IFixedShare") -> None: ...
    def sub(self, rhs: "IFixedShare", out: "IFixedShare") -> None: ...
    def negative(self, out: "IFixedShare") -> None: ...
    def sum(self, out: "IFixedShare") -> None: ...
    def mul(self, rhs: Union["IFixedShare", Tensor], out: "IFixedShare") -> None: ...
    def mat_mul(self, rhs: "IFixedShare", out: "IFixedShare") -> None: ...
    def relu(self, out: "IFixedShare") -> None: ...
    def sigmoid(self, out: "IFixedShare") -> None: ...
    def softmax(self, out: "IFixedShare") -> None: ...
    # 比較: rhs は公開の固定小数点テンソル、結果は BoolShare に書き込む
    def gt(self, rhs: Tensor, out: IBoolShare) -> None: ...
    def lt(self, rhs: Tensor, out: IBoolShare) -> None: ...
    def eq(self, rhs: Tensor, out: IBoolShare) -> None: ...
