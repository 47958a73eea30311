from typing import Protocol, runtime_checkable
from .types import SharePair, Shape, Tensor
from .fixed import IFixedShare
from .boolean import IBoolShare


@runtime_checkable
class IShareEngine(Protocol):
    """秘密分散エンジン(外部)
    - 順序付きの生シェア2つから FixedShare / BoolShare を構築する
    - 構築はバッファを参照するだけで、コピーしない(out への書き込みは呼び出し側テンソルに届く)
    """
    def fixed(self, shares: SharePair) -> IFixedShare: ...
    def boolean(self, shares: SharePair) -> IBoolShare: ...


@runtime_checkable
class ITensorFactory(Protocol):
    """ホストランタイムのテンソル確保
    - 毎回ゼロ初期化された新しい int64 バッファを返す(プール・再利用なし)
    """
    def create_int64(self, shape: Shape) -> Tensor: ...
