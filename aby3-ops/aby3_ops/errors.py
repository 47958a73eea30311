"""
aby3-ops の例外階層
===================

- すべての例外は Aby3Error を根とする。
- どの例外も演算名とオペランド形状を持ち、パーティ間の非同期化(desync)を診断できるようにする。
- 例外は握りつぶさず、その演算を中断して呼び出し側へ伝播する(リトライなし)。
"""
from __future__ import annotations
from typing import Iterable, Optional, Sequence

from .interfaces import OperandInfo


def _fmt_operands(operands: Iterable[OperandInfo]) -> str:
    return ", ".join(str(o) for o in operands)


class Aby3Error(Exception):
    """aby3-ops の全エラーの基底"""

    def __init__(self, message: str, *, op: Optional[str] = None,
                 operands: Sequence[OperandInfo] = ()) -> None:
        self.op = op
        self.operands = tuple(operands)
        if op is not None:
            message = f"[{op}({_fmt_operands(self.operands)})] {message}"
        super().__init__(message)


class ConfigurationError(Aby3Error):
    """設定(精度 F、プロトコル名など)の誤り"""
    pass


class LayoutViolation(Aby3Error):
    """共有テンソルの先頭次元が 2 でない(前提条件違反、致命的)"""

    def __init__(self, *, op: str, arg: str, shape: Sequence[int],
                 operands: Sequence[OperandInfo] = ()) -> None:
        self.arg = arg
        self.shape = tuple(shape)
        super().__init__(
            f"operand '{arg}' must be share-packed with leading dimension 2, got shape {list(self.shape)}",
            op=op, operands=operands or (OperandInfo(arg, self.shape),),
        )


class PrimitiveFailure(Aby3Error):
    """外部プリミティブ(算術/ブール/比較)が失敗した。元例外は __cause__ に残る"""
    pass


class NonBinaryReveal(PrimitiveFailure):
    """reveal 結果に 0/1 以外の値が含まれていた"""
    pass


class EncodingOverflow(ConfigurationError):
    """公開定数の固定小数点表現が int64 の範囲を超える(黙って wrap しない)"""

    def __init__(self, value: object, *, scaling_factor: int, op: Optional[str] = None,
                 operands: Sequence[OperandInfo] = ()) -> None:
        self.value = value
        self.scaling_factor = int(scaling_factor)
        super().__init__(
            f"value {value!r} is not representable as int64 fixed point at F={self.scaling_factor}",
            op=op, operands=operands,
        )


__all__ = [
    "Aby3Error", "ConfigurationError", "LayoutViolation", "PrimitiveFailure",
    "NonBinaryReveal", "EncodingOverflow",
]
