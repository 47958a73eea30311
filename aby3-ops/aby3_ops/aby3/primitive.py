"""外部プリミティブ呼び出しの共通ラッパ(失敗は PrimitiveFailure として伝播)"""
from __future__ import annotations
import logging
from typing import Any, Callable, Sequence

from ..errors import Aby3Error, PrimitiveFailure
from ..interfaces import OperandInfo, Tensor

logger = logging.getLogger(__name__)


def describe(**tensors: Tensor) -> tuple:
    """ログ・エラー用に (引数名, 形状) を並べる"""
    return tuple(OperandInfo(name, tuple(t.shape)) for name, t in tensors.items())


def invoke(op: str, operands: Sequence[OperandInfo], fn: Callable[..., Any], *args: Any) -> None:
    """プリミティブを1回だけ呼ぶ。リトライしない(再実行はパーティ間の非同期化を招く)"""
    try:
        fn(*args)
    except Aby3Error:
        raise
    except Exception as exc:
        name = getattr(fn, "__name__", repr(fn))
        logger.error("primitive %s failed in %s(%s): %s", name, op,
                     ", ".join(str(o) for o in operands), exc)
        raise PrimitiveFailure(f"primitive '{name}' failed: {exc}", op=op, operands=operands) from exc


__all__ = ["describe", "invoke"]
