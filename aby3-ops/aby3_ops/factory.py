from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from aby3_ops.aby3.codec import FixedPointCodec, MAX_SCALING_FACTOR
from aby3_ops.aby3.operators import Aby3Operators
from aby3_ops.context import MpcComponents, MpcContext, TorchTensorFactory
from aby3_ops.errors import ConfigurationError
from aby3_ops.interfaces import IMpcOperators, IShareEngine, ITensorFactory, PartyId

logger = logging.getLogger(__name__)

# プロトコル名 -> 演算子ビルダ
OperatorsBuilder = Callable[[MpcComponents, "FactoryConfig"], IMpcOperators]
_PROTOCOLS: Dict[str, OperatorsBuilder] = {}


def register_protocol(name: str, builder: OperatorsBuilder) -> None:
    """プロトコル名に演算子ビルダを登録(同名は上書き)"""
    key = name.lower()
    if key in _PROTOCOLS:
        logger.info("overriding mpc protocol %r", key)
    _PROTOCOLS[key] = builder


def available_protocols() -> List[str]:
    return sorted(_PROTOCOLS)


def _build_aby3(comps: MpcComponents, cfg: "FactoryConfig") -> IMpcOperators:
    return Aby3Operators(codec=comps.codec, tensor_factory=comps.tensor_factory,
                         check_reveal=cfg.check_reveal)


register_protocol("aby3", _build_aby3)


class Aby3Settings(BaseSettings):
    """ABY3_ 接頭辞の環境変数(型検証つき)"""

    scaling_factor: int = Field(
        default=16,
        ge=1,
        le=MAX_SCALING_FACTOR,
        description="Fractional bits F of the fixed-point encoding",
    )
    protocol: str = Field(
        default="aby3",
        min_length=1,
        description="Registered mpc protocol name",
    )
    device: Optional[str] = Field(
        default=None,
        description="Device for scratch buffers (cpu when unset)",
    )
    check_reveal: bool = Field(
        default=True,
        description="Check that revealed predicates are 0/1",
    )

    model_config = SettingsConfigDict(
        env_prefix="ABY3_",
        extra="ignore",
    )


@dataclass
class FactoryConfig:
    scaling_factor: int = 16        # 固定小数点の小数部ビット数 F (全体で1つ)
    protocol: str = "aby3"          # 登録済みプロトコル名
    device: Optional[str] = None    # 一時バッファのデバイス(None なら cpu)
    check_reveal: bool = True       # 比較 reveal 結果の 0/1 検査

    def __post_init__(self) -> None:
        if not 1 <= int(self.scaling_factor) <= MAX_SCALING_FACTOR:
            raise ConfigurationError(
                f"scaling_factor must be in [1, {MAX_SCALING_FACTOR}], got {self.scaling_factor}")
        self.scaling_factor = int(self.scaling_factor)

    @classmethod
    def from_env(cls) -> "FactoryConfig":
        """環境変数 ABY3_SCALING_FACTOR / ABY3_PROTOCOL / ABY3_DEVICE / ABY3_CHECK_REVEAL から構築
        - 型の合わない値(例: CHECK_REVEAL=ture)は黙って既定値にせず ConfigurationError
        """
        try:
            s = Aby3Settings()
        except ValidationError as exc:
            raise ConfigurationError(f"invalid ABY3_* environment: {exc}") from exc
        return cls(scaling_factor=s.scaling_factor, protocol=s.protocol,
                   device=s.device, check_reveal=s.check_reveal)


class ProtocolFactory:
    def __init__(self, cfg: Optional[FactoryConfig] = None) -> None:
        self.cfg = cfg or FactoryConfig()

    def build(self, engine: IShareEngine, *, party_id: PartyId,
              tensor_factory: Optional[ITensorFactory] = None) -> MpcContext:
        key = self.cfg.protocol.lower()
        if key not in _PROTOCOLS:
            raise ConfigurationError(
                f"unknown mpc protocol {self.cfg.protocol!r}; available: {available_protocols()}")

        codec = FixedPointCodec(scaling_factor=self.cfg.scaling_factor, engine=engine)
        tensors = tensor_factory or TorchTensorFactory(self.cfg.device)
        comps = MpcComponents(codec=codec, tensor_factory=tensors)
        operators = _PROTOCOLS[key](comps, self.cfg)

        ctx = MpcContext(party_id=party_id, components=comps, operators=operators, protocol=key)
        logger.info("built %r", ctx)
        return ctx


__all__ = ["Aby3Settings", "FactoryConfig", "ProtocolFactory", "register_protocol", "available_protocols"]
