from .errors import Aby3Error, ConfigurationError, LayoutViolation, PrimitiveFailure, NonBinaryReveal, EncodingOverflow
from .aby3 import Aby3Operators, FixedPointCodec
from .context import MpcComponents, MpcContext, TorchTensorFactory
from .factory import FactoryConfig, ProtocolFactory, register_protocol, available_protocols

__version__ = "0.1.0"


__all__ = [
"Aby3Error", "ConfigurationError", "LayoutViolation", "PrimitiveFailure", "NonBinaryReveal", "EncodingOverflow",
"Aby3Operators", "FixedPointCodec",
"MpcComponents", "MpcContext", "TorchTensorFactory",
"FactoryConfig", "ProtocolFactory", "register_protocol", "available_protocols",
]
