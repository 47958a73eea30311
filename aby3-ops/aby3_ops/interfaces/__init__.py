from .types import PartyId, Shape, Tensor, SharePair, OperandInfo, NUM_PARTIES, SHARES_PER_PARTY
from .boolean import IBoolShare
from .fixed import IFixedShare
from .engine import IShareEngine, ITensorFactory
from .operators import IMpcOperators


__all__ = [
"PartyId", "Shape", "Tensor", "SharePair", "OperandInfo", "NUM_PARTIES", "SHARES_PER_PARTY",
"IBoolShare", "IFixedShare", "IShareEngine", "ITensorFactory", "IMpcOperators",
]
