from .codec import FixedPointCodec, MAX_SCALING_FACTOR
from .comparison import Predicate, PREDICATES, ComparisonProtocol, check_binary, complement_
from .operators import Aby3Operators


__all__ = [
"FixedPointCodec", "MAX_SCALING_FACTOR",
"Predicate", "PREDICATES", "ComparisonProtocol", "check_binary", "complement_",
"Aby3Operators",
]
