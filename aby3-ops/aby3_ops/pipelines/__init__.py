from .types import DenseForwardInputs, DenseForwardOutputs, DenseBackwardOutputs
from .dense_core import DenseForwardCore, DenseCore, FORWARD_ACTIVATIONS, TRAINABLE_ACTIVATIONS


__all__ = [
"DenseForwardInputs", "DenseForwardOutputs", "DenseBackwardOutputs",
"DenseForwardCore", "DenseCore", "FORWARD_ACTIVATIONS", "TRAINABLE_ACTIVATIONS",
]
