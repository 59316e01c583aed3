"""Dataset and vector readers."""

from .dataset import parse_vector, read_training_set

__all__ = ["parse_vector", "read_training_set"]
