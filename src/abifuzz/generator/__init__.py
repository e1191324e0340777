from .base_value_generator import BaseValueGenerator
from .mutating_generator import MutatingValueGenerator
from .random_generator import RandomValueGenerator

__all__ = [
    "BaseValueGenerator",
    "MutatingValueGenerator",
    "RandomValueGenerator",
]
