"""
Base class for leaf value generation.

Defines the operations the generation and mutation algorithms call for
each leaf kind. Subclasses choose the strategy (uniform random, corpus
seeded, ...).
"""

import random
from abc import ABC, abstractmethod
from typing import Optional

from abifuzz.abi_types import (
    AbiAddress,
    AbiBool,
    AbiBytes,
    AbiFixedBytes,
    AbiInt,
    AbiSlice,
    AbiString,
)
from abifuzz.config import MutationConfig
from abifuzz.value_set import ValueSet
from abifuzz.values import Address


class BaseValueGenerator(ABC):
    """Leaf generation and perturbation operations for ABI values."""

    value_set: Optional[ValueSet] = None

    def __init__(self, config: MutationConfig, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.mutation_config = config

    @property
    def config(self):
        return self.mutation_config.generator

    def generate_bool(self, _typ: AbiBool) -> bool:
        return self.rng.choice([True, False])

    def mutate_bool(self, value: bool, _typ: AbiBool) -> bool:
        return not value

    def generate_array_length(self, typ: AbiSlice) -> int:
        lo, hi = self.config.array_bounds(typ.max_length)
        return self.rng.randint(lo, hi)

    @abstractmethod
    def generate_address(self, typ: AbiAddress) -> Address: ...

    @abstractmethod
    def generate_string(self, typ: AbiString) -> str: ...

    @abstractmethod
    def generate_bytes(self, typ: AbiBytes) -> bytes: ...

    @abstractmethod
    def generate_fixed_bytes(self, typ: AbiFixedBytes) -> bytes: ...

    @abstractmethod
    def generate_integer(self, typ: AbiInt) -> int: ...

    @abstractmethod
    def mutate_address(self, value: str, typ: AbiAddress) -> Address: ...

    @abstractmethod
    def mutate_string(self, value: str, typ: AbiString) -> str: ...

    @abstractmethod
    def mutate_bytes(self, value: bytes, typ: AbiBytes) -> bytes: ...

    @abstractmethod
    def mutate_fixed_bytes(self, value: bytes, typ: AbiFixedBytes) -> bytes: ...

    @abstractmethod
    def mutate_integer(self, value: int, typ: AbiInt) -> int: ...
