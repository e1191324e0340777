import random
import string
from typing import Optional

from abifuzz.abi_types import (
    AbiAddress,
    AbiBytes,
    AbiFixedBytes,
    AbiInt,
    AbiString,
)
from abifuzz.config import DEFAULT_GENERATOR_CONFIG, GeneratorConfig, MutationConfig
from abifuzz.generator.base_value_generator import BaseValueGenerator
from abifuzz.values import Address

STRING_ALPHABET = string.ascii_letters + string.digits


class RandomValueGenerator(BaseValueGenerator):
    """Draws every value uniformly within the configured bounds.

    There is no notion of an existing value here: the mutate operations
    simply draw a fresh value of the same type.
    """

    def __init__(
        self,
        config: GeneratorConfig = DEFAULT_GENERATOR_CONFIG,
        rng: Optional[random.Random] = None,
        mutation_config: Optional[MutationConfig] = None,
    ):
        super().__init__(mutation_config or MutationConfig(generator=config), rng)

    def random_string(self, length: int) -> str:
        return "".join(self.rng.choice(STRING_ALPHABET) for _ in range(length))

    def generate_address(self, _typ: AbiAddress) -> Address:
        return Address(self.rng.randbytes(20))

    def generate_string(self, typ: AbiString) -> str:
        lo, hi = self.config.string_bounds(typ.max_length)
        return self.random_string(self.rng.randint(lo, hi))

    def generate_bytes(self, typ: AbiBytes) -> bytes:
        lo, hi = self.config.bytes_bounds(typ.max_length)
        return self.rng.randbytes(self.rng.randint(lo, hi))

    def generate_fixed_bytes(self, typ: AbiFixedBytes) -> bytes:
        return self.rng.randbytes(typ.size)

    def generate_integer(self, typ: AbiInt) -> int:
        lo, hi = typ.bounds
        return self.rng.randint(lo, hi)

    def mutate_address(self, _value: str, typ: AbiAddress) -> Address:
        return self.generate_address(typ)

    def mutate_string(self, _value: str, typ: AbiString) -> str:
        return self.generate_string(typ)

    def mutate_bytes(self, _value: bytes, typ: AbiBytes) -> bytes:
        return self.generate_bytes(typ)

    def mutate_fixed_bytes(self, _value: bytes, typ: AbiFixedBytes) -> bytes:
        return self.generate_fixed_bytes(typ)

    def mutate_integer(self, _value: int, typ: AbiInt) -> int:
        return self.generate_integer(typ)
