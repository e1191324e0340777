"""
Corpus-seeded value generation and leaf perturbation.

Each leaf draw flips a biased coin: on success a previously seen value of
the same type is reused from the `ValueSet`, otherwise a fresh random
value is generated.
"""

import functools
import logging
import random
from typing import Any, Callable, Optional, Tuple, TypeVar

from abifuzz.abi_types import (
    AbiAddress,
    AbiBytes,
    AbiFixedBytes,
    AbiInt,
    AbiString,
)
from abifuzz.config import DEFAULT_MUTATION_CONFIG, MutationConfig
from abifuzz.generator.base_value_generator import BaseValueGenerator
from abifuzz.generator.random_generator import RandomValueGenerator
from abifuzz.value_set import ValueSet
from abifuzz.values import Address, utf8_length, wrap_integer

logger = logging.getLogger(__name__)

S = TypeVar("S", bytes, str)

# Largest additive delta applied by a single integer mutation
SMALL_DELTA = 16
# Largest chunk inserted by a single splice
MAX_SPLICE = 8


@functools.lru_cache(maxsize=None)
def boundary_values(typ: AbiInt) -> Tuple[int, ...]:
    """Get boundary values for an integer type."""
    lo, hi = typ.bounds
    values = {lo, hi, 0, 1, lo + 1, hi - 1}
    if typ.signed:
        values.add(-1)
    for i in range(3, typ.bits):
        pow2 = 2**i
        values.update([pow2, pow2 - 1, pow2 + 1, -pow2, -pow2 + 1])
    return tuple(sorted(v for v in values if lo <= v <= hi))


class MutatingValueGenerator(BaseValueGenerator):
    """Generates values by reusing corpus entries or delegating to random."""

    def __init__(
        self,
        config: MutationConfig = DEFAULT_MUTATION_CONFIG,
        value_set: Optional[ValueSet] = None,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(config, rng)
        self.value_set = value_set if value_set is not None else ValueSet()
        self.random_generator = RandomValueGenerator(
            config.generator, self.rng, mutation_config=config
        )

    def _reuse(self, bias: float, key, accept: Optional[Callable[[Any], bool]] = None):
        if self.rng.random() >= bias:
            return None
        value = self.value_set.sample(key, self.rng)
        if value is None:
            return None
        if accept is not None and not accept(value):
            logger.debug(f"Corpus value for {key} outside active bounds, ignoring")
            return None
        return value

    def _length_ok(
        self, lo: int, hi: int, measure: Callable[[Any], int] = len
    ) -> Callable[[Any], bool]:
        return lambda value: lo <= measure(value) <= hi

    # Generation

    def generate_address(self, typ: AbiAddress) -> Address:
        value = self._reuse(self.mutation_config.address_bias, typ.type_key)
        if value is not None:
            return Address(value)
        return self.random_generator.generate_address(typ)

    def generate_string(self, typ: AbiString) -> str:
        lo, hi = self.config.string_bounds(typ.max_length)
        value = self._reuse(
            self.mutation_config.string_bias,
            typ.type_key,
            self._length_ok(lo, hi, utf8_length),
        )
        if value is not None:
            return value
        return self.random_generator.generate_string(typ)

    def generate_bytes(self, typ: AbiBytes) -> bytes:
        lo, hi = self.config.bytes_bounds(typ.max_length)
        value = self._reuse(
            self.mutation_config.bytes_bias, typ.type_key, self._length_ok(lo, hi)
        )
        if value is not None:
            return value
        return self.random_generator.generate_bytes(typ)

    def generate_fixed_bytes(self, typ: AbiFixedBytes) -> bytes:
        value = self._reuse(self.mutation_config.bytes_bias, typ.type_key)
        if value is not None:
            return value
        return self.random_generator.generate_fixed_bytes(typ)

    def generate_integer(self, typ: AbiInt) -> int:
        value = self._reuse(self.mutation_config.integer_bias, typ.type_key)
        if value is not None:
            return value
        return self.random_generator.generate_integer(typ)

    # Perturbation

    def mutate_integer(self, value: int, typ: AbiInt) -> int:
        mutation_type = self.rng.choice(
            ["add", "subtract", "bit_flip", "negate", "boundary", "corpus_add"]
        )

        if mutation_type == "add":
            value += self.rng.randint(1, SMALL_DELTA)
        elif mutation_type == "subtract":
            value -= self.rng.randint(1, SMALL_DELTA)
        elif mutation_type == "bit_flip":
            value ^= 1 << self.rng.randint(0, typ.bits - 1)
        elif mutation_type == "negate":
            value = -value
        elif mutation_type == "boundary":
            value = self.rng.choice(boundary_values(typ))
        else:
            other = self.value_set.sample(typ.type_key, self.rng)
            value += other if other is not None else self.rng.randint(1, SMALL_DELTA)

        # wrap around, the same way the EVM does for unchecked arithmetic
        return wrap_integer(value, typ)

    def mutate_address(self, value: str, typ: AbiAddress) -> Address:
        byte_array = bytearray(Address(value).canonical_address)
        idx = self.rng.randint(0, 19)
        if self.rng.random() < 0.5:
            byte_array[idx] ^= self.rng.randint(1, 255)
        else:
            byte_array[idx] ^= 1 << self.rng.randint(0, 7)
        return Address(bytes(byte_array))

    def mutate_fixed_bytes(self, value: bytes, typ: AbiFixedBytes) -> bytes:
        byte_array = bytearray(value)
        idx = self.rng.randint(0, typ.size - 1)
        if self.rng.random() < 0.5:
            byte_array[idx] ^= self.rng.randint(1, 255)
        else:
            byte_array[idx] ^= 1 << self.rng.randint(0, 7)
        return bytes(byte_array)

    def mutate_bytes(self, value: bytes, typ: AbiBytes) -> bytes:
        lo, hi = self.config.bytes_bounds(typ.max_length)
        return self._mutate_sequence(value, lo, hi, self.rng.randbytes, typ.type_key)

    def mutate_string(self, value: str, typ: AbiString) -> str:
        lo, hi = self.config.string_bounds(typ.max_length)
        return self._mutate_sequence(
            value,
            lo,
            hi,
            self.random_generator.random_string,
            typ.type_key,
            utf8_length,
        )

    def _splice_chunk(self, size: int, make_random: Callable[[int], S], key) -> S:
        donor = self.value_set.sample(key, self.rng)
        if donor and self.rng.random() < 0.5:
            start = self.rng.randint(0, len(donor) - 1)
            return donor[start : start + size]
        return make_random(size)

    def _mutate_sequence(
        self,
        value: S,
        lo: int,
        hi: int,
        make_random: Callable[[int], S],
        key,
        measure: Callable[[S], int] = len,
    ) -> S:
        # bounds are counted with `measure`, UTF-8 bytes for strings
        ops = []
        if value:
            ops.append("substitute")
        if measure(value) < hi:
            ops.append("splice")
        if len(value) > lo:
            ops.append("truncate")
        if not ops:
            return value

        mutation_type = self.rng.choice(ops)

        if mutation_type == "substitute":
            pos = self.rng.randint(0, len(value) - 1)
            return value[:pos] + make_random(1) + value[pos + 1 :]
        elif mutation_type == "splice":
            size = self.rng.randint(1, min(hi - measure(value), MAX_SPLICE))
            chunk = self._splice_chunk(size, make_random, key)
            if measure(chunk) > size:
                chunk = make_random(size)
            pos = self.rng.randint(0, len(value))
            return value[:pos] + chunk + value[pos:]
        else:
            # truncation never drops below the active minimum
            return value[: self.rng.randint(lo, len(value) - 1)]
