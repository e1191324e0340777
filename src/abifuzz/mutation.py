"""
Shape-preserving mutation of ABI values.

A mutation runs a random number of rounds. Every round walks the value
tree and, at each node, either keeps it, mutates it (recursing into
containers, perturbing leaves), regenerates it from scratch, or (for
dynamic-length kinds) resizes it. Every finalized leaf is fed back into
the generator's corpus.
"""

import logging
from typing import Any, Callable, Dict, List

from abifuzz.abi_types import (
    ABI_TYPE_KINDS,
    AbiAddress,
    AbiArray,
    AbiBool,
    AbiBytes,
    AbiFixedBytes,
    AbiInt,
    AbiSlice,
    AbiString,
    AbiTuple,
    AbiType,
    DYNAMIC_LENGTH_KINDS,
    check_exhaustive,
    dispatch,
)
from abifuzz.generation import generate_abi_value
from abifuzz.generator.base_value_generator import BaseValueGenerator
from abifuzz.generator.random_generator import STRING_ALPHABET
from abifuzz.values import AbiValue, check_shape, utf8_length

logger = logging.getLogger(__name__)

KEEP = "keep"
MUTATE = "mutate"
REGENERATE = "regenerate"
RESIZE = "resize"


def _pick_action(generator: BaseValueGenerator, resizable: bool) -> str:
    config = generator.mutation_config
    weights = [
        (KEEP, config.keep_weight),
        (MUTATE, config.mutate_weight),
        (REGENERATE, config.regenerate_weight),
    ]
    if resizable:
        weights.append((RESIZE, config.resize_weight))

    total = sum(w for _, w in weights)
    if total <= 0:
        return KEEP

    threshold = generator.rng.random() * total
    for action, weight in weights:
        if threshold < weight:
            return action
        threshold -= weight
    return KEEP


def _record(generator: BaseValueGenerator, typ: AbiType, value: AbiValue) -> AbiValue:
    if generator.value_set is not None:
        generator.value_set.add_all(typ, value)
    return value


def _resize_target(generator: BaseValueGenerator, length: int, lo: int, hi: int) -> int:
    delta = generator.rng.randint(1, generator.mutation_config.resize_max_delta)
    if generator.rng.random() < 0.5:
        delta = -delta
    return max(lo, min(hi, length + delta))


def _resize_items(
    generator: BaseValueGenerator,
    items: List[Any],
    lo: int,
    hi: int,
    make_item: Callable[[], Any],
) -> List[Any]:
    rng = generator.rng
    result = list(items)
    target = _resize_target(generator, len(result), lo, hi)
    while len(result) < target:
        result.insert(rng.randint(0, len(result)), make_item())
    while len(result) > target:
        del result[rng.randint(0, len(result) - 1)]
    return result


def _resize_slice(generator: BaseValueGenerator, typ: AbiSlice, value: list) -> list:
    lo, hi = generator.config.array_bounds(typ.max_length)

    def make_item():
        return _record(generator, typ.elem, generate_abi_value(generator, typ.elem))

    return _resize_items(generator, value, lo, hi, make_item)


def _resize_bytes(generator: BaseValueGenerator, typ: AbiBytes, value: bytes) -> bytes:
    lo, hi = generator.config.bytes_bounds(typ.max_length)
    result = _resize_items(
        generator, list(value), lo, hi, lambda: generator.rng.randint(0, 255)
    )
    return _record(generator, typ, bytes(result))


def _resize_string(generator: BaseValueGenerator, typ: AbiString, value: str) -> str:
    lo, hi = generator.config.string_bounds(typ.max_length)
    rng = generator.rng
    chars = list(value)
    size = utf8_length(value)
    target = _resize_target(generator, size, lo, hi)
    # removing a multi-byte character can undershoot; one-byte inserts refill
    while size > target:
        size -= utf8_length(chars.pop(rng.randint(0, len(chars) - 1)))
    while size < target:
        chars.insert(rng.randint(0, len(chars)), rng.choice(STRING_ALPHABET))
        size += 1
    return _record(generator, typ, "".join(chars))


def _mutate_sequence(generator: BaseValueGenerator, typ, value: list) -> list:
    return [_mutate_node(generator, typ.elem, item) for item in value]


def _mutate_tuple(generator: BaseValueGenerator, typ: AbiTuple, value: tuple) -> tuple:
    return tuple(
        _mutate_node(generator, field.type, item)
        for field, item in zip(typ.fields, value)
    )


def _leaf(method: str):
    def mutate(generator: BaseValueGenerator, typ: AbiType, value: AbiValue):
        return _record(generator, typ, getattr(generator, method)(value, typ))

    return mutate


_MUTATORS: Dict[type, Callable[[BaseValueGenerator, Any, Any], AbiValue]] = {
    AbiBool: _leaf("mutate_bool"),
    AbiAddress: _leaf("mutate_address"),
    AbiString: _leaf("mutate_string"),
    AbiBytes: _leaf("mutate_bytes"),
    AbiFixedBytes: _leaf("mutate_fixed_bytes"),
    AbiInt: _leaf("mutate_integer"),
    AbiArray: _mutate_sequence,
    AbiSlice: _mutate_sequence,
    AbiTuple: _mutate_tuple,
}
check_exhaustive(_MUTATORS, "mutate_abi_value", ABI_TYPE_KINDS)

_RESIZERS: Dict[type, Callable[[BaseValueGenerator, Any, Any], AbiValue]] = {
    AbiString: _resize_string,
    AbiBytes: _resize_bytes,
    AbiSlice: _resize_slice,
}
check_exhaustive(_RESIZERS, "mutate_abi_value (resize)", DYNAMIC_LENGTH_KINDS)


def _mutate_node(generator: BaseValueGenerator, typ: AbiType, value: AbiValue):
    action = _pick_action(generator, typ.is_dynamic_length)

    if action == KEEP:
        return value
    if action == REGENERATE:
        return _record(generator, typ, generate_abi_value(generator, typ))
    if action == RESIZE:
        return dispatch(_RESIZERS, typ)(generator, typ, value)
    return dispatch(_MUTATORS, typ)(generator, typ, value)


def mutate_abi_value(
    generator: BaseValueGenerator, typ: AbiType, value: AbiValue
) -> AbiValue:
    """Mutate `value` into a new value of the same shape.

    Raises `ShapeMismatchError` if `value` does not match `typ`. The input
    is never modified; with zero rounds it is returned as is.
    """
    check_shape(typ, value)

    config = generator.mutation_config
    rounds = generator.rng.randint(config.min_rounds, config.max_rounds)
    logger.debug(f"Mutating {typ.canonical} value ({rounds} rounds)")

    for _ in range(rounds):
        value = _mutate_node(generator, typ, value)
    return value
