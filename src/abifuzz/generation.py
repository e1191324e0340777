"""
Recursive generation of ABI values from type descriptors.
"""

from typing import Callable, Dict

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
    check_exhaustive,
    dispatch,
)
from abifuzz.generator.base_value_generator import BaseValueGenerator
from abifuzz.values import AbiValue


def _generate_array(generator: BaseValueGenerator, typ: AbiArray) -> list:
    return [generate_abi_value(generator, typ.elem) for _ in range(typ.length)]


def _generate_slice(generator: BaseValueGenerator, typ: AbiSlice) -> list:
    n = generator.generate_array_length(typ)
    return [generate_abi_value(generator, typ.elem) for _ in range(n)]


def _generate_tuple(generator: BaseValueGenerator, typ: AbiTuple) -> tuple:
    return tuple(generate_abi_value(generator, f.type) for f in typ.fields)


_GENERATORS: Dict[type, Callable[[BaseValueGenerator, AbiType], AbiValue]] = {
    AbiBool: lambda g, t: g.generate_bool(t),
    AbiAddress: lambda g, t: g.generate_address(t),
    AbiString: lambda g, t: g.generate_string(t),
    AbiBytes: lambda g, t: g.generate_bytes(t),
    AbiFixedBytes: lambda g, t: g.generate_fixed_bytes(t),
    AbiInt: lambda g, t: g.generate_integer(t),
    AbiArray: _generate_array,
    AbiSlice: _generate_slice,
    AbiTuple: _generate_tuple,
}
check_exhaustive(_GENERATORS, "generate_abi_value", ABI_TYPE_KINDS)


def generate_abi_value(generator: BaseValueGenerator, typ: AbiType) -> AbiValue:
    """Generate a value for the given type.

    Only `generator` (its RNG and, if any, its corpus) is consulted, so a
    fixed RNG seed and corpus state reproduce the same value.
    """
    return dispatch(_GENERATORS, typ)(generator, typ)
