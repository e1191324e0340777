from .abi_types import (
    AbiAddress,
    AbiArray,
    AbiBool,
    AbiBytes,
    AbiField,
    AbiFixedBytes,
    AbiInt,
    AbiSlice,
    AbiString,
    AbiTuple,
    AbiType,
)
from .codec import (
    decode_abi_value,
    decode_arguments,
    encode_abi_value,
    encode_arguments,
    format_abi_value,
    ir_from_json,
    ir_to_json,
)
from .config import GeneratorConfig, MutationConfig
from .exceptions import (
    AbiFuzzError,
    ConfigError,
    DecodeError,
    ShapeMismatchError,
)
from .generation import generate_abi_value
from .generator import MutatingValueGenerator, RandomValueGenerator
from .mutation import mutate_abi_value
from .value_set import ValueSet
from .values import Address, check_shape

__all__ = [
    "AbiAddress",
    "AbiArray",
    "AbiBool",
    "AbiBytes",
    "AbiField",
    "AbiFixedBytes",
    "AbiInt",
    "AbiSlice",
    "AbiString",
    "AbiTuple",
    "AbiType",
    "AbiFuzzError",
    "Address",
    "ConfigError",
    "DecodeError",
    "GeneratorConfig",
    "MutatingValueGenerator",
    "MutationConfig",
    "RandomValueGenerator",
    "ShapeMismatchError",
    "ValueSet",
    "check_shape",
    "decode_abi_value",
    "decode_arguments",
    "encode_abi_value",
    "encode_arguments",
    "format_abi_value",
    "generate_abi_value",
    "ir_from_json",
    "ir_to_json",
    "mutate_abi_value",
]
