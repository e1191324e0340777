"""
JSON-safe codec for ABI values.

Integers are encoded as base-10 text so 256-bit values survive any JSON
implementation, byte strings as `0x`-prefixed lowercase hex, addresses as
EIP-55 checksum hex. The encoding is canonical: re-encoding a decoded
value reproduces the input exactly.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from eth_typing import HexStr
from eth_utils import decode_hex, encode_hex, is_0x_prefixed

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
    field_label,
    join_path,
)
from abifuzz.exceptions import (
    ArityMismatchError,
    DecodeError,
    IntegerOutOfRangeError,
    InvalidValueError,
    LengthMismatchError,
    MalformedHexError,
    UnknownTypeKindError,
)
from abifuzz.values import (
    AbiValue,
    Address,
    check_shape,
    integer_in_range,
    utf8_length,
)

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"0|-?[1-9][0-9]*")
_ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")

IR = Any


# Encoding


def _encode_hex(value: bytes) -> HexStr:
    return encode_hex(value)


def _encode_array(typ, value: list, path: str) -> List[IR]:
    return [
        _encode_r(typ.elem, item, join_path(path, i)) for i, item in enumerate(value)
    ]


def _encode_tuple(typ: AbiTuple, value: tuple, path: str):
    encoded = [
        _encode_r(field.type, item, join_path(path, field_label(field, i)))
        for i, (field, item) in enumerate(zip(typ.fields, value))
    ]
    if typ.has_unique_names:
        return dict(zip(typ.field_names, encoded))
    return encoded


_ENCODERS: Dict[type, Callable[[Any, Any, str], IR]] = {
    AbiBool: lambda t, v, p: v,
    AbiAddress: lambda t, v, p: str(Address(v)),
    AbiString: lambda t, v, p: v,
    AbiBytes: lambda t, v, p: _encode_hex(v),
    AbiFixedBytes: lambda t, v, p: _encode_hex(v),
    AbiInt: lambda t, v, p: str(v),
    AbiArray: _encode_array,
    AbiSlice: _encode_array,
    AbiTuple: _encode_tuple,
}
check_exhaustive(_ENCODERS, "encode_abi_value", ABI_TYPE_KINDS)


def _encode_r(typ: AbiType, value: AbiValue, path: str) -> IR:
    return _ENCODERS[type(typ)](typ, value, path)


def encode_abi_value(typ: AbiType, value: AbiValue) -> IR:
    """Encode `value` into its JSON-safe representation.

    Raises `ShapeMismatchError` if `value` is not a valid value of `typ`.
    """
    check_shape(typ, value)
    return _encode_r(typ, value, "")


# Decoding


def _expect(typ: AbiType, ir: IR, expected, path: str) -> None:
    # bool is a subclass of int, reject it wherever an int is accepted
    if not isinstance(ir, expected) or (isinstance(ir, bool) and expected is not bool):
        raise InvalidValueError(
            f"expected {typ.canonical}, got {type(ir).__name__} {ir!r}",
            path=path,
            type_key=typ.type_key,
        )


def _check_cap(typ, length: int, path: str) -> None:
    if typ.max_length is not None and length > typ.max_length:
        raise LengthMismatchError(
            f"length {length} exceeds maximum {typ.max_length} of {typ.canonical}",
            path=path,
            type_key=typ.type_key,
        )


def _decode_hex(typ: AbiType, ir: IR, path: str) -> bytes:
    _expect(typ, ir, str, path)
    if not is_0x_prefixed(ir):
        raise MalformedHexError(
            f"hex string {ir!r} is missing the 0x prefix",
            path=path,
            type_key=typ.type_key,
        )
    try:
        return decode_hex(ir)
    except ValueError as e:
        # binascii.Error and UnicodeEncodeError are both ValueErrors
        raise MalformedHexError(
            f"malformed hex string {ir!r}: {e}", path=path, type_key=typ.type_key
        ) from e


def _decode_bool(typ: AbiBool, ir: IR, path: str, _names) -> bool:
    _expect(typ, ir, bool, path)
    return ir


def _decode_address(typ: AbiAddress, ir: IR, path: str, _names) -> Address:
    _expect(typ, ir, str, path)
    if not _ADDRESS_RE.fullmatch(ir):
        raise MalformedHexError(
            f"malformed address {ir!r}", path=path, type_key=typ.type_key
        )
    return Address(ir)


def _decode_string(typ: AbiString, ir: IR, path: str, _names) -> str:
    _expect(typ, ir, str, path)
    try:
        length = utf8_length(ir)
    except UnicodeEncodeError as e:
        raise InvalidValueError(
            f"string {ir!r} is not valid UTF-8", path=path, type_key=typ.type_key
        ) from e
    _check_cap(typ, length, path)
    return ir


def _decode_bytes(typ: AbiBytes, ir: IR, path: str, _names) -> bytes:
    value = _decode_hex(typ, ir, path)
    _check_cap(typ, len(value), path)
    return value


def _decode_fixed_bytes(typ: AbiFixedBytes, ir: IR, path: str, _names) -> bytes:
    value = _decode_hex(typ, ir, path)
    if len(value) != typ.size:
        raise LengthMismatchError(
            f"expected {typ.size} bytes for {typ.canonical}, got {len(value)}",
            path=path,
            type_key=typ.type_key,
        )
    return value


def _decode_integer(typ: AbiInt, ir: IR, path: str, _names) -> int:
    _expect(typ, ir, (str, int), path)
    if isinstance(ir, str):
        if not _INTEGER_RE.fullmatch(ir):
            raise InvalidValueError(
                f"malformed integer {ir!r}", path=path, type_key=typ.type_key
            )
        value = int(ir, 10)
    else:
        value = ir
    if not integer_in_range(value, typ):
        lo, hi = typ.bounds
        raise IntegerOutOfRangeError(
            f"{value} out of range for {typ.canonical} [{lo}, {hi}]",
            path=path,
            type_key=typ.type_key,
        )
    return value


def _decode_array(typ: AbiArray, ir: IR, path: str, _names) -> list:
    _expect(typ, ir, list, path)
    if len(ir) != typ.length:
        raise ArityMismatchError(
            f"expected {typ.length} elements for {typ.canonical}, got {len(ir)}",
            path=path,
            type_key=typ.type_key,
        )
    return [_decode_r(typ.elem, item, join_path(path, i)) for i, item in enumerate(ir)]


def _decode_slice(typ: AbiSlice, ir: IR, path: str, _names) -> list:
    _expect(typ, ir, list, path)
    _check_cap(typ, len(ir), path)
    return [_decode_r(typ.elem, item, join_path(path, i)) for i, item in enumerate(ir)]


def _unique(names: Sequence[str]) -> bool:
    return all(names) and len(set(names)) == len(names)


def _decode_tuple(
    typ: AbiTuple, ir: IR, path: str, field_names: Optional[Sequence[str]]
) -> tuple:
    _expect(typ, ir, (dict, list), path)

    if isinstance(ir, dict):
        names = list(field_names) if field_names is not None else typ.field_names
        if not _unique(names):
            raise ArityMismatchError(
                f"{typ.canonical} has no unique field names {list(names)}, "
                f"it can only be decoded from a list",
                path=path,
                type_key=typ.type_key,
            )
        if len(names) != len(typ.fields) or set(ir) != set(names):
            raise ArityMismatchError(
                f"expected fields {list(names)} for {typ.canonical}, "
                f"got {list(ir)}",
                path=path,
                type_key=typ.type_key,
            )
        items = [ir[name] for name in names]
    else:
        if len(ir) != len(typ.fields):
            raise ArityMismatchError(
                f"expected {len(typ.fields)} fields for {typ.canonical}, "
                f"got {len(ir)}",
                path=path,
                type_key=typ.type_key,
            )
        items = ir

    return tuple(
        _decode_r(field.type, item, join_path(path, field_label(field, i)))
        for i, (field, item) in enumerate(zip(typ.fields, items))
    )


_DECODERS: Dict[type, Callable[[Any, IR, str, Any], AbiValue]] = {
    AbiBool: _decode_bool,
    AbiAddress: _decode_address,
    AbiString: _decode_string,
    AbiBytes: _decode_bytes,
    AbiFixedBytes: _decode_fixed_bytes,
    AbiInt: _decode_integer,
    AbiArray: _decode_array,
    AbiSlice: _decode_slice,
    AbiTuple: _decode_tuple,
}
check_exhaustive(_DECODERS, "decode_abi_value", ABI_TYPE_KINDS)


def _decode_r(
    typ: AbiType, ir: IR, path: str, field_names: Optional[Sequence[str]] = None
) -> AbiValue:
    decoder = _DECODERS.get(type(typ))
    if decoder is None:
        raise UnknownTypeKindError(
            f"unknown ABI type kind {type(typ).__name__}", path=path
        )
    return decoder(typ, ir, path, field_names)


def decode_abi_value(
    typ: AbiType, ir: IR, field_names: Optional[Sequence[str]] = None
) -> AbiValue:
    """Decode the representation produced by `encode_abi_value`.

    `field_names` names the fields of a top-level tuple whose descriptor
    does not, so that name-keyed tuple input can still be decoded.

    Raises a `DecodeError` subclass on malformed input, never truncating or
    coercing it.
    """
    try:
        return _decode_r(typ, ir, "", field_names)
    except DecodeError as e:
        logger.debug(f"Rejected {type(typ).__name__} input: {e}")
        raise


# Argument lists


def _argument_names(args: Sequence[Tuple[str, AbiType]]) -> List[str]:
    # unnamed arguments are keyed by their position
    return [name or str(i) for i, (name, _) in enumerate(args)]


def encode_arguments(
    args: Sequence[Tuple[str, AbiType]], values: Sequence[AbiValue]
) -> Dict[str, IR]:
    """Encode positional call arguments into a name-keyed mapping."""
    if len(args) != len(values):
        raise ValueError(f"expected {len(args)} argument values, got {len(values)}")
    names = _argument_names(args)
    if not _unique(names):
        raise ValueError(f"argument names must be unique, got {names}")
    encoded = {}
    for key, (_, typ), value in zip(names, args, values):
        check_shape(typ, value, key)
        encoded[key] = _encode_r(typ, value, key)
    return encoded


def decode_arguments(
    args: Sequence[Tuple[str, AbiType]], ir: Dict[str, IR]
) -> List[AbiValue]:
    """Decode a mapping produced by `encode_arguments` back into positional values."""
    names = _argument_names(args)
    if not _unique(names):
        raise ArityMismatchError(f"argument names must be unique, got {names}")
    if not isinstance(ir, dict) or set(ir) != set(names):
        got = list(ir) if isinstance(ir, dict) else type(ir).__name__
        raise ArityMismatchError(f"expected arguments {names}, got {got}")
    return [_decode_r(typ, ir[name], name) for name, (_, typ) in zip(names, args)]


def ir_to_json(ir: IR) -> str:
    return json.dumps(ir)


def ir_from_json(text: str) -> IR:
    return json.loads(text)


# Display


def _format_array(typ, value: list) -> str:
    return "[" + ", ".join(format_abi_value(typ.elem, item) for item in value) + "]"


def _format_tuple(typ: AbiTuple, value: tuple) -> str:
    parts = []
    for field, item in zip(typ.fields, value):
        text = format_abi_value(field.type, item)
        parts.append(f"{field.name}={text}" if field.name else text)
    return "(" + ", ".join(parts) + ")"


_FORMATTERS: Dict[type, Callable[[Any, Any], str]] = {
    AbiBool: lambda t, v: str(v).lower(),
    AbiAddress: lambda t, v: str(Address(v)),
    AbiString: lambda t, v: json.dumps(v),
    AbiBytes: lambda t, v: _encode_hex(v),
    AbiFixedBytes: lambda t, v: _encode_hex(v),
    AbiInt: lambda t, v: f"{t.canonical}({v})",
    AbiArray: _format_array,
    AbiSlice: _format_array,
    AbiTuple: _format_tuple,
}
check_exhaustive(_FORMATTERS, "format_abi_value", ABI_TYPE_KINDS)


def format_abi_value(typ: AbiType, value: AbiValue) -> str:
    """Render a value for log output."""
    return _FORMATTERS[type(typ)](typ, value)
