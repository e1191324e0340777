"""
Runtime values for ABI types.

Leaves are plain Python objects (`bool`, `int`, `bytes`, `str`) except
addresses, which use `Address`. Arrays and slices are lists, tuples are
tuples ordered like the descriptor's fields.
"""

from __future__ import annotations

from typing import Any, List, Tuple, Union

from eth_typing import ChecksumAddress
from eth_typing.evm import Address as EthAddress
from eth_utils import is_hex_address
from eth_utils.address import to_canonical_address, to_checksum_address

from abifuzz.abi_types import (
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
    field_label,
    join_path,
)
from abifuzz.exceptions import ShapeMismatchError


# adapted from titanoboa: https://github.com/vyperlang/titanoboa/blob/bedd49e5a4c1e79a7d12c799e42a23a9dc449395/boa/util/abi.py#L20
# inherit from `str` so that users can compare with regular hex string
# addresses
class Address(str):
    __slots__ = ("canonical_address",)

    canonical_address: EthAddress

    def __new__(cls, address):
        if isinstance(address, Address):
            return address

        if isinstance(address, (bytes, bytearray)):
            if len(address) != 20:
                raise ValueError(f"Invalid address length: {len(address)} bytes.")
            address = bytes(address).hex()

        checksum_address: ChecksumAddress = to_checksum_address(address)
        self = super().__new__(cls, checksum_address)
        self.canonical_address = to_canonical_address(address)
        return self

    def __repr__(self):
        checksum_addr = super().__repr__()
        return f"Address({checksum_addr})"


AbiValue = Union[bool, int, Address, bytes, str, List[Any], Tuple[Any, ...]]


def wrap_integer(value: int, typ: AbiInt) -> int:
    """Reduce `value` into the range of `typ` with two's complement wrapping."""
    value &= (1 << typ.bits) - 1
    if typ.signed and value >= 1 << (typ.bits - 1):
        value -= 1 << typ.bits
    return value


def integer_in_range(value: int, typ: AbiInt) -> bool:
    lo, hi = typ.bounds
    return lo <= value <= hi


def utf8_length(value: str) -> int:
    """Length of `value` in UTF-8 bytes, the unit string caps are counted in.

    Raises `UnicodeEncodeError` for strings that are not valid UTF-8 (lone
    surrogates).
    """
    return len(value.encode("utf-8"))


def _fail(message: str, typ: AbiType, path: str):
    raise ShapeMismatchError(
        f"{message}, expected {typ.canonical}", path=path, type_key=typ.type_key
    )


def _check_cap(typ, length: int, path: str) -> None:
    if typ.max_length is not None and length > typ.max_length:
        _fail(f"length {length} exceeds maximum {typ.max_length}", typ, path)


def _check_bool(typ: AbiBool, value: Any, path: str) -> None:
    if not isinstance(value, bool):
        _fail(f"got {type(value).__name__}", typ, path)


def _check_address(typ: AbiAddress, value: Any, path: str) -> None:
    if not isinstance(value, str) or not is_hex_address(value):
        _fail(f"got {value!r}", typ, path)


def _check_string(typ: AbiString, value: Any, path: str) -> None:
    if not isinstance(value, str):
        _fail(f"got {type(value).__name__}", typ, path)
    try:
        length = utf8_length(value)
    except UnicodeEncodeError:
        _fail("string is not valid UTF-8", typ, path)
    _check_cap(typ, length, path)


def _check_bytes(typ: AbiBytes, value: Any, path: str) -> None:
    if not isinstance(value, bytes):
        _fail(f"got {type(value).__name__}", typ, path)
    _check_cap(typ, len(value), path)


def _check_fixed_bytes(typ: AbiFixedBytes, value: Any, path: str) -> None:
    if not isinstance(value, bytes):
        _fail(f"got {type(value).__name__}", typ, path)
    if len(value) != typ.size:
        _fail(f"got {len(value)} bytes", typ, path)


def _check_integer(typ: AbiInt, value: Any, path: str) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        _fail(f"got {type(value).__name__}", typ, path)
    if not integer_in_range(value, typ):
        _fail(f"integer {value} out of range", typ, path)


def _check_array(typ: AbiArray, value: Any, path: str) -> None:
    if not isinstance(value, list):
        _fail(f"got {type(value).__name__}", typ, path)
    if len(value) != typ.length:
        _fail(f"got {len(value)} elements", typ, path)
    for i, item in enumerate(value):
        check_shape(typ.elem, item, join_path(path, i))


def _check_slice(typ: AbiSlice, value: Any, path: str) -> None:
    if not isinstance(value, list):
        _fail(f"got {type(value).__name__}", typ, path)
    _check_cap(typ, len(value), path)
    for i, item in enumerate(value):
        check_shape(typ.elem, item, join_path(path, i))


def _check_tuple(typ: AbiTuple, value: Any, path: str) -> None:
    if not isinstance(value, tuple):
        _fail(f"got {type(value).__name__}", typ, path)
    if len(value) != len(typ.fields):
        _fail(f"got {len(value)} fields", typ, path)
    for i, (field, item) in enumerate(zip(typ.fields, value)):
        check_shape(field.type, item, join_path(path, field_label(field, i)))


_CHECKERS = {
    AbiBool: _check_bool,
    AbiAddress: _check_address,
    AbiString: _check_string,
    AbiBytes: _check_bytes,
    AbiFixedBytes: _check_fixed_bytes,
    AbiInt: _check_integer,
    AbiArray: _check_array,
    AbiSlice: _check_slice,
    AbiTuple: _check_tuple,
}
check_exhaustive(_CHECKERS, "check_shape")


def check_shape(typ: AbiType, value: Any, path: str = "") -> None:
    """Raise `ShapeMismatchError` unless `value` is a valid value of `typ`."""
    dispatch(_CHECKERS, typ)(typ, value, path)


def matches_shape(typ: AbiType, value: Any) -> bool:
    try:
        check_shape(typ, value)
    except ShapeMismatchError:
        return False
    return True
