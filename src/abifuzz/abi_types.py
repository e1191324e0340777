"""
Type descriptors for ABI values.

Descriptors are immutable and hashable, so an element descriptor can be
shared between any number of parents. The value layer only reads them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class AbiType(ABC):
    """Base class of every ABI type descriptor."""

    @property
    @abstractmethod
    def canonical(self) -> str:
        """ABI name used in function selectors, e.g. `uint256[]`."""

    @property
    @abstractmethod
    def type_key(self) -> Tuple[Any, ...]:
        """Hashable identity; structurally distinct types never share one."""

    @property
    def is_dynamic_length(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.canonical


@dataclass(frozen=True)
class AbiBool(AbiType):
    @property
    def canonical(self) -> str:
        return "bool"

    @property
    def type_key(self) -> Tuple[Any, ...]:
        return ("bool",)


@dataclass(frozen=True)
class AbiAddress(AbiType):
    @property
    def canonical(self) -> str:
        return "address"

    @property
    def type_key(self) -> Tuple[Any, ...]:
        return ("address",)


def _check_cap(max_length: Optional[int]) -> None:
    if max_length is not None and max_length < 0:
        raise ValueError(f"max_length must be non-negative, got {max_length}")


@dataclass(frozen=True)
class AbiString(AbiType):
    # optional cap for bounded strings (vyper `String[N]`)
    max_length: Optional[int] = None

    def __post_init__(self):
        _check_cap(self.max_length)

    @property
    def canonical(self) -> str:
        return "string"

    @property
    def type_key(self) -> Tuple[Any, ...]:
        return ("string", self.max_length)

    @property
    def is_dynamic_length(self) -> bool:
        return True


@dataclass(frozen=True)
class AbiBytes(AbiType):
    max_length: Optional[int] = None

    def __post_init__(self):
        _check_cap(self.max_length)

    @property
    def canonical(self) -> str:
        return "bytes"

    @property
    def type_key(self) -> Tuple[Any, ...]:
        return ("bytes", self.max_length)

    @property
    def is_dynamic_length(self) -> bool:
        return True


@dataclass(frozen=True)
class AbiFixedBytes(AbiType):
    size: int

    def __post_init__(self):
        if not 1 <= self.size <= 32:
            raise ValueError(f"invalid fixed bytes size: {self.size}")

    @property
    def canonical(self) -> str:
        return f"bytes{self.size}"

    @property
    def type_key(self) -> Tuple[Any, ...]:
        return ("bytesM", self.size)


@dataclass(frozen=True)
class AbiInt(AbiType):
    bits: int
    signed: bool = False

    def __post_init__(self):
        if self.bits % 8 != 0 or not 8 <= self.bits <= 256:
            raise ValueError(f"invalid integer width: {self.bits}")

    @property
    def bounds(self) -> Tuple[int, int]:
        if self.signed:
            return -(2 ** (self.bits - 1)), 2 ** (self.bits - 1) - 1
        return 0, 2**self.bits - 1

    @property
    def canonical(self) -> str:
        prefix = "int" if self.signed else "uint"
        return f"{prefix}{self.bits}"

    @property
    def type_key(self) -> Tuple[Any, ...]:
        return ("int" if self.signed else "uint", self.bits)


@dataclass(frozen=True)
class AbiArray(AbiType):
    elem: AbiType
    length: int

    def __post_init__(self):
        if self.length < 0:
            raise ValueError(f"invalid array length: {self.length}")

    @property
    def canonical(self) -> str:
        return f"{self.elem.canonical}[{self.length}]"

    @property
    def type_key(self) -> Tuple[Any, ...]:
        return ("array", self.elem.type_key, self.length)


@dataclass(frozen=True)
class AbiSlice(AbiType):
    elem: AbiType
    # optional cap for bounded slices (vyper `DynArray[T, N]`)
    max_length: Optional[int] = None

    def __post_init__(self):
        _check_cap(self.max_length)

    @property
    def canonical(self) -> str:
        return f"{self.elem.canonical}[]"

    @property
    def type_key(self) -> Tuple[Any, ...]:
        return ("slice", self.elem.type_key, self.max_length)

    @property
    def is_dynamic_length(self) -> bool:
        return True


@dataclass(frozen=True)
class AbiField:
    name: str
    type: AbiType


@dataclass(frozen=True)
class AbiTuple(AbiType):
    fields: Tuple[AbiField, ...]

    @classmethod
    def of(cls, *members: AbiType) -> AbiTuple:
        """Build an anonymous tuple from positional member types."""
        return cls(tuple(AbiField("", t) for t in members))

    @classmethod
    def named(cls, **members: AbiType) -> AbiTuple:
        return cls(tuple(AbiField(name, t) for name, t in members.items()))

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def has_unique_names(self) -> bool:
        names = self.field_names
        return all(names) and len(set(names)) == len(names)

    @property
    def canonical(self) -> str:
        return "(" + ",".join(f.type.canonical for f in self.fields) + ")"

    @property
    def type_key(self) -> Tuple[Any, ...]:
        return ("tuple",) + tuple(f.type.type_key for f in self.fields)


ABI_TYPE_KINDS = (
    AbiBool,
    AbiAddress,
    AbiString,
    AbiBytes,
    AbiFixedBytes,
    AbiInt,
    AbiArray,
    AbiSlice,
    AbiTuple,
)

LEAF_KINDS = (AbiBool, AbiAddress, AbiString, AbiBytes, AbiFixedBytes, AbiInt)

DYNAMIC_LENGTH_KINDS = (AbiString, AbiBytes, AbiSlice)


def check_exhaustive(table: Mapping[type, Any], owner: str, kinds=ABI_TYPE_KINDS):
    """Fail loudly when a kind dispatch table does not cover every kind."""
    missing = [k.__name__ for k in kinds if k not in table]
    extra = [k.__name__ for k in table if k not in kinds]
    if missing or extra:
        raise TypeError(
            f"{owner}: dispatch table out of sync "
            f"(missing={missing}, unexpected={extra})"
        )


def dispatch(table: Dict[type, Any], typ: AbiType):
    """Look up the handler for `typ`; unknown kinds are a `TypeError`."""
    handler = table.get(type(typ))
    if handler is None:
        raise TypeError(f"unsupported ABI type kind: {type(typ).__name__}")
    return handler


def join_path(path: str, part) -> str:
    if isinstance(part, int):
        return f"{path}[{part}]"
    if not path:
        return part
    return f"{path}.{part}"


def field_label(field: AbiField, index: int):
    return field.name or index
