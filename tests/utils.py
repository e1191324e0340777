from dataclasses import dataclass
from typing import Any, List, Tuple

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
)


def basic_abi_types() -> List[Tuple[str, AbiType]]:
    """Every leaf type: bool, address, string, bytes, bytes1-32, (u)int8-256."""
    args = [
        ("testAddress", AbiAddress()),
        ("testString", AbiString()),
        ("testDynamicBytes", AbiBytes()),
        ("testBool", AbiBool()),
    ]
    for i in range(1, 33):
        args.append((f"testBytes{i}", AbiFixedBytes(i)))
    for bits in range(8, 257, 8):
        args.append((f"int{bits}", AbiInt(bits, signed=True)))
        args.append((f"uint{bits}", AbiInt(bits)))
    return args


def all_abi_types() -> List[Tuple[str, AbiType]]:
    """Leaf types plus a slice and a 5-element array of each of them."""
    basic = basic_abi_types()
    args = list(basic)
    for _, typ in basic:
        args.append((f"testSlice ({typ})", AbiSlice(typ)))
        args.append((f"testArray ({typ})", AbiArray(typ, 5)))
    return args


def nested_abi_types() -> List[Tuple[str, AbiType]]:
    uint256 = AbiInt(256)
    person = AbiTuple.named(
        name=AbiString(), wallet=AbiAddress(), balances=AbiSlice(uint256)
    )
    return [
        ("testTuple", AbiTuple.named(a=uint256, b=AbiBool(), c=AbiBytes())),
        ("testAnonymousTuple", AbiTuple.of(AbiInt(8, signed=True), AbiFixedBytes(4))),
        ("testNestedArray", AbiArray(AbiSlice(AbiInt(16)), 3)),
        ("testSliceOfTuples", AbiSlice(person)),
        ("testTupleOfArrays", AbiTuple.named(people=AbiArray(person, 2), ok=AbiBool())),
        ("testBoundedSlice", AbiSlice(AbiString(max_length=4), max_length=2)),
    ]


def type_id(case) -> str:
    return case[0]


@dataclass(frozen=True)
class AbiFixedPoint(AbiType):
    """A kind none of the dispatch tables know about."""

    bits: int = 168
    decimals: int = 10

    @property
    def canonical(self) -> str:
        return f"fixed{self.bits}x{self.decimals}"

    @property
    def type_key(self) -> Tuple[Any, ...]:
        return ("fixed", self.bits, self.decimals)
