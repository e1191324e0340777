"""
Build ABI type descriptors from Vyper semantic types.

A Vyper fuzzing harness gets argument types from the compiler's
`ContractFunctionT`; this maps them onto the descriptor model so their
values can be generated, mutated and persisted.
"""

from typing import List, Tuple

from vyper.semantics.types import (
    AddressT,
    BoolT,
    BytesM_T,
    BytesT,
    DArrayT,
    FlagT,
    IntegerT,
    InterfaceT,
    SArrayT,
    StringT,
    StructT,
    TupleT,
    VyperType,
)
from vyper.semantics.types.function import ContractFunctionT

from abifuzz.abi_types import (
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


def abi_type_from_vyper(vyper_type: VyperType) -> AbiType:
    """Map a Vyper type to its ABI type descriptor."""
    if isinstance(vyper_type, BoolT):
        return AbiBool()

    if isinstance(vyper_type, (AddressT, InterfaceT)):
        return AbiAddress()

    if isinstance(vyper_type, FlagT):
        return AbiInt(256, signed=False)

    if isinstance(vyper_type, IntegerT):
        return AbiInt(vyper_type.bits, signed=vyper_type.is_signed)

    if isinstance(vyper_type, BytesM_T):
        return AbiFixedBytes(vyper_type.length)

    if isinstance(vyper_type, StringT):
        return AbiString(max_length=vyper_type.length)

    if isinstance(vyper_type, BytesT):
        return AbiBytes(max_length=vyper_type.length)

    if isinstance(vyper_type, SArrayT):
        return AbiArray(abi_type_from_vyper(vyper_type.value_type), vyper_type.length)

    if isinstance(vyper_type, DArrayT):
        return AbiSlice(
            abi_type_from_vyper(vyper_type.value_type), max_length=vyper_type.length
        )

    if isinstance(vyper_type, StructT):
        return AbiTuple(
            tuple(
                AbiField(name, abi_type_from_vyper(member_type))
                for name, member_type in vyper_type.members.items()
            )
        )

    if isinstance(vyper_type, TupleT):
        return AbiTuple.of(*(abi_type_from_vyper(t) for t in vyper_type.member_types))

    raise TypeError(f"No ABI value representation for {vyper_type}")


def abi_args_from_function(func_t: ContractFunctionT) -> List[Tuple[str, AbiType]]:
    """Return the `(name, descriptor)` list of a function's positional arguments."""
    return [
        (arg.name, abi_type_from_vyper(arg.typ)) for arg in func_t.positional_args
    ]
