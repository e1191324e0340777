import pytest

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
)
from abifuzz.codec import (
    decode_abi_value,
    decode_arguments,
    encode_abi_value,
    encode_arguments,
    format_abi_value,
    ir_from_json,
    ir_to_json,
)
from abifuzz.exceptions import (
    ArityMismatchError,
    DecodeError,
    IntegerOutOfRangeError,
    InvalidValueError,
    LengthMismatchError,
    MalformedHexError,
    ShapeMismatchError,
    UnknownTypeKindError,
)
from abifuzz.generation import generate_abi_value
from abifuzz.mutation import mutate_abi_value
from abifuzz.values import Address

from tests.utils import AbiFixedPoint, all_abi_types, nested_abi_types, type_id

CHECKSUM_ADDRESS = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


@pytest.mark.parametrize("case", all_abi_types() + nested_abi_types(), ids=type_id)
def test_round_trip(case, random_generator):
    _, typ = case
    for _ in range(10):
        value = generate_abi_value(random_generator, typ)
        ir = encode_abi_value(typ, value)
        decoded = decode_abi_value(typ, ir)
        assert decoded == value
        assert encode_abi_value(typ, decoded) == ir

        # the IR survives a trip through JSON text unchanged
        restored = ir_from_json(ir_to_json(ir))
        assert restored == ir
        assert decode_abi_value(typ, restored) == value


@pytest.mark.parametrize("case", nested_abi_types(), ids=type_id)
def test_round_trip_of_mutated_values(case, mutating_generator):
    _, typ = case
    value = generate_abi_value(mutating_generator, typ)
    for _ in range(10):
        value = mutate_abi_value(mutating_generator, typ, value)
        ir = ir_from_json(ir_to_json(encode_abi_value(typ, value)))
        assert decode_abi_value(typ, ir) == value


@pytest.mark.parametrize(
    "typ,value,expected",
    [
        (AbiBool(), True, True),
        (
            AbiInt(256),
            2**256 - 1,
            "115792089237316195423570985008687907853269984665640564039457584007913129639935",
        ),
        (AbiInt(8, signed=True), -128, "-128"),
        (AbiInt(32), 0, "0"),
        (AbiBytes(), b"", "0x"),
        (AbiBytes(), b"\x01\xab", "0x01ab"),
        (AbiFixedBytes(2), b"\xff\x00", "0xff00"),
        (AbiString(), "héllo", "héllo"),
        (AbiAddress(), CHECKSUM_ADDRESS.lower(), CHECKSUM_ADDRESS),
        (AbiSlice(AbiInt(8)), [], []),
        (AbiArray(AbiBool(), 2), [True, False], [True, False]),
        (
            AbiTuple.named(a=AbiInt(8), b=AbiBytes()),
            (1, b"\x02"),
            {"a": "1", "b": "0x02"},
        ),
        (AbiTuple.of(AbiInt(8), AbiBool()), (1, False), ["1", False]),
    ],
)
def test_known_encodings(typ, value, expected):
    assert encode_abi_value(typ, value) == expected


def test_duplicate_field_names_encode_as_list():
    typ = AbiTuple((AbiField("x", AbiInt(8)),) * 2)
    assert not typ.has_unique_names
    assert encode_abi_value(typ, (1, 2)) == ["1", "2"]
    assert decode_abi_value(typ, ["1", "2"]) == (1, 2)


def test_decoded_address_is_checksummed():
    value = decode_abi_value(AbiAddress(), CHECKSUM_ADDRESS.lower())
    assert isinstance(value, Address)
    assert value == CHECKSUM_ADDRESS
    assert encode_abi_value(AbiAddress(), value) == CHECKSUM_ADDRESS


def test_integers_accept_json_numbers():
    assert decode_abi_value(AbiInt(8), 200) == 200
    assert decode_abi_value(AbiInt(64, signed=True), -5) == -5


@pytest.mark.parametrize(
    "typ,ir,error",
    [
        (AbiBytes(), "0x123", MalformedHexError),
        (AbiBytes(), "0xzz", MalformedHexError),
        (AbiBytes(), "1234", MalformedHexError),
        (AbiBytes(), 1234, InvalidValueError),
        (AbiBytes(max_length=1), "0x0102", LengthMismatchError),
        (AbiFixedBytes(20), "0x" + "ab" * 19, LengthMismatchError),
        (AbiFixedBytes(4), "0x" + "ab" * 5, LengthMismatchError),
        (AbiInt(8), "256", IntegerOutOfRangeError),
        (AbiInt(8), -1, IntegerOutOfRangeError),
        (AbiInt(8, signed=True), "-129", IntegerOutOfRangeError),
        (AbiInt(256), str(2**256), IntegerOutOfRangeError),
        (AbiInt(8), "007", InvalidValueError),
        (AbiInt(8), "+5", InvalidValueError),
        (AbiInt(8), "-0", InvalidValueError),
        (AbiInt(8), "0x10", InvalidValueError),
        (AbiInt(8), " 5", InvalidValueError),
        (AbiInt(8), 1.0, InvalidValueError),
        (AbiInt(8), True, InvalidValueError),
        (AbiBool(), 1, InvalidValueError),
        (AbiBool(), "true", InvalidValueError),
        (AbiString(), b"abc", InvalidValueError),
        (AbiString(max_length=2), "abc", LengthMismatchError),
        (AbiString(max_length=5), "h\u00e9llo", LengthMismatchError),
        (AbiString(), "\ud800", InvalidValueError),
        (AbiAddress(), "0x1234", MalformedHexError),
        (AbiAddress(), CHECKSUM_ADDRESS[2:], MalformedHexError),
        (AbiAddress(), "0x" + "g" * 40, MalformedHexError),
        (AbiAddress(), 0, InvalidValueError),
        (AbiArray(AbiInt(8), 3), ["1", "2"], ArityMismatchError),
        (AbiArray(AbiInt(8), 1), "1", InvalidValueError),
        (AbiSlice(AbiInt(8), max_length=1), ["1", "2"], LengthMismatchError),
        (AbiTuple.of(AbiInt(8), AbiBool()), ["1"], ArityMismatchError),
        (AbiTuple.named(a=AbiInt(8)), {"b": "1"}, ArityMismatchError),
        (AbiTuple.named(a=AbiInt(8)), {"a": "1", "b": "2"}, ArityMismatchError),
        (AbiTuple.named(a=AbiInt(8)), ("1",), InvalidValueError),
    ],
)
def test_malformed_input_is_rejected(typ, ir, error):
    with pytest.raises(error):
        decode_abi_value(typ, ir)


def test_decode_errors_share_a_base_class():
    for error in (
        MalformedHexError,
        LengthMismatchError,
        IntegerOutOfRangeError,
        ArityMismatchError,
        UnknownTypeKindError,
        InvalidValueError,
    ):
        assert issubclass(error, DecodeError)


def test_decode_error_reports_path():
    typ = AbiSlice(AbiTuple.named(a=AbiInt(8)))
    with pytest.raises(IntegerOutOfRangeError) as excinfo:
        decode_abi_value(typ, [{"a": "1"}, {"a": "300"}])
    assert excinfo.value.path == "[1].a"
    assert excinfo.value.type_key == AbiInt(8).type_key
    assert "[1].a" in str(excinfo.value)


def test_unknown_type_kind_is_rejected():
    with pytest.raises(UnknownTypeKindError):
        decode_abi_value(AbiFixedPoint(), "1.5")

    with pytest.raises(UnknownTypeKindError) as excinfo:
        decode_abi_value(AbiSlice(AbiFixedPoint()), ["1.5"])
    assert excinfo.value.path == "[0]"


def test_field_names_decode_anonymous_tuples():
    typ = AbiTuple.of(AbiInt(8), AbiBool())
    ir = {"x": "1", "y": True}

    with pytest.raises(ArityMismatchError):
        decode_abi_value(typ, ir)

    assert decode_abi_value(typ, ir, field_names=["x", "y"]) == (1, True)
    # lists are still accepted when names are given
    assert decode_abi_value(typ, ["1", True], field_names=["x", "y"]) == (1, True)


def test_field_names_must_cover_every_field():
    typ = AbiTuple.of(AbiInt(8), AbiBool())
    with pytest.raises(ArityMismatchError):
        decode_abi_value(typ, {"x": "1"}, field_names=["x"])


@pytest.mark.parametrize(
    "typ,ir,field_names",
    [
        (AbiTuple((AbiField("x", AbiInt(8)),) * 2), {"x": "7"}, None),
        (AbiTuple.of(AbiInt(8), AbiInt(8)), {"": "9"}, None),
        (AbiTuple.of(AbiInt(8), AbiInt(8)), {"x": "1"}, ["x", "x"]),
        (AbiTuple.of(AbiInt(8), AbiInt(8)), {"x": "1", "": "2"}, ["x", ""]),
    ],
)
def test_dict_input_needs_unique_field_names(typ, ir, field_names):
    with pytest.raises(ArityMismatchError):
        decode_abi_value(typ, ir, field_names=field_names)


def test_string_cap_counts_utf8_bytes():
    # "héll" is four characters but five bytes
    assert decode_abi_value(AbiString(max_length=5), "héll") == "héll"
    with pytest.raises(LengthMismatchError):
        decode_abi_value(AbiString(max_length=4), "héll")
    with pytest.raises(ShapeMismatchError):
        encode_abi_value(AbiString(max_length=4), "héll")


@pytest.mark.parametrize(
    "typ,value",
    [
        (AbiInt(8), 256),
        (AbiInt(8), True),
        (AbiBool(), 0),
        (AbiFixedBytes(2), b"\x00"),
        (AbiBytes(), "0x00"),
        (AbiAddress(), "0x1234"),
        (AbiArray(AbiInt(8), 2), [1]),
        (AbiTuple.of(AbiInt(8)), [1]),
    ],
)
def test_encode_rejects_wrong_shape(typ, value):
    with pytest.raises(ShapeMismatchError):
        encode_abi_value(typ, value)


TRANSFER_ARGS = [
    ("to", AbiAddress()),
    ("amount", AbiInt(256)),
    ("", AbiBool()),
]


def test_arguments_round_trip():
    values = [Address(CHECKSUM_ADDRESS), 5, True]
    ir = encode_arguments(TRANSFER_ARGS, values)
    assert ir == {"to": CHECKSUM_ADDRESS, "amount": "5", "2": True}
    assert decode_arguments(TRANSFER_ARGS, ir_from_json(ir_to_json(ir))) == values


def test_encode_arguments_checks_values():
    with pytest.raises(ValueError):
        encode_arguments(TRANSFER_ARGS, [CHECKSUM_ADDRESS, 5])

    with pytest.raises(ShapeMismatchError) as excinfo:
        encode_arguments(TRANSFER_ARGS, [CHECKSUM_ADDRESS, -5, True])
    assert excinfo.value.path == "amount"


@pytest.mark.parametrize(
    "ir",
    [
        {"to": CHECKSUM_ADDRESS, "amount": "5"},
        {"to": CHECKSUM_ADDRESS, "amount": "5", "2": True, "extra": 1},
        [CHECKSUM_ADDRESS, "5", True],
    ],
)
def test_decode_arguments_rejects_wrong_arity(ir):
    with pytest.raises(ArityMismatchError):
        decode_arguments(TRANSFER_ARGS, ir)


def test_decode_arguments_reports_argument_name():
    ir = {"to": CHECKSUM_ADDRESS, "amount": "-1", "2": True}
    with pytest.raises(IntegerOutOfRangeError) as excinfo:
        decode_arguments(TRANSFER_ARGS, ir)
    assert excinfo.value.path == "amount"


@pytest.mark.parametrize(
    "args",
    [
        [("a", AbiInt(8)), ("a", AbiBool())],
        # the unnamed second argument is keyed "1"
        [("1", AbiInt(8)), ("", AbiBool())],
    ],
)
def test_argument_names_must_be_unique(args):
    with pytest.raises(ValueError):
        encode_arguments(args, [1, True])
    with pytest.raises(ArityMismatchError):
        decode_arguments(args, {"a": "1", "1": True})


@pytest.mark.parametrize(
    "typ,value,expected",
    [
        (AbiBool(), True, "true"),
        (AbiInt(8, signed=True), -1, "int8(-1)"),
        (AbiString(), 'a"b', '"a\\"b"'),
        (AbiBytes(), b"\x01", "0x01"),
        (AbiAddress(), CHECKSUM_ADDRESS.lower(), CHECKSUM_ADDRESS),
        (AbiArray(AbiInt(8), 2), [1, 2], "[uint8(1), uint8(2)]"),
        (
            AbiTuple.named(a=AbiInt(8), b=AbiBool()),
            (1, False),
            "(a=uint8(1), b=false)",
        ),
        (AbiTuple.of(AbiInt(8), AbiBool()), (1, False), "(uint8(1), false)"),
    ],
)
def test_format_abi_value(typ, value, expected):
    assert format_abi_value(typ, value) == expected


def test_persisted_corpus_seeds_generation(make_mutating_generator, value_set):
    typ = AbiSlice(AbiInt(64))
    text = '["11", "22", "33"]'

    decoded = decode_abi_value(typ, ir_from_json(text))
    assert value_set.add_all(typ, decoded) == 3

    gen = make_mutating_generator(integer_bias=1.0)
    for _ in range(20):
        assert generate_abi_value(gen, AbiInt(64)) in (11, 22, 33)
