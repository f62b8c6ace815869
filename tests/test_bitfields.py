import itertools

import pytest

from floatbits.bitfields import (
    BitFields,
    bits_to_hex,
    clean_bit_text,
    group_bits,
    hex_to_bits,
    join,
    split,
)
from floatbits.errors import (
    FieldRangeError,
    InvalidCharacterError,
    LengthMismatchError,
)
from floatbits.layouts import get_predefined_layout, make_layout


def test_split_single_precision_one() -> None:
    single = get_predefined_layout("single")
    fields = split("00111111100000000000000000000000", single)
    assert fields == BitFields(sign=False, exponent=127, mantissa=0)


def test_split_negative_three() -> None:
    single = get_predefined_layout("single")
    fields = split("11000000010000000000000000000000", single)
    assert fields.sign is True
    assert fields.exponent == 128
    assert fields.mantissa == 1 << 22


def test_split_rejects_wrong_length() -> None:
    single = get_predefined_layout("single")
    with pytest.raises(LengthMismatchError):
        split("0" * 31, single)


def test_split_rejects_bad_characters() -> None:
    half = get_predefined_layout("half")
    with pytest.raises(InvalidCharacterError):
        split("00111100000000a0", half)


def test_join_pads_each_field() -> None:
    double = get_predefined_layout("double")
    bits = join(False, 0, (1 << 52) - 1, double)
    assert bits == "0" * 12 + "1" * 52


def test_join_rejects_out_of_range_fields() -> None:
    half = get_predefined_layout("half")
    with pytest.raises(FieldRangeError):
        join(False, 32, 0, half)
    with pytest.raises(FieldRangeError):
        join(False, 0, 1 << 10, half)
    with pytest.raises(FieldRangeError):
        join(True, 0, 0, make_layout(0, 4, 4))


def test_split_join_identity_on_small_layout() -> None:
    layout = make_layout(1, 3, 2)
    for sign, exponent, mantissa in itertools.product(
        (False, True), range(8), range(4)
    ):
        bits = join(sign, exponent, mantissa, layout)
        assert len(bits) == layout.total_size
        assert split(bits, layout) == (sign, exponent, mantissa)


def test_unsigned_layout_without_mantissa() -> None:
    layout = make_layout(0, 4, 0)
    assert join(False, 9, 0, layout) == "1001"
    assert split("1001", layout) == BitFields(sign=False, exponent=9, mantissa=0)


def test_bits_to_hex_uppercases() -> None:
    assert bits_to_hex("01000000010010001111010111000011") == "4048F5C3"


def test_bits_to_hex_rejects_partial_nibble() -> None:
    with pytest.raises(InvalidCharacterError):
        bits_to_hex("101")
    with pytest.raises(InvalidCharacterError):
        bits_to_hex("10x1")


def test_hex_to_bits_accepts_lowercase_and_separators() -> None:
    single = get_predefined_layout("single")
    assert hex_to_bits("3fc0_0000", single) == "00111111110000000000000000000000"


def test_hex_to_bits_validates_layout_and_length() -> None:
    single = get_predefined_layout("single")
    with pytest.raises(InvalidCharacterError):
        hex_to_bits("3FG00000", single)
    with pytest.raises(LengthMismatchError):
        hex_to_bits("3FC0", single)
    with pytest.raises(InvalidCharacterError):
        hex_to_bits("00000", get_predefined_layout("tensorfloat32"))


def test_clean_bit_text_and_grouping() -> None:
    cleaned = clean_bit_text(" 0011_1100 0000_0000 ")
    assert cleaned == "0011110000000000"
    assert group_bits(cleaned) == ["0011", "1100", "0000", "0000"]
    assert group_bits("1010110", 4) == ["1010", "110"]
