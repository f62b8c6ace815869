from floatbits.converter import decimal_to_binary
from floatbits.extended import binary_to_decimal_ext, describe_formula
from floatbits.layouts import get_predefined_layout, make_layout
from floatbits.specials import Classification, SpecialValue, make_special_bits

SINGLE = get_predefined_layout("single")


def test_three_is_normalized_with_exponent_one() -> None:
    info = binary_to_decimal_ext(decimal_to_binary("3.0", SINGLE), SINGLE, 20)
    assert info.is_positive is True
    assert info.is_denormalized is False
    assert info.are_exponent_and_mantissa_valid is True
    assert info.exponent == 1
    assert info.mantissa == "1.5"
    assert info.classification is Classification.NORMAL


def test_negative_value_mantissa_excludes_scale() -> None:
    info = binary_to_decimal_ext(decimal_to_binary("-0.1", SINGLE), SINGLE, 20)
    assert info.is_positive is False
    assert info.exponent == -4
    assert info.mantissa == "1.6000000238418579102"


def test_smallest_subnormal_is_denormalized() -> None:
    bits = make_special_bits(SINGLE, SpecialValue.SMALLEST_SUBNORMAL)
    info = binary_to_decimal_ext(bits, SINGLE, 20)
    assert info.is_denormalized is True
    assert info.are_exponent_and_mantissa_valid is True
    assert info.exponent == 1 - SINGLE.bias
    assert info.mantissa == "0.00000011920928955078125"


def test_zero_reports_lowest_binade() -> None:
    info = binary_to_decimal_ext("1" + "0" * 31, SINGLE, 20)
    assert info.is_positive is False
    assert info.is_denormalized is False
    assert info.are_exponent_and_mantissa_valid is True
    assert info.exponent == -126
    assert info.mantissa == "0.0"
    assert info.classification is Classification.ZERO


def test_infinity_and_nan_fields_are_not_valid() -> None:
    inf_info = binary_to_decimal_ext("11111111100000000000000000000000", SINGLE, 20)
    assert inf_info.is_positive is False
    assert inf_info.are_exponent_and_mantissa_valid is False
    assert inf_info.classification is Classification.INFINITY

    nan_info = binary_to_decimal_ext("01111111110000000000000000000001", SINGLE, 20)
    assert nan_info.are_exponent_and_mantissa_valid is False
    assert nan_info.is_denormalized is False
    assert nan_info.classification is Classification.NAN


def test_layout_without_mantissa_bits() -> None:
    layout = make_layout(1, 3, 0)
    info = binary_to_decimal_ext("0101", layout, 5)
    assert info.exponent == 2
    assert info.mantissa == "1.0"


def test_describe_formula_follows_extended_info() -> None:
    three = decimal_to_binary("3.0", SINGLE)
    assert describe_formula(three, SINGLE) == (
        "(-1)^0 * (1 + 4194304/2^23) * 2^1 = 1.5 * 2^1"
    )

    smallest = make_special_bits(SINGLE, SpecialValue.SMALLEST_SUBNORMAL)
    assert describe_formula(smallest, SINGLE) == (
        "(-1)^0 * (0 + 1/2^23) * 2^-126 = 0.00000011920928955078125 * 2^-126"
    )

    assert describe_formula("1" + "0" * 31, SINGLE) == (
        "(-1)^1 * (0 + 0/2^23) * 2^-126 = -0.0 * 2^-126"
    )


def test_describe_formula_special_paths() -> None:
    inf_bits = "0" + "1" * 8 + "0" * 23
    assert describe_formula(inf_bits, SINGLE) == (
        "Exponent all 1s with zero mantissa -> infinity"
    )
    nan_bits = make_special_bits(SINGLE, SpecialValue.NAN)
    assert describe_formula(nan_bits, SINGLE) == (
        "Exponent all 1s with non-zero mantissa -> NaN"
    )


def test_describe_formula_significand_is_exact_for_wide_layouts() -> None:
    layout = get_predefined_layout("quadruple")
    bits = make_special_bits(layout, SpecialValue.SMALLEST_ABOVE_ONE)
    # 2^-112 == 5^112 / 10^112
    fraction = str(5**112).rjust(112, "0")
    assert describe_formula(bits, layout) == (
        f"(-1)^0 * (1 + 1/2^112) * 2^0 = 1.{fraction} * 2^0"
    )
