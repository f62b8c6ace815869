from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from fractions import Fraction

from .bitfields import BitFields, bits_to_hex, hex_to_bits, join_fields, split
from .errors import (
    InvalidPrecisionError,
    MalformedDecimalError,
    UnrepresentableValueError,
)
from .layouts import Layout
from .specials import Classification, classify, make_infinity, make_nan, make_zero

logger = logging.getLogger(__name__)

_DECIMAL_PATTERN = re.compile(r"([+-]?\d+(?:\.\d+)?)(?:[eE]([+-]?\d+))?")
_SPECIAL_PATTERN = re.compile(r"[+-]?(?:inf|infinity|nan)", re.IGNORECASE)

_LOG2_10 = math.log2(10)
_LOG10_2 = math.log10(2)

_CHUNK_DIGITS = 1000
_CHUNK_MODULUS = 10**_CHUNK_DIGITS


@dataclass(frozen=True)
class ParsedDecimal:
    negative: bool
    coefficient: int = 0
    exponent: int = 0
    kind: str = "finite"

    @property
    def is_zero(self) -> bool:
        return self.kind == "finite" and self.coefficient == 0

    def ratio(self) -> tuple[int, int]:
        if self.exponent >= 0:
            return self.coefficient * 10**self.exponent, 1
        return self.coefficient, 10**-self.exponent


def _clean_decimal_input(text: str) -> str:
    return text.strip().replace("_", "").replace(" ", "")


def _digits_to_int(digits: str) -> int:
    # int(str) is capped by sys.get_int_max_str_digits(); fold in chunks.
    value = 0
    for start in range(0, len(digits), _CHUNK_DIGITS):
        chunk = digits[start : start + _CHUNK_DIGITS]
        value = value * 10 ** len(chunk) + int(chunk)
    return value


def _int_to_digits(value: int) -> str:
    chunks = []
    while value >= _CHUNK_MODULUS:
        value, chunk = divmod(value, _CHUNK_MODULUS)
        chunks.append(f"{chunk:0{_CHUNK_DIGITS}d}")
    chunks.append(str(value))
    return "".join(reversed(chunks))


def _parse_exponent(text: str | None) -> int:
    if text is None:
        return 0
    magnitude = _digits_to_int(text.lstrip("+-"))
    return -magnitude if text.startswith("-") else magnitude


def parse_decimal(text: str) -> ParsedDecimal:
    if not isinstance(text, str):
        raise MalformedDecimalError(f"Invalid decimal input: {text!r}")
    cleaned = _clean_decimal_input(text)

    match = _DECIMAL_PATTERN.fullmatch(cleaned)
    if match is None and _SPECIAL_PATTERN.fullmatch(cleaned) is None:
        raise MalformedDecimalError(f"Invalid decimal input: {text!r}")

    try:
        value = Decimal(cleaned if match is None else match.group(1))
    except InvalidOperation as exc:
        raise MalformedDecimalError(f"Invalid decimal input: {text!r}") from exc

    if value.is_nan():
        return ParsedDecimal(negative=value.is_signed(), kind="nan")
    if value.is_infinite():
        return ParsedDecimal(negative=value.is_signed(), kind="infinity")

    sign, digits, exponent = value.as_tuple()
    digit_text = "".join(map(str, digits))
    significant = digit_text.rstrip("0")
    return ParsedDecimal(
        negative=bool(sign),
        coefficient=_digits_to_int(significant),
        exponent=exponent
        + len(digit_text)
        - len(significant)
        + _parse_exponent(match.group(2)),
    )


def check_precision(precision: int) -> int:
    if isinstance(precision, bool) or not isinstance(precision, int) or precision < 1:
        raise InvalidPrecisionError(
            f"Precision must be a positive number of digits; got {precision!r}."
        )
    return precision


def round_trip_precision(layout: Layout) -> int:
    return math.ceil(1 + (layout.mantissa_size + 1) * _LOG10_2)


def _round_half_even(numerator: int, denominator: int) -> int:
    quotient, remainder = divmod(numerator, denominator)
    twice = remainder * 2
    if twice > denominator or (twice == denominator and quotient & 1):
        quotient += 1
    return quotient


def _scale_by_power_of_two(num: int, den: int, shift: int) -> int:
    if shift >= 0:
        return _round_half_even(num << shift, den)
    return _round_half_even(num, den << -shift)


def _binary_exponent(num: int, den: int) -> int:
    exponent = num.bit_length() - den.bit_length()
    if exponent >= 0:
        if num < den << exponent:
            exponent -= 1
    elif num << -exponent < den:
        exponent -= 1
    return exponent


def _encode_magnitude(num: int, den: int, layout: Layout) -> BitFields | None:
    """Rounds ``num / den`` (positive) into the layout.

    Returns None when the rounded value overflows to infinity.
    """
    mantissa_size = layout.mantissa_size
    mantissa_mask = (1 << mantissa_size) - 1
    exponent = _binary_exponent(num, den)

    if exponent < layout.min_exponent:
        significand = _scale_by_power_of_two(
            num, den, mantissa_size - layout.min_exponent
        )
        if significand == 0:
            logger.debug(
                "2^%d magnitude flushed to zero in %s", exponent, layout.name
            )
            return BitFields(sign=False, exponent=0, mantissa=0)
        # A carry out of the subnormal range lands on the smallest normal.
        exponent_field = significand >> mantissa_size
        if exponent_field >= layout.max_biased_exponent:
            return None
        if exponent_field == 0:
            logger.debug(
                "2^%d magnitude encoded as subnormal in %s", exponent, layout.name
            )
        return BitFields(
            sign=False, exponent=exponent_field, mantissa=significand & mantissa_mask
        )

    significand = _scale_by_power_of_two(num, den, mantissa_size - exponent)
    if significand >> (mantissa_size + 1):
        significand >>= 1
        exponent += 1

    biased = exponent + layout.bias
    if biased >= layout.max_biased_exponent:
        return None
    return BitFields(sign=False, exponent=biased, mantissa=significand & mantissa_mask)


def _estimate_log2(parsed: ParsedDecimal) -> float:
    if abs(parsed.exponent) > 10**300:
        return math.copysign(math.inf, parsed.exponent)
    return parsed.coefficient.bit_length() - 1 + parsed.exponent * _LOG2_10


def _encode_finite(parsed: ParsedDecimal, layout: Layout) -> BitFields | None:
    # log2 of the value lies in [estimate, estimate + 1); the cutoffs only
    # catch magnitudes past infinity or below half the smallest subnormal.
    estimate = _estimate_log2(parsed)
    if estimate > layout.max_exponent + 2:
        return None
    if estimate + 2 < layout.min_exponent - layout.mantissa_size - 1:
        return BitFields(sign=False, exponent=0, mantissa=0)

    num, den = parsed.ratio()
    return _encode_magnitude(num, den, layout)


def decimal_to_fields(text: str, layout: Layout) -> BitFields:
    parsed = parse_decimal(text)

    if parsed.kind == "nan":
        return make_nan(layout, negative=parsed.negative)
    if parsed.kind == "infinity":
        return make_infinity(layout, negative=parsed.negative)
    if parsed.is_zero:
        return make_zero(layout, negative=parsed.negative)

    fields = _encode_finite(parsed, layout)
    if fields is None:
        logger.debug("%r overflows %s; encoding infinity", text, layout.name)
        return make_infinity(layout, negative=parsed.negative)

    is_zero = fields.exponent == 0 and fields.mantissa == 0
    if parsed.negative and layout.is_unsigned and not is_zero:
        raise UnrepresentableValueError(
            f"Layout {layout.name} has no sign bit for {text!r}."
        )
    return fields._replace(sign=parsed.negative and not layout.is_unsigned)


def decimal_to_binary(text: str, layout: Layout) -> str:
    """Encodes decimal text into the bit string of ``layout``.

    Raises MalformedDecimalError for text outside the accepted grammar and
    UnrepresentableValueError when the layout cannot hold the value: a
    negative non-zero value (-Infinity included) without a sign bit, or NaN
    without mantissa bits.
    """
    return join_fields(decimal_to_fields(text, layout), layout)


def decimal_to_hex(text: str, layout: Layout) -> str:
    return bits_to_hex(decimal_to_binary(text, layout))


def finite_ratio(fields: BitFields, layout: Layout) -> tuple[int, int]:
    """Exact magnitude of a zero, subnormal or normal encoding as num/den."""
    classification = classify(fields, layout)
    if classification in (Classification.INFINITY, Classification.NAN):
        raise ValueError(f"{classification.value} has no finite value.")

    if classification is Classification.NORMAL:
        significand = (1 << layout.mantissa_size) | fields.mantissa
        scale = fields.exponent - layout.bias - layout.mantissa_size
    else:
        significand = fields.mantissa
        scale = layout.min_exponent - layout.mantissa_size

    if scale >= 0:
        return significand << scale, 1
    return significand, 1 << -scale


def _compare_power_of_ten(num: int, den: int, power: int) -> int:
    if power >= 0:
        lhs, rhs = num, den * 10**power
    else:
        lhs, rhs = num * 10**-power, den
    return (lhs > rhs) - (lhs < rhs)


def _decimal_exponent(num: int, den: int) -> int:
    power = math.floor((num.bit_length() - den.bit_length()) * _LOG10_2)
    while _compare_power_of_ten(num, den, power) < 0:
        power -= 1
    while _compare_power_of_ten(num, den, power + 1) >= 0:
        power += 1
    return power


def format_decimal(
    num: int,
    den: int,
    precision: int,
    negative: bool = False,
) -> str:
    check_precision(precision)
    sign = "-" if negative else ""
    if num == 0:
        return f"{sign}0.0"

    power = _decimal_exponent(num, den)
    shift = precision - 1 - power
    if shift >= 0:
        scaled = _round_half_even(num * 10**shift, den)
    else:
        scaled = _round_half_even(num, den * 10**-shift)
    if scaled == 10**precision:
        scaled //= 10
        power += 1

    digits = _int_to_digits(scaled)
    if power >= 0:
        int_len = power + 1
        int_part = digits[:int_len] + "0" * max(0, int_len - len(digits))
        frac_part = digits[int_len:]
    else:
        int_part = "0"
        frac_part = "0" * (-power - 1) + digits

    frac_part = frac_part.rstrip("0") or "0"
    return f"{sign}{int_part}.{frac_part}"


def fields_to_decimal(fields: BitFields, layout: Layout, precision: int) -> str:
    check_precision(precision)
    classification = classify(fields, layout)
    if classification is Classification.NAN:
        return "NaN"
    if classification is Classification.INFINITY:
        return "-Infinity" if fields.sign else "Infinity"
    if classification is Classification.ZERO:
        return "-0.0" if fields.sign else "0.0"

    num, den = finite_ratio(fields, layout)
    return format_decimal(num, den, precision, negative=fields.sign)


def binary_to_decimal(bits: str, layout: Layout, precision: int) -> str:
    return fields_to_decimal(split(bits, layout), layout, precision)


def hex_to_decimal(hex_text: str, layout: Layout, precision: int) -> str:
    return binary_to_decimal(hex_to_bits(hex_text, layout), layout, precision)


def exact_value(bits: str, layout: Layout) -> Fraction | None:
    fields = split(bits, layout)
    if classify(fields, layout) in (Classification.INFINITY, Classification.NAN):
        return None
    num, den = finite_ratio(fields, layout)
    value = Fraction(num, den)
    return -value if fields.sign else value
