from __future__ import annotations

from enum import Enum

from .bitfields import BitFields, join_fields, split
from .errors import FieldRangeError, UnrepresentableValueError
from .layouts import Layout


class Classification(Enum):
    ZERO = "zero"
    SUBNORMAL = "subnormal"
    NORMAL = "normal"
    INFINITY = "infinity"
    NAN = "NaN"


class SpecialValue(Enum):
    ZERO = "zero"
    NEGATIVE_ZERO = "negative_zero"
    INFINITY = "infinity"
    NEGATIVE_INFINITY = "negative_infinity"
    NAN = "nan"
    SMALLEST_SUBNORMAL = "smallest_subnormal"
    LARGEST_SUBNORMAL = "largest_subnormal"
    SMALLEST_NORMAL = "smallest_normal"
    LARGEST_NORMAL = "largest_normal"
    LARGEST_BELOW_ONE = "largest_below_one"
    ONE = "one"
    SMALLEST_ABOVE_ONE = "smallest_above_one"


def classify(fields: BitFields, layout: Layout) -> Classification:
    if fields.exponent == 0:
        if fields.mantissa == 0:
            return Classification.ZERO
        return Classification.SUBNORMAL
    if fields.exponent == layout.max_biased_exponent:
        if fields.mantissa == 0:
            return Classification.INFINITY
        return Classification.NAN
    return Classification.NORMAL


def classify_bits(bits: str, layout: Layout) -> Classification:
    return classify(split(bits, layout), layout)


def _quiet_bit(layout: Layout) -> int:
    return 1 << (layout.mantissa_size - 1)


def is_quiet_nan(fields: BitFields, layout: Layout) -> bool:
    if classify(fields, layout) is not Classification.NAN:
        return False
    return bool(fields.mantissa & _quiet_bit(layout))


def nan_payload(fields: BitFields, layout: Layout) -> int:
    if layout.mantissa_size == 0:
        return 0
    return fields.mantissa & (_quiet_bit(layout) - 1)


def make_zero(layout: Layout, negative: bool = False) -> BitFields:
    # Unsigned layouts have a single zero.
    return BitFields(sign=negative and not layout.is_unsigned, exponent=0, mantissa=0)


def make_infinity(layout: Layout, negative: bool = False) -> BitFields:
    if negative and layout.is_unsigned:
        raise UnrepresentableValueError(
            f"Layout {layout.name} has no sign bit for -Infinity."
        )
    return BitFields(sign=negative, exponent=layout.max_biased_exponent, mantissa=0)


def make_nan(
    layout: Layout,
    negative: bool = False,
    payload: int = 0,
    signaling: bool = False,
) -> BitFields:
    if layout.mantissa_size == 0:
        raise UnrepresentableValueError(
            f"Layout {layout.name} has no mantissa bits to encode NaN."
        )
    quiet_bit = _quiet_bit(layout)
    if payload < 0 or payload >= quiet_bit:
        raise FieldRangeError(
            f"NaN payload {payload} does not fit in "
            f"{layout.mantissa_size - 1} bits."
        )
    if signaling:
        if layout.mantissa_size == 1:
            raise UnrepresentableValueError(
                f"Layout {layout.name} cannot encode a signaling NaN."
            )
        mantissa = payload or 1
    else:
        mantissa = quiet_bit | payload
    return BitFields(
        sign=negative and not layout.is_unsigned,
        exponent=layout.max_biased_exponent,
        mantissa=mantissa,
    )


def _fields_from_code(code: int, layout: Layout) -> BitFields:
    mask = (1 << layout.mantissa_size) - 1
    return BitFields(
        sign=False, exponent=code >> layout.mantissa_size, mantissa=code & mask
    )


def _require(condition: bool, layout: Layout, what: str) -> None:
    if not condition:
        raise UnrepresentableValueError(f"Layout {layout.name} has no {what}.")


def make_special(layout: Layout, value: SpecialValue) -> BitFields:
    mantissa_ones = (1 << layout.mantissa_size) - 1
    has_normals = layout.exponent_size >= 2

    if value is SpecialValue.ZERO:
        return make_zero(layout)
    if value is SpecialValue.NEGATIVE_ZERO:
        return make_zero(layout, negative=True)
    if value is SpecialValue.INFINITY:
        return make_infinity(layout)
    if value is SpecialValue.NEGATIVE_INFINITY:
        return make_infinity(layout, negative=True)
    if value is SpecialValue.NAN:
        return make_nan(layout)
    if value is SpecialValue.SMALLEST_SUBNORMAL:
        _require(layout.mantissa_size > 0, layout, "subnormal numbers")
        return BitFields(sign=False, exponent=0, mantissa=1)
    if value is SpecialValue.LARGEST_SUBNORMAL:
        _require(layout.mantissa_size > 0, layout, "subnormal numbers")
        return BitFields(sign=False, exponent=0, mantissa=mantissa_ones)
    if value is SpecialValue.SMALLEST_NORMAL:
        _require(has_normals, layout, "normal numbers")
        return BitFields(sign=False, exponent=1, mantissa=0)
    if value is SpecialValue.LARGEST_NORMAL:
        _require(has_normals, layout, "normal numbers")
        return BitFields(
            sign=False,
            exponent=layout.max_biased_exponent - 1,
            mantissa=mantissa_ones,
        )

    # Positive finite encodings are ordered like their integer codes.
    _require(has_normals, layout, "normal encoding of one")
    one_code = layout.bias << layout.mantissa_size
    if value is SpecialValue.ONE:
        return _fields_from_code(one_code, layout)
    if value is SpecialValue.LARGEST_BELOW_ONE:
        return _fields_from_code(one_code - 1, layout)
    if value is SpecialValue.SMALLEST_ABOVE_ONE:
        return _fields_from_code(one_code + 1, layout)
    raise ValueError(f"Unsupported special value: {value!r}")


def make_special_bits(layout: Layout, value: SpecialValue) -> str:
    return join_fields(make_special(layout, value), layout)
