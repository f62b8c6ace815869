from __future__ import annotations

from dataclasses import dataclass

from .bitfields import BitFields, split
from .converter import check_precision, format_decimal
from .layouts import Layout
from .specials import Classification, classify


@dataclass(frozen=True)
class ExtendedInfo:
    """Decoded sign, exponent and significand of one encoding.

    ``mantissa`` is the whole significand, not just its fractional part:
    ``"1.5"`` for a normal 3.0, ``"0.xxx"`` for subnormals and ``"0.0"`` for
    zero, so the value reads as ``mantissa * 2^exponent``. It is ``""`` when
    ``are_exponent_and_mantissa_valid`` is false (Infinity and NaN).
    """

    is_positive: bool
    is_denormalized: bool
    are_exponent_and_mantissa_valid: bool
    exponent: int
    mantissa: str
    classification: Classification


def fields_to_decimal_ext(
    fields: BitFields,
    layout: Layout,
    precision: int,
) -> ExtendedInfo:
    check_precision(precision)
    classification = classify(fields, layout)
    is_positive = not fields.sign

    if classification in (Classification.INFINITY, Classification.NAN):
        return ExtendedInfo(
            is_positive=is_positive,
            is_denormalized=False,
            are_exponent_and_mantissa_valid=False,
            exponent=fields.exponent - layout.bias,
            mantissa="",
            classification=classification,
        )

    scale = 1 << layout.mantissa_size
    if classification is Classification.NORMAL:
        exponent = fields.exponent - layout.bias
        mantissa = format_decimal(scale | fields.mantissa, scale, precision)
    else:
        # Zero and subnormals share the fixed exponent of the lowest binade.
        exponent = layout.min_exponent
        mantissa = format_decimal(fields.mantissa, scale, precision)

    return ExtendedInfo(
        is_positive=is_positive,
        is_denormalized=classification is Classification.SUBNORMAL,
        are_exponent_and_mantissa_valid=True,
        exponent=exponent,
        mantissa=mantissa,
        classification=classification,
    )


def binary_to_decimal_ext(bits: str, layout: Layout, precision: int) -> ExtendedInfo:
    return fields_to_decimal_ext(split(bits, layout), layout, precision)


def describe_formula(bits: str, layout: Layout) -> str:
    fields = split(bits, layout)
    # mantissa_size + 1 digits render any significand exactly.
    info = fields_to_decimal_ext(fields, layout, layout.mantissa_size + 1)

    if not info.are_exponent_and_mantissa_valid:
        mantissa = "non-zero" if fields.mantissa else "zero"
        kind = info.classification.value
        return f"Exponent all 1s with {mantissa} mantissa -> {kind}"

    leading = int(info.classification is Classification.NORMAL)
    return (
        f"(-1)^{int(not info.is_positive)} "
        f"* ({leading} + {fields.mantissa}/2^{layout.mantissa_size}) "
        f"* 2^{info.exponent} = {'' if info.is_positive else '-'}{info.mantissa} "
        f"* 2^{info.exponent}"
    )
