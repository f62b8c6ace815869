from __future__ import annotations

from typing import NamedTuple

from .errors import (
    FieldRangeError,
    InvalidCharacterError,
    LengthMismatchError,
)
from .layouts import Layout

HEX_DIGITS = "0123456789ABCDEF"


class BitFields(NamedTuple):
    sign: bool
    exponent: int
    mantissa: int


def clean_bit_text(text: str) -> str:
    return text.strip().replace("_", "").replace(" ", "")


def _check_bit_chars(bits: str, what: str) -> None:
    bad = sorted({ch for ch in bits if ch not in "01"})
    if bad:
        raise InvalidCharacterError(
            f"{what} must contain only 0/1; got {''.join(bad)!r}."
        )


def split(bits: str, layout: Layout) -> BitFields:
    if len(bits) != layout.total_size:
        raise LengthMismatchError(
            f"Expected {layout.total_size} bits for {layout.name}; got {len(bits)}."
        )
    _check_bit_chars(bits, f"Bit text for {layout.name}")

    sign_bits = bits[: layout.exponent_offset]
    exponent_bits = bits[layout.exponent_offset : layout.mantissa_offset]
    mantissa_bits = bits[layout.mantissa_offset :]

    return BitFields(
        sign=sign_bits == "1",
        exponent=int(exponent_bits, 2),
        mantissa=int(mantissa_bits, 2) if mantissa_bits else 0,
    )


def _field_bits(value: int, width: int, label: str) -> str:
    if value < 0 or value >> width:
        raise FieldRangeError(f"{label} field {value} does not fit in {width} bits.")
    if width == 0:
        return ""
    return format(value, f"0{width}b")


def join(sign: bool, exponent: int, mantissa: int, layout: Layout) -> str:
    if sign and layout.is_unsigned:
        raise FieldRangeError(f"Layout {layout.name} has no sign bit.")
    sign_bits = ("1" if sign else "0") if layout.sign_size else ""
    return (
        sign_bits
        + _field_bits(exponent, layout.exponent_size, "Exponent")
        + _field_bits(mantissa, layout.mantissa_size, "Mantissa")
    )


def join_fields(fields: BitFields, layout: Layout) -> str:
    return join(fields.sign, fields.exponent, fields.mantissa, layout)


def bits_to_hex(bits: str) -> str:
    _check_bit_chars(bits, "Bit text")
    if len(bits) % 4:
        raise InvalidCharacterError(
            f"Bit text of length {len(bits)} does not split into 4-bit hex digits."
        )
    return "".join(
        HEX_DIGITS[int(bits[pos : pos + 4], 2)] for pos in range(0, len(bits), 4)
    )


def hex_to_bits(hex_text: str, layout: Layout) -> str:
    cleaned = clean_bit_text(hex_text).upper()
    bad = sorted({ch for ch in cleaned if ch not in HEX_DIGITS})
    if bad:
        raise InvalidCharacterError(
            f"Hex text must contain only 0-9/A-F; got {''.join(bad)!r}."
        )
    if layout.hex_size is None:
        raise InvalidCharacterError(
            f"Layout {layout.name} has {layout.total_size} bits, "
            "which do not split into 4-bit hex digits."
        )
    if len(cleaned) != layout.hex_size:
        raise LengthMismatchError(
            f"Expected {layout.hex_size} hex digits for {layout.name}; "
            f"got {len(cleaned)}."
        )
    return "".join(format(HEX_DIGITS.index(ch), "04b") for ch in cleaned)


def group_bits(bits: str, size: int = 4) -> list[str]:
    return [bits[pos : pos + size] for pos in range(0, len(bits), size)]
