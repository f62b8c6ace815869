from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from .bitfields import (
    BitFields,
    bits_to_hex,
    clean_bit_text,
    group_bits,
    hex_to_bits,
    join_fields,
    split,
)
from .config import load_settings
from .converter import binary_to_decimal, check_precision, decimal_to_binary
from .extended import ExtendedInfo, binary_to_decimal_ext
from .layouts import Layout, get_predefined_layout
from .specials import Classification, SpecialValue, classify, make_special

logger = logging.getLogger(__name__)

INITIAL_DECIMAL = "3.0"


@dataclass(frozen=True)
class ConverterState:
    """Snapshot of what a converter front end shows for one layout.

    Every edit returns a new state; the layout is swapped wholesale.
    """

    layout: Layout
    bits: str
    precision: int

    @classmethod
    def initial(
        cls,
        layout: Layout | str | None = None,
        precision: int | None = None,
    ) -> ConverterState:
        settings = load_settings()
        if layout is None:
            layout = settings.layout
        elif isinstance(layout, str):
            layout = get_predefined_layout(layout)
        if precision is None:
            precision = settings.precision
        check_precision(precision)
        return cls(
            layout=layout,
            bits=decimal_to_binary(INITIAL_DECIMAL, layout),
            precision=precision,
        )

    def with_layout(self, layout: Layout | str) -> ConverterState:
        if isinstance(layout, str):
            layout = get_predefined_layout(layout)
        logger.debug("Switching layout from %s to %s", self.layout, layout)
        return replace(
            self, layout=layout, bits=decimal_to_binary(INITIAL_DECIMAL, layout)
        )

    def with_precision(self, precision: int) -> ConverterState:
        return replace(self, precision=check_precision(precision))

    def with_bits(self, bits: str) -> ConverterState:
        cleaned = clean_bit_text(bits)
        split(cleaned, self.layout)
        return replace(self, bits=cleaned)

    def with_hex(self, hex_text: str) -> ConverterState:
        return replace(self, bits=hex_to_bits(hex_text, self.layout))

    def with_decimal(self, text: str) -> ConverterState:
        return replace(self, bits=decimal_to_binary(text, self.layout))

    def with_fields(self, fields: BitFields) -> ConverterState:
        return replace(self, bits=join_fields(fields, self.layout))

    def with_special(self, value: SpecialValue | str) -> ConverterState:
        if isinstance(value, str):
            value = SpecialValue(value.strip().lower())
        return self.with_fields(make_special(self.layout, value))

    def toggle_bit(self, index: int) -> ConverterState:
        if not 0 <= index < len(self.bits):
            raise IndexError(
                f"Bit index {index} out of range for {self.layout.total_size} bits."
            )
        flipped = "1" if self.bits[index] == "0" else "0"
        return replace(self, bits=self.bits[:index] + flipped + self.bits[index + 1 :])

    @property
    def fields(self) -> BitFields:
        return split(self.bits, self.layout)

    @property
    def classification(self) -> Classification:
        return classify(self.fields, self.layout)

    @property
    def decimal(self) -> str:
        return binary_to_decimal(self.bits, self.layout, self.precision)

    @property
    def hex(self) -> str | None:
        if self.layout.hex_size is None:
            return None
        return bits_to_hex(self.bits)

    @property
    def bit_groups(self) -> list[str]:
        return group_bits(self.bits)

    @property
    def info(self) -> ExtendedInfo:
        return binary_to_decimal_ext(self.bits, self.layout, self.precision)
