from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from .bitfields import bits_to_hex, clean_bit_text, hex_to_bits
from .config import Settings, load_settings
from .converter import binary_to_decimal, decimal_to_binary
from .errors import FloatBitsError
from .extended import binary_to_decimal_ext, describe_formula
from .layouts import (
    PREDEFINED_LAYOUTS,
    Layout,
    get_predefined_layout,
    make_layout,
)
from .native import native_bits, native_dtype, native_value

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="floatbits",
        description="Convert between decimal text and IEEE-754 style bit layouts.",
    )
    layout_group = parser.add_mutually_exclusive_group()
    layout_group.add_argument("--layout", help="predefined layout name")
    layout_group.add_argument(
        "--widths",
        nargs=3,
        type=int,
        metavar=("SIGN", "EXPONENT", "MANTISSA"),
        help="custom layout bit widths",
    )
    parser.add_argument("--precision", type=int, help="significant decimal digits")

    commands = parser.add_subparsers(dest="command", required=True)

    encode = commands.add_parser("encode", help="decimal text to bits")
    encode.add_argument("text")
    _add_report_flags(encode)

    decode = commands.add_parser("decode", help="bits (or hex) to decimal text")
    decode.add_argument("value")
    decode.add_argument("--hex", action="store_true", help="value is hex digits")
    _add_report_flags(decode)

    commands.add_parser("layouts", help="list predefined layouts")
    return parser


def _add_report_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--ext", action="store_true", help="show exponent/mantissa breakdown"
    )
    parser.add_argument(
        "--check-native",
        action="store_true",
        help="compare against numpy for half/single/double",
    )


def _resolve_layout(args: argparse.Namespace, settings: Settings) -> Layout:
    if args.widths is not None:
        return make_layout(*args.widths)
    if args.layout is not None:
        return get_predefined_layout(args.layout)
    return settings.layout


def _report_lines(
    bits: str,
    layout: Layout,
    precision: int,
    args: argparse.Namespace,
) -> list[str]:
    decimal = binary_to_decimal(bits, layout, precision)
    lines = [f"layout:  {layout}", f"bits:    {bits}"]
    if layout.hex_size is not None:
        lines.append(f"hex:     {bits_to_hex(bits)}")
    lines.append(f"decimal: {decimal}")

    if args.ext:
        info = binary_to_decimal_ext(bits, layout, precision)
        lines.append(f"class:   {info.classification.value}")
        lines.append(f"sign:    {'+' if info.is_positive else '-'}")
        if info.are_exponent_and_mantissa_valid:
            kind = "denormalized" if info.is_denormalized else "normalized"
            lines.append(f"value:   {info.mantissa} * 2^{info.exponent} ({kind})")
        lines.append(f"formula: {describe_formula(bits, layout)}")

    if args.check_native:
        if native_dtype(layout) is None:
            lines.append("native:  n/a")
        else:
            native = native_value(bits, layout)
            agrees = native_bits(native, layout) == bits
            lines.append(f"native:  {native!r} ({'match' if agrees else 'MISMATCH'})")
    return lines


def run(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
        logging.basicConfig(level=settings.log_level_number)

        if args.command == "layouts":
            for layout in PREDEFINED_LAYOUTS.values():
                print(layout)
            return 0

        layout = _resolve_layout(args, settings)
        precision = settings.precision
        if args.precision is not None:
            precision = args.precision

        if args.command == "encode":
            bits = decimal_to_binary(args.text, layout)
        elif args.hex:
            bits = hex_to_bits(args.value, layout)
        else:
            bits = clean_bit_text(args.value)

        for line in _report_lines(bits, layout, precision, args):
            print(line)
    except FloatBitsError as exc:
        logger.debug("Conversion failed", exc_info=True)
        print(f"floatbits: error: {exc}", file=sys.stderr)
        return 2
    return 0


def main() -> None:
    sys.exit(run())
