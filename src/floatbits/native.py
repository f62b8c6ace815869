from __future__ import annotations

from typing import Any

import numpy as np

from .bitfields import split
from .layouts import Layout

NATIVE_DTYPES: dict[tuple[int, int, int], Any] = {
    (1, 5, 10): np.float16,
    (1, 8, 23): np.float32,
    (1, 11, 52): np.float64,
}


def _uint_dtype_for_bits(bits: int) -> Any:
    if bits == 16:
        return np.uint16
    if bits == 32:
        return np.uint32
    if bits == 64:
        return np.uint64
    raise ValueError(f"Unsupported float width: {bits}")


def native_dtype(layout: Layout) -> Any | None:
    return NATIVE_DTYPES.get(layout.widths)


def _require_native(layout: Layout) -> Any:
    dtype = native_dtype(layout)
    if dtype is None:
        raise ValueError(f"Layout {layout} has no native numpy float type.")
    return dtype


def native_bits(value: float, layout: Layout) -> str:
    dtype = _require_native(layout)
    np_value = np.array([value], dtype=dtype)
    raw = int(np_value.view(_uint_dtype_for_bits(layout.total_size))[0])
    return format(raw, f"0{layout.total_size}b")


def native_value(bits: str, layout: Layout) -> float:
    dtype = _require_native(layout)
    split(bits, layout)
    np_raw = np.array([int(bits, 2)], dtype=_uint_dtype_for_bits(layout.total_size))
    return float(np_raw.view(dtype)[0])
