from __future__ import annotations

from dataclasses import dataclass, field

from .errors import InvalidLayoutError, UnknownPresetError


@dataclass(frozen=True)
class Layout:
    sign_size: int
    exponent_size: int
    mantissa_size: int
    name: str = field(default="custom", compare=False)

    def __post_init__(self) -> None:
        for label in ("sign_size", "exponent_size", "mantissa_size"):
            value = getattr(self, label)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidLayoutError(f"{label} must be an integer; got {value!r}.")
        if self.sign_size not in (0, 1):
            raise InvalidLayoutError(
                f"sign_size must be 0 or 1; got {self.sign_size}."
            )
        if self.exponent_size < 1:
            raise InvalidLayoutError(
                f"exponent_size must be at least 1; got {self.exponent_size}."
            )
        if self.mantissa_size < 0:
            raise InvalidLayoutError(
                f"mantissa_size must not be negative; got {self.mantissa_size}."
            )

    @property
    def total_size(self) -> int:
        return self.sign_size + self.exponent_size + self.mantissa_size

    @property
    def bias(self) -> int:
        return (1 << (self.exponent_size - 1)) - 1

    @property
    def max_biased_exponent(self) -> int:
        return (1 << self.exponent_size) - 1

    @property
    def min_exponent(self) -> int:
        return 1 - self.bias

    @property
    def max_exponent(self) -> int:
        return self.max_biased_exponent - 1 - self.bias

    @property
    def is_unsigned(self) -> bool:
        return self.sign_size == 0

    @property
    def exponent_offset(self) -> int:
        return self.sign_size

    @property
    def mantissa_offset(self) -> int:
        return self.sign_size + self.exponent_size

    @property
    def hex_size(self) -> int | None:
        if self.total_size % 4:
            return None
        return self.total_size // 4

    @property
    def widths(self) -> tuple[int, int, int]:
        return self.sign_size, self.exponent_size, self.mantissa_size

    def __str__(self) -> str:
        return (
            f"{self.name} ({self.sign_size}/{self.exponent_size}/"
            f"{self.mantissa_size}, {self.total_size} bits)"
        )


def make_layout(
    sign_size: int,
    exponent_size: int,
    mantissa_size: int,
    name: str = "custom",
) -> Layout:
    return Layout(
        sign_size=sign_size,
        exponent_size=exponent_size,
        mantissa_size=mantissa_size,
        name=name,
    )


PREDEFINED_LAYOUTS: dict[str, Layout] = {
    "half": make_layout(1, 5, 10, name="half"),
    "single": make_layout(1, 8, 23, name="single"),
    "double": make_layout(1, 11, 52, name="double"),
    "quadruple": make_layout(1, 15, 112, name="quadruple"),
    "octuple": make_layout(1, 19, 236, name="octuple"),
    "bfloat16": make_layout(1, 8, 7, name="bfloat16"),
    "tensorfloat32": make_layout(1, 8, 10, name="tensorfloat32"),
    "fp8_e4m3": make_layout(1, 4, 3, name="fp8_e4m3"),
    "fp8_e5m2": make_layout(1, 5, 2, name="fp8_e5m2"),
}

LAYOUT_ALIASES: dict[str, str] = {
    "float16": "half",
    "binary16": "half",
    "float32": "single",
    "binary32": "single",
    "float64": "double",
    "binary64": "double",
    "float128": "quadruple",
    "binary128": "quadruple",
    "float256": "octuple",
    "binary256": "octuple",
    "bf16": "bfloat16",
    "tf32": "tensorfloat32",
    "tensor_float32": "tensorfloat32",
    "e4m3": "fp8_e4m3",
    "e5m2": "fp8_e5m2",
}


def _normalize_preset_name(name: str) -> str:
    return name.strip().lower().replace("-", "_").replace(" ", "_")


def predefined_layout_names() -> tuple[str, ...]:
    return tuple(PREDEFINED_LAYOUTS)


def get_predefined_layout(name: str) -> Layout:
    if not isinstance(name, str):
        raise UnknownPresetError(f"Unknown layout preset: {name!r}")
    key = _normalize_preset_name(name)
    key = LAYOUT_ALIASES.get(key, key)
    try:
        return PREDEFINED_LAYOUTS[key]
    except KeyError:
        raise UnknownPresetError(f"Unknown layout preset: {name!r}") from None
