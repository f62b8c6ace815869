from __future__ import annotations


class FloatBitsError(ValueError):
    pass


class InvalidLayoutError(FloatBitsError):
    pass


class UnknownPresetError(FloatBitsError):
    pass


class MalformedDecimalError(FloatBitsError):
    pass


class LengthMismatchError(FloatBitsError):
    pass


class InvalidCharacterError(FloatBitsError):
    pass


class UnrepresentableValueError(FloatBitsError):
    pass


class InvalidPrecisionError(FloatBitsError):
    pass


class FieldRangeError(FloatBitsError):
    pass
