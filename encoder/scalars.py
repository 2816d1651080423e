"""
Textual form of scalar values.
"""
import math
from decimal import Decimal
from typing import Any

from encoder.errors import UnsupportedTypeError
from encoder.kinds import Kind, kind_of


def format_float(value: Any) -> str:
    """Fixed-point notation with the shortest precision that round-trips."""
    if isinstance(value, Decimal):
        if value.is_nan():
            return "NaN"
        if value.is_infinite():
            return "+Inf" if value > 0 else "-Inf"
    else:
        number = float(value)
        if math.isnan(number):
            return "NaN"
        if math.isinf(number):
            return "+Inf" if number > 0 else "-Inf"
        value = Decimal(repr(number))
    return format(value, "f")


def format_scalar(value: Any) -> bytes:
    """
    Render a scalar as the bytes of a form text field.

    Args:
        value: bool, integer, real number, string or bytes-like value

    Returns:
        Encoded field content

    Raises:
        UnsupportedTypeError: If the value is not a scalar
    """
    kind = kind_of(value)
    if kind is Kind.BOOL:
        text = "true" if value else "false"
    elif kind is Kind.INTEGER:
        text = str(int(value))
    elif kind is Kind.FLOAT:
        text = format_float(value)
    elif kind is Kind.STRING:
        text = str.__str__(value)
    elif kind is Kind.BYTES:
        return bytes(value)
    else:
        raise UnsupportedTypeError(f"{type(value).__name__} is not a supported type")
    return text.encode("utf-8")
