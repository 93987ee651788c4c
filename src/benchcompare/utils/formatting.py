"""
Number rendering shared by the parsers and the alert report.

Rendered numbers end up inside ``range``/``extra`` strings and report tables
that are compared literally across runs, so the representation must be
stable: the shortest digit string that round-trips, integers without a
trailing ``.0``, positional notation down to ``1e-6`` and exponent notation
(``2.5e-8``, ``1e+21``) beyond that.
"""

import math
from decimal import Decimal
from typing import Tuple, Union

Number = Union[int, float]

_POSITIONAL_MAX_EXPONENT = 21
_POSITIONAL_MIN_EXPONENT = -6


def _shortest_digits(value: float) -> Tuple[str, int]:
    """
    Split a positive finite float into significant digits and decimal point position.

    ``value == 0.<digits> * 10 ** point``; ``repr`` already yields the
    shortest round-tripping digits.
    """
    _, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).lstrip("0")
    stripped = digits.rstrip("0")
    exponent += len(digits) - len(stripped)
    return stripped, exponent + len(stripped)


def format_number(value: Number) -> str:
    """
    Render a number with its shortest stable representation.

    Examples:
        >>> format_number(210.0)
        '210'
        >>> format_number(0.000006175090189861328)
        '0.000006175090189861328'
        >>> format_number(2.9351731952139377e-08)
        '2.9351731952139377e-8'

    Raises:
        ValueError: If value is not finite
    """
    if isinstance(value, bool):
        raise TypeError("Boolean is not a benchmark number")
    if isinstance(value, int):
        return str(value)

    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"Cannot render non-finite number {value!r}")
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    digits, point = _shortest_digits(abs(value))
    count = len(digits)

    if count <= point <= _POSITIONAL_MAX_EXPONENT:
        body = digits + "0" * (point - count)
    elif 0 < point <= _POSITIONAL_MAX_EXPONENT:
        body = f"{digits[:point]}.{digits[point:]}"
    elif _POSITIONAL_MIN_EXPONENT < point <= 0:
        body = "0." + "0" * -point + digits
    else:
        exponent = point - 1
        mantissa = digits if count == 1 else f"{digits[0]}.{digits[1:]}"
        body = f"{mantissa}e{'+' if exponent > 0 else '-'}{abs(exponent)}"

    return sign + body


def format_ratio(value: Number) -> str:
    """
    Render a ratio or threshold for the alert report.

    Integral values drop the decimal point, everything else keeps two
    decimals: ``1.0 -> '1'``, ``2.1 -> '2.10'``, ``3.5 -> '3.50'``.
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:.2f}"


def parse_number(token: str) -> float:
    """
    Parse a numeric token that may contain thousands separators.

    Raises:
        ValueError: If the token is not a number
    """
    return float(token.replace(",", ""))
