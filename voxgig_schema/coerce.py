# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Coercion rules. Each function returns a pair of (value, ok). When ok is
# False the value is returned unchanged, and type extraction rejects it.


from typing import *
from datetime import date, datetime, time, timezone
from decimal import Decimal
import math
import re

from .util import (
    isnumber,
    isnode,
    S_MT,
)


R_INTEGER = re.compile(r'^[+-]?\d+$')
R_HEX = re.compile(r'^[+-]?0[xX][0-9a-fA-F]+$')
R_DECIMAL = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')

TRUTHY = ('true', '1', 'yes', 'on', 'y', 'enabled')
FALSY = ('false', '0', 'no', 'off', 'n', 'disabled')

# Digit bounds for integer coercion. Every sized integer fits well inside
# INT_MAXDIGITS, values beyond it are rejected before conversion.
INT_MAXDIGITS = 64
BIGINT_MAXDIGITS = 100000


def tostring(value: Any) -> Tuple[Any, bool]:
    "Any scalar to its string form. Nodes and nil are not coerced."
    if isinstance(value, str):
        return value, True
    if value is None or isnode(value) or isinstance(value, (set, frozenset)):
        return value, False
    if isinstance(value, bool):
        return ('true' if value else 'false'), True
    if isinstance(value, float):
        if math.isnan(value):
            return 'NaN', True
        if math.isinf(value):
            return ('Infinity' if 0 < value else '-Infinity'), True
        if value.is_integer() and abs(value) < 1e16:
            return str(int(value)), True
        return repr(value), True
    if isinstance(value, (datetime, date, time)):
        return value.isoformat(), True
    if isinstance(value, (bytes, bytearray)):
        try:
            return value.decode('utf-8'), True
        except UnicodeDecodeError:
            return value, False
    if callable(value):
        return value, False
    return str(value), True


def tobool(
    value: Any,
    truthy: Sequence[str] = TRUTHY,
    falsy: Sequence[str] = FALSY,
    sensitive: bool = False
) -> Tuple[Any, bool]:
    "Strings from the truthy/falsy sets, the numbers 0 and 1, and bools."
    if isinstance(value, bool):
        return value, True
    if isnumber(value):
        if 1 == value:
            return True, True
        if 0 == value:
            return False, True
        return value, False
    if isinstance(value, str):
        text = value.strip() if sensitive else value.strip().lower()
        if text in (truthy if sensitive else [t.lower() for t in truthy]):
            return True, True
        if text in (falsy if sensitive else [f.lower() for f in falsy]):
            return False, True
    return value, False


def _integral(num: Decimal, maxdigits: int) -> Any:
    "Integer value of a decimal, or None if it is fractional or too long."
    if not num.is_finite() or maxdigits <= num.adjusted():
        return None
    if num != num.to_integral_value():
        return None
    return int(num)


def tointeger(value: Any, maxdigits: int = INT_MAXDIGITS) -> Tuple[Any, bool]:
    """
    Integral floats, decimal strings, hex strings and scientific strings
    with an integral value. Values with more than `maxdigits` digits are
    rejected. Range checks are left to the integer schema.
    """
    if isinstance(value, bool):
        return int(value), True
    if isinstance(value, int):
        return value, True
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return value, False
        if value == int(value):
            return int(value), True
        return value, False
    if isinstance(value, Decimal):
        out = _integral(value, maxdigits)
        return (value, False) if out is None else (out, True)
    if isinstance(value, str):
        text = value.strip().replace('_', S_MT)
        if R_HEX.match(text):
            if maxdigits < len(text):
                return value, False
            return int(text, 16), True
        if R_INTEGER.match(text) or R_DECIMAL.match(text):
            try:
                num = Decimal(text)
            except (ArithmeticError, ValueError):
                return value, False
            out = _integral(num, maxdigits)
            if out is not None:
                return out, True
    return value, False


def tofloat(value: Any) -> Tuple[Any, bool]:
    "Numbers, bools, and decimal, hex or scientific strings."
    if isinstance(value, bool):
        return float(value), True
    if isinstance(value, (int, Decimal)):
        try:
            return float(value), True
        except OverflowError:
            return value, False
    if isinstance(value, float):
        return value, True
    if isinstance(value, str):
        text = value.strip().replace('_', S_MT)
        try:
            if R_HEX.match(text):
                return float(int(text, 16)), True
            if R_DECIMAL.match(text):
                return float(text), True
        except OverflowError:
            return value, False
    return value, False


def tobigint(value: Any) -> Tuple[Any, bool]:
    "Arbitrary precision integers from decimal strings, and integral numbers."
    return tointeger(value, BIGINT_MAXDIGITS)


def todate(value: Any) -> Tuple[Any, bool]:
    "ISO 8601 strings, epoch seconds (UTC), dates and datetimes."
    if isinstance(value, datetime):
        return value, True
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day), True
    if isinstance(value, bool):
        return value, False
    if isnumber(value):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc), True
        except (OverflowError, OSError, ValueError):
            return value, False
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        try:
            return datetime.fromisoformat(text), True
        except ValueError:
            return value, False
    return value, False
