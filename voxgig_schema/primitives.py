# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Voxgig Schema: primitive schemas
# ================================
#
# Scalar schemas. Each one extracts its base type from the input,
# rejecting anything else with invalid_type, and exposes the check
# builders that apply to it.


from typing import *
from datetime import date, datetime
from decimal import Decimal
import functools
import math

from .util import (
    ABSENT,
    deepequal,
    S_string,
    S_int,
    S_int8,
    S_int16,
    S_int32,
    S_int64,
    S_uint,
    S_uint8,
    S_uint16,
    S_uint32,
    S_uint64,
    S_float32,
    S_bigint,
    S_enum,
    S_date,
    S_Infinity,
)

from .issues import (
    Issue,
    S_custom,
    S_invalid_value,
    S_too_big,
    S_too_small,
)

from .checks import (
    ComparisonCheck,
    FormatCheck,
    LengthCheck,
    MultipleOfCheck,
    S_gt,
    S_gte,
    S_lt,
    S_lte,
    S_min,
    S_max,
    S_length,
    endswith,
    includes,
    lowercase,
    normalizer,
    regex,
    startswith,
    tolowercase,
    touppercase,
    trim,
    uppercase,
)

from .coerce import (
    tobigint,
    tobool,
    todate,
    tofloat,
    tointeger,
    tostring,
)

from .engine import callback
from .schema import Schema


# Integer ranges by width. None means unbounded.
INT_RANGES = {
    S_int: (-2**63, 2**63 - 1),
    S_int8: (-2**7, 2**7 - 1),
    S_int16: (-2**15, 2**15 - 1),
    S_int32: (-2**31, 2**31 - 1),
    S_int64: (-2**63, 2**63 - 1),
    S_uint: (0, 2**64 - 1),
    S_uint8: (0, 2**8 - 1),
    S_uint16: (0, 2**16 - 1),
    S_uint32: (0, 2**32 - 1),
    S_uint64: (0, 2**64 - 1),
    S_bigint: (None, None),
}

FLOAT32_MAX = 3.4028234663852886e38


class StringSchema(Schema):

    def _coerce(self, value):
        return tostring(value)

    def _parse(self, payload, ctx):
        if not isinstance(payload.value, str):
            payload.typeissue(self.expected)

    def min(self, n: int, error: Any = None) -> 'StringSchema':
        return self._addcheck(LengthCheck(S_min, n, S_string, error))

    def max(self, n: int, error: Any = None) -> 'StringSchema':
        return self._addcheck(LengthCheck(S_max, n, S_string, error))

    def length(self, n: int, error: Any = None) -> 'StringSchema':
        return self._addcheck(LengthCheck(S_length, n, S_string, error))

    def nonempty(self, error: Any = None) -> 'StringSchema':
        return self.min(1, error)

    def regex(self, pattern: Any, error: Any = None) -> 'StringSchema':
        return self._addcheck(regex(pattern, error))

    def includes(self, text: str, position: int = None, error: Any = None) -> 'StringSchema':
        return self._addcheck(includes(text, position, error))

    def startswith(self, prefix: str, error: Any = None) -> 'StringSchema':
        return self._addcheck(startswith(prefix, error))

    def endswith(self, suffix: str, error: Any = None) -> 'StringSchema':
        return self._addcheck(endswith(suffix, error))

    def lowercase(self, error: Any = None) -> 'StringSchema':
        return self._addcheck(lowercase(error))

    def uppercase(self, error: Any = None) -> 'StringSchema':
        return self._addcheck(uppercase(error))

    def trim(self) -> 'StringSchema':
        return self.overwrite(trim)

    def tolowercase(self) -> 'StringSchema':
        return self.overwrite(tolowercase)

    def touppercase(self) -> 'StringSchema':
        return self.overwrite(touppercase)

    def normalize(self, form: str = 'NFC') -> 'StringSchema':
        return self.overwrite(normalizer(form))

    def format(self, name: str, test: Any, error: Any = None) -> 'StringSchema':
        "Add a named format check, from a regex or a predicate."
        return self._addcheck(FormatCheck(name, test, error))


class NumberSchema(Schema):
    "Shared numeric checks."

    @property
    def origin(self):
        return 'number'

    def gt(self, value: Any, error: Any = None) -> 'NumberSchema':
        return self._addcheck(ComparisonCheck(S_gt, value, self.origin, error))

    def gte(self, value: Any, error: Any = None) -> 'NumberSchema':
        return self._addcheck(ComparisonCheck(S_gte, value, self.origin, error))

    def lt(self, value: Any, error: Any = None) -> 'NumberSchema':
        return self._addcheck(ComparisonCheck(S_lt, value, self.origin, error))

    def lte(self, value: Any, error: Any = None) -> 'NumberSchema':
        return self._addcheck(ComparisonCheck(S_lte, value, self.origin, error))

    def min(self, value: Any, error: Any = None) -> 'NumberSchema':
        return self.gte(value, error)

    def max(self, value: Any, error: Any = None) -> 'NumberSchema':
        return self.lte(value, error)

    def positive(self, error: Any = None) -> 'NumberSchema':
        return self.gt(0, error)

    def nonnegative(self, error: Any = None) -> 'NumberSchema':
        return self.gte(0, error)

    def negative(self, error: Any = None) -> 'NumberSchema':
        return self.lt(0, error)

    def nonpositive(self, error: Any = None) -> 'NumberSchema':
        return self.lte(0, error)

    def multipleof(self, divisor: Any, error: Any = None) -> 'NumberSchema':
        return self._addcheck(MultipleOfCheck(divisor, self.origin, error))

    def step(self, divisor: Any, error: Any = None) -> 'NumberSchema':
        return self.multipleof(divisor, error)


class IntegerSchema(NumberSchema):
    """
    Integers of a given width. The width range is enforced during type
    extraction, with the width name as the issue origin.
    """

    def _coerce(self, value):
        if S_bigint == self.internals.type:
            return tobigint(value)
        return tointeger(value)

    def _parse(self, payload, ctx):
        value = payload.value

        if isinstance(value, bool) or not isinstance(value, int):
            payload.typeissue(self.expected)
            return

        low, high = INT_RANGES.get(self.internals.type, (None, None))
        if low is not None and value < low:
            payload.addissue(Issue(
                S_too_small,
                minimum=low,
                inclusive=True,
                origin=self.internals.type,
            ))
        elif high is not None and high < value:
            payload.addissue(Issue(
                S_too_big,
                maximum=high,
                inclusive=True,
                origin=self.internals.type,
            ))


class FloatSchema(NumberSchema):
    "Finite floats. Integers are accepted and converted."

    def _coerce(self, value):
        return tofloat(value)

    def _parse(self, payload, ctx):
        value = payload.value

        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            payload.typeissue(self.expected)
            return

        try:
            value = float(value)
        except OverflowError:
            payload.typeissue(self.expected, received=S_Infinity)
            return

        if math.isnan(value) or math.isinf(value):
            payload.typeissue(self.expected)
            return

        if S_float32 == self.internals.type and FLOAT32_MAX < abs(value):
            bound = FLOAT32_MAX if 0 < value else -FLOAT32_MAX
            if 0 < value:
                payload.addissue(Issue(S_too_big, maximum=bound, inclusive=True, origin=S_float32))
            else:
                payload.addissue(Issue(S_too_small, minimum=bound, inclusive=True, origin=S_float32))
            return

        payload.value = value


class BoolSchema(Schema):

    def _coerce(self, value):
        return tobool(value)

    def _parse(self, payload, ctx):
        if not isinstance(payload.value, bool):
            payload.typeissue(self.expected)


class NilSchema(Schema):
    "Only nil (an absent value parses to nil)."

    acceptsnil = True

    def _parse(self, payload, ctx):
        if payload.value is ABSENT:
            payload.value = None
        elif payload.value is not None:
            payload.typeissue(self.expected)


class NeverSchema(Schema):
    acceptsnil = True

    def _parse(self, payload, ctx):
        payload.typeissue(self.expected)


class AnySchema(Schema):
    "Accepts anything, including nil and absent."

    acceptsnil = True
    optin = True

    def _parse(self, payload, ctx):
        pass


class LiteralSchema(Schema):
    "One of a fixed set of values, compared with type-strict equality."

    @property
    def acceptsnil(self):
        return any(v is None for v in self.values)

    @property
    def values(self) -> List[Any]:
        return list(self.internals.defn['values'])

    @property
    def value(self) -> Any:
        values = self.internals.defn['values']
        if 1 != len(values):
            raise ValueError('Literal has more than one value: ' + repr(values))
        return values[0]

    def _parse(self, payload, ctx):
        if payload.value is ABSENT:
            payload.value = None
        for candidate in self.internals.defn['values']:
            if deepequal(candidate, payload.value):
                return
        payload.addissue(Issue(S_invalid_value, values=self.values))


class EnumSchema(Schema):
    """
    One of a set of named values. Built from a list (names are the values)
    or a dict of name to value.
    """

    @property
    def enum(self) -> Dict[str, Any]:
        return dict(self.internals.defn['entries'])

    @property
    def options(self) -> List[Any]:
        return list(self.internals.defn['entries'].values())

    def _parse(self, payload, ctx):
        value = payload.value
        for candidate in self.internals.defn['entries'].values():
            if deepequal(candidate, value):
                return
        payload.addissue(Issue(S_invalid_value, values=self.options))

    def extract(self, keys: Sequence[Any], error: Any = None) -> 'EnumSchema':
        "Enum of only the given names (or values, for list enums)."
        entries = self.internals.defn['entries']
        missing = [k for k in keys if k not in entries]
        if missing:
            raise ValueError('Unknown enum keys: ' + ', '.join(map(str, missing)))
        return EnumSchema.make(S_enum, {'entries': {k: entries[k] for k in keys}},
                               error=error if error is not None else self.internals.error)

    def exclude(self, keys: Sequence[Any], error: Any = None) -> 'EnumSchema':
        entries = self.internals.defn['entries']
        missing = [k for k in keys if k not in entries]
        if missing:
            raise ValueError('Unknown enum keys: ' + ', '.join(map(str, missing)))
        return EnumSchema.make(S_enum, {'entries': {k: v for k, v in entries.items() if k not in keys}},
                               error=error if error is not None else self.internals.error)


class DateSchema(Schema):
    "Datetime values. Plain dates are promoted to midnight."

    def _coerce(self, value):
        return todate(value)

    def _parse(self, payload, ctx):
        value = payload.value
        if isinstance(value, datetime):
            return
        if isinstance(value, date):
            payload.value = datetime(value.year, value.month, value.day)
            return
        payload.typeissue(self.expected)

    def min(self, value: datetime, error: Any = None) -> 'DateSchema':
        return self._addcheck(ComparisonCheck(S_gte, value, S_date, error))

    def max(self, value: datetime, error: Any = None) -> 'DateSchema':
        return self._addcheck(ComparisonCheck(S_lte, value, S_date, error))


class StringBoolSchema(Schema):
    """
    Strings from configurable truthy and falsy sets, parsed to a bool.
    Matching is case-insensitive unless the case option is 'sensitive'.
    """

    @property
    def expected(self):
        return S_string

    def _parse(self, payload, ctx):
        value = payload.value
        if not isinstance(value, str):
            payload.typeissue(self.expected)
            return

        defn = self.internals.defn
        out, ok = tobool(value, defn['truthy'], defn['falsy'], 'sensitive' == defn['case'])
        if ok:
            payload.value = out
        else:
            payload.addissue(Issue(
                S_invalid_value,
                values=list(defn['truthy']) + list(defn['falsy']),
            ))


class FunctionSchema(Schema):
    """
    Callable values. With `input` (a tuple schema) and `output` schemas,
    `implement(fn)` wraps a function to validate its arguments and result.
    """

    def _parse(self, payload, ctx):
        if not callable(payload.value):
            payload.typeissue(self.expected)

    def input(self, schema: Schema) -> 'FunctionSchema':
        return self._clone(defn=dict(self.internals.defn, input=schema))

    def output(self, schema: Schema) -> 'FunctionSchema':
        return self._clone(defn=dict(self.internals.defn, output=schema))

    def implement(self, fn: Callable[..., Any]) -> Callable[..., Any]:
        if not callable(fn):
            raise TypeError('Implementation must be callable: ' + repr(fn))

        insch = self.internals.defn.get('input')
        outsch = self.internals.defn.get('output')

        @functools.wraps(fn)
        def implemented(*args):
            if insch is not None:
                args = insch.mustparse(list(args))
            out = fn(*args)
            if outsch is not None:
                out = outsch.mustparse(out)
            return out

        return implemented


class CustomSchema(Schema):
    """
    Values accepted by a predicate. With no predicate, anything passes.
    Used for `custom` and `instanceof`.
    """

    acceptsnil = True

    def _parse(self, payload, ctx):
        fn = self.internals.defn.get('fn')
        if fn is None:
            return
        if not callback(payload, fn, payload.value) and not payload.issues:
            payload.addissue(Issue(
                S_custom,
                message=self.internals.defn.get('message'),
                params=self.internals.defn.get('params'),
            ))
