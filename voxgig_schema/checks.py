# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Voxgig Schema: checks
# =====================
#
# A check runs after type extraction, over the frame payload. Checks are
# immutable once built, and shared between cloned schemas.
#
# - ComparisonCheck: gt, gte, lt, lte (too_small, too_big).
# - MultipleOfCheck: multipleof/step (not_multiple_of).
# - LengthCheck: min, max, length over strings and collections.
# - FormatCheck: regex and named formats (invalid_format).
# - RefineCheck: user predicate over the value (custom).
# - CallbackCheck: user callback over the payload, adds any issues.
# - OverwriteCheck: rewrites the value, never adds issues.


from typing import *
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
import re
import unicodedata

from .util import (
    isnumber,
    typify,
    S_string,
    S_array,
    S_set,
    S_object,
    S_date,
)

from .issues import (
    Issue,
    S_too_small,
    S_too_big,
    S_not_multiple_of,
    S_invalid_format,
    S_custom,
)


S_gt = 'gt'
S_gte = 'gte'
S_lt = 'lt'
S_lte = 'lte'
S_min = 'min'
S_max = 'max'
S_length = 'length'
S_regex = 'regex'
S_number = 'number'


class Check:
    "Base check. `error` overrides messages, `abort` makes issues fatal."

    kind = 'check'

    def __init__(self, error: Any = None, abort: bool = False) -> None:
        self.error = error
        self.abort = abort

    def run(self, payload: Any, ctx: Any) -> None:
        raise NotImplementedError(self.kind)

    def issue(self, payload: Any, code: str, **fields: Any) -> Issue:
        return payload.addissue(Issue(code, fatal=self.abort, **fields))

    def __repr__(self) -> str:
        return '%s(%s)' % (type(self).__name__, self.kind)


def origin(value: Any) -> str:
    "Name the kind of a compared or measured value, as used in issue origins."
    if isnumber(value) or isinstance(value, Decimal):
        return S_number
    if isinstance(value, (datetime, date, time)):
        return S_date
    if isinstance(value, str):
        return S_string
    if isinstance(value, (list, tuple)):
        return S_array
    if isinstance(value, (set, frozenset)):
        return S_set
    if isinstance(value, dict):
        return S_object
    return typify(value)


class ComparisonCheck(Check):
    "Numeric (or otherwise ordered) bound."

    def __init__(
        self,
        kind: str,
        value: Any,
        origin: str = None,
        error: Any = None,
        abort: bool = False
    ) -> None:
        super().__init__(error, abort)
        if kind not in (S_gt, S_gte, S_lt, S_lte):
            raise ValueError('Unknown comparison: ' + repr(kind))
        self.kind = kind
        self.value = value
        self.origin = origin

    def run(self, payload, ctx):
        val = payload.value
        inclusive = self.kind in (S_gte, S_lte)
        small = self.kind in (S_gt, S_gte)

        try:
            if small:
                ok = val >= self.value if inclusive else val > self.value
            else:
                ok = val <= self.value if inclusive else val < self.value
        except TypeError:
            ok = False

        if not ok:
            bound = {'minimum': self.value} if small else {'maximum': self.value}
            self.issue(
                payload,
                S_too_small if small else S_too_big,
                inclusive=inclusive,
                origin=self.origin or origin(val),
                **bound
            )


class MultipleOfCheck(Check):
    "Exact modulo for integers, decimal remainder for floats."

    kind = 'multipleof'

    def __init__(self, divisor: Any, origin: str = None, error: Any = None, abort: bool = False) -> None:
        super().__init__(error, abort)
        if not isnumber(divisor) or 0 == divisor:
            raise ValueError('Divisor must be a non-zero number: ' + repr(divisor))
        self.divisor = divisor
        self.origin = origin

    def run(self, payload, ctx):
        if not ismultiple(payload.value, self.divisor):
            self.issue(
                payload,
                S_not_multiple_of,
                divisor=self.divisor,
                origin=self.origin or origin(payload.value),
            )


def ismultiple(value: Any, divisor: Any) -> bool:
    if isinstance(value, bool) or not isnumber(value):
        return False
    if isinstance(value, int) and isinstance(divisor, int):
        return 0 == value % divisor
    try:
        return 0 == Decimal(repr(value)) % Decimal(repr(divisor))
    except (InvalidOperation, ValueError):
        return False


class LengthCheck(Check):
    """
    Length bound. Strings count code points, collections count elements,
    maps count keys.
    """
    def __init__(
        self,
        kind: str,
        value: int,
        origin: str = None,
        error: Any = None,
        abort: bool = False
    ) -> None:
        super().__init__(error, abort)
        if kind not in (S_min, S_max, S_length):
            raise ValueError('Unknown length check: ' + repr(kind))
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise ValueError('Length must be a non-negative integer: ' + repr(value))
        self.kind = kind
        self.value = value
        self.origin = origin

    def run(self, payload, ctx):
        val = payload.value
        try:
            count = len(val)
        except TypeError:
            return

        where = self.origin or origin(val)

        if count < self.value and self.kind in (S_min, S_length):
            self.issue(
                payload,
                S_too_small,
                minimum=self.value,
                inclusive=True,
                exact=(S_length == self.kind) or None,
                origin=where,
            )
        elif self.value < count and self.kind in (S_max, S_length):
            self.issue(
                payload,
                S_too_big,
                maximum=self.value,
                inclusive=True,
                exact=(S_length == self.kind) or None,
                origin=where,
            )


class FormatCheck(Check):
    """
    String format. The test is a compiled regex or a predicate function.
    Extra fields (prefix, suffix, includes, algorithm) go onto the issue.
    """
    kind = 'format'

    def __init__(
        self,
        format: str,
        test: Any,
        error: Any = None,
        abort: bool = False,
        **fields: Any
    ) -> None:
        super().__init__(error, abort)
        if isinstance(test, str):
            test = re.compile(test)
        self.format = format
        self.test = test
        self.fields = fields

    @property
    def pattern(self) -> Optional[str]:
        return self.test.pattern if hasattr(self.test, 'pattern') else None

    def matches(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        if hasattr(self.test, 'search'):
            return self.test.search(value) is not None
        return bool(self.test(value))

    def run(self, payload, ctx):
        if not self.matches(payload.value):
            self.issue(
                payload,
                S_invalid_format,
                format=self.format,
                pattern=self.pattern if S_regex == self.format else None,
                origin=S_string,
                **self.fields
            )


class RefineCheck(Check):
    "User predicate over the value. A falsy result adds a custom issue."

    kind = 'refine'

    def __init__(
        self,
        fn: Callable[[Any], Any],
        error: Any = None,
        abort: bool = False,
        path: List[Any] = None,
        params: Dict[str, Any] = None
    ) -> None:
        super().__init__(error, abort)
        if not callable(fn):
            raise TypeError('Refinement must be callable: ' + repr(fn))
        self.fn = fn
        self.path = list(path or [])
        self.params = params

    def run(self, payload, ctx):
        if not self.fn(payload.value):
            payload.addissue(Issue(
                S_custom,
                path=self.path,
                fatal=self.abort,
                params=self.params,
            ))


class CallbackCheck(Check):
    "User callback receiving the payload. It may add any number of issues."

    kind = 'check'

    def __init__(self, fn: Callable[[Any], Any], error: Any = None, abort: bool = False) -> None:
        super().__init__(error, abort)
        if not callable(fn):
            raise TypeError('Check must be callable: ' + repr(fn))
        self.fn = fn

    def run(self, payload, ctx):
        start = len(payload.issues)
        self.fn(payload)
        if self.abort:
            for issue in payload.issues[start:]:
                issue.fatal = True


class OverwriteCheck(Check):
    kind = 'overwrite'

    def __init__(self, fn: Callable[[Any], Any]) -> None:
        super().__init__()
        if not callable(fn):
            raise TypeError('Overwrite must be callable: ' + repr(fn))
        self.fn = fn

    def run(self, payload, ctx):
        payload.replace = self.fn(payload.value)


def trim(value):
    return value.strip() if isinstance(value, str) else value


def tolowercase(value):
    return value.lower() if isinstance(value, str) else value


def touppercase(value):
    return value.upper() if isinstance(value, str) else value


def normalizer(form: str = 'NFC') -> Callable[[Any], Any]:
    if form not in ('NFC', 'NFD', 'NFKC', 'NFKD'):
        raise ValueError('Unknown normalization form: ' + repr(form))

    def normalize(value):
        return unicodedata.normalize(form, value) if isinstance(value, str) else value

    return normalize


def regex(pattern: Any, error: Any = None, abort: bool = False) -> FormatCheck:
    return FormatCheck(S_regex, pattern, error, abort)


def includes(text: str, position: int = None, error: Any = None, abort: bool = False) -> FormatCheck:
    start = 0 if position is None else position
    return FormatCheck(
        'includes', lambda v: text in v[start:], error, abort, includes=text)


def startswith(prefix: str, error: Any = None, abort: bool = False) -> FormatCheck:
    return FormatCheck(
        'starts_with', lambda v: v.startswith(prefix), error, abort, prefix=prefix)


def endswith(suffix: str, error: Any = None, abort: bool = False) -> FormatCheck:
    return FormatCheck(
        'ends_with', lambda v: v.endswith(suffix), error, abort, suffix=suffix)


def lowercase(error: Any = None, abort: bool = False) -> FormatCheck:
    return FormatCheck('lowercase', lambda v: v == v.lower(), error, abort)


def uppercase(error: Any = None, abort: bool = False) -> FormatCheck:
    return FormatCheck('uppercase', lambda v: v == v.upper(), error, abort)
