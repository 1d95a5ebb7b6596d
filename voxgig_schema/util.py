# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Voxgig Schema: node utilities
# =============================
#
# Small helpers over in-memory JSON-like values, shared by the schema
# modules. Adapted from the struct utility functions.
#
# - isnode, ismap, islist, isfunc: identify value kinds.
# - typify: name the parsed type of a value, as reported in issues.
# - getprop: safely get a property value by key.
# - items: list node entries (insertion order).
# - stringify: human-friendly string version of a value.
# - pathify: display string for an issue path.
# - clone: copy a JSON-like data structure.
# - deepequal: type-strict deep equality.
# - mergevalues: merge two parsed values (used by intersection).


from typing import *
from datetime import date, datetime, time, timedelta
from decimal import Decimal
import json
import math
import re


# Marks a key that is not present at all, as opposed to present and None.
class _Absent:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return '<absent>'

    def __bool__(self):
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


ABSENT = _Absent()
UNDEF = None


# Type codes.
S_string = 'string'
S_int = 'int'
S_int8 = 'int8'
S_int16 = 'int16'
S_int32 = 'int32'
S_int64 = 'int64'
S_uint = 'uint'
S_uint8 = 'uint8'
S_uint16 = 'uint16'
S_uint32 = 'uint32'
S_uint64 = 'uint64'
S_float = 'float'
S_float32 = 'float32'
S_float64 = 'float64'
S_bigint = 'bigint'
S_bool = 'bool'
S_nil = 'nil'
S_never = 'never'
S_any = 'any'
S_unknown = 'unknown'
S_object = 'object'
S_record = 'record'
S_map = 'map'
S_array = 'array'
S_set = 'set'
S_tuple = 'tuple'
S_union = 'union'
S_discriminated = 'discriminated'
S_xor = 'xor'
S_intersection = 'intersection'
S_pipe = 'pipe'
S_transform = 'transform'
S_lazy = 'lazy'
S_literal = 'literal'
S_enum = 'enum'
S_function = 'function'
S_date = 'date'
S_stringbool = 'stringbool'
S_custom_type = 'custom'

# Parsed type names that only appear as `received`.
S_NaN = 'NaN'
S_Infinity = 'Infinity'
S_bytes = 'bytes'
S_complex = 'complex'

INT_TYPES = (
    S_int, S_int8, S_int16, S_int32, S_int64,
    S_uint, S_uint8, S_uint16, S_uint32, S_uint64,
)
FLOAT_TYPES = (S_float, S_float32, S_float64)
NUMERIC_TYPES = INT_TYPES + FLOAT_TYPES + (S_bigint,)

# General strings.
S_MT = ''
S_DT = '.'

R_IDENT = re.compile(r'^[A-Za-z_$][A-Za-z0-9_$]*$')


def isnode(val: Any = UNDEF) -> bool:
    "Value is a node - a map (dict) or list (list or tuple)."
    return isinstance(val, (dict, list, tuple))


def ismap(val: Any = UNDEF) -> bool:
    "Value is a map (dict)."
    return isinstance(val, dict)


def islist(val: Any = UNDEF) -> bool:
    "Value is a list or tuple."
    return isinstance(val, (list, tuple))


def isfunc(val: Any = UNDEF) -> bool:
    "Value is a function."
    return callable(val)


def isnumber(val: Any = UNDEF) -> bool:
    "Value is an int or float, but not a bool."
    return isinstance(val, (int, float)) and not isinstance(val, bool)


def typify(value: Any = UNDEF) -> str:
    "Name the parsed type of a value, using the type code names."
    if value is None or value is ABSENT:
        return S_nil
    if isinstance(value, bool):
        return S_bool
    if isinstance(value, int):
        return S_int
    if isinstance(value, float):
        if math.isnan(value):
            return S_NaN
        if math.isinf(value):
            return S_Infinity
        return S_float
    if isinstance(value, Decimal):
        return S_float
    if isinstance(value, complex):
        return S_complex
    if isinstance(value, str):
        return S_string
    if isinstance(value, (bytes, bytearray)):
        return S_bytes
    if isinstance(value, dict):
        return S_object
    if isinstance(value, list):
        return S_array
    if isinstance(value, tuple):
        return S_tuple
    if isinstance(value, (set, frozenset)):
        return S_set
    if isinstance(value, (datetime, date, time)):
        return S_date
    if callable(value):
        return S_function
    return S_object


def getprop(val: Any = UNDEF, key: Any = UNDEF, alt: Any = UNDEF) -> Any:
    """
    Safely get a property of a node. Undefined arguments return the
    alternative. Also reads attributes of plain option objects.
    """
    if val is UNDEF or key is UNDEF:
        return alt

    if ismap(val):
        out = val.get(key, alt)
        return alt if out is UNDEF else out

    if islist(val):
        try:
            key = int(key)
        except (TypeError, ValueError):
            return alt
        if 0 <= key < len(val):
            return val[key]
        return alt

    if isinstance(key, str):
        out = getattr(val, key, alt)
        return alt if out is UNDEF else out

    return alt


def items(val: Any = UNDEF) -> List[Tuple[Any, Any]]:
    "List the entries of a map or list as (key, value) tuples."
    if ismap(val):
        return list(val.items())
    if islist(val):
        return list(enumerate(val))
    return []


def stringify(val: Any, maxlen: int = UNDEF) -> str:
    "Safely stringify a value for printing (NOT JSON!)."
    valstr = S_MT

    if val is ABSENT:
        return valstr

    if isinstance(val, str):
        valstr = val
    elif val is None:
        valstr = 'null'
    elif isinstance(val, bool):
        valstr = 'true' if val else 'false'
    elif isinstance(val, (datetime, date, time)):
        valstr = val.isoformat()
    else:
        try:
            valstr = json.dumps(val, separators=(',', ':'), default=_jsondefault)
            valstr = valstr.replace('"', '')
        except (TypeError, ValueError):
            valstr = str(val)

    if maxlen is not UNDEF:
        json_len = len(valstr)
        valstr = valstr[:maxlen]

        if 3 < maxlen < json_len:
            valstr = valstr[:maxlen - 3] + '...'

    return valstr


def _jsondefault(val):
    if isinstance(val, (set, frozenset)):
        return list(val)
    if isinstance(val, (datetime, date, time)):
        return val.isoformat()
    return str(val)


def pathify(path: Any = UNDEF) -> str:
    """
    Display string for a path: dotted identifiers, bracketed indexes and
    quoted keys, e.g. `users[0].name` or `headers["content-type"]`.
    """
    if path is UNDEF or path is ABSENT:
        return '<unknown-path>'

    if not islist(path):
        path = [path]

    if 0 == len(path):
        return '<root>'

    parts = []
    for p in path:
        if isinstance(p, int) and not isinstance(p, bool):
            parts.append('[' + str(p) + ']')
        elif isinstance(p, str) and R_IDENT.match(p):
            parts.append((S_DT if parts else S_MT) + p)
        else:
            parts.append('[' + json.dumps(stringify(p)) + ']')

    return S_MT.join(parts)


def clone(val: Any = UNDEF) -> Any:
    """
    Clone a JSON-like data structure.
    NOTE: non-node values (including functions) are copied by reference.
    """
    if ismap(val):
        return {k: clone(v) for k, v in val.items()}
    if isinstance(val, list):
        return [clone(v) for v in val]
    if isinstance(val, tuple):
        return tuple(clone(v) for v in val)
    if isinstance(val, set):
        return set(val)
    return val


def deepequal(a: Any, b: Any) -> bool:
    "Deep equality that does not treat True as 1, or 1 as 1.0 unless both are numbers."
    if a is b:
        return True

    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b

    if isnumber(a) and isnumber(b):
        return a == b

    if ismap(a) and ismap(b):
        if len(a) != len(b):
            return False
        for k, v in a.items():
            if k not in b or not deepequal(v, b[k]):
                return False
        return True

    if islist(a) and islist(b):
        if type(a) is not type(b) or len(a) != len(b):
            return False
        return all(deepequal(x, y) for x, y in zip(a, b))

    if type(a) is not type(b):
        return False

    try:
        return bool(a == b)
    except Exception:
        return False


def mergevalues(a: Any, b: Any, path: List[Any] = None) -> Tuple[bool, Any, List[Any]]:
    """
    Merge two parsed values. Maps merge key by key, lists merge element by
    element, and anything else must be deeply equal. Returns a triple of
    (merged-ok, merged-value, path-of-conflict).
    """
    path = [] if path is None else path

    if deepequal(a, b):
        return True, a, path

    if ismap(a) and ismap(b):
        out = dict(a)
        for key, bval in b.items():
            if key in a:
                ok, mval, mpath = mergevalues(a[key], bval, path + [key])
                if not ok:
                    return False, UNDEF, mpath
                out[key] = mval
            else:
                out[key] = bval
        return True, out, path

    if islist(a) and islist(b):
        if len(a) != len(b):
            return False, UNDEF, path
        out = []
        for index, (aval, bval) in enumerate(zip(a, b)):
            ok, mval, mpath = mergevalues(aval, bval, path + [index])
            if not ok:
                return False, UNDEF, mpath
            out.append(mval)
        return True, (tuple(out) if isinstance(a, tuple) else out), path

    return False, UNDEF, path


def numstr(val: Any) -> str:
    "Format a numeric threshold without a spurious trailing `.0`."
    if isinstance(val, float) and val.is_integer() and abs(val) < 1e16:
        return str(int(val))
    if isinstance(val, (datetime, date, time)):
        return val.isoformat()
    if isinstance(val, timedelta):
        return str(val)
    return str(val)
