# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Voxgig Schema: factories
# ========================
#
# Functions that build schemas. Every factory takes an optional `error`
# override (string, callable, or dict of issue code to message). Scalar
# factories also take `coerce`.
#
#   user = object({
#       'name': string().min(1),
#       'age': integer().gte(0).optional(),
#   })
#   out, err = user.parse({'name': 'Alice'})


from typing import *

from .util import (
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
    S_float,
    S_float32,
    S_float64,
    S_bigint,
    S_bool,
    S_nil,
    S_never,
    S_any,
    S_unknown,
    S_array,
    S_tuple,
    S_set,
    S_map,
    S_record,
    S_literal,
    S_enum,
    S_date,
    S_stringbool,
    S_function,
    S_custom_type,
    ismap,
    islist,
    stringify,
)

from .coerce import (
    FALSY,
    TRUTHY,
)

from .primitives import (
    AnySchema,
    BoolSchema,
    CustomSchema,
    DateSchema,
    EnumSchema,
    FloatSchema,
    FunctionSchema,
    IntegerSchema,
    LiteralSchema,
    NeverSchema,
    NilSchema,
    StringBoolSchema,
    StringSchema,
)

from .formats import (
    FormatSchema,
    IsoSchema,
    R_BASE64,
    R_BASE64URL,
    R_CIDRV4,
    R_CUID,
    R_CUID2,
    R_DATE,
    R_DURATION,
    R_E164,
    R_EMAIL,
    R_EMOJI,
    R_GUID,
    R_HEX,
    R_HOSTNAME,
    R_IPV4,
    R_KSUID,
    R_MAC,
    R_NANOID,
    R_ULID,
    R_XID,
    S_base64,
    S_base64url,
    S_cidrv4,
    S_cidrv6,
    S_cuid,
    S_cuid2,
    S_date as S_fmt_date,
    S_datetime,
    S_duration,
    S_e164,
    S_email,
    S_emoji,
    S_guid,
    S_hex,
    S_hostname,
    S_ipv4,
    S_ipv6,
    S_iso_date,
    S_iso_datetime,
    S_iso_duration,
    S_iso_time,
    S_json_string,
    S_jwt,
    S_ksuid,
    S_mac,
    S_nanoid,
    S_time,
    S_ulid,
    S_url,
    S_uuid,
    S_xid,
    datetimepattern,
    iscidrv6,
    isipv6,
    isjsonstring,
    isjwt,
    isurl,
    timepattern,
    uuidpattern,
)

from .objects import (
    ObjectSchema,
    S_passthrough,
    S_strict,
    S_strip,
)

from .collections import (
    ArraySchema,
    MapSchema,
    RecordSchema,
    SetSchema,
    TupleSchema,
    S_exhaustive,
    S_loose,
    S_partial,
)

from .unions import (
    DiscriminatedSchema,
    IntersectionSchema,
    UnionSchema,
    XorSchema,
)

from .composers import (
    LazySchema,
    PipeSchema,
    TransformSchema,
)

from .schema import Schema


# Scalars.

def string(error: Any = None, coerce: bool = False) -> StringSchema:
    return StringSchema.make(S_string, error=error, coerce=coerce)


def _integer(type, error, coerce):
    return IntegerSchema.make(type, error=error, coerce=coerce)


def integer(error: Any = None, coerce: bool = False) -> IntegerSchema:
    "Integer in the int64 range."
    return _integer(S_int, error, coerce)


def int8(error: Any = None, coerce: bool = False) -> IntegerSchema:
    return _integer(S_int8, error, coerce)


def int16(error: Any = None, coerce: bool = False) -> IntegerSchema:
    return _integer(S_int16, error, coerce)


def int32(error: Any = None, coerce: bool = False) -> IntegerSchema:
    return _integer(S_int32, error, coerce)


def int64(error: Any = None, coerce: bool = False) -> IntegerSchema:
    return _integer(S_int64, error, coerce)


def uint(error: Any = None, coerce: bool = False) -> IntegerSchema:
    "Unsigned integer in the uint64 range."
    return _integer(S_uint, error, coerce)


def uint8(error: Any = None, coerce: bool = False) -> IntegerSchema:
    return _integer(S_uint8, error, coerce)


def uint16(error: Any = None, coerce: bool = False) -> IntegerSchema:
    return _integer(S_uint16, error, coerce)


def uint32(error: Any = None, coerce: bool = False) -> IntegerSchema:
    return _integer(S_uint32, error, coerce)


def uint64(error: Any = None, coerce: bool = False) -> IntegerSchema:
    return _integer(S_uint64, error, coerce)


def bigint(error: Any = None, coerce: bool = False) -> IntegerSchema:
    "Integer of any size."
    return _integer(S_bigint, error, coerce)


def number(error: Any = None, coerce: bool = False) -> FloatSchema:
    "Finite float (integers are accepted and converted)."
    return FloatSchema.make(S_float, error=error, coerce=coerce)


def float32(error: Any = None, coerce: bool = False) -> FloatSchema:
    return FloatSchema.make(S_float32, error=error, coerce=coerce)


def float64(error: Any = None, coerce: bool = False) -> FloatSchema:
    return FloatSchema.make(S_float64, error=error, coerce=coerce)


def boolean(error: Any = None, coerce: bool = False) -> BoolSchema:
    return BoolSchema.make(S_bool, error=error, coerce=coerce)


def nil(error: Any = None) -> NilSchema:
    return NilSchema.make(S_nil, error=error)


def never(error: Any = None) -> NeverSchema:
    return NeverSchema.make(S_never, error=error)


def any(error: Any = None) -> AnySchema:
    return AnySchema.make(S_any, error=error)


def unknown(error: Any = None) -> AnySchema:
    return AnySchema.make(S_unknown, error=error)


def literal(value: Any, *values: Any, error: Any = None) -> LiteralSchema:
    "One or more literal values."
    return LiteralSchema.make(S_literal, {'values': (value,) + values}, error=error)


def enum(values: Any, error: Any = None) -> EnumSchema:
    "Enum from a list of values, or a dict of name to value."
    if ismap(values):
        entries = dict(values)
    elif islist(values):
        entries = {v: v for v in values}
    else:
        raise TypeError('Enum values must be a list or dict: ' + repr(values))
    if 0 == len(entries):
        raise ValueError('Enum needs at least one value')
    return EnumSchema.make(S_enum, {'entries': entries}, error=error)


def date(error: Any = None, coerce: bool = False) -> DateSchema:
    return DateSchema.make(S_date, error=error, coerce=coerce)


def stringbool(
    truthy: Sequence[str] = TRUTHY,
    falsy: Sequence[str] = FALSY,
    case: str = 'insensitive',
    error: Any = None
) -> StringBoolSchema:
    if case not in ('sensitive', 'insensitive'):
        raise ValueError('stringbool case must be sensitive or insensitive: ' + repr(case))
    return StringBoolSchema.make(
        S_stringbool,
        {'truthy': tuple(truthy), 'falsy': tuple(falsy), 'case': case},
        error=error,
    )


def function(input: Any = None, output: Schema = None, error: Any = None) -> FunctionSchema:
    "Callable values. `input` is a tuple schema or a list of argument schemas."
    if islist(input):
        input = tuple_(input)
    return FunctionSchema.make(S_function, {'input': input, 'output': output}, error=error)


def custom(fn: Callable[[Any], Any] = None, error: Any = None, params: Dict[str, Any] = None) -> CustomSchema:
    "Values accepted by a predicate (anything, with no predicate)."
    return CustomSchema.make(S_custom_type, {'fn': fn, 'params': params}, error=error)


def instanceof(cls: type, error: Any = None) -> CustomSchema:
    return CustomSchema.make(
        S_custom_type,
        {
            'fn': lambda v: isinstance(v, cls),
            'message': 'Input not instance of ' + cls.__name__,
            'params': {'class': cls.__name__},
        },
        error=error,
    )


# Formats.

def _format(type, format, test, error, **fields):
    return FormatSchema.build(type, format, test, error, **fields)


def email(pattern: Any = None, error: Any = None) -> FormatSchema:
    return _format(S_email, S_email, pattern or R_EMAIL, error)


def url(hostname: Any = None, protocol: Any = None, error: Any = None) -> FormatSchema:
    return _format(S_url, S_url, lambda v: isurl(v, hostname, protocol), error)


def uuid(version: int = None, error: Any = None) -> FormatSchema:
    return _format(S_uuid, S_uuid, uuidpattern(version), error)


def uuidv4(error: Any = None) -> FormatSchema:
    return uuid(4, error)


def uuidv6(error: Any = None) -> FormatSchema:
    return uuid(6, error)


def uuidv7(error: Any = None) -> FormatSchema:
    return uuid(7, error)


def guid(error: Any = None) -> FormatSchema:
    return _format(S_guid, S_guid, R_GUID, error)


def nanoid(error: Any = None) -> FormatSchema:
    return _format(S_nanoid, S_nanoid, R_NANOID, error)


def cuid(error: Any = None) -> FormatSchema:
    return _format(S_cuid, S_cuid, R_CUID, error)


def cuid2(error: Any = None) -> FormatSchema:
    return _format(S_cuid2, S_cuid2, R_CUID2, error)


def ulid(error: Any = None) -> FormatSchema:
    return _format(S_ulid, S_ulid, R_ULID, error)


def xid(error: Any = None) -> FormatSchema:
    return _format(S_xid, S_xid, R_XID, error)


def ksuid(error: Any = None) -> FormatSchema:
    return _format(S_ksuid, S_ksuid, R_KSUID, error)


def emoji(error: Any = None) -> FormatSchema:
    return _format(S_emoji, S_emoji, R_EMOJI, error)


def base64(error: Any = None) -> FormatSchema:
    return _format(S_base64, S_base64, R_BASE64, error)


def base64url(error: Any = None) -> FormatSchema:
    return _format(S_base64url, S_base64url, R_BASE64URL, error)


def hex(error: Any = None) -> FormatSchema:
    return _format(S_hex, S_hex, R_HEX, error)


def jwt(alg: str = None, error: Any = None) -> FormatSchema:
    fields = {} if alg is None else {'algorithm': alg}
    return _format(S_jwt, S_jwt, lambda v: isjwt(v, alg), error, **fields)


def e164(error: Any = None) -> FormatSchema:
    return _format(S_e164, S_e164, R_E164, error)


def ipv4(error: Any = None) -> FormatSchema:
    return _format(S_ipv4, S_ipv4, R_IPV4, error)


def ipv6(error: Any = None) -> FormatSchema:
    return _format(S_ipv6, S_ipv6, isipv6, error)


def cidrv4(error: Any = None) -> FormatSchema:
    return _format(S_cidrv4, S_cidrv4, R_CIDRV4, error)


def cidrv6(error: Any = None) -> FormatSchema:
    return _format(S_cidrv6, S_cidrv6, iscidrv6, error)


def mac(error: Any = None) -> FormatSchema:
    return _format(S_mac, S_mac, R_MAC, error)


def hostname(error: Any = None) -> FormatSchema:
    return _format(S_hostname, S_hostname, R_HOSTNAME, error)


def jsonstring(error: Any = None) -> FormatSchema:
    return _format(S_json_string, S_json_string, isjsonstring, error)


def isodatetime(
    offset: bool = False,
    local: bool = False,
    precision: Any = None,
    error: Any = None
) -> IsoSchema:
    """
    Iso 8601 datetime, `YYYY-MM-DDTHH:MM[:SS[.fff]]Z`. With `offset`,
    `+HH:MM` zones are accepted as well as Z. With `local`, the zone may
    be left out. Precision: 'minute', 'second', 'millisecond' (1 to 3
    fraction digits), an exact number of fraction digits, or None for any.
    """
    return IsoSchema.build(S_iso_datetime, S_datetime, datetimepattern(offset, local, precision), error)


def isodate(error: Any = None) -> IsoSchema:
    return IsoSchema.build(S_iso_date, S_fmt_date, R_DATE, error)


def isotime(precision: Any = None, error: Any = None) -> IsoSchema:
    return IsoSchema.build(S_iso_time, S_time, timepattern(precision), error)


def isoduration(error: Any = None) -> IsoSchema:
    return IsoSchema.build(S_iso_duration, S_duration, R_DURATION, error)


# Objects.

def object(shape: Dict[str, Schema] = None, error: Any = None) -> ObjectSchema:
    "Object with a declared shape. Unknown keys are stripped."
    return ObjectSchema.build({} if shape is None else shape, S_strip, error=error)


def strictobject(shape: Dict[str, Schema] = None, error: Any = None) -> ObjectSchema:
    return ObjectSchema.build({} if shape is None else shape, S_strict, error=error)


def looseobject(shape: Dict[str, Schema] = None, error: Any = None) -> ObjectSchema:
    return ObjectSchema.build({} if shape is None else shape, S_passthrough, error=error)


# Collections.

def _schema(value, what):
    if not isinstance(value, Schema):
        raise TypeError(what + ' is not a schema: ' + stringify(value, 44))
    return value


def array(element: Schema, error: Any = None) -> ArraySchema:
    return ArraySchema.make(S_array, {'element': _schema(element, 'Array element')}, error=error)


def tuple_(items: Sequence[Schema], rest: Schema = None, error: Any = None) -> TupleSchema:
    items = [_schema(i, 'Tuple item') for i in items]
    if rest is not None:
        _schema(rest, 'Tuple rest')
    return TupleSchema.make(S_tuple, {'items': items, 'rest': rest}, error=error)


def set_(element: Schema, error: Any = None) -> SetSchema:
    return SetSchema.make(S_set, {'element': _schema(element, 'Set element')}, error=error)


def map_(key: Schema, value: Schema, error: Any = None) -> MapSchema:
    return MapSchema.make(
        S_map,
        {'key': _schema(key, 'Map key'), 'value': _schema(value, 'Map value')},
        error=error,
    )


def _record(key, value, mode, error):
    return RecordSchema.make(
        S_record,
        {'key': _schema(key, 'Record key'), 'value': _schema(value, 'Record value'), 'mode': mode},
        error=error,
    )


def record(key: Schema, value: Schema, error: Any = None) -> RecordSchema:
    "Record. Enumerated key schemas make it exhaustive."
    return _record(key, value, S_exhaustive, error)


def partialrecord(key: Schema, value: Schema, error: Any = None) -> RecordSchema:
    "Record where enumerated keys may be missing, but other keys are still rejected."
    return _record(key, value, S_partial, error)


def looserecord(key: Schema, value: Schema, error: Any = None) -> RecordSchema:
    "Record that passes keys failing the key schema through unchanged."
    return _record(key, value, S_loose, error)


# Unions and composers.

def union(options: Sequence[Schema], error: Any = None) -> UnionSchema:
    return UnionSchema.build(options, error)


def discriminatedunion(key: str, options: Sequence[Schema], error: Any = None) -> DiscriminatedSchema:
    return DiscriminatedSchema.build(key, options, error)


def xor(options: Sequence[Schema], error: Any = None) -> XorSchema:
    return XorSchema.build(options, error)


def intersection(left: Schema, right: Schema, error: Any = None) -> IntersectionSchema:
    return IntersectionSchema.build(left, right, error)


def pipe(input: Schema, output: Schema, error: Any = None) -> PipeSchema:
    return PipeSchema.build(input, output, error)


def transform(fn: Callable[..., Any], error: Any = None) -> TransformSchema:
    "Standalone transform, applied to any input."
    return TransformSchema.build(fn, None, error)


def lazy(getter: Callable[[], Schema], error: Any = None) -> LazySchema:
    return LazySchema.build(getter, error)


def optional(schema: Schema) -> Schema:
    return _schema(schema, 'Optional').optional()


def nilable(schema: Schema) -> Schema:
    return _schema(schema, 'Nilable').nilable()


def nullish(schema: Schema) -> Schema:
    return _schema(schema, 'Nullish').nullish()


def nonoptional(schema: Schema) -> Schema:
    return _schema(schema, 'Nonoptional').nonoptional()


def readonly(schema: Schema) -> Schema:
    return _schema(schema, 'Readonly').readonly()
