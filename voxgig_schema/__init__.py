# voxgig_schema init

import logging

from .factory import (
    any,
    array,
    base64,
    base64url,
    bigint,
    boolean,
    cidrv4,
    cidrv6,
    cuid,
    cuid2,
    custom,
    date,
    discriminatedunion,
    e164,
    email,
    emoji,
    enum,
    float32,
    float64,
    function,
    guid,
    hex,
    hostname,
    instanceof,
    int8,
    int16,
    int32,
    int64,
    integer,
    intersection,
    ipv4,
    ipv6,
    isodate,
    isodatetime,
    isoduration,
    isotime,
    jsonstring,
    jwt,
    ksuid,
    lazy,
    literal,
    looseobject,
    looserecord,
    mac,
    map_,
    nanoid,
    never,
    nil,
    nilable,
    nonoptional,
    nullish,
    number,
    object,
    optional,
    partialrecord,
    pipe,
    readonly,
    record,
    set_,
    strictobject,
    string,
    stringbool,
    transform,
    tuple_,
    uint,
    uint8,
    uint16,
    uint32,
    uint64,
    ulid,
    union,
    unknown,
    url,
    uuid,
    uuidv4,
    uuidv6,
    uuidv7,
    xid,
    xor,
)

from .schema import Schema

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
)

from .objects import ObjectSchema

from .collections import (
    ArraySchema,
    MapSchema,
    RecordSchema,
    SetSchema,
    TupleSchema,
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

from .engine import (
    ParseContext,
    Payload,
)

from .issues import (
    Issue,
    SchemaError,
    iserror,
)

from .config import (
    config,
    getconfig,
    resetconfig,
)

from .locales import (
    getlocale,
    locales,
    registerlocale,
)

from .registry import (
    GLOBAL_REGISTRY,
    Registry,
)

from .util import ABSENT


logging.getLogger(__name__).addHandler(logging.NullHandler())


__all__ = [
    'ABSENT',
    'GLOBAL_REGISTRY',
    'AnySchema',
    'ArraySchema',
    'BoolSchema',
    'CustomSchema',
    'DateSchema',
    'DiscriminatedSchema',
    'EnumSchema',
    'FloatSchema',
    'FormatSchema',
    'FunctionSchema',
    'IntegerSchema',
    'IntersectionSchema',
    'IsoSchema',
    'Issue',
    'LazySchema',
    'LiteralSchema',
    'MapSchema',
    'NeverSchema',
    'NilSchema',
    'ObjectSchema',
    'ParseContext',
    'Payload',
    'PipeSchema',
    'RecordSchema',
    'Registry',
    'Schema',
    'SchemaError',
    'SetSchema',
    'StringBoolSchema',
    'StringSchema',
    'TransformSchema',
    'TupleSchema',
    'UnionSchema',
    'XorSchema',
    'any',
    'array',
    'base64',
    'base64url',
    'bigint',
    'boolean',
    'cidrv4',
    'cidrv6',
    'config',
    'cuid',
    'cuid2',
    'custom',
    'date',
    'discriminatedunion',
    'e164',
    'email',
    'emoji',
    'enum',
    'float32',
    'float64',
    'function',
    'getconfig',
    'getlocale',
    'guid',
    'hex',
    'hostname',
    'instanceof',
    'int8',
    'int16',
    'int32',
    'int64',
    'integer',
    'intersection',
    'ipv4',
    'ipv6',
    'iserror',
    'isodate',
    'isodatetime',
    'isoduration',
    'isotime',
    'jsonstring',
    'jwt',
    'ksuid',
    'lazy',
    'literal',
    'locales',
    'looseobject',
    'looserecord',
    'mac',
    'map_',
    'nanoid',
    'never',
    'nil',
    'nilable',
    'nonoptional',
    'nullish',
    'number',
    'object',
    'optional',
    'partialrecord',
    'pipe',
    'readonly',
    'record',
    'registerlocale',
    'resetconfig',
    'set_',
    'strictobject',
    'string',
    'stringbool',
    'transform',
    'tuple_',
    'uint',
    'uint8',
    'uint16',
    'uint32',
    'uint64',
    'ulid',
    'union',
    'unknown',
    'url',
    'uuid',
    'uuidv4',
    'uuidv6',
    'uuidv7',
    'xid',
    'xor',
]
