# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Voxgig Schema: object schema
# ============================
#
# A declared shape of field name -> schema. Fields are parsed in
# declaration order. Keys not in the shape are handled by the
# unknown-key policy:
#
# - strip (default): dropped from the output.
# - strict: an unrecognized_keys issue listing them.
# - passthrough: kept as-is.
# - catchall: each value is parsed with the catchall schema.
#
# A key remap reads a field from a different input key. The shape keys
# are the output keys.


from typing import *

from .util import (
    ABSENT,
    ismap,
    S_object,
    S_enum,
)

from .issues import (
    Issue,
    S_unrecognized_keys,
)

from .checks import (
    LengthCheck,
    S_min,
    S_max,
    S_length,
)

from .engine import run
from .schema import Schema


S_strip = 'strip'
S_strict = 'strict'
S_passthrough = 'passthrough'
S_catchall = 'catchall'

POLICIES = (S_strip, S_strict, S_passthrough, S_catchall)


class ObjectSchema(Schema):

    @classmethod
    def build(
        cls,
        shape: Dict[str, Schema],
        unknown: str = S_strip,
        catchall: Schema = None,
        error: Any = None
    ) -> 'ObjectSchema':
        if not ismap(shape):
            raise TypeError('Object shape must be a dict: ' + repr(shape))
        for key, child in shape.items():
            if not isinstance(child, Schema):
                raise TypeError('Object field ' + repr(key) + ' is not a schema: ' + repr(child))
        if unknown not in POLICIES:
            raise ValueError('Unknown key policy: ' + repr(unknown))
        return cls.make(
            S_object,
            {'shape': dict(shape), 'unknown': unknown, 'catchall': catchall, 'remap': {}},
            error=error,
        )

    def _parse(self, payload, ctx):
        value = payload.value
        if not ismap(value):
            payload.typeissue(self.expected)
            return

        defn = self.internals.defn
        remap = defn['remap']
        known = set()
        out = {}

        for key, child in defn['shape'].items():
            inkey = remap.get(key, key)
            known.add(inkey)
            sub = run(child, payload.child(value.get(inkey, ABSENT), inkey), ctx)
            payload.merge(sub)
            if sub.value is not ABSENT:
                out[key] = sub.value

        unknown = [k for k in value.keys() if k not in known]
        if unknown:
            policy = defn['unknown']
            if S_strict == policy:
                payload.addissue(Issue(S_unrecognized_keys, keys=unknown))
            elif S_passthrough == policy:
                for key in unknown:
                    out[key] = value[key]
            elif S_catchall == policy:
                for key in unknown:
                    sub = run(defn['catchall'], payload.child(value[key], key), ctx)
                    payload.merge(sub)
                    if sub.value is not ABSENT:
                        out[key] = sub.value

        payload.value = out

    # Accessors.

    def shape(self) -> Dict[str, Schema]:
        return dict(self.internals.defn['shape'])

    def field(self, key: str) -> Optional[Schema]:
        return self.internals.defn['shape'].get(key)

    @property
    def unknown(self) -> str:
        return self.internals.defn['unknown']

    def keyof(self) -> Schema:
        "Enum of the field names."
        from .primitives import EnumSchema
        keys = list(self.internals.defn['shape'].keys())
        return EnumSchema.make(S_enum, {'entries': {k: k for k in keys}})

    # Unknown key policy.

    def _policy(self, unknown, catchall=None):
        return self._clone(defn=dict(self.internals.defn, unknown=unknown, catchall=catchall))

    def strict(self) -> 'ObjectSchema':
        return self._policy(S_strict)

    def strip(self) -> 'ObjectSchema':
        return self._policy(S_strip)

    def passthrough(self) -> 'ObjectSchema':
        return self._policy(S_passthrough)

    def catchall(self, schema: Schema) -> 'ObjectSchema':
        if not isinstance(schema, Schema):
            raise TypeError('Catchall must be a schema: ' + repr(schema))
        return self._policy(S_catchall, schema)

    # Shape modifiers.

    def _reshape(self, shape, **changes):
        return self._clone(defn=dict(self.internals.defn, shape=shape, **changes))

    def _nochecks(self, op):
        if self.internals.checks:
            raise ValueError('Cannot use ' + op + ' on an object schema with checks')

    def _knownkeys(self, keys, op):
        shape = self.internals.defn['shape']
        missing = [k for k in keys if k not in shape]
        if missing:
            raise ValueError(op + ' of unknown keys: ' + ', '.join(map(str, missing)))

    def extend(self, shape: Dict[str, Schema]) -> 'ObjectSchema':
        "Add fields. Fields of the new shape replace existing fields of the same name."
        self._nochecks('extend')
        for key, child in shape.items():
            if not isinstance(child, Schema):
                raise TypeError('Object field ' + repr(key) + ' is not a schema: ' + repr(child))
        merged = dict(self.internals.defn['shape'])
        merged.update(shape)
        return self._reshape(merged)

    def merge(self, other: 'ObjectSchema') -> 'ObjectSchema':
        "Extend with the fields of another object, adopting its unknown key policy."
        if not isinstance(other, ObjectSchema):
            raise TypeError('Can only merge an object schema: ' + repr(other))
        odefn = other.internals.defn
        merged = dict(self.internals.defn['shape'])
        merged.update(odefn['shape'])
        remap = dict(self.internals.defn['remap'])
        remap.update(odefn['remap'])
        return self._reshape(
            merged,
            unknown=odefn['unknown'],
            catchall=odefn['catchall'],
            remap=remap,
        )

    def pick(self, keys: Sequence[str]) -> 'ObjectSchema':
        self._nochecks('pick')
        self._knownkeys(keys, 'pick')
        shape = self.internals.defn['shape']
        return self._reshape({k: v for k, v in shape.items() if k in keys})

    def omit(self, keys: Sequence[str]) -> 'ObjectSchema':
        self._nochecks('omit')
        self._knownkeys(keys, 'omit')
        shape = self.internals.defn['shape']
        return self._reshape({k: v for k, v in shape.items() if k not in keys})

    def partial(self, keys: Sequence[str] = None) -> 'ObjectSchema':
        "Make the listed fields (or all fields) optional."
        if keys is not None:
            self._knownkeys(keys, 'partial')
        shape = self.internals.defn['shape']
        return self._reshape({
            k: (v.optional() if keys is None or k in keys else v)
            for k, v in shape.items()
        })

    def required(self, keys: Sequence[str] = None) -> 'ObjectSchema':
        "Make the listed fields (or all fields) non-optional."
        if keys is not None:
            self._knownkeys(keys, 'required')
        shape = self.internals.defn['shape']
        return self._reshape({
            k: (v.nonoptional() if keys is None or k in keys else v)
            for k, v in shape.items()
        })

    def remap(self, mapping: Dict[str, str]) -> 'ObjectSchema':
        """
        Read fields from other input keys: `{inputkey: outputkey}`. The
        output keys must be fields of the shape.
        """
        shape = self.internals.defn['shape']
        remap = dict(self.internals.defn['remap'])
        for inkey, outkey in mapping.items():
            if outkey not in shape:
                raise ValueError('remap to unknown key: ' + repr(outkey))
            remap[outkey] = inkey
        return self._clone(defn=dict(self.internals.defn, remap=remap))

    # Key count.

    def min(self, n: int, error: Any = None) -> 'ObjectSchema':
        return self._addcheck(LengthCheck(S_min, n, S_object, error))

    def max(self, n: int, error: Any = None) -> 'ObjectSchema':
        return self._addcheck(LengthCheck(S_max, n, S_object, error))

    def size(self, n: int, error: Any = None) -> 'ObjectSchema':
        return self._addcheck(LengthCheck(S_length, n, S_object, error))
