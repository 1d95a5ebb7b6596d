# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Voxgig Schema: collections
# ==========================
#
# - ArraySchema: list (or tuple) of elements, output as a list.
# - TupleSchema: fixed items, with an optional rest schema, output as a tuple.
# - SetSchema: set of elements.
# - MapSchema: dict with arbitrary keys, validating keys and values.
# - RecordSchema: dict validated by a key schema and a value schema.
#
# Record key schemas come in three kinds:
#
# - Enumerated (literal, enum, union of those): the record is
#   exhaustive, every enumerated key is required unless the record is
#   partial, and other keys are unrecognized.
# - Numeric (int, float): numeric string keys are parsed to numbers.
# - Pattern (anything else): keys are parsed by the key schema. A loose
#   record passes keys that fail the key schema through unchanged.


from typing import *
import re

from .util import (
    ABSENT,
    ismap,
    islist,
    NUMERIC_TYPES,
    S_array,
    S_set,
    S_map,
    S_record,
    S_literal,
    S_enum,
    S_union,
)

from .issues import (
    Issue,
    S_invalid_element,
    S_invalid_key,
    S_too_big,
    S_too_small,
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


S_exhaustive = 'exhaustive'
S_partial = 'partial'
S_loose = 'loose'

R_NUMKEY = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')


class SizedSchema(Schema):
    "Element or entry count checks, with the origin of the collection kind."

    origin = S_array

    def min(self, n: int, error: Any = None) -> 'SizedSchema':
        return self._addcheck(LengthCheck(S_min, n, self.origin, error))

    def max(self, n: int, error: Any = None) -> 'SizedSchema':
        return self._addcheck(LengthCheck(S_max, n, self.origin, error))

    def length(self, n: int, error: Any = None) -> 'SizedSchema':
        return self._addcheck(LengthCheck(S_length, n, self.origin, error))

    def size(self, n: int, error: Any = None) -> 'SizedSchema':
        return self.length(n, error)

    def nonempty(self, error: Any = None) -> 'SizedSchema':
        return self.min(1, error)


class ArraySchema(SizedSchema):

    @property
    def element(self) -> Schema:
        return self.internals.defn['element']

    def _parse(self, payload, ctx):
        value = payload.value
        if not islist(value):
            payload.typeissue(self.expected)
            return

        element = self.internals.defn['element']
        out = []
        for index, item in enumerate(value):
            sub = run(element, payload.child(item, index), ctx)
            payload.merge(sub)
            out.append(None if sub.value is ABSENT else sub.value)

        payload.value = out


class TupleSchema(Schema):
    """
    Fixed position items. Trailing optional items may be missing. Extra
    items are parsed by the rest schema, or are too_big without one.
    """

    @property
    def items(self) -> List[Schema]:
        return list(self.internals.defn['items'])

    @property
    def rest(self) -> Optional[Schema]:
        return self.internals.defn.get('rest')

    def _parse(self, payload, ctx):
        value = payload.value
        if not islist(value):
            payload.typeissue(self.expected)
            return

        items = self.internals.defn['items']
        rest = self.internals.defn.get('rest')

        required = len(items)
        while 0 < required and items[required - 1].isoptional():
            required -= 1

        if len(value) < required:
            payload.addissue(Issue(
                S_too_small,
                minimum=required,
                inclusive=True,
                origin=S_array,
            ))
            return

        if rest is None and len(items) < len(value):
            payload.addissue(Issue(
                S_too_big,
                maximum=len(items),
                inclusive=True,
                origin=S_array,
            ))
            return

        out = []
        for index, item in enumerate(items):
            present = index < len(value)
            sub = run(item, payload.child(value[index] if present else ABSENT, index), ctx)
            payload.merge(sub)
            if sub.value is not ABSENT:
                out.append(sub.value)
            elif present:
                out.append(None)

        for index in range(len(items), len(value)):
            sub = run(rest, payload.child(value[index], index), ctx)
            payload.merge(sub)
            out.append(None if sub.value is ABSENT else sub.value)

        payload.value = tuple(out)

    def setrest(self, rest: Schema) -> 'TupleSchema':
        return self._clone(defn=dict(self.internals.defn, rest=rest))


class SetSchema(SizedSchema):

    origin = S_set

    @property
    def element(self) -> Schema:
        return self.internals.defn['element']

    def _parse(self, payload, ctx):
        value = payload.value
        if not isinstance(value, (set, frozenset)):
            payload.typeissue(self.expected)
            return

        element = self.internals.defn['element']
        out = set()
        for item in value:
            sub = run(element, payload.branch(item), ctx)
            payload.merge(sub)
            if not sub.issues:
                out.add(sub.value)

        payload.value = out


def _entry(payload, schema, key, value, ctx, origin):
    "Parse one map or record value, wrapping failures in invalid_element."
    sub = run(schema, payload.child(value, key), ctx)
    if sub.issues:
        payload.addissue(Issue(
            S_invalid_element,
            path=[key],
            input=value,
            origin=origin,
            key=key,
            issues=sub.issues,
        ))
    return sub


def _key(payload, schema, key, ctx, numeric=False):
    """
    Parse one map or record key. Numeric key schemas retry numeric string
    keys as numbers. Returns the payload of the successful attempt, or the
    failed payload.
    """
    sub = run(schema, payload.child(key, key), ctx)
    if sub.issues and numeric and isinstance(key, str) and R_NUMKEY.match(key.strip()):
        num = float(key)
        if num.is_integer() and re.match(r'^[+-]?\d+$', key.strip()):
            num = int(key)
        retry = run(schema, payload.child(num, key), ctx)
        if not retry.issues:
            return retry
    return sub


class MapSchema(SizedSchema):
    "Dict with arbitrary keys. Key and value failures are wrapped per entry."

    origin = S_map

    @property
    def keyschema(self) -> Schema:
        return self.internals.defn['key']

    @property
    def valueschema(self) -> Schema:
        return self.internals.defn['value']

    def _parse(self, payload, ctx):
        value = payload.value
        if not ismap(value):
            payload.typeissue(self.expected)
            return

        defn = self.internals.defn
        numeric = defn['key'].type in NUMERIC_TYPES
        out = {}

        for key, item in value.items():
            ksub = _key(payload, defn['key'], key, ctx, numeric)
            if ksub.issues:
                payload.addissue(Issue(
                    S_invalid_key,
                    path=[key],
                    input=key,
                    origin=S_map,
                    issues=ksub.issues,
                ))
                continue

            vsub = _entry(payload, defn['value'], key, item, ctx, S_map)
            if not vsub.issues:
                out[ksub.value] = vsub.value

        payload.value = out


def enumkeys(schema: Schema) -> Optional[List[Any]]:
    "The finite key set of a literal, enum, or union of those, else None."
    ins = schema.internals
    if S_literal == ins.type:
        return list(ins.defn['values'])
    if S_enum == ins.type:
        return list(ins.defn['entries'].values())
    if S_union == ins.type:
        keys = []
        for option in ins.defn['options']:
            sub = enumkeys(option)
            if sub is None:
                return None
            keys.extend(k for k in sub if k not in keys)
        return keys
    return None


class RecordSchema(SizedSchema):
    """
    Dict validated by a key schema and a value schema. The mode is
    exhaustive (default), partial or loose.
    """

    origin = S_record

    @property
    def keyschema(self) -> Schema:
        return self.internals.defn['key']

    @property
    def valueschema(self) -> Schema:
        return self.internals.defn['value']

    @property
    def mode(self) -> str:
        return self.internals.defn['mode']

    def _parse(self, payload, ctx):
        value = payload.value
        if not ismap(value):
            payload.typeissue(self.expected)
            return

        defn = self.internals.defn
        keys = enumkeys(defn['key'])

        if keys is None:
            self._parsepattern(payload, ctx)
        else:
            self._parseenum(payload, ctx, keys)

    def _parseenum(self, payload, ctx, keys):
        value = payload.value
        defn = self.internals.defn
        loose = S_loose == defn['mode']
        out = {}
        unrecognized = []

        for key, item in value.items():
            if key in keys:
                vsub = _entry(payload, defn['value'], key, item, ctx, S_record)
                if not vsub.issues and vsub.value is not ABSENT:
                    out[key] = vsub.value
            elif loose:
                out[key] = item
            else:
                unrecognized.append(key)

        if S_partial != defn['mode']:
            for key in keys:
                if key not in value:
                    sub = run(defn['value'], payload.child(ABSENT, key), ctx)
                    payload.merge(sub)
                    if not sub.issues and sub.value is not ABSENT:
                        out[key] = sub.value

        if unrecognized:
            payload.addissue(Issue(S_unrecognized_keys, keys=unrecognized))

        payload.value = out

    def _parsepattern(self, payload, ctx):
        value = payload.value
        defn = self.internals.defn
        loose = S_loose == defn['mode']
        numeric = defn['key'].type in NUMERIC_TYPES
        out = {}

        for key, item in value.items():
            ksub = _key(payload, defn['key'], key, ctx, numeric)
            if ksub.issues:
                if loose:
                    out[key] = item
                else:
                    payload.addissue(Issue(
                        S_invalid_key,
                        path=[key],
                        input=key,
                        origin=S_record,
                        issues=ksub.issues,
                    ))
                continue

            vsub = _entry(payload, defn['value'], key, item, ctx, S_record)
            if not vsub.issues and vsub.value is not ABSENT:
                out[ksub.value] = vsub.value

        payload.value = out
