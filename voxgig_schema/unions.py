# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Voxgig Schema: unions and intersection
# ======================================
#
# - UnionSchema: the first option that parses without issues wins.
# - DiscriminatedSchema: a literal field selects exactly one option.
# - XorSchema: exactly one option may parse without issues.
# - IntersectionSchema: both sides parse, and their outputs are merged.
#
# Options are always tried on their own payloads, so a failed option
# leaves no trace unless every option fails.


from typing import *
import logging

from .util import (
    ABSENT,
    ismap,
    isnumber,
    mergevalues,
    pathify,
    stringify,
    typify,
    S_union,
    S_discriminated,
    S_xor,
    S_intersection,
    S_object,
    S_literal,
    S_enum,
)

from .issues import (
    Issue,
    S_custom,
    S_invalid_union,
)

from .engine import run
from .schema import Schema


logger = logging.getLogger(__name__)

S_nomatch = 'No matching discriminator'
S_multiple = 'Multiple union options matched'
S_unmergeable = 'Unmergeable intersection'


def _options(options):
    options = list(options)
    if 0 == len(options):
        raise ValueError('A union needs at least one option')
    for option in options:
        if not isinstance(option, Schema):
            raise TypeError('Union option is not a schema: ' + repr(option))
    return options


class UnionSchema(Schema):
    "Tries each option in order. A union handles nil through its options."

    acceptsnil = True

    @classmethod
    def build(cls, options: Sequence[Schema], error: Any = None) -> 'UnionSchema':
        return cls.make(S_union, {'options': _options(options)}, error=error)

    @property
    def expected(self):
        return S_union

    def options(self) -> List[Schema]:
        return list(self.internals.defn['options'])

    def _parse(self, payload, ctx):
        errors = []
        for option in self.internals.defn['options']:
            sub = run(option, payload.branch(), ctx)
            if not sub.issues:
                payload.value = sub.value
                return
            errors.append(sub.issues)

        payload.addissue(Issue(S_invalid_union, errors=errors))


def discriminatorkey(value: Any) -> Tuple[str, Any]:
    "Lookup key for a discriminator value. Ints and floats share a key, bools do not."
    if isnumber(value):
        return ('number', value)
    return (typify(value), value)


def discriminatorvalues(schema: Schema, key: str) -> Optional[List[Any]]:
    "The literal values an option declares for the discriminator field."
    ins = schema.internals
    if S_literal == ins.type:
        return list(ins.defn['values'])
    if S_enum == ins.type:
        return list(ins.defn['entries'].values())
    return None


class DiscriminatedSchema(Schema):
    """
    Union of object options keyed by a discriminator field. The value map
    is built at construction. Nested discriminated unions on the same key
    contribute all of their values.
    """

    @classmethod
    def build(cls, key: str, options: Sequence[Schema], error: Any = None) -> 'DiscriminatedSchema':
        options = _options(options)
        lookup = {}

        for index, option in enumerate(options):
            for dvalue, target in cls._values(key, option, index):
                dkey = discriminatorkey(dvalue)
                if dkey in lookup:
                    raise ValueError(
                        'Duplicate discriminator value ' + stringify(dvalue) +
                        ' for key ' + repr(key))
                lookup[dkey] = target

        logger.debug('discriminated union on %r: %d values', key, len(lookup))
        return cls.make(
            S_discriminated,
            {'key': key, 'options': options, 'lookup': lookup},
            error=error,
        )

    @staticmethod
    def _values(key, option, index):
        ins = option.internals
        if S_discriminated == ins.type:
            if key != ins.defn['key']:
                raise ValueError(
                    'Nested discriminated union must use the same key: ' +
                    repr(ins.defn['key']) + ' != ' + repr(key))
            return [(dkey[1], target) for dkey, target in ins.defn['lookup'].items()]

        if S_object != ins.type:
            raise TypeError('Discriminated union option ' + str(index) + ' is not an object schema')

        field = ins.defn['shape'].get(key)
        values = None if field is None else discriminatorvalues(field, key)
        if not values:
            raise ValueError(
                'Discriminated union option ' + str(index) +
                ' has no literal value for key ' + repr(key))
        return [(v, option) for v in values]

    @property
    def expected(self):
        return S_object

    @property
    def discriminator(self) -> str:
        return self.internals.defn['key']

    def options(self) -> List[Schema]:
        return list(self.internals.defn['options'])

    def _parse(self, payload, ctx):
        value = payload.value
        if not ismap(value):
            payload.typeissue(self.expected)
            return

        key = self.internals.defn['key']
        dvalue = value.get(key, ABSENT)
        option = None
        if dvalue is not ABSENT:
            try:
                option = self.internals.defn['lookup'].get(discriminatorkey(dvalue))
            except TypeError:
                option = None

        if option is None:
            payload.addissue(Issue(
                S_invalid_union,
                path=[key],
                input=None if dvalue is ABSENT else dvalue,
                errors=[],
                note=S_nomatch,
                discriminator=key,
            ))
            return

        sub = run(option, payload.branch(), ctx)
        payload.merge(sub)
        payload.value = sub.value


class XorSchema(Schema):
    "Exclusive union: succeeds only when exactly one option accepts."

    acceptsnil = True

    @classmethod
    def build(cls, options: Sequence[Schema], error: Any = None) -> 'XorSchema':
        return cls.make(S_xor, {'options': _options(options)}, error=error)

    @property
    def expected(self):
        return S_xor

    def options(self) -> List[Schema]:
        return list(self.internals.defn['options'])

    def _parse(self, payload, ctx):
        errors = []
        matched = []
        for option in self.internals.defn['options']:
            sub = run(option, payload.branch(), ctx)
            if sub.issues:
                errors.append(sub.issues)
            else:
                matched.append(sub)

        if 1 == len(matched):
            payload.value = matched[0].value
        elif 0 == len(matched):
            payload.addissue(Issue(S_invalid_union, errors=errors))
        else:
            payload.addissue(Issue(S_invalid_union, errors=[], note=S_multiple))


class IntersectionSchema(Schema):
    """
    Both sides parse the same input independently. Dict outputs merge key
    by key, list outputs merge by position, other outputs must be equal.
    """

    acceptsnil = True

    @classmethod
    def build(cls, left: Schema, right: Schema, error: Any = None) -> 'IntersectionSchema':
        _options([left, right])
        return cls.make(S_intersection, {'left': left, 'right': right}, error=error)

    @property
    def left(self) -> Schema:
        return self.internals.defn['left']

    @property
    def right(self) -> Schema:
        return self.internals.defn['right']

    def _parse(self, payload, ctx):
        lsub = run(self.internals.defn['left'], payload.branch(), ctx)
        rsub = run(self.internals.defn['right'], payload.branch(), ctx)
        payload.merge(lsub)
        payload.merge(rsub)
        if payload.issues:
            return

        lval = None if lsub.value is ABSENT else lsub.value
        rval = None if rsub.value is ABSENT else rsub.value
        ok, merged, mergepath = mergevalues(lval, rval)
        if not ok:
            payload.addissue(Issue(
                S_custom,
                message=S_unmergeable + (' at ' + pathify(mergepath) if mergepath else ''),
                params={'mergepath': mergepath},
            ))
            return

        payload.value = merged
