# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Voxgig Schema: composers
# ========================
#
# - PipeSchema: parse with one schema, then parse its output with another.
# - TransformSchema: map a value (optionally after a source schema).
# - LazySchema: resolve a schema on first use, for recursive definitions.
#
# The nil-handling modifiers (optional, nilable, default, prefault, ...)
# are flags on the schema internals, see the schema base class.


from typing import *
import logging

from .util import (
    ABSENT,
    S_pipe,
    S_transform,
    S_lazy,
)

from .issues import (
    Issue,
)

from .engine import (
    arity,
    callback,
    run,
)

from .schema import Schema


logger = logging.getLogger(__name__)


class PipeSchema(Schema):
    "Output of `input` becomes the input of `output`. Stops at the first failure."

    acceptsnil = True

    @classmethod
    def build(cls, input: Schema, output: Schema, error: Any = None) -> 'PipeSchema':
        for schema in (input, output):
            if not isinstance(schema, Schema):
                raise TypeError('Pipe stage is not a schema: ' + repr(schema))
        return cls.make(S_pipe, {'input': input, 'output': output}, error=error)

    @property
    def input(self) -> Schema:
        return self.internals.defn['input']

    @property
    def output(self) -> Schema:
        return self.internals.defn['output']

    def _parse(self, payload, ctx):
        first = run(self.internals.defn['input'], payload.branch(), ctx)
        payload.merge(first)
        if first.issues:
            return

        payload.value = first.value
        if first.value is ABSENT:
            return

        second = run(self.internals.defn['output'], payload.branch(), ctx)
        payload.merge(second)
        payload.value = second.value


class TransformSchema(Schema):
    """
    Applies `fn` to the value, after the source schema when there is one.
    The function takes `(value)` or `(value, payload)`; with the payload it
    can add issues with `payload.addissue(...)`. Returning an Issue adds
    it. Raised exceptions become custom issues.
    """

    acceptsnil = True

    @classmethod
    def build(cls, fn: Callable[..., Any], source: Schema = None, error: Any = None) -> 'TransformSchema':
        if not callable(fn):
            raise TypeError('Transform must be callable: ' + repr(fn))
        if source is not None and not isinstance(source, Schema):
            raise TypeError('Transform source is not a schema: ' + repr(source))
        return cls.make(
            S_transform,
            {'fn': fn, 'source': source, 'withpayload': 1 < arity(fn)},
            error=error,
        )

    @property
    def source(self) -> Optional[Schema]:
        return self.internals.defn['source']

    def _parse(self, payload, ctx):
        defn = self.internals.defn

        if defn['source'] is not None:
            sub = run(defn['source'], payload.branch(), ctx)
            payload.merge(sub)
            if sub.issues:
                return
            payload.value = sub.value

        value = None if payload.value is ABSENT else payload.value
        start = len(payload.issues)

        if defn['withpayload']:
            out = callback(payload, defn['fn'], value, payload)
        else:
            out = callback(payload, defn['fn'], value)

        if start < len(payload.issues):
            return

        if isinstance(out, Issue):
            payload.addissue(out)
            return

        payload.value = out


class LazySchema(Schema):
    "Resolves its schema from a getter on first parse, and keeps it."

    acceptsnil = True

    @classmethod
    def build(cls, getter: Callable[[], Schema], error: Any = None) -> 'LazySchema':
        if not callable(getter):
            raise TypeError('Lazy getter must be callable: ' + repr(getter))
        return cls.make(S_lazy, {'getter': getter}, error=error, bag={'cache': {}})

    @property
    def schema(self) -> Schema:
        cache = self.internals.bag['cache']
        if 'schema' not in cache:
            schema = self.internals.defn['getter']()
            if not isinstance(schema, Schema):
                raise TypeError('Lazy getter did not return a schema: ' + repr(schema))
            logger.debug('lazy schema resolved: %r', schema)
            cache['schema'] = schema
        return cache['schema']

    def _parse(self, payload, ctx):
        schema = callback(payload, lambda: self.schema)
        if payload.issues:
            return
        sub = run(schema, payload.branch(), ctx)
        payload.merge(sub)
        payload.value = sub.value
