# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Voxgig Schema: base schema
# ==========================
#
# A schema is a thin object over an immutable Internals record. All
# modifiers return a new schema built by the internals constructor, so
# the original schema keeps its behavior.


from typing import *

from .util import (
    ABSENT,
    UNDEF,
    clone,
)

from .engine import (
    Internals,
    Payload,
    context,
    parsevalue,
    run,
)

from .checks import (
    CallbackCheck,
    OverwriteCheck,
    RefineCheck,
)

from .registry import GLOBAL_REGISTRY


class Schema:
    """
    Base class of all schemas. Subclasses implement `_parse(payload, ctx)`
    (type extraction and children) and, where coercion applies,
    `_coerce(value) -> (value, ok)`.
    """

    # Schema parses nil and absent values itself.
    acceptsnil = False

    # Schema accepts an absent value without optional().
    optin = False

    def __init__(self, internals: Internals) -> None:
        self.internals = internals

    @classmethod
    def make(cls, type: str, defn: Dict[str, Any] = None, **props: Any) -> 'Schema':
        "Build a schema of this class from a type code, definition and internals fields."
        return cls(Internals(type, constructor=cls, defn=defn, **props))

    @property
    def type(self) -> str:
        return self.internals.type

    @property
    def expected(self) -> str:
        "Type name reported in invalid_type issues."
        return self.internals.type

    @property
    def defn(self) -> Dict[str, Any]:
        return self.internals.defn

    def _clone(self, **changes: Any) -> 'Schema':
        ins = self.internals.clone(**changes)
        constructor = ins.constructor or type(self)
        return constructor(ins)

    def _addcheck(self, check: Any) -> 'Schema':
        return self._clone(checks=self.internals.checks + (check,))

    def _coerce(self, value: Any) -> Tuple[Any, bool]:
        return value, False

    def _parse(self, payload: Payload, ctx: Any) -> None:
        raise NotImplementedError(type(self).__name__)

    # Parsing.

    def parse(self, value: Any = None, ctx: Any = None) -> Tuple[Any, Any]:
        "Parse a value, returning a pair of (output, error). The error is None on success."
        return parsevalue(self, value, ctx)

    def mustparse(self, value: Any = None, ctx: Any = None) -> Any:
        "Parse a value, raising SchemaError on failure."
        out, err = parsevalue(self, value, ctx)
        if err is not None:
            raise err
        return out

    def parseany(self, value: Any = None, ctx: Any = None) -> Tuple[Any, Any]:
        return parsevalue(self, value, ctx)

    def strictparse(self, value: Any = None, ctx: Any = None) -> Tuple[Any, Any]:
        """
        Parse a value that is already of the output type. Same pipeline as
        parse, coercion still applies if the schema was built with it.
        """
        return parsevalue(self, value, ctx)

    def muststrictparse(self, value: Any = None, ctx: Any = None) -> Any:
        out, err = self.strictparse(value, ctx)
        if err is not None:
            raise err
        return out

    def _run(self, value: Any, path: List[Any] = None, ctx: Any = None) -> Payload:
        "Run one frame directly, returning the raw payload (unfinalized issues)."
        return run(self, Payload(value, list(path or [])), context(ctx))

    # Nil handling.

    def optional(self) -> 'Schema':
        return self._clone(optional=True, nonoptional=False)

    def exactoptional(self) -> 'Schema':
        "Optional that accepts an absent key, but not an explicit nil."
        return self._clone(optional=True, exactoptional=True, nonoptional=False)

    def nilable(self) -> 'Schema':
        return self._clone(nilable=True, nonoptional=False)

    def nullish(self) -> 'Schema':
        return self._clone(optional=True, nilable=True, nonoptional=False)

    def nonoptional(self) -> 'Schema':
        return self._clone(
            optional=False,
            nilable=False,
            exactoptional=False,
            nonoptional=True,
        )

    def readonly(self) -> 'Schema':
        return self._clone(readonly=True)

    def default(self, value: Any) -> 'Schema':
        "Value returned for nil input, without validation. Wins over prefault."
        return self._clone(default=clone(value), defaultfunc=None)

    def defaultfunc(self, fn: Callable[[], Any]) -> 'Schema':
        return self._clone(default=ABSENT, defaultfunc=fn)

    def prefault(self, value: Any) -> 'Schema':
        "Input used in place of nil input, then validated as usual."
        return self._clone(prefault=clone(value), prefaultfunc=None)

    def prefaultfunc(self, fn: Callable[[], Any]) -> 'Schema':
        return self._clone(prefault=ABSENT, prefaultfunc=fn)

    def isoptional(self) -> bool:
        return self.internals.optional

    def isnilable(self) -> bool:
        return self.internals.nilable

    def error(self, error: Any) -> 'Schema':
        "Set the error override for issues raised by this schema."
        return self._clone(error=error)

    # Checks.

    def refine(
        self,
        fn: Callable[[Any], Any],
        error: Any = None,
        abort: bool = False,
        path: List[Any] = None,
        params: Dict[str, Any] = None
    ) -> 'Schema':
        return self._addcheck(RefineCheck(fn, error, abort, path, params))

    def check(self, fn: Callable[[Payload], Any], error: Any = None, abort: bool = False) -> 'Schema':
        return self._addcheck(CallbackCheck(fn, error, abort))

    def overwrite(self, fn: Callable[[Any], Any]) -> 'Schema':
        return self._addcheck(OverwriteCheck(fn))

    # Composition.

    def transform(self, fn: Callable[..., Any]) -> 'Schema':
        from .composers import TransformSchema
        return TransformSchema.build(fn, self)

    def pipe(self, other: 'Schema') -> 'Schema':
        from .composers import PipeSchema
        return PipeSchema.build(self, other)

    def and_(self, other: 'Schema') -> 'Schema':
        from .unions import IntersectionSchema
        return IntersectionSchema.build(self, other)

    def or_(self, other: 'Schema') -> 'Schema':
        from .unions import UnionSchema
        return UnionSchema.build([self, other])

    # Metadata.

    def describe(self, text: str) -> 'Schema':
        meta = self.meta() or {}
        meta['description'] = text
        out = self._clone()
        GLOBAL_REGISTRY.add(out, meta)
        return out

    def meta(self, data: Dict[str, Any] = UNDEF) -> Any:
        "With no argument, read the metadata. Otherwise return a copy carrying it."
        if data is UNDEF:
            return GLOBAL_REGISTRY.get(self)
        meta = self.meta() or {}
        meta.update(data)
        out = self._clone()
        GLOBAL_REGISTRY.add(out, meta)
        return out

    @property
    def description(self) -> Optional[str]:
        meta = GLOBAL_REGISTRY.get(self)
        return None if meta is None else meta.get('description')

    def __repr__(self) -> str:
        ins = self.internals
        flags = [name for name in ('optional', 'nilable', 'nonoptional', 'readonly', 'coerce')
                 if getattr(ins, name)]
        return '%s(%s%s)' % (type(self).__name__, ins.type,
                             (' ' + ','.join(flags)) if flags else '')
