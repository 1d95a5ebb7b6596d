# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Voxgig Schema: parse engine
# ===========================
#
# Every schema node is parsed by `run`, one frame per node:
#
# 1. nil normalization (default, prefault, optional, nilable, nonoptional),
# 2. coercion, when the schema has the coerce flag,
# 3. type extraction and children, via the schema's `_parse` method,
# 4. the ordered checks, with overwrites applied between checks,
# 5. the payload value is the frame result.
#
# Each frame works on its own Payload. Composite schemas create child
# payloads with `payload.child(value, key)` and merge the child issues
# back into their own payload. Issue paths are absolute, taken from the
# frame payload when the issue is added.


from typing import *
import inspect
import logging

from .util import (
    ABSENT,
    UNDEF,
    clone,
    ismap,
    typify,
    getprop,
)

from .issues import (
    Issue,
    SchemaError,
    finalize,
    S_custom,
    S_invalid_type,
    S_non_optional,
)

from .config import getconfig


logger = logging.getLogger(__name__)

S_maxdepth = 'Maximum schema depth exceeded'


class Internals:
    """
    The immutable definition record of a schema node. Modifiers never
    change an Internals object, they clone it with `clone(**changes)` and
    build a new node with `constructor(internals)`.
    """
    def __init__(
        self,
        type: str,                      # Type code.
        checks: Tuple[Any, ...] = (),   # Ordered checks.
        coerce: bool = False,           # Coerce input before type extraction.
        optional: bool = False,         # Accept absent (and nil, unless exactoptional).
        nilable: bool = False,          # Accept nil.
        nonoptional: bool = False,      # Reject nil with non_optional.
        exactoptional: bool = False,    # Optional accepts absent but not nil.
        readonly: bool = False,         # Marker only.
        default: Any = ABSENT,          # Value returned for nil input.
        defaultfunc: Callable = None,   # Function producing the default.
        prefault: Any = ABSENT,         # Replacement input for nil input.
        prefaultfunc: Callable = None,  # Function producing the prefault.
        error: Any = None,              # Error override for issues of this node.
        bag: Dict[str, Any] = None,     # Per-type scratch values.
        constructor: Callable = None,   # Builds a node of the same class.
        defn: Dict[str, Any] = None     # Variant definition (shape, options, ...).
    ) -> None:
        self.type = type
        self.checks = tuple(checks)
        self.coerce = coerce
        self.optional = optional
        self.nilable = nilable
        self.nonoptional = nonoptional
        self.exactoptional = exactoptional
        self.readonly = readonly
        self.default = default
        self.defaultfunc = defaultfunc
        self.prefault = prefault
        self.prefaultfunc = prefaultfunc
        self.error = error
        self.bag = {} if bag is None else bag
        self.constructor = constructor
        self.defn = {} if defn is None else defn

    def clone(self, **changes: Any) -> 'Internals':
        "Copy with changes. The bag and definition are copied shallowly, checks are shared."
        out = Internals.__new__(Internals)
        out.__dict__.update(self.__dict__)
        out.bag = dict(self.bag)
        out.defn = dict(self.defn)
        for name, val in changes.items():
            if name not in out.__dict__:
                raise TypeError('Unknown schema internals field: ' + name)
            setattr(out, name, tuple(val) if 'checks' == name else val)
        return out

    def hasdefault(self) -> bool:
        return self.default is not ABSENT or self.defaultfunc is not None

    def hasprefault(self) -> bool:
        return self.prefault is not ABSENT or self.prefaultfunc is not None

    def __repr__(self) -> str:
        return 'Internals(%s, checks=%d)' % (self.type, len(self.checks))


class ParseContext:
    "Per-call parse options, plus the current frame depth."

    def __init__(
        self,
        error: Any = None,          # Per-call error override.
        reportinput: bool = None,   # Keep inputs on finalized issues.
        maxdepth: int = None        # Bound on nested frames.
    ) -> None:
        self.error = error
        self.reportinput = reportinput
        self.maxdepth = getconfig('maxdepth') if maxdepth is None else maxdepth
        self.depth = 0


def context(ctx: Any = None) -> ParseContext:
    "Build a fresh parse context from None, a dict of options, or another context."
    if ctx is None:
        return ParseContext()
    if isinstance(ctx, ParseContext):
        return ParseContext(ctx.error, ctx.reportinput, ctx.maxdepth)
    if ismap(ctx):
        unknown = [k for k in ctx if k not in ('error', 'reportinput', 'maxdepth')]
        if unknown:
            raise ValueError('Unknown parse options: ' + ', '.join(map(str, unknown)))
        return ParseContext(
            getprop(ctx, 'error'),
            getprop(ctx, 'reportinput'),
            getprop(ctx, 'maxdepth'),
        )
    raise TypeError('Parse context must be a dict or ParseContext: ' + repr(ctx))


class Payload:
    """
    Per-frame carrier: the current value, the path to it, the issues
    collected so far, and the replacement slot used by overwrite checks.
    """
    def __init__(
        self,
        value: Any = ABSENT,        # Current value.
        path: List[Any] = None,     # Keys from the root to the value.
        issues: List[Issue] = None  # Collected issues.
    ) -> None:
        self.value = value
        self.path = [] if path is None else path
        self.issues = [] if issues is None else issues
        self.replace = ABSENT
        self.overrides: Tuple[Any, ...] = ()

    def child(self, value: Any, key: Any) -> 'Payload':
        return Payload(value, self.path + [key])

    def branch(self, value: Any = ABSENT) -> 'Payload':
        "New payload at the same path, for trying alternatives."
        return Payload(self.value if value is ABSENT else value, list(self.path))

    def addissue(self, issue: Any = UNDEF, **props: Any) -> Issue:
        """
        Add an issue. Accepts an Issue, a message string or a dict of issue
        fields. The issue path is taken as relative to the payload path.
        User issues (strings and dicts) are custom and non-fatal by default.
        """
        if isinstance(issue, str):
            props.setdefault('message', issue)
            issue = UNDEF

        if issue is UNDEF or ismap(issue):
            spec = dict(issue or {})
            spec.update(props)
            code = spec.pop('code', S_custom)
            fatal = spec.pop('fatal', None)
            cont = spec.pop('continue', None)
            if fatal is None:
                fatal = (not cont) if cont is not None else False
            issue = Issue(code, fatal=fatal, **spec)
        elif not isinstance(issue, Issue):
            raise TypeError('Not an issue: ' + repr(issue))

        issue.path = self.path + list(issue.path)
        if issue.input is ABSENT and self.value is not ABSENT:
            issue.input = self.value
        if not issue.overrides:
            issue.overrides = self.overrides
        self.issues.append(issue)
        return issue

    def typeissue(self, expected: str, **props: Any) -> Issue:
        props.setdefault('received', typify(self.value))
        return self.addissue(Issue(S_invalid_type, expected=expected, **props))

    def merge(self, other: 'Payload') -> 'Payload':
        self.issues.extend(other.issues)
        return self

    def aborted(self, start: int = 0) -> bool:
        "A fatal issue has been collected (after index `start`)."
        for issue in self.issues[start:]:
            if issue.fatal:
                return True
        return False

    def __repr__(self) -> str:
        return 'Payload(%r, path=%r, issues=%d)' % (self.value, self.path, len(self.issues))


def overrides(*errors: Any) -> Tuple[Any, ...]:
    return tuple(e for e in errors if e is not None)


def run(schema: Any, payload: Payload, ctx: ParseContext) -> Payload:
    "Parse the payload value with the schema, in place, and return the payload."
    ins = schema.internals
    payload.overrides = overrides(ins.error)

    ctx.depth += 1
    try:
        if ctx.maxdepth < ctx.depth:
            logger.debug('max depth %s exceeded at %s', ctx.maxdepth, payload.path)
            payload.addissue(Issue(
                S_custom,
                message=S_maxdepth,
                fatal=True,
                params={'maxdepth': ctx.maxdepth},
            ))
            return payload

        if payload.value is None or payload.value is ABSENT:
            if ins.hasdefault():
                payload.value = callback(payload, materialize, ins.default, ins.defaultfunc)
                return payload

            if ins.hasprefault():
                payload.value = callback(payload, materialize, ins.prefault, ins.prefaultfunc)
                if payload.issues:
                    return payload

            if not nilnormalize(schema, payload):
                return payload

        if ins.coerce:
            coerced, ok = schema._coerce(payload.value)
            if ok:
                payload.value = coerced

        schema._parse(payload, ctx)

        if not payload.aborted():
            runchecks(ins.checks, payload, ctx)

        return payload

    finally:
        ctx.depth -= 1


def nilnormalize(schema: Any, payload: Payload) -> bool:
    """
    Handle a nil or absent value. Returns True if the schema should parse
    the value itself, False if the frame is complete.
    """
    ins = schema.internals
    value = payload.value

    if value is None or value is ABSENT:
        if ins.nonoptional:
            payload.addissue(Issue(
                S_non_optional,
                expected='nonoptional',
                received=typify(value),
            ))
            return False

        if value is ABSENT and (ins.optional or schema.optin):
            return False

        if value is None and (ins.nilable or (ins.optional and not ins.exactoptional)):
            return False

        if not schema.acceptsnil:
            payload.typeissue(schema.expected)
            return False

    return True


def materialize(value: Any, func: Callable = None) -> Any:
    "Produce a fresh copy of a default or prefault value."
    if func is not None:
        return func()
    return clone(value)


def callback(payload: Payload, fn: Callable, *args: Any) -> Any:
    """
    Call user code. A raised SchemaError merges its issues, any other
    exception becomes a fatal custom issue.
    """
    try:
        return fn(*args)
    except SchemaError as err:
        for issue in err.issues:
            payload.addissue(issue.copy(fatal=True))
    except Exception as err:
        logger.debug('callback raised at %s: %r', payload.path, err)
        payload.addissue(Issue(
            S_custom,
            message=str(err) or type(err).__name__,
            fatal=True,
            params={'error': type(err).__name__},
        ))
    return payload.value


def runchecks(checks: Tuple[Any, ...], payload: Payload, ctx: ParseContext) -> Payload:
    """
    Run checks in order. Issues added by a check carry the check error
    override before the schema override. A pending overwrite is applied
    after each check. Stops once a fatal issue is collected.
    """
    schemaoverrides = payload.overrides

    for check in checks:
        if payload.aborted():
            break

        payload.overrides = overrides(check.error) + schemaoverrides
        try:
            check.run(payload, ctx)
        except SchemaError as err:
            for issue in err.issues:
                payload.addissue(issue.copy(fatal=check.abort))
        except Exception as err:
            logger.debug('check %s raised at %s: %r', check.kind, payload.path, err)
            payload.addissue(Issue(
                S_custom,
                message=str(err) or type(err).__name__,
                fatal=check.abort,
                params={'error': type(err).__name__},
            ))
        finally:
            payload.overrides = schemaoverrides

        if payload.replace is not ABSENT:
            payload.value = payload.replace
            payload.replace = ABSENT

    return payload


def parsevalue(schema: Any, value: Any, ctx: Any = None) -> Tuple[Any, Optional[SchemaError]]:
    "Top-level parse: run the root frame and finalize any issues into a SchemaError."
    pctx = context(ctx)
    payload = run(schema, Payload(value), pctx)

    if payload.issues:
        return None, SchemaError([finalize(issue, pctx) for issue in payload.issues])

    out = payload.value
    return (None if out is ABSENT else out), None


def arity(fn: Callable) -> int:
    "Number of required positional parameters of a callback (varargs count as many)."
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return 1

    count = 0
    for param in sig.parameters.values():
        if param.kind == param.VAR_POSITIONAL:
            return 99
        if (param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD)
                and param.default is param.empty):
            count += 1
    return count
