# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Voxgig Schema: issues and errors
# ================================
#
# Issues are raised raw during parsing (code, path, input and per-code
# fields), and finalized at the top-level call boundary, where a message
# is assigned and the issue is detached from the schema that raised it.
#
# Message resolution order for an issue without an explicit message:
# 1. the error override of the check that raised it,
# 2. the error override of the schema that raised it,
# 3. the per-call `error` in the parse context,
# 4. the global `customerror` config option,
# 5. the active locale.
#
# An error override is a string, a callable taking the issue and
# returning a string (or None to defer), or a dict mapping issue codes to
# either of those. Strings are `str.format` templates over the issue
# fields, so `'At least {minimum}'` works for `too_small`.


from typing import *
import json
import logging

from .util import (
    ABSENT,
    UNDEF,
    ismap,
    isfunc,
    pathify,
)


logger = logging.getLogger(__name__)


# Issue codes.
S_invalid_type = 'invalid_type'
S_invalid_value = 'invalid_value'
S_invalid_format = 'invalid_format'
S_invalid_union = 'invalid_union'
S_invalid_key = 'invalid_key'
S_invalid_element = 'invalid_element'
S_unrecognized_keys = 'unrecognized_keys'
S_too_small = 'too_small'
S_too_big = 'too_big'
S_not_multiple_of = 'not_multiple_of'
S_custom = 'custom'
S_non_optional = 'non_optional'

ISSUE_CODES = (
    S_invalid_type,
    S_invalid_value,
    S_invalid_format,
    S_invalid_union,
    S_invalid_key,
    S_invalid_element,
    S_unrecognized_keys,
    S_too_small,
    S_too_big,
    S_not_multiple_of,
    S_custom,
    S_non_optional,
)

# Per-code fields, in wire order.
ISSUE_FIELDS = (
    'expected',
    'received',
    'minimum',
    'maximum',
    'inclusive',
    'exact',
    'origin',
    'format',
    'pattern',
    'prefix',
    'suffix',
    'includes',
    'algorithm',
    'divisor',
    'keys',
    'values',
    'key',
    'discriminator',
    'note',
    'errors',
    'issues',
    'params',
)


class Issue:
    """
    A single validation issue. The `fatal` flag is the inverse of the
    wire-level `continue` flag: a fatal issue aborts the current frame,
    so later checks of the same schema do not run.
    """
    def __init__(
        self,
        code: str,                      # Issue code, one of ISSUE_CODES.
        path: List[Any] = None,         # Path to the value, snapshot at emit time.
        input: Any = ABSENT,            # The offending input value.
        message: str = None,            # Explicit message, skips error overrides.
        fatal: bool = True,             # Abort the current frame.
        overrides: Tuple[Any, ...] = (),  # Error overrides, most specific first.
        **fields: Any                   # Per-code fields, see ISSUE_FIELDS.
    ) -> None:
        self.code = code
        self.path = list(path) if path is not None else []
        self.input = input
        self.message = message
        self.fatal = fatal
        self.overrides = overrides

        for name in ISSUE_FIELDS:
            setattr(self, name, None)

        for name, val in fields.items():
            if name not in ISSUE_FIELDS:
                raise TypeError('Unknown issue field: ' + name)
            setattr(self, name, val)

    @property
    def continues(self) -> bool:
        return not self.fatal

    def fields(self) -> Dict[str, Any]:
        "The defined per-code fields, plus code, path, message and input."
        out = {'code': self.code, 'path': self.path, 'message': self.message}
        if self.input is not ABSENT:
            out['input'] = self.input
        for name in ISSUE_FIELDS:
            val = getattr(self, name)
            if val is not None:
                out[name] = val
        return out

    def todict(self) -> Dict[str, Any]:
        "Stable wire shape: {code, path, message, ...per-code fields}."
        out = {'code': self.code, 'path': list(self.path), 'message': self.message}
        if self.input is not ABSENT:
            out['input'] = self.input
        for name in ISSUE_FIELDS:
            val = getattr(self, name)
            if val is None:
                continue
            if name == 'errors':
                val = [[i.todict() for i in branch] for branch in val]
            elif name == 'issues':
                val = [i.todict() for i in val]
            out[name] = val
        return out

    def copy(self, **changes: Any) -> 'Issue':
        out = Issue.__new__(Issue)
        out.__dict__.update(self.__dict__)
        out.path = list(self.path)
        for name, val in changes.items():
            setattr(out, name, val)
        return out

    def __repr__(self) -> str:
        return 'Issue(%s, path=%s, message=%r)' % (self.code, pathify(self.path), self.message)


def resolveoverride(override: Any, issue: Issue) -> Optional[str]:
    """
    Apply one error override to an issue, returning a message, or None if
    the override does not cover this issue.
    """
    if override is None:
        return None

    if ismap(override):
        override = override.get(issue.code)
        if override is None:
            return None

    if isinstance(override, str):
        return rendertemplate(override, issue)

    if isfunc(override):
        out = override(issue)
        if ismap(out):
            out = out.get('message')
        if out is None or out == '':
            return None
        if not isinstance(out, str):
            out = str(out)
        return out

    return None


class _TemplateFields(dict):
    def __missing__(self, key):
        return '{' + key + '}'


def rendertemplate(template: str, issue: Issue) -> str:
    "Fill a `str.format` template from the issue fields, leaving unknown names as-is."
    fields = _TemplateFields(issue.fields())
    fields['path'] = pathify(issue.path)
    try:
        return template.format_map(fields)
    except (ValueError, IndexError, AttributeError):
        return template


def finalize(issue: Issue, ctx: Any = None) -> Issue:
    """
    Assign a message to a raw issue and return the finalized copy. Nested
    union branches and key/element issues are finalized as well.
    """
    # Late import, the locales render default messages and need the codes above.
    from .config import config
    from .locales import rendermessage

    conf = config()
    out = issue.copy(overrides=())

    if out.errors is not None:
        out.errors = [[finalize(i, ctx) for i in branch] for branch in out.errors]
    if out.issues is not None:
        out.issues = [finalize(i, ctx) for i in out.issues]

    message = issue.message

    if message is None:
        for override in issue.overrides:
            message = _safeoverride(override, issue)
            if message is not None:
                break

    if message is None and ctx is not None:
        message = _safeoverride(getattr(ctx, 'error', None), issue)

    if message is None:
        message = _safeoverride(conf.get('customerror'), issue)

    if message is None:
        message = rendermessage(conf.get('locale'), issue)

    out.message = message

    reportinput = getattr(ctx, 'reportinput', None)
    if reportinput is None:
        reportinput = conf.get('reportinput')
    if not reportinput:
        out.input = ABSENT

    return out


def _safeoverride(override, issue):
    try:
        return resolveoverride(override, issue)
    except Exception as err:
        # A broken error map must not hide the underlying issue.
        logger.debug('error override failed for %s: %s', issue.code, err)
        return None


class SchemaError(ValueError):
    """
    A failed parse. Carries the finalized issue list, and provides the
    flatten/format/treeify/prettify views of it.
    """
    def __init__(self, issues: List[Issue]) -> None:
        self.issues = list(issues)
        super().__init__(self._summary())

    def _summary(self) -> str:
        return 'Invalid data: ' + ' | '.join(
            ('at ' + pathify(i.path) + ': ' if i.path else '') + str(i.message)
            for i in self.issues
        )

    def __str__(self) -> str:
        return self._summary()

    def flatten(self, mapper: Callable[[Issue], Any] = None) -> Dict[str, Any]:
        """
        Shallow view: `formErrors` holds messages of root issues, and
        `fieldErrors` maps each first path segment to its messages.
        """
        mapper = mapper or _message
        form = []
        fields: Dict[Any, List[Any]] = {}
        for issue in self.issues:
            if 0 < len(issue.path):
                fields.setdefault(issue.path[0], []).append(mapper(issue))
            else:
                form.append(mapper(issue))
        return {'formErrors': form, 'fieldErrors': fields}

    def format(self, mapper: Callable[[Issue], Any] = None) -> Dict[Any, Any]:
        """
        Nested view mirroring the input shape. Each level has an `_errors`
        list. Union branch issues are folded in.
        """
        mapper = mapper or _message
        out: Dict[Any, Any] = {'_errors': []}

        def process(issues):
            for issue in issues:
                if issue.code == S_invalid_union and issue.errors:
                    for branch in issue.errors:
                        process(branch)
                elif 0 == len(issue.path):
                    out['_errors'].append(mapper(issue))
                else:
                    node = out
                    for i, part in enumerate(issue.path):
                        node = node.setdefault(part, {'_errors': []})
                        if i == len(issue.path) - 1:
                            node['_errors'].append(mapper(issue))

        process(self.issues)
        return out

    def treeify(self, mapper: Callable[[Issue], Any] = None) -> Dict[str, Any]:
        """
        Tree view: each node has `errors`, and optionally `properties`
        (string keys) and `items` (integer indexes, a list padded with None).
        """
        mapper = mapper or _message
        out: Dict[str, Any] = {'errors': []}

        def process(issues):
            for issue in issues:
                if issue.code == S_invalid_union and issue.errors:
                    for branch in issue.errors:
                        process(branch)
                    continue

                node = out
                for part in issue.path:
                    if isinstance(part, int) and not isinstance(part, bool):
                        nodes = node.setdefault('items', [])
                        while len(nodes) <= part:
                            nodes.append(None)
                        if nodes[part] is None:
                            nodes[part] = {'errors': []}
                        node = nodes[part]
                    else:
                        node = node.setdefault('properties', {}).setdefault(part, {'errors': []})
                node['errors'].append(mapper(issue))

        process(self.issues)
        return out

    def prettify(self) -> str:
        "Human-readable multi-line summary, shallow paths first."
        lines = []
        for issue in sorted(self.issues, key=lambda i: len(i.path)):
            lines.append('✖ ' + str(issue.message))
            if issue.path:
                lines.append('  → at ' + pathify(issue.path))
        return '\n'.join(lines)

    def todict(self) -> List[Dict[str, Any]]:
        return [i.todict() for i in self.issues]

    def tojson(self, indent: int = 2) -> str:
        return json.dumps(self.todict(), indent=indent, default=str)


def _message(issue):
    return issue.message


def iserror(value: Any = UNDEF) -> bool:
    """
    Recognize a schema error by its interface: an exception carrying an
    `issues` list and the flatten/format views.
    """
    if isinstance(value, SchemaError):
        return True
    return (
        isinstance(value, BaseException)
        and isinstance(getattr(value, 'issues', None), list)
        and callable(getattr(value, 'flatten', None))
        and callable(getattr(value, 'format', None))
    )
