# Test runner that uses the test model in tests/spec.
#
# A test set is a list of entries:
#
#   {"in": <input>, "out": <expected output>}
#   {"in": <input>, "err": <expected error, substring or /regex/>}
#   {"args": [<arg>, ...], "out": ...}
#   {"in": ..., "match": {"err": {"issues": [{"code": "too_small"}]}}}
#
# The input "__UNDEF__" stands for a missing value.

import os
import json
import re
import traceback
from datetime import date, datetime, time
from typing import Any, Dict, List, Callable, TypedDict, Optional

from voxgig_schema import ABSENT, iserror
from voxgig_schema.util import (
    clone,
    getprop,
    isnode,
    ismap,
    islist,
    items,
    stringify,
)


NULLMARK = '__NULL__'  # Value is JSON null
UNDEFMARK = '__UNDEF__'  # Value is not present (thus, undefined)


class RunPack(TypedDict):
    spec: Dict[str, Any]
    runset: Callable
    runsetflags: Callable


def makeRunner(testfile: str):

    def runner(name: str) -> RunPack:
        spec = resolve_spec(name, testfile)

        def runsetflags(testspec, flags, subject):
            flags = resolve_flags(flags)

            for entry in testspec['set']:
                entry = resolve_entry(clone(entry), flags)
                args = resolve_args(entry)

                try:
                    res = subject(*args)
                except Exception as err:
                    handle_error(entry, err)
                    continue

                if 'err' in entry:
                    raise AssertionError(
                        f"Expected error: {stringify(entry['err'])}, got: {stringify(res)}\n"
                        f"Entry: {json.dumps(entry, indent=2, default=jsonfallback)}"
                    )

                res = fixJSON(res, flags)
                entry['res'] = res
                check_result(entry, res)

        def runset(testspec, subject):
            return runsetflags(testspec, {}, subject)

        return {
            "spec": spec,
            "runset": runset,
            "runsetflags": runsetflags,
        }

    return runner


def resolve_spec(name: str, testfile: str) -> Dict[str, Any]:
    with open(os.path.join(os.path.dirname(__file__), testfile), 'r', encoding='utf-8') as f:
        alltests = json.load(f)

    if name in alltests:
        return alltests[name]
    return alltests


def resolve_flags(flags: Dict[str, Any] = None) -> Dict[str, bool]:
    if flags is None:
        flags = {}
    flags["null"] = flags.get("null", True)
    return flags


def resolve_entry(entry: Dict[str, Any], flags: Dict[str, bool]) -> Dict[str, Any]:
    # Set default output value for missing 'out' field
    if 'out' not in entry and 'err' not in entry and flags.get("null", True):
        entry["out"] = NULLMARK
    return entry


def resolve_args(entry: Dict[str, Any]) -> List[Any]:
    if 'args' in entry:
        return [undefine(a) for a in clone(entry['args'])]
    if 'in' in entry:
        return [undefine(clone(entry['in']))]
    return [ABSENT]


def undefine(val: Any) -> Any:
    return ABSENT if UNDEFMARK == val else val


def fixJSON(obj: Any, flags: Dict[str, bool]) -> Any:
    if obj is None or obj is ABSENT:
        return NULLMARK if flags.get("null", True) else None

    if iserror(obj):
        return {'name': type(obj).__name__, 'message': str(obj), 'issues': obj.todict()}

    if isinstance(obj, (list, tuple)):
        return [fixJSON(item, flags) for item in obj]
    if isinstance(obj, (set, frozenset)):
        return sorted((fixJSON(item, flags) for item in obj), key=stringify)
    if isinstance(obj, dict):
        return {k: fixJSON(v, flags) for k, v in obj.items()}
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()

    return obj


def check_result(entry, res):
    matched = False

    if 'match' in entry:
        match(entry['match'], {'in': entry.get('in'), 'out': res})
        matched = True

    out = entry.get('out')

    # NOTE: allow match with no out
    if matched and NULLMARK == out:
        return

    if out == res:
        return

    raise AssertionError(
        f"Expected: {out}, got: {res}\n"
        f"Entry: {json.dumps(entry, indent=2, default=jsonfallback)}"
    )


def handle_error(entry, err):
    entry_err = entry.get('err')

    if entry_err is not None:
        if entry_err is True or matchval(entry_err, str(err)):
            if 'match' in entry:
                match(entry['match'], {
                    'in': entry.get('in'),
                    'err': fixJSON(err, {}) if iserror(err) else {'message': str(err)},
                })
            return True

        raise AssertionError(
            f"ERROR MATCH: [{stringify(entry_err)}] <=> [{str(err)}]"
        )

    raise AssertionError(
        f"{traceback.format_exc()}\nENTRY: "
        f"{json.dumps(entry, indent=2, default=jsonfallback)}"
    )


def jsonfallback(obj):
    return f"<non-serializable: {type(obj).__name__}>"


def match(check, base, path=None):
    path = path or []

    if isnode(check):
        for key, val in items(check):
            match(val, base, path + [key])
        return

    baseval = getpath(path, base)

    if baseval == check:
        return

    # Explicit undefined expected
    if UNDEFMARK == check and baseval is None:
        return

    if not matchval(check, baseval):
        raise AssertionError(
            f"MATCH: {'.'.join(map(str, path))}: "
            f"[{stringify(check)}] <=> [{stringify(baseval)}]"
        )


def getpath(path, base):
    val = base
    for key in path:
        if not (ismap(val) or islist(val)):
            return None
        val = getprop(val, key)
    return val


def matchval(check, base):
    if check == UNDEFMARK or check == NULLMARK:
        check = None

    if check == base:
        return True

    if isinstance(check, str):
        base_str = stringify(base)

        # Check for regex pattern with /pattern/ syntax
        regex_match = re.match(r'^/(.+)/$', check)

        if regex_match:
            return re.search(regex_match.group(1), base_str) is not None
        else:
            # Case-insensitive substring check
            return check.lower() in base_str.lower()

    return False


__all__ = [
    'NULLMARK',
    'UNDEFMARK',
    'makeRunner',
]
