# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Locales render the default message for an issue. A locale is a dict
# mapping issue code to either a `str.format` template over the issue
# fields, or a callable taking the issue and returning the message.
# Codes missing from a locale fall back to the English entry.


from typing import *
import logging
import math
import threading

from .util import (
    ABSENT,
    typify,
    numstr,
    S_MT,
)

from .issues import (
    Issue,
    rendertemplate,
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


logger = logging.getLogger(__name__)

S_generic = 'Invalid input'


def stringifyprimitive(value: Any) -> str:
    "Quote strings, and print other primitives in their JSON-like form."
    if isinstance(value, str):
        return '"' + value + '"'
    if value is None or value is ABSENT:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        if math.isnan(value):
            return 'NaN'
        if math.isinf(value):
            return 'Infinity' if 0 < value else '-Infinity'
        return numstr(value)
    if isinstance(value, int):
        return str(value)
    return '"' + str(value) + '"'


def joinvalues(values: Any, sep: str = '|') -> str:
    return sep.join(stringifyprimitive(v) for v in (values or []))


def _received(issue: Issue) -> str:
    if issue.received is not None:
        return issue.received
    return typify(issue.input)


# English.

_SIZING_EN = {
    'string': 'characters',
    'array': 'items',
    'set': 'items',
    'tuple': 'items',
    'object': 'keys',
    'record': 'keys',
    'map': 'keys',
}

_NOUNS_EN = {
    'regex': 'input',
    'email': 'email address',
    'url': 'URL',
    'emoji': 'emoji',
    'uuid': 'UUID',
    'uuidv4': 'UUIDv4',
    'uuidv6': 'UUIDv6',
    'uuidv7': 'UUIDv7',
    'nanoid': 'nanoid',
    'guid': 'GUID',
    'cuid': 'cuid',
    'cuid2': 'cuid2',
    'ulid': 'ULID',
    'xid': 'XID',
    'ksuid': 'KSUID',
    'datetime': 'ISO datetime',
    'date': 'ISO date',
    'time': 'ISO time',
    'duration': 'ISO duration',
    'ipv4': 'IPv4 address',
    'ipv6': 'IPv6 address',
    'mac': 'MAC address',
    'cidrv4': 'IPv4 range',
    'cidrv6': 'IPv6 range',
    'base64': 'base64-encoded string',
    'base64url': 'base64url-encoded string',
    'hex': 'hexadecimal string',
    'hostname': 'hostname',
    'json_string': 'JSON string',
    'e164': 'E.164 number',
    'jwt': 'JWT',
    'lowercase': 'lowercase string',
    'uppercase': 'uppercase string',
}


def _size_en(issue, small):
    adj = ('>' if small else '<') + ('=' if issue.inclusive else S_MT)
    threshold = numstr(issue.minimum if small else issue.maximum)
    origin = issue.origin or 'value'
    head = 'Too small' if small else 'Too big'
    unit = _SIZING_EN.get(origin)
    if unit:
        return '%s: expected %s to have %s%s %s' % (head, origin, adj, threshold, unit)
    return '%s: expected %s to be %s%s' % (head, origin, adj, threshold)


def _format_en(issue):
    fmt = issue.format
    if 'starts_with' == fmt:
        return 'Invalid string: must start with "%s"' % issue.prefix
    if 'ends_with' == fmt:
        return 'Invalid string: must end with "%s"' % issue.suffix
    if 'includes' == fmt:
        return 'Invalid string: must include "%s"' % issue.includes
    if 'regex' == fmt:
        return 'Invalid string: must match pattern %s' % issue.pattern
    return 'Invalid ' + _NOUNS_EN.get(fmt, fmt or 'format')


def _value_en(issue):
    values = issue.values or []
    if 1 == len(values):
        return 'Invalid input: expected ' + stringifyprimitive(values[0])
    if 0 == len(values):
        return 'Invalid value'
    return 'Invalid option: expected one of ' + joinvalues(values, '|')


def _keys_en(issue):
    keys = issue.keys or []
    return 'Unrecognized key%s: %s' % (
        's' if 1 < len(keys) else S_MT, joinvalues(keys, ', '))


LOCALE_EN = {
    S_invalid_type: lambda issue: 'Invalid input: expected %s, received %s' % (
        issue.expected, _received(issue)),
    S_invalid_value: _value_en,
    S_too_big: lambda issue: _size_en(issue, False),
    S_too_small: lambda issue: _size_en(issue, True),
    S_invalid_format: _format_en,
    S_not_multiple_of: lambda issue: 'Invalid number: must be a multiple of ' + numstr(issue.divisor),
    S_unrecognized_keys: _keys_en,
    S_invalid_key: 'Invalid key in {origin}',
    S_invalid_element: 'Invalid value in {origin}',
    S_invalid_union: S_generic,
    S_non_optional: 'Invalid input: expected nonoptional, received nil',
    S_custom: S_generic,
}


# German.

_SIZING_DE = {
    'string': 'Zeichen',
    'array': 'Elemente',
    'set': 'Elemente',
    'tuple': 'Elemente',
    'object': 'Schlüssel',
    'record': 'Einträge',
    'map': 'Einträge',
}

_NOUNS_DE = {
    'regex': 'Eingabe',
    'email': 'E-Mail-Adresse',
    'url': 'URL',
    'emoji': 'Emoji',
    'uuid': 'UUID',
    'uuidv4': 'UUIDv4',
    'uuidv6': 'UUIDv6',
    'uuidv7': 'UUIDv7',
    'nanoid': 'nanoid',
    'guid': 'GUID',
    'cuid': 'cuid',
    'cuid2': 'cuid2',
    'ulid': 'ULID',
    'xid': 'XID',
    'ksuid': 'KSUID',
    'datetime': 'ISO-Datum und -Uhrzeit',
    'date': 'ISO-Datum',
    'time': 'ISO-Uhrzeit',
    'duration': 'ISO-Dauer',
    'ipv4': 'IPv4-Adresse',
    'ipv6': 'IPv6-Adresse',
    'mac': 'MAC-Adresse',
    'cidrv4': 'IPv4-Bereich',
    'cidrv6': 'IPv6-Bereich',
    'base64': 'Base64-codierter String',
    'base64url': 'Base64-URL-codierter String',
    'hex': 'Hexadezimal-String',
    'hostname': 'Hostname',
    'json_string': 'JSON-String',
    'e164': 'E.164-Nummer',
    'jwt': 'JWT',
}

_TYPES_DE = {
    'NaN': 'NaN',
    'int': 'Zahl',
    'float': 'Zahl',
    'number': 'Zahl',
    'array': 'Array',
    'tuple': 'Array',
    'string': 'String',
    'bool': 'Boolean',
    'object': 'Objekt',
    'map': 'Map',
    'nil': 'null',
    'function': 'Funktion',
    'date': 'Datum',
    'set': 'Set',
}


def _size_de(issue, small):
    adj = ('>' if small else '<') + ('=' if issue.inclusive else S_MT)
    threshold = numstr(issue.minimum if small else issue.maximum)
    origin = issue.origin or 'Wert'
    head = 'Zu klein' if small else 'Zu groß'
    unit = _SIZING_DE.get(origin)
    if unit:
        return '%s: erwartet, dass %s %s%s %s hat' % (head, origin, adj, threshold, unit)
    return '%s: erwartet, dass %s %s%s ist' % (head, origin, adj, threshold)


def _format_de(issue):
    fmt = issue.format
    if 'starts_with' == fmt:
        return 'Ungültiger String: muss mit "%s" beginnen' % issue.prefix
    if 'ends_with' == fmt:
        return 'Ungültiger String: muss mit "%s" enden' % issue.suffix
    if 'includes' == fmt:
        return 'Ungültiger String: muss "%s" enthalten' % issue.includes
    if 'regex' == fmt:
        return 'Ungültiger String: muss dem Muster %s entsprechen' % issue.pattern
    if not fmt:
        return 'Ungültiges Format'
    return 'Ungültig: ' + _NOUNS_DE.get(fmt, fmt)


def _value_de(issue):
    values = issue.values or []
    if 1 == len(values):
        return 'Ungültige Eingabe: erwartet ' + stringifyprimitive(values[0])
    if 0 == len(values):
        return 'Ungültiger Wert'
    return 'Ungültige Option: erwartet eine von ' + joinvalues(values, '|')


def _keys_de(issue):
    keys = issue.keys or []
    word = 'Unbekannte Schlüssel' if 1 < len(keys) else 'Unbekannter Schlüssel'
    return word + ': ' + joinvalues(keys, ', ')


LOCALE_DE = {
    S_invalid_type: lambda issue: 'Ungültige Eingabe: erwartet %s, erhalten %s' % (
        _TYPES_DE.get(issue.expected, issue.expected),
        _TYPES_DE.get(_received(issue), _received(issue))),
    S_invalid_value: _value_de,
    S_too_big: lambda issue: _size_de(issue, False),
    S_too_small: lambda issue: _size_de(issue, True),
    S_invalid_format: _format_de,
    S_not_multiple_of: lambda issue: 'Ungültige Zahl: muss ein Vielfaches von %s sein' % numstr(issue.divisor),
    S_unrecognized_keys: _keys_de,
    S_invalid_key: 'Ungültiger Schlüssel in {origin}',
    S_invalid_element: 'Ungültiger Wert in {origin}',
    S_invalid_union: 'Ungültige Eingabe',
    S_non_optional: 'Ungültige Eingabe: Wert erforderlich',
    S_custom: 'Ungültige Eingabe',
}


_lock = threading.Lock()
_locales: Dict[str, Dict[str, Any]] = {
    'en': LOCALE_EN,
    'de': LOCALE_DE,
}


def registerlocale(name: str, mapping: Dict[str, Any]) -> None:
    "Install a locale under the given name, replacing any existing one."
    if not isinstance(name, str) or S_MT == name:
        raise ValueError('Locale name must be a non-empty string: ' + repr(name))
    if not isinstance(mapping, dict):
        raise TypeError('Locale must be a dict of issue code to message: ' + repr(mapping))
    with _lock:
        _locales[name] = dict(mapping)
    logger.debug('locale registered: %s', name)


def getlocale(name: str) -> Dict[str, Any]:
    with _lock:
        locale = _locales.get(name)
    if locale is None:
        raise ValueError('Unknown locale: ' + repr(name))
    return locale


def locales() -> List[str]:
    with _lock:
        return sorted(_locales.keys())


def rendermessage(name: str, issue: Issue) -> str:
    """
    Render the default message for an issue in the named locale, falling
    back to English and then to the generic message.
    """
    with _lock:
        locale = _locales.get(name) or LOCALE_EN

    entry = locale.get(issue.code)
    if entry is None:
        entry = LOCALE_EN.get(issue.code)
    if entry is None:
        return S_generic

    if isinstance(entry, str):
        return rendertemplate(entry, issue)

    try:
        out = entry(issue)
    except Exception as err:
        logger.debug('locale %s failed for %s: %s', name, issue.code, err)
        return S_generic

    return S_generic if out is None else str(out)
