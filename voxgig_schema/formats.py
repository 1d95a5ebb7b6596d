# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Voxgig Schema: string formats
# =============================
#
# Format leaves are string schemas with a format check added at
# construction, and a type code of their own. They report `string` as the
# expected type when the input is not a string at all.


from typing import *
from urllib.parse import urlsplit
import base64
import binascii
import ipaddress
import json
import re

from .util import (
    S_string,
)

from .checks import (
    ComparisonCheck,
    FormatCheck,
    S_gte,
    S_lte,
)

from .primitives import StringSchema


# Format names, as reported in invalid_format issues.
S_email = 'email'
S_url = 'url'
S_uuid = 'uuid'
S_guid = 'guid'
S_nanoid = 'nanoid'
S_cuid = 'cuid'
S_cuid2 = 'cuid2'
S_ulid = 'ulid'
S_xid = 'xid'
S_ksuid = 'ksuid'
S_emoji = 'emoji'
S_base64 = 'base64'
S_base64url = 'base64url'
S_hex = 'hex'
S_jwt = 'jwt'
S_e164 = 'e164'
S_ipv4 = 'ipv4'
S_ipv6 = 'ipv6'
S_cidrv4 = 'cidrv4'
S_cidrv6 = 'cidrv6'
S_mac = 'mac'
S_hostname = 'hostname'
S_json_string = 'json_string'
S_datetime = 'datetime'
S_date = 'date'
S_time = 'time'
S_duration = 'duration'

# Type codes of the iso leaves.
S_iso_datetime = 'iso_datetime'
S_iso_date = 'iso_date'
S_iso_time = 'iso_time'
S_iso_duration = 'iso_duration'

# Iso precisions.
S_minute = 'minute'
S_second = 'second'
S_millisecond = 'millisecond'
S_arbitrary = 'arbitrary'


R_EMAIL = re.compile(
    r"^(?!\.)(?!.*\.\.)[A-Za-z0-9_'+\-\.]*[A-Za-z0-9_+-]@([A-Za-z0-9][A-Za-z0-9\-]*\.)+[A-Za-z]{2,}$")
R_UUID = re.compile(
    r'^([0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[1-8][0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}'
    r'|00000000-0000-0000-0000-000000000000'
    r'|[fF]{8}-[fF]{4}-[fF]{4}-[fF]{4}-[fF]{12})$')
R_GUID = re.compile(
    r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$')
R_NANOID = re.compile(r'^[a-zA-Z0-9_-]{21}$')
R_CUID = re.compile(r'^[cC][^\s-]{8,}$')
R_CUID2 = re.compile(r'^[0-9a-z]+$')
R_ULID = re.compile(r'^[0-9A-HJKMNP-TV-Za-hjkmnp-tv-z]{26}$')
R_XID = re.compile(r'^[0-9a-vA-V]{20}$')
R_KSUID = re.compile(r'^[A-Za-z0-9]{27}$')
R_EMOJI = re.compile(
    '^(?:[\U0001F000-\U0001FAFF\u2600-\u27BF\u2300-\u23FF\u2B00-\u2BFF'
    '\u2190-\u21FF\u3030\u303D\u3297\u3299\u00A9\u00AE\u203C\u2049\u2122\u2139'
    '\U0001F1E6-\U0001F1FF\U000E0020-\U000E007F]'
    '[\uFE0F\u200D\u20E3\U0001F3FB-\U0001F3FF]*)+$')
R_BASE64 = re.compile(
    r'^$|^(?:[0-9a-zA-Z+/]{4})*(?:(?:[0-9a-zA-Z+/]{2}==)|(?:[0-9a-zA-Z+/]{3}=))?$')
R_BASE64URL = re.compile(r'^[A-Za-z0-9_-]*$')
R_HEX = re.compile(r'^[0-9a-fA-F]*$')
R_E164 = re.compile(r'^\+[1-9]\d{6,14}$')
R_IPV4 = re.compile(
    r'^(?:(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9][0-9]|[0-9])\.){3}'
    r'(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9][0-9]|[0-9])$')
R_CIDRV4 = re.compile(
    r'^(?:(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9][0-9]|[0-9])\.){3}'
    r'(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9][0-9]|[0-9])/(?:[0-9]|[1-2][0-9]|3[0-2])$')
R_MAC = re.compile(r'^[0-9A-Fa-f]{2}([:-])(?:[0-9A-Fa-f]{2}\1){4}[0-9A-Fa-f]{2}$')
R_HOSTNAME = re.compile(
    r'^[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?'
    r'(?:\.[a-zA-Z0-9](?:[-0-9a-zA-Z]{0,61}[0-9a-zA-Z])?)*\.?$')
R_DURATION = re.compile(
    r'^P(?:\d+W|(?:\d+Y)?(?:\d+M)?(?:\d+D)?(?:T(?:\d+H)?(?:\d+M)?(?:\d+(?:[.,]\d+)?S)?)?)$')

DATE_SOURCE = (
    r'(?:(?:\d\d[2468][048]|\d\d[13579][26]|\d\d0[48]|[02468][048]00|[13579][26]00)-02-29'
    r'|\d{4}-(?:(?:0[13578]|1[02])-(?:0[1-9]|[12]\d|3[01])'
    r'|(?:0[469]|11)-(?:0[1-9]|[12]\d|30)|(?:02)-(?:0[1-9]|1\d|2[0-8])))')
R_DATE = re.compile('^' + DATE_SOURCE + '$')

OFFSET_SOURCE = r'[+-](?:[01]\d|2[0-3]):[0-5]\d'


def timesource(precision: Any = None) -> str:
    """
    Time-of-day pattern for a precision:
    None or 'arbitrary': optional seconds with an optional fraction,
    'minute': HH:MM, 'second': HH:MM:SS, 'millisecond': 1 to 3 fraction
    digits, an integer n: exactly n fraction digits (0 is the same as
    'second').
    """
    hhmm = r'(?:[01]\d|2[0-3]):[0-5]\d'

    if precision is None or S_arbitrary == precision:
        return hhmm + r'(?::[0-5]\d(?:\.\d+)?)?'
    if S_minute == precision:
        return hhmm
    if S_second == precision:
        return hhmm + r':[0-5]\d'
    if S_millisecond == precision:
        return hhmm + r':[0-5]\d\.\d{1,3}'
    if isinstance(precision, int) and not isinstance(precision, bool) and 0 <= precision:
        if 0 == precision:
            return hhmm + r':[0-5]\d'
        return hhmm + r':[0-5]\d\.\d{' + str(precision) + '}'

    raise ValueError('Unknown iso precision: ' + repr(precision))


def datetimepattern(offset: bool = False, local: bool = False, precision: Any = None) -> Pattern:
    zone = 'Z'
    if offset:
        zone = '(?:Z|' + OFFSET_SOURCE + ')'
    if local:
        zone = '(?:' + zone + ')?'
    return re.compile('^' + DATE_SOURCE + 'T' + timesource(precision) + zone + '$')


def timepattern(precision: Any = None) -> Pattern:
    return re.compile('^' + timesource(precision) + '$')


def uuidpattern(version: Any = None) -> Pattern:
    if version is None:
        return R_UUID
    if version not in (1, 2, 3, 4, 5, 6, 7, 8):
        raise ValueError('Unknown uuid version: ' + repr(version))
    return re.compile(
        r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-' + str(version) +
        r'[0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}$')


def isurl(value: str, hostname: Any = None, protocol: Any = None) -> bool:
    "Absolute URL with a scheme and a host, optionally matching patterns."
    try:
        parts = urlsplit(value)
        host = parts.hostname
    except ValueError:
        return False
    if not parts.scheme or not parts.netloc or not host:
        return False
    if any(c.isspace() for c in value):
        return False
    if hostname is not None and not _compile(hostname).search(host):
        return False
    if protocol is not None and not _compile(protocol).search(parts.scheme):
        return False
    return True


def _compile(pattern):
    return re.compile(pattern) if isinstance(pattern, str) else pattern


def isipv6(value: str) -> bool:
    try:
        ipaddress.IPv6Address(value)
        return True
    except ValueError:
        return False


def iscidrv6(value: str) -> bool:
    if '/' not in value:
        return False
    try:
        ipaddress.IPv6Network(value, strict=False)
        return True
    except ValueError:
        return False


def b64urldecode(part: str) -> bytes:
    return base64.urlsafe_b64decode(part + '=' * (-len(part) % 4))


def isjwt(value: str, alg: str = None) -> bool:
    "Three base64url parts, with a JSON object header (carrying `alg` if given)."
    parts = value.split('.')
    if 3 != len(parts):
        return False
    if not all(R_BASE64URL.match(p) for p in parts) or '' == parts[0]:
        return False
    try:
        header = json.loads(b64urldecode(parts[0]))
    except (ValueError, binascii.Error):
        return False
    if not isinstance(header, dict):
        return False
    if 'typ' in header and 'JWT' != header['typ']:
        return False
    if alg is not None and header.get('alg') != alg:
        return False
    return True


def isjsonstring(value: str) -> bool:
    try:
        json.loads(value)
        return True
    except ValueError:
        return False


class FormatSchema(StringSchema):
    "String schema with a named format check."

    @property
    def expected(self):
        return S_string

    @property
    def formatname(self) -> str:
        return self.internals.bag.get('format')

    @classmethod
    def build(
        cls,
        type: str,
        format: str,
        test: Any,
        error: Any = None,
        coerce: bool = False,
        **fields: Any
    ) -> 'FormatSchema':
        check = FormatCheck(format, test, **fields)
        return cls.make(
            type,
            checks=(check,),
            error=error,
            coerce=coerce,
            bag={'format': format, 'pattern': check.pattern},
        )


class IsoSchema(FormatSchema):
    "Iso date, time, datetime and duration strings. Bounds compare lexicographically."

    def min(self, value: str, error: Any = None) -> 'IsoSchema':
        return self._addcheck(ComparisonCheck(S_gte, value, self.internals.type, error))

    def max(self, value: str, error: Any = None) -> 'IsoSchema':
        return self._addcheck(ComparisonCheck(S_lte, value, self.internals.type, error))
