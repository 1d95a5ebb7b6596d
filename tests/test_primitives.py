# RUN: python -m unittest discover -s tests
# RUN-SOME: python -m unittest discover -s tests -k primitive

import unittest
from datetime import date, datetime, timezone
from decimal import Decimal

try:
    from .runner import makeRunner
except ImportError:
    from runner import makeRunner

import voxgig_schema as vs


runner = makeRunner('spec/schema.json')

primitiveSpec = runner('primitive')["spec"]
formatSpec = runner('format')["spec"]
runset = runner('primitive')["runset"]


def parser(schema):
    return lambda vin: schema.mustparse(vin)


class TestPrimitive(unittest.TestCase):

    def test_exists(self):
        self.assertTrue(callable(vs.string))
        self.assertTrue(callable(vs.integer))
        self.assertTrue(callable(vs.number))
        self.assertTrue(callable(vs.boolean))
        self.assertTrue(callable(vs.literal))
        self.assertTrue(callable(vs.enum))
        self.assertTrue(callable(vs.object))
        self.assertTrue(callable(vs.array))
        self.assertTrue(callable(vs.union))
        self.assertTrue(callable(vs.discriminatedunion))


    def test_primitive_string(self):
        runset(primitiveSpec["string"], parser(vs.string()))
        runset(primitiveSpec["string-minmax"], parser(vs.string().min(2).max(4)))
        runset(primitiveSpec["string-coerce"], parser(vs.string(coerce=True)))
        runset(primitiveSpec["string-affix"],
               parser(vs.string().startswith('a').endswith('z')))
        runset(primitiveSpec["string-trim"], parser(vs.string().trim().min(1)))
        runset(primitiveSpec["string-regex"], parser(vs.string().regex('^[a-z]+$')))


    def test_primitive_string_checks(self):
        s0 = vs.string().length(3)
        self.assertEqual('abc', s0.mustparse('abc'))
        _, err = s0.parse('ab')
        self.assertEqual('too_small', err.issues[0].code)
        self.assertTrue(err.issues[0].exact)

        s1 = vs.string().includes('b', 1)
        self.assertEqual('abc', s1.mustparse('abc'))
        _, err = vs.string().includes('a', 1).parse('abc')
        self.assertEqual('Invalid string: must include "a"', err.issues[0].message)

        self.assertEqual('ABC', vs.string().touppercase().mustparse('abc'))
        self.assertEqual('abc', vs.string().tolowercase().lowercase().mustparse('ABC'))
        _, err = vs.string().uppercase().parse('aBC')
        self.assertEqual('invalid_format', err.issues[0].code)
        self.assertEqual('uppercase', err.issues[0].format)

        self.assertEqual('é', vs.string().normalize().mustparse('é'))
        self.assertEqual('ab', vs.string().format('ab', '^ab$').mustparse('ab'))
        _, err = vs.string().nonempty().parse('')
        self.assertEqual(1, err.issues[0].minimum)


    def test_primitive_string_failfast(self):
        # Non-fatal checks all report.
        _, err = vs.string().min(5).startswith('x').parse('abc')
        self.assertEqual(['too_small', 'invalid_format'], [i.code for i in err.issues])

        # A refine with abort stops later checks.
        s0 = vs.string().refine(lambda v: False, abort=True).min(5)
        _, err = s0.parse('abc')
        self.assertEqual(['custom'], [i.code for i in err.issues])


    def test_primitive_integer(self):
        runset(primitiveSpec["integer-range"],
               parser(vs.integer().min(0).max(100).multipleof(5)))
        runset(primitiveSpec["integer-coerce"], parser(vs.integer(coerce=True).min(1)))
        runset(primitiveSpec["int8"], parser(vs.int8()))
        runset(primitiveSpec["uint8"], parser(vs.uint8()))


    def test_primitive_integer_widths(self):
        self.assertEqual(2**63 - 1, vs.int64().mustparse(2**63 - 1))
        _, err = vs.int64().parse(2**63)
        self.assertEqual('too_big', err.issues[0].code)
        self.assertEqual('int64', err.issues[0].origin)

        self.assertEqual(2**64 - 1, vs.uint64().mustparse(2**64 - 1))
        self.assertEqual(2**100, vs.bigint().mustparse(2**100))
        self.assertEqual(2**70, vs.bigint(coerce=True).mustparse(str(2**70)))

        _, err = vs.int16().parse(40000)
        self.assertEqual(32767, err.issues[0].maximum)
        _, err = vs.uint32().parse(-1)
        self.assertEqual(0, err.issues[0].minimum)


    def test_primitive_number(self):
        runset(primitiveSpec["number"], parser(vs.number().positive()))

        self.assertEqual(0.5, vs.number().mustparse(Decimal('0.5')))
        self.assertEqual(1.5, vs.number(coerce=True).mustparse('1.5'))

        _, err = vs.number().parse(float('nan'))
        self.assertEqual('invalid_type', err.issues[0].code)
        self.assertEqual('NaN', err.issues[0].received)

        _, err = vs.number().parse(float('inf'))
        self.assertEqual('Infinity', err.issues[0].received)

        _, err = vs.float32().parse(1e39)
        self.assertEqual('too_big', err.issues[0].code)
        self.assertEqual(1e39, vs.float64().mustparse(1e39))


    def test_primitive_number_multipleof(self):
        self.assertEqual(0.3, vs.number().multipleof(0.1).mustparse(0.3))
        _, err = vs.number().step(0.25).parse(0.3)
        self.assertEqual('not_multiple_of', err.issues[0].code)
        self.assertEqual(0.25, err.issues[0].divisor)

        self.assertEqual(-3, vs.integer().negative().mustparse(-3))
        self.assertEqual(0, vs.integer().nonnegative().nonpositive().mustparse(0))
        _, err = vs.integer().gt(1).lt(3).parse(3)
        self.assertEqual('too_big', err.issues[0].code)
        self.assertFalse(err.issues[0].inclusive)


    def test_primitive_boolean(self):
        runset(primitiveSpec["boolean-coerce"], parser(vs.boolean(coerce=True)))
        runset(primitiveSpec["stringbool"], parser(vs.stringbool()))

        sb = vs.stringbool(truthy=['Y'], falsy=['N'], case='sensitive')
        self.assertTrue(sb.mustparse('Y'))
        self.assertFalse(sb.mustparse('N'))
        _, err = sb.parse('y')
        self.assertEqual(['Y', 'N'], err.issues[0].values)

        with self.assertRaises(ValueError):
            vs.stringbool(case='upper')


    def test_primitive_literal_enum(self):
        runset(primitiveSpec["literal"], parser(vs.literal('a', 1)))
        runset(primitiveSpec["enum"], parser(vs.enum(['red', 'green'])))

        self.assertEqual('a', vs.literal('a').value)
        with self.assertRaises(ValueError):
            vs.literal('a', 'b').value

        self.assertIsNone(vs.literal(None).mustparse(None))
        self.assertEqual(['invalid_type'],
                         [i.code for i in vs.literal('a').parse(None)[1].issues])

        e0 = vs.enum({'Low': 1, 'High': 3})
        self.assertEqual(3, e0.mustparse(3))
        self.assertEqual({'Low': 1, 'High': 3}, e0.enum)
        self.assertEqual([1, 3], e0.options)
        self.assertEqual([1], e0.extract(['Low']).options)
        self.assertEqual([3], e0.exclude(['Low']).options)
        with self.assertRaises(ValueError):
            e0.extract(['Mid'])
        with self.assertRaises(ValueError):
            vs.enum([])


    def test_primitive_nil_never_any(self):
        runset(primitiveSpec["nil"], parser(vs.nil()))

        _, err = vs.never().parse('x')
        self.assertEqual('never', err.issues[0].expected)
        _, err = vs.never().parse(None)
        self.assertEqual('invalid_type', err.issues[0].code)

        self.assertIsNone(vs.any().mustparse(None))
        self.assertEqual({'a': 1}, vs.unknown().mustparse({'a': 1}))

        s0 = vs.object({'a': vs.any()})
        self.assertEqual({}, s0.mustparse({}))


    def test_primitive_date(self):
        d0 = datetime(2024, 1, 2, 3, 4, 5)
        self.assertEqual(d0, vs.date().mustparse(d0))
        self.assertEqual(datetime(2024, 1, 2), vs.date().mustparse(date(2024, 1, 2)))

        _, err = vs.date().parse('2024-01-02')
        self.assertEqual('Invalid input: expected date, received string', err.issues[0].message)

        dc = vs.date(coerce=True)
        self.assertEqual(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
                         dc.mustparse('2024-01-02T03:04:05Z'))
        self.assertEqual(datetime(1970, 1, 1, tzinfo=timezone.utc), dc.mustparse(0))

        bounded = vs.date().min(datetime(2024, 1, 1)).max(datetime(2024, 12, 31))
        self.assertEqual(d0, bounded.mustparse(d0))
        _, err = bounded.parse(datetime(2023, 6, 1))
        self.assertEqual('too_small', err.issues[0].code)
        self.assertEqual('date', err.issues[0].origin)


    def test_primitive_function(self):
        self.assertEqual(len, vs.function().mustparse(len))
        _, err = vs.function().parse(1)
        self.assertEqual('function', err.issues[0].expected)

        f0 = vs.function([vs.integer(), vs.integer()], vs.integer())
        add = f0.implement(lambda a, b: a + b)
        self.assertEqual(3, add(1, 2))
        with self.assertRaises(vs.SchemaError):
            add(1, 'x')

        bad = f0.implement(lambda a, b: str(a + b))
        with self.assertRaises(vs.SchemaError):
            bad(1, 2)

        f1 = vs.function().input(vs.tuple_([vs.string()])).output(vs.string())
        self.assertEqual('AB', f1.implement(lambda s: s.upper())('ab'))


    def test_primitive_custom(self):
        even = vs.custom(lambda v: isinstance(v, int) and 0 == v % 2, error='Must be even')
        self.assertEqual(4, even.mustparse(4))
        _, err = even.parse(3)
        self.assertEqual('custom', err.issues[0].code)
        self.assertEqual('Must be even', err.issues[0].message)

        self.assertEqual('x', vs.custom().mustparse('x'))

        class Point:
            pass

        p0 = Point()
        self.assertIs(p0, vs.instanceof(Point).mustparse(p0))
        _, err = vs.instanceof(Point).parse({})
        self.assertEqual('Input not instance of Point', err.issues[0].message)
        self.assertEqual({'class': 'Point'}, err.issues[0].params)


    def test_format(self):
        runset(formatSpec["email"], parser(vs.email()))
        runset(formatSpec["url"], parser(vs.url()))
        runset(formatSpec["uuid"], parser(vs.uuid()))
        runset(formatSpec["uuidv4"], parser(vs.uuidv4()))
        runset(formatSpec["ipv4"], parser(vs.ipv4()))
        runset(formatSpec["ipv6"], parser(vs.ipv6()))
        runset(formatSpec["cidrv4"], parser(vs.cidrv4()))
        runset(formatSpec["cidrv6"], parser(vs.cidrv6()))
        runset(formatSpec["mac"], parser(vs.mac()))
        runset(formatSpec["hex"], parser(vs.hex()))
        runset(formatSpec["base64"], parser(vs.base64()))
        runset(formatSpec["base64url"], parser(vs.base64url()))
        runset(formatSpec["e164"], parser(vs.e164()))
        runset(formatSpec["hostname"], parser(vs.hostname()))
        runset(formatSpec["jsonstring"], parser(vs.jsonstring()))
        runset(formatSpec["nanoid"], parser(vs.nanoid()))
        runset(formatSpec["ulid"], parser(vs.ulid()))
        runset(formatSpec["emoji"], parser(vs.emoji()))


    def test_format_iso(self):
        runset(formatSpec["isodatetime-millisecond"],
               parser(vs.isodatetime(precision='millisecond')))
        runset(formatSpec["isodatetime-offset"], parser(vs.isodatetime(offset=True)))
        runset(formatSpec["isodatetime-local"], parser(vs.isodatetime(local=True)))
        runset(formatSpec["isodate"], parser(vs.isodate()))
        runset(formatSpec["isotime-minute"], parser(vs.isotime(precision='minute')))
        runset(formatSpec["isoduration"], parser(vs.isoduration()))

        s2 = vs.isodatetime(precision=2)
        self.assertEqual('2024-01-01T00:00:00.12Z', s2.mustparse('2024-01-01T00:00:00.12Z'))
        self.assertIsNotNone(s2.parse('2024-01-01T00:00:00.1Z')[1])

        with self.assertRaises(ValueError):
            vs.isotime(precision='hour')

        bounded = vs.isodate().min('2024-01-01')
        self.assertEqual('2024-06-01', bounded.mustparse('2024-06-01'))
        _, err = bounded.parse('2023-06-01')
        self.assertEqual('iso_date', err.issues[0].origin)


    def test_format_issue(self):
        _, err = vs.email().parse('nope')
        issue = err.issues[0]
        self.assertEqual('invalid_format', issue.code)
        self.assertEqual('email', issue.format)
        self.assertEqual('string', issue.origin)
        self.assertEqual('email', vs.email().formatname)

        # Format schemas keep the string checks.
        _, err = vs.email().max(5).parse('abc@example.com')
        self.assertEqual(['too_big'], [i.code for i in err.issues])


    def test_format_jwt(self):
        # {"alg":"HS256","typ":"JWT"} . {"sub":"1"} . sig
        token = 'eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.eyJzdWIiOiIxIn0.c2ln'
        self.assertEqual(token, vs.jwt().mustparse(token))
        self.assertEqual(token, vs.jwt(alg='HS256').mustparse(token))

        _, err = vs.jwt(alg='RS256').parse(token)
        self.assertEqual('RS256', err.issues[0].algorithm)
        self.assertEqual('Invalid JWT', err.issues[0].message)

        self.assertIsNotNone(vs.jwt().parse('a.b')[1])
        self.assertIsNotNone(vs.jwt().parse('bm90anNvbg.e30.c2ln')[1])


    def test_format_url_options(self):
        s0 = vs.url(hostname='^example\\.com$', protocol='^https$')
        self.assertEqual('https://example.com', s0.mustparse('https://example.com'))
        self.assertIsNotNone(s0.parse('http://example.com')[1])
        self.assertIsNotNone(s0.parse('https://other.com')[1])


    def test_format_ids(self):
        self.assertEqual('cjld2cjxh0000qzrmn831i7rn',
                         vs.cuid().mustparse('cjld2cjxh0000qzrmn831i7rn'))
        self.assertEqual('tz4a98xxat96iws9zmbrgj3a',
                         vs.cuid2().mustparse('tz4a98xxat96iws9zmbrgj3a'))
        self.assertIsNotNone(vs.cuid2().parse('Tz4A')[1])
        self.assertEqual('9m4e2mr0ui3e8a215n4g', vs.xid().mustparse('9m4e2mr0ui3e8a215n4g'))
        self.assertEqual('0ujtsYcgvSTl8PAuAdqWYSMnLOv',
                         vs.ksuid().mustparse('0ujtsYcgvSTl8PAuAdqWYSMnLOv'))
        self.assertEqual('6F9619FF-8B86-D011-B42D-00C04FC964FF',
                         vs.guid().mustparse('6F9619FF-8B86-D011-B42D-00C04FC964FF'))
        self.assertEqual('01890a5d-ac96-774b-bcce-b302099a8057',
                         vs.uuidv7().mustparse('01890a5d-ac96-774b-bcce-b302099a8057'))
        self.assertIsNotNone(vs.uuidv6().parse('01890a5d-ac96-774b-bcce-b302099a8057')[1])


if __name__ == '__main__':
    unittest.main()
