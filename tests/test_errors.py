# RUN: python -m unittest discover -s tests
# RUN-SOME: python -m unittest discover -s tests -k errors

import json
import unittest

import voxgig_schema as vs


M_NAME = 'Too small: expected string to have >=2 characters'
M_TAG = 'Invalid input: expected string, received int'
M_AGE = 'Invalid input: expected int, received string'


def person():
    return vs.object({
        'name': vs.string().min(2),
        'tags': vs.array(vs.string()),
        'age': vs.integer(),
    })


def personerror():
    _, err = person().parse({'name': 'a', 'tags': ['x', 1], 'age': '1'})
    return err


class TestErrorViews(unittest.TestCase):

    def test_error_str(self):
        err = personerror()
        self.assertEqual(
            'Invalid data: at name: ' + M_NAME + ' | at tags[1]: ' + M_TAG + ' | at age: ' + M_AGE,
            str(err))
        self.assertEqual(['too_small', 'invalid_type', 'invalid_type'], [i.code for i in err.issues])
        self.assertEqual('Invalid data: ' + M_TAG, str(vs.string().parse(1)[1]))


    def test_error_flatten(self):
        err = personerror()
        self.assertEqual({
            'formErrors': [],
            'fieldErrors': {'name': [M_NAME], 'tags': [M_TAG], 'age': [M_AGE]},
        }, err.flatten())

        self.assertEqual(
            {'name': ['too_small'], 'tags': ['invalid_type'], 'age': ['invalid_type']},
            err.flatten(lambda i: i.code)['fieldErrors'])

        _, err = vs.string().parse(1)
        self.assertEqual({'formErrors': [M_TAG], 'fieldErrors': {}}, err.flatten())


    def test_error_format(self):
        err = personerror()
        self.assertEqual({
            '_errors': [],
            'name': {'_errors': [M_NAME]},
            'tags': {'_errors': [], 1: {'_errors': [M_TAG]}},
            'age': {'_errors': [M_AGE]},
        }, err.format())

        # Union branches are folded in.
        _, err = vs.union([vs.string(), vs.integer()]).parse(True)
        self.assertEqual({'_errors': [
            'Invalid input: expected string, received bool',
            'Invalid input: expected int, received bool',
        ]}, err.format())


    def test_error_treeify(self):
        err = personerror()
        self.assertEqual({
            'errors': [],
            'properties': {
                'name': {'errors': [M_NAME]},
                'tags': {'errors': [], 'items': [None, {'errors': [M_TAG]}]},
                'age': {'errors': [M_AGE]},
            },
        }, err.treeify())

        self.assertEqual({'errors': [None]}, vs.string().parse(1)[1].treeify(lambda i: i.path or None))


    def test_error_prettify(self):
        err = personerror()
        self.assertEqual('\n'.join([
            '✖ ' + M_NAME,
            '  → at name',
            '✖ ' + M_AGE,
            '  → at age',
            '✖ ' + M_TAG,
            '  → at tags[1]',
        ]), err.prettify())

        self.assertEqual('✖ ' + M_TAG, vs.string().parse(1)[1].prettify())


    def test_error_todict(self):
        err = personerror()
        out = err.todict()
        self.assertEqual('too_small', out[0]['code'])
        self.assertEqual(['name'], out[0]['path'])
        self.assertEqual(M_NAME, out[0]['message'])
        self.assertEqual(2, out[0]['minimum'])
        self.assertEqual('string', out[0]['origin'])
        self.assertNotIn('input', out[0])
        self.assertNotIn('divisor', out[0])

        self.assertEqual(out, json.loads(err.tojson()))

        _, err = vs.union([vs.string(), vs.integer()]).parse(True)
        out = err.todict()
        self.assertEqual('invalid_union', out[0]['code'])
        self.assertEqual(['invalid_type', 'invalid_type'], [b[0]['code'] for b in out[0]['errors']])

        _, err = vs.string().parse(1, {'reportinput': True})
        self.assertEqual(1, err.todict()[0]['input'])


    def test_error_iserror(self):
        err = personerror()
        self.assertTrue(vs.iserror(err))
        self.assertTrue(isinstance(err, ValueError))
        self.assertFalse(vs.iserror(ValueError('x')))
        self.assertFalse(vs.iserror(1))
        self.assertFalse(vs.iserror(None))

        class Lookalike(Exception):
            issues = []

            def flatten(self):
                return {}

            def format(self):
                return {}

        self.assertTrue(vs.iserror(Lookalike()))
        self.assertFalse(vs.iserror(Lookalike))


class TestErrorMessages(unittest.TestCase):

    def tearDown(self):
        vs.resetconfig()


    def test_message_precedence(self):
        s0 = vs.string(error='schema').min(3, error='check')
        self.assertEqual('check', s0.parse('a')[1].issues[0].message)
        self.assertEqual('schema', s0.parse(1)[1].issues[0].message)

        self.assertEqual('ctx', vs.string().parse(1, {'error': 'ctx'})[1].issues[0].message)
        self.assertEqual('schema', vs.string(error='schema').parse(1, {'error': 'ctx'})[1].issues[0].message)

        vs.config({'customerror': 'global'})
        self.assertEqual('global', vs.string().parse(1)[1].issues[0].message)
        self.assertEqual('ctx', vs.string().parse(1, {'error': 'ctx'})[1].issues[0].message)
        self.assertEqual('schema', vs.string().error('schema').parse(1)[1].issues[0].message)

        vs.resetconfig()
        self.assertEqual(M_TAG, vs.string().parse(1)[1].issues[0].message)

        # Explicit messages are never overridden.
        s1 = vs.string(error='schema').check(lambda p: p.addissue('explicit'))
        self.assertEqual('explicit', s1.parse('x')[1].issues[0].message)


    def test_message_template(self):
        s0 = vs.string().min(3, error='Need {minimum}, got {input} at {path}')
        self.assertEqual('Need 3, got a at <root>', s0.parse('a')[1].issues[0].message)

        s1 = vs.string().min(3, error='Need {nope}')
        self.assertEqual('Need {nope}', s1.parse('a')[1].issues[0].message)

        o0 = vs.object({'a': vs.integer(error='{path} wants {expected}')})
        self.assertEqual('a wants int', o0.parse({'a': 'x'})[1].issues[0].message)


    def test_message_map(self):
        s0 = vs.string(error={'invalid_type': 'not text'}).min(3)
        self.assertEqual('not text', s0.parse(1)[1].issues[0].message)
        self.assertEqual('Too small: expected string to have >=3 characters',
                         s0.parse('a')[1].issues[0].message)


    def test_message_callable(self):
        def err(issue):
            if 'too_small' == issue.code:
                return {'message': 'short by ' + str(issue.minimum - len(issue.input))}
            return None

        s0 = vs.string(error=err).min(3)
        self.assertEqual('short by 2', s0.parse('a')[1].issues[0].message)
        self.assertEqual(M_TAG, s0.parse(1)[1].issues[0].message)

        def broken(issue):
            raise RuntimeError('broken')

        self.assertEqual(M_TAG, vs.string(error=broken).parse(1)[1].issues[0].message)

        vs.config({'customerror': lambda issue: 'global ' + issue.code})
        self.assertEqual('global invalid_type', vs.string().parse(1)[1].issues[0].message)


    def test_message_reportinput(self):
        _, err = vs.string().parse(1)
        self.assertIs(vs.ABSENT, err.issues[0].input)

        vs.config({'reportinput': True})
        _, err = vs.object({'a': vs.string()}).parse({'a': 2})
        self.assertEqual(2, err.issues[0].input)

        _, err = vs.string().parse(1, {'reportinput': False})
        self.assertIs(vs.ABSENT, err.issues[0].input)


class TestLocale(unittest.TestCase):

    def tearDown(self):
        vs.resetconfig()


    def test_locale_de(self):
        vs.config({'locale': 'de'})
        self.assertEqual('Ungültige Eingabe: erwartet String, erhalten Zahl',
                         vs.string().parse(1)[1].issues[0].message)
        self.assertEqual('Zu klein: erwartet, dass string >=3 Zeichen hat',
                         vs.string().min(3).parse('a')[1].issues[0].message)
        self.assertEqual('Ungültige Zahl: muss ein Vielfaches von 5 sein',
                         vs.integer().multipleof(5).parse(7)[1].issues[0].message)
        self.assertEqual('Unbekannte Schlüssel: "x", "y"',
                         vs.strictobject({}).parse({'x': 1, 'y': 2})[1].issues[0].message)

        # Overrides still win.
        self.assertEqual('eigen', vs.string(error='eigen').parse(1)[1].issues[0].message)


    def test_locale_register(self):
        vs.registerlocale('pirate', {
            'invalid_type': 'Arr, {expected} be wanted',
            'custom': lambda issue: None,
        })
        self.assertIn('pirate', vs.locales())
        self.assertIn('en', vs.locales())
        self.assertIn('de', vs.locales())

        vs.config({'locale': 'pirate'})
        self.assertEqual('Arr, string be wanted', vs.string().parse(1)[1].issues[0].message)

        # Missing codes fall back to English.
        self.assertEqual('Too small: expected string to have >=3 characters',
                         vs.string().min(3).parse('a')[1].issues[0].message)

        self.assertEqual('Invalid input',
                         vs.string().refine(lambda v: False).parse('a')[1].issues[0].message)


    def test_locale_broken(self):
        vs.registerlocale('broken', {'invalid_type': lambda issue: 1 / 0})
        vs.config({'locale': 'broken'})
        self.assertEqual('Invalid input', vs.string().parse(1)[1].issues[0].message)


    def test_locale_errors(self):
        with self.assertRaises(ValueError):
            vs.getlocale('xx')
        with self.assertRaises(ValueError):
            vs.registerlocale('', {})
        with self.assertRaises(TypeError):
            vs.registerlocale('x', [])
        with self.assertRaises(ValueError):
            vs.config({'locale': 'xx'})

        self.assertEqual('en', vs.getconfig('locale'))
        self.assertIn('invalid_type', vs.getlocale('en'))


if __name__ == '__main__':
    unittest.main()
