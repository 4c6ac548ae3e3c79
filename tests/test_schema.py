from . import utils
from ldapclasses import Schema, LDAPWarning, MissingObjectClassDefinition
from ldapclasses.parser import parse
from ldapclasses.schema import BUILTIN_ALIASES
import unittest
import warnings

EXAMPLE = '''
objectclass ( 2.5.6.0 NAME 'top' MUST ( objectClass ) )
attributetype ( 0.9.2342.19200300.100.1.1 NAME ( 'uid' 'userid' ) )
objectclass ( 1.3.6.1.1.1.2.0 NAME ( 'posixAccount' ) SUP top MUST ( cn $ uid $ uidNumber ) MAY ( userPassword ) )
'''


class TestSchema(unittest.TestCase):
    def setUp(self):
        self.schema = utils.load_schema()

    def test_example(self):
        schema = Schema.from_text(EXAMPLE)
        self.assertEqual(schema.attributes(['posixAccount']), ['cn', 'uid', 'uidNumber', 'userPassword'])
        self.assertEqual(schema.required_attributes(['posixAccount']), ['cn', 'uid', 'uidNumber'])

    def test_superclasses_not_ascended(self):
        schema = Schema.from_text(EXAMPLE)
        self.assertNotIn('objectClass', schema.attributes(['posixAccount']))

    def test_files(self):
        """Ensure definitions from every file are available, in load order"""
        self.assertEqual(len(self.schema.object_classes), 5)
        names = [oc.canonical_name for oc in self.schema.object_classes]
        self.assertEqual(names, ['top', 'person', 'account', 'posixAccount', 'posixGroup'])

    def test_aliases(self):
        """Ensure attribute names are replaced by the first name of their attribute type"""
        self.assertEqual(self.schema.attributes('account'), ['uid', 'description', 'seeAlso', 'l', 'o', 'ou', 'host'])
        self.assertEqual(self.schema.required_attributes('account'), ['uid'])
        self.assertIn(('cn', 'commonName'), self.schema.aliases)
        self.assertEqual(self.schema.aliases[-len(BUILTIN_ALIASES):], BUILTIN_ALIASES)

    def test_builtin_alias(self):
        """Ensure uid/userid resolve without an attribute type definition"""
        schema = Schema(parse("objectclass ( 1.2 NAME 'x' MUST userid )"))
        self.assertEqual(schema.attributes('x'), ['uid'])

    def test_canonical_name(self):
        tests = [
            ('userid', 'uid'),
            ('uid', 'uid'),
            ('commonName', 'cn'),
            ('organizationalUnitName', 'ou'),
            ('telephoneNumber', 'telephoneNumber'),
            # matching is case sensitive
            ('CommonName', 'CommonName'),
        ]
        for attr, expected in tests:
            self.assertEqual(self.schema.canonical_name(attr), expected)

    def test_multiple_classes(self):
        """Ensure multi-class queries take the union in first-seen order"""
        self.assertEqual(self.schema.attributes(['posixAccount', 'account']), utils.POSIX_ACCOUNT_ATTRIBUTES)
        self.assertEqual(self.schema.required_attributes(['posixAccount', 'account']),
                         ['cn', 'uid', 'uidNumber', 'gidNumber', 'homeDirectory'])

    def test_required_subset(self):
        for classes in (['top'], ['person'], ['account'], ['posixAccount', 'account'], ['posixGroup']):
            required = self.schema.required_attributes(classes)
            all_attrs = self.schema.attributes(classes)
            self.assertTrue(set(required) <= set(all_attrs), msg=classes)

    def test_no_duplicates(self):
        attrs = self.schema.attributes(['posixAccount', 'account', 'posixAccount', 'person'])
        self.assertEqual(len(attrs), len(set(attrs)))

    def test_missing(self):
        """Ensure every missing name is reported at once"""
        with self.assertRaises(MissingObjectClassDefinition) as cm:
            self.schema.attributes(['doesNotExist'])
        self.assertEqual(cm.exception.names, ['doesNotExist'])

        with self.assertRaises(MissingObjectClassDefinition) as cm:
            self.schema.required_attributes(['doesNotExist', 'account', 'alsoMissing'])
        self.assertEqual(cm.exception.names, ['doesNotExist', 'alsoMissing'])
        self.assertIn('doesNotExist, alsoMissing', str(cm.exception))

        with self.assertRaises(MissingObjectClassDefinition):
            self.schema.object_class('doesNotExist')

    def test_duplicate_class(self):
        """Ensure the first of several same-named classes wins, with a warning"""
        schema = Schema.from_text(
            "objectclass ( 1.1 NAME 'dup' MUST a )",
            "objectclass ( 1.2 NAME ( 'other' 'dup' ) MUST b )",
        )
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter('always')
            self.assertEqual(schema.attributes(['dup']), ['a'])
        self.assertEqual(len(caught), 1)
        self.assertTrue(issubclass(caught[0].category, LDAPWarning))

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter('always')
            self.assertEqual(schema.attributes(['other']), ['b'])
        self.assertEqual(caught, [])

    def test_object_class(self):
        oc = self.schema.object_class('posixGroup')
        self.assertEqual(oc.oid, '1.3.6.1.1.1.2.2')

    def test_duplicate_properties_united(self):
        schema = Schema.from_text("objectclass ( 1.2 NAME 'x' MUST a MAY c MUST ( b $ a ) )")
        self.assertEqual(schema.required_attributes('x'), ['a', 'b'])
        self.assertEqual(schema.attributes('x'), ['a', 'b', 'c'])

    def test_empty_schema(self):
        schema = Schema([])
        self.assertEqual(schema.aliases, BUILTIN_ALIASES)
        with self.assertRaises(MissingObjectClassDefinition):
            schema.attributes(['top'])
        self.assertEqual(schema.attributes([]), [])

    def test_definitions_not_mutable_through_accessors(self):
        """Ensure changing returned lists leaves the loaded schema untouched"""
        oc = self.schema.object_class('posixGroup')
        oc.names.append('someGroup')
        oc.get('must').append('description')
        oc.get_all('may')[0].clear()
        self.assertEqual(self.schema.object_class('posixGroup').names, ['posixGroup'])
        with self.assertRaises(MissingObjectClassDefinition):
            self.schema.object_class('someGroup')
        self.assertEqual(self.schema.required_attributes('posixGroup'), ['cn', 'gidNumber'])
        self.assertEqual(self.schema.attributes('posixGroup'),
                         ['cn', 'gidNumber', 'userPassword', 'memberUid', 'description'])
