from ldapclasses import dn
import unittest


class TestDN(unittest.TestCase):
    def test_construct_dn(self):
        tests = [
            (([('uid', 'testuser'), ('ou', 'People')],), 'uid=testuser,ou=People'),
            (([('uid', 'testuser')], 'ou=People,dc=example,dc=org'), 'uid=testuser,ou=People,dc=example,dc=org'),
            (({'cn': 'admins'}, 'ou=Group'), 'cn=admins,ou=Group'),
            (('uid=testuser,ou=People', 'dc=example,dc=org'), 'uid=testuser,ou=People,dc=example,dc=org'),
            (('ou=People', ''), 'ou=People'),
            ((None, 'dc=example,dc=org'), 'dc=example,dc=org'),
            (([], 'dc=example,dc=org'), 'dc=example,dc=org'),
            (('',), ''),
            (([('cn', 'Doe, John')],), r'cn=Doe\, John'),
            (([('uidNumber', 1000)],), 'uidNumber=1000'),
        ]
        for args, expected in tests:
            self.assertEqual(dn.construct_dn(*args), expected, msg=repr(args))

    def test_escape(self):
        self.assertEqual(dn.escape('a,b+c=d'), r'a\,b\+c\=d')
        self.assertEqual(dn.escape(r'back\slash'), r'back\\slash')
        self.assertEqual(dn.escape('plain'), 'plain')

    def test_dn_to_kwlist(self):
        tests = [
            ('uid=user,ou=People,dc=organisation,dc=org',
             [('uid', 'user'), ('ou', 'People'), ('dc', 'organisation'), ('dc', 'org')]),
            (r'cn=Doe\, John,ou=People', [('cn', 'Doe, John'), ('ou', 'People')]),
            ('cn = spaced , ou=People', [('cn', 'spaced'), ('ou', 'People')]),
            ('', []),
        ]
        for test, expected in tests:
            self.assertEqual(dn.dn_to_kwlist(test), expected)

        with self.assertRaises(ValueError):
            dn.dn_to_kwlist('uid=user,People')

    def test_round_trip(self):
        tests = [
            [('cn', 'a+b, "c"'), ('ou', 'People')],
            [('cn', 'a\\'), ('dc', 'org')],
            [('cn', 'back\\,slash\\\\'), ('ou', 'x\\')],
        ]
        for kwlist in tests:
            self.assertEqual(dn.dn_to_kwlist(dn.construct_dn(kwlist)), kwlist)

    def test_trailing_backslash(self):
        """Ensure a comma after an escaped backslash still separates RDNs"""
        self.assertEqual(dn.dn_to_kwlist(r'cn=a\\,dc=org'), [('cn', 'a\\'), ('dc', 'org')])
        with self.assertRaises(ValueError):
            dn.dn_to_kwlist('cn=a\\')

    def test_dc(self):
        self.assertEqual(dn.dc('example.org'), 'dc=example,dc=org')

    def test_domain(self):
        self.assertEqual(dn.domain('dc=example,dc=org'), 'example.org')
