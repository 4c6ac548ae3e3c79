from .mock_connection import MockConnection
from ldapclasses import LDAP, PosixAccount, PosixGroup, get_attributes
from ldapclasses.constants import Scope
from ldapclasses.exceptions import LDAPConnectionError
from ldapclasses.posix import get_next_uid, get_next_gid, FIRST_UID, FIRST_GID
import unittest


class TestPosix(unittest.TestCase):
    def setUp(self):
        self.conn = MockConnection()
        self.ldap = LDAP(self.conn, base_dn='dc=example,dc=org')

    def test_next_uid(self):
        self.conn.add_search_results(
            ('uid=a,ou=People,dc=example,dc=org', {'uid': ['a'], 'uidNumber': ['1001']}),
            ('uid=b,ou=People,dc=example,dc=org', {'uid': ['b'], 'uidNumber': ['1042']}),
            ('uid=c,ou=People,dc=example,dc=org', {'uid': ['c']}),
        )
        self.assertEqual(get_next_uid(self.ldap, PosixAccount()), 1043)

        base_dn, scope, fil = self.conn.calls_to('search')[0]
        self.assertEqual(base_dn, 'ou=People,dc=example,dc=org')
        self.assertEqual(scope, Scope.SUB)
        self.assertEqual(fil, ('and', [
            ('equalityMatch', 'objectClass', 'posixAccount'),
            ('equalityMatch', 'objectClass', 'account'),
        ]))

    def test_next_gid(self):
        self.conn.add_search_results(
            ('cn=staff,ou=Group,dc=example,dc=org', {'cn': ['staff'], 'gidNumber': ['50']}),
        )
        self.assertEqual(get_next_gid(self.ldap, PosixGroup()), 51)
        self.assertEqual(self.conn.calls_to('search')[0][0], 'ou=Group,dc=example,dc=org')

    def test_first_numbers(self):
        """Ensure an empty directory starts numbering at the first id"""
        self.assertEqual(get_next_uid(self.ldap, PosixAccount()), FIRST_UID)
        self.assertEqual(get_next_gid(self.ldap, PosixGroup()), FIRST_GID)

    def test_location(self):
        self.assertEqual(PosixAccount.location(), LDAP.DEFAULT_ACCOUNT_SUBDN)
        self.assertEqual(PosixGroup.location(), LDAP.DEFAULT_GROUP_SUBDN)
        ldap = LDAP(MockConnection(), account_subdn='ou=Users', group_subdn='ou=Teams')
        self.assertEqual(PosixAccount.location(ldap), 'ou=Users')
        self.assertEqual(PosixGroup.location(ldap), 'ou=Teams')

    def test_attributes(self):
        group = PosixGroup(cn='staff', memberUid=['a', 'b'])
        attrs = get_attributes(group, self.ldap)
        self.assertEqual(attrs['gidNumber'], FIRST_GID)
        self.assertEqual(attrs['objectClass'], ['posixGroup'])
        self.assertEqual(attrs['memberUid'], ['a', 'b'])

    def test_attributes_need_connection(self):
        """Ensure generating a gidNumber without a connection fails clearly"""
        with self.assertRaises(LDAPConnectionError):
            get_attributes(PosixGroup(cn='myGroup'))

        attrs = get_attributes(PosixGroup(cn='myGroup', gidNumber=500))
        self.assertEqual(attrs['gidNumber'], 500)
        self.assertEqual(attrs['cn'], 'myGroup')
