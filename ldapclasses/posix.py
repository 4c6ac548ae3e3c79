"""posixAccount and posixGroup entry types (RFC 2307)"""

from .base import LDAP
from .classes import LDAPClass

FIRST_UID = 1000
FIRST_GID = 1000


def _next_number(ldap, cls, attr, first):
    numbers = []
    for obj in ldap.get_all(cls()):
        for value in getattr(obj, attr) or []:
            numbers.append(int(value))
    if not numbers:
        return first
    return max(numbers) + 1


def get_next_uid(ldap, obj):
    """Get a uid for a new user: the highest uidNumber of all existing accounts plus one"""
    return _next_number(ldap, PosixAccount, 'uidNumber', FIRST_UID)


def get_next_gid(ldap, obj):
    """Get a gid for a new group: the highest gidNumber of all existing groups plus one"""
    return _next_number(ldap, PosixGroup, 'gidNumber', FIRST_GID)


class PosixAccount(LDAPClass):
    """An account / posixAccount entry"""
    FIELDS = (
        # posixAccount
        'uid', 'cn', 'uidNumber', 'gidNumber', 'homeDirectory', 'userPassword', 'loginShell', 'gecos', 'description',
        # account
        'seeAlso', 'l', 'o', 'ou', 'host',
    )
    UNIQUE_IDENTIFIER = 'uid'
    OBJECT_CLASSES = ('posixAccount', 'account')
    REQUIRED_ATTRIBUTES = ('uid', 'cn', 'uidNumber', 'gidNumber', 'homeDirectory')
    GENERATORS = {'uidNumber': get_next_uid}

    @classmethod
    def location(cls, ldap=None):
        if ldap is None:
            return LDAP.DEFAULT_ACCOUNT_SUBDN
        return ldap.account_subdn


class PosixGroup(LDAPClass):
    """A posixGroup entry"""
    FIELDS = ('cn', 'gidNumber', 'userPassword', 'memberUid', 'description')
    UNIQUE_IDENTIFIER = 'cn'
    OBJECT_CLASSES = ('posixGroup',)
    REQUIRED_ATTRIBUTES = ('cn', 'gidNumber')
    GENERATORS = {'gidNumber': get_next_gid}

    @classmethod
    def location(cls, ldap=None):
        if ldap is None:
            return LDAP.DEFAULT_GROUP_SUBDN
        return ldap.group_subdn
