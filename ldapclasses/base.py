"""Contains the :class:`LDAP` facade used to query and modify a directory through a connection backend"""

from . import attributes
from .classes import LDAPClass
from .constants import Scope
from .dn import construct_dn
from .exceptions import (
    LDAPConnectionError,
    LDAPWarning,
    InvalidCredentials,
    NoSearchResults,
    MissingUniqueIdentifier,
)
from .filter import (
    construct_filter,
    merge_filter,
    class_filter,
    equality_match,
    or_,
    to_string,
)
from .modify import Mod
from .net import LDAPConnection
from .utils import get_one_result, list_wrap

import logging
import warnings

logger = logging.getLogger('ldapclasses')
logger.addHandler(logging.NullHandler())
logger.setLevel(logging.DEBUG)  # set to DEBUG to allow handler levels full discretion

# this gets reassigned by the warning helpers
_showwarning_default = warnings.showwarning


def _showwarning_disabled(message, category, filename, lineno, file=None, line=None):
    if not issubclass(category, LDAPWarning):
        _showwarning_default(message, category, filename, lineno, file, line)


def _showwarning_log(message, category, filename, lineno, file=None, line=None):
    if issubclass(category, LDAPWarning):
        logger.warning('{0}: {1}'.format(category.__name__, message))
    else:
        _showwarning_default(message, category, filename, lineno, file, line)


def _decode(value):
    if isinstance(value, bytes):
        return value.decode('utf-8')
    return value


def _entry_dict(dn, attrs):
    entry = {'dn': _decode(dn)}
    for attr, vals in attrs.items():
        if not isinstance(vals, (list, tuple, set)):
            vals = [vals]
        entry[_decode(attr)] = [_decode(v) for v in vals]
    return entry


class LDAP(object):
    """Provides the connection to the LDAP DB. All operations go through an :class:`.LDAPConnection` backend.

    :param connection: An :class:`.LDAPConnection` instance, or a subclass to instantiate with the host settings.
                       Defaults to :attr:`LDAP.DEFAULT_CONNECTION`
    :param str host: The server host name. Defaults to :attr:`LDAP.DEFAULT_HOST`
    :param int port: The server port. Defaults to :attr:`LDAP.DEFAULT_PORT`
    :param bool ssl: Use LDAPS. Defaults to :attr:`LDAP.DEFAULT_SSL`
    :param str base_dn: Appended to every DN given to this object. Defaults to :attr:`LDAP.DEFAULT_BASE_DN`
    :param str account_subdn: The location of accounts relative to ``base_dn``.
                              Defaults to :attr:`LDAP.DEFAULT_ACCOUNT_SUBDN`
    :param str group_subdn: The location of groups relative to ``base_dn``. Defaults to :attr:`LDAP.DEFAULT_GROUP_SUBDN`
    :param account_class: The object class(es) an account entry has. Defaults to :attr:`LDAP.DEFAULT_ACCOUNT_CLASS`
    :param group_class: The object class(es) a group entry has. Defaults to :attr:`LDAP.DEFAULT_GROUP_CLASS`
    :param int connect_timeout: Seconds to wait for the connection. Defaults to :attr:`LDAP.DEFAULT_CONNECT_TIMEOUT`
    :param Schema schema: The parsed schema, used to generate classes. Optional.
    :raises LDAPConnectionError: if no connection backend is available
    """

    DEFAULT_HOST = 'localhost'
    DEFAULT_PORT = 389
    DEFAULT_SSL = False
    DEFAULT_BASE_DN = ''
    DEFAULT_ACCOUNT_SUBDN = 'ou=People'
    DEFAULT_GROUP_SUBDN = 'ou=Group'
    DEFAULT_ACCOUNT_CLASS = 'posixAccount'
    DEFAULT_GROUP_CLASS = 'posixGroup'
    DEFAULT_CONNECT_TIMEOUT = 5
    DEFAULT_CONNECTION = None
    DEFAULT_SCHEMA = None

    LOG_FORMAT = '[%(asctime)s] %(name)s %(levelname)s : %(message)s'

    @staticmethod
    def enable_logging(level=logging.DEBUG):
        """Enable logging output to stderr"""
        stderr_handler = logging.StreamHandler()
        stderr_handler.setFormatter(logging.Formatter(LDAP.LOG_FORMAT))
        stderr_handler.setLevel(level)
        logger.addHandler(stderr_handler)
        return stderr_handler

    @staticmethod
    def disable_warnings():
        """Prevent all LDAP warnings from being shown - default action for others"""
        warnings.showwarning = _showwarning_disabled

    @staticmethod
    def log_warnings():
        """Log all LDAP warnings rather than showing them - default action for others"""
        warnings.showwarning = _showwarning_log

    @staticmethod
    def default_warnings():
        """Always take the default action for warnings"""
        warnings.showwarning = _showwarning_default

    ## basic methods

    def __enter__(self):
        return self

    def __exit__(self, etype, e, trace):
        self.close()

    def __init__(self, connection=None, host=None, port=None, ssl=None, base_dn=None, account_subdn=None,
                 group_subdn=None, account_class=None, group_class=None, connect_timeout=None, schema=None):

        # setup
        if connection is None:
            connection = LDAP.DEFAULT_CONNECTION
        if host is None:
            host = LDAP.DEFAULT_HOST
        if port is None:
            port = LDAP.DEFAULT_PORT
        if ssl is None:
            ssl = LDAP.DEFAULT_SSL
        if base_dn is None:
            base_dn = LDAP.DEFAULT_BASE_DN
        if account_subdn is None:
            account_subdn = LDAP.DEFAULT_ACCOUNT_SUBDN
        if group_subdn is None:
            group_subdn = LDAP.DEFAULT_GROUP_SUBDN
        if account_class is None:
            account_class = LDAP.DEFAULT_ACCOUNT_CLASS
        if group_class is None:
            group_class = LDAP.DEFAULT_GROUP_CLASS
        if connect_timeout is None:
            connect_timeout = LDAP.DEFAULT_CONNECT_TIMEOUT
        if schema is None:
            schema = LDAP.DEFAULT_SCHEMA

        self.base_dn = base_dn
        self.account_subdn = account_subdn
        self.group_subdn = group_subdn
        self.account_class = account_class
        self.group_class = group_class
        self.schema = schema

        if connection is None:
            raise LDAPConnectionError('No connection backend given and LDAP.DEFAULT_CONNECTION is not set')
        elif isinstance(connection, LDAPConnection):
            self.conn = connection
            logger.info('Using existing connection {0!r}'.format(connection))
        elif isinstance(connection, type) and issubclass(connection, LDAPConnection):
            self.conn = connection(host, port=port, ssl=ssl, connect_timeout=connect_timeout)
            logger.info('Connected to {0}'.format(self.conn.uri))
        else:
            raise TypeError('connection must be an LDAPConnection instance or subclass')

    @property
    def account_base(self):
        """The absolute DN accounts are stored under"""
        return construct_dn(self.account_subdn, self.base_dn)

    @property
    def group_base(self):
        """The absolute DN groups are stored under"""
        return construct_dn(self.group_subdn, self.base_dn)

    def simple_bind(self, username='', password=''):
        """Perform a simple bind with a full DN.

        :raises InvalidCredentials: if the server rejects the credentials
        """
        self.conn.simple_bind(username, password)
        logger.info('Simple bind successful')

    def check_credentials(self, username, password):
        """Check a user's password by binding as ``uid=<username>`` under the account base.

        An empty password is always refused, since servers treat it as an anonymous bind.

        :param str username: The user's uid
        :param str password: The password to check
        :return: True if the bind succeeded
        :rtype: bool
        """
        if not password:
            logger.debug('Refusing to check empty password for {0}'.format(username))
            return False
        dn = construct_dn([('uid', username)], self.account_base)
        logger.debug('Checking credentials with dn: {0}'.format(dn))
        try:
            self.conn.simple_bind(dn, password)
        except InvalidCredentials:
            logger.info('Invalid credentials for {0}'.format(dn))
            return False
        return True

    def close(self):
        """Close the backend connection"""
        self.conn.close()
        logger.info('Closed {0!r}'.format(self.conn))

    ## search

    def _search(self, base_dn, scope, fil):
        logger.info('Searching: base_dn={0}, scope={1}, filter={2}'.format(
                    base_dn, Scope.constant(scope), to_string(fil)))
        results = self.conn.search(base_dn, scope, fil)
        if not results:
            raise NoSearchResults('No results for {0} under {1}'.format(to_string(fil), base_dn))
        return [_entry_dict(dn, attrs) for dn, attrs in results]

    def get(self, base=None, filter=None):
        """Get every entry in a subtree matching a filter.

        ::

            ldap.get(filter=[('uid', 'testuser'), ('cn', 'Test User')])
            ldap.get(base='ou=People', filter='(uid=test*)')

        :param base: The search base relative to ``base_dn``, a DN string or ``(attr, value)`` pairs
        :param filter: A filter tuple, RFC 4515 string, dict or ``(attr, value)`` pairs
        :return: One dict per entry with a ``dn`` key and a list of values per attribute
        :rtype: list[dict]
        :raises NoSearchResults: if nothing matched
        """
        dn = construct_dn(base, self.base_dn)
        return self._search(dn, Scope.SUB, construct_filter(filter))

    def get_single(self, base=None, filter=None):
        """Get exactly the entry at ``base``.

        :rtype: dict
        :raises NoSearchResults: if the entry does not exist or does not match
        :raises MultipleSearchResults: if the backend returned more than one entry
        """
        dn = construct_dn(base, self.base_dn)
        return get_one_result(self._search(dn, Scope.BASE, construct_filter(filter)))

    def get_all(self, obj, additional_filter=None):
        """Get every entry of ``obj``'s type matching its set fields.

        ::

            ldap.get_all(PosixAccount(gidNumber='120'))
            ldap.get_all(PosixAccount(), '(uidNumber>=1000)')

        :param LDAPClass obj: The template object. Its class determines object classes and location.
        :param additional_filter: Merged with the generated filter
        :return: New objects of the same class, empty if nothing matched
        :rtype: list[LDAPClass]
        """
        fields_filter = []
        for attr, value in obj.to_dict().items():
            if value is not None:
                fields_filter.extend(equality_match(attr, v) for v in list_wrap(value))
        fil = class_filter(obj.object_classes())
        if fields_filter:
            fil = merge_filter(fil, ('and', fields_filter))
        fil = merge_filter(fil, additional_filter)

        location = construct_dn(obj.location(self), self.base_dn)
        try:
            entries = self._search(location, Scope.SUB, fil)
        except NoSearchResults:
            logger.debug('No {0} entries found under {1}'.format(obj.__class__.__name__, location))
            return []
        return [self._entry_object(entry, obj) for entry in entries]

    @staticmethod
    def _entry_object(entry, template):
        fields = template.to_dict()
        for attr, values in entry.items():
            if attr in fields:
                fields[attr] = values
        return template.__class__(**fields)

    def users(self, filter=None):
        """Get every account, optionally narrowed by a filter"""
        return self.get(base=self.account_subdn, filter=class_filter(self.account_class, filter))

    def user(self, uid):
        """Get a single account by uid

        :raises NoSearchResults: if there is no such account
        """
        return self.get_single(base=construct_dn([('uid', uid)], self.account_subdn),
                               filter=class_filter(self.account_class))

    def groups(self, filter=None):
        """Get every group, optionally narrowed by a filter"""
        return self.get(base=self.group_subdn, filter=class_filter(self.group_class, filter))

    def group(self, cn):
        """Get a single group by cn

        :raises NoSearchResults: if there is no such group
        """
        return self.get_single(base=construct_dn([('cn', cn)], self.group_subdn),
                               filter=class_filter(self.group_class))

    def users_from_group(self, cn):
        """Get the accounts listed in a group's memberUid attribute

        :raises NoSearchResults: if the group does not exist
        """
        member_uids = self.group(cn).get('memberUid', [])
        if not member_uids:
            logger.debug('Group {0} has no members'.format(cn))
            return []
        return self.users(or_(equality_match('uid', uid) for uid in member_uids))

    def groups_of_user(self, uid):
        """Get the groups listing a uid as a member

        :raises NoSearchResults: if the user is not in any group
        """
        return self.groups(equality_match('memberUid', uid))

    ## write

    def get_dn(self, obj):
        """Get the DN of an object relative to ``base_dn``, e.g. ``uid=testuser,ou=People``

        :param LDAPClass obj: The object
        :rtype: str
        :raises MissingUniqueIdentifier: if the unique identifier field is unset
        """
        id_field = obj.unique_identifier()
        id_value = getattr(obj, id_field, None)
        if isinstance(id_value, (list, tuple)):
            id_value = id_value[0] if id_value else None
        if id_value is None:
            raise MissingUniqueIdentifier('{0!r} has no value for {1}'.format(obj, id_field))
        return construct_dn([(id_field, id_value)], obj.location(self))

    def add(self, dn, attrs):
        """Add a new entry.

        ::

            ldap.add([('uid', 'testuser'), ('ou', 'People')],
                     {'uid': 'testuser', 'objectClass': ['account', 'posixAccount'], 'cn': 'Test User'})

        :param dn: The new entry's DN relative to ``base_dn``, a string or ``(attr, value)`` pairs
        :param dict attrs: Attribute values. None values are left out and single values are wrapped in a list.
        :raises LDAPOperationError: if the server refuses the entry
        """
        dn = construct_dn(dn, self.base_dn)
        attrs = dict((attr, list_wrap(value)) for attr, value in attrs.items() if value is not None)
        self.conn.add(dn, attrs)
        logger.info('Added {0}'.format(dn))

    def add_object(self, obj):
        """Add an :class:`.LDAPClass` object, running its generators first.

        :raises MissingUniqueIdentifier: if the unique identifier field is unset
        :raises MissingRequiredAttributes: if required attributes are unset after generation
        """
        dn = self.get_dn(obj)
        self.add(dn, attributes.get(obj, self))

    def _target_dn(self, target):
        if isinstance(target, LDAPClass):
            target = self.get_dn(target)
        return construct_dn(target, self.base_dn)

    def delete(self, target):
        """Delete an entry.

        :param target: An :class:`.LDAPClass` object, or a DN relative to ``base_dn`` (string or pairs)
        :raises NoSuchObject: if the entry does not exist
        """
        dn = self._target_dn(target)
        self.conn.delete(dn)
        logger.info('Deleted {0}'.format(dn))

    def modify(self, target, mods):
        """Modify an entry.

        ::

            ldap.modify('uid=testuser,ou=People', [('add', 'description', 'hello'),
                                                   ('replace', 'mail', ['a@example.org']),
                                                   ('delete', 'gecos')])

        :param target: An :class:`.LDAPClass` object, or a DN relative to ``base_dn`` (string or pairs)
        :param list mods: :class:`.Mod` objects or tuples accepted by :meth:`.Mod.from_tuple`
        :raises LDAPOperationError: if the server refuses the change
        """
        dn = self._target_dn(target)
        modlist = [Mod.from_tuple(mod) for mod in mods]
        if not modlist:
            logger.debug('Not sending 0-length modlist for DN {0}'.format(dn))
            return
        logger.debug('Modifying DN {0}'.format(dn))
        for mod in modlist:
            logger.debug('> {0}'.format(mod))
        self.conn.modify(dn, modlist)
        logger.info('Modified {0}'.format(dn))

    def __repr__(self):
        return '<LDAP {0!r} base_dn={1!r}>'.format(self.conn, self.base_dn)
