"""Connection backend interface

:class:`ldapclasses.base.LDAP` never touches the network itself. It drives an :class:`LDAPConnection`, which owns
transport, TLS and protocol encoding. Subclass it to plug in a real client library, or a mock for testing.
"""


class LDAPConnection(object):
    """Abstract base class for connection backends.

    :param str host: The server host name
    :param int port: The server port
    :param bool ssl: Use LDAPS
    :param int connect_timeout: Seconds to wait for the connection
    """
    def __init__(self, host, port=389, ssl=False, connect_timeout=5):
        self.host = host
        self.port = port
        self.ssl = ssl
        self.connect_timeout = connect_timeout

    @property
    def uri(self):
        if self.ssl:
            scheme = 'ldaps'
        else:
            scheme = 'ldap'
        return '{0}://{1}:{2}'.format(scheme, self.host, self.port)

    def simple_bind(self, dn, password):
        """Bind with a DN and password.

        :raises InvalidCredentials: if the server rejects the credentials
        """
        raise NotImplementedError()

    def search(self, base_dn, scope, filter):
        """Search the directory.

        :param str base_dn: The search base
        :param str scope: One of the :class:`.Scope` constants
        :param tuple filter: A filter tuple, see :mod:`ldapclasses.filter`
        :return: ``(dn, {attr: [values]})`` pairs
        :rtype: list[tuple]
        :raises NoSuchObject: if the base does not exist
        """
        raise NotImplementedError()

    def add(self, dn, attrs):
        """Add an entry.

        :param str dn: The new entry's DN
        :param dict attrs: ``{attr: [values]}``
        :raises LDAPOperationError: if the server refuses the entry
        """
        raise NotImplementedError()

    def delete(self, dn):
        """Delete an entry.

        :raises NoSuchObject: if the entry does not exist
        """
        raise NotImplementedError()

    def modify(self, dn, modlist):
        """Apply a list of :class:`.Mod` to an entry.

        :raises LDAPOperationError: if the server refuses the change
        """
        raise NotImplementedError()

    def close(self):
        """Close the connection"""
        raise NotImplementedError()

    def __repr__(self):
        return '<{0} {1}>'.format(self.__class__.__name__, self.uri)
