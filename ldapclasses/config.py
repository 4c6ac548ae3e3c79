"""Provides support for establishing an LDAP connection and loading schema files via config files and dicts"""

from .base import LDAP
from .exceptions import LDAPWarning
from .net import LDAPConnection
from .schema import Schema
import glob
import json
import logging
import warnings
import yaml
from importlib import import_module

logger = logging.getLogger(__name__)


def _default_mapper(val):
    return val


def _connection_mapper(val):
    if isinstance(val, str):
        modname, objname = val.rsplit('.', 1)
        mod = import_module(modname)
        val = getattr(mod, objname)
    if isinstance(val, type) and issubclass(val, LDAPConnection):
        return val
    raise TypeError('"connection" must be str or an ldapclasses.net.LDAPConnection subclass')


_connection_mappers = {
    'connection': _connection_mapper,
}

_global_mappers = {
    'DEFAULT_CONNECTION': _connection_mapper,
}


def normalize_global_config_param(key):
    """Normalize a global config key. Does not check validity of the key.

    :param str key: User-supplied global config key
    :return: The normalized key formatted as an attribute of :class:`.LDAP`
    :rtype: str
    """
    key = key.upper()
    if not key.startswith('DEFAULT_'):
        key = 'DEFAULT_'+key
    return key


def set_global_config(global_config_dict):
    """Set the global defaults. The dict must be formatted as follows::

        {'global': {
            <config param>: <config value>,
         }
        }

    ``<config param>`` must match one of the ``DEFAULT_`` attributes on :class:`.LDAP`. The ``DEFAULT_`` prefix is
    optional and dict keys are case-insensitive. Any parameters not specified will keep the hard-coded default.

    For ``connection`` give the full path to an :class:`.LDAPConnection` subclass as a string.

    :param dict global_config_dict: See above.
    :rtype: None
    :raises KeyError: if the dict is incorrectly formatted or contains unknown config parameters
    """
    bad = []
    for key, val in global_config_dict['global'].items():
        orig_key = key
        key = normalize_global_config_param(key)
        if hasattr(LDAP, key):
            val = _global_mappers.get(key, _default_mapper)(val)
            setattr(LDAP, key, val)
        else:
            bad.append(orig_key)
    if bad:
        raise KeyError('Unknown global config keys: {0}'.format(', '.join(bad)))


def load_schema(config_dict):
    """Parse the schema files listed in a config dict formatted as follows::

        {'schema_files': [
            <path or glob pattern>,
         ]
        }

    Files matching each pattern are loaded in sorted order, and patterns in the order given.

    :param dict config_dict: See above.
    :rtype: Schema
    :raises LDAPSchemaError: if a file cannot be lexed or parsed
    """
    patterns = config_dict['schema_files']
    if isinstance(patterns, str):
        patterns = [patterns]
    paths = []
    for pattern in patterns:
        matches = sorted(glob.glob(pattern))
        if not matches:
            warnings.warn('Schema file pattern {0} matched no files'.format(pattern), LDAPWarning)
        paths.extend(matches)
    return Schema.load_files(paths)


def create_connection(config_dict, schema=None):
    """Create a new connection from a config dict formatted as follows::

        {'connection': {
            'connection': <dotted path to an LDAPConnection subclass>,  # optional if the global default is set
            'simple_bind': {  # optional, default no bind
                'username': <bind dn>,
                'password': <string password>
            },
            <constructor param>: <constructor value>,
         }
        }

    ``<constructor param>`` must be one of the :class:`.LDAP` constructor keyword arguments.

    Note on binding: You can always manually call :meth:`.LDAP.simple_bind` on the :class:`.LDAP` instance returned
    from this method if statically configuring bind credentials is not desirable.

    :param config_dict: See above.
    :param Schema schema: Attached to the new connection
    :return: The new LDAP instance
    """
    conn_config_dict = dict(config_dict['connection'])
    simple_bind = conn_config_dict.pop('simple_bind', False)
    for key in _connection_mappers:
        if key in conn_config_dict:
            val = _connection_mappers[key](conn_config_dict[key])
            conn_config_dict[key] = val
    ldap = LDAP(schema=schema, **conn_config_dict)
    if simple_bind:
        ldap.simple_bind(**simple_bind)
    return ldap


def load_file(path, file_decoder=None):
    """Load a config file. Must decode to dict with all components described on other methods as optional sections/keys.
    A YAML example::

        global:
          CONNECTION: mypackage.backends.LDAP3Connection
        schema_files:
          - /etc/ldap/schema/core.schema
          - /etc/ldap/schema/nis.schema
        connection:
          host: dir01.example.org
          port: 636
          ssl: true
          base_dn: dc=example,dc=org
          account_subdn: ou=People
          group_subdn: ou=Group
          simple_bind:
            username: cn=admin,dc=example,dc=org
            password: testpassword
          connect_timeout: 30

    :param path: A path to a config file. Provides support for YAML and JSON format, or you can specify your own decoder
                 that returns a dict.
    :param file_decoder: A callable returning a dict when passed a file-like object
    :return: The LDAP connection if one was defined, None otherwise
    :rtype: LDAP or None
    :raises RuntimeError: if an unsupported file extension was given without the ``file_decoder`` argument.
    """
    if file_decoder is None:
        if path.endswith('.yml') or path.endswith('.yaml'):
            file_decoder = yaml.safe_load
        elif path.endswith('.json'):
            file_decoder = json.load
        else:
            raise RuntimeError('Unsupported file type, must be YAML or JSON, or specify file_decoder argument')
    logger.debug('Loading config file {0}'.format(path))
    with open(path) as f:
        config_dict = file_decoder(f)
    return load_config_dict(config_dict)


def load_config_dict(config_dict):
    """Load config parameters from a dictionary. Must be formatted in the same was as ``load_file``

    Schema files are only parsed when a connection is defined, and the result is available as
    :attr:`.LDAP.schema`. Use :func:`load_schema` to parse them without connecting.

    :param dict config_dict: The config dictionary. See format in ``load_file``.
    :return: The LDAP connection if one was defined, None otherwise
    :rtype: LDAP or None
    """
    if 'global' in config_dict:
        set_global_config(config_dict)
    if 'connection' in config_dict:
        schema = None
        if 'schema_files' in config_dict:
            schema = load_schema(config_dict)
        return create_connection(config_dict, schema)
