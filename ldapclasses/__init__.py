"""Imports and defines the core of the public API"""

from .attributes import get as get_attributes
from .base import LDAP
from .classes import LDAPClass, gen_class, gen_class_from_schema
from .constants import Scope, DELETE_ALL
from .dn import construct_dn, dn_to_kwlist, dc, domain
from .exceptions import (
    LDAPError,
    LDAPWarning,
    LDAPSchemaError,
    SchemaLexError,
    SchemaParseError,
    MissingObjectClassDefinition,
    InvalidCredentials,
    NoSearchResults,
    MissingUniqueIdentifier,
    MissingRequiredAttributes,
)
from .filter import escape as filter_escape
from .modify import Mod, Modlist
from .net import LDAPConnection
from .parser import parse, Kind
from .posix import PosixAccount, PosixGroup
from .schema import Schema

__all__ = [
    'get_attributes',
    'LDAP',
    'LDAPClass',
    'gen_class',
    'gen_class_from_schema',
    'Scope',
    'DELETE_ALL',
    'construct_dn',
    'dn_to_kwlist',
    'dc',
    'domain',
    'LDAPError',
    'LDAPWarning',
    'LDAPSchemaError',
    'SchemaLexError',
    'SchemaParseError',
    'MissingObjectClassDefinition',
    'InvalidCredentials',
    'NoSearchResults',
    'MissingUniqueIdentifier',
    'MissingRequiredAttributes',
    'filter_escape',
    'Mod',
    'Modlist',
    'LDAPConnection',
    'parse',
    'Kind',
    'PosixAccount',
    'PosixGroup',
    'Schema',
]
