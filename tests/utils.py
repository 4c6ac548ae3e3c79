from ldapclasses import Schema
import os

SCHEMA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'schema')

SCHEMA_FILES = [
    os.path.join(SCHEMA_DIR, 'core.schema'),
    os.path.join(SCHEMA_DIR, 'nis.schema'),
]

POSIX_ACCOUNT_ATTRIBUTES = [
    'cn', 'uid', 'uidNumber', 'gidNumber', 'homeDirectory',
    'userPassword', 'loginShell', 'gecos', 'description',
    'seeAlso', 'l', 'o', 'ou', 'host',
]


def load_schema():
    return Schema.load_files(SCHEMA_FILES)
