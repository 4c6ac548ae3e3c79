"""Queries over parsed schema definitions

A :class:`Schema` is built once from the definitions of every configured schema file and is read-only afterwards, so
it can be shared freely between threads.

Example::

    schema = Schema.load_files(['/etc/ldap/schema/core.schema', '/etc/ldap/schema/nis.schema'])
    schema.required_attributes(['posixAccount', 'account'])
"""

from .exceptions import MissingObjectClassDefinition, LDAPWarning
from .parser import parse, AttributeTypeDefinition, ObjectClassDefinition
from .utils import unique

import logging
from warnings import warn

logger = logging.getLogger(__name__)

BUILTIN_ALIASES = (
    ('uid', 'userid'),
)


class Schema(object):
    """Parsed definitions plus the derived attribute alias table.

    :param definitions: Definitions in load order. Earlier definitions win on duplicate object class names.
    :type definitions: list[Definition]

    :var tuple definitions: All definitions
    :var tuple object_classes: The :class:`.ObjectClassDefinition` subset
    :var tuple aliases: One alias group per attribute type, then the built-in groups. The first name in each group is
                        the canonical one.
    """
    def __init__(self, definitions):
        self.definitions = tuple(definitions)
        self.object_classes = tuple(d for d in self.definitions if isinstance(d, ObjectClassDefinition))
        self.aliases = tuple(tuple(d.names) for d in self.definitions
                             if isinstance(d, AttributeTypeDefinition)) + BUILTIN_ALIASES

    @classmethod
    def from_text(cls, *texts):
        """Parse one or more schema file contents, in order"""
        definitions = []
        for text in texts:
            definitions += parse(text)
        return cls(definitions)

    @classmethod
    def load_files(cls, paths):
        """Read and parse schema files, in the given order

        :param list[str] paths: Paths to schema description files
        :rtype: Schema
        :raises SchemaLexError: if a file cannot be tokenized
        :raises SchemaParseError: if a file does not match the grammar
        """
        definitions = []
        for path in paths:
            logger.info('Loading {0}'.format(path))
            with open(path, encoding='utf-8') as f:
                definitions += parse(f.read())
        return cls(definitions)

    def canonical_name(self, attr):
        """Get the canonical alias of an attribute name, or the name itself if no alias group contains it"""
        for group in self.aliases:
            if attr in group:
                return group[0]
        return attr

    def object_class(self, name):
        """Get the first object class definition with ``name`` among its aliases

        :raises MissingObjectClassDefinition: if there is none
        """
        return self._find_object_classes([name])[0]

    def _find_object_classes(self, names):
        if isinstance(names, str):
            names = [names]
        found = []
        missing = []
        for name in names:
            matches = [oc for oc in self.object_classes if name in oc.names]
            if not matches:
                missing.append(name)
                continue
            if len(matches) > 1:
                warn('objectClass {0} is defined {1} times, using the first definition (OID {2})'.format(
                     name, len(matches), matches[0].oid), LDAPWarning)
            found.append(matches[0])
        if missing:
            raise MissingObjectClassDefinition(missing)
        return found

    def _resolve(self, object_classes, keys):
        attrs = []
        for oc in self._find_object_classes(object_classes):
            for key in keys:
                for oids in oc.get_all(key):
                    attrs += oids
        return unique(self.canonical_name(attr) for attr in attrs)

    def attributes(self, object_classes):
        """Get every required and allowed attribute of one or more object classes.

        Superclasses are not ascended.

        :param object_classes: An object class name or a list of them
        :type object_classes: str or list[str]
        :return: Canonical attribute names, required before allowed, first occurrence kept
        :rtype: list[str]
        :raises MissingObjectClassDefinition: naming every class that has no definition
        """
        return self._resolve(object_classes, ('must', 'may'))

    def required_attributes(self, object_classes):
        """Get the required attributes of one or more object classes.

        :param object_classes: An object class name or a list of them
        :type object_classes: str or list[str]
        :return: Canonical attribute names, first occurrence kept
        :rtype: list[str]
        :raises MissingObjectClassDefinition: naming every class that has no definition
        """
        return self._resolve(object_classes, ('must',))

    def __repr__(self):
        return '<{0} {1} definitions>'.format(self.__class__.__name__, len(self.definitions))
