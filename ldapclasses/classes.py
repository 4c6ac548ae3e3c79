"""Record types representing LDAP entries

Subclass :class:`LDAPClass` and fill in the class attributes, or generate a subclass with :func:`gen_class` or, with
fields taken from the parsed schema, :func:`gen_class_from_schema`::

    PosixAccount = gen_class_from_schema(schema, 'PosixAccount', ['posixAccount', 'account'],
                                         location='ou=People', unique_identifier='uid')
    user = PosixAccount(uid='jdoe', cn='John Doe')
"""

import logging

logger = logging.getLogger(__name__)


class LDAPClass(object):
    """Base class for objects representing an LDAP entry.

    :var tuple FIELDS: The attribute names this type holds. Every instance has each of them, defaulting to None.
    :var str UNIQUE_IDENTIFIER: The attribute used in the RDN, e.g. ``uid`` for ``uid=jdoe,ou=People``
    :var tuple OBJECT_CLASSES: The object classes of entries of this type. ``top`` is not required.
    :var tuple REQUIRED_ATTRIBUTES: Attributes that must be set before adding an entry
    :var str LOCATION: The parent DN, relative to the connection base DN
    :var dict GENERATORS: Maps attribute names to ``callable(ldap, obj)`` returning a value for that attribute when it
                          is unset. They may be called even if adding the entry fails, so avoid side effects.
    """
    FIELDS = ()
    UNIQUE_IDENTIFIER = None
    OBJECT_CLASSES = ()
    REQUIRED_ATTRIBUTES = ()
    LOCATION = ''
    GENERATORS = {}

    def __init__(self, **attrs):
        for field in self.FIELDS:
            setattr(self, field, None)
        for key, value in attrs.items():
            if key not in self.FIELDS:
                raise TypeError('{0} has no field {1}'.format(self.__class__.__name__, key))
            setattr(self, key, value)

    @classmethod
    def fields(cls):
        return list(cls.FIELDS)

    @classmethod
    def unique_identifier(cls):
        return cls.UNIQUE_IDENTIFIER

    @classmethod
    def object_classes(cls):
        return list(cls.OBJECT_CLASSES)

    @classmethod
    def required_attributes(cls):
        return list(cls.REQUIRED_ATTRIBUTES)

    @classmethod
    def location(cls, ldap=None):
        """Get the parent DN of entries of this type.

        :param ldap: The connection the location is needed for. Subclasses may use its settings.
        :type ldap: LDAP or None
        """
        return cls.LOCATION

    @classmethod
    def generators(cls):
        return dict(cls.GENERATORS)

    def to_dict(self):
        """Get all fields and their values"""
        return dict((field, getattr(self, field)) for field in self.FIELDS)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None

    def __repr__(self):
        attrs = ', '.join('{0}={1!r}'.format(key, value) for key, value in self.to_dict().items()
                          if value is not None)
        return '{0}({1})'.format(self.__class__.__name__, attrs)


def gen_class(name, fields, unique_identifier, object_classes, required_attributes, location, generators=None):
    """Generate an :class:`LDAPClass` subclass.

    :param str name: The class name
    :param list[str] fields: Attribute names held by instances
    :param str unique_identifier: The RDN attribute
    :param object_classes: One object class name or a list
    :param list[str] required_attributes: Attributes that must be set before adding
    :param str location: The parent DN, relative to the connection base DN
    :param dict generators: ``{attr: callable(ldap, obj)}``
    :rtype: type
    """
    if isinstance(object_classes, str):
        object_classes = [object_classes]
    if unique_identifier not in fields:
        raise ValueError('unique identifier {0} is not one of the fields of {1}'.format(unique_identifier, name))
    return type(name, (LDAPClass,), {
        'FIELDS': tuple(fields),
        'UNIQUE_IDENTIFIER': unique_identifier,
        'OBJECT_CLASSES': tuple(object_classes),
        'REQUIRED_ATTRIBUTES': tuple(required_attributes),
        'LOCATION': location,
        'GENERATORS': dict(generators or {}),
    })


def gen_class_from_schema(schema, name, object_classes, location, unique_identifier, generators=None):
    """Generate an :class:`LDAPClass` subclass whose fields and required attributes come from the schema.

    :param Schema schema: The parsed schema
    :param str name: The class name
    :param object_classes: One object class name or a list
    :param str location: The parent DN, relative to the connection base DN
    :param str unique_identifier: The RDN attribute
    :param dict generators: ``{attr: callable(ldap, obj)}``
    :rtype: type
    :raises MissingObjectClassDefinition: if an object class is not defined in the schema
    """
    fields = schema.attributes(object_classes)
    required = schema.required_attributes(object_classes)
    logger.debug('Generating class {0} with fields {1}'.format(name, ','.join(fields)))
    return gen_class(name, fields, schema.canonical_name(unique_identifier), object_classes, required, location,
                     generators)
