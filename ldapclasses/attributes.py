"""Attribute computation for objects about to be written to the directory"""

from .exceptions import LDAPConnectionError, MissingRequiredAttributes

import logging

logger = logging.getLogger(__name__)


def get(class_object, ldap=None):
    """Get the given and generated attributes of an :class:`.LDAPClass` instance.

    Unset fields with a generator are filled in, and ``objectClass`` is set from the class unless given.

    :param LDAPClass class_object: The object
    :param ldap: The connection passed to generators
    :type ldap: LDAP or None
    :return: ``{attr: value}`` including unset (None) fields
    :rtype: dict
    :raises LDAPConnectionError: if a generator has to run and no connection was given
    :raises MissingRequiredAttributes: if required attributes are still unset
    """
    attrs = class_object.to_dict()
    for attr, generator in class_object.generators().items():
        if attrs.get(attr) is None:
            if ldap is None:
                raise LDAPConnectionError('A connection is required to generate {0} for {1!r}'.format(
                                          attr, class_object))
            attrs[attr] = generator(ldap, class_object)
            logger.debug('Generated {0}={1} for {2!r}'.format(attr, attrs[attr], class_object))
    if attrs.get('objectClass') is None:
        attrs['objectClass'] = class_object.object_classes()

    missing = [attr for attr in class_object.required_attributes() if attrs.get(attr) is None]
    if missing:
        raise MissingRequiredAttributes(missing)
    return attrs
