"""Global constant classes."""


class _DeleteAllAttrs(object):
    """Sentinel for a delete or replace that removes every value of an attribute"""
    def __bool__(self):
        return False

    def __len__(self):
        return 0

    def __repr__(self):
        return '<delete all values>'


DELETE_ALL = _DeleteAllAttrs()


class Scope:
    """Search scope constants, relative to the search base.

    The values are the RFC 4511 enumeration names, which is what connection backends receive.
    """

    BASE = 'baseObject'
    """Only the base entry"""

    ONELEVEL = 'singleLevel'
    ONE = ONELEVEL
    """Immediate children of the base entry"""

    SUBTREE = 'wholeSubtree'
    SUB = SUBTREE
    """The base entry and everything below it"""

    _url_names = {
        'base': BASE,
        'one': ONELEVEL,
        'sub': SUBTREE,
    }

    @staticmethod
    def string(name):
        """Get the constant for an RFC 4516 URL scope name such as ``sub``

        :raises ValueError: for an unknown name
        """
        try:
            return Scope._url_names[name.lower()]
        except KeyError:
            raise ValueError('Unknown scope {0}'.format(name))

    @staticmethod
    def constant(c):
        """Get the RFC 4516 URL scope name of a constant

        :raises ValueError: for anything but a scope constant
        """
        for name, value in Scope._url_names.items():
            if value == c:
                return name
        raise ValueError('Not a scope constant: {0!r}'.format(c))
