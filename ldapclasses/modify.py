"""Contains utilities for performing object modification"""

from .constants import DELETE_ALL
from .utils import list_wrap


class Mod(object):
    """Describes a single modify operation"""
    ADD = 'add'
    REPLACE = 'replace'
    DELETE = 'delete'

    @staticmethod
    def op_to_string(op):
        """Convert one of the :class:`Mod` constants to its name, e.g. "ADD"

        :raises ValueError: for anything but a Mod constant
        """
        if op not in _ops:
            raise ValueError('Not a modify operation: {0!r}'.format(op))
        return op.upper()

    @staticmethod
    def string(op):
        """Translate LDIF changetype strings to constant. e.g. "replace" -> :attr:`.Mod.REPLACE`"""
        op = str(op).lower()
        if op not in _ops:
            raise ValueError('Unknown modify operation {0}'.format(op))
        return op

    @staticmethod
    def from_tuple(mod):
        """Build a Mod from a tuple.

        Accepted forms::

            ('add', 'attr', value_or_values)
            ('replace', 'attr', value_or_values)
            ('delete', 'attr', value_or_values)
            ('delete', 'attr')  # all values

        :rtype: Mod
        """
        if isinstance(mod, Mod):
            return mod
        if len(mod) == 2:
            op, attr = mod
            vals = DELETE_ALL
        elif len(mod) == 3:
            op, attr, vals = mod
        else:
            raise ValueError('Invalid modify tuple {0!r}'.format(mod))
        return Mod(Mod.string(op), attr, vals)

    def __init__(self, op, attr, vals):
        if op not in _ops:
            raise ValueError('Not a modify operation: {0!r}'.format(op))
        if vals is not DELETE_ALL:
            vals = list_wrap(vals)
        if op == Mod.ADD and not vals:
            raise ValueError('No values to add')
        self.op = op
        self.attr = attr
        self.vals = vals

    def __eq__(self, other):
        if not isinstance(other, Mod):
            return NotImplemented
        return (self.op, self.attr, self.vals) == (other.op, other.attr, other.vals)

    __hash__ = None

    def __repr__(self):
        if self.vals:
            vals = str(self.vals)
        else:
            vals = 'DELETE_ALL'
        return 'Mod(Mod.{0}, {1}, {2})'.format(Mod.op_to_string(self.op), repr(self.attr), vals)


_ops = (Mod.ADD, Mod.REPLACE, Mod.DELETE)


def Modlist(op, attrs_dict):
    """Generate a modlist from a dictionary"""

    if not isinstance(attrs_dict, dict):
        raise TypeError('attrs_dict must be dict')
    modlist = []
    for attr, vals in attrs_dict.items():
        modlist.append(Mod(op, attr, vals))
    return modlist
