"""Building and splitting distinguished names (RFC 4514 string form)

https://tools.ietf.org/html/rfc4514
"""

import re

_escaped_chars = ',#+<>;"=\\'


def escape(value):
    """Backslash-escape the characters that are special in an RDN value"""
    value = str(value)
    return ''.join('\\' + c if c in _escaped_chars else c for c in value)


def _kwdn_pairs(kwdn):
    if isinstance(kwdn, dict):
        return list(kwdn.items())
    return list(kwdn)


def construct_dn(kwdn, base=''):
    """Construct a DN from key/value pairs and an optional base.

    Use it like this::

        construct_dn([('uid', 'user'), ('ou', 'People')])
        construct_dn({'uid': 'user'}, 'ou=People,dc=organisation,dc=org')

    Values are escaped. A string ``kwdn`` is taken as an already-built DN.

    :param kwdn: A DN string, a dict, or a list of ``(attr, value)`` pairs
    :param str base: Appended after a comma when not empty
    :rtype: str
    """
    if kwdn is None:
        kwdn = ''
    if isinstance(kwdn, str):
        dn = kwdn
    else:
        dn = ','.join('{0}={1}'.format(key, escape(value)) for key, value in _kwdn_pairs(kwdn))
    if not base:
        return dn
    if not dn:
        return base
    return dn + ',' + base


# a run of escape pairs and plain characters, ended by an unescaped comma
_rdn = re.compile(r'(?:\\.|[^,\\])*')


def _split_rdns(dn):
    rdns = []
    pos = 0
    while True:
        m = _rdn.match(dn, pos)
        rdns.append(m.group())
        pos = m.end()
        if pos >= len(dn):
            return rdns
        if dn[pos] != ',':
            raise ValueError('Dangling escape in DN {0!r}'.format(dn))
        pos += 1


def _unescape(value):
    return re.sub(r'\\(.)', r'\1', value)


def dn_to_kwlist(dn):
    """Transform a DN to a list of ``(attr, value)`` pairs.

    >>> dn_to_kwlist('uid=user,ou=People,dc=organisation,dc=org')
    [('uid', 'user'), ('ou', 'People'), ('dc', 'organisation'), ('dc', 'org')]
    """
    if not dn:
        return []
    ret = []
    for rdn in _split_rdns(dn):
        key, sep, value = rdn.partition('=')
        if not sep:
            raise ValueError('Invalid RDN {0!r} in DN {1!r}'.format(rdn, dn))
        ret.append((key.strip(), _unescape(value.strip())))
    return ret


def dc(domain):
    """Convert a DNS dotted domain name to a DN with domain components"""
    return ','.join(['dc={0}'.format(dc) for dc in domain.split('.')])


def domain(dc):
    """Convert a DN with domain components to a DNS dotted domain name"""
    return '.'.join([i.split('=')[1] for i in dc.split(',')])
