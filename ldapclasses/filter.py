"""Search filter construction and parsing

Filters are nested tuples shaped after the RFC 4511 ``Filter`` choice, and this is what connection backends receive::

    ('and', [filter, ...])
    ('or', [filter, ...])
    ('not', filter)
    ('equalityMatch', attr, value)
    ('approxMatch', attr, value)
    ('greaterOrEqual', attr, value)
    ('lessOrEqual', attr, value)
    ('present', attr)
    ('substrings', attr, [('initial' | 'any' | 'final', value), ...])
    ('extensibleMatch', attr_or_None, dn_attrs, rule_or_None, value)

RFC 4515 filter strings are accepted anywhere a filter is and are parsed into the same shape.
"""

from parsimonious.grammar import Grammar
from parsimonious.exceptions import ParseError

from .exceptions import LDAPError

escape_map = [
    ('\\', '\\5c'),
    ('(', '\\28'),
    (')', '\\29'),
    ('&', '\\26'),
    ('|', '\\7c'),
    ('!', '\\21'),
    ('=', '\\3d'),
    ('<', '\\3c'),
    ('>', '\\3e'),
    ('~', '\\7e'),
    ('*', '\\2a'),
    ('/', '\\2f')
]


def escape(text):
    """Escape special characters"""
    text = str(text)
    for rep in escape_map:
        text = text.replace(*rep)
    return text


EMPTY_FILTER = ('and', [])

## Construction


def equality_match(attr, value):
    return ('equalityMatch', str(attr), str(value))


def present(attr):
    return ('present', str(attr))


def and_(filters):
    return ('and', list(filters))


def or_(filters):
    return ('or', list(filters))


def not_(fil):
    return ('not', construct_filter(fil))


def _is_empty(fil):
    return fil is None or (not isinstance(fil, tuple) and len(fil) == 0)


def construct_filter(fil):
    """Construct a filter from any supported spelling.

    Examples::

        construct_filter(('substrings', 'uid', [('initial', 'b')]))  # returned as is
        construct_filter(None)  # ('and', [])
        construct_filter([('uid', 'testuser'), ('cn', 'Test User')])
        # ('and', [('equalityMatch', 'uid', 'testuser'), ('equalityMatch', 'cn', 'Test User')])
        construct_filter('(uid=testuser)')  # ('equalityMatch', 'uid', 'testuser')

    :param fil: A filter tuple, an RFC 4515 string, a dict or list of ``(attr, value)`` pairs, or None
    :rtype: tuple
    :raises LDAPError: if a filter string cannot be parsed
    """
    if isinstance(fil, tuple):
        return fil
    elif _is_empty(fil):
        return EMPTY_FILTER
    elif isinstance(fil, str):
        return parse_standard_filter(fil)
    elif isinstance(fil, dict):
        fil = fil.items()
    return and_(equality_match(attr, value) for attr, value in fil)


def merge_filter(lhs, rhs):
    """Combine two filters so that both must match.

    Empty sides vanish and ``and`` filters are flattened into one.
    """
    if _is_empty(lhs) and _is_empty(rhs):
        return EMPTY_FILTER
    elif _is_empty(rhs):
        return construct_filter(lhs)
    elif _is_empty(lhs):
        return construct_filter(rhs)
    lhs = construct_filter(lhs)
    rhs = construct_filter(rhs)
    if lhs[0] == 'and' and rhs[0] == 'and':
        return and_(lhs[1] + rhs[1])
    elif lhs[0] == 'and':
        return and_([rhs] + lhs[1])
    elif rhs[0] == 'and':
        return and_([lhs] + rhs[1])
    return and_([lhs, rhs])


def class_filter(classes, fil=None):
    """Build a filter matching entries of one or all of several object classes, optionally merged with ``fil``"""
    if isinstance(classes, str):
        class_fil = equality_match('objectClass', classes)
    else:
        class_fil = and_(equality_match('objectClass', oc) for oc in classes)
    if _is_empty(fil):
        return class_fil
    return and_([construct_filter(fil), class_fil])


## Parsing

ava_grammar = '''
      rfc4515_ava    = substring / simple / extensible
      simple         = attr filtertype assertionvalue
      filtertype     = approx / greaterorequal / lessorequal / equal
      equal          = EQUALS
      approx         = TILDE EQUALS
      greaterorequal = RANGLE EQUALS
      lessorequal    = LANGLE EQUALS
      extensible     = ( ( attr dnattrs? matchingrule? COLON EQUALS assertionvalue )
                       / ( dnattrs? matchingrule COLON EQUALS assertionvalue ) )
      substring      = attr EQUALS initial? any final?
      initial        = assertionvalue
      any            = ASTERISK (assertionvalue ASTERISK)*
      final          = assertionvalue
      attr           = attributedescription

      attributedescription = attributetype options
      attributetype        = oid
      options              = ( SEMI option )*
      option               = keychar+

      dnattrs        = COLON "dn"
      matchingrule   = COLON oid

      oid = descr / numericoid

      numericoid = number ( DOT number )+
      number     = ( LDIGIT DIGIT+ ) / DIGIT
      DIGIT      = ~r"[0-9]"
      LDIGIT     = ~r"[1-9]"

      descr       = keystring
      keystring   = leadkeychar keychar*
      leadkeychar = ALPHA
      keychar     = ALPHA / DIGIT / HYPHEN
      ALPHA       = ~r"[A-Za-z]"

      assertionvalue = valueencoding
      valueencoding  = (normal / escaped)*
      normal         = ~r"[^\\0()*\\\\]"
      escaped        = ESC HEX HEX
      HEX            = DIGIT / ~r"[A-Fa-f]"

      EQUALS   = "="
      TILDE    = "~"
      LANGLE   = "<"
      RANGLE   = ">"
      COLON    = ":"
      ASTERISK = "*"
      DOT      = "."
      HYPHEN   = "-"
      SEMI     = ";"
      ESC      = "\\\\"
'''

rfc4515_filter_grammar = '''
      standard_filter = LPAREN filtercomp RPAREN
      filtercomp      = and / or / not / rfc4515_ava
      and             = AMPERSAND filterlist
      or              = VERTBAR filterlist
      not             = EXCLAMATION standard_filter
      filterlist      = standard_filter+
''' + ava_grammar + '''
      LPAREN      = "("
      RPAREN      = ")"
      AMPERSAND   = "&"
      VERTBAR     = "|"
      EXCLAMATION = "!"
'''

_rfc4515_filter_grammar = Grammar(rfc4515_filter_grammar)

_filtertypes = {
    '=': 'equalityMatch',
    '~=': 'approxMatch',
    '>=': 'greaterOrEqual',
    '<=': 'lessOrEqual',
}


def parse_standard_filter(filter_str):
    """Parse an RFC 4515 filter string to a filter tuple"""

    try:
        filter_node = _rfc4515_filter_grammar.parse(filter_str)
    except ParseError as e:
        raise LDAPError(str(e))
    return _handle_standard_filter(filter_node)


def _handle_standard_filter(filter_node):
    filtercomp = filter_node.children[1]
    child = filtercomp.children[0]
    if child.expr_name == 'and':
        filterlist = child.children[1]
        return and_(_handle_standard_filter(node) for node in filterlist.children)
    elif child.expr_name == 'or':
        filterlist = child.children[1]
        return or_(_handle_standard_filter(node) for node in filterlist.children)
    elif child.expr_name == 'not':
        return ('not', _handle_standard_filter(child.children[1]))
    elif child.expr_name == 'rfc4515_ava':
        return _handle_rfc4515_ava(child)
    else:
        raise LDAPError('Unhandled condition while parsing filter')


def _handle_rfc4515_ava(ava_node):
    ava_type = ava_node.children[0]
    if ava_type.expr_name == 'simple':
        attr_type = ava_type.children[0].text
        filtertype = ava_type.children[1].text
        attr_value = ava_type.children[2].text
        try:
            return (_filtertypes[filtertype], attr_type, attr_value)
        except KeyError:
            raise LDAPError('Unhandled condition while parsing filter')
    elif ava_type.expr_name == 'substring':
        attr_type = ava_type.children[0].text

        # detect the special case that this should be a presence filter
        if ava_type.children[2].text == '' and ava_type.children[3].text == '*' and ava_type.children[4].text == '':
            return present(attr_type)

        # standard substring
        subs = []
        if ava_type.children[2].text != '':
            subs.append(('initial', ava_type.children[2].text))
        if ava_type.children[3].text != '*':
            for any_sub in ava_type.children[3].children[1].children:
                subs.append(('any', any_sub.children[0].text))
        if ava_type.children[4].text != '':
            subs.append(('final', ava_type.children[4].text))
        return ('substrings', attr_type, subs)
    elif ava_type.expr_name == 'extensible':
        ext_filter = ava_type.children[0]

        num_children = len(ext_filter.children)
        if num_children == 6:
            attr = ext_filter.children[0].text
            dnattrs = (ext_filter.children[1].text == ':dn')
            rule = ext_filter.children[2].text[1:]
            val = ext_filter.children[5].text
        elif num_children == 5:
            attr = None
            dnattrs = (ext_filter.children[0].text == ':dn')
            rule = ext_filter.children[1].text[1:]
            val = ext_filter.children[4].text
        else:
            raise LDAPError('Unhandled condition while parsing filter')
        return ('extensibleMatch', attr or None, dnattrs, rule or None, val)
    else:
        raise LDAPError('Unhandled condition while parsing filter')


def to_string(fil):
    """Reverse :func:`parse_standard_filter`

    :param tuple fil: A filter tuple
    :return: An RFC 4515 compatible filter string
    """
    filter_type = fil[0]
    if filter_type == 'and':
        ret = '(&{0})'.format(''.join(to_string(f) for f in fil[1]))
    elif filter_type == 'or':
        ret = '(|{0})'.format(''.join(to_string(f) for f in fil[1]))
    elif filter_type == 'not':
        ret = '(!{0})'.format(to_string(fil[1]))
    elif filter_type == 'equalityMatch':
        ret = '({0}={1})'.format(fil[1], fil[2])
    elif filter_type == 'approxMatch':
        ret = '({0}~={1})'.format(fil[1], fil[2])
    elif filter_type == 'greaterOrEqual':
        ret = '({0}>={1})'.format(fil[1], fil[2])
    elif filter_type == 'lessOrEqual':
        ret = '({0}<={1})'.format(fil[1], fil[2])
    elif filter_type == 'present':
        ret = '({0}=*)'.format(fil[1])
    elif filter_type == 'substrings':
        subs = fil[2]
        sub_strs = []
        if not subs or subs[0][0] != 'initial':
            sub_strs.append('')
        for sub_type, value in subs:
            sub_strs.append(value)
        if not subs or subs[-1][0] != 'final':
            sub_strs.append('')
        ret = '({0}={1})'.format(fil[1], '*'.join(sub_strs))
    elif filter_type == 'extensibleMatch':
        _, attr, dn_attrs, rule, value = fil
        ret = '({0}{1}{2}:={3})'.format(attr or '', ':dn' if dn_attrs else '', ':' + rule if rule else '', value)
    else:
        raise LDAPError('Unhandled condition while constructing filter string')
    return ret
