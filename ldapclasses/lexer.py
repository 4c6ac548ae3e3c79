"""Tokenizer for schema description files

Turns the text of an OpenLDAP-style ``*.schema`` file into a flat list of :class:`Token`. Parenthesized lists of quoted
descriptors and of OIDs are emitted as single opaque tokens (``qdescrs`` and ``oids``); the grammar in
:mod:`ldapclasses.parser` decides how to split them.
"""

from . import rfc4512
from .exceptions import SchemaLexError

from collections import namedtuple
import logging
import re

logger = logging.getLogger(__name__)

Token = namedtuple('Token', 'kind value line')


class TokenKind(object):
    """Token kind constants. Keyword kinds are equal to the keyword text."""
    LPAREN = '('
    RPAREN = ')'

    NAME = 'NAME'
    DESC = 'DESC'
    OBSOLETE = 'OBSOLETE'
    SUP = 'SUP'
    EQUALITY = 'EQUALITY'
    ORDERING = 'ORDERING'
    SUBSTR = 'SUBSTR'
    SYNTAX = 'SYNTAX'
    SINGLE_VALUE = 'SINGLE-VALUE'
    COLLECTIVE = 'COLLECTIVE'
    NO_USER_MODIFICATION = 'NO-USER-MODIFICATION'
    USAGE = 'USAGE'
    ABSTRACT = 'ABSTRACT'
    STRUCTURAL = 'STRUCTURAL'
    AUXILIARY = 'AUXILIARY'
    MUST = 'MUST'
    MAY = 'MAY'

    ATTRIBUTE_TYPE = 'attributetype'
    OBJECT_CLASS = 'objectclass'
    OBJECT_IDENTIFIER = 'objectidentifier'
    LDAP_SYNTAX = 'ldapsyntax'

    USAGE_VALUE = 'usage'
    XSTRING = 'xstring'
    NUMERICOID = 'numericoid'
    QDESCRS = 'qdescrs'
    QDSTRING = 'qdstring'
    WOID = 'woid'
    NOIDLEN = 'noidlen'
    OIDS = 'oids'


PROPERTY_KEYWORDS = (
    TokenKind.NAME,
    TokenKind.DESC,
    TokenKind.OBSOLETE,
    TokenKind.SUP,
    TokenKind.EQUALITY,
    TokenKind.ORDERING,
    TokenKind.SUBSTR,
    TokenKind.SYNTAX,
    TokenKind.SINGLE_VALUE,
    TokenKind.COLLECTIVE,
    TokenKind.NO_USER_MODIFICATION,
    TokenKind.USAGE,
    TokenKind.ABSTRACT,
    TokenKind.STRUCTURAL,
    TokenKind.AUXILIARY,
    TokenKind.MUST,
    TokenKind.MAY,
)

DEFINITION_KEYWORDS = (
    TokenKind.ATTRIBUTE_TYPE,
    TokenKind.OBJECT_CLASS,
    TokenKind.OBJECT_IDENTIFIER,
    TokenKind.LDAP_SYNTAX,
)

_definition_patterns = (
    (TokenKind.ATTRIBUTE_TYPE, r'attribute[tT]ype'),
    (TokenKind.OBJECT_CLASS, r'object[cC]lass'),
    (TokenKind.OBJECT_IDENTIFIER, r'object[iI]dentifier'),
    (TokenKind.LDAP_SYNTAX, r'ldap[sS]yntax'),
)

# precedence order; a kind of None means the match is discarded
_rule_patterns = (
    [(TokenKind.LPAREN, r'\('), (TokenKind.RPAREN, r'\)')] +
    [(kw, re.escape(kw)) for kw in PROPERTY_KEYWORDS] +
    list(_definition_patterns) +
    [
        (TokenKind.USAGE_VALUE, rfc4512.usage),
        (TokenKind.XSTRING, rfc4512.xstring),
        (TokenKind.NUMERICOID, r'(?:' + rfc4512.fakenumericoid + r'|' + rfc4512.numericoid + r')'),
        (TokenKind.QDESCRS, rfc4512.qdescrs),
        (TokenKind.QDSTRING, rfc4512.qdstring),
        (TokenKind.WOID, rfc4512.woid),
        (TokenKind.NOIDLEN, rfc4512.noidlen),
        (TokenKind.OIDS, rfc4512.oids),
        (None, rfc4512.whitespace),
        (None, rfc4512.comment),
    ]
)

_rules = tuple((kind, re.compile(pattern)) for kind, pattern in _rule_patterns)

_EXCERPT_LENGTH = 20


def _excerpt(text, pos):
    return text[pos:pos + _EXCERPT_LENGTH].split('\n')[0]


def iter_tokens(text):
    """Generate :class:`Token` objects from schema description text.

    At each position every rule is tried and the longest match wins. Ties go to the rule listed first, so keywords
    beat descriptors of the same spelling and a numeric OID beats a WOId.

    :param text: The full text of a schema file
    :type text: str or bytes
    :raises SchemaLexError: if no rule matches at some position
    """
    if isinstance(text, bytes):
        text = text.decode('utf-8')
    pos = 0
    line = 1
    end = len(text)
    while pos < end:
        best_kind = None
        best_match = None
        for kind, regex in _rules:
            m = regex.match(text, pos)
            if m is None or m.end() == pos:
                continue
            if best_match is None or m.end() > best_match.end():
                best_kind = kind
                best_match = m
        if best_match is None:
            raise SchemaLexError(line, _excerpt(text, pos))
        value = best_match.group(0)
        if best_kind is not None:
            yield Token(best_kind, value, line)
        line += value.count('\n')
        pos = best_match.end()


def lex(text):
    """Tokenize a whole schema file.

    :param text: The full text of a schema file
    :type text: str or bytes
    :return: The tokens in source order
    :rtype: list[Token]
    :raises SchemaLexError: if no rule matches at some position
    """
    tokens = list(iter_tokens(text))
    logger.debug('Lexed {0} tokens'.format(len(tokens)))
    return tokens
