"""Grammar for schema description files

Consumes the tokens produced by :mod:`ldapclasses.lexer` and builds a list of :class:`Definition` objects. Supported
top-level statements::

    attributetype ( <oid> <attribute type property>* )
    objectclass ( <oid> <object class property>* )
    objectidentifier <name> <numeric oid>
    ldapsyntax ( <oid> <syntax property>* )

Properties may appear in any order and any number of times; every occurrence is retained in source order. Only the
properties needed to derive fields from object classes are kept, the rest are checked for shape and dropped.
"""

from .exceptions import SchemaParseError
from .lexer import TokenKind, DEFINITION_KEYWORDS, lex
from .utils import collapse_whitespace

from collections import deque
import logging
import re

logger = logging.getLogger(__name__)


class Kind(object):
    """Object class kinds"""
    ABSTRACT = 'abstract'
    STRUCTURAL = 'structural'
    AUXILIARY = 'auxiliary'


def _copy(value):
    if isinstance(value, list):
        return list(value)
    return value


class Definition(object):
    """A parsed top-level schema statement.

    :var str oid: The leading OID (numeric, macro-based, or a bare descriptor). Not interpreted.
    :var tuple properties: Ordered ``(key, value)`` pairs. Keys may repeat.
    :var int line: The line of the definition keyword
    """
    DEFINITION_TYPE = None

    def __init__(self, oid, properties=(), line=None):
        self.oid = oid
        self.properties = tuple(properties)
        self.line = line

    def get(self, key, default=None):
        """Get the value of the first property named ``key``. List values are copies."""
        for prop_key, value in self.properties:
            if prop_key == key:
                return _copy(value)
        return default

    def get_all(self, key):
        """Get the values of every property named ``key``, in source order

        :rtype: list
        """
        return [_copy(value) for prop_key, value in self.properties if prop_key == key]

    @property
    def names(self):
        """All aliases from the ``name`` property"""
        return self.get('name', [])

    @property
    def canonical_name(self):
        """The first alias"""
        names = self.names
        if names:
            return names[0]
        return None

    def __eq__(self, other):
        if not isinstance(other, Definition):
            return NotImplemented
        return (self.DEFINITION_TYPE == other.DEFINITION_TYPE and
                self.oid == other.oid and
                self.properties == other.properties)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return '<{0} {1} {2!r}>'.format(self.__class__.__name__, self.oid, list(self.properties))


class AttributeTypeDefinition(Definition):
    DEFINITION_TYPE = TokenKind.ATTRIBUTE_TYPE


class ObjectClassDefinition(Definition):
    DEFINITION_TYPE = TokenKind.OBJECT_CLASS


class LdapSyntaxDefinition(Definition):
    DEFINITION_TYPE = TokenKind.LDAP_SYNTAX


class ObjectIdentifierDefinition(Definition):
    """An OID macro. Parsed, but never included in :func:`parse` output."""
    DEFINITION_TYPE = TokenKind.OBJECT_IDENTIFIER


## Splitting of compound tokens


_qdescrs_delims = re.compile(r'[\s()]+')
_oids_delims = re.compile(r'[\s()$]+')


def strip_quotes(qdstring):
    """Remove the surrounding single quotes from a quoted string token"""
    return qdstring[1:-1]


def split_qdescrs(raw):
    """Split the raw text of a ``qdescrs`` token into unquoted descriptors

    >>> split_qdescrs("( 'uid' 'userid' )")
    ['uid', 'userid']
    """
    return [qdescr.strip("'") for qdescr in _qdescrs_delims.split(raw) if qdescr]


def split_oids(raw):
    """Split the raw text of an ``oids`` token into its OIDs

    >>> split_oids('( cn $ uid $ uidNumber )')
    ['cn', 'uid', 'uidNumber']
    """
    return [oid for oid in _oids_delims.split(raw) if oid]


# descriptors that lex as keywords are still valid OID references, e.g. "MUST objectClass"
_OID_KINDS = (TokenKind.WOID, TokenKind.NUMERICOID, TokenKind.USAGE_VALUE) + DEFINITION_KEYWORDS
_NOIDLEN_KINDS = (TokenKind.NOIDLEN, TokenKind.NUMERICOID, TokenKind.WOID)
_DEFINITION_OID_KINDS = (TokenKind.NUMERICOID, TokenKind.WOID)


class SchemaParser(object):
    """Recursive descent parser over a token list

    :param list[Token] tokens: Output of :func:`ldapclasses.lexer.lex`
    """
    def __init__(self, tokens):
        self.tokens = deque(tokens)
        if tokens:
            self._last_line = tokens[-1].line
        else:
            self._last_line = 1

    def parse(self):
        """Parse every definition

        :return: The retained definitions in source order
        :rtype: list[Definition]
        :raises SchemaParseError: if the tokens do not match the grammar
        """
        definitions = []
        while self.tokens:
            definition = self._definition()
            if definition is not None:
                definitions.append(definition)
        return definitions

    ## token helpers

    def _next(self, expected):
        try:
            return self.tokens.popleft()
        except IndexError:
            raise SchemaParseError(self._last_line, expected, 'end of input')

    def _expect(self, kinds, expected):
        token = self._next(expected)
        if token.kind not in kinds:
            raise SchemaParseError(token.line, expected, repr(token.value))
        return token

    ## top level

    def _definition(self):
        token = self._expect(DEFINITION_KEYWORDS, 'attributetype, objectclass, objectidentifier or ldapsyntax')
        if token.kind == TokenKind.OBJECT_IDENTIFIER:
            name = self._expect(_OID_KINDS, 'an OID macro name')
            oid = self._expect((TokenKind.NUMERICOID,), 'a numeric OID')
            logger.debug('Skipping objectidentifier {0} {1}'.format(name.value, oid.value))
            return None
        elif token.kind == TokenKind.LDAP_SYNTAX:
            oid, _ = self._body(self._syntax_property)
            return LdapSyntaxDefinition(oid, (), token.line)
        elif token.kind == TokenKind.ATTRIBUTE_TYPE:
            oid, properties = self._body(self._attribute_type_property)
            self._check_name(token, oid, properties)
            return AttributeTypeDefinition(oid, properties, token.line)
        else:
            oid, properties = self._body(self._object_class_property)
            self._check_name(token, oid, properties)
            return ObjectClassDefinition(oid, properties, token.line)

    def _body(self, property_handler):
        token = self._next('"("')
        if token.kind == TokenKind.OIDS:
            # "( 1.2.3 )" is one oids token
            oids = split_oids(token.value)
            if len(oids) == 1:
                return oids[0], []
            raise SchemaParseError(token.line, '"("', repr(token.value))
        elif token.kind != TokenKind.LPAREN:
            raise SchemaParseError(token.line, '"("', repr(token.value))

        oid = self._expect(_DEFINITION_OID_KINDS, 'an OID').value
        properties = []
        while True:
            token = self._next('a property or ")"')
            if token.kind == TokenKind.RPAREN:
                break
            prop = property_handler(token)
            if prop is not None:
                properties.append(prop)
        return oid, properties

    def _check_name(self, keyword, oid, properties):
        names = [value for key, value in properties if key == 'name']
        if not names:
            found = 'no NAME'
        elif len(names) > 1:
            found = '{0} NAME clauses'.format(len(names))
        elif not names[0]:
            found = 'an empty NAME list'
        else:
            return
        raise SchemaParseError(keyword.line, 'exactly one non-empty NAME in {0} {1}'.format(keyword.value, oid), found)

    ## properties

    def _shared_property(self, token, expected):
        if token.kind == TokenKind.NAME:
            return ('name', self._real_qdescrs())
        elif token.kind == TokenKind.DESC:
            desc = self._expect((TokenKind.QDSTRING,), 'a quoted string').value
            # long descriptions are commonly wrapped across lines
            return ('desc', [collapse_whitespace(strip_quotes(desc))])
        elif token.kind == TokenKind.OBSOLETE:
            return ('obsolete', True)
        elif token.kind == TokenKind.SUP:
            return ('sup', self._real_oids())
        elif token.kind == TokenKind.XSTRING:
            self._qdstrings()
            return None
        raise SchemaParseError(token.line, expected, repr(token.value))

    def _object_class_property(self, token):
        if token.kind == TokenKind.ABSTRACT:
            return ('kind', Kind.ABSTRACT)
        elif token.kind == TokenKind.STRUCTURAL:
            return ('kind', Kind.STRUCTURAL)
        elif token.kind == TokenKind.AUXILIARY:
            return ('kind', Kind.AUXILIARY)
        elif token.kind == TokenKind.MUST:
            return ('must', self._real_oids())
        elif token.kind == TokenKind.MAY:
            return ('may', self._real_oids())
        return self._shared_property(token, 'an object class property or ")"')

    def _attribute_type_property(self, token):
        if token.kind in (TokenKind.EQUALITY, TokenKind.ORDERING, TokenKind.SUBSTR):
            self._expect(_OID_KINDS, 'a matching rule OID')
            return None
        elif token.kind == TokenKind.SYNTAX:
            self._expect(_NOIDLEN_KINDS, 'a syntax OID')
            return None
        elif token.kind in (TokenKind.SINGLE_VALUE, TokenKind.COLLECTIVE, TokenKind.NO_USER_MODIFICATION):
            return None
        elif token.kind == TokenKind.USAGE:
            self._expect((TokenKind.USAGE_VALUE,), 'an attribute usage')
            return None
        return self._shared_property(token, 'an attribute type property or ")"')

    def _syntax_property(self, token):
        if token.kind == TokenKind.DESC:
            self._expect((TokenKind.QDSTRING,), 'a quoted string')
        elif token.kind == TokenKind.XSTRING:
            self._qdstrings()
        else:
            raise SchemaParseError(token.line, 'a syntax property or ")"', repr(token.value))
        return None

    ## values

    def _real_qdescrs(self):
        token = self._next('a quoted name or list of names')
        if token.kind == TokenKind.QDESCRS:
            return split_qdescrs(token.value)
        elif token.kind == TokenKind.QDSTRING:
            return [strip_quotes(token.value)]
        elif token.kind == TokenKind.LPAREN:
            return self._qdstring_list()
        raise SchemaParseError(token.line, 'a quoted name or list of names', repr(token.value))

    def _real_oids(self):
        token = self._next('an OID or list of OIDs')
        if token.kind == TokenKind.OIDS:
            return split_oids(token.value)
        elif token.kind in _OID_KINDS:
            return [token.value]
        raise SchemaParseError(token.line, 'an OID or list of OIDs', repr(token.value))

    def _qdstrings(self):
        token = self._next('a quoted string or list of strings')
        if token.kind == TokenKind.QDSTRING:
            return [strip_quotes(token.value)]
        elif token.kind == TokenKind.QDESCRS:
            return split_qdescrs(token.value)
        elif token.kind == TokenKind.LPAREN:
            return self._qdstring_list()
        raise SchemaParseError(token.line, 'a quoted string or list of strings', repr(token.value))

    def _qdstring_list(self):
        values = []
        while True:
            token = self._expect((TokenKind.QDSTRING, TokenKind.RPAREN), 'a quoted string or ")"')
            if token.kind == TokenKind.RPAREN:
                return values
            values.append(strip_quotes(token.value))


def parse(text):
    """Parse the text of a schema description file

    :param text: The full file content
    :type text: str or bytes
    :return: Attribute type, object class and ldapsyntax definitions in source order. objectidentifier macros are
             accepted but not returned.
    :rtype: list[Definition]
    :raises SchemaLexError: if the text cannot be tokenized
    :raises SchemaParseError: if the tokens do not match the grammar
    """
    definitions = SchemaParser(lex(text)).parse()
    logger.debug('Parsed {0} definitions'.format(len(definitions)))
    return definitions
