class LDAPError(Exception):
    """Base class for all exceptions raised by ldapclasses"""
    pass


class LDAPWarning(Warning):
    """Generic LDAP warning category"""
    pass


class LDAPSchemaError(LDAPError):
    """Error relating to setting up the LDAP schema"""
    pass


class SchemaLexError(LDAPSchemaError):
    """Raised when no token matches the schema text at some position

    :var int line: The 1-based line where lexing stopped
    :var str excerpt: A short piece of the unmatched text
    """
    def __init__(self, line, excerpt):
        self.line = line
        self.excerpt = excerpt
        LDAPSchemaError.__init__(self, 'Unexpected input on line {0}: {1!r}'.format(line, excerpt))


class SchemaParseError(LDAPSchemaError):
    """Raised when a token sequence does not match the schema grammar

    :var int line: The 1-based line of the offending token, or of the last token at end of input
    :var str expected: A description of what the grammar wanted
    :var str found: The offending token text, or "end of input"
    """
    def __init__(self, line, expected, found):
        self.line = line
        self.expected = expected
        self.found = found
        LDAPSchemaError.__init__(self, 'Line {0}: expected {1}, found {2}'.format(line, expected, found))


class MissingObjectClassDefinition(LDAPSchemaError):
    """Raised when requested object class names have no parsed definition

    :var list[str] names: Every name that could not be resolved
    """
    def __init__(self, names):
        self.names = list(names)
        LDAPSchemaError.__init__(self, 'Missing objectClass definition: {0}'.format(', '.join(self.names)))


class LDAPConnectionError(LDAPError):
    """Error occurred creating connection to the LDAP server"""
    pass


class InvalidCredentials(LDAPError):
    """The server rejected a bind"""
    pass


class LDAPOperationError(LDAPError):
    """The server returned a non-success result for a write operation

    :var str result: The result name reported by the backend, e.g. ``objectClassViolation``
    """
    def __init__(self, result, msg=None):
        self.result = result
        if msg is None:
            msg = 'Operation failed: {0}'.format(result)
        LDAPError.__init__(self, msg)


class UnexpectedSearchResults(LDAPError):
    """Base class for unhandled search result situations"""
    pass


class NoSearchResults(UnexpectedSearchResults):
    """Got no search results when one or more was required"""
    pass


class NoSuchObject(NoSearchResults):
    """The search base does not exist on the server"""
    pass


class MultipleSearchResults(UnexpectedSearchResults):
    """Got multiple search results when exactly one was required"""
    pass


class MissingUniqueIdentifier(LDAPError):
    """The object has no value for its unique identifier attribute, so no DN can be built"""
    pass


class LDAPValidationError(LDAPError):
    """Raised when an object fails validation before being written"""
    pass


class MissingRequiredAttributes(LDAPValidationError):
    """Raised when an object is missing attributes required by its object classes

    :var list[str] names: The unset required attribute names
    """
    def __init__(self, names):
        self.names = list(names)
        LDAPValidationError.__init__(self, 'Missing required attributes: {0}'.format(', '.join(self.names)))
