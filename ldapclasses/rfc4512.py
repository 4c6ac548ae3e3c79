"""Translations of ABNF specs to regex from RFC 4512, extended for OpenLDAP schema files

https://tools.ietf.org/html/rfc4512
"""

ALPHA = r'[A-Za-z]'
DIGIT = r'[0-9]'
HEX = r'[0-9A-Fa-f]'

WSP = r'\s*'

# OpenLDAP allows ";" for attribute options
keychar = r'[A-Za-z0-9;-]'
keystring = ALPHA + keychar + r'*'

# a bare number is accepted as well, OID macros are often suffixed with one
numericoid = DIGIT + r'+(?:\.' + DIGIT + r'+)*'
descr = keystring

# OID macro reference, e.g. OLcfgAt:1.2
fakenumericoid = descr + r':' + numericoid

woid = r'(?:' + descr + r'|' + numericoid + r')'

qdescr = r"'" + descr + r"'"
qdescrlist = r'(?:' + qdescr + WSP + r')*'
qdescrs = r'\(' + WSP + qdescrlist + r'\)'

qdstring = r"'[^']*'"

oidlist = woid + r'(?:' + WSP + r'\$' + WSP + woid + r')*'
oids = r'\(' + WSP + oidlist + WSP + r'\)'

noidlen = numericoid + r'\{' + DIGIT + r'+\}'

xstring = r'X-[A-Za-z_-]+'

usage = r'(?:userApplications|directoryOperation|distributedOperation|dSAOperation)'

comment = r'#[^\n]*'
whitespace = r'\s+'
