from ldapclasses import filter, LDAPError
import unittest


class TestFilter(unittest.TestCase):
    good_filters = [
        '(foo=bar)',
        '(foo>=1)',
        '(foo<=1)',
        '(foo~=bar)',
        '(foo:=bar)',
        '(foo:dn:=bar)',
        '(foo:1.2.3.4:=bar)',
        '(:1.2.3.4:=bar)',
        '(foo:dn:1.2.3.4:=bar)',
        '(:dn:1.2.3.4:=bar)',
        '(foo=*)',
        '(foo=*abc*)',
        '(foo=abc*)',
        '(foo=*abc)',
        '(foo=abc*def)',
        '(foo=*abc*def*)',
        '(foo=abc*def*)',
        '(foo=*abc*def*ghj*)',
        '(foo=*abc*def)',
        '(&(foo=bar))',
        '(&(foo=bar)(foo>=1)(foo:1.2.3.4:=bar))',
        '(|(foo=bar))',
        '(|(foo=bar)(foo<=1)(foo=*abc*def))',
        '(!(foo=bar))',
        '(&(foo=bar)(!(foo=bar))(|(foo=bar)(foo<=1)(foo=*abc*def)))',
    ]

    bad_filters = [
        'foo=bar',
        '(foo=bar',
        '(foo<1)',
        '(foo>1)',
        '(foo~bar)',
        '(foo:bar)',
        '(foo*)',
        '(:x:1.2.3.4:=foo)',
        '(::::::=foo)',
    ]

    def test_parse_standard_filter(self):
        """Exercise filter parsing"""
        for f in self.good_filters:
            try:
                filter.parse_standard_filter(f)
            except Exception as e:
                self.fail('Failed on good filter - {0} - {1}: {2}'.format(f, e.__class__.__name__, str(e)))

        for f in self.bad_filters:
            with self.assertRaises(LDAPError):
                filter.parse_standard_filter(f)

    def test_to_string(self):
        """Exercise reverse parsing function"""
        for f in self.good_filters:
            f_obj = filter.parse_standard_filter(f)
            self.assertEqual(f, filter.to_string(f_obj))

    def test_parsed_shape(self):
        tests = [
            ('(uid=testuser)', ('equalityMatch', 'uid', 'testuser')),
            ('(uidNumber>=1000)', ('greaterOrEqual', 'uidNumber', '1000')),
            ('(cn~=jon)', ('approxMatch', 'cn', 'jon')),
            ('(mail=*)', ('present', 'mail')),
            ('(cn=a*b*c)', ('substrings', 'cn', [('initial', 'a'), ('any', 'b'), ('final', 'c')])),
            ('(cn=*b*)', ('substrings', 'cn', [('any', 'b')])),
            ('(cn:dn:2.4.6.8.10:=Dino)', ('extensibleMatch', 'cn', True, '2.4.6.8.10', 'Dino')),
            ('(:caseExactMatch:=Fred)', ('extensibleMatch', None, False, 'caseExactMatch', 'Fred')),
            ('(&(uid=a)(!(cn=b)))', ('and', [('equalityMatch', 'uid', 'a'),
                                            ('not', ('equalityMatch', 'cn', 'b'))])),
            ('(|(uid=a)(uid=b))', ('or', [('equalityMatch', 'uid', 'a'), ('equalityMatch', 'uid', 'b')])),
            (r'(cn=a\29b)', ('equalityMatch', 'cn', r'a\29b')),
        ]
        for text, expected in tests:
            self.assertEqual(filter.parse_standard_filter(text), expected, msg=text)

    def test_escape(self):
        self.assertEqual(filter.escape('a(b)*c'), r'a\28b\29\2ac')
        self.assertEqual(filter.escape(r'back\slash'), r'back\5cslash')
        self.assertEqual(filter.escape(1000), '1000')

    def test_construct_filter(self):
        tests = [
            (None, filter.EMPTY_FILTER),
            ([], filter.EMPTY_FILTER),
            ({}, filter.EMPTY_FILTER),
            ('(uid=testuser)', ('equalityMatch', 'uid', 'testuser')),
            (('present', 'uid'), ('present', 'uid')),
            ([('uid', 'testuser'), ('cn', 'Test User')],
             ('and', [('equalityMatch', 'uid', 'testuser'), ('equalityMatch', 'cn', 'Test User')])),
            ({'uidNumber': 1000}, ('and', [('equalityMatch', 'uidNumber', '1000')])),
        ]
        for fil, expected in tests:
            self.assertEqual(filter.construct_filter(fil), expected, msg=repr(fil))

    def test_merge_filter(self):
        a = ('equalityMatch', 'a', '1')
        b = ('equalityMatch', 'b', '2')
        c = ('equalityMatch', 'c', '3')
        tests = [
            (None, None, filter.EMPTY_FILTER),
            (a, None, a),
            (None, [], filter.EMPTY_FILTER),
            (None, b, b),
            (a, b, ('and', [a, b])),
            (('and', [a]), ('and', [b, c]), ('and', [a, b, c])),
            (('and', [a, b]), c, ('and', [c, a, b])),
            (a, ('and', [b, c]), ('and', [a, b, c])),
            ('(a=1)', [('b', '2')], ('and', [a, b])),
        ]
        for lhs, rhs, expected in tests:
            self.assertEqual(filter.merge_filter(lhs, rhs), expected, msg='{0!r} {1!r}'.format(lhs, rhs))

    def test_class_filter(self):
        self.assertEqual(filter.class_filter('posixGroup'), ('equalityMatch', 'objectClass', 'posixGroup'))
        self.assertEqual(filter.class_filter(['account', 'posixAccount']), ('and', [
            ('equalityMatch', 'objectClass', 'account'),
            ('equalityMatch', 'objectClass', 'posixAccount'),
        ]))
        self.assertEqual(filter.class_filter('posixGroup', '(memberUid=testuser)'), ('and', [
            ('equalityMatch', 'memberUid', 'testuser'),
            ('equalityMatch', 'objectClass', 'posixGroup'),
        ]))
        self.assertEqual(filter.class_filter('posixGroup', None), filter.class_filter('posixGroup'))

    def test_builders(self):
        self.assertEqual(filter.not_('(a=1)'), ('not', ('equalityMatch', 'a', '1')))
        self.assertEqual(filter.or_(filter.present(attr) for attr in ('a', 'b')),
                         ('or', [('present', 'a'), ('present', 'b')]))
        self.assertEqual(filter.to_string(filter.EMPTY_FILTER), '(&)')

    def test_to_string_bad(self):
        with self.assertRaises(LDAPError):
            filter.to_string(('bogus', 'a', 'b'))
