from setuptools import setup, find_packages

with open('VERSION') as f:
    version = f.read().strip()

with open('README.rst') as f:
    long_description = f.read()

with open('requirements.txt') as f:
    install_requires = f.read().split()

setup(
    name='ldapclasses',
    version=version,
    description='OpenLDAP schema parsing and class-based LDAP entry management.',
    long_description=long_description,
    keywords='ldap schema rfc4512',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Natural Language :: English',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: Implementation :: CPython',
        'Operating System :: OS Independent',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'Topic :: System :: Systems Administration :: Authentication/Directory :: LDAP',
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
    ],
    packages=find_packages(exclude=['tests']),
    install_requires=install_requires,
    extras_require={
        'test': ['pytest'],
    },
)
