import codecs
import os
import re

from setuptools import find_packages
from setuptools import setup


def read_file(filename, encoding='utf8'):
    """Read unicode from given file."""
    with codecs.open(filename, encoding=encoding) as fd:
        return fd.read()


here = os.path.abspath(os.path.dirname(__file__))

# read version number (and other metadata) from package init
init_fn = os.path.join(here, 'src', 'apache_modssl', '__init__.py')
meta = dict(re.findall(r"""__([a-z]+)__ = '([^']+)""", read_file(init_fn)))

readme = read_file(os.path.join(here, 'README.rst'))
version = meta['version']

install_requires = [
    'ConfigArgParse>=1.5.3',
    'distro>=1.0.1',
    'Jinja2>=3.0',
]

test_extras = [
    'coverage',
    'pytest',
    'pytest-cov',
]

dev_extras = [
    'mypy',
    'pylint',
]

setup(
    name='apache-modssl',
    version=version,
    description="Install and configure mod_ssl for the Apache HTTP Server",
    long_description=readme,
    license='Apache License 2.0',
    python_requires='>=3.8',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Environment :: Console',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: POSIX :: Linux',
        'Operating System :: POSIX :: BSD :: FreeBSD',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Internet :: WWW/HTTP',
        'Topic :: Security',
        'Topic :: System :: Installation/Setup',
        'Topic :: System :: Systems Administration',
        'Topic :: Utilities',
    ],

    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    package_data={'apache_modssl': ['_internal/templates/*.j2']},
    include_package_data=True,

    install_requires=install_requires,
    extras_require={
        'test': test_extras,
        'dev': dev_extras + test_extras,
    },

    entry_points={
        'console_scripts': [
            'apache-modssl = apache_modssl.__main__:main',
        ],
    },
)
