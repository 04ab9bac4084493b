# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2015-2026 CERN.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Invenio module mirroring database models into search indices."""

import os

from setuptools import find_packages, setup

readme = open('README.rst').read()
history = open('CHANGES.rst').read()

tests_require = [
    'check-manifest>=0.35',
    'coverage>=4.0',
    'elasticsearch>=7.0.0,<9.0.0',
    'isort>=4.2.15',
    'pydocstyle>=1.0.0',
    'pytest-cov>=3.0.0',
    'pytest-random-order>=0.5.4',
    'pytest>=7.0.0',
]

extras_require = {
    'docs': [
        'Sphinx>=4.0.0',
    ],
    # Search engine client
    'elasticsearch7': [
        'elasticsearch>=7.0.0,<8.0.0',
    ],
    'elasticsearch8': [
        'elasticsearch>=8.0.0,<9.0.0',
    ],
    'opensearch2': [
        'opensearch-py>=2.0.0,<3.0.0',
    ],
    'tests': tests_require,
}

extras_require['all'] = []
for name, reqs in extras_require.items():
    if name[0] == ':' or name in (
            'elasticsearch7', 'elasticsearch8', 'opensearch2'):
        continue
    extras_require['all'].extend(reqs)

install_requires = [
    'blinker>=1.6',
    'celery>=5.2.0',
    'Flask>=2.2.0',
    'Flask-SQLAlchemy>=3.0.0',
    'kombu>=5.2.0',
    'SQLAlchemy>=1.4.0',
]

packages = find_packages(exclude=['tests', 'tests.*'])

# Get the version string. Cannot be done with import!
g = {}
with open(os.path.join('invenio_search_sync', 'version.py'), 'rt') as fp:
    exec(fp.read(), g)
    version = g['__version__']

setup(
    name='invenio-search-sync',
    version=version,
    description=__doc__,
    long_description=readme + '\n\n' + history,
    keywords='invenio search elasticsearch opensearch synchronization',
    license='MIT',
    author='CERN',
    author_email='info@inveniosoftware.org',
    url='https://github.com/inveniosoftware/invenio-search-sync',
    packages=packages,
    zip_safe=False,
    include_package_data=True,
    platforms='any',
    entry_points={
        'invenio_base.apps': [
            'invenio_search_sync = invenio_search_sync:InvenioSearchSync',
        ],
        'invenio_celery.tasks': [
            'invenio_search_sync = invenio_search_sync.tasks',
        ],
    },
    extras_require=extras_require,
    install_requires=install_requires,
    tests_require=tests_require,
    python_requires='>=3.8',
    classifiers=[
        'Environment :: Web Environment',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Topic :: Internet :: WWW/HTTP :: Dynamic Content',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: Implementation :: CPython',
        'Development Status :: 4 - Beta',
    ],
)
