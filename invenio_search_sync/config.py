# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2015-2026 CERN.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Configuration options for Invenio-Search-Sync."""

#
# Client configuration
#

SEARCH_SYNC_CLIENT_CONFIG = None
"""Dictionary of options for the Elasticsearch/OpenSearch client.

The value of this variable is passed to :py:class:`elasticsearch.Elasticsearch`
(or :py:class:`opensearchpy.OpenSearch`) as keyword arguments and is used to
configure the client.

If you specify the key ``hosts`` in this dictionary, the configuration variable
:py:data:`~invenio_search_sync.config.SEARCH_SYNC_HOSTS` will have no effect.
"""

SEARCH_SYNC_HOSTS = None  # default localhost
"""Search cluster hosts."""

SEARCH_SYNC_INDEX_PREFIX = ""
"""Any target index will be prefixed with this string.

Useful to host multiple instances of the app on the same cluster, for example
on one app you can set it to `dev-` and on the other to `prod-`.
"""

#
# Synchronization targets
#

SEARCH_SYNC_TARGETS = {}
"""Model to index bindings.

Example:

.. code-block:: python

    SEARCH_SYNC_TARGETS = {
        'books': {
            'model': 'my_site.models.Book',
            'index': 'books-v1.0.0',
            'mapping': 'my_site/mappings/books-v1.0.0.json',
            'bulk': {
                'size': 100,
                'batch_size': 200,
            },
        },
    }

``index`` defaults to the table name of the model and ``doc_type`` to
``None`` (no mapping type). ``mapping`` is either a dictionary with the
``properties`` of the index or the path to a JSON file holding the full index
definition (``mappings`` and ``settings``). Only the fields listed in the
mapping are sent to the index; without a mapping, every column is sent.

When ``bulk`` is given, the target keeps one bulk queue of ``size``
operations that is reused by all its synchronizations, and ``batch_size``
sets how many rows are read from the database at a time.
"""

SEARCH_SYNC_BULK_SIZE = 50
"""Default number of operations sent in a single bulk request."""

SEARCH_SYNC_DELETE_RETRIES = 3
"""How many times a delete of a missing document is retried.

A document removed right after being created may not be visible yet in the
search cluster.
"""

SEARCH_SYNC_DELETE_BACKOFF = 0.5
"""Seconds to wait between two delete attempts."""

SEARCH_SYNC_AUTO_INDEX = True
"""Index and remove documents when their rows are committed.

Requires ``SQLALCHEMY_TRACK_MODIFICATIONS`` to be enabled. The search cluster
is updated by Celery tasks sent after the commit, so a failing cluster never
prevents a database write.
"""
