# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2015-2026 CERN.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

r"""Mirror database models into Elasticsearch/OpenSearch indices.

Initialization
--------------

Bind your models to indices in the application configuration and initialize
the extension next to Flask-SQLAlchemy:

.. code-block:: python

    # app.py
    from flask import Flask
    from flask_sqlalchemy import SQLAlchemy
    from invenio_search_sync import InvenioSearchSync

    app = Flask('myapp')
    app.config.update(
        SQLALCHEMY_TRACK_MODIFICATIONS=True,
        SEARCH_SYNC_TARGETS={
            'books': {
                'model': 'app.Book',
                'mapping': 'mappings/books-v1.0.0.json',
            },
        },
    )
    db = SQLAlchemy(app)
    search_sync = InvenioSearchSync(app)

Create the index and its mapping, then index every existing row:

.. code-block:: console

    $ flask search-sync init books
    $ flask search-sync run books

Synchronization
---------------

A synchronization streams the rows of a model, ordered by primary key, into
a bulk queue. A full batch is sent as one bulk request and the stream waits
until the request completed before reading the next row. Once every row has
been sent the index is refreshed:

>>> from invenio_search_sync import current_search_sync
>>> current_search_sync.synchronize(
...     'books', filters={'published': True}) # doctest: +SKIP

Failing bulk requests do not stop a synchronization. Subscribe to
:data:`~invenio_search_sync.signals.sync_batch_failed` to be told about them.

Automatic indexing
------------------

With ``SEARCH_SYNC_AUTO_INDEX`` (the default), rows inserted, updated or
deleted through the session are indexed or removed by Celery tasks once the
transaction is committed. The outcome is reported by the
:data:`~invenio_search_sync.signals.document_indexed` and
:data:`~invenio_search_sync.signals.document_removed` signals.
"""

from .ext import InvenioSearchSync
from .proxies import current_search_sync, current_search_sync_client
from .version import __version__

__all__ = (
    "__version__",
    "InvenioSearchSync",
    "current_search_sync",
    "current_search_sync_client",
)
