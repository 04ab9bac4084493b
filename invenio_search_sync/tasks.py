# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2015-2026 CERN.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Index syncing tasks."""

from celery import shared_task
from flask import current_app

from .engine import SEARCH_ERRORS
from .indexer import index_by_id
from .proxies import current_search_sync
from .signals import document_indexed, document_removed


@shared_task(ignore_result=True)
def index_document_task(name, id_, body):
    """Index a document serialized when its row was committed.

    Errors are logged and reported with the ``document_indexed`` signal.
    """
    target = current_search_sync.target(name)
    app = current_app._get_current_object()
    try:
        result = index_by_id(
            current_search_sync.client,
            target.index,
            id_,
            body,
            doc_type=target.doc_type,
        )
    except SEARCH_ERRORS as error:
        app.logger.warning(
            "Failed to index document %s in %s.", id_, target.index, exc_info=True
        )
        document_indexed.send(app, name=name, id=id_, result=None, error=error)
        return
    document_indexed.send(app, name=name, id=id_, result=result, error=None)


@shared_task(ignore_result=True)
def remove_document_task(name, id_):
    """Remove the document of a deleted row.

    Errors are logged and reported with the ``document_removed`` signal.
    """
    app = current_app._get_current_object()
    try:
        result = current_search_sync.remove_document(name, id_)
    except SEARCH_ERRORS as error:
        app.logger.warning(
            "Failed to remove document %s of %s.", id_, name, exc_info=True
        )
        document_removed.send(app, name=name, id=id_, result=None, error=error)
        return
    document_removed.send(app, name=name, id=id_, result=result, error=None)
