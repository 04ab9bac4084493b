# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2016-2026 CERN.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Single document operations."""

import logging
import time

from .engine import NotFoundError

logger = logging.getLogger(__name__)


def _document_params(index, id_, doc_type=None):
    params = {"index": index, "id": id_}
    if doc_type:
        params["doc_type"] = doc_type
    return params


def index_by_id(client, index, id_, body, doc_type=None):
    """Index a single document.

    :returns: The response of the search cluster.
    """
    return client.index(body=body, **_document_params(index, id_, doc_type))


def delete_by_id(
    client, index, id_, doc_type=None, retries=3, backoff=0.5, ignore_missing=False
):
    """Delete a single document, retrying while it is reported missing.

    A document deleted right after being indexed may not be visible yet, in
    which case the cluster answers with a ``404``. The delete is then retried
    up to ``retries`` times, ``backoff`` seconds apart. Other errors are
    raised right away.

    :param client: The search client.
    :param index: Name of the index.
    :param id_: Identifier of the document.
    :param doc_type: Optional mapping type of the document.
    :param retries: How many times a missing document is retried.
    :param backoff: Seconds to wait before each retry.
    :param ignore_missing: Return ``None`` instead of raising
        :class:`NotFoundError` when the document is still missing after the
        last retry.
    :returns: The response of the search cluster.
    """
    params = _document_params(index, id_, doc_type)
    while True:
        try:
            return client.delete(**params)
        except NotFoundError:
            if retries <= 0:
                if ignore_missing:
                    return None
                raise
        logger.debug(
            "Document %s/%s not found, retrying delete in %ss (%d left).",
            index,
            id_,
            backoff,
            retries,
        )
        time.sleep(backoff)
        retries -= 1
