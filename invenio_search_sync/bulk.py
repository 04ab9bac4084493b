# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2016-2026 CERN.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Bulk queue for index and delete operations.

Operations are grouped into batches of a fixed size. A batch is sent as one
bulk request as soon as it is full, or when the queue is flushed. The queue
never blocks its caller on a full batch: :meth:`BulkQueue.push` tells it that
the batch is full, and the outcome of every request is announced through the
:data:`~invenio_search_sync.signals.bulk_sent` and
:data:`~invenio_search_sync.signals.bulk_failed` signals.

.. code-block:: python

    queue = BulkQueue(client, size=100)
    bulk_sent.connect(on_sent, sender=queue)

    for book in books:
        queue.push(index_operation('books', str(book.id), serialize(book, m)))
    queue.flush()
"""

import logging
from collections import namedtuple

from .engine import SEARCH_ERRORS
from .signals import bulk_failed, bulk_sent

logger = logging.getLogger(__name__)

INDEX = "index"
DELETE = "delete"


class Operation(
    namedtuple("Operation", ("op_type", "index", "doc_type", "id", "body"))
):
    """A pending index or delete operation."""

    __slots__ = ()

    def actions(self):
        """Return the lines of this operation in a bulk request body."""
        meta = {"_index": self.index, "_id": self.id}
        if self.doc_type:
            meta["_type"] = self.doc_type
        lines = [{self.op_type: meta}]
        if self.op_type == INDEX:
            lines.append(self.body)
        return lines


def index_operation(index, id_, body, doc_type=None):
    """Build an operation (re)indexing a document."""
    return Operation(INDEX, index, doc_type, id_, body)


def delete_operation(index, id_, doc_type=None):
    """Build an operation deleting a document."""
    return Operation(DELETE, index, doc_type, id_, None)


class BulkQueue(object):
    """Accumulate operations and send them in bulk requests.

    Only one batch is in flight at a time. Operations pushed while a batch is
    being sent (e.g. by a signal receiver) are kept for the next batch, which
    is sent once the current request completes.
    """

    def __init__(self, client, size=50):
        """Initialize the queue.

        :param client: The search client.
        :param size: Number of operations in a full batch.
        """
        if size < 1:
            raise ValueError("Bulk size must be a positive integer.")
        self.client = client
        self.size = size
        self._pending = []
        self._in_flight = False
        self._flush_requested = False

    def __len__(self):
        """Return the number of pending operations."""
        return len(self._pending)

    @property
    def in_flight(self):
        """Whether a bulk request is being sent."""
        return self._in_flight

    def filled(self):
        """Check if operations are waiting to be sent."""
        return bool(self._pending)

    def push(self, operation):
        """Add an operation to the pending batch.

        :returns: ``False`` if the operation filled the batch, which is then
            sent (or scheduled after the request in flight), ``True``
            otherwise.
        """
        self._pending.append(operation)
        if len(self._pending) < self.size:
            return True
        self._dispatch()
        return False

    def clear(self):
        """Discard the pending operations.

        :returns: The number of discarded operations.
        """
        count = len(self._pending)
        del self._pending[:]
        self._flush_requested = False
        return count

    def flush(self):
        """Send the pending operations, even if the batch is not full."""
        if not self._pending:
            return
        if self._in_flight:
            self._flush_requested = True
            return
        self._dispatch(force=True)

    def _dispatch(self, force=False):
        if self._in_flight:
            return
        self._in_flight = True
        try:
            while self._pending and (force or len(self._pending) >= self.size):
                batch = self._pending[: self.size]
                del self._pending[: self.size]
                self._send(batch)
                if self._flush_requested:
                    self._flush_requested = False
                    force = True
        finally:
            self._in_flight = False

    def _send(self, batch):
        body = []
        for operation in batch:
            body.extend(operation.actions())

        try:
            response = self.client.bulk(body=body)
        except SEARCH_ERRORS as error:
            logger.warning(
                "Bulk request of %d operation(s) failed.", len(batch), exc_info=True
            )
            bulk_failed.send(self, error=error, count=len(batch))
            return

        # Elasticsearch 8 wraps the body in an ``ObjectApiResponse``.
        result = getattr(response, "body", response)
        if isinstance(result, dict) and result.get("errors"):
            logger.warning(
                "Bulk request of %d operation(s) completed with item errors.",
                len(batch),
            )
        bulk_sent.send(self, count=len(batch), response=response)
