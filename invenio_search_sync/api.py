# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2015-2026 CERN.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Index synchronization API."""

import enum
from collections.abc import Mapping

import sqlalchemy as sa
from flask import current_app
from sqlalchemy.orm import load_only

from .bulk import index_operation
from .errors import SynchronizationCancelled, SynchronizationError
from .serializer import columns_mapping, serialize
from .signals import (
    bulk_failed,
    bulk_sent,
    sync_batch_failed,
    sync_batch_sent,
    sync_record_queued,
)
from .utils import record_id


class SyncTarget(object):
    """Binding of a model to a search index."""

    def __init__(
        self,
        name,
        model,
        index=None,
        doc_type=None,
        mapping=None,
        settings=None,
        queue=None,
        batch_size=None,
    ):
        """Initialize the target.

        :param name: Name of the target in ``SEARCH_SYNC_TARGETS``.
        :param model: The SQLAlchemy model class.
        :param index: Name of the index, defaults to the table name.
        :param doc_type: Mapping type, for clusters that still have them.
        :param mapping: Dictionary with the ``properties`` of the index.
        :param settings: Settings used when creating the index.
        :param queue: Bulk queue shared by all synchronizations of the target.
        :param batch_size: Number of rows read from the database at a time.
        """
        self.name = name
        self.model = model
        self.index = index or model.__tablename__
        self.doc_type = doc_type
        self.mapping = mapping
        self.settings = settings
        self.queue = queue
        self.batch_size = batch_size
        self._fields = mapping or columns_mapping(model)

    def __repr__(self):
        """Representation of the target."""
        return "<SyncTarget {0} ({1} -> {2})>".format(
            self.name, self.model.__name__, self.index
        )

    def query(self):
        """Return the query over all rows of the model."""
        return self.model.query

    def serialize(self, record, only=None):
        """Return the index body of a row.

        :param only: Names of the fields to serialize, all mapped fields by
            default.
        """
        fields = self._fields
        if only is not None:
            fields = {
                "properties": {
                    name: field
                    for name, field in fields.get("properties", {}).items()
                    if name in only
                }
            }
        return serialize(record, fields)

    def index_operation(self, record, only=None):
        """Return the bulk operation indexing a row."""
        return index_operation(
            self.index,
            record_id(record),
            self.serialize(record, only=only),
            doc_type=self.doc_type,
        )


class FlowState(enum.Enum):
    """Whether the synchronization may read the next row."""

    FLOWING = "flowing"
    PAUSED = "paused"


_END = object()


class Synchronizer(object):
    """Stream the rows of a target into a bulk queue.

    Rows are read one at a time. The flow is paused for each row pushed to
    the queue, and resumed either right away, or once the queue reports the
    outcome of the bulk request the row filled. When the rows are exhausted,
    the remaining operations are flushed and the index is refreshed.

    Failed bulk requests are announced with
    :data:`~invenio_search_sync.signals.sync_batch_failed` but do not stop
    the synchronization; only a failed refresh makes :meth:`run` raise.
    """

    def __init__(self, target, queue, cancel=None):
        """Initialize the synchronizer.

        :param target: The :class:`SyncTarget` to synchronize.
        :param queue: The :class:`~invenio_search_sync.bulk.BulkQueue` to
            feed. It must not be used by another synchronization at the same
            time.
        :param cancel: Object with an ``is_set()`` method, such as a
            :class:`threading.Event`, stopping the synchronization when set.
        """
        self.target = target
        self.queue = queue
        self.cancel = cancel
        self.flow = FlowState.PAUSED
        self.closed = False
        self.only = None
        self.queued = 0
        self.sent = 0
        self.failed = 0

    def records(self, filters=None, projection=None, options=None):
        """Build the ordered row stream.

        :param filters: Mapping of attribute values or list of SQLAlchemy
            criteria.
        :param projection: Names of the attributes to load.
        :param options: Dictionary with ``order_by``, ``limit`` and
            ``batch_size``.
        """
        options = options or {}
        model = self.target.model
        query = self.target.query()

        if filters:
            if isinstance(filters, Mapping):
                query = query.filter_by(**filters)
            else:
                query = query.filter(*filters)

        if projection:
            columns = [
                attr.key
                for attr in sa.inspect(model).column_attrs
                if attr.key in projection
            ]
            if columns:
                query = query.options(
                    load_only(*[getattr(model, name) for name in columns])
                )

        order_by = options.get("order_by")
        if order_by is None:
            order_by = sa.inspect(model).primary_key
        elif not isinstance(order_by, (list, tuple)):
            order_by = [order_by]
        query = query.order_by(*order_by)

        if options.get("limit") is not None:
            query = query.limit(options["limit"])

        batch_size = (
            options.get("batch_size") or self.target.batch_size or self.queue.size
        )
        return query.yield_per(batch_size)

    def run(self, filters=None, projection=None, options=None):
        """Synchronize the rows matching the filters.

        Any error other than a cancellation is raised after the operations
        still pending in the queue are discarded, so a shared queue starts
        empty the next time.

        :returns: The response of the final index refresh.
        :raises SynchronizationCancelled: If the cancel event was set. The
            rows read until then are indexed and the index is refreshed.
        """
        if self.queue.in_flight:
            raise SynchronizationError(
                "Bulk queue of {} is already sending a batch.".format(self.target.name)
            )

        records = iter(self.records(filters, projection, options))
        self.only = set(projection) if projection else None
        self.flow = FlowState.PAUSED
        self.closed = False

        bulk_sent.connect(self._on_sent, sender=self.queue)
        bulk_failed.connect(self._on_failed, sender=self.queue)
        try:
            cancelled = self._consume(records)
            if self.queue.filled():
                self.queue.flush()
        except Exception:
            self._disconnect()
            discarded = self.queue.clear()
            if discarded:
                current_app.logger.warning(
                    "Synchronization of %s failed, %d queued operation(s) discarded.",
                    self.target.name,
                    discarded,
                )
            raise

        response = self._finalize()
        current_app.logger.info(
            "Synchronized %s: %d queued, %d sent, %d failed.",
            self.target.name,
            self.queued,
            self.sent,
            self.failed,
        )
        if cancelled:
            raise SynchronizationCancelled(
                "Synchronization of {} cancelled after {} record(s).".format(
                    self.target.name, self.queued
                )
            )
        return response

    def _consume(self, records):
        """Push rows until the stream ends or the cancel event is set."""
        self.flow = FlowState.FLOWING
        while self.flow is FlowState.FLOWING:
            if self.cancel is not None and self.cancel.is_set():
                return True
            record = next(records, _END)
            if record is _END:
                self.closed = True
                return False
            self._on_record(record)
        raise SynchronizationError(
            "Synchronization of {} paused with no bulk request pending.".format(
                self.target.name
            )
        )

    def _on_record(self, record):
        self.flow = FlowState.PAUSED
        operation = self.target.index_operation(record, only=self.only)
        # Announced before the push, which may send the batch it completes.
        self.queued += 1
        sync_record_queued.send(self.target, record=record)
        accepted = self.queue.push(operation)
        if accepted:
            self.flow = FlowState.FLOWING

    def _on_sent(self, sender, count=0, **kwargs):
        self.sent += count
        sync_batch_sent.send(self.target, count=count)
        self._resume()

    def _on_failed(self, sender, error=None, count=0, **kwargs):
        self.failed += count
        sync_batch_failed.send(self.target, error=error, count=count)
        self._resume()

    def _resume(self):
        if not self.closed:
            self.flow = FlowState.FLOWING

    def _disconnect(self):
        bulk_sent.disconnect(self._on_sent, sender=self.queue)
        bulk_failed.disconnect(self._on_failed, sender=self.queue)

    def _finalize(self):
        self._disconnect()
        return self.queue.client.indices.refresh(index=self.target.index)
