# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2016-2026 CERN.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Signals sent while mirroring records into the search cluster."""

from blinker import Namespace

_signals = Namespace()

bulk_sent = _signals.signal("bulk-sent")
"""Signal sent after a bulk request succeeded.

The sender is the :class:`~invenio_search_sync.bulk.BulkQueue`. Receivers
get the number of operations of the batch as ``count`` and the cluster
response as ``response``.
"""

bulk_failed = _signals.signal("bulk-failed")
"""Signal sent when a bulk request could not be completed.

The sender is the :class:`~invenio_search_sync.bulk.BulkQueue`. Receivers
get the client exception as ``error`` and the size of the lost batch as
``count``.
"""

sync_record_queued = _signals.signal("sync-record-queued")
"""Signal sent for each row pushed to the bulk queue during a synchronization.

The sender is the :class:`~invenio_search_sync.api.SyncTarget` and the row is
passed as ``record``.
"""

sync_batch_sent = _signals.signal("sync-batch-sent")
"""Signal sent when a batch of a synchronization was accepted (``count``)."""

sync_batch_failed = _signals.signal("sync-batch-failed")
"""Signal sent when a batch of a synchronization failed (``error``)."""

document_indexed = _signals.signal("document-indexed")
"""Signal sent after a committed row was indexed.

The sender is the Flask application. Receivers get the target ``name``, the
document ``id``, and either ``result`` or ``error``.
"""

document_removed = _signals.signal("document-removed")
"""Signal sent after a deleted row was removed from its index.

Same arguments as :data:`document_indexed`.
"""
