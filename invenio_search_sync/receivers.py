# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2015-2026 CERN.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Index and remove documents when their rows are committed.

Documents are serialized before the commit, while the rows can still be
loaded, and the Celery tasks updating the cluster are only sent once the
commit succeeded. A search cluster that is down therefore never makes a
database write fail.
"""

from flask import g
from flask_sqlalchemy.track_modifications import (
    before_models_committed,
    models_committed,
)
from kombu.exceptions import OperationalError
from sqlalchemy.orm import object_session

from .tasks import index_document_task, remove_document_task
from .utils import record_id

_PENDING = "_search_sync_pending"


def collect_changes(sender, changes):
    """Prepare the tasks for the committed rows of synchronized models."""
    state = sender.extensions.get("invenio-search-sync")
    if state is None or not sender.config.get("SEARCH_SYNC_AUTO_INDEX"):
        return

    # New rows get their primary key on flush.
    sessions = {object_session(obj) for obj, _ in changes}
    for session in sessions - {None}:
        session.flush()

    pending = []
    for obj, change in changes:
        target = state.target_for(obj)
        if target is None:
            continue
        if change == "delete":
            pending.append((remove_document_task, (target.name, record_id(obj))))
        else:
            pending.append(
                (
                    index_document_task,
                    (target.name, record_id(obj), target.serialize(obj)),
                )
            )
    setattr(g, _PENDING, pending)


def send_changes(sender, changes):
    """Send the tasks prepared for the commit."""
    for task, args in g.pop(_PENDING, []):
        try:
            task.delay(*args)
        except OperationalError:
            sender.logger.exception("Could not send %s%r.", task.name, args)


def connect_receivers():
    """Connect the commit receivers."""
    before_models_committed.connect(collect_changes)
    models_committed.connect(send_changes)
