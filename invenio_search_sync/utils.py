# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2015-2026 CERN.
# Copyright (C)      2022 TU Wien.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Utility functions for search sync."""

import json

import sqlalchemy as sa
from flask import current_app


def prefix_index(index, prefix=None, app=None):
    """Prefixes the given index if needed.

    :param index: Name of the index to prefix.
    :param prefix: Force a prefix.
    :param app: Flask app to get the prefix config from.
    :returns: A string with the new index name prefixed if needed.
    """
    app = app or current_app
    index_prefix = (
        prefix
        if prefix is not None
        else (app.config.get("SEARCH_SYNC_INDEX_PREFIX")) or ""
    )
    return index_prefix + index


def load_index_definition(mapping):
    """Load an index definition.

    :param mapping: A dictionary or the path to a JSON file.
    :returns: A ``(mapping, settings)`` tuple. Index files written for the
        search module (``{"mappings": ..., "settings": ...}``) are unwrapped.
    """
    if mapping is None:
        return None, None
    if isinstance(mapping, str):
        with open(mapping, "r") as body:
            mapping = json.load(body)
    if "mappings" in mapping:
        return mapping["mappings"], mapping.get("settings")
    return mapping, None


def record_id(record):
    """Return the primary key of a row as a document identifier."""
    identity = sa.inspect(record).identity
    if identity is None:
        raise ValueError("Record {!r} has not been persisted.".format(record))
    if len(identity) != 1:
        raise ValueError(
            "Record {!r} has a composite primary key, documents need a "
            "single column identifier.".format(record)
        )
    return str(identity[0])
