# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2016-2026 CERN.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Serialize rows into index documents.

Only the fields declared in the mapping of a target are sent to the index.
Fields mapped with nested ``properties`` (``object`` or ``nested`` fields)
are serialized recursively from related objects or dictionaries, and
collections are serialized item by item:

.. code-block:: python

    mapping = {
        'properties': {
            'title': {'type': 'text'},
            'author': {'properties': {'name': {'type': 'keyword'}}},
        },
    }
    serialize(book, mapping)
    # {'title': 'Dune', 'author': {'name': 'Frank Herbert'}}

Values themselves (dates, decimals, UUIDs) are left to the JSON serializer of
the search client.
"""

import sqlalchemy as sa


def _get(obj, name):
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _serialize_value(value, field):
    if isinstance(value, (list, tuple, set)):
        return [_serialize_value(item, field) for item in value]
    if "properties" in field:
        return serialize(value, field)
    return value


def serialize(obj, mapping):
    """Serialize an object restricted to the fields of a mapping.

    :param obj: A model instance, any object or a dictionary.
    :param mapping: Dictionary with the ``properties`` of the index.
    :returns: The document body. Missing (``None``) fields are left out.
    """
    body = {}
    for name, field in mapping.get("properties", {}).items():
        value = _get(obj, name)
        if value is not None:
            body[name] = _serialize_value(value, field)
    return body


def columns_mapping(model):
    """Build a field list covering every column of a model.

    Used to serialize targets that have no mapping: the result carries no
    field types and is not meant to be sent to the cluster.
    """
    return {
        "properties": {
            attr.key: {} for attr in sa.inspect(model).column_attrs
        }
    }
