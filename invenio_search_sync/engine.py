# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2015-2026 CERN.
# Copyright (C)      2022 University Münster.
# Copyright (C)      2022 TU Wien.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Transparency module for importing the chosen search engine.

This module imports the ``elasticsearch`` or ``opensearchpy`` package based
on availability, and provides it as ``search``, together with the client
class and the errors the synchronization code needs to tell apart:

- ``NotFoundError`` is raised by single-document calls on a missing
  document.
- ``SEARCH_ERRORS`` covers every failure of a request, at the transport
  level or reported by the cluster.
"""

ES = "Elasticsearch"
OS = "OpenSearch"

try:
    # fail if both ES and OS packages are installed
    import elasticsearch
    import opensearchpy
except ModuleNotFoundError:
    # only one or zero are installed

    try:
        import elasticsearch as search

        SearchEngine = search.Elasticsearch
        SEARCH_DISTRIBUTION = ES

    except ModuleNotFoundError:
        import opensearchpy as search

        SearchEngine = search.OpenSearch
        SEARCH_DISTRIBUTION = OS

else:
    # no exception raised, both are installed. Fail.
    raise ImportError(
        "Elasticsearch and OpenSearch libraries cannot be installed both at the same time. Please uninstall the one that you are not using."
    )


NotFoundError = search.NotFoundError

# Elasticsearch 8 split HTTP errors (``ApiError``) from connection errors
# (``TransportError``); older clients and OpenSearch derive both from
# ``TransportError``.
SEARCH_ERRORS = (search.TransportError,)
if hasattr(search, "ApiError"):
    SEARCH_ERRORS += (search.ApiError,)


def check_search_version(distribution, version):
    """Check if the search in use matches the given distribution and version.

    The ``version`` argument can either be a number or a function accepting one
    argument.
    In the first case, the specified number will be compared for equality with
    the major part of the search version (e.g. 7 for ES 7.x).
    For the second variant, the specified function will be called with the major
    version as argument.
    An example would be: ``lambda v: v >= 7``
    """
    if SEARCH_DISTRIBUTION.lower() != distribution.lower():
        return False

    if not callable(version):
        return search.VERSION[0] == version
    else:
        return version(search.VERSION[0])


def uses_es8():
    """Check if the Elasticsearch 8+ client is in use."""
    return check_search_version(ES, version=lambda v: v >= 8)


__all__ = (
    "ES",
    "OS",
    "NotFoundError",
    "SEARCH_DISTRIBUTION",
    "SEARCH_ERRORS",
    "SearchEngine",
    "check_search_version",
    "search",
    "uses_es8",
)
