# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2015-2026 CERN.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Proxy objects for easier access to application objects."""

from flask import current_app
from werkzeug.local import LocalProxy


def _get_current_search_sync():
    """Return current state of the search sync extension."""
    return current_app.extensions["invenio-search-sync"]


def _get_current_search_sync_client():
    """Return current search client."""
    return _get_current_search_sync().client


current_search_sync = LocalProxy(_get_current_search_sync)
current_search_sync_client = LocalProxy(_get_current_search_sync_client)
