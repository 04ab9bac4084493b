# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2019-2026 CERN.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Invenio search sync errors."""


class SearchSyncError(Exception):
    """Base class for index synchronization errors."""


class TargetNotFoundError(SearchSyncError, KeyError):
    """Raised when no synchronization target is configured under a name."""


class MappingNotDefinedError(SearchSyncError):
    """Raised when a mapping is required but the target declares none."""


class SynchronizationError(SearchSyncError):
    """Raised when a synchronization cannot make progress."""


class SynchronizationCancelled(SynchronizationError):
    """Raised when a synchronization was stopped by its cancel event."""
