# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2015-2026 CERN.
# Copyright (C)      2022 TU Wien.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Invenio module mirroring database models into search indices."""

from werkzeug.utils import cached_property, import_string

from . import config
from .api import SyncTarget, Synchronizer
from .bulk import BulkQueue
from .cli import sync as sync_cmd
from .engine import SearchEngine
from .errors import MappingNotDefinedError, TargetNotFoundError
from .indexer import delete_by_id, index_by_id
from .utils import load_index_definition, prefix_index, record_id


class _SearchSyncState(object):
    """Store connection to the search client and the sync targets."""

    def __init__(self, app, **kwargs):
        """Initialize state.

        :param app: An instance of :class:`~flask.app.Flask`.
        """
        self.app = app
        self._client = kwargs.get("client")

    def _client_builder(self):
        """Build search engine (ES/OS) client."""
        client_config = dict(self.app.config.get("SEARCH_SYNC_CLIENT_CONFIG") or {})
        client_config.setdefault("hosts", self.app.config.get("SEARCH_SYNC_HOSTS"))
        return SearchEngine(**client_config)

    @property
    def client(self):
        """Return client for current application."""
        if self._client is None:
            self._client = self._client_builder()
        return self._client

    @property
    def cluster_version(self):
        """Get version of the search engine running on the cluster."""
        versionstr = self.client.info()["version"]["number"]
        return [int(x) for x in versionstr.split(".")]

    def _build_target(self, name, cfg):
        model = cfg["model"]
        if isinstance(model, str):
            model = import_string(model)

        mapping, settings = load_index_definition(cfg.get("mapping"))
        bulk = cfg.get("bulk")
        queue = None
        batch_size = None
        if bulk:
            queue = BulkQueue(
                self.client,
                size=bulk.get("size", self.app.config["SEARCH_SYNC_BULK_SIZE"]),
            )
            batch_size = bulk.get("batch_size")

        return SyncTarget(
            name,
            model,
            index=prefix_index(cfg.get("index") or model.__tablename__, app=self.app),
            doc_type=cfg.get("doc_type"),
            mapping=mapping,
            settings=cfg.get("settings", settings),
            queue=queue,
            batch_size=batch_size,
        )

    @cached_property
    def targets(self):
        """Get all configured synchronization targets."""
        targets_config = self.app.config.get("SEARCH_SYNC_TARGETS", {})
        return {
            name: self._build_target(name, cfg) for name, cfg in targets_config.items()
        }

    def target(self, name):
        """Get a synchronization target by name."""
        try:
            return self.targets[name]
        except KeyError:
            raise TargetNotFoundError(name)

    def target_for(self, obj):
        """Get the synchronization target of a model instance, if any."""
        for target in self.targets.values():
            if isinstance(obj, target.model):
                return target
        return None

    def queue_for(self, name):
        """Get the bulk queue to use for a target.

        Targets configured with ``bulk`` share a single queue, other targets
        get a new queue each time.
        """
        target = self.target(name)
        if target.queue is not None:
            return target.queue
        return BulkQueue(self.client, size=self.app.config["SEARCH_SYNC_BULK_SIZE"])

    def synchronize(self, name, filters=None, projection=None, options=None, cancel=None):
        """Index all rows of a target matching the filters.

        Progress is reported through the ``sync_record_queued``,
        ``sync_batch_sent`` and ``sync_batch_failed`` signals, all sent with
        the target as sender.

        :param name: Name of the target.
        :param filters: Mapping of attribute values or list of SQLAlchemy
            criteria.
        :param projection: Names of the attributes to load.
        :param options: Dictionary with ``order_by``, ``limit`` and
            ``batch_size``.
        :param cancel: Object with an ``is_set()`` method stopping the
            synchronization.
        :returns: The response of the final index refresh.
        """
        synchronizer = Synchronizer(self.target(name), self.queue_for(name), cancel=cancel)
        return synchronizer.run(filters, projection, options)

    def index_document(self, name, record):
        """Index a single row."""
        target = self.target(name)
        return index_by_id(
            self.client,
            target.index,
            record_id(record),
            target.serialize(record),
            doc_type=target.doc_type,
        )

    def remove_document(self, name, record_or_id, ignore_missing=False):
        """Remove a single row, or a document by its identifier."""
        target = self.target(name)
        if isinstance(record_or_id, target.model):
            id_ = record_id(record_or_id)
        else:
            id_ = str(record_or_id)
        return delete_by_id(
            self.client,
            target.index,
            id_,
            doc_type=target.doc_type,
            retries=self.app.config["SEARCH_SYNC_DELETE_RETRIES"],
            backoff=self.app.config["SEARCH_SYNC_DELETE_BACKOFF"],
            ignore_missing=ignore_missing,
        )

    def create_mapping(self, name, settings=None):
        """Create the index of a target if needed and put its mapping.

        :param settings: Index settings, such as ``{"number_of_shards": 1}``,
            used instead of the settings of the target. They are only sent
            when the index is created, as the ``settings`` of the create
            request body.
        :returns: The response of the put mapping request. The mapping is put
            under the ``doc_type`` of the target when it has one.
        """
        target = self.target(name)
        if target.mapping is None:
            raise MappingNotDefinedError(
                "Target {} has no mapping.".format(name)
            )

        indices = self.client.indices
        if not indices.exists(index=target.index):
            body = settings if settings is not None else target.settings
            indices.create(
                index=target.index,
                body={"settings": body} if body else None,
            )
            self.app.logger.info("Created index %s.", target.index)
        params = {"index": target.index, "body": target.mapping}
        if target.doc_type:
            params["doc_type"] = target.doc_type
        return indices.put_mapping(**params)

    def refresh(self, name):
        """Explicitly refresh the index of a target."""
        return self.client.indices.refresh(index=self.target(name).index)

    def search(self, name, query=None, **params):
        """Search the index of a target.

        :param query: A query string, or a query (with or without the
            surrounding ``{"query": ...}``).
        :param params: Passed to the client as-is.
        """
        params["index"] = self.target(name).index
        if isinstance(query, str):
            params["q"] = query
        elif query:
            params["body"] = query if "query" in query else {"query": query}
        return self.client.search(**params)


class InvenioSearchSync(object):
    """Invenio-Search-Sync extension."""

    def __init__(self, app=None, **kwargs):
        """Extension initialization.

        :param app: An instance of :class:`~flask.app.Flask`.
        """
        if app:
            self.init_app(app, **kwargs)

    def init_app(self, app, **kwargs):
        """Flask application initialization.

        :param app: An instance of :class:`~flask.app.Flask`.
        """
        self.init_config(app)
        app.cli.add_command(sync_cmd)

        state = _SearchSyncState(app, **kwargs)
        self._state = app.extensions["invenio-search-sync"] = state

        if app.config["SEARCH_SYNC_AUTO_INDEX"]:
            from .receivers import connect_receivers

            connect_receivers()

    @staticmethod
    def init_config(app):
        """Initialize configuration.

        :param app: An instance of :class:`~flask.app.Flask`.
        """
        for k in dir(config):
            if k.startswith("SEARCH_SYNC_"):
                app.config.setdefault(k, getattr(config, k))

    def __getattr__(self, name):
        """Proxy to state object."""
        return getattr(self._state, name, None)
