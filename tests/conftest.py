# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2015-2026 CERN.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.


"""Pytest configuration."""

from unittest.mock import Mock

import pytest
from celery import current_app as current_celery_app
from flask import Flask
from mock_module import BOOK_MAPPING, Author, Book, db

from invenio_search_sync import InvenioSearchSync
from invenio_search_sync.engine import search, uses_es8


@pytest.fixture(scope="session", autouse=True)
def celery_eager():
    """Run Celery tasks in the calling thread."""
    current_celery_app.conf.update(
        task_always_eager=True,
        task_eager_propagates=True,
    )


@pytest.fixture()
def search_client():
    """Search client recording the requests."""
    client = Mock()
    client.bulk.return_value = {"errors": False, "items": []}
    client.indices.refresh.return_value = {"_shards": {"failed": 0}}
    return client


@pytest.fixture()
def app_config():
    """Application configuration."""
    return dict(
        TESTING=True,
        SQLALCHEMY_DATABASE_URI="sqlite://",
        SQLALCHEMY_TRACK_MODIFICATIONS=True,
        SEARCH_SYNC_DELETE_BACKOFF=0,
        SEARCH_SYNC_TARGETS={
            "books": {
                "model": Book,
                "mapping": BOOK_MAPPING,
            },
        },
    )


@pytest.fixture()
def app(app_config, search_client):
    """Flask application fixture."""
    app = Flask("testapp")
    app.config.update(app_config)
    db.init_app(app)
    InvenioSearchSync(app, client=search_client)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def books(app, search_client):
    """Create books, without the indexing calls of their commit."""
    def _create(count, **kwargs):
        author = Author(name="Ursula K. Le Guin")
        db.session.add(author)
        records = [
            Book(
                title="Book {}".format(i),
                year=1960 + i % 60,
                internal_note="note {}".format(i),
                author=author,
                **kwargs
            )
            for i in range(count)
        ]
        db.session.add_all(records)
        db.session.commit()
        search_client.reset_mock()
        return records

    return _create


@pytest.fixture()
def not_found():
    """Build the error raised for a missing document."""
    def _not_found():
        if uses_es8():
            from elastic_transport import ApiResponseMeta, HttpHeaders

            meta = ApiResponseMeta(
                status=404,
                http_version="1.1",
                headers=HttpHeaders(),
                duration=0.0,
                node=None,
            )
            return search.NotFoundError("not_found", meta, {"found": False})
        return search.NotFoundError(404, "not_found", {"found": False})

    return _not_found


@pytest.fixture()
def connection_error():
    """Build the error raised when the cluster cannot be reached."""
    def _connection_error():
        if uses_es8():
            return search.ConnectionError("connection refused")
        return search.ConnectionError(
            "N/A", "connection refused", OSError("connection refused")
        )

    return _connection_error
