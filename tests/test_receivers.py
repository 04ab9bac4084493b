# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2015-2026 CERN.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Commit hook tests."""

from unittest.mock import Mock, patch

import pytest
from kombu.exceptions import OperationalError
from mock_module import Author, Book, db

from invenio_search_sync.signals import document_indexed, document_removed


@pytest.fixture()
def indexed():
    events = []

    def receiver(sender, **kwargs):
        events.append(kwargs)

    with document_indexed.connected_to(receiver):
        yield events


@pytest.fixture()
def removed():
    events = []

    def receiver(sender, **kwargs):
        events.append(kwargs)

    with document_removed.connected_to(receiver):
        yield events


def test_index_on_insert(app, search_client, indexed):
    book = Book(title="Dune", year=1965, internal_note="secret")
    db.session.add(book)
    db.session.commit()

    search_client.index.assert_called_once_with(
        index="books",
        id=str(book.id),
        body={"title": "Dune", "year": 1965},
    )
    assert indexed == [
        {
            "name": "books",
            "id": str(book.id),
            "result": search_client.index.return_value,
            "error": None,
        }
    ]


def test_index_on_update(app, books, search_client):
    book = books(1)[0]

    book.title = "Earthsea"
    db.session.commit()

    search_client.index.assert_called_once_with(
        index="books",
        id=str(book.id),
        body={
            "title": "Earthsea",
            "year": 1960,
            "author": {"name": "Ursula K. Le Guin"},
        },
    )


def test_remove_on_delete(app, books, search_client, removed):
    book = books(1)[0]
    id_ = str(book.id)

    db.session.delete(book)
    db.session.commit()

    search_client.delete.assert_called_once_with(index="books", id=id_)
    assert not search_client.index.called
    assert removed[0]["id"] == id_
    assert removed[0]["error"] is None


def test_remove_retries_missing_document(app, books, search_client, not_found):
    """Test a delete committed before the document became visible."""
    book = books(1)[0]
    search_client.delete.side_effect = [not_found(), {"result": "deleted"}]

    db.session.delete(book)
    db.session.commit()

    assert search_client.delete.call_count == 2


def test_failures_do_not_fail_the_commit(
    app, search_client, connection_error, not_found, indexed, removed
):
    """Test that search errors are only reported."""
    error = connection_error()
    search_client.index.side_effect = error

    book = Book(title="Dune")
    db.session.add(book)
    db.session.commit()

    assert Book.query.count() == 1
    assert indexed[0]["error"] is error
    assert indexed[0]["result"] is None

    search_client.delete.side_effect = [not_found() for _ in range(4)]
    db.session.delete(book)
    db.session.commit()

    assert Book.query.count() == 0
    assert search_client.delete.call_count == 4
    assert removed[0]["error"] is not None


def test_broker_down_does_not_fail_the_commit(app, search_client):
    task = Mock()
    task.delay.side_effect = OperationalError("broker unreachable")
    with patch("invenio_search_sync.receivers.index_document_task", task):
        db.session.add(Book(title="Dune"))
        db.session.commit()

    assert Book.query.count() == 1
    assert not search_client.index.called


def test_other_models_are_ignored(app, search_client):
    db.session.add(Author(name="Frank Herbert"))
    db.session.commit()

    assert not search_client.index.called


def test_rollback(app, search_client):
    db.session.add(Book(title="Dune"))
    db.session.flush()
    db.session.rollback()

    assert not search_client.index.called


@pytest.mark.parametrize("app_config", [{"SEARCH_SYNC_AUTO_INDEX": False}])
def test_auto_index_disabled(app_config, search_client):
    """Test an application without the commit hooks."""
    from flask import Flask

    from invenio_search_sync import InvenioSearchSync

    app = Flask("testapp")
    app.config.update(
        SQLALCHEMY_DATABASE_URI="sqlite://",
        SQLALCHEMY_TRACK_MODIFICATIONS=True,
        **app_config
    )
    db.init_app(app)
    InvenioSearchSync(app, client=search_client)

    with app.app_context():
        db.create_all()
        db.session.add(Book(title="Dune"))
        db.session.commit()
        db.drop_all()

    assert not search_client.index.called
