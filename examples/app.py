# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2015-2026 CERN.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.


"""Minimal Flask application example for development.

SPHINX-START

Run a search cluster on localhost:9200, then create the index of the books
and index the sample rows:

.. code-block:: console

   $ pip install -e .[all]
   $ cd examples
   $ export FLASK_APP=app.py
   $ flask fixtures
   $ flask search-sync init books
   $ flask search-sync run books

Run example development server:

.. code-block:: console

   $ flask run -p 5000

Try to perform some search queries:

.. code-block:: console

   $ curl http://localhost:5000/?q=title:dune

Books added or removed through the session are indexed once committed.

SPHINX-END
"""

import os

from celery import current_app as current_celery_app
from flask import Flask, jsonify, request
from flask_sqlalchemy import SQLAlchemy

from invenio_search_sync import InvenioSearchSync, current_search_sync

# Create Flask application
app = Flask(__name__)
app.config.update(
    SQLALCHEMY_DATABASE_URI=os.getenv(
        "SQLALCHEMY_DATABASE_URI", "sqlite:///instance/test.db"
    ),
    SQLALCHEMY_TRACK_MODIFICATIONS=True,
    SEARCH_SYNC_TARGETS={
        "books": {
            "model": "app.Book",
            "mapping": {
                "properties": {
                    "title": {"type": "text"},
                    "year": {"type": "integer"},
                }
            },
        },
    },
)
current_celery_app.conf.update(task_always_eager=True)

db = SQLAlchemy(app)
InvenioSearchSync(app)


class Book(db.Model):
    """Book indexed in the ``books`` index."""

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255))
    year = db.Column(db.Integer)


@app.cli.command()
def fixtures():
    """Create the database with a few books."""
    db.create_all()
    db.session.add_all(
        [
            Book(title="Dune", year=1965),
            Book(title="A Wizard of Earthsea", year=1968),
            Book(title="The Left Hand of Darkness", year=1969),
        ]
    )
    db.session.commit()


@app.route("/", methods=["GET", "POST"])
def index():
    """Query the books index."""
    response = current_search_sync.search("books", request.values.get("q"))
    return jsonify(getattr(response, "body", response))
