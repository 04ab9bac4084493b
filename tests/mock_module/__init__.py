# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2017-2026 CERN.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Mock module used to test the synchronization of models."""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class Author(db.Model):
    """Author of books."""

    __tablename__ = "authors"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255))


class Book(db.Model):
    """Book synchronized with the search cluster."""

    __tablename__ = "books"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255))
    year = db.Column(db.Integer)
    internal_note = db.Column(db.String(255))
    author_id = db.Column(db.Integer, db.ForeignKey("authors.id"))
    author = db.relationship(Author)


class Edition(db.Model):
    """Edition of a book, identified by a composite primary key."""

    __tablename__ = "editions"

    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), primary_key=True)
    number = db.Column(db.Integer, primary_key=True)


BOOK_MAPPING = {
    "properties": {
        "title": {"type": "text"},
        "year": {"type": "integer"},
        "author": {"properties": {"name": {"type": "keyword"}}},
    }
}
