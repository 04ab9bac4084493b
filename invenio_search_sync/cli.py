# -*- coding: utf-8 -*-
#
# This file is part of Invenio.
# Copyright (C) 2015-2026 CERN.
# Copyright (C)      2022 TU Wien.
#
# Invenio is free software; you can redistribute it and/or modify it
# under the terms of the MIT License; see LICENSE file for more details.

"""Click command-line interface for index synchronization."""

import json
import signal
import sys
import threading
from functools import wraps

import click
from flask.cli import with_appcontext

from .engine import SEARCH_DISTRIBUTION, search
from .errors import SynchronizationCancelled
from .proxies import current_search_sync
from .signals import sync_batch_failed, sync_batch_sent


def search_version_check(f):
    """Decorator to check the version of the search engine."""

    @wraps(f)
    def inner(*args, **kwargs):
        client_ver = search.VERSION[0]
        cluster_ver = current_search_sync.cluster_version[0]

        if cluster_ver != client_ver:
            raise click.ClickException(
                "{search} version mismatch. The client library is "
                "v{client_ver}.x, but the cluster runs v{cluster_ver}.x.".format(
                    search=SEARCH_DISTRIBUTION,
                    client_ver=client_ver,
                    cluster_ver=cluster_ver,
                )
            )
        return f(*args, **kwargs)

    return inner


@click.group("search-sync")
def sync():
    """Manage index synchronization."""


@sync.command()
@with_appcontext
@search_version_check
def check():
    """Check search engine version."""
    click.secho("Checks passed", fg="green")


@sync.command("list")
@with_appcontext
def list_cmd():
    """List synchronization targets."""
    for name, target in sorted(current_search_sync.targets.items()):
        click.echo(
            "{0}: {1} -> {2}".format(name, target.model.__name__, target.index)
        )


@sync.command()
@click.argument("name")
@click.option("--verbose", is_flag=True, default=False)
@with_appcontext
def init(name, verbose):
    """Create the index of a target and put its mapping."""
    click.secho("Putting mapping of {}...".format(name), fg="green", file=sys.stderr)
    result = current_search_sync.create_mapping(name)
    if verbose:
        click.echo(json.dumps(getattr(result, "body", result)))


@sync.command()
@click.argument("name")
@click.option("-b", "--batch-size", type=int, default=None)
@click.option("-l", "--limit", type=int, default=None)
@with_appcontext
def run(name, batch_size, limit):
    """Index all rows of a target."""
    target = current_search_sync.target(name)
    cancel = threading.Event()
    counts = {"sent": 0, "failed": 0}

    def on_sent(sender, count=0, **kwargs):
        counts["sent"] += count
        click.echo("{sent} indexed, {failed} failed".format(**counts))

    def on_failed(sender, count=0, **kwargs):
        counts["failed"] += count
        click.secho(
            "{sent} indexed, {failed} failed".format(**counts), fg="red", err=True
        )

    def on_interrupt(signum, frame):
        click.secho("Stopping after the current batch...", fg="yellow", err=True)
        cancel.set()

    click.secho("Synchronizing {}...".format(name), fg="green", bold=True, err=True)
    previous_handler = signal.signal(signal.SIGINT, on_interrupt)
    try:
        with sync_batch_sent.connected_to(on_sent, sender=target):
            with sync_batch_failed.connected_to(on_failed, sender=target):
                current_search_sync.synchronize(
                    name,
                    options={"batch_size": batch_size, "limit": limit},
                    cancel=cancel,
                )
    except SynchronizationCancelled as e:
        raise click.ClickException(str(e))
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    click.secho(
        "Done: {sent} indexed, {failed} failed.".format(**counts),
        fg="green" if not counts["failed"] else "yellow",
    )


@sync.command()
@click.argument("name")
@with_appcontext
def refresh(name):
    """Refresh the index of a target."""
    current_search_sync.refresh(name)
    click.secho("Index of {} refreshed.".format(name), fg="green")
