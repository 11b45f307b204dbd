"""Shared doubles and request builders for the test suite."""

import json
from unittest.mock import MagicMock


def build_input(*pairs):
    """Build a stdin document from (inputname, compvalue) pairs."""
    return json.dumps(
        {"params": [{"inputname": name, "compvalue": value} for name, value in pairs]}
    )


CONNECTION_PAIRS = (
    ("host", "db.internal"),
    ("username", "app"),
    ("password", "secret"),
    ("dbname", "shop"),
)


def make_connection(description=None, rows=None, lastrowid=None, rowcount=-1):
    """Connection double whose cursor() hands back a single cursor double."""
    cursor = MagicMock(name="cursor")
    cursor.description = description
    cursor.fetchall.return_value = rows if rows is not None else []
    cursor.lastrowid = lastrowid
    cursor.rowcount = rowcount

    connection = MagicMock(name="connection")
    connection.cursor.return_value = cursor
    connection.is_connected.return_value = True
    return connection, cursor
