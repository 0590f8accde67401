"""Identifiers that tell doubles of the same interface apart."""

from __future__ import annotations

import uuid_utils


def new_double_id() -> str:
    """Return a fresh id for a double's repr and log records.

    UUIDv7 ids start with a millisecond timestamp, so doubles built later in
    a test sort after earlier ones in captured logs.
    """
    return uuid_utils.uuid7().hex
