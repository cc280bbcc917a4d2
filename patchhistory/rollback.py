# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

from .normalize import normalize
from .patching import patch
from .utils import deep_merge


__all__ = [
    "RollbackError", "UnknownPatch", "NoOpRollback",
    "record_id", "select_prefix", "replay", "rollback_state",
    ]


class RollbackError(Exception):
    pass


class UnknownPatch(RollbackError):
    """The rollback target is not part of the document history."""
    pass


class NoOpRollback(RollbackError):
    """The rollback target is the latest change, there is nothing to undo."""
    pass


def record_id(record):
    if "id" in record:
        return record["id"]
    return record.get("_id")


def _same_id(a, b):
    return a == b or str(a) == str(b)


def select_prefix(history, target_id):
    """Return the records of `history` up to and including `target_id`.

    Raises UnknownPatch if the target is not in history, and
    NoOpRollback if it is the last record.
    """
    end = None
    for i, record in enumerate(history):
        if _same_id(record_id(record), target_id):
            end = i + 1
            break
    if end is None:
        raise UnknownPatch("patch doesn't exist: {!r}".format(target_id))
    if end == len(history):
        raise NoOpRollback("rollback to latest patch: {!r}".format(target_id))
    return history[:end]


def replay(records, base=None):
    """Apply the ops of all records in order, starting from `base` or {}."""
    state = {} if base is None else base
    for record in records:
        state = patch(state, record["ops"])
    return state


def rollback_state(history, target_id, overrides=None):
    """Reconstruct the state of a document as of `target_id`.

    `overrides` are merged on top of the reconstructed state, and
    win on key collision.
    """
    state = replay(select_prefix(history, target_id))
    if overrides:
        state = deep_merge(state, normalize(overrides))
    return state
