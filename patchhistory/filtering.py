# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

"""Removal of excluded paths from patches.

An exclude pattern removes every patch op at or below the path it names.
When a pattern points below the path of an op, only the matching part
of the op's value is pruned, e.g. given the pattern
``/object/array/*/property/hidden``, the op::

    {"op": "add", "path": "/object",
     "value": {"array": [{"property": {"hidden": 1, "shown": 2}}]}}

is kept with the value ``{"array": [{"property": {"shown": 2}}]}``.
"""

from . import log
from .patch_format import PatchEntry
from .paths import is_array_index, is_path_contained, is_wildcard, parse_path, parse_pattern


__all__ = ["filter_excluded", "prune_value", "parse_patterns"]


def parse_patterns(patterns):
    "Parse exclude patterns, dropping empty ones."
    parsed = [parse_pattern(p) for p in patterns]
    return [p for p in parsed if p]


def _is_empty(value):
    return isinstance(value, (dict, list)) and len(value) == 0


def prune_value(value, segments):
    """Remove the entries at the path `segments` inside `value`.

    Returns a tuple (pruned, changed). A new value is built for each
    container along the path; the input value is not modified.

    A '*' segment on a list is applied to every item, keeping item order
    and count: items which are emptied by the removal are kept as empty
    structures. A pattern ending on an array index keeps the item count
    too, the excluded item is replaced by None. Dict entries which are
    emptied by the removal are dropped.
    """
    key = segments[0]
    rest = segments[1:]

    if isinstance(value, list) and is_wildcard(key):
        if not rest:
            return ([], True) if value else (value, False)
        newvalue = []
        changed = False
        for item in value:
            newitem, itemchanged = prune_value(item, rest)
            newvalue.append(newitem)
            changed = changed or itemchanged
        return (newvalue, True) if changed else (value, False)

    if isinstance(value, list) and is_array_index(key):
        index = int(key)
        if index >= len(value):
            return value, False
        newvalue = list(value)
        if not rest:
            # Positions of later items are kept, the hole reads as null
            if value[index] is None:
                return value, False
            newvalue[index] = None
            return newvalue, True
        newitem, changed = prune_value(value[index], rest)
        if not changed:
            return value, False
        newvalue[index] = newitem
        return newvalue, True

    if isinstance(value, dict):
        if key not in value:
            return value, False
        newvalue = dict(value)
        if not rest:
            del newvalue[key]
            return newvalue, True
        newitem, changed = prune_value(value[key], rest)
        if not changed:
            return value, False
        if _is_empty(newitem):
            del newvalue[key]
        else:
            newvalue[key] = newitem
        return newvalue, True

    # Scalars have nothing to remove
    return value, False


def _exclude_op(e, patterns):
    """Apply exclude patterns to a single op.

    Returns the op, a copy of the op with a pruned value, or None if
    the op is excluded as a whole.
    """
    segments = parse_path(e["path"])

    # Op at or below an excluded path
    if any(is_path_contained(p, segments) for p in patterns):
        return None

    if "value" not in e:
        return e

    value = e["value"]
    pruned = False
    for p in patterns:
        # Only patterns reaching below the op path into its value
        if len(p) <= len(segments) or not is_path_contained(p[:len(segments)], segments):
            continue
        value, changed = prune_value(value, p[len(segments):])
        if changed:
            pruned = True
            if _is_empty(value):
                return None

    if not pruned:
        return e
    newentry = PatchEntry(e)
    newentry["value"] = value
    return newentry


def filter_excluded(ops, exclude_patterns):
    """Remove excluded paths from a list of patch ops.

    Ops whose path is covered by an exclude pattern are dropped, ops
    with an excluded path inside their value get a pruned copy of the
    value. An op whose value is emptied by pruning is dropped.
    The input ops are not modified.
    """
    patterns = parse_patterns(exclude_patterns)
    if not patterns:
        return list(ops)

    filtered = []
    for e in ops:
        newentry = _exclude_op(e, patterns)
        if newentry is None:
            log.debug("Excluded patch op %s %s", e["op"], e["path"])
            continue
        filtered.append(newentry)
    return filtered
