# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

import copy

from .diffing.generic import values_equal
from .log import PatchFormatError
from .patch_format import PatchOp, validate_patch_entry
from .paths import is_array_index, parse_path


__all__ = ["patch", "apply_operation", "PatchApplyFailure"]


class PatchApplyFailure(PatchFormatError):
    """A patch could not be applied.

    Raised for failing test ops and for ops that do not fit the
    structure they are applied to (missing targets, bad indices).
    """
    pass


def _list_index(container, key, path, allow_end=False):
    if allow_end and key == '-':
        return len(container)
    if not is_array_index(key):
        raise PatchApplyFailure("Invalid list index {!r} in path {!r}.".format(key, path))
    index = int(key)
    limit = len(container) + 1 if allow_end else len(container)
    if index >= limit:
        raise PatchApplyFailure("List index {} out of range in path {!r}.".format(index, path))
    return index


def _get(obj, segments, path):
    for key in segments:
        if isinstance(obj, dict):
            if key not in obj:
                raise PatchApplyFailure("Path {!r} does not exist.".format(path))
            obj = obj[key]
        elif isinstance(obj, list):
            obj = obj[_list_index(obj, key, path)]
        else:
            raise PatchApplyFailure("Path {!r} does not exist.".format(path))
    return obj


def _update(obj, segments, path, leaf):
    """Return a copy of obj where the container at segments[:-1] is
    replaced by leaf(container, segments[-1]).

    Only the containers along the path are copied, untouched branches
    are shared with the input.
    """
    if isinstance(obj, dict):
        newobj = dict(obj)
    elif isinstance(obj, list):
        newobj = list(obj)
    else:
        raise PatchApplyFailure("Path {!r} does not exist.".format(path))

    key = segments[0]
    if len(segments) == 1:
        leaf(newobj, key)
        return newobj

    if isinstance(newobj, dict):
        if key not in newobj:
            raise PatchApplyFailure("Path {!r} does not exist.".format(path))
        newobj[key] = _update(newobj[key], segments[1:], path, leaf)
    else:
        index = _list_index(newobj, key, path)
        newobj[index] = _update(newobj[index], segments[1:], path, leaf)
    return newobj


def _add(obj, segments, path, value):
    if not segments:
        return value

    def leaf(container, key):
        if isinstance(container, dict):
            container[key] = value
        else:
            container.insert(_list_index(container, key, path, allow_end=True), value)
    return _update(obj, segments, path, leaf)


def _remove(obj, segments, path):
    if not segments:
        raise PatchApplyFailure("Cannot remove the document root.")

    def leaf(container, key):
        if isinstance(container, dict):
            if key not in container:
                raise PatchApplyFailure("Path {!r} does not exist.".format(path))
            del container[key]
        else:
            del container[_list_index(container, key, path)]
    return _update(obj, segments, path, leaf)


def _replace(obj, segments, path, value):
    if not segments:
        return value

    def leaf(container, key):
        if isinstance(container, dict):
            if key not in container:
                raise PatchApplyFailure("Path {!r} does not exist.".format(path))
            container[key] = value
        else:
            container[_list_index(container, key, path)] = value
    return _update(obj, segments, path, leaf)


def apply_operation(obj, e):
    """Apply a single patch entry to obj and return the new object.

    The input object is not modified.
    """
    try:
        validate_patch_entry(e)
    except PatchFormatError as err:
        raise PatchApplyFailure(str(err))

    op = e["op"]
    path = e["path"]
    segments = parse_path(path)

    if op == PatchOp.ADD:
        return _add(obj, segments, path, copy.deepcopy(e["value"]))
    elif op == PatchOp.REMOVE:
        return _remove(obj, segments, path)
    elif op == PatchOp.REPLACE:
        return _replace(obj, segments, path, copy.deepcopy(e["value"]))
    elif op == PatchOp.MOVE:
        from_segments = parse_path(e["from"])
        if from_segments == segments:
            return obj
        if segments[:len(from_segments)] == from_segments:
            raise PatchApplyFailure(
                "Cannot move {!r} into its own child {!r}.".format(e["from"], path))
        value = _get(obj, from_segments, e["from"])
        obj = _remove(obj, from_segments, e["from"])
        return _add(obj, segments, path, value)
    elif op == PatchOp.COPY:
        value = _get(obj, parse_path(e["from"]), e["from"])
        return _add(obj, segments, path, copy.deepcopy(value))
    elif op == PatchOp.TEST:
        if not values_equal(_get(obj, segments, path), e["value"]):
            raise PatchApplyFailure("Test failed for path {!r}.".format(path))
        return obj
    raise PatchApplyFailure("Invalid op {}.".format(op))


def patch(obj, ops):
    """Produce a patched version of obj with given list of patch entries.

    A valid input object can be any dict or list of leaf values,
    or arbitrarily nested dict or list of valid input objects.

    The ops are applied in order. If any op fails, PatchApplyFailure
    is raised and no partially patched object is returned.
    """
    for i, e in enumerate(ops):
        try:
            obj = apply_operation(obj, e)
        except PatchApplyFailure as err:
            op = e.get("op") if isinstance(e, dict) else None
            raise PatchApplyFailure("Op {} ({!r}): {}".format(i, op, err))
    return obj
