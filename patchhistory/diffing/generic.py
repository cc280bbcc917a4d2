# coding: utf-8

# Copyright (c) Jupyter Development Team.
# Distributed under the terms of the Modified BSD License.

import copy

from ..patch_format import PatchBuilder, validate_patch
from ..paths import child_path

from .config import DiffConfig

__all__ = ["diff", "values_equal"]


def _is_number(x):
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def values_equal(a, b):
    """Compare two json-like values with json semantics.

    Booleans never equal numbers (True != 1), while int and float
    compare by value (1 == 1.0). Dict key order is irrelevant.
    """
    if _is_number(a) and _is_number(b):
        return a == b
    if type(a) is not type(b):
        return False
    if isinstance(a, dict):
        if a.keys() != b.keys():
            return False
        return all(values_equal(a[k], b[k]) for k in a)
    if isinstance(a, list):
        if len(a) != len(b):
            return False
        return all(values_equal(x, y) for x, y in zip(a, b))
    return a == b


def _is_container(x):
    return isinstance(x, (dict, list))


def diff(a, b, path="", config=None):
    """Compute the patch transforming json-like object a into b.

    Operations follow the order of b: changed and new entries are
    emitted in the traversal order of b, removals of entries only
    present in a come after them. Moved or copied subtrees are not
    detected, they are reported as independent add and remove ops.
    """
    if config is None:
        config = DiffConfig()

    pb = PatchBuilder()
    _diff_values(a, b, path, config, pb)
    d = pb.validated()

    # We can turn this off for performance after the library has been well tested:
    validate_patch(d)

    return d


def _diff_values(a, b, path, config, pb):
    if values_equal(a, b):
        return
    if (isinstance(a, dict) and isinstance(b, dict)
            and not config.is_atomic(path)):
        diff_dicts(a, b, path, config, pb)
    elif (isinstance(a, list) and isinstance(b, list)
            and not config.is_atomic(path)):
        diff_lists(a, b, path, config, pb)
    else:
        pb.replace(path, _snapshot(b))


def _snapshot(value):
    # Ops must not alias the compared snapshots
    return copy.deepcopy(value) if _is_container(value) else value


def diff_dicts(a, b, path, config, pb):
    """Compute the patch of two dicts.

    Keys in both a and b are compared recursively, keys only in b are
    added and keys only in a are removed.
    """
    if not isinstance(a, dict) or not isinstance(b, dict):
        raise TypeError('Arguments to diff_dicts need to be dicts, got %r and %r' % (a, b))

    for key, bvalue in b.items():
        subpath = child_path(path, key)
        if key in a:
            _diff_values(a[key], bvalue, subpath, config, pb)
        else:
            pb.add(subpath, _snapshot(bvalue))

    for key in a:
        if key not in b:
            pb.remove(child_path(path, key))


def diff_lists(a, b, path, config, pb):
    """Compute the patch of two lists by position.

    Shared indices are compared recursively, surplus items in b are
    appended and surplus items in a are removed from the end.
    """
    n = min(len(a), len(b))
    for i in range(n):
        _diff_values(a[i], b[i], child_path(path, i), config, pb)

    for i in range(n, len(b)):
        pb.add(child_path(path, i), _snapshot(b[i]))

    for i in reversed(range(n, len(a))):
        pb.remove(child_path(path, i))
